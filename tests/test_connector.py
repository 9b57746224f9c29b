import json

from scim_reconciler import ScimConnector
from scim_reconciler.support import ConfigManager

from .fakes import FakeDirectory


def test_start_reconciles_configured_groups(tmp_path, logger):
    directory = FakeDirectory(users=['u1', 'u2', 'u3'])
    directory.add_group('g1', members=['u1'])
    directory.add_group('g2', members=['u2', 'u3'])

    config = ConfigManager()
    config.set('prefix', 'nightly')
    config.set('stats.dir', str(tmp_path / 'stats'))
    config.set('pool.max_workers', 2)
    config.set('groups', [
        {'id': 'g1', 'members': ['u1', 'u2']},
        {'id': 'g2', 'members': []},
        {'id': 'missing', 'members': ['u1']},
    ])

    connector = ScimConnector(config, logger, directory)
    try:
        stats = connector.start()
    finally:
        connector.close()

    assert directory.members['g1'] == {'u1', 'u2'}
    assert directory.members['g2'] == set()
    assert stats.groups['g1']['status'] == 'success'
    assert stats.groups['missing']['status'] == 'failure'
    assert stats.totals == {'reconciled': 3, 'failed': 1}
    with open(tmp_path / 'stats' / 'nightly_stats.json') as f:
        assert json.load(f)['mutations']['applied'] == 3
    assert (tmp_path / 'stats' / 'nightly_stats.xlsx').exists()


def test_capabilities(logger):
    connector = ScimConnector(ConfigManager(), logger, FakeDirectory())
    try:
        capabilities = connector.get_capabilities()
    finally:
        connector.close()

    assert 'GROUP_PUSH' in capabilities
    assert 'PUSH_NEW_USERS' in capabilities
