import pytest

from scim_reconciler.exceptions import FetchFailure
from scim_reconciler.support import (
    MembershipDelta,
    MutationKind,
    MutationOutcome,
    MutationStatus,
    ReconcileStatus,
    ReconciliationResult,
)


def outcome(member_id, status, kind=MutationKind.ADD):
    return MutationOutcome(member_id, kind, status)


def test_delta_is_disjoint():
    delta = MembershipDelta.compute({'u2', 'u4'}, {'u1', 'u2', 'u3'})

    assert delta.to_add == {'u4'}
    assert delta.to_remove == {'u1', 'u3'}
    assert delta.to_add.isdisjoint(delta.to_remove)
    assert delta.size == 3


def test_delta_of_equal_sets_is_empty():
    delta = MembershipDelta.compute(['u1', 'u1'], {'u1'})

    assert delta.size == 0


def test_empty_result_is_success():
    assert ReconciliationResult('g1').status == ReconcileStatus.SUCCESS


def test_status_aggregation():
    result = ReconciliationResult('g1')
    result.record(outcome('u1', MutationStatus.APPLIED))
    assert result.status == ReconcileStatus.SUCCESS

    result.record(outcome('u2', MutationStatus.NOT_FOUND))
    assert result.status == ReconcileStatus.PARTIAL_FAILURE

    failed = ReconciliationResult('g2')
    failed.record(outcome('u1', MutationStatus.FAILED))
    failed.record(outcome('u2', MutationStatus.NOT_FOUND))
    assert failed.status == ReconcileStatus.FAILURE


def test_error_forces_failure():
    result = ReconciliationResult('g1')
    result.fail(FetchFailure('g1', 'timeout'))

    assert result.status == ReconcileStatus.FAILURE
    assert result.to_dict()['error'] == 'Failed to fetch members of group g1: timeout'


def test_cancelled_is_partial_failure_even_without_applied():
    result = ReconciliationResult('g1')
    result.cancelled = True
    result.record(outcome('u1', MutationStatus.CANCELLED))

    assert result.status == ReconcileStatus.PARTIAL_FAILURE


def test_member_gets_only_one_outcome():
    result = ReconciliationResult('g1')
    result.record(outcome('u1', MutationStatus.APPLIED))

    with pytest.raises(ValueError):
        result.record(outcome('u1', MutationStatus.FAILED, MutationKind.REMOVE))


def test_counts_and_dict():
    result = ReconciliationResult('g1')
    result.record(outcome('u1', MutationStatus.APPLIED, MutationKind.REMOVE))
    result.record(MutationOutcome('u2', MutationKind.ADD, MutationStatus.FAILED, 'boom'))

    assert result.counts() == {'applied': 1, 'not_found': 0, 'failed': 1, 'cancelled': 0}
    assert result.to_dict() == {
        'group_id': 'g1',
        'status': 'partial_failure',
        'error': None,
        'cancelled': False,
        'outcomes': [
            {'member_id': 'u1', 'kind': 'remove', 'status': 'applied', 'reason': None},
            {'member_id': 'u2', 'kind': 'add', 'status': 'failed', 'reason': 'boom'},
        ],
    }
