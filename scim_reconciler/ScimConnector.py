import threading
from typing import Optional

from .support import ConfigManager, Logger, Stats, ThrottledThreadPoolExecutor, Pools, ReconcileStatus
from .service import DirectoryService
from .reconciler import Reconciler
from .entities import Users, Groups

# User management capabilities the connector implements
CAPABILITIES = [
    'GROUP_PUSH',
    'IMPORT_NEW_USERS',
    'IMPORT_PROFILE_UPDATES',
    'PUSH_NEW_USERS',
    'PUSH_PASSWORD_UPDATES',
    'PUSH_PENDING_USERS',
    'PUSH_PROFILE_UPDATES',
    'PUSH_USER_DEACTIVATION',
    'REACTIVATE_USERS',
]


class ScimConnector:
    def __init__(self, config: ConfigManager, logger: Logger, directory_service: Optional[DirectoryService] = None):
        self.pools = Pools(
            directory_pool=ThrottledThreadPoolExecutor(
                max_workers=int(config.get('pool.max_workers', 8)),
                requests=int(config.get('pool.requests', 100)),
                interval=config.get('pool.interval', 1),
            ),
        )

        self.logger = logger
        self.config = config
        self.stats = Stats()

        self.directory_service = directory_service or DirectoryService(config, logger)
        self.reconciler = Reconciler(self.directory_service, logger, self.pools)
        self.users = Users(self.directory_service, logger, self.pools)
        self.groups = Groups(
            self.directory_service,
            self.reconciler,
            logger,
            self.pools,
            self.stats,
            config.get('reconcile.timeout'),
        )

    def get_capabilities(self):
        return list(CAPABILITIES)

    def start(self, cancel: Optional[threading.Event] = None):
        jobs = self.config.get('groups', [])
        total = len(jobs)
        self.logger.divider()
        self.logger.log(f'Reconciling {total} groups')
        self.logger.print_group(f'Reconciling {total} groups')

        for i, job in enumerate(jobs, start=1):
            result = self.reconciler.reconcile(
                job['id'],
                job.get('members', []),
                cancel,
                self.config.get('reconcile.timeout'),
            )
            self.stats.add_result(result)
            if result.status != ReconcileStatus.SUCCESS:
                self.logger.log(f"Group {job['id']} finished as {result.status.value}", 'warning')
            self.logger.print_status('Reconciling groups', i, total)

        self.stats.print()
        prefix = str(self.config.get('prefix', ''))
        stats_dir = self.config.get('stats.dir', './stats')
        self.stats.save(prefix, stats_dir)
        self.stats.save_xlsx(prefix, stats_dir)
        return self.stats

    def close(self):
        self.pools.shutdown()
