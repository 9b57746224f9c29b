import asyncio
import threading
from typing import Optional

from ..reconciler import Reconciler
from ..service import DirectoryService
from ..support import Logger, Pools, Stats, ReconcileStatus, ReconciliationResult
from ..support import pagination
from ..exceptions import DuplicateGroupException, EntityNotFoundException


class Groups:
    def __init__(
        self,
        directory_service: DirectoryService,
        reconciler: Reconciler,
        logger: Logger,
        pools: Pools,
        stats: Optional[Stats] = None,
        timeout: Optional[float] = None,
    ):
        self.directory = directory_service
        self.reconciler = reconciler
        self.logger = logger
        self.pools = pools
        self.stats = stats
        self.timeout = timeout

    def create_group(self, group: dict, cancel: Optional[threading.Event] = None):
        return asyncio.run(self.create_group_async(group, cancel))

    async def create_group_async(self, group: dict, cancel: Optional[threading.Event] = None):
        name = group['displayName']
        self.logger.log(f"[Groups] Creating group {name}")
        found = await self.pools.dr(self.directory.find_group_by_name, name)
        if found is not None:
            self.logger.log(f"[Groups] Group {name} already exists with id {found.get('id')}", 'error')
            raise DuplicateGroupException(f'Group {name} already exists')

        group_id = await self.pools.dr(self.directory.create_group, name)
        self.logger.log(f"[Groups] Group {name} created with id {group_id}")

        result = await self._reconcile(group_id, group.get('members'), cancel)
        group = dict(group)
        group['id'] = group_id
        return group, result

    def update_group(self, group_id: str, group: dict, cancel: Optional[threading.Event] = None):
        return asyncio.run(self.update_group_async(group_id, group, cancel))

    async def update_group_async(self, group_id: str, group: dict, cancel: Optional[threading.Event] = None):
        self.logger.log(f"[Groups] Updating group {group_id} (incoming name: {group.get('displayName')})")
        existing = await self.pools.dr(self.directory.get_group, group_id)
        if existing is None:
            self.logger.log(f"[Groups] Did not find group with id {group_id}", 'error')
            raise EntityNotFoundException(f'Group {group_id} not found')

        name = group.get('displayName')
        if name and name != existing.get('name'):
            self.logger.log(f"[Groups] Renaming group {group_id} from {existing.get('name')} to {name}")
            await self.pools.dr(self.directory.rename_group, group_id, name)

        result = await self._reconcile(group_id, group.get('members'), cancel)
        group = dict(group)
        group['id'] = group_id
        return group, result

    async def _reconcile(self, group_id, members, cancel) -> ReconciliationResult:
        if members is None:
            self.logger.log(f"[Groups] No members requested for group {group_id}, removing all users")
            members = []
        for member in members:
            self.logger.log(f"[Groups] Requesting to ensure {member.get('display')} "
                            f"(id: {member['value']}) is in group {group_id}")

        result = await self.reconciler.reconcile_async(
            group_id, [member['value'] for member in members], cancel, self.timeout)
        if result.status != ReconcileStatus.SUCCESS:
            self.logger.log(f"[Groups] Membership of group {group_id} ended as {result.status.value}: "
                            f"{result.counts()}", 'warning')
        if self.stats is not None:
            self.stats.add_result(result)
        return result

    def get_group(self, group_id: str) -> dict:
        return asyncio.run(self.get_group_async(group_id))

    async def get_group_async(self, group_id: str) -> dict:
        self.logger.log(f"[Groups] Getting group {group_id}")
        existing = await self.pools.dr(self.directory.get_group, group_id)
        if existing is None:
            raise EntityNotFoundException(f'Group {group_id} not found')

        members = await self.pools.dr_gen_all(self.directory.get_all_members, group_id)
        for user in members:
            self.logger.log(f"[Groups] Found {user.get('username')} ({user['id']}) in group {group_id}")
        return self.to_scim(existing, members)

    def get_groups(self, start_index: Optional[int] = None, count: Optional[int] = None) -> dict:
        return asyncio.run(self.get_groups_async(start_index, count))

    async def get_groups_async(self, start_index=None, count=None) -> dict:
        total = await self.pools.dr(self.directory.count_groups)
        if start_index is None and count is None:
            self.logger.log("[Groups] No pagination, returning all groups")
            groups = await self.pools.dr(self.directory.get_groups, total, 0) if total else []
        else:
            first, limit = pagination.window(start_index, count)
            self.logger.log(f"[Groups] Pagination with first {first} and max {limit}")
            if limit is None:
                limit = max(total - first, 0)
            groups = await self.pools.dr(self.directory.get_groups, limit, first) if limit else []
        return pagination.list_response([self.to_scim(g) for g in groups], total, start_index)

    def delete_group(self, group_id: str):
        self.logger.log(f"[Groups] Deleting group {group_id}")
        if self.directory.get_group(group_id) is None:
            raise EntityNotFoundException(f'Group {group_id} not found')
        self.directory.delete_group(group_id)

    @staticmethod
    def to_scim(representation: dict, members: Optional[list] = None) -> dict:
        group = {
            'id': representation.get('id'),
            'displayName': representation.get('name'),
        }
        if members is not None:
            group['members'] = [{'value': user['id'], 'display': user.get('username')} for user in members]
        return group
