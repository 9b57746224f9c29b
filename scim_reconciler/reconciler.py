import asyncio
import threading
import time
from typing import Iterable, Optional

from .exceptions import FetchFailure, GroupNotFoundException, ReconcileCancelled
from .service import DirectoryClient
from .support import (
    Logger,
    MembershipDelta,
    MutationKind,
    MutationOutcome,
    MutationStatus,
    Pools,
    ReconciliationResult,
)


class Reconciler:
    """Converges a directory group's membership to a desired member set.

    One call reads the current members once, removes everything not desired,
    then adds everything missing. Removals all finish before the first
    addition is issued. Mutations inside a phase run on the directory pool,
    so ``max_workers`` of that pool bounds their concurrency.

    Member failures never abort the batch: each member of the delta gets
    exactly one outcome in the returned result. Nothing is retried here;
    calling again with the same desired set is safe.
    """

    def __init__(self, directory: DirectoryClient, logger: Logger, pools: Pools):
        self.directory = directory
        self.logger = logger
        self.pools = pools

    def reconcile(
            self,
            group_id: str,
            desired: Iterable[str],
            cancel: Optional[threading.Event] = None,
            timeout: Optional[float] = None,
    ) -> ReconciliationResult:
        return asyncio.run(self.reconcile_async(group_id, desired, cancel, timeout))

    async def reconcile_async(
            self,
            group_id: str,
            desired: Iterable[str],
            cancel: Optional[threading.Event] = None,
            timeout: Optional[float] = None,
    ) -> ReconciliationResult:
        desired = frozenset(desired)
        result = ReconciliationResult(group_id)
        should_stop = self._stop_condition(cancel, timeout)

        self.logger.log(f'[Reconciler] Reconciling group {group_id} to {len(desired)} desired members')
        try:
            current = await self.pools.dr(self.directory.fetch_members, group_id)
        except GroupNotFoundException as e:
            self.logger.log(f'[Reconciler] {e}', 'error')
            result.fail(e)
            return result
        except Exception as e:
            error = FetchFailure(group_id, self._reason(e))
            self.logger.log(f'[Reconciler] {error}', 'error')
            result.fail(error)
            return result

        delta = MembershipDelta.compute(desired, current)
        self.logger.log(f'[Reconciler] Group {group_id}: {len(current)} current members, '
                        f'{len(delta.to_remove)} to remove, {len(delta.to_add)} to add')

        async with asyncio.TaskGroup() as tg:
            for member_id in sorted(delta.to_remove):
                tg.create_task(self._apply(
                    result, group_id, member_id, MutationKind.REMOVE, self._remove, should_stop))

        async with asyncio.TaskGroup() as tg:
            for member_id in sorted(delta.to_add):
                tg.create_task(self._apply(
                    result, group_id, member_id, MutationKind.ADD, self._add, should_stop))

        self.logger.log(f'[Reconciler] Group {group_id} finished with status {result.status.value} '
                        f'{result.counts()}')
        return result

    async def _apply(self, result, group_id, member_id, kind, mutation, should_stop):
        try:
            status = await self.pools.dr(self._guarded, should_stop, mutation, group_id, member_id)
            outcome = MutationOutcome(member_id, kind, status)
        except ReconcileCancelled:
            result.cancelled = True
            outcome = MutationOutcome(member_id, kind, MutationStatus.CANCELLED, 'cancelled before issue')
        except Exception as e:
            self.logger.log(f'[Reconciler] Failed to {kind.value} member {member_id} '
                            f'for group {group_id}: {e}', 'error')
            outcome = MutationOutcome(member_id, kind, MutationStatus.FAILED, self._reason(e))
        result.record(outcome)

    @staticmethod
    def _guarded(should_stop, mutation, group_id, member_id):
        # Runs on the worker, so a cancel seen here means the call was never issued
        if should_stop():
            raise ReconcileCancelled()
        return mutation(group_id, member_id, should_stop)

    def _remove(self, group_id, member_id, should_stop):
        self.logger.log(f'[Reconciler] Removing user {member_id} from group {group_id}')
        return self.directory.remove_member(group_id, member_id)

    def _add(self, group_id, member_id, should_stop):
        if not self.directory.member_exists(member_id):
            self.logger.log(f'[Reconciler] User {member_id} not found, skipping adding to group {group_id}')
            return MutationStatus.NOT_FOUND
        # The lookup may have outlived the deadline, the add is a new call
        if should_stop():
            raise ReconcileCancelled()
        self.logger.log(f'[Reconciler] Adding user {member_id} to group {group_id}')
        return self.directory.add_member(group_id, member_id)

    @staticmethod
    def _stop_condition(cancel, timeout):
        deadline = None if timeout is None else time.monotonic() + timeout

        def should_stop():
            if cancel is not None and cancel.is_set():
                return True
            return deadline is not None and time.monotonic() >= deadline

        return should_stop

    @staticmethod
    def _reason(error: Exception) -> str:
        return str(error) or type(error).__name__
