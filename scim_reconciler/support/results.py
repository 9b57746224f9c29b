from enum import Enum
from typing import Iterable, Optional


class MutationKind(Enum):
    ADD = 'add'
    REMOVE = 'remove'


class MutationStatus(Enum):
    APPLIED = 'applied'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


class ReconcileStatus(Enum):
    SUCCESS = 'success'
    PARTIAL_FAILURE = 'partial_failure'
    FAILURE = 'failure'


class MembershipDelta:
    def __init__(self, to_add: frozenset, to_remove: frozenset):
        self.to_add = to_add
        self.to_remove = to_remove

    @classmethod
    def compute(cls, desired: Iterable[str], current: Iterable[str]) -> 'MembershipDelta':
        desired = frozenset(desired)
        current = frozenset(current)
        return cls(to_add=desired - current, to_remove=current - desired)

    @property
    def size(self) -> int:
        return len(self.to_add) + len(self.to_remove)

    def __repr__(self):
        return f'MembershipDelta(to_add={sorted(self.to_add)}, to_remove={sorted(self.to_remove)})'


class MutationOutcome:
    def __init__(self, member_id: str, kind: MutationKind, status: MutationStatus, reason: Optional[str] = None):
        self.member_id = member_id
        self.kind = kind
        self.status = status
        self.reason = reason

    def to_dict(self):
        return {
            'member_id': self.member_id,
            'kind': self.kind.value,
            'status': self.status.value,
            'reason': self.reason,
        }

    def __repr__(self):
        if self.reason:
            return f'MutationOutcome({self.member_id!r}, {self.kind.value}, {self.status.value}: {self.reason})'
        return f'MutationOutcome({self.member_id!r}, {self.kind.value}, {self.status.value})'


class ReconciliationResult:
    """Everything one reconcile call did to a group.

    Holds exactly one outcome per member of the delta. ``error`` is set only
    when the call aborted before any mutation (group missing or the current
    membership could not be read).
    """

    def __init__(self, group_id: str):
        self.group_id = group_id
        self.outcomes = {}
        self.error = None
        self.cancelled = False

    def record(self, outcome: MutationOutcome):
        if outcome.member_id in self.outcomes:
            raise ValueError(f'Outcome for member {outcome.member_id} already recorded')
        self.outcomes[outcome.member_id] = outcome

    def fail(self, error: Exception):
        self.error = error

    @property
    def status(self) -> ReconcileStatus:
        if self.error is not None:
            return ReconcileStatus.FAILURE
        if self.cancelled:
            return ReconcileStatus.PARTIAL_FAILURE
        applied = len(self.with_status(MutationStatus.APPLIED))
        if applied == len(self.outcomes):
            return ReconcileStatus.SUCCESS
        if applied == 0:
            return ReconcileStatus.FAILURE
        return ReconcileStatus.PARTIAL_FAILURE

    def with_status(self, status: MutationStatus):
        return [o for o in self.outcomes.values() if o.status == status]

    def counts(self):
        counts = {status.value: 0 for status in MutationStatus}
        for outcome in self.outcomes.values():
            counts[outcome.status.value] += 1
        return counts

    def to_dict(self):
        return {
            'group_id': self.group_id,
            'status': self.status.value,
            'error': str(self.error) if self.error is not None else None,
            'cancelled': self.cancelled,
            'outcomes': [o.to_dict() for o in self.outcomes.values()],
        }

    def __repr__(self):
        return f'ReconciliationResult({self.group_id!r}, {self.status.value}, {self.counts()})'
