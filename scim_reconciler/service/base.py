from typing import Protocol, Set

from ..support.results import MutationStatus


class DirectoryClient(Protocol):
    """Membership capabilities the reconciler needs from a directory."""

    def fetch_members(self, group_id: str) -> Set[str]:
        ...

    def member_exists(self, member_id: str) -> bool:
        ...

    def add_member(self, group_id: str, member_id: str) -> MutationStatus:
        ...

    def remove_member(self, group_id: str, member_id: str) -> MutationStatus:
        ...
