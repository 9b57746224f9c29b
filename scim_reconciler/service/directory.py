from typing import Optional

from ..support import ConfigManager, Logger, MutationStatus
from ..api import DirectoryApiClient, NotFoundError
from ..exceptions import GroupNotFoundException


class DirectoryService:
    def __init__(self, config: ConfigManager, logger: Logger, client: Optional[DirectoryApiClient] = None):
        self.config = config
        self.logger = logger
        self.page_size = int(config.get('directory.page_size', 100))

        if client is None:
            client = DirectoryApiClient(
                base_url=config.get('directory.host'),
                realm=config.get('directory.realm', 'master'),
                token=config.get('directory.token'),
                max_retries=int(config.get('directory.max_retries', 3)),
                backoff_factor=config.get('directory.backoff_factor', 1),
                ssl=bool(config.get('directory.ssl', True)),
                timeout=config.get('directory.timeout', 30),
            )
        self.client = client

    # Membership

    def fetch_members(self, group_id: str) -> set:
        members = set()
        for page in self.get_all_members(group_id):
            members.update(user['id'] for user in page)
        return members

    def get_all_members(self, group_id: str, limit: Optional[int] = None):
        limit = limit or self.page_size
        offset = 0
        while True:
            try:
                users = self.client.get_group_members(group_id, offset, limit)
            except NotFoundError:
                raise GroupNotFoundException(group_id)
            if users:
                yield users
            offset += limit
            if len(users) < limit:
                break

    def member_exists(self, member_id: str) -> bool:
        return self.get_user(member_id) is not None

    def add_member(self, group_id: str, member_id: str) -> MutationStatus:
        try:
            self.client.add_user_to_group(group_id, member_id)
        except NotFoundError:
            # The 404 covers both ends of the membership
            if self.get_group(group_id) is None:
                raise GroupNotFoundException(group_id)
            self.logger.log(f'[Directory] User {member_id} disappeared before joining group {group_id}')
            return MutationStatus.NOT_FOUND
        return MutationStatus.APPLIED

    def remove_member(self, group_id: str, member_id: str) -> MutationStatus:
        try:
            self.client.remove_user_from_group(group_id, member_id)
        except NotFoundError:
            # Already gone, which is the state we wanted
            self.logger.log(f'[Directory] User {member_id} already absent from group {group_id}')
        return MutationStatus.APPLIED

    # Users

    def get_user(self, user_id: str) -> Optional[dict]:
        try:
            return self.client.get_user(user_id)
        except NotFoundError:
            return None

    def get_users(self, limit: int = 100, offset: int = 0) -> list:
        return self.client.get_users(first=offset, max=limit)

    def get_all_users(self, limit: Optional[int] = None):
        limit = limit or self.page_size
        offset = 0
        while True:
            users = self.get_users(limit, offset)
            if users:
                yield users
            offset += limit
            if len(users) < limit:
                break

    def find_users_by_username(self, username: str) -> list:
        return self.client.get_users(first=0, max=self.page_size, username=username, exact=True)

    def count_users(self) -> int:
        count = self.client.count_users()
        if isinstance(count, dict):
            return int(count.get('count', 0))
        return int(count or 0)

    def create_user(self, representation: dict) -> str:
        return self.client.create_user(representation)

    def update_user(self, user_id: str, representation: dict):
        self.client.update_user(user_id, representation)

    # Groups

    def get_group(self, group_id: str) -> Optional[dict]:
        try:
            return self.client.get_group(group_id)
        except NotFoundError:
            return None

    def get_groups(self, limit: int = 100, offset: int = 0) -> list:
        return self.client.get_groups(first=offset, max=limit)

    def find_group_by_name(self, name: str) -> Optional[dict]:
        # search is a substring match, so compare names exactly
        for group in self.client.get_groups(first=0, max=self.page_size, search=name):
            if group.get('name') == name:
                return group
        return None

    def count_groups(self) -> int:
        count = self.client.count_groups()
        if isinstance(count, dict):
            return int(count.get('count', 0))
        return int(count or 0)

    def create_group(self, name: str) -> str:
        return self.client.create_group({'name': name})

    def rename_group(self, group_id: str, name: str):
        group = self.client.get_group(group_id)
        group['name'] = name
        self.client.update_group(group_id, group)

    def delete_group(self, group_id: str):
        self.client.delete_group(group_id)
