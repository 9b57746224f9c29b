import asyncio
from typing import Optional

from ..service import DirectoryService
from ..support import Logger, Pools
from ..support import pagination
from ..api import ConflictError
from ..exceptions import DuplicateUserException, EntityNotFoundException, UnsupportedFilterException


class Users:
    def __init__(
        self,
        directory_service: DirectoryService,
        logger: Logger,
        pools: Pools,
    ):
        self.directory = directory_service
        self.logger = logger
        self.pools = pools

    def create_user(self, user: dict) -> dict:
        return asyncio.run(self.create_user_async(user))

    async def create_user_async(self, user: dict) -> dict:
        self.logger.log(f"[Users] Creating user {user.get('userName')}")
        representation = self.to_directory(user, {})
        try:
            user_id = await self.pools.dr(self.directory.create_user, representation)
        except ConflictError:
            self.logger.log(f"[Users] User {user.get('userName')} already exists", 'error')
            raise DuplicateUserException(f"User {user.get('userName')} already exists")
        user = dict(user)
        user['id'] = user_id
        self.logger.log(f"[Users] User {user.get('userName')} created with id {user_id}")
        return user

    def update_user(self, user_id: str, user: dict) -> dict:
        return asyncio.run(self.update_user_async(user_id, user))

    async def update_user_async(self, user_id: str, user: dict) -> dict:
        self.logger.log(f"[Users] Updating user {user_id}")
        existing = await self.pools.dr(self.directory.get_user, user_id)
        if existing is None:
            self.logger.log(f"[Users] Could not find user {user_id} to update", 'error')
            raise EntityNotFoundException(f'User {user_id} not found')
        representation = self.to_directory(user, existing)
        representation['id'] = user_id
        await self.pools.dr(self.directory.update_user, user_id, representation)
        return self.to_scim(representation)

    def get_user(self, user_id: str) -> dict:
        self.logger.log(f"[Users] Getting user {user_id}")
        existing = self.directory.get_user(user_id)
        if existing is None:
            raise EntityNotFoundException(f'User {user_id} not found')
        return self.to_scim(existing)

    def get_users(
            self,
            start_index: Optional[int] = None,
            count: Optional[int] = None,
            filter_attribute: Optional[str] = None,
            filter_value: Optional[str] = None,
    ) -> dict:
        return asyncio.run(self.get_users_async(start_index, count, filter_attribute, filter_value))

    async def get_users_async(self, start_index=None, count=None, filter_attribute=None, filter_value=None) -> dict:
        if filter_attribute is not None:
            if filter_attribute != 'userName':
                self.logger.log(f"[Users] Only userName filter is supported, received: {filter_attribute}", 'error')
                raise UnsupportedFilterException(f'Filter not supported: {filter_attribute}')
            self.logger.log(f"[Users] Searching users with userName {filter_value}")
            matching = await self.pools.dr(self.directory.find_users_by_username, filter_value)
            resources = [self.to_scim(u) for u in pagination.page(matching, start_index, count)]
            return pagination.list_response(resources, len(matching), start_index)

        if start_index is None and count is None:
            self.logger.log("[Users] No pagination params passed, returning all users")
            users = await self.pools.dr_gen_all(self.directory.get_all_users)
            return pagination.list_response([self.to_scim(u) for u in users], len(users), None)

        first, limit = pagination.window(start_index, count)
        total = await self.pools.dr(self.directory.count_users)
        if limit is None:
            limit = max(total - first, 0)
        users = await self.pools.dr(self.directory.get_users, limit, first) if limit else []
        return pagination.list_response([self.to_scim(u) for u in users], total, start_index)

    @staticmethod
    def to_directory(user: dict, representation: dict) -> dict:
        representation = dict(representation)
        name = user.get('name') or {}
        representation['username'] = user.get('userName', representation.get('username'))
        representation['firstName'] = name.get('givenName', representation.get('firstName'))
        representation['lastName'] = name.get('familyName', representation.get('lastName'))
        representation['enabled'] = bool(user.get('active', True))
        emails = user.get('emails') or []
        primary = next((e for e in emails if e.get('primary')), emails[0] if emails else None)
        if primary is not None:
            representation['email'] = primary.get('value')

        password = user.get('password')
        if password:
            representation['credentials'] = [{
                'type': 'password',
                'value': password,
                'temporary': False,
            }]
        return representation

    @staticmethod
    def to_scim(representation: dict) -> dict:
        first_name = representation.get('firstName') or ''
        last_name = representation.get('lastName') or ''
        user = {
            'id': representation.get('id'),
            'userName': representation.get('username'),
            'name': {
                'formatted': f'{first_name} {last_name}'.strip(),
                'givenName': first_name,
                'familyName': last_name,
            },
            'active': representation.get('enabled', True),
        }
        if representation.get('email'):
            user['emails'] = [{'value': representation['email'], 'primary': True}]
        return user
