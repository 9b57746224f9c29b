import time

import certifi
import requests


class DirectoryApiClient:
    RETRY_STATUSES = (429, 502, 503, 504)

    def __init__(self, base_url, realm, token, max_retries=3, backoff_factor=1, ssl=True, timeout=30):
        if not base_url.endswith('/'):
            base_url += '/'
        scheme = 'https://' if ssl else 'http://'
        self.__url = f'{scheme}{base_url}admin/realms/{realm}/'

        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': 'Bearer ' + token,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        if ssl:
            self.session.verify = certifi.where()
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.timeout = timeout

    @property
    def url(self):
        return self.__url

    def get(self, uri, params=None):
        return self.send_request(self.session.get, uri, params=params)

    def post(self, uri, payload):
        return self.send_request(self.session.post, uri, payload)

    def put(self, uri, payload=None):
        return self.send_request(self.session.put, uri, payload)

    def delete(self, uri):
        return self.send_request(self.session.delete, uri)

    def send_request(self, request_method, uri, payload=None, params=None):
        url = self.__url + uri
        for attempt in range(self.max_retries + 1):
            try:
                response = request_method(url, json=payload, params=params, timeout=self.timeout)
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                if attempt == self.max_retries:
                    raise APIError(f'Directory unreachable: {e}') from e
                time.sleep(self.backoff_factor * (2 ** attempt))
                continue

            if response.status_code < 300:
                return self.process_response(response)
            if response.status_code == 404:
                raise NotFoundError(f'{uri} not found')
            if response.status_code == 409:
                raise ConflictError(f'{uri} conflicts with an existing entity')
            if response.status_code not in self.RETRY_STATUSES:
                raise APIError(f'{request_method.__name__.upper()} {uri} failed with status {response.status_code}',
                               response.status_code)
            if attempt == self.max_retries:
                break
            time.sleep(self.backoff_factor * (2 ** attempt))

        raise APIError('Max retries reached or server error.', response.status_code)

    def process_response(self, response):
        if response.status_code == 201:
            return self.created_id(response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError('Failed to parse JSON response') from e

    @staticmethod
    def created_id(response):
        location = response.headers.get('Location')
        if not location:
            return None
        return location.rstrip('/').rsplit('/', 1)[-1]

    # Users

    def get_users(self, first=0, max=100, search=None, username=None, exact=None):
        params = {'first': first, 'max': max}
        if search is not None:
            params['search'] = search
        if username is not None:
            params['username'] = username
        if exact is not None:
            params['exact'] = 'true' if exact else 'false'
        return self.get('users', params)

    def count_users(self):
        return self.get('users/count')

    def get_user(self, user_id):
        return self.get(f'users/{user_id}')

    def create_user(self, payload):
        return self.post('users', payload)

    def update_user(self, user_id, payload):
        return self.put(f'users/{user_id}', payload)

    # Groups

    def get_groups(self, first=0, max=100, search=None):
        params = {'first': first, 'max': max}
        if search is not None:
            params['search'] = search
        return self.get('groups', params)

    def count_groups(self):
        return self.get('groups/count')

    def get_group(self, group_id):
        return self.get(f'groups/{group_id}')

    def create_group(self, payload):
        return self.post('groups', payload)

    def update_group(self, group_id, payload):
        return self.put(f'groups/{group_id}', payload)

    def delete_group(self, group_id):
        return self.delete(f'groups/{group_id}')

    # Membership

    def get_group_members(self, group_id, first=0, max=100):
        return self.get(f'groups/{group_id}/members', {'first': first, 'max': max, 'briefRepresentation': 'true'})

    def add_user_to_group(self, group_id, user_id):
        return self.put(f'users/{user_id}/groups/{group_id}')

    def remove_user_from_group(self, group_id, user_id):
        return self.delete(f'users/{user_id}/groups/{group_id}')


class APIError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(APIError):
    def __init__(self, message):
        super().__init__(message, 404)


class ConflictError(APIError):
    def __init__(self, message):
        super().__init__(message, 409)
