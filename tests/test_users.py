import pytest

from scim_reconciler.entities import Users
from scim_reconciler.exceptions import DuplicateUserException, EntityNotFoundException, UnsupportedFilterException


@pytest.fixture
def users(directory, logger, pools):
    return Users(directory, logger, pools)


def scim_user(user_name, given='Jane', family='Doe', **extra):
    return {'userName': user_name, 'name': {'givenName': given, 'familyName': family}, **extra}


def test_create_user(directory, users):
    created = users.create_user(scim_user('jdoe', password='s3cret', emails=[{'value': 'j@doe.io', 'primary': True}]))

    stored = directory.users[created['id']]
    assert stored['username'] == 'jdoe'
    assert stored['firstName'] == 'Jane'
    assert stored['lastName'] == 'Doe'
    assert stored['enabled'] is True
    assert stored['email'] == 'j@doe.io'
    assert stored['credentials'] == [{'type': 'password', 'value': 's3cret', 'temporary': False}]


def test_create_duplicate_user(users):
    users.create_user(scim_user('jdoe'))

    with pytest.raises(DuplicateUserException):
        users.create_user(scim_user('jdoe'))


def test_update_user(directory, users):
    updated = users.update_user('u1', scim_user('u1', given='Ann', family='Lee', active=False))

    assert directory.users['u1']['firstName'] == 'Ann'
    assert directory.users['u1']['enabled'] is False
    assert updated['name']['formatted'] == 'Ann Lee'
    assert updated['active'] is False


def test_update_missing_user(users):
    with pytest.raises(EntityNotFoundException):
        users.update_user('nope', scim_user('nope'))


def test_get_user(users):
    assert users.get_user('u1')['userName'] == 'u1'
    with pytest.raises(EntityNotFoundException):
        users.get_user('nope')


def test_filter_by_user_name(users):
    response = users.get_users(filter_attribute='userName', filter_value='u2')

    assert response['totalResults'] == 1
    assert [u['id'] for u in response['Resources']] == ['u2']


def test_unsupported_filter(users):
    with pytest.raises(UnsupportedFilterException):
        users.get_users(filter_attribute='email', filter_value='j@doe.io')


def test_first_page_starts_at_index_one(users):
    response = users.get_users(start_index=1, count=2)

    assert response['totalResults'] == 5
    assert [u['id'] for u in response['Resources']] == ['u1', 'u2']


def test_page_past_the_end(users):
    response = users.get_users(start_index=5, count=3)

    assert [u['id'] for u in response['Resources']] == ['u6']
    assert response['itemsPerPage'] == 1


def test_zero_start_index_is_treated_as_one(users):
    response = users.get_users(start_index=0, count=1)

    assert response['startIndex'] == 1
    assert [u['id'] for u in response['Resources']] == ['u1']


def test_all_users_without_paging(users):
    response = users.get_users()

    assert response['totalResults'] == 5
    assert len(response['Resources']) == 5
