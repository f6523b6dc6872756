import pytest

from registry.extensions import db
from registry.models import AuditLog, User
from tests.conftest import login


def test_list_users_admin_only(admin_client, worker_client):
    resp = admin_client.get('/api/users')
    assert resp.status_code == 200
    usernames = [u['username'] for u in resp.get_json()['data']]
    assert usernames == ['admin', 'worker']
    assert all('password_hash' not in u for u in resp.get_json()['data'])

    assert worker_client.get('/api/users').status_code == 403


def test_admin_creates_health_worker_by_default(admin_client):
    resp = admin_client.post('/api/users', json={'username': 'nurse', 'password': 'pw', 'name': 'Nurse'})

    assert resp.status_code == 201
    assert resp.get_json()['data']['role'] == 'health_worker'


def test_admin_creates_admin_explicitly(admin_client):
    resp = admin_client.post('/api/users', json={
        'username': 'boss', 'password': 'pw', 'name': 'Boss', 'role': 'admin',
    })
    assert resp.get_json()['data']['role'] == 'admin'


def test_create_user_rejects_unknown_role(admin_client):
    resp = admin_client.post('/api/users', json={
        'username': 'x', 'password': 'pw', 'name': 'X', 'role': 'superuser',
    })
    assert resp.status_code == 400


def test_update_user_password_rehashed(app, admin_client, worker_user):
    resp = admin_client.put(f'/api/users/{worker_user.id}', json={'password': 'new-secret', 'name': 'Renamed'})
    assert resp.status_code == 200
    assert resp.get_json()['data']['name'] == 'Renamed'

    client = app.test_client()
    assert login(client, 'worker').status_code == 401
    assert login(client, 'worker', 'new-secret').status_code == 200


def test_update_missing_user(admin_client):
    assert admin_client.put('/api/users/999', json={'name': 'Ghost'}).status_code == 404


def test_update_rejects_non_boolean_active_flag(admin_client, worker_user):
    resp = admin_client.put(f'/api/users/{worker_user.id}', json={'is_active': 'no'})
    assert resp.status_code == 400


@pytest.mark.parametrize('name', [None, '', '   ', 42])
def test_update_rejects_missing_or_invalid_name(admin_client, worker_user, name):
    resp = admin_client.put(f'/api/users/{worker_user.id}', json={'name': name})

    assert resp.status_code == 400
    assert db.session.get(User, worker_user.id).name == 'Field Worker'


def test_create_user_rejects_non_string_username(admin_client):
    resp = admin_client.post('/api/users', json={'username': 5, 'password': 'pw', 'name': 'X'})
    assert resp.status_code == 400


def test_update_is_audited_as_acting_admin(admin_client, admin_user, worker_user):
    admin_client.put(f'/api/users/{worker_user.id}', json={'phone': '555-0100'})

    entry = AuditLog.query.filter_by(entity_type='user', action='edit').one()
    assert entry.user_id == admin_user.id
    assert entry.entity_id == str(worker_user.id)
