import pytest

from registry.extensions import db
from registry.models import AuditLog, User
from registry.services import user_service
from tests.conftest import PASSWORD, login


def signup(client, username, name, password='pw'):
    return client.post('/api/auth/signup', json={'username': username, 'password': password, 'name': name})


def test_first_signup_is_admin_then_health_worker(app):
    alice = signup(app.test_client(), 'alice', 'Alice')
    bob = signup(app.test_client(), 'bob', 'Bob')

    assert alice.status_code == 201
    assert alice.get_json()['data']['role'] == 'admin'
    assert bob.status_code == 201
    assert bob.get_json()['data']['role'] == 'health_worker'


def test_signup_starts_session(client):
    signup(client, 'alice', 'Alice')

    resp = client.get('/api/auth/user')
    assert resp.status_code == 200
    assert resp.get_json()['data']['username'] == 'alice'


def test_signup_response_hides_password_hash(client):
    data = signup(client, 'alice', 'Alice').get_json()['data']
    assert 'password_hash' not in data
    assert 'password' not in data


def test_signup_requires_fields(client):
    resp = client.post('/api/auth/signup', json={'username': 'alice'})
    assert resp.status_code == 400


def test_duplicate_username_conflicts(app):
    signup(app.test_client(), 'alice', 'Alice')
    resp = signup(app.test_client(), 'alice', 'Another Alice')

    assert resp.status_code == 409
    assert User.query.count() == 1


def test_first_user_race_is_not_serialized(app, monkeypatch):
    """Concurrent signups that both observe an empty store both become admin."""
    monkeypatch.setattr(user_service, 'count_users', lambda: 0)

    first = signup(app.test_client(), 'alice', 'Alice')
    second = signup(app.test_client(), 'bob', 'Bob')

    assert first.get_json()['data']['role'] == 'admin'
    assert second.get_json()['data']['role'] == 'admin'
    assert User.query.filter_by(role='admin').count() == 2


def test_explicit_role_overrides_first_user_rule(app):
    user = user_service.create_user('carol', PASSWORD, 'Carol', role='health_worker')
    assert user.role == 'health_worker'


def test_bootstrap_flag_grants_admin(app, admin_user):
    user = user_service.create_user('dave', PASSWORD, 'Dave', bootstrap=True)
    assert user.role == 'admin'


def test_role_not_reevaluated_later(app):
    user = user_service.create_user('erin', PASSWORD, 'Erin')
    user_service.create_user('frank', PASSWORD, 'Frank')
    db.session.refresh(user)
    assert user.role == 'admin'


def test_login_success_records_login(client, worker_user):
    resp = login(client, 'worker')

    assert resp.status_code == 200
    assert resp.get_json()['data']['username'] == 'worker'
    db.session.refresh(worker_user)
    assert worker_user.login_count == 1
    assert worker_user.last_login is not None


def test_login_wrong_password(client, worker_user):
    resp = login(client, 'worker', 'wrong')
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Invalid credentials'


def test_login_inactive_user_same_message(client, worker_user):
    worker_user.is_active = False
    db.session.commit()

    resp = login(client, 'worker')
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Invalid credentials'


def test_login_unknown_user_same_message(client):
    resp = login(client, 'nobody')
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Invalid credentials'


def test_login_requires_credentials(client):
    assert client.post('/api/auth/login', json={'username': 'worker'}).status_code == 400
    assert client.post('/api/auth/login', data='not json').status_code == 400


def test_logout_destroys_session(app, worker_client):
    store = app.extensions['session_store']
    assert len(store) == 1

    resp = worker_client.post('/api/auth/logout')

    assert resp.status_code == 200
    assert len(store) == 0
    assert worker_client.get('/api/auth/user').status_code == 401


def test_current_user_requires_session(client):
    resp = client.get('/api/auth/user')
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Authentication required'


@pytest.mark.parametrize('body', [
    {'username': 5, 'password': 'pw', 'name': 'X'},
    {'username': 'x', 'password': ['pw'], 'name': 'X'},
    {'username': 'x', 'password': 'pw', 'name': {'first': 'X'}},
    {'username': 'x', 'password': 'pw', 'name': 'X', 'email': 7},
])
def test_signup_rejects_non_string_fields(client, body):
    resp = client.post('/api/auth/signup', json=body)

    assert resp.status_code == 400
    assert User.query.count() == 0


@pytest.mark.parametrize('body', [
    {'username': 5, 'password': PASSWORD},
    {'username': 'worker', 'password': 123456},
])
def test_login_rejects_non_string_credentials(client, worker_user, body):
    resp = client.post('/api/auth/login', json=body)
    assert resp.status_code == 400


def test_logout_is_audited(app, worker_client, worker_user):
    assert worker_client.post('/api/auth/logout').status_code == 200

    entry = AuditLog.query.filter_by(action='logout').one()
    assert entry.user_id == worker_user.id


def test_logout_without_session_writes_no_audit_entry(client):
    assert client.post('/api/auth/logout').status_code == 200
    assert AuditLog.query.filter_by(action='logout').count() == 0
