from datetime import timedelta

from registry import create_app
from registry.sessions import SessionStore


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs).total_seconds()


def test_store_roundtrip_returns_copy():
    store = SessionStore(clock=FakeClock())
    store.set('sid', {'user_id': 1})

    data = store.get('sid')
    assert data == {'user_id': 1}
    data['user_id'] = 2
    assert store.get('sid') == {'user_id': 1}


def test_store_entry_expires_after_ttl():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=24), clock=clock)
    store.set('sid', {'user_id': 1})

    clock.advance(hours=23, minutes=59)
    assert store.get('sid') == {'user_id': 1}

    clock.advance(minutes=1)
    assert store.get('sid') is None
    assert len(store) == 0


def test_rewrite_restarts_ttl():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=24), clock=clock)
    store.set('sid', {'user_id': 1})
    clock.advance(hours=20)
    store.set('sid', {'user_id': 1, 'touched': True})
    clock.advance(hours=20)

    assert store.get('sid') == {'user_id': 1, 'touched': True}


def test_prune_removes_only_expired_entries():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=1), check_period=timedelta(days=30), clock=clock)
    store.set('old', {'user_id': 1})
    clock.advance(minutes=30)
    store.set('fresh', {'user_id': 2})
    clock.advance(minutes=45)

    assert store.prune() == 1
    assert len(store) == 1
    assert store.get('fresh') == {'user_id': 2}


def test_store_prunes_automatically_once_per_check_period():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=1), check_period=timedelta(hours=24), clock=clock)
    for i in range(3):
        store.set(f'sid-{i}', {'user_id': i})

    clock.advance(hours=2)
    store.get('missing')
    assert len(store) == 3  # expired but not yet pruned

    clock.advance(hours=22)
    store.get('missing')
    assert len(store) == 0


def test_delete_is_idempotent():
    store = SessionStore(clock=FakeClock())
    store.set('sid', {'user_id': 1})
    store.delete('sid')
    store.delete('sid')
    assert 'sid' not in store


def test_session_cookie_attributes(client, worker_user):
    resp = client.post('/api/auth/login', json={'username': 'worker', 'password': 'pw-123456'})
    cookie = next(h for h in resp.headers.getlist('Set-Cookie') if h.startswith('registry_session='))

    assert 'HttpOnly' in cookie
    assert 'Secure' not in cookie
    assert 'Max-Age=86400' in cookie
    assert 'SameSite=Lax' in cookie


def test_session_data_lives_in_store_not_cookie(app, client, worker_user):
    store = app.extensions['session_store']
    resp = client.post('/api/auth/login', json={'username': 'worker', 'password': 'pw-123456'})
    cookie = next(h for h in resp.headers.getlist('Set-Cookie') if h.startswith('registry_session='))

    assert len(store) == 1
    assert 'user_id' not in cookie


def test_login_rotates_session_id(app, client, worker_user):
    store = app.extensions['session_store']
    client.post('/api/auth/login', json={'username': 'worker', 'password': 'pw-123456'})
    client.post('/api/auth/login', json={'username': 'worker', 'password': 'pw-123456'})

    # The first session's entry was dropped when the second login moved to a new id
    assert len(store) == 1


def test_tampered_cookie_is_rejected(client, worker_user):
    client.post('/api/auth/login', json={'username': 'worker', 'password': 'pw-123456'})
    client.set_cookie('registry_session', 'forged-session-id.bad-signature')

    resp = client.get('/api/auth/user')
    assert resp.status_code == 401


def test_expired_session_is_rejected():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=24), clock=clock)
    app = create_app('testing', session_store=store)
    with app.app_context():
        from registry.extensions import db
        from registry.services import create_user
        db.create_all()
        create_user('nurse', 'pw-123456', 'Nurse')

        client = app.test_client()
        assert client.post('/api/auth/login', json={'username': 'nurse', 'password': 'pw-123456'}).status_code == 200
        assert client.get('/api/auth/user').status_code == 200

        clock.advance(hours=24)
        assert client.get('/api/auth/user').status_code == 401
        db.drop_all()


def test_active_count_skips_expired_entries():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=1), clock=clock)
    store.set('old', {'user_id': 1})
    clock.advance(hours=2)
    store.set('new', {'user_id': 2})

    assert store.active_count() == 1
    assert len(store) == 2


def test_expired_sessions_pruned_by_request_traffic():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(hours=1), check_period=timedelta(hours=24), clock=clock)
    app = create_app('testing', session_store=store)
    with app.app_context():
        from registry.extensions import db
        from registry.services import create_user
        db.create_all()
        create_user('nurse', 'pw-123456', 'Nurse')

        store.set('abandoned', {'user_id': 1})
        clock.advance(hours=24)

        client = app.test_client()
        assert client.post('/api/auth/login', json={'username': 'nurse', 'password': 'pw-123456'}).status_code == 200

        # Only the fresh login session remains
        assert len(store) == 1
        assert store.get('abandoned') is None
        db.drop_all()
