import pytest

from registry import create_app
from registry.constants import Role
from registry.extensions import db
from registry.services import create_user

PASSWORD = 'pw-123456'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username, password=PASSWORD):
    return client.post('/api/auth/login', json={'username': username, 'password': password})


@pytest.fixture
def admin_user(app):
    return create_user('admin', PASSWORD, 'Registry Admin', role=Role.ADMIN.value)


@pytest.fixture
def worker_user(app, admin_user):
    return create_user('worker', PASSWORD, 'Field Worker', role=Role.HEALTH_WORKER.value)


@pytest.fixture
def admin_client(app, admin_user):
    client = app.test_client()
    assert login(client, 'admin').status_code == 200
    return client


@pytest.fixture
def worker_client(app, worker_user):
    client = app.test_client()
    assert login(client, 'worker').status_code == 200
    return client
