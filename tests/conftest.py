# tests/conftest.py
import os
import sys
import pytest

# so that `from app import create_app` works when running from the repo root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from passwords import hash_password
from storage import MemStorage

TEST_CONFIG = dict(
    TESTING=True,
    SECRET_KEY="test-secret",
    ENV="testing",
    STORAGE_BACKEND="memory",
    SEED_REFERENCE_DATA=False,   # every test starts from an empty store
    LOG_LEVEL="WARNING",
)

ADMIN_PASSWORD = "admin123"
RIDER_PASSWORD = "rider123"


@pytest.fixture()
def app_factory():
    """Build an isolated app; keyword args override the test config."""
    def _make(storage=None, **overrides):
        return create_app({**TEST_CONFIG, **overrides}, storage=storage)
    return _make


@pytest.fixture()
def storage():
    return MemStorage()


@pytest.fixture()
def app(app_factory, storage):
    return app_factory(storage=storage)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(storage):
    def _make(username, password=RIDER_PASSWORD, role="user", full_name=None):
        return storage.create_user({
            "username": username,
            "password": hash_password(password),
            "full_name": full_name,
            "role": role,
        })
    return _make


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin", ADMIN_PASSWORD, role="admin", full_name="Admin User")


@pytest.fixture()
def rider(make_user):
    return make_user("rider", RIDER_PASSWORD, full_name="Regular Rider")


def login(client, username, password):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture()
def admin_client(app, admin_user):
    client = app.test_client()
    assert login(client, admin_user.username, ADMIN_PASSWORD).status_code == 200
    return client


@pytest.fixture()
def rider_client(app, rider):
    client = app.test_client()
    assert login(client, rider.username, RIDER_PASSWORD).status_code == 200
    return client
