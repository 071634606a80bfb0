import pytest
from fastapi.testclient import TestClient

from registry_mock.core.config import ServerConfig
from registry_mock.main import create_app
from registry_mock.storage.fixture_store import FixtureStore


@pytest.fixture
def store() -> FixtureStore:
    return FixtureStore()


@pytest.fixture
def app(store):
    return create_app(store=store, config=ServerConfig())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def authenticate_as(app, client):
    """Open a session for `user` and send its cookie with every following request."""

    def _authenticate(user):
        session_id = app.state.sessions.authenticate_as(user)
        client.cookies.set(app.state.config.session_cookie, session_id)
        return session_id

    return _authenticate
