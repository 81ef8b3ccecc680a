"""
Pytest configuration for auth service tests.
"""
import pytest
from fastapi.testclient import TestClient

from auth_service.config import Settings
from auth_service.db import Database
from auth_service.keys import generate_key_pair
from auth_service.main import create_app


@pytest.fixture(scope="session")
def key_dir(tmp_path_factory):
    """RSA key pair written the way the service expects to find it."""
    certs = tmp_path_factory.mktemp("certs")
    generate_key_pair(certs, key_size=2048)
    return certs


@pytest.fixture
def settings(tmp_path, key_dir):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'auth.db'}",
        PRIVATE_KEY_PATH=str(key_dir / "privateKey.pem"),
        PUBLIC_KEY_PATH=str(key_dir / "publicKey.pem"),
        REFRESH_TOKEN_SECRET="test-refresh-secret-0123456789-abcdefghij",
        PASSWORD_HASH_ROUNDS=1000,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client, app):
    """Session on the same database the running app uses."""
    session = app.state.database.session()
    yield session
    session.close()


@pytest.fixture
def database(settings):
    """Standalone storage context for unit tests that don't need the app."""
    db = Database(settings.DATABASE_URL)
    db.open()
    db.create_all()
    yield db
    db.close()
