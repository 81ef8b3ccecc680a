from datetime import timedelta

import pytest

from auth_service.errors import EmailAlreadyRegistered
from auth_service.models import Roles, User, utcnow
from auth_service.stores import RefreshTokenStore, UserStore


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


def create_user(session, email="lokesh@mern.space"):
    return UserStore(session).create(
        first_name="Lokesh",
        last_name="Jha",
        email=email,
        password_hash="hashed",
    )


def test_create_user_defaults_to_customer(db_session):
    user = create_user(db_session)
    assert isinstance(user.id, int)
    assert user.role == Roles.CUSTOMER.value
    assert user.created_at is not None


def test_get_user_by_email_and_id(db_session):
    user = create_user(db_session)
    store = UserStore(db_session)
    assert store.get_by_email("lokesh@mern.space").id == user.id
    assert store.get_by_id(user.id).email == "lokesh@mern.space"
    assert store.get_by_email("nobody@mern.space") is None
    assert store.get_by_id(user.id + 100) is None


def test_duplicate_email_is_rejected(db_session):
    create_user(db_session)
    with pytest.raises(EmailAlreadyRegistered):
        create_user(db_session)
    assert db_session.query(User).filter(User.email == "lokesh@mern.space").count() == 1


def test_unique_constraint_maps_to_conflict(db_session, monkeypatch):
    """A registration racing past the lookup still fails as a client error."""
    create_user(db_session)
    store = UserStore(db_session)
    monkeypatch.setattr(store, "get_by_email", lambda email: None)

    with pytest.raises(EmailAlreadyRegistered):
        store.create(first_name="A", last_name="B", email="lokesh@mern.space", password_hash="x")

    # The session was rolled back and is usable again
    assert db_session.query(User).count() == 1


def test_refresh_token_lifecycle(db_session):
    user = create_user(db_session)
    store = RefreshTokenStore(db_session)

    record = store.create(user, expires_at=utcnow() + timedelta(days=365))
    assert isinstance(record.id, int)
    assert record.user_id == user.id
    assert store.find(record.id, user.id) is not None
    assert store.count_for_user(user.id) == 1

    assert store.delete(record.id) is True
    assert store.find(record.id, user.id) is None
    assert store.delete(record.id) is False
    assert store.count_for_user(user.id) == 0


def test_refresh_token_must_belong_to_subject(db_session):
    owner = create_user(db_session)
    other = create_user(db_session, email="other@mern.space")
    store = RefreshTokenStore(db_session)

    record = store.create(owner, expires_at=utcnow() + timedelta(days=1))

    assert store.find(record.id, other.id) is None
    assert store.find(record.id, owner.id) is not None
