import threading
from datetime import timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from waitlist_api.core.database import build_engine, init_models
from waitlist_api.core.exceptions import AlreadyConfirmedError, ConflictError, NotFoundError
from waitlist_api.schemas.user import UserCreate
from waitlist_api.schemas.waitlist import WaitlistJoin
from waitlist_api.services.database_storage import DatabaseStorage


def join(storage, email):
    return storage.add_to_waitlist(WaitlistJoin(email=email))


def test_create_and_fetch_user(storage):
    user = storage.create_user(UserCreate(username="alice", password="secret"))
    assert user.id
    assert user.password == "secret"
    assert storage.get_user(user.id) == user
    assert storage.get_user_by_username("alice") == user
    assert storage.get_user("missing") is None
    assert storage.get_user_by_username("bob") is None


def test_duplicate_username_rejected(storage):
    storage.create_user(UserCreate(username="alice", password="one"))
    with pytest.raises(ConflictError):
        storage.create_user(UserCreate(username="alice", password="two"))


def test_add_to_waitlist_starts_unconfirmed_with_token(storage):
    entry = join(storage, "user@example.com")
    assert entry.id
    assert entry.email == "user@example.com"
    assert entry.confirmed is False
    assert entry.confirmed_at is None
    assert entry.confirmation_token
    assert entry.created_at is not None
    assert storage.get_waitlist_email("user@example.com") == entry
    assert storage.get_waitlist_email_by_token(entry.confirmation_token) == entry


def test_duplicate_email_rejected_and_not_counted(storage):
    join(storage, "a@b.com")
    with pytest.raises(ConflictError):
        join(storage, "a@b.com")
    assert storage.get_waitlist_count() == 1


def test_tokens_and_ids_are_unique(storage):
    first = join(storage, "one@example.com")
    second = join(storage, "two@example.com")
    assert first.id != second.id
    assert first.confirmation_token != second.confirmation_token


def test_count_includes_confirmed_entries(storage):
    assert storage.get_waitlist_count() == 0
    entry = join(storage, "one@example.com")
    join(storage, "two@example.com")
    storage.confirm_email(entry.confirmation_token)
    assert storage.get_waitlist_count() == 2


def test_confirm_email_is_single_use(storage):
    entry = join(storage, "user@example.com")
    token = entry.confirmation_token

    confirmed = storage.confirm_email(token)
    assert confirmed is not None
    assert confirmed.email == "user@example.com"
    assert confirmed.confirmed is True
    assert confirmed.confirmed_at is not None
    assert confirmed.confirmation_token is None

    assert storage.confirm_email(token) is None
    assert storage.get_waitlist_email_by_token(token) is None
    stored = storage.get_waitlist_email("user@example.com")
    assert stored.confirmed is True
    assert stored.confirmation_token is None


def test_confirm_unknown_or_blank_token(storage):
    join(storage, "user@example.com")
    assert storage.confirm_email("not-a-token") is None
    assert storage.confirm_email("") is None
    assert storage.get_waitlist_email("user@example.com").confirmed is False


def test_regenerate_invalidates_previous_token(storage):
    entry = join(storage, "user@example.com")
    old_token = entry.confirmation_token

    new_token = storage.regenerate_confirmation_token("user@example.com")
    assert new_token and new_token != old_token
    assert storage.get_waitlist_email("user@example.com").confirmation_token == new_token

    assert storage.confirm_email(old_token) is None
    assert storage.confirm_email(new_token).confirmed is True


def test_regenerate_unknown_email(storage):
    with pytest.raises(NotFoundError):
        storage.regenerate_confirmation_token("nobody@example.com")


def test_regenerate_after_confirmation_is_refused(storage):
    entry = join(storage, "user@example.com")
    storage.confirm_email(entry.confirmation_token)
    with pytest.raises(AlreadyConfirmedError):
        storage.regenerate_confirmation_token("user@example.com")
    assert storage.get_waitlist_email("user@example.com").confirmation_token is None


def test_timestamps_are_utc_aware(storage):
    entry = join(storage, "user@example.com")
    assert entry.created_at.tzinfo is not None
    assert entry.created_at.utcoffset() == timedelta(0)

    confirmed = storage.confirm_email(entry.confirmation_token)
    assert confirmed.confirmed_at.tzinfo is not None
    assert confirmed.confirmed_at.utcoffset() == timedelta(0)
    assert confirmed.confirmed_at >= entry.created_at

    stored = storage.get_waitlist_email("user@example.com")
    assert stored.created_at == entry.created_at
    assert stored.confirmed_at.tzinfo is not None


def test_get_user_with_non_uuid_id_skips_the_database():
    def no_session():
        raise AssertionError("a non-UUID id must not reach the database")

    storage = DatabaseStorage(no_session)
    assert storage.get_user("missing") is None
    assert storage.get_user("") is None


@pytest.fixture
def file_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'waitlist.db'}")
    init_models(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_storage(file_engine):
    return DatabaseStorage(sessionmaker(autocommit=False, autoflush=False, bind=file_engine))


def test_concurrent_confirmations_succeed_once(file_storage):
    workers = 8
    for round_number in range(5):
        entry = join(file_storage, f"user{round_number}@example.com")
        barrier = threading.Barrier(workers)
        results, errors = [], []

        def confirm():
            barrier.wait()
            try:
                results.append(file_storage.confirm_email(entry.confirmation_token))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=confirm) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len([r for r in results if r is not None]) == 1
        assert file_storage.get_waitlist_email(entry.email).confirmed is True


def test_confirm_without_update_returning(file_engine, file_storage, monkeypatch):
    monkeypatch.setattr(file_engine.dialect, "update_returning", False)
    entry = join(file_storage, "user@example.com")

    confirmed = file_storage.confirm_email(entry.confirmation_token)
    assert confirmed is not None
    assert confirmed.id == entry.id
    assert confirmed.confirmed is True
    assert confirmed.confirmation_token is None
    assert confirmed.confirmed_at.tzinfo is not None

    assert file_storage.confirm_email(entry.confirmation_token) is None
    assert file_storage.confirm_email("unknown") is None
