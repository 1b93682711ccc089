from datetime import datetime, timezone

import pytest
from sqlmodel import Session

from echochat.application.ports.message_repo import MessageDto
from echochat.application.ports.user_repo import UserDto, DuplicatePhoneNumber
from echochat.infrastructure.persistence.sqlalchemy.repositories.message_repository_sql import SqlMessageRepository
from echochat.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository


def test_create_and_lookup(session):
    repo = SqlUserRepository(session)
    created = repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
    assert repo.get_by_phone("9876543210").id == created.id
    assert repo.get_by_id(created.id).fullname == "Jane Doe"
    assert repo.get_by_phone("9123456789") is None
    assert repo.get_by_id("missing") is None


def test_phone_number_is_unique(session):
    repo = SqlUserRepository(session)
    repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
    with pytest.raises(DuplicatePhoneNumber):
        repo.create(UserDto(fullname="John Doe", phone_number="9876543210"))
    # session still usable after the rollback
    assert repo.get_by_phone("9876543210").fullname == "Jane Doe"


def test_uniqueness_holds_across_sessions(engine):
    with Session(engine) as first, Session(engine) as second:
        SqlUserRepository(first).create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
        with pytest.raises(DuplicatePhoneNumber):
            SqlUserRepository(second).create(UserDto(fullname="John Doe", phone_number="9876543210"))


def test_save_updates_verification_state(session):
    repo = SqlUserRepository(session)
    user = repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210", otp_hash="x"))
    user.is_verified = True
    user.otp_hash = None
    repo.save(user)
    stored = repo.get_by_id(user.id)
    assert stored.is_verified is True
    assert stored.otp_hash is None


def test_messages_are_scoped_to_owner_and_ordered(session):
    users = SqlUserRepository(session)
    jane = users.create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
    john = users.create(UserDto(fullname="John Doe", phone_number="9123456789"))
    repo = SqlMessageRepository(session)

    first = repo.create(jane.id, "first", "sent")
    second = repo.create(jane.id, "second", "sent")
    other = repo.create(john.id, "hello", "sent")

    assert [m.content for m in repo.list_for_user(jane.id)] == ["first", "second"]
    assert isinstance(first, MessageDto)
    assert repo.get_for_user(other.id, jane.id) is None

    repo.delete(first.id)
    assert [m.id for m in repo.list_for_user(jane.id)] == [second.id]

    assert repo.delete_all_for_user(jane.id) == 1
    assert repo.list_for_user(jane.id) == []
    assert len(repo.list_for_user(john.id)) == 1


def test_refresh_pending_otp_skips_verified_records(session):
    repo = SqlUserRepository(session)
    user = repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
    stale = repo.get_by_phone("9876543210")

    user.is_verified = True
    repo.save(user)

    stale.otp_hash = "new-hash"
    assert repo.refresh_pending_otp(stale) is None
    stored = repo.get_by_id(user.id)
    assert stored.is_verified is True
    assert stored.otp_hash is None


def test_refresh_pending_otp_updates_unverified_record(session):
    repo = SqlUserRepository(session)
    user = repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210"))
    user.fullname = "Jane Q Doe"
    user.otp_hash = "new-hash"
    refreshed = repo.refresh_pending_otp(user)
    assert refreshed.fullname == "Jane Q Doe"
    assert refreshed.otp_hash == "new-hash"
    assert refreshed.is_verified is False


def test_timestamps_round_trip_as_aware_utc(session):
    repo = SqlUserRepository(session)
    expires = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    created = repo.create(UserDto(fullname="Jane Doe", phone_number="9876543210", otp_hash="h", otp_expires_at=expires))
    stored = repo.get_by_id(created.id)
    assert stored.otp_expires_at == expires
    assert stored.otp_expires_at.tzinfo is not None
    assert stored.created_at.tzinfo is not None
    assert stored.updated_at.tzinfo is not None

    message = SqlMessageRepository(session).create(created.id, "hi", "sent")
    assert message.created_at.tzinfo is not None
