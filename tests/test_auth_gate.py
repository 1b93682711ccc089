from datetime import datetime, timedelta, timezone

import pytest

from echochat.application.ports.user_repo import UserDto
from echochat.application.services.auth_gate import AuthGate, extract_bearer_token
from echochat.application.services.token_service import TokenService
from echochat.exceptions import UnauthorizedError


class FakeUserRepo:
    def __init__(self, *users):
        self.by_id = {u.id: u for u in users}

    def get_by_id(self, user_id):
        return self.by_id.get(user_id)

    def get_by_phone(self, phone_number):
        return next((u for u in self.by_id.values() if u.phone_number == phone_number), None)


@pytest.fixture
def verified_user():
    return UserDto(fullname="Jane Doe", phone_number="9876543210", is_verified=True)


@pytest.fixture
def tokens():
    return TokenService(secret_key="gate-secret")


def test_resolves_verified_user(verified_user, tokens):
    gate = AuthGate(user_repo=FakeUserRepo(verified_user), tokens=tokens)
    user = gate.resolve(tokens.issue(verified_user.id, verified_user.phone_number))
    assert user.id == verified_user.id


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token, tokens):
    gate = AuthGate(user_repo=FakeUserRepo(), tokens=tokens)
    with pytest.raises(UnauthorizedError) as exc:
        gate.resolve(token)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Unauthorized request"


def test_garbage_token(tokens):
    gate = AuthGate(user_repo=FakeUserRepo(), tokens=tokens)
    with pytest.raises(UnauthorizedError):
        gate.resolve("not-a-jwt")


def test_expired_token(verified_user):
    issued = TokenService(
        secret_key="gate-secret",
        expires_minutes=1,
        clock=lambda: datetime.now(timezone.utc) - timedelta(minutes=5),
    )
    gate = AuthGate(user_repo=FakeUserRepo(verified_user), tokens=TokenService(secret_key="gate-secret"))
    with pytest.raises(UnauthorizedError) as exc:
        gate.resolve(issued.issue(verified_user.id, verified_user.phone_number))
    assert "expired" in exc.value.detail


def test_token_for_deleted_user(tokens):
    gate = AuthGate(user_repo=FakeUserRepo(), tokens=tokens)
    with pytest.raises(UnauthorizedError) as exc:
        gate.resolve(tokens.issue("gone", "9876543210"))
    assert exc.value.detail == "Invalid access token"


def test_unverified_user_is_rejected(tokens):
    pending = UserDto(fullname="Jane Doe", phone_number="9876543210", is_verified=False)
    gate = AuthGate(user_repo=FakeUserRepo(pending), tokens=tokens)
    with pytest.raises(UnauthorizedError) as exc:
        gate.resolve(tokens.issue(pending.id, pending.phone_number))
    assert "verify" in exc.value.detail


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def", "abc.def"),
        ("bearer  abc ", "abc"),
        ("Basic abc", None),
        ("Bearer ", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
