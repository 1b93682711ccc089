import os

# Configure before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["OTP_DELIVERY"] = "log"
os.environ.pop("REDIS_URL", None)

from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from echochat.db import models  # noqa: F401


class CapturingOTPSender:
    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def send(self, phone_number: str, code: str) -> None:
        self.sent.append((phone_number, code))

    def last_code(self, phone_number: str) -> Optional[str]:
        for phone, code in reversed(self.sent):
            if phone == phone_number:
                return code
        return None


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def otp_sender():
    return CapturingOTPSender()


@pytest.fixture
def app(engine, otp_sender):
    from echochat.main import app
    from echochat.database import get_session
    from echochat.dependencies import get_otp_sender

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_otp_sender] = lambda: otp_sender
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_and_verify(client, otp_sender):
    def _register_and_verify(phone: str = "9876543210", fullname: str = "Jane Doe") -> Dict:
        r = client.post("/api/v1/user/register", json={"phoneNumber": phone, "fullname": fullname})
        assert r.status_code == 201
        code = otp_sender.last_code(phone)
        r = client.post("/api/v1/user/verify-otp", json={"phoneNumber": phone, "otp": code})
        assert r.status_code == 200
        return r.json()["data"]

    return _register_and_verify
