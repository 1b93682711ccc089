"""FastAPI dependency wiring: repositories, services and the auth gate."""
from typing import Optional
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .core.config import settings
from .database import get_session
from .exceptions import UnauthorizedError
from .application.ports.user_repo import UserRepository, UserDto
from .application.ports.otp_sender import OTPSender
from .application.ports.audit_logger import AuditLogger
from .application.services.auth_service import AuthService
from .application.services.auth_gate import AuthGate
from .application.services.message_service import MessageService
from .application.services.otp_service import OTPService
from .application.services.token_service import TokenService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.otp.log_sender import LogOTPSender
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.persistence.sqlalchemy.repositories.message_repository_sql import SqlMessageRepository

logger = logging.getLogger(__name__)

# Auth scheme
bearer_scheme = HTTPBearer(auto_error=False)

def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return SqlUserRepository(session)

def get_otp_service() -> OTPService:
    return OTPService(length=settings.OTP_LENGTH, expiry_minutes=settings.OTP_EXPIRY_MINUTES)

def get_token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

def get_otp_sender() -> OTPSender:
    if settings.OTP_DELIVERY == "twilio":
        from .infrastructure.otp.twilio_sender import TwilioOTPSender
        return TwilioOTPSender()
    return LogOTPSender()

def get_audit_logger() -> AuditLogger:
    return StdAuditLogger()

def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    otp_service: OTPService = Depends(get_otp_service),
    tokens: TokenService = Depends(get_token_service),
    otp_sender: OTPSender = Depends(get_otp_sender),
    audit: AuditLogger = Depends(get_audit_logger),
) -> AuthService:
    return AuthService(user_repo=user_repo, otp_service=otp_service, tokens=tokens, otp_sender=otp_sender, audit=audit)

def get_auth_gate(
    user_repo: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
) -> AuthGate:
    return AuthGate(user_repo=user_repo, tokens=tokens)

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> UserDto:
    token = credentials.credentials if credentials else None
    user = gate.resolve(token)
    request.state.user = user
    return user

def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> Optional[UserDto]:
    if not credentials:
        return None
    try:
        return get_current_user(request, credentials, gate)
    except UnauthorizedError as e:
        logger.info(f"Ignoring unusable token: {e.detail}")
        return None

def get_message_service(session: Session = Depends(get_session)) -> MessageService:
    return MessageService(repo=SqlMessageRepository(session))
