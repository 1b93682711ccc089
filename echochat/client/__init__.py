from .errors import AuthClientError, AuthErrorKind
from .session import SessionBroadcast, SessionContext, SessionEvent, SessionSnapshot, SessionStorage, SessionUser, View
from .timer import CountdownTimer
from .transport import AuthPayload, PendingRegistration, UserApi
from .controller import AuthFlowController, RESEND_COOLDOWN_SECONDS

__all__ = [
    "AuthClientError",
    "AuthErrorKind",
    "AuthFlowController",
    "AuthPayload",
    "CountdownTimer",
    "PendingRegistration",
    "RESEND_COOLDOWN_SECONDS",
    "SessionBroadcast",
    "SessionContext",
    "SessionEvent",
    "SessionSnapshot",
    "SessionStorage",
    "SessionUser",
    "UserApi",
    "View",
]
