from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    NETWORK = "network"
    SERVER = "server"
    MALFORMED = "malformed"
    COOLDOWN = "cooldown"


STATUS_KINDS = {
    400: AuthErrorKind.VALIDATION,
    401: AuthErrorKind.UNAUTHORIZED,
    404: AuthErrorKind.NOT_FOUND,
    409: AuthErrorKind.CONFLICT,
}

DEFAULT_MESSAGES = {
    AuthErrorKind.NETWORK: "Network error. Please check your connection.",
    AuthErrorKind.SERVER: "Something went wrong. Please try again.",
    AuthErrorKind.MALFORMED: "Unexpected response from server.",
}


def kind_for_status(status_code: int) -> AuthErrorKind:
    if status_code in STATUS_KINDS:
        return STATUS_KINDS[status_code]
    if 400 <= status_code < 500:
        return AuthErrorKind.VALIDATION
    return AuthErrorKind.SERVER


class AuthClientError(Exception):
    """A failed auth step, classified by kind rather than by message text."""

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None, status_code: Optional[int] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES.get(kind, "Request failed")
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return self.kind in (AuthErrorKind.NETWORK, AuthErrorKind.SERVER)

    def __repr__(self) -> str:
        return f"AuthClientError(kind={self.kind.value!r}, message={self.message!r}, status_code={self.status_code!r})"
