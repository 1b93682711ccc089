from typing import Any, Dict, Optional, Protocol


class AuditLogger(Protocol):
    """Records authentication events (register, otp_verify, login, logout)."""

    def log(self, action: str, phone_number: str, user_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        ...
