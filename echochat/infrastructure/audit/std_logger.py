import hashlib
import json
import logging
from typing import Any, Dict, Optional

from ...core.timeutils import utcnow
from ...application.ports.audit_logger import AuditLogger


def hash_phone_number(phone_number: str) -> str:
    """One-way hash so audit lines can be correlated without storing numbers."""
    return hashlib.sha256(phone_number.encode()).hexdigest()[:16]


class StdAuditLogger(AuditLogger):
    def __init__(self, logger_name: str = "echochat.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def log(self, action: str, phone_number: str, user_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "at": utcnow().isoformat(),
            "event": action,
            "phone": hash_phone_number(phone_number or ""),
            "user": user_id,
            "ok": success,
        }
        if details:
            entry.update(details)
        level = logging.INFO if success else logging.WARNING
        self._logger.log(level, f"AUDIT {json.dumps(entry, sort_keys=True, default=str)}")
