from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Any
import logging

import jwt

from ...core.timeutils import utcnow

logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    pass


@dataclass
class TokenService:
    """Stateless HS256 bearer tokens bound to a user id and phone number."""
    secret_key: str
    algorithm: str = "HS256"
    expires_minutes: int = 60
    clock: Callable[[], datetime] = field(default=utcnow)

    def issue(self, user_id: str, phone_number: str) -> str:
        issued_at = self.clock()
        to_encode: Dict[str, Any] = {
            "sub": user_id,
            "phoneNumber": phone_number,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, str]:
        if not token:
            raise InvalidToken("Unauthorized request")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            raise InvalidToken("Access token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT error: {e}")
            raise InvalidToken("Invalid access token")

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidToken("Invalid token: missing user ID")
        return {"userId": user_id, "phoneNumber": payload.get("phoneNumber")}
