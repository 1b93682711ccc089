from dataclasses import dataclass
from typing import Optional
import logging

from ...exceptions import UnauthorizedError
from ..ports.user_repo import UserRepository, UserDto
from .token_service import TokenService, InvalidToken

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@dataclass
class AuthGate:
    """Resolves a bearer token to a verified user record or rejects the request."""
    user_repo: UserRepository
    tokens: TokenService

    def resolve(self, token: Optional[str]) -> UserDto:
        if not token:
            raise UnauthorizedError("Unauthorized request")
        try:
            claims = self.tokens.verify(token)
        except InvalidToken as e:
            raise UnauthorizedError(str(e))

        user = self.user_repo.get_by_id(claims["userId"])
        if not user:
            logger.warning(f"Token refers to unknown user {claims['userId']}")
            raise UnauthorizedError("Invalid access token")
        if not user.is_verified:
            raise UnauthorizedError("Please verify your phone number first")
        return user
