import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ValidationError

from .errors import AuthClientError, AuthErrorKind, kind_for_status
from .session import SessionUser

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class AuthPayload(BaseModel):
    user: SessionUser
    accessToken: str


class PendingRegistration(BaseModel):
    phoneNumber: str
    fullname: Optional[str] = None


class UserApi:
    """Async client for the ``/user`` endpoints.

    Every failure surfaces as ``AuthClientError`` whose kind comes from the
    HTTP status (or from the transport), never from the message text.
    """

    def __init__(self, base_url: str = "http://localhost:8000/api/v1", client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "UserApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None, token: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self.client.request(method, f"/user{path}", json=json, headers=headers)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise AuthClientError(AuthErrorKind.NETWORK)

        try:
            body = response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None

        if response.is_error:
            raise AuthClientError(kind_for_status(response.status_code), message, response.status_code)
        if not isinstance(body, dict) or body.get("success") is not True:
            raise AuthClientError(AuthErrorKind.MALFORMED, status_code=response.status_code)
        return body

    @staticmethod
    def _data(body: Dict[str, Any], model):
        try:
            return model.model_validate(body.get("data"))
        except ValidationError as e:
            logger.warning(f"Unexpected response payload: {e}")
            raise AuthClientError(AuthErrorKind.MALFORMED)

    async def register(self, phone_number: str, fullname: Optional[str]) -> PendingRegistration:
        body = await self._request("POST", "/register", json={"phoneNumber": phone_number, "fullname": fullname})
        return self._data(body, PendingRegistration)

    async def verify_otp(self, phone_number: str, otp: str) -> AuthPayload:
        body = await self._request("POST", "/verify-otp", json={"phoneNumber": phone_number, "otp": otp})
        return self._data(body, AuthPayload)

    async def login(self, phone_number: str) -> AuthPayload:
        body = await self._request("POST", "/login", json={"phoneNumber": phone_number})
        return self._data(body, AuthPayload)

    async def current_user(self, token: str) -> SessionUser:
        body = await self._request("GET", "/current-user", token=token)
        return self._data(body, SessionUser)

    async def logout(self, token: Optional[str] = None) -> None:
        await self._request("POST", "/logout", token=token)
