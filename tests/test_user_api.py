import httpx
import pytest

from echochat.client.errors import AuthClientError, AuthErrorKind, kind_for_status
from echochat.client.transport import UserApi

BASE_URL = "http://api.test/api/v1"


def envelope(data, message="ok", status_code=200):
    return {"statusCode": status_code, "data": data, "message": message, "success": True}


def failure(message, status_code):
    return {"success": False, "message": message, "statusCode": status_code}


def make_api(handler):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return UserApi(client=client)


@pytest.mark.asyncio
async def test_register_posts_to_user_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(201, json=envelope({"phoneNumber": "9876543210", "fullname": "Jane Doe"}, status_code=201))

    api = make_api(handler)
    pending = await api.register("9876543210", "Jane Doe")
    assert pending.phoneNumber == "9876543210"
    assert seen["url"] == f"{BASE_URL}/user/register"
    assert b'"fullname"' in seen["body"]
    await api.client.aclose()


@pytest.mark.asyncio
async def test_current_user_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=envelope({"id": "u1", "phoneNumber": "9876543210", "fullname": "Jane Doe", "isVerified": True}))

    api = make_api(handler)
    user = await api.current_user("tok")
    assert user.fullname == "Jane Doe"
    assert seen["auth"] == "Bearer tok"
    await api.client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,kind",
    [
        (400, AuthErrorKind.VALIDATION),
        (401, AuthErrorKind.UNAUTHORIZED),
        (404, AuthErrorKind.NOT_FOUND),
        (409, AuthErrorKind.CONFLICT),
        (500, AuthErrorKind.SERVER),
    ],
)
async def test_error_status_maps_to_kind(status, kind):
    def handler(request):
        return httpx.Response(status, json=failure("server says no", status))

    api = make_api(handler)
    with pytest.raises(AuthClientError) as exc:
        await api.login("9876543210")
    assert exc.value.kind == kind
    assert exc.value.status_code == status
    assert exc.value.message == "server says no"
    await api.client.aclose()


@pytest.mark.asyncio
async def test_connection_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    api = make_api(handler)
    with pytest.raises(AuthClientError) as exc:
        await api.login("9876543210")
    assert exc.value.kind == AuthErrorKind.NETWORK
    assert exc.value.retryable
    await api.client.aclose()


@pytest.mark.asyncio
async def test_success_without_token_is_malformed():
    def handler(request):
        return httpx.Response(200, json=envelope({"user": {"phoneNumber": "9876543210"}}))

    api = make_api(handler)
    with pytest.raises(AuthClientError) as exc:
        await api.verify_otp("9876543210", "123456")
    assert exc.value.kind == AuthErrorKind.MALFORMED
    await api.client.aclose()


@pytest.mark.asyncio
async def test_non_json_success_is_malformed():
    def handler(request):
        return httpx.Response(200, text="<html>proxy page</html>")

    api = make_api(handler)
    with pytest.raises(AuthClientError) as exc:
        await api.logout()
    assert exc.value.kind == AuthErrorKind.MALFORMED
    await api.client.aclose()


@pytest.mark.asyncio
async def test_error_without_body_still_classified():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    api = make_api(handler)
    with pytest.raises(AuthClientError) as exc:
        await api.logout("tok")
    assert exc.value.kind == AuthErrorKind.SERVER
    assert exc.value.message
    await api.client.aclose()


def test_unlisted_client_errors_are_validation():
    assert kind_for_status(422) == AuthErrorKind.VALIDATION
    assert kind_for_status(429) == AuthErrorKind.VALIDATION
    assert kind_for_status(503) == AuthErrorKind.SERVER
