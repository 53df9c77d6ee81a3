import asyncio

import httpx
import pytest

from errors import RemoteDatabaseError
from firebase import FirebaseClient

DB_URL = "https://demo-default-rtdb.example.test/"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_client(routes, clock=None):
    """routes maps a URL path to a callable(request) -> httpx.Response."""

    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return routes[request.url.path](request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = FirebaseClient("api-key", DB_URL, http=http, clock=clock or FakeClock())
    return client, seen


def sign_up_ok(request):
    return httpx.Response(200, json={
        "idToken": "id-1",
        "refreshToken": "refresh-1",
        "expiresIn": "3600",
        "localId": "anon-uid",
    })


def test_missing_credentials_rejected():
    with pytest.raises(RemoteDatabaseError):
        FirebaseClient("", DB_URL)


def test_sign_in_then_fetch_root():
    client, seen = make_client({
        "/v1/accounts:signUp": sign_up_ok,
        "/.json": lambda r: httpx.Response(200, json={"key": "k1", "volts": 230}),
    })

    async def run():
        await client.sign_in_anonymously()
        return await client.fetch_snapshot()

    assert asyncio.run(run()) == {"key": "k1", "volts": 230}
    assert client.user_id == "anon-uid"

    sign_up, fetch = seen
    assert sign_up.url.params["key"] == "api-key"
    assert fetch.url.host == "demo-default-rtdb.example.test"
    assert fetch.url.params["auth"] == "id-1"


def test_empty_database_returns_empty_mapping():
    client, _ = make_client({
        "/v1/accounts:signUp": sign_up_ok,
        "/.json": lambda r: httpx.Response(200, content=b"null"),
    })

    async def run():
        await client.sign_in_anonymously()
        return await client.fetch_snapshot()

    assert asyncio.run(run()) == {}


def test_fetch_before_sign_in_fails():
    client, seen = make_client({})

    with pytest.raises(RemoteDatabaseError):
        asyncio.run(client.fetch_snapshot())
    assert seen == []


def test_sign_in_http_error():
    client, _ = make_client({
        "/v1/accounts:signUp": lambda r: httpx.Response(400, json={"error": {"message": "ADMIN_ONLY_OPERATION"}}),
    })

    with pytest.raises(RemoteDatabaseError, match="HTTP 400"):
        asyncio.run(client.sign_in_anonymously())
    assert not client.signed_in


def test_fetch_permission_denied():
    client, _ = make_client({
        "/v1/accounts:signUp": sign_up_ok,
        "/.json": lambda r: httpx.Response(401, json={"error": "Permission denied"}),
    })

    async def run():
        await client.sign_in_anonymously()
        await client.fetch_snapshot()

    with pytest.raises(RemoteDatabaseError, match="HTTP 401"):
        asyncio.run(run())


def test_network_error_is_wrapped():
    def boom(request):
        raise httpx.ConnectError("unreachable", request=request)

    client, _ = make_client({"/v1/accounts:signUp": boom})

    with pytest.raises(RemoteDatabaseError, match="unreachable"):
        asyncio.run(client.sign_in_anonymously())


def test_expired_token_is_refreshed_before_fetch():
    clock = FakeClock()
    client, seen = make_client({
        "/v1/accounts:signUp": sign_up_ok,
        "/v1/token": lambda r: httpx.Response(200, json={
            "id_token": "id-2",
            "refresh_token": "refresh-2",
            "expires_in": "3600",
        }),
        "/.json": lambda r: httpx.Response(200, json={"key": "k"}),
    }, clock=clock)

    async def run():
        await client.sign_in_anonymously()
        await client.fetch_snapshot()
        clock.now += 3590
        await client.fetch_snapshot()

    asyncio.run(run())

    paths = [r.url.path for r in seen]
    assert paths == ["/v1/accounts:signUp", "/.json", "/v1/token", "/.json"]
    assert b"refresh_token=refresh-1" in seen[2].content
    assert seen[3].url.params["auth"] == "id-2"
