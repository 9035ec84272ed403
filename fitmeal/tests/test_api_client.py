import asyncio

import httpx
import pytest

from fitmeal.api.api_run import app
from fitmeal.client.api_client import REFRESH_PATH, ApiClient, filename_from_disposition
from fitmeal.client.errors import ApiError, TokenRefreshError
from fitmeal.client.token_store import FileTokenStore, MemoryTokenStore

FRESH = "fresh-token"


def backend(refresh_status=200):
    """Fake API: only FRESH is accepted; the refresh call is slow enough for callers to pile up."""
    state = {"refresh_calls": 0, "seen": []}

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0)
        if request.url.path == REFRESH_PATH:
            state["refresh_calls"] += 1
            await asyncio.sleep(0.02)
            if refresh_status != 200:
                return httpx.Response(refresh_status, json={"detail": "Invalid refresh token"})
            return httpx.Response(200, json={"status": "success", "data": {"accessToken": FRESH}})
        auth = request.headers.get("authorization")
        state["seen"].append((request.url.path, auth))
        if request.url.path == "/api/always-401" or auth != f"Bearer {FRESH}":
            return httpx.Response(401, json={"detail": "Token expired"})
        return httpx.Response(200, json={"path": request.url.path})

    return state, httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_concurrent_401s_share_one_refresh():
    state, transport = backend()
    client = ApiClient("http://test", MemoryTokenStore("stale-token"), transport=transport)

    results = await asyncio.gather(*(client.get(f"/api/items/{i}") for i in range(5)))

    assert [r["path"] for r in results] == [f"/api/items/{i}" for i in range(5)]
    assert state["refresh_calls"] == 1
    retried = [path for path, auth in state["seen"] if auth == f"Bearer {FRESH}"]
    assert sorted(retried) == sorted(f"/api/items/{i}" for i in range(5))
    assert client.token_store.get() == FRESH
    await client.aclose()


@pytest.mark.asyncio
async def test_refresh_failure_rejects_every_caller_and_clears_token():
    state, transport = backend(refresh_status=403)
    redirects = []
    client = ApiClient("http://test", MemoryTokenStore("stale-token"),
                       on_unauthorized=lambda: redirects.append("/login"), transport=transport)

    results = await asyncio.gather(*(client.get(f"/api/items/{i}") for i in range(4)),
                                   return_exceptions=True)

    assert all(isinstance(r, TokenRefreshError) for r in results)
    assert state["refresh_calls"] == 1
    assert client.token_store.get() is None
    assert redirects == ["/login"]
    await client.aclose()


@pytest.mark.asyncio
async def test_refresh_without_access_token_counts_as_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_PATH:
            return httpx.Response(200, json={"status": "success", "data": None})
        return httpx.Response(401)

    redirects = []
    client = ApiClient("http://test", MemoryTokenStore("stale-token"),
                       on_unauthorized=lambda: redirects.append("/login"),
                       transport=httpx.MockTransport(handler))

    with pytest.raises(TokenRefreshError, match="Session expired"):
        await client.get("/api/auth/me")
    assert client.token_store.get() is None
    assert redirects == ["/login"]
    await client.aclose()


@pytest.mark.asyncio
async def test_stale_token_is_retried_with_current_token_without_refresh():
    store = MemoryTokenStore("stale-token")
    refresh_calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_PATH:
            refresh_calls.append(1)
            return httpx.Response(500)
        if request.headers.get("authorization") == f"Bearer {FRESH}":
            return httpx.Response(200, json={"ok": True})
        # someone else refreshed while this request was in flight
        store.set(FRESH)
        return httpx.Response(401)

    client = ApiClient("http://test", store, transport=httpx.MockTransport(handler))
    assert await client.get("/api/auth/me") == {"ok": True}
    assert refresh_calls == []
    await client.aclose()


@pytest.mark.asyncio
async def test_401_after_retry_is_surfaced_not_retried_again():
    state, transport = backend()
    client = ApiClient("http://test", MemoryTokenStore("stale-token"), transport=transport)

    with pytest.raises(ApiError) as excinfo:
        await client.get("/api/always-401")

    assert excinfo.value.status == 401
    assert str(excinfo.value).startswith("401: ")
    assert [p for p, _ in state["seen"]].count("/api/always-401") == 2
    assert state["refresh_calls"] == 1
    await client.aclose()


@pytest.mark.asyncio
async def test_network_errors_propagate_unchanged():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = ApiClient("http://test", MemoryTokenStore(FRESH), transport=httpx.MockTransport(handler))
    with pytest.raises(httpx.ConnectError):
        await client.get("/api/recipes")
    await client.aclose()


@pytest.mark.asyncio
async def test_json_bodies_and_error_messages():
    captured = {}

    def handler(request):
        captured["content_type"] = request.headers.get("content-type")
        captured["auth"] = request.headers.get("authorization")
        return httpx.Response(404, text="Recipe not found")

    client = ApiClient("http://test", MemoryTokenStore(FRESH), transport=httpx.MockTransport(handler))
    with pytest.raises(ApiError) as excinfo:
        await client.post("/api/admin/assign-recipe", json={"recipeId": "r1", "customerIds": []})

    assert str(excinfo.value) == "404: Recipe not found"
    assert captured == {"content_type": "application/json", "auth": f"Bearer {FRESH}"}
    await client.aclose()


@pytest.mark.asyncio
async def test_download_uses_content_disposition_filename():
    def handler(request):
        return httpx.Response(200, content=b"%PDF-1.4 test", headers={
            "Content-Type": "application/pdf",
            "Content-Disposition": 'attachment; filename="EvoFit_Meal_Plan_jane_2024-01-02.pdf"',
        })

    client = ApiClient("http://test", MemoryTokenStore(FRESH), transport=httpx.MockTransport(handler))
    filename, content = await client.download("POST", "/api/pdf/export", json={})
    assert filename == "EvoFit_Meal_Plan_jane_2024-01-02.pdf"
    assert content == b"%PDF-1.4 test"
    await client.aclose()


def test_filename_from_disposition_defaults():
    assert filename_from_disposition(None, "plan.pdf") == "plan.pdf"
    assert filename_from_disposition("inline", "plan.pdf") == "plan.pdf"
    assert filename_from_disposition("attachment; filename=report.pdf") == "report.pdf"


def test_file_token_store_round_trip(tmp_path):
    store = FileTokenStore(tmp_path / "session" / "tokens.json")
    assert store.get() is None
    store.set("abc")
    store.set_refresh("def")
    assert FileTokenStore(tmp_path / "session" / "tokens.json").get() == "abc"
    assert store.get_refresh() == "def"
    store.clear()
    assert store.get() is None and store.get_refresh() is None


@pytest.mark.asyncio
async def test_expired_session_refreshes_against_the_real_api(make_user):
    user = make_user("customer", email="jane.doe@example.com", name="Jane")
    transport = httpx.ASGITransport(app=app)
    client = ApiClient("http://testserver", MemoryTokenStore(), transport=transport)

    await client.login("jane.doe@example.com", "Secret#123")
    client.token_store.set("not-a-valid-token")

    body = await client.get("/api/auth/me")
    assert body["data"]["user"]["id"] == user.id
    assert client.token_store.get() != "not-a-valid-token"
    await client.aclose()
