"""Authenticated async HTTP client for the FitMeal API.

Every request carries the stored bearer token. A 401 triggers a token
refresh; concurrent 401s share a single refresh call and wait for its
result, then each retries its own request once with the new token.
"""
import asyncio
import inspect
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from fitmeal.client.errors import ApiError, TokenRefreshError
from fitmeal.client.token_store import MemoryTokenStore
from fitmeal.utilities import config

logger = logging.getLogger(__name__)

REFRESH_PATH = "/api/auth/refresh_token"
LOGIN_PATH = "/api/auth/login"

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.I)


def filename_from_disposition(header: Optional[str], default: str = "download") -> str:
    if not header:
        return default
    match = _FILENAME_RE.search(header)
    return match.group(1).strip() if match else default


class ApiClient:
    def __init__(self, base_url: str = config.API_BASE_URL, token_store=None,
                 on_unauthorized: Optional[Callable[[], Any]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.on_unauthorized = on_unauthorized
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport)
        self._refreshing = False
        self._waiters: List[asyncio.Future] = []

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------- Requests --------------------
    async def _send(self, method: str, url: str, token: Optional[str], headers: Optional[Dict[str, str]],
                    **kwargs) -> httpx.Response:
        request_headers = dict(headers or {})
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        return await self._http.request(method, url, headers=request_headers, **kwargs)

    async def request(self, method: str, url: str, json: Any = None, data: Any = None, files: Any = None,
                      params: Any = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """Send a request, refreshing the token once on 401.

        Raises ApiError for any non-2xx response (including a 401 after the
        retry) and TokenRefreshError when the refresh itself fails.
        """
        kwargs = {"json": json, "data": data, "files": files, "params": params}
        kwargs = {k: v for k, v in kwargs.items() if v is not None}

        sent_with = self.token_store.get()
        response = await self._send(method, url, sent_with, headers, **kwargs)
        if response.status_code == 401:
            current = self.token_store.get()
            if current and current != sent_with:
                # another caller refreshed while this request was in flight
                token = current
            else:
                token = await self._refresh()
            response = await self._send(method, url, token, headers, **kwargs)

        if response.is_error:
            raise ApiError.from_response(response)
        return response

    async def get(self, url: str, **kwargs) -> Any:
        return _json_or_none(await self.request("GET", url, **kwargs))

    async def post(self, url: str, **kwargs) -> Any:
        return _json_or_none(await self.request("POST", url, **kwargs))

    async def put(self, url: str, **kwargs) -> Any:
        return _json_or_none(await self.request("PUT", url, **kwargs))

    async def patch(self, url: str, **kwargs) -> Any:
        return _json_or_none(await self.request("PATCH", url, **kwargs))

    async def delete(self, url: str, **kwargs) -> Any:
        return _json_or_none(await self.request("DELETE", url, **kwargs))

    async def download(self, method: str, url: str, json: Any = None,
                       default_filename: str = "download") -> Tuple[str, bytes]:
        """Binary response as ``(filename, content)``; the name comes from Content-Disposition."""
        response = await self.request(method, url, json=json)
        filename = filename_from_disposition(response.headers.get("content-disposition"), default_filename)
        return filename, response.content

    # -------------------- Session --------------------
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        response = await self._http.post(LOGIN_PATH, json={"email": email, "password": password})
        if response.is_error:
            raise ApiError.from_response(response)
        data = response.json()["data"]
        self.token_store.set(data["accessToken"])
        refresh_token = response.cookies.get("refreshToken")
        if refresh_token and hasattr(self.token_store, "set_refresh"):
            self.token_store.set_refresh(refresh_token)
        return data["user"]

    async def _request_new_token(self) -> str:
        body = None
        if hasattr(self.token_store, "get_refresh") and self.token_store.get_refresh():
            body = {"refreshToken": self.token_store.get_refresh()}
        response = await self._http.post(REFRESH_PATH, json=body)
        if response.is_error:
            raise ApiError.from_response(response)
        data = response.json().get("data")
        token = data.get("accessToken") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise ValueError("Refresh response did not contain an access token")
        return token

    async def _refresh(self) -> str:
        """Single-flight refresh: the first caller refreshes, later callers wait for it."""
        if self._refreshing:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            return await waiter

        self._refreshing = True
        try:
            try:
                token = await self._request_new_token()
            except (ApiError, AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Token refresh failed: {e}")
                self.token_store.clear()
                self._settle_waiters(error=TokenRefreshError("Session expired. Please log in again."))
                await self._notify_unauthorized()
                raise TokenRefreshError("Session expired. Please log in again.") from e
            self.token_store.set(token)
            logger.info(f"Access token refreshed; releasing {len(self._waiters)} queued request(s)")
            self._settle_waiters(token=token)
            return token
        finally:
            self._refreshing = False
            # only left over when the refresh itself was cancelled or hit a transport error
            self._settle_waiters(error=TokenRefreshError("Token refresh was interrupted"))

    def _settle_waiters(self, token: Optional[str] = None, error: Optional[Exception] = None) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(token)

    async def _notify_unauthorized(self) -> None:
        if self.on_unauthorized is None:
            return
        result = self.on_unauthorized()
        if inspect.isawaitable(result):
            await result


def _json_or_none(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    return response.json()
