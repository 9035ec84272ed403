from typing import Any, Optional

import httpx


class ApiError(Exception):
    """Non-2xx response. ``str(err)`` is ``"<status>: <body text or reason>"``."""

    def __init__(self, status: int, body: Any = None, message: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message or f"{status}: {body}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        text = response.text or response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = text
        return cls(response.status_code, body, f"{response.status_code}: {text}")


class TokenRefreshError(Exception):
    """The access token could not be refreshed; the user has to log in again."""


class ValidationError(ValueError):
    """Client-side input check failed before any request was made."""
