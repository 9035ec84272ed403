"""Client-side token storage.

The memory store is the default; the file store keeps the tokens between
runs the way a browser keeps them in local storage.
"""
import json
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class MemoryTokenStore:
    def __init__(self, token: Optional[str] = None, refresh_token: Optional[str] = None):
        self._token = token
        self._refresh_token = refresh_token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def get_refresh(self) -> Optional[str]:
        return self._refresh_token

    def set_refresh(self, token: Optional[str]) -> None:
        self._refresh_token = token

    def clear(self) -> None:
        self._token = None
        self._refresh_token = None


class FileTokenStore:
    """Tokens kept in a small JSON file: {"token": ..., "refreshToken": ...}."""

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, JSONDecodeError):
            logger.warning(f"Unreadable token file {self.path}; ignoring it")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get(self) -> Optional[str]:
        return self._read().get("token")

    def set(self, token: str) -> None:
        data = self._read()
        data["token"] = token
        self._write(data)

    def get_refresh(self) -> Optional[str]:
        return self._read().get("refreshToken")

    def set_refresh(self, token: Optional[str]) -> None:
        data = self._read()
        data["refreshToken"] = token
        self._write(data)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
