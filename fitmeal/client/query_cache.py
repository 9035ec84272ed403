import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple

logger = logging.getLogger(__name__)

Key = Tuple[Hashable, ...]


class QueryCache:
    """Results of GET requests keyed by tuples such as ("trainer", "customer", id, "goals").

    ``invalidate(prefix)`` drops every key whose leading elements equal the prefix.
    """

    def __init__(self):
        self._entries: Dict[Key, Any] = {}

    def __contains__(self, key: Key) -> bool:
        return tuple(key) in self._entries

    def get(self, key: Key, default: Any = None) -> Any:
        return self._entries.get(tuple(key), default)

    def set(self, key: Key, value: Any) -> None:
        self._entries[tuple(key)] = value

    async def get_or_fetch(self, key: Key, fetch: Callable[[], Awaitable[Any]]) -> Any:
        key = tuple(key)
        if key in self._entries:
            return self._entries[key]
        value = await fetch()
        self._entries[key] = value
        return value

    def invalidate(self, prefix: Key = ()) -> int:
        prefix = tuple(prefix)
        stale = [k for k in self._entries if k[:len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached quer{'y' if len(stale) == 1 else 'ies'} for {prefix}")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
