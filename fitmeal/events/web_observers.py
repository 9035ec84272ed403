"""Web-facing observers for domain events.

Subscribes to every event on the GLOBAL_EVENT_BUS and keeps a lightweight
in-memory ring buffer of recent events that the notifications endpoint can
poll without a page reload.

  * Each event is stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * The buffer is per process and guarded by a Lock.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Collection, Dict, List, Optional

from .Event_Bus import GLOBAL_EVENT_BUS, ALL_EVENTS

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    data = dict(payload) if isinstance(payload, dict) else {}
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            **data,
        }
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in ALL_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True


def reset():
    """Drop buffered events (used by tests)."""
    with _lock:
        _events.clear()


def is_visible(event: Dict[str, Any], user_id: str, role: str, customer_ids: Collection[str] = ()) -> bool:
    """Admins see everything, trainers what they caused or what concerns their
    customers, customers what concerns themselves."""
    if role == 'admin':
        return True
    if role == 'trainer':
        return event.get('actor_id') == user_id or event.get('customer_id') in customer_ids
    return event.get('customer_id') == user_id


def get_events(since: Optional[int] = None, user_id: Optional[str] = None, role: str = 'admin',
               customer_ids: Collection[str] = ()) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive) visible to the caller.

    next_cursor is the largest id in the buffer, so polling with it never
    replays events, including ones the caller is not allowed to see.
    """
    with _lock:
        data = [e for e in _events if since is None or e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    visible = [e for e in data if is_visible(e, user_id, role, customer_ids)]
    return {'events': visible, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'is_visible', 'reset']
