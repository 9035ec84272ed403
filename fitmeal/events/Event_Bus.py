"""Simple Event Bus / Observer implementation for domain events.

Event names:
  meal_plan.assigned   -> payload {"actor_id", "customer_id", "plan_name", "replaced"}
  protocol.assigned    -> payload {"actor_id", "customer_id", "protocol_id", "protocol_name"}
  recipe.assigned      -> payload {"actor_id", "customer_id", "recipe_id", "recipe_name"}
  goal.achieved        -> payload {"actor_id", "customer_id", "goal_id", "goal_name"}
  measurement.recorded -> payload {"actor_id", "customer_id", "measurement_date"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
MEAL_PLAN_ASSIGNED = "meal_plan.assigned"
PROTOCOL_ASSIGNED = "protocol.assigned"
RECIPE_ASSIGNED = "recipe.assigned"
GOAL_ACHIEVED = "goal.achieved"
MEASUREMENT_RECORDED = "measurement.recorded"

ALL_EVENTS = (MEAL_PLAN_ASSIGNED, PROTOCOL_ASSIGNED, RECIPE_ASSIGNED, GOAL_ACHIEVED, MEASUREMENT_RECORDED)


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
        if callback not in self._subscribers[event_name]:
            self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
        try:
            self._subscribers[event_name].remove(callback)
        except (ValueError, KeyError):
            pass

    def publish(self, event_name: str, payload: Any):
        # a failing subscriber must not break the request that published the event
        for cb in list(self._subscribers.get(event_name, [])):
            try:
                cb(event_name, payload)
            except Exception:
                logger.exception(f"Error delivering {event_name} to {cb}")


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish_event(event_name: str, payload: Any = None) -> None:
    """Publish an event on the global bus (sugar function)."""
    GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
    'EventBus', 'GLOBAL_EVENT_BUS', 'publish_event', 'ALL_EVENTS',
    'MEAL_PLAN_ASSIGNED', 'PROTOCOL_ASSIGNED', 'RECIPE_ASSIGNED', 'GOAL_ACHIEVED', 'MEASUREMENT_RECORDED',
]
