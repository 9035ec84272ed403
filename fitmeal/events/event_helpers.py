"""Event helper utilities.

Thin wrappers that publish domain events on the global bus with a consistent
payload shape.

Quick import:
    from fitmeal.events.event_helpers import publish_meal_plan_assigned, publish_goal_achieved
"""
from __future__ import annotations
from typing import Optional

from .Event_Bus import (
    publish_event,
    MEAL_PLAN_ASSIGNED, PROTOCOL_ASSIGNED, RECIPE_ASSIGNED, GOAL_ACHIEVED, MEASUREMENT_RECORDED,
)

__all__ = [
    'publish_meal_plan_assigned', 'publish_protocol_assigned', 'publish_recipe_assigned',
    'publish_goal_achieved', 'publish_measurement_recorded',
]


def publish_meal_plan_assigned(actor_id: str, customer_id: str, plan_name: str, replaced: bool = False):
    publish_event(MEAL_PLAN_ASSIGNED, {
        'actor_id': actor_id,
        'customer_id': customer_id,
        'plan_name': plan_name,
        'replaced': replaced,
    })


def publish_protocol_assigned(actor_id: str, customer_id: str, protocol_id: str, protocol_name: str):
    publish_event(PROTOCOL_ASSIGNED, {
        'actor_id': actor_id,
        'customer_id': customer_id,
        'protocol_id': protocol_id,
        'protocol_name': protocol_name,
    })


def publish_recipe_assigned(actor_id: str, customer_id: str, recipe_id: str, recipe_name: Optional[str]):
    publish_event(RECIPE_ASSIGNED, {
        'actor_id': actor_id,
        'customer_id': customer_id,
        'recipe_id': recipe_id,
        'recipe_name': recipe_name,
    })


def publish_goal_achieved(customer_id: str, goal_id: str, goal_name: str):
    """Goals are only updated by their owner, so the actor is the customer."""
    publish_event(GOAL_ACHIEVED, {
        'actor_id': customer_id,
        'customer_id': customer_id,
        'goal_id': goal_id,
        'goal_name': goal_name,
    })


def publish_measurement_recorded(customer_id: str, measurement_date: str):
    publish_event(MEASUREMENT_RECORDED, {
        'actor_id': customer_id,
        'customer_id': customer_id,
        'measurement_date': measurement_date,
    })
