"""Trainer-side API helpers.

Reads go through the query cache; every mutation invalidates the cached
reads it affects. Ids and required meal plan fields are checked before any
request is sent.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from fitmeal.client import endpoints
from fitmeal.client.api_client import ApiClient
from fitmeal.client.errors import ApiError, ValidationError
from fitmeal.client.query_cache import QueryCache

logger = logging.getLogger(__name__)

REQUIRED_PLAN_FIELDS = ("planName", "fitnessGoal", "dailyCalorieTarget", "days", "mealsPerDay")
REQUIRED_MEAL_FIELDS = ("day", "mealNumber", "mealType")


def _require(value: Any, name: str) -> None:
    if not value:
        raise ValidationError(f"{name} is required")


def validate_meal_plan_data(meal_plan_data: Optional[Dict[str, Any]]) -> None:
    _require(meal_plan_data, "Meal plan data")
    for field in REQUIRED_PLAN_FIELDS:
        if meal_plan_data.get(field) in (None, ""):
            raise ValidationError(f"Missing required field: {field}")
    for index, meal in enumerate(meal_plan_data.get("meals") or [], start=1):
        for field in REQUIRED_MEAL_FIELDS:
            if meal.get(field) in (None, ""):
                raise ValidationError(f"Meal {index} is missing required field: {field}")


class TrainerApi:
    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        self.client = client
        self.cache = cache if cache is not None else QueryCache()

    async def _fetch(self, key, url: str, failure: str) -> Any:
        async def fetch():
            try:
                return await self.client.get(url)
            except ApiError as e:
                logger.error(f"{failure}: {e}")
                raise ApiError(e.status, e.body, failure) from e
        return await self.cache.get_or_fetch(key, fetch)

    async def _mutate(self, method: str, url: str, body: Any, failure: str) -> Any:
        try:
            return await self.client.request(method, url, json=body)
        except ApiError as e:
            logger.error(f"{failure}: {e}")
            raise ApiError(e.status, e.body, failure) from e

    # -------------------- Reads --------------------
    async def get_customer_measurements(self, customer_id: str) -> List[Dict[str, Any]]:
        _require(customer_id, "Customer ID")
        body = await self._fetch(("trainer", "customer", customer_id, "measurements"),
                                 endpoints.customer_measurements_url(customer_id),
                                 "Failed to fetch customer measurements")
        return body.get("data", [])

    async def get_customer_goals(self, customer_id: str) -> List[Dict[str, Any]]:
        _require(customer_id, "Customer ID")
        body = await self._fetch(("trainer", "customer", customer_id, "goals"),
                                 endpoints.customer_goals_url(customer_id),
                                 "Failed to fetch customer goals")
        return body.get("data", [])

    async def get_customer_meal_plans(self, customer_id: str) -> List[Dict[str, Any]]:
        """Assigned meal plans, newest assignment first."""
        _require(customer_id, "Customer ID")
        body = await self._fetch(("trainer", "customer", customer_id, "meal-plans"),
                                 endpoints.customer_meal_plans_url(customer_id),
                                 "Failed to fetch customer meal plans")
        plans = body.get("mealPlans", [])
        return sorted(plans, key=lambda p: p.get("assignedAt") or "", reverse=True)

    async def get_recipe(self, role: str, recipe_id: str) -> Dict[str, Any]:
        _require(recipe_id, "Recipe ID")
        return await self._fetch(("recipe", recipe_id), endpoints.recipe_url(role, recipe_id),
                                 "Failed to fetch recipe")

    # -------------------- Mutations --------------------
    async def assign_meal_plan(self, customer_id: str, meal_plan_data: Dict[str, Any],
                               customer_context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        _require(customer_id, "Customer ID")
        validate_meal_plan_data(meal_plan_data)
        body = {"mealPlanData": meal_plan_data}
        if customer_context:
            body["customerContext"] = customer_context
        response = await self._mutate("POST", endpoints.customer_meal_plans_url(customer_id), body,
                                      "Failed to assign meal plan")
        self.cache.invalidate(("trainer", "customer", customer_id, "meal-plans"))
        self.cache.invalidate(("trainer", "customers"))
        return response.json()

    async def remove_meal_plan(self, customer_id: str, assignment_id: str) -> None:
        _require(customer_id, "Customer ID")
        _require(assignment_id, "Meal plan ID")
        await self._mutate("DELETE", endpoints.customer_meal_plan_url(customer_id, assignment_id), None,
                           "Failed to remove meal plan")
        self.cache.invalidate(("trainer", "customer", customer_id, "meal-plans"))

    async def assign_protocol(self, protocol_id: str, client_ids: Iterable[str], notes: Optional[str] = None,
                              start_date: Optional[str] = None) -> Dict[str, Any]:
        _require(protocol_id, "Protocol ID")
        client_ids = list(client_ids or [])
        _require(client_ids, "Client IDs")
        body: Dict[str, Any] = {"clientIds": client_ids}
        if notes:
            body["notes"] = notes
        if start_date:
            body["startDate"] = start_date
        response = await self._mutate("POST", endpoints.protocol_assign_url(protocol_id), body,
                                      "Failed to assign protocol")
        for customer_id in client_ids:
            self.cache.invalidate(("trainer", "customer", customer_id, "protocols"))
        self.cache.invalidate(("trainer", "protocol-assignments"))
        return response.json()

    async def assign_recipe(self, recipe_id: str, customer_ids: Iterable[str]) -> Dict[str, Any]:
        _require(recipe_id, "Recipe ID")
        body = {"recipeId": recipe_id, "customerIds": list(customer_ids or [])}
        response = await self._mutate("POST", "/api/admin/assign-recipe", body, "Failed to assign recipe")
        self.cache.invalidate(("recipe", recipe_id))
        self.cache.invalidate(("admin", "customers"))
        return response.json()
