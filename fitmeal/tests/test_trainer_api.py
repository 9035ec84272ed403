import json

import httpx
import pytest

from fitmeal.client.api_client import ApiClient
from fitmeal.client.errors import ApiError, ValidationError
from fitmeal.client.token_store import MemoryTokenStore
from fitmeal.client.trainer_api import TrainerApi, validate_meal_plan_data


def recording_api(responses):
    """TrainerApi over a fake transport; ``responses`` maps (method, path) to (status, body)."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, json.loads(request.content) if request.content else None))
        status, body = responses.get((request.method, request.url.path), (404, {"detail": "Not found"}))
        return httpx.Response(status, json=body)

    client = ApiClient("http://test", MemoryTokenStore("token"), transport=httpx.MockTransport(handler))
    return TrainerApi(client), calls


PLAN = {"planName": "Cut", "fitnessGoal": "weight_loss", "dailyCalorieTarget": 1800, "days": 1,
        "mealsPerDay": 1, "meals": [{"day": 1, "mealNumber": 1, "mealType": "lunch", "recipe": {"id": "r1"}}]}


@pytest.mark.asyncio
async def test_missing_ids_fail_before_any_request():
    api, calls = recording_api({})
    with pytest.raises(ValidationError, match="Customer ID is required"):
        await api.get_customer_measurements("")
    with pytest.raises(ValidationError, match="Protocol ID is required"):
        await api.assign_protocol("", ["c1"])
    with pytest.raises(ValidationError, match="Recipe ID is required"):
        await api.get_recipe("trainer", None)
    assert calls == []


def test_meal_plan_required_fields():
    validate_meal_plan_data(PLAN)
    with pytest.raises(ValidationError, match="Missing required field: days"):
        validate_meal_plan_data({**PLAN, "days": None})
    broken_meal = {**PLAN, "meals": [{"day": 1, "mealNumber": 1}]}
    with pytest.raises(ValidationError, match="Meal 1 is missing required field: mealType"):
        validate_meal_plan_data(broken_meal)


@pytest.mark.asyncio
async def test_meal_plans_sorted_newest_first_and_cached():
    path = "/api/trainer/customers/c1/meal-plans"
    api, calls = recording_api({("GET", path): (200, {"mealPlans": [
        {"id": "a", "assignedAt": "2024-01-01T00:00:00Z"},
        {"id": "b", "assignedAt": "2024-03-01T00:00:00Z"},
        {"id": "c", "assignedAt": "2024-02-01T00:00:00Z"},
    ], "total": 3})})

    plans = await api.get_customer_meal_plans("c1")
    assert [p["id"] for p in plans] == ["b", "c", "a"]
    await api.get_customer_meal_plans("c1")
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_assign_meal_plan_invalidates_the_customer_plan_list():
    path = "/api/trainer/customers/c1/meal-plans"
    api, calls = recording_api({
        ("GET", path): (200, {"mealPlans": [], "total": 0}),
        ("POST", path): (201, {"message": "Meal plan assigned successfully", "replaced": False}),
    })
    await api.get_customer_meal_plans("c1")

    result = await api.assign_meal_plan("c1", PLAN)
    assert result["replaced"] is False
    assert ("trainer", "customer", "c1", "meal-plans") not in api.cache

    await api.get_customer_meal_plans("c1")
    assert [(m, p) for m, p, _ in calls] == [("GET", path), ("POST", path), ("GET", path)]
    assert calls[1][2] == {"mealPlanData": PLAN}


@pytest.mark.asyncio
async def test_invalid_meal_plan_sends_nothing():
    api, calls = recording_api({})
    with pytest.raises(ValidationError):
        await api.assign_meal_plan("c1", {"planName": "No goal"})
    assert calls == []


@pytest.mark.asyncio
async def test_failures_are_reported_with_a_generic_message():
    api, _ = recording_api({("GET", "/api/trainer/customers/c1/goals"): (500, {"detail": "boom"})})
    with pytest.raises(ApiError) as excinfo:
        await api.get_customer_goals("c1")
    assert str(excinfo.value) == "Failed to fetch customer goals"
    assert excinfo.value.status == 500


@pytest.mark.asyncio
async def test_get_recipe_endpoint_depends_on_role():
    api, calls = recording_api({
        ("GET", "/api/admin/recipes/r1"): (200, {"id": "r1"}),
        ("GET", "/api/recipes/r2"): (200, {"id": "r2"}),
    })
    assert (await api.get_recipe("admin", "r1"))["id"] == "r1"
    assert (await api.get_recipe("customer", "r2"))["id"] == "r2"
    assert [p for _, p, _ in calls] == ["/api/admin/recipes/r1", "/api/recipes/r2"]


@pytest.mark.asyncio
async def test_assign_protocol_and_recipe_bodies():
    api, calls = recording_api({
        ("POST", "/api/trainer/protocols/p1/assign"): (200, {"assignments": []}),
        ("POST", "/api/admin/assign-recipe"): (200, {"added": 1, "removed": 0}),
    })
    await api.assign_protocol("p1", ["c1", "c2"], notes="Start slow", start_date="2024-05-01")
    await api.assign_recipe("r1", ["c1"])
    assert calls[0][2] == {"clientIds": ["c1", "c2"], "notes": "Start slow", "startDate": "2024-05-01"}
    assert calls[1][2] == {"recipeId": "r1", "customerIds": ["c1"]}
