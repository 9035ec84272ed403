import pytest
from fastapi.testclient import TestClient

from fitmeal.api import deps
from fitmeal.api.api_run import app
from fitmeal.api.routes import auth
from fitmeal.domain.User import User
from fitmeal.domain.common import new_id
from fitmeal.events import web_observers
from fitmeal.infra import paths
from fitmeal.logic.auth.passwords import hash_password
from fitmeal.logic.auth.tokens import create_access_token
from fitmeal.utilities import config

PASSWORD = "Secret#123"


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Every test gets its own data and upload directories and no AI key."""
    monkeypatch.setattr(paths, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(paths, "UPLOAD_DIR", tmp_path / "uploads")
    monkeypatch.setattr(config, "OPENAI_API_KEY", "")
    auth.login_throttle.clear()
    web_observers.reset()
    yield tmp_path


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user():
    def factory(role="customer", email=None, name=None, password=PASSWORD):
        user = User(email=email or f"{role}-{new_id()[:8]}@example.com",
                    password_hash=hash_password(password, iterations=1000), role=role, name=name)
        return deps.users.add(user)
    return factory


@pytest.fixture
def headers_for():
    def build(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return build


@pytest.fixture
def linked_pair(make_user):
    """A trainer with one linked customer."""
    trainer = make_user("trainer", name="Tina Trainer")
    customer = make_user("customer", name="Carl Customer")
    deps.users.link_customer(trainer.id, customer.id)
    return trainer, customer


@pytest.fixture
def sample_plan():
    return {
        "id": "plan-1",
        "planName": "Lean Week",
        "fitnessGoal": "weight_loss",
        "description": "Two light days",
        "dailyCalorieTarget": 1800,
        "days": 2,
        "mealsPerDay": 2,
        "meals": [
            {"day": 1, "mealNumber": 1, "mealType": "breakfast", "recipe": {
                "id": "r1", "name": "Oats", "caloriesKcal": 350, "proteinGrams": "12.50",
                "carbsGrams": 60, "fatGrams": 6, "prepTimeMinutes": 5, "servings": 1,
                "ingredientsJson": [{"name": "Oats", "amount": "80", "unit": "g"},
                                    {"name": "Blueberries", "amount": "1/2", "unit": "cup"}]}},
            {"day": 1, "mealNumber": 2, "mealType": "lunch", "recipe": {
                "id": "r2", "name": "Chicken Salad", "caloriesKcal": 500, "proteinGrams": 40,
                "carbsGrams": 20, "fatGrams": 25, "prepTimeMinutes": 15, "servings": 1,
                "ingredientsJson": [{"name": "Chicken breast", "amount": "150", "unit": "g"},
                                    {"name": "Salt", "amount": "to taste"}]}},
            {"day": 2, "mealNumber": 1, "mealType": "breakfast", "recipe": {
                "id": "r1", "name": "Oats", "caloriesKcal": 350, "proteinGrams": "12.50",
                "carbsGrams": 60, "fatGrams": 6, "prepTimeMinutes": 5, "servings": 1,
                "ingredientsJson": [{"name": "Oats", "amount": "80", "unit": "g"},
                                    {"name": "Blueberry", "amount": "1 1/2", "unit": "cup"}]}},
        ],
    }
