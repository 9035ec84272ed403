from pathlib import Path

from fitmeal.utilities.config import DATA_DIR as _DEFAULT_DATA_DIR, UPLOAD_DIR as _DEFAULT_UPLOAD_DIR

# Centralized paths for data files (single source of truth).
# Tests reassign DATA_DIR / UPLOAD_DIR, so file paths are resolved per call.
DATA_DIR: Path = _DEFAULT_DATA_DIR
UPLOAD_DIR: Path = _DEFAULT_UPLOAD_DIR

USERS_FILE = 'users.json'
TRAINER_CUSTOMERS_FILE = 'trainer_customers.json'
REFRESH_TOKENS_FILE = 'refresh_tokens.json'
MEASUREMENTS_FILE = 'progress_measurements.json'
GOALS_FILE = 'customer_goals.json'
MEAL_PLANS_FILE = 'customer_meal_plans.json'
PROTOCOLS_FILE = 'health_protocols.json'
PROTOCOL_TEMPLATES_FILE = 'protocol_templates.json'
PROTOCOL_ASSIGNMENTS_FILE = 'protocol_assignments.json'
RECIPES_FILE = 'recipes.json'
RECIPE_ASSIGNMENTS_FILE = 'recipe_assignments.json'


def data_file(name: str) -> Path:
    return Path(DATA_DIR) / name


def profile_images_dir() -> Path:
    return Path(UPLOAD_DIR) / 'profile-images'


__all__ = [
    'DATA_DIR', 'UPLOAD_DIR', 'data_file', 'profile_images_dir',
    'USERS_FILE', 'TRAINER_CUSTOMERS_FILE', 'REFRESH_TOKENS_FILE', 'MEASUREMENTS_FILE',
    'GOALS_FILE', 'MEAL_PLANS_FILE', 'PROTOCOLS_FILE', 'PROTOCOL_TEMPLATES_FILE',
    'PROTOCOL_ASSIGNMENTS_FILE', 'RECIPES_FILE', 'RECIPE_ASSIGNMENTS_FILE',
]
