"""
Input validation schemas using Pydantic for request bodies.

Wire format is camelCase (the browser client's convention); attributes are
snake_case on the Python side.
"""
import re
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fitmeal.utilities.constants import INTENSITIES, ROLES
from fitmeal.utilities.sanitization import (
    sanitize_description,
    sanitize_protocol_name,
    sanitize_string_list,
    validate_email,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


# -------------------- Auth --------------------
class RegisterInput(CamelModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    role: str = "customer"
    name: Optional[str] = Field(None, max_length=100)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        if not validate_email(v):
            raise ValueError('Invalid email format')
        return v

    @field_validator('password')
    @classmethod
    def password_strength(cls, v):
        """Require upper, lower, digit and special character."""
        checks = (
            (r'[A-Z]', 'Password must contain at least one uppercase letter'),
            (r'[a-z]', 'Password must contain at least one lowercase letter'),
            (r'[0-9]', 'Password must contain at least one number'),
            (r'[^A-Za-z0-9]', 'Password must contain at least one special character'),
        )
        for pattern, message in checks:
            if not re.search(pattern, v):
                raise ValueError(message)
        return v

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")
        return v


class LoginInput(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class RefreshInput(CamelModel):
    refresh_token: Optional[str] = None


# -------------------- Progress --------------------
class MeasurementInput(CamelModel):
    """Schema for a body measurement entry."""
    measurement_date: date
    weight_kg: Optional[float] = Field(None, gt=0, le=700)
    weight_lbs: Optional[float] = Field(None, gt=0, le=1500)
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=100)
    waist_cm: Optional[float] = Field(None, gt=0, le=400)
    chest_cm: Optional[float] = Field(None, gt=0, le=400)
    hips_cm: Optional[float] = Field(None, gt=0, le=400)
    notes: Optional[str] = Field(None, max_length=1000)


class GoalInput(CamelModel):
    """Schema for creating a customer goal."""
    goal_type: str = Field(..., min_length=1, max_length=50)
    goal_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    target_value: float
    target_unit: str = Field(..., min_length=1, max_length=20)
    starting_value: Optional[float] = None
    current_value: Optional[float] = None
    start_date: date
    target_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator('goal_name', 'goal_type', 'target_unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return v.strip()


class GoalProgressInput(CamelModel):
    current_value: float


class GoalStatusInput(CamelModel):
    status: str = Field(..., pattern=r'^(active|paused)$')


# -------------------- Recipes & meal plans --------------------
class RecipeIngredient(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: str = ""
    unit: Optional[str] = None


class RecipeSnapshot(CamelModel):
    """Recipe as embedded in a meal plan."""
    id: str
    name: str = Field(..., min_length=1)
    description: str = ""
    calories_kcal: float = Field(0, ge=0)
    protein_grams: float = Field(0, ge=0)
    carbs_grams: float = Field(0, ge=0)
    fat_grams: float = Field(0, ge=0)
    prep_time_minutes: int = Field(0, ge=0)
    cook_time_minutes: Optional[int] = Field(None, ge=0)
    servings: int = Field(1, ge=1)
    meal_types: List[str] = Field(default_factory=list)
    dietary_tags: List[str] = Field(default_factory=list)
    main_ingredient_tags: List[str] = Field(default_factory=list)
    ingredients_json: List[RecipeIngredient] = Field(default_factory=list)
    instructions_text: Optional[str] = None
    image_url: Optional[str] = None


class MealEntry(CamelModel):
    day: int = Field(..., ge=1)
    meal_number: int = Field(..., ge=1)
    meal_type: str = Field(..., min_length=1)
    recipe: RecipeSnapshot


class MealPlanInput(CamelModel):
    """Schema for a generated meal plan (validated again before PDF export)."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    plan_name: str = Field(..., min_length=1, max_length=200)
    fitness_goal: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    daily_calorie_target: int = Field(..., ge=800, le=10000)
    client_name: Optional[str] = None
    days: int = Field(..., ge=1, le=30)
    meals_per_day: int = Field(..., ge=1, le=10)
    generated_by: Optional[str] = None
    created_at: Optional[str] = None
    meals: List[MealEntry] = Field(default_factory=list)

    @field_validator('meals')
    @classmethod
    def meals_within_plan(cls, v, info):
        days = info.data.get('days')
        if days is not None:
            for meal in v:
                if meal.day > days:
                    raise ValueError(f'Meal day {meal.day} exceeds plan length of {days} days')
        return v


class AssignMealPlanInput(CamelModel):
    meal_plan_data: MealPlanInput
    customer_context: Optional[Dict[str, Any]] = None


class BulkAssignMealPlanInput(CamelModel):
    meal_plan_data: MealPlanInput
    customer_ids: List[str]


class AssignRecipeInput(CamelModel):
    recipe_id: str = Field(..., min_length=1)
    customer_ids: List[str]


class RecipeInput(CamelModel):
    """Schema for an admin-authored recipe."""
    name: str = Field(..., min_length=3, max_length=200)
    description: str = Field("", max_length=2000)
    meal_types: List[str] = Field(default_factory=list)
    dietary_tags: List[str] = Field(default_factory=list)
    main_ingredient_tags: List[str] = Field(default_factory=list)
    ingredients_json: List[RecipeIngredient]
    instructions_text: str = ""
    prep_time_minutes: int = Field(0, ge=0)
    cook_time_minutes: int = Field(0, ge=0)
    servings: int = Field(1, ge=1, le=50)
    calories_kcal: float = Field(0, ge=0)
    protein_grams: float = Field(0, ge=0)
    carbs_grams: float = Field(0, ge=0)
    fat_grams: float = Field(0, ge=0)
    image_url: Optional[str] = None
    is_approved: bool = False

    @field_validator('ingredients_json')
    @classmethod
    def validate_ingredients(cls, v):
        """Ensure recipe has at least one ingredient."""
        if not v:
            raise ValueError('Recipe must have at least one ingredient')
        return v


class IdListInput(CamelModel):
    ids: List[str] = Field(default_factory=list)


class BulkApproveInput(CamelModel):
    recipe_ids: List[str]


# -------------------- Protocols --------------------
class ProtocolInput(CamelModel):
    """Schema for a trainer (or admin) health protocol."""
    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field("", max_length=1000)
    type: str = Field("general", min_length=1, max_length=50)
    duration: int = Field(30, ge=1, le=365)
    intensity: str = "moderate"
    config: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        cleaned = sanitize_protocol_name(v)
        if len(cleaned) < 3:
            raise ValueError('Protocol name must be at least 3 characters')
        return cleaned

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return sanitize_description(v)

    @field_validator('intensity')
    @classmethod
    def validate_intensity(cls, v):
        v = v.lower()
        if v not in INTENSITIES:
            raise ValueError('Invalid intensity level')
        return v

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v):
        return sanitize_string_list(v)


class ProtocolUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1, le=365)
    intensity: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        if v is None:
            return v
        cleaned = sanitize_protocol_name(v)
        if len(cleaned) < 3:
            raise ValueError('Protocol name must be at least 3 characters')
        return cleaned

    @field_validator('description')
    @classmethod
    def clean_description(cls, v):
        return sanitize_description(v) if v is not None else v

    @field_validator('intensity')
    @classmethod
    def validate_intensity(cls, v):
        if v is not None and v.lower() not in INTENSITIES:
            raise ValueError('Invalid intensity level')
        return v.lower() if v else v


class ProtocolAssignInput(CamelModel):
    client_ids: List[str] = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=1000)
    start_date: Optional[date] = None


class CustomerProtocolInput(CamelModel):
    protocol_data: ProtocolInput
    notes: Optional[str] = Field(None, max_length=1000)
    start_date: Optional[date] = None


class ProtocolGenerateInput(CamelModel):
    """Wizard inputs used to customise a template into a protocol."""
    template_id: Optional[str] = None
    protocol_type: str = "general"
    name: Optional[str] = None
    intensity: str = "moderate"
    duration: int = Field(30, ge=1, le=365)
    client_age: Optional[int] = Field(None, ge=1, le=120)
    health_goals: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    natural_language_prompt: Optional[str] = Field(None, max_length=2000)

    @field_validator('health_goals', 'conditions', 'medications', 'allergies')
    @classmethod
    def clean_lists(cls, v):
        return sanitize_string_list(v)

    @field_validator('intensity')
    @classmethod
    def validate_intensity(cls, v):
        v = v.lower()
        if v not in INTENSITIES:
            raise ValueError('Invalid intensity level')
        return v


class SafetyCheckInput(CamelModel):
    medications: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    protocol: Optional[Dict[str, Any]] = None


class TemplateInput(CamelModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field("", max_length=1000)
    template_type: str = Field("general", min_length=1)
    category: str = Field("general", min_length=1)
    default_duration: int = Field(30, ge=1, le=365)
    default_intensity: str = "moderate"
    base_config: Dict[str, Any] = Field(default_factory=dict)


class LinkCustomerInput(CamelModel):
    email: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


# -------------------- PDF export --------------------
class PdfExportOptions(CamelModel):
    include_shopping_list: bool = True
    include_macro_summary: bool = True
    orientation: str = Field("portrait", pattern=r'^(portrait|landscape)$')
    page_size: str = Field("A4", pattern=r'^(A4|Letter)$')


class PdfExportInput(CamelModel):
    meal_plan_data: Dict[str, Any]
    customer_name: Optional[str] = None
    options: PdfExportOptions = Field(default_factory=PdfExportOptions)
