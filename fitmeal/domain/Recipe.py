"""Recipe domain entity: ingredients, instructions, timings and nutrition per serving."""
from typing import Any, Dict, List, Optional

from fitmeal.domain.common import new_id, now_iso


class Recipe:
    def __init__(self, name: str = "", description: str = "",
                 meal_types: Optional[List[str]] = None, dietary_tags: Optional[List[str]] = None,
                 main_ingredient_tags: Optional[List[str]] = None,
                 ingredients: Optional[List[Dict[str, Any]]] = None, instructions_text: str = "",
                 prep_time_minutes: int = 0, cook_time_minutes: int = 0, servings: int = 1,
                 calories_kcal: float = 0, protein_grams: float = 0, carbs_grams: float = 0,
                 fat_grams: float = 0, image_url: Optional[str] = None, is_approved: bool = False,
                 id: Optional[str] = None, created_at: Optional[str] = None):
        self.id = id or new_id()
        self.name = name
        self.description = description
        self.meal_types = meal_types[:] if meal_types else []
        self.dietary_tags = dietary_tags[:] if dietary_tags else []
        self.main_ingredient_tags = main_ingredient_tags[:] if main_ingredient_tags else []
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions_text = instructions_text
        self.prep_time_minutes = prep_time_minutes
        self.cook_time_minutes = cook_time_minutes
        self.servings = servings
        self.calories_kcal = calories_kcal
        self.protein_grams = protein_grams
        self.carbs_grams = carbs_grams
        self.fat_grams = fat_grams
        self.image_url = image_url
        self.is_approved = is_approved
        self.created_at = created_at or now_iso()

    def __str__(self) -> str:
        macros = f"Protein: {self.protein_grams}g, Carbs: {self.carbs_grams}g, Fat: {self.fat_grams}g"
        return f"{self.name} - {self.servings} servings - {self.calories_kcal} kcal - {macros}"

    __repr__ = __str__

    def matches(self, search: str) -> bool:
        """Case-insensitive match on name, description and ingredient names."""
        needle = search.strip().lower()
        if not needle:
            return True
        if needle in self.name.lower() or needle in (self.description or '').lower():
            return True
        return any(needle in str(ing.get('name', '')).lower() for ing in self.ingredients)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Recipe":
        return Recipe(
            id=data.get('id'),
            name=data.get('name', ''),
            description=data.get('description', ''),
            meal_types=data.get('mealTypes'),
            dietary_tags=data.get('dietaryTags'),
            main_ingredient_tags=data.get('mainIngredientTags'),
            ingredients=data.get('ingredientsJson'),
            instructions_text=data.get('instructionsText', ''),
            prep_time_minutes=data.get('prepTimeMinutes', 0),
            cook_time_minutes=data.get('cookTimeMinutes', 0),
            servings=data.get('servings', 1),
            calories_kcal=data.get('caloriesKcal', 0),
            protein_grams=data.get('proteinGrams', 0),
            carbs_grams=data.get('carbsGrams', 0),
            fat_grams=data.get('fatGrams', 0),
            image_url=data.get('imageUrl'),
            is_approved=bool(data.get('isApproved', False)),
            created_at=data.get('createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'mealTypes': self.meal_types,
            'dietaryTags': self.dietary_tags,
            'mainIngredientTags': self.main_ingredient_tags,
            'ingredientsJson': self.ingredients,
            'instructionsText': self.instructions_text,
            'prepTimeMinutes': self.prep_time_minutes,
            'cookTimeMinutes': self.cook_time_minutes,
            'servings': self.servings,
            'caloriesKcal': self.calories_kcal,
            'proteinGrams': self.protein_grams,
            'carbsGrams': self.carbs_grams,
            'fatGrams': self.fat_grams,
            'imageUrl': self.image_url,
            'isApproved': self.is_approved,
            'createdAt': self.created_at,
        }
