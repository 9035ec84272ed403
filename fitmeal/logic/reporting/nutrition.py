"""Nutrition aggregation for meal plans."""
from collections import defaultdict
from typing import Any, Dict

_MACRO_KEYS = (
    ('calories', 'caloriesKcal'),
    ('protein', 'proteinGrams'),
    ('carbs', 'carbsGrams'),
    ('fat', 'fatGrams'),
)


def _to_number(value: Any) -> float:
    # recipe snapshots may carry numeric strings such as "25.00"
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def recipe_macros(recipe: Dict[str, Any]) -> Dict[str, float]:
    return {name: _to_number(recipe.get(key)) for name, key in _MACRO_KEYS}


def compute_plan_nutrition(meal_plan_data: Dict[str, Any]) -> Dict[str, Any]:
    """Aggregate nutrition for a meal plan document.

    Returns structure:
    {
      'days': { 1: {'calories': kcal, 'protein': g, 'carbs': g, 'fat': g, 'meals': int}, ... },
      'totals': {'calories', 'protein', 'carbs', 'fat'},
      'daily_average': {'calories', 'protein', 'carbs', 'fat'},
      'daily_target': int | None
    }
    """
    days: Dict[int, Dict[str, float]] = {}
    totals = defaultdict(float)

    for meal in meal_plan_data.get('meals') or []:
        recipe = meal.get('recipe') or {}
        day = int(meal.get('day') or 1)
        bucket = days.setdefault(day, {'calories': 0.0, 'protein': 0.0, 'carbs': 0.0, 'fat': 0.0, 'meals': 0})
        for name, value in recipe_macros(recipe).items():
            bucket[name] += value
            totals[name] += value
        bucket['meals'] += 1

    plan_days = int(meal_plan_data.get('days') or len(days) or 1)
    average = {name: round(totals[name] / plan_days, 1) for name, _ in _MACRO_KEYS}
    return {
        'days': {d: days[d] for d in sorted(days)},
        'totals': {name: round(totals[name], 1) for name, _ in _MACRO_KEYS},
        'daily_average': average,
        'daily_target': meal_plan_data.get('dailyCalorieTarget'),
    }
