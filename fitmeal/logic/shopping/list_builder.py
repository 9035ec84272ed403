"""Shopping list builder.

Provides build_shopping_list(meal_plan_data): every ingredient of every meal
in the plan, merged by name and unit.
"""
from collections import defaultdict
from fractions import Fraction
from typing import Any, Dict, List, Optional


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def _stem(word: str) -> str:
    # Simple plural to singular heuristics (not perfect, acceptable for this use case)
    if word.endswith('ies') and len(word) > 3:
        return word[:-3] + 'y'
    if word.endswith('oes') and len(word) > 3:
        return word[:-3] + 'o'
    if word.endswith('es') and len(word) > 2 and word[-3] not in 'aeiou':
        return word[:-2]
    if word.endswith('s') and not word.endswith('ss') and len(word) > 1:
        return word[:-1]
    return word


def _key(name: str) -> str:
    return _stem(_normalize(name))


def parse_amount(amount: Any) -> Optional[float]:
    """Parse '200', '1.5', '1/2' or '1 1/2'. Returns None when not numeric."""
    if isinstance(amount, (int, float)) and not isinstance(amount, bool):
        return float(amount)
    text = str(amount or '').strip()
    if not text:
        return None
    try:
        return float(sum(Fraction(part) for part in text.split()))
    except (ValueError, ZeroDivisionError):
        return None


def build_shopping_list(meal_plan_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Aggregate ingredients across all meals of a plan.

    Returns:
        Sorted list of dicts: { name, unit, quantity, extra } where quantity is
        the summed numeric amount (None if nothing was numeric) and extra holds
        the non-numeric amounts ("to taste", "a pinch").
    """
    merged: Dict[tuple, Dict[str, Any]] = defaultdict(
        lambda: {'name': '', 'unit': '', 'quantity': None, 'extra': []})

    for meal in meal_plan_data.get('meals') or []:
        recipe = meal.get('recipe') or {}
        for ing in recipe.get('ingredientsJson') or []:
            name = (ing.get('name') or '').strip()
            if not name:
                continue
            unit = (ing.get('unit') or '').strip()
            item = merged[(_key(name), unit.lower())]
            if not item['name']:
                item['name'] = name
                item['unit'] = unit
            qty = parse_amount(ing.get('amount'))
            if qty is None:
                raw = str(ing.get('amount') or '').strip()
                if raw and raw not in item['extra']:
                    item['extra'].append(raw)
            else:
                item['quantity'] = round((item['quantity'] or 0) + qty, 2)

    return sorted(merged.values(), key=lambda i: (i['name'].lower(), i['unit']))


def format_item(item: Dict[str, Any]) -> str:
    """Human readable line: '300 g Chicken breast', 'Salt (to taste)'."""
    parts = []
    if item.get('quantity') is not None:
        qty = item['quantity']
        parts.append(str(int(qty)) if float(qty).is_integer() else str(qty))
        if item.get('unit'):
            parts.append(item['unit'])
    parts.append(item['name'])
    line = ' '.join(parts)
    if item.get('extra'):
        line += f" ({', '.join(item['extra'])})"
    return line
