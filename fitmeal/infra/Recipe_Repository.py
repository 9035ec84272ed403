import logging
from typing import Iterable, List, Optional, Tuple

from fitmeal.domain.common import now_iso
from fitmeal.domain.Recipe import Recipe
from fitmeal.infra import json_store
from fitmeal.infra.paths import RECIPE_ASSIGNMENTS_FILE, RECIPES_FILE

logger = logging.getLogger(__name__)


class RecipeRepository:
    def list_all(self, approved: Optional[bool] = None, search: str = "") -> List[Recipe]:
        recipes = [Recipe.from_dict(e) for e in json_store.load(RECIPES_FILE)]
        if approved is not None:
            recipes = [r for r in recipes if r.is_approved == approved]
        if search:
            recipes = [r for r in recipes if r.matches(search)]
        recipes.sort(key=lambda r: r.created_at, reverse=True)
        return recipes

    def page(self, page: int = 1, limit: int = 20, approved: Optional[bool] = None,
             search: str = "") -> Tuple[List[Recipe], int]:
        """One page of recipes plus the total count of matches."""
        recipes = self.list_all(approved=approved, search=search)
        start = (max(page, 1) - 1) * limit
        return recipes[start:start + limit], len(recipes)

    def get(self, recipe_id: str) -> Optional[Recipe]:
        for entry in json_store.load(RECIPES_FILE):
            if entry.get('id') == recipe_id:
                return Recipe.from_dict(entry)
        return None

    def add(self, recipe: Recipe) -> Recipe:
        with json_store.editing(RECIPES_FILE) as items:
            items.append(recipe.to_dict())
        logger.info(f"Added recipe {recipe.name!r}")
        return recipe

    def set_approved(self, recipe_ids: Iterable[str], approved: bool) -> List[str]:
        """Set the approval flag; returns the ids that were found."""
        wanted = set(recipe_ids)
        found = []
        with json_store.editing(RECIPES_FILE) as items:
            for entry in items:
                if entry.get('id') in wanted:
                    entry['isApproved'] = approved
                    found.append(entry['id'])
        return found

    def delete_many(self, recipe_ids: Iterable[str]) -> int:
        wanted = set(recipe_ids)
        with json_store.locked():
            with json_store.editing(RECIPES_FILE) as items:
                before = len(items)
                items[:] = [e for e in items if e.get('id') not in wanted]
                removed = before - len(items)
            if removed:
                with json_store.editing(RECIPE_ASSIGNMENTS_FILE) as links:
                    links[:] = [l for l in links if l.get('recipeId') not in wanted]
        return removed

    # --- assignments ---
    def assigned_customer_ids(self, recipe_id: str) -> set:
        return {l['customerId'] for l in json_store.load(RECIPE_ASSIGNMENTS_FILE)
                if l.get('recipeId') == recipe_id}

    def set_assignments(self, recipe_id: str, customer_ids: Iterable[str], trainer_id: Optional[str],
                        scope: Optional[Iterable[str]] = None) -> Tuple[int, int]:
        """Make the recipe's assignment set exactly ``customer_ids``.

        With ``scope`` only assignments of those customers are compared and
        removed; links to customers outside it are left alone.
        Returns (added, removed).
        """
        target = set(customer_ids)
        allowed = set(scope) if scope is not None else None
        with json_store.editing(RECIPE_ASSIGNMENTS_FILE) as links:
            current = {l['customerId'] for l in links if l.get('recipeId') == recipe_id
                       and (allowed is None or l.get('customerId') in allowed)}
            to_add = target - current
            to_remove = current - target
            links[:] = [l for l in links
                        if not (l.get('recipeId') == recipe_id and l.get('customerId') in to_remove)]
            stamp = now_iso()
            for customer_id in sorted(to_add):
                links.append({'recipeId': recipe_id, 'customerId': customer_id,
                              'trainerId': trainer_id, 'assignedAt': stamp})
        return len(to_add), len(to_remove)

    def recipes_for_customer(self, customer_id: str) -> List[Recipe]:
        ids = [l['recipeId'] for l in json_store.load(RECIPE_ASSIGNMENTS_FILE)
               if l.get('customerId') == customer_id]
        recipes = [self.get(rid) for rid in ids]
        return [r for r in recipes if r is not None]
