from fastapi import APIRouter, Depends, HTTPException, Query

from fitmeal.api.deps import get_current_user, recipes
from fitmeal.domain.User import User

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
def list_recipes(page: int = Query(1, ge=1), limit: int = Query(20, ge=1, le=100), search: str = "",
                 user: User = Depends(get_current_user)):
    """Approved recipes only, newest first."""
    items, total = recipes.page(page, limit, approved=True, search=search)
    return {'recipes': [r.to_dict() for r in items], 'total': total, 'page': page, 'limit': limit}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, user: User = Depends(get_current_user)):
    recipe = recipes.get(recipe_id)
    if recipe is None or not recipe.is_approved:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe.to_dict()
