import logging
from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from fitmeal.api.deps import get_current_user, meal_plans, protocols, recipes, require_role, users
from fitmeal.domain.Protocol import HealthProtocol
from fitmeal.domain.Recipe import Recipe
from fitmeal.domain.User import User
from fitmeal.events.event_helpers import publish_meal_plan_assigned, publish_recipe_assigned
from fitmeal.utilities.validators import (
    AssignRecipeInput,
    BulkApproveInput,
    BulkAssignMealPlanInput,
    IdListInput,
    ProtocolInput,
    RecipeInput,
)

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)

admin_only = require_role("admin")
trainer_or_admin = require_role("trainer", "admin")


def _visible_customers(user: User):
    """Admins see every customer, trainers only the ones linked to them."""
    if user.role == 'admin':
        return users.list_all(role='customer')
    linked = set(users.customer_ids_for(user.id))
    return [c for c in users.list_all(role='customer') if c.id in linked]


def _check_customer_ids(user: User, customer_ids) -> None:
    allowed = {c.id for c in _visible_customers(user)}
    unknown = [cid for cid in customer_ids if cid not in allowed]
    if unknown:
        raise HTTPException(status_code=400, detail={
            'message': 'Unknown customers or customers not linked to you',
            'invalidCustomerIds': unknown,
        })


@router.get("/customers")
def list_customers(recipe_id: Optional[str] = Query(None, alias="recipeId"),
                   meal_plan_id: Optional[str] = Query(None, alias="mealPlanId"),
                   user: User = Depends(trainer_or_admin)):
    with_recipe = recipes.assigned_customer_ids(recipe_id) if recipe_id else set()
    with_plan = meal_plans.customers_with_plan(meal_plan_id) if meal_plan_id else set()
    result = []
    for customer in _visible_customers(user):
        entry = {'id': customer.id, 'email': customer.email, 'name': customer.name,
                 'profilePicture': customer.profile_picture, 'createdAt': customer.created_at}
        if recipe_id:
            entry['hasRecipe'] = customer.id in with_recipe
        if meal_plan_id:
            entry['hasMealPlan'] = customer.id in with_plan
        result.append(entry)
    return result


@router.post("/assign-recipe")
def assign_recipe(payload: AssignRecipeInput, user: User = Depends(trainer_or_admin)):
    recipe = recipes.get(payload.recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    _check_customer_ids(user, payload.customer_ids)

    # trainers only replace assignments of their own customers
    scope = None if user.role == 'admin' else {c.id for c in _visible_customers(user)}
    before = recipes.assigned_customer_ids(recipe.id)
    added, removed = recipes.set_assignments(recipe.id, payload.customer_ids, user.id, scope=scope)
    for customer_id in set(payload.customer_ids) - before:
        publish_recipe_assigned(user.id, customer_id, recipe.id, recipe.name)

    changes = []
    if added:
        changes.append(f"assigned to {added} customer(s)")
    if removed:
        changes.append(f"unassigned from {removed} customer(s)")
    message = f"Recipe {' and '.join(changes)} successfully" if changes else "No changes were made to recipe assignments"
    logger.info(f"{user.role} {user.id}: recipe {recipe.id} +{added} -{removed}")
    return {'message': message, 'added': added, 'removed': removed}


@router.post("/assign-meal-plan")
def assign_meal_plan(payload: BulkAssignMealPlanInput, user: User = Depends(trainer_or_admin)):
    _check_customer_ids(user, payload.customer_ids)
    plan_data = payload.meal_plan_data.dump()
    added = replaced = 0
    for customer_id in dict.fromkeys(payload.customer_ids):
        plan, was_replaced = meal_plans.assign(customer_id, user.id, plan_data)
        publish_meal_plan_assigned(user.id, customer_id, plan.plan_name, was_replaced)
        if was_replaced:
            replaced += 1
        else:
            added += 1
    total = added + replaced
    message = (f"Meal plan assigned to {total} customer(s) successfully" if total
               else "No customers selected")
    return {'message': message, 'added': added, 'replaced': replaced}


# -------------------- Recipes --------------------
@router.get("/recipes")
def list_recipes(page: int = Query(1, ge=1), limit: int = Query(20, ge=1, le=100),
                 approved: Optional[bool] = None, search: str = "",
                 user: User = Depends(admin_only)):
    items, total = recipes.page(page, limit, approved=approved, search=search)
    return {'recipes': [r.to_dict() for r in items], 'total': total}


@router.post("/recipes", status_code=201)
def create_recipe(payload: RecipeInput, user: User = Depends(admin_only)):
    data = payload.dump()
    recipe = Recipe.from_dict(data)
    return recipes.add(recipe).to_dict()


@router.patch("/recipes/{recipe_id}/approve")
def approve_recipe(recipe_id: str, user: User = Depends(admin_only)):
    if not recipes.set_approved([recipe_id], True):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipes.get(recipe_id).to_dict()


@router.patch("/recipes/{recipe_id}/unapprove")
def unapprove_recipe(recipe_id: str, user: User = Depends(admin_only)):
    if not recipes.set_approved([recipe_id], False):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipes.get(recipe_id).to_dict()


@router.post("/recipes/bulk-approve")
def bulk_approve(payload: BulkApproveInput, user: User = Depends(admin_only)):
    """200 when every recipe was approved, 207 for a partial result, 500 for none."""
    if not payload.recipe_ids:
        raise HTTPException(status_code=400, detail="No recipe IDs provided")
    ids = list(dict.fromkeys(payload.recipe_ids))
    succeeded = len(recipes.set_approved(ids, True))
    failed = len(ids) - succeeded
    details = {'total': len(ids), 'succeeded': succeeded, 'failed': failed}
    if succeeded == 0:
        return JSONResponse(status_code=500, content={'error': 'Failed to approve any recipes', 'details': details})
    if failed:
        return JSONResponse(status_code=207, content={
            'message': f"Approved {succeeded} recipes, {failed} failed", 'details': details})
    return {'message': 'All recipes approved successfully', 'details': details}


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(recipe_id: str, user: User = Depends(admin_only)):
    if not recipes.delete_many([recipe_id]):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return Response(status_code=204)


@router.delete("/recipes")
def delete_recipes(payload: IdListInput, user: User = Depends(admin_only)):
    if not payload.ids:
        raise HTTPException(status_code=400, detail="No recipe IDs provided")
    deleted = recipes.delete_many(payload.ids)
    return {'message': f"{deleted} recipe(s) deleted", 'deleted': deleted}


@router.get("/recipes/{recipe_id}")
def get_recipe(recipe_id: str, user: User = Depends(get_current_user)):
    """Admins see any recipe; other roles only approved ones."""
    recipe = recipes.get(recipe_id)
    if recipe is None or (user.role != 'admin' and not recipe.is_approved):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe.to_dict()


# -------------------- Stats & protocols --------------------
def _recipe_stats():
    all_recipes = recipes.list_all()
    approved = sum(1 for r in all_recipes if r.is_approved)
    return {'total': len(all_recipes), 'approved': approved, 'pending': len(all_recipes) - approved}


@router.get("/stats")
def stats(user: User = Depends(admin_only)):
    return _recipe_stats()


@router.get("/profile/stats")
def profile_stats(user: User = Depends(admin_only)):
    recipe_stats = _recipe_stats()
    roles = Counter(u.role for u in users.list_all())
    return {
        'totalUsers': sum(roles.values()),
        'totalRecipes': recipe_stats['total'],
        'pendingRecipes': recipe_stats['pending'],
        'totalMealPlans': sum(meal_plans.count_for_customer(c.id) for c in users.list_all(role='customer')),
        'activeTrainers': roles.get('trainer', 0),
        'activeCustomers': roles.get('customer', 0),
    }


@router.post("/protocols", status_code=201)
def create_admin_protocol(payload: ProtocolInput, user: User = Depends(admin_only)):
    protocol = HealthProtocol(trainer_id=user.id, name=payload.name, description=payload.description,
                              type=payload.type, duration=payload.duration, intensity=payload.intensity,
                              config=payload.config, tags=payload.tags)
    return protocols.add(protocol).to_dict()


@router.get("/protocols")
def list_admin_protocols(user: User = Depends(admin_only)):
    return [p.to_dict() for p in protocols.list_for_trainer(user.id)]
