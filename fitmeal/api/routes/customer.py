"""Read-only views of what trainers assigned to the calling customer."""
from fastapi import APIRouter, Depends

from fitmeal.api.deps import meal_plans, protocols, recipes, require_role
from fitmeal.domain.User import User

router = APIRouter(prefix="/api/customer", tags=["customer"])

customer_only = require_role("customer")


@router.get("/meal-plans")
def my_meal_plans(user: User = Depends(customer_only)):
    plans = meal_plans.list_for_customer(user.id)
    return {'mealPlans': [p.to_dict() for p in plans], 'total': len(plans)}


@router.get("/protocols")
def my_protocols(user: User = Depends(customer_only)):
    result = []
    for assignment in protocols.list_assignments(customer_id=user.id):
        entry = assignment.to_dict()
        protocol = protocols.get(assignment.protocol_id)
        entry['protocol'] = protocol.to_dict() if protocol else None
        result.append(entry)
    return {'protocols': result, 'total': len(result)}


@router.get("/recipes")
def my_recipes(user: User = Depends(customer_only)):
    items = recipes.recipes_for_customer(user.id)
    return {'recipes': [r.to_dict() for r in items], 'total': len(items)}
