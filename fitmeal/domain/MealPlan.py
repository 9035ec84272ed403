"""Meal plan assigned by a trainer to a customer.

The plan body (``meal_plan_data``) is kept as the validated JSON document:
planName, fitnessGoal, dailyCalorieTarget, days, mealsPerDay and meals, where
every meal carries day, mealNumber, mealType and a recipe snapshot.
"""
from typing import Any, Dict, List, Optional

from fitmeal.domain.common import new_id, now_iso


class CustomerMealPlan:
    def __init__(self, customer_id: str, trainer_id: Optional[str], meal_plan_data: Dict[str, Any],
                 id: Optional[str] = None, assigned_at: Optional[str] = None):
        self.id = id or new_id()
        self.customer_id = customer_id
        self.trainer_id = trainer_id
        self.meal_plan_data = dict(meal_plan_data)
        self.assigned_at = assigned_at or now_iso()

    @property
    def plan_id(self) -> Optional[str]:
        return self.meal_plan_data.get('id')

    @property
    def plan_name(self) -> str:
        return self.meal_plan_data.get('planName', '')

    @property
    def meals(self) -> List[Dict[str, Any]]:
        return self.meal_plan_data.get('meals', [])

    def __repr__(self) -> str:
        return f"CustomerMealPlan({self.plan_name!r} -> {self.customer_id})"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CustomerMealPlan":
        return CustomerMealPlan(
            id=data.get('id'),
            customer_id=data['customerId'],
            trainer_id=data.get('trainerId'),
            meal_plan_data=data.get('mealPlanData') or {},
            assigned_at=data.get('assignedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'trainerId': self.trainer_id,
            'mealPlanData': self.meal_plan_data,
            'assignedAt': self.assigned_at,
        }
