import logging
from typing import Any, Dict, List, Optional, Tuple

from fitmeal.domain.MealPlan import CustomerMealPlan
from fitmeal.infra import json_store
from fitmeal.infra.paths import MEAL_PLANS_FILE

logger = logging.getLogger(__name__)


class MealPlanRepository:
    def assign(self, customer_id: str, trainer_id: Optional[str],
               meal_plan_data: Dict[str, Any]) -> Tuple[CustomerMealPlan, bool]:
        """Assign a plan to a customer.

        A plan whose ``meal_plan_data['id']`` the customer already holds is
        replaced. Returns the stored assignment and whether it replaced one.
        """
        plan = CustomerMealPlan(customer_id, trainer_id, meal_plan_data)
        replaced = False
        with json_store.editing(MEAL_PLANS_FILE) as items:
            kept = []
            for entry in items:
                same_plan = (entry.get('customerId') == customer_id
                             and (entry.get('mealPlanData') or {}).get('id') == plan.plan_id)
                if same_plan:
                    replaced = True
                else:
                    kept.append(entry)
            kept.append(plan.to_dict())
            items[:] = kept
        logger.info(f"{'Reassigned' if replaced else 'Assigned'} meal plan {plan.plan_name!r} to customer {customer_id}")
        return plan, replaced

    def list_for_customer(self, customer_id: str) -> List[CustomerMealPlan]:
        """Newest assignment first."""
        plans = [CustomerMealPlan.from_dict(e) for e in json_store.load(MEAL_PLANS_FILE)
                 if e.get('customerId') == customer_id]
        plans.sort(key=lambda p: p.assigned_at, reverse=True)
        return plans

    def get(self, assignment_id: str) -> Optional[CustomerMealPlan]:
        for entry in json_store.load(MEAL_PLANS_FILE):
            if entry.get('id') == assignment_id:
                return CustomerMealPlan.from_dict(entry)
        return None

    def delete(self, assignment_id: str, customer_id: str) -> bool:
        with json_store.editing(MEAL_PLANS_FILE) as items:
            before = len(items)
            items[:] = [e for e in items
                        if not (e.get('id') == assignment_id and e.get('customerId') == customer_id)]
            return len(items) != before

    def customers_with_plan(self, plan_id: str) -> set:
        return {e['customerId'] for e in json_store.load(MEAL_PLANS_FILE)
                if (e.get('mealPlanData') or {}).get('id') == plan_id}

    def count_for_customer(self, customer_id: str) -> int:
        return len(self.list_for_customer(customer_id))

    def count_by_trainer(self, trainer_id: str) -> int:
        return sum(1 for e in json_store.load(MEAL_PLANS_FILE) if e.get('trainerId') == trainer_id)
