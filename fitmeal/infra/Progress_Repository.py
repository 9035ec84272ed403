from datetime import date
from typing import List, Optional

from fitmeal.domain.Goal import CustomerGoal
from fitmeal.domain.Measurement import ProgressMeasurement
from fitmeal.infra import json_store
from fitmeal.infra.paths import GOALS_FILE, MEASUREMENTS_FILE


class ProgressRepository:
    # --- measurements (append-only) ---
    def add_measurement(self, measurement: ProgressMeasurement) -> ProgressMeasurement:
        with json_store.editing(MEASUREMENTS_FILE) as items:
            items.append(measurement.to_dict())
        return measurement

    def list_measurements(self, customer_id: str, start: Optional[date] = None,
                          end: Optional[date] = None, limit: Optional[int] = None) -> List[ProgressMeasurement]:
        """Measurements of one customer, newest first, date range inclusive."""
        result = []
        for entry in json_store.load(MEASUREMENTS_FILE):
            if entry.get('customerId') != customer_id:
                continue
            day = date.fromisoformat(entry['measurementDate'][:10])
            if start and day < start:
                continue
            if end and day > end:
                continue
            result.append(ProgressMeasurement.from_dict(entry))
        result.sort(key=lambda m: (m.measurement_date, m.created_at), reverse=True)
        return result[:limit] if limit else result

    # --- goals ---
    def add_goal(self, goal: CustomerGoal) -> CustomerGoal:
        with json_store.editing(GOALS_FILE) as items:
            items.append(goal.to_dict())
        return goal

    def list_goals(self, customer_id: str, status: Optional[str] = None) -> List[CustomerGoal]:
        goals = [CustomerGoal.from_dict(e) for e in json_store.load(GOALS_FILE)
                 if e.get('customerId') == customer_id]
        if status:
            goals = [g for g in goals if g.status == status]
        goals.sort(key=lambda g: g.created_at, reverse=True)
        return goals

    def get_goal(self, goal_id: str, customer_id: str) -> Optional[CustomerGoal]:
        for entry in json_store.load(GOALS_FILE):
            if entry.get('id') == goal_id and entry.get('customerId') == customer_id:
                return CustomerGoal.from_dict(entry)
        return None

    def save_goal(self, goal: CustomerGoal) -> None:
        with json_store.editing(GOALS_FILE) as items:
            for i, entry in enumerate(items):
                if entry.get('id') == goal.id:
                    items[i] = goal.to_dict()
                    return
            items.append(goal.to_dict())
