"""Customer goal with a target value and tracked progress."""
from typing import Any, Dict, Optional

from fitmeal.domain.common import new_id, now_iso


class CustomerGoal:
    def __init__(self, customer_id: str, goal_type: str, goal_name: str, target_value: float,
                 target_unit: str, start_date: str, description: Optional[str] = None,
                 starting_value: Optional[float] = None, current_value: Optional[float] = None,
                 target_date: Optional[str] = None, status: str = "active",
                 progress_percentage: int = 0, achieved_date: Optional[str] = None,
                 notes: Optional[str] = None, id: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or new_id()
        self.customer_id = customer_id
        self.goal_type = goal_type
        self.goal_name = goal_name
        self.description = description
        self.target_value = target_value
        self.target_unit = target_unit
        self.starting_value = starting_value
        self.current_value = current_value
        self.start_date = start_date
        self.target_date = target_date
        self.status = status
        self.progress_percentage = progress_percentage
        self.achieved_date = achieved_date
        self.notes = notes
        self.created_at = created_at or now_iso()
        self.updated_at = updated_at or self.created_at

    def __repr__(self) -> str:
        return f"CustomerGoal({self.goal_name!r}, {self.progress_percentage}%, {self.status})"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CustomerGoal":
        return CustomerGoal(
            id=data.get('id'),
            customer_id=data['customerId'],
            goal_type=data.get('goalType', ''),
            goal_name=data.get('goalName', ''),
            description=data.get('description'),
            target_value=data.get('targetValue'),
            target_unit=data.get('targetUnit', ''),
            starting_value=data.get('startingValue'),
            current_value=data.get('currentValue'),
            start_date=data.get('startDate'),
            target_date=data.get('targetDate'),
            status=data.get('status', 'active'),
            progress_percentage=data.get('progressPercentage', 0),
            achieved_date=data.get('achievedDate'),
            notes=data.get('notes'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'goalType': self.goal_type,
            'goalName': self.goal_name,
            'description': self.description,
            'targetValue': self.target_value,
            'targetUnit': self.target_unit,
            'startingValue': self.starting_value,
            'currentValue': self.current_value,
            'startDate': self.start_date,
            'targetDate': self.target_date,
            'status': self.status,
            'progressPercentage': self.progress_percentage,
            'achievedDate': self.achieved_date,
            'notes': self.notes,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
