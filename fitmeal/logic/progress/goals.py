"""Goal progress rules."""
import math
from datetime import date
from typing import Optional

from fitmeal.domain.Goal import CustomerGoal
from fitmeal.domain.common import now_iso


def calculate_progress(starting_value: Optional[float], target_value: float, current_value: Optional[float]) -> int:
    """Percentage of the way from starting to target value.

    Works for decreasing targets too (200 -> 160, at 180 gives 50). Clamped to
    [0, 100], halves round up, and 0 when there is no distance to cover.
    """
    if starting_value is None or current_value is None:
        return 0
    if target_value == starting_value:
        return 0
    ratio = (current_value - starting_value) / (target_value - starting_value)
    percentage = math.floor(ratio * 100 + 0.5)
    return max(0, min(100, percentage))


def apply_progress(goal: CustomerGoal, current_value: float, today: Optional[date] = None) -> bool:
    """Record a new current value on the goal.

    Returns True when this update made the goal achieved. Status is left as it
    was when the goal is below 100%.
    """
    goal.current_value = current_value
    goal.progress_percentage = calculate_progress(goal.starting_value, goal.target_value, current_value)
    goal.updated_at = now_iso()
    if goal.progress_percentage >= 100 and goal.status != 'achieved':
        goal.status = 'achieved'
        goal.achieved_date = (today or date.today()).isoformat()
        return True
    return False
