import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fitmeal.api.deps import progress, require_role
from fitmeal.domain.Goal import CustomerGoal
from fitmeal.domain.Measurement import ProgressMeasurement
from fitmeal.domain.User import User
from fitmeal.events.event_helpers import publish_goal_achieved, publish_measurement_recorded
from fitmeal.logic.progress.goals import apply_progress, calculate_progress
from fitmeal.utilities.constants import GOAL_STATUSES
from fitmeal.utilities.validators import GoalInput, GoalProgressInput, GoalStatusInput, MeasurementInput

router = APIRouter(prefix="/api/progress", tags=["progress"])
logger = logging.getLogger(__name__)

customer_only = require_role("customer")


# -------------------- Measurements --------------------
@router.get("/measurements")
def list_measurements(start_date: Optional[date] = Query(None, alias="startDate"),
                      end_date: Optional[date] = Query(None, alias="endDate"),
                      user: User = Depends(customer_only)):
    items = progress.list_measurements(user.id, start=start_date, end=end_date)
    return {'status': 'success', 'data': [m.to_dict() for m in items]}


@router.post("/measurements", status_code=201)
def add_measurement(payload: MeasurementInput, user: User = Depends(customer_only)):
    measurement = ProgressMeasurement(
        customer_id=user.id,
        measurement_date=payload.measurement_date.isoformat(),
        weight_kg=payload.weight_kg,
        weight_lbs=payload.weight_lbs,
        body_fat_percentage=payload.body_fat_percentage,
        waist_cm=payload.waist_cm,
        chest_cm=payload.chest_cm,
        hips_cm=payload.hips_cm,
        notes=payload.notes,
    )
    progress.add_measurement(measurement)
    publish_measurement_recorded(user.id, measurement.measurement_date)
    return {'status': 'success', 'data': measurement.to_dict()}


# -------------------- Goals --------------------
@router.get("/goals")
def list_goals(status: Optional[str] = None, user: User = Depends(customer_only)):
    if status is not None and status not in GOAL_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of {', '.join(GOAL_STATUSES)}")
    return {'status': 'success', 'data': [g.to_dict() for g in progress.list_goals(user.id, status)]}


@router.post("/goals", status_code=201)
def create_goal(payload: GoalInput, user: User = Depends(customer_only)):
    goal = CustomerGoal(
        customer_id=user.id,
        goal_type=payload.goal_type,
        goal_name=payload.goal_name,
        description=payload.description,
        target_value=payload.target_value,
        target_unit=payload.target_unit,
        starting_value=payload.starting_value,
        start_date=payload.start_date.isoformat(),
        target_date=payload.target_date.isoformat() if payload.target_date else None,
        notes=payload.notes,
    )
    achieved = False
    if payload.current_value is not None:
        achieved = apply_progress(goal, payload.current_value)
    else:
        goal.progress_percentage = calculate_progress(goal.starting_value, goal.target_value, goal.current_value)
    progress.add_goal(goal)
    if achieved:
        publish_goal_achieved(user.id, goal.id, goal.goal_name)
    return {'status': 'success', 'data': goal.to_dict()}


def _own_goal(goal_id: str, user: User) -> CustomerGoal:
    goal = progress.get_goal(goal_id, user.id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.patch("/goals/{goal_id}/progress")
def update_goal_progress(goal_id: str, payload: GoalProgressInput, user: User = Depends(customer_only)):
    goal = _own_goal(goal_id, user)
    achieved = apply_progress(goal, payload.current_value)
    progress.save_goal(goal)
    if achieved:
        logger.info(f"Customer {user.id} achieved goal {goal.goal_name!r}")
        publish_goal_achieved(user.id, goal.id, goal.goal_name)
    return {'status': 'success', 'data': goal.to_dict()}


@router.patch("/goals/{goal_id}/status")
def update_goal_status(goal_id: str, payload: GoalStatusInput, user: User = Depends(customer_only)):
    goal = _own_goal(goal_id, user)
    goal.status = payload.status
    progress.save_goal(goal)
    return {'status': 'success', 'data': goal.to_dict()}
