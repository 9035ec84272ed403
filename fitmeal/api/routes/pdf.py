import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import ValidationError

from fitmeal.api.deps import get_current_user, meal_plans, users
from fitmeal.domain.User import User
from fitmeal.infra.pdf_utils import generate_meal_plan_pdf, pdf_filename
from fitmeal.utilities.validators import MealPlanInput, PdfExportInput, PdfExportOptions

router = APIRouter(prefix="/api/pdf", tags=["pdf"])
logger = logging.getLogger(__name__)


def _validated_plan(meal_plan_data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return MealPlanInput.model_validate(meal_plan_data).dump()
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        where = '.'.join(str(p) for p in first.get('loc', ()))
        raise HTTPException(status_code=400, detail=f"Invalid meal plan data: {where} {first.get('msg', '')}".strip())


def _pdf_response(meal_plan_data: Dict[str, Any], customer_name: Optional[str], options: PdfExportOptions) -> Response:
    pdf_bytes = generate_meal_plan_pdf(
        meal_plan_data,
        customer_name=customer_name,
        include_macro_summary=options.include_macro_summary,
        include_shopping_list=options.include_shopping_list,
        orientation=options.orientation,
        page_size=options.page_size,
    )
    filename = pdf_filename(customer_name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )


@router.post("/export")
def export_pdf(payload: PdfExportInput, user: User = Depends(get_current_user)):
    plan = _validated_plan(payload.meal_plan_data)
    customer_name = payload.customer_name or plan.get('clientName')
    logger.info(f"{user.role} {user.id} exported meal plan {plan.get('planName')!r}")
    return _pdf_response(plan, customer_name, payload.options)


@router.post("/export/meal-plan/{plan_id}")
def export_assigned_plan(plan_id: str, options: Optional[PdfExportOptions] = Body(None),
                         user: User = Depends(get_current_user)):
    """Trainers export plans of their customers, customers their own plans."""
    if user.role == 'admin':
        raise HTTPException(status_code=501, detail="Admin meal plan export is not implemented")
    assignment = meal_plans.get(plan_id)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    if user.role == 'customer':
        allowed = assignment.customer_id == user.id
    else:
        allowed = users.is_linked(user.id, assignment.customer_id)
    if not allowed:
        raise HTTPException(status_code=404, detail="Meal plan not found or access denied")

    plan = _validated_plan(assignment.meal_plan_data)
    customer = users.get(assignment.customer_id)
    customer_name = customer.display_name if customer else None
    return _pdf_response(plan, customer_name, options or PdfExportOptions())
