import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fitmeal.client import endpoints
from fitmeal.client.api_client import ApiClient
from fitmeal.client.errors import ValidationError

logger = logging.getLogger(__name__)

EXPORT_PATH = "/api/pdf/export"


async def export_meal_plan_pdf(client: ApiClient, directory, meal_plan_data: Optional[Dict[str, Any]] = None,
                               assignment_id: Optional[str] = None, customer_name: Optional[str] = None,
                               options: Optional[Dict[str, Any]] = None) -> Path:
    """Download a meal plan PDF into ``directory`` and return the written path.

    Pass either the plan itself or the id of an assigned plan.
    """
    if assignment_id:
        filename, content = await client.download("POST", endpoints.meal_plan_pdf_url(assignment_id),
                                                  json=options or None, default_filename="meal-plan.pdf")
    elif meal_plan_data:
        body: Dict[str, Any] = {"mealPlanData": meal_plan_data}
        if customer_name:
            body["customerName"] = customer_name
        if options:
            body["options"] = options
        filename, content = await client.download("POST", EXPORT_PATH, json=body,
                                                  default_filename="meal-plan.pdf")
    else:
        raise ValidationError("Meal plan data is required")

    target = Path(directory) / Path(filename).name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info(f"Saved meal plan PDF to {target}")
    return target
