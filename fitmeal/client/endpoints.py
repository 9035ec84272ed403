"""URL selection for role-dependent endpoints."""


def recipe_url(role: str, recipe_id: str) -> str:
    """Admins read recipes through the admin API, everyone else through the public one."""
    if role == "admin":
        return f"/api/admin/recipes/{recipe_id}"
    return f"/api/recipes/{recipe_id}"


def protocol_create_url(role: str) -> str:
    if role == "admin":
        return "/api/admin/protocols"
    return "/api/trainer/protocols"


def customer_url(customer_id: str) -> str:
    return f"/api/trainer/customers/{customer_id}"


def customer_measurements_url(customer_id: str) -> str:
    return f"{customer_url(customer_id)}/measurements"


def customer_goals_url(customer_id: str) -> str:
    return f"{customer_url(customer_id)}/goals"


def customer_meal_plans_url(customer_id: str) -> str:
    return f"{customer_url(customer_id)}/meal-plans"


def customer_meal_plan_url(customer_id: str, assignment_id: str) -> str:
    return f"{customer_meal_plans_url(customer_id)}/{assignment_id}"


def customer_protocols_url(customer_id: str) -> str:
    return f"{customer_url(customer_id)}/protocols"


def protocol_assign_url(protocol_id: str) -> str:
    return f"/api/trainer/protocols/{protocol_id}/assign"


def meal_plan_pdf_url(assignment_id: str) -> str:
    return f"/api/pdf/export/meal-plan/{assignment_id}"
