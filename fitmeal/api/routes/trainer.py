import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response

from fitmeal.api.deps import ensure_linked_customer, meal_plans, progress, protocols, require_role, users
from fitmeal.domain.Protocol import HealthProtocol, ProtocolAssignment
from fitmeal.domain.User import User
from fitmeal.events.event_helpers import publish_meal_plan_assigned, publish_protocol_assigned
from fitmeal.logic.protocols.generator import generate_protocol
from fitmeal.utilities.validators import (
    AssignMealPlanInput,
    CustomerProtocolInput,
    LinkCustomerInput,
    ProtocolAssignInput,
    ProtocolGenerateInput,
    ProtocolInput,
    ProtocolUpdate,
)

router = APIRouter(prefix="/api/trainer", tags=["trainer"])
logger = logging.getLogger(__name__)

trainer_only = require_role("trainer")


def _owned_protocol(protocol_id: str, trainer: User) -> HealthProtocol:
    protocol = protocols.get(protocol_id)
    if protocol is None or protocol.trainer_id != trainer.id:
        raise HTTPException(status_code=404, detail="Protocol not found or access denied")
    return protocol


def _assignment_with_protocol(assignment: ProtocolAssignment) -> Dict[str, Any]:
    data = assignment.to_dict()
    protocol = protocols.get(assignment.protocol_id)
    data['protocol'] = protocol.to_dict() if protocol else None
    return data


# -------------------- Customers --------------------
@router.get("/customers")
def list_customers(trainer: User = Depends(trainer_only)):
    assignments = protocols.list_assignments(trainer_id=trainer.id)
    customers = []
    for link in users.links_for_trainer(trainer.id):
        customer = users.get(link['customerId'])
        if customer is None:
            continue
        mine = [a for a in assignments if a.customer_id == customer.id]
        customers.append({
            'id': customer.id,
            'email': customer.email,
            'name': customer.name,
            'profilePicture': customer.profile_picture,
            'assignedAt': link['assignedAt'],
            'activeProtocols': sum(1 for a in mine if a.status == 'active'),
            'completedProtocols': sum(1 for a in mine if a.status == 'completed'),
            'mealPlanCount': meal_plans.count_for_customer(customer.id),
        })
    customers.sort(key=lambda c: c['assignedAt'], reverse=True)
    return {'customers': customers, 'total': len(customers)}


@router.post("/customers", status_code=201)
def link_customer(payload: LinkCustomerInput, trainer: User = Depends(trainer_only)):
    customer = users.get_by_email(payload.email)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    if customer.role != 'customer':
        raise HTTPException(status_code=400, detail="User is not a customer")
    try:
        link = users.link_customer(trainer.id, customer.id)
    except ValueError:
        raise HTTPException(status_code=409, detail="Customer already linked")
    return {'message': 'Customer linked successfully', 'customer': customer.to_public_dict(),
            'assignedAt': link['assignedAt']}


@router.get("/customers/{customer_id}")
def customer_detail(customer_id: str, trainer: User = Depends(trainer_only)):
    customer = ensure_linked_customer(trainer, customer_id)
    return {
        'customer': customer.to_public_dict(),
        'measurements': [m.to_dict() for m in progress.list_measurements(customer_id, limit=10)],
        'goals': [g.to_dict() for g in progress.list_goals(customer_id, status='active')],
        'protocolAssignments': [
            _assignment_with_protocol(a)
            for a in protocols.list_assignments(trainer_id=trainer.id, customer_id=customer_id)
        ],
    }


@router.get("/customers/{customer_id}/measurements")
def customer_measurements(customer_id: str, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    items = progress.list_measurements(customer_id)
    return {'status': 'success', 'data': [m.to_dict() for m in items]}


@router.get("/customers/{customer_id}/goals")
def customer_goals(customer_id: str, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    return {'status': 'success', 'data': [g.to_dict() for g in progress.list_goals(customer_id)]}


# -------------------- Meal plans --------------------
@router.get("/customers/{customer_id}/meal-plans")
def customer_meal_plans(customer_id: str, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    plans = meal_plans.list_for_customer(customer_id)
    return {'mealPlans': [p.to_dict() for p in plans], 'total': len(plans)}


@router.post("/customers/{customer_id}/meal-plans", status_code=201)
def assign_meal_plan(customer_id: str, payload: AssignMealPlanInput, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    plan_data = payload.meal_plan_data.dump()
    if payload.customer_context:
        plan_data['customerContext'] = payload.customer_context
    plan, replaced = meal_plans.assign(customer_id, trainer.id, plan_data)
    publish_meal_plan_assigned(trainer.id, customer_id, plan.plan_name, replaced)
    return {
        'message': 'Meal plan updated successfully' if replaced else 'Meal plan assigned successfully',
        'assignment': plan.to_dict(),
        'replaced': replaced,
    }


@router.delete("/customers/{customer_id}/meal-plans/{plan_id}")
def remove_meal_plan(customer_id: str, plan_id: str, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    if not meal_plans.delete(plan_id, customer_id):
        raise HTTPException(status_code=404, detail="Meal plan assignment not found")
    logger.info(f"Trainer {trainer.id} removed meal plan {plan_id} from customer {customer_id}")
    return {'message': 'Meal plan removed successfully'}


# -------------------- Protocols --------------------
@router.get("/customers/{customer_id}/protocols")
def customer_protocols(customer_id: str, trainer: User = Depends(trainer_only)):
    ensure_linked_customer(trainer, customer_id)
    assignments = protocols.list_assignments(trainer_id=trainer.id, customer_id=customer_id)
    return {'protocols': [_assignment_with_protocol(a) for a in assignments], 'total': len(assignments)}


@router.post("/customers/{customer_id}/protocols", status_code=201)
def create_customer_protocol(customer_id: str, payload: CustomerProtocolInput,
                             trainer: User = Depends(trainer_only)):
    """Create a protocol and assign it to the customer in one step."""
    ensure_linked_customer(trainer, customer_id)
    data = payload.protocol_data
    protocol = HealthProtocol(trainer_id=trainer.id, name=data.name, description=data.description,
                              type=data.type, duration=data.duration, intensity=data.intensity,
                              config=data.config, tags=data.tags)
    assignment = ProtocolAssignment.create(protocol, customer_id, trainer.id, payload.start_date, payload.notes)
    protocols.create_and_assign(protocol, assignment)
    publish_protocol_assigned(trainer.id, customer_id, protocol.id, protocol.name)
    return {'protocol': protocol.to_dict(), 'assignment': assignment.to_dict()}


@router.get("/protocols")
def list_protocols(trainer: User = Depends(trainer_only)):
    return [p.to_dict() for p in protocols.list_for_trainer(trainer.id)]


@router.post("/protocols", status_code=201)
def create_protocol(payload: ProtocolInput, trainer: User = Depends(trainer_only)):
    protocol = HealthProtocol(trainer_id=trainer.id, name=payload.name, description=payload.description,
                              type=payload.type, duration=payload.duration, intensity=payload.intensity,
                              config=payload.config, tags=payload.tags)
    return protocols.add(protocol).to_dict()


@router.post("/protocols/generate", status_code=201)
def generate_and_save_protocol(payload: ProtocolGenerateInput, trainer: User = Depends(trainer_only)):
    template = None
    if payload.template_id:
        template = protocols.get_template(payload.template_id)
        if template is None:
            raise HTTPException(status_code=404, detail="Protocol template not found")
    generated = generate_protocol(template, payload.model_dump())
    protocol = HealthProtocol(trainer_id=trainer.id, name=generated['name'],
                              description=generated['description'], type=generated['type'],
                              duration=generated['duration'], intensity=generated['intensity'],
                              config=generated['config'], tags=generated['tags'])
    protocols.add(protocol)
    return {'protocol': protocol.to_dict(), 'aiGenerated': generated['aiGenerated'],
            'personalizedFeatures': generated['personalizedFeatures']}


@router.put("/protocols/{protocol_id}")
def update_protocol(protocol_id: str, payload: ProtocolUpdate, trainer: User = Depends(trainer_only)):
    protocol = _owned_protocol(protocol_id, trainer)
    protocol.update(payload.model_dump(exclude_unset=True))
    protocols.save(protocol)
    return protocol.to_dict()


@router.delete("/protocols/{protocol_id}", status_code=204)
def delete_protocol(protocol_id: str, trainer: User = Depends(trainer_only)):
    _owned_protocol(protocol_id, trainer)
    protocols.delete(protocol_id)
    logger.info(f"Trainer {trainer.id} deleted protocol {protocol_id}")
    return Response(status_code=204)


@router.post("/protocols/{protocol_id}/assign")
def assign_protocol(protocol_id: str, payload: ProtocolAssignInput, trainer: User = Depends(trainer_only)):
    protocol = _owned_protocol(protocol_id, trainer)
    linked = set(users.customer_ids_for(trainer.id))
    invalid = [cid for cid in payload.client_ids if cid not in linked]
    if invalid:
        raise HTTPException(status_code=400, detail={
            'message': 'Some clients are not linked to this trainer',
            'invalidClientIds': invalid,
        })
    new_assignments: List[ProtocolAssignment] = [
        ProtocolAssignment.create(protocol, cid, trainer.id, payload.start_date, payload.notes)
        for cid in dict.fromkeys(payload.client_ids)
    ]
    protocols.add_assignments(new_assignments)
    for assignment in new_assignments:
        publish_protocol_assigned(trainer.id, assignment.customer_id, protocol.id, protocol.name)
    return {
        'message': f"Protocol assigned to {len(new_assignments)} client(s)",
        'assignments': [a.to_dict() for a in new_assignments],
    }


@router.get("/protocol-assignments")
def list_protocol_assignments(trainer: User = Depends(trainer_only)):
    return [_assignment_with_protocol(a) for a in protocols.list_assignments(trainer_id=trainer.id)]


@router.get("/profile/stats")
def trainer_stats(trainer: User = Depends(trainer_only)):
    assignments = protocols.list_assignments(trainer_id=trainer.id)
    return {
        'totalCustomers': len(users.customer_ids_for(trainer.id)),
        'totalProtocols': len(protocols.list_for_trainer(trainer.id)),
        'activeAssignments': sum(1 for a in assignments if a.status == 'active'),
        'totalAssignments': len(assignments),
        'totalMealPlans': meal_plans.count_by_trainer(trainer.id),
    }
