from fastapi import APIRouter, Depends, HTTPException

from fitmeal.api.deps import get_current_user, protocols, require_role
from fitmeal.domain.Protocol import ProtocolTemplate
from fitmeal.domain.User import User
from fitmeal.logic.protocols.generator import generate_protocol
from fitmeal.logic.protocols.safety import validate_safety
from fitmeal.logic.protocols.wizard import ProtocolWizard
from fitmeal.utilities.validators import ProtocolGenerateInput, SafetyCheckInput, TemplateInput

router = APIRouter(tags=["protocols"])

trainer_or_admin = require_role("trainer", "admin")


@router.get("/api/protocol-templates")
def list_templates(category: str = "", user: User = Depends(trainer_or_admin)):
    return [t.to_dict() for t in protocols.list_templates(category or None)]


@router.get("/api/protocol-templates/{template_id}")
def get_template(template_id: str, user: User = Depends(trainer_or_admin)):
    template = protocols.get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Protocol template not found")
    return template.to_dict()


@router.post("/api/protocol-templates", status_code=201)
def create_template(payload: TemplateInput, user: User = Depends(trainer_or_admin)):
    template = ProtocolTemplate(created_by=user.id, **payload.model_dump())
    return protocols.add_template(template).to_dict()


@router.post("/api/protocol-templates/{template_id}/generate")
def generate_from_template(template_id: str, payload: ProtocolGenerateInput,
                           user: User = Depends(trainer_or_admin)):
    """Customise a template with wizard inputs; nothing is saved."""
    template = protocols.get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Protocol template not found")
    return generate_protocol(template, payload.model_dump())


@router.post("/api/protocols/safety-check")
def safety_check(payload: SafetyCheckInput, user: User = Depends(trainer_or_admin)):
    return validate_safety(payload.medications, payload.conditions, payload.allergies, payload.protocol)


@router.get("/api/protocols/wizard/steps")
def wizard_steps(user: User = Depends(get_current_user)):
    wizard = ProtocolWizard(user.role)
    return {'steps': wizard.steps, 'generationStep': wizard.generation_step, 'safetyStep': wizard.safety_step}
