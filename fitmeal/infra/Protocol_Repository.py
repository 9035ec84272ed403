import logging
from typing import Any, Dict, List, Optional

from fitmeal.domain.Protocol import HealthProtocol, ProtocolAssignment, ProtocolTemplate
from fitmeal.infra import json_store
from fitmeal.infra.paths import PROTOCOL_ASSIGNMENTS_FILE, PROTOCOL_TEMPLATES_FILE, PROTOCOLS_FILE

logger = logging.getLogger(__name__)

# Seeded on first read when the templates file is empty.
DEFAULT_TEMPLATES: List[Dict[str, Any]] = [
    {
        'name': 'Beginner Weight Loss Protocol',
        'description': 'A gentle introduction to weight loss focusing on sustainable habits and a moderate calorie reduction.',
        'templateType': 'ailments_based',
        'category': 'weight_loss',
        'defaultDuration': 90,
        'defaultIntensity': 'gentle',
        'baseConfig': {
            'calorieDeficit': 500,
            'macroRatio': {'protein': 25, 'carbs': 45, 'fat': 30},
            'exerciseFrequency': '3-4 times per week',
            'supplementation': ['multivitamin', 'omega-3'],
            'restrictions': ['processed_foods', 'sugary_drinks'],
            'hydrationGoal': '2.5L daily',
            'sleepTarget': '7-8 hours',
        },
    },
    {
        'name': 'Lean Muscle Building Protocol',
        'description': 'Structured muscle building program with nutrition optimised for lean mass gains.',
        'templateType': 'ailments_based',
        'category': 'muscle_gain',
        'defaultDuration': 120,
        'defaultIntensity': 'moderate',
        'baseConfig': {
            'calorieSurplus': 300,
            'macroRatio': {'protein': 30, 'carbs': 40, 'fat': 30},
            'exerciseFrequency': '5-6 times per week',
            'supplementation': ['whey_protein', 'creatine', 'vitamin_d'],
            'hydrationGoal': '3L daily',
            'sleepTarget': '8-9 hours',
        },
    },
    {
        'name': 'Metabolic Health Optimization',
        'description': 'Protocol focused on metabolic health, blood sugar regulation and overall vitality.',
        'templateType': 'ailments_based',
        'category': 'general',
        'defaultDuration': 120,
        'defaultIntensity': 'moderate',
        'baseConfig': {
            'nutritionFocus': 'metabolic_health',
            'macroRatio': {'protein': 25, 'carbs': 35, 'fat': 40},
            'supplementation': ['omega_3', 'magnesium', 'vitamin_d', 'chromium', 'berberine'],
            'restrictions': ['refined_sugars', 'trans_fats', 'processed_foods'],
            'glucoseMonitoring': True,
        },
    },
    {
        'name': 'Anti-Aging Longevity Protocol',
        'description': 'Longevity protocol built on mild caloric restriction, antioxidants and cellular health.',
        'templateType': 'longevity',
        'category': 'longevity',
        'defaultDuration': 180,
        'defaultIntensity': 'moderate',
        'baseConfig': {
            'caloricRestriction': 15,
            'macroRatio': {'protein': 25, 'carbs': 30, 'fat': 45},
            'supplementation': ['resveratrol', 'quercetin', 'omega_3', 'vitamin_d'],
            'intermittentFasting': '14:10',
            'stressManagement': ['meditation', 'yoga'],
        },
    },
]


class ProtocolRepository:
    """Trainer protocols, protocol templates and protocol assignments."""

    # --- protocols ---
    def add(self, protocol: HealthProtocol) -> HealthProtocol:
        with json_store.editing(PROTOCOLS_FILE) as items:
            items.append(protocol.to_dict())
        logger.info(f"Created protocol {protocol.name!r} for trainer {protocol.trainer_id}")
        return protocol

    def get(self, protocol_id: str) -> Optional[HealthProtocol]:
        for entry in json_store.load(PROTOCOLS_FILE):
            if entry.get('id') == protocol_id:
                return HealthProtocol.from_dict(entry)
        return None

    def list_for_trainer(self, trainer_id: str) -> List[HealthProtocol]:
        protocols = [HealthProtocol.from_dict(e) for e in json_store.load(PROTOCOLS_FILE)
                     if e.get('trainerId') == trainer_id]
        protocols.sort(key=lambda p: p.created_at, reverse=True)
        return protocols

    def save(self, protocol: HealthProtocol) -> None:
        with json_store.editing(PROTOCOLS_FILE) as items:
            for i, entry in enumerate(items):
                if entry.get('id') == protocol.id:
                    items[i] = protocol.to_dict()
                    return
            items.append(protocol.to_dict())

    def delete(self, protocol_id: str) -> bool:
        """Delete a protocol together with its assignments."""
        with json_store.locked():
            with json_store.editing(PROTOCOLS_FILE) as items:
                before = len(items)
                items[:] = [e for e in items if e.get('id') != protocol_id]
                removed = len(items) != before
            if removed:
                with json_store.editing(PROTOCOL_ASSIGNMENTS_FILE) as assignments:
                    assignments[:] = [a for a in assignments if a.get('protocolId') != protocol_id]
        return removed

    def create_and_assign(self, protocol: HealthProtocol, assignment: ProtocolAssignment) -> None:
        """Store a new protocol and its first assignment under one lock."""
        with json_store.locked():
            protocols = json_store.load(PROTOCOLS_FILE)
            assignments = json_store.load(PROTOCOL_ASSIGNMENTS_FILE)
            protocols.append(protocol.to_dict())
            assignments.append(assignment.to_dict())
            json_store.save(PROTOCOLS_FILE, protocols)
            try:
                json_store.save(PROTOCOL_ASSIGNMENTS_FILE, assignments)
            except OSError:
                logger.error(f"Failed to store assignment for protocol {protocol.id}; rolling back")
                json_store.save(PROTOCOLS_FILE, protocols[:-1])
                raise

    # --- assignments ---
    def add_assignments(self, new_assignments: List[ProtocolAssignment]) -> None:
        with json_store.editing(PROTOCOL_ASSIGNMENTS_FILE) as items:
            items.extend(a.to_dict() for a in new_assignments)

    def list_assignments(self, trainer_id: Optional[str] = None, customer_id: Optional[str] = None,
                         protocol_id: Optional[str] = None) -> List[ProtocolAssignment]:
        result = []
        for entry in json_store.load(PROTOCOL_ASSIGNMENTS_FILE):
            if trainer_id and entry.get('trainerId') != trainer_id:
                continue
            if customer_id and entry.get('customerId') != customer_id:
                continue
            if protocol_id and entry.get('protocolId') != protocol_id:
                continue
            result.append(ProtocolAssignment.from_dict(entry))
        result.sort(key=lambda a: a.assigned_at, reverse=True)
        return result

    # --- templates ---
    def list_templates(self, category: Optional[str] = None) -> List[ProtocolTemplate]:
        with json_store.locked():
            entries = json_store.load(PROTOCOL_TEMPLATES_FILE)
            if not entries:
                entries = [ProtocolTemplate.from_dict(t).to_dict() for t in DEFAULT_TEMPLATES]
                json_store.save(PROTOCOL_TEMPLATES_FILE, entries)
        templates = [ProtocolTemplate.from_dict(e) for e in entries]
        if category:
            templates = [t for t in templates if t.category == category]
        return templates

    def get_template(self, template_id: str) -> Optional[ProtocolTemplate]:
        for template in self.list_templates():
            if template.id == template_id:
                return template
        return None

    def add_template(self, template: ProtocolTemplate) -> ProtocolTemplate:
        self.list_templates()  # make sure defaults are seeded first
        with json_store.editing(PROTOCOL_TEMPLATES_FILE) as items:
            items.append(template.to_dict())
        return template
