"""Protocol generation from a template and wizard inputs.

The template's base config is customised with the client's goals,
conditions, medications, intensity and duration. When OPENAI_API_KEY is set
the model adds recommendations; otherwise a deterministic rule set is used.
"""
import json
import logging
import re
from json import JSONDecodeError
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from fitmeal.domain.Protocol import ProtocolTemplate
from fitmeal.utilities import config
from fitmeal.utilities.constants import PROTOCOL_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)

INTENSITY_NOTES = {
    'gentle': 'Introduce changes gradually over the first two weeks',
    'low': 'Keep changes small and sustainable',
    'moderate': 'Apply changes consistently with one rest day per week',
    'high': 'Expect a demanding schedule; review progress weekly',
    'intensive': 'Maximum adherence required; schedule check-ins twice a week',
}

GOAL_RECOMMENDATIONS = {
    'weight': 'Track body weight at the same time each morning',
    'muscle': 'Spread protein intake evenly across meals',
    'energy': 'Keep a consistent sleep and wake time',
    'sleep': 'Avoid screens and caffeine in the evening',
    'digest': 'Increase fibre and water intake gradually',
    'inflammation': 'Favour oily fish, leafy greens and berries',
    'stress': 'Schedule ten minutes of breathing exercises daily',
}


def _get_openai_client() -> Optional[OpenAI]:
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not config.OPENAI_API_KEY:
        return None
    return OpenAI(api_key=config.OPENAI_API_KEY)


def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def parse_recommendations(raw: str) -> List[str]:
    """Pull a list of strings out of a model response; [] when nothing usable."""
    cleaned = _remove_trailing_commas(_strip_code_fences(raw or ''))
    match = re.search(r"\[.*\]", cleaned, flags=re.S)
    if not match:
        return []
    try:
        parsed = json.loads(match.group(0))
    except JSONDecodeError:
        logger.warning("AI recommendations were not valid JSON")
        return []
    return [str(item).strip() for item in parsed if isinstance(item, (str, int, float)) and str(item).strip()]


def rule_based_recommendations(goals: List[str], conditions: List[str], intensity: str) -> List[str]:
    recommendations = [INTENSITY_NOTES.get(intensity, INTENSITY_NOTES['moderate'])]
    for goal in goals:
        lowered = goal.lower()
        for key, text in GOAL_RECOMMENDATIONS.items():
            if key in lowered and text not in recommendations:
                recommendations.append(text)
    if conditions:
        recommendations.append('Review this protocol with the client\'s healthcare provider')
    recommendations.append('Stay hydrated throughout the protocol')
    return recommendations


def _ai_recommendations(protocol: Dict[str, Any], extra_prompt: Optional[str]) -> Optional[List[str]]:
    client = _get_openai_client()
    if client is None:
        return None
    prompt = PROTOCOL_PROMPT_TEMPLATE + json.dumps(protocol, ensure_ascii=False)
    if extra_prompt:
        prompt += "\n\nTrainer notes: " + extra_prompt
    try:
        response = client.responses.create(model=config.OPENAI_MODEL, input=prompt)
    except OpenAIError:
        logger.exception("AI protocol generation failed; using rule-based recommendations")
        return None
    return parse_recommendations(response.output_text or '') or None


def generate_protocol(template: Optional[ProtocolTemplate], inputs: Dict[str, Any]) -> Dict[str, Any]:
    """Build a protocol document (not saved) from a template and wizard inputs.

    ``inputs`` uses the snake_case keys of ProtocolGenerateInput.
    """
    goals = list(inputs.get('health_goals') or [])
    conditions = list(inputs.get('conditions') or [])
    medications = list(inputs.get('medications') or [])
    allergies = list(inputs.get('allergies') or [])
    intensity = inputs.get('intensity') or (template.default_intensity if template else 'moderate')
    duration = int(inputs.get('duration') or (template.default_duration if template else 30))

    base = dict(template.base_config) if template else {}
    protocol_config = {
        **base,
        'healthGoals': goals,
        'conditions': conditions,
        'medications': medications,
        'allergies': allergies,
    }
    if inputs.get('client_age'):
        protocol_config['clientAge'] = inputs['client_age']
    if template:
        protocol_config['templateId'] = template.id

    protocol_type = template.template_type if template else (inputs.get('protocol_type') or 'general')
    name = inputs.get('name') or (f"{template.name} (Customized)" if template else 'Custom Health Protocol')
    description = (template.description if template else '') or f"{duration}-day {intensity} {protocol_type} protocol"

    protocol = {
        'name': name[:100],
        'description': description[:1000],
        'type': protocol_type,
        'duration': duration,
        'intensity': intensity,
        'config': protocol_config,
        'tags': [protocol_type, intensity] + (['template-generated'] if template else []),
    }

    recommendations = _ai_recommendations(protocol, inputs.get('natural_language_prompt'))
    protocol['aiGenerated'] = recommendations is not None
    if recommendations is None:
        recommendations = rule_based_recommendations(goals, conditions, intensity)
    protocol['config']['recommendations'] = recommendations
    protocol['personalizedFeatures'] = [
        label for label, present in (
            ('Goal-specific recommendations', goals),
            ('Condition-aware adjustments', conditions),
            ('Medication screening', medications),
            ('Allergy exclusions', allergies),
        ) if present
    ]
    logger.info(f"Generated protocol {protocol['name']!r} ({'AI' if protocol['aiGenerated'] else 'rules'})")
    return protocol
