"""Input sanitization and validation helpers for protocol forms.

Used by the API client before sending data and by the pydantic validators on
the server, which stay authoritative.
"""
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fitmeal.utilities.constants import INTENSITIES

_SCRIPT_STYLE_RE = re.compile(r'<(script|style)\b[^>]*>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'<[^>]*>')
_UNSAFE_CHARS_RE = re.compile(r'[<>"\'&]')
_EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

PROTOCOL_NAME_MAX = 100
DESCRIPTION_MAX = 1000


def sanitize_html(value: str) -> str:
    """Strip every HTML tag, keeping text content. Script/style bodies are dropped."""
    if not value:
        return ""
    without_blocks = _SCRIPT_STYLE_RE.sub('', value)
    return _TAG_RE.sub('', without_blocks).strip()


def sanitize_protocol_name(value: str) -> str:
    cleaned = _UNSAFE_CHARS_RE.sub('', sanitize_html(value))
    return cleaned[:PROTOCOL_NAME_MAX]


def sanitize_description(value: str) -> str:
    return sanitize_html(value)[:DESCRIPTION_MAX]


def sanitize_string_list(values: Optional[List[str]]) -> List[str]:
    """Sanitize every entry and drop the ones left empty."""
    result = []
    for item in values or []:
        cleaned = sanitize_html(str(item))
        if cleaned:
            result.append(cleaned)
    return result


def validate_email(email: str) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def validate_number(value: Any, min_value: Optional[float] = None, max_value: Optional[float] = None) -> bool:
    if isinstance(value, bool):
        return False
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    if num != num:  # NaN
        return False
    if min_value is not None and num < min_value:
        return False
    if max_value is not None and num > max_value:
        return False
    return True


def validate_required(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    if isinstance(value, (list, tuple, set, dict)) and len(value) == 0:
        return False
    return True


def validate_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        return True
    except ValueError:
        return False


def validate_duration(duration: Any) -> bool:
    return validate_number(duration, 1, 365)


def validate_intensity(intensity: Any) -> bool:
    return isinstance(intensity, str) and intensity.lower() in INTENSITIES


def validate_protocol_form(data: Dict[str, Any]) -> Dict[str, str]:
    """Validate protocol form data.

    Returns a mapping of field name to error message; an empty dict means the
    form is valid. The ``requires_*`` flags switch on the wizard-only checks.
    """
    errors: Dict[str, str] = {}

    name = data.get('name')
    if not validate_required(name):
        errors['name'] = 'Protocol name is required'
    elif len(name) < 3:
        errors['name'] = 'Protocol name must be at least 3 characters'
    elif len(name) > PROTOCOL_NAME_MAX:
        errors['name'] = 'Protocol name must be less than 100 characters'

    description = data.get('description')
    if description and len(description) > DESCRIPTION_MAX:
        errors['description'] = 'Description must be less than 1000 characters'

    if data.get('requires_type') and not validate_required(data.get('type')):
        errors['type'] = 'Protocol type is required'

    if data.get('duration') and not validate_duration(data['duration']):
        errors['duration'] = 'Duration must be between 1 and 365 days'

    if data.get('intensity') and not validate_intensity(data['intensity']):
        errors['intensity'] = 'Invalid intensity level'

    if data.get('requires_client') and not validate_required(data.get('client')):
        errors['client'] = 'Please select a client'

    if data.get('requires_template') and not validate_required(data.get('template')):
        errors['template'] = 'Please select a template'

    if data.get('requires_goals') and not data.get('goals'):
        errors['goals'] = 'Please select at least one health goal'

    return errors


def has_errors(errors: Dict[str, str]) -> bool:
    return len(errors) > 0


def sanitize_protocol_form(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the form data with every free-text field sanitized."""
    cleaned = dict(data)
    cleaned['name'] = sanitize_protocol_name(data['name']) if data.get('name') else ''
    cleaned['description'] = sanitize_description(data['description']) if data.get('description') else ''
    for key in ('goals', 'conditions', 'medications', 'allergies'):
        cleaned[key] = sanitize_string_list(data.get(key))
    cleaned['notes'] = sanitize_description(data['notes']) if data.get('notes') else ''
    return cleaned
