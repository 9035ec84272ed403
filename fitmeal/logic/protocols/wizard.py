"""Protocol creation wizard steps and navigation.

Admins skip client selection, so their flow has seven steps; trainers start
with Client Selection and have eight.
"""
from typing import Any, Dict, List, Optional

ADMIN_STEPS = [
    'Template Selection',
    'Health Information',
    'Customization',
    'AI Generation',
    'Safety Validation',
    'Review & Finalize',
    'Save Options',
]
TRAINER_STEPS = ['Client Selection'] + ADMIN_STEPS


def get_wizard_steps(role: Optional[str]) -> List[Dict[str, Any]]:
    titles = ADMIN_STEPS if role == 'admin' else TRAINER_STEPS
    return [{'id': i, 'title': title} for i, title in enumerate(titles, start=1)]


class WizardValidationError(ValueError):
    def __init__(self, step: int, errors: Dict[str, str]):
        super().__init__(next(iter(errors.values())))
        self.step = step
        self.errors = errors


class ProtocolWizard:
    """Tracks the current step and the data collected so far."""

    def __init__(self, role: Optional[str]):
        self.role = role
        self.steps = get_wizard_steps(role)
        self.step = 1
        self.data: Dict[str, Any] = {
            'client': None,
            'template': None,
            'goals': [],
            'conditions': [],
            'medications': [],
            'ailments': [],
            'intensity': 'moderate',
            'duration': 30,
        }

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def _offset(self) -> int:
        return 0 if self.is_admin else 1

    @property
    def template_step(self) -> int:
        return 1 + self._offset()

    @property
    def health_step(self) -> int:
        return 2 + self._offset()

    @property
    def customization_step(self) -> int:
        return 3 + self._offset()

    @property
    def generation_step(self) -> int:
        return 4 + self._offset()

    @property
    def safety_step(self) -> int:
        return 5 + self._offset()

    @property
    def current_title(self) -> str:
        return self.steps[self.step - 1]['title']

    def update(self, **values: Any) -> None:
        self.data.update(values)

    def validate_step(self, step: Optional[int] = None) -> Dict[str, str]:
        """Errors blocking progress from ``step`` (defaults to the current one)."""
        step = step or self.step
        errors: Dict[str, str] = {}
        if not self.is_admin and step == 1 and not self.data.get('client'):
            errors['client'] = 'Please select a client'
        elif step == self.template_step and not self.data.get('template'):
            errors['template'] = 'Please select a template'
        elif step == self.health_step and not (
                self.data.get('conditions') or self.data.get('medications') or self.data.get('ailments')):
            errors['health'] = 'Please add at least one health condition, medication or ailment'
        elif step == self.customization_step and not self.data.get('goals'):
            errors['goals'] = 'Please select at least one health goal'
        return errors

    def next(self) -> int:
        errors = self.validate_step()
        if errors:
            raise WizardValidationError(self.step, errors)
        self.step = min(self.step + 1, self.total_steps)
        return self.step

    def back(self) -> int:
        self.step = max(self.step - 1, 1)
        return self.step

    def go_to(self, step: int) -> int:
        self.step = max(1, min(step, self.total_steps))
        return self.step
