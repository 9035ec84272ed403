"""Body measurement recorded by a customer. Measurements are append-only."""
from typing import Any, Dict, Optional

from fitmeal.domain.common import new_id, now_iso

_METRICS = (
    ('weight_kg', 'weightKg'),
    ('weight_lbs', 'weightLbs'),
    ('body_fat_percentage', 'bodyFatPercentage'),
    ('waist_cm', 'waistCm'),
    ('chest_cm', 'chestCm'),
    ('hips_cm', 'hipsCm'),
)


class ProgressMeasurement:
    def __init__(self, customer_id: str, measurement_date: str, weight_kg: Optional[float] = None,
                 weight_lbs: Optional[float] = None, body_fat_percentage: Optional[float] = None,
                 waist_cm: Optional[float] = None, chest_cm: Optional[float] = None,
                 hips_cm: Optional[float] = None, notes: Optional[str] = None,
                 id: Optional[str] = None, created_at: Optional[str] = None):
        self.id = id or new_id()
        self.customer_id = customer_id
        self.measurement_date = measurement_date
        self.weight_kg = weight_kg
        self.weight_lbs = weight_lbs
        self.body_fat_percentage = body_fat_percentage
        self.waist_cm = waist_cm
        self.chest_cm = chest_cm
        self.hips_cm = hips_cm
        self.notes = notes
        self.created_at = created_at or now_iso()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ProgressMeasurement":
        metrics = {attr: data.get(key) for attr, key in _METRICS}
        return ProgressMeasurement(
            id=data.get('id'),
            customer_id=data['customerId'],
            measurement_date=data['measurementDate'],
            notes=data.get('notes'),
            created_at=data.get('createdAt'),
            **metrics,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'customerId': self.customer_id,
            'measurementDate': self.measurement_date,
        }
        for attr, key in _METRICS:
            data[key] = getattr(self, attr)
        data['notes'] = self.notes
        data['createdAt'] = self.created_at
        return data
