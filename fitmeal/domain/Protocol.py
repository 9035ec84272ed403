"""Health protocols, the templates they are derived from, and their assignments."""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from fitmeal.domain.common import new_id, now_iso


class HealthProtocol:
    def __init__(self, trainer_id: str, name: str, description: str = "", type: str = "general",
                 duration: int = 30, intensity: str = "moderate",
                 config: Optional[Dict[str, Any]] = None, tags: Optional[List[str]] = None,
                 id: Optional[str] = None, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        self.id = id or new_id()
        self.trainer_id = trainer_id
        self.name = name
        self.description = description
        self.type = type
        self.duration = duration
        self.intensity = intensity
        self.config = dict(config or {})
        self.tags = list(tags or [])
        self.created_at = created_at or now_iso()
        self.updated_at = updated_at or self.created_at

    def __repr__(self) -> str:
        return f"HealthProtocol({self.name!r}, {self.duration}d, {self.intensity})"

    def update(self, changes: Dict[str, Any]) -> None:
        """Apply a partial update (snake_case keys, None values ignored)."""
        for key in ('name', 'description', 'type', 'duration', 'intensity', 'config', 'tags'):
            if changes.get(key) is not None:
                setattr(self, key, changes[key])
        self.updated_at = now_iso()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "HealthProtocol":
        return HealthProtocol(
            id=data.get('id'),
            trainer_id=data.get('trainerId'),
            name=data.get('name', ''),
            description=data.get('description', ''),
            type=data.get('type', 'general'),
            duration=data.get('duration', 30),
            intensity=data.get('intensity', 'moderate'),
            config=data.get('config'),
            tags=data.get('tags'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'trainerId': self.trainer_id,
            'name': self.name,
            'description': self.description,
            'type': self.type,
            'duration': self.duration,
            'intensity': self.intensity,
            'config': self.config,
            'tags': self.tags,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }


class ProtocolTemplate:
    def __init__(self, name: str, description: str = "", template_type: str = "general",
                 category: str = "general", default_duration: int = 30,
                 default_intensity: str = "moderate", base_config: Optional[Dict[str, Any]] = None,
                 created_by: Optional[str] = None, id: Optional[str] = None,
                 created_at: Optional[str] = None):
        self.id = id or new_id()
        self.name = name
        self.description = description
        self.template_type = template_type
        self.category = category
        self.default_duration = default_duration
        self.default_intensity = default_intensity
        self.base_config = dict(base_config or {})
        self.created_by = created_by
        self.created_at = created_at or now_iso()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ProtocolTemplate":
        return ProtocolTemplate(
            id=data.get('id'),
            name=data.get('name', ''),
            description=data.get('description', ''),
            template_type=data.get('templateType', 'general'),
            category=data.get('category', 'general'),
            default_duration=data.get('defaultDuration', 30),
            default_intensity=data.get('defaultIntensity', 'moderate'),
            base_config=data.get('baseConfig'),
            created_by=data.get('createdBy'),
            created_at=data.get('createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'templateType': self.template_type,
            'category': self.category,
            'defaultDuration': self.default_duration,
            'defaultIntensity': self.default_intensity,
            'baseConfig': self.base_config,
            'createdBy': self.created_by,
            'createdAt': self.created_at,
        }


class ProtocolAssignment:
    def __init__(self, protocol_id: str, customer_id: str, trainer_id: str, start_date: str,
                 end_date: Optional[str] = None, status: str = "active",
                 notes: Optional[str] = None, id: Optional[str] = None,
                 assigned_at: Optional[str] = None):
        self.id = id or new_id()
        self.protocol_id = protocol_id
        self.customer_id = customer_id
        self.trainer_id = trainer_id
        self.status = status
        self.start_date = start_date
        self.end_date = end_date
        self.notes = notes
        self.assigned_at = assigned_at or now_iso()

    @staticmethod
    def create(protocol: HealthProtocol, customer_id: str, trainer_id: str,
               start: Optional[date] = None, notes: Optional[str] = None) -> "ProtocolAssignment":
        """New active assignment ending ``protocol.duration`` days after start."""
        start = start or date.today()
        end = start + timedelta(days=int(protocol.duration))
        return ProtocolAssignment(
            protocol_id=protocol.id,
            customer_id=customer_id,
            trainer_id=trainer_id,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            notes=notes,
        )

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ProtocolAssignment":
        return ProtocolAssignment(
            id=data.get('id'),
            protocol_id=data['protocolId'],
            customer_id=data['customerId'],
            trainer_id=data.get('trainerId'),
            status=data.get('status', 'active'),
            start_date=data.get('startDate'),
            end_date=data.get('endDate'),
            notes=data.get('notes'),
            assigned_at=data.get('assignedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'protocolId': self.protocol_id,
            'customerId': self.customer_id,
            'trainerId': self.trainer_id,
            'status': self.status,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'notes': self.notes,
            'assignedAt': self.assigned_at,
        }
