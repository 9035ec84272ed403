"""User account entity (admin, trainer or customer)."""
from typing import Any, Dict, Optional

from fitmeal.domain.common import new_id, now_iso


class User:
    def __init__(self, email: str, password_hash: str, role: str, name: Optional[str] = None,
                 profile_picture: Optional[str] = None, id: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or new_id()
        self.email = email.strip().lower()
        self.password_hash = password_hash
        self.role = role
        self.name = name
        self.profile_picture = profile_picture
        self.created_at = created_at or now_iso()
        self.updated_at = updated_at or self.created_at

    def __repr__(self) -> str:
        return f"User({self.email!r}, role={self.role!r})"

    @property
    def display_name(self) -> str:
        return self.name or self.email.split('@')[0]

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "User":
        return User(
            id=data.get('id'),
            email=data.get('email', ''),
            password_hash=data.get('passwordHash', ''),
            role=data.get('role', 'customer'),
            name=data.get('name'),
            profile_picture=data.get('profilePicture'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'passwordHash': self.password_hash,
            'role': self.role,
            'name': self.name,
            'profilePicture': self.profile_picture,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Same as to_dict without the password hash."""
        data = self.to_dict()
        data.pop('passwordHash')
        return data
