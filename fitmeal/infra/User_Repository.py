import logging
from typing import Any, Dict, List, Optional

from fitmeal.domain.common import now_iso
from fitmeal.domain.User import User
from fitmeal.infra import json_store
from fitmeal.infra.paths import TRAINER_CUSTOMERS_FILE, USERS_FILE

logger = logging.getLogger(__name__)


class UserRepository:
    """Users plus the trainer -> customer links."""

    def list_all(self, role: Optional[str] = None) -> List[User]:
        users = [User.from_dict(entry) for entry in json_store.load(USERS_FILE)]
        if role is not None:
            users = [u for u in users if u.role == role]
        return users

    def get(self, user_id: str) -> Optional[User]:
        for entry in json_store.load(USERS_FILE):
            if entry.get('id') == user_id:
                return User.from_dict(entry)
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        needle = email.strip().lower()
        for entry in json_store.load(USERS_FILE):
            if entry.get('email', '').lower() == needle:
                return User.from_dict(entry)
        return None

    def add(self, user: User) -> User:
        with json_store.editing(USERS_FILE) as users:
            if any(u.get('email', '').lower() == user.email for u in users):
                raise ValueError(f"User with email {user.email} already exists")
            users.append(user.to_dict())
        logger.info(f"Created {user.role} account {user.email}")
        return user

    def save(self, user: User) -> None:
        user.updated_at = now_iso()
        with json_store.editing(USERS_FILE) as users:
            for i, entry in enumerate(users):
                if entry.get('id') == user.id:
                    users[i] = user.to_dict()
                    return
            users.append(user.to_dict())

    # --- trainer/customer links ---
    def link_customer(self, trainer_id: str, customer_id: str) -> Dict[str, Any]:
        link = {'trainerId': trainer_id, 'customerId': customer_id, 'assignedAt': now_iso()}
        with json_store.editing(TRAINER_CUSTOMERS_FILE) as links:
            if any(l['trainerId'] == trainer_id and l['customerId'] == customer_id for l in links):
                raise ValueError("Customer already linked to trainer")
            links.append(link)
        logger.info(f"Linked customer {customer_id} to trainer {trainer_id}")
        return link

    def links_for_trainer(self, trainer_id: str) -> List[Dict[str, Any]]:
        return [l for l in json_store.load(TRAINER_CUSTOMERS_FILE) if l.get('trainerId') == trainer_id]

    def customer_ids_for(self, trainer_id: str) -> List[str]:
        return [l['customerId'] for l in self.links_for_trainer(trainer_id)]

    def trainer_ids_for(self, customer_id: str) -> List[str]:
        return [l['trainerId'] for l in json_store.load(TRAINER_CUSTOMERS_FILE)
                if l.get('customerId') == customer_id]

    def is_linked(self, trainer_id: str, customer_id: str) -> bool:
        return customer_id in self.customer_ids_for(trainer_id)
