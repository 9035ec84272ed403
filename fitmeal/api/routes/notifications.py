from typing import Optional

from fastapi import APIRouter, Depends

from fitmeal.api.deps import get_current_user, users
from fitmeal.domain.User import User
from fitmeal.events.web_observers import get_events

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def notifications(since: Optional[int] = None, user: User = Depends(get_current_user)):
    """Recent domain events visible to the caller; poll again with since=next_cursor."""
    customer_ids = users.customer_ids_for(user.id) if user.role == 'trainer' else ()
    return get_events(since, user_id=user.id, role=user.role, customer_ids=set(customer_ids))
