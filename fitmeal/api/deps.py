"""Request dependencies: current user resolution and role checks."""
import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fitmeal.domain.User import User
from fitmeal.infra.MealPlan_Repository import MealPlanRepository
from fitmeal.infra.Progress_Repository import ProgressRepository
from fitmeal.infra.Protocol_Repository import ProtocolRepository
from fitmeal.infra.Recipe_Repository import RecipeRepository
from fitmeal.infra.Token_Repository import RefreshTokenRepository
from fitmeal.infra.User_Repository import UserRepository
from fitmeal.logic.auth.tokens import ACCESS, TokenError, decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Repositories are stateless; paths are resolved on every call.
users = UserRepository()
refresh_tokens = RefreshTokenRepository()
progress = ProgressRepository()
meal_plans = MealPlanRepository()
protocols = ProtocolRepository()
recipes = RecipeRepository()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def user_from_token(token: Optional[str]) -> Optional[User]:
    """Resolve an access token to a user, or None when it is unusable."""
    if not token:
        return None
    try:
        payload = decode_token(token, ACCESS)
    except TokenError:
        return None
    return users.get(payload.get("sub", ""))


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """Authenticated user from the bearer header or the ``token`` cookie."""
    token = credentials.credentials if credentials else request.cookies.get("token")
    if not token:
        raise _unauthorized("Authentication required")
    try:
        payload = decode_token(token, ACCESS)
    except TokenError as e:
        raise _unauthorized("Token expired" if e.expired else "Invalid token")
    user = users.get(payload.get("sub", ""))
    if user is None:
        raise _unauthorized("User not found")
    return user


def require_role(*roles: str) -> Callable:
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"{user.role} {user.id} denied; requires {', '.join(roles)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user
    return checker


def ensure_linked_customer(trainer: User, customer_id: str) -> User:
    """The customer must exist and be linked to the trainer (404 otherwise)."""
    customer = users.get(customer_id)
    if customer is None or customer.role != "customer" or not users.is_linked(trainer.id, customer_id):
        raise HTTPException(status_code=404, detail="Customer not found or access denied")
    return customer
