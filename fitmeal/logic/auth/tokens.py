"""JWT access and refresh tokens (PyJWT, HS256)."""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import uuid4

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from fitmeal.domain.common import utc_now
from fitmeal.utilities import config

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Token could not be decoded, is of the wrong type, or is expired."""

    def __init__(self, message: str, expired: bool = False):
        super().__init__(message)
        self.expired = expired


def _encode(user_id: str, role: str, token_type: str, lifetime: timedelta,
            now: Optional[datetime] = None) -> str:
    issued = now or utc_now()
    payload = {
        "sub": user_id,
        "role": role,
        "type": token_type,
        "iat": issued,
        "exp": issued + lifetime,
        "jti": uuid4().hex,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def create_access_token(user_id: str, role: str, now: Optional[datetime] = None) -> str:
    return _encode(user_id, role, ACCESS, timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES), now)


def create_refresh_token(user_id: str, role: str, now: Optional[datetime] = None) -> tuple[str, datetime]:
    """Returns (token, expires_at)."""
    issued = now or utc_now()
    lifetime = timedelta(days=config.REFRESH_TOKEN_TTL_DAYS)
    return _encode(user_id, role, REFRESH, lifetime, issued), issued + lifetime


def decode_token(token: str, expected_type: str = ACCESS) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenError("Token expired", expired=True)
    except InvalidTokenError as e:
        logger.warning(f"Rejected {expected_type} token: {e}")
        raise TokenError("Invalid token")
    if payload.get("type") != expected_type:
        raise TokenError(f"Expected {expected_type} token")
    return payload
