import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials

from fitmeal.api.deps import get_current_user, refresh_tokens, security, user_from_token, users
from fitmeal.domain.User import User
from fitmeal.domain.common import utc_now
from fitmeal.logic.auth.passwords import hash_password, verify_password
from fitmeal.logic.auth.throttle import LoginThrottle
from fitmeal.logic.auth.tokens import REFRESH, TokenError, create_access_token, create_refresh_token, decode_token
from fitmeal.utilities import config
from fitmeal.utilities.validators import LoginInput, RefreshInput, RegisterInput

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)

login_throttle = LoginThrottle()


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str, refresh_expires: datetime):
    response.set_cookie(
        "token", access_token, httponly=True, secure=config.COOKIE_SECURE, samesite="lax",
        max_age=config.ACCESS_TOKEN_TTL_MINUTES * 60,
    )
    response.set_cookie(
        "refreshToken", refresh_token, httponly=True, secure=config.COOKIE_SECURE, samesite="lax",
        expires=refresh_expires,
    )


def _issue_tokens(user: User, response: Response) -> str:
    access_token = create_access_token(user.id, user.role)
    refresh_token, expires_at = create_refresh_token(user.id, user.role)
    refresh_tokens.add(refresh_token, user.id, expires_at.isoformat())
    _set_auth_cookies(response, access_token, refresh_token, expires_at)
    return access_token


@router.post("/register", status_code=201)
def register(
    payload: RegisterInput,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    if users.get_by_email(payload.email):
        raise HTTPException(status_code=409, detail="User already exists")
    if payload.role == "admin":
        requester = user_from_token(credentials.credentials if credentials else None)
        if requester is None or requester.role != "admin":
            raise HTTPException(status_code=403, detail="Only existing admins can create new admin accounts")

    user = User(email=payload.email, password_hash=hash_password(payload.password),
                role=payload.role, name=payload.name)
    try:
        users.add(user)
    except ValueError:
        raise HTTPException(status_code=409, detail="User already exists")
    access_token = _issue_tokens(user, response)
    return {"status": "success", "data": {"accessToken": access_token, "user": user.to_public_dict()}}


@router.post("/login")
def login(payload: LoginInput, response: Response):
    if not login_throttle.allowed(payload.email):
        logger.warning(f"Login locked for {payload.email}")
        raise HTTPException(status_code=429, detail="Too many failed attempts. Please try again later.")

    user = users.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        login_throttle.record_failure(payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    login_throttle.reset(payload.email)
    access_token = _issue_tokens(user, response)
    logger.info(f"User {user.email} logged in")
    return {"status": "success", "data": {"accessToken": access_token, "user": user.to_public_dict()}}


@router.post("/refresh_token")
def refresh_access_token(request: Request, response: Response, payload: Optional[RefreshInput] = Body(None)):
    """New access token from the refresh cookie (or a JSON ``refreshToken`` field)."""
    token = request.cookies.get("refreshToken") or (payload.refresh_token if payload else None)
    if not token:
        raise HTTPException(status_code=401, detail="Refresh token not found")

    try:
        claims = decode_token(token, REFRESH)
    except TokenError as e:
        if e.expired:
            refresh_tokens.delete(token)
            raise HTTPException(status_code=403, detail="Refresh token expired")
        raise HTTPException(status_code=403, detail="Invalid refresh token")

    stored = refresh_tokens.get(token)
    if stored is None:
        raise HTTPException(status_code=403, detail="Refresh token not found in store")
    if datetime.fromisoformat(stored["expiresAt"]) < utc_now():
        refresh_tokens.delete(token)
        raise HTTPException(status_code=403, detail="Refresh token expired")

    user = users.get(claims.get("sub", ""))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    access_token = create_access_token(user.id, user.role)
    response.set_cookie(
        "token", access_token, httponly=True, secure=config.COOKIE_SECURE, samesite="lax",
        max_age=config.ACCESS_TOKEN_TTL_MINUTES * 60,
    )
    logger.info(f"Refreshed access token for {user.email}")
    return {"status": "success", "data": {"accessToken": access_token}}


@router.post("/logout")
def logout(request: Request, response: Response):
    token = request.cookies.get("refreshToken")
    if token:
        refresh_tokens.delete(token)
    response.delete_cookie("refreshToken")
    response.delete_cookie("token")
    return {"status": "success", "message": "Logged out successfully"}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"status": "success", "data": {"user": user.to_public_dict()}}
