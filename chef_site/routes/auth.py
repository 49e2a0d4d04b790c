"""
Authentication routes for the admin dashboard.
Login opens a server-side session referenced by a signed, httpOnly cookie.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Request, Response

from chef_site.config import settings
from chef_site.deps import get_auth_service, get_session_id, require_login
from chef_site.errors import ValidationError
from chef_site.schemas import CurrentUserResponse, LoginRequest, LoginResponse, MessageResponse, SessionUser
from chef_site.services.auth import AuthService
from chef_site.utils.rate_limit import RATE_LIMITS, limiter
from chef_site.utils.sessions import sign_session_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Log in with email and password.

    Args:
        request: Incoming request (used by the rate limiter)
        response: Outgoing response the session cookie is set on
        credentials: Email and password

    Returns:
        LoginResponse: Confirmation message and the signed-in user

    Raises:
        ValidationError: 400 if email or password is missing
        Unauthenticated: 401 "Invalid credentials" for an unknown email or a wrong password
    """
    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password are required")

    sid, user = await auth.login(credentials.email, credentials.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sign_session_id(sid, settings.SESSION_SECRET),
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return LoginResponse(message="Login successful", user=user)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    sid: Optional[str] = Depends(get_session_id),
    auth: AuthService = Depends(get_auth_service),
):
    """Destroy the current session (if any) and clear the cookie."""
    await auth.logout(sid)
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/me", response_model=CurrentUserResponse)
async def me(user: SessionUser = Depends(require_login)):
    """Return the signed-in user, or 401."""
    return CurrentUserResponse(user=user)
