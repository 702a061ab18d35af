"""
Authentication API Endpoints

Provides registration, login, token verification and the current-user
dependencies used by protected routes.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from backend.app.api.v1.responses import APIError, success, unwrap
from backend.app.db.session import get_session_generator
from backend.app.schemas.auth import AuthUserResponse
from backend.app.services.auth_service import AuthService
from backend.app.utils.security import extract_token_from_header

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

MISSING_HEADER = "Authorization header is required"
MALFORMED_HEADER = "Invalid authorization header format. Expected: Bearer <token>"


def get_auth_service(session: AsyncSession = Depends(get_session_generator)) -> AuthService:
    return AuthService(session)


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
    ) -> AuthUserResponse:
    """
    Dependency to get current authenticated user.
    Raises 401 if not authenticated.
    """
    if not authorization:
        raise APIError(401, MISSING_HEADER)

    token = extract_token_from_header(authorization)
    if token is None:
        logger.debug("Rejected authorization header", scheme=authorization.split(" ")[0])
        raise APIError(401, MALFORMED_HEADER)

    return unwrap(await auth_service.verify_token(token))


async def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
    ) -> Optional[AuthUserResponse]:
    """
    Dependency to get current user if authenticated, None otherwise.
    Does not raise exceptions.
    """
    try:
        return await get_current_user(authorization, auth_service)
    except APIError:
        return None


def _credential(body: Optional[Dict[str, Any]], name: str) -> Any:
    return body.get(name) if isinstance(body, dict) else None


@router.post("/register", status_code=201)
async def register(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
    ):
    """Register a new user and return {token, user}."""
    result = await auth_service.register(_credential(body, "email"), _credential(body, "password"))
    return success(unwrap(result))


@router.post("/login")
async def login(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
    ):
    """Authenticate with email and password and return {token, user}."""
    result = await auth_service.login(_credential(body, "email"), _credential(body, "password"))
    return success(unwrap(result))


@router.post("/verify")
async def verify(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
    ):
    """Resolve a token to its user."""
    token = _credential(body, "token")
    result = await auth_service.verify_token(token if isinstance(token, str) else None)
    return success(unwrap(result))


@router.get("/me")
async def get_me(current_user: AuthUserResponse = Depends(get_current_user)):
    """
    Get current authenticated user info.
    """
    return success(current_user)
