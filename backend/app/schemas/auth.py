"""
Authentication Schemas

Pydantic models for login/registration input and auth responses.
"""
from datetime import datetime
from typing import Annotated, ClassVar, Dict

from pydantic import BaseModel, BeforeValidator, Field

from backend.app.schemas.common import InputSchema
from backend.app.utils.validation_utils import (
    validate_email_address,
    validate_login_password,
    validate_registration_password,
    )

Email = Annotated[str, BeforeValidator(validate_email_address)]

_REQUIRED = {
    "email": "Email is required",
    "password": "Password is required",
    }


# =============================================================================
# Request Schemas
# =============================================================================

class AuthLoginRequest(InputSchema):
    """Login credentials (no complexity rule, so legacy passwords still log in)."""
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = _REQUIRED

    email: Email = Field(..., description="Email address")
    password: Annotated[str, BeforeValidator(validate_login_password)] = Field(..., description="Password")


class AuthRegisterRequest(InputSchema):
    """Registration request."""
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = _REQUIRED

    email: Email = Field(..., description="Email address")
    password: Annotated[str, BeforeValidator(validate_registration_password)] = Field(
        ..., description="Password (8-128 chars, lower + upper + digit)"
        )


class AuthPasswordResetRequest(InputSchema):
    """Password reset request (for terminal CLI)."""
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = {
        "email": "Email is required",
        "new_password": "Password is required",
        }

    email: Email = Field(..., description="Account to reset")
    new_password: Annotated[str, BeforeValidator(validate_registration_password)] = Field(
        ..., description="New password"
        )


# =============================================================================
# Response Schemas
# =============================================================================

class AuthUserResponse(BaseModel):
    """User info without the password hash."""
    id: int
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthPayload(BaseModel):
    """Response after successful login or registration."""
    token: str
    user: AuthUserResponse
