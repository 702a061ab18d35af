"""
Authentication Service

Login, registration and token verification on top of the user repository.

Every public method returns a ServiceResponse; failures carry a user-facing
message and an ErrorKind, never a raw exception. Login deliberately uses one
message for "unknown email" and "wrong password".
"""
import asyncio
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import User
from backend.app.repositories import DuplicateRecordError, UserRepository
from backend.app.schemas.auth import AuthLoginRequest, AuthPayload, AuthRegisterRequest, AuthUserResponse
from backend.app.schemas.common import ErrorKind, ServiceResponse, validate_input
from backend.app.utils import security

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "A user with this email address already exists"
INVALID_TOKEN = "Invalid or expired token"
USER_NOT_FOUND = "User not found"

LOGIN_FAILED = "An unexpected error occurred during login. Please try again."
REGISTRATION_FAILED = "An unexpected error occurred during registration. Please try again."
VERIFICATION_FAILED = "An unexpected error occurred during token verification. Please try again."


def to_user_response(user: User) -> AuthUserResponse:
    """Public view of a user (no password hash)."""
    return AuthUserResponse.model_validate(user)


class AuthService:
    """
    Service for user authentication.

    Constructed per request with the request's AsyncSession.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def login(self, email: str, password: str) -> ServiceResponse[AuthPayload]:
        """
        Authenticate a user by email and password.

        Returns:
            ServiceResponse with {token, user} on success
        """
        try:
            validation = validate_input(AuthLoginRequest, {"email": email, "password": password})
            if not validation.success:
                logger.warning("Login validation failed", error=validation.first_error)
                return ServiceResponse.fail(ErrorKind.VALIDATION, validation.first_error)
            credentials = validation.data

            user = await self.users.find_by_email(credentials.email)
            if user is None:
                logger.warning("Login failed: unknown email")
                return ServiceResponse.fail(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

            matches = await asyncio.to_thread(security.compare_password, credentials.password, user.password)
            if not matches:
                logger.warning("Login failed: wrong password", user_id=user.id)
                return ServiceResponse.fail(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

            public_user = to_user_response(user)
            token = security.generate_token(public_user)
            logger.info("User logged in", user_id=user.id)
            return ServiceResponse.ok(AuthPayload(token=token, user=public_user))
        except Exception:
            logger.error("Unexpected error during login", exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, LOGIN_FAILED)

    async def register(self, email: str, password: str) -> ServiceResponse[AuthPayload]:
        """
        Create an account and sign a token for it.

        Returns:
            ServiceResponse with {token, user} on success, CONFLICT if the email is taken
        """
        try:
            validation = validate_input(AuthRegisterRequest, {"email": email, "password": password})
            if not validation.success:
                logger.warning("Registration validation failed", error=validation.first_error)
                return ServiceResponse.fail(ErrorKind.VALIDATION, validation.first_error)
            credentials = validation.data

            if await self.users.find_by_email(credentials.email) is not None:
                logger.warning("Registration rejected: email already registered")
                return ServiceResponse.fail(ErrorKind.CONFLICT, EMAIL_TAKEN)

            password_hash = await asyncio.to_thread(security.hash_password, credentials.password)
            try:
                user = await self.users.create(credentials.email, password_hash)
            except DuplicateRecordError:
                # Lost a race with a concurrent registration of the same email
                return ServiceResponse.fail(ErrorKind.CONFLICT, EMAIL_TAKEN)

            public_user = to_user_response(user)
            token = security.generate_token(public_user)
            logger.info("User registered", user_id=user.id)
            return ServiceResponse.ok(AuthPayload(token=token, user=public_user))
        except Exception:
            logger.error("Unexpected error during registration", exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, REGISTRATION_FAILED)

    async def verify_token(self, token: Optional[str]) -> ServiceResponse[AuthUserResponse]:
        """
        Resolve a token to the (still existing) user it was issued for.
        """
        try:
            payload = security.verify_token(token)
            if payload is None:
                return ServiceResponse.fail(ErrorKind.AUTHENTICATION, INVALID_TOKEN)

            user = await self.users.find_by_id(payload.id)
            if user is None:
                logger.warning("Token for missing user", user_id=payload.id)
                return ServiceResponse.fail(ErrorKind.AUTHENTICATION, USER_NOT_FOUND)

            return ServiceResponse.ok(to_user_response(user))
        except Exception:
            logger.error("Unexpected error during token verification", exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, VERIFICATION_FAILED)
