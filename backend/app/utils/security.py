"""
Password hashing and JWT helpers.

- bcrypt for password storage (cost from BCRYPT_ROUNDS, default 12)
- python-jose for HS256 tokens carrying id/email/iat/exp/iss/aud
- strict "Bearer <header.payload.signature>" parsing
"""
import re
from datetime import timedelta
from typing import Any, Optional

import bcrypt
import structlog
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from backend.app.config import get_settings
from backend.app.utils.datetime_utils import parse_duration, utcnow

logger = structlog.get_logger(__name__)

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128

_BEARER_RE = re.compile(r"^Bearer ([A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)$")


class TokenError(Exception):
    """Raised when a token cannot be generated from the given user data."""
    pass


class TokenPayload(BaseModel):
    """Claims extracted from a verified token."""
    model_config = ConfigDict(extra="ignore")

    id: int
    email: str
    iat: Optional[int] = None
    exp: Optional[int] = None


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password (6 to 128 characters)

    Returns:
        Hashed password string

    Raises:
        ValueError: If the password length is outside 6..128
    """
    if not isinstance(password, str) or not (MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH):
        raise ValueError("Password must be between 6 and 128 characters")

    password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def compare_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Stored hash to verify against

    Returns:
        True if password matches, False otherwise (including empty or malformed input)
    """
    if not plain_password or not hashed_password:
        return False
    try:
        password_bytes = plain_password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        hashed_bytes = hashed_password.encode('utf-8')
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except (ValueError, TypeError) as e:
        logger.warning("Password verification failed", error=str(e))
        return False


# =============================================================================
# Tokens
# =============================================================================

def _user_claim(user: Any, name: str) -> Any:
    if isinstance(user, dict):
        return user.get(name)
    return getattr(user, name, None)


def generate_token(user: Any, expires_in: Optional[str | int | timedelta] = None) -> str:
    """
    Sign a token for a user.

    Args:
        user: Object or mapping exposing ``id`` (positive int) and ``email``
        expires_in: Lifetime override ("7d", "12h", seconds); defaults to JWT_EXPIRES_IN

    Raises:
        TokenError: If the user data is unusable or the lifetime is invalid
    """
    settings = get_settings()
    user_id = _user_claim(user, "id")
    email = _user_claim(user, "email")

    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise TokenError("Invalid user data for token generation")
    if not isinstance(email, str) or not email:
        raise TokenError("Invalid user data for token generation")

    try:
        lifetime = parse_duration(expires_in if expires_in is not None else settings.JWT_EXPIRES_IN)
    except ValueError as e:
        raise TokenError(str(e)) from e

    now = utcnow()
    claims = {
        "id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[TokenPayload]:
    """
    Decode and validate a token.

    Checks signature, expiry, issuer and audience, and that the id/email
    claims are present. Every failure returns None; the reason is only logged.
    """
    if not token or not isinstance(token, str):
        return None

    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            )
    except ExpiredSignatureError:
        logger.info("Token expired")
        return None
    except JWTError as e:
        logger.info("Token rejected", reason=str(e))
        return None

    try:
        payload = TokenPayload.model_validate(claims)
    except ValidationError:
        logger.info("Token rejected", reason="missing or malformed id/email claims")
        return None
    if payload.id <= 0 or not payload.email:
        logger.info("Token rejected", reason="missing or malformed id/email claims")
        return None
    return payload


def extract_token_from_header(auth_header: Optional[str]) -> Optional[str]:
    """
    Return the token of a well-formed "Bearer <jwt>" header, else None.

    Examples:
        >>> extract_token_from_header("Bearer aaa.bbb.ccc")
        'aaa.bbb.ccc'
        >>> extract_token_from_header("Basic dXNlcjpwYXNz") is None
        True
    """
    if not auth_header or not isinstance(auth_header, str):
        return None
    match = _BEARER_RE.match(auth_header)
    return match.group(1) if match else None
