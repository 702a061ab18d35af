"""
Validation utilities for Pydantic models.

Reusable, side-effect-free validator functions shared by the transaction and
auth schemas. Each validator either returns the normalized value or raises a
PydanticCustomError whose message is shown to the end user verbatim, so the
create/update/filter schemas stay in parity by construction.

Usage:
    from typing import Annotated
    from pydantic import BeforeValidator

    Amount = Annotated[Decimal, BeforeValidator(validate_amount)]
"""
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError

from backend.app.db.models import (
    MAX_DESCRIPTION_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_TRANSACTION_AMOUNT,
    TransactionType,
    )
from backend.app.utils.datetime_utils import add_years, parse_ISO_date, parse_ISO_datetime, utcnow

CENT = Decimal("0.01")

MIN_LOGIN_PASSWORD_LENGTH = 6
MIN_REGISTER_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

_WHITESPACE_RUN = re.compile(r"\s+")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_PASSWORD_COMPLEXITY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

TRANSACTION_TYPE_MESSAGE = "Transaction type must be either INCOME or EXPENSE"


def _fail(message: str) -> PydanticCustomError:
    return PydanticCustomError("value_error", message)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float, Decimal)) and not isinstance(v, bool)


# =============================================================================
# TRANSACTION FIELDS
# =============================================================================

def validate_transaction_type(v: Any) -> TransactionType:
    """Accept INCOME/EXPENSE (enum member or exact string)."""
    if isinstance(v, TransactionType):
        return v
    if isinstance(v, str):
        try:
            return TransactionType(v)
        except ValueError:
            pass
    raise _fail(TRANSACTION_TYPE_MESSAGE)


def validate_amount(v: Any) -> Decimal:
    """
    Validate a transaction amount.

    Rules (checked in order):
    - numeric (int, float, Decimal; bool/str/None rejected, NaN and inf rejected)
    - strictly positive
    - at most 999,999.99
    - at most 2 decimal places

    Floats are converted through their shortest repr, so 25.5 becomes Decimal("25.5").

    Examples:
        >>> validate_amount(100.50)
        Decimal('100.5')
        >>> validate_amount(100.123)  # PydanticCustomError: ...2 decimal places
    """
    if not _is_number(v):
        raise _fail("Amount must be a number")
    if isinstance(v, float) and not math.isfinite(v):
        raise _fail("Amount must be a number")

    try:
        amount = v if isinstance(v, Decimal) else Decimal(str(v))
    except InvalidOperation:
        raise _fail("Amount must be a number")
    if not amount.is_finite():
        raise _fail("Amount must be a number")

    if amount <= 0:
        raise _fail("Amount must be a positive number")
    if amount > MAX_TRANSACTION_AMOUNT:
        raise _fail("Amount cannot exceed 999,999.99")
    if amount != amount.quantize(CENT):
        raise _fail("Amount cannot have more than 2 decimal places")
    return amount


def validate_transaction_date(v: Any) -> date:
    """
    Validate a transaction date and return it as a calendar date.

    Accepts ISO date / datetime strings (and date objects). The value may not
    lie more than exactly one calendar year after the current time.
    """
    if isinstance(v, (date, datetime)):
        moment = v if isinstance(v, datetime) else datetime.combine(v, datetime.min.time())
        parsed = parse_ISO_datetime(moment.isoformat())
    else:
        if v is None or not isinstance(v, str):
            raise _fail("Date must be a string")
        if len(v) < 1:
            raise _fail("Date cannot be empty")
        try:
            parsed = parse_ISO_datetime(v)
        except ValueError:
            raise _fail("Invalid date format. Please use a valid date string (e.g., YYYY-MM-DD)")

    if parsed > add_years(utcnow(), 1):
        raise _fail("Date cannot be more than 1 year in the future")
    return parsed.date()


def _optional_filter_date(message: str) -> Callable[[Any], Optional[date]]:
    def validator(v: Any) -> Optional[date]:
        if v is None or v == "":
            return None
        if isinstance(v, date):
            return parse_ISO_date(v)
        if not isinstance(v, str):
            raise _fail(message)
        try:
            return parse_ISO_datetime(v).date()
        except ValueError:
            raise _fail(message)

    return validator


validate_filter_start_date = _optional_filter_date("Invalid start date format")
validate_filter_end_date = _optional_filter_date("Invalid end date format")


def validate_description(v: Any) -> Optional[str]:
    """
    Validate an optional description.

    Trimmed; an empty string after trimming means "no description" (None).
    """
    if v is None:
        return None
    if not isinstance(v, str):
        raise _fail("Description must be a string")
    trimmed = v.strip()
    if len(trimmed) > MAX_DESCRIPTION_LENGTH:
        raise _fail("Description cannot exceed 500 characters")
    return trimmed or None


def sanitize_string(value: str) -> str:
    """
    Trim, drop '<' and '>' and collapse whitespace runs to a single space.

    Examples:
        >>> sanitize_string("  <b>lunch</b>\\n\\twith   team ")
        'blunch/b with team'
    """
    without_brackets = _ANGLE_BRACKETS.sub("", value.strip())
    return _WHITESPACE_RUN.sub(" ", without_brackets)


def sanitize_description(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a description for storage; empty or whitespace-only becomes None.

    Raises:
        ValueError: If the sanitized text still exceeds 500 characters
    """
    if value is None or value.strip() == "":
        return None
    sanitized = sanitize_string(value)
    if len(sanitized) > MAX_DESCRIPTION_LENGTH:
        raise ValueError("Description cannot exceed 500 characters")
    return sanitized or None


# =============================================================================
# IDENTIFIERS AND PAGINATION
# =============================================================================

def positive_id_validator(label: str) -> Callable[[Any], int]:
    """
    Build a validator for positive integer identifiers.

    Distinct messages per failed predicate: "<label> must be a number",
    "<label> must be an integer", "<label> must be positive".
    Integral floats (2.0) are accepted and converted to int.
    """
    def validator(v: Any) -> int:
        if not _is_number(v):
            raise _fail(f"{label} must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise _fail(f"{label} must be a number")
        if v != int(v):
            raise _fail(f"{label} must be an integer")
        if v <= 0:
            raise _fail(f"{label} must be positive")
        return int(v)

    return validator


def bounded_int_validator(label: str, minimum: int, maximum: Optional[int] = None) -> Callable[[Any], int]:
    """
    Validator for integers within [minimum, maximum] (pagination parameters).

    Query strings such as "2" are accepted.
    """
    def validator(v: Any) -> int:
        if isinstance(v, str):
            try:
                v = int(v.strip())
            except ValueError:
                raise _fail(f"{label} must be an integer")
        if not _is_number(v) or (isinstance(v, float) and not math.isfinite(v)) or v != int(v):
            raise _fail(f"{label} must be an integer")
        if v < minimum:
            raise _fail(f"{label} must be at least {minimum}")
        if maximum is not None and v > maximum:
            raise _fail(f"{label} cannot exceed {maximum}")
        return int(v)

    return validator


# =============================================================================
# CREDENTIALS
# =============================================================================

def validate_email_address(v: Any) -> str:
    """
    Validate an email address and return it trimmed and lower-cased.

    Syntax only (no DNS lookups); at most 254 characters (RFC 5321).
    """
    if not isinstance(v, str) or v.strip() == "":
        raise _fail("Email is required")
    email = v.strip()
    if len(email) > MAX_EMAIL_LENGTH:
        raise _fail("Email address is too long")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise _fail("Please provide a valid email address")
    return email.lower()


def _check_password_length(v: Any, minimum: int) -> str:
    if not isinstance(v, str) or v == "":
        raise _fail("Password is required")
    if len(v) < minimum:
        raise _fail(f"Password must be at least {minimum} characters long")
    if len(v) > MAX_PASSWORD_LENGTH:
        raise _fail("Password must be less than 128 characters long")
    return v


def validate_login_password(v: Any) -> str:
    """Login passwords: 6 to 128 characters, no complexity rule."""
    return _check_password_length(v, MIN_LOGIN_PASSWORD_LENGTH)


def validate_registration_password(v: Any) -> str:
    """Registration passwords: 8 to 128 characters with lower, upper and digit."""
    password = _check_password_length(v, MIN_REGISTER_PASSWORD_LENGTH)
    if not _PASSWORD_COMPLEXITY.match(password):
        raise _fail(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
            )
    return password
