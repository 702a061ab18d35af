"""
Tests for the shared field validators.

Reference: backend/app/utils/validation_utils.py
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic_core import PydanticCustomError

from backend.app.db.models import TransactionType
from backend.app.utils.datetime_utils import utcnow
from backend.app.utils.validation_utils import (
    bounded_int_validator,
    positive_id_validator,
    sanitize_description,
    sanitize_string,
    validate_amount,
    validate_description,
    validate_email_address,
    validate_login_password,
    validate_registration_password,
    validate_transaction_date,
    validate_transaction_type,
    )


def message_of(func, value) -> str:
    with pytest.raises(PydanticCustomError) as exc_info:
        func(value)
    return exc_info.value.message()


# ============================================================================
# AMOUNT
# ============================================================================

class TestAmount:
    """Amount boundaries and type rules."""

    @pytest.mark.parametrize("value, expected", [
        (0.01, Decimal("0.01")),
        (100.5, Decimal("100.5")),
        (999999.99, Decimal("999999.99")),
        (42, Decimal("42")),
        (Decimal("12.30"), Decimal("12.30")),
        ])
    def test_valid_amounts(self, value, expected):
        """VAL-A-001: Positive amounts up to 999,999.99 with at most 2 decimals."""
        assert validate_amount(value) == expected

    @pytest.mark.parametrize("value", [0, -5, -0.01])
    def test_non_positive(self, value):
        """VAL-A-002: Zero and negative amounts are rejected."""
        assert message_of(validate_amount, value) == "Amount must be a positive number"

    def test_above_maximum(self):
        """VAL-A-003: 1,000,000.00 exceeds the maximum."""
        assert message_of(validate_amount, 1000000.00) == "Amount cannot exceed 999,999.99"

    def test_three_decimals(self):
        """VAL-A-004: 100.123 has too many decimal places."""
        assert message_of(validate_amount, 100.123) == "Amount cannot have more than 2 decimal places"

    @pytest.mark.parametrize("value", ["100", None, True, float("nan"), float("inf")])
    def test_not_a_number(self, value):
        """VAL-A-005: Strings, None, booleans and non-finite floats are not numbers."""
        assert message_of(validate_amount, value) == "Amount must be a number"


# ============================================================================
# TYPE / DATE / DESCRIPTION
# ============================================================================

class TestTransactionFields:
    """Type, date and description validators."""

    def test_type_accepts_enum_values(self):
        """VAL-T-001: INCOME and EXPENSE (string or enum member)."""
        assert validate_transaction_type("INCOME") is TransactionType.INCOME
        assert validate_transaction_type(TransactionType.EXPENSE) is TransactionType.EXPENSE

    @pytest.mark.parametrize("value", ["income", "TRANSFER", None, 1])
    def test_type_rejects_others(self, value):
        """VAL-T-002: Anything else gets the enum message."""
        assert message_of(validate_transaction_type, value) == "Transaction type must be either INCOME or EXPENSE"

    def test_date_iso_string(self):
        """VAL-D-001: ISO dates and datetimes become calendar dates."""
        assert validate_transaction_date("2024-01-15") == date(2024, 1, 15)
        assert validate_transaction_date("2024-01-15T10:30:00Z") == date(2024, 1, 15)

    def test_date_rules(self):
        """VAL-D-002: Empty, non-string and unparseable dates."""
        assert message_of(validate_transaction_date, "") == "Date cannot be empty"
        assert message_of(validate_transaction_date, 20240115) == "Date must be a string"
        assert message_of(validate_transaction_date, "yesterday") == (
            "Invalid date format. Please use a valid date string (e.g., YYYY-MM-DD)"
        )

    def test_date_future_limit(self):
        """VAL-D-003: Up to one year ahead is fine, beyond is rejected."""
        today = utcnow().date()
        assert validate_transaction_date((today + timedelta(days=300)).isoformat())
        too_far = (today + timedelta(days=400)).isoformat()
        assert message_of(validate_transaction_date, too_far) == "Date cannot be more than 1 year in the future"

    def test_description_trim_and_empty(self):
        """VAL-S-001: Descriptions are trimmed; empty means absent."""
        assert validate_description("  lunch  ") == "lunch"
        assert validate_description("   ") is None
        assert validate_description(None) is None

    def test_description_limits(self):
        """VAL-S-002: Length and type checks."""
        assert validate_description("x" * 500) == "x" * 500
        assert message_of(validate_description, "x" * 501) == "Description cannot exceed 500 characters"
        assert message_of(validate_description, 42) == "Description must be a string"


# ============================================================================
# SANITIZATION
# ============================================================================

class TestSanitization:
    """sanitize_string / sanitize_description."""

    def test_sanitize_string(self):
        """VAL-Z-001: Trim, strip angle brackets, collapse whitespace."""
        assert sanitize_string("  <script>alert(1)</script>  ") == "scriptalert(1)/script"
        assert sanitize_string("a \n\t  b") == "a b"

    def test_sanitize_description_empty(self):
        """VAL-Z-002: Empty or whitespace-only descriptions become None."""
        assert sanitize_description(None) is None
        assert sanitize_description("") is None
        assert sanitize_description(" \t ") is None
        assert sanitize_description(" Coffee   beans ") == "Coffee beans"


# ============================================================================
# IDS AND PAGINATION
# ============================================================================

class TestIdentifiers:
    """Positive integer ids and bounded pagination ints."""

    def test_positive_id(self):
        """VAL-I-001: Integral values are accepted, floats coerced."""
        validator = positive_id_validator("Transaction ID")
        assert validator(7) == 7
        assert validator(2.0) == 2

    @pytest.mark.parametrize("value, message", [
        ("7", "Transaction ID must be a number"),
        (True, "Transaction ID must be a number"),
        (1.5, "Transaction ID must be an integer"),
        (0, "Transaction ID must be positive"),
        (-3, "Transaction ID must be positive"),
        ])
    def test_positive_id_messages(self, value, message):
        """VAL-I-002: One message per failed predicate."""
        assert message_of(positive_id_validator("Transaction ID"), value) == message

    def test_bounded_int(self):
        """VAL-I-003: Limits and query-string coercion."""
        validator = bounded_int_validator("Limit", 1, 100)
        assert validator("25") == 25
        assert validator(100) == 100
        assert message_of(validator, 0) == "Limit must be at least 1"
        assert message_of(validator, 101) == "Limit cannot exceed 100"
        assert message_of(validator, "ten") == "Limit must be an integer"


# ============================================================================
# CREDENTIALS
# ============================================================================

class TestCredentials:
    """Email and password validators."""

    def test_email_normalized(self):
        """VAL-C-001: Emails are trimmed and lower-cased."""
        assert validate_email_address("  John.Doe@Example.COM ") == "john.doe@example.com"

    def test_email_errors(self):
        """VAL-C-002: Required / syntax / length."""
        assert message_of(validate_email_address, "") == "Email is required"
        assert message_of(validate_email_address, "not-an-email") == "Please provide a valid email address"
        long_email = "a" * 64 + "@" + ".".join(["b" * 60] * 4) + ".com"
        assert message_of(validate_email_address, long_email) == "Email address is too long"

    def test_login_password(self):
        """VAL-C-003: Login only enforces 6..128 characters."""
        assert validate_login_password("simple") == "simple"
        assert message_of(validate_login_password, "") == "Password is required"
        assert message_of(validate_login_password, "abc") == "Password must be at least 6 characters long"
        assert message_of(validate_login_password, "x" * 129) == "Password must be less than 128 characters long"

    def test_registration_password(self):
        """VAL-C-004: Registration adds length 8 and complexity."""
        assert validate_registration_password("Password1") == "Password1"
        assert message_of(validate_registration_password, "Pass1") == "Password must be at least 8 characters long"
        assert message_of(validate_registration_password, "password1") == (
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
        )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
