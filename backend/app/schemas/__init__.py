"""
Pydantic schemas for the expense tracker.

Used across multiple subsystems (API, Services, CLI) to validate data structures
and standardize data exchange between components.

**Organization by Domain**:
- common.py: Shared envelopes (ErrorKind, ServiceResponse, ValidationResult) and validate_input
- auth.py: Credentials input and user/token responses
- transactions.py: Transaction input schemas and DTOs (TX prefix)

**Naming Conventions**:
- TX prefix: Transactions
- Auth prefix: Authentication
"""
from backend.app.schemas.auth import (
    AuthLoginRequest,
    AuthRegisterRequest,
    AuthPasswordResetRequest,
    AuthUserResponse,
    AuthPayload,
    )
from backend.app.schemas.common import (
    ErrorKind,
    InputSchema,
    ServiceResponse,
    ValidationResult,
    format_validation_errors,
    validate_input,
    )
from backend.app.schemas.transactions import (
    TXCreateItem,
    TXUpdateItem,
    TXFilter,
    TXPagination,
    TXIdParam,
    UserIdParam,
    TXReadItem,
    TXSummary,
    )

__all__ = [
    # Common
    "ErrorKind",
    "InputSchema",
    "ServiceResponse",
    "ValidationResult",
    "format_validation_errors",
    "validate_input",
    # Auth
    "AuthLoginRequest",
    "AuthRegisterRequest",
    "AuthPasswordResetRequest",
    "AuthUserResponse",
    "AuthPayload",
    # Transactions (TX prefix)
    "TXCreateItem",
    "TXUpdateItem",
    "TXFilter",
    "TXPagination",
    "TXIdParam",
    "UserIdParam",
    "TXReadItem",
    "TXSummary",
    ]
