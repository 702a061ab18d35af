"""
Common schemas shared across subsystems.

**Domain Coverage**:
- ErrorKind: Classification of service failures (mapped to HTTP status by the API layer)
- ServiceResponse: Uniform result envelope returned by every service method
- ValidationResult: Discriminated outcome of validate_input()
- validate_input(): Run a schema against raw input, collecting "field: message" strings

**Design Notes**:
- Validators raise PydanticCustomError, so messages arrive here without any
  "Value error," prefix and are shown to users verbatim
- Missing required fields are reported through the schema's REQUIRED_MESSAGES table
"""
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

DEFAULT_REQUIRED_MESSAGE = "Field required"


# =============================================================================
# ERROR KINDS
# =============================================================================

class ErrorKind(str, Enum):
    """Why a service call failed."""
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    CONFLICT = "CONFLICT"
    AUTHENTICATION = "AUTHENTICATION"
    INTERNAL = "INTERNAL"


# =============================================================================
# BASE SCHEMA
# =============================================================================

class InputSchema(BaseModel):
    """
    Base class for validated service inputs.

    Unknown keys are dropped. Subclasses list the message to use when a
    required field is absent in REQUIRED_MESSAGES.
    """
    model_config = ConfigDict(extra="ignore")

    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = {}


# =============================================================================
# RESULT ENVELOPES
# =============================================================================

class ServiceResponse(BaseModel, Generic[T]):
    """
    Result envelope of every service operation.

    Exactly one of data / error is meaningful, depending on success.
    kind is set on failures only.

    Examples:
        >>> ServiceResponse.ok(42).data
        42
        >>> ServiceResponse.fail(ErrorKind.NOT_FOUND, "Transaction not found").error
        'Transaction not found'
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ServiceResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ServiceResponse":
        return cls(success=False, error=message, kind=kind)


class ValidationResult(BaseModel, Generic[M]):
    """Outcome of validate_input: parsed data on success, ordered messages otherwise."""
    success: bool
    data: Optional[M] = None
    error: List[str] = []

    @property
    def first_error(self) -> Optional[str]:
        return self.error[0] if self.error else None


# =============================================================================
# VALIDATION
# =============================================================================

def format_validation_errors(schema: Type[BaseModel], exc: ValidationError) -> List[str]:
    """
    Convert a pydantic ValidationError into "field: message" strings.

    Model-level errors (empty location) are returned without a prefix.
    """
    required_messages = getattr(schema, "REQUIRED_MESSAGES", {})
    messages: List[str] = []
    for err in exc.errors(include_url=False):
        loc = err.get("loc", ())
        field = ".".join(str(part) for part in loc)
        if err["type"] == "missing":
            message = required_messages.get(str(loc[0]) if loc else "", DEFAULT_REQUIRED_MESSAGE)
        else:
            message = err["msg"]
        messages.append(f"{field}: {message}" if field else message)
    return messages


def validate_input(schema: Type[M], raw: Any) -> ValidationResult[M]:
    """
    Validate raw input (mapping or model) against a schema.

    Never raises on invalid input; the result carries either the parsed model
    or every failure, in field declaration order.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(exclude_unset=True)
    elif isinstance(raw, Mapping):
        raw = dict(raw)

    try:
        data = schema.model_validate(raw)
    except ValidationError as exc:
        return ValidationResult(success=False, error=format_validation_errors(schema, exc))
    return ValidationResult(success=True, data=data)
