"""
Transaction schemas for the expense tracker.

DTOs and input schemas for Transaction operations.

**Naming Convention**:
- TX prefix: Transaction-related schemas
- Item suffix: Single transaction (e.g., TXCreateItem)

**Design Notes**:
- Field rules come from utils.validation_utils, shared by create/update/filter
- Amounts are Decimal internally and serialized as JSON numbers
- Descriptions are trimmed here and sanitized by the service before storage
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Dict, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
    )
from pydantic_core import PydanticCustomError

from backend.app.db.models import TransactionType
from backend.app.schemas.common import InputSchema
from backend.app.utils.validation_utils import (
    TRANSACTION_TYPE_MESSAGE,
    bounded_int_validator,
    positive_id_validator,
    validate_amount,
    validate_description,
    validate_filter_end_date,
    validate_filter_start_date,
    validate_transaction_date,
    validate_transaction_type,
    )

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

UPDATABLE_FIELDS = ("type", "amount", "description", "date")


# =============================================================================
# FIELD TYPES
# =============================================================================

TXType = Annotated[TransactionType, BeforeValidator(validate_transaction_type)]
TXAmount = Annotated[Decimal, BeforeValidator(validate_amount)]
TXDate = Annotated[date_type, BeforeValidator(validate_transaction_date)]
TXDescription = Annotated[Optional[str], BeforeValidator(validate_description)]

TransactionId = Annotated[int, BeforeValidator(positive_id_validator("Transaction ID"))]
UserId = Annotated[int, BeforeValidator(positive_id_validator("User ID"))]

# Money leaves the service as a JSON number
MoneyOut = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _optional_type(v: Any) -> Optional[TransactionType]:
    # "?type=" on the listing route means no type filter
    return None if v is None or v == "" else validate_transaction_type(v)


# =============================================================================
# INPUT SCHEMAS
# =============================================================================

class TXCreateItem(InputSchema):
    """
    New transaction payload.

    Fields are validated in declaration order: type, amount, description, date.
    """
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = {
        "type": TRANSACTION_TYPE_MESSAGE,
        "amount": "Amount is required",
        "date": "Date is required",
        }

    type: TXType = Field(..., description="INCOME or EXPENSE")
    amount: TXAmount = Field(..., description="Positive amount, at most 2 decimals")
    description: TXDescription = Field(default=None, description="Optional note (max 500 chars)")
    date: TXDate = Field(..., description="Calendar date, at most 1 year ahead")


class TXUpdateItem(InputSchema):
    """
    Partial update payload.

    Only keys actually present in the input are applied (see to_patch).
    An explicit empty/None description clears the stored one.
    """
    # Absent keys default to None; an explicit null is still validated (and rejected)
    type: Annotated[Optional[TransactionType], BeforeValidator(validate_transaction_type)] = Field(
        default=None, description="New type"
        )
    amount: Annotated[Optional[Decimal], BeforeValidator(validate_amount)] = Field(
        default=None, description="New amount"
        )
    description: TXDescription = Field(default=None, description="New description")
    date: Annotated[Optional[date_type], BeforeValidator(validate_transaction_date)] = Field(
        default=None, description="New date"
        )

    @model_validator(mode="before")
    @classmethod
    def require_any_field(cls, data: Any) -> Any:
        if isinstance(data, dict) and not any(key in data for key in UPDATABLE_FIELDS):
            raise PydanticCustomError("value_error", "At least one field must be provided for update")
        return data

    def to_patch(self) -> Dict[str, Any]:
        """Field values for the keys the caller provided."""
        return {name: getattr(self, name) for name in UPDATABLE_FIELDS if name in self.model_fields_set}


class TXFilter(InputSchema):
    """Listing filters; empty date strings are treated as absent."""
    type: Annotated[Optional[TransactionType], BeforeValidator(_optional_type)] = None
    start_date: Annotated[Optional[date_type], BeforeValidator(validate_filter_start_date)] = None
    end_date: Annotated[Optional[date_type], BeforeValidator(validate_filter_end_date)] = None

    @model_validator(mode="after")
    def check_range(self) -> "TXFilter":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise PydanticCustomError("value_error", "Start date cannot be after end date")
        return self


class TXPagination(InputSchema):
    page: Annotated[int, BeforeValidator(bounded_int_validator("Page", 1))] = DEFAULT_PAGE
    limit: Annotated[int, BeforeValidator(bounded_int_validator("Limit", 1, MAX_PAGE_SIZE))] = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TXIdParam(InputSchema):
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = {"id": "Transaction ID is required"}

    id: TransactionId


class UserIdParam(InputSchema):
    REQUIRED_MESSAGES: ClassVar[Dict[str, str]] = {"user_id": "User ID is required"}

    user_id: UserId


# =============================================================================
# OUTPUT DTOs
# =============================================================================

class TXReadItem(BaseModel):
    """Transaction as returned to callers."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: TransactionType
    amount: MoneyOut
    description: Optional[str] = None
    date: date_type
    created_at: datetime
    updated_at: datetime


class TXSummary(BaseModel):
    """
    Per-user totals, recomputed on every request.

    balance = total_income - total_expense (may be negative).
    """
    total_income: MoneyOut = Decimal("0.00")
    total_expense: MoneyOut = Decimal("0.00")
    balance: MoneyOut = Decimal("0.00")
    transaction_count: int = 0
