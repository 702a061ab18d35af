"""
Database models for the expense tracker.

All models use SQLModel (SQLAlchemy 2.x) with the following conventions:
- Money columns use Numeric(10, 2)
- Timestamps in UTC (created_at, updated_at)
- Foreign keys enforced with PRAGMA foreign_keys=ON (SQLite)
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Column,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    )
from sqlmodel import Field, SQLModel

from backend.app.utils.datetime_utils import utcnow

# Upper bound of a single transaction amount (NUMERIC(10, 2) holds 8 integer digits)
MAX_TRANSACTION_AMOUNT = Decimal("999999.99")
MAX_DESCRIPTION_LENGTH = 500
MAX_EMAIL_LENGTH = 254


# ============================================================================
# ENUMS
# ============================================================================

class TransactionType(str, Enum):
    """
    Direction of a money movement.

    - INCOME: money received (salary, refunds, gifts). Adds to the balance.
    - EXPENSE: money spent. Subtracts from the balance.

    Amounts are always stored positive; the direction is implied by the type.
    """
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# ============================================================================
# MODELS
# ============================================================================

class User(SQLModel, table=True):
    """
    Account owning transactions.

    The password column stores a bcrypt hash and must never leave the
    service layer (see AuthUserResponse for the outward view).
    Emails are stored lower-cased; lookups are case-insensitive.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(sa_column=Column(String(MAX_EMAIL_LENGTH), unique=True, index=True, nullable=False))
    password: str = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Transaction(SQLModel, table=True):
    """
    Single income or expense record owned by one user.

    - amount: strictly positive, at most 2 decimals
    - date: calendar date of the movement (not the insertion time)
    - description: optional free text, already sanitized by the service layer
    """
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "date"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            ),
        )
    type: TransactionType = Field(nullable=False)
    amount: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    date: date_type = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
