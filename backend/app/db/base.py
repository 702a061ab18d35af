"""
Database base module.
SQLModel base class and metadata.
Import all models here so that SQLModel.metadata knows every table.
"""
from sqlmodel import SQLModel

from backend.app.db.models import (
    # Enums
    TransactionType,
    # Models
    User,
    Transaction,
    )

__all__ = [
    "SQLModel",
    # Enums
    "TransactionType",
    # Models
    "User",
    "Transaction",
    ]
