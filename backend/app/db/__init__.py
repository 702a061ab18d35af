"""
Database module exports.
"""
from backend.app.db.base import (
    SQLModel,
    # Enums
    TransactionType,
    # Models
    User,
    Transaction,
    )
from backend.app.db.session import (
    get_sync_engine,
    get_async_engine,
    get_session_generator,
    init_database,
    )

__all__ = [
    "SQLModel",
    "get_sync_engine",  # For table creation and scripts
    "get_async_engine",  # For async FastAPI app
    "get_session_generator",
    "init_database",
    # Enums
    "TransactionType",
    # Models
    "User",
    "Transaction",
    ]
