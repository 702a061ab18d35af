"""
Repositories package.
Persistence of users and transactions over an AsyncSession.
"""
from backend.app.repositories.base import RepositoryError, DuplicateRecordError
from backend.app.repositories.transaction_repository import TransactionRepository
from backend.app.repositories.user_repository import UserRepository

__all__ = [
    "RepositoryError",
    "DuplicateRecordError",
    "TransactionRepository",
    "UserRepository",
    ]
