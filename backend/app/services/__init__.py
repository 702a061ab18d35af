"""
Services package.
Business logic shared by the REST API and the CLI.

- AuthService: login, registration, token verification
- TransactionService: CRUD with ownership checks, per-user summary
"""
from backend.app.services.auth_service import AuthService
from backend.app.services.transaction_service import TransactionService

__all__ = [
    "AuthService",
    "TransactionService",
    ]
