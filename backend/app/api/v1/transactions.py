"""
Transaction API endpoints.

Provides RESTful endpoints for the current user's transactions:
- GET /transactions: List with filters (type, start_date, end_date) and pagination
- GET /transactions/summary: Income/expense totals and balance
- GET /transactions/{id}: Get single transaction
- POST /transactions: Create a transaction
- PATCH /transactions/{id}: Partial update
- DELETE /transactions/{id}: Delete a transaction

All routes require a Bearer token; ownership is enforced by TransactionService.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.v1.auth import get_current_user
from backend.app.api.v1.responses import success, unwrap
from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger
from backend.app.schemas.auth import AuthUserResponse
from backend.app.services.transaction_service import TransactionService

logger = get_logger(__name__)

tx_router = APIRouter(prefix="/transactions", tags=["TX (Transactions)"])


def get_transaction_service(session: AsyncSession = Depends(get_session_generator)) -> TransactionService:
    return TransactionService(session)


def _without_none(**values: Any) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


# =============================================================================
# READ
# =============================================================================

@tx_router.get("")
async def list_transactions(
    type: Optional[str] = Query(None, description="INCOME or EXPENSE"),
    start_date: Optional[str] = Query(None, description="Inclusive lower bound (ISO date)"),
    end_date: Optional[str] = Query(None, description="Inclusive upper bound (ISO date)"),
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Page size, 1-100 (default 10)"),
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """
    List the current user's transactions, newest first.
    """
    filters = _without_none(type=type, start_date=start_date, end_date=end_date)
    pagination = _without_none(page=page, limit=limit)
    result = await service.get_transactions(current_user.id, filters or None, pagination)
    return success(unwrap(result))


@tx_router.get("/summary")
async def get_summary(
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """Totals over all of the current user's transactions."""
    return success(unwrap(await service.get_summary(current_user.id)))


@tx_router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: int,
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """
    Get a single transaction by ID.

    Returns 404 if it does not exist, 403 if it belongs to someone else.
    """
    return success(unwrap(await service.get_transaction(transaction_id, current_user.id)))


# =============================================================================
# CREATE / UPDATE / DELETE
# =============================================================================

@tx_router.post("", status_code=201)
async def create_transaction(
    body: Optional[Dict[str, Any]] = Body(default=None),
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """Create a transaction for the current user."""
    result = await service.create_transaction(current_user.id, body if body is not None else {})
    return success(unwrap(result))


@tx_router.patch("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    body: Optional[Dict[str, Any]] = Body(default=None),
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """Update only the fields present in the body."""
    result = await service.update_transaction(transaction_id, current_user.id, body if body is not None else {})
    return success(unwrap(result))


@tx_router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    current_user: AuthUserResponse = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    ):
    """Delete a transaction."""
    result = await service.delete_transaction(transaction_id, current_user.id)
    if not result.success:
        logger.info("Delete refused", transaction_id=transaction_id, user_id=current_user.id, error=result.error)
    return success(unwrap(result))
