"""
Transaction Service

Business logic for a user's income/expense records.

Every operation follows the same pipeline:
1. validate identifiers (transaction id, user id)
2. validate the payload (create/update/filter/pagination)
3. fetch the transaction (single-resource operations)
4. "Transaction not found" before any ownership decision
5. ownership check ("Access denied")
6. mutate through the repository

Failures are returned as ServiceResponse; unexpected exceptions are logged
with their stack trace and replaced by a per-operation generic message.
"""
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Transaction
from backend.app.repositories import TransactionRepository
from backend.app.schemas.common import ErrorKind, ServiceResponse, validate_input
from backend.app.schemas.transactions import (
    TXCreateItem,
    TXFilter,
    TXIdParam,
    TXPagination,
    TXReadItem,
    TXSummary,
    TXUpdateItem,
    UserIdParam,
    )
from backend.app.utils.validation_utils import sanitize_description

logger = structlog.get_logger(__name__)

NOT_FOUND = "Transaction not found"
ACCESS_DENIED = "Access denied"
UPDATE_FAILED = "Failed to update transaction"
DELETE_FAILED = "Failed to delete transaction"

LIST_ERROR = "An error occurred while retrieving transactions"
GET_ERROR = "An error occurred while retrieving the transaction"
CREATE_ERROR = "An error occurred while creating the transaction"
UPDATE_ERROR = "An error occurred while updating the transaction"
DELETE_ERROR = "An error occurred while deleting the transaction"
SUMMARY_ERROR = "An error occurred while retrieving the summary"


def _present(**values: Any) -> Dict[str, Any]:
    """Drop None arguments so the schema reports them as missing."""
    return {key: value for key, value in values.items() if value is not None}


class TransactionService:
    """
    Service for transaction CRUD and summaries.

    Constructed per request with the request's AsyncSession.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.transactions = TransactionRepository(session)

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _invalid(message: Optional[str], operation: str) -> ServiceResponse:
        logger.warning("Transaction validation failed", operation=operation, error=message)
        return ServiceResponse.fail(ErrorKind.VALIDATION, message)

    def _check_ids(self, operation: str, user_id: Any, transaction_id: Any = None, with_tx: bool = False):
        """Validate ids; returns (error_response, tx_id, user_id)."""
        if with_tx:
            tx_check = validate_input(TXIdParam, _present(id=transaction_id))
            if not tx_check.success:
                return self._invalid(tx_check.first_error, operation), None, None
        user_check = validate_input(UserIdParam, _present(user_id=user_id))
        if not user_check.success:
            return self._invalid(user_check.first_error, operation), None, None
        tx_id = tx_check.data.id if with_tx else None
        return None, tx_id, user_check.data.user_id

    async def _fetch_owned(self, transaction_id: int, user_id: int):
        """Fetch a transaction and check ownership; returns (error_response, transaction)."""
        tx = await self.transactions.find_by_id(transaction_id)
        if tx is None:
            return ServiceResponse.fail(ErrorKind.NOT_FOUND, NOT_FOUND), None
        if tx.user_id != user_id:
            logger.warning(
                "Access denied to transaction",
                transaction_id=transaction_id,
                requester_id=user_id,
                owner_id=tx.user_id,
                )
            return ServiceResponse.fail(ErrorKind.ACCESS_DENIED, ACCESS_DENIED), None
        return None, tx

    @staticmethod
    def _to_item(tx: Transaction) -> TXReadItem:
        return TXReadItem.model_validate(tx)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def get_transactions(
        self,
        user_id: Any,
        filters: Any = None,
        pagination: Any = None,
        ) -> ServiceResponse[List[TXReadItem]]:
        """
        List a user's transactions (date DESC, id DESC).

        Args:
            user_id: Owner
            filters: Optional mapping/TXFilter (type, start_date, end_date)
            pagination: Optional mapping/TXPagination (page, limit); unpaginated when None
        """
        try:
            error, _, owner_id = self._check_ids("get_transactions", user_id)
            if error:
                return error

            parsed_filters = None
            if filters is not None:
                filter_check = validate_input(TXFilter, filters)
                if not filter_check.success:
                    return self._invalid(filter_check.first_error, "get_transactions")
                parsed_filters = filter_check.data

            parsed_pagination = None
            if pagination is not None:
                page_check = validate_input(TXPagination, pagination)
                if not page_check.success:
                    return self._invalid(page_check.first_error, "get_transactions")
                parsed_pagination = page_check.data

            rows = await self.transactions.find_by_user_id(owner_id, parsed_filters, parsed_pagination)
            return ServiceResponse.ok([self._to_item(tx) for tx in rows])
        except Exception:
            logger.error("Error retrieving transactions", user_id=user_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, LIST_ERROR)

    async def get_transaction(self, transaction_id: Any, user_id: Any) -> ServiceResponse[TXReadItem]:
        """Single transaction, visible only to its owner."""
        try:
            error, tx_id, owner_id = self._check_ids("get_transaction", user_id, transaction_id, with_tx=True)
            if error:
                return error

            error, tx = await self._fetch_owned(tx_id, owner_id)
            if error:
                return error
            return ServiceResponse.ok(self._to_item(tx))
        except Exception:
            logger.error("Error retrieving transaction", transaction_id=transaction_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, GET_ERROR)

    async def create_transaction(self, user_id: Any, data: Any) -> ServiceResponse[TXReadItem]:
        """
        Create a transaction for a user.

        The description is sanitized before storage (None when empty).
        """
        try:
            error, _, owner_id = self._check_ids("create_transaction", user_id)
            if error:
                return error

            payload_check = validate_input(TXCreateItem, data)
            if not payload_check.success:
                return self._invalid(payload_check.first_error, "create_transaction")
            item = payload_check.data

            tx = await self.transactions.create(
                owner_id,
                {
                    "type": item.type,
                    "amount": item.amount,
                    "description": sanitize_description(item.description),
                    "date": item.date,
                    },
                )
            return ServiceResponse.ok(self._to_item(tx))
        except Exception:
            logger.error("Error creating transaction", user_id=user_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, CREATE_ERROR)

    async def update_transaction(self, transaction_id: Any, user_id: Any, data: Any) -> ServiceResponse[TXReadItem]:
        """
        Partially update a transaction.

        Only keys present in data are changed; an explicit empty/None
        description clears it. The payload is validated before any lookup.
        """
        try:
            error, tx_id, owner_id = self._check_ids("update_transaction", user_id, transaction_id, with_tx=True)
            if error:
                return error

            payload_check = validate_input(TXUpdateItem, data)
            if not payload_check.success:
                return self._invalid(payload_check.first_error, "update_transaction")
            patch = payload_check.data.to_patch()
            if "description" in patch:
                patch["description"] = sanitize_description(patch["description"])

            error, _ = await self._fetch_owned(tx_id, owner_id)
            if error:
                return error

            updated = await self.transactions.update(tx_id, patch)
            if updated is None:
                return ServiceResponse.fail(ErrorKind.INTERNAL, UPDATE_FAILED)
            return ServiceResponse.ok(self._to_item(updated))
        except Exception:
            logger.error("Error updating transaction", transaction_id=transaction_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, UPDATE_ERROR)

    async def delete_transaction(self, transaction_id: Any, user_id: Any) -> ServiceResponse[bool]:
        """Hard delete of an owned transaction."""
        try:
            error, tx_id, owner_id = self._check_ids("delete_transaction", user_id, transaction_id, with_tx=True)
            if error:
                return error

            error, _ = await self._fetch_owned(tx_id, owner_id)
            if error:
                return error

            if not await self.transactions.delete(tx_id):
                return ServiceResponse.fail(ErrorKind.INTERNAL, DELETE_FAILED)
            logger.info("Transaction deleted", transaction_id=tx_id, user_id=owner_id)
            return ServiceResponse.ok(True)
        except Exception:
            logger.error("Error deleting transaction", transaction_id=transaction_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, DELETE_ERROR)

    async def get_summary(self, user_id: Any) -> ServiceResponse[TXSummary]:
        """Totals for a user: income, expense, balance and count."""
        try:
            error, _, owner_id = self._check_ids("get_summary", user_id)
            if error:
                return error
            return ServiceResponse.ok(await self.transactions.get_summary(owner_id))
        except Exception:
            logger.error("Error retrieving summary", user_id=user_id, exc_info=True)
            return ServiceResponse.fail(ErrorKind.INTERNAL, SUMMARY_ERROR)
