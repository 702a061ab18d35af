"""
Transaction Repository

Persistence and aggregate queries for transactions.

Listing order is date DESC, id DESC. The summary is computed in a single
round trip with conditional aggregates (SUM(CASE ...)) plus COUNT.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import case, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from backend.app.db.models import Transaction, TransactionType
from backend.app.repositories.base import MAX_STORED_ID, STORAGE_ERRORS, RepositoryError, is_storable_id
from backend.app.schemas.transactions import TXFilter, TXPagination, TXSummary, UPDATABLE_FIELDS
from backend.app.utils.datetime_utils import utcnow

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def _to_money(value: Any) -> Decimal:
    """Normalize an aggregate (None, int, float or Decimal) to a 2-decimal Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT)


class TransactionRepository:
    """Data access for transactions. Ownership checks belong to the service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, transaction_id: int) -> Optional[Transaction]:
        if not is_storable_id(transaction_id):
            return None
        try:
            return await self.session.get(Transaction, transaction_id)
        except STORAGE_ERRORS as e:
            logger.error("Error finding transaction", transaction_id=transaction_id, error=str(e))
            raise RepositoryError("Failed to find transaction") from e

    async def find_by_user_id(
        self,
        user_id: int,
        filters: Optional[TXFilter] = None,
        pagination: Optional[TXPagination] = None,
        ) -> List[Transaction]:
        """
        List a user's transactions, newest first.

        Args:
            user_id: Owner
            filters: Optional type and inclusive date range
            pagination: Optional page/limit (no pagination when None)
        """
        if not is_storable_id(user_id):
            return []
        if pagination is not None and pagination.offset > MAX_STORED_ID:
            return []

        stmt = select(Transaction).where(Transaction.user_id == user_id)

        if filters is not None:
            if filters.type is not None:
                stmt = stmt.where(Transaction.type == filters.type)
            if filters.start_date is not None:
                stmt = stmt.where(Transaction.date >= filters.start_date)
            if filters.end_date is not None:
                stmt = stmt.where(Transaction.date <= filters.end_date)

        stmt = stmt.order_by(Transaction.date.desc(), Transaction.id.desc())

        if pagination is not None:
            stmt = stmt.offset(pagination.offset).limit(pagination.limit)

        try:
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except STORAGE_ERRORS as e:
            logger.error("Error listing transactions", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to find transactions") from e

    async def create(self, user_id: int, data: Dict[str, Any]) -> Transaction:
        """
        Insert a transaction for a user.

        Args:
            user_id: Owner
            data: Validated fields (type, amount, description, date)
        """
        tx = Transaction(
            user_id=user_id,
            type=data["type"],
            amount=data["amount"],
            description=data.get("description"),
            date=data["date"],
            )
        try:
            self.session.add(tx)
            await self.session.commit()
            await self.session.refresh(tx)
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error creating transaction", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to create transaction") from e

        logger.info("Transaction created", transaction_id=tx.id, user_id=user_id)
        return tx

    async def update(self, transaction_id: int, data: Dict[str, Any]) -> Optional[Transaction]:
        """
        Sparse update: only keys present in data are written; updated_at is bumped.

        Returns:
            Updated transaction, or None if it does not exist
        """
        if not is_storable_id(transaction_id):
            return None
        try:
            tx = await self.session.get(Transaction, transaction_id)
            if tx is None:
                return None

            for field, value in data.items():
                if field in UPDATABLE_FIELDS:
                    setattr(tx, field, value)
            tx.updated_at = utcnow()

            await self.session.commit()
            await self.session.refresh(tx)
            return tx
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error updating transaction", transaction_id=transaction_id, error=str(e))
            raise RepositoryError("Failed to update transaction") from e

    async def delete(self, transaction_id: int) -> bool:
        """Hard delete. False when no row matched."""
        if not is_storable_id(transaction_id):
            return False
        stmt = delete(Transaction).where(Transaction.id == transaction_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except STORAGE_ERRORS as e:
            await self.session.rollback()
            logger.error("Error deleting transaction", transaction_id=transaction_id, error=str(e))
            raise RepositoryError("Failed to delete transaction") from e
        return result.rowcount > 0

    async def get_summary(self, user_id: int) -> TXSummary:
        """
        Income/expense totals and count for a user in one query.

        A user without transactions gets an all-zero summary.
        """
        if not is_storable_id(user_id):
            return TXSummary()

        income = func.coalesce(
            func.sum(case((Transaction.type == TransactionType.INCOME, Transaction.amount), else_=0)), 0
            )
        expense = func.coalesce(
            func.sum(case((Transaction.type == TransactionType.EXPENSE, Transaction.amount), else_=0)), 0
            )
        stmt = (
            select(income.label("total_income"), expense.label("total_expense"), func.count(Transaction.id))
            .where(Transaction.user_id == user_id)
            )
        try:
            result = await self.session.execute(stmt)
            total_income, total_expense, count = result.one()
        except STORAGE_ERRORS as e:
            logger.error("Error computing summary", user_id=user_id, error=str(e))
            raise RepositoryError("Failed to get transaction summary") from e

        total_income = _to_money(total_income)
        total_expense = _to_money(total_expense)
        return TXSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
            transaction_count=count or 0,
            )
