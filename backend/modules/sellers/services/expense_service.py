# backend/modules/sellers/services/expense_service.py

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Numeric, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import MONEY_PRECISION, MONEY_SCALE
from ..models.marketplace_models import Expense, ExpenseCategory
from ..schemas.expense_schemas import ExpenseCreate
from .attribution_service import to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryTotal:
    category: ExpenseCategory
    total: Decimal


class ExpenseService:
    """Seller expense totals, category breakdown and expense recording"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def total(
        self,
        seller_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Decimal:
        """Sum of the seller's expenses incurred in ``[start, end)``; zero when none."""
        query = select(
            func.coalesce(
                func.sum(Expense.amount, type_=Numeric(MONEY_PRECISION, MONEY_SCALE)), 0
            )
        ).where(Expense.user_id == seller_id)
        if start is not None:
            query = query.where(Expense.incurred_at >= start)
        if end is not None:
            query = query.where(Expense.incurred_at < end)

        return to_decimal((await self.db.execute(query)).scalar_one())

    async def totals_by_category(self, seller_id: int) -> List[CategoryTotal]:
        """All-time totals per category, largest first."""
        total = func.sum(
            Expense.amount, type_=Numeric(MONEY_PRECISION, MONEY_SCALE)
        ).label("total")
        query = (
            select(Expense.category, total)
            .where(Expense.user_id == seller_id)
            .group_by(Expense.category)
            .order_by(total.desc(), Expense.category)
        )
        result = await self.db.execute(query)
        return [
            CategoryTotal(category=ExpenseCategory(row.category), total=to_decimal(row.total))
            for row in result.all()
        ]

    async def list_expenses(
        self,
        seller_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Expense]:
        query = select(Expense).where(Expense.user_id == seller_id)
        if start is not None:
            query = query.where(Expense.incurred_at >= start)
        if end is not None:
            query = query.where(Expense.incurred_at < end)
        query = query.order_by(Expense.incurred_at.desc(), Expense.id.desc())

        return list((await self.db.execute(query)).scalars().all())

    async def add_expense(self, seller_id: int, expense_in: ExpenseCreate) -> Expense:
        """Record a new expense for ``seller_id``."""
        expense = Expense(
            user_id=seller_id,
            title=expense_in.title,
            description=expense_in.description,
            amount=expense_in.amount,
            category=expense_in.category,
            type=expense_in.type,
            incurred_at=expense_in.date,
        )
        self.db.add(expense)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.exception(f"Error adding expense for seller {seller_id}")
            raise
        await self.db.refresh(expense)

        logger.info(
            f"Recorded expense {expense.id} for seller {seller_id}: "
            f"{expense.amount} ({expense.category.value})"
        )
        return expense
