# backend/modules/sellers/services/trend_service.py

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import AbstractSet, List, Optional

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import ZERO
from ..models.marketplace_models import Order, OrderItem
from .attribution_service import apply_order_window, seller_amount_column, to_decimal
from .time_windows import iter_months

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendBucket:
    """Seller sales and distinct orders for one calendar month"""

    year: int
    month: int
    sales: Decimal
    orders: int


class TrendService:
    """Monthly seller sales series built from per-order shares"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def monthly_trend(
        self,
        product_ids: AbstractSet[int],
        start: datetime,
        end: Optional[datetime] = None,
    ) -> List[TrendBucket]:
        """
        Get the seller's monthly sales trend.

        Line items are grouped by (year, month, order) first, giving one
        share per order per month, and those shares are then grouped by
        (year, month), summing sales and counting distinct orders.

        Months without seller activity are not returned; use
        ``fill_missing_months`` for a continuous series.

        Args:
            product_ids: Products owned by the seller
            start: Inclusive lower bound on the order timestamp
            end: Exclusive upper bound on the order timestamp
        """
        if not product_ids:
            return []

        year = extract("year", Order.created_at).label("year")
        month = extract("month", Order.created_at).label("month")

        per_order = (
            select(
                year,
                month,
                OrderItem.order_id.label("order_id"),
                seller_amount_column("seller_sales_in_order"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .where(OrderItem.product_id.in_(sorted(product_ids)))
        )
        per_order = apply_order_window(per_order, start, end)
        per_order = per_order.group_by(year, month, OrderItem.order_id).subquery(
            "per_order_month"
        )

        query = (
            select(
                per_order.c.year,
                per_order.c.month,
                func.sum(per_order.c.seller_sales_in_order).label("sales"),
                func.count(func.distinct(per_order.c.order_id)).label("orders"),
            )
            .group_by(per_order.c.year, per_order.c.month)
            .order_by(per_order.c.year, per_order.c.month)
        )
        result = await self.db.execute(query)

        return [
            TrendBucket(
                year=int(row.year),
                month=int(row.month),
                sales=to_decimal(row.sales),
                orders=int(row.orders),
            )
            for row in result.all()
        ]


def fill_missing_months(
    buckets: List[TrendBucket], start: datetime, end: datetime
) -> List[TrendBucket]:
    """
    Backfill zero rows so every month from ``start`` to ``end`` is present.

    Months outside that range are dropped. The input is not modified.
    """
    by_month = {(bucket.year, bucket.month): bucket for bucket in buckets}
    return [
        by_month.get((year, month), TrendBucket(year=year, month=month, sales=ZERO, orders=0))
        for year, month in iter_months(start, end)
    ]
