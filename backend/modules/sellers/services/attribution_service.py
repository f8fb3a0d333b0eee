# backend/modules/sellers/services/attribution_service.py

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import AbstractSet, List, Optional

from sqlalchemy import Numeric, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..constants import DEFAULT_RECENT_ORDERS_LIMIT, MONEY_PRECISION, MONEY_SCALE, ZERO
from ..models.marketplace_models import Order, OrderItem
from ..schemas.seller_report_schemas import (
    BuyerResponse,
    RecentOrderItemResponse,
    RecentOrderResponse,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SellerShare:
    """The part of one order attributable to one seller"""

    order_id: int
    seller_amount: Decimal


@dataclass(frozen=True)
class AttributionResult:
    """Cross-order reduction of seller shares"""

    sales: Decimal = ZERO
    orders: int = 0


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def seller_amount_column(label: str = "seller_amount"):
    """sum(quantity * unit price) over the grouped line items."""
    return func.sum(
        OrderItem.quantity * OrderItem.price,
        type_=Numeric(MONEY_PRECISION, MONEY_SCALE),
    ).label(label)


def apply_order_window(
    query: Select, start: Optional[datetime], end: Optional[datetime]
) -> Select:
    """Restrict to orders placed in ``[start, end)``; either bound may be open."""
    if start is not None:
        query = query.where(Order.created_at >= start)
    if end is not None:
        query = query.where(Order.created_at < end)
    return query


class AttributionService:
    """
    Attributes multi-seller orders to a single seller.

    Only line items whose product is in the seller's ownership set count, and
    the seller amount is computed from those line items (quantity x unit
    price), never from the order's stored total. Results are reduced in two
    stages: line items are first grouped per order into one SellerShare, and
    only then summed across orders. Grouping by order first is what keeps an
    order containing several of the seller's items from being counted twice.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _shares_query(
        self,
        product_ids: AbstractSet[int],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Select:
        query = (
            select(OrderItem.order_id.label("order_id"), seller_amount_column())
            .join(Order, Order.id == OrderItem.order_id)
            .where(OrderItem.product_id.in_(sorted(product_ids)))
        )
        query = apply_order_window(query, start, end)
        return query.group_by(OrderItem.order_id)

    async def seller_shares(
        self,
        product_ids: AbstractSet[int],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SellerShare]:
        """Per-order shares (first reduction stage), ordered by order id."""
        if not product_ids:
            return []

        query = self._shares_query(product_ids, start, end).order_by(OrderItem.order_id)
        result = await self.db.execute(query)
        return [
            SellerShare(order_id=row.order_id, seller_amount=to_decimal(row.seller_amount))
            for row in result.all()
        ]

    async def attribute(
        self,
        product_ids: AbstractSet[int],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> AttributionResult:
        """
        Total seller sales and distinct order count.

        Args:
            product_ids: Products owned by the seller
            start: Inclusive lower bound on the order timestamp (None = open)
            end: Exclusive upper bound on the order timestamp (None = open)
        """
        if not product_ids:
            return AttributionResult()

        shares = self._shares_query(product_ids, start, end).subquery("seller_shares")
        query = select(
            func.coalesce(func.sum(shares.c.seller_amount), 0).label("sales"),
            func.count(func.distinct(shares.c.order_id)).label("orders"),
        )
        row = (await self.db.execute(query)).one()

        return AttributionResult(sales=to_decimal(row.sales), orders=int(row.orders or 0))

    async def recent_orders(
        self,
        product_ids: AbstractSet[int],
        limit: int = DEFAULT_RECENT_ORDERS_LIMIT,
    ) -> List[RecentOrderResponse]:
        """Newest orders containing at least one of the seller's products."""
        if not product_ids or limit <= 0:
            return []

        containing = (
            select(OrderItem.order_id)
            .where(OrderItem.product_id.in_(sorted(product_ids)))
            .distinct()
        )
        query = (
            select(Order)
            .where(Order.id.in_(containing))
            .options(selectinload(Order.buyer), selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
        )
        orders = (await self.db.execute(query)).scalars().all()
        return [self._format_recent_order(order, product_ids) for order in orders]

    @staticmethod
    def _format_recent_order(
        order: Order, product_ids: AbstractSet[int]
    ) -> RecentOrderResponse:
        seller_amount = sum(
            (
                item.quantity * to_decimal(item.price)
                for item in order.items
                if item.product_id in product_ids
            ),
            ZERO,
        )
        buyer = None
        if order.buyer is not None:
            buyer = BuyerResponse(
                id=order.buyer.id, name=order.buyer.name, email=order.buyer.email
            )

        return RecentOrderResponse(
            id=order.id,
            total_price=to_decimal(order.total_price),
            order_status=order.order_status,
            is_paid=order.is_paid,
            is_delivered=order.is_delivered,
            created_at=order.created_at,
            buyer=buyer,
            items=[
                RecentOrderItemResponse(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=item.quantity,
                    price=to_decimal(item.price),
                )
                for item in order.items
            ],
            seller_amount=seller_amount,
        )
