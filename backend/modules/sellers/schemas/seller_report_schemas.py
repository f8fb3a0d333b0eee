# backend/modules/sellers/schemas/seller_report_schemas.py

"""
Output contracts of the seller reports.

Field names serialize in the camelCase shape the storefront already reads
(``totalSales``, ``currentPeriod``, ``salesTrend`` ...). Trend and category
rows keep their grouping key under ``_id``. Money is ``Decimal`` in Python
and a JSON number on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from ..models.marketplace_models import ExpenseCategory, OrderStatus

Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class OverviewResponse(ReportModel):
    """All-time figures"""

    total_sales: Money = Field(Decimal("0"), description="Seller share of all orders")
    total_orders: int = Field(0, ge=0, description="Distinct orders with seller items")


class SalesFiguresResponse(ReportModel):
    sales: Money = Decimal("0")
    orders: int = Field(0, ge=0)


class PeriodFiguresResponse(SalesFiguresResponse):
    """Sales, expenses and profit for one window; profit may be negative"""

    expenses: Money = Decimal("0")
    profit: Money = Decimal("0")


class CurrentPeriodResponse(ReportModel):
    weekly: PeriodFiguresResponse
    monthly: PeriodFiguresResponse


class TrendPeriod(ReportModel):
    year: int
    month: int = Field(ge=1, le=12)


class TrendBucketResponse(ReportModel):
    period: TrendPeriod = Field(alias="_id")
    sales: Money
    orders: int = Field(ge=0)


class CategoryTotalResponse(ReportModel):
    category: ExpenseCategory = Field(alias="_id")
    total: Money


class BuyerResponse(ReportModel):
    id: int = Field(alias="_id")
    name: str
    email: str


class RecentOrderItemResponse(ReportModel):
    product_id: int = Field(alias="product")
    name: str
    quantity: int = Field(alias="qty")
    price: Money


class RecentOrderResponse(ReportModel):
    id: int = Field(alias="_id")
    total_price: Money
    order_status: OrderStatus
    is_paid: bool
    is_delivered: bool
    created_at: datetime
    buyer: Optional[BuyerResponse] = Field(None, alias="user")
    items: List[RecentOrderItemResponse] = Field(
        default_factory=list, alias="orderItems"
    )
    seller_amount: Money = Field(
        Decimal("0"), description="This seller's share of the order"
    )


class PublicReportResponse(ReportModel):
    """Anyone-visible report. Carries no expense or profit data."""

    model_config = ConfigDict(extra="forbid")

    overview: OverviewResponse
    sales_trend: List[TrendBucketResponse] = Field(default_factory=list)


class PrivateReportResponse(ReportModel):
    """Seller-facing report"""

    overview: OverviewResponse
    current_period: CurrentPeriodResponse
    recent_orders: List[RecentOrderResponse] = Field(default_factory=list)
    sales_trend: List[TrendBucketResponse] = Field(default_factory=list)
    expenses_by_category: List[CategoryTotalResponse] = Field(default_factory=list)
