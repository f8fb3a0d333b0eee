# backend/modules/sellers/services/profit.py

from decimal import Decimal

from ..schemas.seller_report_schemas import PeriodFiguresResponse
from .attribution_service import AttributionResult


def profit(sales: Decimal, expenses: Decimal) -> Decimal:
    """Sales minus expenses. No rounding; may be negative."""
    return sales - expenses


def period_figures(
    attribution: AttributionResult, expenses: Decimal
) -> PeriodFiguresResponse:
    return PeriodFiguresResponse(
        sales=attribution.sales,
        orders=attribution.orders,
        expenses=expenses,
        profit=profit(attribution.sales, expenses),
    )
