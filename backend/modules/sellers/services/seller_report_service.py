# backend/modules/sellers/services/seller_report_service.py

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import get_settings

from ..exceptions import AggregationFailure, SellerNotFound, validate_seller_id
from ..schemas.seller_report_schemas import (
    CategoryTotalResponse,
    CurrentPeriodResponse,
    OverviewResponse,
    PrivateReportResponse,
    PublicReportResponse,
    TrendBucketResponse,
    TrendPeriod,
)
from .attribution_service import AttributionService
from .expense_service import CategoryTotal, ExpenseService
from .ownership_service import OwnershipService
from .profit import period_figures
from .time_windows import TimeWindows, compute_time_windows, utcnow
from .trend_service import TrendBucket, TrendService, fill_missing_months

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SellerReportService:
    """
    Assembles private and public seller reports.

    Every report captures ``now`` once and derives all windows from it. After
    the seller's products are resolved, the independent sub-aggregations run
    concurrently, each in its own session, under one deadline. The first
    failure cancels the remaining sub-aggregations and fails the report as a
    whole; partial financial reports are never returned.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        timeout_seconds: Optional[float] = None,
        week_start: Optional[int] = None,
        recent_orders_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.session_factory = session_factory
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.report_timeout_seconds
        )
        self.week_start = week_start if week_start is not None else settings.report_week_start
        self.recent_orders_limit = (
            recent_orders_limit
            if recent_orders_limit is not None
            else settings.recent_orders_limit
        )

    async def build_private_report(
        self,
        seller_id: Any,
        now: Optional[datetime] = None,
        fill_empty_months: bool = False,
    ) -> PrivateReportResponse:
        """
        Seller-facing report with expenses and profit.

        The caller must already have established that ``seller_id`` is the
        authenticated seller.
        """
        seller_id = validate_seller_id(seller_id)
        windows = compute_time_windows(now or utcnow(), self.week_start)
        return await self._with_deadline(
            "private",
            seller_id,
            self._assemble_private(seller_id, windows, fill_empty_months),
        )

    async def build_public_report(
        self,
        seller_id: Any,
        now: Optional[datetime] = None,
        fill_empty_months: bool = False,
    ) -> PublicReportResponse:
        """
        Anyone-visible report: overview and sales trend only.

        Raises SellerNotFound unless ``seller_id`` is a user flagged as a
        seller. Expense data is never read.
        """
        seller_id = validate_seller_id(seller_id)
        windows = compute_time_windows(now or utcnow(), self.week_start)
        return await self._with_deadline(
            "public",
            seller_id,
            self._assemble_public(seller_id, windows, fill_empty_months),
        )

    async def _with_deadline(self, mode: str, seller_id: int, report: Awaitable[T]) -> T:
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(report, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Timed out generating {mode} report for seller {seller_id} "
                f"after {self.timeout_seconds}s"
            )
            raise AggregationFailure(
                "report", f"timed out after {self.timeout_seconds}s"
            ) from e
        except SellerNotFound:
            logger.warning(f"Public report requested for unknown seller {seller_id}")
            raise
        except AggregationFailure as e:
            logger.error(
                f"Error generating {mode} report for seller {seller_id}: {e}",
                exc_info=e.__cause__,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Generated {mode} report for seller {seller_id} in {elapsed_ms:.1f}ms")
        return result

    async def _assemble_private(
        self, seller_id: int, windows: TimeWindows, fill_empty_months: bool
    ) -> PrivateReportResponse:
        product_ids = await self._owned_product_ids(seller_id)

        results = await self._gather(
            {
                "overview": self._run(
                    "overview", lambda db: AttributionService(db).attribute(product_ids)
                ),
                "weekly_sales": self._run(
                    "weekly_sales",
                    lambda db: AttributionService(db).attribute(
                        product_ids, windows.start_of_week, windows.now
                    ),
                ),
                "monthly_sales": self._run(
                    "monthly_sales",
                    lambda db: AttributionService(db).attribute(
                        product_ids, windows.start_of_month, windows.now
                    ),
                ),
                "weekly_expenses": self._run(
                    "weekly_expenses",
                    lambda db: ExpenseService(db).total(
                        seller_id, windows.start_of_week
                    ),
                ),
                "monthly_expenses": self._run(
                    "monthly_expenses",
                    lambda db: ExpenseService(db).total(
                        seller_id, windows.start_of_month
                    ),
                ),
                "recent_orders": self._run(
                    "recent_orders",
                    lambda db: AttributionService(db).recent_orders(
                        product_ids, self.recent_orders_limit
                    ),
                ),
                "sales_trend": self._run(
                    "sales_trend",
                    lambda db: TrendService(db).monthly_trend(
                        product_ids, windows.start_of_trend_window, windows.now
                    ),
                ),
                "expenses_by_category": self._run(
                    "expenses_by_category",
                    lambda db: ExpenseService(db).totals_by_category(seller_id),
                ),
            }
        )

        overview = results["overview"]
        return PrivateReportResponse(
            overview=OverviewResponse(
                total_sales=overview.sales, total_orders=overview.orders
            ),
            current_period=CurrentPeriodResponse(
                weekly=period_figures(results["weekly_sales"], results["weekly_expenses"]),
                monthly=period_figures(
                    results["monthly_sales"], results["monthly_expenses"]
                ),
            ),
            recent_orders=results["recent_orders"],
            sales_trend=self._format_trend(
                results["sales_trend"], windows, fill_empty_months
            ),
            expenses_by_category=[
                self._format_category_total(row)
                for row in results["expenses_by_category"]
            ],
        )

    async def _assemble_public(
        self, seller_id: int, windows: TimeWindows, fill_empty_months: bool
    ) -> PublicReportResponse:
        is_seller = await self._run(
            "seller_lookup", lambda db: OwnershipService(db).is_seller(seller_id)
        )
        if not is_seller:
            raise SellerNotFound(seller_id)

        product_ids = await self._owned_product_ids(seller_id)

        results = await self._gather(
            {
                "overview": self._run(
                    "overview", lambda db: AttributionService(db).attribute(product_ids)
                ),
                "sales_trend": self._run(
                    "sales_trend",
                    lambda db: TrendService(db).monthly_trend(
                        product_ids, windows.start_of_trend_window, windows.now
                    ),
                ),
            }
        )

        overview = results["overview"]
        return PublicReportResponse(
            overview=OverviewResponse(
                total_sales=overview.sales, total_orders=overview.orders
            ),
            sales_trend=self._format_trend(
                results["sales_trend"], windows, fill_empty_months
            ),
        )

    async def _owned_product_ids(self, seller_id: int) -> FrozenSet[int]:
        return await self._run(
            "ownership", lambda db: OwnershipService(db).get_owned_product_ids(seller_id)
        )

    async def _run(
        self, name: str, query: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        """Run one sub-aggregation in a session of its own."""
        try:
            async with self.session_factory() as db:
                return await query(db)
        except Exception as e:
            raise AggregationFailure(name, str(e)) from e

    async def _gather(self, jobs: Dict[str, Awaitable[Any]]) -> Dict[str, Any]:
        """
        Run ``jobs`` concurrently and return their results by name.

        On the first failure, or when the caller is cancelled, the jobs still
        running are cancelled and awaited before the error propagates.
        """
        tasks = {
            name: asyncio.create_task(job) for name, job in jobs.items()
        }
        try:
            await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
            raise

        return {name: task.result() for name, task in tasks.items()}

    @staticmethod
    def _format_trend(
        buckets: List[TrendBucket], windows: TimeWindows, fill_empty_months: bool
    ) -> List[TrendBucketResponse]:
        if fill_empty_months:
            buckets = fill_missing_months(
                buckets, windows.start_of_trend_window, windows.now
            )
        return [
            TrendBucketResponse(
                period=TrendPeriod(year=bucket.year, month=bucket.month),
                sales=bucket.sales,
                orders=bucket.orders,
            )
            for bucket in buckets
        ]

    @staticmethod
    def _format_category_total(row: CategoryTotal) -> CategoryTotalResponse:
        return CategoryTotalResponse(category=row.category, total=row.total)
