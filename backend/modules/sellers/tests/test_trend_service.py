"""
Tests for the monthly seller sales trend.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from modules.sellers.services.trend_service import (
    TrendBucket,
    TrendService,
    fill_missing_months,
)

from .conftest import product_ids

TREND_START = datetime(2025, 11, 1)
NOW = datetime(2026, 10, 22, 15, 0)


class TestMonthlyTrend:
    @pytest.mark.asyncio
    async def test_buckets_ascending_by_month(self, db_session, marketplace):
        products = marketplace["products"]

        trend = await TrendService(db_session).monthly_trend(
            product_ids([products["P"], products["Q"]]), TREND_START, NOW
        )

        assert trend == [
            TrendBucket(year=2026, month=9, sales=Decimal("100.00"), orders=1),
            TrendBucket(year=2026, month=10, sales=Decimal("200.00"), orders=1),
        ]

    @pytest.mark.asyncio
    async def test_orders_counted_once_per_month(self, db_session, seed):
        seller = await seed.seller("Seller S")
        other = await seed.seller("Seller T")
        buyer = await seed.user("Buyer")
        p = await seed.product(seller, "P", "10.00")
        q = await seed.product(seller, "Q", "5.00")
        r = await seed.product(other, "R", "99.00")
        await seed.order(buyer, datetime(2026, 3, 2), [(p, 1), (q, 2), (r, 1)])
        await seed.order(buyer, datetime(2026, 3, 20), [(q, 1)])
        await seed.order(buyer, datetime(2026, 3, 21), [(r, 5)])

        trend = await TrendService(db_session).monthly_trend(
            product_ids([p, q]), TREND_START, NOW
        )

        assert trend == [
            TrendBucket(year=2026, month=3, sales=Decimal("25.00"), orders=2)
        ]
        # March has three orders, only two contain the seller's products
        assert trend[0].orders <= 2

    @pytest.mark.asyncio
    async def test_orders_outside_window_are_excluded(self, db_session, seed):
        seller = await seed.seller("Seller S")
        buyer = await seed.user("Buyer")
        p = await seed.product(seller, "P", "10.00")
        await seed.order(buyer, datetime(2025, 10, 31, 23, 59), [(p, 1)])
        await seed.order(buyer, TREND_START, [(p, 2)])
        await seed.order(buyer, NOW, [(p, 3)])

        trend = await TrendService(db_session).monthly_trend(
            product_ids([p]), TREND_START, NOW
        )

        assert trend == [
            TrendBucket(year=2025, month=11, sales=Decimal("20.00"), orders=1)
        ]

    @pytest.mark.asyncio
    async def test_strictly_ascending_across_year_boundary(self, db_session, seed):
        seller = await seed.seller("Seller S")
        buyer = await seed.user("Buyer")
        p = await seed.product(seller, "P", "1.00")
        for placed_at in (
            datetime(2026, 2, 3),
            datetime(2025, 12, 30),
            datetime(2026, 1, 15),
            datetime(2025, 11, 4),
        ):
            await seed.order(buyer, placed_at, [(p, 1)])

        trend = await TrendService(db_session).monthly_trend(
            product_ids([p]), TREND_START, NOW
        )

        keys = [(bucket.year, bucket.month) for bucket in trend]
        assert keys == [(2025, 11), (2025, 12), (2026, 1), (2026, 2)]
        assert keys == sorted(set(keys))

    @pytest.mark.asyncio
    async def test_empty_ownership_set(self, db_session, marketplace):
        trend = await TrendService(db_session).monthly_trend(frozenset(), TREND_START, NOW)

        assert trend == []


class TestFillMissingMonths:
    def test_fills_twelve_months(self):
        buckets = [
            TrendBucket(year=2026, month=9, sales=Decimal("100"), orders=1),
            TrendBucket(year=2026, month=10, sales=Decimal("200"), orders=1),
        ]

        filled = fill_missing_months(buckets, TREND_START, NOW)

        assert len(filled) == 12
        assert (filled[0].year, filled[0].month) == (2025, 11)
        assert filled[0].sales == Decimal("0") and filled[0].orders == 0
        assert filled[-2:] == buckets

    def test_does_not_modify_input(self):
        buckets = [TrendBucket(year=2026, month=1, sales=Decimal("5"), orders=1)]

        fill_missing_months(buckets, TREND_START, NOW)

        assert buckets == [TrendBucket(year=2026, month=1, sales=Decimal("5"), orders=1)]
