"""
Order Analytics Engine: store-level sales metrics.

Public entry points for the reporting layer. Each one resolves the time
window into an order filter, fetches through the record source, and runs
one of the pure aggregators:

1. Total revenue and total sales (order count)
2. Revenue by payment status and by fulfillment status
3. Monthly revenue (paid orders) and revenue by category
4. Product counts, served through the TTL count cache
5. Period-over-period comparison and the bundled dashboard overview

No entry point raises. Fetch failures are logged and replaced by the
operation's zero value (see containment).
"""

import math
from datetime import datetime, timedelta
from typing import Optional

import structlog

from salespulse.models.catalog import predicate_for
from salespulse.models.enums import BucketDimension, ProductCountKind
from salespulse.models.metrics import DashboardOverview, PeriodComparison, RevenueBucket
from salespulse.models.orders import Order, TimeRange
from salespulse.storage.base import RecordSource

from .breakdowns import (
    empty_category_revenue,
    empty_monthly_revenue,
    monthly_revenue,
    revenue_by_category,
)
from .bucketizer import bucketize, empty_buckets
from .containment import FetchResult, contain
from .count_cache import CountCache
from .range_query import resolve_order_filter
from .revenue import total_revenue

logger = structlog.get_logger(__name__)


def percent_change(current: float, previous: float) -> float:
    """Change relative to `previous` in percent, one decimal, half rounded up."""
    if previous <= 0:
        return 0.0
    change = (current - previous) / previous * 100
    return math.floor(change * 10 + 0.5) / 10


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, truncated toward zero."""
    if end >= start:
        return (end - start).days
    return -((start - end).days)


def previous_period(time_range: TimeRange) -> TimeRange:
    """
    Window of equal length in days ending the day before `time_range` starts.

    Time of day is carried over from the current window's start.
    """
    duration = whole_days_between(time_range.start, time_range.end) + 1
    previous_end = time_range.start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=duration - 1)
    return TimeRange(start=previous_start, end=previous_end)


class OrderAnalyticsEngine:
    """
    Computes store sales metrics from a record source.

    Attributes:
        source: Record source for orders, catalog counts and categories
        count_cache: Cache in front of product count queries

    Example:
        >>> engine = OrderAnalyticsEngine(source=storage, count_cache=CountCache())
        >>> engine.get_total_revenue("store_1")
        250.0
    """

    def __init__(self, source: RecordSource, count_cache: Optional[CountCache] = None):
        """
        Initialize the engine.

        Args:
            source: Record source to read from
            count_cache: Cache for product counts; a default 60s cache is
                created when omitted
        """
        self.source = source
        self.count_cache = count_cache or CountCache()

    # =========================================================================
    # Contained fetches
    # =========================================================================

    def _fetch_orders(
        self,
        operation: str,
        store_id: str,
        time_range: Optional[TimeRange] = None,
        paid_only: bool = False,
    ) -> FetchResult[list[Order]]:
        def fetch() -> list[Order]:
            order_filter = resolve_order_filter(store_id, time_range, paid_only=paid_only)
            return self.source.fetch_orders(store_id, order_filter)

        return contain(operation, store_id, fetch)

    # =========================================================================
    # Public operations
    # =========================================================================

    def get_total_revenue(self, store_id: str, time_range: Optional[TimeRange] = None) -> float:
        """
        Total revenue of every order in the window.

        Unpaid and canceled orders are included.

        Returns:
            Revenue total, 0.0 when there are no orders or the fetch fails
        """
        result = self._fetch_orders("get_total_revenue", store_id, time_range)
        revenue = total_revenue(result.unwrap_or([]))
        logger.debug("total_revenue_computed", store_id=store_id, revenue=revenue, ok=result.ok)
        return revenue

    def get_total_sales(self, store_id: str, time_range: Optional[TimeRange] = None) -> int:
        """Number of orders in the window; 0 when none match or the fetch fails."""
        result = self._fetch_orders("get_total_sales", store_id, time_range)
        return len(result.unwrap_or([]))

    def get_revenue_by_payment_status(
        self, store_id: str, time_range: Optional[TimeRange] = None
    ) -> list[RevenueBucket]:
        """
        Revenue split into Paid / Not Paid.

        Returns:
            Both buckets in fixed order; all zero on failure
        """
        return self._bucketized(
            "get_revenue_by_payment_status", store_id, time_range, BucketDimension.PAYMENT
        )

    def get_revenue_by_fulfillment_status(
        self, store_id: str, time_range: Optional[TimeRange] = None
    ) -> list[RevenueBucket]:
        """
        Revenue split into Processing / Delivering / Delivered / Canceled.

        Returns:
            All four buckets in fixed order; all zero on failure
        """
        return self._bucketized(
            "get_revenue_by_fulfillment_status", store_id, time_range, BucketDimension.FULFILLMENT
        )

    def _bucketized(
        self,
        operation: str,
        store_id: str,
        time_range: Optional[TimeRange],
        dimension: BucketDimension,
    ) -> list[RevenueBucket]:
        result = self._fetch_orders(operation, store_id, time_range)
        if not result.ok:
            return empty_buckets(dimension)
        return bucketize(result.value, dimension)

    def get_monthly_revenue(
        self, store_id: str, time_range: Optional[TimeRange] = None
    ) -> list[RevenueBucket]:
        """
        Paid-order revenue per calendar month, Jan..Dec.

        Returns:
            Twelve buckets; all zero on failure
        """
        result = self._fetch_orders("get_monthly_revenue", store_id, time_range, paid_only=True)
        if not result.ok:
            return empty_monthly_revenue()
        return monthly_revenue(result.value)

    def get_revenue_by_category(
        self, store_id: str, time_range: Optional[TimeRange] = None
    ) -> list[RevenueBucket]:
        """
        Item revenue per category, largest first.

        Returns:
            Non-empty category buckets, or a single "No Revenue Data" bucket
            when there is nothing to show or the fetch fails
        """
        operation = "get_revenue_by_category"

        def fetch() -> list[RevenueBucket]:
            categories = self.source.fetch_categories(store_id)
            order_filter = resolve_order_filter(store_id, time_range)
            orders = self.source.fetch_orders(store_id, order_filter)
            return revenue_by_category(orders, categories)

        return contain(operation, store_id, fetch).unwrap_or(empty_category_revenue())

    def get_product_count(
        self,
        store_id: str,
        kind: ProductCountKind = ProductCountKind.TOTAL,
    ) -> int:
        """
        Number of products of a kind, cached for the cache TTL.

        Failed fetches return 0 and are not cached. `kind` may also be given
        as its plain string value.
        """
        kind = ProductCountKind(kind)
        key = (store_id, kind)
        cached = self.count_cache.get(key)
        if cached is not None:
            logger.debug("count_cache_hit", store_id=store_id, kind=kind.value)
            return cached

        result = contain(
            "get_product_count",
            store_id,
            lambda: self.source.fetch_catalog_count(store_id, predicate_for(kind)),
        )
        if not result.ok:
            return 0

        self.count_cache.put(key, result.value)
        logger.debug("count_cache_filled", store_id=store_id, kind=kind.value, count=result.value)
        return result.value

    def get_period_comparison(self, store_id: str, time_range: TimeRange) -> PeriodComparison:
        """
        Revenue and sales for a window against the equally long window before it.

        Percent changes are 0 when the previous window has no revenue/sales
        (including when its fetch failed).
        """
        previous = previous_period(time_range)

        current_revenue = self.get_total_revenue(store_id, time_range)
        current_sales = self.get_total_sales(store_id, time_range)
        previous_revenue = self.get_total_revenue(store_id, previous)
        previous_sales = self.get_total_sales(store_id, previous)

        return PeriodComparison(
            current_range=time_range,
            previous_range=previous,
            current_revenue=current_revenue,
            previous_revenue=previous_revenue,
            revenue_change_pct=percent_change(current_revenue, previous_revenue),
            current_sales=current_sales,
            previous_sales=previous_sales,
            sales_change_pct=percent_change(current_sales, previous_sales),
        )

    def get_dashboard_overview(self, store_id: str, time_range: TimeRange) -> DashboardOverview:
        """Every dashboard metric for one window."""
        logger.info(
            "dashboard_overview_started",
            store_id=store_id,
            start=time_range.start.isoformat(),
            end=time_range.end.isoformat(),
        )

        comparison = self.get_period_comparison(store_id, time_range)

        return DashboardOverview(
            store_id=store_id,
            time_range=time_range,
            total_revenue=comparison.current_revenue,
            total_sales=comparison.current_sales,
            total_products=self.get_product_count(store_id, ProductCountKind.TOTAL),
            monthly_revenue=self.get_monthly_revenue(store_id, time_range),
            revenue_by_fulfillment_status=self.get_revenue_by_fulfillment_status(store_id, time_range),
            revenue_by_payment_status=self.get_revenue_by_payment_status(store_id, time_range),
            revenue_by_category=self.get_revenue_by_category(store_id, time_range),
            comparison=comparison,
        )
