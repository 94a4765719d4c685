"""
Store sales metrics router.

Thin read-only HTTP surface over OrderAnalyticsEngine. Every endpoint
accepts an optional inclusive window as `start` / `end` ISO timestamps;
both must be given together. Metric endpoints never fail on record source
errors: they return the engine's zero values.
"""

from datetime import datetime, time, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from salespulse.engine.analytics import OrderAnalyticsEngine
from salespulse.models.enums import ProductCountKind
from salespulse.models.metrics import DashboardOverview
from salespulse.models.orders import TimeRange
from salespulse.services import get_analytics_engine
from salespulse.utils.logging import bind_metric_context, get_logger

logger = get_logger(__name__)
router = APIRouter()


def parse_time_range(
    start: Optional[datetime] = Query(default=None, description="Inclusive window start"),
    end: Optional[datetime] = Query(default=None, description="Inclusive window end"),
) -> Optional[TimeRange]:
    """
    Build the optional window from query params; a lone bound is rejected.

    Bounds are normalized to naive UTC. An end exactly at midnight is
    treated as a date and extended to the last microsecond of that day.
    """
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise HTTPException(
            status_code=422,
            detail="start and end must be provided together",
        )
    time_range = TimeRange(start=start, end=end)
    # A date-only end covers the whole day
    if time_range.end.time() == time.min:
        time_range.end = datetime.combine(time_range.end.date(), time.max)
    return time_range


def current_month_to_date() -> TimeRange:
    """Default dashboard window: start of the current month until now (UTC)."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return TimeRange(start=now.replace(day=1, hour=0, minute=0, second=0, microsecond=0), end=now)


@router.get("/{store_id}/metrics/revenue")
async def get_total_revenue(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Total revenue for the window (all orders, paid or not)."""
    bind_metric_context(store_id, "total_revenue")
    logger.info("metric_requested")
    return {
        "store_id": store_id,
        "total_revenue": engine.get_total_revenue(store_id, time_range),
    }


@router.get("/{store_id}/metrics/sales")
async def get_total_sales(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Number of orders in the window."""
    bind_metric_context(store_id, "total_sales")
    logger.info("metric_requested")
    return {
        "store_id": store_id,
        "total_sales": engine.get_total_sales(store_id, time_range),
    }


@router.get("/{store_id}/metrics/revenue/payment-status")
async def get_revenue_by_payment_status(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Revenue split into Paid / Not Paid."""
    bind_metric_context(store_id, "revenue_by_payment_status")
    buckets = engine.get_revenue_by_payment_status(store_id, time_range)
    return {"store_id": store_id, "buckets": [b.model_dump() for b in buckets]}


@router.get("/{store_id}/metrics/revenue/fulfillment-status")
async def get_revenue_by_fulfillment_status(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Revenue split by fulfillment state."""
    bind_metric_context(store_id, "revenue_by_fulfillment_status")
    buckets = engine.get_revenue_by_fulfillment_status(store_id, time_range)
    return {"store_id": store_id, "buckets": [b.model_dump() for b in buckets]}


@router.get("/{store_id}/metrics/revenue/monthly")
async def get_monthly_revenue(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Paid-order revenue per calendar month."""
    bind_metric_context(store_id, "monthly_revenue")
    buckets = engine.get_monthly_revenue(store_id, time_range)
    return {"store_id": store_id, "buckets": [b.model_dump() for b in buckets]}


@router.get("/{store_id}/metrics/revenue/category")
async def get_revenue_by_category(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Item revenue per category, largest first."""
    bind_metric_context(store_id, "revenue_by_category")
    buckets = engine.get_revenue_by_category(store_id, time_range)
    return {"store_id": store_id, "buckets": [b.model_dump() for b in buckets]}


@router.get("/{store_id}/metrics/products")
async def get_product_count(
    store_id: str,
    kind: ProductCountKind = ProductCountKind.TOTAL,
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """Cached product count of the requested kind."""
    bind_metric_context(store_id, "product_count")
    return {
        "store_id": store_id,
        "kind": kind.value,
        "count": engine.get_product_count(store_id, kind),
    }


@router.get("/{store_id}/metrics/overview", response_model=DashboardOverview)
async def get_dashboard_overview(
    store_id: str,
    time_range: Optional[TimeRange] = Depends(parse_time_range),
    engine: OrderAnalyticsEngine = Depends(get_analytics_engine),
):
    """
    Every dashboard metric for the window.
    Defaults to the current month to date when no window is given.
    """
    window = time_range or current_month_to_date()
    bind_metric_context(store_id, "dashboard_overview")
    logger.info("metric_requested", start=window.start.isoformat(), end=window.end.isoformat())
    return engine.get_dashboard_overview(store_id, window)
