"""
Order analytics aggregation engine.

- range_query: time window -> record source filter
- revenue: item/order/total revenue with the implicit-quantity rule
- bucketizer: fixed ordered status buckets (payment, fulfillment)
- breakdowns: monthly revenue graph and revenue by category
- count_cache: TTL cache in front of catalog counts
- containment: typed fetch results and zero-value degradation
- analytics: the public OrderAnalyticsEngine facade
"""

__all__ = [
    "CountCache",
    "FetchResult",
    "OrderAnalyticsEngine",
    "bucketize",
    "contain",
    "resolve_order_filter",
    "total_revenue",
]

from salespulse.engine.analytics import OrderAnalyticsEngine
from salespulse.engine.bucketizer import bucketize
from salespulse.engine.containment import FetchResult, contain
from salespulse.engine.count_cache import CountCache
from salespulse.engine.range_query import resolve_order_filter
from salespulse.engine.revenue import total_revenue
