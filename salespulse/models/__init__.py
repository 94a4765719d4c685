"""
Pydantic v2 data models for the SalesPulse analytics engine.

Model Organization:
    - enums: Order status, bucket names and count kinds
    - orders: Order records, time windows and resolved order filters
    - catalog: Products, categories and catalog count predicates
    - metrics: Revenue buckets and dashboard result models

Usage:
    >>> from salespulse.models import Order, OrderItem
    >>> order = Order(
    ...     id="ord_1",
    ...     created_at=datetime(2026, 3, 1, 12, 0),
    ...     is_paid=True,
    ...     items=[OrderItem(price=100.0, quantity=2)],
    ... )
"""

from .catalog import CatalogPredicate, Category, Product, predicate_for
from .enums import BucketDimension, Month, OrderStatus, PaymentBucket, ProductCountKind
from .metrics import DashboardOverview, PeriodComparison, RevenueBucket
from .orders import Order, OrderFilter, OrderItem, TimeRange

__all__ = [
    # Enums
    "BucketDimension",
    "Month",
    "OrderStatus",
    "PaymentBucket",
    "ProductCountKind",
    # Orders
    "Order",
    "OrderFilter",
    "OrderItem",
    "TimeRange",
    # Catalog
    "CatalogPredicate",
    "Category",
    "Product",
    "predicate_for",
    # Metrics
    "DashboardOverview",
    "PeriodComparison",
    "RevenueBucket",
]
