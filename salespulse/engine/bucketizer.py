"""
Status bucketizer.

Partitions order revenue into a fixed, ordered set of named buckets. The
output always holds every bucket of the chosen dimension, in declaration
order, with 0 for buckets nothing accumulated into. It never depends on
the order of the input.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Optional

from salespulse.models.enums import BucketDimension, OrderStatus, PaymentBucket
from salespulse.models.metrics import RevenueBucket
from salespulse.models.orders import Order

from .revenue import order_revenue


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


BUCKET_NAMES: dict[BucketDimension, tuple[str, ...]] = {
    BucketDimension.PAYMENT: enum_values(PaymentBucket),
    BucketDimension.FULFILLMENT: enum_values(OrderStatus),
}


def payment_key(order: Order) -> str:
    return PaymentBucket.PAID.value if order.is_paid else PaymentBucket.NOT_PAID.value


def fulfillment_key(order: Order) -> str:
    return order.order_status


_KEY_FUNCTIONS: dict[BucketDimension, Callable[[Order], Optional[str]]] = {
    BucketDimension.PAYMENT: payment_key,
    BucketDimension.FULFILLMENT: fulfillment_key,
}


def fixed_buckets(
    names: Iterable[str],
    totals: Optional[dict[str, float]] = None,
) -> list[RevenueBucket]:
    """
    Emit one bucket per name, in the given order, zero-filled.

    Keys in `totals` that are not among `names` are ignored.
    """
    totals = totals or {}
    return [RevenueBucket(name=name, total=totals.get(name, 0.0)) for name in names]


def accumulate(
    orders: Iterable[Order],
    key: Callable[[Order], Optional[str]],
) -> dict[str, float]:
    """Sum order revenue per bucket key. Orders keyed to None are skipped."""
    totals: dict[str, float] = {}
    for order in orders:
        bucket = key(order)
        if bucket is None:
            continue
        totals[bucket] = totals.get(bucket, 0.0) + order_revenue(order)
    return totals


def bucketize(orders: Iterable[Order], dimension: BucketDimension) -> list[RevenueBucket]:
    """
    Revenue per status bucket for one dimension.

    Payment buckets are exhaustive (every order is Paid or Not Paid).
    Fulfillment keys outside the OrderStatus enumeration are dropped
    without error and never create new buckets.

    Args:
        orders: Orders to partition
        dimension: PAYMENT or FULFILLMENT

    Returns:
        Fixed ordered bucket list for the dimension
    """
    totals = accumulate(orders, _KEY_FUNCTIONS[dimension])
    return fixed_buckets(BUCKET_NAMES[dimension], totals)


def empty_buckets(dimension: BucketDimension) -> list[RevenueBucket]:
    """The zero value of `bucketize` for a dimension."""
    return fixed_buckets(BUCKET_NAMES[dimension])
