"""
Revenue aggregation.

Pricing rule shared by every revenue metric in the engine:

    item revenue  = price * quantity, or price alone when quantity is None
    order revenue = sum of item revenue
    total revenue = sum of order revenue

An item without a quantity counts as one unit. It is never priced at zero
and never skipped. No order is excluded on payment or fulfillment state;
callers narrow the set through the query filter if they need to.

Amounts are summed as float, so large totals carry floating-point error.
"""

from collections.abc import Iterable

from salespulse.models.orders import Order, OrderItem


def item_revenue(item: OrderItem) -> float:
    """Revenue contributed by a single line item."""
    if item.quantity is None:
        return item.price
    return item.price * item.quantity


def order_revenue(order: Order) -> float:
    """Revenue of one order: the sum of its item contributions."""
    return sum((item_revenue(item) for item in order.items), 0.0)


def total_revenue(orders: Iterable[Order]) -> float:
    """Total revenue across orders; 0.0 for an empty sequence."""
    return sum((order_revenue(order) for order in orders), 0.0)
