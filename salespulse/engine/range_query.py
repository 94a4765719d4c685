"""
Range query resolver.

Turns an optional time window into the OrderFilter a record source
executes. Pure: no I/O, no error cases of its own. Problems only surface
when the filter is run against the source.
"""

from typing import Optional

from salespulse.models.orders import OrderFilter, TimeRange


def resolve_order_filter(
    store_id: str,
    time_range: Optional[TimeRange] = None,
    paid_only: bool = False,
) -> OrderFilter:
    """
    Build the filter selecting a store's orders inside a window.

    Args:
        store_id: Store whose orders are selected
        time_range: Inclusive window on created_at; None selects every order
        paid_only: Restrict to orders whose payment was confirmed

    Returns:
        OrderFilter ready to hand to RecordSource.fetch_orders
    """
    return OrderFilter(
        store_id=store_id,
        created_from=time_range.start if time_range else None,
        created_to=time_range.end if time_range else None,
        is_paid=True if paid_only else None,
    )
