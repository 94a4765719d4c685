"""
Revenue breakdowns for the dashboard charts.

- Monthly graph: paid-order revenue folded into twelve calendar-month
  buckets (Jan..Dec). Orders from different years land in the same month.
- Category revenue: item revenue grouped by category display name, only
  non-empty categories, largest first.

Both reuse the item pricing rule from the revenue aggregator.
"""

from collections.abc import Iterable

from salespulse.models.catalog import Category
from salespulse.models.enums import Month
from salespulse.models.metrics import RevenueBucket
from salespulse.models.orders import Order

from .bucketizer import accumulate, enum_values, fixed_buckets
from .revenue import item_revenue

MONTH_NAMES = enum_values(Month)

UNCATEGORIZED = "Uncategorized"
NO_REVENUE_DATA = "No Revenue Data"

# Built-in categories every store can reference without defining them.
DEFAULT_CATEGORY_NAMES: dict[str, str] = {
    "food": "Food",
    "beverage": "Beverage",
    "dessert": "Dessert",
    "appetizer": "Appetizer",
    "side": "Side Dish",
}


def month_key(order: Order) -> str:
    return MONTH_NAMES[order.created_at.month - 1]


def monthly_revenue(orders: Iterable[Order]) -> list[RevenueBucket]:
    """
    Revenue per calendar month, all twelve months in order.

    Callers are expected to pass paid orders only; this function does not
    filter on payment state itself.
    """
    return fixed_buckets(MONTH_NAMES, accumulate(orders, month_key))


def empty_monthly_revenue() -> list[RevenueBucket]:
    return fixed_buckets(MONTH_NAMES)


def category_names(categories: Iterable[Category]) -> dict[str, str]:
    """Map category IDs to display names. Built-in defaults win on ID clashes."""
    names = {category.id: category.name for category in categories}
    names.update(DEFAULT_CATEGORY_NAMES)
    return names


def revenue_by_category(
    orders: Iterable[Order],
    categories: Iterable[Category] = (),
) -> list[RevenueBucket]:
    """
    Revenue per category display name.

    An item's category ID is resolved through the store's categories and
    the built-in defaults; an unknown ID is reported under the raw ID and
    an item with no category under "Uncategorized".

    Returns:
        Buckets with revenue above zero, sorted by total descending (name
        ascending on ties). A single "No Revenue Data" bucket when nothing
        earned revenue.
    """
    names = category_names(categories)
    totals: dict[str, float] = {}

    for order in orders:
        for item in order.items:
            if item.category:
                name = names.get(item.category, item.category)
            else:
                name = UNCATEGORIZED
            totals[name] = totals.get(name, 0.0) + item_revenue(item)

    buckets = [
        RevenueBucket(name=name, total=total)
        for name, total in totals.items()
        if total > 0
    ]
    if not buckets:
        return empty_category_revenue()

    buckets.sort(key=lambda bucket: (-bucket.total, bucket.name))
    return buckets


def empty_category_revenue() -> list[RevenueBucket]:
    return [RevenueBucket(name=NO_REVENUE_DATA, total=0.0)]
