"""
Enumeration types for the order analytics engine.

All enums inherit from str to ensure JSON serialization compatibility.
Declaration order is significant wherever an enum doubles as a fixed
bucket set: buckets are always emitted in the order the members are
declared here.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Fulfillment state of an order.

    Mutated by external fulfillment actions. Monotonic in practice, but
    nothing in the engine relies on that.
    """

    PROCESSING = "Processing"
    DELIVERING = "Delivering"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"


class PaymentBucket(str, Enum):
    """Payment-state bucket names derived from the order's is_paid flag."""

    PAID = "Paid"
    NOT_PAID = "Not Paid"


class Month(str, Enum):
    """Abbreviated month names used by the monthly revenue graph."""

    JAN = "Jan"
    FEB = "Feb"
    MAR = "Mar"
    APR = "Apr"
    MAY = "May"
    JUN = "Jun"
    JUL = "Jul"
    AUG = "Aug"
    SEP = "Sep"
    OCT = "Oct"
    NOV = "Nov"
    DEC = "Dec"


class BucketDimension(str, Enum):
    """Dimension used to partition revenue into status buckets."""

    PAYMENT = "payment"
    FULFILLMENT = "fulfillment"


class ProductCountKind(str, Enum):
    """
    Catalog-size query kinds served through the count cache.

    - TOTAL: every product in the store
    - ACTIVE: products that are not archived
    - FEATURED: products flagged as featured
    """

    TOTAL = "total"
    ACTIVE = "active"
    FEATURED = "featured"
