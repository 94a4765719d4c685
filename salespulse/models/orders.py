"""
Order record models.

Orders and their line items are read-only input to the analytics engine:
they are fetched from the record source already authorized and already
validated, and the engine never writes them back.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to naive UTC.

    Stored order timestamps are naive UTC, so offset-aware input is
    converted and stripped before any comparison.
    """
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class OrderItem(BaseModel):
    """
    A single line item within an order.

    Attributes:
        price: Unit price. Revenue is summed as float, so totals carry the
            usual IEEE-754 rounding error and are not rounded by the engine.
        quantity: Units ordered. None means the item is priced as a single
            unit; it is never treated as zero.
        category: Optional category identifier used by the category breakdown
    """

    price: float = Field(ge=0, description="Unit price of the item")
    quantity: Optional[int] = Field(
        default=None, ge=0, description="Units ordered; None counts as one unit"
    )
    category: Optional[str] = Field(
        default=None, description="Category identifier, if the item has one"
    )


class Order(BaseModel):
    """
    One customer transaction.

    Attributes:
        id: Opaque identifier, unique within a store
        created_at: Creation timestamp, immutable
        is_paid: Payment flag; flips false -> true once and never reverts
        order_status: Fulfillment state. Usually an OrderStatus value, but
            any string is accepted so that unexpected states reach the
            bucketizer (which drops them) instead of failing validation.
        items: Line items, immutable after creation
    """

    id: str = Field(description="Order identifier, unique within a store")
    created_at: datetime = Field(description="When the order was placed")
    is_paid: bool = Field(default=False, description="Whether payment was confirmed")
    order_status: str = Field(default="Processing", description="Fulfillment state")
    items: list[OrderItem] = Field(default_factory=list, description="Line items")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class TimeRange(BaseModel):
    """
    Inclusive time window.

    Both bounds are inclusive. A window whose start is after its end is
    accepted and simply selects nothing.
    """

    start: datetime = Field(description="Inclusive lower bound")
    end: datetime = Field(description="Inclusive upper bound")

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: datetime) -> datetime:
        """Offset-aware bounds are converted to naive UTC."""
        return to_naive_utc(v)

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        return self.start <= moment <= self.end


class OrderFilter(BaseModel):
    """
    Resolved query against the record source.

    Produced by the range query resolver and executed by a RecordSource.
    `matches` evaluates the same predicate in memory so every source
    implementation shares one definition of the window semantics.
    """

    store_id: str = Field(description="Store whose orders are selected")
    created_from: Optional[datetime] = Field(
        default=None, description="Inclusive lower bound on created_at"
    )
    created_to: Optional[datetime] = Field(
        default=None, description="Inclusive upper bound on created_at"
    )
    is_paid: Optional[bool] = Field(
        default=None, description="Restrict to orders with this payment flag"
    )

    @field_validator("created_from", "created_to")
    @classmethod
    def normalize_bounds(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @property
    def is_bounded(self) -> bool:
        return self.created_from is not None and self.created_to is not None

    def matches(self, order: Order) -> bool:
        """Evaluate this filter against a single order."""
        if self.created_from is not None and order.created_at < self.created_from:
            return False
        if self.created_to is not None and order.created_at > self.created_to:
            return False
        if self.is_paid is not None and order.is_paid != self.is_paid:
            return False
        return True
