"""
Result models produced by the analytics engine.
"""

from pydantic import BaseModel, Field

from .orders import TimeRange


class RevenueBucket(BaseModel):
    """
    Named revenue accumulator.

    Used for status buckets, month buckets and category buckets alike.
    """

    name: str = Field(description="Bucket name")
    total: float = Field(default=0.0, description="Revenue accumulated in the bucket")


class PeriodComparison(BaseModel):
    """
    Revenue and sales for a window compared with the window just before it.

    The previous window has the same length in days and ends the day before
    the current window starts. Percent changes are rounded to one decimal
    and are 0 when the previous value is 0.
    """

    current_range: TimeRange
    previous_range: TimeRange
    current_revenue: float = 0.0
    previous_revenue: float = 0.0
    revenue_change_pct: float = 0.0
    current_sales: int = 0
    previous_sales: int = 0
    sales_change_pct: float = 0.0

    @property
    def is_revenue_positive(self) -> bool:
        return self.revenue_change_pct >= 0

    @property
    def is_sales_positive(self) -> bool:
        return self.sales_change_pct >= 0


class DashboardOverview(BaseModel):
    """Every store-level metric for one window, bundled for the dashboard."""

    store_id: str
    time_range: TimeRange
    total_revenue: float = 0.0
    total_sales: int = 0
    total_products: int = 0
    monthly_revenue: list[RevenueBucket] = Field(default_factory=list)
    revenue_by_fulfillment_status: list[RevenueBucket] = Field(default_factory=list)
    revenue_by_payment_status: list[RevenueBucket] = Field(default_factory=list)
    revenue_by_category: list[RevenueBucket] = Field(default_factory=list)
    comparison: PeriodComparison
