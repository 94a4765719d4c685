"""
Pytest configuration and shared fixtures for the SalesPulse test suite.

Provides model factories, an in-memory record source with call counting
and failure injection, and a controllable clock for count cache tests.
"""

import os
import tempfile
import uuid as _uuid
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import pytest

# Set testing environment BEFORE importing app. DuckDB creates the file;
# :memory: gives every thread its own database.
_test_db_path = os.path.join(tempfile.gettempdir(), f"salespulse_test_{_uuid.uuid4().hex[:8]}.duckdb")
os.environ["TESTING"] = "true"
os.environ["DB_PATH"] = _test_db_path


from salespulse.engine.analytics import OrderAnalyticsEngine
from salespulse.engine.count_cache import CountCache
from salespulse.models.catalog import CatalogPredicate, Category, Product
from salespulse.models.enums import OrderStatus
from salespulse.models.orders import Order, OrderFilter, OrderItem, TimeRange
from salespulse.storage.base import FetchError, RecordSource


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------

BASE_TIME = datetime(2026, 3, 15, 12, 0, 0)


def make_item(
    price: float = 100.0,
    quantity: Optional[int] = 1,
    category: Optional[str] = None,
) -> OrderItem:
    """Factory function for creating test OrderItem objects."""
    return OrderItem(price=price, quantity=quantity, category=category)


def make_order(
    items: Optional[list[OrderItem]] = None,
    is_paid: bool = True,
    order_status: str = OrderStatus.PROCESSING.value,
    created_at: datetime = BASE_TIME,
    **overrides,
) -> Order:
    """Factory function for creating test Order objects."""
    defaults = dict(
        id=f"ord_{uuid4().hex[:10]}",
        created_at=created_at,
        is_paid=is_paid,
        order_status=order_status,
        items=items if items is not None else [make_item()],
    )
    defaults.update(overrides)
    return Order(**defaults)


def make_product(is_archived: bool = False, is_featured: bool = False, **overrides) -> Product:
    """Factory function for creating test Product objects."""
    defaults = dict(
        id=f"prod_{uuid4().hex[:10]}",
        name="Masala Dosa",
        is_archived=is_archived,
        is_featured=is_featured,
    )
    defaults.update(overrides)
    return Product(**defaults)


def make_range(start: datetime, days: int = 0, hours: int = 0) -> TimeRange:
    """Window starting at `start` and lasting the given days/hours."""
    return TimeRange(start=start, end=start + timedelta(days=days, hours=hours))


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class MockRecordSource(RecordSource):
    """
    In-memory RecordSource for unit tests.

    Counts calls per method and can be switched into failure mode, in which
    every read raises FetchError.
    """

    def __init__(self, fail: bool = False):
        self.orders: dict[str, list[Order]] = {}
        self.products: dict[str, list[Product]] = {}
        self.categories: dict[str, list[Category]] = {}
        self.fail = fail
        self.calls: dict[str, int] = {
            "fetch_orders": 0,
            "fetch_catalog_count": 0,
            "fetch_categories": 0,
        }
        self.last_filter: Optional[OrderFilter] = None

    # --- Seeding ---
    def add_orders(self, store_id: str, *orders: Order) -> None:
        self.orders.setdefault(store_id, []).extend(orders)

    def add_products(self, store_id: str, *products: Product) -> None:
        self.products.setdefault(store_id, []).extend(products)

    def add_categories(self, store_id: str, *categories: Category) -> None:
        self.categories.setdefault(store_id, []).extend(categories)

    # --- RecordSource ---
    def fetch_orders(self, store_id, order_filter=None):
        self.calls["fetch_orders"] += 1
        self.last_filter = order_filter
        if self.fail:
            raise FetchError("record source unavailable")
        orders = self.orders.get(store_id, [])
        if order_filter is None:
            return list(orders)
        return [o for o in orders if order_filter.matches(o)]

    def fetch_catalog_count(self, store_id, predicate: Optional[CatalogPredicate] = None):
        self.calls["fetch_catalog_count"] += 1
        if self.fail:
            raise FetchError("record source unavailable")
        products = self.products.get(store_id, [])
        if predicate is None:
            return len(products)
        return sum(1 for p in products if predicate.matches(p))

    def fetch_categories(self, store_id):
        self.calls["fetch_categories"] += 1
        if self.fail:
            raise FetchError("record source unavailable")
        return list(self.categories.get(store_id, []))


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_source():
    """Fresh MockRecordSource instance for each test."""
    return MockRecordSource()


@pytest.fixture
def failing_source():
    """MockRecordSource whose every read raises FetchError."""
    return MockRecordSource(fail=True)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def count_cache(fake_clock):
    """Count cache on the fake clock with the default 60s TTL."""
    return CountCache(ttl_millis=60_000, clock=fake_clock)


@pytest.fixture
def engine(mock_source, count_cache):
    return OrderAnalyticsEngine(source=mock_source, count_cache=count_cache)


@pytest.fixture
def failing_engine(failing_source, count_cache):
    return OrderAnalyticsEngine(source=failing_source, count_cache=count_cache)


@pytest.fixture
def sample_orders():
    """
    Mixed orders across payment and fulfillment states.

    Revenue per order: 200, 50, 90, 30, 120 -> total 490.
    """
    return [
        make_order(
            items=[make_item(price=100.0, quantity=2, category="food")],
            is_paid=True,
            order_status=OrderStatus.DELIVERED.value,
            created_at=datetime(2026, 1, 10, 9, 30),
        ),
        make_order(
            items=[make_item(price=50.0, quantity=None, category="beverage")],
            is_paid=False,
            order_status=OrderStatus.PROCESSING.value,
            created_at=datetime(2026, 2, 3, 18, 0),
        ),
        make_order(
            items=[
                make_item(price=30.0, quantity=2, category="cat_thali"),
                make_item(price=30.0, quantity=None),
            ],
            is_paid=True,
            order_status=OrderStatus.DELIVERING.value,
            created_at=datetime(2026, 2, 20, 13, 15),
        ),
        make_order(
            items=[make_item(price=15.0, quantity=2, category="food")],
            is_paid=False,
            order_status=OrderStatus.CANCELED.value,
            created_at=datetime(2026, 3, 1, 0, 0),
        ),
        make_order(
            items=[make_item(price=40.0, quantity=3, category="dessert")],
            is_paid=True,
            order_status=OrderStatus.PROCESSING.value,
            created_at=datetime(2026, 3, 31, 23, 59),
        ),
    ]


@pytest.fixture
def populated_source(mock_source, sample_orders):
    """MockRecordSource seeded with sample orders, products and categories for store_1."""
    mock_source.add_orders("store_1", *sample_orders)
    mock_source.add_products(
        "store_1",
        make_product(),
        make_product(is_featured=True),
        make_product(is_archived=True),
        make_product(is_archived=True, is_featured=True),
    )
    mock_source.add_categories("store_1", Category(id="cat_thali", name="Thali"))
    return mock_source


@pytest.fixture
def client():
    """FastAPI test client for integration tests."""
    from fastapi.testclient import TestClient

    from salespulse.main import app

    with TestClient(app) as c:
        yield c
