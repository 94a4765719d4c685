"""
Integration tests for the DuckDB record source.

Each test gets its own database file, so no state leaks between tests.
"""

from datetime import datetime, timezone

import pytest

from salespulse.models.catalog import Category, predicate_for
from salespulse.models.enums import ProductCountKind
from salespulse.models.orders import OrderFilter
from salespulse.storage.base import FetchError
from salespulse.storage.duckdb_storage import DuckDBStorage
from tests.conftest import make_item, make_order, make_product

STORE = "store_db"


@pytest.fixture
def storage(tmp_path):
    return DuckDBStorage(db_path=str(tmp_path / "records.duckdb"))


@pytest.fixture
def seeded(storage):
    storage.write_orders(
        STORE,
        [
            make_order(
                id="o_start",
                items=[make_item(price=10.0, quantity=2), make_item(price=5.0, quantity=None)],
                is_paid=True,
                created_at=datetime(2026, 4, 1, 0, 0, 0),
            ),
            make_order(
                id="o_mid",
                items=[make_item(price=7.5, quantity=4, category="food")],
                is_paid=False,
                order_status="Delivered",
                created_at=datetime(2026, 4, 15, 12, 0, 0),
            ),
            make_order(
                id="o_end",
                items=[],
                is_paid=True,
                created_at=datetime(2026, 4, 30, 23, 59, 59),
            ),
        ],
    )
    storage.write_orders("store_other", [make_order(id="o_other")])
    return storage


class TestSchema:
    def test_creates_database_file(self, tmp_path):
        path = tmp_path / "nested" / "records.duckdb"
        DuckDBStorage(db_path=str(path))
        assert path.exists()

    def test_reopen_is_idempotent(self, tmp_path, seeded):
        reopened = DuckDBStorage(db_path=str(seeded.db_path))
        assert len(reopened.fetch_orders(STORE)) == 3


class TestFetchOrders:
    def test_round_trip_preserves_items(self, seeded):
        orders = {o.id: o for o in seeded.fetch_orders(STORE)}

        start = orders["o_start"]
        assert start.is_paid is True
        assert start.order_status == "Processing"
        assert [(i.price, i.quantity) for i in start.items] == [(10.0, 2), (5.0, None)]

        mid = orders["o_mid"]
        assert mid.items[0].category == "food"
        assert mid.order_status == "Delivered"

    def test_order_without_items_is_kept(self, seeded):
        orders = {o.id: o for o in seeded.fetch_orders(STORE)}
        assert orders["o_end"].items == []

    def test_sorted_by_creation(self, seeded):
        assert [o.id for o in seeded.fetch_orders(STORE)] == ["o_start", "o_mid", "o_end"]

    def test_scoped_to_store(self, seeded):
        assert [o.id for o in seeded.fetch_orders("store_other")] == ["o_other"]
        assert seeded.fetch_orders("store_missing") == []

    def test_bounds_are_inclusive(self, seeded):
        order_filter = OrderFilter(
            store_id=STORE,
            created_from=datetime(2026, 4, 1, 0, 0, 0),
            created_to=datetime(2026, 4, 30, 23, 59, 59),
        )
        assert len(seeded.fetch_orders(STORE, order_filter)) == 3

    def test_point_window(self, seeded):
        moment = datetime(2026, 4, 15, 12, 0, 0)
        order_filter = OrderFilter(store_id=STORE, created_from=moment, created_to=moment)
        assert [o.id for o in seeded.fetch_orders(STORE, order_filter)] == ["o_mid"]

    def test_inverted_window_matches_nothing(self, seeded):
        order_filter = OrderFilter(
            store_id=STORE,
            created_from=datetime(2026, 5, 1),
            created_to=datetime(2026, 4, 1),
        )
        assert seeded.fetch_orders(STORE, order_filter) == []

    def test_offset_window_normalized_to_utc(self, seeded):
        # 11:00Z..13:00Z around the naive UTC 12:00 order
        order_filter = OrderFilter(
            store_id=STORE,
            created_from=datetime(2026, 4, 15, 11, 0, tzinfo=timezone.utc),
            created_to=datetime(2026, 4, 15, 13, 0, tzinfo=timezone.utc),
        )
        assert [o.id for o in seeded.fetch_orders(STORE, order_filter)] == ["o_mid"]

    def test_z_suffixed_window_excludes_local_shift(self, seeded):
        order_filter = OrderFilter.model_validate(
            {
                "store_id": STORE,
                "created_from": "2026-04-15T12:00:01Z",
                "created_to": "2026-04-15T17:00:00Z",
            }
        )
        assert seeded.fetch_orders(STORE, order_filter) == []

    def test_paid_filter(self, seeded):
        order_filter = OrderFilter(store_id=STORE, is_paid=True)
        assert [o.id for o in seeded.fetch_orders(STORE, order_filter)] == ["o_start", "o_end"]

    def test_rewrite_replaces_items(self, seeded):
        seeded.write_orders(STORE, [make_order(id="o_start", items=[make_item(price=1.0)])])
        orders = {o.id: o for o in seeded.fetch_orders(STORE)}
        assert len(orders) == 3
        assert [i.price for i in orders["o_start"].items] == [1.0]

    def test_read_failure_raises_fetch_error(self, seeded):
        with seeded._get_connection() as conn:
            conn.execute("DROP TABLE order_items")
        with pytest.raises(FetchError):
            seeded.fetch_orders(STORE)


class TestCatalog:
    @pytest.fixture
    def catalog(self, storage):
        storage.write_products(
            STORE,
            [
                make_product(),
                make_product(is_featured=True),
                make_product(is_archived=True),
            ],
        )
        storage.write_categories(
            STORE,
            [Category(id="cat_b", name="Biryani"), Category(id="cat_a", name="Chaat")],
        )
        return storage

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (ProductCountKind.TOTAL, 3),
            (ProductCountKind.ACTIVE, 2),
            (ProductCountKind.FEATURED, 1),
        ],
    )
    def test_count_by_kind(self, catalog, kind, expected):
        assert catalog.fetch_catalog_count(STORE, predicate_for(kind)) == expected

    def test_count_other_store_is_zero(self, catalog):
        assert catalog.fetch_catalog_count("store_missing") == 0

    def test_categories(self, catalog):
        categories = catalog.fetch_categories(STORE)
        assert [(c.id, c.name) for c in categories] == [("cat_a", "Chaat"), ("cat_b", "Biryani")]

    def test_categories_other_store_empty(self, catalog):
        assert catalog.fetch_categories("store_missing") == []
