"""
DuckDB record source for the order analytics engine.

Local backend used for development, demos and integration tests. It stores
orders, line items, products and categories per store and answers the
read-only RecordSource contract with plain SQL.

Key features:
- Thread-local connections with a lock around schema creation
- Automatic, idempotent schema creation on first use
- Inclusive created_at bounds evaluated in SQL
- Every driver failure logged and re-raised as a typed storage error
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import duckdb
import structlog

from salespulse.models.catalog import CatalogPredicate, Category, Product
from salespulse.models.orders import Order, OrderFilter, OrderItem

from .base import FetchError, RecordSource, StorageError

logger = structlog.get_logger(__name__)


class DuckDBStorage(RecordSource):
    """
    DuckDB implementation of the record source.

    Architecture:
    - One connection per thread, created lazily
    - Orders and line items in separate tables, joined on read
    - Writes replace a store's existing rows with the same identifiers

    Attributes:
        db_path: Path to the DuckDB database file
        _local: Thread-local storage for per-thread connections
        _lock: Thread lock for schema operations
        _initialized: Flag tracking whether schema is initialized
    """

    def __init__(self, db_path: str = "./data/salespulse.duckdb"):
        """
        Initialize DuckDB storage backend.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._local = threading.local()
        self._lock = threading.Lock()
        self._initialized = False

        logger.info("duckdb_storage_initialized", db_path=str(self.db_path))

        self._initialize_schema()

    @contextmanager
    def _get_connection(self):
        """
        Get a thread-local DuckDB connection.

        Yields:
            DuckDB connection instance

        Raises:
            FetchError: If connection cannot be established
        """
        if not hasattr(self._local, "connection"):
            try:
                self._local.connection = duckdb.connect(str(self.db_path))
                logger.debug("duckdb_connection_created", thread_id=threading.get_ident())
            except duckdb.Error as e:
                logger.error("duckdb_connection_failed", error=str(e))
                raise FetchError(f"Failed to connect to DuckDB: {e}") from e

        yield self._local.connection

    def _initialize_schema(self):
        """
        Create the order and catalog tables. Idempotent.

        Raises:
            StorageError: If schema creation fails
        """
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS orders (
                            store_id VARCHAR NOT NULL,
                            order_id VARCHAR NOT NULL,
                            created_at TIMESTAMP NOT NULL,
                            is_paid BOOLEAN NOT NULL DEFAULT FALSE,
                            order_status VARCHAR NOT NULL,
                            PRIMARY KEY (store_id, order_id)
                        )
                    """)

                    conn.execute("""
                        CREATE INDEX IF NOT EXISTS idx_orders_store_created_at
                        ON orders(store_id, created_at)
                    """)

                    # quantity stays NULL when the item carries none
                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS order_items (
                            store_id VARCHAR NOT NULL,
                            order_id VARCHAR NOT NULL,
                            position INTEGER NOT NULL,
                            price DOUBLE NOT NULL,
                            quantity INTEGER,
                            category VARCHAR,
                            PRIMARY KEY (store_id, order_id, position)
                        )
                    """)

                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS products (
                            store_id VARCHAR NOT NULL,
                            product_id VARCHAR NOT NULL,
                            name VARCHAR NOT NULL,
                            is_archived BOOLEAN NOT NULL DEFAULT FALSE,
                            is_featured BOOLEAN NOT NULL DEFAULT FALSE,
                            PRIMARY KEY (store_id, product_id)
                        )
                    """)

                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS categories (
                            store_id VARCHAR NOT NULL,
                            category_id VARCHAR NOT NULL,
                            name VARCHAR NOT NULL,
                            PRIMARY KEY (store_id, category_id)
                        )
                    """)

                    logger.info("duckdb_schema_initialized", table_count=4)
                    self._initialized = True

            except duckdb.Error as e:
                logger.error("duckdb_schema_initialization_failed", error=str(e))
                raise StorageError(f"Failed to initialize schema: {e}") from e

    def clear_for_testing(self) -> None:
        """
        Truncate all tables. For testing only, use when TESTING=true.
        Allows each test to start with a clean slate.
        """
        import os

        if not os.environ.get("TESTING"):
            return
        with self._get_connection() as conn:
            for table in ("order_items", "orders", "products", "categories"):
                conn.execute(f"DELETE FROM {table}")

    # =========================================================================
    # Writes (seeding and local development)
    # =========================================================================

    def write_orders(self, store_id: str, orders: list[Order]) -> int:
        """
        Write orders and their line items, replacing rows with the same IDs.

        Returns:
            Number of orders written

        Raises:
            StorageError: If the write fails
        """
        try:
            with self._get_connection() as conn:
                conn.begin()
                try:
                    for order in orders:
                        conn.execute(
                            "DELETE FROM order_items WHERE store_id = ? AND order_id = ?",
                            [store_id, order.id],
                        )
                        conn.execute(
                            "DELETE FROM orders WHERE store_id = ? AND order_id = ?",
                            [store_id, order.id],
                        )
                        conn.execute(
                            """
                            INSERT INTO orders (
                                store_id, order_id, created_at, is_paid, order_status
                            ) VALUES (?, ?, ?, ?, ?)
                            """,
                            [store_id, order.id, order.created_at, order.is_paid, order.order_status],
                        )
                        for position, item in enumerate(order.items):
                            conn.execute(
                                """
                                INSERT INTO order_items (
                                    store_id, order_id, position, price, quantity, category
                                ) VALUES (?, ?, ?, ?, ?, ?)
                                """,
                                [store_id, order.id, position, item.price, item.quantity, item.category],
                            )
                    conn.commit()
                except duckdb.Error:
                    conn.rollback()
                    raise

            logger.info("orders_written", store_id=store_id, count=len(orders))
            return len(orders)

        except duckdb.Error as e:
            logger.error("write_orders_failed", store_id=store_id, error=str(e))
            raise StorageError(f"Failed to write orders: {e}") from e

    def write_products(self, store_id: str, products: list[Product]) -> int:
        """Write catalog products, replacing rows with the same IDs."""
        try:
            with self._get_connection() as conn:
                conn.begin()
                try:
                    for product in products:
                        conn.execute(
                            "DELETE FROM products WHERE store_id = ? AND product_id = ?",
                            [store_id, product.id],
                        )
                        conn.execute(
                            """
                            INSERT INTO products (
                                store_id, product_id, name, is_archived, is_featured
                            ) VALUES (?, ?, ?, ?, ?)
                            """,
                            [store_id, product.id, product.name, product.is_archived, product.is_featured],
                        )
                    conn.commit()
                except duckdb.Error:
                    conn.rollback()
                    raise

            logger.info("products_written", store_id=store_id, count=len(products))
            return len(products)

        except duckdb.Error as e:
            logger.error("write_products_failed", store_id=store_id, error=str(e))
            raise StorageError(f"Failed to write products: {e}") from e

    def write_categories(self, store_id: str, categories: list[Category]) -> int:
        """Write store categories, replacing rows with the same IDs."""
        try:
            with self._get_connection() as conn:
                conn.begin()
                try:
                    for category in categories:
                        conn.execute(
                            "DELETE FROM categories WHERE store_id = ? AND category_id = ?",
                            [store_id, category.id],
                        )
                        conn.execute(
                            "INSERT INTO categories (store_id, category_id, name) VALUES (?, ?, ?)",
                            [store_id, category.id, category.name],
                        )
                    conn.commit()
                except duckdb.Error:
                    conn.rollback()
                    raise

            logger.info("categories_written", store_id=store_id, count=len(categories))
            return len(categories)

        except duckdb.Error as e:
            logger.error("write_categories_failed", store_id=store_id, error=str(e))
            raise StorageError(f"Failed to write categories: {e}") from e

    # =========================================================================
    # RecordSource implementation
    # =========================================================================

    def fetch_orders(
        self,
        store_id: str,
        order_filter: Optional[OrderFilter] = None,
    ) -> list[Order]:
        """Fetch orders joined with their line items."""
        try:
            with self._get_connection() as conn:
                query = """
                    SELECT o.order_id, o.created_at, o.is_paid, o.order_status,
                           i.position, i.price, i.quantity, i.category
                    FROM orders o
                    LEFT JOIN order_items i
                      ON i.store_id = o.store_id AND i.order_id = o.order_id
                    WHERE o.store_id = ?
                """
                params: list = [store_id]

                if order_filter is not None:
                    if order_filter.created_from is not None:
                        query += " AND o.created_at >= ?"
                        params.append(order_filter.created_from)

                    if order_filter.created_to is not None:
                        query += " AND o.created_at <= ?"
                        params.append(order_filter.created_to)

                    if order_filter.is_paid is not None:
                        query += " AND o.is_paid = ?"
                        params.append(order_filter.is_paid)

                query += " ORDER BY o.created_at ASC, o.order_id ASC, i.position ASC"

                rows = conn.execute(query, params).fetchall()

            orders: dict[str, Order] = {}
            for order_id, created_at, is_paid, order_status, position, price, quantity, category in rows:
                order = orders.get(order_id)
                if order is None:
                    order = Order(
                        id=order_id,
                        created_at=created_at,
                        is_paid=is_paid,
                        order_status=order_status,
                    )
                    orders[order_id] = order
                if position is not None:
                    order.items.append(
                        OrderItem(price=price, quantity=quantity, category=category)
                    )

            logger.debug("orders_read", store_id=store_id, count=len(orders))
            return list(orders.values())

        except duckdb.Error as e:
            logger.error("fetch_orders_failed", store_id=store_id, error=str(e))
            raise FetchError(f"Failed to fetch orders: {e}") from e

    def fetch_catalog_count(
        self,
        store_id: str,
        predicate: Optional[CatalogPredicate] = None,
    ) -> int:
        """Count products, optionally restricted by a flag predicate."""
        try:
            with self._get_connection() as conn:
                query = "SELECT COUNT(*) FROM products WHERE store_id = ?"
                params: list = [store_id]

                # predicate.field is constrained to known flag columns
                if predicate is not None:
                    query += f" AND {predicate.field} = ?"
                    params.append(predicate.value)

                count = conn.execute(query, params).fetchone()[0]

            logger.debug("catalog_counted", store_id=store_id, count=count)
            return int(count)

        except duckdb.Error as e:
            logger.error("fetch_catalog_count_failed", store_id=store_id, error=str(e))
            raise FetchError(f"Failed to count products: {e}") from e

    def fetch_categories(self, store_id: str) -> list[Category]:
        """Fetch categories defined by the store."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT category_id, name FROM categories
                    WHERE store_id = ?
                    ORDER BY category_id ASC
                    """,
                    [store_id],
                ).fetchall()

            categories = [Category(id=row[0], name=row[1]) for row in rows]
            logger.debug("categories_read", store_id=store_id, count=len(categories))
            return categories

        except duckdb.Error as e:
            logger.error("fetch_categories_failed", store_id=store_id, error=str(e))
            raise FetchError(f"Failed to fetch categories: {e}") from e
