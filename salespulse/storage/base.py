"""
Abstract record source interface for the order analytics engine.

The engine never talks to a database directly. It consumes the narrow
read-only contract below, which lets the production document store, the
local DuckDB backend and in-memory test doubles be swapped without
touching the aggregation code.

Every read method raises FetchError when the source cannot be reached or
rejects the query. The engine's failure containment layer is the only
place that catches it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from salespulse.models.catalog import CatalogPredicate, Category
from salespulse.models.orders import Order, OrderFilter


class StorageError(Exception):
    """Base exception for all storage operation failures."""

    pass


class FetchError(StorageError):
    """The record source could not be reached or rejected the query."""

    pass


class RecordSource(ABC):
    """
    Abstract base class for order and catalog record sources.

    Implementations should ensure:
    - Thread safety for concurrent reads
    - Transport, auth and query failures surface as FetchError
    - Structured logging of failures before they are raised
    """

    # =========================================================================
    # Orders
    # =========================================================================

    @abstractmethod
    def fetch_orders(
        self,
        store_id: str,
        order_filter: Optional[OrderFilter] = None,
    ) -> list[Order]:
        """
        Fetch a store's orders, optionally narrowed by a resolved filter.

        Args:
            store_id: Store whose orders are read
            order_filter: Optional filter from the range query resolver.
                Time bounds are inclusive on both ends.

        Returns:
            Orders with their line items, in no guaranteed order

        Raises:
            FetchError: If the read fails
        """
        pass

    # =========================================================================
    # Catalog
    # =========================================================================

    @abstractmethod
    def fetch_catalog_count(
        self,
        store_id: str,
        predicate: Optional[CatalogPredicate] = None,
    ) -> int:
        """
        Count a store's products, optionally restricted by a flag predicate.

        Args:
            store_id: Store whose catalog is counted
            predicate: Optional equality predicate on a product flag;
                None counts every product

        Returns:
            Number of matching products

        Raises:
            FetchError: If the read fails
        """
        pass

    @abstractmethod
    def fetch_categories(self, store_id: str) -> list[Category]:
        """
        Fetch the product categories defined by a store.

        Args:
            store_id: Store whose categories are read

        Returns:
            Categories defined by the store (possibly empty)

        Raises:
            FetchError: If the read fails
        """
        pass
