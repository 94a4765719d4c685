"""
Catalog models: products, categories and the predicates used to count them.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .enums import ProductCountKind


class Product(BaseModel):
    """A catalog product. Only the flags used for counting are modelled."""

    id: str = Field(description="Product identifier, unique within a store")
    name: str = Field(default="", description="Display name")
    is_archived: bool = Field(default=False, description="Hidden from the storefront")
    is_featured: bool = Field(default=False, description="Promoted on the storefront")


class Category(BaseModel):
    """A product category defined by the store."""

    id: str = Field(description="Category identifier")
    name: str = Field(description="Display name")


class CatalogPredicate(BaseModel):
    """Equality predicate over a boolean product flag."""

    field: Literal["is_archived", "is_featured"] = Field(description="Product flag name")
    value: bool = Field(description="Required flag value")

    def matches(self, product: Product) -> bool:
        return getattr(product, self.field) == self.value


_PREDICATES: dict[ProductCountKind, Optional[CatalogPredicate]] = {
    ProductCountKind.TOTAL: None,
    ProductCountKind.ACTIVE: CatalogPredicate(field="is_archived", value=False),
    ProductCountKind.FEATURED: CatalogPredicate(field="is_featured", value=True),
}


def predicate_for(kind: ProductCountKind) -> Optional[CatalogPredicate]:
    """Return the catalog predicate for a count kind (None means every product)."""
    return _PREDICATES[kind]
