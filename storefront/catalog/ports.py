"""Interfaces of the catalog and variant store collaborators.

The engine reads attributes from an AttributeCatalog and hands saved
state to a VariantStore. Both are asynchronous; implementations live in
``storefront.catalog.memory`` and ``storefront.catalog.repository``.
"""

from collections.abc import Sequence
from typing import Protocol

from storefront.domain.entities import Attribute, AttributeValue, Variant
from storefront.engine.session import SaveSnapshot
from storefront.engine.snapshot import CatalogSnapshot


class AttributeCatalog(Protocol):
    """Read-only source of attribute definitions and values."""

    async def list_attributes(self) -> Sequence[Attribute]:
        """List active attributes in catalog order."""
        ...

    async def list_values(self, attribute_id: str) -> Sequence[AttributeValue]:
        """List active values of an attribute in catalog order."""
        ...


class VariantStore(Protocol):
    """Persistence for a product's variants and attribute assignments."""

    async def load_variants(self, product_id: str) -> Sequence[Variant]:
        """Load persisted variants in their saved order."""
        ...

    async def load_product_value_ids(self, product_id: str) -> Sequence[str]:
        """Load attribute value ids assigned to the product, in saved order."""
        ...

    async def replace_variants(self, snapshot: SaveSnapshot) -> None:
        """Replace all variant rows, links and assignments of a product."""
        ...


async def load_snapshot(catalog: AttributeCatalog) -> CatalogSnapshot:
    """Read the whole catalog into a synchronous snapshot.

    Args:
        catalog: Attribute catalog.

    Returns:
        Catalog snapshot.
    """
    attributes = list(await catalog.list_attributes())
    values: list[AttributeValue] = []
    for attribute in attributes:
        values.extend(await catalog.list_values(attribute.id))
    return CatalogSnapshot.build(attributes, values)
