"""In-memory catalog and variant store.

Used by the default "memory" storage backend and by tests. State lives
for the lifetime of the process.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from storefront.domain.entities import Attribute, AttributeType, AttributeValue, Variant
from storefront.domain.value_objects import Combination, Money
from storefront.engine.projection import (
    ProductAttributeAssignment,
    VariantAttributeLink,
    VariantRow,
)
from storefront.engine.session import SaveSnapshot

logger = structlog.get_logger()


# ============================================================================
# Attribute Catalog
# ============================================================================


class InMemoryAttributeCatalog:
    """In-memory attribute catalog."""

    def __init__(self) -> None:
        self._attributes: dict[str, Attribute] = {}
        self._values: dict[str, AttributeValue] = {}

    def add_attribute(self, attribute: Attribute) -> Attribute:
        """Add or replace an attribute."""
        self._attributes[attribute.id] = attribute
        return attribute

    def add_value(self, value: AttributeValue) -> AttributeValue:
        """Add or replace an attribute value.

        Raises:
            KeyError: If the parent attribute is unknown.
        """
        if value.attribute_id not in self._attributes:
            raise KeyError(f"Unknown attribute: {value.attribute_id}")
        self._values[value.id] = value
        return value

    def remove_value(self, value_id: str) -> None:
        """Delete an attribute value."""
        self._values.pop(value_id, None)

    async def list_attributes(self) -> Sequence[Attribute]:
        """List active attributes ordered by sort order, then name."""
        attributes = [a for a in self._attributes.values() if a.is_active]
        return sorted(attributes, key=lambda a: (a.sort_order, a.name))

    async def list_values(self, attribute_id: str) -> Sequence[AttributeValue]:
        """List active values of an attribute ordered by sort order, then insertion order."""
        values = [
            v
            for v in self._values.values()
            if v.attribute_id == attribute_id and v.is_active
        ]
        return sorted(values, key=lambda v: v.sort_order)


# ============================================================================
# Variant Store
# ============================================================================


@dataclass(frozen=True)
class StoredProduct:
    """Everything persisted for one product."""

    variant_rows: tuple[VariantRow, ...] = ()
    variant_attribute_links: tuple[VariantAttributeLink, ...] = ()
    assignments: tuple[ProductAttributeAssignment, ...] = ()


def row_to_variant(row: VariantRow) -> Variant:
    """Convert a stored row back into a variant."""
    return Variant(
        id=row.id,
        name=row.name,
        attributes=Combination.of(row.attributes),
        price=Money(amount_cents=row.price_cents, currency=row.currency),
        stock_quantity=row.stock_quantity,
        sku=row.sku,
    )


class InMemoryVariantStore:
    """In-memory variant store with replace-all semantics."""

    def __init__(self) -> None:
        self._products: dict[str, StoredProduct] = {}

    def get(self, product_id: str) -> StoredProduct:
        """Get stored state of a product (empty if never saved)."""
        return self._products.get(product_id, StoredProduct())

    async def load_variants(self, product_id: str) -> Sequence[Variant]:
        """Load persisted variants in their saved order."""
        return [row_to_variant(row) for row in self.get(product_id).variant_rows]

    async def load_product_value_ids(self, product_id: str) -> Sequence[str]:
        """Load attribute value ids assigned to the product."""
        return [a.attribute_value_id for a in self.get(product_id).assignments]

    async def replace_variants(self, snapshot: SaveSnapshot) -> None:
        """Replace all variant rows, links and assignments of a product."""
        self._products[snapshot.product_id] = StoredProduct(
            variant_rows=snapshot.projection.variant_rows,
            variant_attribute_links=snapshot.projection.variant_attribute_links,
            assignments=snapshot.assignments,
        )
        logger.debug(
            "Replaced stored variants",
            product_id=snapshot.product_id,
            variant_count=len(snapshot.projection.variant_rows),
        )


# ============================================================================
# Demo Catalog
# ============================================================================


def seed_demo_catalog(catalog: InMemoryAttributeCatalog) -> InMemoryAttributeCatalog:
    """Populate a catalog with a small apparel attribute set.

    Args:
        catalog: Catalog to populate.

    Returns:
        The same catalog.
    """
    catalog.add_attribute(
        Attribute(
            id="attr-color",
            name="Color",
            slug="color",
            type=AttributeType.COLOR,
            is_variant_attribute=True,
            sort_order=1,
        )
    )
    catalog.add_attribute(
        Attribute(
            id="attr-size",
            name="Size",
            slug="size",
            type=AttributeType.SIZE,
            is_variant_attribute=True,
            sort_order=2,
        )
    )
    catalog.add_attribute(
        Attribute(
            id="attr-material",
            name="Material",
            slug="material",
            type=AttributeType.TEXT,
            is_variant_attribute=False,
            sort_order=3,
        )
    )

    for order, color in enumerate(["Red", "Blue", "Black"], start=1):
        catalog.add_value(
            AttributeValue(
                id=f"val-{color.lower()}",
                attribute_id="attr-color",
                value=color,
                sort_order=order,
            )
        )
    for order, size in enumerate(["S", "M", "L", "XL"], start=1):
        catalog.add_value(
            AttributeValue(
                id=f"val-size-{size.lower()}",
                attribute_id="attr-size",
                value=size,
                sort_order=order,
            )
        )
    for order, material in enumerate(["Cotton", "Polyester"], start=1):
        catalog.add_value(
            AttributeValue(
                id=f"val-{material.lower()}",
                attribute_id="attr-material",
                value=material,
                sort_order=order,
            )
        )
    return catalog
