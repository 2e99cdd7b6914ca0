"""Save-time projection of the reconciled variant list.

Turns the in-memory variant list into the write sets handed to the
variant store: variant rows, variant-to-attribute-value links, and the
product's own attribute value assignments.
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from storefront.domain.entities import AttributeSelection, Variant
from storefront.engine.snapshot import CatalogSnapshot

logger = structlog.get_logger()


@dataclass(frozen=True)
class VariantRow:
    """Persisted form of a variant."""

    id: str
    name: str
    sku: str
    price_cents: int
    currency: str
    stock_quantity: int
    attributes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "price": {"amount": self.price_cents, "currency": self.currency},
            "stock_quantity": self.stock_quantity,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class VariantAttributeLink:
    """Link between a variant and one of its variant attribute values."""

    variant_id: str
    attribute_id: str
    attribute_value_id: str


@dataclass(frozen=True)
class ProductAttributeAssignment:
    """Attribute value assigned to the product itself."""

    attribute_id: str
    attribute_value_id: str


@dataclass(frozen=True)
class Projection:
    """Write sets for one save.

    Attributes:
        variant_rows: One row per variant, in variant order.
        variant_attribute_links: One link per (variant, variant attribute,
            value) triple.
    """

    variant_rows: tuple[VariantRow, ...] = ()
    variant_attribute_links: tuple[VariantAttributeLink, ...] = ()


def project(variants: Sequence[Variant], catalog: CatalogSnapshot) -> Projection:
    """Project variants into variant rows and attribute value links.

    Links are only produced for attributes flagged as variant attributes,
    and only when the stored value string still resolves to a catalog
    value.

    Args:
        variants: Final variant list.
        catalog: Catalog snapshot.

    Returns:
        Projection to submit to the variant store.
    """
    rows = []
    links = []
    for variant in variants:
        rows.append(
            VariantRow(
                id=variant.id,
                name=variant.name,
                sku=variant.sku,
                price_cents=variant.price.amount_cents,
                currency=variant.price.currency,
                stock_quantity=variant.stock_quantity,
                attributes=variant.attributes.to_dict(),
            )
        )
        for attribute_id, value in variant.attributes.items():
            attribute = catalog.attribute(attribute_id)
            if attribute is None or not attribute.is_variant_attribute:
                continue
            attribute_value = catalog.find_value(attribute_id, value)
            if attribute_value is None:
                logger.warning(
                    "Variant value missing from catalog",
                    variant_id=variant.id,
                    attribute_id=attribute_id,
                    value=value,
                )
                continue
            links.append(
                VariantAttributeLink(
                    variant_id=variant.id,
                    attribute_id=attribute_id,
                    attribute_value_id=attribute_value.id,
                )
            )
    return Projection(variant_rows=tuple(rows), variant_attribute_links=tuple(links))


def project_product_assignments(
    selection: AttributeSelection, catalog: CatalogSnapshot
) -> tuple[ProductAttributeAssignment, ...]:
    """Project the selection into product-level value assignments.

    Covers variant and specification attributes alike; these are what a
    later session reverse-maps into its initial selection.

    Args:
        selection: Current attribute selection.
        catalog: Catalog snapshot.

    Returns:
        One assignment per selected value that still exists.
    """
    assignments = []
    for attribute_id in selection:
        if catalog.attribute(attribute_id) is None:
            continue
        for value in catalog.resolve(attribute_id, selection.value_ids(attribute_id)):
            assignments.append(
                ProductAttributeAssignment(
                    attribute_id=attribute_id,
                    attribute_value_id=value.id,
                )
            )
    return tuple(assignments)


def find_duplicate_skus(variants: Sequence[Variant]) -> list[str]:
    """Find SKUs shared by more than one variant.

    Args:
        variants: Variant list.

    Returns:
        Duplicated SKUs in first-seen order.
    """
    counts = Counter(v.sku for v in variants if v.sku)
    return [sku for sku, count in counts.items() if count > 1]
