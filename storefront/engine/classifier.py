"""Attribute classification.

Splits the operator's selected attributes into variant attributes, which
take part in combination generation, and specification attributes, which
describe the product as a whole.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from storefront.domain.entities import Attribute
from storefront.engine.snapshot import CatalogSnapshot


@dataclass(frozen=True)
class Classification:
    """Result of classifying a selection.

    Attributes:
        variant_attributes: Selected variant attributes, in selection order.
        specification_attributes: Selected specification attributes, in
            selection order.
    """

    variant_attributes: list[Attribute] = field(default_factory=list)
    specification_attributes: list[Attribute] = field(default_factory=list)

    @property
    def variant_attribute_ids(self) -> list[str]:
        """Get ids of the variant attributes."""
        return [a.id for a in self.variant_attributes]


def classify(selection: Iterable[str], catalog: CatalogSnapshot) -> Classification:
    """Partition selected attributes on their variant flag.

    Attribute ids the catalog does not know are ignored.

    Args:
        selection: Selected attribute ids (an AttributeSelection works).
        catalog: Catalog snapshot.

    Returns:
        Disjoint variant and specification attribute lists.
    """
    result = Classification()
    for attribute_id in selection:
        attribute = catalog.attribute(attribute_id)
        if attribute is None:
            continue
        if attribute.is_variant_attribute:
            result.variant_attributes.append(attribute)
        else:
            result.specification_attributes.append(attribute)
    return result
