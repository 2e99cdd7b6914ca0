"""Combination generation.

Builds the cartesian product of the values selected for each variant
attribute. Attributes keep their selection order; values within an
attribute follow catalog order so that the output does not depend on
the order in which the operator clicked values.
"""

import itertools
import math
from collections.abc import Sequence

import structlog

from storefront.domain.entities import Attribute, AttributeSelection, AttributeValue
from storefront.domain.value_objects import Combination
from storefront.engine.snapshot import CatalogSnapshot

logger = structlog.get_logger()


def effective_values(
    variant_attributes: Sequence[Attribute],
    selection: AttributeSelection,
    catalog: CatalogSnapshot,
) -> list[tuple[Attribute, list[AttributeValue]]]:
    """Resolve the selected values of each variant attribute.

    Args:
        variant_attributes: Variant attributes in selection order.
        selection: Current attribute selection.
        catalog: Catalog snapshot.

    Returns:
        (attribute, resolved values) pairs. Values missing from the
        catalog are already dropped.
    """
    return [
        (attribute, catalog.resolve(attribute.id, selection.value_ids(attribute.id)))
        for attribute in variant_attributes
    ]


def unconfigured_attributes(
    variant_attributes: Sequence[Attribute],
    selection: AttributeSelection,
    catalog: CatalogSnapshot,
) -> list[Attribute]:
    """Get variant attributes that have no effective value selected.

    Args:
        variant_attributes: Variant attributes in selection order.
        selection: Current attribute selection.
        catalog: Catalog snapshot.

    Returns:
        Attributes that block generation.
    """
    return [
        attribute
        for attribute, values in effective_values(variant_attributes, selection, catalog)
        if not values
    ]


def combination_count(
    variant_attributes: Sequence[Attribute],
    selection: AttributeSelection,
    catalog: CatalogSnapshot,
) -> int:
    """Count combinations without building them.

    Args:
        variant_attributes: Variant attributes in selection order.
        selection: Current attribute selection.
        catalog: Catalog snapshot.

    Returns:
        Product of the effective value counts, or 0 when there are no
        variant attributes or any of them has no values.
    """
    if not variant_attributes:
        return 0
    return math.prod(
        len(values)
        for _, values in effective_values(variant_attributes, selection, catalog)
    )


def exceeds_threshold(count: int, threshold: int) -> bool:
    """Check whether a combination count deserves a warning.

    Args:
        count: Number of combinations.
        threshold: Warning threshold; 0 or less disables the warning.

    Returns:
        True if the count is above a positive threshold.
    """
    return threshold > 0 and count > threshold


def generate(
    variant_attributes: Sequence[Attribute],
    selection: AttributeSelection,
    catalog: CatalogSnapshot,
) -> list[Combination]:
    """Generate every combination of the selected variant attribute values.

    A variant attribute without any effective value means the product is
    not ready for variant generation, so nothing is generated rather than
    a partial product.

    Args:
        variant_attributes: Variant attributes in selection order.
        selection: Current attribute selection.
        catalog: Catalog snapshot.

    Returns:
        Combinations in deterministic order: the first attribute varies
        slowest, values follow catalog order.
    """
    if not variant_attributes:
        return []

    resolved = effective_values(variant_attributes, selection, catalog)
    if any(not values for _, values in resolved):
        logger.debug(
            "Variant attributes not fully configured",
            attribute_ids=[a.id for a, values in resolved if not values],
        )
        return []

    axes = [
        [(attribute.id, value.value) for value in values]
        for attribute, values in resolved
    ]
    return [Combination(entries=entries) for entries in itertools.product(*axes)]
