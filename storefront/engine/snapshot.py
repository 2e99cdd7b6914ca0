"""Synchronous view of the attribute catalog.

The catalog itself is read asynchronously. The engine works on a snapshot
taken when an edit session opens so that every regeneration runs to
completion without suspending.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from storefront.domain.entities import Attribute, AttributeSelection, AttributeValue

logger = structlog.get_logger()


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable, indexed copy of catalog attributes and values.

    Attributes:
        attributes: Attributes in catalog order.
        values: Attribute values in catalog insertion order.
    """

    attributes: tuple[Attribute, ...] = ()
    values: tuple[AttributeValue, ...] = ()
    _attributes_by_id: dict[str, Attribute] = field(
        init=False, repr=False, compare=False
    )
    _values_by_id: dict[str, AttributeValue] = field(
        init=False, repr=False, compare=False
    )
    _values_by_attribute: dict[str, list[AttributeValue]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Build lookup indexes."""
        by_attribute: dict[str, list[tuple[int, int, AttributeValue]]] = {}
        for position, value in enumerate(self.values):
            by_attribute.setdefault(value.attribute_id, []).append(
                (value.sort_order, position, value)
            )
        object.__setattr__(
            self, "_attributes_by_id", {a.id: a for a in self.attributes}
        )
        object.__setattr__(self, "_values_by_id", {v.id: v for v in self.values})
        object.__setattr__(
            self,
            "_values_by_attribute",
            {
                attribute_id: [v for _, _, v in sorted(entries, key=lambda e: e[:2])]
                for attribute_id, entries in by_attribute.items()
            },
        )

    @classmethod
    def build(
        cls,
        attributes: Iterable[Attribute],
        values: Iterable[AttributeValue],
    ) -> "CatalogSnapshot":
        """Create a snapshot from catalog listings.

        Args:
            attributes: Catalog attributes.
            values: Catalog attribute values.

        Returns:
            CatalogSnapshot instance.
        """
        return cls(attributes=tuple(attributes), values=tuple(values))

    def attribute(self, attribute_id: str) -> Attribute | None:
        """Get attribute by ID."""
        return self._attributes_by_id.get(attribute_id)

    def value(self, value_id: str) -> AttributeValue | None:
        """Get attribute value by ID."""
        return self._values_by_id.get(value_id)

    def values_for(self, attribute_id: str) -> list[AttributeValue]:
        """Get an attribute's values in catalog order.

        Catalog order is ``sort_order`` first, then insertion order.

        Args:
            attribute_id: Attribute identifier.

        Returns:
            Values of the attribute.
        """
        return list(self._values_by_attribute.get(attribute_id, []))

    def resolve(self, attribute_id: str, value_ids: Iterable[str]) -> list[AttributeValue]:
        """Resolve selected value ids to catalog values.

        Ids missing from the catalog, or belonging to another attribute,
        are skipped.

        Args:
            attribute_id: Attribute the values were selected under.
            value_ids: Selected value identifiers.

        Returns:
            Resolved values in catalog order.
        """
        wanted = set(value_ids)
        resolved = [v for v in self.values_for(attribute_id) if v.id in wanted]
        if len(resolved) != len(wanted):
            logger.debug(
                "Skipped unresolvable attribute values",
                attribute_id=attribute_id,
                missing=sorted(wanted - {v.id for v in resolved}),
            )
        return resolved

    def find_value(self, attribute_id: str, value: str) -> AttributeValue | None:
        """Find the catalog value with the given value string.

        Args:
            attribute_id: Attribute identifier.
            value: Value string as stored in a combination.

        Returns:
            Matching attribute value, or None.
        """
        for candidate in self.values_for(attribute_id):
            if candidate.value == value:
                return candidate
        return None

    def attribute_names(self) -> dict[str, str]:
        """Get attribute names keyed by attribute id."""
        return {a.id: a.name for a in self.attributes}

    def selection_from_value_ids(self, value_ids: Iterable[str]) -> AttributeSelection:
        """Reverse-map persisted value assignments into a selection.

        Attributes are ordered by the first assignment that references
        them. Value ids that are no longer in the catalog are skipped.

        Args:
            value_ids: Attribute value ids assigned to the product.

        Returns:
            Reconstructed attribute selection.
        """
        selection = AttributeSelection()
        for value_id in value_ids:
            value = self.value(value_id)
            if value is None or self.attribute(value.attribute_id) is None:
                logger.debug("Skipped unknown assignment", value_id=value_id)
                continue
            selection.add_value(value.attribute_id, value.id)
        return selection
