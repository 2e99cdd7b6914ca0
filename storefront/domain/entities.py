"""Domain entities for the variant engine.

Attributes and their values come from the attribute catalog and are
treated as immutable here. Variants are the entities the engine creates,
carries across regenerations and hands to the variant store.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.base import Entity
from storefront.domain.exceptions import InvalidStockQuantityError
from storefront.domain.value_objects import Combination, Money


# ============================================================================
# Catalog Entities
# ============================================================================


class AttributeType(str, Enum):
    """Input type of an attribute in the admin catalog."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    COLOR = "color"
    SIZE = "size"


@dataclass(eq=False)
class Attribute(Entity):
    """Attribute definition owned by the catalog.

    Attributes:
        id: Attribute identifier.
        name: Display name (e.g., "Color").
        slug: URL-safe name.
        type: Input type.
        is_variant_attribute: Whether distinct values produce distinct
            purchasable variants. Specification attributes describe the
            product as a whole.
        sort_order: Catalog ordering.
        is_active: Whether the attribute is offered for selection.
    """

    id: str
    name: str
    slug: str = ""
    type: AttributeType = AttributeType.SELECT
    is_variant_attribute: bool = False
    sort_order: int = 0
    is_active: bool = True


@dataclass(eq=False)
class AttributeValue(Entity):
    """Permissible value of an attribute.

    Attributes:
        id: Value identifier.
        attribute_id: Parent attribute.
        value: Value string used in combinations and variant names.
        display_value: Optional alternative label.
        sort_order: Ordering within the attribute.
        is_active: Whether the value is offered for selection.
    """

    id: str
    attribute_id: str
    value: str
    display_value: str | None = None
    sort_order: int = 0
    is_active: bool = True

    @property
    def label(self) -> str:
        """Get the label shown to operators."""
        return self.display_value or self.value


# ============================================================================
# Attribute Selection
# ============================================================================


@dataclass
class AttributeSelection:
    """Operator's attribute selection for one product.

    Maps attribute ids to the selected value ids. Attribute order is the
    order in which attributes were selected; a value id appears at most
    once per attribute.
    """

    _values: dict[str, list[str]] = field(default_factory=dict)

    def __contains__(self, attribute_id: object) -> bool:
        return attribute_id in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def attribute_ids(self) -> list[str]:
        """Get selected attribute ids in selection order."""
        return list(self._values)

    def value_ids(self, attribute_id: str) -> list[str]:
        """Get selected value ids for an attribute.

        Args:
            attribute_id: Attribute identifier.

        Returns:
            Selected value ids, empty if the attribute is not selected.
        """
        return list(self._values.get(attribute_id, []))

    def add_attribute(self, attribute_id: str) -> bool:
        """Select an attribute with no values.

        Returns:
            False if the attribute was already selected.
        """
        if attribute_id in self._values:
            return False
        self._values[attribute_id] = []
        return True

    def remove_attribute(self, attribute_id: str) -> bool:
        """Deselect an attribute and all of its values.

        Returns:
            False if the attribute was not selected.
        """
        return self._values.pop(attribute_id, None) is not None

    def add_value(self, attribute_id: str, value_id: str) -> bool:
        """Select a value, selecting its attribute first if needed.

        Returns:
            False if the value was already selected.
        """
        values = self._values.setdefault(attribute_id, [])
        if value_id in values:
            return False
        values.append(value_id)
        return True

    def remove_value(self, attribute_id: str, value_id: str) -> bool:
        """Deselect a value. The attribute stays selected.

        Returns:
            False if the value was not selected.
        """
        values = self._values.get(attribute_id)
        if values is None or value_id not in values:
            return False
        values.remove(value_id)
        return True

    def copy(self) -> "AttributeSelection":
        """Create an independent copy of this selection."""
        return AttributeSelection({k: list(v) for k, v in self._values.items()})

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to a plain dictionary."""
        return {k: list(v) for k, v in self._values.items()}


# ============================================================================
# Variant Entity
# ============================================================================


@dataclass(eq=False)
class Variant(Entity):
    """A purchasable variant produced from one combination.

    Attributes:
        id: Variant identifier, stable across regenerations while its
            combination stays reachable.
        name: Derived label (e.g., "Color: Red, Size: S").
        attributes: Combination that produced the variant.
        price: Variant price.
        stock_quantity: Units in stock.
        sku: Stock Keeping Unit.
    """

    id: str
    name: str
    attributes: Combination
    price: Money
    stock_quantity: int = 0
    sku: str = ""

    def __post_init__(self) -> None:
        """Validate variant constraints."""
        if self.stock_quantity < 0:
            raise InvalidStockQuantityError(self.stock_quantity)

    def update(
        self,
        price: Money | None = None,
        stock_quantity: int | None = None,
        sku: str | None = None,
    ) -> list[str]:
        """Apply operator overrides.

        Args:
            price: New price.
            stock_quantity: New stock quantity.
            sku: New SKU.

        Returns:
            Names of the fields whose value changed.

        Raises:
            InvalidStockQuantityError: If stock quantity is negative.
        """
        if stock_quantity is not None and stock_quantity < 0:
            raise InvalidStockQuantityError(stock_quantity)

        changed = []
        if price is not None and price != self.price:
            self.price = price
            changed.append("price")
        if stock_quantity is not None and stock_quantity != self.stock_quantity:
            self.stock_quantity = stock_quantity
            changed.append("stock_quantity")
        if sku is not None and sku != self.sku:
            self.sku = sku
            changed.append("sku")
        return changed

    def same_values_as(self, other: "Variant") -> bool:
        """Compare every field, not only identity.

        Args:
            other: Variant to compare with.

        Returns:
            True if all fields are equal.
        """
        return (
            self.id == other.id
            and self.name == other.name
            and self.attributes == other.attributes
            and self.price == other.price
            and self.stock_quantity == other.stock_quantity
            and self.sku == other.sku
        )
