"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import NegativeMoneyError


# ============================================================================
# Money Value Object
# ============================================================================


@dataclass(frozen=True)
class Money(ValueObject):
    """Price in the smallest currency unit.

    Attributes:
        amount_cents: Amount in minor units.
        currency: ISO 4217 code, stored uppercase.
    """

    amount_cents: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise NegativeMoneyError(self.amount_cents)
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def from_decimal(cls, amount: Decimal, currency: str = "USD") -> Self:
        """Create money from an amount in major units, rounding half up.

        Args:
            amount: Amount such as ``Decimal("19.99")``.
            currency: Currency code.

        Returns:
            Money instance.
        """
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return cls(amount_cents=cents, currency=currency)

    def __str__(self) -> str:
        return f"{Decimal(self.amount_cents) / 100:.2f} {self.currency}"


# ============================================================================
# Combination Value Object
# ============================================================================


@dataclass(frozen=True)
class Combination(ValueObject, Mapping[str, str]):
    """One tuple of the cartesian product of variant attribute values.

    Behaves as a read-only mapping from variant attribute id to the
    selected value string. Entry order is attribute order and is kept
    when the combination is iterated or serialized.

    Attributes:
        entries: Ordered (attribute_id, value) pairs.
    """

    entries: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        """Validate that each attribute appears once."""
        keys = [key for key, _ in self.entries]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate attribute in combination: {keys}")

    @classmethod
    def of(cls, pairs: Mapping[str, str] | Iterable[tuple[str, str]]) -> Self:
        """Build a combination from a mapping or iterable of pairs.

        Args:
            pairs: Attribute id to value assignments, in attribute order.

        Returns:
            Combination instance.
        """
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(entries=tuple((str(k), str(v)) for k, v in items))

    def __getitem__(self, key: str) -> str:
        for attribute_id, value in self.entries:
            if attribute_id == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (attribute_id for attribute_id, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def shared_keys(self, other: Mapping[str, str]) -> list[str]:
        """Get attribute ids present in both this combination and another map.

        Args:
            other: Attribute map to compare with.

        Returns:
            Shared attribute ids, in this combination's order.
        """
        return [key for key in self if key in other]

    def agrees_with(self, other: Mapping[str, str]) -> bool:
        """Check partial-key agreement with another attribute map.

        The maps agree when they share at least one attribute and every
        shared attribute has the same value in both.

        Args:
            other: Attribute map to compare with.

        Returns:
            True if the maps agree on a non-empty set of shared keys.
        """
        shared = self.shared_keys(other)
        if not shared:
            return False
        return all(self[key] == other[key] for key in shared)

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary.

        Returns:
            Attribute id to value mapping.
        """
        return dict(self.entries)


# ============================================================================
# Product Context
# ============================================================================


DEFAULT_SKU_PLACEHOLDER = "PROD"


@dataclass(frozen=True)
class ProductContext(ValueObject):
    """Product fields the variant engine reads from the product form.

    Attributes:
        product_id: Identifier of the product being edited.
        base_price: Current product price, the default for new variants.
        sku: Product SKU or slug used as the default SKU prefix.
    """

    product_id: str
    base_price: Money
    sku: str | None = None

    def __post_init__(self) -> None:
        """Validate product ID."""
        if not self.product_id or not self.product_id.strip():
            raise ValueError("Product ID cannot be empty")

    @property
    def sku_prefix(self) -> str:
        """Get the prefix for default variant SKUs.

        Returns:
            Product SKU, or the placeholder when it is blank.
        """
        if self.sku and self.sku.strip():
            return self.sku.strip()
        return DEFAULT_SKU_PLACEHOLDER
