"""Shared fixtures for storefront tests."""

from collections.abc import Callable

import pytest

from storefront.domain import (
    Attribute,
    AttributeType,
    AttributeValue,
    Combination,
    Money,
    Variant,
)
from storefront.engine import CatalogSnapshot


@pytest.fixture
def attributes() -> list[Attribute]:
    """Color and Size variant attributes plus a Material specification attribute."""
    return [
        Attribute(
            id="attr-color",
            name="Color",
            slug="color",
            type=AttributeType.COLOR,
            is_variant_attribute=True,
            sort_order=1,
        ),
        Attribute(
            id="attr-size",
            name="Size",
            slug="size",
            type=AttributeType.SIZE,
            is_variant_attribute=True,
            sort_order=2,
        ),
        Attribute(
            id="attr-material",
            name="Material",
            slug="material",
            type=AttributeType.TEXT,
            is_variant_attribute=False,
            sort_order=3,
        ),
    ]


@pytest.fixture
def attribute_values() -> list[AttributeValue]:
    """Values for the test attributes."""
    return [
        AttributeValue(id="val-red", attribute_id="attr-color", value="Red", sort_order=1),
        AttributeValue(id="val-blue", attribute_id="attr-color", value="Blue", sort_order=2),
        AttributeValue(id="val-black", attribute_id="attr-color", value="Black", sort_order=3),
        AttributeValue(id="val-size-s", attribute_id="attr-size", value="S", sort_order=1),
        AttributeValue(id="val-size-m", attribute_id="attr-size", value="M", sort_order=2),
        AttributeValue(id="val-size-l", attribute_id="attr-size", value="L", sort_order=3),
        AttributeValue(id="val-cotton", attribute_id="attr-material", value="Cotton", sort_order=1),
    ]


@pytest.fixture
def catalog(
    attributes: list[Attribute], attribute_values: list[AttributeValue]
) -> CatalogSnapshot:
    """Catalog snapshot of the test attributes."""
    return CatalogSnapshot.build(attributes, attribute_values)


@pytest.fixture
def make_variant() -> Callable[..., Variant]:
    """Factory for variants keyed by attribute id."""

    def _make(
        variant_id: str,
        attributes: dict[str, str],
        price_cents: int = 2500,
        stock_quantity: int = 0,
        sku: str = "",
    ) -> Variant:
        return Variant(
            id=variant_id,
            name=", ".join(f"{k}: {v}" for k, v in attributes.items()),
            attributes=Combination.of(attributes),
            price=Money(amount_cents=price_cents),
            stock_quantity=stock_quantity,
            sku=sku,
        )

    return _make
