"""Tests for domain entities."""

import pytest

from storefront.domain import AttributeSelection, AttributeValue, Combination, Money, Variant
from storefront.domain.exceptions import InvalidStockQuantityError


class TestAttributeValue:
    """Tests for AttributeValue entity."""

    def test_label_prefers_display_value(self) -> None:
        """Display value is used as label when present."""
        value = AttributeValue(id="v1", attribute_id="a1", value="xl", display_value="Extra Large")
        assert value.label == "Extra Large"

    def test_label_falls_back_to_value(self) -> None:
        """Raw value is the label otherwise."""
        assert AttributeValue(id="v1", attribute_id="a1", value="XL").label == "XL"

    def test_equality_by_identity(self) -> None:
        """Entities with the same id are equal."""
        a = AttributeValue(id="v1", attribute_id="a1", value="Red")
        b = AttributeValue(id="v1", attribute_id="a1", value="Crimson")
        assert a == b
        assert len({a, b}) == 1


class TestAttributeSelection:
    """Tests for AttributeSelection."""

    def test_add_attribute(self) -> None:
        """Selecting an attribute adds it with no values."""
        selection = AttributeSelection()
        assert selection.add_attribute("attr-color")
        assert "attr-color" in selection
        assert selection.value_ids("attr-color") == []

    def test_add_attribute_twice_is_noop(self) -> None:
        """Selecting an attribute twice reports no change."""
        selection = AttributeSelection()
        selection.add_attribute("attr-color")
        assert not selection.add_attribute("attr-color")

    def test_add_value_selects_attribute(self) -> None:
        """Selecting a value selects its attribute."""
        selection = AttributeSelection()
        assert selection.add_value("attr-color", "val-red")
        assert selection.attribute_ids == ["attr-color"]
        assert selection.value_ids("attr-color") == ["val-red"]

    def test_add_value_twice_is_noop(self) -> None:
        """A value appears at most once."""
        selection = AttributeSelection()
        selection.add_value("attr-color", "val-red")
        assert not selection.add_value("attr-color", "val-red")
        assert selection.value_ids("attr-color") == ["val-red"]

    def test_remove_value_keeps_attribute(self) -> None:
        """Removing the last value leaves the attribute selected."""
        selection = AttributeSelection()
        selection.add_value("attr-color", "val-red")
        assert selection.remove_value("attr-color", "val-red")
        assert "attr-color" in selection
        assert not selection.remove_value("attr-color", "val-red")

    def test_remove_attribute_drops_values(self) -> None:
        """Removing an attribute removes its values."""
        selection = AttributeSelection()
        selection.add_value("attr-color", "val-red")
        assert selection.remove_attribute("attr-color")
        assert len(selection) == 0
        assert not selection.remove_attribute("attr-color")

    def test_attribute_order_is_selection_order(self) -> None:
        """Attributes iterate in the order they were selected."""
        selection = AttributeSelection()
        selection.add_attribute("attr-size")
        selection.add_attribute("attr-color")
        assert list(selection) == ["attr-size", "attr-color"]

    def test_copy_is_independent(self) -> None:
        """Copies do not share value lists."""
        selection = AttributeSelection()
        selection.add_value("attr-color", "val-red")
        copy = selection.copy()
        copy.add_value("attr-color", "val-blue")
        assert selection.to_dict() == {"attr-color": ["val-red"]}
        assert copy.to_dict() == {"attr-color": ["val-red", "val-blue"]}


class TestVariant:
    """Tests for Variant entity."""

    @pytest.fixture
    def variant(self) -> Variant:
        """Create a test variant."""
        return Variant(
            id="variant-1",
            name="Color: Red",
            attributes=Combination.of({"attr-color": "Red"}),
            price=Money(amount_cents=2500),
            stock_quantity=5,
            sku="TSHIRT-1",
        )

    def test_negative_stock_rejected(self) -> None:
        """Variant stock cannot be negative."""
        with pytest.raises(InvalidStockQuantityError):
            Variant(
                id="variant-1",
                name="Color: Red",
                attributes=Combination.of({"attr-color": "Red"}),
                price=Money(amount_cents=2500),
                stock_quantity=-1,
            )

    def test_update_returns_changed_fields(self, variant: Variant) -> None:
        """Update reports only fields whose value changed."""
        changed = variant.update(price=Money(1999), stock_quantity=5, sku="RED-TEE")
        assert changed == ["price", "sku"]
        assert variant.price == Money(1999)
        assert variant.sku == "RED-TEE"

    def test_update_negative_stock_leaves_variant_untouched(self, variant: Variant) -> None:
        """Invalid update is rejected before any field changes."""
        with pytest.raises(InvalidStockQuantityError):
            variant.update(price=Money(1), stock_quantity=-3)
        assert variant.price == Money(2500)
        assert variant.stock_quantity == 5

    def test_same_values_as(self, variant: Variant) -> None:
        """Field-wise comparison differs from identity equality."""
        other = Variant(
            id="variant-1",
            name="Color: Red",
            attributes=Combination.of({"attr-color": "Red"}),
            price=Money(amount_cents=3000),
            stock_quantity=5,
            sku="TSHIRT-1",
        )
        assert variant == other
        assert not variant.same_values_as(other)
