"""Tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain import Combination, Money
from storefront.domain.exceptions import NegativeMoneyError
from storefront.domain.value_objects import DEFAULT_SKU_PLACEHOLDER, ProductContext


class TestMoney:
    """Tests for Money value object."""

    def test_create_from_cents(self) -> None:
        """Money can be created from cents."""
        money = Money(amount_cents=1999, currency="USD")
        assert money.amount_cents == 1999
        assert money.currency == "USD"

    def test_create_from_decimal(self) -> None:
        """Money can be created from a Decimal amount in major units."""
        assert Money.from_decimal(Decimal("19.99")).amount_cents == 1999
        assert Money.from_decimal(Decimal("0.005")).amount_cents == 1

    def test_str(self) -> None:
        """Money renders as major units and currency."""
        assert str(Money(amount_cents=1999, currency="eur")) == "19.99 EUR"

    def test_currency_normalized_to_uppercase(self) -> None:
        """Currency is normalized to uppercase."""
        assert Money(amount_cents=100, currency="eur").currency == "EUR"

    def test_negative_amount_raises_error(self) -> None:
        """Negative amounts raise NegativeMoneyError."""
        with pytest.raises(NegativeMoneyError):
            Money(amount_cents=-100)

    def test_equality_by_value(self) -> None:
        """Money instances with the same amount and currency are equal."""
        assert Money(amount_cents=500) == Money(amount_cents=500, currency="usd")


class TestCombination:
    """Tests for Combination value object."""

    def test_behaves_as_mapping(self) -> None:
        """Combination exposes attribute values by key."""
        combination = Combination.of({"attr-color": "Red", "attr-size": "S"})
        assert combination["attr-color"] == "Red"
        assert len(combination) == 2
        assert list(combination) == ["attr-color", "attr-size"]
        assert "attr-size" in combination

    def test_missing_key_raises_key_error(self) -> None:
        """Unknown attribute raises KeyError."""
        with pytest.raises(KeyError):
            Combination.of({"attr-color": "Red"})["attr-size"]

    def test_of_accepts_pairs(self) -> None:
        """Combination can be built from an iterable of pairs."""
        combination = Combination.of([("attr-size", "M"), ("attr-color", "Blue")])
        assert combination.to_dict() == {"attr-size": "M", "attr-color": "Blue"}

    def test_duplicate_key_rejected(self) -> None:
        """An attribute may appear only once."""
        with pytest.raises(ValueError):
            Combination(entries=(("attr-color", "Red"), ("attr-color", "Blue")))

    def test_agrees_on_shared_keys(self) -> None:
        """Partial-key agreement holds when all shared keys match."""
        full = Combination.of({"attr-color": "Red", "attr-size": "M"})
        assert full.agrees_with({"attr-color": "Red"})
        assert not full.agrees_with({"attr-color": "Blue"})

    def test_no_shared_keys_never_agrees(self) -> None:
        """Maps with no attribute in common do not agree."""
        combination = Combination.of({"attr-color": "Red"})
        assert not combination.agrees_with({"attr-size": "M"})
        assert not combination.agrees_with({})

    def test_any_shared_mismatch_disagrees(self) -> None:
        """One differing shared attribute breaks agreement."""
        combination = Combination.of({"attr-color": "Red", "attr-size": "S"})
        assert not combination.agrees_with({"attr-color": "Red", "attr-size": "M"})

    def test_shared_keys_in_own_order(self) -> None:
        """Shared keys follow this combination's order."""
        combination = Combination.of({"attr-size": "S", "attr-color": "Red"})
        other = {"attr-color": "Red", "attr-size": "S", "attr-fit": "Slim"}
        assert combination.shared_keys(other) == ["attr-size", "attr-color"]


class TestProductContext:
    """Tests for ProductContext value object."""

    def test_sku_prefix_uses_sku(self) -> None:
        """Product SKU is the prefix of default variant SKUs."""
        context = ProductContext("prod-1", Money(2500), sku=" TSHIRT ")
        assert context.sku_prefix == "TSHIRT"

    def test_blank_sku_uses_placeholder(self) -> None:
        """Blank SKU falls back to the placeholder."""
        assert ProductContext("prod-1", Money(2500), sku="  ").sku_prefix == DEFAULT_SKU_PLACEHOLDER
        assert ProductContext("prod-1", Money(2500)).sku_prefix == DEFAULT_SKU_PLACEHOLDER

    def test_empty_product_id_rejected(self) -> None:
        """Product ID is required."""
        with pytest.raises(ValueError):
            ProductContext("", Money(2500))
