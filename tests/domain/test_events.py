"""Tests for domain events."""

from storefront.domain import (
    EVENT_REGISTRY,
    CombinationThresholdExceeded,
    VariantSaveFailed,
    VariantsCleared,
    VariantsRegenerated,
    VariantsSaved,
    VariantUpdated,
)


class TestDomainEvents:
    """Tests for event serialization and registry."""

    def test_to_dict_includes_envelope_and_payload(self) -> None:
        """Serialized events carry type, aggregate and payload."""
        event = VariantsRegenerated(
            aggregate_id="session-1",
            aggregate_type="VariantEditSession",
            product_id="prod-1",
            combination_count=4,
            preserved_ids=("variant-1",),
            minted_ids=("variant-5",),
            dropped_ids=("variant-2",),
        )
        data = event.to_dict()

        assert data["event_type"] == "variants.regenerated"
        assert data["aggregate_id"] == "session-1"
        assert data["aggregate_type"] == "VariantEditSession"
        assert "event_id" in data
        assert "occurred_at" in data
        assert data["payload"] == {
            "product_id": "prod-1",
            "combination_count": 4,
            "preserved_ids": ["variant-1"],
            "minted_ids": ["variant-5"],
            "dropped_ids": ["variant-2"],
        }

    def test_variant_updated_payload(self) -> None:
        """Changed fields are serialized as a list."""
        event = VariantUpdated(
            product_id="prod-1", variant_id="variant-1", changed_fields=("price",)
        )
        assert event.to_dict()["payload"]["changed_fields"] == ["price"]

    def test_registry_covers_all_events(self) -> None:
        """Every event type resolves to its class."""
        expected = {
            "variants.regenerated": VariantsRegenerated,
            "variants.cleared": VariantsCleared,
            "combinations.threshold_exceeded": CombinationThresholdExceeded,
            "variant.updated": VariantUpdated,
            "variants.saved": VariantsSaved,
            "variants.save_failed": VariantSaveFailed,
        }
        assert EVENT_REGISTRY == expected

    def test_events_have_unique_ids(self) -> None:
        """Each event instance gets its own ID."""
        a = VariantsCleared(product_id="prod-1", reason="no_variant_attributes")
        b = VariantsCleared(product_id="prod-1", reason="no_variant_attributes")
        assert a.event_id != b.event_id
