"""Domain events for the variant edit session.

Events are recorded by the edit session as the operator changes the
attribute selection, edits variants and saves. The application service
collects them after each operation and writes them to the log.
"""

from dataclasses import dataclass
from typing import ClassVar

from storefront.domain.base import DomainEvent


# ============================================================================
# Generation Events
# ============================================================================


@dataclass(frozen=True)
class VariantsRegenerated(DomainEvent):
    """Event raised when the variant list is rebuilt from the selection."""

    event_type: ClassVar[str] = "variants.regenerated"

    product_id: str = ""
    combination_count: int = 0
    preserved_ids: tuple[str, ...] = ()
    minted_ids: tuple[str, ...] = ()
    dropped_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class VariantsCleared(DomainEvent):
    """Event raised when the selection cannot produce any variants."""

    event_type: ClassVar[str] = "variants.cleared"

    product_id: str = ""
    reason: str = ""
    dropped_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CombinationThresholdExceeded(DomainEvent):
    """Event raised when a selection produces more combinations than advised."""

    event_type: ClassVar[str] = "combinations.threshold_exceeded"

    product_id: str = ""
    combination_count: int = 0
    threshold: int = 0


# ============================================================================
# Variant Events
# ============================================================================


@dataclass(frozen=True)
class VariantUpdated(DomainEvent):
    """Event raised when the operator overrides variant fields."""

    event_type: ClassVar[str] = "variant.updated"

    product_id: str = ""
    variant_id: str = ""
    changed_fields: tuple[str, ...] = ()


# ============================================================================
# Save Events
# ============================================================================


@dataclass(frozen=True)
class VariantsSaved(DomainEvent):
    """Event raised when the variant store accepted a save."""

    event_type: ClassVar[str] = "variants.saved"

    product_id: str = ""
    variant_count: int = 0
    link_count: int = 0
    session_version: int = 0


@dataclass(frozen=True)
class VariantSaveFailed(DomainEvent):
    """Event raised when the variant store rejected a save."""

    event_type: ClassVar[str] = "variants.save_failed"

    product_id: str = ""
    reason: str = ""
    session_version: int = 0


# ============================================================================
# Event Registry
# ============================================================================


EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    cls.event_type: cls
    for cls in (
        VariantsRegenerated,
        VariantsCleared,
        CombinationThresholdExceeded,
        VariantUpdated,
        VariantsSaved,
        VariantSaveFailed,
    )
}
