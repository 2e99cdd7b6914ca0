"""Domain layer - Entities, value objects, domain events and exceptions.

This module exports the core building blocks of the variant engine:

- **Entities**: Objects with identity (Attribute, AttributeValue, Variant)
- **Value Objects**: Immutable objects compared by value (Money, Combination)
- **Domain Events**: Significant occurrences during an edit session
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from storefront.domain import Combination, Money, Variant

    variant = Variant(
        id="variant-1",
        name="Color: Red",
        attributes=Combination.of({"attr-color": "Red"}),
        price=Money(amount_cents=1999),
    )
"""

# Base classes
from storefront.domain.base import AggregateRoot, DomainEvent, Entity, ValueObject

# Entities
from storefront.domain.entities import (
    Attribute,
    AttributeSelection,
    AttributeType,
    AttributeValue,
    Variant,
)

# Domain Events
from storefront.domain.events import (
    EVENT_REGISTRY,
    CombinationThresholdExceeded,
    VariantSaveFailed,
    VariantsCleared,
    VariantsRegenerated,
    VariantsSaved,
    VariantUpdated,
)

# Exceptions
from storefront.domain.exceptions import (
    AttributeNotFoundError,
    AttributeValueMismatchError,
    AttributeValueNotFoundError,
    DomainError,
    InvalidStockQuantityError,
    NegativeMoneyError,
    SessionBusyError,
    SessionNotFoundError,
    VariantNotFoundError,
    VariantSaveError,
)

# Value Objects
from storefront.domain.value_objects import (
    DEFAULT_SKU_PLACEHOLDER,
    Combination,
    Money,
    ProductContext,
)

__all__ = [
    # Base
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "Attribute",
    "AttributeSelection",
    "AttributeType",
    "AttributeValue",
    "Variant",
    # Events
    "EVENT_REGISTRY",
    "CombinationThresholdExceeded",
    "VariantSaveFailed",
    "VariantsCleared",
    "VariantsRegenerated",
    "VariantsSaved",
    "VariantUpdated",
    # Exceptions
    "AttributeNotFoundError",
    "AttributeValueMismatchError",
    "AttributeValueNotFoundError",
    "DomainError",
    "InvalidStockQuantityError",
    "NegativeMoneyError",
    "SessionBusyError",
    "SessionNotFoundError",
    "VariantNotFoundError",
    "VariantSaveError",
    # Value Objects
    "DEFAULT_SKU_PLACEHOLDER",
    "Combination",
    "Money",
    "ProductContext",
]
