"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by entities and the edit session when
invariants are violated or invalid operations are attempted.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for attribute catalog errors."""

    pass


class AttributeNotFoundError(CatalogError):
    """Raised when an attribute id is not present in the catalog."""

    def __init__(self, attribute_id: str) -> None:
        """Initialize attribute not found error.

        Args:
            attribute_id: ID of the missing attribute.
        """
        super().__init__(
            f"Attribute {attribute_id} not found in catalog",
            details={"attribute_id": attribute_id},
        )


class AttributeValueNotFoundError(CatalogError):
    """Raised when an attribute value id is not present in the catalog."""

    def __init__(self, value_id: str) -> None:
        """Initialize attribute value not found error.

        Args:
            value_id: ID of the missing attribute value.
        """
        super().__init__(
            f"Attribute value {value_id} not found in catalog",
            details={"value_id": value_id},
        )


class AttributeValueMismatchError(CatalogError):
    """Raised when a value is selected under an attribute it does not belong to."""

    def __init__(self, attribute_id: str, value_id: str, owner_id: str) -> None:
        """Initialize attribute value mismatch error.

        Args:
            attribute_id: Attribute the value was selected under.
            value_id: ID of the attribute value.
            owner_id: Attribute the value actually belongs to.
        """
        super().__init__(
            f"Attribute value {value_id} belongs to attribute {owner_id}, "
            f"not {attribute_id}",
            details={
                "attribute_id": attribute_id,
                "value_id": value_id,
                "owner_id": owner_id,
            },
        )


# ============================================================================
# Variant Errors
# ============================================================================


class VariantError(DomainError):
    """Base class for variant-related errors."""

    pass


class VariantNotFoundError(VariantError):
    """Raised when a variant is not part of the current variant list."""

    def __init__(self, session_id: str, variant_id: str) -> None:
        """Initialize variant not found error.

        Args:
            session_id: ID of the edit session.
            variant_id: ID of the variant.
        """
        super().__init__(
            f"Variant {variant_id} not found in session {session_id}",
            details={"session_id": session_id, "variant_id": variant_id},
        )


class InvalidStockQuantityError(VariantError):
    """Raised when a negative stock quantity is provided."""

    def __init__(self, quantity: int) -> None:
        """Initialize invalid stock quantity error.

        Args:
            quantity: The invalid quantity value.
        """
        super().__init__(
            f"Invalid stock quantity {quantity}: must not be negative",
            details={"quantity": quantity},
        )


# ============================================================================
# Session Errors
# ============================================================================


class SessionError(DomainError):
    """Base class for edit session errors."""

    pass


class SessionNotFoundError(SessionError):
    """Raised when an edit session does not exist."""

    def __init__(self, session_id: str) -> None:
        """Initialize session not found error.

        Args:
            session_id: ID of the edit session.
        """
        super().__init__(
            f"Edit session {session_id} not found",
            details={"session_id": session_id},
        )


class SessionBusyError(SessionError):
    """Raised when a session is mutated while its save is in flight."""

    def __init__(self, session_id: str) -> None:
        """Initialize session busy error.

        Args:
            session_id: ID of the edit session.
        """
        super().__init__(
            f"Edit session {session_id} is saving and cannot be modified",
            details={"session_id": session_id},
        )


class VariantSaveError(SessionError):
    """Raised when the variant store rejects a save."""

    def __init__(self, session_id: str, product_id: str, reason: str) -> None:
        """Initialize variant save error.

        Args:
            session_id: ID of the edit session.
            product_id: ID of the product being saved.
            reason: Description of the underlying failure.
        """
        super().__init__(
            f"Failed to save variants for product {product_id}: {reason}",
            details={
                "session_id": session_id,
                "product_id": product_id,
                "reason": reason,
            },
        )


# ============================================================================
# Money Errors
# ============================================================================


class MoneyError(DomainError):
    """Base class for money-related errors."""

    pass


class NegativeMoneyError(MoneyError):
    """Raised when attempting to create money with negative amount."""

    def __init__(self, amount: int) -> None:
        """Initialize negative money error.

        Args:
            amount: The negative amount in cents.
        """
        super().__init__(
            f"Money amount cannot be negative: {amount}",
            details={"amount": amount},
        )
