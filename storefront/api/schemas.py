"""API schemas for the storefront variant API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class PriceSchema(BaseModel):
    """Price representation."""

    amount: int = Field(..., description="Amount in smallest currency unit (cents)")
    currency: str | None = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="Currency code (defaults to the configured currency)",
    )


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog Schemas
# ============================================================================


AttributeKind = Literal["variant", "specification"]


class AttributeResponse(BaseModel):
    """Attribute definition."""

    id: str = Field(..., description="Attribute identifier")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="URL-safe name")
    type: str = Field(..., description="Input type")
    is_variant_attribute: bool = Field(
        ..., description="Whether selected values produce variants"
    )
    sort_order: int = Field(default=0, description="Catalog ordering")


class AttributesListResponse(BaseModel):
    """List of attributes."""

    items: list[AttributeResponse] = Field(..., description="Attributes in catalog order")
    total: int = Field(..., description="Number of attributes")


class AttributeValueResponse(BaseModel):
    """Permissible attribute value."""

    id: str = Field(..., description="Value identifier")
    attribute_id: str = Field(..., description="Owning attribute")
    value: str = Field(..., description="Raw value")
    label: str = Field(..., description="Display label")
    sort_order: int = Field(default=0, description="Catalog ordering")


class AttributeValuesListResponse(BaseModel):
    """List of values of one attribute."""

    attribute_id: str = Field(..., description="Attribute identifier")
    items: list[AttributeValueResponse] = Field(..., description="Values in catalog order")
    total: int = Field(..., description="Number of values")


# ============================================================================
# Edit Session Schemas
# ============================================================================


class SessionCreateRequest(BaseModel):
    """Request to open an edit session for a product."""

    product_id: str = Field(..., min_length=1, description="Product being edited")
    base_price: PriceSchema = Field(..., description="Price for new variants")
    sku: str | None = Field(
        default=None, max_length=100, description="Product SKU, prefix of default variant SKUs"
    )


class ProductUpdateRequest(BaseModel):
    """Request to change the product context of a session."""

    base_price: PriceSchema | None = Field(default=None, description="New base price")
    sku: str | None = Field(default=None, max_length=100, description="New product SKU")


class SelectAttributeRequest(BaseModel):
    """Request to add an attribute to the selection."""

    attribute_id: str = Field(..., min_length=1, description="Attribute to select")


class SelectValueRequest(BaseModel):
    """Request to add a value to an attribute's selection."""

    value_id: str = Field(..., min_length=1, description="Attribute value to select")


class VariantUpdateRequest(BaseModel):
    """Operator overrides for one variant."""

    price: PriceSchema | None = Field(default=None, description="New price")
    stock_quantity: int | None = Field(default=None, description="New stock quantity")
    sku: str | None = Field(default=None, max_length=100, description="New SKU")


class VariantSchema(BaseModel):
    """Variant in the session's variant list."""

    id: str = Field(..., description="Variant identifier")
    name: str = Field(..., description="Derived name, e.g. 'Color: Red, Size: S'")
    sku: str = Field(..., description="Stock Keeping Unit")
    price: PriceSchema = Field(..., description="Variant price")
    stock_quantity: int = Field(..., description="Units in stock")
    attributes: dict[str, str] = Field(
        default_factory=dict, description="Attribute id to raw value"
    )


class SessionResponse(BaseModel):
    """State of an edit session."""

    id: str = Field(..., description="Session identifier")
    product_id: str = Field(..., description="Product being edited")
    base_price: PriceSchema = Field(..., description="Price for new variants")
    sku: str | None = Field(default=None, description="Product SKU")
    selection: dict[str, list[str]] = Field(
        default_factory=dict, description="Selected value ids per attribute id"
    )
    variant_attribute_ids: list[str] = Field(
        default_factory=list, description="Selected attributes that produce variants"
    )
    specification_attribute_ids: list[str] = Field(
        default_factory=list, description="Selected descriptive attributes"
    )
    variants_visible: bool = Field(..., description="Whether the variant list is shown")
    hidden_reason: str | None = Field(default=None, description="Why variants are hidden")
    combination_count: int = Field(default=0, description="Generated combinations")
    variants: list[VariantSchema] = Field(default_factory=list, description="Variant list")
    warnings: list[str] = Field(default_factory=list, description="Operator warnings")
    version: int = Field(..., description="Session version")
    is_dirty: bool = Field(..., description="Whether there are unsaved changes")
    saving: bool = Field(default=False, description="Whether a save is in flight")
    last_saved_at: datetime | None = Field(default=None, description="Last successful save")
    last_save_error: str | None = Field(default=None, description="Last save failure")
    created_at: datetime = Field(..., description="When the session was opened")
    updated_at: datetime = Field(..., description="When the session last changed")


class SaveResponse(BaseModel):
    """Result of saving a session."""

    session: SessionResponse = Field(..., description="Session after the save")
    session_version: int = Field(..., description="Version that was persisted")
    variant_count: int = Field(..., description="Variant rows written")
    link_count: int = Field(..., description="Variant attribute links written")
    assignment_count: int = Field(..., description="Product assignments written")
