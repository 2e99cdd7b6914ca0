"""Attribute catalog API endpoints.

Provides read access to the attributes and values an operator can
select in an edit session.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.errors import to_http_exception
from storefront.api.schemas import (
    AttributeKind,
    AttributeResponse,
    AttributesListResponse,
    AttributeValueResponse,
    AttributeValuesListResponse,
    ErrorResponse,
)
from storefront.application.editing_service import get_attribute_catalog
from storefront.catalog.ports import AttributeCatalog
from storefront.domain.entities import Attribute, AttributeValue
from storefront.domain.exceptions import AttributeNotFoundError

router = APIRouter(prefix="/attributes", tags=["Attributes"])


# ============================================================================
# Converters
# ============================================================================


def attribute_to_response(attribute: Attribute) -> AttributeResponse:
    """Convert Attribute entity to response schema."""
    return AttributeResponse(
        id=attribute.id,
        name=attribute.name,
        slug=attribute.slug,
        type=attribute.type.value,
        is_variant_attribute=attribute.is_variant_attribute,
        sort_order=attribute.sort_order,
    )


def value_to_response(value: AttributeValue) -> AttributeValueResponse:
    """Convert AttributeValue entity to response schema."""
    return AttributeValueResponse(
        id=value.id,
        attribute_id=value.attribute_id,
        value=value.value,
        label=value.label,
        sort_order=value.sort_order,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=AttributesListResponse,
    summary="List attributes",
    description="List active catalog attributes, optionally filtered by kind.",
)
async def list_attributes(
    catalog: Annotated[AttributeCatalog, Depends(get_attribute_catalog)],
    kind: Annotated[AttributeKind | None, Query(description="variant or specification")] = None,
) -> AttributesListResponse:
    """List catalog attributes.

    Args:
        catalog: Attribute catalog.
        kind: Only variant or only specification attributes.

    Returns:
        Attributes in catalog order.
    """
    attributes = list(await catalog.list_attributes())
    if kind is not None:
        want_variant = kind == "variant"
        attributes = [a for a in attributes if a.is_variant_attribute == want_variant]

    return AttributesListResponse(
        items=[attribute_to_response(a) for a in attributes],
        total=len(attributes),
    )


@router.get(
    "/{attribute_id}/values",
    response_model=AttributeValuesListResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List attribute values",
    description="List active values of an attribute in catalog order.",
)
async def list_attribute_values(
    attribute_id: str,
    catalog: Annotated[AttributeCatalog, Depends(get_attribute_catalog)],
) -> AttributeValuesListResponse:
    """List values of one attribute.

    Raises:
        HTTPException: If the attribute does not exist.
    """
    attributes = await catalog.list_attributes()
    if not any(a.id == attribute_id for a in attributes):
        raise to_http_exception(AttributeNotFoundError(attribute_id))

    values = await catalog.list_values(attribute_id)
    return AttributeValuesListResponse(
        attribute_id=attribute_id,
        items=[value_to_response(v) for v in values],
        total=len(values),
    )
