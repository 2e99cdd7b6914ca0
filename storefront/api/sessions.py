"""Edit session API endpoints.

Provides endpoints for the admin product form: opening a session,
changing the attribute selection, overriding variant fields and saving.
Every selection change returns the regenerated session state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from storefront.api.errors import to_http_exception
from storefront.api.schemas import (
    ErrorResponse,
    PriceSchema,
    ProductUpdateRequest,
    SaveResponse,
    SelectAttributeRequest,
    SelectValueRequest,
    SessionCreateRequest,
    SessionResponse,
    VariantSchema,
    VariantUpdateRequest,
)
from storefront.application.editing_service import (
    VariantEditingService,
    get_editing_service,
)
from storefront.domain.entities import Variant
from storefront.domain.exceptions import DomainError
from storefront.domain.value_objects import Money
from storefront.engine.session import VariantEditSession
from storefront.infrastructure.config import settings

router = APIRouter(prefix="/edit-sessions", tags=["Edit Sessions"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> VariantEditingService:
    """Get editing service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_editing_service(request_id=request_id)


ServiceDep = Annotated[VariantEditingService, Depends(get_service)]


# ============================================================================
# Converters
# ============================================================================


def price_to_money(price: PriceSchema) -> Money:
    """Convert price schema to Money, applying the default currency."""
    return Money(
        amount_cents=price.amount,
        currency=price.currency or settings.default_currency,
    )


def money_to_price(money: Money) -> PriceSchema:
    """Convert Money to price schema."""
    return PriceSchema(amount=money.amount_cents, currency=money.currency)


def variant_to_schema(variant: Variant) -> VariantSchema:
    """Convert Variant entity to response schema."""
    return VariantSchema(
        id=variant.id,
        name=variant.name,
        sku=variant.sku,
        price=money_to_price(variant.price),
        stock_quantity=variant.stock_quantity,
        attributes=variant.attributes.to_dict(),
    )


def session_to_response(session: VariantEditSession) -> SessionResponse:
    """Convert VariantEditSession aggregate to response schema."""
    classification = session.classification
    return SessionResponse(
        id=session.id,
        product_id=session.product.product_id,
        base_price=money_to_price(session.product.base_price),
        sku=session.product.sku,
        selection=session.selection.to_dict(),
        variant_attribute_ids=classification.variant_attribute_ids,
        specification_attribute_ids=[
            a.id for a in classification.specification_attributes
        ],
        variants_visible=session.variants_visible,
        hidden_reason=session.hidden_reason,
        combination_count=session.combination_count,
        variants=[variant_to_schema(v) for v in session.variants],
        warnings=session.warnings,
        version=session.version,
        is_dirty=session.is_dirty,
        saving=session.saving,
        last_saved_at=session.last_saved_at,
        last_save_error=session.last_save_error,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


# ============================================================================
# Session Lifecycle
# ============================================================================


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="Open edit session",
    description=(
        "Open an editing session for a product. Persisted variants and "
        "attribute assignments are loaded and the variant list is regenerated."
    ),
)
async def open_session(request: SessionCreateRequest, service: ServiceDep) -> SessionResponse:
    """Open an edit session.

    Args:
        request: Product to edit and its context.
        service: Editing service.

    Returns:
        Initial session state.

    Raises:
        HTTPException: If the base price is invalid.
    """
    try:
        session = await service.open_session(
            product_id=request.product_id,
            base_price=price_to_money(request.base_price),
            sku=request.sku,
        )
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get edit session",
)
async def get_session(session_id: str, service: ServiceDep) -> SessionResponse:
    """Get current session state.

    Raises:
        HTTPException: If the session does not exist.
    """
    try:
        session = service.get_session(session_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Discard edit session",
)
async def close_session(session_id: str, service: ServiceDep) -> Response:
    """Discard a session and its unsaved changes.

    Raises:
        HTTPException: If the session does not exist or is saving.
    """
    try:
        service.close_session(session_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{session_id}/product",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Update product context",
    description="Change the base price or SKU used for newly generated variants.",
)
async def update_product(
    session_id: str,
    request: ProductUpdateRequest,
    service: ServiceDep,
) -> SessionResponse:
    """Update product base price or SKU.

    Raises:
        HTTPException: If the session does not exist or is saving.
    """
    try:
        session = service.update_product(
            session_id,
            base_price=price_to_money(request.base_price) if request.base_price else None,
            sku=request.sku,
        )
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


# ============================================================================
# Selection
# ============================================================================


@router.post(
    "/{session_id}/attributes",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Select attribute",
)
async def select_attribute(
    session_id: str,
    request: SelectAttributeRequest,
    service: ServiceDep,
) -> SessionResponse:
    """Add an attribute to the selection.

    Raises:
        HTTPException: If the session or attribute does not exist.
    """
    try:
        session = service.select_attribute(session_id, request.attribute_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


@router.delete(
    "/{session_id}/attributes/{attribute_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Deselect attribute",
)
async def deselect_attribute(
    session_id: str,
    attribute_id: str,
    service: ServiceDep,
) -> SessionResponse:
    """Remove an attribute and its values from the selection.

    Raises:
        HTTPException: If the session does not exist.
    """
    try:
        session = service.deselect_attribute(session_id, attribute_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


@router.post(
    "/{session_id}/attributes/{attribute_id}/values",
    response_model=SessionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Select attribute value",
)
async def select_value(
    session_id: str,
    attribute_id: str,
    request: SelectValueRequest,
    service: ServiceDep,
) -> SessionResponse:
    """Add a value to an attribute's selection.

    Selecting a value of an unselected attribute selects the attribute.

    Raises:
        HTTPException: If the session, attribute or value does not exist,
            or the value belongs to another attribute.
    """
    try:
        session = service.select_value(session_id, attribute_id, request.value_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


@router.delete(
    "/{session_id}/attributes/{attribute_id}/values/{value_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Deselect attribute value",
)
async def deselect_value(
    session_id: str,
    attribute_id: str,
    value_id: str,
    service: ServiceDep,
) -> SessionResponse:
    """Remove a value from an attribute's selection.

    Raises:
        HTTPException: If the session does not exist.
    """
    try:
        session = service.deselect_value(session_id, attribute_id, value_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return session_to_response(session)


# ============================================================================
# Variants
# ============================================================================


@router.patch(
    "/{session_id}/variants/{variant_id}",
    response_model=VariantSchema,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update variant",
    description="Override the price, stock quantity or SKU of one variant.",
)
async def update_variant(
    session_id: str,
    variant_id: str,
    request: VariantUpdateRequest,
    service: ServiceDep,
) -> VariantSchema:
    """Apply operator overrides to a variant.

    Raises:
        HTTPException: If the session or variant does not exist, or a value
            is invalid.
    """
    try:
        variant = service.update_variant(
            session_id,
            variant_id,
            price=price_to_money(request.price) if request.price else None,
            stock_quantity=request.stock_quantity,
            sku=request.sku,
        )
    except DomainError as e:
        raise to_http_exception(e) from e
    return variant_to_schema(variant)


@router.post(
    "/{session_id}/save",
    response_model=SaveResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Save variants",
    description=(
        "Persist the variant list, its attribute value links and the "
        "product's attribute assignments, replacing what was stored before."
    ),
)
async def save_session(session_id: str, service: ServiceDep) -> SaveResponse:
    """Save a session.

    Raises:
        HTTPException: If the session does not exist, is already saving,
            or the store rejected the write.
    """
    try:
        result = await service.save_session(session_id)
    except DomainError as e:
        raise to_http_exception(e) from e

    snapshot = result.snapshot
    return SaveResponse(
        session=session_to_response(result.session),
        session_version=snapshot.session_version,
        variant_count=len(snapshot.projection.variant_rows),
        link_count=len(snapshot.projection.variant_attribute_links),
        assignment_count=len(snapshot.assignments),
    )
