"""Mapping of domain errors to HTTP responses."""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

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

# Error class -> (HTTP status, error code)
ERROR_STATUS: dict[type[DomainError], tuple[int, str]] = {
    AttributeNotFoundError: (status.HTTP_404_NOT_FOUND, "ATTRIBUTE_NOT_FOUND"),
    AttributeValueNotFoundError: (status.HTTP_404_NOT_FOUND, "ATTRIBUTE_VALUE_NOT_FOUND"),
    AttributeValueMismatchError: (422, "ATTRIBUTE_VALUE_MISMATCH"),
    VariantNotFoundError: (status.HTTP_404_NOT_FOUND, "VARIANT_NOT_FOUND"),
    InvalidStockQuantityError: (422, "INVALID_STOCK_QUANTITY"),
    NegativeMoneyError: (422, "NEGATIVE_MONEY"),
    SessionNotFoundError: (status.HTTP_404_NOT_FOUND, "SESSION_NOT_FOUND"),
    SessionBusyError: (status.HTTP_409_CONFLICT, "SESSION_BUSY"),
    VariantSaveError: (status.HTTP_502_BAD_GATEWAY, "VARIANT_SAVE_FAILED"),
}


def to_http_exception(error: DomainError) -> HTTPException:
    """Convert a domain error to an HTTPException in the error envelope.

    Args:
        error: Domain error raised by the service.

    Returns:
        HTTPException with error_code, message and details.
    """
    status_code, error_code = status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR"
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            status_code, error_code = ERROR_STATUS[cls]
            break

    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error_code,
            "message": error.message,
            "details": [
                {"field": key, "message": str(value)}
                for key, value in error.details.items()
            ],
        },
    )


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request_id: str | None,
    details: list | None = None,
) -> JSONResponse:
    """Build a JSON response in the error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": request_id,
        },
    )


def internal_error_response(request_id: str | None) -> JSONResponse:
    """Build the 500 response for unhandled exceptions."""
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
        request_id,
    )
