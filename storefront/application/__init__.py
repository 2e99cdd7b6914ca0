"""Application layer module.

Contains the application service that drives product-editing sessions
against the catalog and the variant store.
"""

from storefront.application.editing_service import (
    SaveSessionResult,
    SessionRepository,
    VariantEditingService,
    get_attribute_catalog,
    get_editing_service,
    get_session_repository,
    get_variant_store,
)

__all__ = [
    "SaveSessionResult",
    "SessionRepository",
    "VariantEditingService",
    "get_attribute_catalog",
    "get_editing_service",
    "get_session_repository",
    "get_variant_store",
]
