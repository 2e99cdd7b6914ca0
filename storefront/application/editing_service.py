"""Variant editing application service.

Opens product-editing sessions against the attribute catalog and the
variant store, applies operator commands and submits saves.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from storefront.catalog.memory import (
    InMemoryAttributeCatalog,
    InMemoryVariantStore,
    seed_demo_catalog,
)
from storefront.catalog.ports import AttributeCatalog, VariantStore, load_snapshot
from storefront.catalog.repository import SqlAttributeCatalog, SqlVariantStore
from storefront.domain.entities import Variant
from storefront.domain.exceptions import (
    SessionBusyError,
    SessionNotFoundError,
    VariantSaveError,
)
from storefront.domain.value_objects import Money, ProductContext
from storefront.engine.reconciler import MatchStrategy
from storefront.engine.session import SaveSnapshot, VariantEditSession
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_session_factory

logger = structlog.get_logger()


# ============================================================================
# In-Memory Session Repository
# ============================================================================


class SessionRepository:
    """In-memory repository for edit sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, VariantEditSession] = {}

    def save(self, session: VariantEditSession) -> None:
        """Save a session."""
        self._sessions[session.id] = session

    def get(self, session_id: str) -> VariantEditSession | None:
        """Get session by ID."""
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        return self._sessions.pop(session_id, None) is not None


# Global instances
_session_repo: SessionRepository | None = None
_attribute_catalog: AttributeCatalog | None = None
_variant_store: VariantStore | None = None


def get_session_repository() -> SessionRepository:
    """Get session repository singleton."""
    global _session_repo
    if _session_repo is None:
        _session_repo = SessionRepository()
    return _session_repo


def get_attribute_catalog() -> AttributeCatalog:
    """Get attribute catalog singleton for the configured storage backend."""
    global _attribute_catalog
    if _attribute_catalog is None:
        if settings.storage_backend == "database":
            _attribute_catalog = SqlAttributeCatalog(get_session_factory())
        else:
            catalog = InMemoryAttributeCatalog()
            if settings.seed_demo_catalog:
                seed_demo_catalog(catalog)
            _attribute_catalog = catalog
        logger.info(
            "Attribute catalog initialized",
            backend=settings.storage_backend,
        )
    return _attribute_catalog


def get_variant_store() -> VariantStore:
    """Get variant store singleton for the configured storage backend."""
    global _variant_store
    if _variant_store is None:
        if settings.storage_backend == "database":
            _variant_store = SqlVariantStore(get_session_factory())
        else:
            _variant_store = InMemoryVariantStore()
    return _variant_store


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class SaveSessionResult:
    """Result of saving a session."""

    session: VariantEditSession
    snapshot: SaveSnapshot
    warnings: list[str] = field(default_factory=list)


# ============================================================================
# Variant Editing Service
# ============================================================================


class VariantEditingService:
    """Application service for product variant editing.

    Orchestrates the flow of:
    1. Opening a session from persisted variants and assignments
    2. Applying selection and variant edits (the session regenerates)
    3. Submitting the session state to the variant store

    Example usage:
        service = get_editing_service()
        session = await service.open_session("prod-1", Money(2500), "TSHIRT")
        service.select_value(session.id, "attr-color", "val-red")
        await service.save_session(session.id)
    """

    def __init__(
        self,
        session_repo: SessionRepository | None = None,
        catalog: AttributeCatalog | None = None,
        store: VariantStore | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session_repo: Session repository.
            catalog: Attribute catalog.
            store: Variant store.
            request_id: Request ID for correlation.
        """
        self.session_repo = session_repo or get_session_repository()
        self.catalog = catalog or get_attribute_catalog()
        self.store = store or get_variant_store()
        self.request_id = request_id

    def _publish_events(self, session: VariantEditSession) -> None:
        for event in session.collect_events():
            data = event.to_dict()
            logger.info(
                "Domain event",
                event_type=data["event_type"],
                event_id=data["event_id"],
                session_id=session.id,
                request_id=self.request_id,
                **data["payload"],
            )

    # -------------------------------------------------------------------------
    # Session Lifecycle
    # -------------------------------------------------------------------------

    async def open_session(
        self,
        product_id: str,
        base_price: Money,
        sku: str | None = None,
    ) -> VariantEditSession:
        """Open an editing session for a product.

        Loads the catalog, the persisted variants and the product's
        attribute value assignments, and reverse-maps the assignments into
        the initial selection.

        Args:
            product_id: Product being edited.
            base_price: Price for newly generated variants.
            sku: Product SKU used as prefix for default variant SKUs.

        Returns:
            The new session.
        """
        catalog = await load_snapshot(self.catalog)
        persisted = list(await self.store.load_variants(product_id))
        value_ids = await self.store.load_product_value_ids(product_id)

        session = VariantEditSession.open(
            product=ProductContext(product_id=product_id, base_price=base_price, sku=sku),
            catalog=catalog,
            selection=catalog.selection_from_value_ids(value_ids),
            variants=persisted,
            strategy=MatchStrategy(settings.variant_match_strategy),
            warning_threshold=settings.combination_warning_threshold,
        )
        self.session_repo.save(session)

        logger.info(
            "Edit session opened",
            session_id=session.id,
            product_id=product_id,
            persisted_variants=len(persisted),
            variant_count=len(session.variants),
            request_id=self.request_id,
        )
        self._publish_events(session)
        return session

    def get_session(self, session_id: str) -> VariantEditSession:
        """Get a session by ID.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        session = self.session_repo.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> None:
        """Discard a session and its unsaved changes.

        Raises:
            SessionNotFoundError: If the session does not exist.
            SessionBusyError: If a save is in flight.
        """
        session = self.get_session(session_id)
        if session.saving:
            raise SessionBusyError(session_id)
        self.session_repo.delete(session_id)
        logger.info(
            "Edit session closed",
            session_id=session_id,
            product_id=session.product.product_id,
            discarded_changes=session.is_dirty,
            request_id=self.request_id,
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def select_attribute(self, session_id: str, attribute_id: str) -> VariantEditSession:
        """Add an attribute to the selection."""
        session = self.get_session(session_id)
        session.select_attribute(attribute_id)
        self._publish_events(session)
        return session

    def deselect_attribute(self, session_id: str, attribute_id: str) -> VariantEditSession:
        """Remove an attribute and its values from the selection."""
        session = self.get_session(session_id)
        session.deselect_attribute(attribute_id)
        self._publish_events(session)
        return session

    def select_value(
        self, session_id: str, attribute_id: str, value_id: str
    ) -> VariantEditSession:
        """Add a value to an attribute's selection."""
        session = self.get_session(session_id)
        session.select_value(attribute_id, value_id)
        self._publish_events(session)
        return session

    def deselect_value(
        self, session_id: str, attribute_id: str, value_id: str
    ) -> VariantEditSession:
        """Remove a value from an attribute's selection."""
        session = self.get_session(session_id)
        session.deselect_value(attribute_id, value_id)
        self._publish_events(session)
        return session

    def update_product(
        self,
        session_id: str,
        base_price: Money | None = None,
        sku: str | None = None,
    ) -> VariantEditSession:
        """Update the product's base price or SKU."""
        session = self.get_session(session_id)
        session.update_product(base_price=base_price, sku=sku)
        return session

    def update_variant(
        self,
        session_id: str,
        variant_id: str,
        price: Money | None = None,
        stock_quantity: int | None = None,
        sku: str | None = None,
    ) -> Variant:
        """Apply operator overrides to a variant."""
        session = self.get_session(session_id)
        variant = session.update_variant(
            variant_id, price=price, stock_quantity=stock_quantity, sku=sku
        )
        self._publish_events(session)
        return variant

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    async def save_session(self, session_id: str) -> SaveSessionResult:
        """Submit the session state to the variant store.

        On failure the session keeps its state and the submitted snapshot,
        so a retry sends the same write set. A cancelled save is recorded
        as failed before the cancellation propagates.

        Args:
            session_id: Session ID.

        Returns:
            Save result with the submitted snapshot.

        Raises:
            SessionNotFoundError: If the session does not exist.
            SessionBusyError: If a save is already in flight.
            VariantSaveError: If the variant store rejected the write.
        """
        session = self.get_session(session_id)
        snapshot = session.begin_save()

        logger.info(
            "Saving variants",
            session_id=session_id,
            product_id=snapshot.product_id,
            variant_count=len(snapshot.projection.variant_rows),
            session_version=snapshot.session_version,
            request_id=self.request_id,
        )

        try:
            await self.store.replace_variants(snapshot)
        except asyncio.CancelledError:
            session.fail_save(snapshot, "cancelled")
            logger.warning(
                "Variant save cancelled",
                session_id=session_id,
                product_id=snapshot.product_id,
                request_id=self.request_id,
            )
            self._publish_events(session)
            raise
        except Exception as e:
            session.fail_save(snapshot, str(e))
            logger.error(
                "Variant save failed",
                session_id=session_id,
                product_id=snapshot.product_id,
                error=str(e),
                request_id=self.request_id,
            )
            self._publish_events(session)
            raise VariantSaveError(session_id, snapshot.product_id, str(e)) from e

        session.complete_save(snapshot)
        self._publish_events(session)
        return SaveSessionResult(
            session=session,
            snapshot=snapshot,
            warnings=session.warnings,
        )


def get_editing_service(request_id: str | None = None) -> VariantEditingService:
    """Get editing service instance.

    Args:
        request_id: Request ID for correlation.

    Returns:
        VariantEditingService instance.
    """
    return VariantEditingService(request_id=request_id)
