"""Variant edit session aggregate.

Holds the state of one product-editing session: the catalog snapshot,
the product context, the operator's attribute selection and the current
variant list. Every selection change synchronously re-runs
classify -> generate -> reconcile, feeding the previous variant list back
in so that edits accumulate across any sequence of changes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

import structlog

from storefront.domain.base import AggregateRoot
from storefront.domain.entities import AttributeSelection, Variant
from storefront.domain.events import (
    CombinationThresholdExceeded,
    VariantSaveFailed,
    VariantsCleared,
    VariantsRegenerated,
    VariantsSaved,
    VariantUpdated,
)
from storefront.domain.exceptions import (
    AttributeNotFoundError,
    AttributeValueMismatchError,
    AttributeValueNotFoundError,
    SessionBusyError,
    VariantNotFoundError,
)
from storefront.domain.value_objects import Money, ProductContext
from storefront.engine.classifier import Classification, classify
from storefront.engine.generator import exceeds_threshold, generate, unconfigured_attributes
from storefront.engine.identity import VariantIdAllocator
from storefront.engine.projection import (
    ProductAttributeAssignment,
    Projection,
    find_duplicate_skus,
    project,
    project_product_assignments,
)
from storefront.engine.reconciler import MatchStrategy, Reconciler, ReconciliationResult
from storefront.engine.snapshot import CatalogSnapshot

logger = structlog.get_logger()


# Reasons for hiding the variant list
NO_VARIANT_ATTRIBUTES = "no_variant_attributes"
UNCONFIGURED_ATTRIBUTES = "unconfigured_attributes"


@dataclass(frozen=True)
class SaveSnapshot:
    """Immutable write set submitted to the variant store.

    Attributes:
        session_version: Session version the snapshot was taken at.
        product_id: Product being saved.
        projection: Variant rows and variant attribute links.
        assignments: Product-level attribute value assignments.
    """

    session_version: int
    product_id: str
    projection: Projection
    assignments: tuple[ProductAttributeAssignment, ...] = ()


@dataclass(kw_only=True, eq=False)
class VariantEditSession(AggregateRoot):
    """Aggregate root for one product-editing session.

    Attributes:
        id: Session identifier.
        product: Product context (id, base price, SKU prefix).
        catalog: Catalog snapshot taken when the session opened.
        selection: Operator's attribute selection.
        variants: Current reconciled variant list.
        strategy: Candidate selection strategy for reconciliation.
        warning_threshold: Combination count above which a warning is raised.
        variants_visible: Whether the variant list should be shown.
        hidden_reason: Why the variant list is hidden, if it is.
        combination_count: Number of combinations in the last generation.
        saving: True while a save is in flight.
        last_saved_version: Session version of the last successful save.
        last_saved_at: Timestamp of the last successful save.
        last_save_error: Reason of the last failed save, cleared on success.
    """

    id: str
    product: ProductContext
    catalog: CatalogSnapshot
    selection: AttributeSelection = field(default_factory=AttributeSelection)
    variants: list[Variant] = field(default_factory=list)
    strategy: MatchStrategy = MatchStrategy.FIRST_MATCH
    warning_threshold: int = 100
    variants_visible: bool = False
    hidden_reason: str | None = NO_VARIANT_ATTRIBUTES
    combination_count: int = 0
    saving: bool = False
    last_saved_version: int | None = None
    last_saved_at: datetime | None = None
    last_save_error: str | None = None
    _allocator: VariantIdAllocator = field(
        default_factory=VariantIdAllocator, init=False, repr=False
    )
    _pending_save: SaveSnapshot | None = field(default=None, init=False, repr=False)

    @classmethod
    def open(
        cls,
        product: ProductContext,
        catalog: CatalogSnapshot,
        selection: AttributeSelection | None = None,
        variants: list[Variant] | None = None,
        strategy: MatchStrategy = MatchStrategy.FIRST_MATCH,
        warning_threshold: int = 100,
        session_id: str | None = None,
    ) -> "VariantEditSession":
        """Open a session, optionally seeded with persisted state.

        The persisted variants become the previous list of a first
        regeneration, so the session starts in a consistent state.

        Args:
            product: Product context.
            catalog: Catalog snapshot.
            selection: Selection reverse-mapped from persisted assignments.
            variants: Persisted variants.
            strategy: Candidate selection strategy.
            warning_threshold: Combination warning threshold.
            session_id: Optional pre-generated session ID.

        Returns:
            New VariantEditSession instance.
        """
        session = cls(
            id=session_id or str(uuid4()),
            product=product,
            catalog=catalog,
            selection=selection.copy() if selection else AttributeSelection(),
            variants=list(variants or []),
            strategy=strategy,
            warning_threshold=warning_threshold,
        )
        session._allocator.reserve(v.id for v in session.variants)
        session.regenerate()
        # Opening against persisted state is the saved baseline
        if variants:
            session.last_saved_version = session.version
        return session

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def classification(self) -> Classification:
        """Classify the current selection."""
        return classify(self.selection, self.catalog)

    @property
    def is_dirty(self) -> bool:
        """Check whether there are changes since the last save."""
        return self.last_saved_version != self.version

    @property
    def warnings(self) -> list[str]:
        """Get warnings to surface to the operator."""
        warnings = []
        if exceeds_threshold(self.combination_count, self.warning_threshold):
            warnings.append(
                f"{self.combination_count} combinations exceed the recommended "
                f"maximum of {self.warning_threshold}; each becomes a saved variant"
            )
        for sku in find_duplicate_skus(self.variants):
            warnings.append(f"SKU {sku} is used by more than one variant")
        return warnings

    def get_variant(self, variant_id: str) -> Variant:
        """Find variant by ID.

        Raises:
            VariantNotFoundError: If the variant is not in the list.
        """
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        raise VariantNotFoundError(self.id, variant_id)

    # -------------------------------------------------------------------------
    # Selection Commands
    # -------------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self.saving:
            raise SessionBusyError(self.id)

    def _require_attribute(self, attribute_id: str) -> None:
        if self.catalog.attribute(attribute_id) is None:
            raise AttributeNotFoundError(attribute_id)

    def select_attribute(self, attribute_id: str) -> bool:
        """Add an attribute to the selection.

        Returns:
            False if the attribute was already selected.

        Raises:
            SessionBusyError: If a save is in flight.
            AttributeNotFoundError: If the attribute is not in the catalog.
        """
        self._ensure_editable()
        self._require_attribute(attribute_id)
        return self._apply(self.selection.add_attribute(attribute_id))

    def deselect_attribute(self, attribute_id: str) -> bool:
        """Remove an attribute and its values from the selection.

        Returns:
            False if the attribute was not selected.
        """
        self._ensure_editable()
        return self._apply(self.selection.remove_attribute(attribute_id))

    def select_value(self, attribute_id: str, value_id: str) -> bool:
        """Add a value to the selection of an attribute.

        Returns:
            False if the value was already selected.

        Raises:
            SessionBusyError: If a save is in flight.
            AttributeNotFoundError: If the attribute is not in the catalog.
            AttributeValueNotFoundError: If the value is not in the catalog.
            AttributeValueMismatchError: If the value belongs to another
                attribute.
        """
        self._ensure_editable()
        self._require_attribute(attribute_id)
        value = self.catalog.value(value_id)
        if value is None:
            raise AttributeValueNotFoundError(value_id)
        if value.attribute_id != attribute_id:
            raise AttributeValueMismatchError(attribute_id, value_id, value.attribute_id)
        return self._apply(self.selection.add_value(attribute_id, value_id))

    def deselect_value(self, attribute_id: str, value_id: str) -> bool:
        """Remove a value from the selection of an attribute.

        Returns:
            False if the value was not selected.
        """
        self._ensure_editable()
        return self._apply(self.selection.remove_value(attribute_id, value_id))

    def _apply(self, changed: bool) -> bool:
        if changed:
            self._mark_changed()
            self.regenerate()
        return changed

    # -------------------------------------------------------------------------
    # Product and Variant Commands
    # -------------------------------------------------------------------------

    def update_product(self, base_price: Money | None = None, sku: str | None = None) -> None:
        """Update the product context.

        Only variants minted afterwards pick up the new defaults;
        existing variants keep their price and SKU.
        """
        self._ensure_editable()
        self.product = ProductContext(
            product_id=self.product.product_id,
            base_price=base_price if base_price is not None else self.product.base_price,
            sku=sku if sku is not None else self.product.sku,
        )
        self._mark_changed()

    def update_variant(
        self,
        variant_id: str,
        price: Money | None = None,
        stock_quantity: int | None = None,
        sku: str | None = None,
    ) -> Variant:
        """Apply operator overrides to a variant.

        Returns:
            The updated variant.

        Raises:
            SessionBusyError: If a save is in flight.
            VariantNotFoundError: If the variant is not in the list.
            InvalidStockQuantityError: If stock quantity is negative.
        """
        self._ensure_editable()
        variant = self.get_variant(variant_id)
        changed = variant.update(price=price, stock_quantity=stock_quantity, sku=sku)
        if changed:
            self._mark_changed()
            self._record_event(
                VariantUpdated(
                    product_id=self.product.product_id,
                    variant_id=variant_id,
                    changed_fields=tuple(changed),
                )
            )
        return variant

    # -------------------------------------------------------------------------
    # Regeneration
    # -------------------------------------------------------------------------

    def _clear(self, reason: str) -> None:
        dropped = tuple(v.id for v in self.variants)
        self.variants = []
        self.variants_visible = False
        self.hidden_reason = reason
        self.combination_count = 0
        if dropped:
            self._record_event(
                VariantsCleared(
                    product_id=self.product.product_id,
                    reason=reason,
                    dropped_ids=dropped,
                )
            )

    def regenerate(self) -> ReconciliationResult | None:
        """Rebuild the variant list from the current selection.

        Returns:
            Reconciliation result, or None when the selection cannot
            produce variants and the list was cleared.
        """
        variant_attributes = self.classification.variant_attributes
        if not variant_attributes:
            self._clear(NO_VARIANT_ATTRIBUTES)
            return None

        pending = unconfigured_attributes(variant_attributes, self.selection, self.catalog)
        if pending:
            logger.debug(
                "Variant generation waiting for values",
                session_id=self.id,
                attribute_ids=[a.id for a in pending],
            )
            self._clear(UNCONFIGURED_ATTRIBUTES)
            return None

        combinations = generate(variant_attributes, self.selection, self.catalog)
        self.combination_count = len(combinations)
        if exceeds_threshold(self.combination_count, self.warning_threshold):
            logger.warning(
                "Combination count exceeds threshold",
                session_id=self.id,
                product_id=self.product.product_id,
                combination_count=self.combination_count,
                threshold=self.warning_threshold,
            )
            self._record_event(
                CombinationThresholdExceeded(
                    product_id=self.product.product_id,
                    combination_count=self.combination_count,
                    threshold=self.warning_threshold,
                )
            )

        result = Reconciler(self.strategy).run(
            combinations,
            self.variants,
            attribute_names=self.catalog.attribute_names(),
            base_price=self.product.base_price,
            sku_prefix=self.product.sku,
            allocator=self._allocator,
        )
        self.variants = result.variants
        self.variants_visible = True
        self.hidden_reason = None
        self._record_event(
            VariantsRegenerated(
                product_id=self.product.product_id,
                combination_count=self.combination_count,
                preserved_ids=tuple(result.preserved_ids),
                minted_ids=tuple(result.minted_ids),
                dropped_ids=tuple(result.dropped_ids),
            )
        )
        return result

    # -------------------------------------------------------------------------
    # Save Lifecycle
    # -------------------------------------------------------------------------

    def begin_save(self) -> SaveSnapshot:
        """Freeze the current state for submission to the variant store.

        A retry without intervening edits returns the very snapshot that
        was submitted before.

        Returns:
            Snapshot to submit.

        Raises:
            SessionBusyError: If a save is already in flight.
        """
        self._ensure_editable()
        pending = self._pending_save
        if pending is None or pending.session_version != self.version:
            pending = SaveSnapshot(
                session_version=self.version,
                product_id=self.product.product_id,
                projection=project(self.variants, self.catalog),
                assignments=project_product_assignments(self.selection, self.catalog),
            )
            self._pending_save = pending
        self.saving = True
        return pending

    def complete_save(self, snapshot: SaveSnapshot) -> None:
        """Record that the store accepted a snapshot."""
        self.saving = False
        self._pending_save = None
        self.last_saved_version = snapshot.session_version
        self.last_saved_at = datetime.now(timezone.utc)
        self.last_save_error = None
        self._record_event(
            VariantsSaved(
                product_id=snapshot.product_id,
                variant_count=len(snapshot.projection.variant_rows),
                link_count=len(snapshot.projection.variant_attribute_links),
                session_version=snapshot.session_version,
            )
        )

    def fail_save(self, snapshot: SaveSnapshot, reason: str) -> None:
        """Record that the store rejected a snapshot.

        The variant list is left untouched and the snapshot is kept for
        a retry.
        """
        self.saving = False
        self.last_save_error = reason
        self._record_event(
            VariantSaveFailed(
                product_id=snapshot.product_id,
                reason=reason,
                session_version=snapshot.session_version,
            )
        )
