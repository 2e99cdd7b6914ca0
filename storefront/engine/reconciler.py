"""Variant reconciliation.

Maps a freshly generated combination list onto the previous variant list
so that operator-entered price, stock and SKU survive regeneration.

Matching is by partial key: a previous variant is a candidate for a
combination when they share at least one attribute and agree on every
shared attribute. A variant keyed only on Color therefore still matches
Color+Size combinations with the same color after Size is added.

Each previous variant lends its identity to one combination only. When a
later combination matches a variant whose identity is already taken, it
inherits the price, stock and SKU but receives a fresh id. The shared
SKU then shows up as a duplicate-SKU warning on the session.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from storefront.domain.entities import Variant
from storefront.domain.value_objects import DEFAULT_SKU_PLACEHOLDER, Combination, Money
from storefront.engine.identity import VariantIdAllocator

logger = structlog.get_logger()


class MatchStrategy(str, Enum):
    """How to choose among several matching previous variants."""

    FIRST_MATCH = "first_match"
    HIGHEST_OVERLAP = "highest_overlap"


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation pass.

    Attributes:
        variants: New variant list, one per combination, same order.
        preserved_ids: Ids carried over from previous variants.
        minted_ids: Ids minted in this pass.
        dropped_ids: Previous ids no longer present.
    """

    variants: list[Variant] = field(default_factory=list)
    preserved_ids: list[str] = field(default_factory=list)
    minted_ids: list[str] = field(default_factory=list)
    dropped_ids: list[str] = field(default_factory=list)


def variant_name(combination: Combination, attribute_names: Mapping[str, str]) -> str:
    """Derive the display name of a combination.

    Args:
        combination: Combination to name.
        attribute_names: Attribute names keyed by attribute id.

    Returns:
        Name such as "Color: Red, Size: S".
    """
    return ", ".join(
        f"{attribute_names.get(attribute_id, attribute_id)}: {value}"
        for attribute_id, value in combination.items()
    )


def default_sku(sku_prefix: str | None, position: int) -> str:
    """Build the default SKU for a new variant.

    Args:
        sku_prefix: Product SKU; the placeholder is used when blank.
        position: 1-based index of the combination.

    Returns:
        SKU such as "TSHIRT-3".
    """
    prefix = (sku_prefix or "").strip() or DEFAULT_SKU_PLACEHOLDER
    return f"{prefix}-{position}"


class Reconciler:
    """Rebuilds a variant list from combinations, preserving prior data.

    Example usage:
        reconciler = Reconciler()
        result = reconciler.run(
            combinations,
            previous,
            attribute_names=catalog.attribute_names(),
            base_price=Money(amount_cents=2500),
            sku_prefix="TSHIRT",
        )
    """

    def __init__(self, strategy: MatchStrategy = MatchStrategy.FIRST_MATCH) -> None:
        """Initialize reconciler.

        Args:
            strategy: Candidate selection strategy.
        """
        self.strategy = strategy

    def _matches(
        self, combination: Combination, previous: Sequence[Variant]
    ) -> list[Variant]:
        """Get previous variants that agree with a combination.

        Ordered by preference: previous-list order for FIRST_MATCH, most
        shared attributes first for HIGHEST_OVERLAP (stable on ties).
        """
        matches = [v for v in previous if combination.agrees_with(v.attributes)]
        if self.strategy == MatchStrategy.HIGHEST_OVERLAP:
            matches.sort(
                key=lambda v: len(combination.shared_keys(v.attributes)),
                reverse=True,
            )
        return matches

    def run(
        self,
        combinations: Sequence[Combination],
        previous: Sequence[Variant],
        *,
        attribute_names: Mapping[str, str],
        base_price: Money,
        sku_prefix: str | None = None,
        allocator: VariantIdAllocator | None = None,
    ) -> ReconciliationResult:
        """Reconcile combinations against the previous variant list.

        Args:
            combinations: Freshly generated combinations.
            previous: Variant list from the previous pass, or loaded from
                the store. Not modified.
            attribute_names: Attribute names keyed by id, for variant names.
            base_price: Price for new variants.
            sku_prefix: Product SKU used for default variant SKUs.
            allocator: Session allocator; one seeded from ``previous`` is
                created when omitted.

        Returns:
            Reconciliation result.
        """
        if allocator is None:
            allocator = VariantIdAllocator.seeded_from(v.id for v in previous)
        else:
            allocator.reserve(v.id for v in previous)

        result = ReconciliationResult()
        claimed: set[str] = set()

        for position, combination in enumerate(combinations, start=1):
            name = variant_name(combination, attribute_names)
            matches = self._matches(combination, previous)
            unclaimed = next((v for v in matches if v.id not in claimed), None)

            if unclaimed is not None:
                claimed.add(unclaimed.id)
                result.preserved_ids.append(unclaimed.id)
                result.variants.append(
                    Variant(
                        id=unclaimed.id,
                        name=name,
                        attributes=combination,
                        price=unclaimed.price,
                        stock_quantity=unclaimed.stock_quantity,
                        sku=unclaimed.sku,
                    )
                )
                continue

            new_id = allocator.mint()
            claimed.add(new_id)
            result.minted_ids.append(new_id)

            if matches:
                # Identity already taken by an earlier combination
                source = matches[0]
                logger.debug(
                    "Sharing variant data with new combination",
                    source_id=source.id,
                    variant_id=new_id,
                    name=name,
                )
                price, stock_quantity, sku = source.price, source.stock_quantity, source.sku
            else:
                price, stock_quantity = base_price, 0
                sku = default_sku(sku_prefix, position)

            result.variants.append(
                Variant(
                    id=new_id,
                    name=name,
                    attributes=combination,
                    price=price,
                    stock_quantity=stock_quantity,
                    sku=sku,
                )
            )

        result.dropped_ids = [v.id for v in previous if v.id not in claimed]
        return result


def reconcile(
    combinations: Sequence[Combination],
    previous: Sequence[Variant],
    *,
    attribute_names: Mapping[str, str],
    base_price: Money,
    sku_prefix: str | None = None,
    allocator: VariantIdAllocator | None = None,
    strategy: MatchStrategy = MatchStrategy.FIRST_MATCH,
) -> list[Variant]:
    """Reconcile combinations against the previous variant list.

    See Reconciler.run for the arguments.

    Returns:
        New variant list, one per combination, in combination order.
    """
    return (
        Reconciler(strategy)
        .run(
            combinations,
            previous,
            attribute_names=attribute_names,
            base_price=base_price,
            sku_prefix=sku_prefix,
            allocator=allocator,
        )
        .variants
    )
