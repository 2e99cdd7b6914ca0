"""Variant generation and reconciliation engine.

Pure, synchronous building blocks used by the product-editing workflow:

- ``classify(selection, catalog)`` splits variant and specification attributes
- ``generate(variant_attributes, selection, catalog)`` builds combinations
- ``reconcile(combinations, previous, ...)`` preserves operator data
- ``project(variants, catalog)`` builds the save-time write sets

``VariantEditSession`` chains them after every selection change.
"""

from storefront.engine.classifier import Classification, classify
from storefront.engine.generator import combination_count, exceeds_threshold, generate
from storefront.engine.identity import VariantIdAllocator
from storefront.engine.projection import (
    ProductAttributeAssignment,
    Projection,
    VariantAttributeLink,
    VariantRow,
    find_duplicate_skus,
    project,
    project_product_assignments,
)
from storefront.engine.reconciler import (
    MatchStrategy,
    ReconciliationResult,
    Reconciler,
    reconcile,
    variant_name,
)
from storefront.engine.session import SaveSnapshot, VariantEditSession
from storefront.engine.snapshot import CatalogSnapshot

__all__ = [
    # Catalog view
    "CatalogSnapshot",
    # Classifier
    "Classification",
    "classify",
    # Generator
    "combination_count",
    "exceeds_threshold",
    "generate",
    # Reconciler
    "MatchStrategy",
    "ReconciliationResult",
    "Reconciler",
    "VariantIdAllocator",
    "reconcile",
    "variant_name",
    # Projection
    "ProductAttributeAssignment",
    "Projection",
    "VariantAttributeLink",
    "VariantRow",
    "find_duplicate_skus",
    "project",
    "project_product_assignments",
    # Session
    "SaveSnapshot",
    "VariantEditSession",
]
