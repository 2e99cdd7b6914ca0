"""Attribute catalog and variant persistence.

Provides in-memory and database-backed implementations of the attribute
catalog and variant store used by editing sessions.
"""

from storefront.catalog.memory import (
    InMemoryAttributeCatalog,
    InMemoryVariantStore,
    StoredProduct,
    row_to_variant,
    seed_demo_catalog,
)
from storefront.catalog.ports import AttributeCatalog, VariantStore, load_snapshot

__all__ = [
    # Ports
    "AttributeCatalog",
    "VariantStore",
    "load_snapshot",
    # In-memory
    "InMemoryAttributeCatalog",
    "InMemoryVariantStore",
    "StoredProduct",
    "row_to_variant",
    "seed_demo_catalog",
]
