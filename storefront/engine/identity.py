"""Variant identity allocation.

Minted variant ids have the form ``variant-<n>``. The allocator is scoped
to an edit session and only moves forward, so an id is never handed out
twice in a session, even after the variant that held it was pruned.
"""

import re
from collections.abc import Iterable

ID_PREFIX = "variant-"
_ID_PATTERN = re.compile(rf"^{re.escape(ID_PREFIX)}(\d+)$")


def id_suffix(variant_id: str) -> int | None:
    """Extract the numeric suffix of a minted variant id.

    Args:
        variant_id: Variant identifier.

    Returns:
        The suffix, or None for ids that were not minted here
        (e.g. database UUIDs).
    """
    match = _ID_PATTERN.match(variant_id)
    return int(match.group(1)) if match else None


class VariantIdAllocator:
    """Session-scoped counter that mints unique variant ids.

    Seeded from the largest suffix among existing ids, so a mint never
    needs to scan the variant list.

    Example usage:
        allocator = VariantIdAllocator.seeded_from(["variant-3", "abc"])
        allocator.mint()  # "variant-4"
    """

    def __init__(self, next_suffix: int = 1) -> None:
        """Initialize allocator.

        Args:
            next_suffix: Suffix of the next id to mint.
        """
        if next_suffix < 1:
            raise ValueError(f"next_suffix must be positive, got {next_suffix}")
        self._next = next_suffix

    @classmethod
    def seeded_from(cls, existing_ids: Iterable[str]) -> "VariantIdAllocator":
        """Create an allocator that skips every existing id.

        Args:
            existing_ids: Ids already in use.

        Returns:
            Allocator positioned after the largest existing suffix.
        """
        allocator = cls()
        allocator.reserve(existing_ids)
        return allocator

    @property
    def next_suffix(self) -> int:
        """Get the suffix the next mint will use."""
        return self._next

    def reserve(self, existing_ids: Iterable[str]) -> None:
        """Advance past ids that are already in use.

        Args:
            existing_ids: Ids already in use.
        """
        for variant_id in existing_ids:
            suffix = id_suffix(variant_id)
            if suffix is not None and suffix >= self._next:
                self._next = suffix + 1

    def mint(self) -> str:
        """Mint a new variant id.

        Returns:
            Unused variant id.
        """
        variant_id = f"{ID_PREFIX}{self._next}"
        self._next += 1
        return variant_id
