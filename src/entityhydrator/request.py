"""
What a hydration call should load and compute.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from entityhydrator.types import RelationPath


@dataclass(frozen=True)
class HydrationRequest:
    """
    What to hydrate.

    Attributes:
        relations: Dot-separated relation paths, by field name or camelCase
            alias (``"lines.productVariant"``). Paths may overlap.
        apply_product_variant_prices: Recompute ``price_with_tax`` on every
            product variant reached

    Example:
        >>> HydrationRequest(
        ...     relations=("lines.product_variant",),
        ...     apply_product_variant_prices=True,
        ... )
    """

    relations: tuple[RelationPath, ...] = ()
    apply_product_variant_prices: bool = False

    def __post_init__(self) -> None:
        """Normalize relations to a tuple."""
        if isinstance(self.relations, str):
            raise TypeError(
                "relations must be a sequence of paths, not a single string. "
                f"Use relations=({self.relations!r},) instead."
            )
        object.__setattr__(self, "relations", tuple(self.relations))

    @classmethod
    def of(cls, request: HydrationRequest | Sequence[RelationPath]) -> HydrationRequest:
        """Accept either a request or a plain sequence of relation paths."""
        if isinstance(request, HydrationRequest):
            return request
        return cls(relations=request)  # type: ignore[arg-type]
