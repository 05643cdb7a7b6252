"""
Price application for product-variant shaped entities.

``price_with_tax`` is not a stored relation: it depends on the active channel,
currency and tax zone. The price applier recomputes it for every priced
entity reached by a hydration request.

For each priced entity:
1. If ``product_variant_prices`` is loaded, the price for the active channel
   (and currency, when one matches) becomes ``price``; a variant with no
   price in the channel gets ``price = None``.
2. The tax rate for the entity's tax category in the active zone is looked
   up; ``price_with_tax = round_half_up(price * (1 + rate))``.

When no price or rate can be resolved ``price_with_tax`` is set to ``None``,
replacing any value computed under an earlier context; it is never filled
with a placeholder.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from entityhydrator.context import RequestContext
from entityhydrator.entities.base import Entity, GraphModel
from entityhydrator.paths import RelationNode, iter_reached
from entityhydrator.protocols import TaxRateProvider
from entityhydrator.types import EntityId

logger = logging.getLogger(__name__)


def apply_tax(price: int, rate: Decimal) -> int:
    """
    Apply a tax rate to a price in minor units, rounding half up.

    Example:
        >>> apply_tax(129900, Decimal("0.2"))
        155880
        >>> apply_tax(5, Decimal("0.1"))  # 5.5 rounds up
        6
    """
    gross = Decimal(price) * (Decimal(1) + rate)
    return int(gross.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class StaticTaxRateProvider:
    """
    TaxRateProvider backed by a fixed mapping.

    Example:
        >>> rates = StaticTaxRateProvider({(1, 1): Decimal("0.2")})
        >>> rates.get_rate(1, 1)
        Decimal('0.2')
        >>> rates.get_rate(2, 1) is None
        True
    """

    def __init__(
        self,
        rates: Mapping[tuple[EntityId, EntityId], Decimal | str | int] | None = None,
    ) -> None:
        self._rates: dict[tuple[EntityId, EntityId], Decimal] = {}
        for (zone_id, tax_category_id), rate in (rates or {}).items():
            self.set_rate(zone_id, tax_category_id, rate)

    def set_rate(self, zone_id: EntityId, tax_category_id: EntityId, rate: Decimal | str | int) -> None:
        """
        Configure the rate for a zone and tax category.

        Raises:
            ValueError: If the rate is negative
        """
        value = Decimal(rate)
        if value < 0:
            raise ValueError(f"Tax rate must not be negative, got {value}")
        self._rates[(zone_id, tax_category_id)] = value

    def get_rate(self, zone_id: EntityId, tax_category_id: EntityId) -> Decimal | None:
        return self._rates.get((zone_id, tax_category_id))


class PriceApplier:
    """
    Recomputes derived prices on priced entities reached by a request.

    A priced entity is an Entity subclass with ``__priced__ = True``
    (ProductVariant). The tax rate provider is optional; without one no
    rate is ever resolvable and ``price_with_tax`` is left unset.
    """

    def __init__(self, tax_rates: TaxRateProvider | None = None) -> None:
        self._tax_rates = tax_rates

    def apply(self, ctx: RequestContext, root: GraphModel, tree: RelationNode) -> int:
        """
        Apply prices to every priced entity along ``tree`` (root included).

        Returns:
            Number of entities whose ``price_with_tax`` was set
        """
        priced = 0
        for model in iter_reached(root, tree):
            if isinstance(model, Entity) and type(model).__priced__:
                if self.apply_to(ctx, model):
                    priced += 1
        return priced

    def apply_to(self, ctx: RequestContext, variant: Entity) -> bool:
        """
        Apply channel price and tax to a single priced entity.

        ``price_with_tax`` always reflects ``ctx``: when no price or rate
        resolves for it, a value left by an earlier context is cleared.

        Returns:
            True if ``price_with_tax`` was set
        """
        self._select_channel_price(ctx, variant)

        price = getattr(variant, "price", None)
        rate = self._resolve_rate(ctx, variant)
        if price is None or rate is None:
            logger.debug(
                "Clearing price_with_tax for %s (price=%s, rate=%s)",
                variant,
                price,
                rate,
                extra={
                    "entity_type": type(variant).__name__,
                    "entity_id": variant.id,
                    "tax_zone_id": ctx.active_tax_zone_id,
                },
            )
            variant.price_with_tax = None  # type: ignore[attr-defined]
            return False

        variant.price_with_tax = apply_tax(price, rate)  # type: ignore[attr-defined]
        return True

    def _select_channel_price(self, ctx: RequestContext, variant: Entity) -> None:
        prices = getattr(variant, "product_variant_prices", None)
        if prices is None:
            return
        in_channel = [p for p in prices if p.channel_id == ctx.channel.id]
        if not in_channel:
            # Not sold in this channel
            variant.price = None  # type: ignore[attr-defined]
            return
        currency = ctx.active_currency_code
        selected = next((p for p in in_channel if p.currency_code == currency), in_channel[0])
        variant.price = selected.price  # type: ignore[attr-defined]
        variant.currency_code = selected.currency_code  # type: ignore[attr-defined]

    def _resolve_rate(self, ctx: RequestContext, variant: Entity) -> Decimal | None:
        if self._tax_rates is None:
            return None
        zone_id = ctx.active_tax_zone_id
        tax_category_id = getattr(variant, "tax_category_id", None)
        if zone_id is None or tax_category_id is None:
            return None
        return self._tax_rates.get_rate(zone_id, tax_category_id)
