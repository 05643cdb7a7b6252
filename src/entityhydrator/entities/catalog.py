"""
Commerce entity types.

These are the entity shapes the hydrator is exercised with: a catalog
(products, variants, options, assets, facet values), orders with lines and
payments, and channels with custom-field relations. Relation fields default
to ``None`` (not loaded); scalars hold the data a projection already carries.

Prices are integer amounts in minor units. ``ProductVariant.price`` is
tax-exclusive; ``price_with_tax`` is derived by the price applier and stays
``None`` until a tax rate can be resolved.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from entityhydrator.entities.base import Embedded, Entity, TranslatableEntity, Translation
from entityhydrator.types import EntityId

# =============================================================================
# Assets
# =============================================================================


class Asset(Entity):
    name: str
    preview: str | None = None
    mime_type: str | None = None
    width: int = 0
    height: int = 0


# =============================================================================
# Facets
# =============================================================================


class FacetValueTranslation(Translation):
    name: str


class FacetValue(TranslatableEntity):
    code: str
    name: str | None = None
    facet_id: EntityId | None = None
    translations: list[FacetValueTranslation] | None = None


# =============================================================================
# Products
# =============================================================================


class ProductOptionTranslation(Translation):
    name: str


class ProductOption(TranslatableEntity):
    code: str
    name: str | None = None
    group_id: EntityId | None = None
    translations: list[ProductOptionTranslation] | None = None


class ProductTranslation(Translation):
    name: str
    slug: str
    description: str = ""


class Product(TranslatableEntity):
    """Catalog product. Translatable; owns variants and asset joins."""

    name: str | None = None
    slug: str | None = None
    description: str | None = None
    enabled: bool = True
    featured_asset_id: EntityId | None = None

    featured_asset: Asset | None = None
    assets: list[ProductAsset] | None = None
    variants: list[ProductVariant] | None = None
    facet_values: list[FacetValue] | None = None
    translations: list[ProductTranslation] | None = None


class ProductAsset(Entity):
    """Ordered join between a product and an asset."""

    asset_id: EntityId
    product_id: EntityId
    position: int = 0

    asset: Asset | None = None
    product: Product | None = None


class StockLevel(Entity):
    stock_location_id: EntityId
    product_variant_id: EntityId | None = None
    stock_on_hand: int = 0
    stock_allocated: int = 0


class ProductVariantPrice(Entity):
    """Price of a variant in one channel and currency."""

    channel_id: EntityId
    currency_code: str
    price: int
    variant_id: EntityId | None = None


class ProductVariantTranslation(Translation):
    name: str


class ProductVariant(TranslatableEntity):
    """
    Purchasable variant of a product.

    ``price_with_tax`` is derived: it is populated by the price applier from
    ``price`` and the tax rate for ``tax_category_id`` in the active zone.
    """

    __priced__: ClassVar[bool] = True
    __derived_fields__: ClassVar[tuple[str, ...]] = ("price_with_tax",)

    sku: str
    name: str | None = None
    enabled: bool = True
    price: int | None = None
    price_with_tax: int | None = None
    currency_code: str | None = None
    tax_category_id: EntityId | None = None
    product_id: EntityId | None = None

    product: Product | None = None
    featured_asset: Asset | None = None
    options: list[ProductOption] | None = None
    facet_values: list[FacetValue] | None = None
    stock_levels: list[StockLevel] | None = None
    product_variant_prices: list[ProductVariantPrice] | None = None
    translations: list[ProductVariantTranslation] | None = None


# =============================================================================
# Orders
# =============================================================================


class Adjustment(BaseModel):
    """Price adjustment applied to an order line (e.g. a promotion)."""

    adjustment_source: str
    type: str
    description: str
    amount: int
    amount_with_tax: int
    data: dict[str, Any] = Field(default_factory=dict)


class OrderLine(Entity):
    quantity: int
    product_variant_id: EntityId | None = None
    adjustments: list[Adjustment] = Field(default_factory=list)

    product_variant: ProductVariant | None = None


class Payment(Entity):
    method: str
    amount: int
    state: str = "Created"


class Order(Entity):
    """
    Customer order.

    ``discounts`` is computed from the line adjustments rather than stored,
    so it survives hydration exactly as long as the line instances do.
    """

    __auto_priced_paths__: ClassVar[tuple[str, ...]] = ("lines.product_variant",)

    code: str
    state: str = "AddingItems"
    currency_code: str = "USD"

    lines: list[OrderLine] | None = None
    payments: list[Payment] | None = None

    @property
    def discounts(self) -> list[dict[str, Any]]:
        """Promotion adjustments aggregated across lines, one entry per source."""
        grouped: dict[str, dict[str, Any]] = {}
        for line in self.lines or []:
            for adjustment in line.adjustments:
                entry = grouped.get(adjustment.adjustment_source)
                if entry is None:
                    entry = {
                        "adjustment_source": adjustment.adjustment_source,
                        "type": adjustment.type,
                        "description": adjustment.description,
                        "amount": 0,
                        "amount_with_tax": 0,
                        "data": {"item_distribution": []},
                    }
                    grouped[adjustment.adjustment_source] = entry
                entry["amount"] += adjustment.amount
                entry["amount_with_tax"] += adjustment.amount_with_tax
                entry["data"]["item_distribution"].append(adjustment.amount)
        return list(grouped.values())


# =============================================================================
# Channels
# =============================================================================


class ChannelCustomFields(Embedded):
    thumb_id: EntityId | None = None
    thumb: Asset | None = None


class Channel(Entity):
    code: str
    default_language_code: str = "en"
    currency_code: str = "USD"
    default_tax_zone_id: EntityId | None = None
    custom_fields: ChannelCustomFields | None = Field(default_factory=ChannelCustomFields)


for _model in (
    Asset,
    FacetValueTranslation,
    FacetValue,
    ProductOptionTranslation,
    ProductOption,
    ProductTranslation,
    Product,
    ProductAsset,
    StockLevel,
    ProductVariantPrice,
    ProductVariantTranslation,
    ProductVariant,
    OrderLine,
    Payment,
    Order,
    ChannelCustomFields,
    Channel,
):
    _model.model_rebuild()
