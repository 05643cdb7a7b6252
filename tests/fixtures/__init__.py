"""
Shared test fixtures for the entityhydrator library.

This module provides a seeded commerce catalog (products, variants, orders,
channels) plus factories for the request context and tax rates.

Usage:
    from tests.fixtures import (
        LAPTOP_ID,
        build_context,
        seed_catalog,
    )
"""

from tests.fixtures.catalog import (
    CAMERA_ID,
    CHANNEL_ID,
    EUR_PRICE_T_1,
    FEATURED_ASSET_NAME,
    LAPTOP_ID,
    LAPTOP_VARIANTS,
    ORDER_ID,
    PROMOTION_SOURCE,
    REDUCED_TAX_CATEGORY_ID,
    STANDARD_TAX_CATEGORY_ID,
    TAX_ZONE_ID,
    THUMB_ASSET_NAME,
    build_camera,
    build_channel,
    build_context,
    build_laptop,
    build_order,
    build_tax_rates,
    seed_catalog,
)

__all__ = [
    # Identifiers
    "LAPTOP_ID",
    "CAMERA_ID",
    "ORDER_ID",
    "CHANNEL_ID",
    "TAX_ZONE_ID",
    "STANDARD_TAX_CATEGORY_ID",
    "REDUCED_TAX_CATEGORY_ID",
    # Expected values
    "FEATURED_ASSET_NAME",
    "THUMB_ASSET_NAME",
    "LAPTOP_VARIANTS",
    "EUR_PRICE_T_1",
    "PROMOTION_SOURCE",
    # Builders
    "build_laptop",
    "build_camera",
    "build_order",
    "build_channel",
    "build_context",
    "build_tax_rates",
    "seed_catalog",
]
