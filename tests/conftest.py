"""
Shared pytest fixtures for the entityhydrator library tests.

This module provides:
- Store fixtures (empty_store, store seeded with the test catalog)
- Context fixtures (ctx in English, ctx_de in German)
- Hydrator fixtures (hydrator, traced_hydrator with a MockTracer)

All stores and hydrators are created with tracing disabled unless a test
asks for a MockTracer explicitly.
"""

from __future__ import annotations

import pytest

from entityhydrator.config import HydratorConfig
from entityhydrator.context import RequestContext
from entityhydrator.hydrator import EntityHydrator
from entityhydrator.loaders import InMemoryEntityStore
from entityhydrator.observability import MockTracer
from entityhydrator.pricing import StaticTaxRateProvider
from tests.fixtures import build_context, build_tax_rates, seed_catalog

# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def empty_store() -> InMemoryEntityStore:
    """Provide a fresh, empty in-memory store."""
    return InMemoryEntityStore(enable_tracing=False)


@pytest.fixture
def store(empty_store: InMemoryEntityStore) -> InMemoryEntityStore:
    """Provide an in-memory store seeded with the test catalog."""
    return seed_catalog(empty_store)


# ============================================================================
# Context Fixtures
# ============================================================================


@pytest.fixture
def ctx() -> RequestContext:
    """English request context for channel T_1."""
    return build_context("en")


@pytest.fixture
def ctx_de() -> RequestContext:
    """German request context for channel T_1."""
    return build_context("de")


@pytest.fixture
def tax_rates() -> StaticTaxRateProvider:
    """20% standard rate for the test tax zone."""
    return build_tax_rates()


# ============================================================================
# Hydrator Fixtures
# ============================================================================


@pytest.fixture
def mock_tracer() -> MockTracer:
    """Provide a tracer that records spans."""
    return MockTracer()


@pytest.fixture
def hydrator(store: InMemoryEntityStore, tax_rates: StaticTaxRateProvider) -> EntityHydrator:
    """Hydrator over the seeded store, tracing disabled."""
    return EntityHydrator(store, tax_rates=tax_rates, config=HydratorConfig(enable_tracing=False))


@pytest.fixture
def traced_hydrator(
    store: InMemoryEntityStore,
    tax_rates: StaticTaxRateProvider,
    mock_tracer: MockTracer,
) -> EntityHydrator:
    """Hydrator over the seeded store that records spans in mock_tracer."""
    return EntityHydrator(store, tax_rates=tax_rates, tracer=mock_tracer)
