"""Unit tests for InMemoryEntityStore."""

import pytest

from entityhydrator.entities.catalog import Channel, Order, Product, ProductVariant
from entityhydrator.exceptions import InvalidRelationPathError
from entityhydrator.loaders import InMemoryEntityStore, detached_copy
from entityhydrator.observability import MockTracer
from tests.fixtures import CAMERA_ID, CHANNEL_ID, LAPTOP_ID, ORDER_ID


class DisabledRecordingTracer(MockTracer):
    """Records spans but reports tracing as disabled."""

    @property
    def enabled(self) -> bool:
        return False


class TestLoadWithRelations:
    """Tests for load_with_relations()."""

    @pytest.mark.asyncio
    async def test_loads_scalars_only_by_default(self, store: InMemoryEntityStore) -> None:
        product = await store.load_with_relations(Product, LAPTOP_ID, [])

        assert product is not None
        assert product.id == LAPTOP_ID
        assert product.featured_asset_id == "T_1"
        assert product.featured_asset is None
        assert product.variants is None
        assert product.loaded_relations == frozenset()

    @pytest.mark.asyncio
    async def test_loads_requested_relations(self, store: InMemoryEntityStore) -> None:
        product = await store.load_with_relations(Product, LAPTOP_ID, ["variants.options"])

        assert [v.id for v in product.variants] == ["T_1", "T_2", "T_3", "T_4"]
        assert [o.id for o in product.variants[0].options] == ["T_1", "T_3"]
        assert product.is_loaded("variants")
        assert product.variants[0].is_loaded("options")
        assert product.variants[0].product is None
        assert product.facet_values is None

    @pytest.mark.asyncio
    async def test_accepts_aliases(self, store: InMemoryEntityStore) -> None:
        product = await store.load_with_relations(Product, LAPTOP_ID, ["featuredAsset"])
        assert product.featured_asset.id == "T_1"

    @pytest.mark.asyncio
    async def test_empty_collection_is_marked_loaded(self, store: InMemoryEntityStore) -> None:
        camera = await store.load_with_relations(Product, CAMERA_ID, ["assets"])

        assert camera.assets == []
        assert camera.is_loaded("assets")

    @pytest.mark.asyncio
    async def test_null_single_relation_is_marked_loaded(
        self, store: InMemoryEntityStore
    ) -> None:
        camera = await store.load_with_relations(Product, CAMERA_ID, ["featured_asset"])

        assert camera.featured_asset is None
        assert camera.is_loaded("featured_asset")

    @pytest.mark.asyncio
    async def test_embedded_objects_are_copied(self, store: InMemoryEntityStore) -> None:
        channel = await store.load_with_relations(Channel, CHANNEL_ID, [])

        assert channel.custom_fields is not None
        assert channel.custom_fields.thumb_id == "T_2"
        assert channel.custom_fields.thumb is None
        assert channel.custom_fields is not store.get(Channel, CHANNEL_ID).custom_fields

    @pytest.mark.asyncio
    async def test_returns_independent_copies(self, store: InMemoryEntityStore) -> None:
        order = await store.load_with_relations(Order, ORDER_ID, ["lines"])

        order.code = "changed"
        order.lines[0].quantity = 5
        order.lines[0].adjustments.clear()

        canonical = store.get(Order, ORDER_ID)
        assert canonical.code == "ORDER-T1"
        assert canonical.lines[0].quantity == 1
        assert len(canonical.lines[0].adjustments) == 1

    @pytest.mark.asyncio
    async def test_missing_entity_returns_none(self, store: InMemoryEntityStore) -> None:
        assert await store.load_with_relations(Product, "T_404", ["variants"]) is None

    @pytest.mark.asyncio
    async def test_invalid_path_raises(self, store: InMemoryEntityStore) -> None:
        with pytest.raises(InvalidRelationPathError):
            await store.load_with_relations(Product, LAPTOP_ID, ["variants.bogus"])

    @pytest.mark.asyncio
    async def test_records_calls(self, store: InMemoryEntityStore) -> None:
        await store.load_with_relations(Product, LAPTOP_ID, ["assets", "variants"])

        assert store.load_count == 1
        assert store.load_calls == [("Product", LAPTOP_ID, ("assets", "variants"))]

    @pytest.mark.asyncio
    async def test_configured_failure_is_raised(self, store: InMemoryEntityStore) -> None:
        store.fail_on(Product, ConnectionError("database unavailable"))

        with pytest.raises(ConnectionError, match="database unavailable"):
            await store.load_with_relations(Product, LAPTOP_ID, [])
        assert store.load_count == 1

    @pytest.mark.asyncio
    async def test_creates_span(self) -> None:
        tracer = MockTracer()
        store = InMemoryEntityStore(tracer=tracer)
        store.add(Product(id=1))

        await store.load_with_relations(Product, 1, [])

        assert tracer.span_names == ["entityhydrator.store.load"]

    @pytest.mark.asyncio
    async def test_span_attributes_skipped_when_tracing_disabled(self) -> None:
        tracer = DisabledRecordingTracer()
        store = InMemoryEntityStore(tracer=tracer)
        store.add(Product(id=1))

        await store.load_with_relations(Product, 1, [])

        assert tracer.spans == [("entityhydrator.store.load", None)]


class TestStoreManagement:
    """Tests for add(), get(), remove() and clear()."""

    def test_add_registers_reachable_entities(self, store: InMemoryEntityStore) -> None:
        variant = store.get(ProductVariant, "T_1")

        assert variant is not None
        assert variant.product is store.get(Product, LAPTOP_ID)

    def test_add_requires_primary_key(self, empty_store: InMemoryEntityStore) -> None:
        with pytest.raises(ValueError):
            empty_store.add(Product())

    def test_first_instance_in_one_call_wins(self, empty_store: InMemoryEntityStore) -> None:
        full = Product(id=1, name="full")
        stub = Product(id=1)
        empty_store.add(full, ProductVariant(id=1, sku="A", product=stub))

        assert empty_store.get(Product, 1) is full

    def test_later_call_replaces(self, empty_store: InMemoryEntityStore) -> None:
        empty_store.add(Product(id=1, name="old"))
        empty_store.add(Product(id=1, name="new"))

        assert empty_store.get(Product, 1).name == "new"

    @pytest.mark.asyncio
    async def test_remove(self, store: InMemoryEntityStore) -> None:
        assert store.remove(Product, LAPTOP_ID) is True
        assert store.remove(Product, LAPTOP_ID) is False
        assert await store.load_with_relations(Product, LAPTOP_ID, []) is None

    def test_clear(self, store: InMemoryEntityStore) -> None:
        store.fail_on(Product, RuntimeError("boom"))
        store.clear()

        assert store.get(Product, LAPTOP_ID) is None
        assert store.load_count == 0


class TestDetachedCopy:
    """Tests for detached_copy()."""

    def test_relations_are_unloaded(self) -> None:
        product = Product(id=1, name="Laptop", variants=[ProductVariant(id=1, sku="A")])
        product.mark_loaded("variants")

        copy = detached_copy(product)

        assert copy.name == "Laptop"
        assert copy.variants is None
        assert copy.loaded_relations == frozenset()
        assert product.is_loaded("variants")
