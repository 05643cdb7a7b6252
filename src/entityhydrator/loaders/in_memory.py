"""
In-memory implementation of the data-access collaborator.

Provides a simple entity store for testing and development. The store keeps
canonical entity graphs and answers ``load_with_relations`` the way an ORM
would: with a freshly built copy containing scalar fields plus exactly the
requested relations, each marked as loaded.
"""

import asyncio
import copy
import logging
from collections.abc import Sequence
from typing import Any

from entityhydrator.entities.base import Entity, GraphModel
from entityhydrator.entities.metadata import EntityMetadata, RelationKind
from entityhydrator.observability import Tracer, create_tracer
from entityhydrator.observability.attributes import (
    ATTR_ENTITY_ID,
    ATTR_ENTITY_TYPE,
    ATTR_FETCH_PATH_COUNT,
)
from entityhydrator.paths import RelationNode, bind_relation_tree, parse_relation_paths
from entityhydrator.protocols import TEntity
from entityhydrator.types import EntityId

logger = logging.getLogger(__name__)

_Key = tuple[type[Entity], EntityId]


def detached_copy(model: GraphModel) -> GraphModel:
    """
    Copy a model's scalar fields, leaving every relation unloaded.

    Embedded value objects are copied the same way so that the copy never
    shares mutable state with the source.
    """
    metadata = EntityMetadata.for_model(type(model))
    update: dict[str, Any] = {
        name: copy.deepcopy(getattr(model, name)) for name in metadata.scalar_fields
    }
    for name, info in metadata.relations.items():
        if info.kind is RelationKind.EMBEDDED:
            value = getattr(model, name)
            update[name] = None if value is None else detached_copy(value)
        else:
            update[name] = None
    detached = model.model_copy(update=update)
    detached.reset_loaded()
    return detached


class InMemoryEntityStore:
    """
    In-memory implementation of EntityLoader for tests.

    Entities are keyed by (type, primary key). Adding an entity also
    registers every entity reachable through its relations, so a seeded
    graph can be loaded from any of its members.

    This implementation is safe for concurrent use via asyncio.Lock.

    Attributes:
        load_calls: Every ``load_with_relations`` call as
            (type name, primary key, relation paths)

    Example:
        >>> store = InMemoryEntityStore(enable_tracing=False)
        >>> store.add(Product(id=1, variants=[ProductVariant(id=1, sku="A")]))
        >>> product = await store.load_with_relations(Product, 1, ["variants"])
        >>> product.is_loaded("variants")
        True

    Note:
        - Canonical entities are never handed out; every load returns copies
        - Use ``clear()`` for test teardown
    """

    def __init__(
        self,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            tracer: Optional tracer (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._entities: dict[_Key, Entity] = {}
        self._failures: dict[type[Entity], BaseException] = {}
        self._lock = asyncio.Lock()
        self.load_calls: list[tuple[str, EntityId, tuple[str, ...]]] = []

    def add(self, *entities: Entity) -> None:
        """
        Register entities and everything reachable from them.

        Within one call the first instance seen for a (type, primary key)
        wins; it replaces whatever an earlier call registered.

        Raises:
            ValueError: If an entity has no primary key
        """
        seen: set[int] = set()
        registered: set[_Key] = set()
        for entity in entities:
            self._register(entity, seen, registered)

    def _register(self, model: GraphModel, seen: set[int], registered: set[_Key]) -> None:
        if id(model) in seen:
            return
        seen.add(id(model))

        if isinstance(model, Entity):
            if model.id is None:
                raise ValueError(f"Cannot store {type(model).__name__} without a primary key")
            key = (type(model), model.id)
            if key not in registered:
                registered.add(key)
                self._entities[key] = model

        for name in EntityMetadata.for_model(type(model)).relations:
            value = getattr(model, name)
            if value is None:
                continue
            if isinstance(value, list):
                for member in value:
                    self._register(member, seen, registered)
            else:
                self._register(value, seen, registered)

    def get(self, entity_type: type[TEntity], primary_key: EntityId) -> TEntity | None:
        """Get the canonical stored entity (for test assertions)."""
        return self._entities.get((entity_type, primary_key))  # type: ignore[return-value]

    def remove(self, entity_type: type[Entity], primary_key: EntityId) -> bool:
        """
        Remove an entity, as if it were deleted concurrently.

        Returns:
            True if removed, False if not found
        """
        return self._entities.pop((entity_type, primary_key), None) is not None

    def fail_on(self, entity_type: type[Entity], error: BaseException) -> None:
        """Make every load of ``entity_type`` raise ``error``."""
        self._failures[entity_type] = error

    def clear(self) -> None:
        """Remove all entities, failures and recorded calls."""
        self._entities.clear()
        self._failures.clear()
        self.load_calls.clear()

    @property
    def load_count(self) -> int:
        return len(self.load_calls)

    async def load_with_relations(
        self,
        entity_type: type[TEntity],
        primary_key: EntityId,
        relations: Sequence[str],
    ) -> TEntity | None:
        """
        Load a fresh copy of an entity with the given relations populated.

        Raises:
            InvalidRelationPathError: If a path does not match the entity type
        """
        attributes: dict[str, Any] | None = None
        if self._enable_tracing:
            attributes = {
                ATTR_ENTITY_TYPE: entity_type.__name__,
                ATTR_ENTITY_ID: str(primary_key),
                ATTR_FETCH_PATH_COUNT: len(relations),
            }

        with self._tracer.span("entityhydrator.store.load", attributes):
            async with self._lock:
                self.load_calls.append((entity_type.__name__, primary_key, tuple(relations)))

                failure = self._failures.get(entity_type)
                if failure is not None:
                    raise failure

                source = self._entities.get((entity_type, primary_key))
                if source is None:
                    logger.debug(
                        "%s %s not found in store",
                        entity_type.__name__,
                        primary_key,
                        extra={"entity_type": entity_type.__name__, "entity_id": primary_key},
                    )
                    return None

                tree = bind_relation_tree(parse_relation_paths(relations), entity_type)
                return self._project(source, tree)  # type: ignore[return-value]

    def _canonical(self, model: GraphModel) -> GraphModel:
        if isinstance(model, Entity) and model.id is not None:
            return self._entities.get((type(model), model.id), model)
        return model

    def _project(self, source: GraphModel, node: RelationNode) -> GraphModel:
        copy = detached_copy(source)
        for name, child in node.children.items():
            info = child.relation
            assert info is not None
            value = getattr(source, name)

            if info.kind is RelationKind.EMBEDDED:
                if value is not None:
                    setattr(copy, name, self._project(value, child))
            elif info.kind is RelationKind.SINGLE:
                if value is not None:
                    setattr(copy, name, self._project(self._canonical(value), child))
            else:
                members = [self._project(self._canonical(member), child) for member in value or []]
                setattr(copy, name, members)
            copy.mark_loaded(name)
        return copy
