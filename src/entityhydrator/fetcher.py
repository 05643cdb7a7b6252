"""
Selective fetching of missing relations.
"""

from __future__ import annotations

import logging
from typing import Any

from entityhydrator.exceptions import EntityNotFoundError, UnexpectedEntityError, UnsavedEntityError
from entityhydrator.observability import Tracer, create_tracer
from entityhydrator.observability.attributes import (
    ATTR_ENTITY_ID,
    ATTR_ENTITY_TYPE,
    ATTR_ERROR_TYPE,
    ATTR_FETCH_PATH_COUNT,
)
from entityhydrator.presence import FetchPlan
from entityhydrator.protocols import EntityLoader, TEntity

logger = logging.getLogger(__name__)


class SelectiveFetcher:
    """
    Loads the missing part of an entity graph in a single call.

    All pruned paths of a fetch plan are passed to the loader together, so
    each root entity costs at most one data-access call per hydration.
    Loader errors propagate unchanged; nothing has been mutated at that
    point.
    """

    def __init__(
        self,
        loader: EntityLoader,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._loader = loader

    async def fetch(self, entity: TEntity, plan: FetchPlan) -> TEntity:
        """
        Load a fresh copy of ``entity`` with the planned relations.

        Args:
            entity: Root entity being hydrated
            plan: Non-empty fetch plan for it

        Returns:
            Freshly loaded instance rooted at the same primary key

        Raises:
            UnsavedEntityError: If the entity has no primary key
            EntityNotFoundError: If the entity no longer exists
            UnexpectedEntityError: If the loader returns a different type
        """
        entity_type = type(entity)
        if entity.id is None:
            raise UnsavedEntityError(entity_type.__name__)

        paths = plan.paths()
        attributes: dict[str, Any] | None = None
        if self._enable_tracing:
            attributes = {
                ATTR_ENTITY_TYPE: entity_type.__name__,
                ATTR_ENTITY_ID: str(entity.id),
                ATTR_FETCH_PATH_COUNT: len(paths),
            }
        with self._tracer.span("entityhydrator.fetch", attributes) as span:
            try:
                fresh = await self._loader.load_with_relations(entity_type, entity.id, paths)
            except Exception as e:
                if span is not None:
                    span.set_attribute(ATTR_ERROR_TYPE, type(e).__name__)
                logger.warning(
                    "Loading %s %s with %s failed: %s",
                    entity_type.__name__,
                    entity.id,
                    paths,
                    e,
                    extra={
                        "entity_type": entity_type.__name__,
                        "entity_id": entity.id,
                        "paths": paths,
                    },
                )
                raise

        if fresh is None:
            raise EntityNotFoundError(entity_type.__name__, entity.id)
        if not isinstance(fresh, entity_type):
            raise UnexpectedEntityError(entity_type.__name__, type(fresh).__name__)

        logger.debug(
            "Fetched %d paths for %s",
            len(paths),
            entity,
            extra={"entity_type": entity_type.__name__, "entity_id": entity.id, "paths": paths},
        )
        return fresh

