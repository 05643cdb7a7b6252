"""
On-demand relation hydration of partially loaded entities.

The hydrator takes an entity that was loaded with some projection and makes
sure a list of relation paths is present on it, mutating the instance in
place. The pipeline for one root entity is sequential:

    parse -> bind -> inspect -> fetch -> merge -> translate -> price

Only the missing branches are fetched, in one data-access call per root.
Invalid paths fail before any fetch, and a failed or empty fetch leaves the
entity untouched.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from entityhydrator.config import HydratorConfig
from entityhydrator.context import RequestContext
from entityhydrator.entities.base import Entity, TranslatableEntity
from entityhydrator.entities.metadata import EntityMetadata
from entityhydrator.fetcher import SelectiveFetcher
from entityhydrator.merge import merge_graph
from entityhydrator.observability import Tracer, create_tracer
from entityhydrator.observability.attributes import (
    ATTR_APPLY_PRICES,
    ATTR_BATCH_SIZE,
    ATTR_ENTITY_ID,
    ATTR_ENTITY_TYPE,
    ATTR_LANGUAGE_CODE,
    ATTR_RELATION_COUNT,
)
from entityhydrator.paths import RelationNode, bind_relation_tree, parse_relation_paths
from entityhydrator.presence import inspect_presence
from entityhydrator.pricing import PriceApplier
from entityhydrator.protocols import EntityLoader, TaxRateProvider
from entityhydrator.request import HydrationRequest
from entityhydrator.translation import TranslationResolver

logger = logging.getLogger(__name__)

TRANSLATIONS_RELATION = "translations"
VARIANT_PRICES_RELATION = "product_variant_prices"


class EntityHydrator:
    """
    Expands partially loaded entities with requested relations.

    Features:
    - Skips relations that are already present (per member of collections)
    - Fetches everything missing in one call per root entity
    - Deep-merges by primary key, never discarding already loaded data
    - Resolves translations at every depth
    - Recomputes variant prices with tax on request

    Example:
        >>> hydrator = EntityHydrator(
        ...     loader=store,
        ...     tax_rates=StaticTaxRateProvider({(1, 1): Decimal("0.2")}),
        ... )
        >>> await hydrator.hydrate(
        ...     ctx,
        ...     product,
        ...     HydrationRequest(relations=("variants.options", "featuredAsset")),
        ... )
        >>> product.variants[0].options[0].name
        '13 inch'

    Note:
        Callers must not hydrate the same instance from two concurrent
        calls. Independent roots may be hydrated in parallel with
        :meth:`hydrate_many`.
    """

    def __init__(
        self,
        loader: EntityLoader,
        tax_rates: TaxRateProvider | None = None,
        config: HydratorConfig | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """
        Initialize the hydrator.

        Args:
            loader: Data-access collaborator used to fetch missing relations
            tax_rates: Tax rate lookup for price application (optional;
                without it ``price_with_tax`` is never set)
            config: Hydrator configuration (defaults to HydratorConfig())
            tracer: Optional custom Tracer. If not provided, one is created
                according to ``config.enable_tracing``.
        """
        self._config = config or HydratorConfig()
        self._tracer = tracer or create_tracer(__name__, self._config.enable_tracing)
        self._enable_tracing = self._tracer.enabled

        self._fetcher = SelectiveFetcher(loader, tracer=self._tracer)
        self._translator = TranslationResolver(self._config.default_language_code)
        self._price_applier = PriceApplier(tax_rates)

    @property
    def config(self) -> HydratorConfig:
        return self._config

    async def hydrate(
        self,
        ctx: RequestContext,
        entity: Entity,
        request: HydrationRequest | Sequence[str],
    ) -> None:
        """
        Ensure every requested relation path is present on ``entity``.

        Args:
            ctx: Request context (language, channel, currency, tax zone)
            entity: Entity to hydrate, mutated in place
            request: HydrationRequest, or a plain sequence of relation paths

        Raises:
            InvalidRelationPathError: If a path does not match the entity type
            EntityNotFoundError: If the entity no longer exists
            UnsavedEntityError: If relations are missing on an entity
                without a primary key
        """
        if not isinstance(entity, Entity):
            raise TypeError(f"Only entities can be hydrated, got {type(entity).__name__}")
        request = HydrationRequest.of(request)
        entity_type = type(entity)

        attributes: dict[str, Any] | None = None
        if self._enable_tracing:
            attributes = {
                ATTR_ENTITY_TYPE: entity_type.__name__,
                ATTR_ENTITY_ID: str(entity.id),
                ATTR_RELATION_COUNT: len(request.relations),
                ATTR_APPLY_PRICES: request.apply_product_variant_prices,
                ATTR_LANGUAGE_CODE: ctx.language_code or self._config.default_language_code,
            }

        with self._tracer.span("entityhydrator.hydrate", attributes):
            tree = bind_relation_tree(parse_relation_paths(request.relations), entity_type)
            if not tree.children:
                logger.debug(
                    "Nothing to hydrate for %s",
                    entity,
                    extra={"entity_type": entity_type.__name__, "entity_id": entity.id},
                )
                return

            apply_prices = request.apply_product_variant_prices or any(
                tree.contains(path) for path in entity_type.__auto_priced_paths__
            )
            if self._config.join_translations:
                self._join_relation(tree, TRANSLATIONS_RELATION, _is_translatable)
            if apply_prices:
                self._join_relation(tree, VARIANT_PRICES_RELATION, _is_priced)

            plan = inspect_presence(entity, tree)
            if not plan.is_empty:
                fresh = await self._fetcher.fetch(entity, plan)
                merge_graph(entity, fresh, plan)

            self._translator.translate(ctx, entity, tree)
            if apply_prices:
                self._price_applier.apply(ctx, entity, tree)

            logger.debug(
                "Hydrated %s with %s",
                entity,
                request.relations,
                extra={
                    "entity_type": entity_type.__name__,
                    "entity_id": entity.id,
                    "relations": list(request.relations),
                    "fetched_paths": plan.paths(),
                    "apply_prices": apply_prices,
                },
            )

    async def hydrate_many(
        self,
        ctx: RequestContext,
        entities: Sequence[Entity],
        request: HydrationRequest | Sequence[str],
    ) -> None:
        """
        Hydrate independent root entities concurrently.

        Each root gets its own pipeline. An instance listed more than once
        is hydrated once.

        Raises:
            The first error raised by any of the pipelines
        """
        request = HydrationRequest.of(request)
        unique = list({id(entity): entity for entity in entities}.values())
        attributes: dict[str, Any] | None = None
        if self._enable_tracing:
            attributes = {ATTR_BATCH_SIZE: len(unique), ATTR_RELATION_COUNT: len(request.relations)}

        with self._tracer.span("entityhydrator.hydrate_many", attributes):
            await asyncio.gather(*(self.hydrate(ctx, entity, request) for entity in unique))

    @staticmethod
    def _join_relation(tree: RelationNode, name: str, applies: Callable[[RelationNode], bool]) -> None:
        # Snapshot first: ensure_child adds nodes while we iterate
        for node in list(tree.walk()):
            if node.model is not None and applies(node):
                if EntityMetadata.for_model(node.model).has_relation(name):
                    node.ensure_child(name)


def _is_translatable(node: RelationNode) -> bool:
    return node.model is not None and issubclass(node.model, TranslatableEntity)


def _is_priced(node: RelationNode) -> bool:
    return (
        node.model is not None
        and issubclass(node.model, Entity)
        and bool(node.model.__priced__)
    )

