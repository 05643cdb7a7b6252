"""
entityhydrator - On-demand relation hydration for partially loaded entity graphs.

This library provides:
- Relation path parsing and validation against pydantic entity models
- Presence inspection that prunes relations which are already loaded
- Batched fetching of the missing relations through a pluggable loader
- Identity-preserving deep merge of fetched sub-graphs
- Translation resolution at every depth
- Variant price-with-tax application from channel and tax zone context
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("entity-hydrator")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from entityhydrator.config import HydratorConfig
from entityhydrator.context import RequestContext
from entityhydrator.entities import (
    Embedded,
    Entity,
    EntityMetadata,
    GraphModel,
    RelationInfo,
    RelationKind,
    TranslatableEntity,
    Translation,
)
from entityhydrator.exceptions import (
    EntityNotFoundError,
    HydrationError,
    InvalidRelationPathError,
    UnexpectedEntityError,
    UnsavedEntityError,
)
from entityhydrator.fetcher import SelectiveFetcher
from entityhydrator.hydrator import EntityHydrator
from entityhydrator.loaders import InMemoryEntityStore
from entityhydrator.merge import merge_graph
from entityhydrator.paths import RelationNode, bind_relation_tree, parse_relation_paths
from entityhydrator.presence import FetchPlan, PlanNode, inspect_presence
from entityhydrator.pricing import PriceApplier, StaticTaxRateProvider, apply_tax
from entityhydrator.protocols import EntityLoader, TaxRateProvider
from entityhydrator.request import HydrationRequest
from entityhydrator.translation import TranslationResolver, select_translation, translate_entity

__all__ = [
    "__version__",
    # Hydrator
    "EntityHydrator",
    "HydrationRequest",
    "HydratorConfig",
    "RequestContext",
    # Entities
    "GraphModel",
    "Entity",
    "Embedded",
    "Translation",
    "TranslatableEntity",
    "EntityMetadata",
    "RelationInfo",
    "RelationKind",
    # Pipeline stages
    "RelationNode",
    "parse_relation_paths",
    "bind_relation_tree",
    "FetchPlan",
    "PlanNode",
    "inspect_presence",
    "SelectiveFetcher",
    "merge_graph",
    "TranslationResolver",
    "select_translation",
    "translate_entity",
    "PriceApplier",
    "apply_tax",
    # Collaborators
    "EntityLoader",
    "TaxRateProvider",
    "StaticTaxRateProvider",
    "InMemoryEntityStore",
    # Exceptions
    "HydrationError",
    "InvalidRelationPathError",
    "EntityNotFoundError",
    "UnexpectedEntityError",
    "UnsavedEntityError",
]
