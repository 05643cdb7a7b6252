"""
Entity model for hydration.

Key Components:
    GraphModel: Base for models that hold relations (tracks loaded relations)
    Entity: Model identified by a primary key
    Embedded: Identity-less value object that may hold relations
    Translation / TranslatableEntity: Per-locale field values and their owner
    EntityMetadata: Cached relation introspection per model class

Commerce types (Product, ProductVariant, Order, Channel, ...) live in
``entityhydrator.entities.catalog``.
"""

from entityhydrator.entities.base import (
    Embedded,
    Entity,
    GraphModel,
    TranslatableEntity,
    Translation,
)
from entityhydrator.entities.metadata import EntityMetadata, RelationInfo, RelationKind

__all__ = [
    "GraphModel",
    "Entity",
    "Embedded",
    "Translation",
    "TranslatableEntity",
    "EntityMetadata",
    "RelationInfo",
    "RelationKind",
]
