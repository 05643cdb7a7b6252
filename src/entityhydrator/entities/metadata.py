"""
Relation metadata derived from entity field annotations.

The metadata layer inspects pydantic field annotations once per model class
and classifies each field as a single relation, a collection relation, an
embedded value object, or a plain scalar. The result is cached per class.

Classification rules (after stripping ``| None``):
- ``SomeEntity`` -> single relation
- ``list[SomeEntity]`` -> collection relation
- ``SomeEmbedded`` -> embedded value object (traversable, no identity)
- anything else -> scalar

Example:
    >>> meta = EntityMetadata.for_model(Product)
    >>> meta.resolve("featuredAsset").kind
    <RelationKind.SINGLE: 'single'>
    >>> meta.resolve("featured_asset").target
    <class 'Asset'>
"""

from __future__ import annotations

import logging
import threading
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union, get_args, get_origin

from entityhydrator.entities.base import Embedded, Entity, GraphModel

logger = logging.getLogger(__name__)


class RelationKind(Enum):
    """
    Shape of a relation field.

    Values:
        SINGLE: One related entity (or None)
        COLLECTION: Ordered list of related entities, unique by primary key
        EMBEDDED: Embedded value object that may itself hold relations
    """

    SINGLE = "single"
    COLLECTION = "collection"
    EMBEDDED = "embedded"


@dataclass(frozen=True)
class RelationInfo:
    """
    Description of one relation field on a model.

    Attributes:
        name: Python field name (snake_case)
        alias: Generated alias (camelCase), if any
        kind: Relation shape
        target: Model class the relation points at
    """

    name: str
    alias: str | None
    kind: RelationKind
    target: type[GraphModel]

    @property
    def is_collection(self) -> bool:
        return self.kind is RelationKind.COLLECTION

    @property
    def is_embedded(self) -> bool:
        return self.kind is RelationKind.EMBEDDED


def _strip_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _model_class(annotation: Any) -> type[GraphModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, GraphModel):
        return annotation
    return None


def _classify(annotation: Any) -> tuple[RelationKind, type[GraphModel]] | None:
    annotation = _strip_optional(annotation)

    if get_origin(annotation) is list:
        args = get_args(annotation)
        target = _model_class(args[0]) if args else None
        if target is not None and issubclass(target, Entity):
            return RelationKind.COLLECTION, target
        return None

    target = _model_class(annotation)
    if target is None:
        return None
    if issubclass(target, Entity):
        return RelationKind.SINGLE, target
    if issubclass(target, Embedded):
        return RelationKind.EMBEDDED, target
    return None


class EntityMetadata:
    """
    Cached relation metadata for a model class.

    Use :meth:`for_model` rather than the constructor so that each class is
    introspected once.

    Thread-Safety:
        The class-level cache is guarded by a lock.
    """

    _cache: ClassVar[dict[type[GraphModel], EntityMetadata]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, model: type[GraphModel]) -> None:
        if not model.__pydantic_complete__:
            model.model_rebuild()

        self.model = model
        self.relations: dict[str, RelationInfo] = {}
        self._aliases: dict[str, str] = {}
        scalars: list[str] = []

        for name, field_info in model.model_fields.items():
            classified = _classify(field_info.annotation)
            if classified is None:
                scalars.append(name)
                continue
            kind, target = classified
            self.relations[name] = RelationInfo(
                name=name,
                alias=field_info.alias,
                kind=kind,
                target=target,
            )
            if field_info.alias and field_info.alias != name:
                self._aliases[field_info.alias] = name

        self.scalar_fields: tuple[str, ...] = tuple(scalars)

        logger.debug(
            "Introspected %s: %d relations, %d scalars",
            model.__name__,
            len(self.relations),
            len(self.scalar_fields),
            extra={
                "entity_type": model.__name__,
                "relations": sorted(self.relations),
            },
        )

    @classmethod
    def for_model(cls, model: type[GraphModel]) -> EntityMetadata:
        """Get (and cache) the metadata for a model class."""
        with cls._lock:
            metadata = cls._cache.get(model)
            if metadata is None:
                metadata = cls(model)
                cls._cache[model] = metadata
            return metadata

    def resolve(self, segment: str) -> RelationInfo | None:
        """
        Resolve a relation path segment by field name or alias.

        Returns:
            The relation info, or None if the segment is not a relation
        """
        name = self._aliases.get(segment, segment)
        return self.relations.get(name)

    def relation(self, name: str) -> RelationInfo:
        """
        Get a relation by field name.

        Raises:
            KeyError: If the model has no such relation
        """
        return self.relations[name]

    def has_relation(self, name: str) -> bool:
        return name in self.relations

    def __repr__(self) -> str:
        return f"EntityMetadata({self.model.__name__}, relations={sorted(self.relations)})"
