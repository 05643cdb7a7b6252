"""
Base classes for hydratable domain entities.

Entities are mutable pydantic models. Relation fields are declared as
``SomeEntity | None`` (single-valued) or ``list[SomeEntity] | None``
(collection-valued); ``None`` means the relation has not been loaded.

Because an empty list is ambiguous (never loaded, or genuinely empty), every
model also records which relations a load operation explicitly populated.
Data-access implementations call :meth:`GraphModel.mark_loaded` for each
relation they fill in, and the hydrator does the same after merging.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from entityhydrator.types import EntityId


class GraphModel(BaseModel):
    """
    Common base for anything that can hold relations: entities and embedded
    value objects.

    Field names are snake_case; camelCase aliases are generated so that
    ``productVariant`` and ``product_variant`` both address the same field,
    both on construction and in relation paths.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        # NOT frozen - the hydrator attaches relations in place
    )

    _loaded_relations: set[str] = PrivateAttr(default_factory=set)

    def mark_loaded(self, *names: str) -> None:
        """Record that the given relations were populated by a load operation."""
        self._loaded_relations.update(names)

    def is_loaded(self, name: str) -> bool:
        """Check whether a relation was explicitly populated by a load operation."""
        return name in self._loaded_relations

    @property
    def loaded_relations(self) -> frozenset[str]:
        """Names of the relations explicitly marked as loaded."""
        return frozenset(self._loaded_relations)

    def reset_loaded(self) -> None:
        """Forget all loaded marks (used when detaching copies)."""
        self._loaded_relations = set()


class Entity(GraphModel):
    """
    Base class for domain entities identified by a primary key.

    The primary key is unique within the entity's type. It is ``None`` only
    for entities that have not been persisted yet.

    Class attributes:
        __priced__: True for product-variant shaped entities whose
            ``price_with_tax`` is recomputed by the price applier
        __auto_priced_paths__: Relation paths that, when hydrated from this
            entity type, trigger price application even when the request
            did not ask for it (Order uses ``lines.product_variant``)
        __derived_fields__: Scalars computed from the request context; the
            merge never copies them from a freshly loaded entity

    Example:
        >>> class Asset(Entity):
        ...     name: str
        ...
        >>> class Product(Entity):
        ...     featured_asset: Asset | None = None
        ...
        >>> product = Product(id=1)
        >>> product.featured_asset is None
        True
    """

    __priced__: ClassVar[bool] = False
    __auto_priced_paths__: ClassVar[tuple[str, ...]] = ()
    __derived_fields__: ClassVar[tuple[str, ...]] = ()

    id: EntityId | None = Field(
        default=None,
        description="Primary key, unique within the entity type",
    )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.__class__.__name__}(id={self.id!r})"


class Embedded(GraphModel):
    """
    Value object embedded in an entity (e.g. a custom fields block).

    Embedded objects have no identity of their own. They may hold relation
    fields, which are addressed through the embedding field
    (``custom_fields.thumb``).
    """

    pass


class Translation(Entity):
    """
    Per-locale field values of a translatable entity.

    Every field declared on a subclass (other than ``id``, ``language_code``
    and relation fields) is copied onto the same-named field of the owning
    entity when the translation is selected.
    """

    language_code: str = Field(..., description="Language of this translation")


class TranslatableEntity(Entity):
    """
    Entity carrying a ``translations`` collection.

    Subclasses declare ``translations: list[<Translation subclass>] | None``
    together with the translatable fields themselves (``name``,
    ``description`` ...). ``language_code`` records which translation was
    projected onto the entity.
    """

    language_code: str | None = Field(
        default=None,
        description="Language of the translation currently applied",
    )
