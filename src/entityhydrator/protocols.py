"""
Protocol definitions for the collaborators the hydrator consumes.

Protocols:
- EntityLoader: Data-access capability "load entity X with relations Y"
- TaxRateProvider: Tax rate lookup by zone and tax category

Example:
    >>> class OrmLoader:
    ...     async def load_with_relations(self, entity_type, primary_key, relations):
    ...         return await session.get(entity_type, primary_key, options=relations)
    >>>
    >>> isinstance(OrmLoader(), EntityLoader)
    True
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol, TypeVar, runtime_checkable

from entityhydrator.entities.base import Entity
from entityhydrator.types import EntityId, RelationPath

# Type variable for entity types
TEntity = TypeVar("TEntity", bound=Entity)


@runtime_checkable
class EntityLoader(Protocol):
    """
    Protocol for the data-access collaborator.

    The hydrator treats the loader as the sole source of missing data and
    calls it at most once per root entity per hydration. Cancellation,
    timeouts and retries are the loader's business.
    """

    async def load_with_relations(
        self,
        entity_type: type[TEntity],
        primary_key: EntityId,
        relations: Sequence[RelationPath],
    ) -> TEntity | None:
        """
        Load a fresh copy of an entity with the given relations populated.

        Args:
            entity_type: Entity class to load
            primary_key: Primary key of the entity
            relations: Canonical dot-separated relation paths to populate

        Returns:
            A newly loaded instance with every relation on each path
            populated and marked as loaded, or None if no such entity exists
        """
        ...


@runtime_checkable
class TaxRateProvider(Protocol):
    """
    Protocol for tax rate lookup.

    Rates are fractions (``Decimal("0.2")`` for 20%).
    """

    def get_rate(self, zone_id: EntityId, tax_category_id: EntityId) -> Decimal | None:
        """
        Get the tax rate applicable to a tax category in a zone.

        Returns:
            The rate, or None if no rate is configured
        """
        ...
