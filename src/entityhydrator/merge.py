"""
Deep merge of freshly fetched sub-graphs into existing entity instances.

The merge follows the fetch plan, so only branches that were actually
fetched are touched. Existing instances are kept (callers may hold
references to them) and fresh data is merged into them:

- scalars: existing values win; ``None`` is filled from the fresh entity
- single relations: attached when missing, deep-merged when the primary key
  matches, replaced when the relation now points at a different entity
- collections: reconciled by primary key; shared entries are deep-merged,
  fresh-only entries are added, original-only entries are kept; never two
  entries with the same key
- embedded value objects: merged field by field

Merging the same fetch result twice leaves the graph unchanged.
"""

from __future__ import annotations

import logging

from entityhydrator.entities.base import Entity, GraphModel
from entityhydrator.entities.metadata import EntityMetadata, RelationKind
from entityhydrator.presence import FetchPlan, PlanNode

logger = logging.getLogger(__name__)

_Visited = set[tuple[int, int, int]]


def _identity(model: GraphModel) -> object:
    if isinstance(model, Entity) and model.id is not None:
        return model.id
    # Unsaved entries never match anything but themselves
    return ("unsaved", id(model))


def _fill_scalars(target: GraphModel, fresh: GraphModel) -> None:
    if type(target) is not type(fresh):
        return
    derived = getattr(type(target), "__derived_fields__", ())
    for name in EntityMetadata.for_model(type(target)).scalar_fields:
        if name in derived:
            continue
        if getattr(target, name) is None:
            value = getattr(fresh, name)
            if value is not None:
                setattr(target, name, value)


def _merge_model(
    target: GraphModel,
    fresh: GraphModel,
    plan: dict[str, PlanNode],
    visited: _Visited,
) -> None:
    key = (id(target), id(fresh), id(plan))
    if key in visited:
        return
    visited.add(key)

    _fill_scalars(target, fresh)

    for name, node in plan.items():
        kind = node.info.kind
        if kind is RelationKind.EMBEDDED:
            _merge_embedded(target, fresh, name, node, visited)
        elif kind is RelationKind.SINGLE:
            _merge_single(target, fresh, name, node, visited)
        else:
            _merge_collection(target, fresh, name, node, visited)


def _merge_embedded(
    target: GraphModel,
    fresh: GraphModel,
    name: str,
    node: PlanNode,
    visited: _Visited,
) -> None:
    fresh_value = getattr(fresh, name)
    if fresh_value is None:
        return
    current = getattr(target, name)
    if current is None:
        setattr(target, name, fresh_value)
    else:
        _merge_model(current, fresh_value, node.children, visited)
    target.mark_loaded(name)


def _merge_single(
    target: GraphModel,
    fresh: GraphModel,
    name: str,
    node: PlanNode,
    visited: _Visited,
) -> None:
    fresh_value = getattr(fresh, name)
    current = getattr(target, name)

    if fresh_value is None:
        if current is None and fresh.is_loaded(name):
            # Genuinely null; remember so it is not refetched
            target.mark_loaded(name)
        return

    if current is None:
        setattr(target, name, fresh_value)
    elif _identity(current) == _identity(fresh_value):
        _merge_model(current, fresh_value, node.children, visited)
    else:
        logger.debug(
            "Replacing %s.%s: %s -> %s",
            type(target).__name__,
            name,
            current,
            fresh_value,
            extra={"entity_type": type(target).__name__, "relation": name},
        )
        setattr(target, name, fresh_value)
    target.mark_loaded(name)


def _merge_collection(
    target: GraphModel,
    fresh: GraphModel,
    name: str,
    node: PlanNode,
    visited: _Visited,
) -> None:
    fresh_members = getattr(fresh, name)
    if fresh_members is None:
        return
    current = getattr(target, name)

    if current is None:
        setattr(target, name, _dedupe(fresh_members))
        target.mark_loaded(name)
        return

    existing: dict[object, GraphModel] = {}
    for member in current:
        existing.setdefault(_identity(member), member)

    merged: list[GraphModel] = []
    merged_keys: set[object] = set()
    for fresh_member in fresh_members:
        member_key = _identity(fresh_member)
        if member_key in merged_keys:
            continue
        merged_keys.add(member_key)
        match = existing.get(member_key)
        if match is None:
            merged.append(fresh_member)
        else:
            _merge_model(match, fresh_member, node.children, visited)
            merged.append(match)

    if node.refetch:
        # Fresh order, then whatever only the original knew about
        result = merged + [
            member for member_key, member in existing.items() if member_key not in merged_keys
        ]
    else:
        result = list(existing.values()) + [
            member for member in merged if _identity(member) not in existing
        ]

    # Keep the list object so outside references see the merged contents
    current[:] = result
    target.mark_loaded(name)


def _dedupe(members: list[GraphModel]) -> list[GraphModel]:
    result: list[GraphModel] = []
    seen: set[object] = set()
    for member in members:
        member_key = _identity(member)
        if member_key not in seen:
            seen.add(member_key)
            result.append(member)
    return result


def merge_graph(target: GraphModel, fresh: GraphModel, plan: FetchPlan) -> None:
    """
    Deep-merge a freshly fetched graph into ``target`` along ``plan``.

    Args:
        target: The entity being hydrated (mutated in place)
        fresh: Freshly loaded copy of the same entity
        plan: The fetch plan the fresh copy was loaded for
    """
    visited: _Visited = set()
    _merge_model(target, fresh, plan.children, visited)
    logger.debug(
        "Merged %d paths into %s",
        len(plan.paths()),
        target,
        extra={"entity_type": type(target).__name__, "merged_paths": plan.paths()},
    )
