"""
Presence inspection: which requested relations still need fetching.

Walks an existing entity graph along a bound relation tree and produces a
fetch plan containing only the branches that are missing.

Presence rules per relation kind:
- single: satisfied by an entity with a primary key, or by ``None`` when the
  relation was explicitly marked as loaded (genuinely null)
- collection: satisfied when marked as loaded, or when non-empty; an
  unmarked empty list is ambiguous and is refetched
- embedded: satisfied when the value object exists

Presence is evaluated at every node over every entity reached so far. A
nested relation below a collection is only satisfied if every member of the
collection has it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from entityhydrator.entities.base import Entity, GraphModel
from entityhydrator.entities.metadata import RelationInfo, RelationKind
from entityhydrator.paths import PATH_SEPARATOR, RelationNode

logger = logging.getLogger(__name__)


@dataclass
class PlanNode:
    """
    Node of a fetch plan.

    Attributes:
        relation: The bound request node this plan node corresponds to
        refetch: True if the relation itself is missing and will be loaded
            wholesale (with its whole requested subtree); False if it is
            present and only appears as a prefix to reach missing children
        children: Plan nodes for the children that need fetching
    """

    relation: RelationNode
    refetch: bool
    children: dict[str, PlanNode] = field(default_factory=dict)

    @classmethod
    def full(cls, relation: RelationNode) -> PlanNode:
        """Plan node that refetches ``relation`` and its entire subtree."""
        return cls(
            relation=relation,
            refetch=True,
            children={name: cls.full(child) for name, child in relation.children.items()},
        )

    @property
    def info(self) -> RelationInfo:
        assert self.relation.relation is not None
        return self.relation.relation


@dataclass
class FetchPlan:
    """
    Pruned set of relations that must be fetched for one root entity.

    Attributes:
        tree: The full bound request tree the plan was derived from
        children: Top-level plan nodes keyed by relation name
    """

    tree: RelationNode
    children: dict[str, PlanNode] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.children

    def paths(self) -> list[str]:
        """Leaf relation paths to pass to the data-access layer."""
        result: list[str] = []

        def collect(nodes: dict[str, PlanNode], prefix: str) -> None:
            for name, node in nodes.items():
                path = f"{prefix}{PATH_SEPARATOR}{name}" if prefix else name
                if node.children:
                    collect(node.children, path)
                else:
                    result.append(path)

        collect(self.children, "")
        return sorted(result)


def is_relation_satisfied(owner: GraphModel, info: RelationInfo) -> bool:
    """Check whether ``owner`` already holds the relation described by ``info``."""
    value = getattr(owner, info.name, None)

    if info.kind is RelationKind.EMBEDDED:
        return value is not None

    if info.kind is RelationKind.SINGLE:
        if value is None:
            return owner.is_loaded(info.name)
        return isinstance(value, Entity) and value.id is not None

    if value is None:
        return False
    if owner.is_loaded(info.name):
        return True
    # An unmarked empty list may just be a default, not the real contents
    return len(value) > 0


def _reached(owners: Sequence[GraphModel], info: RelationInfo) -> list[GraphModel]:
    reached: list[GraphModel] = []
    for owner in owners:
        value = getattr(owner, info.name, None)
        if value is None:
            continue
        if isinstance(value, list):
            reached.extend(value)
        else:
            reached.append(value)
    return reached


def _inspect(owners: Sequence[GraphModel], node: RelationNode) -> dict[str, PlanNode]:
    planned: dict[str, PlanNode] = {}
    for name, child in node.children.items():
        info = child.relation
        assert info is not None, "inspect_presence() requires a bound relation tree"

        if not all(is_relation_satisfied(owner, info) for owner in owners):
            planned[name] = PlanNode.full(child)
            continue

        if child.is_leaf:
            continue
        members = _reached(owners, info)
        if not members:
            continue
        nested = _inspect(members, child)
        if nested:
            planned[name] = PlanNode(relation=child, refetch=False, children=nested)
    return planned


def inspect_presence(entity: GraphModel, tree: RelationNode) -> FetchPlan:
    """
    Build the fetch plan for ``entity`` and a bound request tree.

    Args:
        entity: Root entity, possibly partially hydrated
        tree: Bound relation tree (see :func:`bind_relation_tree`)

    Returns:
        The fetch plan; empty when everything requested is already present
    """
    plan = FetchPlan(tree=tree, children=_inspect([entity], tree))
    logger.debug(
        "Presence inspection for %s: %d missing paths",
        type(entity).__name__,
        len(plan.paths()),
        extra={
            "entity_type": type(entity).__name__,
            "requested_paths": tree.paths(),
            "missing_paths": plan.paths(),
        },
    )
    return plan
