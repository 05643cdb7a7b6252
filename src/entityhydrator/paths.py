"""
Relation path parsing.

A hydration request names relations as dot-separated paths
(``"variants.options"``). This module turns a flat list of such paths into a
prefix tree, merges overlapping paths, and binds the tree to an entity type so
that every segment is validated and resolved to its canonical field name
before any data is fetched.

Example:
    >>> tree = parse_relation_paths(["variants.options", "variants.product", "assets"])
    >>> sorted(tree.children)
    ['assets', 'variants']
    >>> sorted(tree.children["variants"].children)
    ['options', 'product']
    >>> bound = bind_relation_tree(tree, Product)
    >>> bound.paths()
    ['assets', 'variants.options', 'variants.product']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from entityhydrator.entities.base import GraphModel
from entityhydrator.entities.metadata import EntityMetadata, RelationInfo, RelationKind
from entityhydrator.exceptions import InvalidRelationPathError

PATH_SEPARATOR = "."


@dataclass
class RelationNode:
    """
    Node of a relation prefix tree.

    The root node has an empty name. Unbound trees (straight from the parser)
    carry only names; bound trees additionally carry the relation metadata of
    each node and the model class it points at.

    Attributes:
        name: Relation name (segment) of this node
        requested: True if a path ending exactly here was requested
        children: Child nodes keyed by segment
        relation: Relation metadata (bound trees only; None at the root)
        model: Model class reached through this node (bound trees only)
    """

    name: str = ""
    requested: bool = False
    children: dict[str, RelationNode] = field(default_factory=dict)
    relation: RelationInfo | None = None
    model: type[GraphModel] | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def paths(self, prefix: str = "") -> list[str]:
        """
        Leaf paths below this node, in dot form.

        A requested path that is a prefix of another one is subsumed by the
        deeper path and does not appear on its own.
        """
        result: list[str] = []
        for name, child in self.children.items():
            path = f"{prefix}{PATH_SEPARATOR}{name}" if prefix else name
            if child.is_leaf:
                result.append(path)
            else:
                result.extend(child.paths(path))
        return sorted(result)

    def contains(self, path: str) -> bool:
        """Check whether a (canonical) dot path is covered by this tree."""
        node = self
        for segment in path.split(PATH_SEPARATOR):
            child = node.children.get(segment)
            if child is None:
                return False
            node = child
        return True

    def walk(self) -> Iterator[RelationNode]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children.values():
            yield from child.walk()

    def ensure_child(self, name: str) -> RelationNode:
        """
        Get or add a bound child for the relation ``name``.

        Raises:
            ValueError: If this node is not bound
            KeyError: If the model has no such relation
        """
        if self.model is None:
            raise ValueError("ensure_child() requires a bound relation tree")
        existing = self.children.get(name)
        if existing is not None:
            return existing
        info = EntityMetadata.for_model(self.model).relation(name)
        child = RelationNode(name=name, requested=True, relation=info, model=info.target)
        self.children[name] = child
        return child

    def add(self, segments: list[str]) -> None:
        node = self
        for segment in segments:
            node = node.children.setdefault(segment, RelationNode(name=segment))
        node.requested = True


def parse_relation_paths(paths: Iterable[str]) -> RelationNode:
    """
    Parse dot-separated relation paths into a prefix tree.

    Shared prefixes are merged into one node, duplicates are ignored, and
    a path that is a prefix of another is subsumed by the deeper one.

    Args:
        paths: Relation paths such as ``"lines.product_variant"``

    Returns:
        Root node of the (unbound) tree; empty for empty input

    Raises:
        InvalidRelationPathError: If a path has an empty segment
        TypeError: If a path is not a string
    """
    root = RelationNode()
    for path in paths:
        if not isinstance(path, str):
            raise TypeError(f"Relation paths must be strings, got {type(path).__name__}")
        segments = path.strip().split(PATH_SEPARATOR)
        for segment in segments:
            if not segment.strip():
                raise InvalidRelationPathError(path, segment)
        root.add([segment.strip() for segment in segments])
    return root


def _merge_into(target: RelationNode, source: RelationNode) -> None:
    target.requested = target.requested or source.requested
    for name, child in source.children.items():
        existing = target.children.get(name)
        if existing is None:
            target.children[name] = child
        else:
            _merge_into(existing, child)


def _bind(node: RelationNode, model: type[GraphModel], prefix: str) -> RelationNode:
    bound = RelationNode(
        name=node.name,
        requested=node.requested,
        relation=None,
        model=model,
    )
    metadata = EntityMetadata.for_model(model)

    for segment, child in node.children.items():
        path = f"{prefix}{PATH_SEPARATOR}{segment}" if prefix else segment
        info = metadata.resolve(segment)
        if info is None:
            raise InvalidRelationPathError(_full_path(path, child), segment, model.__name__)

        bound_child = _bind(child, info.target, path)
        bound_child.name = info.name
        bound_child.relation = info

        existing = bound.children.get(info.name)
        if existing is None:
            bound.children[info.name] = bound_child
        else:
            # "productVariant" and "product_variant" name the same relation
            _merge_into(existing, bound_child)

    return bound


def _full_path(path: str, node: RelationNode) -> str:
    if node.is_leaf:
        return path
    return f"{path}{PATH_SEPARATOR}{node.paths()[0]}"


def bind_relation_tree(tree: RelationNode, model: type[GraphModel]) -> RelationNode:
    """
    Validate a parsed tree against a model and resolve canonical names.

    Each segment may be given as the Python field name or its camelCase
    alias. Segments resolving to the same field are merged.

    Args:
        tree: Unbound tree from :func:`parse_relation_paths`
        model: Model class of the root entity

    Returns:
        A new bound tree rooted at ``model``

    Raises:
        InvalidRelationPathError: If a segment is not a relation of the type
            at that depth
    """
    return _bind(tree, model, "")


def iter_reached(root: GraphModel, tree: RelationNode) -> Iterator[GraphModel]:
    """
    Yield every distinct model instance reached by following a bound tree.

    The root is yielded first. Embedded objects are traversed but not
    yielded. Instances reachable through several paths are yielded once.
    """
    visited: set[tuple[int, int]] = set()
    yielded: set[int] = set()

    def visit(model: GraphModel, node: RelationNode) -> Iterator[GraphModel]:
        if (id(model), id(node)) in visited:
            return
        visited.add((id(model), id(node)))
        embedded = node.relation is not None and node.relation.kind is RelationKind.EMBEDDED
        if not embedded and id(model) not in yielded:
            yielded.add(id(model))
            yield model
        for name, child in node.children.items():
            value = getattr(model, name, None)
            if value is None:
                continue
            if isinstance(value, list):
                for member in value:
                    yield from visit(member, child)
            else:
                yield from visit(value, child)

    yield from visit(root, tree)
