# dependency/tree.py
# This file is part of Formulary - A Formula Expression Engine
#
# Recursive dependency trees over a snapshot of named formulas

"""Dependency-tree construction for calculation formulas.

Starting from one formula name, each referenced variable that has a formula of
its own is expanded recursively. The set of names on the current path travels
down each branch by value, so a name shared by two sibling subtrees is
expanded in both, while a name that recurs on its own ancestor path becomes a
CIRCULAR node instead of being expanded again.

The builder never fails: unknown names become LEAF nodes and malformed
formulas are analysed with the regex fallback of ``expression.analyze``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from expression import analyze
from utils.logger import get_logger

DEFAULT_MAX_DEPTH = 10

# Formulas with this suffix stand in for parameters that have no formula yet
PLACEHOLDER_SUFFIX = "_placeholder"


class TreeNodeKind(Enum):
    """Role of a node in a dependency tree."""

    FORMULA = "formula"
    LEAF = "leaf"
    CIRCULAR = "circular"


@dataclass(frozen=True)
class DependencyTreeNode:
    """One named quantity in a dependency tree.

    Attributes:
        name: Formula or variable name
        kind: FORMULA, LEAF or CIRCULAR
        expression: Raw formula text for FORMULA nodes
        operators: Distinct binary operator symbols of the formula
        children: Expanded dependencies in first-discovery order
        depth: Distance from the root (root is 0)
    """

    name: str
    kind: TreeNodeKind
    expression: Optional[str] = None
    operators: FrozenSet[str] = field(default_factory=frozenset)
    children: Tuple[DependencyTreeNode, ...] = ()
    depth: int = 0

    def iter_nodes(self) -> Iterator[DependencyTreeNode]:
        """Yield this node and all descendants in preorder."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def find_path(self, target: str) -> List[str]:
        """Names from this node down to the first node called ``target``.

        Returns an empty list when no node carries that name.
        """
        if self.name == target:
            return [self.name]
        for child in self.children:
            below = child.find_path(target)
            if below:
                return [self.name] + below
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the subtree into plain JSON-compatible values."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "children": [child.to_dict() for child in self.children],
            "depth": self.depth,
        }
        if self.expression is not None:
            data["expression"] = self.expression
            data["operators"] = sorted(self.operators)
        return data


def has_formula(formulas: Mapping[str, str], name: str) -> bool:
    """Check whether ``name`` has a real (non-empty, non-placeholder) formula."""
    expression = formulas.get(name)
    return bool(expression) and not expression.endswith(PLACEHOLDER_SUFFIX)


def build_tree(
    root_name: str,
    formulas: Mapping[str, str],
    max_depth: int = DEFAULT_MAX_DEPTH,
    _visited: FrozenSet[str] = frozenset(),
    _depth: int = 0,
) -> DependencyTreeNode:
    """Expand a formula into the tree of everything it depends on.

    Rules, in priority order: a name already on the path is CIRCULAR; a node
    deeper than ``max_depth`` is CIRCULAR; a name without a formula is a LEAF;
    otherwise the formula is analysed and every variable is expanded.

    Args:
        root_name: Name of the formula to expand
        formulas: Immutable snapshot of name -> formula text
        max_depth: Depth beyond which expansion stops

    Returns:
        Root DependencyTreeNode, rebuilt from scratch on every call

    Example:
        >>> tree = build_tree("A", {"A": "B + 1", "B": "A + 1"})
        >>> tree.children[0].children[0].kind
        <TreeNodeKind.CIRCULAR: 'circular'>
    """
    logger = get_logger()

    if root_name in _visited:
        logger.cycle_detected(root_name, _depth)
        return DependencyTreeNode(root_name, TreeNodeKind.CIRCULAR, depth=_depth)

    if _depth > max_depth:
        logger.debug(f"Depth limit {max_depth} reached at '{root_name}'")
        return DependencyTreeNode(root_name, TreeNodeKind.CIRCULAR, depth=_depth)

    if not has_formula(formulas, root_name):
        return DependencyTreeNode(root_name, TreeNodeKind.LEAF, depth=_depth)

    expression = formulas[root_name]
    parsed = analyze(expression)
    path = _visited | {root_name}

    children = tuple(
        build_tree(variable, formulas, max_depth, path, _depth + 1)
        for variable in parsed.variables
    )

    logger.debug(
        f"Expanded '{root_name}' at depth {_depth} into {len(children)} dependencies"
    )
    return DependencyTreeNode(
        name=root_name,
        kind=TreeNodeKind.FORMULA,
        expression=expression,
        operators=parsed.operators,
        children=children,
        depth=_depth,
    )
