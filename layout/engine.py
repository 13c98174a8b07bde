# layout/engine.py
# This file is part of Formulary - A Formula Expression Engine
#
# Deterministic level-by-level layout of formula ASTs

"""Tree layout of a formula's AST for flow-diagram rendering.

The result node sits at the top. The formula's AST is walked top-down; each
operator and each distinct leaf becomes a node on the row of its depth.
Placement takes two passes: nodes are first appended to a per-level list
and, once the walk is complete, every level is recentred around a shared x so
siblings never overlap regardless of the order they arrived in.

Variables selected for expansion that have formulas of their own are laid
out as sub-trees centred on their node, starting below the deepest row
placed so far. Every variable inside an expanded sub-tree is expanded in
turn, guarded by a per-branch visited set and a nesting ceiling. Sub-tree
node ids are prefixed with the anchor's id so independently expanded
branches never collide.

Formulas that do not parse fall back to a single row of scanned variables
wired straight to the result node.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from expression import analyze
from expression import ast_nodes as ast
from expression.ast_nodes import BinaryOperator, UnaryOperator, format_number
from dependency.tree import has_formula
from .graph import EdgeKind, ExpressionGraph, GraphEdge, GraphNode, NodeKind
from utils.logger import get_logger

OPERATION_LABELS = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "×",
    BinaryOperator.DIVIDE: "÷",
    BinaryOperator.POWER: "^",
}

UNARY_LABELS = {
    UnaryOperator.PLUS: "+",
    UnaryOperator.MINUS: "−",
}

# Row of the scanned variables in the fallback layout
FALLBACK_LEVEL = 2


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of the layout.

    Attributes:
        level_height: Vertical distance between rows
        node_spacing: Horizontal distance between siblings on the main tree
        root_y: Row of the result node
        center_x: Horizontal centre of the main tree
        expansion_spacing_factor: Spacing multiplier per nesting level of
            expanded sub-trees
        max_expansion_depth: Deepest nesting level that is still expanded
    """

    level_height: float = 120.0
    node_spacing: float = 120.0
    root_y: float = 60.0
    center_x: float = 400.0
    expansion_spacing_factor: float = 0.7
    max_expansion_depth: int = 6


@dataclass
class _Pending:
    """Node whose row is known but whose x waits for its level to fill."""

    id: str
    label: str
    kind: NodeKind
    level: int
    name: Optional[str] = None


def fallback_operation(expression: str) -> str:
    """Guess the operator label of an unparsable formula from its raw text."""
    if "-" in expression:
        return "−"
    if "/" in expression:
        return "÷"
    if "*" in expression:
        return "×"
    return "+"


def toggle_expanded(expanded: Iterable[str], name: str) -> FrozenSet[str]:
    """Return the expansion set with ``name`` added, or removed if present."""
    current = frozenset(expanded)
    if name in current:
        return current - {name}
    return current | {name}


class _LevelWalker(ast.Visitor):
    """Walks one AST, recording nodes per level and the edges between them.

    Identifiers and constants are deduplicated within one walk, each in its
    own key space so a variable named like a generated id stays a separate
    node; operator nodes are always distinct.
    """

    def __init__(
        self, builder: _GraphBuilder, prefix: str, reserved: Dict[Tuple[str, str], str]
    ):
        self.builder = builder
        self.prefix = prefix
        self.registry: Dict[Tuple[str, str], str] = dict(reserved)
        self.order: List[_Pending] = []
        self.levels: Dict[int, List[_Pending]] = {}
        self.variables: List[_Pending] = []
        self._level = 1
        self._op_index = 0

    def walk(self, node: ast.Expr, level: int) -> str:
        """Place ``node`` on ``level`` and return its node id."""
        self._level = level
        return node.accept(self)

    def _place(
        self,
        key: Optional[Tuple[str, str]],
        text: str,
        label: str,
        kind: NodeKind,
        name: Optional[str] = None,
    ) -> str:
        if key is not None and key in self.registry:
            return self.registry[key]

        base = f"{self.prefix}_{text}" if self.prefix else text
        pending = _Pending(self.builder.claim_node_id(base), label, kind, self._level, name)
        if key is not None:
            self.registry[key] = pending.id
        self.order.append(pending)
        self.levels.setdefault(pending.level, []).append(pending)
        if name is not None:
            self.variables.append(pending)
        return pending.id

    def visit_number(self, n: ast.Number) -> str:
        text = format_number(n.value)
        return self._place(("const", text), f"const_{text}", text, NodeKind.VARIABLE)

    def visit_identifier(self, n: ast.Identifier) -> str:
        return self._place(("var", n.name), n.name, n.name, NodeKind.VARIABLE, name=n.name)

    def visit_binary(self, n: ast.BinaryOp) -> str:
        level = self._level
        op_id = self._next_operation(OPERATION_LABELS[n.op])
        left_id = self.walk(n.left, level + 1)
        right_id = self.walk(n.right, level + 1)
        self.builder.add_edge(left_id, op_id, EdgeKind.INPUT)
        self.builder.add_edge(right_id, op_id, EdgeKind.INPUT)
        return op_id

    def visit_unary(self, n: ast.UnaryOp) -> str:
        level = self._level
        op_id = self._next_operation(UNARY_LABELS[n.op])
        operand_id = self.walk(n.operand, level + 1)
        self.builder.add_edge(operand_id, op_id, EdgeKind.INPUT)
        return op_id

    def _next_operation(self, label: str) -> str:
        text = f"op_{self._op_index}"
        self._op_index += 1
        return self._place(None, text, label, NodeKind.OPERATION)

    def finalize(
        self, center_x: float, base_y: float, spacing: float, level_height: float
    ) -> Dict[str, Tuple[float, float]]:
        """Recentre every level and emit the nodes in walk order.

        Returns:
            Final (x, y) of every node placed by this walk
        """
        positions: Dict[str, Tuple[float, float]] = {}
        for level, row in self.levels.items():
            offset = (len(row) - 1) / 2
            for index, pending in enumerate(row):
                positions[pending.id] = (
                    center_x + (index - offset) * spacing,
                    base_y + level * level_height,
                )

        for pending in self.order:
            x, y = positions[pending.id]
            self.builder.nodes.append(GraphNode(pending.id, pending.label, pending.kind, x, y))
        return positions


class _GraphBuilder:
    """Single-use accumulator for one layout call."""

    def __init__(self, formulas: Mapping[str, str], config: LayoutConfig):
        self.formulas = formulas
        self.config = config
        self.nodes: List[GraphNode] = []
        self.edges: List[GraphEdge] = []
        self._node_ids: set = set()
        self._edge_ids: set = set()
        self._suffix = 0

    def _unique(self, base: str, taken: set) -> str:
        candidate = base
        while candidate in taken:
            self._suffix += 1
            candidate = f"{base}_{self._suffix}"
        taken.add(candidate)
        return candidate

    def claim_node_id(self, base: str) -> str:
        return self._unique(base, self._node_ids)

    def add_edge(
        self, source: str, target: str, kind: EdgeKind, operation: Optional[str] = None
    ) -> None:
        edge_id = self._unique(f"{source}-{target}", self._edge_ids)
        self.edges.append(GraphEdge(edge_id, source, target, kind, operation))

    def has_formula(self, name: str) -> bool:
        return has_formula(self.formulas, name)

    def build(self, formula_name: str, expanded: FrozenSet[str]) -> ExpressionGraph:
        logger = get_logger()
        config = self.config

        if not self.has_formula(formula_name):
            logger.debug(f"No formula named '{formula_name}', empty layout")
            return ExpressionGraph()

        result_id = self.claim_node_id(formula_name)
        self.nodes.append(
            GraphNode(result_id, formula_name, NodeKind.RESULT, config.center_x, config.root_y)
        )

        expression = self.formulas[formula_name]
        parsed = analyze(expression)
        if parsed.ast is None:
            self._flat_layout(result_id, expression, parsed.variables)
            return ExpressionGraph(self.nodes, self.edges)

        walker = _LevelWalker(self, "", {("var", formula_name): result_id})
        root_id = walker.walk(parsed.ast, 1)
        if root_id != result_id:
            self.add_edge(root_id, result_id, EdgeKind.OUTPUT)

        positions = walker.finalize(
            config.center_x, config.root_y, config.node_spacing, config.level_height
        )

        nested_spacing = config.node_spacing * config.expansion_spacing_factor
        for pending in walker.variables:
            if pending.name in expanded:
                x, y = positions[pending.id]
                self._expand(
                    pending.id, pending.name, x, y, nested_spacing, 1, frozenset({formula_name})
                )

        logger.debug(
            f"Laid out '{formula_name}': {len(self.nodes)} nodes, {len(self.edges)} edges"
        )
        return ExpressionGraph(self.nodes, self.edges)

    def _expand(
        self,
        anchor_id: str,
        name: str,
        anchor_x: float,
        anchor_y: float,
        spacing: float,
        depth: int,
        visited: FrozenSet[str],
    ) -> None:
        logger = get_logger()
        config = self.config

        if name in visited:
            logger.expansion_skipped(name, "already on this branch")
            return
        if depth > config.max_expansion_depth:
            logger.expansion_skipped(name, f"nesting deeper than {config.max_expansion_depth}")
            return
        if not self.has_formula(name):
            return

        parsed = analyze(self.formulas[name])
        if parsed.ast is None:
            logger.expansion_skipped(name, "formula does not parse")
            return

        branch = visited | {name}
        walker = _LevelWalker(self, anchor_id, {})
        root_id = walker.walk(parsed.ast, 1)
        self.add_edge(root_id, anchor_id, EdgeKind.OUTPUT)

        # Sub-trees never share a row with nodes placed before them
        base_y = max(anchor_y, max(node.y for node in self.nodes))
        positions = walker.finalize(anchor_x, base_y, spacing, config.level_height)

        for pending in walker.variables:
            if self.has_formula(pending.name):
                x, y = positions[pending.id]
                self._expand(
                    pending.id,
                    pending.name,
                    x,
                    y,
                    spacing * config.expansion_spacing_factor,
                    depth + 1,
                    branch,
                )

    def _flat_layout(
        self, result_id: str, expression: str, variables: Tuple[str, ...]
    ) -> None:
        config = self.config
        operation = fallback_operation(expression)
        offset = (len(variables) - 1) / 2
        y = config.root_y + FALLBACK_LEVEL * config.level_height

        for index, variable in enumerate(variables):
            node_id = self.claim_node_id(variable)
            x = config.center_x + (index - offset) * config.node_spacing
            self.nodes.append(GraphNode(node_id, variable, NodeKind.VARIABLE, x, y))
            self.add_edge(node_id, result_id, EdgeKind.DIRECT, operation)


def layout(
    formula_name: str,
    formulas: Mapping[str, str],
    expanded: Iterable[str] = frozenset(),
    config: Optional[LayoutConfig] = None,
) -> ExpressionGraph:
    """Lay out a formula as a positioned node/edge graph.

    Args:
        formula_name: Name of the formula to draw
        formulas: Immutable snapshot of name -> formula text
        expanded: Variable names whose own formulas are drawn inline
        config: Layout geometry, defaults to LayoutConfig()

    Returns:
        ExpressionGraph; empty when ``formula_name`` has no formula

    Example:
        >>> graph = layout("Total", {"Total": "a + b"})
        >>> [node.id for node in graph.nodes]
        ['Total', 'op_0', 'a', 'b']
    """
    builder = _GraphBuilder(formulas, config or LayoutConfig())
    return builder.build(formula_name, frozenset(expanded))
