# expression/variables.py
# This file is part of Formulary - A Formula Expression Engine
#
# AST visitors that discover the quantities and operators a formula uses

"""Dependency extraction over parsed formulas.

The collectors walk the AST post-order, left operand before right operand.
Variable names are kept in first-discovery order so that dependency trees
and layouts built from them are reproducible.
"""

from __future__ import annotations
from typing import Dict, FrozenSet, List, Set

from . import ast_nodes as ast


class VariableCollector(ast.Visitor):
    """Collects identifier names in first-discovery order.

    Attributes:
        _seen: Insertion-ordered record of discovered names
    """

    def __init__(self):
        self._seen: Dict[str, None] = {}

    def collect(self, root: ast.Expr) -> List[str]:
        """Return the distinct identifier names below ``root``."""
        self._seen.clear()
        root.accept(self)
        return list(self._seen)

    def visit_number(self, n: ast.Number) -> None:
        return None

    def visit_identifier(self, n: ast.Identifier) -> None:
        self._seen.setdefault(n.name, None)

    def visit_binary(self, n: ast.BinaryOp) -> None:
        n.left.accept(self)
        n.right.accept(self)

    def visit_unary(self, n: ast.UnaryOp) -> None:
        n.operand.accept(self)


class OperatorCollector(ast.Visitor):
    """Collects the symbols of the binary operators used in a formula."""

    def __init__(self):
        self._symbols: Set[str] = set()

    def collect(self, root: ast.Expr) -> FrozenSet[str]:
        self._symbols = set()
        root.accept(self)
        return frozenset(self._symbols)

    def visit_number(self, n: ast.Number) -> None:
        return None

    def visit_identifier(self, n: ast.Identifier) -> None:
        return None

    def visit_binary(self, n: ast.BinaryOp) -> None:
        n.left.accept(self)
        n.right.accept(self)
        self._symbols.add(n.op.symbol)

    def visit_unary(self, n: ast.UnaryOp) -> None:
        n.operand.accept(self)


def ordered_variables(root: ast.Expr) -> List[str]:
    """List the free variable names of a formula in first-discovery order.

    Args:
        root: Parsed formula

    Returns:
        Distinct identifier names, leftmost occurrence first
    """
    return VariableCollector().collect(root)


def extract_variables(root: ast.Expr) -> Set[str]:
    """Return the set of free variable names referenced by a formula.

    Numeric leaves are ignored and repeated names collapse. Total over any
    AST produced by the parser.

    Example:
        >>> extract_variables(parse("(Capex + Opex) * Capex"))
        {'Capex', 'Opex'}
    """
    return set(ordered_variables(root))


def collect_operators(root: ast.Expr) -> FrozenSet[str]:
    """Return the distinct binary operator symbols (``+ - * / **``) in a formula."""
    return OperatorCollector().collect(root)
