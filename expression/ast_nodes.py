# expression/ast_nodes.py
# This file is part of Formulary - A Formula Expression Engine
#
# Abstract Syntax Tree node classes for arithmetic formula representation

"""AST node classes for representing parsed arithmetic formulas.

This module defines immutable and hashable node classes used to construct tree
representations of calculation formulas. The AST is a strict binary/unary tree:
every child is owned by exactly one parent and identifiers stay opaque strings
that are never resolved during parsing.

Node Types:
    Number, Identifier: Leaves (numeric literals and named quantities)
    BinaryOp: Add, Subtract, Multiply, Divide, Power
    UnaryOp: prefix Plus and Minus

All nodes support the visitor design pattern for traversal and transformation.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Protocol


class BinaryOperator(Enum):
    """Binary arithmetic operators with their canonical symbols."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "**"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> BinaryOperator:
        """Map a lexer operator spelling onto its operator (``^`` is power)."""
        if symbol == "^":
            return cls.POWER
        return cls(symbol)


class UnaryOperator(Enum):
    """Prefix sign operators."""

    PLUS = "+"
    MINUS = "-"

    @property
    def symbol(self) -> str:
        return self.value


def format_number(value: float) -> str:
    """Render a float the way it would be typed in a formula.

    Integral values drop the fractional part and exponents are expanded so
    the text always tokenizes back into a single number.
    """
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Visitor(Protocol):
    """Interface for AST visitors implementing the visitor design pattern.

    Concrete visitors must implement visit methods for each AST node type
    to enable type-safe traversal and transformation operations.
    """

    def visit_number(self, n: Number): ...

    def visit_identifier(self, n: Identifier): ...

    def visit_binary(self, n: BinaryOp): ...

    def visit_unary(self, n: UnaryOp): ...


@dataclass(frozen=True, slots=True)
class Expr:
    """Base class for all AST nodes in arithmetic formulas.

    Provides the foundation for immutable expression trees with visitor pattern
    support. All concrete node types inherit from this class and must implement
    the accept method for visitor dispatch and __str__ for string representation.
    """

    def accept(self, v: Visitor):
        """Dispatch to the appropriate visitor method.

        Args:
            v: Visitor instance to process this node

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def __str__(self) -> str:
        """Return a fully parenthesised formula for this node.

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Leaf(Expr):
    """Terminal node: a numeric literal or an identifier."""


@dataclass(frozen=True, slots=True)
class Number(Leaf):
    """Numeric literal.

    Attributes:
        value: The literal's value
    """

    value: float

    def accept(self, v: Visitor):
        return v.visit_number(self)

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True, slots=True)
class Identifier(Leaf):
    """Named quantity such as a parameter or another calculation.

    Attributes:
        name: The identifier string, never resolved by the parser
    """

    name: str

    def accept(self, v: Visitor):
        return v.visit_identifier(self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class BinaryOp(Expr):
    """Binary arithmetic operation.

    Attributes:
        op: The operator kind
        left: Left operand
        right: Right operand
    """

    op: BinaryOperator
    left: Expr
    right: Expr

    def accept(self, v: Visitor):
        return v.visit_binary(self)

    def __str__(self) -> str:
        return f"({self.left} {self.op.symbol} {self.right})"


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Prefix sign applied to an operand.

    Attributes:
        op: PLUS or MINUS
        operand: The signed expression
    """

    op: UnaryOperator
    operand: Expr

    def accept(self, v: Visitor):
        return v.visit_unary(self)

    def __str__(self) -> str:
        return f"({self.op.symbol}{self.operand})"
