# tests/expression_tests/test_precedence.py
# This file is part of Formulary - A Formula Expression Engine
#
# Test suite for formula parser operator precedence and associativity

"""Test suite for formula parser operator precedence and associativity.

Operator precedence (highest to lowest):
1. () - parentheses for grouping
2. unary + and -
3. ^ and ** (left-associative)
4. * and / (left-associative)
5. + and - (left-associative)
"""

import pytest
from expression import parse
from expression.ast_nodes import (
    BinaryOp,
    BinaryOperator,
    Identifier,
    Number,
    UnaryOp,
    UnaryOperator,
)
from utils.logger import get_logger

ADD = BinaryOperator.ADD
SUB = BinaryOperator.SUBTRACT
MUL = BinaryOperator.MULTIPLY
DIV = BinaryOperator.DIVIDE
POW = BinaryOperator.POWER

a, b, c, d = (Identifier(name) for name in "abcd")


class TestFormulaPrecedence:
    """Test cases for operator precedence and associativity."""

    def setup_method(self):
        """Initialize logger for each test method."""
        self.logger = get_logger()

    # Test cases: (input_formula, expected_ast_structure)
    PRECEDENCE_TEST_CASES = [
        # Multiplicative binds tighter than additive
        ("a + b * c", BinaryOp(ADD, a, BinaryOp(MUL, b, c))),
        ("a * b + c", BinaryOp(ADD, BinaryOp(MUL, a, b), c)),
        ("a - b / c", BinaryOp(SUB, a, BinaryOp(DIV, b, c))),
        # Power binds tighter than multiplicative
        ("a * b ^ c", BinaryOp(MUL, a, BinaryOp(POW, b, c))),
        ("a ** b / c", BinaryOp(DIV, BinaryOp(POW, a, b), c)),
        # Left associativity on every binary tier
        ("a - b - c", BinaryOp(SUB, BinaryOp(SUB, a, b), c)),
        ("a / b / c", BinaryOp(DIV, BinaryOp(DIV, a, b), c)),
        ("a ^ b ^ c", BinaryOp(POW, BinaryOp(POW, a, b), c)),
        ("a ** b ^ c", BinaryOp(POW, BinaryOp(POW, a, b), c)),
        ("a + b - c + d", BinaryOp(ADD, BinaryOp(SUB, BinaryOp(ADD, a, b), c), d)),
        # Unary operators bind to the following factor
        ("-a", UnaryOp(UnaryOperator.MINUS, a)),
        ("+a", UnaryOp(UnaryOperator.PLUS, a)),
        ("--a", UnaryOp(UnaryOperator.MINUS, UnaryOp(UnaryOperator.MINUS, a))),
        ("-a ^ b", BinaryOp(POW, UnaryOp(UnaryOperator.MINUS, a), b)),
        ("a ^ -b", BinaryOp(POW, a, UnaryOp(UnaryOperator.MINUS, b))),
        ("a * -b", BinaryOp(MUL, a, UnaryOp(UnaryOperator.MINUS, b))),
        ("a - -b", BinaryOp(SUB, a, UnaryOp(UnaryOperator.MINUS, b))),
        # Parentheses overriding precedence
        ("(a + b) * c", BinaryOp(MUL, BinaryOp(ADD, a, b), c)),
        ("a - (b - c)", BinaryOp(SUB, a, BinaryOp(SUB, b, c))),
        ("a ^ (b ^ c)", BinaryOp(POW, a, BinaryOp(POW, b, c))),
        ("-(a + b)", UnaryOp(UnaryOperator.MINUS, BinaryOp(ADD, a, b))),
        # Numbers as operands
        ("2 * a + 1", BinaryOp(ADD, BinaryOp(MUL, Number(2.0), a), Number(1.0))),
    ]

    @pytest.mark.parametrize("formula, expected_ast", PRECEDENCE_TEST_CASES)
    def test_precedence_and_associativity(self, formula, expected_ast):
        """Test that formulas parse into the expected tree shape."""
        self.logger.debug(f"Testing precedence for: {formula}")
        actual_ast = parse(formula)
        assert actual_ast == expected_ast, (
            f"Precedence test failed for: {formula}\n"
            f"Expected: {expected_ast}\n"
            f"Actual:   {actual_ast}"
        )

    def test_addition_never_groups_before_multiplication(self):
        """'a + b * c' must not parse as '(a + b) * c'."""
        assert parse("a + b * c") != parse("(a + b) * c")

    def test_string_form_shows_grouping(self):
        """The fully parenthesised string makes the grouping explicit."""
        assert str(parse("a - b - c")) == "((a - b) - c)"
        assert str(parse("a + b * c")) == "(a + (b * c))"
        assert str(parse("-a ^ 2")) == "((-a) ** 2)"
