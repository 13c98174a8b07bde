# expression/grammar.py
# This file is part of Formulary - A Formula Expression Engine
#
# Recursive-descent parser for arithmetic formulas

"""Arithmetic grammar implemented as precedence-climbing recursive descent.

The parser constructs Abstract Syntax Trees from token sequences provided by
the lexer. Each binary tier loops rather than recursing on its right operand,
so every binary operator, power included, folds left to right.

Grammar:
    Expr    := AddSub
    AddSub  := MulDiv (('+'|'-') MulDiv)*
    MulDiv  := Power (('*'|'/') Power)*
    Power   := Unary (('^'|'**') Unary)*
    Unary   := ('+'|'-') Unary | Factor
    Factor  := Number | Identifier | '(' Expr ')'

Operator Precedence (lowest to highest):
- '+', '-': left-associative
- '*', '/': left-associative
- '^', '**': left-associative
- unary '+', '-': prefix, binds to the following factor
"""

import re
from typing import List, Optional, Sequence

from .ast_nodes import (
    BinaryOp,
    BinaryOperator,
    Expr,
    Identifier,
    Number,
    UnaryOp,
    UnaryOperator,
)
from .exceptions import MissingCloseParen, TrailingTokens, UnexpectedToken
from .tokens import Token, TokenKind
from utils.logger import get_logger

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class _FormulaParser:
    """Single-use recursive-descent parser over a token sequence.

    Attributes:
        tokens: Token sequence being parsed
        pos: Index of the next unconsumed token
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens: List[Token] = list(tokens)
        self.pos = 0

    def parse(self) -> Expr:
        """Parse the whole token sequence into one expression.

        Returns:
            Root AST node

        Raises:
            UnexpectedToken: A factor position holds an invalid token or input ends
            MissingCloseParen: An opening parenthesis is never closed
            TrailingTokens: Tokens remain after a complete expression
        """
        result = self._expression()
        if self.pos < len(self.tokens):
            raise TrailingTokens(self.tokens[self.pos :], self.pos)
        return result

    def _peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _accept_operator(self, *symbols: str) -> Optional[str]:
        """Consume the next token if it is one of the given operators."""
        token = self._peek()
        if token is not None and token.is_operator(*symbols):
            self.pos += 1
            return token.value
        return None

    def _expression(self) -> Expr:
        return self._add_sub()

    def _add_sub(self) -> Expr:
        left = self._mul_div()
        symbol = self._accept_operator("+", "-")
        while symbol is not None:
            left = BinaryOp(BinaryOperator.from_symbol(symbol), left, self._mul_div())
            symbol = self._accept_operator("+", "-")
        return left

    def _mul_div(self) -> Expr:
        left = self._power()
        symbol = self._accept_operator("*", "/")
        while symbol is not None:
            left = BinaryOp(BinaryOperator.from_symbol(symbol), left, self._power())
            symbol = self._accept_operator("*", "/")
        return left

    def _power(self) -> Expr:
        left = self._unary()
        symbol = self._accept_operator("^", "**")
        while symbol is not None:
            left = BinaryOp(BinaryOperator.POWER, left, self._unary())
            symbol = self._accept_operator("^", "**")
        return left

    def _unary(self) -> Expr:
        symbol = self._accept_operator("+", "-")
        if symbol is not None:
            return UnaryOp(UnaryOperator(symbol), self._unary())
        return self._factor()

    def _factor(self) -> Expr:
        token = self._peek()
        if token is None:
            raise UnexpectedToken(None, self.pos)

        if token.kind is TokenKind.LPAREN:
            self.pos += 1
            inner = self._expression()
            closing = self._peek()
            if closing is None or closing.kind is not TokenKind.RPAREN:
                raise MissingCloseParen(self.pos)
            self.pos += 1
            return inner

        if token.kind is TokenKind.NUMBER:
            self.pos += 1
            return Number(token.value)

        if token.kind is TokenKind.IDENTIFIER and IDENTIFIER_PATTERN.fullmatch(
            token.value
        ):
            self.pos += 1
            return Identifier(token.value)

        raise UnexpectedToken(token, self.pos)


def parse_tokens(tokens: Sequence[Token]) -> Expr:
    """Parse a token sequence into an Abstract Syntax Tree.

    Args:
        tokens: Output of the lexer

    Returns:
        Root AST node representing the formula

    Raises:
        ParseError: One of UnexpectedToken, MissingCloseParen, TrailingTokens
    """
    logger = get_logger()
    result = _FormulaParser(tokens).parse()
    logger.debug(f"Successfully parsed {len(tokens)} tokens into {type(result).__name__}")
    return result
