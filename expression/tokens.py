# expression/tokens.py
# This file is part of Formulary - A Formula Expression Engine
#
# Token model shared by the lexer and the parser

"""Token types produced by the formula lexer.

A formula is reduced to a flat, ordered sequence of tokens. Numbers carry
their float value, identifiers and operators their source text.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenKind(Enum):
    """Token categories recognised in arithmetic formulas."""

    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


# Operator spellings accepted by the lexer
OPERATORS = ("+", "-", "*", "/", "^", "**")


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit of a formula.

    Attributes:
        kind: Token category
        value: Float for numbers, source text otherwise
        position: Character offset of the token in the source formula
    """

    kind: TokenKind
    value: Union[float, str]
    position: int = 0

    def is_operator(self, *symbols: str) -> bool:
        """Check whether this token is one of the given operator symbols."""
        return self.kind is TokenKind.OPERATOR and self.value in symbols

    def __str__(self) -> str:
        return str(self.value)
