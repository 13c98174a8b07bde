# expression/lexer.py
# This file is part of Formulary - A Formula Expression Engine
#
# Lexical analyzer for arithmetic formula tokenization using SLY

"""Lexical analyzer for arithmetic formula strings.

This module breaks formula strings into tokens for parser consumption.
Any maximal run of characters that is neither whitespace, an operator nor a
parenthesis becomes a single token: a number when it reads as a decimal
literal, an identifier otherwise. Identifier syntax is checked later by the
parser so that malformed names are reported with their position.

Supported Tokens:
- Operators: +, -, *, /, ^, ** (matched before *)
- Parentheses: (, )
- Numbers: 12, 3.5, .25, 1e6
- Identifiers: every other run of characters
- Whitespace: ignored during tokenization
"""

import re
from typing import List

from sly import Lexer
from .exceptions import LexError
from .tokens import OPERATORS, Token, TokenKind
from utils.logger import get_logger

NUMBER_PATTERN = re.compile(r"(\d+\.?\d*|\.\d+)([eE]\d+)?")

# Longest spelling first: "**" must win over "*". Underscore-prefixed because
# SLY resolves bare uppercase names in the lexer class body as token names.
_OPERATOR_PATTERN = "|".join(re.escape(op) for op in sorted(OPERATORS, key=len, reverse=True))


class FormulaLexer(Lexer):
    """SLY-based lexer for arithmetic formulas.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
    """

    # Valid token types for parser recognition
    tokens = {
        "NUMBER",
        "IDENTIFIER",
        "OPERATOR",
        "LPAREN",
        "RPAREN",
    }

    # Whitespace characters to ignore
    ignore = " \t"
    ignore_whitespace = r"\s+"

    OPERATOR = _OPERATOR_PATTERN
    LPAREN = r"\("
    RPAREN = r"\)"

    @_(r"[^\s+\-*/^()]+")
    def IDENTIFIER(self, t):
        """Classify a character run as a number or an identifier."""
        if NUMBER_PATTERN.fullmatch(t.value):
            t.type = "NUMBER"
            t.value = float(t.value)
        return t

    def error(self, t):
        """Handle characters that match no token pattern.

        Args:
            t: SLY token object containing error context

        Raises:
            LexError: Always raised with character and position information
        """
        illegal_char = t.value[0]
        error_pos = self.index

        get_logger().debug(f"Illegal character '{illegal_char}' at position {error_pos}")

        # Skip the illegal character
        self.index += 1

        raise LexError(
            f"Illegal character '{illegal_char}' encountered at position {error_pos}"
        )


def tokenize(text: str) -> List[Token]:
    """Convert a formula string into an ordered token list.

    Args:
        text: Formula source

    Returns:
        Tokens in left-to-right source order

    Raises:
        LexError: A produced token is empty or a character cannot be classified
    """
    result = []
    for raw in FormulaLexer().tokenize(text):
        if raw.value == "":
            raise LexError(f"Empty token produced at position {raw.index}")
        result.append(Token(TokenKind(raw.type), raw.value, raw.index))

    get_logger().debug(f"Tokenized '{text}' into {len(result)} tokens")
    return result
