# expression/exceptions.py
# This file is part of Formulary - A Formula Expression Engine
#
# Custom exceptions for formula tokenization and parsing

"""Domain-specific exceptions for formula processing.

This module defines exceptions that can be raised while tokenizing and
parsing arithmetic formulas. Callers that must always produce a result
(dependency trees, layouts) catch ``ParseError`` at their boundary and
degrade instead of propagating it.
"""

from __future__ import annotations
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token


class LexError(RuntimeError):
    """Exception raised when the lexer meets a character it cannot classify.

    The tokenizer accepts any run of non-operator characters, so this error
    does not surface for ordinary input.
    """

    pass


class ParseError(RuntimeError):
    """Exception raised when formula parsing fails due to syntax errors.

    Base class of the specific parse failures below. Raised directly only
    when an unexpected internal error is wrapped by ``expression.parse``.
    """

    pass


class UnexpectedToken(ParseError):
    """A token that cannot start a factor, or the input ended too early.

    Attributes:
        token: Offending token, or None at end of input
        position: Index of the token within the token sequence
    """

    def __init__(self, token: Optional[Token], position: int):
        self.token = token
        self.position = position
        if token is None:
            message = "Unexpected end of expression"
        else:
            message = f"Unexpected token '{token.value}' at position {position}"
        super().__init__(message)


class MissingCloseParen(ParseError):
    """An opening parenthesis was never closed."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Missing closing parenthesis at position {position}")


class TrailingTokens(ParseError):
    """Tokens remain after a complete expression was parsed.

    Attributes:
        tokens: The unconsumed tokens
        position: Index of the first unconsumed token
    """

    def __init__(self, tokens: Sequence[Token], position: int):
        self.tokens = tuple(tokens)
        self.position = position
        remainder = " ".join(str(token.value) for token in self.tokens)
        super().__init__(f"Unexpected tokens after expression: {remainder}")
