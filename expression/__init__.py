# expression/__init__.py
# This file is part of Formulary - A Formula Expression Engine
#
# Formula tokenizing, parsing and dependency extraction components

"""Arithmetic formula parsing for solution configuration calculations.

This package turns the textual formulas of calculations (for example
``(Capex + Opex) * (1 + Inflation_Rate)``) into abstract syntax trees and
reports which named quantities each formula depends on. It is the shared
foundation of the dependency-tree, differentiation and layout components.

Core Functions:
    tokenize: Converts formula strings into token lists
    parse: Converts formula strings (or token lists) into ASTs
    extract_variables: Set of names referenced by an AST
    analyze: Parse with a regex fallback for malformed formulas

Supported Syntax:
    - Decimal numbers and identifiers matching [A-Za-z_][A-Za-z0-9_]*
    - Binary operators + - * / ^ ** (all left-associative)
    - Unary prefix + and -
    - Parenthetical grouping

Example:
    >>> from expression import parse, extract_variables
    >>> ast = parse("(Capex + Opex) * (1 + Inflation_Rate)")
    >>> sorted(extract_variables(ast))
    ['Capex', 'Inflation_Rate', 'Opex']
"""

from typing import Sequence, Union

from .analysis import ParsedExpression, analyze
from .ast_nodes import (
    BinaryOp,
    BinaryOperator,
    Expr,
    Identifier,
    Leaf,
    Number,
    UnaryOp,
    UnaryOperator,
)
from .exceptions import (
    LexError,
    MissingCloseParen,
    ParseError,
    TrailingTokens,
    UnexpectedToken,
)
from .grammar import parse_tokens
from .lexer import tokenize
from .tokens import Token, TokenKind
from .variables import collect_operators, extract_variables, ordered_variables
from utils.logger import get_logger


def parse(source: Union[str, Sequence[Token]]) -> Expr:
    """Parse a formula into Abstract Syntax Tree representation.

    Accepts either the raw formula text or a token list produced by
    ``tokenize``. A fresh parser is used for every call, so parsing is
    stateless and safe to call from several threads.

    Args:
        source: Formula string or token sequence

    Returns:
        Root AST node representing the parsed formula

    Raises:
        ParseError: Formula syntax is malformed

    Example:
        >>> str(parse("a - b - c"))
        '((a - b) - c)'
    """
    logger = get_logger()
    logger.debug(f"Parsing formula: {source}")

    try:
        tokens = tokenize(source) if isinstance(source, str) else list(source)
        result = parse_tokens(tokens)
        logger.debug(
            f"Formula parsed successfully into AST with type: {type(result).__name__}"
        )
        return result

    except ParseError:
        logger.debug("ParseError encountered during formula parsing")
        raise

    except Exception as exc:
        logger.debug(f"Unexpected parsing error: {type(exc).__name__}: {exc}")
        raise ParseError(str(exc)) from exc


__all__ = [
    "tokenize",
    "parse",
    "parse_tokens",
    "extract_variables",
    "ordered_variables",
    "collect_operators",
    "analyze",
    "ParsedExpression",
    "Token",
    "TokenKind",
    "Expr",
    "Leaf",
    "Number",
    "Identifier",
    "BinaryOp",
    "BinaryOperator",
    "UnaryOp",
    "UnaryOperator",
    "LexError",
    "ParseError",
    "UnexpectedToken",
    "MissingCloseParen",
    "TrailingTokens",
]
