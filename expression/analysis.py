# expression/analysis.py
# This file is part of Formulary - A Formula Expression Engine
#
# Formula analysis with a conservative fallback for unparsable input

"""One-stop analysis of a formula string.

``analyze`` parses the formula and reports its variables, operators and AST.
When the formula does not parse, the failure is logged and a regex scan of the
raw text stands in for the AST so that dependency trees and layouts can still
render something for a malformed formula.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from .ast_nodes import Expr
from .exceptions import LexError, ParseError
from .grammar import parse_tokens
from .lexer import tokenize
from .variables import collect_operators, ordered_variables
from utils.logger import get_logger

# Words the fallback scan never treats as variables
RESERVED_WORDS = frozenset({"and", "or", "not"})

_OPERATOR_SCAN = re.compile(r"\*\*|[+\-*/^%]")
_PAREN_SPLIT = re.compile(r"([()])")


@dataclass(frozen=True)
class ParsedExpression:
    """Result of analysing a formula string.

    Attributes:
        variables: Referenced names in first-discovery order
        operators: Distinct binary operator symbols
        tokens: Whitespace and parenthesis separated pieces of the raw text
        ast: Parsed tree, or None when the formula did not parse
    """

    variables: Tuple[str, ...]
    operators: FrozenSet[str]
    tokens: Tuple[str, ...]
    ast: Optional[Expr] = None

    @property
    def parsed(self) -> bool:
        return self.ast is not None


def split_raw_tokens(expression: str) -> List[str]:
    """Split raw formula text on whitespace, keeping parentheses as pieces."""
    return _PAREN_SPLIT.sub(r" \1 ", expression).split()


def scan_variables(expression: str) -> List[str]:
    """Regex scan for identifier-like words, used when parsing fails."""
    found = {}
    for match in re.finditer(r"[A-Za-z_][A-Za-z0-9_]*", expression):
        word = match.group(0)
        # Skip the tails of numbers such as the "e5" in "1e5"
        if match.start() > 0 and re.match(r"[0-9.]", expression[match.start() - 1]):
            continue
        if word.lower() not in RESERVED_WORDS:
            found.setdefault(word, None)
    return list(found)


def scan_operators(expression: str) -> FrozenSet[str]:
    """Regex scan for operator characters; ``^`` is reported as ``**``."""
    return frozenset(
        "**" if symbol == "^" else symbol for symbol in _OPERATOR_SCAN.findall(expression)
    )


def analyze(expression: str) -> ParsedExpression:
    """Analyse a formula, degrading to a regex scan on syntax errors.

    Args:
        expression: Raw formula text

    Returns:
        ParsedExpression; ``ast`` is None when the fallback scan was used
    """
    logger = get_logger()
    raw_tokens = tuple(split_raw_tokens(expression))

    try:
        tree = parse_tokens(tokenize(expression))
    except (ParseError, LexError) as exc:
        logger.parse_fallback(expression, str(exc))
        return ParsedExpression(
            variables=tuple(scan_variables(expression)),
            operators=scan_operators(expression),
            tokens=raw_tokens,
            ast=None,
        )

    return ParsedExpression(
        variables=tuple(ordered_variables(tree)),
        operators=collect_operators(tree),
        tokens=raw_tokens,
        ast=tree,
    )
