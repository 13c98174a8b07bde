# dependency/formula_map.py
# This file is part of Formulary - A Formula Expression Engine
#
# Copy-on-write helpers for name -> formula snapshots

"""Helpers that derive new formula maps without touching the original.

A formula map is an immutable snapshot owned by the caller. Every helper here
returns a fresh dictionary, so callers version their snapshots explicitly.
"""

from typing import Dict, Mapping, Optional, Tuple

from expression import extract_variables, parse
from .tree import PLACEHOLDER_SUFFIX
from utils.logger import get_logger


def placeholder_for(name: str) -> str:
    """Placeholder formula text for a parameter without a formula."""
    return f"{name}{PLACEHOLDER_SUFFIX}"


def seed_formulas(name: str, expression: str) -> Dict[str, str]:
    """Start a formula map from one formula and placeholders for its inputs.

    Args:
        name: Name of the initial formula
        expression: Its formula text

    Returns:
        New map with ``name`` and a placeholder for every dependency

    Raises:
        ParseError: The initial formula is malformed
    """
    formulas = {name: expression}
    for dependency in sorted(extract_variables(parse(expression))):
        formulas.setdefault(dependency, placeholder_for(dependency))
    return formulas


def add_formula(
    formulas: Mapping[str, str], name: str, expression: str
) -> Dict[str, str]:
    """Return a copy of ``formulas`` with a validated new formula.

    Args:
        formulas: Current snapshot
        name: New formula name, not yet present
        expression: Formula text, validated with the parser

    Returns:
        New map including the added formula

    Raises:
        ValueError: Name or expression is empty, or the name already exists
        ParseError: The expression is malformed
    """
    if not name or not expression:
        raise ValueError("Formula name and expression are both required")
    if name in formulas:
        raise ValueError(f"Formula '{name}' already exists")

    parse(expression)

    updated = dict(formulas)
    updated[name] = expression
    get_logger().debug(f"Added formula '{name}' = {expression}")
    return updated


def remove_formula(
    formulas: Mapping[str, str], name: str
) -> Tuple[Dict[str, str], Optional[str]]:
    """Return a copy without ``name`` and the formula to show next.

    The next root is the first remaining formula name, or None when the map
    is empty.
    """
    updated = {key: value for key, value in formulas.items() if key != name}
    next_root = next(iter(updated), None)
    return updated, next_root
