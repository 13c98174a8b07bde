# calculus/differentiator.py
# This file is part of Formulary - A Formula Expression Engine
#
# Textual symbolic differentiation of calculation formulas

"""Approximate symbolic differentiation working on formula text.

Unlike the rest of the engine this module does not walk the AST: it splits
the whitespace-free formula on operator characters. The split ignores
operator precedence inside nested terms, so results for complex formulas are
approximations. Shapes the rules below cannot simplify come back in the
unresolved form ``d(expr)/d(variable)`` rather than as an error.

Rules, checked in order:
    1. variable absent -> "0"; expression is the variable -> "1"
    2. '+' or '-' present -> differentiate each term, drop zero terms
    3. exactly two '*' factors -> product rule with trivial factors folded
    4. parenthesised group -> differentiate its interior, keep a coefficient
    5. anything else -> "d(expr)/d(variable)"
"""

import re

from utils.logger import get_logger

_SIGN_SPLIT = re.compile(r"([+-])")
_FIRST_GROUP = re.compile(r"\(([^)]+)\)")

# Stands in for the extracted group while looking for a coefficient
_GROUP_MARKER = "INNER"


def unresolved(expr: str, variable: str) -> str:
    """The placeholder returned for shapes the engine does not simplify."""
    return f"d({expr})/d({variable})"


def _differentiate_terms(expr: str, variable: str) -> str:
    result = ""
    sign = ""
    for part in _SIGN_SPLIT.split(expr):
        if not part:
            continue
        if part in ("+", "-"):
            sign = part
            continue

        derivative = differentiate(part, variable)
        if derivative == "0":
            continue
        if result:
            result += f" {sign or '+'} "
        elif sign == "-":
            result = "-"
        result += derivative
    return result or "0"


def _differentiate_product(expr: str, variable: str):
    factors = expr.split("*")
    if len(factors) != 2:
        return None

    a, b = factors
    da = differentiate(a, variable)
    db = differentiate(b, variable)

    if da == "0" and db == "0":
        return "0"
    if da == "0":
        return a if db == "1" else f"{a} * {db}"
    if db == "0":
        return b if da == "1" else f"{da} * {b}"
    return f"{a} * {db} + {b} * {da}"


def _differentiate_group(expr: str, variable: str):
    match = _FIRST_GROUP.search(expr)
    if match is None:
        return None

    inner = differentiate(match.group(1), variable)
    if inner == "0":
        return "0"

    remaining = expr.replace(match.group(0), _GROUP_MARKER, 1)
    if "*" in remaining:
        coefficient = next(
            (part for part in remaining.split("*") if part != _GROUP_MARKER), None
        )
        if coefficient:
            return f"{coefficient} * ({inner})"
    return inner


def differentiate(expr: str, variable: str) -> str:
    """Compute d(expr)/d(variable) as a simplified expression string.

    Args:
        expr: Formula text; whitespace is ignored
        variable: Name to differentiate by

    Returns:
        Derivative text, "0"/"1" for the trivial cases, or the unresolved
        form ``d(expr)/d(variable)``

    Example:
        >>> differentiate("x*y", "x")
        'y'
        >>> differentiate("Capex + Opex", "Opex")
        '1'
    """
    expr = re.sub(r"\s", "", expr)

    if variable not in expr:
        return "0"
    if expr == variable:
        return "1"

    if "+" in expr or "-" in expr:
        return _differentiate_terms(expr, variable)

    if "*" in expr:
        product = _differentiate_product(expr, variable)
        if product is not None:
            return product

    if "(" in expr and ")" in expr:
        group = _differentiate_group(expr, variable)
        if group is not None:
            return group

    get_logger().debug(f"No rule simplifies d({expr})/d({variable})")
    return unresolved(expr, variable)
