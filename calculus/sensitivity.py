# calculus/sensitivity.py
# This file is part of Formulary - A Formula Expression Engine
#
# Partial derivatives of a formula and what they say about its inputs

"""Per-variable sensitivity of a calculation.

For every variable a formula references, the partial derivative tells whether
the result reacts to that input at all and whether the input enters
additively or as a factor.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from expression import analyze
from .differentiator import differentiate
from utils.logger import get_logger


@dataclass(frozen=True)
class Sensitivity:
    """Reading of one partial derivative.

    Attributes:
        derivative: The derivative text
        impact: "Direct impact" or "No direct impact"
        sensitive: False when the derivative is "0"
        relation: "Multiplicative" when the derivative is a product, else "Additive"
    """

    derivative: str
    impact: str
    sensitive: bool
    relation: str


def classify(derivative: str) -> Sensitivity:
    """Interpret a derivative string produced by ``differentiate``."""
    sensitive = derivative != "0"
    return Sensitivity(
        derivative=derivative,
        impact="Direct impact" if sensitive else "No direct impact",
        sensitive=sensitive,
        relation="Multiplicative" if "*" in derivative else "Additive",
    )


def partial_derivatives(
    expression: str, variables: Optional[Iterable[str]] = None
) -> Dict[str, str]:
    """Differentiate a formula by each of its variables.

    Args:
        expression: Formula text
        variables: Names to differentiate by; defaults to every variable the
            formula references, in first-discovery order

    Returns:
        Mapping of variable name to derivative text
    """
    if variables is None:
        variables = analyze(expression).variables

    result = {variable: differentiate(expression, variable) for variable in variables}
    get_logger().debug(f"Computed {len(result)} partial derivatives of '{expression}'")
    return result
