# calculus/__init__.py
# This file is part of Formulary - A Formula Expression Engine
#
# Symbolic differentiation of calculation formulas

"""Textual symbolic differentiation and sensitivity reports.

Core Functions:
    differentiate: d(formula)/d(variable) as a simplified string
    partial_derivatives: Derivatives by every variable of a formula
    classify: Impact and relation of one derivative
"""

from .differentiator import differentiate, unresolved
from .sensitivity import Sensitivity, classify, partial_derivatives

__all__ = [
    "differentiate",
    "unresolved",
    "partial_derivatives",
    "classify",
    "Sensitivity",
]
