# dependency/__init__.py
# This file is part of Formulary - A Formula Expression Engine
#
# Dependency analysis across named formulas

"""Recursive dependency analysis for calculation formulas.

Core Functions:
    build_tree: Expand a formula into its dependency tree
    seed_formulas, add_formula, remove_formula: Snapshot helpers
"""

from .tree import (
    DEFAULT_MAX_DEPTH,
    PLACEHOLDER_SUFFIX,
    DependencyTreeNode,
    TreeNodeKind,
    build_tree,
    has_formula,
)
from .formula_map import add_formula, placeholder_for, remove_formula, seed_formulas

__all__ = [
    "build_tree",
    "has_formula",
    "DependencyTreeNode",
    "TreeNodeKind",
    "DEFAULT_MAX_DEPTH",
    "PLACEHOLDER_SUFFIX",
    "seed_formulas",
    "add_formula",
    "remove_formula",
    "placeholder_for",
]
