# utils/__init__.py
# This file is part of Formulary - A Formula Expression Engine
#
# Utility module exports

from .formula_reader import read_formula_map, FormulaFormatError

__all__ = [
    "read_formula_map",
    "FormulaFormatError",
]
