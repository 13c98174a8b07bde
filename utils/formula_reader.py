# utils/formula_reader.py
# This file is part of Formulary - A Formula Expression Engine
#
# JSON and CSV readers for name -> formula snapshots

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable

from utils.logger import get_logger


class FormulaFormatError(Exception):
    """Exception raised when formula files contain invalid format or data."""

    pass


def read_formula_map(filepath: str) -> Dict[str, str]:
    """Read a name -> formula mapping from a JSON or CSV file.

    Supported layouts:
        JSON object:  {"Total_Cost": "(Capex + Opex) * (1 + Inflation_Rate)"}
        JSON solution configuration: {"calculations": [{"name": ..., "formula": ...}]}
        CSV with headers:
            name,formula
            Total_Cost,(Capex + Opex) * (1 + Inflation_Rate)

    Args:
        filepath: Path to the formula file

    Returns:
        Formulas in file order

    Raises:
        FormulaFormatError: If the file is missing, unreadable or malformed
    """
    logger = get_logger()
    path = Path(filepath)

    if not path.exists():
        raise FormulaFormatError(f"Formula file not found: {filepath}")

    logger.debug(f"Reading formula file: {filepath}")

    try:
        if path.suffix.lower() == ".csv":
            formulas = _read_csv(path)
        else:
            with open(path, "r", encoding="utf-8") as file:
                formulas = _from_document(json.load(file))
    except FormulaFormatError:
        raise
    except (OSError, ValueError) as e:
        raise FormulaFormatError(f"Error reading formula file: {e}") from e

    logger.debug(f"Loaded {len(formulas)} formulas from {path.name}")
    return formulas


def _read_csv(path: Path) -> Dict[str, str]:
    with open(path, "r", newline="", encoding="utf-8") as file:
        reader = csv.DictReader(file)

        # Validate required headers
        required_headers = {"name", "formula"}
        if not required_headers.issubset(set(reader.fieldnames or [])):
            missing = required_headers - set(reader.fieldnames or [])
            raise FormulaFormatError(f"Missing required headers: {missing}")

        return _collect(
            ((row["name"], row["formula"]) for row in reader), first_row=2
        )


def _from_document(document: Any) -> Dict[str, str]:
    if not isinstance(document, dict):
        raise FormulaFormatError("Formula document must be a JSON object")

    if "calculations" in document:
        calculations = document["calculations"]
        if not isinstance(calculations, list):
            raise FormulaFormatError("'calculations' must be a list")
        try:
            pairs = [(item["name"], item["formula"]) for item in calculations]
        except (KeyError, TypeError) as e:
            raise FormulaFormatError(f"Calculation record without name/formula: {e}") from e
        return _collect(pairs, first_row=1)

    return _collect(document.items(), first_row=1)


def _collect(pairs: Iterable, first_row: int) -> Dict[str, str]:
    formulas: Dict[str, str] = {}
    for row_num, (name, formula) in enumerate(pairs, start=first_row):
        if not isinstance(name, str) or not name.strip():
            raise FormulaFormatError(f"Entry {row_num}: formula name must be a non-empty string")
        if not isinstance(formula, str):
            raise FormulaFormatError(f"Entry {row_num}: formula for '{name}' must be a string")
        name = name.strip()
        if name in formulas:
            raise FormulaFormatError(f"Entry {row_num}: duplicate formula name '{name}'")
        formulas[name] = formula.strip()
    return formulas
