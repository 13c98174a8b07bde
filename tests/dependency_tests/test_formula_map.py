# tests/dependency_tests/test_formula_map.py
# This file is part of Formulary - A Formula Expression Engine
#
# Test suite for copy-on-write formula map helpers

import pytest
from dependency import (
    TreeNodeKind,
    add_formula,
    build_tree,
    placeholder_for,
    remove_formula,
    seed_formulas,
)
from expression import ParseError


class TestFormulaMapHelpers:
    """Test cases for seeding, adding and removing formulas."""

    def test_seed_adds_placeholders(self):
        formulas = seed_formulas("Total_Cost", "(Capex + Opex) * 2")
        assert formulas == {
            "Total_Cost": "(Capex + Opex) * 2",
            "Capex": "Capex_placeholder",
            "Opex": "Opex_placeholder",
        }

    def test_seeded_placeholders_are_leaves(self):
        tree = build_tree("Total_Cost", seed_formulas("Total_Cost", "Capex + Opex"))
        assert [child.kind for child in tree.children] == [TreeNodeKind.LEAF] * 2

    def test_seed_rejects_invalid_formula(self):
        with pytest.raises(ParseError):
            seed_formulas("Bad", "a + (b")

    def test_add_formula_returns_new_map(self):
        original = {"Total": "Capex * 2"}
        updated = add_formula(original, "Capex", "Equipment + Installation")

        assert updated == {"Total": "Capex * 2", "Capex": "Equipment + Installation"}
        assert original == {"Total": "Capex * 2"}

    @pytest.mark.parametrize(
        "name, expression",
        [("", "a + b"), ("Total", ""), ("Total", "a")],
    )
    def test_add_formula_rejects_bad_names(self, name, expression):
        with pytest.raises(ValueError):
            add_formula({"Total": "x"}, name, expression)

    def test_add_formula_validates_syntax(self):
        with pytest.raises(ParseError):
            add_formula({}, "Broken", "a * * b")

    def test_remove_formula_picks_next_root(self):
        formulas = {"A": "B + 1", "B": "2", "C": "3"}
        updated, next_root = remove_formula(formulas, "A")
        assert updated == {"B": "2", "C": "3"}
        assert next_root == "B"
        assert "A" in formulas

    def test_remove_last_formula(self):
        assert remove_formula({"A": "1"}, "A") == ({}, None)

    def test_placeholder_text(self):
        assert placeholder_for("Capex") == "Capex_placeholder"
