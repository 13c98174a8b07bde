# tests/integration_tests/test_total_cost_scenarios.py
# This file is part of Formulary - A Formula Expression Engine
#
# End-to-end scenarios across parsing, dependency trees, calculus and layout

"""Integration scenarios over a small solution configuration.

Each scenario drives several components on the same formula map and checks
that they agree with each other.
"""

from calculus import partial_derivatives
from dependency import TreeNodeKind, add_formula, build_tree, remove_formula, seed_formulas
from expression import analyze, extract_variables, parse
from layout import NodeKind, layout, toggle_expanded
from utils.logger import get_logger


class TestTotalCostScenarios:
    """Scenarios built around the Total_Cost calculation."""

    def setup_method(self):
        """Initialize logger for each test method."""
        self.logger = get_logger()

    def test_total_cost_dependencies(self, total_cost_formulas):
        expression = total_cost_formulas["Total_Cost"]
        assert extract_variables(parse(expression)) == {"Capex", "Opex", "Inflation_Rate"}

        tree = build_tree("Total_Cost", total_cost_formulas)
        assert len(tree.children) == 3
        assert all(child.kind is TreeNodeKind.LEAF for child in tree.children)
        assert not any(n.kind is TreeNodeKind.CIRCULAR for n in tree.iter_nodes())

    def test_tree_and_layout_agree_on_variables(self, total_cost_formulas):
        tree = build_tree("Total_Cost", total_cost_formulas)
        graph = layout("Total_Cost", total_cost_formulas)

        variable_labels = {
            n.label for n in graph.nodes if n.kind is NodeKind.VARIABLE and not n.id.startswith("const_")
        }
        assert variable_labels == {child.name for child in tree.children}
        assert not graph.orphan_edges()

    def test_building_up_a_configuration(self):
        formulas = seed_formulas("Total_Cost", "(Capex + Opex) * (1 + Inflation_Rate)")
        tree = build_tree("Total_Cost", formulas)
        assert [c.kind for c in tree.children] == [TreeNodeKind.LEAF] * 3

        formulas = dict(formulas)
        del formulas["Capex"]
        formulas = add_formula(formulas, "Capex", "Equipment + Installation")
        tree = build_tree("Total_Cost", formulas)

        capex = tree.children[0]
        assert capex.kind is TreeNodeKind.FORMULA
        assert [c.name for c in capex.children] == ["Equipment", "Installation"]

        formulas, next_root = remove_formula(formulas, "Total_Cost")
        assert next_root is not None
        assert "Total_Cost" not in formulas

    def test_expanding_a_dependency_in_the_diagram(self, nested_formulas):
        expanded = toggle_expanded(frozenset(), "Capex")
        collapsed = layout("Total_Cost", nested_formulas)
        opened = layout("Total_Cost", nested_formulas, expanded)

        assert len(opened.nodes) == len(collapsed.nodes) + 3
        assert opened.node("Capex_Equipment") is not None
        assert not opened.orphan_edges()

        expanded = toggle_expanded(expanded, "Capex")
        assert layout("Total_Cost", nested_formulas, expanded) == collapsed

    def test_cycle_flows_through_every_component(self, cyclic_formulas):
        tree = build_tree("A", cyclic_formulas)
        assert tree.find_path("A") == ["A"]
        assert tree.children[0].children[0].kind is TreeNodeKind.CIRCULAR

        graph = layout("A", cyclic_formulas, expanded={"B"})
        assert not graph.orphan_edges()

        assert partial_derivatives(cyclic_formulas["A"]) == {"B": "1"}

    def test_malformed_formula_still_reports(self):
        formulas = {"Total": "Capex + * Opex"}
        parsed = analyze(formulas["Total"])
        assert not parsed.parsed

        tree = build_tree("Total", formulas)
        graph = layout("Total", formulas)
        assert [c.name for c in tree.children] == [
            n.label for n in graph.nodes if n.kind is NodeKind.VARIABLE
        ]
