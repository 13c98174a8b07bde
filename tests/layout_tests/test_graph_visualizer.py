# tests/layout_tests/test_graph_visualizer.py
# This file is part of Formulary - A Formula Expression Engine
#
# Test suite for Graphviz conversion of expression graphs

from layout import layout
from utils.graph_visualizer import build_digraph


class TestGraphVisualizer:
    """Test cases for the DOT source built from a layout."""

    def test_nodes_are_pinned_to_layout_coordinates(self):
        graph = layout("Total", {"Total": "a + b"})
        source = build_digraph(graph, "Total").source

        assert "Expression graph for Total" in source
        assert 'pos="5.56,-0.83!"' in source
        assert 'pos="4.72,-4.17!"' in source
        assert "a -> op_0" in source
        assert "op_0 -> Total" in source

    def test_node_shapes_follow_kind(self):
        source = build_digraph(layout("Total", {"Total": "a + b"}), "Total").source
        assert "shape=box" in source
        assert "shape=circle" in source
        assert "shape=ellipse" in source

    def test_direct_edges_carry_operation_label(self):
        graph = layout("Total", {"Total": "Capex + * Opex"})
        source = build_digraph(graph, "Total").source
        assert "label=×" in source or 'label="×"' in source
        assert "style=dashed" in source

    def test_output_format(self):
        dot = build_digraph(layout("Total", {"Total": "a"}), "Total", fmt="svg")
        assert dot.format == "svg"
        assert dot.engine == "neato"
