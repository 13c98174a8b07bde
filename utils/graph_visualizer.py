# utils/graph_visualizer.py
# This file is part of Formulary - A Formula Expression Engine
#
# Graphviz rendering of laid-out expression graphs

import os
from typing import Optional

from graphviz import Digraph

from layout.graph import EdgeKind, ExpressionGraph, NodeKind
from utils.logger import get_logger

logger = get_logger()

VISUALIZATION_OUTPUT_FOLDER = "formula_visualizations"

# Graphviz reads pinned positions in inches
POINTS_PER_INCH = 72.0

NODE_STYLES = {
    NodeKind.RESULT: {"shape": "box", "fillcolor": "palegreen"},
    NodeKind.OPERATION: {"shape": "circle", "fillcolor": "lightgoldenrodyellow"},
    NodeKind.VARIABLE: {"shape": "ellipse", "fillcolor": "lightskyblue"},
}

EDGE_STYLES = {
    EdgeKind.INPUT: {"style": "solid"},
    EdgeKind.OUTPUT: {"style": "bold"},
    EdgeKind.DIRECT: {"style": "dashed"},
}


def _pinned_position(x: float, y: float) -> str:
    """Graphviz ``pos`` value for layout coordinates (y grows downwards)."""
    return f"{x / POINTS_PER_INCH:.2f},{-y / POINTS_PER_INCH:.2f}!"


def build_digraph(graph: ExpressionGraph, title: str, fmt: str = "png") -> Digraph:
    """
    Converts a laid-out expression graph into a Graphviz digraph.
    Node positions are pinned so the neato engine reproduces the computed layout
    instead of arranging the nodes itself.

    Args:
        graph: Output of layout.layout()
        title: Comment stored in the DOT source
        fmt: Output format used when the digraph is rendered
    """
    dot = Digraph(comment=f"Expression graph for {title}", format=fmt, engine="neato")
    dot.attr(splines="true", overlap="false")
    dot.attr("node", style="filled", fontsize="10")

    for node in graph.nodes:
        dot.node(node.id, node.label, pos=_pinned_position(node.x, node.y), **NODE_STYLES[node.kind])

    for edge in graph.edges:
        attributes = dict(EDGE_STYLES[edge.kind])
        if edge.operation is not None:
            attributes["label"] = edge.operation
        dot.edge(edge.source, edge.target, **attributes)

    return dot


def render_expression_graph(
    graph: ExpressionGraph, title: str, base_filename: str, fmt: str = "png"
) -> Optional[str]:
    """
    Renders an expression graph into the 'formula_visualizations' folder.

    Args:
        graph: Output of layout.layout()
        title: Name of the formula, used in the DOT comment
        base_filename: The base name for the output file
        fmt: The output format for the image (e.g., "png", "svg")

    Returns:
        Path of the rendered file, or None when rendering failed
    """
    dot = build_digraph(graph, title, fmt)

    if not os.path.exists(VISUALIZATION_OUTPUT_FOLDER):
        try:
            os.makedirs(VISUALIZATION_OUTPUT_FOLDER)
            logger.info(f"Created directory for formula visualizations: {VISUALIZATION_OUTPUT_FOLDER}")
            output_path = os.path.join(VISUALIZATION_OUTPUT_FOLDER, base_filename)
        except OSError as e:
            logger.error(f"Could not create directory {VISUALIZATION_OUTPUT_FOLDER}: {e}. "
                         f"Saving to current directory instead.")
            output_path = base_filename
    else:
        output_path = os.path.join(VISUALIZATION_OUTPUT_FOLDER, base_filename)

    try:
        rendered = dot.render(output_path, view=False, cleanup=True)
    except Exception as e:
        logger.warning(f"Failed to render expression graph to {output_path}.{fmt}: {e}. "
                       "Ensure Graphviz executables (neato) are in your system's PATH.")
        return None

    logger.info(f"Expression graph visualization saved to {rendered}")
    return rendered
