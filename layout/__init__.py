# layout/__init__.py
# This file is part of Formulary - A Formula Expression Engine
#
# Expression graph layout for flow-diagram rendering

"""Positioned node/edge graphs of formulas, ready for rendering.

Core Functions:
    layout: Lay out a formula, optionally inlining expanded variables
    toggle_expanded: Flip one name in an expansion set
"""

from .engine import LayoutConfig, fallback_operation, layout, toggle_expanded
from .graph import EdgeKind, ExpressionGraph, GraphEdge, GraphNode, NodeKind

__all__ = [
    "layout",
    "toggle_expanded",
    "fallback_operation",
    "LayoutConfig",
    "ExpressionGraph",
    "GraphNode",
    "GraphEdge",
    "NodeKind",
    "EdgeKind",
]
