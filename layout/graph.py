# layout/graph.py
# This file is part of Formulary - A Formula Expression Engine
#
# Node/edge graph model with explicit render coordinates

"""Value objects describing a laid-out expression graph.

An ExpressionGraph is ready for direct rendering: every node carries its
coordinates and every edge refers to node ids of the same graph.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeKind(Enum):
    """Visual role of a graph node."""

    VARIABLE = "variable"
    OPERATION = "operation"
    RESULT = "result"


class EdgeKind(Enum):
    """Relation an edge expresses."""

    INPUT = "input"
    OUTPUT = "output"
    DIRECT = "direct"


@dataclass(frozen=True)
class GraphNode:
    """Positioned node of an expression graph.

    Attributes:
        id: Identifier unique within the graph
        label: Text shown on the node
        kind: VARIABLE, OPERATION or RESULT
        x: Horizontal coordinate
        y: Vertical coordinate
    """

    id: str
    label: str
    kind: NodeKind
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.kind.value,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class GraphEdge:
    """Directed edge between two nodes of the same graph.

    Attributes:
        id: Identifier unique within the graph
        source: Id of the node the edge leaves
        target: Id of the node the edge enters
        kind: INPUT, OUTPUT or DIRECT
        operation: Operator label for DIRECT edges of the fallback layout
    """

    id: str
    source: str
    target: str
    kind: EdgeKind
    operation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "from": self.source,
            "to": self.target,
            "type": self.kind.value,
        }
        if self.operation is not None:
            data["operation"] = self.operation
        return data


@dataclass
class ExpressionGraph:
    """Nodes and edges of one layout, in creation order."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        """Look up a node by id."""
        for candidate in self.nodes:
            if candidate.id == node_id:
                return candidate
        return None

    def orphan_edges(self) -> List[GraphEdge]:
        """Edges whose source or target is not a node of this graph."""
        known = {node.id for node in self.nodes}
        return [
            edge
            for edge in self.edges
            if edge.source not in known or edge.target not in known
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
