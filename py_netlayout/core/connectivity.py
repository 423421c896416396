"""
Node degree and adjacency derived from the edge list.

Edges naming an unknown endpoint are dropped with a warning before the
index is built, matching how the host widget skipped invalid links.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

import structlog

from .errors import Diagnostic, DiagnosticKind
from .graph_model import Edge

logger = structlog.get_logger()


def filter_edges(node_ids: Iterable[str], edges: Sequence[Edge]) -> Tuple[List[Edge], List[Diagnostic]]:
    """
    Drop edges whose source or target is not a known node.

    Args:
        node_ids: Identifiers of all nodes in the graph
        edges: Candidate edges in input order

    Returns:
        Tuple of (valid edges in input order, diagnostics for dropped edges)
    """
    known = set(node_ids)
    valid = []
    diagnostics = []

    for edge in edges:
        if edge.source in known and edge.target in known:
            valid.append(edge)
            continue

        logger.warning("Skipping edge with missing node(s)", source=edge.source, target=edge.target)
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.REFERENCE,
            message=f"Skipping invalid edge: source={edge.source!r} target={edge.target!r} - missing node(s)",
            context={"source": edge.source, "target": edge.target},
        ))

    return valid, diagnostics


class ConnectivityIndex:
    """Per-node degree and adjacency for a validated edge list."""

    def __init__(self, node_ids: Iterable[str], edges: Sequence[Edge]):
        self.degrees: Dict[str, int] = {}
        self.adjacency: Dict[str, List[str]] = {}

        for node_id in node_ids:
            self.degrees[node_id] = 0
            self.adjacency[node_id] = []

        for edge in edges:
            self.degrees[edge.source] += 1
            self.degrees[edge.target] += 1

            if edge.source == edge.target:
                continue
            # Neighbour lists keep first-seen edge order
            if edge.target not in self.adjacency[edge.source]:
                self.adjacency[edge.source].append(edge.target)
            if edge.source not in self.adjacency[edge.target]:
                self.adjacency[edge.target].append(edge.source)

        logger.debug("Connectivity index built", nodes=len(self.degrees), edges=len(edges))

    def degree(self, node_id: str) -> int:
        return self.degrees.get(node_id, 0)

    def neighbors(self, node_id: str) -> List[str]:
        return self.adjacency.get(node_id, [])

    def total_degree(self, node_ids: Iterable[str]) -> int:
        """Sum of degrees over a set of nodes (used to rank groups)."""
        return sum(self.degree(node_id) for node_id in node_ids)
