"""
Deterministic grid placement for graph nodes.

This module assigns every node a unique integer grid cell:
1. Degrees are taken from the connectivity index
2. Nodes are split by primary group; ungrouped nodes form their own set
3. Members are stable-sorted by degree, groups by total member degree
4. Each group grows outward from its first member through the 8 grid
   neighbours of already placed members, keeping clear of other groups
5. Ungrouped nodes cluster next to their placed graph neighbours

Every search visits cells in a fixed order, so identical input yields
identical coordinates.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import structlog

from .connectivity import ConnectivityIndex
from .errors import Diagnostic, DiagnosticKind, LayoutError
from .graph_model import GridCell, Group, Node
from .spacing import DEFAULT_GROUP_SPACING, GroupSpacingTracker

logger = structlog.get_logger()

DEFAULT_GRID_SPACING = 80.0  # world units per grid cell
MAX_SEARCH_RADIUS = 100

ORIGIN: GridCell = (0, 0)

# +x, -x, +y, -y, then diagonals
NEIGHBOR_OFFSETS: Tuple[GridCell, ...] = (
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
)


def ring_cells(center: GridCell, radius: int) -> Iterator[GridCell]:
    """
    Yield the cells of the square ring at ``radius`` around ``center``.

    dx is the outer loop and dy the inner loop, both ascending, and only
    cells with |dx| == radius or |dy| == radius are kept. Radius 0 yields
    the center itself.
    """
    cx, cy = center
    if radius == 0:
        yield center
        return

    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if abs(dx) == radius or abs(dy) == radius:
                yield (cx + dx, cy + dy)


def grid_to_world(cell: GridCell, spacing: float) -> Tuple[float, float, float]:
    """Map a grid cell onto the horizontal y=0 plane."""
    grid_x, grid_y = cell
    return (float(grid_x * spacing), 0.0, float(grid_y * spacing))


class GridPositioner:
    """Assigns grid cells and world positions to nodes."""

    def __init__(
        self,
        grid_spacing: float = DEFAULT_GRID_SPACING,
        group_spacing: int = DEFAULT_GROUP_SPACING,
        max_search_radius: int = MAX_SEARCH_RADIUS,
    ):
        """
        Initialize the positioner.

        Args:
            grid_spacing: World distance between adjacent grid cells
            group_spacing: Free grid units required around other groups
            max_search_radius: Rings scanned before the unconstrained fallback
        """
        self.grid_spacing = grid_spacing
        self.group_spacing = group_spacing
        self.max_search_radius = max_search_radius

        self.tracker: Optional[GroupSpacingTracker] = None
        self.placement_order: List[str] = []
        self.group_order: List[str] = []
        self.diagnostics: List[Diagnostic] = []

    def position(
        self,
        nodes: Sequence[Node],
        groups: Sequence[Group],
        connectivity: ConnectivityIndex,
    ) -> GroupSpacingTracker:
        """
        Place every node and record group bounds.

        Args:
            nodes: Nodes in input order, none of them placed yet
            groups: Groups in input order (ranking ties keep this order)
            connectivity: Degree and adjacency for the same nodes

        Returns:
            The spacing tracker holding occupied cells and group bounds
        """
        self.tracker = GroupSpacingTracker(self.group_spacing)
        self.placement_order = []
        self.group_order = []
        self.diagnostics = []

        if not nodes:
            logger.info("No nodes to place")
            return self.tracker

        nodes_by_id = {node.id: node for node in nodes}
        for node in nodes:
            if node.is_placed:
                raise LayoutError(f"Node {node.id!r} already has a grid position")
            node.degree = connectivity.degree(node.id)

        grouped, ungrouped = self._partition(nodes, groups)

        # sorted() is stable, so equal degrees keep input order
        for group_id in grouped:
            grouped[group_id] = sorted(grouped[group_id], key=lambda n: -n.degree)
        ungrouped = sorted(ungrouped, key=lambda n: -n.degree)

        ranked_groups = sorted(
            grouped.items(),
            key=lambda item: -connectivity.total_degree(member.id for member in item[1]),
        )

        logger.info("Placing nodes on grid",
                    nodes=len(nodes),
                    groups=len(ranked_groups),
                    ungrouped=len(ungrouped))

        for group_id, members in ranked_groups:
            self._place_group(group_id, members)

        for node in ungrouped:
            self._place_ungrouped(node, nodes_by_id, connectivity)

        # Attach the tracked bounds to the group records
        for group in groups:
            group.bounds = self.tracker.bounds(group.id)

        logger.info("Grid placement complete",
                    placed=len(self.placement_order),
                    fallbacks=len(self.diagnostics))

        return self.tracker

    def _partition(
        self, nodes: Sequence[Node], groups: Sequence[Group]
    ) -> Tuple[Dict[str, List[Node]], List[Node]]:
        """Split nodes by primary group, keeping group input order."""
        grouped: Dict[str, List[Node]] = {group.id: [] for group in groups}
        ungrouped: List[Node] = []

        for node in nodes:
            group_id = node.primary_group
            if group_id is None:
                ungrouped.append(node)
            else:
                grouped.setdefault(group_id, []).append(node)

        # Groups whose members all have another primary group place nothing
        grouped = {group_id: members for group_id, members in grouped.items() if members}
        return grouped, ungrouped

    def _place_group(self, group_id: str, members: List[Node]) -> None:
        self.group_order.append(group_id)
        first = members[0]
        self._place(first, self._find_cell(ORIGIN, group_id, first.id), group_id)

        placed = [first]
        for node in members[1:]:
            cell = self._adjacent_cell(placed, group_id)
            if cell is None:
                cell = self._find_cell(first.grid, group_id, node.id)
            self._place(node, cell, group_id)
            placed.append(node)

    def _place_ungrouped(
        self, node: Node, nodes_by_id: Dict[str, Node], connectivity: ConnectivityIndex
    ) -> None:
        anchors = [
            nodes_by_id[neighbor_id]
            for neighbor_id in connectivity.neighbors(node.id)
            if nodes_by_id[neighbor_id].is_placed
        ]

        cell = self._adjacent_cell(anchors, None)
        if cell is None:
            center = anchors[0].grid if anchors else ORIGIN
            cell = self._find_cell(center, None, node.id)
        self._place(node, cell, None)

    def _adjacent_cell(self, anchors: Sequence[Node], group_id: Optional[str]) -> Optional[GridCell]:
        """First free neighbour cell of the anchors, anchors in placement order."""
        for anchor in anchors:
            ax, ay = anchor.grid
            for dx, dy in NEIGHBOR_OFFSETS:
                cell = (ax + dx, ay + dy)
                if self.tracker.can_place(cell, group_id):
                    return cell
        return None

    def _find_cell(self, center: GridCell, group_id: Optional[str], node_id: str) -> GridCell:
        """Ring search honouring spacing, then the unconstrained fallback."""
        for radius in range(self.max_search_radius + 1):
            for cell in ring_cells(center, radius):
                if self.tracker.can_place(cell, group_id):
                    return cell

        cell = self._nearest_free_cell(center)
        logger.warning("Ring search exhausted, placing without spacing",
                       node=node_id, group=group_id, center=center, cell=cell)
        self.diagnostics.append(Diagnostic(
            kind=DiagnosticKind.SEARCH_EXHAUSTED,
            message=(f"No cell within {self.max_search_radius} rings of {center} respects group spacing; "
                     f"node {node_id!r} placed at {cell}"),
            context={"node": node_id, "group": group_id, "cell": cell},
        ))
        return cell

    def _nearest_free_cell(self, center: GridCell) -> GridCell:
        # Terminates: only finitely many cells are occupied
        radius = 0
        while True:
            for cell in ring_cells(center, radius):
                if not self.tracker.is_occupied(cell):
                    return cell
            radius += 1

    def _place(self, node: Node, cell: GridCell, group_id: Optional[str]) -> None:
        self.tracker.occupy(cell)
        if group_id is not None:
            self.tracker.update(group_id, cell)

        node.grid = cell
        node.position = grid_to_world(cell, self.grid_spacing)
        self.placement_order.append(node.id)
