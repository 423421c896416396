"""
In-process entry points for the layout engine.

``build_layout`` runs the full pipeline on a host graph description:
membership resolution, edge validation, grid placement, then per-group
voxel boundaries and edge arcs. Every call owns its own state; nothing is
shared between builds.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config.config import LayoutSettings, settings as default_settings
from ..core.connectivity import ConnectivityIndex, filter_edges
from ..core.edge_arcs import edge_arc
from ..core.edge_merger import merge_collinear_edges
from ..core.errors import Diagnostic, DiagnosticKind, LayoutError
from ..core.graph_model import Edge, Group, Node, Point3
from ..core.grid_positioner import GridPositioner
from ..core.voxel_boundary import VoxelBoundaryBuilder
from .models import (
    DiagnosticModel,
    EdgeLayout,
    GraphDescription,
    GroupLayout,
    LayoutResponse,
    NodeLayout,
)

logger = structlog.get_logger()


@dataclass
class LayoutResult:
    """Everything one build produced."""
    nodes: List[Node]
    edges: List[Edge]
    groups: List[Group]
    arcs: List[np.ndarray] = field(default_factory=list)  # parallel to edges
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def node(self, node_id: str) -> Node:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise LayoutError(f"Unknown node {node_id!r}")

    def group(self, group_id: str) -> Group:
        for group in self.groups:
            if group.id == group_id:
                return group
        raise LayoutError(f"Unknown group {group_id!r}")

    @property
    def positions(self) -> Dict[str, Point3]:
        return {node.id: node.position for node in self.nodes}

    def to_response(self) -> LayoutResponse:
        """Convert to the serializable response model."""
        return LayoutResponse(
            nodes=[
                NodeLayout(
                    id=node.id,
                    grid=node.grid,
                    position=node.position,
                    degree=node.degree,
                    group_ids=node.group_ids,
                    name=node.name,
                    color=node.color,
                    content=node.content,
                )
                for node in self.nodes
            ],
            edges=[
                EdgeLayout(
                    source=edge.source,
                    target=edge.target,
                    points=[tuple(point) for point in arc.tolist()],
                    name=edge.name,
                    color=edge.color,
                    content=edge.content,
                )
                for edge, arc in zip(self.edges, self.arcs)
            ],
            groups=[
                GroupLayout(
                    id=group.id,
                    member_ids=group.member_ids,
                    bounds=group.bounds.to_dict() if group.bounds else None,
                    centroid=group.centroid,
                    boundary=[(edge.start, edge.end) for edge in group.boundary],
                    voxel_count=group.voxel_count,
                    component_count=group.component_count,
                    name=group.name,
                    color=group.color,
                    content=group.content,
                )
                for group in self.groups
            ],
            diagnostics=[DiagnosticModel(**d.to_dict()) for d in self.diagnostics],
        )


def resolve_graph(description: GraphDescription) -> Tuple[List[Node], List[Edge], List[Group], List[Diagnostic]]:
    """
    Turn host records into engine records and reconcile group membership.

    Membership may be declared on nodes (``group_ids``), on groups
    (``member_ids``) or both. Group ids referenced only by nodes become
    implicit groups after the declared ones. Member ids naming unknown
    nodes are dropped with a warning.

    Args:
        description: Validated host graph

    Returns:
        Tuple of (nodes, edges, groups, diagnostics); edges are not yet
        checked against the node set
    """
    diagnostics: List[Diagnostic] = []

    nodes = [
        Node(
            id=record.id,
            group_ids=list(dict.fromkeys(record.group_ids)),
            name=record.name,
            color=record.color,
            content=record.content,
        )
        for record in description.nodes
    ]
    nodes_by_id = {node.id: node for node in nodes}

    edges = [
        Edge(source=record.source, target=record.target,
             name=record.name, color=record.color, content=record.content)
        for record in description.edges
    ]

    groups = []
    groups_by_id: Dict[str, Group] = {}
    for record in description.groups:
        group = Group(id=record.id, name=record.name, color=record.color, content=record.content)
        for member_id in record.member_ids:
            if member_id not in nodes_by_id:
                logger.warning("Skipping unknown group member", group=record.id, member=member_id)
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.REFERENCE,
                    message=f"Group {record.id!r} lists unknown node {member_id!r}",
                    context={"group": record.id, "member": member_id},
                ))
                continue
            if member_id not in group.member_ids:
                group.member_ids.append(member_id)
        groups.append(group)
        groups_by_id[group.id] = group

    for node in nodes:
        for group_id in node.group_ids:
            group = groups_by_id.get(group_id)
            if group is None:
                logger.debug("Creating implicit group", group=group_id, node=node.id)
                group = Group(id=group_id)
                groups.append(group)
                groups_by_id[group_id] = group
            if node.id not in group.member_ids:
                group.member_ids.append(node.id)

    # Memberships declared only on the group side go after the node's own list
    for group in groups:
        for member_id in group.member_ids:
            node = nodes_by_id[member_id]
            if group.id not in node.group_ids:
                node.group_ids.append(group.id)

    return nodes, edges, groups, diagnostics


def compute_group_boundaries(
    groups: Sequence[Group],
    positions: Mapping[str, Point3],
    settings: Optional[LayoutSettings] = None,
) -> List[Diagnostic]:
    """
    Recompute centroid and merged wireframe for every group.

    Prior boundary data on the groups is replaced entirely. Members with
    no entry in ``positions`` are left out; a group with no positioned
    member gets an empty boundary.

    Args:
        groups: Groups to update in place
        positions: World position per node id
        settings: Engine settings (defaults to the module settings)

    Returns:
        Diagnostics raised while building boundaries
    """
    settings = settings or default_settings
    builder = VoxelBoundaryBuilder(padding=settings.voxel_padding,
                                   corridor_strategy=settings.corridor_strategy)

    for group in groups:
        member_positions = [positions[m] for m in group.member_ids if positions.get(m) is not None]

        if not member_positions:
            group.centroid = None
            group.boundary = []
            group.voxel_count = 0
            group.component_count = 0
            continue

        group.centroid = tuple(float(c) for c in np.mean(np.array(member_positions, dtype=np.float64), axis=0))

        voxels = builder.build(member_positions, group_id=group.id)
        group.boundary = merge_collinear_edges(voxels.edges, tolerance=settings.merge_tolerance)
        group.voxel_count = len(voxels.occupied)
        group.component_count = voxels.component_count

    logger.info("Group boundaries computed",
                groups=len(groups),
                segments=sum(len(group.boundary) for group in groups))

    return builder.diagnostics


def build_layout(description: GraphDescription, settings: Optional[LayoutSettings] = None) -> LayoutResult:
    """
    Lay out a graph and mesh its group boundaries.

    Recoverable problems (unknown references, exhausted searches,
    disconnected boundaries) are logged and returned as diagnostics;
    they never raise.

    Args:
        description: Validated host graph
        settings: Engine settings (defaults to the module settings)

    Returns:
        LayoutResult with placed nodes, valid edges, groups and diagnostics
    """
    settings = settings or default_settings
    logger.info("Building layout",
                nodes=len(description.nodes),
                edges=len(description.edges),
                groups=len(description.groups))

    nodes, edges, groups, diagnostics = resolve_graph(description)

    edges, edge_diagnostics = filter_edges([node.id for node in nodes], edges)
    diagnostics.extend(edge_diagnostics)

    connectivity = ConnectivityIndex([node.id for node in nodes], edges)

    positioner = GridPositioner(grid_spacing=settings.grid_spacing,
                                group_spacing=settings.group_spacing,
                                max_search_radius=settings.max_search_radius)
    positioner.position(nodes, groups, connectivity)
    diagnostics.extend(positioner.diagnostics)

    positions = {node.id: node.position for node in nodes}
    diagnostics.extend(compute_group_boundaries(groups, positions, settings))

    arcs = [
        edge_arc(positions[edge.source], positions[edge.target],
                 segments=settings.arc_segments, height_ratio=settings.arc_height_ratio)
        for edge in edges
    ]

    logger.info("Layout complete",
                nodes=len(nodes),
                edges=len(edges),
                groups=len(groups),
                diagnostics=len(diagnostics))

    return LayoutResult(nodes=nodes, edges=edges, groups=groups, arcs=arcs, diagnostics=diagnostics)
