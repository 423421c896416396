"""
Voxel-based exterior wireframes for node groups.

A group's outline is the surface of the union of cubes of half-extent
``padding`` centered on its members:
1. Each member position is snapped to a voxel of edge length 2 * padding
2. Node voxels are joined by axis-by-axis corridors so the union reads as
   one shape
3. Every voxel face whose neighbour is empty contributes its 4 edges
4. Edges are canonicalized and deduplicated in first-seen order

Occupancy is a sparse, insertion-ordered set; nothing is allocated for
empty space, component counting included.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components, minimum_spanning_tree

from .errors import Diagnostic, DiagnosticKind
from .graph_model import Point3

logger = structlog.get_logger()

DEFAULT_PADDING = 20.0
COORD_PRECISION = 2  # decimals kept when canonicalizing edge endpoints

Voxel = Tuple[int, int, int]

# Face order: -z, +z, -x, +x, -y, +y
FACE_DIRECTIONS: Tuple[Voxel, ...] = (
    (0, 0, -1), (0, 0, 1),
    (-1, 0, 0), (1, 0, 0),
    (0, -1, 0), (0, 1, 0),
)

# In-plane axes (u, v) walked around a face perpendicular to each axis
FACE_PLANE_AXES = {0: (1, 2), 1: (0, 2), 2: (0, 1)}


class CorridorStrategy(str, Enum):
    """How node voxels are joined before face extraction."""

    NEAREST = "nearest"              # each node voxel to its nearest other node voxel
    SPANNING_TREE = "spanning_tree"  # minimum spanning tree over node voxels


@dataclass(frozen=True)
class BoundaryEdge:
    """A wireframe segment with canonically ordered, rounded endpoints."""
    start: Point3
    end: Point3

    @classmethod
    def canonical(cls, a: Iterable[float], b: Iterable[float]) -> "BoundaryEdge":
        p = tuple(round(float(c), COORD_PRECISION) for c in a)
        q = tuple(round(float(c), COORD_PRECISION) for c in b)
        return cls(p, q) if p <= q else cls(q, p)

    @property
    def axis(self) -> Optional[int]:
        """Index of the single varying coordinate, None for diagonal or degenerate edges."""
        varying = [i for i in range(3) if self.start[i] != self.end[i]]
        return varying[0] if len(varying) == 1 else None

    @property
    def key(self) -> Tuple[float, ...]:
        return self.start + self.end

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)


@dataclass
class VoxelBoundary:
    """Result of voxelizing one group."""
    node_voxels: List[Voxel] = field(default_factory=list)
    occupied: List[Voxel] = field(default_factory=list)
    edges: List[BoundaryEdge] = field(default_factory=list)
    component_count: int = 0


def voxel_coordinate(position: Sequence[float], voxel_size: float) -> Voxel:
    """Snap a world position to its voxel, rounding halves toward +infinity."""
    return tuple(int(math.floor(c / voxel_size + 0.5)) for c in position)


def count_components(occupied: Iterable[Voxel]) -> int:
    """Number of face-connected components in a sparse voxel set."""
    index = {voxel: i for i, voxel in enumerate(dict.fromkeys(occupied))}
    if not index:
        return 0

    # Only the +x, +y, +z neighbours; the graph is undirected
    rows, cols = [], []
    for (vx, vy, vz), i in index.items():
        for dx, dy, dz in ((1, 0, 0), (0, 1, 0), (0, 0, 1)):
            j = index.get((vx + dx, vy + dy, vz + dz))
            if j is not None:
                rows.append(i)
                cols.append(j)

    rows = np.array(rows, dtype=np.int64)
    cols = np.array(cols, dtype=np.int64)
    adjacency = coo_matrix(
        (np.ones(len(rows), dtype=np.int8), (rows, cols)),
        shape=(len(index), len(index)),
    )
    n_components, _ = connected_components(adjacency, directed=False)
    return int(n_components)


class VoxelBoundaryBuilder:
    """Builds exterior wireframe edges for groups of node positions."""

    def __init__(self,
                 padding: float = DEFAULT_PADDING,
                 corridor_strategy: CorridorStrategy = CorridorStrategy.NEAREST):
        self.padding = padding
        self.voxel_size = padding * 2
        self.corridor_strategy = CorridorStrategy(corridor_strategy)
        self.diagnostics: List[Diagnostic] = []

    def build(self, positions: Sequence[Point3], group_id: Optional[str] = None) -> VoxelBoundary:
        """
        Voxelize member positions and extract the exterior edges.

        Args:
            positions: World positions of the group's members
            group_id: Used for logging and diagnostics only

        Returns:
            VoxelBoundary with node voxels, occupied voxels and unique edges
        """
        if not positions:
            return VoxelBoundary()

        node_voxels = [voxel_coordinate(p, self.voxel_size) for p in positions]

        # dict keeps insertion order: node voxels first, then corridors
        occupied: Dict[Voxel, None] = dict.fromkeys(node_voxels)

        if self.corridor_strategy is CorridorStrategy.SPANNING_TREE:
            self.connect_spanning_tree(node_voxels, occupied)
        else:
            self.connect_nearest(node_voxels, occupied)

        components = count_components(occupied)
        if components > 1:
            logger.warning("Group voxels are not connected",
                           group=group_id, components=components,
                           strategy=self.corridor_strategy.value)
            self.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.DISCONNECTED,
                message=f"Group {group_id!r} boundary has {components} separate components",
                context={"group": group_id, "components": components},
            ))

        edges = self.extract_edges(occupied)

        logger.debug("Voxel boundary built",
                     group=group_id,
                     nodes=len(node_voxels),
                     voxels=len(occupied),
                     edges=len(edges))

        return VoxelBoundary(
            node_voxels=node_voxels,
            occupied=list(occupied),
            edges=edges,
            component_count=components,
        )

    def connect_nearest(self, node_voxels: List[Voxel], occupied: Dict[Voxel, None]) -> None:
        """
        Carve a corridor from every node voxel to its nearest other node voxel.

        Ties go to the first voxel in member order. This does not guarantee a
        single component: two mutual-nearest pairs stay apart.
        """
        if len(node_voxels) < 2:
            return

        coords = np.array(node_voxels, dtype=np.int64)
        for i, voxel in enumerate(node_voxels):
            # Squared integer distances order exactly like Euclidean ones
            dist_sq = ((coords - coords[i]) ** 2).sum(axis=1)
            dist_sq[i] = np.iinfo(np.int64).max
            nearest = int(np.argmin(dist_sq))
            self.carve_corridor(voxel, node_voxels[nearest], occupied)

    def connect_spanning_tree(self, node_voxels: List[Voxel], occupied: Dict[Voxel, None]) -> None:
        """Carve corridors along a minimum spanning tree of the distinct node voxels."""
        unique = list(dict.fromkeys(node_voxels))
        if len(unique) < 2:
            return

        coords = np.array(unique, dtype=np.float64)
        diff = coords[:, None, :] - coords[None, :, :]
        distances = np.sqrt((diff ** 2).sum(axis=2))

        tree = minimum_spanning_tree(distances).tocoo()
        for i, j in sorted(zip(tree.row.tolist(), tree.col.tolist())):
            self.carve_corridor(unique[i], unique[j], occupied)

    @staticmethod
    def carve_corridor(start: Voxel, end: Voxel, occupied: Dict[Voxel, None]) -> None:
        """
        Mark voxels from ``start`` toward ``end``: all x steps, then y, then z.

        The end voxel itself is not marked; it is a node voxel already.
        """
        x1, y1, z1 = start
        x2, y2, z2 = end

        step = 1 if x1 < x2 else -1
        for x in range(x1, x2, step):
            occupied.setdefault((x, y1, z1), None)

        step = 1 if y1 < y2 else -1
        for y in range(y1, y2, step):
            occupied.setdefault((x2, y, z1), None)

        step = 1 if z1 < z2 else -1
        for z in range(z1, z2, step):
            occupied.setdefault((x2, y2, z), None)

    def exterior_faces(self, occupied: Dict[Voxel, None]) -> List[Tuple[Voxel, Voxel]]:
        """(voxel, direction) for every face whose neighbour voxel is empty."""
        faces = []
        for voxel in occupied:
            vx, vy, vz = voxel
            for direction in FACE_DIRECTIONS:
                dx, dy, dz = direction
                if (vx + dx, vy + dy, vz + dz) not in occupied:
                    faces.append((voxel, direction))
        return faces

    def face_edges(self, voxel: Voxel, direction: Voxel) -> List[BoundaryEdge]:
        """The 4 edges of one voxel face, walked around the face."""
        half = self.voxel_size / 2
        center = [c * self.voxel_size for c in voxel]

        axis = next(i for i, d in enumerate(direction) if d != 0)
        u, v = FACE_PLANE_AXES[axis]

        plane = center[axis] + direction[axis] * half
        u_min, u_max = center[u] - half, center[u] + half
        v_min, v_max = center[v] - half, center[v] + half

        corners = []
        for cu, cv in ((u_min, v_min), (u_max, v_min), (u_max, v_max), (u_min, v_max)):
            point = [0.0, 0.0, 0.0]
            point[axis] = plane
            point[u] = cu
            point[v] = cv
            corners.append(point)

        return [BoundaryEdge.canonical(corners[k], corners[(k + 1) % 4]) for k in range(4)]

    def extract_edges(self, occupied: Dict[Voxel, None]) -> List[BoundaryEdge]:
        """Unique exterior edges in first-emitted order."""
        unique: Dict[Tuple[float, ...], BoundaryEdge] = {}
        for voxel, direction in self.exterior_faces(occupied):
            for edge in self.face_edges(voxel, direction):
                unique.setdefault(edge.key, edge)
        return list(unique.values())
