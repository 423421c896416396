"""Graph records consumed and annotated by the layout engine."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .spacing import GridBounds
    from .voxel_boundary import BoundaryEdge

GridCell = Tuple[int, int]
Point3 = Tuple[float, float, float]


@dataclass
class Node:
    """A graph node.

    ``grid`` and ``position`` are written once by the GridPositioner.
    ``name``, ``color`` and ``content`` belong to the host and are only
    carried through.
    """
    id: str
    group_ids: List[str] = field(default_factory=list)
    degree: int = 0
    grid: Optional[GridCell] = None
    position: Optional[Point3] = None

    # Host-owned fields
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None

    @property
    def primary_group(self) -> Optional[str]:
        """First listed group, authoritative for placement."""
        return self.group_ids[0] if self.group_ids else None

    @property
    def is_placed(self) -> bool:
        return self.grid is not None


@dataclass
class Edge:
    """A directed edge between two existing nodes."""
    source: str
    target: str
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None


@dataclass
class Group:
    """A named cluster of nodes.

    Derived fields are filled after placement (``bounds``) and after
    boundary extraction (``centroid``, ``boundary``, ``voxel_count``,
    ``component_count``).
    """
    id: str
    member_ids: List[str] = field(default_factory=list)
    name: Optional[str] = None
    color: Optional[str] = None
    content: Optional[str] = None

    bounds: Optional["GridBounds"] = None
    centroid: Optional[Point3] = None
    boundary: List["BoundaryEdge"] = field(default_factory=list)
    voxel_count: int = 0
    component_count: int = 0
