"""Group bounds tracking and inter-group spacing in grid space."""

from dataclasses import dataclass
from typing import Dict, Optional, Set

from .graph_model import GridCell

DEFAULT_GROUP_SPACING = 3  # grid units kept free around every group


@dataclass
class GridBounds:
    """Inclusive axis-aligned bounds of a group in grid space."""
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @classmethod
    def from_cell(cls, cell: GridCell) -> "GridBounds":
        x, y = cell
        return cls(min_x=x, max_x=x, min_y=y, max_y=y)

    def include(self, cell: GridCell) -> None:
        x, y = cell
        self.min_x = min(self.min_x, x)
        self.max_x = max(self.max_x, x)
        self.min_y = min(self.min_y, y)
        self.max_y = max(self.max_y, y)

    def contains(self, cell: GridCell) -> bool:
        x, y = cell
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def buffered(self, margin: int) -> "GridBounds":
        return GridBounds(
            min_x=self.min_x - margin,
            max_x=self.max_x + margin,
            min_y=self.min_y - margin,
            max_y=self.max_y + margin,
        )

    def intersects(self, other: "GridBounds") -> bool:
        return not (
            self.max_x < other.min_x or other.max_x < self.min_x
            or self.max_y < other.min_y or other.max_y < self.min_y
        )

    def to_dict(self) -> Dict[str, int]:
        return {"min_x": self.min_x, "max_x": self.max_x, "min_y": self.min_y, "max_y": self.max_y}


class GroupSpacingTracker:
    """
    Occupied grid cells plus per-group bounds for one placement run.

    A cell can be taken by a group only if it is free and outside the
    spacing buffer of every *other* group. Ungrouped nodes
    (``current_group=None``) must stay outside every group's buffer.
    """

    def __init__(self, spacing: int = DEFAULT_GROUP_SPACING):
        self.spacing = spacing
        self.occupied: Set[GridCell] = set()
        self._bounds: Dict[str, GridBounds] = {}

    def is_occupied(self, cell: GridCell) -> bool:
        return cell in self.occupied

    def occupy(self, cell: GridCell) -> None:
        self.occupied.add(cell)

    def can_place(self, cell: GridCell, current_group: Optional[str]) -> bool:
        if cell in self.occupied:
            return False

        for group_id, bounds in self._bounds.items():
            if group_id == current_group:
                continue
            if bounds.buffered(self.spacing).contains(cell):
                return False

        return True

    def update(self, group_id: str, cell: GridCell) -> None:
        """Extend a group's bounds to cover ``cell``."""
        bounds = self._bounds.get(group_id)
        if bounds is None:
            self._bounds[group_id] = GridBounds.from_cell(cell)
        else:
            bounds.include(cell)

    def bounds(self, group_id: str) -> Optional[GridBounds]:
        return self._bounds.get(group_id)

    def all_bounds(self) -> Dict[str, GridBounds]:
        return dict(self._bounds)
