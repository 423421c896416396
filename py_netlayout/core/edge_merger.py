"""Collinear merging of axis-aligned boundary edges."""

from typing import Dict, List, Sequence, Tuple

import structlog

from .voxel_boundary import COORD_PRECISION, BoundaryEdge

logger = structlog.get_logger()

MERGE_TOLERANCE = 0.01  # world units; endpoints closer than this coincide


def _line_key(edge: BoundaryEdge, axis: int) -> Tuple[float, ...]:
    fixed = tuple(round(edge.start[i], COORD_PRECISION) for i in range(3) if i != axis)
    return (axis,) + fixed


def _with_extent(edge: BoundaryEdge, axis: int, low: float, high: float) -> BoundaryEdge:
    start = list(edge.start)
    end = list(edge.end)
    start[axis] = low
    end[axis] = high
    return BoundaryEdge(tuple(start), tuple(end))


def _merge_line(segments: List[BoundaryEdge], axis: int, tolerance: float) -> List[BoundaryEdge]:
    """Greedily chain segments lying on one axis-aligned line."""
    used = [False] * len(segments)
    chains = []

    for i, segment in enumerate(segments):
        if used[i]:
            continue
        used[i] = True

        low, high = segment.start[axis], segment.end[axis]
        extended = True
        while extended:
            extended = False
            for j, other in enumerate(segments):
                if used[j]:
                    continue
                if abs(high - other.start[axis]) < tolerance:
                    high = other.end[axis]
                    used[j] = True
                    extended = True
                elif abs(low - other.end[axis]) < tolerance:
                    low = other.start[axis]
                    used[j] = True
                    extended = True

        chains.append(_with_extent(segment, axis, low, high))

    return chains


def merge_collinear_edges(
    edges: Sequence[BoundaryEdge], tolerance: float = MERGE_TOLERANCE
) -> List[BoundaryEdge]:
    """
    Collapse end-to-end collinear edges into longer segments.

    Edges are grouped by (axis, the two fixed coordinates) in first-seen
    order, and each line is merged greedily in input order, so the output
    order follows the input enumeration. Merging an already merged list
    returns it unchanged.

    Args:
        edges: Canonical edges, e.g. from VoxelBoundaryBuilder.extract_edges
        tolerance: Maximum gap between endpoints treated as touching

    Returns:
        Merged edges
    """
    lines: Dict[Tuple[float, ...], List[BoundaryEdge]] = {}
    skipped = 0

    for edge in edges:
        axis = edge.axis
        if axis is None:
            skipped += 1
            continue
        lines.setdefault(_line_key(edge, axis), []).append(edge)

    if skipped:
        logger.debug("Skipped edges that are not axis-aligned", count=skipped)

    merged = []
    for key, segments in lines.items():
        merged.extend(_merge_line(segments, int(key[0]), tolerance))

    logger.debug("Merged collinear edges", input=len(edges), output=len(merged), lines=len(lines))
    return merged
