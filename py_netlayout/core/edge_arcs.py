"""Arc polylines for drawing edges above the ground plane."""

import numpy as np

from .graph_model import Point3

DEFAULT_ARC_SEGMENTS = 50
DEFAULT_ARC_HEIGHT_RATIO = 0.3  # control point height as a fraction of edge length


def edge_arc(
    start: Point3,
    end: Point3,
    segments: int = DEFAULT_ARC_SEGMENTS,
    height_ratio: float = DEFAULT_ARC_HEIGHT_RATIO,
) -> np.ndarray:
    """
    Sample a quadratic Bezier arc between two node positions.

    The control point sits above the midpoint along +y, raised by
    ``height_ratio`` times the straight-line distance.

    Args:
        start: Source node world position
        end: Target node world position
        segments: Number of segments; segments + 1 points are returned
        height_ratio: Arc height relative to edge length

    Returns:
        Array of shape (segments + 1, 3)
    """
    p0 = np.asarray(start, dtype=np.float64)
    p2 = np.asarray(end, dtype=np.float64)

    control = (p0 + p2) / 2
    control[1] += np.linalg.norm(p2 - p0) * height_ratio

    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * control + t ** 2 * p2
