#!/usr/bin/env python3
"""Plot a computed layout from above: nodes, edges and group boundaries."""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from py_netlayout.api import GraphDescription, build_layout
from py_netlayout.utils import configure_logging


def visualize_layout(graph_path, output_path=None):
    """Render the x/z plane of a layout with matplotlib."""
    configure_logging("WARNING")

    description = GraphDescription.from_json_file(graph_path)
    result = build_layout(description)

    fig, ax = plt.subplots(figsize=(10, 10))
    cmap = plt.get_cmap("tab10")

    # Group boundaries: only segments lying on the top face read well from above
    for i, group in enumerate(result.groups):
        color = group.color or cmap(i % 10)
        top = max((max(e.start[1], e.end[1]) for e in group.boundary), default=0.0)
        for edge in group.boundary:
            if edge.start[1] == top and edge.end[1] == top:
                ax.plot([edge.start[0], edge.end[0]], [edge.start[2], edge.end[2]],
                        color=color, linewidth=1.5, alpha=0.7)
        if group.centroid is not None:
            ax.annotate(group.name or group.id, (group.centroid[0], group.centroid[2]),
                        color=color, fontsize=9, ha="center", va="bottom")

    for arc in result.arcs:
        ax.plot(arc[:, 0], arc[:, 2], color="gray", linewidth=0.6, alpha=0.5)

    positions = np.array([node.position for node in result.nodes]).reshape(-1, 3)
    if len(positions):
        ax.scatter(positions[:, 0], positions[:, 2], s=30, color="black", zorder=3)
    for node in result.nodes:
        ax.annotate(node.name or node.id, (node.position[0], node.position[2]),
                    fontsize=7, xytext=(3, 3), textcoords="offset points")

    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title(f"{Path(graph_path).name}: {len(result.nodes)} nodes, {len(result.groups)} groups")

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        print(f"Saved {output_path}")
    else:
        plt.show()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python visualize_layout.py graph.json [output.png]")
        sys.exit(1)
    visualize_layout(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
