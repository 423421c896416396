"""
Example demonstrating grid layout and group boundaries.
"""

from pathlib import Path

from py_netlayout.api import GraphDescription, build_layout
from py_netlayout.config import LayoutSettings


def main():
    description = GraphDescription.from_json_file(Path(__file__).parent / "sample_graph.json")

    for strategy in ("nearest", "spanning_tree"):
        result = build_layout(description, LayoutSettings(corridor_strategy=strategy))

        print(f"\nCorridor strategy: {strategy}")
        print("Node placement:")
        for node in result.nodes:
            print(f"  {node.id:10s} grid={node.grid} degree={node.degree} groups={node.group_ids}")

        print("Groups:")
        for group in result.groups:
            print(f"  {group.id:10s} bounds={group.bounds.to_dict() if group.bounds else None}")
            print(f"  {'':10s} voxels={group.voxel_count} components={group.component_count} "
                  f"segments={len(group.boundary)}")

        if result.diagnostics:
            print("Diagnostics:")
            for diagnostic in result.diagnostics:
                print(f"  [{diagnostic.kind.value}] {diagnostic.message}")


if __name__ == "__main__":
    main()
