#!/usr/bin/env python3
"""
Lay out a graph description and write the result as JSON.

This runs the full pipeline:
1. Membership resolution and edge validation
2. Grid placement with group spacing
3. Voxel boundaries and collinear merging per group
4. Edge arcs

Usage:
    python generate_layout.py graph.json [-o layout.json] [--strategy spanning_tree]
"""

import argparse
import sys
from pathlib import Path

from py_netlayout.api import GraphDescription, build_layout
from py_netlayout.config import LayoutSettings
from py_netlayout.utils import configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compute grid layout and group boundaries for a graph")
    parser.add_argument("graph", type=Path, help="JSON graph description (nodes, edges, groups)")
    parser.add_argument("-o", "--output", type=Path, help="Output file (defaults to stdout)")
    parser.add_argument("--strategy", choices=["nearest", "spanning_tree"], help="Corridor strategy")
    parser.add_argument("--spacing", type=float, help="World units per grid cell")
    parser.add_argument("--padding", type=float, help="Voxel padding around each node")
    args = parser.parse_args(argv)

    overrides = {}
    if args.strategy:
        overrides["corridor_strategy"] = args.strategy
    if args.spacing is not None:
        overrides["grid_spacing"] = args.spacing
    if args.padding is not None:
        overrides["voxel_padding"] = args.padding
    settings = LayoutSettings(**overrides)

    configure_logging(settings.log_level, settings.log_format)

    description = GraphDescription.from_json_file(args.graph)
    result = build_layout(description, settings)
    payload = result.to_response().model_dump_json(indent=2)

    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Wrote layout for {len(result.nodes)} nodes and {len(result.groups)} groups to {args.output}",
              file=sys.stderr)
    else:
        print(payload)

    for diagnostic in result.diagnostics:
        print(f"  warning [{diagnostic.kind.value}]: {diagnostic.message}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
