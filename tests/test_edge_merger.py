"""Tests for collinear edge merging."""

from py_netlayout.core.edge_merger import MERGE_TOLERANCE, merge_collinear_edges
from py_netlayout.core.voxel_boundary import BoundaryEdge, VoxelBoundaryBuilder


def seg(a, b):
    return BoundaryEdge.canonical(a, b)


class TestMergeCollinearEdges:
    """Test merging behaviour."""

    def test_chain_merges(self):
        edges = [seg((0, 0, 0), (1, 0, 0)), seg((1, 0, 0), (2, 0, 0)), seg((2, 0, 0), (3, 0, 0))]
        assert merge_collinear_edges(edges) == [seg((0, 0, 0), (3, 0, 0))]

    def test_out_of_order_chain(self):
        edges = [seg((2, 0, 0), (3, 0, 0)), seg((0, 0, 0), (1, 0, 0)), seg((1, 0, 0), (2, 0, 0))]
        assert merge_collinear_edges(edges) == [seg((0, 0, 0), (3, 0, 0))]

    def test_gap_not_merged(self):
        edges = [seg((0, 0, 0), (1, 0, 0)), seg((2, 0, 0), (3, 0, 0))]
        assert merge_collinear_edges(edges) == edges

    def test_parallel_lines_stay_apart(self):
        edges = [seg((0, 0, 0), (1, 0, 0)), seg((1, 1, 0), (2, 1, 0)), seg((1, 0, 1), (2, 0, 1))]
        assert merge_collinear_edges(edges) == edges

    def test_perpendicular_not_merged(self):
        edges = [seg((0, 0, 0), (1, 0, 0)), seg((1, 0, 0), (1, 1, 0))]
        assert merge_collinear_edges(edges) == edges

    def test_tolerance(self):
        # Built directly: canonical() would round the gap away
        edges = [seg((0, 0, 0), (1, 0, 0)), BoundaryEdge((1.005, 0.0, 0.0), (2.0, 0.0, 0.0))]
        assert merge_collinear_edges(edges) == [seg((0, 0, 0), (2, 0, 0))]
        assert merge_collinear_edges(edges, tolerance=0.001) == edges
        assert MERGE_TOLERANCE == 0.01

    def test_output_grouped_by_line_in_first_seen_order(self):
        edges = [
            seg((0, 0, 0), (0, 1, 0)),
            seg((0, 0, 0), (1, 0, 0)),
            seg((0, 1, 0), (0, 2, 0)),
        ]
        assert merge_collinear_edges(edges) == [seg((0, 0, 0), (0, 2, 0)), seg((0, 0, 0), (1, 0, 0))]

    def test_diagonal_edges_dropped(self):
        edges = [seg((0, 0, 0), (1, 1, 0)), seg((0, 0, 0), (1, 0, 0))]
        assert merge_collinear_edges(edges) == [seg((0, 0, 0), (1, 0, 0))]

    def test_empty(self):
        assert merge_collinear_edges([]) == []


class TestMergeIdempotence:
    """Merging a merged list changes nothing."""

    def test_on_voxel_boundary(self):
        builder = VoxelBoundaryBuilder(padding=20.0)
        positions = [(0.0, 0.0, 0.0), (80.0, 0.0, 0.0), (80.0, 0.0, 80.0), (-80.0, 0.0, 160.0)]
        boundary = builder.build(positions)

        merged = merge_collinear_edges(boundary.edges)
        assert len(merged) < len(boundary.edges)
        assert merge_collinear_edges(merged) == merged

    def test_preserves_total_length(self):
        builder = VoxelBoundaryBuilder(padding=20.0)
        boundary = builder.build([(0.0, 0.0, 0.0), (160.0, 0.0, 0.0), (160.0, 0.0, 160.0)])

        merged = merge_collinear_edges(boundary.edges)
        raw_length = sum(edge.length for edge in boundary.edges)
        merged_length = sum(edge.length for edge in merged)
        assert abs(raw_length - merged_length) < 1e-6
