"""Tests for grid placement."""

import pytest

from py_netlayout.core.connectivity import ConnectivityIndex
from py_netlayout.core.errors import DiagnosticKind, LayoutError
from py_netlayout.core.graph_model import Edge, Group, Node
from py_netlayout.core.grid_positioner import GridPositioner, grid_to_world, ring_cells


def make_graph(node_specs, edge_pairs, group_ids=()):
    """Build nodes, edges, groups and connectivity from compact specs.

    node_specs is a list of (id, [group ids]) tuples.
    """
    nodes = [Node(id=node_id, group_ids=list(groups)) for node_id, groups in node_specs]
    edges = [Edge(source=s, target=t) for s, t in edge_pairs]
    groups = [Group(id=g, member_ids=[n.id for n in nodes if g in n.group_ids]) for g in group_ids]
    connectivity = ConnectivityIndex([n.id for n in nodes], edges)
    return nodes, groups, connectivity


def by_id(nodes):
    return {node.id: node for node in nodes}


class TestRingCells:
    """Test ring scan order."""

    def test_radius_zero_is_center(self):
        assert list(ring_cells((3, -2), 0)) == [(3, -2)]

    def test_radius_one_order(self):
        """dx is the outer loop, dy the inner loop."""
        assert list(ring_cells((0, 0), 1)) == [
            (-1, -1), (-1, 0), (-1, 1),
            (0, -1), (0, 1),
            (1, -1), (1, 0), (1, 1),
        ]

    @pytest.mark.parametrize("radius", [1, 2, 5, 10])
    def test_ring_size(self, radius):
        cells = list(ring_cells((4, 7), radius))
        assert len(cells) == 8 * radius
        assert len(set(cells)) == len(cells)
        for x, y in cells:
            assert max(abs(x - 4), abs(y - 7)) == radius

    def test_grid_to_world(self):
        assert grid_to_world((2, -3), 80.0) == (160.0, 0.0, -240.0)


class TestChainScenario:
    """Three-node chain without groups."""

    def test_chain_placement(self):
        nodes, groups, connectivity = make_graph(
            [("A", []), ("B", []), ("C", [])],
            [("A", "B"), ("B", "C")],
        )
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert [placed[n].degree for n in "ABC"] == [1, 2, 1]
        assert positioner.placement_order == ["B", "A", "C"]

        assert placed["B"].grid == (0, 0)
        assert placed["A"].grid == (1, 0)
        assert placed["C"].grid == (-1, 0)

        assert placed["B"].position == (0.0, 0.0, 0.0)
        assert placed["A"].position == (80.0, 0.0, 0.0)
        assert placed["C"].position == (-80.0, 0.0, 0.0)

    def test_custom_spacing(self):
        nodes, groups, connectivity = make_graph([("A", []), ("B", [])], [("A", "B")])
        GridPositioner(grid_spacing=10.0).position(nodes, groups, connectivity)
        assert by_id(nodes)["B"].position == (10.0, 0.0, 0.0)


class TestGroupPlacement:
    """Test group clustering and spacing."""

    def test_two_groups_without_edges(self):
        nodes, groups, connectivity = make_graph(
            [("a1", ["G1"]), ("a2", ["G1"]), ("a3", ["G1"]),
             ("b1", ["G2"]), ("b2", ["G2"]), ("b3", ["G2"])],
            [],
            group_ids=["G1", "G2"],
        )
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert placed["a1"].grid == (0, 0)
        assert placed["a2"].grid == (1, 0)
        assert placed["a3"].grid == (-1, 0)

        # First ring cell clear of G1's buffer (x in [-4, 4], y in [-3, 3])
        assert placed["b1"].grid == (-4, -4)
        assert placed["b2"].grid == (-3, -4)
        assert placed["b3"].grid == (-5, -4)

        g1, g2 = groups
        assert g1.bounds.to_dict() == {"min_x": -1, "max_x": 1, "min_y": 0, "max_y": 0}
        assert g2.bounds.to_dict() == {"min_x": -5, "max_x": -3, "min_y": -4, "max_y": -4}
        assert positioner.group_order == ["G1", "G2"]

    def test_groups_ranked_by_total_degree(self):
        nodes, groups, connectivity = make_graph(
            [("a", ["G1"]), ("b", ["G2"]), ("c", ["G2"])],
            [("b", "c")],
            group_ids=["G1", "G2"],
        )
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert positioner.group_order == ["G2", "G1"]
        assert placed["b"].grid == (0, 0)
        assert placed["c"].grid == (1, 0)
        assert placed["a"].grid == (-4, -4)

    def test_members_sorted_by_degree(self):
        nodes, groups, connectivity = make_graph(
            [("leaf", ["G"]), ("hub", ["G"]), ("other", [])],
            [("hub", "other"), ("hub", "leaf")],
            group_ids=["G"],
        )
        GridPositioner().position(nodes, groups, connectivity)
        assert by_id(nodes)["hub"].grid == (0, 0)

    def test_first_group_is_primary(self):
        nodes, groups, connectivity = make_graph(
            [("a", ["G1"]), ("b", ["G2", "G1"])],
            [],
            group_ids=["G1", "G2"],
        )
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)

        assert positioner.group_order == ["G1", "G2"]
        assert groups[1].bounds.contains(by_id(nodes)["b"].grid)
        assert not groups[0].bounds.contains(by_id(nodes)["b"].grid)

    def test_group_without_primary_members_has_no_bounds(self):
        nodes, groups, connectivity = make_graph(
            [("a", ["G1", "G2"])],
            [],
            group_ids=["G1", "G2"],
        )
        GridPositioner().position(nodes, groups, connectivity)
        assert groups[0].bounds is not None
        assert groups[1].bounds is None

    def test_ungrouped_node_stays_clear_of_groups(self):
        nodes, groups, connectivity = make_graph(
            [("a", ["G"]), ("u", [])],
            [("a", "u")],
            group_ids=["G"],
        )
        GridPositioner().position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert placed["a"].grid == (0, 0)
        # Every neighbour of a is inside G's buffer; ring search around a
        assert placed["u"].grid == (-4, -4)


class TestSearchExhaustion:
    """Test the unconstrained fallback."""

    def test_fallback_ignores_spacing(self):
        nodes, groups, connectivity = make_graph(
            [("a", ["G1"]), ("b", ["G2"])],
            [],
            group_ids=["G1", "G2"],
        )
        positioner = GridPositioner(max_search_radius=0)
        positioner.position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert placed["a"].grid == (0, 0)
        assert placed["b"].grid == (-1, -1)
        assert len(positioner.diagnostics) == 1
        assert positioner.diagnostics[0].kind == DiagnosticKind.SEARCH_EXHAUSTED
        assert positioner.diagnostics[0].context["node"] == "b"

    def test_blocked_member_searches_from_first_member(self):
        """b1 falls back into a's buffer, so every neighbour of b1 is blocked."""
        nodes, groups, connectivity = make_graph(
            [("a1", ["A"]), ("b1", ["B"]), ("b2", ["B"])],
            [],
            group_ids=["A", "B"],
        )
        positioner = GridPositioner(group_spacing=3, max_search_radius=0)
        positioner.position(nodes, groups, connectivity)
        placed = by_id(nodes)

        assert placed["a1"].grid == (0, 0)
        assert placed["b1"].grid == (-1, -1)
        # Ring search centred on b1; centred on the origin it would give (-1, 0)
        assert placed["b2"].grid == (-2, -2)

        assert [d.context["node"] for d in positioner.diagnostics] == ["b1", "b2"]
        assert positioner.diagnostics[1].context["cell"] == (-2, -2)


class TestEdgeCases:
    """Test empty and invalid usage."""

    def test_empty_input(self):
        tracker = GridPositioner().position([], [], ConnectivityIndex([], []))
        assert tracker.occupied == set()
        assert tracker.all_bounds() == {}

    def test_already_placed_raises(self):
        nodes, groups, connectivity = make_graph([("a", [])], [])
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)

        with pytest.raises(LayoutError):
            positioner.position(nodes, groups, connectivity)


def build_large_graph():
    """Five groups of mixed size, cross edges and ungrouped satellites."""
    node_specs = []
    edge_pairs = []
    group_ids = [f"G{g}" for g in range(5)]

    for g, size in enumerate([7, 3, 12, 1, 5]):
        members = [f"g{g}n{i}" for i in range(size)]
        node_specs.extend((m, [f"G{g}"]) for m in members)
        edge_pairs.extend(zip(members, members[1:]))

    for i in range(8):
        node_specs.append((f"u{i}", []))
        edge_pairs.append((f"u{i}", f"g{i % 5}n0"))

    edge_pairs.extend([("g0n1", "g2n3"), ("g2n0", "g4n2"), ("u0", "u1")])
    return make_graph(node_specs, edge_pairs, group_ids)


class TestLayoutProperties:
    """Properties that must hold for any input."""

    @pytest.fixture
    def placed(self):
        nodes, groups, connectivity = build_large_graph()
        positioner = GridPositioner()
        positioner.position(nodes, groups, connectivity)
        return nodes, groups, positioner

    def test_all_nodes_placed(self, placed):
        nodes, _, positioner = placed
        assert all(node.is_placed for node in nodes)
        assert sorted(positioner.placement_order) == sorted(node.id for node in nodes)

    def test_no_collisions(self, placed):
        nodes, _, _ = placed
        cells = [node.grid for node in nodes]
        assert len(set(cells)) == len(cells)

    def test_group_containment(self, placed):
        nodes, groups, _ = placed
        bounds = {group.id: group.bounds for group in groups}
        for node in nodes:
            if node.primary_group:
                assert bounds[node.primary_group].contains(node.grid)

    def test_spacing(self, placed):
        """Later groups never enter an earlier group's buffer; ungrouped nodes enter none."""
        nodes, groups, positioner = placed
        assert not positioner.diagnostics

        bounds = {group.id: group.bounds for group in groups}
        rank = {group_id: i for i, group_id in enumerate(positioner.group_order)}

        for node in nodes:
            for group_id, group_bounds in bounds.items():
                if group_id == node.primary_group:
                    continue
                if node.primary_group is None or rank[node.primary_group] > rank[group_id]:
                    assert not group_bounds.buffered(3).contains(node.grid), (node.id, group_id)

    def test_determinism(self, placed):
        nodes, _, _ = placed
        again, groups, connectivity = build_large_graph()
        GridPositioner().position(again, groups, connectivity)

        assert [n.grid for n in nodes] == [n.grid for n in again]
        assert [n.position for n in nodes] == [n.position for n in again]
