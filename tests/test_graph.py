import math

import pytest

from warpath.config import EdgeWeights
from warpath.planner.graph import WeightedGraph, edge_weight

from conftest import A, B, C, D, E, ENEMY, NEUTRAL, SELF, build_snapshot, random_snapshot


def brute_force_cost(graph, source, destination):
    """Cheapest simple path cost by exhaustive search, ``math.inf`` when unreachable."""
    best = math.inf
    stack = [(source, 0, {source})]
    while stack:
        current, cost, seen = stack.pop()
        if current == destination:
            best = min(best, cost)
            continue
        for neighbour, weight in graph.neighbours(current).items():
            if neighbour not in seen:
                stack.append((neighbour, cost + weight, seen | {neighbour}))
    return best


class TestEdgeWeights:
    def test_enemy_neighbour_costs_base_plus_garrison(self):
        snapshot = build_snapshot({A: (SELF, 0, 1), B: (ENEMY, 1, 7)}, [(A, B)])
        graph = WeightedGraph.from_snapshot(snapshot)
        assert graph.weight(A, B) == 3 + 7
        assert graph.weight(B, A) == 3

    def test_friendly_city_is_cheaper(self):
        snapshot = build_snapshot({A: (SELF, 2, 1), B: (SELF, 0, 1), C: (NEUTRAL, 1, 4)}, [(A, B), (B, C)])
        graph = WeightedGraph.from_snapshot(snapshot)
        assert graph.weight(B, A) == 2
        assert graph.weight(A, B) == 3
        assert graph.weight(B, C) == 3

    def test_weights_never_drop_below_one(self):
        snapshot = build_snapshot({A: (SELF, 1, 1), B: (SELF, 1, 1)}, [(A, B)])
        weights = EdgeWeights(base=1, friendly_city_discount=5, minimum=0)
        assert edge_weight(snapshot, B, weights) == 1

    def test_every_territory_is_a_vertex(self):
        snapshot = build_snapshot({A: (SELF, 0, 1), B: (NEUTRAL, 0, 0), C: (NEUTRAL, 0, 0)}, [(A, B)])
        graph = WeightedGraph.from_snapshot(snapshot)
        assert len(graph) == 3
        assert C in graph
        assert graph.neighbours(C) == {}


class TestShortestPath:
    def test_path_to_self_is_empty(self, line_snapshot):
        graph = WeightedGraph.from_snapshot(line_snapshot)
        path = graph.shortest_path(A, A)
        assert path == []
        assert graph.path_cost(A, path) == 0

    def test_path_excludes_source(self, line_snapshot):
        graph = WeightedGraph.from_snapshot(line_snapshot)
        assert graph.shortest_path(A, C) == [B, C]
        assert graph.path_cost(A, [B, C]) == 6

    def test_unreachable_destination_is_none(self):
        snapshot = build_snapshot(
            {A: (SELF, 0, 1), B: (NEUTRAL, 0, 0), C: (NEUTRAL, 1, 0), D: (NEUTRAL, 0, 0)},
            [(A, B), (C, D)],
        )
        graph = WeightedGraph.from_snapshot(snapshot)
        assert graph.shortest_path(A, C) is None
        assert graph.shortest_path(A, D) is None
        assert graph.shortest_path(C, D) == [D]

    def test_avoids_heavily_garrisoned_enemy(self):
        # A - B(enemy, 10) - D and A - C - E - D
        snapshot = build_snapshot(
            {
                A: (SELF, 1, 5),
                B: (ENEMY, 1, 10),
                C: (NEUTRAL, 0, 0),
                D: (NEUTRAL, 1, 0),
                E: (NEUTRAL, 0, 0),
            },
            [(A, B), (B, D), (A, C), (C, E), (E, D)],
        )
        graph = WeightedGraph.from_snapshot(snapshot)
        assert graph.shortest_path(A, D) == [C, E, D]
        assert graph.path_cost(A, [C, E, D]) == 9
        assert graph.path_cost(A, [B, D]) == 16

    def test_equal_cost_ties_follow_insertion_order(self):
        # Both A-B-D and A-C-D cost 6; B is relaxed first.
        snapshot = build_snapshot(
            {A: (SELF, 0, 1), B: (NEUTRAL, 0, 0), C: (NEUTRAL, 0, 0), D: (NEUTRAL, 1, 0)},
            [(A, B), (A, C), (B, D), (C, D)],
        )
        graph = WeightedGraph.from_snapshot(snapshot)
        assert graph.shortest_path(A, D) == [B, D]

    def test_unknown_territory_raises(self, line_snapshot):
        graph = WeightedGraph.from_snapshot(line_snapshot)
        with pytest.raises(KeyError):
            graph.shortest_path(A, 99)
        with pytest.raises(KeyError):
            graph.shortest_path(99, A)

    @pytest.mark.parametrize("seed", range(12))
    def test_matches_brute_force(self, seed):
        snapshot = random_snapshot(seed)
        graph = WeightedGraph.from_snapshot(snapshot)
        for source in snapshot.ids:
            for destination in snapshot.ids:
                expected = brute_force_cost(graph, source, destination)
                path = graph.shortest_path(source, destination)
                if expected == math.inf:
                    assert path is None
                else:
                    assert path is not None
                    assert graph.path_cost(source, path) == expected
                    if path:
                        assert path[-1] == destination
                        assert source not in path

    def test_rebuild_reflects_new_state(self, line_snapshot):
        graph = WeightedGraph.from_snapshot(line_snapshot)
        assert graph.weight(A, B) == 3
        conquered = build_snapshot({A: (SELF, 0, 10), B: (ENEMY, 1, 4), C: (NEUTRAL, 1, 0)}, [(A, B), (B, C)])
        graph.build(conquered)
        assert graph.weight(A, B) == 7
