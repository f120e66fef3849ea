import random

import pytest

from graphkit.graph import Graph
from graphkit.traversal import (
    bfs,
    bfs_direction_optimizing,
    bfs_reference,
    sssp_delta_stepping,
    sssp_reference,
    verify_bfs,
    verify_sssp,
)
from graphkit.vertexset import DIST_INF, MY_INFINITY


def _undirected(n, pairs, weights=None):
    edges = []
    wts = []
    for i, (a, b) in enumerate(pairs):
        edges += [(a, b), (b, a)]
        if weights is not None:
            wts += [weights[i], weights[i]]
    return Graph.from_edges(n, edges, wts if weights is not None else None)


def _random_graph(seed, n, m, directed=False, weighted=False):
    rng = random.Random(seed)
    pairs = set()
    while len(pairs) < m:
        a, b = rng.randrange(n), rng.randrange(n)
        if a != b:
            pairs.add((a, b))
    pairs = sorted(pairs)
    weights = [rng.randint(0, 20) for _ in pairs] if weighted else None
    if directed:
        return Graph.from_edges(n, pairs, weights)
    return _undirected(n, pairs, weights)


def test_bfs_on_path():
    g = _undirected(4, [(0, 1), (1, 2), (2, 3)])
    assert bfs(g, 0) == [0, 1, 2, 3]


def test_unreachable_vertex_is_infinite():
    g = _undirected(4, [(0, 1), (1, 2)])
    for depths in (bfs(g, 0), bfs_direction_optimizing(g, 0), bfs_reference(g, 0)):
        assert depths[3] == MY_INFINITY
        assert depths[0] == 0


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("directed", [False, True])
def test_bfs_variants_agree(seed, directed):
    g = _random_graph(seed, 60, 150, directed=directed)
    expected = bfs_reference(g, 0)
    assert bfs(g, 0) == expected
    assert bfs_direction_optimizing(g, 0) == expected
    assert verify_bfs(g, 0, bfs(g, 0))


@pytest.mark.parametrize("seed", range(4))
def test_direction_optimizing_bottom_up_path(seed):
    g = _random_graph(seed, 40, 300)
    assert bfs_direction_optimizing(g, 3, alpha=1, beta=1) == bfs_reference(g, 3)


def test_bfs_depth_invariant():
    g = _random_graph(11, 50, 120)
    depths = bfs(g, 0)
    for v in range(g.num_vertices()):
        for u in g.neighbors(v):
            if depths[v] != MY_INFINITY:
                assert depths[u] <= depths[v] + 1


def test_verify_bfs_detects_wrong_depths():
    g = _undirected(3, [(0, 1), (1, 2)])
    depths = bfs(g, 0)
    depths[2] += 1
    assert not verify_bfs(g, 0, depths)


def test_bad_source_rejected():
    g = _undirected(2, [(0, 1)])
    with pytest.raises(ValueError):
        bfs(g, 5)
    with pytest.raises(ValueError):
        bfs_direction_optimizing(g, -1)
    with pytest.raises(ValueError):
        sssp_delta_stepping(g, 9, 1)


def test_sssp_small_example():
    g = Graph.from_edges(4, [(0, 1), (0, 2), (1, 2), (2, 3)], [4, 1, 1, 2])
    assert sssp_reference(g, 0) == [0, 4, 1, 3]
    assert sssp_delta_stepping(g, 0, 2) == sssp_reference(g, 0)


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("delta", [1, 3, 8, 100])
def test_delta_stepping_matches_dijkstra(seed, delta):
    g = _random_graph(seed, 50, 140, directed=seed % 2 == 0, weighted=True)
    dist = sssp_delta_stepping(g, 0, delta)
    assert dist == sssp_reference(g, 0)
    assert verify_sssp(g, 0, dist)


def test_sssp_unreachable_and_tampered():
    g = Graph.from_edges(3, [(0, 1)], [5])
    dist = sssp_delta_stepping(g, 0, 2)
    assert dist[2] == DIST_INF
    dist[1] = 0
    assert not verify_sssp(g, 0, dist)


def test_sssp_rejects_bad_input():
    g = Graph.from_edges(2, [(0, 1)], [-1])
    with pytest.raises(ValueError):
        sssp_reference(g, 0)
    with pytest.raises(ValueError):
        sssp_delta_stepping(g, 0, 1)
    with pytest.raises(ValueError):
        sssp_delta_stepping(Graph.from_edges(2, [(0, 1)], [1]), 0, 0)
    with pytest.raises(ValueError):
        sssp_delta_stepping(Graph.from_edges(2, [(0, 1)]), 0, 1)