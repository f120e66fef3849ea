"""Breadth-first search and single-source shortest paths, with serial verifiers."""

from __future__ import annotations

import heapq
import logging
from typing import Dict, Iterator, List, Sequence, Tuple

from graphkit.bitmap import Bitmap
from graphkit.graph import Graph
from graphkit.vertexset import DIST_INF, MY_INFINITY

logger = logging.getLogger(__name__)


def _check_source(graph: Graph, source: int) -> None:
    if not 0 <= source < graph.num_vertices():
        raise ValueError(f"source {source} is not a vertex of the graph")


def _weighted_edges(graph: Graph, v: int) -> Iterator[Tuple[int, int]]:
    for dst, weight in zip(graph.neighbors(v), graph.edge_weights(v)):
        if weight < 0:
            raise ValueError(f"edge ({v}, {dst}) has negative weight {weight}")
        yield dst, weight


def bfs(graph: Graph, source: int) -> List[int]:
    """Level-synchronous BFS; unreachable vertices get MY_INFINITY."""
    _check_source(graph, source)
    depth = [MY_INFINITY] * graph.num_vertices()
    depth[source] = 0
    frontier = [source]
    iteration = 0
    while frontier:
        iteration += 1
        logger.debug("iteration=%d, frontier_size=%d", iteration, len(frontier))
        next_frontier = []
        for src in frontier:
            for dst in graph.neighbors(src):
                if depth[dst] == MY_INFINITY:
                    depth[dst] = depth[src] + 1
                    next_frontier.append(dst)
        frontier = next_frontier
    logger.debug("iterations = %d", iteration)
    return depth


def _top_down_step(graph: Graph, depths: List[int], queue: List[int]) -> Tuple[int, List[int]]:
    scout_count = 0
    next_queue = []
    for src in queue:
        for dst in graph.neighbors(src):
            curr = depths[dst]
            if curr < 0:
                depths[dst] = depths[src] + 1
                next_queue.append(dst)
                scout_count += -curr
    return scout_count, next_queue


def _bottom_up_step(reverse: Graph, depths: List[int], front: Bitmap, nxt: Bitmap) -> int:
    awake_count = 0
    nxt.reset()
    for dst in range(reverse.num_vertices()):
        if depths[dst] < 0:
            for src in reverse.neighbors(dst):
                if front.get_bit(src):
                    depths[dst] = depths[src] + 1
                    awake_count += 1
                    nxt.set_bit(dst)
                    break
    return awake_count


def bfs_direction_optimizing(
    graph: Graph, source: int, alpha: int = 15, beta: int = 18
) -> List[int]:
    """BFS that switches between top-down and bottom-up steps by frontier size."""
    _check_source(graph, source)
    n = graph.num_vertices()
    reverse = graph.reversed()
    # Unvisited vertices hold minus their degree so that scouting can sum it.
    depths = [-graph.degree(v) if graph.degree(v) else -1 for v in range(n)]
    depths[source] = 0
    queue = [source]
    edges_to_check = graph.num_edges()
    scout_count = graph.degree(source)
    iteration = 0
    while queue:
        if scout_count > edges_to_check // alpha:
            front = Bitmap(n)
            for u in queue:
                front.set_bit(u)
            curr = Bitmap(n)
            awake_count = len(queue)
            while True:
                iteration += 1
                old_awake_count = awake_count
                awake_count = _bottom_up_step(reverse, depths, front, curr)
                front.swap(curr)
                logger.debug("BU: iteration=%d, num_frontier=%d", iteration, awake_count)
                if not (awake_count >= old_awake_count or awake_count > n // beta):
                    break
            queue = [v for v in range(n) if front.get_bit(v)]
            scout_count = 1
        else:
            iteration += 1
            edges_to_check -= scout_count
            scout_count, queue = _top_down_step(graph, depths, queue)
            logger.debug("TD: iteration=%d, num_frontier=%d", iteration, len(queue))
    logger.debug("iterations = %d", iteration)
    return [d if d >= 0 else MY_INFINITY for d in depths]


def sssp_delta_stepping(graph: Graph, source: int, delta: int) -> List[int]:
    """Delta-stepping shortest paths; unreachable vertices get DIST_INF."""
    if delta <= 0:
        raise ValueError("delta must be positive")
    _check_source(graph, source)
    dist = [DIST_INF] * graph.num_vertices()
    dist[source] = 0
    bins: Dict[int, List[int]] = {}
    frontier = [source]
    curr_bin = 0
    while True:
        for src in frontier:
            if dist[src] >= delta * curr_bin:
                for dst, weight in _weighted_edges(graph, src):
                    new_dist = dist[src] + weight
                    if new_dist < dist[dst]:
                        dist[dst] = new_dist
                        bins.setdefault(new_dist // delta, []).append(dst)
        pending = [i for i, members in bins.items() if members and i >= curr_bin]
        if not pending:
            break
        curr_bin = min(pending)
        frontier = bins.pop(curr_bin)
    return dist


def bfs_reference(graph: Graph, source: int) -> List[int]:
    """Serial BFS depths used as the oracle for verification."""
    _check_source(graph, source)
    depth = [MY_INFINITY] * graph.num_vertices()
    depth[source] = 0
    to_visit = [source]
    for src in to_visit:
        for dst in graph.neighbors(src):
            if depth[dst] == MY_INFINITY:
                depth[dst] = depth[src] + 1
                to_visit.append(dst)
    return depth


def sssp_reference(graph: Graph, source: int) -> List[int]:
    """Serial Dijkstra distances used as the oracle for verification."""
    _check_source(graph, source)
    dist = [DIST_INF] * graph.num_vertices()
    dist[source] = 0
    heap = [(0, source)]
    while heap:
        td, src = heapq.heappop(heap)
        if td != dist[src]:
            continue
        for dst, weight in _weighted_edges(graph, src):
            if td + weight < dist[dst]:
                dist[dst] = td + weight
                heapq.heappush(heap, (td + weight, dst))
    return dist


def verify_bfs(graph: Graph, source: int, depths: Sequence[int]) -> bool:
    """Check BFS depths against the serial oracle."""
    ok = list(depths) == bfs_reference(graph, source)
    logger.info("Verifying BFS: %s", "Correct" if ok else "Wrong")
    return ok


def verify_sssp(graph: Graph, source: int, dist: Sequence[int]) -> bool:
    """Check shortest-path distances against the serial oracle."""
    ok = list(dist) == sssp_reference(graph, source)
    logger.info("Verifying SSSP: %s", "Correct" if ok else "Wrong")
    return ok