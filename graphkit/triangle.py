"""Triangle counting by merging sorted neighbour lists."""

from __future__ import annotations

import logging
import time

from graphkit.graph import Graph
from graphkit.vertexset import intersection_num

logger = logging.getLogger(__name__)


def count_triangles(graph: Graph) -> int:
    """Sum |N(u) & N(v)| over every edge (u, v).

    The neighbour lists must be sorted.  On an oriented graph (each undirected
    edge kept in one direction, e.g. from lower to higher id) every triangle is
    counted once; on a symmetric graph it is counted six times.
    """
    start = time.perf_counter()
    total = 0
    for u in range(graph.num_vertices()):
        adj_u = graph.neighbors(u)
        for v in adj_u:
            total += intersection_num(adj_u, graph.neighbors(v))
    logger.info("runtime [triangle] = %f sec", time.perf_counter() - start)
    return total