"""Adjacency-list graphs, flat edge lists and raw binary array loading."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np


def read_array(path, dtype, length: int) -> np.ndarray:
    """Read ``length`` raw elements of ``dtype`` from the start of a binary file."""
    if length < 0:
        raise ValueError("length must be non-negative")
    dtype = np.dtype(dtype)
    nbytes = dtype.itemsize * length
    with open(path, "rb") as f:
        raw = f.read(nbytes)
    if len(raw) < nbytes:
        raise ValueError(
            f"file {path} holds {len(raw)} bytes, {nbytes} needed for {length} elements"
        )
    return np.frombuffer(raw, dtype=dtype).copy()


class Graph:
    """A directed graph stored as one sorted neighbour tuple per vertex.

    An undirected graph is stored with each edge in both directions.
    Optional integer edge weights run parallel to the neighbour tuples.
    """

    def __init__(
        self,
        adjacency: Iterable[Iterable[int]],
        weights: Optional[Iterable[Iterable[int]]] = None,
    ):
        adj = [tuple(int(u) for u in nbrs) for nbrs in adjacency]
        n = len(adj)
        for v, nbrs in enumerate(adj):
            for u in nbrs:
                if not 0 <= u < n:
                    raise ValueError(f"neighbour {u} of vertex {v} is out of range")
        if weights is None:
            wts = None
        else:
            wts = [tuple(int(w) for w in ws) for ws in weights]
            if len(wts) != n or any(len(ws) != len(nbrs) for ws, nbrs in zip(wts, adj)):
                raise ValueError("weights must match the adjacency lists in shape")
        self._adj = adj
        self._weights = wts
        self._num_edges = sum(len(nbrs) for nbrs in adj)

    @classmethod
    def from_edges(
        cls,
        num_vertices: int,
        edges: Iterable[Tuple[int, int]],
        weights: Optional[Iterable[int]] = None,
    ) -> "Graph":
        """Build a graph from (source, destination) pairs; neighbours are sorted."""
        edges = list(edges)
        wts = None if weights is None else list(weights)
        if wts is not None and len(wts) != len(edges):
            raise ValueError("one weight is needed per edge")
        lists = [[] for _ in range(num_vertices)]
        for i, (u, v) in enumerate(edges):
            if not (0 <= u < num_vertices and 0 <= v < num_vertices):
                raise ValueError(f"edge ({u}, {v}) is out of range")
            lists[u].append((v, wts[i] if wts is not None else 0))
        for entries in lists:
            entries.sort(key=lambda pair: pair[0])
        adjacency = [[v for v, _ in entries] for entries in lists]
        weight_lists = None if wts is None else [[w for _, w in entries] for entries in lists]
        return cls(adjacency, weight_lists)

    def __repr__(self) -> str:
        return f"Graph(num_vertices={self.num_vertices()}, num_edges={self.num_edges()})"

    def num_vertices(self) -> int:
        return len(self._adj)

    def num_edges(self) -> int:
        return self._num_edges

    def neighbors(self, v: int) -> Tuple[int, ...]:
        return self._adj[v]

    def degree(self, v: int) -> int:
        return len(self._adj[v])

    def edge_weights(self, v: int) -> Tuple[int, ...]:
        """Weights of the edges leaving ``v``, in neighbour order."""
        if self._weights is None:
            raise ValueError("graph has no edge weights")
        return self._weights[v]

    def reversed(self) -> "Graph":
        """Return the graph with every edge turned around."""
        n = len(self._adj)
        rev = [[] for _ in range(n)]
        rev_w = None if self._weights is None else [[] for _ in range(n)]
        for v, nbrs in enumerate(self._adj):
            for i, u in enumerate(nbrs):
                rev[u].append(v)
                if rev_w is not None:
                    rev_w[u].append(self._weights[v][i])
        return Graph(rev, rev_w)


class EdgeList:
    """The edges of a graph as parallel source and destination lists."""

    def __init__(self, graph: Graph):
        self._src = []
        self._dst = []
        for v in range(graph.num_vertices()):
            for u in graph.neighbors(v):
                self._src.append(v)
                self._dst.append(u)

    def __len__(self) -> int:
        return len(self._src)

    def src(self, eid: int) -> int:
        return self._src[eid]

    def dst(self, eid: int) -> int:
        return self._dst[eid]