# graphkit

Graph analytics kernels and compact adjacency-list encodings, in plain Python
with NumPy.

What is inside:

- `graphkit.graph`: an in-memory `Graph` holding one sorted neighbour tuple
  per vertex (optionally with integer edge weights), an `EdgeList` view of its
  edges, and `read_array` for loading raw binary arrays into NumPy.
- `graphkit.traversal`: breadth-first search (`bfs`, level-synchronous, and
  `bfs_direction_optimizing`), delta-stepping shortest paths
  (`sssp_delta_stepping`), serial references (`bfs_reference`,
  `sssp_reference`), and `verify_bfs` / `verify_sssp`, which compare results
  against them.
- `graphkit.triangle`: `count_triangles` by sorted-list intersection.
- `graphkit.vertexset`: a sorted `VertexSet` with merge-based intersection,
  bounded and "except" counting variants, `set_intersection`,
  `set_difference`, and interval intersection counts.
- `graphkit.bitmap`: a fixed-size `Bitmap`.
- `graphkit.unary`: Elias gamma and zeta codes (`UnaryEncoder`, `BitReader`).
- `graphkit.cgr`: the CGR adjacency-list format, with optional intervals and
  fixed-width segments (`CgrEncoder`, `CgrDecoder`).
- `graphkit.vbyte`: StreamVByte encoding, plain and delta-coded.
- `graphkit.compressor`: a `Compressor` that writes a whole graph to
  `<prefix>.edge.bin`, `<prefix>.vertex.bin` and, on request,
  `<prefix>.degree.bin`.
- `graphkit.mathfn`: dense and sparse math helpers of the kind used by graph
  neural network layers (activations, losses, `spmm`, dropout, F1 score and
  so on).
- `graphkit.rng`: a per-thread random generator `Context` and `cluster_seedgen`.

NumPy is the only runtime dependency.

## Building a graph and running kernels

```python
from graphkit.graph import Graph
from graphkit.traversal import bfs, verify_bfs, sssp_delta_stepping, verify_sssp
from graphkit.triangle import count_triangles

edges = [(0, 1), (1, 0), (1, 2), (2, 1), (0, 2), (2, 0), (2, 3), (3, 2)]
g = Graph.from_edges(4, edges, None)

depths = bfs(g, 0)
assert verify_bfs(g, 0, depths)

weighted = Graph.from_edges(4, edges, [1, 1, 4, 4, 2, 2, 1, 1])
dist = sssp_delta_stepping(weighted, 0, 2)
assert verify_sssp(weighted, 0, dist)

print(count_triangles(g))
```

`count_triangles` sums `|N(u) & N(v)|` over every edge, so on a symmetric
graph each triangle is counted six times; orient the graph (keep only edges
from lower to higher vertex id) to count each triangle exactly once.

`bfs_direction_optimizing(graph, source, alpha, beta)` switches between
top-down and bottom-up steps depending on frontier size (defaults
`alpha=15`, `beta=18`). Unreachable vertices get `MY_INFINITY` from the BFS
functions and `DIST_INF` from the shortest-path functions; negative edge
weights raise `ValueError`.

## Set operations on sorted neighbour lists

```python
from graphkit.vertexset import VertexSet, intersection_num, bounded

a = VertexSet([1, 3, 5, 7, 9], 0)
b = VertexSet([3, 4, 5, 9], 1)

intersection_num(a, b, None)   # 3
intersection_num(a, b, 6)      # 2, only values below 6
list(bounded(a, 6))            # [1, 3, 5]
```

## Compressing adjacency lists

CGR encodes each neighbour list as a gamma/zeta-coded sequence of gaps,
optionally cut into fixed-width segments:

```python
from graphkit.cgr import CgrEncoder, CgrDecoder

enc = CgrEncoder(4, 2, 1024, False, True, False, 256, 4, 32)
enc.encode(0, [1, 2, 3])
bits = enc.compressed_bits(0)

dec = CgrDecoder(0, bits, 0, 2, 256)
dec.decode()   # [1, 2, 3]
```

StreamVByte packs 32-bit integers into a key stream of 2-bit lengths followed
by 1 to 4 data bytes per value, here delta-coded and led by a length header:

```python
from graphkit.vbyte import vbyte_encode, vbyte_decode

buffer = vbyte_encode([5, 300, 70000], True)
vbyte_decode(buffer)   # [5, 300, 70000]
```

Without the header (`vbyte_encode(values, False)`), pass the count:
`vbyte_decode(buffer, 3)`.

A `Compressor` applies one scheme (`"cgr"`, `"vbyte"` or `"hybrid"`) to
every adjacency list given to it. `compress(prefix)` encodes every vertex and
writes `<prefix>.edge.bin`; `write_compressed_graph(prefix)` writes the CGR
bit stream (for `"cgr"`) and the 64-bit row pointers to
`<prefix>.vertex.bin`; `write_degrees(prefix)` writes 32-bit degrees to
`<prefix>.degree.bin`; `stats()` reports counts, sizes and compression rates.
The `"vbyte"` and `"hybrid"` schemes require word alignment (`align=2`), and
`"hybrid"` also requires `permutate=True`.

## What the package does not do

- It has no command-line programs; everything is used from Python.
- It does not read graphs from on-disk graph formats. Graphs are built in
  memory from adjacency lists or edge pairs; `read_array` only loads raw
  arrays.
- It writes compressed files but has no reader that loads them back into a
  `Graph`; `CgrDecoder` and `vbyte_decode` work on one in-memory list at a
  time.
- Kernels run serially in a single thread.

## Tests

The test suite uses pytest; install the `test` extra to get it.