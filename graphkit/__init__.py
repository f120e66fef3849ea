"""Graph kernels, adjacency-list compression codecs and numeric helpers."""

__version__ = "0.1.0"

__all__ = [
    "bitmap",
    "cgr",
    "compressor",
    "graph",
    "mathfn",
    "rng",
    "traversal",
    "triangle",
    "unary",
    "vbyte",
    "vertexset",
]