"""Compress a graph's adjacency lists to disk with CGR, VByte or a hybrid of both."""

from __future__ import annotations

import logging
import time
from itertools import chain
from pathlib import Path
from typing import Iterable, List, Sequence

import numpy as np

from graphkit.cgr import CgrEncoder
from graphkit.vbyte import vbyte_encode

logger = logging.getLogger(__name__)

CHECKPOINT = 50_000_000
UNARY_SCHEMES = ("cgr", "hybrid")


def bits_to_bytes(bits: Iterable[int], word_aligned: bool = False, byte_aligned: bool = False) -> bytes:
    """Pack bits most significant first; the trailing partial byte is zero-padded.

    With ``word_aligned`` the result is padded with zero bytes to whole 32-bit
    words.  ``byte_aligned`` needs no extra padding for a single list; it only
    matters when several lists share one stream.
    """
    bits = [1 if b else 0 for b in bits]
    if not bits:
        return b""
    bits.extend([0] * (-len(bits) % 8))
    out = bytearray()
    for start in range(0, len(bits), 8):
        byte = 0
        for bit in bits[start:start + 8]:
            byte = (byte << 1) | bit
        out.append(byte)
    if word_aligned:
        out.extend(b"\0" * (-len(out) % 4))
    return bytes(out)


def permutate_bytes_by_word(buf: bytes) -> bytes:
    """Reverse the byte order inside every 32-bit word."""
    if len(buf) % 4:
        raise ValueError("buffer length must be a multiple of 4")
    out = bytearray(buf)
    for j in range(0, len(out), 4):
        out[j:j + 4] = out[j:j + 4][::-1]
    return bytes(out)


class Compressor:
    """Encodes every adjacency list and writes edge, row-pointer and degree files."""

    def __init__(
        self,
        scheme: str,
        adjacency: Sequence[Sequence[int]],
        encoder: CgrEncoder | None = None,
        permutate: bool = False,
        degree_threshold: int = 32,
        align: int = 0,
    ):
        if align not in (0, 1, 2):
            raise ValueError("align must be 0 (none), 1 (byte) or 2 (word)")
        self.scheme = scheme
        self.adjacency = adjacency
        self.use_unary = scheme in UNARY_SCHEMES
        self.byte_aligned = align == 1
        self.word_aligned = align == 2
        self.use_permutate = permutate
        self.degree_threshold = degree_threshold
        if permutate and not self.word_aligned:
            raise ValueError("byte permutation requires word alignment")
        if not self.use_unary and not self.word_aligned:
            raise ValueError(f"{scheme} scheme must be word-aligned")
        if scheme == "hybrid" and not permutate:
            raise ValueError("hybrid scheme must be permutated")
        if self.use_unary and encoder is None:
            encoder = CgrEncoder(len(adjacency), use_segment=False)
        self.encoder = encoder
        self._osizes: List[int] | None = None
        self._rowptr: List[int] = []
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.vbyte_count = self.unary_count = self.trivial_count = 0
        self.vbyte_adj_count = self.unary_adj_count = 0
        self.vbyte_bytes = self.unary_bytes = 0

    def compress(self, out_prefix, pre_encode: bool = False, reverse: bool = False) -> None:
        """Encode every vertex and write the streamed part of the edge file."""
        if self.byte_aligned:
            logger.info("Byte alignment enabled for each adj list")
        if self.word_aligned:
            logger.info("Word alignment enabled for each adj list")
        if self.use_unary and pre_encode:
            start = time.perf_counter()
            self.encoder.pre_encoding()
            logger.info("Pre-encoding time: %f", time.perf_counter() - start)
        self._osizes = [0] * len(self.adjacency)
        self._reset_stats()
        start = time.perf_counter()
        with open(Path(f"{out_prefix}.edge.bin"), "wb") as out:
            for v, neighbors in enumerate(self.adjacency):
                if v > 0 and v % CHECKPOINT == 0:
                    logger.info("(%d * %d) vertices compressed", v // CHECKPOINT, CHECKPOINT)
                neighbors = list(neighbors)
                deg = len(neighbors)
                if deg == 0:
                    self.trivial_count += 1
                if self.use_unary:
                    above = deg <= self.degree_threshold if reverse else deg > self.degree_threshold
                    do_vbyte = self.scheme == "hybrid" and above
                else:
                    do_vbyte = True

                if do_vbyte:
                    buf = vbyte_encode(neighbors, add_degree=self.scheme != "hybrid")
                    osize = len(buf) // 4
                    out.write(buf)
                    self.vbyte_count += 1
                    self.vbyte_adj_count += deg
                    self.vbyte_bytes += osize * 4
                else:
                    osize = self.encoder.encode(v, neighbors)
                    if self.scheme == "hybrid":
                        buf = bits_to_bytes(
                            self.encoder.compressed_bits(v), self.word_aligned, self.byte_aligned
                        )
                        if self.word_aligned and self.use_permutate:
                            buf = permutate_bytes_by_word(buf)
                        out.write(buf)
                    self.unary_count += 1
                    self.unary_adj_count += deg
                    self.unary_bytes += osize * 4
                self._osizes[v] = osize
        logger.info("Encoding time: %f", time.perf_counter() - start)

    def write_compressed_graph(self, out_prefix) -> None:
        """Write the CGR edge stream (CGR only) and the row pointers."""
        if self._osizes is None:
            raise RuntimeError("compress() must be called first")
        if self.scheme == "cgr":
            self._write_compressed_edges(out_prefix)
        self._compute_ptrs()
        path = Path(f"{out_prefix}.vertex.bin")
        logger.info("Writing the row pointers to disk file %s", path)
        path.write_bytes(np.asarray(self._rowptr, dtype="<i8").tobytes())

    def _compute_ptrs(self) -> None:
        if not self.word_aligned:
            for v in range(len(self.adjacency)):
                length = self.encoder.compressed_size(v)
                if self.byte_aligned and length > 0:
                    length = (length - 1) // 8 + 1
                self._osizes[v] = length
        rowptr = [0]
        for size in self._osizes:
            rowptr.append(rowptr[-1] + size)
        self._rowptr = rowptr

    def _write_compressed_edges(self, out_prefix) -> None:
        lists = (self.encoder.compressed_bits(v) for v in range(len(self.adjacency)))
        if self.word_aligned or self.byte_aligned:
            buf = b"".join(bits_to_bytes(b, self.word_aligned, self.byte_aligned) for b in lists)
        else:
            buf = bits_to_bytes(chain.from_iterable(lists))
        if self.word_aligned and self.use_permutate:
            buf = permutate_bytes_by_word(buf)
        path = Path(f"{out_prefix}.edge.bin")
        logger.info("Writing the compressed edges to disk file %s", path)
        path.write_bytes(buf)

    def write_degrees(self, out_prefix) -> None:
        """Write every vertex degree as a little-endian 32-bit integer."""
        degrees = np.asarray([len(n) for n in self.adjacency], dtype="<u4")
        Path(f"{out_prefix}.degree.bin").write_bytes(degrees.tobytes())

    def stats(self) -> dict:
        def rate(adj_count: int, nbytes: int) -> float:
            return adj_count * 4.0 / nbytes if nbytes else float("nan")

        return {
            "vbyte_count": self.vbyte_count,
            "unary_count": self.unary_count,
            "trivial_count": self.trivial_count,
            "vbyte_adj_count": self.vbyte_adj_count,
            "unary_adj_count": self.unary_adj_count,
            "vbyte_bytes": self.vbyte_bytes,
            "unary_bytes": self.unary_bytes,
            "vbyte_rate": rate(self.vbyte_adj_count, self.vbyte_bytes),
            "unary_rate": rate(self.unary_adj_count, self.unary_bytes),
        }