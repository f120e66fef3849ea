"""CGR encoding of sorted adjacency lists into intervals and residual segments."""

from __future__ import annotations

import logging
from itertools import groupby
from typing import Iterable, List, Sequence, Tuple

from graphkit.unary import DEFAULT_PRE_ENCODE_NUM, BitReader, Bits, UnaryEncoder
from graphkit.vertexset import INTERVAL_SEGMENT_LEN, MIN_ITV_LEN, ZETA_K

logger = logging.getLogger(__name__)


def _num_words(bits: Sequence[int]) -> int:
    """Number of 32-bit words needed to hold the bits."""
    return (len(bits) - 1) // 32 + 1


class CgrEncoder(UnaryEncoder):
    """Encodes one adjacency list per vertex into a bit list."""

    def __init__(
        self,
        n: int,
        zeta_k: int = ZETA_K,
        pre_encode_num: int = DEFAULT_PRE_ENCODE_NUM,
        use_interval: bool = False,
        use_segment: bool = True,
        add_degree: bool = False,
        res_seg_len: int = 256,
        min_itv_len: int = MIN_ITV_LEN,
        itv_seg_len: int = 32,
    ):
        super().__init__(zeta_k, pre_encode_num)
        self.num_vertices = n
        self.use_interval = use_interval
        self.use_segment = use_segment
        self.add_degree = add_degree
        self.res_seg_len = res_seg_len
        self.min_itv_len = min_itv_len
        self.itv_seg_len = itv_seg_len
        self.max_itv_len = min_itv_len
        self.max_num_itv_per_node = 0
        self.max_num_res_per_node = 0
        self.max_num_itv_section_per_node = 0
        self.max_num_res_section_per_node = 0
        self.max_num_itv_per_section = 0
        self.max_num_res_per_section = 0
        self._bit_arrays: List[Bits] = [[] for _ in range(n)]
        logger.info(
            "CGR encoder: zeta_k = %d, residual segment length = %d, interval %s, "
            "segment %s, degree appended %s",
            zeta_k,
            res_seg_len,
            "enabled" if use_interval else "disabled",
            "enabled" if use_segment else "disabled",
            "for all nodes" if add_degree else "only for zero-residual nodes",
        )

    def compressed_bits(self, vid: int) -> Bits:
        return self._bit_arrays[vid]

    def compressed_size(self, vid: int) -> int:
        """Size of the vertex's encoding in bits."""
        return len(self._bit_arrays[vid])

    def stats(self) -> dict:
        result = {}
        if self.use_interval:
            result.update(
                max_num_itv_per_node=self.max_num_itv_per_node,
                max_num_itv_section_per_node=self.max_num_itv_section_per_node,
                max_num_itv_per_section=self.max_num_itv_per_section,
                max_itv_len=self.max_itv_len,
            )
        result.update(
            max_num_res_per_node=self.max_num_res_per_node,
            max_num_res_section_per_node=self.max_num_res_section_per_node,
            max_num_res_per_section=self.max_num_res_per_section,
        )
        return result

    def encode(self, vid: int, neighbors: Iterable[int]) -> int:
        """Encode a sorted neighbour list; return its size in 32-bit words."""
        neighbors = list(neighbors)
        bits: Bits = []
        self._bit_arrays[vid] = bits
        if self.add_degree or self.res_seg_len == 0:
            self.append_gamma(bits, len(neighbors))
            if not neighbors:
                return 0
        residuals = neighbors
        if self.use_interval:
            intervals, residuals = self._intervalize(neighbors)
            self._encode_intervals(vid, bits, intervals)
        if self.use_segment:
            return self._encode_residuals(vid, bits, residuals)
        return self._encode_unary(vid, neighbors)

    def _intervalize(self, neighbors: List[int]) -> Tuple[List[Tuple[int, int]], List[int]]:
        intervals: List[Tuple[int, int]] = []
        residuals: List[int] = []
        runs = groupby(enumerate(neighbors), key=lambda pair: pair[1] - pair[0])
        for _, run in runs:
            values = [value for _, value in run]
            if self.min_itv_len and len(values) >= self.min_itv_len:
                intervals.append((values[0], len(values)))
                self.max_itv_len = max(self.max_itv_len, len(values))
            else:
                residuals.extend(values)
        self.max_num_itv_per_node = max(self.max_num_itv_per_node, len(intervals))
        self.max_num_res_per_node = max(self.max_num_res_per_node, len(residuals))
        return intervals, residuals

    def _encode_intervals(self, vid: int, bits: Bits, intervals: List[Tuple[int, int]]) -> None:
        segs: List[list] = []
        cur_seg: Bits = []
        count = 0
        for i, (left, length) in enumerate(intervals):
            if count == 0:
                gap = self.int_2_nat(left - vid)
            else:
                prev_left, prev_len = intervals[i - 1]
                gap = left - prev_left - prev_len - 1
            code_len = length - self.min_itv_len
            if self.itv_seg_len and (
                self.gamma_size(count + 1) + len(cur_seg)
                + self.gamma_size(gap) + self.gamma_size(code_len)
                > self.itv_seg_len
            ):
                if count == 0:
                    raise ValueError("interval does not fit in an interval segment")
                segs.append([count, cur_seg])
                self.max_num_itv_per_section = max(self.max_num_itv_per_section, count)
                count = 0
                gap = self.int_2_nat(left - vid)
                cur_seg = []
            count += 1
            self.append_gamma(cur_seg, gap)
            self.append_gamma(cur_seg, code_len)

        if not segs:
            segs.append([count, cur_seg])
        else:
            last = segs[-1]
            last[0] += count
            tail = intervals[len(intervals) - count - 1:]
            for (prev_left, prev_len), (left, length) in zip(tail, tail[1:]):
                self.append_gamma(last[1], left - prev_left - prev_len - 1)
                self.append_gamma(last[1], length - self.min_itv_len)
        self.max_num_itv_per_section = max(self.max_num_itv_per_section, count)

        self.max_num_itv_section_per_node = max(self.max_num_itv_section_per_node, len(segs))
        if self.itv_seg_len:
            self.append_gamma(bits, len(segs) - 1)
        for idx, (seg_count, seg_bits) in enumerate(segs):
            align = 0 if idx == len(segs) - 1 else self.itv_seg_len
            self._append_segment(bits, seg_count, seg_bits, align)

    def _encode_residuals(self, vid: int, bits: Bits, residuals: List[int]) -> int:
        segs: List[list] = []
        cur_seg: Bits = []
        count = 0
        for i, value in enumerate(residuals):
            code = self.int_2_nat(value - vid) if count == 0 else value - residuals[i - 1] - 1
            if self.res_seg_len and (
                self.gamma_size(count + 1) + len(cur_seg) + self.zeta_size(code)
                > self.res_seg_len
            ):
                if count == 0:
                    raise ValueError("residual does not fit in a residual segment")
                segs.append([count, cur_seg])
                self.max_num_res_per_section = max(self.max_num_res_per_section, count)
                count = 0
                code = self.int_2_nat(value - vid)
                cur_seg = []
            count += 1
            self.append_zeta(cur_seg, code)

        if not segs:
            segs.append([count, cur_seg])
        else:
            last = segs[-1]
            last[0] += count
            tail = residuals[len(residuals) - count - 1:]
            for prev, value in zip(tail, tail[1:]):
                self.append_zeta(last[1], value - prev - 1)

        self.max_num_res_section_per_node = max(self.max_num_res_section_per_node, len(segs))
        if self.res_seg_len:
            self.append_gamma(bits, len(segs) - 1)
            for idx, (seg_count, seg_bits) in enumerate(segs):
                align = 0 if idx == len(segs) - 1 else self.res_seg_len
                self._append_segment(bits, seg_count, seg_bits, align)
        else:
            bits.extend(cur_seg)
        return _num_words(bits)

    def _append_segment(self, bits: Bits, count: int, seg: Bits, align: int) -> None:
        buf: Bits = []
        self.append_gamma(buf, count)
        buf.extend(seg)
        if align and len(buf) > align:
            raise ValueError(f"segment of {len(buf)} bits exceeds alignment {align}")
        buf.extend([0] * (align - len(buf)))
        bits.extend(buf)

    def _encode_unary(self, vid: int, neighbors: List[int]) -> int:
        if not neighbors:
            return 0
        bits: Bits = []
        self._bit_arrays[vid] = bits
        self.append_zeta(bits, self.int_2_nat(neighbors[0] - vid))
        for prev, value in zip(neighbors, neighbors[1:]):
            self.append_zeta(bits, value - prev - 1)
        return _num_words(bits)


class CgrDecoder(BitReader):
    """Decodes one vertex's CGR encoding starting at a bit offset."""

    def __init__(
        self,
        vid: int,
        bits: Sequence[int],
        offset: int = 0,
        zeta_k: int = ZETA_K,
        res_seg_len: int = 256,
    ):
        super().__init__(bits, offset, zeta_k)
        self.vid = vid
        self.res_seg_len = res_seg_len

    def _segment_count(self) -> int:
        count = self.decode_gamma() + 1
        if count == 1 and self.peek_bit():
            self.offset += 1
            count = 0
        return count

    def _from_nat(self, x: int) -> int:
        return self.vid - (x >> 1) - 1 if x & 1 else self.vid + (x >> 1)

    def decode(self) -> List[int]:
        """Decode the residual neighbour list."""
        return self.decode_residuals()

    def decode_intervals(self) -> List[Tuple[int, int]]:
        """Decode the interval section as half-open (begin, end) pairs."""
        intervals: List[Tuple[int, int]] = []
        segments = self._segment_count()
        for i in range(segments):
            start = self.offset
            left = None
            for _ in range(self.decode_gamma()):
                code = self.decode_gamma()
                left = self._from_nat(code) if left is None else left + code + 1
                end = left + self.decode_gamma() + MIN_ITV_LEN
                intervals.append((left, end))
                left = end
            if i != segments - 1:
                self.offset = start + INTERVAL_SEGMENT_LEN
        return intervals

    def decode_residuals(self) -> List[int]:
        """Decode the residual section into a list of vertex ids."""
        if self.res_seg_len == 0:
            return self._read_run(self.decode_gamma())
        values: List[int] = []
        for _ in range(self._segment_count()):
            start = self.offset
            values.extend(self._read_run(self.decode_gamma()))
            self.offset = start + self.res_seg_len
        return values

    def _read_run(self, count: int) -> List[int]:
        values: List[int] = []
        for _ in range(count):
            code = self.decode_zeta()
            values.append(self._from_nat(code) if not values else values[-1] + code + 1)
        return values