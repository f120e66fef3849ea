"""Sorted vertex sets and merge-based set operations on them."""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterable, Iterator, Sequence

VID_MIN = 0
VID_MAX = 2**32 - 1
NO_VERTEX = -1

# Distances used by traversal kernels.
MY_INFINITY = 1_000_000_000
DIST_INF = (2**32 - 1) // 2

# Compression parameters shared by the encoders.
ZETA_K = 2
MIN_ITV_LEN = 4
INTERVAL_SEGMENT_LEN = 256

_END = object()


def lower_bound(values: Sequence[int], target: int) -> int:
    """Return the first index whose value is not less than ``target``."""
    return bisect_left(values, target)


def _common(a: Iterable[int], b: Iterable[int], upper: int | None = None) -> Iterator[int]:
    """Yield the elements shared by two sorted sequences, stopping at ``upper``."""
    ia, ib = iter(a), iter(b)
    left, right = next(ia, _END), next(ib, _END)
    while left is not _END and right is not _END:
        if upper is not None and (left >= upper or right >= upper):
            return
        if left < right:
            left = next(ia, _END)
        elif right < left:
            right = next(ib, _END)
        else:
            yield left
            left, right = next(ia, _END), next(ib, _END)


class VertexSet:
    """A sorted list of vertex ids, optionally tagged with the vertex it belongs to."""

    def __init__(self, items: Iterable[int] = (), vid: int = NO_VERTEX):
        self._items = list(items)
        self.vid = vid

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __repr__(self) -> str:
        return f"VertexSet({self._items!r}, vid={self.vid})"

    def add(self, v: int) -> None:
        self._items.append(v)

    def clear(self) -> None:
        self._items.clear()

    def sort(self) -> None:
        self._items.sort()

    def intersect(self, other: Iterable[int], upper: int | None = None) -> "VertexSet":
        """Return the common elements, limited to values below ``upper`` if given."""
        return VertexSet(_common(self, other, upper))

    def intersect_count(self, other: Iterable[int], upper: int | None = None) -> int:
        return sum(1 for _ in _common(self, other, upper))

    def intersect_count_except(self, other: Iterable[int], *args: int) -> int:
        """Count common elements, ignoring the one or two ancestors given."""
        if not 1 <= len(args) <= 2:
            raise TypeError("expected one or two ancestors")
        excluded = set(args)
        return sum(1 for x in _common(self, other) if x not in excluded)

    def intersect_count_bound_except(self, other: Iterable[int], upper: int, ancestor: int) -> int:
        return sum(1 for x in _common(self, other, upper) if x != ancestor)

    def bounded(self, up: int) -> "VertexSet":
        """Return the prefix of elements smaller than ``up``."""
        return VertexSet(self._items[: lower_bound(self._items, up)], self.vid)


def _as_set(a: Iterable[int]) -> VertexSet:
    return a if isinstance(a, VertexSet) else VertexSet(a)


def intersection_set(a: Iterable[int], b: Iterable[int], up: int | None = None) -> VertexSet:
    return _as_set(a).intersect(b, up)


def intersection_num(a: Iterable[int], b: Iterable[int], up: int | None = None) -> int:
    return _as_set(a).intersect_count(b, up)


def intersection_num_except(a: Iterable[int], b: Iterable[int], *args: int) -> int:
    return _as_set(a).intersect_count_except(b, *args)


def intersection_num_bound_except(a: Iterable[int], b: Iterable[int], up: int, ancestor: int) -> int:
    return _as_set(a).intersect_count_bound_except(b, up, ancestor)


def bounded(a: Iterable[int], up: int) -> VertexSet:
    return _as_set(a).bounded(up)


def set_intersection(a: Iterable[int], b: Iterable[int], out: VertexSet) -> int:
    """Append the common elements of ``a`` and ``b`` to ``out``; return how many."""
    count = 0
    for x in _common(a, b):
        out.add(x)
        count += 1
    return count


def set_difference(a: Iterable[int], b: Iterable[int], out: VertexSet) -> int:
    """Append elements of ``a`` missing from ``b`` (and not equal to ``b.vid``) to ``out``."""
    excluded = getattr(b, "vid", NO_VERTEX)
    count = 0
    ia, ib = iter(a), iter(b)
    left, right = next(ia, _END), next(ib, _END)
    while left is not _END and right is not _END:
        if left < right:
            if left != excluded:
                out.add(left)
                count += 1
            left = next(ia, _END)
        elif right < left:
            right = next(ib, _END)
        else:
            left, right = next(ia, _END), next(ib, _END)
    while left is not _END:
        if left != excluded:
            out.add(left)
            count += 1
        left = next(ia, _END)
    return count


def interval_intersection_num(
    vs: Sequence[int],
    u_begins: Sequence[int],
    u_ends: Sequence[int],
    up: int | None = None,
) -> int:
    """Count elements of sorted ``vs`` lying inside the half-open intervals given."""
    num = 0
    i = j = 0
    while i < len(vs) and j < len(u_begins):
        v = vs[i]
        if up is not None and v >= up:
            break
        u_begin = u_begins[j]
        if up is not None and u_begin >= up:
            break
        if v < u_begin:
            i += 1
            continue
        u_end = u_ends[j]
        if v >= u_end:
            if v == u_end:
                i += 1
            j += 1
            continue
        num += 1
        i += 1
    return num


def interval_pair_intersection_num(
    v_begins: Sequence[int],
    v_ends: Sequence[int],
    u_begins: Sequence[int],
    u_ends: Sequence[int],
    up: int | None = None,
) -> int:
    """Count the values covered by both sorted lists of half-open intervals."""
    num = 0
    i = j = 0
    while i < len(v_begins) and j < len(u_begins):
        v_begin, v_end = v_begins[i], v_ends[i]
        u_begin, u_end = u_begins[j], u_ends[j]
        if v_end <= v_begin or u_end <= u_begin:
            raise ValueError("intervals must be non-empty")
        if up is not None and (v_begin >= up or u_begin >= up):
            break
        if v_begin >= u_end:
            j += 1
            continue
        if u_begin >= v_end:
            i += 1
            continue
        if v_end >= u_end:
            j += 1
        if v_end <= u_end:
            i += 1
        end = min(v_end, u_end)
        if up is not None:
            end = min(up, end)
        num += end - max(v_begin, u_begin)
    return num