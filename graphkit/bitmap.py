"""A fixed-size bitmap."""

from __future__ import annotations


class Bitmap:
    """A fixed number of bits, all clear after construction or reset."""

    def __init__(self, size: int):
        if size < 0:
            raise ValueError("bitmap size must be non-negative")
        self._size = size
        self._bytes = bytearray((size + 7) // 8)

    def __len__(self) -> int:
        return self._size

    def _check(self, pos: int) -> None:
        if not 0 <= pos < self._size:
            raise IndexError(f"bit {pos} out of range for bitmap of size {self._size}")

    def reset(self) -> None:
        self._bytes = bytearray(len(self._bytes))

    def set_bit(self, pos: int) -> None:
        self._check(pos)
        self._bytes[pos >> 3] |= 1 << (pos & 7)

    def get_bit(self, pos: int) -> bool:
        self._check(pos)
        return bool(self._bytes[pos >> 3] >> (pos & 7) & 1)

    def swap(self, other: "Bitmap") -> None:
        """Exchange contents (and sizes) with another bitmap."""
        self._bytes, other._bytes = other._bytes, self._bytes
        self._size, other._size = other._size, self._size