"""Elias gamma and zeta codes over lists of bits."""

from __future__ import annotations

from typing import List, MutableSequence, Sequence

from graphkit.vertexset import ZETA_K

Bits = List[int]

MAX_ZETA_BITS = 32
DEFAULT_PRE_ENCODE_NUM = 1024 * 1024 * 16


def _significant_bit(x: int) -> int:
    """Return the position of the highest set bit of a positive integer."""
    if x <= 0:
        raise ValueError(f"cannot encode negative value {x - 1}")
    return x.bit_length() - 1


def _emit(bits: MutableSequence[int], x: int, length: int) -> None:
    """Append the lowest ``length`` bits of ``x``, most significant first."""
    bits.extend((x >> i) & 1 for i in reversed(range(length)))


class UnaryEncoder:
    """Writes gamma and zeta codes, optionally from pre-computed tables."""

    def __init__(self, zeta_k: int = ZETA_K, pre_encode_num: int = DEFAULT_PRE_ENCODE_NUM):
        if zeta_k < 1:
            raise ValueError("zeta_k must be at least 1")
        self.zeta_k = zeta_k
        self.pre_encode_num = pre_encode_num
        self._gamma_table: list[tuple[int, ...]] = []
        self._zeta_table: list[tuple[int, ...]] = []

    @staticmethod
    def int_2_nat(x: int) -> int:
        """Map a signed integer to a natural number: 0, -1, 1, -2, ... -> 0, 1, 2, 3, ..."""
        return x << 1 if x >= 0 else -((x << 1) + 1)

    @staticmethod
    def format_bits(bits: Sequence[int]) -> str:
        return "0b" + "".join("1" if b else "0" for b in bits)

    def append_gamma(self, bits: MutableSequence[int], x: int) -> None:
        if 0 <= x < len(self._gamma_table):
            bits.extend(self._gamma_table[x])
        else:
            self.encode_gamma(bits, x)

    def append_zeta(self, bits: MutableSequence[int], x: int) -> None:
        if 0 <= x < len(self._zeta_table):
            bits.extend(self._zeta_table[x])
        else:
            self.encode_zeta(bits, x)

    def gamma_size(self, x: int) -> int:
        if 0 <= x < len(self._gamma_table):
            return len(self._gamma_table[x])
        return 2 * _significant_bit(x + 1) + 1

    def zeta_size(self, x: int) -> int:
        if 0 <= x < len(self._zeta_table):
            return len(self._zeta_table[x])
        h = _significant_bit(x + 1) // self.zeta_k
        return (h + 1) * (self.zeta_k + 1)

    def pre_encoding(self) -> None:
        """Fill the code tables for every value below ``pre_encode_num``."""
        gamma_table = []
        zeta_table = []
        for i in range(self.pre_encode_num):
            gamma: Bits = []
            self.encode_gamma(gamma, i)
            gamma_table.append(tuple(gamma))
            if self.zeta_k == 1:
                zeta_table.append(gamma_table[-1])
            else:
                zeta: Bits = []
                self.encode_zeta(zeta, i)
                zeta_table.append(tuple(zeta))
        self._gamma_table = gamma_table
        self._zeta_table = zeta_table

    def encode_gamma(self, bits: MutableSequence[int], x: int) -> None:
        x += 1
        length = _significant_bit(x)
        _emit(bits, 1, length + 1)
        _emit(bits, x, length)

    def encode_zeta(self, bits: MutableSequence[int], x: int) -> None:
        if self.zeta_k == 1:
            self.encode_gamma(bits, x)
            return
        x += 1
        h = _significant_bit(x) // self.zeta_k
        width = (h + 1) * self.zeta_k
        if width > MAX_ZETA_BITS:
            raise ValueError(
                f"zeta code of {x - 1} with k={self.zeta_k} needs {width} bits, "
                f"more than {MAX_ZETA_BITS}"
            )
        _emit(bits, 1, h + 1)
        _emit(bits, x, width)


class BitReader:
    """Reads gamma and zeta codes from a bit list, starting at ``offset``."""

    def __init__(self, bits: Sequence[int], offset: int = 0, zeta_k: int = ZETA_K):
        if zeta_k < 1:
            raise ValueError("zeta_k must be at least 1")
        self.bits = bits
        self.offset = offset
        self.zeta_k = zeta_k

    def _next_bit(self) -> int:
        if self.offset >= len(self.bits):
            raise EOFError("bit stream exhausted")
        bit = self.bits[self.offset]
        self.offset += 1
        return 1 if bit else 0

    def peek_bit(self) -> bool:
        """Return the next bit without consuming it; False at the end of the stream."""
        return self.offset < len(self.bits) and bool(self.bits[self.offset])

    def read_bits(self, n: int) -> int:
        """Read ``n`` bits as an unsigned integer, most significant first."""
        if n < 0:
            raise ValueError("cannot read a negative number of bits")
        end = self.offset + n
        if end > len(self.bits):
            raise EOFError("bit stream exhausted")
        value = 0
        for bit in self.bits[self.offset:end]:
            value = (value << 1) | (1 if bit else 0)
        self.offset = end
        return value

    def _read_unary(self) -> int:
        zeros = 0
        while not self._next_bit():
            zeros += 1
        return zeros

    def decode_gamma(self) -> int:
        length = self._read_unary()
        return ((1 << length) | self.read_bits(length)) - 1

    def decode_zeta(self) -> int:
        if self.zeta_k == 1:
            return self.decode_gamma()
        h = self._read_unary()
        return self.read_bits((h + 1) * self.zeta_k) - 1