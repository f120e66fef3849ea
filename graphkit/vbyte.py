"""Stream VByte encoding of 32-bit integers, with optional delta coding.

Layout of an encoded list: an optional 4-byte little-endian count, then one
key byte per four values (two bits per value, lowest bits first; 0 means
1 byte, 1 means 2 bytes, 2 means 3 bytes, 3 means 4 bytes), then the
little-endian data bytes.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

_MASK32 = 0xFFFFFFFF


def _check_u32(value: int) -> int:
    if not 0 <= value <= _MASK32:
        raise ValueError(f"value {value} does not fit in 32 bits")
    return value


def _pack(values: Iterable[int]) -> Tuple[bytes, bytes]:
    keys = bytearray()
    data = bytearray()
    key = 0
    shift = 0
    for value in values:
        if shift == 8:
            keys.append(key)
            key = 0
            shift = 0
        code = (value.bit_length() - 1) // 8 if value else 0
        data += value.to_bytes(code + 1, "little")
        key |= code << shift
        shift += 2
    if shift:
        keys.append(key)
    return bytes(keys), bytes(data)


def svb_encode(values: Iterable[int]) -> Tuple[bytes, bytes]:
    """Encode unsigned 32-bit values as (key bytes, data bytes)."""
    return _pack(_check_u32(v) for v in values)


def svb_encode_delta(values: Iterable[int], prev: int = 0) -> Tuple[bytes, bytes]:
    """Encode the differences between consecutive values, modulo 2**32."""
    deltas = []
    for value in values:
        _check_u32(value)
        deltas.append((value - prev) & _MASK32)
        prev = value
    return _pack(deltas)


def svb_decode_delta(keys: bytes, data: bytes, count: int, prev: int = 0) -> List[int]:
    """Decode ``count`` delta-coded values; extra trailing data is ignored."""
    if count < 0:
        raise ValueError("count must be non-negative")
    if len(keys) < (count + 3) // 4:
        raise ValueError("not enough key bytes for the requested count")
    values: List[int] = []
    pos = 0
    for i in range(count):
        code = (keys[i // 4] >> (2 * (i % 4))) & 3
        end = pos + code + 1
        if end > len(data):
            raise ValueError("data bytes exhausted")
        prev = (int.from_bytes(data[pos:end], "little") + prev) & _MASK32
        values.append(prev)
        pos = end
    return values


def vbyte_encode(values: Iterable[int], add_degree: bool = True) -> bytes:
    """Encode a list into whole 32-bit words, optionally led by its length."""
    values = list(values)
    header = len(values).to_bytes(4, "little") if add_degree else b""
    keys, data = svb_encode_delta(values)
    body = header + keys + data
    num_words = 1 + (len(body) + 3) // 4
    return body.ljust(num_words * 4, b"\0")


def vbyte_decode(buffer: bytes, count: int | None = None) -> List[int]:
    """Decode a buffer from :func:`vbyte_encode`.

    Without ``count`` the buffer must start with the 4-byte length header.
    """
    offset = 0
    if count is None:
        if len(buffer) < 4:
            raise ValueError("buffer too short for a length header")
        count = int.from_bytes(buffer[:4], "little")
        offset = 4
    key_len = (count + 3) // 4
    keys = buffer[offset:offset + key_len]
    data = buffer[offset + key_len:]
    return svb_decode_delta(keys, data, count)