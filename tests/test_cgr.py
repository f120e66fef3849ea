import pytest

from graphkit.cgr import CgrDecoder, CgrEncoder
from graphkit.unary import BitReader, UnaryEncoder
from graphkit.vertexset import INTERVAL_SEGMENT_LEN


def _encoder(**kwargs):
    return CgrEncoder(8, pre_encode_num=0, **kwargs)


@pytest.mark.parametrize(
    "vid, neighbors",
    [
        (0, [1, 2, 5]),
        (5, [0, 1, 4, 6, 7]),
        (3, [3]),
        (7, [0, 100, 1000, 65536]),
    ],
)
def test_segmented_round_trip(vid, neighbors):
    enc = _encoder()
    words = enc.encode(vid, neighbors)
    bits = enc.compressed_bits(vid)
    assert words == (len(bits) - 1) // 32 + 1
    assert enc.compressed_size(vid) == len(bits)
    assert CgrDecoder(vid, bits).decode() == neighbors


def test_multiple_segments_round_trip():
    enc = _encoder(res_seg_len=32)
    neighbors = list(range(0, 400, 7))
    enc.encode(1, neighbors)
    bits = enc.compressed_bits(1)
    assert len(bits) > 32
    assert enc.stats()["max_num_res_section_per_node"] > 1
    assert CgrDecoder(1, bits, res_seg_len=32).decode() == neighbors


def test_long_list_default_segments_round_trip():
    enc = _encoder()
    neighbors = list(range(10, 3000, 3))
    enc.encode(2, neighbors)
    bits = enc.compressed_bits(2)
    assert len(bits) > 256
    assert CgrDecoder(2, bits).decode() == neighbors


def test_empty_list_round_trip():
    enc = _encoder()
    assert enc.encode(4, []) == 1
    assert CgrDecoder(4, enc.compressed_bits(4)).decode() == []


def test_concatenated_vertices_decode_at_offsets():
    enc = _encoder()
    lists = {0: [1, 3, 6], 1: [], 2: [0, 1, 7], 3: [2]}
    stream = []
    offsets = {}
    for vid, neighbors in lists.items():
        enc.encode(vid, neighbors)
        offsets[vid] = len(stream)
        stream.extend(enc.compressed_bits(vid))
    for vid, neighbors in lists.items():
        assert CgrDecoder(vid, stream, offset=offsets[vid]).decode() == neighbors


def test_unsegmented_with_degree_round_trip():
    enc = _encoder(res_seg_len=0)
    neighbors = [0, 2, 3, 9]
    enc.encode(5, neighbors)
    decoder = CgrDecoder(5, enc.compressed_bits(5), res_seg_len=0)
    assert decoder.decode() == neighbors
    assert decoder.offset == enc.compressed_size(5)


def test_add_degree_with_empty_list_returns_zero_words():
    enc = _encoder(add_degree=True)
    assert enc.encode(0, []) == 0
    reader = BitReader(enc.compressed_bits(0))
    assert reader.decode_gamma() == 0
    assert reader.offset == enc.compressed_size(0)


def test_plain_unary_encoding_is_a_chain_of_zeta_codes():
    enc = _encoder(use_segment=False)
    neighbors = [2, 7, 8, 20]
    words = enc.encode(5, neighbors)
    bits = enc.compressed_bits(5)
    assert words == (len(bits) - 1) // 32 + 1
    reader = BitReader(bits)
    first = reader.decode_zeta()
    assert first == UnaryEncoder.int_2_nat(neighbors[0] - 5)
    decoded = [neighbors[0]]
    while reader.offset < len(bits):
        decoded.append(decoded[-1] + reader.decode_zeta() + 1)
    assert decoded == neighbors


def test_plain_unary_encoding_of_empty_list():
    enc = _encoder(use_segment=False)
    assert enc.encode(3, []) == 0
    assert enc.compressed_size(3) == 0


def test_interval_round_trip():
    enc = _encoder(use_interval=True, itv_seg_len=INTERVAL_SEGMENT_LEN)
    neighbors = [1, 2, 3, 4, 5, 10, 20, 21, 22, 23, 40]
    enc.encode(7, neighbors)
    decoder = CgrDecoder(7, enc.compressed_bits(7))
    intervals = decoder.decode_intervals()
    residuals = decoder.decode_residuals()
    expanded = [v for begin, end in intervals for v in range(begin, end)]
    assert all(end - begin >= 4 for begin, end in intervals)
    assert sorted(expanded + residuals) == neighbors
    assert set(expanded).isdisjoint(residuals)
    stats = enc.stats()
    assert stats["max_num_itv_per_node"] == len(intervals)
    assert stats["max_num_res_per_node"] == len(residuals)
    assert stats["max_itv_len"] == max(end - begin for begin, end in intervals)


def test_interval_mode_without_intervals():
    enc = _encoder(use_interval=True, itv_seg_len=INTERVAL_SEGMENT_LEN)
    neighbors = [0, 2, 4, 6]
    enc.encode(3, neighbors)
    decoder = CgrDecoder(3, enc.compressed_bits(3))
    assert decoder.decode_intervals() == []
    assert decoder.decode_residuals() == neighbors


def test_stats_without_intervals_omit_interval_keys():
    enc = _encoder()
    enc.encode(0, [1, 2])
    stats = enc.stats()
    assert "max_itv_len" not in stats
    assert stats["max_num_res_section_per_node"] == 1


def test_pre_encoded_encoder_gives_same_bits():
    plain = CgrEncoder(4, pre_encode_num=0)
    tabled = CgrEncoder(4, pre_encode_num=128)
    tabled.pre_encoding()
    neighbors = [0, 1, 50, 300, 301]
    plain.encode(2, neighbors)
    tabled.encode(2, neighbors)
    assert plain.compressed_bits(2) == tabled.compressed_bits(2)


def test_truncated_stream_raises():
    enc = _encoder()
    enc.encode(0, [5, 9, 100])
    bits = enc.compressed_bits(0)[:-3]
    with pytest.raises(EOFError):
        CgrDecoder(0, bits).decode()