import pytest

from graphkit.unary import BitReader, UnaryEncoder


def test_int_2_nat_is_a_bijection_onto_naturals():
    mapped = [UnaryEncoder.int_2_nat(x) for x in range(-50, 50)]
    assert sorted(mapped) == list(range(100))
    assert all(UnaryEncoder.int_2_nat(x) % 2 == 0 for x in range(0, 50))
    assert all(UnaryEncoder.int_2_nat(x) % 2 == 1 for x in range(-50, 0))


def test_gamma_of_zero_is_single_one_bit():
    enc = UnaryEncoder()
    bits = []
    enc.encode_gamma(bits, 0)
    assert UnaryEncoder.format_bits(bits) == "0b1"


def test_gamma_code_shape():
    enc = UnaryEncoder()
    for x in range(0, 300):
        bits = []
        enc.encode_gamma(bits, x)
        zeros = bits.index(1)
        assert all(b == 0 for b in bits[:zeros])
        assert len(bits) == 2 * zeros + 1
        assert len(bits) == enc.gamma_size(x)


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_zeta_size_matches_code_length(k):
    enc = UnaryEncoder(zeta_k=k)
    for x in range(0, 500):
        bits = []
        enc.encode_zeta(bits, x)
        assert len(bits) == enc.zeta_size(x)


@pytest.mark.parametrize("k", [1, 2, 3])
def test_gamma_and_zeta_round_trip(k):
    enc = UnaryEncoder(zeta_k=k)
    values = list(range(0, 200)) + [1000, 65535, 123456, 2**20]
    bits = []
    for v in values:
        enc.append_gamma(bits, v)
        enc.append_zeta(bits, v)
    reader = BitReader(bits, zeta_k=k)
    decoded = []
    for _ in values:
        decoded.append((reader.decode_gamma(), reader.decode_zeta()))
    assert decoded == [(v, v) for v in values]
    assert reader.offset == len(bits)


def test_pre_encoding_gives_identical_codes():
    plain = UnaryEncoder(zeta_k=3, pre_encode_num=64)
    tabled = UnaryEncoder(zeta_k=3, pre_encode_num=64)
    tabled.pre_encoding()
    for x in range(0, 130):
        a, b = [], []
        plain.append_gamma(a, x)
        plain.append_zeta(a, x)
        tabled.append_gamma(b, x)
        tabled.append_zeta(b, x)
        assert a == b
        assert plain.gamma_size(x) == tabled.gamma_size(x)
        assert plain.zeta_size(x) == tabled.zeta_size(x)


def test_negative_values_rejected():
    enc = UnaryEncoder()
    with pytest.raises(ValueError):
        enc.encode_gamma([], -1)
    with pytest.raises(ValueError):
        enc.encode_zeta([], -5)


def test_zeta_longer_than_word_rejected():
    enc = UnaryEncoder(zeta_k=3)
    with pytest.raises(ValueError):
        enc.encode_zeta([], 2**31 - 1)


def test_invalid_zeta_k_rejected():
    with pytest.raises(ValueError):
        UnaryEncoder(zeta_k=0)


def test_reader_past_end_raises():
    enc = UnaryEncoder()
    bits = []
    enc.encode_gamma(bits, 9)
    reader = BitReader(bits[:-1])
    with pytest.raises(EOFError):
        reader.decode_gamma()


def test_read_bits_and_peek():
    reader = BitReader([1, 0, 1, 1], offset=1)
    assert reader.peek_bit() is False
    assert reader.read_bits(3) == 0b011
    assert reader.peek_bit() is False
    with pytest.raises(EOFError):
        reader.read_bits(1)