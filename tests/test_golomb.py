import pytest

from binparser.binary.codecs.bitcursor import Cursor
from binparser.binary.codecs.golomb import decode_signed_golomb, decode_unsigned_golomb, signed_from_code
from binparser.binary.errors import InsufficientData


def _bits(s: str) -> bytes:
    s = s.replace(" ", "")
    s += "0" * (-len(s) % 8)
    return int(s, 2).to_bytes(len(s) // 8, "big")


@pytest.mark.parametrize("code,value", [
    ("1", 0), ("010", 1), ("011", 2), ("00100", 3), ("00101", 4),
    ("00110", 5), ("00111", 6), ("0001000", 7), ("000011111", 30),
])
def test_unsigned_codes(code, value):
    cur = Cursor(_bits(code))
    assert decode_unsigned_golomb(cur) == value
    assert cur.tell_bits() == len(code)


def test_consecutive_codes():
    cur = Cursor(_bits("1 010 011 00100"))
    assert [cur.get_unsigned_golomb() for _ in range(4)] == [0, 1, 2, 3]
    assert cur.get_position().astuple() == (1, 4)


def test_signed_mapping():
    assert [signed_from_code(v) for v in range(7)] == [0, 1, -1, 2, -2, 3, -3]
    assert decode_signed_golomb(Cursor(_bits("00101"))) == -2
    assert Cursor(_bits("00100")).get_signed_golomb() == 2
    assert Cursor(_bits("011")).get_signed_golomb() == -1


def test_starts_mid_byte():
    cur = Cursor(_bits("111 00110"))
    cur.skip(0, 3)
    assert cur.get_unsigned_golomb() == 5
    assert cur.get_position().astuple() == (1, 0)


def test_code_ending_at_buffer_end():
    cur = Cursor(_bits("1 0001001"))
    cur.skip(0, 1)
    assert cur.get_unsigned_golomb() == 8
    assert cur.get_position().astuple() == (1, 0)
    with pytest.raises(InsufficientData):
        cur.get_unsigned_golomb()


def test_no_terminating_one():
    cur = Cursor(b"\x00\x00")
    with pytest.raises(InsufficientData):
        cur.get_unsigned_golomb()
    assert cur.get_position().astuple() == (0, 0)


def test_truncated_suffix_is_an_error():
    # 11 zeros, the 1 bit, then only 4 of the 11 suffix bits
    cur = Cursor(_bits("00000000000" + "1" + "1111"))
    with pytest.raises(InsufficientData):
        cur.get_unsigned_golomb()
    assert cur.get_position().astuple() == (0, 0)


def test_long_codes_are_not_truncated():
    cur = Cursor(_bits("0" * 40 + "1" + "1" * 40))
    assert cur.get_unsigned_golomb() == (1 << 41) - 2
    assert cur.tell_bits() == 81


def test_single_bit_code_in_last_bit():
    cur = Cursor(_bits("00000001"))
    cur.skip(0, 7)
    assert cur.get_unsigned_golomb() == 0
    assert cur.get_position().astuple() == (1, 0)
