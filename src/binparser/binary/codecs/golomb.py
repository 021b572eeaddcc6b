from __future__ import annotations
from typing import TYPE_CHECKING

from binparser.binary.errors import InsufficientData

if TYPE_CHECKING:
    from .bitcursor import Cursor


def _count_leading_zeros(cur: Cursor) -> int:
    """Count 0 bits from the current position up to the first 1 bit (not consumed)."""
    buf, length = cur.buf, cur.length
    byte_pos, bit_pos = cur.pos.byte, cur.pos.bit
    zeros = 0
    while byte_pos < length:
        if (buf[byte_pos] >> (7 - bit_pos)) & 0x1:
            return zeros
        zeros += 1
        byte_pos += (bit_pos + 1) >> 3
        bit_pos = (bit_pos + 1) & 0x7
    raise InsufficientData(f"exp-golomb prefix at {cur.pos} runs past end ({zeros} zeros)")


def decode_unsigned_golomb(cur: Cursor) -> int:
    """
    ue(v): `zeros` 0 bits, a 1 bit, then `zeros` suffix bits.
    Value = suffix + 2**zeros - 1. A truncated suffix is an error, and the
    cursor only moves once the whole code is known to be in the buffer.
    """
    zeros = _count_leading_zeros(cur)
    if not cur.has_rest(0, 2 * zeros + 1):
        raise InsufficientData(
            f"exp-golomb suffix at {cur.pos} truncated: need {2 * zeros + 1} bits, have {cur.remaining_bits()}"
        )
    cur.get_unsigned(zeros + 1)  # prefix and terminating 1
    return cur.get_unsigned(zeros) + (1 << zeros) - 1


def signed_from_code(v: int) -> int:
    """Map a ue code number to se(v): 0, 1, -1, 2, -2, ..."""
    if v & 0x1:
        return (v >> 1) + 1
    return -(v >> 1)


def decode_signed_golomb(cur: Cursor) -> int:
    return signed_from_code(decode_unsigned_golomb(cur))
