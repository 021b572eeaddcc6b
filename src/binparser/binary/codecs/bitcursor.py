from __future__ import annotations
import struct
import sys
from typing import Optional, TextIO, Union

from binparser.binary.errors import InsufficientData, InvalidArgument, NotByteAligned, OutOfRange
from binparser.models.position import CursorState, Position
from .golomb import decode_signed_golomb, decode_unsigned_golomb

BufferLike = Union[bytes, bytearray, memoryview]


def sign_extend(value: int, width: int) -> int:
    """Interpret the low `width` bits of `value` as two's complement."""
    if width <= 0:
        return 0
    mask = (1 << width) - 1
    value &= mask
    return value - (1 << width) if (value >> (width - 1)) & 0x1 else value


class Cursor:
    """
    Bit-level reader over a borrowed, read-only byte buffer.

    The cursor keeps a memoryview of the caller's buffer and never copies or
    writes through it; the buffer must stay unchanged while the cursor is in use.
    Bits are numbered MSB-first inside each byte. Every read checks bounds
    before moving, so a failed read leaves the position untouched.
    """
    __slots__ = ("buf", "length", "pos")

    def __init__(self, data: BufferLike = b"", length: Optional[int] = None):
        self.buf = memoryview(b"")
        self.length = 0
        self.pos = Position()
        self.reset(data, length)

    def reset(self, data: BufferLike, length: Optional[int] = None) -> None:
        """Point the cursor at a new buffer and rewind to (0, 0)."""
        try:
            view = memoryview(data).cast("B").toreadonly()
        except TypeError as e:
            # non-buffer objects and non-contiguous views
            raise InvalidArgument(f"unusable buffer: {e}") from e
        if length is None:
            length = len(view)
        if not (0 <= length <= len(view)):
            raise InvalidArgument(f"length {length} outside buffer of {len(view)} bytes")
        self.buf = view[:length]
        self.length = length
        self.pos = Position()

    def release(self) -> None:
        """Drop the borrowed buffer; the cursor is left empty at (0, 0)."""
        old = self.buf
        self.buf, self.length, self.pos = memoryview(b""), 0, Position()
        old.release()

    def __repr__(self) -> str:
        return f"Cursor(length={self.length}, pos={self.pos})"

    # -----------------------------
    # Position & bounds
    # -----------------------------

    def has_rest(self, nbytes: int = 0, nbits: int = 0) -> bool:
        """True if `nbytes` bytes plus `nbits` bits can be read from here.
        The buffer end is reachable only on a byte boundary."""
        if nbytes < 0 or nbits < 0:
            raise InvalidArgument("has_rest takes non-negative sizes")
        bits = self.pos.bit + nbits
        next_byte = self.pos.byte + nbytes + (bits >> 3)
        next_bit = bits & 0x7
        if next_byte < self.length:
            return True
        return next_byte == self.length and next_bit == 0

    def is_in_buf(self, byte_pos: int) -> bool:
        return byte_pos < self.length

    def _advance(self, nbytes: int = 0, nbits: int = 0) -> None:
        # callers check has_rest first
        self.pos = self.pos.advanced(nbytes, nbits)

    def _require(self, nbytes: int, nbits: int, what: str) -> None:
        if not self.has_rest(nbytes, nbits):
            raise InsufficientData(
                f"{what}: need {nbytes} bytes + {nbits} bits at {self.pos}, buffer is {self.length} bytes"
            )

    def seek(self, byte_pos: int, bit_pos: int = 0) -> None:
        """Absolute seek. The target byte must lie strictly inside the buffer,
        so seeking to `length` fails even though reads may end there."""
        if not (isinstance(byte_pos, int) and isinstance(bit_pos, int)):
            raise InvalidArgument(f"seek position must be integers, got {byte_pos!r}:{bit_pos!r}")
        if byte_pos < 0 or not (0 <= bit_pos <= 7):
            raise InvalidArgument(f"bad seek position {byte_pos}:{bit_pos}")
        if not self.is_in_buf(byte_pos):
            raise OutOfRange(f"seek to {byte_pos}:{bit_pos} outside buffer of {self.length} bytes")
        self.pos = Position(byte=byte_pos, bit=bit_pos)

    def skip(self, nbytes: int = 0, nbits: int = 0) -> None:
        if not (isinstance(nbytes, int) and isinstance(nbits, int)):
            raise InvalidArgument(f"skip sizes must be integers, got {nbytes!r}, {nbits!r}")
        if nbytes < 0 or nbits < 0:
            raise InvalidArgument("skip takes non-negative sizes")
        target = self.pos.advanced(nbytes, nbits)
        self.seek(target.byte, target.bit)

    def get_position(self) -> Position:
        return self.pos

    def tell(self) -> int:
        return self.pos.byte

    def tell_bits(self) -> int:
        return self.pos.bit_offset

    def remaining(self) -> int:
        return self.length - self.pos.byte

    def remaining_bits(self) -> int:
        return self.length * 8 - self.pos.bit_offset

    def at_end(self) -> bool:
        return not self.has_rest(0, 1)

    # -----------------------------
    # Bit-packed integers (MSB-first)
    # -----------------------------

    def get_bool(self) -> bool:
        self._require(0, 1, "bool")
        val = (self.buf[self.pos.byte] >> (7 - self.pos.bit)) & 0x1
        self._advance(0, 1)
        return bool(val)

    def get_unsigned(self, width: int) -> int:
        """Read `width` bits as an unsigned integer. Width 0 reads nothing and returns 0."""
        if width < 0:
            raise InvalidArgument(f"negative width {width}")
        if width == 0:
            return 0
        self._require(0, width, f"u{width}")

        buf = self.buf
        byte_pos, bit_pos = self.pos.byte, self.pos.bit
        val = 0
        for _ in range(width):
            val = (val << 1) | ((buf[byte_pos] >> (7 - bit_pos)) & 0x1)
            byte_pos += (bit_pos + 1) >> 3
            bit_pos = (bit_pos + 1) & 0x7

        self._advance(0, width)
        return val

    def get_signed(self, width: int) -> int:
        """Read `width` bits as two's complement. Width 0 returns 0 without moving."""
        return sign_extend(self.get_unsigned(width), width)

    def get_uint32(self, width: int) -> int:
        if width > 32:
            raise InvalidArgument(f"u32 read of {width} bits")
        return self.get_unsigned(width)

    def get_uint64(self, width: int) -> int:
        if width > 64:
            raise InvalidArgument(f"u64 read of {width} bits")
        return self.get_unsigned(width)

    def get_int32(self, width: int) -> int:
        if width > 32:
            raise InvalidArgument(f"s32 read of {width} bits")
        return self.get_signed(width)

    def get_int64(self, width: int) -> int:
        if width > 64:
            raise InvalidArgument(f"s64 read of {width} bits")
        return self.get_signed(width)

    def peek_unsigned(self, width: int) -> int:
        start = self.pos
        try:
            return self.get_unsigned(width)
        finally:
            self.pos = start

    # -----------------------------
    # Byte runs
    # -----------------------------

    def get_bytes(self, count: int) -> bytes:
        if count < 0:
            raise InvalidArgument(f"negative byte count {count}")
        if self.pos.bit != 0:
            raise NotByteAligned(f"byte read of {count} at {self.pos}")
        self._require(count, 0, f"bytes[{count}]")
        start = self.pos.byte
        out = self.buf[start:start + count].tobytes()
        self._advance(count, 0)
        return out

    def peek_bytes(self, count: int) -> bytes:
        start = self.pos
        try:
            return self.get_bytes(count)
        finally:
            self.pos = start

    # big-endian fixed-size reads; these work at any bit offset
    def u8(self) -> int:  return self.get_unsigned(8)
    def s8(self) -> int:  return self.get_signed(8)
    def u16(self) -> int: return self.get_unsigned(16)
    def s16(self) -> int: return self.get_signed(16)
    def u32(self) -> int: return self.get_unsigned(32)
    def s32(self) -> int: return self.get_signed(32)
    def u64(self) -> int: return self.get_unsigned(64)
    def s64(self) -> int: return self.get_signed(64)
    def f32(self) -> float: return struct.unpack(">f", self.get_unsigned(32).to_bytes(4, "big"))[0]
    def f64(self) -> float: return struct.unpack(">d", self.get_unsigned(64).to_bytes(8, "big"))[0]

    # -----------------------------
    # Exp-Golomb
    # -----------------------------

    def get_unsigned_golomb(self) -> int:
        return decode_unsigned_golomb(self)

    def get_signed_golomb(self) -> int:
        return decode_signed_golomb(self)

    # -----------------------------
    # Alignment
    # -----------------------------

    def is_byte_aligned(self) -> bool:
        return self.pos.bit == 0

    def is_aligned(self, n: int) -> bool:
        if n <= 0:
            raise InvalidArgument(f"alignment must be positive, got {n}")
        return self.pos.byte % n == 0 and self.pos.bit == 0

    def align_byte(self) -> None:
        """Move to the next byte boundary. No-op when aligned or at the buffer end."""
        if not self.is_in_buf(self.pos.byte):
            return
        if self.pos.bit != 0:
            self.pos = Position(byte=self.pos.byte + 1, bit=0)

    def align_bytes(self, n: int) -> None:
        """Move to the next multiple of `n` bytes. The target must be inside the buffer."""
        if n <= 0:
            raise InvalidArgument(f"alignment must be positive, got {n}")
        if not self.is_in_buf(self.pos.byte):
            return
        rem = self.pos.byte % n
        if rem == 0 and self.pos.bit == 0:
            return
        target = self.pos.byte - rem + n
        if not self.is_in_buf(target):
            raise OutOfRange(f"{n}-byte boundary {target} outside buffer of {self.length} bytes")
        self.pos = Position(byte=target, bit=0)

    # -----------------------------
    # Debug
    # -----------------------------

    def state(self) -> CursorState:
        return CursorState(length=self.length, byte_pos=self.pos.byte, bit_pos=self.pos.bit)

    def dump(self, file: Optional[TextIO] = None) -> None:
        out = file if file is not None else sys.stderr
        print("***** Syntax Reader Dump *****", file=out)
        print(f"bufLen  = {self.length}", file=out)
        print(f"posByte = {self.pos.byte}", file=out)
        print(f"posBit  = {self.pos.bit}", file=out)
        print("\n", file=out)
