from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    """
    Read position as a (byte, bit) pair. Bit 0 is the MSB of `byte`.
    Use `Position.at` to build one from an unnormalized pair; the bit
    component is reduced mod 8 and the carry lands in the byte component.
    """
    model_config = ConfigDict(frozen=True)

    byte: int = Field(0, ge=0)
    bit: int = Field(0, ge=0, le=7)

    @classmethod
    def at(cls, byte: int, bit: int = 0) -> "Position":
        return cls(byte=byte + (bit >> 3), bit=bit & 0x7)

    def advanced(self, nbytes: int = 0, nbits: int = 0) -> "Position":
        return Position.at(self.byte + nbytes, self.bit + nbits)

    @property
    def bit_offset(self) -> int:
        return self.byte * 8 + self.bit

    def astuple(self) -> tuple[int, int]:
        return self.byte, self.bit

    # stream order
    def __lt__(self, other: "Position") -> bool:
        return self.bit_offset < other.bit_offset

    def __le__(self, other: "Position") -> bool:
        return self.bit_offset <= other.bit_offset

    def __str__(self) -> str:
        return f"{self.byte}:{self.bit}"


class CursorState(BaseModel):
    length: int = Field(..., ge=0)
    byte_pos: int = Field(..., ge=0)
    bit_pos: int = Field(..., ge=0, le=7)
