from __future__ import annotations
from typing import Any
from pydantic import BaseModel, field_serializer
from .position import Position


class DecodedField(BaseModel):
    name: str
    token: str = ""
    value: Any = None
    start: Position
    end: Position

    @property
    def bit_length(self) -> int:
        return self.end.bit_offset - self.start.bit_offset

    @field_serializer("value", when_used="json")
    def _hex_bytes(self, v: Any) -> Any:
        # raw byte runs are not valid UTF-8 in general
        if isinstance(v, (bytes, bytearray)):
            return bytes(v).hex()
        return v
