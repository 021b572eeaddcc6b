from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .codecs.bitcursor import Cursor
from .codecs.field_plan import FieldSpec, parse_fields
from binparser.models.fields import DecodedField

logger = logging.getLogger(__name__)

BytesLike = Union[str, Path, bytes, bytearray, memoryview]


def _load_bytes(inp: BytesLike) -> Union[bytes, bytearray, memoryview]:
    # in-memory buffers are borrowed as-is; paths are read whole
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return inp
    p = Path(str(inp))
    data = p.read_bytes()
    logger.debug("loaded %d bytes from %s", len(data), p)
    return data


def open_cursor(
    inp: BytesLike,
    *,
    offset: int = 0,
    bit: int = 0,
    length: Optional[int] = None,
) -> Cursor:
    """Build a Cursor over a file or buffer, optionally seeking to offset:bit."""
    cur = Cursor(_load_bytes(inp), length)
    if offset or bit:
        cur.seek(offset, bit)
    return cur


def read_fields(
    inp: BytesLike,
    plan: Union[str, Iterable[FieldSpec]],
    *,
    offset: int = 0,
    bit: int = 0,
) -> List[DecodedField]:
    cur = open_cursor(inp, offset=offset, bit=bit)
    fields = parse_fields(cur, plan)
    logger.debug("decoded %d fields, stopped at %s", len(fields), cur.pos)
    return fields
