from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple, Union

from binparser.binary.errors import InvalidArgument
from binparser.models.fields import DecodedField
from .bitcursor import Cursor

logger = logging.getLogger(__name__)

# Plan text: comma-separated "name:token" (or bare "token") entries, read in order.
#   u<N> / s<N>   N-bit unsigned / two's complement
#   ue / se       Exp-Golomb
#   bool          1 bit
#   bytes<N>      N raw bytes (needs byte alignment)
#   align         next byte boundary;  align<N>  next N-byte boundary
#   skip<N>       skip N bits


@dataclass(frozen=True)
class FieldSpec:
    name: str
    read: Callable[[Cursor], object]
    token: str = ""


def _align(c: Cursor) -> None: c.align_byte()
def _bool(c: Cursor) -> bool: return c.get_bool()
def _ue(c: Cursor) -> int: return c.get_unsigned_golomb()
def _se(c: Cursor) -> int: return c.get_signed_golomb()

_SIMPLE: dict = {"bool": _bool, "ue": _ue, "se": _se, "align": _align}
_SIZED = re.compile(r"^(u|s|bytes|align|skip)(\d+)$")


def parse_token(token: str) -> Callable[[Cursor], object]:
    tok = token.strip().lower()
    if tok in _SIMPLE:
        return _SIMPLE[tok]

    m = _SIZED.match(tok)
    if not m:
        raise InvalidArgument(f"unknown field token {token!r}")
    kind, n = m.group(1), int(m.group(2))

    if kind == "u":
        return lambda c: c.get_unsigned(n)
    if kind == "s":
        return lambda c: c.get_signed(n)
    if kind == "bytes":
        return lambda c: c.get_bytes(n)
    if kind == "align":
        if n == 0:
            raise InvalidArgument("align0 is not a valid boundary")
        return lambda c: c.align_bytes(n)
    return lambda c: c.skip(0, n)


def compile_plan(text: str) -> Tuple[FieldSpec, ...]:
    plan = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        if ":" in item:
            name, tok = (s.strip() for s in item.split(":", 1))
        else:
            name, tok = f"f{len(plan)}", item
        plan.append(FieldSpec(name=name, read=parse_token(tok), token=tok))
    return tuple(plan)


def parse_fields(cur: Cursor, plan: Union[str, Iterable[FieldSpec]]) -> List[DecodedField]:
    """
    Read each field of `plan` in order. Errors propagate from the failing
    field; fields before it have already consumed their bits.
    """
    if isinstance(plan, str):
        plan = compile_plan(plan)

    out: List[DecodedField] = []
    for fld in plan:
        start = cur.get_position()
        value = fld.read(cur)
        out.append(DecodedField(name=fld.name, token=fld.token, value=value, start=start, end=cur.get_position()))
        logger.debug("field %s (%s) = %r at %s..%s", fld.name, fld.token, value, start, cur.pos)
    return out
