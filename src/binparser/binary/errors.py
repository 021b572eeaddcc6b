from __future__ import annotations


class CursorError(ValueError):
    pass


class InsufficientData(CursorError):
    """A read would run past the end of the buffer."""


class NotByteAligned(CursorError):
    """A byte-bulk read was attempted at a non-zero bit offset."""


class OutOfRange(CursorError):
    """A seek/skip/alignment target is not strictly inside the buffer."""


class InvalidArgument(CursorError):
    pass
