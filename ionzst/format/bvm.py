"""Synthetic Ion binary version marker.

The payload region of an ``.ion.zst`` object is Ion binary without the
leading binary version marker (BVM). ``BVMReader`` inserts it in front of
the wrapped stream so an Ion binary reader recognises the data.
"""

from __future__ import annotations

import enum
import io
from typing import BinaryIO

__all__ = ["BVM", "BVMState", "BVMReader"]

BVM = b"\xe0\x01\x00\xea"


class BVMState(enum.Enum):
    EMITTING_MARKER = "emitting_marker"
    PASS_THROUGH = "pass_through"


class BVMReader(io.RawIOBase):
    """Stream yielding ``BVM`` followed by every byte of ``raw``.

    The marker is inserted, so the stream is ``len(BVM)`` bytes longer than
    ``raw``. Reads smaller than the remaining marker return marker bytes
    only. A read larger than the remaining marker returns the rest of the
    marker plus the result of exactly one read from ``raw``.

    If that one read raises, the exception propagates and the call returns
    nothing, although the marker bytes it staged are counted as emitted and
    will not be produced again.
    """

    def __init__(self, raw: BinaryIO) -> None:
        super().__init__()
        self._raw = raw
        self._emitted = 0

    @property
    def state(self) -> BVMState:
        if self._emitted < len(BVM):
            return BVMState.EMITTING_MARKER
        return BVMState.PASS_THROUGH

    @property
    def marker_bytes_emitted(self) -> int:
        return self._emitted

    def readable(self) -> bool:
        return True

    def _read_raw(self, view: memoryview) -> int:
        data = self._raw.read(len(view))
        if not data:
            return 0
        view[: len(data)] = data
        return len(data)

    def readinto(self, b) -> int:  # type: ignore[override]
        view = memoryview(b).cast("B")
        if self.state is BVMState.PASS_THROUGH:
            return self._read_raw(view)

        n = min(len(view), len(BVM) - self._emitted)
        view[:n] = BVM[self._emitted : self._emitted + n]
        self._emitted += n
        if n == len(view):
            return n
        return n + self._read_raw(view[n:])

    def close(self) -> None:
        try:
            self._raw.close()
        finally:
            super().close()
