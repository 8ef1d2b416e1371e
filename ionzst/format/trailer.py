"""Trailer handling for the ``.ion.zst`` container.

The container ends with a metadata trailer followed by a 4-byte
little-endian offset giving the trailer's length. Everything before the
trailer is the payload region.
"""

from __future__ import annotations

import logging
import struct
from typing import Protocol

from ..errors import ObjectTooSmallError, TrailerError

logger = logging.getLogger(__name__)

__all__ = [
    "OFFSET_SIZE",
    "read_trailer_offset",
    "payload_length",
    "size_without_trailer",
]

OFFSET_SIZE = 4
_OFFSET = struct.Struct("<I")


class RangeReadable(Protocol):
    def size(self) -> int: ...

    def read_range(self, start: int, end: int) -> bytes: ...


def read_trailer_offset(data: bytes) -> int:
    """Decode the trailer offset stored in the object's last 4 bytes."""
    if len(data) != OFFSET_SIZE:
        raise TrailerError(
            f"expected {OFFSET_SIZE} trailer offset bytes, got {len(data)}"
        )
    return _OFFSET.unpack(data)[0]


def payload_length(total_size: int, offset: int) -> int:
    """Return the length of the payload region.

    Parameters:
        total_size: Size of the whole object in bytes
        offset: Trailer offset read from the last 4 bytes

    Raises:
        ObjectTooSmallError: If ``total_size`` is below 4
        TrailerError: If the offset points before the start of the object
    """
    if total_size < OFFSET_SIZE:
        raise ObjectTooSmallError(total_size)
    length = total_size - offset - OFFSET_SIZE
    if length < 0:
        raise TrailerError(
            f"trailer offset {offset} exceeds object size {total_size} "
            f"by {-length} bytes"
        )
    return length


def size_without_trailer(obj: RangeReadable) -> int:
    """Probe ``obj`` and return the size of its payload region."""
    total_size = obj.size()
    if total_size < OFFSET_SIZE:
        raise ObjectTooSmallError(total_size)
    offset = read_trailer_offset(obj.read_range(total_size - OFFSET_SIZE, total_size))
    length = payload_length(total_size, offset)
    logger.debug(
        "Object %r: %d bytes, trailer offset %d, payload %d bytes",
        obj,
        total_size,
        offset,
        length,
    )
    return length
