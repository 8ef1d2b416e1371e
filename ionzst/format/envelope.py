"""Outer envelope of the ``.ion.zst`` container.

The payload region is a sequence of top-level Ion blobs. Each blob holds a
piece of one zstd stream, so the blobs' bytes are written out back to back.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from amazon.ion.core import IonEventType, IonType

from ..errors import EnvelopeError
from .events import DEFAULT_BUFFER_SIZE, IonDecodeError, iter_events

logger = logging.getLogger(__name__)

__all__ = ["extract"]


def extract(
    reader: BinaryIO, writer: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> int:
    """Write the bytes of every top-level blob in ``reader`` to ``writer``.

    Parameters:
        reader: Ion binary stream, starting with a version marker
        writer: Sink for the concatenated blob contents
        buffer_size: Read size used on ``reader``

    Returns:
        The number of blobs extracted

    Raises:
        EnvelopeError: If a top-level value is not a blob or the envelope
            is not valid Ion binary
    """
    blobs = 0
    try:
        for event in iter_events(reader, buffer_size):
            if event.event_type is IonEventType.VERSION_MARKER:
                continue
            if event.event_type is not IonEventType.SCALAR or (
                event.ion_type is not IonType.BLOB
            ):
                raise EnvelopeError(
                    f"unexpected {event.ion_type} value at envelope position {blobs}, "
                    "expected a blob"
                )
            data = event.value
            # null.blob carries no bytes
            if data:
                writer.write(data)
            blobs += 1
    except IonDecodeError as e:
        raise EnvelopeError(f"malformed envelope after {blobs} blobs: {e}") from e

    logger.debug("Extracted %d blobs", blobs)
    return blobs
