"""Ion text rendering of the decompressed value stream."""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from amazon.ion.core import ION_STREAM_END_EVENT, IonEvent, IonEventType
from amazon.ion.writer import blocking_writer
from amazon.ion.writer_text import raw_writer

from ..errors import RenderError
from .events import DEFAULT_BUFFER_SIZE, IonDecodeError, iter_events

logger = logging.getLogger(__name__)

__all__ = ["TextEncoder", "render"]

VALUE_SEPARATOR = b"\n"


class TextEncoder:
    """Write Ion events to ``sink`` as Ion text, one top-level value per line.

    Call ``finish`` once the last event has been encoded.
    """

    def __init__(self, sink: BinaryIO, indent: Optional[str] = None) -> None:
        self._sink = sink
        self._indent = indent
        self._writer = None
        self._depth = 0
        self.values = 0

    def encode(self, event: IonEvent) -> None:
        """Encode one event of the current top-level value."""
        if self._writer is None:
            self._writer = blocking_writer(raw_writer(indent=self._indent), self._sink)
        self._writer.send(event)

        if event.event_type is IonEventType.CONTAINER_START:
            self._depth += 1
        elif event.event_type is IonEventType.CONTAINER_END:
            self._depth -= 1

        if self._depth == 0:
            self._writer.send(ION_STREAM_END_EVENT)
            self._writer = None
            self._sink.write(VALUE_SEPARATOR)
            self.values += 1

    def finish(self) -> None:
        """Flush the sink; fails if a value was left open."""
        if self._writer is not None:
            raise RenderError(f"value {self.values} ended inside a container")
        self._sink.flush()


def render(
    reader: BinaryIO,
    writer: BinaryIO,
    indent: Optional[str] = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Decode Ion binary values from ``reader`` and write them as Ion text.

    Parameters:
        reader: Ion binary stream
        writer: Binary sink receiving UTF-8 Ion text
        indent: Pretty-print indentation, single line per value if None
        buffer_size: Read size used on ``reader``

    Returns:
        The number of top-level values rendered

    Raises:
        RenderError: If ``reader`` is not valid Ion binary
    """
    encoder = TextEncoder(writer, indent=indent)
    try:
        for event in iter_events(reader, buffer_size):
            # Version markers only reset the symbol context
            if event.event_type is IonEventType.VERSION_MARKER:
                continue
            encoder.encode(event)
    except IonDecodeError as e:
        raise RenderError(f"malformed Ion data after {encoder.values} values: {e}") from e
    encoder.finish()

    logger.debug("Rendered %d values", encoder.values)
    return encoder.values
