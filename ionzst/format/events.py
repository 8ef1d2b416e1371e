"""Event-level access to Ion binary streams.

Values are never materialised: stages work on the reader's event stream so
that a value is forwarded as soon as it has been read.
"""

from __future__ import annotations

from typing import BinaryIO, Iterator

from amazon.ion.core import IonEvent, IonEventType
from amazon.ion.exceptions import IonException
from amazon.ion.reader import NEXT_EVENT, read_data_event
from amazon.ion.reader_binary import binary_reader
from amazon.ion.reader_managed import managed_reader

from ..errors import FormatError

__all__ = ["iter_events", "IonDecodeError", "DEFAULT_BUFFER_SIZE"]

DEFAULT_BUFFER_SIZE = 64 * 1024

# Raised by the reader coroutines on invalid data; ValueError covers bad
# text encodings and out-of-range timestamps
_READER_ERRORS = (IonException, ValueError)


class IonDecodeError(FormatError):
    """The stream is not valid Ion binary, or ends inside a value."""


def _send(reader, event) -> IonEvent:
    try:
        return reader.send(event)
    except _READER_ERRORS as e:
        raise IonDecodeError(str(e)) from e


def iter_events(
    stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> Iterator[IonEvent]:
    """Yield the user-level events of the Ion binary ``stream``.

    Containers are stepped into, so every container yields its children
    followed by a ``CONTAINER_END`` event. Local symbol tables are resolved
    and not yielded. The iterator ends at end of stream.

    Only decoding failures become ``IonDecodeError``; errors raised by
    ``stream.read`` propagate unchanged.

    Raises:
        IonDecodeError: If the data is invalid or ends inside a value
    """
    reader = managed_reader(binary_reader(), None)
    event = _send(reader, NEXT_EVENT)
    while True:
        if not event.event_type.is_stream_signal:
            yield event
            event = _send(reader, NEXT_EVENT)
            continue

        data = stream.read(buffer_size)
        if not data:
            # Binary values carry their lengths, so a partial one never completes
            if event.event_type is IonEventType.INCOMPLETE:
                raise IonDecodeError("unexpected end of input inside a value")
            return
        event = _send(reader, read_data_event(data))
