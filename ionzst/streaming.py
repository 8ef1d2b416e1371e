"""Bounded, cancellable byte handoffs between pipeline stages.

Key components:
- CancelToken: Shared signal tripped by the first failing stage
- Pipe: Bounded queue of byte chunks with a reader and a writer end
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Tuple, Union

from .config import DEFAULT_HANDOFF_DEPTH
from .errors import PipelineCancelled, SinkError

logger = logging.getLogger(__name__)

__all__ = ["CancelToken", "Pipe", "PipeReader", "PipeWriter"]

# How long a blocked read or write waits before re-checking the token
POLL_INTERVAL = 0.05


class CancelToken:
    """Cancellation signal shared by every stage of one pipeline run.

    The first call to ``cancel`` records its reason; later calls are ignored.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[BaseException] = None

    def cancel(self, reason: Optional[BaseException] = None) -> bool:
        """Trip the token. Returns True if this call was the first one."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        logger.debug("Cancelled: %r", reason)
        return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[BaseException]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PipelineCancelled(f"cancelled after: {self._reason!r}")


class Pipe:
    """A bounded handoff stream.

    Writes block while ``maxsize`` chunks are queued; reads block until a
    chunk arrives or the writer closes. Both give up with
    ``PipelineCancelled`` once the token is tripped.

    Attributes:
        reader: The read end, a file-like object with ``read``
        writer: The write end, a file-like object with ``write``
    """

    _SENTINEL = object()

    def __init__(
        self,
        maxsize: int = DEFAULT_HANDOFF_DEPTH,
        token: Optional[CancelToken] = None,
        name: str = "pipe",
    ) -> None:
        self.name = name
        self.token = token or CancelToken()
        self._queue: queue.Queue[Union[bytes, object, Tuple[BaseException]]] = (
            queue.Queue(maxsize=maxsize)
        )
        self.reader = PipeReader(self)
        self.writer = PipeWriter(self)

    def __repr__(self) -> str:
        return f"Pipe({self.name!r})"


class PipeWriter:
    """Write end of a ``Pipe``."""

    def __init__(self, pipe: Pipe) -> None:
        self._pipe = pipe
        self.closed = False
        self.bytes_written = 0

    def writable(self) -> bool:
        return True

    def _put(self, item: object) -> None:
        pipe = self._pipe
        while True:
            pipe.token.raise_if_cancelled()
            if pipe.reader.closed:
                raise SinkError(f"{pipe.name}: read end closed")
            try:
                pipe._queue.put(item, timeout=POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def write(self, data: bytes) -> int:
        if self.closed:
            raise SinkError(f"{self._pipe.name}: write to closed pipe")
        if not data:
            return 0
        chunk = bytes(data)
        self._put(chunk)
        self.bytes_written += len(chunk)
        return len(chunk)

    def flush(self) -> None:
        pass

    def close(self, error: Optional[BaseException] = None) -> None:
        """Close the write end.

        The reader sees end of stream, or ``error`` raised from its next read
        when one is given. Closing never blocks once the pipeline is cancelled
        or the reader is gone.
        """
        if self.closed:
            return
        self.closed = True
        item = self._pipe._SENTINEL if error is None else (error,)
        try:
            self._put(item)
        except (PipelineCancelled, SinkError):
            logger.debug("%s: close not delivered, reader is gone", self._pipe.name)


class PipeReader:
    """Read end of a ``Pipe``."""

    def __init__(self, pipe: Pipe) -> None:
        self._pipe = pipe
        self._buffer = b""
        self._eof = False
        self.closed = False

    def readable(self) -> bool:
        return True

    def _next_chunk(self) -> bool:
        """Fill the buffer with the next chunk; False at end of stream."""
        pipe = self._pipe
        while True:
            pipe.token.raise_if_cancelled()
            try:
                item = pipe._queue.get(timeout=POLL_INTERVAL)
                break
            except queue.Empty:
                continue

        if item is pipe._SENTINEL:
            self._eof = True
            return False
        if isinstance(item, tuple):
            self._eof = True
            raise item[0]
        self._buffer = item  # type: ignore[assignment]
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        if self.closed:
            raise ValueError(f"{self._pipe.name}: read from closed pipe")
        if size is None or size < 0:
            chunks = [self._buffer]
            self._buffer = b""
            while not self._eof and self._next_chunk():
                chunks.append(self._buffer)
                self._buffer = b""
            return b"".join(chunks)
        if size == 0:
            return b""
        if not self._buffer and (self._eof or not self._next_chunk()):
            return b""
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def close(self) -> None:
        """Close the read end and drop anything still queued."""
        self.closed = True
        self._buffer = b""
        try:
            while True:
                self._pipe._queue.get_nowait()
        except queue.Empty:
            pass
