"""Remote object access on top of an fsspec filesystem."""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Optional

import fsspec

from ..config import ConvertConfig, ObjectLocation
from ..errors import TransportError
from .filesystems import DefaultFileSystemFactory, FileSystemFactory

logger = logging.getLogger(__name__)

__all__ = ["RemoteObject", "BoundedReader", "open_remote_object"]


class BoundedReader(io.RawIOBase):
    """Read at most ``limit`` bytes from ``raw``, then report end of stream.

    Read failures from ``raw`` are surfaced as ``TransportError``.
    """

    def __init__(self, raw: BinaryIO, limit: int, location: Optional[str] = None):
        super().__init__()
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        self._raw = raw
        self._remaining = limit
        self._location = location

    @property
    def remaining(self) -> int:
        return self._remaining

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # type: ignore[override]
        n = min(len(b), self._remaining)
        if n == 0:
            return 0
        try:
            data = self._raw.read(n)
        except Exception as e:
            raise TransportError(
                f"failed reading {self._location}: {e}", self._location, e
            ) from e
        if not data:
            raise TransportError(
                f"unexpected end of {self._location} with {self._remaining} bytes left",
                self._location,
            )
        b[: len(data)] = data
        self._remaining -= len(data)
        return len(data)

    def close(self) -> None:
        try:
            self._raw.close()
        finally:
            super().close()


class RemoteObject:
    """A byte-range readable object stored in a bucket.

    Parameters:
        fs: The filesystem the object lives in
        location: Bucket and key of the object
        block_size: Read size used when streaming the object
    """

    def __init__(
        self,
        fs: fsspec.AbstractFileSystem,
        location: ObjectLocation,
        block_size: Optional[int] = None,
    ) -> None:
        self.fs = fs
        self.location = location
        self.block_size = block_size

    def _error(self, action: str, e: Exception) -> TransportError:
        return TransportError(
            f"failed to {action} {self.location}: {e}", str(self.location), e
        )

    def size(self) -> int:
        """Return the total size of the object in bytes."""
        try:
            info = self.fs.info(self.location.path)
        except Exception as e:
            raise self._error("stat", e) from e
        size = int(info["size"])
        logger.debug("%s is %d bytes", self.location, size)
        return size

    def read_range(self, start: int, end: int) -> bytes:
        """Return the bytes in ``[start, end)``."""
        try:
            return self.fs.cat_file(self.location.path, start=start, end=end)
        except Exception as e:
            raise self._error("read", e) from e

    def open(self, limit: int) -> BoundedReader:
        """Open the object for a sequential read of its first ``limit`` bytes."""
        open_kw = {}
        if self.block_size:
            open_kw["block_size"] = self.block_size
        try:
            f = self.fs.open(self.location.path, "rb", **open_kw)
        except Exception as e:
            raise self._error("open", e) from e
        return BoundedReader(f, limit, str(self.location))

    def __repr__(self) -> str:
        return f"RemoteObject({self.location})"


def open_remote_object(
    config: ConvertConfig, factory: Optional[FileSystemFactory] = None
) -> RemoteObject:
    """Create the filesystem for ``config`` and return a handle to its object."""
    factory = factory or DefaultFileSystemFactory()
    fs = factory.create_filesystem(config)
    return RemoteObject(fs, config.location, block_size=config.chunk_size)
