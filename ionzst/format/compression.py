"""zstd decompression of the concatenated envelope blobs."""

from __future__ import annotations

import logging
from typing import BinaryIO

import zstandard as zstd

from ..errors import CompressionError

logger = logging.getLogger(__name__)

__all__ = ["decompress", "DEFAULT_READ_SIZE"]

DEFAULT_READ_SIZE = zstd.DECOMPRESSION_RECOMMENDED_OUTPUT_SIZE


def decompress(
    reader: BinaryIO, writer: BinaryIO, read_size: int = DEFAULT_READ_SIZE
) -> int:
    """Decompress ``reader`` as one zstd stream and copy the result to ``writer``.

    The input may hold several frames back to back; their outputs are
    concatenated. Every frame must be complete: input that ends inside a
    frame is an error, not an end of stream.

    Returns:
        The number of decompressed bytes written

    Raises:
        CompressionError: If the input is not valid zstd data or is truncated
    """
    dctx = zstd.ZstdDecompressor()
    dobj = dctx.decompressobj()
    # Bytes fed to the current frame since it started
    pending = 0
    frames = 0
    total = 0
    try:
        while True:
            data = reader.read(read_size)
            if not data:
                break
            while data:
                pending += len(data)
                chunk = dobj.decompress(data)
                if chunk:
                    writer.write(chunk)
                    total += len(chunk)
                if not dobj.eof:
                    break
                # Frame complete; the rest of the input starts the next one
                frames += 1
                data = dobj.unused_data
                dobj = dctx.decompressobj()
                pending = 0
    except zstd.ZstdError as e:
        raise CompressionError(f"malformed zstd data after {total} bytes: {e}") from e

    if pending:
        raise CompressionError(
            f"truncated zstd data: input ended inside frame {frames + 1} "
            f"after {total} bytes"
        )

    logger.debug("Decompressed %d frames, %d bytes", frames, total)
    return total
