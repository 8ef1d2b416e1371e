"""Public entry points of ionzst."""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from .config import ConvertConfig
from .format.bvm import BVMReader
from .format.trailer import size_without_trailer
from .pipeline import Pipeline, PipelineResult
from .store.filesystems import FileSystemFactory
from .store.remote import open_remote_object

logger = logging.getLogger(__name__)

__all__ = ["convert"]


def convert(
    config: ConvertConfig,
    sink: BinaryIO,
    factory: Optional[FileSystemFactory] = None,
) -> PipelineResult:
    """Render the object described by ``config`` as Ion text into ``sink``.

    The object is probed once for its size and trailer offset, then read
    sequentially up to the start of the trailer.

    Parameters:
        config: What to read and how
        sink: Binary sink for the Ion text, e.g. ``sys.stdout.buffer``
        factory: Filesystem factory, s3fs based if None

    Returns:
        Counts gathered by the pipeline

    Raises:
        IonZstError: On any configuration, transport or format failure

    Example:
        >>> config = ConvertConfig(
        ...     location=ObjectLocation.parse("bucket/db/table/packed-1.ion.zst"),
        ...     endpoint="s3.us-east-1.amazonaws.com",
        ... )
        >>> convert(config, sys.stdout.buffer)
    """
    remote = open_remote_object(config, factory)
    length = size_without_trailer(remote)
    logger.info("Converting %s (%d payload bytes)", config.location, length)

    with BVMReader(remote.open(length)) as source:
        result = Pipeline(
            source,
            sink,
            chunk_size=config.chunk_size,
            handoff_depth=config.handoff_depth,
            indent=config.indent,
        ).run()

    logger.info(
        "Converted %s: %d blobs, %d compressed bytes, %d values",
        config.location,
        result.blobs,
        result.compressed_bytes,
        result.values,
    )
    return result
