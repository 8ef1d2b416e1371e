"""ionzst: stream a remote ``.ion.zst`` object and dump it as Ion text.

An ``.ion.zst`` object is an Ion binary envelope of blobs holding one zstd
stream of Ion binary data, followed by a trailer and a 4-byte little-endian
trailer offset.

Quick Start:
    ```python
    import sys
    import ionzst

    config = ionzst.ConvertConfig(
        location=ionzst.ObjectLocation.parse("bucket/db/table/packed.ion.zst"),
        endpoint="s3.us-east-1.amazonaws.com",
    )
    ionzst.convert(config, sys.stdout.buffer)
    ```

Or from the shell:

    ionzst -f bucket/db/table/packed.ion.zst -e s3.us-east-1.amazonaws.com
"""

import logging
from importlib.metadata import version

from .api import convert
from .config import ConvertConfig, ObjectLocation, S3Credentials
from .errors import (
    CompressionError,
    ConfigurationError,
    EnvelopeError,
    FormatError,
    IonZstError,
    ObjectTooSmallError,
    PipelineCancelled,
    RenderError,
    SinkError,
    TrailerError,
    TransportError,
)
from .pipeline import Pipeline, PipelineResult, StageState
from .store import RemoteObject, open_remote_object

logger = logging.getLogger(__name__)

__all__ = [
    # api.py
    "convert",
    # config.py
    "ConvertConfig",
    "ObjectLocation",
    "S3Credentials",
    # pipeline.py
    "Pipeline",
    "PipelineResult",
    "StageState",
    # store
    "RemoteObject",
    "open_remote_object",
    # errors.py
    "IonZstError",
    "ConfigurationError",
    "TransportError",
    "FormatError",
    "TrailerError",
    "ObjectTooSmallError",
    "EnvelopeError",
    "CompressionError",
    "RenderError",
    "SinkError",
    "PipelineCancelled",
]

__version__ = version("ionzst")
