"""Exception hierarchy for ionzst.

Every failure is fatal: nothing in the package retries. The command line
entry point is the only place that turns these into an exit status.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
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


class IonZstError(Exception):
    """Base class for all ionzst errors."""


class ConfigurationError(IonZstError, ValueError):
    """Raised when the object locator or endpoint is invalid."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter


class TransportError(IonZstError):
    """Raised when reading from the remote object fails."""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.location = location
        self.cause = cause


class FormatError(IonZstError):
    """Raised when the object content does not match the container format."""


class TrailerError(FormatError):
    """Raised when the trailer offset does not fit inside the object."""


class ObjectTooSmallError(TrailerError):
    """Raised when the object cannot even hold the 4-byte trailer offset."""

    def __init__(self, size: int):
        super().__init__(f"object is {size} bytes, at least 4 are required")
        self.size = size


class EnvelopeError(FormatError):
    """Raised when a top-level envelope value is not a blob."""


class CompressionError(FormatError):
    """Raised when the concatenated blobs are not a valid zstd stream."""


class RenderError(FormatError):
    """Raised when the decompressed bytes are not valid Ion binary."""


class SinkError(IonZstError):
    """Raised when a downstream consumer no longer accepts data."""


class PipelineCancelled(IonZstError):
    """Raised in a pipeline stage after a sibling stage failed."""
