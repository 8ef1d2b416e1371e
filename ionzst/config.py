"""Immutable configuration values for a single conversion.

The command line builds one ``ConvertConfig`` at startup and passes it down;
nothing in the package reads global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import ConfigurationError

__all__ = [
    "OBJECT_SUFFIXES",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_HANDOFF_DEPTH",
    "ObjectLocation",
    "S3Credentials",
    "ConvertConfig",
]

# Text and binary spellings of the Ion extension
OBJECT_SUFFIXES = (".ion.zst", ".10n.zst")

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_HANDOFF_DEPTH = 4

S3_SCHEME = "s3://"


@dataclass(frozen=True)
class ObjectLocation:
    """Bucket and key of a remote ``.ion.zst`` object.

    Attributes:
        bucket: S3 bucket name
        key: Object key inside the bucket
    """

    bucket: str
    key: str

    @classmethod
    def parse(cls, spec: str) -> "ObjectLocation":
        """Split ``bucket/path-to-object`` (optionally ``s3://`` prefixed).

        Parameters:
            spec: The object locator given on the command line

        Returns:
            The parsed location

        Raises:
            ConfigurationError: If the bucket or key is missing, or the key
                does not end in one of ``OBJECT_SUFFIXES``
        """
        path = spec[len(S3_SCHEME) :] if spec.startswith(S3_SCHEME) else spec
        bucket, sep, key = path.partition("/")
        if not sep or not key:
            raise ConfigurationError(f"invalid s3 path spec {path!r}", "file")
        if not bucket:
            raise ConfigurationError("no valid bucket specified", "file")
        if not key.endswith(OBJECT_SUFFIXES):
            raise ConfigurationError("no valid '.ion.zst' object specified", "file")
        return cls(bucket=bucket, key=key)

    @property
    def path(self) -> str:
        """The ``bucket/key`` path understood by fsspec filesystems."""
        return f"{self.bucket}/{self.key}"

    def __str__(self) -> str:
        return f"{S3_SCHEME}{self.path}"


@dataclass(frozen=True)
class S3Credentials:
    """Explicit S3 credentials, used instead of the shared credentials file.

    Attributes:
        access_key: AWS access key ID
        secret_key: AWS secret access key
        session_token: Temporary session token (optional)
        expiration_time: When credentials expire (optional, no expiration if None)
    """

    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    expiration_time: Optional[datetime] = None

    def is_expired(self) -> bool:
        if self.expiration_time is None:
            return False
        exp_time = self.expiration_time
        if exp_time.tzinfo is None:
            # Assume naive datetime is UTC
            exp_time = exp_time.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= exp_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert credentials to ``s3fs.S3FileSystem`` kwargs."""
        result = {"key": self.access_key, "secret": self.secret_key}
        if self.session_token:
            result["token"] = self.session_token
        return result


@dataclass(frozen=True)
class ConvertConfig:
    """Everything needed to convert one remote object.

    Attributes:
        location: The object to convert
        endpoint: S3-compatible endpoint hostname, e.g. ``s3.amazonaws.com``
        secure: Use HTTPS to talk to the endpoint
        profile: Profile in the shared AWS credentials file (default profile if None)
        credentials: Explicit credentials; overrides ``profile`` when given
        chunk_size: Read size used by every pipeline stage
        handoff_depth: Number of chunks each stage handoff may hold
        indent: Indentation for the rendered Ion text (single line per value if None)
    """

    location: ObjectLocation
    endpoint: str
    secure: bool = True
    profile: Optional[str] = None
    credentials: Optional[S3Credentials] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    handoff_depth: int = DEFAULT_HANDOFF_DEPTH
    indent: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.endpoint:
            raise ConfigurationError("no endpoint specified", "endpoint")
        if "://" in self.endpoint or "/" in self.endpoint:
            raise ConfigurationError(
                f"endpoint must be a hostname, got {self.endpoint!r}", "endpoint"
            )
        if self.chunk_size <= 0:
            raise ConfigurationError("chunk_size must be positive", "chunk_size")
        if self.handoff_depth <= 0:
            raise ConfigurationError("handoff_depth must be positive", "handoff_depth")

    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}"
