"""Filesystem factory for creating authenticated S3 filesystems.

This module provides a factory pattern for creating fsspec/s3fs filesystems
pointed at an S3-compatible endpoint. It abstracts away the details of
filesystem creation, allowing for dependency injection and testing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import fsspec
import s3fs

from ..config import ConvertConfig
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class FileSystemFactory(ABC):
    """Abstract base class for creating the filesystem an object is read from."""

    @abstractmethod
    def create_filesystem(self, config: ConvertConfig) -> fsspec.AbstractFileSystem:
        """Create a filesystem able to read ``config.location``.

        Parameters:
            config: The conversion configuration (endpoint, credentials).

        Returns:
            An fsspec filesystem instance.

        Raises:
            ConfigurationError: If the configured credentials are unusable.
        """
        ...


class DefaultFileSystemFactory(FileSystemFactory):
    """Default implementation using s3fs.

    Without explicit credentials s3fs (through botocore) reads the shared
    credentials file, ``~/.aws/credentials``, using ``config.profile``.
    """

    def create_filesystem(self, config: ConvertConfig) -> s3fs.S3FileSystem:
        """Create an ``s3fs.S3FileSystem`` for the configured endpoint.

        Parameters:
            config: The conversion configuration.

        Returns:
            An s3fs.S3FileSystem instance.

        Raises:
            ConfigurationError: If explicit credentials are expired.
        """
        s3_kwargs: Dict[str, Any] = {"endpoint_url": config.endpoint_url}

        if config.credentials is not None:
            if config.credentials.is_expired():
                raise ConfigurationError(
                    f"S3 credentials expired at {config.credentials.expiration_time}. "
                    "Please refresh your credentials.",
                    "credentials",
                )
            s3_kwargs.update(config.credentials.to_dict())
        elif config.profile:
            s3_kwargs["profile"] = config.profile

        logger.debug(
            "Creating S3 filesystem for %s (profile=%s, explicit credentials=%s)",
            config.endpoint_url,
            config.profile,
            config.credentials is not None,
        )
        return s3fs.S3FileSystem(**s3_kwargs)


class MockFileSystemFactory(FileSystemFactory):
    """Mock implementation of FileSystemFactory for testing.

    Any fsspec filesystem can be injected, typically ``fsspec.filesystem("memory")``.
    """

    def __init__(self, filesystem: Optional[fsspec.AbstractFileSystem] = None) -> None:
        self._filesystem = filesystem

    def create_filesystem(self, config: ConvertConfig) -> fsspec.AbstractFileSystem:
        """Return the injected filesystem or raise if not configured.

        Raises:
            RuntimeError: If no filesystem was configured.
        """
        if self._filesystem is None:
            raise RuntimeError("Mock filesystem not configured")
        return self._filesystem
