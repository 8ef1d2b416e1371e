"""Pytest configuration and shared fixtures for unit tests."""

import uuid

import fsspec
import pytest
from ionzst.config import ConvertConfig, ObjectLocation
from ionzst.store import MockFileSystemFactory

from tests.unit.fixtures import build_ion_zst


@pytest.fixture
def memory_fs():
    """An fsspec in-memory filesystem, emptied after the test."""
    fs = fsspec.filesystem("memory")
    yield fs
    fs.store.clear()


@pytest.fixture
def bucket():
    """A bucket name unique to the test."""
    return f"bucket-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def factory(memory_fs):
    """Filesystem factory serving the in-memory filesystem."""
    return MockFileSystemFactory(memory_fs)


@pytest.fixture
def put_object(memory_fs, bucket):
    """Store bytes as an object and return a config pointing at it."""

    def put(data, key="db/table/packed-0.ion.zst", **config_kwargs):
        location = ObjectLocation(bucket=bucket, key=key)
        memory_fs.pipe_file(location.path, data)
        return ConvertConfig(
            location=location, endpoint="s3.example.com", **config_kwargs
        )

    return put


@pytest.fixture
def two_record_object():
    """Object whose values are ``{a: 1}`` and ``{b: 2}``."""
    return build_ion_zst([{"a": 1}, {"b": 2}])
