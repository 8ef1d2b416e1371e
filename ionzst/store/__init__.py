"""Remote storage access for ionzst.

Internal Modules:
    filesystems: FileSystem factory for S3 access
    remote: RemoteObject handle and the length-bounded reader
"""

from ionzst.store.filesystems import (
    DefaultFileSystemFactory,
    FileSystemFactory,
    MockFileSystemFactory,
)
from ionzst.store.remote import BoundedReader, RemoteObject, open_remote_object

__all__ = [
    "FileSystemFactory",
    "DefaultFileSystemFactory",
    "MockFileSystemFactory",
    "RemoteObject",
    "BoundedReader",
    "open_remote_object",
]
