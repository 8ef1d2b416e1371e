"""Codecs for the ``.ion.zst`` container.

Internal Modules:
    trailer: Trailer offset and payload length
    bvm: Synthetic Ion binary version marker
    events: Ion binary event iteration
    envelope: Blob extraction from the outer envelope
    compression: zstd decompression
    text: Ion text rendering
"""

from ionzst.format.bvm import BVM, BVMReader, BVMState
from ionzst.format.compression import decompress
from ionzst.format.envelope import extract
from ionzst.format.text import TextEncoder, render
from ionzst.format.trailer import (
    payload_length,
    read_trailer_offset,
    size_without_trailer,
)

__all__ = [
    "BVM",
    "BVMReader",
    "BVMState",
    "TextEncoder",
    "decompress",
    "extract",
    "payload_length",
    "read_trailer_offset",
    "render",
    "size_without_trailer",
]
