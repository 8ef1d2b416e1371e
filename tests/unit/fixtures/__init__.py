"""Builders for synthetic ``.ion.zst`` objects.

The container is assembled by hand so tests control every byte:

- Ion binary chunks are written with ``amazon.ion.simpleion``
- chunks are compressed as independent zstd frames and concatenated
- the compressed stream is cut into blobs of the outer envelope
- a trailer and its 4-byte little-endian length are appended

Usage:
    from tests.unit.fixtures import build_ion_zst

    def test_two_records():
        data = build_ion_zst([{"a": 1}, {"b": 2}])
"""

import struct
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence

import zstandard as zstd
from amazon.ion import simpleion

BVM = b"\xe0\x01\x00\xea"
DEFAULT_TRAILER = b"\xd0sneller-trailer"


def varuint(n: int) -> bytes:
    """Encode ``n`` as an Ion binary VarUInt."""
    groups = [(n & 0x7F) | 0x80]
    n >>= 7
    while n:
        groups.append(n & 0x7F)
        n >>= 7
    return bytes(reversed(groups))


def ion_blob(data: bytes) -> bytes:
    """Encode ``data`` as a top-level Ion binary blob."""
    if len(data) < 14:
        return bytes([0xA0 | len(data)]) + data
    return b"\xae" + varuint(len(data)) + data


def ion_binary(values: Sequence[Any]) -> bytes:
    """Encode ``values`` as one Ion binary stream, starting with a BVM."""
    return simpleion.dumps(list(values), binary=True, sequence_as_stream=True)


def zstd_frames(chunks: Iterable[bytes]) -> bytes:
    """Compress every chunk as its own zstd frame and concatenate the frames."""
    cctx = zstd.ZstdCompressor()
    return b"".join(cctx.compress(chunk) for chunk in chunks)


def envelope(compressed: bytes, blob_size: Optional[int] = None) -> bytes:
    """Split ``compressed`` into blobs; the result has no leading BVM."""
    if blob_size is None:
        return ion_blob(compressed)
    return b"".join(
        ion_blob(compressed[i : i + blob_size])
        for i in range(0, len(compressed), blob_size)
    )


def with_trailer(payload: bytes, trailer: bytes = DEFAULT_TRAILER) -> bytes:
    """Append ``trailer`` and its little-endian length to ``payload``."""
    return payload + trailer + struct.pack("<I", len(trailer))


def build_ion_zst(
    values: Sequence[Any],
    *,
    values_per_chunk: Optional[int] = None,
    blob_size: Optional[int] = None,
    trailer: bytes = DEFAULT_TRAILER,
) -> bytes:
    """Build a complete object holding ``values``.

    Parameters:
        values: Values to store, in order
        values_per_chunk: Values per Ion chunk / zstd frame (all in one if None)
        blob_size: Compressed bytes per envelope blob (one blob if None)
        trailer: Trailer bytes placed after the payload
    """
    step = values_per_chunk or max(len(values), 1)
    chunks = [ion_binary(values[i : i + step]) for i in range(0, len(values), step)]
    return with_trailer(envelope(zstd_frames(chunks), blob_size), trailer)


def to_python(value: Any) -> Any:
    """Strip Ion wrapper types so values compare against plain Python data."""
    if isinstance(value, Mapping):
        return {str(k): to_python(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_python(v) for v in value]
    return value


def parse_text(data: bytes) -> List[Any]:
    """Parse rendered Ion text back into plain Python values."""
    return [to_python(v) for v in simpleion.loads(data, single_value=False)]
