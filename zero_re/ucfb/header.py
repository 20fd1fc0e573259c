"""Fixed 8-byte headers used by UCFB archives and their chunks.

Archive header: 4-byte magic ``ucfb`` + little-endian u32 total size.
Chunk header:   4-byte raw tag + little-endian u32 payload size.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import FormatError, TruncatedError

UCFB_MAGIC = b"ucfb"
HEADER_SIZE = 8
ALIGNMENT = 4

_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class ArchiveHeader:
    """Top-level (or nested) archive header."""

    total_size: int

    def to_bytes(self) -> bytes:
        return _HEADER.pack(UCFB_MAGIC, self.total_size)


@dataclass(frozen=True)
class ChunkHeader:
    """Header of a single chunk. ``tag`` is kept as raw bytes."""

    tag: bytes
    size: int

    def to_bytes(self) -> bytes:
        return _HEADER.pack(self.tag, self.size)


def parse_archive_header(data: bytes, offset: int = 0) -> ArchiveHeader:
    """Parse the archive header at ``offset``.

    Raises :class:`TruncatedError` if fewer than 8 bytes are available and
    :class:`FormatError` if the magic does not match.
    """
    if len(data) - offset < HEADER_SIZE:
        raise TruncatedError(
            f"archive header needs {HEADER_SIZE} bytes, got {max(0, len(data) - offset)}"
        )
    magic, total_size = _HEADER.unpack_from(data, offset)
    if magic != UCFB_MAGIC:
        raise FormatError(f"Not a UCFB file: magic={magic!r}")
    return ArchiveHeader(total_size=total_size)


def parse_chunk_header(data: bytes, offset: int = 0) -> ChunkHeader:
    """Parse a chunk header at ``offset``. Never validates the tag."""
    if len(data) - offset < HEADER_SIZE:
        raise TruncatedError(
            f"chunk header needs {HEADER_SIZE} bytes, got {max(0, len(data) - offset)}"
        )
    tag, size = _HEADER.unpack_from(data, offset)
    return ChunkHeader(tag=tag, size=size)


def padding_for(offset: int) -> int:
    """Number of padding bytes (0-3) that brings ``offset`` to a multiple of 4."""
    return -offset % ALIGNMENT
