"""Cutscene (mvs) chunk decoder: embedded Bink clips.

The movie chunk has no offset table. Bink files sit at 0x800-aligned
offsets from the start of the .mvs file, which is 0x7F0 bytes into the
chunk payload (0x2F0 of padding followed by a 0x500 byte header block we
do not parse). Clips are found by scanning 4-byte aligned offsets for the
``BIK`` signature.

Bink header::

    0  "BIK"  signature
    3  u8     revision
    4  u32    file size, not counting the first 8 bytes

Each clip is sliced as exactly its Bink file size (size field + 8). Older
dump tools sliced 7 bytes further and skipped one more byte before
rescanning; those bytes belong to the alignment gap, not the clip, so that
arithmetic is not reproduced here.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any

from ..ucfb.chunks import ChunkTag
from ..ucfb.container import Chunk
from ..ucfb.errors import CorruptedClipError, FormatError
from ..ucfb.header import padding_for

log = logging.getLogger(__name__)

LEADING_REGION = 0x7F0
CLIP_SIGNATURE = b"BIK"
SIZE_FIELD_OFFSET = 4
# Bytes of the clip not counted by its size field
CLIP_OVERHEAD = 8
SCAN_STEP = 4

CLIP_EXTENSION = ".bik"


def scan_clips(data: bytes) -> list[bytes]:
    """Slice every signature-marked clip out of ``data``.

    ``data`` starts at the first candidate offset (the leading region is
    already removed). The scan never revisits bytes of a clip it sliced.
    """
    clips: list[bytes] = []
    view = memoryview(data)
    offset = 0
    while offset < len(data):
        if data[offset : offset + len(CLIP_SIGNATURE)] != CLIP_SIGNATURE:
            offset += SCAN_STEP
            continue

        field_pos = offset + SIZE_FIELD_OFFSET
        if field_pos + 4 > len(data):
            raise CorruptedClipError(f"clip at offset 0x{offset:X} has a truncated size field")
        declared = struct.unpack_from("<I", data, field_pos)[0]
        end = offset + declared + CLIP_OVERHEAD
        if end > len(data):
            raise CorruptedClipError(
                f"clip at offset 0x{offset:X} declares {declared + CLIP_OVERHEAD} bytes, "
                f"only {len(data) - offset} available"
            )

        clips.append(bytes(view[offset:end]))
        log.debug("Clip #%d at 0x%X: %d bytes", len(clips) - 1, offset, end - offset)
        offset = end + padding_for(end)

    return clips


@dataclass
class Movie:
    """A decoded cutscene chunk: each segment is a complete Bink file."""

    segments: list[bytes] = field(default_factory=list)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> Movie:
        if chunk.tag != ChunkTag.MOVIE:
            raise FormatError(f"Not a movie chunk: {chunk.tag!r}")
        return cls(segments=scan_clips(chunk.data[LEADING_REGION:]))

    def summary(self) -> dict[str, Any]:
        return {"clips": [len(s) for s in self.segments]}
