"""``lvl_`` chunk decoder.

A level payload starts with an 8-byte preamble (u32 name hash, u32 size of
what follows) and then holds an ordinary chunk sequence, like a nested
``ucfb`` archive.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any

from ..ucfb.chunks import ChunkTag
from ..ucfb.container import Chunk, extract_chunks_from_bytes
from ..ucfb.errors import CorruptedError, FormatError

PREAMBLE = struct.Struct("<II")


@dataclass
class Level:
    name_hash: int
    size: int
    chunks: list[Chunk] = field(default_factory=list)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> Level:
        if chunk.tag != ChunkTag.LEVEL:
            raise FormatError(f"Not a level chunk: {chunk.tag!r}")
        if len(chunk.data) < PREAMBLE.size:
            raise CorruptedError(f"level payload is {len(chunk.data)} bytes, preamble needs 8")
        name_hash, size = PREAMBLE.unpack_from(chunk.data)
        return cls(
            name_hash=name_hash,
            size=size,
            chunks=extract_chunks_from_bytes(chunk.data[PREAMBLE.size :]),
        )

    def summary(self) -> dict[str, Any]:
        return {
            "name_hash": f"0x{self.name_hash:08X}",
            "size": self.size,
            "chunks": [c.summary() for c in self.chunks],
        }
