"""``tex_`` chunk decoder.

Texture chunk layout (positional, sub-chunk tags are not checked)::

    tex_
      0  NAME            texture name
      1  INFO            u32 format count
      2+ FMT_            one per format
           0  INFO       format header (see TextureHeader)
           1  FACE
                LVL_     one per mip level
                  0  INFO   level metadata (unused)
                  1  BODY   pixel data

A format whose header is malformed, whose D3D format code is unknown, or
whose dimensions cannot be expressed as a DDS header is skipped with a
warning. The rest of the texture still decodes. Pixel data that is too short
for its header is kept; decode_to_raster rejects it later.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any

from ..ucfb.chunks import ChunkTag
from ..ucfb.container import Chunk, extract_chunks_from_bytes
from ..ucfb.errors import CorruptedError, FormatError, LookupFailure, UCFBError
from .dds import D3D_FORMATS, DDSHeader, DDSImage

log = logging.getLogger(__name__)

NAME_INDEX = 0
INFO_INDEX = 1
FIRST_FORMAT_INDEX = 2

FORMAT_INFO_INDEX = 0
FORMAT_FACE_INDEX = 1
LEVEL_INFO_INDEX = 0
LEVEL_BODY_INDEX = 1


@dataclass(frozen=True)
class TextureHeader:
    """Fixed 16-byte format header stored in ``FMT_.INFO``."""

    format: int
    width: int
    height: int
    depth: int
    mipmap_count: int
    detail_bias: int

    LAYOUT = struct.Struct("<IHHHHI")

    @classmethod
    def from_bytes(cls, data: bytes) -> TextureHeader:
        if len(data) != cls.LAYOUT.size:
            raise CorruptedError(
                f"texture format header is {len(data)} bytes, expected {cls.LAYOUT.size}"
            )
        return cls(*cls.LAYOUT.unpack(data))


@dataclass(frozen=True)
class TextureEntry:
    """One texture format: reconstructed DDS header plus raw pixel data."""

    header: DDSHeader
    data: bytes
    format_code: int

    def to_image_container(self) -> DDSImage:
        return DDSImage(header=self.header, data=self.data)

    def summary(self) -> dict[str, Any]:
        return {
            "format": self.header.pixel_format.name,
            "format_code": self.format_code,
            "width": self.header.width,
            "height": self.header.height,
            "depth": self.header.depth,
            "mipmaps": self.header.mipmap_count,
            "data_size": len(self.data),
        }


def _subchunk(chunks: list[Chunk], index: int, what: str) -> Chunk:
    if index >= len(chunks):
        raise CorruptedError(f"missing {what} sub-chunk (index {index})")
    return chunks[index]


def read_format(chunk: Chunk) -> TextureEntry:
    """Decode one ``FMT_`` sub-chunk."""
    subchunks = extract_chunks_from_bytes(chunk.data)
    info = TextureHeader.from_bytes(_subchunk(subchunks, FORMAT_INFO_INDEX, "FMT_.INFO").data)

    pixel_format = D3D_FORMATS.get(info.format)
    if pixel_format is None:
        raise LookupFailure(f"unknown D3D format code 0x{info.format:08X}")

    face = _subchunk(subchunks, FORMAT_FACE_INDEX, "FMT_.FACE")
    levels = extract_chunks_from_bytes(face.data)
    if not levels:
        raise CorruptedError("FACE holds no levels")

    body = bytearray()
    for level in levels:
        level_chunks = extract_chunks_from_bytes(level.data)
        body += _subchunk(level_chunks, LEVEL_BODY_INDEX, "LVL_.BODY").data

    header = DDSHeader.new(
        info.height, info.width, info.depth, pixel_format, info.mipmap_count
    )
    return TextureEntry(header=header, data=bytes(body), format_code=info.format)


@dataclass
class TextureContainer:
    """A decoded ``tex_`` chunk."""

    name: str
    entries: list[TextureEntry] = field(default_factory=list)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> TextureContainer:
        if chunk.tag != ChunkTag.TEXTURE:
            raise FormatError(f"Not a texture chunk: {chunk.tag!r}")

        subchunks = extract_chunks_from_bytes(chunk.data)
        try:
            name = _subchunk(subchunks, NAME_INDEX, "NAME").data.decode("utf-8").replace("\0", "")
        except UnicodeDecodeError as e:
            raise CorruptedError(f"texture name is not valid UTF-8: {e}") from e

        info = _subchunk(subchunks, INFO_INDEX, "INFO").data
        if len(info) < 4:
            raise CorruptedError(f"texture '{name}' INFO is {len(info)} bytes, expected 4")
        format_count = struct.unpack_from("<I", info)[0]

        entries: list[TextureEntry] = []
        for i in range(format_count):
            fmt_chunk = _subchunk(subchunks, FIRST_FORMAT_INDEX + i, f"FMT_ #{i}")
            try:
                entries.append(read_format(fmt_chunk))
            except UCFBError as e:
                log.warning("Texture '%s': skipping format #%d: %s", name, i, e)

        log.debug("Texture '%s': %d/%d formats decoded", name, len(entries), format_count)
        return cls(name=name, entries=entries)

    def image_containers(self) -> list[DDSImage]:
        return [e.to_image_container() for e in self.entries]

    def summary(self) -> dict[str, Any]:
        return {"name": self.name, "formats": [e.summary() for e in self.entries]}
