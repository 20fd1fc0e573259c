"""UCFB container parser.

Splits an archive (or any chunk payload holding a chunk sequence) into a
flat, ordered list of raw chunks, and re-serializes chunk lists back into
bytes. :class:`UCFBFile` ties this to a file on disk.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Iterator

from .chunks import TAG_NAMES, tag_display
from .errors import CorruptedError, TruncatedError, UCFBIOError, VisitError
from .header import (
    HEADER_SIZE,
    ArchiveHeader,
    ChunkHeader,
    padding_for,
    parse_archive_header,
    parse_chunk_header,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class Chunk:
    """A raw chunk. ``decoded`` is filled in by the visitor, if at all."""

    header: ChunkHeader
    data: bytes
    decoded: Any = None

    @property
    def tag(self) -> bytes:
        return self.header.tag

    @property
    def type_name(self) -> str:
        return TAG_NAMES.get(self.header.tag, "Unknown")

    def summary(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "tag": tag_display(self.header.tag),
            "type": self.type_name,
            "size": self.header.size,
        }
        if self.decoded is not None:
            out["decoded"] = self.decoded.summary()
        return out


@dataclass
class Container:
    """An archive or nested archive: header plus ordered chunks."""

    header: ArchiveHeader
    chunks: list[Chunk] = field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        return {
            "total_size": self.header.total_size,
            "chunks": [c.summary() for c in self.chunks],
        }

    def to_bytes(self) -> bytes:
        return serialize_archive(self.chunks)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


class ChunkReader:
    """Reads consecutive chunks from a binary stream.

    Offsets used for alignment are relative to the stream position at
    construction time, i.e. the start of the chunk data.
    """

    def __init__(self, f: BinaryIO):
        self.f = f
        self.base = f.tell()

    @property
    def pos(self) -> int:
        return self.f.tell() - self.base

    def read_chunk(self) -> Chunk | None:
        """Read one chunk, or return None when fewer than 8 bytes remain."""
        start = self.f.tell()
        raw = self.f.read(HEADER_SIZE)
        if len(raw) < HEADER_SIZE:
            if raw:
                log.debug("Ignoring %d trailing bytes at offset %d", len(raw), self.pos - len(raw))
            return None

        header = parse_chunk_header(raw)
        data = self.f.read(header.size)
        if len(data) < header.size:
            # Leave the cursor where the partial chunk started
            self.f.seek(start)
            raise TruncatedError(
                f"chunk {tag_display(header.tag)} at offset {start - self.base} declares "
                f"{header.size} bytes, only {len(data)} available"
            )

        pad = padding_for(self.pos)
        if pad:
            self.f.seek(pad, io.SEEK_CUR)
        return Chunk(header=header, data=data)

    def __iter__(self) -> Iterator[Chunk]:
        while True:
            chunk = self.read_chunk()
            if chunk is None:
                return
            yield chunk


def extract_chunks(f: BinaryIO) -> list[Chunk]:
    """Extract chunks from a stream positioned at the start of the chunks."""
    try:
        return list(ChunkReader(f))
    except OSError as e:
        raise UCFBIOError(f"Failed reading chunks: {e}") from e


def extract_chunks_from_bytes(data: bytes) -> list[Chunk]:
    """Extract chunks from an in-memory buffer holding a chunk sequence."""
    return extract_chunks(io.BytesIO(data))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_chunks(chunks: list[Chunk]) -> bytes:
    """Serialize chunks back to header + payload + alignment padding."""
    out = bytearray()
    for chunk in chunks:
        out += chunk.header.to_bytes()
        out += chunk.data
        out += b"\x00" * padding_for(len(out))
    return bytes(out)


def serialize_archive(chunks: list[Chunk]) -> bytes:
    """Serialize chunks as a complete archive, archive header included."""
    body = serialize_chunks(chunks)
    return ArchiveHeader(total_size=len(body)).to_bytes() + body


# ---------------------------------------------------------------------------
# Archive file
# ---------------------------------------------------------------------------


class UCFBFile:
    """A ZeroEngine ``.lvl`` / ``.mvs`` / ... UCFB archive on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.basename = self.path.name

        self.header: ArchiveHeader | None = None
        self.chunks: list[Chunk] = []
        self.errors: list[VisitError] = []

    @property
    def container(self) -> Container:
        if self.header is None:
            raise RuntimeError("UCFBFile.parse() has not been called")
        return Container(header=self.header, chunks=self.chunks)

    def parse(self) -> None:
        """Read the archive header and extract the top-level chunks."""
        try:
            with open(self.path, "rb") as f:
                self._parse_stream(f)
        except OSError as e:
            raise UCFBIOError(f"Failed reading {self.path}: {e}") from e

        log.info(
            "File=%s  Size=%d  Chunks=%d",
            self.basename,
            self.header.total_size,
            len(self.chunks),
        )

    def _parse_stream(self, f: BinaryIO) -> None:
        self.header = parse_archive_header(f.read(HEADER_SIZE))
        size = self.header.total_size
        if size < HEADER_SIZE:
            raise TruncatedError(f"{self.basename}: file too small (declared size {size})")
        if size == HEADER_SIZE:
            # Empty archive
            self.chunks = []
            return

        file_size = f.seek(0, io.SEEK_END)
        f.seek(HEADER_SIZE)
        if file_size - HEADER_SIZE != size:
            raise CorruptedError(
                f"{self.basename}: header declares {size} bytes, file holds "
                f"{file_size - HEADER_SIZE}"
            )
        self.chunks = extract_chunks(f)

    def visit(self, *, strict: bool = False, max_depth: int | None = None) -> list[VisitError]:
        """Decode every known chunk, recursing into nested containers."""
        from .visitor import visit_chunks

        self.errors = visit_chunks(self.chunks, strict=strict, max_depth=max_depth)
        return self.errors

    def walk(self) -> Iterator[tuple[tuple[int, ...], Chunk]]:
        """Yield ``(path, chunk)`` for every chunk, depth-first."""
        yield from walk_chunks(self.chunks)

    def to_bytes(self) -> bytes:
        return serialize_archive(self.chunks)

    def summary(self) -> dict[str, Any]:
        """Return a summary dict suitable for JSON export."""
        return {
            "file": str(self.path),
            "total_size": self.header.total_size if self.header else 0,
            "chunks": [c.summary() for c in self.chunks],
            "errors": [e.to_dict() for e in self.errors],
        }


def walk_chunks(
    chunks: list[Chunk], prefix: tuple[int, ...] = ()
) -> Iterator[tuple[tuple[int, ...], Chunk]]:
    """Depth-first iteration over chunks and the chunks of decoded containers."""
    for i, chunk in enumerate(chunks):
        path = prefix + (i,)
        yield path, chunk
        children = getattr(chunk.decoded, "chunks", None)
        if children:
            yield from walk_chunks(children, path)
