"""UCFB container format: headers, chunk extraction and visitation."""

from .chunks import ChunkTag, PropertyContainerKind, TAG_NAMES
from .container import (
    Chunk,
    ChunkReader,
    Container,
    UCFBFile,
    extract_chunks,
    extract_chunks_from_bytes,
    serialize_archive,
    serialize_chunks,
    walk_chunks,
)
from .errors import (
    CorruptedClipError,
    CorruptedError,
    FormatError,
    LookupFailure,
    SubchunkVisitationError,
    TranslationFailure,
    TruncatedError,
    UCFBError,
    UCFBIOError,
    VisitError,
)
from .header import ArchiveHeader, ChunkHeader, parse_archive_header, parse_chunk_header

__all__ = [
    "ChunkTag",
    "PropertyContainerKind",
    "TAG_NAMES",
    "Chunk",
    "ChunkReader",
    "Container",
    "UCFBFile",
    "extract_chunks",
    "extract_chunks_from_bytes",
    "serialize_archive",
    "serialize_chunks",
    "walk_chunks",
    "CorruptedClipError",
    "CorruptedError",
    "FormatError",
    "LookupFailure",
    "SubchunkVisitationError",
    "TranslationFailure",
    "TruncatedError",
    "UCFBError",
    "UCFBIOError",
    "VisitError",
    "ArchiveHeader",
    "ChunkHeader",
    "parse_archive_header",
    "parse_chunk_header",
]
