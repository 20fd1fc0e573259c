"""Chunk visitation: decode known chunk types, recursing into containers.

Unknown tags are left undecoded. A chunk that fails to decode is reported
as a :class:`VisitError`; failures inside nested archives and levels are
wrapped in :class:`SubchunkVisitationError` once per nesting level, so the
error carries the full chunk path.

By default failures are collected and visitation continues with the next
chunk. With ``strict=True`` the first failure is raised instead.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..formats.level import Level
from ..formats.movie import Movie
from ..formats.props import PropertyContainer
from ..formats.script import Script
from ..formats.texture import TextureContainer
from .chunks import ChunkTag, tag_display
from .container import Chunk, Container, extract_chunks_from_bytes
from .errors import SubchunkVisitationError, UCFBError, VisitError
from .header import ArchiveHeader

log = logging.getLogger(__name__)


def decode_container(chunk: Chunk) -> Container:
    """Decode a nested ``ucfb`` chunk; its header doubles as the archive header."""
    return Container(
        header=ArchiveHeader(total_size=chunk.header.size),
        chunks=extract_chunks_from_bytes(chunk.data),
    )


DECODERS: dict[bytes, Callable[[Chunk], Any]] = {
    ChunkTag.SCRIPT.value: Script.from_chunk,
    ChunkTag.MOVIE.value: Movie.from_chunk,
    ChunkTag.UCFB.value: decode_container,
    ChunkTag.LEVEL.value: Level.from_chunk,
    ChunkTag.TEXTURE.value: TextureContainer.from_chunk,
    ChunkTag.ENTITY_CLASS.value: PropertyContainer.from_chunk,
    ChunkTag.EXPLOSION_CLASS.value: PropertyContainer.from_chunk,
    ChunkTag.ORDNANCE_CLASS.value: PropertyContainer.from_chunk,
    ChunkTag.WEAPON_CLASS.value: PropertyContainer.from_chunk,
}


def visit_chunks(
    chunks: list[Chunk],
    *,
    strict: bool = False,
    max_depth: int | None = None,
) -> list[VisitError]:
    """Decode ``chunks`` in place (depth-first, left to right).

    Parameters
    ----------
    chunks : list[Chunk]
        Chunks whose ``decoded`` field is filled in.
    strict : bool
        Raise the first failure instead of collecting it.
    max_depth : int | None
        Do not descend into containers nested deeper than this. ``None``
        means unbounded; ``0`` decodes top-level chunks only.

    Returns the collected failures (always empty when ``strict``).
    """
    return _visit(chunks, strict=strict, max_depth=max_depth, depth=0)


def _visit(
    chunks: list[Chunk], *, strict: bool, max_depth: int | None, depth: int
) -> list[VisitError]:
    errors: list[VisitError] = []
    for index, chunk in enumerate(chunks):
        try:
            errors.extend(
                _visit_chunk(index, chunk, strict=strict, max_depth=max_depth, depth=depth)
            )
        except VisitError as e:
            if strict:
                raise
            errors.append(e)
    return errors


def _visit_chunk(
    index: int, chunk: Chunk, *, strict: bool, max_depth: int | None, depth: int
) -> list[VisitError]:
    decoder = DECODERS.get(chunk.tag)
    if decoder is None:
        log.debug("Chunk #%d: unknown tag %s, kept opaque", index, tag_display(chunk.tag))
        return []

    try:
        chunk.decoded = decoder(chunk)
    except UCFBError as e:
        log.warning(
            "Failed to decode chunk #%d (%s) at depth %d: %s",
            index,
            tag_display(chunk.tag),
            depth,
            e,
        )
        raise VisitError(index, chunk.tag, e) from e

    if not isinstance(chunk.decoded, (Container, Level)):
        return []
    if max_depth is not None and depth >= max_depth:
        log.info("Chunk #%d: not descending past depth %d", index, max_depth)
        return []

    children = chunk.decoded.chunks
    try:
        inner = _visit(children, strict=strict, max_depth=max_depth, depth=depth + 1)
    except VisitError as e:
        raise SubchunkVisitationError(index, chunk.tag, e) from e
    return [SubchunkVisitationError(index, chunk.tag, e) for e in inner]
