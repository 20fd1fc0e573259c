"""Export pipeline: JSON metadata plus one file per decoded payload.

Layout of an export directory (nested archives and levels repeat it)::

  <output>/
    metadata.json          - Chunk tree summary + per-chunk failures
    xref.json              - Index of exported files
    <script>.luac          - Script bytecode (translated if a translator is given)
    mvs_block_<i>/
      movie_<j>.bik        - Embedded Bink clips
    <texture>_<k>.dds      - One DDS per texture format
    <texture>.png          - Top mip of the first decodable format
    <class>.odf            - Property container definitions
    ucfb_<i>/              - Nested archive
    lvl_<i>/               - Level
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..formats.dds import build_image_container, decode_to_raster
from ..formats.level import Level
from ..formats.movie import CLIP_EXTENSION, Movie
from ..formats.props.odf import ODF_EXTENSION, PropertyContainer
from ..formats.script import SCRIPT_EXTENSION, BytecodeTranslator, Script
from ..formats.texture import TextureContainer
from ..ucfb.container import Chunk, Container, UCFBFile
from ..ucfb.errors import UCFBError

log = logging.getLogger(__name__)


def export_all(
    archive: UCFBFile,
    output_dir: Path,
    *,
    export_scripts: bool = True,
    export_movies: bool = True,
    export_textures: bool = True,
    export_properties: bool = True,
    translator: BytecodeTranslator | None = None,
) -> dict[str, Any]:
    """Export everything decoded from a visited archive.

    Returns a cross-reference index mapping chunk paths to exported files.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    xref: dict[str, Any] = {}
    options = {
        "scripts": export_scripts,
        "movies": export_movies,
        "textures": export_textures,
        "properties": export_properties,
    }

    _write_json(output_dir / "metadata.json", archive.summary())
    _export_chunks(archive.chunks, output_dir, output_dir, (), xref, options, translator)
    _write_json(output_dir / "xref.json", xref)

    log.info("Export complete: %s (%d files)", output_dir, len(xref))
    return xref


def _export_chunks(
    chunks: list[Chunk],
    root: Path,
    out_dir: Path,
    prefix: tuple[int, ...],
    xref: dict,
    options: dict[str, bool],
    translator: BytecodeTranslator | None,
) -> None:
    for i, chunk in enumerate(chunks):
        path = prefix + (i,)
        decoded = chunk.decoded
        if decoded is None:
            continue

        if isinstance(decoded, Script) and options["scripts"]:
            _export_script(decoded, out_dir, root, path, xref, translator)
        elif isinstance(decoded, Movie) and options["movies"]:
            _export_movie(decoded, out_dir / f"mvs_block_{i}", root, path, xref)
        elif isinstance(decoded, TextureContainer) and options["textures"]:
            _export_texture(decoded, out_dir, root, path, xref)
        elif isinstance(decoded, PropertyContainer) and options["properties"]:
            _export_properties(decoded, out_dir, root, path, xref)
        elif isinstance(decoded, Container):
            _export_chunks(
                decoded.chunks, root, out_dir / f"ucfb_{i}", path, xref, options, translator
            )
        elif isinstance(decoded, Level):
            _export_chunks(
                decoded.chunks, root, out_dir / f"lvl_{i}", path, xref, options, translator
            )


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------


def _export_script(
    script: Script,
    out_dir: Path,
    root: Path,
    path: tuple[int, ...],
    xref: dict,
    translator: BytecodeTranslator | None,
) -> None:
    filepath = out_dir / _safe_filename(f"{script.name}{SCRIPT_EXTENSION}")
    try:
        body = script.translate(translator) if translator else script.bytecode
        _write_bytes(filepath, body)
    except (UCFBError, OSError) as e:
        log.warning("Failed to export script '%s': %s", script.name, e)
        return
    xref[_key("script", path)] = {
        "file": _relative(filepath, root),
        "name": script.name,
        "translated": translator is not None,
    }
    log.debug("Exported script: %s", filepath.name)


# ---------------------------------------------------------------------------
# Movies
# ---------------------------------------------------------------------------


def _export_movie(
    movie: Movie, out_dir: Path, root: Path, path: tuple[int, ...], xref: dict
) -> None:
    files = []
    for j, segment in enumerate(movie.segments):
        filepath = out_dir / f"movie_{j}{CLIP_EXTENSION}"
        try:
            _write_bytes(filepath, segment)
        except OSError as e:
            log.warning("Failed to export clip %d of %s: %s", j, _key("movie", path), e)
            continue
        files.append(_relative(filepath, root))
    xref[_key("movie", path)] = {"files": files}


# ---------------------------------------------------------------------------
# Textures
# ---------------------------------------------------------------------------


def _export_texture(
    texture: TextureContainer, out_dir: Path, root: Path, path: tuple[int, ...], xref: dict
) -> None:
    name = texture.name or f"texture_{path[-1]}"
    files = []
    preview = None

    for k, entry in enumerate(texture.entries):
        filepath = out_dir / _safe_filename(f"{name}_{k}.dds")
        try:
            image = build_image_container(entry.header, entry.data)
            _write_bytes(filepath, image.to_bytes())
            files.append(_relative(filepath, root))
        except (UCFBError, OSError) as e:
            log.warning("Failed to export texture '%s' format %d: %s", name, k, e)
            continue

        if preview is None:
            png = out_dir / _safe_filename(f"{name}.png")
            try:
                decode_to_raster(image, 0).save(str(png), "PNG")
                preview = _relative(png, root)
            except (UCFBError, OSError) as e:
                log.warning("Failed to decode texture '%s' format %d: %s", name, k, e)

    xref[_key("texture", path)] = {"name": texture.name, "files": files, "preview": preview}


# ---------------------------------------------------------------------------
# Property containers
# ---------------------------------------------------------------------------


def _export_properties(
    props: PropertyContainer, out_dir: Path, root: Path, path: tuple[int, ...], xref: dict
) -> None:
    filepath = out_dir / _safe_filename(f"{props.name}{ODF_EXTENSION}")
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(props.to_definition_text(), encoding="utf-8")
    except OSError as e:
        log.warning("Failed to export odf '%s': %s", props.name, e)
        return
    xref[_key("odf", path)] = {
        "file": _relative(filepath, root),
        "kind": props.kind.name,
        "name": props.name,
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _key(kind: str, path: tuple[int, ...]) -> str:
    return f"{kind}:{'/'.join(str(i) for i in path)}"


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8")


def _safe_filename(name: str) -> str:
    """Sanitize a filename, replacing unsafe characters."""
    return "".join(c if c.isalnum() or c in "._-" else "_" for c in name)
