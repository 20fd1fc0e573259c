"""CLI entry point for zero-re.

Usage:
    zero-re parse <file>              Parse a UCFB file and print a JSON summary
    zero-re list <file>               Print the chunk tree
    zero-re extract <file> -o <dir>   Export scripts, clips, textures and odf files
    zero-re odf <file>                Print every property container as odf text
    zero-re batch-extract <dir>       Extract every .lvl / .mvs file under a directory
"""

from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path

import click

from . import __version__

LEVEL_EXTENSIONS = (".lvl", ".mvs")


def _visit_options(f):
    f = click.option(
        "--max-depth",
        type=click.IntRange(min=0),
        default=None,
        help="Do not descend into containers nested deeper than this",
    )(f)
    f = click.option(
        "--strict", is_flag=True, help="Abort on the first chunk that fails to decode"
    )(f)
    return f


def _open(file: str | Path, strict: bool, max_depth: int | None):
    from .ucfb.container import UCFBFile
    from .ucfb.errors import UCFBError

    archive = UCFBFile(file)
    try:
        archive.parse()
        errors = archive.visit(strict=strict, max_depth=max_depth)
    except UCFBError as e:
        raise click.ClickException(f"{file}: {type(e).__name__}: {e}") from e
    for err in errors:
        click.echo(
            f"  Failed chunk {'/'.join(map(str, err.path))} at depth {err.depth}: "
            f"{type(err.root_cause).__name__}: {err.root_cause}",
            err=True,
        )
    return archive


def load_translator(target: str):
    """Import a ``module:function`` bytecode translator."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected module:function, got {target!r}")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise click.BadParameter(f"cannot load translator {target!r}: {e}") from e


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """ZeroEngine UCFB reverse engineering toolkit."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(name)s %(levelname)s: %(message)s",
    )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_visit_options
def parse(file: str, strict: bool, max_depth: int | None) -> None:
    """Parse a UCFB file and print a JSON summary."""
    archive = _open(file, strict, max_depth)
    out = json.dumps(archive.summary(), indent=2, ensure_ascii=False)
    sys.stdout.buffer.write(out.encode("utf-8"))
    sys.stdout.buffer.write(b"\n")


@main.command(name="list-chunks")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_visit_options
def list_chunks(file: str, strict: bool, max_depth: int | None) -> None:
    """Print the chunk tree of a UCFB file."""
    from .formats import Movie, PropertyContainer, Script, TextureContainer
    from .ucfb.chunks import tag_display

    archive = _open(file, strict, max_depth)
    click.echo(f"=== {archive.basename} ({archive.header.total_size} bytes) ===")
    for path, chunk in archive.walk():
        indent = "  " * len(path)
        d = chunk.decoded
        extra = ""
        if isinstance(d, Script):
            extra = f"  {d.name}"
        elif isinstance(d, Movie):
            extra = f"  {len(d.segments)} clips"
        elif isinstance(d, TextureContainer):
            formats = ", ".join(
                f"{e.header.pixel_format.name} {e.header.width}x{e.header.height}"
                for e in d.entries
            )
            extra = f"  {d.name} [{formats}]"
        elif isinstance(d, PropertyContainer):
            extra = f"  {d.name} ({d.relation.key} = {d.relation.value})"
        click.echo(
            f"{indent}[{path[-1]:4d}] {tag_display(chunk.tag):10s} "
            f"{chunk.type_name:16s} {chunk.header.size:9d}{extra}"
        )


# Alias: `zero-re list` works the same as `zero-re list-chunks`
main.add_command(list_chunks, name="list")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o",
    "--output",
    type=click.Path(),
    default=None,
    help="Output directory (default: <file>_export/)",
)
@click.option("--no-scripts", is_flag=True, help="Skip script extraction")
@click.option("--no-movies", is_flag=True, help="Skip cutscene clip extraction")
@click.option("--no-textures", is_flag=True, help="Skip texture extraction")
@click.option("--no-properties", is_flag=True, help="Skip odf extraction")
@click.option(
    "--translator",
    default=None,
    metavar="MODULE:FUNCTION",
    help="Bytecode translator called as FUNCTION(bytecode, dialect)",
)
@_visit_options
def extract(
    file: str,
    output: str | None,
    no_scripts: bool,
    no_movies: bool,
    no_textures: bool,
    no_properties: bool,
    translator: str | None,
    strict: bool,
    max_depth: int | None,
) -> None:
    """Extract everything from a UCFB file."""
    from .export.exporter import export_all

    translate = load_translator(translator) if translator else None
    archive = _open(file, strict, max_depth)
    out_dir = Path(output) if output else Path(f"{file}_export")

    xref = export_all(
        archive,
        out_dir,
        export_scripts=not no_scripts,
        export_movies=not no_movies,
        export_textures=not no_textures,
        export_properties=not no_properties,
        translator=translate,
    )

    click.echo(f"Exported to {out_dir}")
    click.echo(f"Cross-reference entries: {len(xref)}")
    if archive.errors:
        click.echo(f"Chunks that failed to decode: {len(archive.errors)}", err=True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_visit_options
def odf(file: str, strict: bool, max_depth: int | None) -> None:
    """Print every property container as odf text."""
    from .formats import PropertyContainer

    archive = _open(file, strict, max_depth)
    for path, chunk in archive.walk():
        if isinstance(chunk.decoded, PropertyContainer):
            click.echo(f"// chunk {'/'.join(map(str, path))}: {chunk.decoded.name}")
            click.echo(chunk.decoded.to_definition_text())


@main.command("batch-extract")
@click.argument("dir", type=click.Path(exists=True, file_okay=False))
@click.option("-o", "--output", type=click.Path(), default=None)
@_visit_options
def batch_extract(dir: str, output: str | None, strict: bool, max_depth: int | None) -> None:
    """Extract every UCFB file found under a game directory."""
    from .export.exporter import export_all
    from .ucfb.container import UCFBFile
    from .ucfb.errors import UCFBError

    game_dir = Path(dir)
    out_base = Path(output) if output else game_dir / "_re_export"

    files = sorted(p for p in game_dir.rglob("*") if p.suffix.lower() in LEVEL_EXTENSIONS)
    click.echo(f"Found {len(files)} UCFB files")

    for f in files:
        click.echo(f"\n--- {f.name} ---")
        try:
            archive = UCFBFile(f)
            archive.parse()
            archive.visit(strict=strict, max_depth=max_depth)
            out_dir = out_base / f.relative_to(game_dir).with_suffix("")
            export_all(archive, out_dir)
            click.echo(f"  -> {out_dir}")
        except UCFBError as e:
            click.echo(f"  FAILED: {type(e).__name__}: {e}", err=True)

    click.echo(f"\nDone. Output in {out_base}")


if __name__ == "__main__":
    main()
