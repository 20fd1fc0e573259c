from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from zero_re.cli import main
from zero_re.export import export_all
from zero_re.ucfb.container import UCFBFile
from ucfb_builders import (
    archive,
    bink,
    chunk,
    level_chunk,
    movie_chunk,
    nested_chunk,
    property_chunk,
    script_chunk,
    texture_chunk,
    texture_format,
    texture_header,
)

RED_BGRA = b"\x00\x00\xff\xff"


def _sample_archive() -> bytes:
    return archive(
        script_chunk("ingame", 1, b"\x1bLua\x50bytecode"),
        movie_chunk(bink(12) + bink(4)),
        texture_chunk("red", [texture_format(texture_header(21, 2, 2), RED_BGRA * 4)]),
        property_chunk(
            b"entc", "soldier", "rep_inf_trooper", [("GeometryName", "rep_inf_trooper")]
        ),
        nested_chunk(level_chunk(script_chunk("nested", 1, b"inner"))),
        chunk(b"\x5c\xd9\xa0\x23", b"audio"),
        # Broken script: only a NAME sub-chunk
        chunk(b"scr_", chunk(b"NAME", b"broken\0")),
    )


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    p = tmp_path / "sample.lvl"
    p.write_bytes(_sample_archive())
    return p


@pytest.fixture
def visited(sample_file: Path) -> UCFBFile:
    f = UCFBFile(sample_file)
    f.parse()
    f.visit()
    return f


def test_export_writes_every_payload(visited: UCFBFile, tmp_path: Path):
    out = tmp_path / "out"
    xref = export_all(visited, out)

    assert (out / "ingame.luac").read_bytes() == b"\x1bLua\x50bytecode"
    assert (out / "mvs_block_1" / "movie_0.bik").read_bytes() == bink(12)
    assert (out / "mvs_block_1" / "movie_1.bik").read_bytes() == bink(4)
    assert (out / "red_0.dds").read_bytes()[:4] == b"DDS "
    assert (out / "rep_inf_trooper.odf").read_text(encoding="utf-8").startswith(
        "[GameObjectClass]\n"
    )
    assert (out / "ucfb_4" / "lvl_0" / "nested.luac").read_bytes() == b"inner"

    with Image.open(out / "red.png") as img:
        assert img.convert("RGBA").getpixel((0, 0)) == (255, 0, 0, 255)

    assert xref["script:0"]["file"] == "ingame.luac"
    assert xref["movie:1"]["files"] == ["mvs_block_1/movie_0.bik", "mvs_block_1/movie_1.bik"]
    assert xref["texture:2"]["preview"] == "red.png"
    assert xref["odf:3"]["kind"] == "GameObjectClass"
    assert xref["script:4/0/0"]["file"] == "ucfb_4/lvl_0/nested.luac"


def test_export_metadata_records_failures(visited: UCFBFile, tmp_path: Path):
    out = tmp_path / "out"
    export_all(visited, out)

    meta = json.loads((out / "metadata.json").read_text(encoding="utf-8"))
    assert len(meta["chunks"]) == 7
    assert meta["chunks"][5]["type"] == "Audio"
    assert "decoded" not in meta["chunks"][5]
    assert meta["errors"] == [
        {
            "path": [6],
            "depth": 0,
            "tag": "scr_",
            "error": "CorruptedError",
            "message": meta["errors"][0]["message"],
        }
    ]
    xref = json.loads((out / "xref.json").read_text(encoding="utf-8"))
    assert "script:0" in xref


def test_export_options_skip_kinds(visited: UCFBFile, tmp_path: Path):
    out = tmp_path / "out"
    xref = export_all(
        visited,
        out,
        export_scripts=False,
        export_movies=False,
        export_textures=False,
    )
    assert not (out / "ingame.luac").exists()
    assert not (out / "mvs_block_1").exists()
    assert not (out / "red_0.dds").exists()
    assert list(xref) == ["odf:3"]


def test_export_with_translator(visited: UCFBFile, tmp_path: Path):
    out = tmp_path / "out"
    xref = export_all(visited, out, translator=lambda bytecode, dialect: bytecode.upper())
    assert (out / "ingame.luac").read_bytes() == b"\x1bLUA\x50BYTECODE"
    assert xref["script:0"]["translated"] is True


def test_export_translator_failure_skips_script(visited: UCFBFile, tmp_path: Path):
    def failing(bytecode, dialect):
        raise RuntimeError("no")

    out = tmp_path / "out"
    xref = export_all(visited, out, translator=failing)
    assert not (out / "ingame.luac").exists()
    assert "script:0" not in xref
    assert "odf:3" in xref


# -- CLI ----------------------------------------------------------------------


def test_cli_parse(sample_file: Path):
    result = CliRunner().invoke(main, ["parse", str(sample_file)])
    assert result.exit_code == 0, result.output
    assert '"total_size"' in result.output
    assert '"name": "ingame"' in result.output


def test_cli_parse_strict_fails(sample_file: Path):
    result = CliRunner().invoke(main, ["parse", "--strict", str(sample_file)])
    assert result.exit_code == 1
    assert "VisitError" in result.output


def test_cli_parse_rejects_non_ucfb(tmp_path: Path):
    p = tmp_path / "bad.lvl"
    p.write_bytes(b"RIFF\x00\x00\x00\x00")
    result = CliRunner().invoke(main, ["parse", str(p)])
    assert result.exit_code == 1
    assert "FormatError" in result.output


def test_cli_list(sample_file: Path):
    result = CliRunner().invoke(main, ["list", str(sample_file)])
    assert result.exit_code == 0, result.output
    assert "sample.lvl" in result.output
    assert "Script" in result.output
    assert "0x5cd9a023" in result.output
    assert "rep_inf_trooper (ClassLabel = soldier)" in result.output


def test_cli_odf(sample_file: Path):
    result = CliRunner().invoke(main, ["odf", str(sample_file)])
    assert result.exit_code == 0, result.output
    assert "// chunk 3: rep_inf_trooper" in result.output
    assert "ClassLabel = soldier" in result.output


def test_cli_extract(sample_file: Path, tmp_path: Path):
    out = tmp_path / "cli_out"
    result = CliRunner().invoke(
        main, ["extract", str(sample_file), "-o", str(out), "--no-movies"]
    )
    assert result.exit_code == 0, result.output
    assert (out / "ingame.luac").exists()
    assert not (out / "mvs_block_1").exists()


def test_cli_extract_bad_translator(sample_file: Path, tmp_path: Path):
    result = CliRunner().invoke(
        main,
        ["extract", str(sample_file), "-o", str(tmp_path / "x"), "--translator", "nope"],
    )
    assert result.exit_code != 0
    assert "module:function" in result.output


def test_cli_batch_extract(tmp_path: Path):
    game = tmp_path / "game"
    (game / "sub").mkdir(parents=True)
    (game / "sub" / "one.lvl").write_bytes(archive(script_chunk("a", 1, b"x")))
    (game / "two.mvs").write_bytes(archive(movie_chunk(bink(4))))
    (game / "broken.lvl").write_bytes(b"nope")
    (game / "readme.txt").write_text("ignored")

    result = CliRunner().invoke(main, ["batch-extract", str(game)])
    assert result.exit_code == 0, result.output
    assert "Found 3 UCFB files" in result.output
    assert (game / "_re_export" / "sub" / "one" / "a.luac").read_bytes() == b"x"
    assert (game / "_re_export" / "two" / "mvs_block_0" / "movie_0.bik").exists()


def test_export_reports_short_texture_payload(tmp_path: Path):
    p = tmp_path / "short.lvl"
    p.write_bytes(
        archive(
            texture_chunk(
                "short",
                [
                    texture_format(texture_header(21, 2, 2), RED_BGRA * 3),
                    texture_format(texture_header(21, 1, 1), RED_BGRA),
                ],
            )
        )
    )
    f = UCFBFile(p)
    f.parse()
    assert f.visit() == []
    assert len(f.chunks[0].decoded.entries) == 2

    out = tmp_path / "out"
    xref = export_all(f, out)
    assert not (out / "short_0.dds").exists()
    assert (out / "short_1.dds").exists()
    assert xref["texture:0"]["files"] == ["short_1.dds"]
    assert xref["texture:0"]["preview"] == "short.png"
