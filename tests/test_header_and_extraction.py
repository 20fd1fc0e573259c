from __future__ import annotations

import io
import struct
from pathlib import Path

import pytest

from zero_re.ucfb.container import (
    ChunkReader,
    UCFBFile,
    extract_chunks,
    extract_chunks_from_bytes,
    serialize_archive,
    serialize_chunks,
)
from zero_re.ucfb.errors import CorruptedError, FormatError, TruncatedError
from zero_re.ucfb.header import padding_for, parse_archive_header, parse_chunk_header
from ucfb_builders import archive, chunk


def test_parse_archive_header():
    header = parse_archive_header(b"ucfb" + struct.pack("<I", 1234))
    assert header.total_size == 1234
    assert header.to_bytes() == b"ucfb\xd2\x04\x00\x00"


def test_parse_archive_header_wrong_magic():
    with pytest.raises(FormatError):
        parse_archive_header(b"RIFX\x00\x00\x00\x00")


def test_parse_archive_header_too_short():
    with pytest.raises(TruncatedError):
        parse_archive_header(b"ucfb")


def test_parse_chunk_header_keeps_raw_tag():
    header = parse_chunk_header(b"\x60\x70\x1f\x2f" + struct.pack("<I", 7))
    assert header.tag == b"\x60\x70\x1f\x2f"
    assert header.size == 7


def test_parse_chunk_header_truncated():
    with pytest.raises(TruncatedError):
        parse_chunk_header(b"scr_\x01\x00")


@pytest.mark.parametrize("offset,expected", [(0, 0), (1, 3), (2, 2), (3, 1), (4, 0), (13, 3)])
def test_padding_for(offset, expected):
    assert padding_for(offset) == expected
    assert (offset + padding_for(offset)) % 4 == 0


def test_extract_aligns_between_chunks():
    data = chunk(b"AAAA", b"x") + chunk(b"BBBB", b"hello") + chunk(b"CCCC", b"")
    chunks = extract_chunks_from_bytes(data)

    assert [c.tag for c in chunks] == [b"AAAA", b"BBBB", b"CCCC"]
    assert [c.data for c in chunks] == [b"x", b"hello", b""]
    assert all(c.decoded is None for c in chunks)


def test_extract_consumes_header_size_and_padding_per_chunk():
    payloads = [b"", b"a", b"ab", b"abc", b"abcd", b"abcde"]
    data = b"".join(chunk(b"TEST", p) for p in payloads)
    f = io.BytesIO(data)
    reader = ChunkReader(f)

    for p in payloads:
        before = reader.pos
        c = reader.read_chunk()
        consumed = reader.pos - before
        assert c.data == p
        assert consumed == 8 + len(p) + padding_for(8 + len(p))
        assert reader.pos % 4 == 0
    assert reader.read_chunk() is None


def test_extract_stops_on_short_trailer():
    data = chunk(b"AAAA", b"1234") + b"\x01\x02\x03"
    chunks = extract_chunks_from_bytes(data)
    assert len(chunks) == 1


def test_extract_empty_buffer():
    assert extract_chunks_from_bytes(b"") == []


def test_extract_truncated_payload_consumes_no_partial_chunk():
    good = chunk(b"GOOD", b"1234")
    bad = struct.pack("<4sI", b"BAD_", 100) + b"only a few bytes"
    f = io.BytesIO(good + bad)

    with pytest.raises(TruncatedError):
        extract_chunks(f)
    # Cursor is left at the start of the chunk that could not be read
    assert f.tell() == len(good)


def test_extract_from_stream_offset():
    data = b"JUNKJUNK" + chunk(b"AAAA", b"abc") + chunk(b"BBBB", b"d")
    f = io.BytesIO(data)
    f.seek(8)
    chunks = extract_chunks(f)
    assert [c.data for c in chunks] == [b"abc", b"d"]


def test_serialize_round_trip():
    original = chunk(b"AAAA", b"x") + chunk(b"\x00\xff\x10\x20", b"12345") + chunk(b"CCCC", b"")
    assert serialize_chunks(extract_chunks_from_bytes(original)) == original


def test_serialize_archive_round_trip():
    data = archive(chunk(b"scr_", b"abcdef"), chunk(b"tex_", b"123"))
    body = data[8:]
    assert serialize_archive(extract_chunks_from_bytes(body)) == data


# -- UCFBFile -----------------------------------------------------------------


def _write(tmp_path: Path, data: bytes) -> Path:
    p = tmp_path / "test.lvl"
    p.write_bytes(data)
    return p


def test_file_round_trip(tmp_path: Path):
    data = archive(chunk(b"AAAA", b"x"), chunk(b"BBBB", b"yz" * 9))
    f = UCFBFile(_write(tmp_path, data))
    f.parse()
    assert f.header.total_size == len(data) - 8
    assert len(f.chunks) == 2
    assert f.to_bytes() == data


def test_file_with_declared_size_eight_is_empty(tmp_path: Path):
    f = UCFBFile(_write(tmp_path, b"ucfb" + struct.pack("<I", 8)))
    f.parse()
    assert f.chunks == []
    assert f.container.chunks == []


def test_file_declared_size_below_eight_is_too_small(tmp_path: Path):
    f = UCFBFile(_write(tmp_path, b"ucfb" + struct.pack("<I", 4) + b"\0" * 4))
    with pytest.raises(TruncatedError):
        f.parse()


def test_file_shorter_than_header(tmp_path: Path):
    f = UCFBFile(_write(tmp_path, b"ucf"))
    with pytest.raises(TruncatedError):
        f.parse()


def test_file_wrong_magic(tmp_path: Path):
    f = UCFBFile(_write(tmp_path, b"RIFF" + struct.pack("<I", 16) + b"\0" * 16))
    with pytest.raises(FormatError):
        f.parse()


def test_file_size_mismatch(tmp_path: Path):
    data = archive(chunk(b"AAAA", b"abcd"))
    f = UCFBFile(_write(tmp_path, data + b"\0\0\0\0"))
    with pytest.raises(CorruptedError):
        f.parse()


def test_container_requires_parse(tmp_path: Path):
    f = UCFBFile(_write(tmp_path, archive()))
    with pytest.raises(RuntimeError):
        _ = f.container
