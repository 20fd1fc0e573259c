"""Byte builders for synthetic UCFB fixtures.

Usage:
    from ucfb_builders import archive, chunk, script_chunk
    data = archive(script_chunk("main", 1, b"\\x1bLua..."))
"""

from __future__ import annotations

import struct

from zero_re.formats.movie import LEADING_REGION
from zero_re.formats.props.names import fnv1a_hash

MOVIE_TAG = b"\x60\x70\x1f\x2f"


def pad(data: bytes) -> bytes:
    return data + b"\0" * (-len(data) % 4)


def chunk(tag: bytes, payload: bytes) -> bytes:
    """Header + payload + alignment padding."""
    return pad(struct.pack("<4sI", tag, len(payload)) + payload)


def archive(*chunks: bytes) -> bytes:
    body = b"".join(chunks)
    return struct.pack("<4sI", b"ucfb", len(body)) + body


def cstr(text: str) -> bytes:
    return text.encode("utf-8") + b"\0"


# -- Scripts ------------------------------------------------------------------


def script_chunk(name: str, info: int, bytecode: bytes) -> bytes:
    return chunk(
        b"scr_",
        chunk(b"NAME", cstr(name))
        + chunk(b"INFO", bytes([info]))
        + chunk(b"BODY", bytecode + b"\0"),
    )


# -- Property containers ------------------------------------------------------


def prop_record(name: str, value: str) -> bytes:
    return chunk(b"PROP", struct.pack("<I", fnv1a_hash(name)) + cstr(value))


def property_chunk(tag: bytes, base: str, type_name: str, props: list[tuple[str, str]]) -> bytes:
    return chunk(
        tag,
        chunk(b"BASE", cstr(base))
        + chunk(b"TYPE", cstr(type_name))
        + b"".join(prop_record(k, v) for k, v in props),
    )


# -- Textures -----------------------------------------------------------------


def texture_header(fmt: int, width: int, height: int, depth: int = 1, mips: int = 1) -> bytes:
    return struct.pack("<IHHHHI", fmt, width, height, depth, mips, 0)


def texture_format(header: bytes, *levels: bytes) -> bytes:
    face = b"".join(
        chunk(b"LVL_", chunk(b"INFO", b"\0" * 8) + chunk(b"BODY", body)) for body in levels
    )
    return chunk(b"FMT_", chunk(b"INFO", header) + chunk(b"FACE", face))


def texture_chunk(name: str, formats: list[bytes]) -> bytes:
    return chunk(
        b"tex_",
        chunk(b"NAME", cstr(name))
        + chunk(b"INFO", struct.pack("<I", len(formats)))
        + b"".join(formats),
    )


# -- Movies -------------------------------------------------------------------


def bink(declared: int, fill: bytes = b"\xaa") -> bytes:
    """A fake Bink file: signature, revision, size field, then ``declared`` bytes."""
    return b"BIKi" + struct.pack("<I", declared) + fill * declared


def movie_chunk(blob: bytes) -> bytes:
    return chunk(MOVIE_TAG, b"\0" * LEADING_REGION + blob)


# -- Containers ---------------------------------------------------------------


def level_chunk(*chunks: bytes, name_hash: int = 0x1234ABCD) -> bytes:
    body = b"".join(chunks)
    return chunk(b"lvl_", struct.pack("<II", name_hash, len(body)) + body)


def nested_chunk(*chunks: bytes) -> bytes:
    return chunk(b"ucfb", b"".join(chunks))
