"""Chunk tag and property-class definitions for ZeroEngine UCFB files."""

from __future__ import annotations

from enum import Enum


class ChunkTag(bytes, Enum):
    """Known UCFB chunk tags.

    Tags are raw bytes; several of them are not printable text.
    """

    # Container
    UCFB = b"ucfb"
    LEVEL = b"lvl_"

    # Payloads
    SCRIPT = b"scr_"
    MOVIE = b"\x60\x70\x1f\x2f"  # mvs cutscene block
    TEXTURE = b"tex_"
    AUDIO = b"\x5c\xd9\xa0\x23"  # audio data (not decoded)

    # Property containers (odf classes)
    ENTITY_CLASS = b"entc"
    EXPLOSION_CLASS = b"expc"
    ORDNANCE_CLASS = b"ordc"
    WEAPON_CLASS = b"wpnc"

    # Sub-chunks
    PROP = b"PROP"
    FACE = b"FACE"


class PropertyContainerKind(Enum):
    """Kinds of property container, named after their odf section header."""

    GameObjectClass = "entc"
    ExplosionClass = "expc"
    OrdnanceClass = "ordc"
    WeaponClass = "wpnc"


PROPERTY_CONTAINER_KINDS: dict[bytes, PropertyContainerKind] = {
    ChunkTag.ENTITY_CLASS.value: PropertyContainerKind.GameObjectClass,
    ChunkTag.EXPLOSION_CLASS.value: PropertyContainerKind.ExplosionClass,
    ChunkTag.ORDNANCE_CLASS.value: PropertyContainerKind.OrdnanceClass,
    ChunkTag.WEAPON_CLASS.value: PropertyContainerKind.WeaponClass,
}


# Tag names for display
TAG_NAMES: dict[bytes, str] = {
    ChunkTag.UCFB.value: "Container",
    ChunkTag.LEVEL.value: "Level",
    ChunkTag.SCRIPT.value: "Script",
    ChunkTag.MOVIE.value: "Movie",
    ChunkTag.TEXTURE.value: "Texture",
    ChunkTag.AUDIO.value: "Audio",
    ChunkTag.ENTITY_CLASS.value: "GameObjectClass",
    ChunkTag.EXPLOSION_CLASS.value: "ExplosionClass",
    ChunkTag.ORDNANCE_CLASS.value: "OrdnanceClass",
    ChunkTag.WEAPON_CLASS.value: "WeaponClass",
}


def tag_display(tag: bytes) -> str:
    """Render a raw tag for logs: printable tags as text, others as hex."""
    if all(0x20 <= b < 0x7F for b in tag):
        return tag.decode("ascii")
    return "0x" + tag.hex()
