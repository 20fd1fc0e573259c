"""Payload decoders for ZeroEngine chunk types."""

from .level import Level
from .movie import Movie, scan_clips
from .props import PropertyContainer
from .script import LuaDialect, Script, ZERO_ENGINE_LUA50
from .texture import TextureContainer, TextureEntry, TextureHeader

__all__ = [
    "Level",
    "Movie",
    "scan_clips",
    "PropertyContainer",
    "LuaDialect",
    "Script",
    "ZERO_ENGINE_LUA50",
    "TextureContainer",
    "TextureEntry",
    "TextureHeader",
]
