"""``scr_`` chunk decoder: compiled Lua 5.0 scripts.

A script chunk holds three positional sub-chunks:

  0  NAME  script name, NUL padded
  1  INFO  one byte, probably a format discriminator
  2  BODY  Lua 5.0 bytecode followed by a single terminator byte

The engine's Lua 5.0 build uses a non-standard instruction layout, so the
bytecode has to be translated before stock tools can read it. Translation
is delegated to an external translator that receives the bytecode and a
:class:`LuaDialect` describing the source layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ..ucfb.chunks import ChunkTag
from ..ucfb.container import Chunk, extract_chunks_from_bytes
from ..ucfb.errors import CorruptedError, FormatError, TranslationFailure

log = logging.getLogger(__name__)

NAME_INDEX = 0
INFO_INDEX = 1
BODY_INDEX = 2

SCRIPT_EXTENSION = ".luac"


class OperandType(Enum):
    """Instruction fields of a Lua 5.0 instruction word."""

    OPCODE = "Opcode"
    A = "A"
    B = "B"
    C = "C"


@dataclass(frozen=True)
class LuaDialect:
    """Describes the Lua 5.0 bytecode produced by the engine's compiler.

    ``layout`` lists the instruction fields from the least significant bit
    upward together with their bit widths.
    """

    stack_limit: int = 128
    fields_per_flush: int = 32
    binary_signature: bytes = b"\x1bLua"
    little_endian: bool = True
    size_t_width: int = 64
    layout: tuple[tuple[OperandType, int], ...] = field(
        default=(
            (OperandType.OPCODE, 6),
            (OperandType.C, 9),
            (OperandType.B, 9),
            (OperandType.A, 8),
        )
    )

    def __post_init__(self) -> None:
        if sum(width for _, width in self.layout) != 32:
            raise ValueError("instruction layout must cover exactly 32 bits")
        kinds = [kind for kind, _ in self.layout]
        if sorted(k.value for k in kinds) != sorted(k.value for k in OperandType):
            raise ValueError(f"instruction layout must name each field once: {kinds}")

    def field_shift(self, operand: OperandType) -> int:
        """Bit offset of ``operand`` inside an instruction word."""
        shift = 0
        for kind, width in self.layout:
            if kind == operand:
                return shift
            shift += width
        raise KeyError(operand)

    def field_width(self, operand: OperandType) -> int:
        for kind, width in self.layout:
            if kind == operand:
                return width
        raise KeyError(operand)


ZERO_ENGINE_LUA50 = LuaDialect()

# (bytecode, dialect) -> translated bytecode
BytecodeTranslator = Callable[[bytes, LuaDialect], bytes]


@dataclass
class Script:
    """A decoded ``scr_`` chunk."""

    name: str
    info: int
    bytecode: bytes

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> Script:
        if chunk.tag != ChunkTag.SCRIPT:
            raise FormatError(f"Not a script chunk: {chunk.tag!r}")

        subchunks = extract_chunks_from_bytes(chunk.data)
        if len(subchunks) <= BODY_INDEX:
            raise CorruptedError(f"script has {len(subchunks)} sub-chunks, expected 3")

        try:
            name = subchunks[NAME_INDEX].data.decode("utf-8").replace("\0", "")
        except UnicodeDecodeError as e:
            raise CorruptedError(f"script name is not valid UTF-8: {e}") from e

        info_data = subchunks[INFO_INDEX].data
        if not info_data:
            raise CorruptedError(f"script '{name}' has an empty INFO sub-chunk")

        # Trailing terminator after the bytecode
        body = subchunks[BODY_INDEX].data[:-1]

        log.debug("Script '%s': info=%d  %d bytes of bytecode", name, info_data[0], len(body))
        return cls(name=name, info=info_data[0], bytecode=body)

    @property
    def has_lua_signature(self) -> bool:
        return self.bytecode.startswith(ZERO_ENGINE_LUA50.binary_signature)

    def translate(
        self,
        translator: BytecodeTranslator,
        dialect: LuaDialect = ZERO_ENGINE_LUA50,
    ) -> bytes:
        """Run ``translator`` over the bytecode.

        Any failure inside the translator is raised as
        :class:`TranslationFailure`.
        """
        try:
            return translator(self.bytecode, dialect)
        except Exception as e:
            raise TranslationFailure(f"script '{self.name}': {e}") from e

    def summary(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "info": self.info,
            "bytecode_size": len(self.bytecode),
            "lua_signature": self.has_lua_signature,
        }
