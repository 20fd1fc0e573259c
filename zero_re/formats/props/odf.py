"""Property container (odf class) decoder.

``entc`` / ``expc`` / ``ordc`` / ``wpnc`` chunks carry a compiled odf
definition as a positional sub-chunk sequence. Sub-chunk tags other than
``PROP`` carry no meaning; only the order does:

  0   BASE  parent odf or engine class label, NUL terminated
  1   TYPE  name of this definition, NUL terminated
  2+  PROP  u32 property-name hash + value string (NULs stripped)

The record list ends at the first sub-chunk that is not tagged ``PROP``.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any

from ...ucfb.chunks import PROPERTY_CONTAINER_KINDS, ChunkTag, PropertyContainerKind
from ...ucfb.container import Chunk, extract_chunks_from_bytes
from ...ucfb.errors import CorruptedError, FormatError, LookupFailure
from .names import CLASS_LABELS, lookup_property_name

log = logging.getLogger(__name__)

BASE_INDEX = 0
TYPE_INDEX = 1
FIRST_PROPERTY_INDEX = 2

GEOMETRY_NAME = "GeometryName"
ODF_EXTENSION = ".odf"


@dataclass(frozen=True)
class ClassLabel:
    """The definition is a root definition of an engine class."""

    label: str

    key = "ClassLabel"

    @property
    def value(self) -> str:
        return self.label


@dataclass(frozen=True)
class ClassParent:
    """The definition inherits from another named odf."""

    parent: str

    key = "ClassParent"

    @property
    def value(self) -> str:
        return self.parent


ClassRelation = ClassLabel | ClassParent


def _read_cstring(data: bytes, what: str) -> str:
    """Text up to the first NUL; the NUL is required."""
    end = data.find(b"\0")
    if end < 0:
        raise CorruptedError(f"{what} sub-chunk is not NUL terminated")
    try:
        return data[:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptedError(f"{what} sub-chunk is not valid UTF-8: {e}") from e


def _read_property(data: bytes) -> tuple[str, str]:
    if len(data) < 4:
        raise CorruptedError(f"PROP record is {len(data)} bytes, needs a 4-byte hash")
    key = struct.unpack_from("<I", data)[0]
    name = lookup_property_name(key)
    if name is None:
        raise LookupFailure(f"unknown property hash 0x{key:08X}")
    try:
        value = data[4:].decode("utf-8").replace("\0", "")
    except UnicodeDecodeError as e:
        raise CorruptedError(f"value of '{name}' is not valid UTF-8: {e}") from e
    return name, value


def classify(base: str) -> ClassRelation:
    if base in CLASS_LABELS:
        return ClassLabel(base)
    return ClassParent(base)


@dataclass
class PropertyContainer:
    """A decoded odf class definition."""

    kind: PropertyContainerKind
    name: str
    relation: ClassRelation
    properties: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> PropertyContainer:
        kind = PROPERTY_CONTAINER_KINDS.get(chunk.tag)
        if kind is None:
            raise FormatError(f"Not a property container chunk: {chunk.tag!r}")

        subchunks = extract_chunks_from_bytes(chunk.data)
        if len(subchunks) <= TYPE_INDEX:
            raise CorruptedError(
                f"property container has {len(subchunks)} sub-chunks, BASE and TYPE required"
            )
        base = _read_cstring(subchunks[BASE_INDEX].data, "BASE")
        name = _read_cstring(subchunks[TYPE_INDEX].data, "TYPE")

        properties: dict[str, str] = {}
        for sub in subchunks[FIRST_PROPERTY_INDEX:]:
            if sub.tag != ChunkTag.PROP:
                break
            key, value = _read_property(sub.data)
            properties[key] = value

        log.debug("%s '%s': base=%s  %d properties", kind.name, name, base, len(properties))
        return cls(kind=kind, name=name, relation=classify(base), properties=properties)

    @property
    def class_label(self) -> str | None:
        return self.relation.label if isinstance(self.relation, ClassLabel) else None

    @property
    def class_parent(self) -> str | None:
        return self.relation.parent if isinstance(self.relation, ClassParent) else None

    def to_definition_text(self) -> str:
        """Render the definition as odf text."""
        lines = [f"[{self.kind.name}]", "", f"{self.relation.key} = {self.relation.value}"]

        geometry = self.properties.get(GEOMETRY_NAME)
        if geometry is not None:
            lines += ["", f"{GEOMETRY_NAME} = {geometry}"]

        lines += ["", "[Properties]", ""]
        for key, value in self.properties.items():
            if key == GEOMETRY_NAME:
                continue
            lines.append(f"{key} = {_format_value(value)}")

        return "\n".join(lines) + "\n"

    def summary(self) -> dict[str, Any]:
        return {
            "kind": self.kind.name,
            "name": self.name,
            self.relation.key: self.relation.value,
            "properties": dict(self.properties),
        }


def _format_value(value: str) -> str:
    # Unsigned integers go out bare, everything else quoted
    if value.isascii() and value.isdigit():
        return value
    return f'"{value}"'
