"""Property container (odf class) decoding."""

from .names import CLASS_LABELS, PROPERTY_HASHES, fnv1a_hash, lookup_property_name
from .odf import ClassLabel, ClassParent, PropertyContainer, classify

__all__ = [
    "CLASS_LABELS",
    "PROPERTY_HASHES",
    "fnv1a_hash",
    "lookup_property_name",
    "ClassLabel",
    "ClassParent",
    "PropertyContainer",
    "classify",
]
