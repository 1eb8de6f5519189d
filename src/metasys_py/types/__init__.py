"""Value, object and identifier types."""

from __future__ import annotations

from metasys_py.types.objects import Command, ObjectNode, ObjectTypeDescriptor
from metasys_py.types.parsing import parse_object_id, try_parse_object_id
from metasys_py.types.values import ValueNormalizer, Variant, VariantBundle, VariantKind

__all__ = [
    "Command",
    "ObjectNode",
    "ObjectTypeDescriptor",
    "ValueNormalizer",
    "Variant",
    "VariantBundle",
    "VariantKind",
    "parse_object_id",
    "try_parse_object_id",
]
