"""Type mapping exports."""

from .naming import enum_constant_name, singularize, split_words, to_identifier, to_type_name
from .type_graph import (
    DEFAULT_OUTPUT_UNIT,
    EnumConstant,
    FieldNode,
    TypeKind,
    TypeNode,
    TypeReference,
)
from .type_mapper import TypeMapper

__all__ = [
    "DEFAULT_OUTPUT_UNIT",
    "EnumConstant",
    "FieldNode",
    "TypeKind",
    "TypeMapper",
    "TypeNode",
    "TypeReference",
    "enum_constant_name",
    "singularize",
    "split_words",
    "to_identifier",
    "to_type_name",
]
