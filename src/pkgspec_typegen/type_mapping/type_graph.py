"""Type graph entities produced by the type mapper."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_OUTPUT_UNIT = "types.go"

BUILTIN_ANY = "any"
BUILTIN_STRING = "string"
BUILTIN_INT = "int"
BUILTIN_FLOAT = "float64"
BUILTIN_BOOL = "bool"


class TypeKind(str, Enum):
    """Shape of a generated type."""

    RECORD = "record"
    ENUMERATION = "enumeration"
    ALIAS = "alias"
    MAP = "map"


@dataclass
class TypeReference:
    """Reference to a type, possibly wrapped in nullable, sequence or map modifiers.

    Exactly one of ``builtin``, ``named``, ``element`` (sequence) or
    ``map_value`` (map) describes the shape; ``nullable`` wraps whichever is
    active.
    """

    builtin: str = ""
    named: str = ""
    qualifier: str = ""
    nullable: bool = False
    element: TypeReference | None = None
    map_key: TypeReference | None = None
    map_value: TypeReference | None = None

    @staticmethod
    def scalar(tag: str) -> TypeReference:
        return TypeReference(builtin=tag)

    @staticmethod
    def untyped() -> TypeReference:
        return TypeReference(builtin=BUILTIN_ANY)

    @staticmethod
    def named_type(name: str) -> TypeReference:
        return TypeReference(named=name)

    @staticmethod
    def sequence_of(element: TypeReference) -> TypeReference:
        return TypeReference(element=element)

    @staticmethod
    def map_of(key: TypeReference, value: TypeReference) -> TypeReference:
        return TypeReference(map_key=key, map_value=value)

    @property
    def is_sequence(self) -> bool:
        return self.element is not None

    @property
    def is_map(self) -> bool:
        return self.map_value is not None

    @property
    def is_any(self) -> bool:
        return self.builtin == BUILTIN_ANY

    def render(self) -> str:
        """Return the compact expression form, e.g. ``*bool`` or ``map[string][]Item``."""
        if self.is_map:
            key = self.map_key.render() if self.map_key is not None else BUILTIN_STRING
            assert self.map_value is not None
            text = f"map[{key}]{self.map_value.render()}"
        elif self.element is not None:
            text = f"[]{self.element.render()}"
        elif self.builtin:
            text = self.builtin
        elif self.named:
            text = f"{self.qualifier}.{self.named}" if self.qualifier else self.named
        else:
            text = BUILTIN_ANY
        if self.nullable:
            text = "*" + text
        return text

    def named_references(self) -> list[str]:
        """Return every type name reachable through this reference."""
        return [ref.named for ref in self.walk() if ref.named and not ref.qualifier]

    def walk(self) -> Iterator[TypeReference]:
        """Yield this reference followed by every nested one, depth first."""
        yield self
        for nested in (self.element, self.map_key, self.map_value):
            if nested is not None:
                yield from nested.walk()

    def __str__(self) -> str:
        return self.render()


@dataclass
class FieldNode:
    """Field of a record type."""

    name: str
    source_key: str
    type: TypeReference
    doc: str = ""
    required: bool = False
    embedded: bool = False
    wire_keys: dict[str, str] = field(default_factory=dict)


@dataclass
class EnumConstant:
    """Named constant of an enumeration type."""

    identifier: str
    value: str


@dataclass
class TypeNode:  # pylint: disable=too-many-instance-attributes
    """Node of the resolved type graph."""

    name: str
    kind: TypeKind
    doc: str = ""
    schema_file: str = ""
    schema_pointer: str = ""
    fields: list[FieldNode] = field(default_factory=list)
    enum_constants: list[EnumConstant] = field(default_factory=list)
    alias_of: TypeReference | None = None
    output_unit: str = DEFAULT_OUTPUT_UNIT
    embed_metadata: bool = False
    needs_custom_decode: bool = False

    def field_by_source_key(self, source_key: str) -> FieldNode | None:
        for candidate in self.fields:
            if candidate.source_key == source_key:
                return candidate
        return None

    def references(self) -> list[TypeReference]:
        """Return the references held directly by this node."""
        refs = [candidate.type for candidate in self.fields]
        if self.alias_of is not None:
            refs.append(self.alias_of)
        return refs
