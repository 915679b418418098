"""Schema document entities.

A schema node is either a bare boolean (``true`` accepts anything, ``false``
rejects everything) or an object carrying keywords. Both forms decode into
:class:`SchemaDocument`; ``boolean`` is set only for the boolean form and all
other attributes are then left at their defaults.

Only the keywords needed to derive a type graph are interpreted. Validation
keywords are parsed and retained so they stay available to callers, but they
never influence the shape of the resolved types.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .schema_errors import SchemaParseError

_NUMERIC_KEYWORDS = (
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusiveMinimum", "exclusive_minimum"),
    ("exclusiveMaximum", "exclusive_maximum"),
    ("multipleOf", "multiple_of"),
)
_COUNT_KEYWORDS = (
    ("minItems", "min_items"),
    ("maxItems", "max_items"),
    ("minLength", "min_length"),
    ("maxLength", "max_length"),
)
_TEXT_KEYWORDS = (
    ("$id", "schema_id"),
    ("$schema", "schema_uri"),
    ("$ref", "ref"),
    ("title", "title"),
    ("description", "description"),
    ("pattern", "pattern"),
    ("format", "format"),
)


@dataclass(frozen=True)
class SchemaType:
    """The ``type`` keyword, declared either as one string or a list of strings."""

    values: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, raw: Any) -> SchemaType:
        if isinstance(raw, str):
            return cls(values=(raw,))
        if isinstance(raw, list) and all(isinstance(item, str) for item in raw):
            return cls(values=tuple(raw))
        raise SchemaParseError(f"cannot decode type: {json.dumps(raw)}")

    def to_json(self) -> str | list[str]:
        if len(self.values) == 1:
            return self.values[0]
        return list(self.values)

    def single(self) -> str:
        """Return the type when exactly one is declared, otherwise an empty string."""
        if len(self.values) == 1:
            return self.values[0]
        return ""

    def is_empty(self) -> bool:
        return not self.values

    def contains(self, type_name: str) -> bool:
        return type_name in self.values


@dataclass(frozen=True)
class AdditionalProperties:
    """The ``additionalProperties`` keyword in boolean or nested-schema form."""

    flag: bool | None = None
    schema: SchemaDocument | None = None

    @classmethod
    def from_json(cls, raw: Any) -> AdditionalProperties:
        if isinstance(raw, bool):
            return cls(flag=raw)
        if isinstance(raw, Mapping):
            return cls(schema=parse_schema_node(raw))
        raise SchemaParseError(f"cannot decode additionalProperties: {json.dumps(raw)}")

    def to_json(self) -> Any:
        if self.flag is not None:
            return self.flag
        return self.schema.raw if self.schema is not None else None

    def is_false(self) -> bool:
        return self.flag is False

    def is_true(self) -> bool:
        return self.flag is True


@dataclass(frozen=True, eq=False)
class SchemaDocument:  # pylint: disable=too-many-instance-attributes
    """Parsed JSON Schema node.

    Instances compare by identity: the registry hands out the same object for
    the same file and fragment. Deduplication in the type mapper is keyed on
    the owning file and canonical pointer instead; identity only matters when
    an array's ``items`` refers back to its own file root.
    """

    boolean: bool | None = None

    # Identity
    schema_id: str = ""
    schema_uri: str = ""
    title: str = ""
    description: str = ""
    deprecated: bool = False

    # References and definitions
    ref: str = ""
    defs: Mapping[str, SchemaDocument] = field(default_factory=dict)
    definitions: Mapping[str, SchemaDocument] = field(default_factory=dict)

    # Type and literals
    schema_type: SchemaType = field(default_factory=SchemaType)
    enum: tuple[Any, ...] = ()
    const: Any = None
    has_const: bool = False

    # Object
    properties: Mapping[str, SchemaDocument] = field(default_factory=dict)
    pattern_properties: Mapping[str, SchemaDocument] = field(default_factory=dict)
    additional_properties: AdditionalProperties | None = None
    required: tuple[str, ...] = ()

    # Array
    items: SchemaDocument | None = None

    # Composition and conditionals
    all_of: tuple[SchemaDocument, ...] | None = None
    any_of: tuple[SchemaDocument, ...] | None = None
    one_of: tuple[SchemaDocument, ...] | None = None
    not_schema: SchemaDocument | None = None
    if_schema: SchemaDocument | None = None
    then_schema: SchemaDocument | None = None
    else_schema: SchemaDocument | None = None

    # Validation-only keywords, retained but not interpreted
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None
    pattern: str = ""
    format: str = ""
    min_length: int | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    default: Any = None
    examples: tuple[Any, ...] = ()

    raw: Any = field(default=None, repr=False)

    def is_boolean_schema(self) -> bool:
        return self.boolean is not None

    def all_definitions(self) -> dict[str, SchemaDocument]:
        """Return ``definitions`` and ``$defs`` merged into one namespace."""
        merged = dict(self.definitions)
        merged.update(self.defs)
        return merged

    def is_required(self, property_name: str) -> bool:
        return property_name in self.required

    def has_properties(self) -> bool:
        return bool(self.properties)

    def enum_strings(self) -> list[str]:
        """Return enum literals as strings; non-string literals keep their JSON text."""
        result: list[str] = []
        for value in self.enum:
            if isinstance(value, str):
                result.append(value)
            else:
                result.append(json.dumps(value, separators=(",", ":")))
        return result


def parse_schema_text(text: str, source: str = "<inline>") -> SchemaDocument:
    """Decode schema text into a document."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(f"parsing schema {source}: {exc}") from exc
    try:
        return parse_schema_node(raw)
    except SchemaParseError as exc:
        exc.add_context(f"parsing schema {source}")
        raise


def parse_schema_node(raw: Any) -> SchemaDocument:
    """Build a document from an already-decoded JSON value."""
    if isinstance(raw, bool):
        return SchemaDocument(boolean=raw, raw=raw)
    if not isinstance(raw, Mapping):
        raise SchemaParseError(f"schema must be an object or boolean, got {type(raw).__name__}")

    values: dict[str, Any] = {"raw": raw}
    for keyword, attribute in _TEXT_KEYWORDS:
        if keyword in raw:
            values[attribute] = _require_string(raw[keyword], keyword)
    for keyword, attribute in _NUMERIC_KEYWORDS:
        if keyword in raw:
            values[attribute] = _require_number(raw[keyword], keyword)
    for keyword, attribute in _COUNT_KEYWORDS:
        if keyword in raw:
            values[attribute] = _require_count(raw[keyword], keyword)

    if "deprecated" in raw:
        values["deprecated"] = bool(raw["deprecated"])
    if "type" in raw:
        values["schema_type"] = SchemaType.from_json(raw["type"])
    if "enum" in raw:
        if not isinstance(raw["enum"], list):
            raise SchemaParseError("enum must be an array")
        values["enum"] = tuple(raw["enum"])
    if "const" in raw:
        values["const"] = raw["const"]
        values["has_const"] = True
    if "default" in raw:
        values["default"] = raw["default"]
    if "examples" in raw:
        if not isinstance(raw["examples"], list):
            raise SchemaParseError("examples must be an array")
        values["examples"] = tuple(raw["examples"])
    if "required" in raw:
        values["required"] = _require_string_list(raw["required"], "required")

    for keyword, attribute in (
        ("$defs", "defs"),
        ("definitions", "definitions"),
        ("properties", "properties"),
        ("patternProperties", "pattern_properties"),
    ):
        if keyword in raw:
            values[attribute] = _schema_map(raw[keyword], keyword)

    for keyword, attribute in (("allOf", "all_of"), ("anyOf", "any_of"), ("oneOf", "one_of")):
        if keyword in raw:
            values[attribute] = _schema_list(raw[keyword], keyword)

    for keyword, attribute in (
        ("items", "items"),
        ("not", "not_schema"),
        ("if", "if_schema"),
        ("then", "then_schema"),
        ("else", "else_schema"),
    ):
        if keyword in raw:
            values[attribute] = _nested_schema(raw[keyword], keyword)

    if "additionalProperties" in raw:
        values["additional_properties"] = AdditionalProperties.from_json(
            raw["additionalProperties"]
        )

    return SchemaDocument(**values)


def _nested_schema(raw: Any, keyword: str) -> SchemaDocument:
    try:
        return parse_schema_node(raw)
    except SchemaParseError as exc:
        exc.add_context(keyword)
        raise


def _schema_map(raw: Any, keyword: str) -> dict[str, SchemaDocument]:
    if not isinstance(raw, Mapping):
        raise SchemaParseError(f"{keyword} must be an object")
    return {name: _nested_schema(value, f"{keyword}/{name}") for name, value in raw.items()}


def _schema_list(raw: Any, keyword: str) -> tuple[SchemaDocument, ...]:
    if not isinstance(raw, list):
        raise SchemaParseError(f"{keyword} must be an array")
    return tuple(_nested_schema(value, f"{keyword}/{index}") for index, value in enumerate(raw))


def _require_string(value: Any, keyword: str) -> str:
    if not isinstance(value, str):
        raise SchemaParseError(f"{keyword} must be a string")
    return value


def _require_string_list(value: Any, keyword: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SchemaParseError(f"{keyword} must be an array of strings")
    return tuple(value)


def _require_number(value: Any, keyword: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SchemaParseError(f"{keyword} must be a number")
    return value


def _require_count(value: Any, keyword: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaParseError(f"{keyword} must be a non-negative integer")
    return value
