"""Resolution of schema documents into a deduplicated type graph."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from pkgspec_typegen.schema_management.schema_errors import SchemaError
from pkgspec_typegen.schema_management.schema_models import SchemaDocument, SchemaType
from pkgspec_typegen.schema_management.schema_registry import (
    SchemaRegistry,
    clean_relative_path,
    escape_json_pointer,
)

from .naming import clean_doc, enum_constant_name, singularize, to_identifier, to_type_name
from .type_graph import (
    BUILTIN_BOOL,
    BUILTIN_FLOAT,
    BUILTIN_INT,
    BUILTIN_STRING,
    EnumConstant,
    FieldNode,
    TypeKind,
    TypeNode,
    TypeReference,
)

_LOGGER = logging.getLogger(__name__)

_SCALAR_TAGS = {
    "string": BUILTIN_STRING,
    "integer": BUILTIN_INT,
    "number": BUILTIN_FLOAT,
    "boolean": BUILTIN_BOOL,
}
# Pointer segments that describe structure rather than name a type.
_STRUCTURAL_SEGMENTS = frozenset({"definitions", "$defs", "properties", "items"})
_DEFAULT_RECORD_NAME = "Object"
_DEFAULT_TYPE_NAME = "Type"
_SELF_REFERENCE = "#"


@dataclass(frozen=True)
class _PropertySource:
    """Property schema plus the file its nested references resolve against."""

    schema: SchemaDocument
    context_file: str


class TypeMapper:
    """Walks entry-point schemas and grows one shared, name-indexed type graph.

    Every schema location, identified by its owning file and JSON Pointer,
    maps to at most one :class:`TypeNode`. Record and enumeration nodes are
    registered before their contents are resolved, which is what lets
    self-referencing schemas terminate.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._types: dict[str, TypeNode] = {}
        self._seen: dict[tuple[str, str], str] = {}
        self._entry_points: dict[str, str] = {}

    def types(self) -> list[TypeNode]:
        """Return all nodes sorted by name."""
        return sorted(self._types.values(), key=lambda node: node.name)

    def types_by_name(self) -> dict[str, TypeNode]:
        """Return the live name index; augmentation mutates it in place."""
        return self._types

    def register_entry_point(self, schema_path: str, type_name: str) -> None:
        self._entry_points[clean_relative_path(schema_path)] = type_name

    def process_entry_point(self, schema_path: str) -> TypeReference:
        """Load ``schema_path`` and resolve its root under the registered type name."""
        cleaned = clean_relative_path(schema_path)
        schema = self._registry.load_schema(cleaned)
        root_name = self._entry_points.get(cleaned, "")
        _LOGGER.debug("processing entry point %s as %s", cleaned, root_name or "<unnamed>")
        return self._resolve(schema, cleaned, "", root_name, is_entry_point=True)

    def _resolve(
        self,
        schema: SchemaDocument | None,
        context_file: str,
        pointer: str,
        suggested_name: str,
        *,
        is_entry_point: bool = False,
    ) -> TypeReference:
        if schema is None or schema.is_boolean_schema():
            return TypeReference.untyped()

        if schema.ref:
            return self._resolve_ref(schema.ref, context_file, schema.description)

        cached = self._seen.get((context_file, pointer))
        if cached is not None:
            _LOGGER.debug("reusing %s for %s#%s", cached, context_file, pointer)
            return TypeReference.named_type(cached)

        declared = schema.schema_type.values
        if len(declared) > 1:
            return self._resolve_multi_type(schema, context_file, pointer, suggested_name)

        single = schema.schema_type.single()
        if schema.enum and single == "string" and suggested_name:
            return self._create_enumeration(schema, context_file, pointer, suggested_name)

        if not single and not schema.has_properties():
            if schema.any_of is not None:
                return self._resolve_any_of(schema, context_file, pointer, suggested_name)
            if schema.one_of is not None:
                return self._resolve_one_of(schema)

        if single == "object":
            return self._create_record(
                schema, context_file, pointer, suggested_name, is_entry_point=is_entry_point
            )
        if single == "array":
            return self._create_sequence(
                schema, context_file, pointer, suggested_name, is_entry_point=is_entry_point
            )
        if single in _SCALAR_TAGS:
            return TypeReference.scalar(_SCALAR_TAGS[single])
        if single == "null":
            return TypeReference.untyped()

        if schema.has_properties() or schema.all_of is not None:
            return self._create_record(
                schema, context_file, pointer, suggested_name, is_entry_point=is_entry_point
            )
        return TypeReference.untyped()

    def _resolve_ref(self, ref: str, context_file: str, referring_doc: str) -> TypeReference:
        resolved, target_file, pointer = self._registry.locate_ref(ref, context_file)

        if (
            ref == _SELF_REFERENCE
            and resolved.schema_type.single() == "array"
            and resolved.items is not None
        ):
            return self._resolve(resolved, target_file, "", "")

        cached = self._seen.get((target_file, pointer))
        if cached is not None:
            return TypeReference.named_type(cached)

        # A whole-file reference to a registered entry point builds that entry
        # point's root, under its registered name.
        entry_name = self._entry_points.get(target_file, "") if not pointer else ""
        suggested_name = entry_name or to_type_name(target_file, _definition_name(pointer))

        if referring_doc and not resolved.description and not entry_name:
            resolved = dataclasses.replace(resolved, description=referring_doc)

        try:
            return self._resolve(
                resolved,
                target_file,
                pointer,
                suggested_name,
                is_entry_point=bool(entry_name),
            )
        except SchemaError as exc:
            exc.add_context(f'processing $ref "{ref}" from {context_file}')
            raise

    def _resolve_multi_type(
        self,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
    ) -> TypeReference:
        declared = schema.schema_type.values
        non_null = [value for value in declared if value != "null"]
        if len(non_null) != 1:
            return TypeReference.untyped()

        narrowed = dataclasses.replace(schema, schema_type=SchemaType(values=(non_null[0],)))
        reference = self._resolve(narrowed, context_file, pointer, suggested_name)
        if len(non_null) < len(declared):
            reference.nullable = True
        return reference

    def _resolve_any_of(
        self,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
    ) -> TypeReference:
        branches = schema.any_of or ()
        if all(_is_bare_branch(branch) for branch in branches):
            return TypeReference.untyped()
        for branch in branches:
            if branch.schema_type.single() != "null":
                return self._resolve(branch, context_file, pointer, suggested_name)
        return TypeReference.untyped()

    def _resolve_one_of(self, schema: SchemaDocument) -> TypeReference:
        # oneOf always collapses to an untyped value, structured branches included;
        # anyOf instead picks its first non-null branch.
        _LOGGER.debug("collapsing oneOf with %d branches to any", len(schema.one_of or ()))
        return TypeReference.untyped()

    def _create_record(
        self,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
        *,
        is_entry_point: bool,
    ) -> TypeReference:
        additional = schema.additional_properties
        map_value = additional.schema if additional is not None else None
        if not schema.has_properties() and map_value is not None:
            return self._create_map(map_value, context_file, pointer, suggested_name)
        if not schema.has_properties() and schema.all_of is None:
            if additional is None or additional.is_true():
                return TypeReference.map_of(
                    TypeReference.scalar(BUILTIN_STRING), TypeReference.untyped()
                )

        node = self._register(
            suggested_name or _DEFAULT_RECORD_NAME,
            TypeKind.RECORD,
            schema,
            context_file,
            pointer,
        )
        node.embed_metadata = is_entry_point

        properties, required = self._collect_properties(schema, context_file)
        for property_name in sorted(properties):
            source = properties[property_name]
            field_name = to_identifier(property_name)
            try:
                reference = self._resolve(
                    source.schema,
                    source.context_file,
                    f"{pointer}/properties/{escape_json_pointer(property_name)}",
                    node.name + field_name,
                )
            except SchemaError as exc:
                exc.add_context(f"processing field {node.name}.{property_name}")
                raise

            is_required = property_name in required
            if not is_required and reference.builtin == BUILTIN_BOOL:
                reference.nullable = True

            node.fields.append(
                FieldNode(
                    name=field_name,
                    source_key=property_name,
                    doc=clean_doc(source.schema.description),
                    type=reference,
                    required=is_required,
                )
            )
        return TypeReference.named_type(node.name)

    def _collect_properties(
        self, schema: SchemaDocument, context_file: str
    ) -> tuple[dict[str, _PropertySource], set[str]]:
        properties: dict[str, _PropertySource] = {}
        required: set[str] = set()
        for name, property_schema in schema.properties.items():
            properties[name] = _PropertySource(property_schema, context_file)
        required.update(schema.required)

        for branch in schema.all_of or ():
            self._merge_branch(branch, context_file, properties, required)
        self._merge_branch(schema, context_file, properties, required)
        return properties, required

    def _merge_branch(
        self,
        schema: SchemaDocument,
        context_file: str,
        properties: dict[str, _PropertySource],
        required: set[str],
    ) -> None:
        """Merge properties of an allOf branch, its conditionals and its oneOf branches.

        Properties already collected win. Only the branch's own ``required``
        list counts; then/else and oneOf properties stay optional.
        """
        _add_missing(properties, schema.properties, context_file)
        required.update(schema.required)
        for conditional in (schema.then_schema, schema.else_schema):
            if conditional is not None:
                _add_missing(properties, conditional.properties, context_file)
        for branch in schema.one_of or ():
            _add_missing(properties, branch.properties, context_file)
        for branch in schema.all_of or ():
            self._merge_branch(branch, context_file, properties, required)

    def _create_sequence(
        self,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
        *,
        is_entry_point: bool,
    ) -> TypeReference:
        items = schema.items
        if items is None:
            return TypeReference.sequence_of(TypeReference.untyped())

        if items.ref == _SELF_REFERENCE:
            root = self._registry.load_schema(context_file)
            if root.items is not None and root.items is not items:
                element = self._resolve(root.items, context_file, "/items", suggested_name)
                return TypeReference.sequence_of(element)
            if root.items is items:
                if suggested_name:
                    return TypeReference.sequence_of(TypeReference.named_type(suggested_name))
                return TypeReference.sequence_of(TypeReference.untyped())

        element_name = singularize(suggested_name) if suggested_name else ""
        element = self._resolve(items, context_file, f"{pointer}/items", element_name)

        if is_entry_point and element.named:
            element_node = self._types.get(element.named)
            if element_node is not None:
                element_node.embed_metadata = True
        return TypeReference.sequence_of(element)

    def _create_map(
        self,
        value_schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
    ) -> TypeReference:
        value = self._resolve(
            value_schema,
            context_file,
            f"{pointer}/additionalProperties",
            suggested_name + "Value",
        )
        return TypeReference.map_of(TypeReference.scalar(BUILTIN_STRING), value)

    def _create_enumeration(
        self,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
        suggested_name: str,
    ) -> TypeReference:
        node = self._register(suggested_name, TypeKind.ENUMERATION, schema, context_file, pointer)
        for value in schema.enum_strings():
            node.enum_constants.append(
                EnumConstant(identifier=enum_constant_name(node.name, value), value=value)
            )
        return TypeReference.named_type(node.name)

    def _register(
        self,
        suggested_name: str,
        kind: TypeKind,
        schema: SchemaDocument,
        context_file: str,
        pointer: str,
    ) -> TypeNode:
        name = self._unique_name(suggested_name)
        node = TypeNode(
            name=name,
            kind=kind,
            doc=clean_doc(schema.description),
            schema_file=context_file,
            schema_pointer=pointer,
        )
        self._types[name] = node
        self._seen[(context_file, pointer)] = name
        _LOGGER.debug("created %s %s from %s#%s", kind.value, name, context_file, pointer)
        return node

    def _unique_name(self, name: str) -> str:
        name = name or _DEFAULT_TYPE_NAME
        if name not in self._types:
            return name
        suffix = 2
        while f"{name}{suffix}" in self._types:
            suffix += 1
        return f"{name}{suffix}"


def _definition_name(pointer: str) -> str:
    """Return the last pointer segment that names something, skipping structural ones."""
    for segment in reversed(pointer.removeprefix("/").split("/")):
        if segment and segment not in _STRUCTURAL_SEGMENTS:
            return segment.replace("~1", "/").replace("~0", "~")
    return ""


def _is_bare_branch(branch: SchemaDocument) -> bool:
    return not branch.has_properties() and branch.items is None


def _add_missing(
    properties: dict[str, _PropertySource],
    candidates: Mapping[str, SchemaDocument],
    context_file: str,
) -> None:
    for name, property_schema in candidates.items():
        if name not in properties:
            properties[name] = _PropertySource(property_schema, context_file)
