"""Schema file loading, caching and `$ref` resolution."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from .schema_errors import RefResolutionError, SchemaError, SchemaLoadError
from .schema_models import SchemaDocument, parse_schema_text

_LOGGER = logging.getLogger(__name__)

_INDEXED_KEYWORDS = ("allOf", "anyOf", "oneOf")


class PointerError(ValueError):
    """Raised when a JSON Pointer cannot be walked through a schema."""

    def __init__(self, detail: str, segment: str) -> None:
        super().__init__(detail)
        self.segment = segment


class SchemaRegistry:
    """Loads schema files below one base directory and resolves references between them.

    Documents are cached by their cleaned relative path, so every reference to
    the same file yields the identical :class:`SchemaDocument` object. A
    registry is meant to live for exactly one generation run.
    """

    def __init__(self, base_dir: Path | str) -> None:
        self._base_dir = Path(base_dir)
        self._schemas: dict[str, SchemaDocument] = {}

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def loaded_schemas(self) -> dict[str, SchemaDocument]:
        """Return the cached documents keyed by relative path, in load order."""
        return dict(self._schemas)

    def load_schema(self, relative_path: str) -> SchemaDocument:
        """Read and parse the schema at ``relative_path``, reusing the cached copy."""
        cleaned = clean_relative_path(relative_path)
        cached = self._schemas.get(cleaned)
        if cached is not None:
            return cached

        absolute_path = self._base_dir / cleaned
        try:
            text = absolute_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SchemaLoadError(f"loading schema {cleaned}: {exc}") from exc

        document = parse_schema_text(text, source=cleaned)
        self._schemas[cleaned] = document
        _LOGGER.debug("loaded schema %s", cleaned)
        return document

    def resolve_ref(self, ref: str, context_file: str) -> tuple[SchemaDocument, str]:
        """Resolve ``ref`` as seen from ``context_file``.

        Returns the referenced fragment together with the relative path of the
        file that owns it.

        Supported forms:
          - ``#/definitions/foo`` and ``#/$defs/foo`` (same file)
          - ``#`` (root of the same file)
          - ``./other.json#/definitions/x`` and ``../../foo.json#/definitions/x``
          - ``#/definitions/a/properties/b`` (deep pointers)
        """
        resolved, target_file, _ = self.locate_ref(ref, context_file)
        return resolved, target_file

    def locate_ref(self, ref: str, context_file: str) -> tuple[SchemaDocument, str, str]:
        """Resolve ``ref`` and also return the canonical pointer of its target.

        Different spellings of one location (``$defs`` or ``definitions``,
        escaped or bare segments) yield the same canonical pointer.
        """
        file_part, fragment = split_ref(ref)

        target_file = clean_relative_path(context_file)
        if file_part:
            context_dir = posixpath.dirname(target_file)
            target_file = clean_relative_path(posixpath.join(context_dir, file_part))

        try:
            schema = self.load_schema(target_file)
        except SchemaLoadError as exc:
            raise RefResolutionError(str(exc), ref=ref, context_file=context_file) from exc
        except SchemaError as exc:
            exc.add_context(f'resolving $ref "{ref}" from {context_file}')
            raise

        try:
            resolved, canonical = _walk(schema, fragment)
        except PointerError as exc:
            raise RefResolutionError(
                str(exc), ref=ref, context_file=context_file, segment=exc.segment
            ) from exc
        return resolved, target_file, canonical


def clean_relative_path(path: str) -> str:
    """Normalize a relative schema path (``./a/../b.json`` becomes ``b.json``)."""
    return posixpath.normpath(path.replace("\\", "/"))


def split_ref(ref: str) -> tuple[str, str]:
    """Split a `$ref` into its file part and its fragment at the first ``#``.

    ``"./other.json#/definitions/x"`` gives ``("./other.json", "/definitions/x")``;
    ``"#"`` gives ``("", "")``.
    """
    file_part, _, fragment = ref.partition("#")
    return file_part, fragment


def unescape_json_pointer(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def escape_json_pointer(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def walk_json_pointer(schema: SchemaDocument, pointer: str) -> SchemaDocument:
    """Follow a JSON Pointer such as ``/definitions/foo/properties/bar`` through ``schema``."""
    resolved, _ = _walk(schema, pointer)
    return resolved


def canonical_json_pointer(schema: SchemaDocument, pointer: str) -> str:
    """Return the canonical spelling of ``pointer`` within ``schema``.

    ``$defs`` becomes ``definitions``, shorthand segments gain their keyword
    and names are escaped consistently; the root is the empty string.
    """
    _, canonical = _walk(schema, pointer)
    return canonical


def _walk(schema: SchemaDocument, pointer: str) -> tuple[SchemaDocument, str]:
    if pointer in ("", "/"):
        return schema, ""

    parts = pointer.removeprefix("/").split("/")
    canonical: list[str] = []
    current = schema
    index = 0
    while index < len(parts):
        segment = unescape_json_pointer(parts[index])

        if segment in ("definitions", "$defs", "properties"):
            name = _next_segment(parts, index, segment)
            index += 1
            if segment == "properties":
                keyword, candidates = "properties", current.properties
            else:
                keyword, candidates = "definitions", current.all_definitions()
            nested = candidates.get(name)
            if nested is None:
                label = "property" if segment == "properties" else "definition"
                raise PointerError(f'{label} "{name}" not found', name)
            current = nested
            canonical += [keyword, escape_json_pointer(name)]

        elif segment in _INDEXED_KEYWORDS:
            raw_index = _next_segment(parts, index, segment)
            index += 1
            current, position = _indexed_branch(current, segment, raw_index)
            canonical += [segment, str(position)]

        elif segment == "items":
            if current.items is None:
                raise PointerError("items is not defined", segment)
            current = current.items
            canonical.append(segment)

        elif segment in ("if", "then", "else", "not"):
            branch = {
                "if": current.if_schema,
                "then": current.then_schema,
                "else": current.else_schema,
                "not": current.not_schema,
            }[segment]
            if branch is None:
                raise PointerError(f"{segment} is not defined", segment)
            current = branch
            canonical.append(segment)

        elif segment == "additionalProperties":
            additional = current.additional_properties
            if additional is None or additional.schema is None:
                raise PointerError("additionalProperties is not a schema", segment)
            current = additional.schema
            canonical.append(segment)

        else:
            nested = current.properties.get(segment)
            keyword = "properties"
            if nested is None:
                nested = current.all_definitions().get(segment)
                keyword = "definitions"
            if nested is None:
                raise PointerError(f'cannot resolve pointer segment "{segment}"', segment)
            current = nested
            canonical += [keyword, escape_json_pointer(segment)]

        index += 1

    return current, "/" + "/".join(canonical)


def _next_segment(parts: list[str], index: int, keyword: str) -> str:
    if index + 1 >= len(parts):
        raise PointerError(f"incomplete pointer: missing segment after /{keyword}", keyword)
    return unescape_json_pointer(parts[index + 1])


def _indexed_branch(
    schema: SchemaDocument, keyword: str, raw_index: str
) -> tuple[SchemaDocument, int]:
    branches = {"allOf": schema.all_of, "anyOf": schema.any_of, "oneOf": schema.one_of}[keyword]
    try:
        position = int(raw_index)
    except ValueError:
        raise PointerError(f'invalid array index "{raw_index}" in /{keyword}', raw_index) from None
    branches = branches or ()
    if position < 0 or position >= len(branches):
        raise PointerError(
            f"index {position} out of range for /{keyword} (len={len(branches)})", raw_index
        )
    return branches[position], position
