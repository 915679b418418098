"""Identifier derivation for generated types, fields and enum constants."""

from __future__ import annotations

import posixpath

# Lowercase word -> form kept fully uppercase in identifiers.
KNOWN_ABBREVIATIONS = {
    "id": "ID",
    "ids": "IDs",
    "url": "URL",
    "urls": "URLs",
    "uri": "URI",
    "cpu": "CPU",
    "ilm": "ILM",
    "ip": "IP",
    "api": "API",
    "ssl": "SSL",
    "tls": "TLS",
    "http": "HTTP",
    "https": "HTTPS",
    "ecs": "ECS",
    "ui": "UI",
    "svg": "SVG",
    "json": "JSON",
    "yaml": "YAML",
    "xml": "XML",
    "csv": "CSV",
    "html": "HTML",
    "css": "CSS",
    "sql": "SQL",
    "tcp": "TCP",
    "udp": "UDP",
    "dns": "DNS",
    "ssh": "SSH",
    "vm": "VM",
    "os": "OS",
    "ca": "CA",
    "ttl": "TTL",
    "hbs": "HBS",
}

_SCHEMA_FILE_SUFFIXES = (".jsonschema.json", ".json")
_WORD_SEPARATORS = frozenset("_-.")
_ENUM_FALLBACK_SUFFIX = "Any"


def to_identifier(source_name: str) -> str:
    """Convert a schema name such as ``format_version`` into ``FormatVersion``.

    snake_case, kebab-case, dotted and camelCase input are all split into
    words; known abbreviations stay uppercase (``api_key`` -> ``APIKey``).
    """
    parts: list[str] = []
    for word in split_words(source_name):
        abbreviation = KNOWN_ABBREVIATIONS.get(word.lower())
        parts.append(abbreviation if abbreviation else _capitalize(word))
    return "".join(parts)


def to_type_name(schema_file: str, definition_name: str = "", parent_type: str = "") -> str:
    """Derive a type name from a definition name, or from the schema file name.

    ``integration/manifest.jsonschema.json`` yields ``Manifest``; with
    ``parent_type="Integration"`` it yields ``IntegrationManifest``.
    """
    if definition_name:
        return to_identifier(definition_name)

    base = posixpath.basename(schema_file)
    for suffix in _SCHEMA_FILE_SUFFIXES:
        base = base.removesuffix(suffix)

    name = to_identifier(base)
    if parent_type:
        name = parent_type + name
    return name


def split_words(text: str) -> list[str]:
    """Split an identifier into words at separators and case boundaries.

    An uppercase run followed by a lowercase letter ends one character early,
    so ``URLParser`` splits into ``URL`` and ``Parser``.
    """
    words: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            words.append("".join(current))
            current.clear()

    for index, char in enumerate(text):
        if char in _WORD_SEPARATORS:
            flush()
            continue
        if char.isupper():
            previous_is_lower = index > 0 and text[index - 1].islower()
            next_is_lower = index + 1 < len(text) and text[index + 1].islower()
            if current and previous_is_lower:
                flush()
            elif len(current) > 1 and next_is_lower:
                flush()
        current.append(char)
    flush()
    return words


def enum_constant_name(type_name: str, value: str) -> str:
    """Build the constant identifier for one enum literal of ``type_name``."""
    cleaned = "".join(_sanitize_enum_char(char) for char in value)
    if not cleaned:
        return type_name + _ENUM_FALLBACK_SUFFIX
    return type_name + to_identifier(cleaned)


def singularize(name: str) -> str:
    """Best-effort singular of a plural type name (``Categories`` -> ``Category``)."""
    if name.endswith("ies") and len(name) > 3:
        return name[:-3] + "y"
    if name.endswith("ses"):
        return name[:-2]
    if name.endswith("s") and not name.endswith(("ss", "us")):
        return name[:-1]
    return name


def clean_doc(text: str) -> str:
    return text.strip()


def _sanitize_enum_char(char: str) -> str:
    if char.isascii() and (char.isalnum() or char in "_-."):
        return char
    if char == "*":
        return ""
    return "_"


def _capitalize(word: str) -> str:
    if not word:
        return word
    return word[0].upper() + word[1:].lower()
