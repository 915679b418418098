"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from pkgspec_typegen.type_mapping.type_graph import DEFAULT_OUTPUT_UNIT

from .runtime_settings import DEFAULT_ENTRY_POINTS, EntryPoint, GeneratorConfig


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> GeneratorConfig:
    """Load and validate the configuration file.

    Relative ``schema_dir`` and ``augment`` paths resolve against the
    directory holding the configuration file.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    schema_dir = _resolve_path(
        path.parent, _require_non_empty_string(parsed.get("schema_dir"), "schema_dir")
    )
    if not schema_dir.is_dir():
        raise ConfigurationError(f"Schema directory not found: {schema_dir}")

    augment_path = None
    augment_value = _optional_string(parsed.get("augment"), "augment")
    if augment_value is not None:
        augment_path = _resolve_path(path.parent, augment_value)
        if not augment_path.exists():
            raise ConfigurationError(f"Augment file not found: {augment_path}")

    return GeneratorConfig(
        path=path,
        schema_dir=schema_dir,
        augment_path=augment_path,
        entry_points=_parse_entry_points(parsed.get("entry_points")),
        spec_version=_optional_string(parsed.get("spec_version"), "spec_version"),
        default_output_unit=_optional_string(
            parsed.get("default_output_unit"), "default_output_unit"
        )
        or DEFAULT_OUTPUT_UNIT,
    )


def _parse_entry_points(value: Any) -> tuple[EntryPoint, ...]:
    if value is None:
        return DEFAULT_ENTRY_POINTS
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError("entry_points must be a list of mappings.")
    if not value:
        raise ConfigurationError("entry_points must contain at least one entry.")

    entry_points = []
    seen_paths: set[str] = set()
    for index, item in enumerate(value):
        label = f"entry_points[{index}]"
        section = _require_mapping(item, label)
        schema_path = _require_non_empty_string(section.get("path"), f"{label}.path")
        type_name = _require_non_empty_string(section.get("type"), f"{label}.type")
        if schema_path in seen_paths:
            raise ConfigurationError(f"{label}.path '{schema_path}' is listed more than once.")
        seen_paths.add(schema_path)
        entry_points.append(EntryPoint(schema_path=schema_path, type_name=type_name))
    return tuple(entry_points)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if value is None:
        raise ConfigurationError(f"{field_name} is required.")
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
