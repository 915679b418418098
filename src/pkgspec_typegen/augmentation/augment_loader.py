"""Augmentation overlay loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .augment_models import (
    AugmentConfig,
    BaseTypeSpec,
    ExtraField,
    FieldAugmentation,
    TypeAugmentation,
)


class AugmentationConfigError(Exception):
    """Raised when the augmentation file is missing or malformed."""


def load_augmentations(augment_path: Path | str) -> AugmentConfig:
    """Load and validate an augmentation file (``types`` and ``base_types`` sections)."""
    path = Path(augment_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AugmentationConfigError(f"reading augment config {path}: {exc}") from exc
    return parse_augmentations(text, source=str(path))


def parse_augmentations(text: str, *, source: str = "<inline>") -> AugmentConfig:
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise AugmentationConfigError(f"parsing augment config {source}: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise AugmentationConfigError("Augment config root must be a mapping.")

    types = {
        type_name: _parse_type_section(section, f"types.{type_name}")
        for type_name, section in _optional_mapping(parsed.get("types"), "types").items()
    }
    base_types = {
        base_name: _parse_base_type_section(base_name, section)
        for base_name, section in _optional_mapping(parsed.get("base_types"), "base_types").items()
    }
    return AugmentConfig(types=types, base_types=base_types)


def _parse_type_section(value: Any, label: str) -> TypeAugmentation:
    section = _optional_mapping(value, label)
    fields = {
        str(source_key): _parse_field_section(field_section, f"{label}.fields.{source_key}")
        for source_key, field_section in _optional_mapping(
            section.get("fields"), f"{label}.fields"
        ).items()
    }
    extra_fields = tuple(
        _parse_extra_field(item, f"{label}.extra_fields[{index}]")
        for index, item in enumerate(_optional_list(section.get("extra_fields"), label))
    )
    return TypeAugmentation(
        name=_optional_string(section.get("name"), f"{label}.name"),
        doc=_optional_string(section.get("doc"), f"{label}.doc"),
        fields=fields,
        extra_fields=extra_fields,
    )


def _parse_field_section(value: Any, label: str) -> FieldAugmentation:
    section = _optional_mapping(value, label)
    return FieldAugmentation(
        name=_optional_string(section.get("name"), f"{label}.name"),
        doc=_optional_string(section.get("doc"), f"{label}.doc"),
        type=_optional_string(section.get("type"), f"{label}.type"),
    )


def _parse_extra_field(value: Any, label: str) -> ExtraField:
    section = _optional_mapping(value, label)
    name = _optional_string(section.get("name"), f"{label}.name")
    if not name:
        raise AugmentationConfigError(f"{label}.name is required.")
    return ExtraField(
        name=name,
        type=_optional_string(section.get("type"), f"{label}.type") or "any",
        doc=_optional_string(section.get("doc"), f"{label}.doc"),
        json=_optional_string(section.get("json"), f"{label}.json"),
        yaml=_optional_string(section.get("yaml"), f"{label}.yaml"),
    )


def _parse_base_type_section(base_name: str, value: Any) -> BaseTypeSpec:
    label = f"base_types.{base_name}"
    section = _optional_mapping(value, label)
    return BaseTypeSpec(
        name=str(base_name),
        doc=_optional_string(section.get("doc"), f"{label}.doc"),
        embed_meta=_optional_bool(section.get("embed_meta"), f"{label}.embed_meta"),
        output_file=_optional_string(section.get("output_file"), f"{label}.output_file"),
        sources=_string_list(section.get("sources"), f"{label}.sources"),
        fields=_string_list(section.get("fields"), f"{label}.fields"),
    )


def _optional_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise AugmentationConfigError(f"{label} must be a mapping.")
    return value


def _optional_list(value: Any, label: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise AugmentationConfigError(f"{label}.extra_fields must be a list.")
    return value


def _optional_string(value: Any, label: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AugmentationConfigError(f"{label} must be a string.")
    return value.strip()


def _optional_bool(value: Any, label: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise AugmentationConfigError(f"{label} must be a boolean.")
    return value


def _string_list(value: Any, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise AugmentationConfigError(f"{label} must be a list of strings.")
    normalized = []
    for item in value:
        if not isinstance(item, str):
            raise AugmentationConfigError(f"{label} entries must be strings.")
        stripped = item.strip()
        if stripped:
            normalized.append(stripped)
    return tuple(normalized)
