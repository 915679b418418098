"""Augmentation overlay entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldAugmentation:
    """Overrides for one field, keyed by its source property name."""

    name: str = ""
    doc: str = ""
    type: str = ""


@dataclass(frozen=True)
class ExtraField:
    """Field injected verbatim into a type."""

    name: str
    type: str
    doc: str = ""
    json: str = ""
    yaml: str = ""

    @property
    def wire_keys(self) -> dict[str, str]:
        keys = {"json": self.json, "yaml": self.yaml}
        return {encoding: key for encoding, key in keys.items() if key}


@dataclass(frozen=True)
class TypeAugmentation:
    """Overrides for one generated type."""

    name: str = ""
    doc: str = ""
    fields: Mapping[str, FieldAugmentation] = field(default_factory=dict)
    extra_fields: tuple[ExtraField, ...] = ()


@dataclass(frozen=True)
class BaseTypeSpec:
    """Shared base type factored out of several source types."""

    name: str
    sources: tuple[str, ...]
    fields: tuple[str, ...]
    doc: str = ""
    embed_meta: bool = False
    output_file: str = ""


@dataclass(frozen=True)
class AugmentConfig:
    """Complete augmentation overlay."""

    types: Mapping[str, TypeAugmentation] = field(default_factory=dict)
    base_types: Mapping[str, BaseTypeSpec] = field(default_factory=dict)
