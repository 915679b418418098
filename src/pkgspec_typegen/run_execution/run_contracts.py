"""Run execution entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pkgspec_typegen.type_mapping.type_graph import TypeNode


@dataclass(frozen=True)
class GenerationRequest:
    """Input contract for executing one generation run."""

    config_path: str
    output_path: str | None = None


@dataclass(frozen=True)
class GenerationOutcome:
    """Output contract for one completed generation run."""

    nodes: tuple[TypeNode, ...]
    types: Mapping[str, TypeNode]
    spec_version: str
    output_path: Path | None = None
