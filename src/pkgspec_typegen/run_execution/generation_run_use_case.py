"""Generation run use-case service."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from pathlib import Path

from pkgspec_typegen.augmentation import (
    AugmentationConfigError,
    AugmentConfig,
    apply_augmentations,
    apply_base_types,
    load_augmentations,
)
from pkgspec_typegen.configuration import ConfigurationError, GeneratorConfig, load_configuration
from pkgspec_typegen.results_writing import write_type_graph
from pkgspec_typegen.schema_management import SchemaError, SchemaRegistry
from pkgspec_typegen.type_mapping import DEFAULT_OUTPUT_UNIT, TypeMapper, TypeNode
from pkgspec_typegen.validation import NamingCollisionError, validate_type_graph

from .run_contracts import GenerationOutcome, GenerationRequest

_LOGGER = logging.getLogger(__name__)

_SPEC_VERSION_MARKER = "package-spec/"


class GenerationRunError(Exception):
    """Raised when a generation run cannot be completed."""


def execute_generation_run(request: GenerationRequest) -> GenerationOutcome:
    """Resolve the configured schema tree into an augmented, validated type graph."""
    config = _load_configuration(request.config_path)
    augmentations = _load_augmentations(config)

    registry = SchemaRegistry(config.schema_dir)
    mapper = TypeMapper(registry)
    for entry_point in config.entry_points:
        mapper.register_entry_point(entry_point.schema_path, entry_point.type_name)
    for entry_point in config.entry_points:
        try:
            mapper.process_entry_point(entry_point.schema_path)
        except SchemaError as exc:
            raise GenerationRunError(f"processing {entry_point.schema_path}: {exc}") from exc

    spec_version = config.spec_version or _detect_spec_version(registry)

    types = mapper.types_by_name()
    apply_augmentations(types, augmentations)
    apply_base_types(types, augmentations)
    _assign_output_units(types, config.default_output_unit)

    try:
        validate_type_graph(types)
    except NamingCollisionError as exc:
        raise GenerationRunError(str(exc)) from exc

    nodes = tuple(mapper.types())
    _LOGGER.info("resolved %d types for package-spec %s", len(nodes), spec_version)

    output_path = None
    if request.output_path:
        try:
            output_path = write_type_graph(request.output_path, nodes, spec_version)
        except OSError as exc:
            raise GenerationRunError(f"writing {request.output_path}: {exc}") from exc

    return GenerationOutcome(
        nodes=nodes,
        types=types,
        spec_version=spec_version,
        output_path=output_path,
    )


def extract_spec_version(schema_id: str) -> str:
    """Return the version segment following ``package-spec/`` in a schema ``$id``.

    ``https://schemas.elastic.dev/package-spec/3.5.7/integration/manifest`` gives
    ``3.5.7``; an ``$id`` without the marker gives an empty string.
    """
    _, marker, rest = schema_id.partition(_SPEC_VERSION_MARKER)
    if not marker:
        return ""
    version, _, _ = rest.partition("/")
    return version


def _load_configuration(config_path: str) -> GeneratorConfig:
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise GenerationRunError(str(exc)) from exc


def _load_augmentations(config: GeneratorConfig) -> AugmentConfig | None:
    if config.augment_path is None:
        return None
    try:
        return load_augmentations(config.augment_path)
    except AugmentationConfigError as exc:
        raise GenerationRunError(f"loading augmentations: {exc}") from exc


def _detect_spec_version(registry: SchemaRegistry) -> str:
    for schema in registry.loaded_schemas().values():
        version = extract_spec_version(schema.schema_id)
        if version:
            return version
    raise GenerationRunError(
        "could not determine spec version: set spec_version in the configuration "
        "or ensure the schemas carry a $id with a version"
    )


def _assign_output_units(types: MutableMapping[str, TypeNode], default_unit: str) -> None:
    for node in types.values():
        if node.output_unit == DEFAULT_OUTPUT_UNIT:
            node.output_unit = default_unit
