"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pkgspec_typegen.type_mapping.type_graph import DEFAULT_OUTPUT_UNIT


@dataclass(frozen=True)
class EntryPoint:
    """Schema file whose root becomes a top-level type."""

    schema_path: str
    type_name: str


DEFAULT_ENTRY_POINTS: tuple[EntryPoint, ...] = (
    EntryPoint("integration/manifest.jsonschema.json", "IntegrationManifest"),
    EntryPoint("input/manifest.jsonschema.json", "InputManifest"),
    EntryPoint("content/manifest.jsonschema.json", "ContentManifest"),
    EntryPoint("integration/data_stream/manifest.jsonschema.json", "DataStreamManifest"),
    EntryPoint("integration/data_stream/fields/fields.jsonschema.json", "Fields"),
    EntryPoint("integration/changelog.jsonschema.json", "Changelog"),
    EntryPoint("integration/validation.jsonschema.json", "Validation"),
    EntryPoint(
        "integration/elasticsearch/transform/manifest.jsonschema.json", "TransformManifest"
    ),
    EntryPoint("integration/elasticsearch/transform/transform.jsonschema.json", "Transform"),
    EntryPoint("integration/kibana/tags.jsonschema.json", "Tags"),
    EntryPoint("integration/data_stream/lifecycle.jsonschema.json", "Lifecycle"),
    EntryPoint("integration/elasticsearch/pipeline.jsonschema.json", "IngestPipeline"),
    EntryPoint("integration/data_stream/routing_rules.jsonschema.json", "RoutingRules"),
    EntryPoint("integration/_dev/build/build.jsonschema.json", "BuildManifest"),
    EntryPoint("integration/_dev/test/config.jsonschema.json", "TestConfig"),
    EntryPoint("input/_dev/test/config.jsonschema.json", "InputTestConfig"),
    EntryPoint(
        "integration/data_stream/_dev/test/pipeline/common_config.jsonschema.json",
        "PipelineTestCommonConfig",
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/pipeline/config_json.jsonschema.json",
        "PipelineTestJSONConfig",
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/pipeline/config_raw.jsonschema.json",
        "PipelineTestRawConfig",
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/pipeline/event.jsonschema.json", "PipelineTestEvent"
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/pipeline/expected.jsonschema.json",
        "PipelineTestExpected",
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/policy/config.jsonschema.json", "PolicyTestConfig"
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/static/config.jsonschema.json", "StaticTestConfig"
    ),
    EntryPoint(
        "integration/data_stream/_dev/test/system/config.jsonschema.json", "SystemTestConfig"
    ),
)


@dataclass(frozen=True)
class GeneratorConfig:
    """Top-level configuration aggregate for one generation run."""

    path: Path
    schema_dir: Path
    augment_path: Path | None = None
    entry_points: tuple[EntryPoint, ...] = DEFAULT_ENTRY_POINTS
    spec_version: str | None = None
    default_output_unit: str = DEFAULT_OUTPUT_UNIT
