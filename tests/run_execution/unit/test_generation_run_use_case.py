"""Generation run use-case tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pkgspec_typegen.run_execution.generation_run_use_case import (
    GenerationRunError,
    execute_generation_run,
    extract_spec_version,
)
from pkgspec_typegen.run_execution.run_contracts import GenerationRequest

_SPEC_ID = "https://schemas.elastic.dev/package-spec/3.5.7/integration/manifest.jsonschema.json"


def _write_json(path: Path, document: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")


def _write_config(tmp_path: Path, extra: str = "") -> Path:
    config_path = tmp_path / "typegen.yaml"
    config_path.write_text(
        "schema_dir: jsonschema\n"
        "entry_points:\n"
        "  - path: integration/manifest.jsonschema.json\n"
        "    type: IntegrationManifest\n"
        "  - path: input/manifest.jsonschema.json\n"
        "    type: InputManifest\n" + extra,
        encoding="utf-8",
    )
    return config_path


def _write_schema_tree(tmp_path: Path, *, with_id: bool = True) -> None:
    schema_dir = tmp_path / "jsonschema"
    integration: dict[str, object] = {
        "type": "object",
        "required": ["name"],
        "properties": {
            "name": {"type": "string"},
            "format_version": {"type": "string"},
            "owner": {"$ref": "../common.json#/definitions/owner"},
        },
    }
    if with_id:
        integration["$id"] = _SPEC_ID
    _write_json(schema_dir / "integration" / "manifest.jsonschema.json", integration)
    _write_json(
        schema_dir / "input" / "manifest.jsonschema.json",
        {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "format_version": {"type": "string"},
                "owner": {"$ref": "../common.json#/definitions/owner"},
                "type": {"type": "string", "enum": ["logs", "metrics"]},
            },
        },
    )
    _write_json(
        schema_dir / "common.json",
        {
            "definitions": {
                "owner": {
                    "type": "object",
                    "properties": {
                        "github": {"type": "string"},
                        "type": {"type": "string", "enum": ["elastic", "partner"]},
                    },
                }
            }
        },
    )


def test_run_resolves_entry_points_and_detects_spec_version(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)

    outcome = execute_generation_run(GenerationRequest(config_path=str(_write_config(tmp_path))))

    assert outcome.spec_version == "3.5.7"
    assert [node.name for node in outcome.nodes] == [
        "InputManifest",
        "InputManifestType",
        "IntegrationManifest",
        "Owner",
        "OwnerType",
    ]
    assert set(outcome.types) == {node.name for node in outcome.nodes}
    assert outcome.output_path is None
    assert all(node.output_unit == "types.go" for node in outcome.nodes)


def test_run_applies_augmentations_and_base_types(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)
    (tmp_path / "augment.yml").write_text(
        """
types:
  OwnerType:
    name: OwnerKind
  InputManifestType:
    name: InputType
base_types:
  BaseManifest:
    embed_meta: true
    output_file: manifest.go
    sources: [IntegrationManifest, InputManifest]
    fields: [format_version, name]
""",
        encoding="utf-8",
    )
    config_path = _write_config(
        tmp_path, "augment: augment.yml\ndefault_output_unit: model.go\n"
    )

    outcome = execute_generation_run(GenerationRequest(config_path=str(config_path)))

    assert sorted(outcome.types) == [
        "BaseManifest",
        "InputManifest",
        "InputType",
        "IntegrationManifest",
        "Owner",
        "OwnerKind",
    ]
    owner = outcome.types["Owner"]
    assert owner.field_by_source_key("type").type.render() == "OwnerKind"
    assert outcome.types["BaseManifest"].output_unit == "manifest.go"
    assert outcome.types["Owner"].output_unit == "model.go"
    integration = outcome.types["IntegrationManifest"]
    assert [candidate.name for candidate in integration.fields] == ["BaseManifest", "Owner"]
    assert integration.needs_custom_decode is True


def test_configured_spec_version_wins(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path, with_id=False)
    config_path = _write_config(tmp_path, "spec_version: 9.9.9\n")

    outcome = execute_generation_run(GenerationRequest(config_path=str(config_path)))

    assert outcome.spec_version == "9.9.9"


def test_missing_spec_version_fails(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path, with_id=False)

    with pytest.raises(GenerationRunError, match="could not determine spec version"):
        execute_generation_run(GenerationRequest(config_path=str(_write_config(tmp_path))))


def test_entry_point_errors_name_the_entry_point(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)
    (tmp_path / "jsonschema" / "common.json").unlink()

    with pytest.raises(GenerationRunError) as exc_info:
        execute_generation_run(GenerationRequest(config_path=str(_write_config(tmp_path))))

    message = str(exc_info.value)
    assert message.startswith("processing integration/manifest.jsonschema.json: ")
    assert "processing field IntegrationManifest.owner" in message


def test_enum_collisions_fail_the_run(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)
    _write_json(
        tmp_path / "jsonschema" / "input" / "manifest.jsonschema.json",
        {
            "type": "object",
            "properties": {
                "mode": {"type": "string", "enum": ["read_write"]},
                "mode_read": {"type": "string", "enum": ["write"]},
            },
        },
    )

    with pytest.raises(GenerationRunError) as exc_info:
        execute_generation_run(GenerationRequest(config_path=str(_write_config(tmp_path))))

    assert str(exc_info.value) == (
        'enum value "InputManifestModeReadWrite" conflicts between '
        "InputManifestMode and InputManifestModeRead"
    )


def test_invalid_augmentations_fail_the_run(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)
    (tmp_path / "augment.yml").write_text("- not a mapping\n", encoding="utf-8")
    config_path = _write_config(tmp_path, "augment: augment.yml\n")

    with pytest.raises(GenerationRunError, match="loading augmentations"):
        execute_generation_run(GenerationRequest(config_path=str(config_path)))


def test_invalid_configuration_fails_the_run(tmp_path: Path) -> None:
    with pytest.raises(GenerationRunError, match="Configuration file not found"):
        execute_generation_run(GenerationRequest(config_path=str(tmp_path / "missing.yaml")))


def test_output_path_receives_graph_description(tmp_path: Path) -> None:
    _write_schema_tree(tmp_path)
    output_path = tmp_path / "out" / "type-graph.json"

    outcome = execute_generation_run(
        GenerationRequest(config_path=str(_write_config(tmp_path)), output_path=str(output_path))
    )

    assert outcome.output_path == output_path.resolve()
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["spec_version"] == "3.5.7"
    assert [entry["name"] for entry in payload["types"]] == [node.name for node in outcome.nodes]


@pytest.mark.parametrize(
    ("schema_id", "expected"),
    [
        (_SPEC_ID, "3.5.7"),
        ("https://schemas.elastic.dev/package-spec/3.0.0", "3.0.0"),
        ("https://example.com/schemas/manifest", ""),
        ("", ""),
    ],
)
def test_extract_spec_version(schema_id: str, expected: str) -> None:
    assert extract_spec_version(schema_id) == expected
