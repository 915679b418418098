"""Scenario-style integration tests for core resolution behaviors."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from pkgspec_typegen.cli import cli
from pkgspec_typegen.run_execution import GenerationRequest, execute_generation_run

_SPEC_ID = "https://schemas.elastic.dev/package-spec/3.5.7/{}"


def _write_project(
    tmp_path: Path,
    schemas: dict[str, dict],
    entry_points: list[tuple[str, str]],
    augment: str | None = None,
) -> Path:
    for relative_path, document in schemas.items():
        path = tmp_path / "jsonschema" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({"$id": _SPEC_ID.format(relative_path), **document}), encoding="utf-8"
        )
    lines = ["schema_dir: jsonschema", "entry_points:"]
    for schema_path, type_name in entry_points:
        lines.append(f"  - path: {schema_path}")
        lines.append(f"    type: {type_name}")
    if augment is not None:
        (tmp_path / "augment.yml").write_text(augment, encoding="utf-8")
        lines.append("augment: augment.yml")
    config_path = tmp_path / "typegen.yaml"
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_path


def test_enum_property_scenario_through_cli(tmp_path: Path) -> None:
    config_path = _write_project(
        tmp_path,
        {
            "item.json": {
                "type": "object",
                "properties": {
                    "color": {"type": "string", "enum": ["red", "green", "blue"]},
                },
            }
        },
        [("item.json", "Item")],
    )
    output_path = tmp_path / "type-graph.json"

    result = CliRunner().invoke(
        cli, ["resolve", "--config", str(config_path), "--output", str(output_path)]
    )

    assert result.exit_code == 0
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    item, color = payload["types"]
    assert item["name"] == "Item"
    assert [(f["name"], f["type"]) for f in item["fields"]] == [("Color", "ItemColor")]
    assert color["name"] == "ItemColor"
    assert [c["value"] for c in color["constants"]] == ["red", "green", "blue"]


def test_rename_cascade_scenario(tmp_path: Path) -> None:
    config_path = _write_project(
        tmp_path,
        {
            "holder.json": {
                "type": "object",
                "properties": {
                    "first": {"$ref": "#/definitions/a"},
                    "second": {"$ref": "#/definitions/b"},
                },
                "definitions": {
                    "a": {"type": "object", "properties": {"x": {"type": "string"}}},
                    "b": {"type": "object", "properties": {"y": {"type": "integer"}}},
                },
            }
        },
        [("holder.json", "Holder")],
        augment="types:\n  A:\n    name: B\n  B:\n    name: C\n",
    )

    outcome = execute_generation_run(GenerationRequest(config_path=str(config_path)))

    assert sorted(outcome.types) == ["B", "C", "Holder"]
    assert outcome.types["B"].field_by_source_key("x") is not None
    assert outcome.types["C"].field_by_source_key("y") is not None
    holder = outcome.types["Holder"]
    assert {f.source_key: f.type.render() for f in holder.fields} == {
        "first": "B",
        "second": "C",
    }


def test_recursive_fields_scenario(tmp_path: Path) -> None:
    config_path = _write_project(
        tmp_path,
        {
            "integration/data_stream/fields/fields.jsonschema.json": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string"},
                        "type": {"type": "string", "enum": ["keyword", "group"]},
                        "fields": {"$ref": "#"},
                    },
                },
            }
        },
        [("integration/data_stream/fields/fields.jsonschema.json", "Fields")],
    )

    outcome = execute_generation_run(GenerationRequest(config_path=str(config_path)))

    assert [node.name for node in outcome.nodes] == ["Field", "FieldType"]
    field_node = outcome.types["Field"]
    assert {f.name: f.type.render() for f in field_node.fields} == {
        "Fields": "[]Field",
        "Name": "string",
        "Type": "FieldType",
    }


def test_repeated_runs_produce_identical_descriptions(tmp_path: Path) -> None:
    config_path = _write_project(
        tmp_path,
        {
            "manifest.json": {
                "type": "object",
                "properties": {
                    "owner": {"$ref": "#/definitions/owner"},
                    "policy_templates": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {"inputs": {"type": "array"}},
                        },
                    },
                    "type": {"type": "string", "enum": ["integration", "input"]},
                },
                "definitions": {
                    "owner": {"type": "object", "properties": {"github": {"type": "string"}}}
                },
            }
        },
        [("manifest.json", "Manifest")],
    )
    first_output = tmp_path / "first.json"
    second_output = tmp_path / "second.json"

    execute_generation_run(
        GenerationRequest(config_path=str(config_path), output_path=str(first_output))
    )
    execute_generation_run(
        GenerationRequest(config_path=str(config_path), output_path=str(second_output))
    )

    assert first_output.read_bytes() == second_output.read_bytes()
