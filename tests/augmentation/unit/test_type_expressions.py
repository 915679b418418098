"""Type expression parser tests."""

from __future__ import annotations

import pytest
from pkgspec_typegen.augmentation.type_expressions import parse_type_expression


@pytest.mark.parametrize(
    "expression",
    [
        "any",
        "string",
        "int",
        "int64",
        "bool",
        "float64",
        "*bool",
        "[]string",
        "map[string]any",
        "map[string][]string",
        "*MyType",
        "[]MyType",
        "[]*Item",
        "map[string]map[string]int",
        "time.Time",
        "*time.Duration",
    ],
)
def test_expression_renders_back_to_itself(expression: str) -> None:
    assert parse_type_expression(expression).render() == expression


def test_builtin_and_named_types_are_distinguished() -> None:
    builtin = parse_type_expression("string")
    named = parse_type_expression("Owner")

    assert builtin.builtin == "string"
    assert builtin.named == ""
    assert named.named == "Owner"
    assert named.builtin == ""


def test_qualified_name_keeps_its_qualifier() -> None:
    reference = parse_type_expression("time.Time")

    assert reference.named == "Time"
    assert reference.qualifier == "time"
    assert reference.named_references() == []


def test_map_parts_are_parsed_recursively() -> None:
    reference = parse_type_expression("map[string][]Item")

    assert reference.is_map
    assert reference.map_key is not None and reference.map_key.builtin == "string"
    assert reference.map_value is not None and reference.map_value.is_sequence
    assert reference.named_references() == ["Item"]


@pytest.mark.parametrize("expression", ["", "   ", "map[string"])
def test_empty_or_unbalanced_input_is_untyped(expression: str) -> None:
    assert parse_type_expression(expression).is_any
