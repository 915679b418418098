"""Type graph description writer service."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pkgspec_typegen.type_mapping.type_graph import FieldNode, TypeKind, TypeNode


def type_graph_to_dict(nodes: Sequence[TypeNode], spec_version: str) -> dict[str, Any]:
    """Describe the resolved graph as plain data.

    Nodes are ordered by name; fields and enum constants keep graph order.
    Type references use their compact expression form.
    """
    return {
        "spec_version": spec_version,
        "types": [_node_to_dict(node) for node in sorted(nodes, key=lambda node: node.name)],
    }


def write_type_graph(
    output_path: Path | str,
    nodes: Sequence[TypeNode],
    spec_version: str,
) -> Path:
    """Write the graph description as indented JSON and return the resolved path."""
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(type_graph_to_dict(nodes, spec_version), indent=2, ensure_ascii=False)
    destination.write_text(payload + "\n", encoding="utf-8")
    return destination.resolve()


def _node_to_dict(node: TypeNode) -> dict[str, Any]:
    described: dict[str, Any] = {
        "name": node.name,
        "kind": node.kind.value,
        "doc": node.doc,
        "schema_file": node.schema_file,
        "schema_pointer": node.schema_pointer,
        "output_unit": node.output_unit,
    }
    if node.kind is TypeKind.ENUMERATION:
        described["constants"] = [
            {"identifier": constant.identifier, "value": constant.value}
            for constant in node.enum_constants
        ]
    else:
        described["fields"] = [_field_to_dict(candidate) for candidate in node.fields]
    if node.alias_of is not None:
        described["alias_of"] = node.alias_of.render()
    if node.embed_metadata:
        described["embed_metadata"] = True
    if node.needs_custom_decode:
        described["needs_custom_decode"] = True
    return described


def _field_to_dict(candidate: FieldNode) -> dict[str, Any]:
    described: dict[str, Any] = {
        "name": candidate.name,
        "source_key": candidate.source_key,
        "type": candidate.type.render(),
        "required": candidate.required,
    }
    if candidate.doc:
        described["doc"] = candidate.doc
    if candidate.embedded:
        described["embedded"] = True
    if candidate.wire_keys:
        described["wire_keys"] = dict(sorted(candidate.wire_keys.items()))
    return described
