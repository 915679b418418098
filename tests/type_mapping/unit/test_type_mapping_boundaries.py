"""Boundary tests for the resolution core's internal dependencies."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_resolution_core_does_not_import_outer_layers() -> None:
    package_dir = _project_root() / "src" / "pkgspec_typegen"
    core_modules = (
        package_dir / "schema_management" / "schema_models.py",
        package_dir / "schema_management" / "schema_registry.py",
        package_dir / "type_mapping" / "type_graph.py",
        package_dir / "type_mapping" / "type_mapper.py",
        package_dir / "type_mapping" / "naming.py",
    )
    forbidden_import_fragments = (
        "pkgspec_typegen.augmentation",
        "pkgspec_typegen.configuration",
        "pkgspec_typegen.run_execution",
        "pkgspec_typegen.cli",
        "yaml",
        "click",
    )

    for module_path in core_modules:
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert f"import {fragment}" not in text and f"from {fragment}" not in text, (
                f"Forbidden core dependency in {module_path}: {fragment}"
            )
