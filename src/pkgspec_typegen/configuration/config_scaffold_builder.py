"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "typegen.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Generator configuration template for pkgspec-typegen.
# Replace every <REQUIRED> placeholder before running resolve.
# Uncomment the optional keys only when your setup needs them.

# Directory holding the package-spec jsonschema/ tree, relative to this file.
schema_dir: "<REQUIRED>"

# Augmentation overlay with `types` and `base_types` sections.
# augment: "augment.yml"

# Package-spec version; detected from the schemas' $id when omitted.
# spec_version: "3.5.7"

# Output unit assigned to every type without an explicit one.
# default_output_unit: "types.go"

# Entry-point schemas and the type name given to each root.
# The standard package-spec entry points are used when omitted.
# entry_points:
#   - path: "integration/manifest.jsonschema.json"
#     type: "IntegrationManifest"
#   - path: "integration/changelog.jsonschema.json"
#     type: "Changelog"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML generator configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
