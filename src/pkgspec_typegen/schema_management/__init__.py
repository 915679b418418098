"""Schema management exports."""

from .schema_errors import RefResolutionError, SchemaError, SchemaLoadError, SchemaParseError
from .schema_models import (
    AdditionalProperties,
    SchemaDocument,
    SchemaType,
    parse_schema_node,
    parse_schema_text,
)
from .schema_registry import (
    SchemaRegistry,
    canonical_json_pointer,
    split_ref,
    walk_json_pointer,
)

__all__ = [
    "AdditionalProperties",
    "RefResolutionError",
    "SchemaDocument",
    "SchemaError",
    "SchemaLoadError",
    "SchemaParseError",
    "SchemaRegistry",
    "SchemaType",
    "canonical_json_pointer",
    "parse_schema_node",
    "parse_schema_text",
    "split_ref",
    "walk_json_pointer",
]
