"""Type graph validation exports."""

from .graph_validator import NamingCollisionError, validate_type_graph

__all__ = ["NamingCollisionError", "validate_type_graph"]
