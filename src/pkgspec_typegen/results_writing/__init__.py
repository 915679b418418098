"""Results writing exports."""

from .type_graph_writer import type_graph_to_dict, write_type_graph

__all__ = ["type_graph_to_dict", "write_type_graph"]
