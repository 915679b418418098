"""Final consistency checks over the resolved type graph."""

from __future__ import annotations

from collections.abc import Mapping

from pkgspec_typegen.type_mapping.type_graph import TypeKind, TypeNode


class NamingCollisionError(Exception):
    """Raised when two enumeration types generate the same constant identifier."""

    def __init__(self, constant: str, first_type: str, second_type: str) -> None:
        super().__init__(
            f'enum value "{constant}" conflicts between {first_type} and {second_type}'
        )
        self.constant = constant
        self.first_type = first_type
        self.second_type = second_type


def validate_type_graph(types: Mapping[str, TypeNode]) -> None:
    """Fail on enum constant identifiers shared by different enumeration types."""
    owners: dict[str, str] = {}
    for type_name in sorted(types):
        node = types[type_name]
        if node.kind is not TypeKind.ENUMERATION:
            continue
        for constant in node.enum_constants:
            existing = owners.get(constant.identifier)
            if existing is not None and existing != node.name:
                raise NamingCollisionError(constant.identifier, existing, node.name)
            owners[constant.identifier] = node.name
