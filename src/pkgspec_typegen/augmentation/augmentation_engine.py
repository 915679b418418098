"""Application of the augmentation overlay to a resolved type graph.

Both passes mutate the name index in place. Type augmentations run in sorted
order of their configured keys. Keys always name types as the mapper
produced them, so chained renames such as ``A -> B`` together with
``B -> C`` leave original ``A`` as ``B`` and original ``B`` as ``C``.
Type expressions in field overrides and extra fields read the same way.
References are retargeted by node identity, never by name matching, so a
rename never captures references that belonged to another type.

The metadata embedding inserted by base-type extraction names
``FileMetadata``, which is not part of the graph: it is a hand-written type
supplied next to the generated code.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, MutableMapping

from pkgspec_typegen.type_mapping.type_graph import (
    DEFAULT_OUTPUT_UNIT,
    FieldNode,
    TypeKind,
    TypeNode,
    TypeReference,
)

from .augment_models import AugmentConfig, BaseTypeSpec, TypeAugmentation
from .type_expressions import parse_type_expression

_LOGGER = logging.getLogger(__name__)

METADATA_FIELD_NAME = "FileMetadata"
_SKIPPED_WIRE_KEYS = {"json": "-", "yaml": "-"}

TypeIndex = MutableMapping[str, TypeNode]
_ReferenceTargets = list[tuple[TypeReference, TypeNode]]


def apply_augmentations(types: TypeIndex, config: AugmentConfig | None) -> None:
    """Apply renames, doc overrides, field overrides and extra fields."""
    if config is None:
        return

    snapshot = dict(types)
    configured = sorted(config.types)
    targets = _reference_targets(snapshot)
    displaced: list[TypeNode] = []

    for type_name in configured:
        node = snapshot.get(type_name)
        if node is None:
            _LOGGER.debug("augmentation for unknown type %s ignored", type_name)
            continue
        augmentation = config.types[type_name]

        if augmentation.name and augmentation.name != node.name:
            replaced = _rename(types, node, augmentation.name, targets)
            if replaced is not None:
                displaced.append(replaced)

        if augmentation.doc:
            node.doc = augmentation.doc
        _apply_field_overrides(node, augmentation, snapshot, targets)
        _append_extra_fields(node, augmentation, snapshot, targets)

    installed = {id(node) for node in types.values()}
    for node in displaced:
        if id(node) not in installed:
            _LOGGER.warning("type %s was replaced by a rename and left the index", node.name)


def apply_base_types(types: TypeIndex, config: AugmentConfig | None) -> None:
    """Factor shared fields out of source types into the configured base types."""
    if config is None:
        return
    for base_name in sorted(config.base_types):
        _extract_base_type(types, config.base_types[base_name])


def _rename(
    types: TypeIndex,
    node: TypeNode,
    new_name: str,
    targets: _ReferenceTargets,
) -> TypeNode | None:
    old_name = node.name
    if types.get(old_name) is node:
        del types[old_name]
    replaced = types.get(new_name)
    node.name = new_name
    types[new_name] = node

    for reference, target in targets:
        if target is node:
            reference.named = new_name

    if node.kind is TypeKind.ENUMERATION:
        for constant in node.enum_constants:
            if constant.identifier.startswith(old_name):
                constant.identifier = new_name + constant.identifier[len(old_name) :]

    _LOGGER.debug("renamed type %s to %s", old_name, new_name)
    return replaced if replaced is not node else None


def _reference_targets(snapshot: Mapping[str, TypeNode]) -> _ReferenceTargets:
    targets: _ReferenceTargets = []
    for node in snapshot.values():
        for root in node.references():
            targets.extend(_bind_references(root, snapshot))
    return targets


def _bind_references(root: TypeReference, snapshot: Mapping[str, TypeNode]) -> _ReferenceTargets:
    """Pair every graph-local named reference under ``root`` with the node it names."""
    bound: _ReferenceTargets = []
    for reference in root.walk():
        if not reference.named or reference.qualifier:
            continue
        target = snapshot.get(reference.named)
        if target is not None:
            bound.append((reference, target))
    return bound


def _parse_bound_expression(
    text: str, snapshot: Mapping[str, TypeNode], targets: _ReferenceTargets
) -> TypeReference:
    """Parse a configured type expression and track its references for later renames.

    Names already renamed by an earlier augmentation are rewritten on the spot.
    Names the graph did not contain before augmentation are kept verbatim.
    """
    reference = parse_type_expression(text)
    for nested, target in _bind_references(reference, snapshot):
        nested.named = target.name
        targets.append((nested, target))
    return reference


def _apply_field_overrides(
    node: TypeNode,
    augmentation: TypeAugmentation,
    snapshot: Mapping[str, TypeNode],
    targets: _ReferenceTargets,
) -> None:
    for source_key, override in augmentation.fields.items():
        target = node.field_by_source_key(source_key)
        if target is None:
            _LOGGER.debug("field override %s.%s matches no field", node.name, source_key)
            continue
        if override.name:
            target.name = override.name
        if override.doc:
            target.doc = override.doc
        if override.type:
            target.type = _parse_bound_expression(override.type, snapshot, targets)


def _append_extra_fields(
    node: TypeNode,
    augmentation: TypeAugmentation,
    snapshot: Mapping[str, TypeNode],
    targets: _ReferenceTargets,
) -> None:
    for extra in augmentation.extra_fields:
        node.fields.append(
            FieldNode(
                name=extra.name,
                source_key=extra.json,
                doc=extra.doc,
                type=_parse_bound_expression(extra.type, snapshot, targets),
                wire_keys=extra.wire_keys,
            )
        )


def _extract_base_type(types: TypeIndex, spec: BaseTypeSpec) -> None:
    if not spec.sources or not spec.fields:
        _LOGGER.debug("base type %s has no sources or fields; skipped", spec.name)
        return
    first_source = types.get(spec.sources[0])
    if first_source is None:
        _LOGGER.debug("base type %s: source %s not found; skipped", spec.name, spec.sources[0])
        return

    extracted = set(spec.fields)
    base = TypeNode(
        name=spec.name,
        kind=TypeKind.RECORD,
        doc=spec.doc,
        output_unit=spec.output_file or DEFAULT_OUTPUT_UNIT,
    )
    base.fields = [
        copy.deepcopy(candidate)
        for candidate in first_source.fields
        if candidate.source_key in extracted
    ]
    if spec.embed_meta:
        # The base only embeds the metadata; custom decoding stays with the sources.
        base.fields.insert(
            0,
            FieldNode(
                name=METADATA_FIELD_NAME,
                source_key="",
                type=TypeReference.named_type(METADATA_FIELD_NAME),
                embedded=True,
                wire_keys=dict(_SKIPPED_WIRE_KEYS),
            ),
        )
    if spec.name in types:
        _LOGGER.warning("base type %s replaces an existing type of the same name", spec.name)
    types[spec.name] = base

    for source_name in spec.sources:
        source = types.get(source_name)
        if source is None:
            _LOGGER.debug("base type %s: source %s not found", spec.name, source_name)
            continue
        source.fields = [
            candidate for candidate in source.fields if candidate.source_key not in extracted
        ]
        if source.embed_metadata:
            source.embed_metadata = False
            source.needs_custom_decode = True
        source.fields.insert(
            0,
            FieldNode(
                name=spec.name,
                source_key="",
                type=TypeReference.named_type(spec.name),
                embedded=True,
            ),
        )
    _LOGGER.debug("extracted base type %s from %s", spec.name, ", ".join(spec.sources))
