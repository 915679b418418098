"""Parser for compact type expressions used in augmentation overrides."""

from __future__ import annotations

from pkgspec_typegen.type_mapping.type_graph import TypeReference

BUILTIN_TAGS = frozenset({"any", "string", "int", "int64", "bool", "float64"})


def parse_type_expression(text: str) -> TypeReference:
    """Parse expressions such as ``any``, ``*bool``, ``[]string`` or ``map[string][]Item``.

    Prefixes nest arbitrarily. A dotted name such as ``time.Time`` becomes a
    named reference carrying its qualifier. Empty or unbalanced input yields
    an untyped reference.
    """
    expression = text.strip()

    if expression.startswith("*"):
        inner = parse_type_expression(expression[1:])
        inner.nullable = True
        return inner

    if expression.startswith("[]"):
        return TypeReference.sequence_of(parse_type_expression(expression[2:]))

    if expression.startswith("map["):
        close = _matching_bracket(expression, 3)
        if close < 0:
            return TypeReference.untyped()
        key = parse_type_expression(expression[4:close])
        value = parse_type_expression(expression[close + 1 :])
        return TypeReference.map_of(key, value)

    if expression in BUILTIN_TAGS:
        return TypeReference.scalar(expression)

    qualifier, dot, name = expression.rpartition(".")
    if dot and qualifier and name:
        return TypeReference(named=name, qualifier=qualifier)

    if expression:
        return TypeReference.named_type(expression)
    return TypeReference.untyped()


def _matching_bracket(expression: str, open_index: int) -> int:
    depth = 0
    for index in range(open_index, len(expression)):
        if expression[index] == "[":
            depth += 1
        elif expression[index] == "]":
            depth -= 1
            if depth == 0:
                return index
    return -1
