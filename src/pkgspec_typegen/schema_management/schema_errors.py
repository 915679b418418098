"""Schema loading and reference resolution errors."""

from __future__ import annotations


class SchemaError(Exception):
    """Base class for schema loading, parsing and resolution failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def add_context(self, context: str) -> None:
        """Prefix the message with the schema location that was being processed."""
        self.message = f"{context}: {self.message}"
        self.args = (self.message,)


class SchemaLoadError(SchemaError):
    """Raised when a schema file is missing or unreadable."""


class SchemaParseError(SchemaError):
    """Raised when a schema file is not a well-formed schema document."""


class RefResolutionError(SchemaError):
    """Raised when a `$ref` cannot be resolved to a schema fragment."""

    def __init__(
        self,
        detail: str,
        *,
        ref: str,
        context_file: str,
        segment: str | None = None,
    ) -> None:
        super().__init__(f'resolving $ref "{ref}" from {context_file}: {detail}')
        self.ref = ref
        self.context_file = context_file
        self.segment = segment
