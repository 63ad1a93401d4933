from __future__ import annotations


class SchemaDefinitionError(ValueError):
    """Raised when a schema tree or model object violates its invariants."""


class OverlapError(SchemaDefinitionError):
    """Two positional fields claim the same character window."""

    def __init__(self, record_type: str, first: str, second: str):
        self.record_type = record_type
        self.first = first
        self.second = second
        super().__init__(
            f"Record type '{record_type}': field '{second}' overlaps field '{first}'."
        )
