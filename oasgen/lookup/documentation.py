"""Documentation lookups used to fill schema and property descriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class DocumentationSource(Protocol):
    def has_type(self, type_identity: str) -> bool: ...

    def description(self, type_identity: str) -> str | None: ...

    def field_description(self, type_identity: str, field_name: str) -> str | None: ...

    def enum_value_description(self, type_identity: str, literal: str) -> str | None: ...


class NoDocumentation:
    """Documentation source that knows nothing."""

    def has_type(self, type_identity: str) -> bool:
        return False

    def description(self, type_identity: str) -> str | None:
        return None

    def field_description(self, type_identity: str, field_name: str) -> str | None:
        return None

    def enum_value_description(self, type_identity: str, literal: str) -> str | None:
        return None


@dataclass
class TypeDocumentation:
    description: str | None = None
    fields: dict[str, str] = field(default_factory=dict)
    enum_values: dict[str, str] = field(default_factory=dict)


class MappingDocumentation:
    """Documentation held in plain dictionaries, keyed by type identity."""

    def __init__(self, types: dict[str, TypeDocumentation] | None = None):
        self._types: dict[str, TypeDocumentation] = dict(types or {})

    def document(
        self,
        type_identity: str,
        description: str | None = None,
        fields: dict[str, str] | None = None,
        enum_values: dict[str, str] | None = None,
    ) -> TypeDocumentation:
        """Add documentation for a type, merging with what is already known."""
        doc = self._types.setdefault(type_identity, TypeDocumentation())
        if description is not None:
            doc.description = description
        doc.fields.update(fields or {})
        doc.enum_values.update(enum_values or {})
        return doc

    def has_type(self, type_identity: str) -> bool:
        return type_identity in self._types

    def description(self, type_identity: str) -> str | None:
        doc = self._types.get(type_identity)
        return doc.description if doc else None

    def field_description(self, type_identity: str, field_name: str) -> str | None:
        doc = self._types.get(type_identity)
        return doc.fields.get(field_name) if doc else None

    def enum_value_description(self, type_identity: str, literal: str) -> str | None:
        doc = self._types.get(type_identity)
        return doc.enum_values.get(literal) if doc else None
