"""Field constraint lookups (required flag and length bounds)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class FieldConstraints:
    """Validation rules attached to one field.

    ``required`` is True only when the field carries a not-null rule.
    """

    required: bool = False
    min_length: int | None = None
    max_length: int | None = None


NO_CONSTRAINTS = FieldConstraints()


class ConstraintSource(Protocol):
    def constraints_for(self, type_identity: str, field_name: str) -> FieldConstraints: ...


class NoConstraints:
    def constraints_for(self, type_identity: str, field_name: str) -> FieldConstraints:
        return NO_CONSTRAINTS


class MappingConstraints:
    """Constraints held in a dictionary keyed by (type identity, field name)."""

    def __init__(self, constraints: dict[tuple[str, str], FieldConstraints] | None = None):
        self._constraints: dict[tuple[str, str], FieldConstraints] = dict(constraints or {})

    def set(self, type_identity: str, field_name: str, constraints: FieldConstraints) -> None:
        self._constraints[(type_identity, field_name)] = constraints

    def constraints_for(self, type_identity: str, field_name: str) -> FieldConstraints:
        return self._constraints.get((type_identity, field_name), NO_CONSTRAINTS)
