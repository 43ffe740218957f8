"""Per-pass traversal state: the recursion guard and forced schema registry."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from oasgen.model.types import TypeDescription


class RecursionGuard:
    """Signatures seen during one generation pass."""

    def __init__(self):
        self._signatures: set[str] = set()

    def add(self, signature: str) -> bool:
        """Record ``signature``; return False if it had already been seen."""
        if signature in self._signatures:
            return False
        self._signatures.add(signature)
        return True

    def __contains__(self, signature: object) -> bool:
        return signature in self._signatures

    def __len__(self) -> int:
        return len(self._signatures)


class AdditionalSchemaRegistry:
    """Types forced out of line by the recursion guard.

    Entries are emitted as standalone component schemas once the main
    traversal is done. ``drain`` hands out each entry exactly once, so the
    caller can loop until nothing new shows up.
    """

    def __init__(self):
        self._entries: dict[str, TypeDescription] = {}
        self._drained = 0

    def add(self, key: str, description: TypeDescription) -> bool:
        """Register ``description`` under ``key`` unless the key is taken."""
        if key in self._entries:
            return False
        self._entries[key] = description
        return True

    def drain(self) -> list[tuple[str, TypeDescription]]:
        """Entries registered since the previous drain, in insertion order."""
        pending = list(self._entries.items())[self._drained :]
        self._drained = len(self._entries)
        return pending

    def get(self, key: str) -> TypeDescription | None:
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class GenerationPass:
    """State shared by every recursive call of one generation pass.

    Create one per top-level generation call and never share it between
    passes or threads.
    """

    guard: RecursionGuard = field(default_factory=RecursionGuard)
    registry: AdditionalSchemaRegistry = field(default_factory=AdditionalSchemaRegistry)
    # Plain objects and enums emitted as $ref, keyed by schema name
    references: AdditionalSchemaRegistry = field(default_factory=AdditionalSchemaRegistry)
    # Field edges currently being expanded inline, with their nesting count
    expanding: Counter[tuple[str, str, str]] = field(default_factory=Counter)


@dataclass(frozen=True)
class DeclaringContext:
    """The field through which a nested type is reached."""

    declaring: TypeDescription
    field_name: str

    def signature(self, inner: TypeDescription) -> str:
        return f"{self.declaring.simple_name}_{self.field_name}_{inner.signature}"

    def forced_key(self, inner: TypeDescription) -> str:
        return f"{self.declaring.simple_name}_{inner.recursive_suffix}"

    def edge(self, inner: TypeDescription) -> tuple[str, str, str]:
        """The field edge regardless of type arguments: declaring type, field, inner type."""
        return (self.declaring.identity, self.field_name, inner.identity)
