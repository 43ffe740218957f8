"""One-shot generation of the components.schemas section for a set of root types."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from oasgen.builder.recursion import GenerationPass
from oasgen.builder.schema_builder import SchemaBuilder
from oasgen.errors import TypeGraphError
from oasgen.lookup.constraints import ConstraintSource
from oasgen.lookup.documentation import DocumentationSource
from oasgen.model.catalog import TypeIntrospector
from oasgen.model.types import Kind, TypeDescription, TypeExpr
from oasgen.schemas.openapi import Schema

logger = logging.getLogger(__name__)


class DocumentGenerator:
    """Generates named component schemas for root types.

    Every ``generate`` call is an independent pass with its own recursion
    guard and registry, so one generator can serve several documents.
    """

    def __init__(
        self,
        introspector: TypeIntrospector,
        documentation: DocumentationSource | None = None,
        constraints: ConstraintSource | None = None,
        reference_prefix: str | None = None,
        include_referenced: bool = True,
        max_generic_nesting: int | None = None,
    ):
        self.introspector = introspector
        self.include_referenced = include_referenced
        self.builder = SchemaBuilder(introspector, documentation, constraints, reference_prefix, max_generic_nesting)

    def generate(self, roots: Iterable[TypeExpr | TypeDescription]) -> dict[str, Schema]:
        """Build one schema per object type in ``roots``, plus any forced by recursion.

        Collections and maps among the roots contribute the object types they
        contain. Primitives have no components entry and are skipped. With
        ``include_referenced`` every object type reached through a $ref gets
        its own entry too.

        Returns:
            Component schemas keyed by name, roots first, in discovery order.
        """
        generation_pass = GenerationPass()
        schemas: dict[str, Schema] = {}
        # Schema name -> identity of the type it is built for
        owners: dict[str, str] = {}

        for root in roots:
            description = root if isinstance(root, TypeDescription) else self.introspector.describe(root)
            for target in _schema_targets(description):
                if _is_new_entry(owners, target.signature, target):
                    schemas[target.signature] = self.builder.build(target, True, generation_pass)

        # Building an entry can reference or force further types, loop until
        # both registries stop growing
        forced = 0
        while True:
            referenced = generation_pass.references.drain() if self.include_referenced else []
            pending = generation_pass.registry.drain()
            if not referenced and not pending:
                break
            for key, description in referenced:
                if _is_new_entry(owners, key, description):
                    schemas[key] = self.builder.build(description, True, generation_pass)
            for key, description in pending:
                schemas[key] = self.builder.build(description, True, generation_pass)
                forced += 1

        logger.info("Generated %d component schemas (%d forced by recursion)", len(schemas), forced)
        return schemas


def _is_new_entry(owners: dict[str, str], name: str, description: TypeDescription) -> bool:
    """Reserve ``name`` for ``description``; False when it is already reserved for it."""
    owner = owners.get(name)
    if owner is None:
        owners[name] = description.identity
        return True
    if owner != description.identity:
        msg = f"{owner} and {description.identity} share the schema name {name}"
        raise TypeGraphError(msg)
    return False


def _schema_targets(description: TypeDescription) -> Iterator[TypeDescription]:
    """Object types that get their own entry when ``description`` is a root."""
    if description.kind is Kind.ARRAY and description.array_item_type is not None:
        yield from _schema_targets(description.array_item_type)
    elif description.kind is Kind.MAP and description.map_value_type is not None:
        yield from _schema_targets(description.map_value_type)
    elif description.is_object:
        yield description
