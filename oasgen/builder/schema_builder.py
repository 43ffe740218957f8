"""Recursive construction of component schemas from type descriptions."""

from __future__ import annotations

import logging

from oasgen.builder.recursion import DeclaringContext, GenerationPass
from oasgen.builder.substitution import substitute
from oasgen.config import settings
from oasgen.errors import TypeGraphError
from oasgen.lookup.constraints import ConstraintSource, NoConstraints
from oasgen.lookup.documentation import DocumentationSource, NoDocumentation
from oasgen.model.catalog import TypeIntrospector
from oasgen.model.types import Kind, TypeDescription, TypeExpr
from oasgen.schemas.openapi import Property, Schema

logger = logging.getLogger(__name__)


class SchemaBuilder:
    """Builds a Schema for one type occurrence.

    Plain objects and enums are only expanded when ``main_reference`` is set,
    i.e. when building the type's own components entry. Everywhere else they
    become a ``$ref``. Generic instantiations are always expanded inline since
    they have no entry of their own.

    Two types whose simple names collide would share one $ref and are
    rejected, as is a generic nested inside itself through one field more
    than ``max_generic_nesting`` times.
    """

    def __init__(
        self,
        introspector: TypeIntrospector,
        documentation: DocumentationSource | None = None,
        constraints: ConstraintSource | None = None,
        reference_prefix: str | None = None,
        max_generic_nesting: int | None = None,
    ):
        self.introspector = introspector
        self.documentation = documentation or NoDocumentation()
        self.constraints = constraints or NoConstraints()
        self.reference_prefix = reference_prefix if reference_prefix is not None else settings.reference_prefix
        self.max_generic_nesting = (
            max_generic_nesting if max_generic_nesting is not None else settings.max_generic_nesting
        )
        self.property_builder = PropertyBuilder(self)

    def reference_to(self, name: str) -> str:
        return f"{self.reference_prefix}{name}"

    def build(
        self,
        description: TypeDescription,
        main_reference: bool,
        generation_pass: GenerationPass,
        declaring_context: DeclaringContext | None = None,
    ) -> Schema:
        kind = description.kind

        if kind is Kind.MAP:
            if description.map_value_type is None:
                msg = f"Map type {description.signature} has no value type"
                raise TypeGraphError(msg)
            return Schema(
                type=description.data_type.type.value,
                additional_properties=self.build(
                    description.map_value_type, False, generation_pass, declaring_context
                ),
                main_reference=main_reference,
            )

        if kind is Kind.ARRAY:
            if description.array_item_type is None:
                msg = f"Array type {description.signature} has no item type"
                raise TypeGraphError(msg)
            return Schema(
                type=description.data_type.type.value,
                items=self.build(description.array_item_type, False, generation_pass, declaring_context),
                main_reference=main_reference,
            )

        if kind in (Kind.REFERENCE, Kind.ENUM) and not main_reference:
            name = description.simple_name
            known = generation_pass.references.get(name)
            if known is None:
                generation_pass.references.add(name, description)
            elif known.identity != description.identity:
                msg = f"{known.identity} and {description.identity} share the schema name {name}"
                raise TypeGraphError(msg)
            return Schema(reference=self.reference_to(name))

        if kind in (Kind.REFERENCE, Kind.ENUM, Kind.GENERIC):
            return self._expand(description, main_reference, generation_pass, declaring_context)

        return Schema(
            type=description.data_type.type.value,
            format=description.data_type.emitted_format,
            main_reference=main_reference,
        )

    def _expand(
        self,
        description: TypeDescription,
        main_reference: bool,
        generation_pass: GenerationPass,
        declaring_context: DeclaringContext | None,
    ) -> Schema:
        # Without a declaring field there is no signature to check
        if declaring_context is None:
            return self._inline(description, main_reference, generation_pass)

        if not generation_pass.guard.add(declaring_context.signature(description)):
            key = declaring_context.forced_key(description)
            if generation_pass.registry.add(key, description):
                logger.debug("Recursive use of %s detected, forcing it out as %s", description.signature, key)
            return Schema(reference=self.reference_to(key), main_reference=main_reference)

        # A generic that re-enters itself with growing arguments (inner: Nest[list[T]])
        # never repeats a signature, the nesting count is what stops it
        edge = declaring_context.edge(description)
        generation_pass.expanding[edge] += 1
        try:
            if generation_pass.expanding[edge] > self.max_generic_nesting:
                msg = (
                    f"Unbounded generic recursion through {declaring_context.declaring.simple_name}."
                    f"{declaring_context.field_name}: {description.simple_name} nested more than "
                    f"{self.max_generic_nesting} times"
                )
                raise TypeGraphError(msg)
            return self._inline(description, main_reference, generation_pass)
        finally:
            generation_pass.expanding[edge] -= 1

    def _inline(self, description: TypeDescription, main_reference: bool, generation_pass: GenerationPass) -> Schema:
        if description.kind is Kind.GENERIC and not description.generic_bindings:
            msg = f"Generic type {description.identity} has no bindings"
            raise TypeGraphError(msg)

        identity = description.identity
        documented = self.documentation.has_type(identity)
        type_description = self.documentation.description(identity) if documented and main_reference else None

        properties: dict[str, Property] = {}
        if description.kind is not Kind.ENUM:
            for field in description.fields:
                self._add_property(properties, field.name, field.type, description, generation_pass)
            if description.is_interface:
                for accessor in sorted(description.accessors, key=lambda a: a.method_name):
                    name = accessor.property_name
                    if name is None:
                        continue
                    logger.debug("%s accessor %s exposed as %s", description.simple_name, accessor.method_name, name)
                    self._add_property(properties, name, accessor.return_type, description, generation_pass)

        enum_values = None
        if description.enum_values:
            enum_values = list(description.enum_values)
            if documented:
                type_description = self._enum_description(description, type_description)

        return Schema(
            description=type_description,
            type=description.data_type.type.value,
            properties=properties or None,
            enum_values=enum_values,
            required=[name for name, prop in properties.items() if prop.is_required],
            main_reference=main_reference,
        )

    def _add_property(
        self,
        properties: dict[str, Property],
        name: str,
        declared_type: TypeExpr,
        declaring: TypeDescription,
        generation_pass: GenerationPass,
    ) -> None:
        field_description = self.introspector.describe(substitute(declared_type, declaring))
        properties[name] = self.property_builder.build(
            name, field_description, DeclaringContext(declaring, name), generation_pass
        )

    def _enum_description(self, description: TypeDescription, head: str | None) -> str:
        """Type description (or name) followed by one bullet per documented literal."""
        lines = [head if head is not None else description.simple_name]
        for literal in description.enum_values:
            literal_description = self.documentation.enum_value_description(description.identity, literal)
            if literal_description is not None:
                lines.append(f"  * `{literal}` - {literal_description}")
        return "\n".join(lines)


class PropertyBuilder:
    """Builds one named property: schema, description and constraints."""

    def __init__(self, schema_builder: SchemaBuilder):
        self.schema_builder = schema_builder

    def build(
        self,
        field_name: str,
        description: TypeDescription,
        declaring_context: DeclaringContext,
        generation_pass: GenerationPass,
    ) -> Property:
        if not field_name:
            msg = f"Empty field name in {declaring_context.declaring.identity}"
            raise TypeGraphError(msg)

        schema = self.schema_builder.build(description, False, generation_pass, declaring_context)
        identity = declaring_context.declaring.identity
        constraints = self.schema_builder.constraints.constraints_for(identity, field_name)

        attributes = dict(schema)
        attributes.update(
            name=field_name,
            description=self.schema_builder.documentation.field_description(identity, field_name),
            is_required=constraints.required,
            min_length=constraints.min_length,
            max_length=constraints.max_length,
        )
        return Property(**attributes)
