"""In-memory type catalog: turns type expressions into TypeDescriptions."""

from __future__ import annotations

import logging
from typing import Protocol

from oasgen.errors import TypeGraphError
from oasgen.model.types import (
    ARRAY_DATA_TYPE,
    COLLECTION_TYPES,
    MAP_TYPES,
    OBJECT_DATA_TYPE,
    PRIMITIVES,
    ArrayType,
    DataType,
    Kind,
    NamedType,
    OpenApiType,
    ParameterizedType,
    TypeDefinition,
    TypeDescription,
    TypeExpr,
    TypeParameter,
)

logger = logging.getLogger(__name__)

ENUM_DATA_TYPE = DataType(OpenApiType.STRING)


class TypeIntrospector(Protocol):
    """Source of TypeDescriptions for the schema builder."""

    def describe(self, expr: TypeExpr) -> TypeDescription: ...


class TypeCatalog:
    """Registry of type definitions keyed by fully qualified name.

    ``describe`` classifies an expression structurally, so callers never pick
    the kind themselves.
    """

    def __init__(self, definitions: list[TypeDefinition] | None = None):
        self._definitions: dict[str, TypeDefinition] = {}
        self._primitives: dict[str, DataType] = dict(PRIMITIVES)
        for definition in definitions or []:
            self.add(definition)

    def add(self, definition: TypeDefinition) -> None:
        if definition.name in self._primitives:
            msg = f"Type name {definition.name!r} clashes with a primitive"
            raise TypeGraphError(msg)
        self._definitions[definition.name] = definition

    def add_primitive(self, name: str, type_name: str, format_name: str | None = None) -> None:
        """Register an extra primitive name, e.g. a custom scalar."""
        self._primitives[name] = DataType.of(type_name, format_name)

    def get(self, name: str) -> TypeDefinition | None:
        return self._definitions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def describe(self, expr: TypeExpr) -> TypeDescription:
        """Describe one occurrence of ``expr``.

        Raises:
            TypeGraphError: if the expression refers to unknown types or is
                structurally invalid (e.g. a map without a value type).
        """
        if isinstance(expr, ArrayType):
            return TypeDescription(
                kind=Kind.ARRAY,
                identity="array",
                signature=expr.signature,
                data_type=ARRAY_DATA_TYPE,
                array_item_type=self.describe(expr.component),
            )

        if isinstance(expr, TypeParameter):
            # Unbound parameter, e.g. a raw use of a generic type
            return TypeDescription(
                kind=Kind.PRIMITIVE,
                identity=expr.name,
                signature=expr.signature,
                data_type=OBJECT_DATA_TYPE,
            )

        if isinstance(expr, ParameterizedType):
            return self._describe_parameterized(expr)

        if isinstance(expr, NamedType):
            return self._describe_named(expr)

        msg = f"Unsupported type expression: {expr!r}"
        raise TypeGraphError(msg)

    def _describe_parameterized(self, expr: ParameterizedType) -> TypeDescription:
        if expr.raw in COLLECTION_TYPES:
            if len(expr.arguments) != 1:
                msg = f"Collection {expr.raw!r} needs exactly one item type, got {len(expr.arguments)}"
                raise TypeGraphError(msg)
            return TypeDescription(
                kind=Kind.ARRAY,
                identity=expr.raw,
                signature=expr.signature,
                data_type=ARRAY_DATA_TYPE,
                array_item_type=self.describe(expr.arguments[0]),
            )

        if expr.raw in MAP_TYPES:
            if len(expr.arguments) != 2:
                msg = f"Map {expr.raw!r} needs a key and a value type, got {len(expr.arguments)} arguments"
                raise TypeGraphError(msg)
            return TypeDescription(
                kind=Kind.MAP,
                identity=expr.raw,
                signature=expr.signature,
                data_type=OBJECT_DATA_TYPE,
                map_value_type=self.describe(expr.arguments[1]),
            )

        definition = self._require(expr.raw)
        if not definition.type_parameters:
            msg = f"{definition.name} is not generic and cannot be parameterized"
            raise TypeGraphError(msg)

        if len(definition.type_parameters) != len(expr.arguments):
            msg = (
                f"{definition.name} declares {len(definition.type_parameters)} type parameters "
                f"but was given {len(expr.arguments)} arguments"
            )
            raise TypeGraphError(msg)
        return TypeDescription(
            kind=Kind.GENERIC,
            identity=definition.name,
            signature=expr.signature,
            data_type=OBJECT_DATA_TYPE,
            generic_bindings=dict(zip(definition.type_parameters, expr.arguments)),
            fields=definition.fields,
            is_interface=definition.is_interface,
            accessors=definition.accessors,
        )

    def _describe_named(self, expr: NamedType) -> TypeDescription:
        data_type = self._primitives.get(expr.name)
        if data_type is not None:
            return TypeDescription(
                kind=Kind.PRIMITIVE,
                identity=expr.name,
                signature=expr.signature,
                data_type=data_type,
            )

        if expr.name in COLLECTION_TYPES:
            msg = f"Collection {expr.name!r} used without an item type"
            raise TypeGraphError(msg)
        if expr.name in MAP_TYPES:
            msg = f"Map {expr.name!r} used without a value type"
            raise TypeGraphError(msg)

        definition = self._require(expr.name)
        if definition.is_enum:
            return TypeDescription(
                kind=Kind.ENUM,
                identity=definition.name,
                signature=expr.signature,
                data_type=ENUM_DATA_TYPE,
                enum_values=definition.enum_values,
            )

        if definition.type_parameters:
            logger.debug("Raw use of generic type %s, parameters stay unbound", definition.name)
        return TypeDescription(
            kind=Kind.REFERENCE,
            identity=definition.name,
            signature=expr.signature,
            data_type=OBJECT_DATA_TYPE,
            fields=definition.fields,
            is_interface=definition.is_interface,
            accessors=definition.accessors,
        )

    def _require(self, name: str) -> TypeDefinition:
        definition = self._definitions.get(name)
        if definition is None:
            msg = f"Unknown type: {name}"
            raise TypeGraphError(msg)
        return definition
