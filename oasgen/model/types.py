"""Type expressions, type definitions and the TypeDescription data model."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def simple_name(name: str) -> str:
    """Last dotted segment of a fully qualified name."""
    return name.rsplit(".", 1)[-1]


# -- Primitive classification --


class OpenApiType(enum.StrEnum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


class DataFormat(enum.StrEnum):
    NONE = ""
    UNKNOWN = "unknown"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    DATE = "date"
    DATE_TIME = "date-time"
    TIME = "time"
    UUID = "uuid"
    BINARY = "binary"
    BYTE = "byte"


@dataclass(frozen=True)
class DataType:
    """OpenAPI ``type``/``format`` pair for one classification."""

    type: OpenApiType
    format: DataFormat = DataFormat.NONE

    @classmethod
    def of(cls, type_name: str, format_name: str | None = None) -> DataType:
        """Build a DataType from raw strings; unrecognised formats become UNKNOWN."""
        data_format = DataFormat.NONE
        if format_name:
            try:
                data_format = DataFormat(format_name)
            except ValueError:
                logger.warning("Unknown format %r for type %r, it will not be emitted", format_name, type_name)
                data_format = DataFormat.UNKNOWN
        return cls(OpenApiType(type_name), data_format)

    @property
    def emitted_format(self) -> str | None:
        if self.format in (DataFormat.NONE, DataFormat.UNKNOWN):
            return None
        return self.format.value


OBJECT_DATA_TYPE = DataType(OpenApiType.OBJECT)
ARRAY_DATA_TYPE = DataType(OpenApiType.ARRAY)

# Primitive name -> classification
PRIMITIVES: dict[str, DataType] = {
    "object": OBJECT_DATA_TYPE,
    "string": DataType(OpenApiType.STRING),
    "boolean": DataType(OpenApiType.BOOLEAN),
    "integer": DataType(OpenApiType.INTEGER),
    "int32": DataType(OpenApiType.INTEGER, DataFormat.INT32),
    "int64": DataType(OpenApiType.INTEGER, DataFormat.INT64),
    "number": DataType(OpenApiType.NUMBER),
    "float": DataType(OpenApiType.NUMBER, DataFormat.FLOAT),
    "double": DataType(OpenApiType.NUMBER, DataFormat.DOUBLE),
    "date": DataType(OpenApiType.STRING, DataFormat.DATE),
    "date-time": DataType(OpenApiType.STRING, DataFormat.DATE_TIME),
    "time": DataType(OpenApiType.STRING, DataFormat.TIME),
    "uuid": DataType(OpenApiType.STRING, DataFormat.UUID),
    "binary": DataType(OpenApiType.STRING, DataFormat.BINARY),
    "byte": DataType(OpenApiType.STRING, DataFormat.BYTE),
}

# Raw names of parameterized built-ins
COLLECTION_TYPES = frozenset({"list", "set", "frozenset", "collection"})
MAP_TYPES = frozenset({"dict", "map"})


# -- Type expressions --


@dataclass(frozen=True)
class NamedType:
    """A primitive or a declared type, referenced by fully qualified name."""

    name: str

    @property
    def signature(self) -> str:
        return simple_name(self.name)


@dataclass(frozen=True)
class TypeParameter:
    """A generic type variable such as ``T``."""

    name: str

    @property
    def signature(self) -> str:
        return self.name


@dataclass(frozen=True)
class ParameterizedType:
    """A named type applied to type arguments: ``list[T]``, ``Box[Foo]``."""

    raw: str
    arguments: tuple[TypeExpr, ...]

    @property
    def signature(self) -> str:
        return "_".join([simple_name(self.raw), *(argument.signature for argument in self.arguments)])


@dataclass(frozen=True)
class ArrayType:
    """An array of a component type."""

    component: TypeExpr

    @property
    def signature(self) -> str:
        return f"{self.component.signature}Array"


TypeExpr = NamedType | TypeParameter | ParameterizedType | ArrayType


# -- Type definitions --


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    type: TypeExpr


_ACCESSOR_PREFIXES = ("get", "is")


@dataclass(frozen=True)
class AccessorDefinition:
    """A method exposed by an interface-style type."""

    method_name: str
    return_type: TypeExpr | None
    parameter_count: int = 0

    @property
    def property_name(self) -> str | None:
        """Property name derived from the accessor, or None if this is not an accessor.

        ``getFoo``/``get_foo`` -> ``foo`` and ``isFoo``/``is_foo`` -> ``foo``. The prefix
        must be followed by an uppercase letter or an underscore, so ``getaway``
        and ``island`` are plain methods rather than accessors of ``away`` and
        ``land``.
        """
        if self.parameter_count != 0 or self.return_type is None:
            return None
        for prefix in _ACCESSOR_PREFIXES:
            if self.method_name.startswith(prefix + "_") and len(self.method_name) > len(prefix) + 1:
                return self.method_name[len(prefix) + 1 :]
            rest = self.method_name[len(prefix) :]
            if self.method_name.startswith(prefix) and rest[:1].isupper():
                return rest[0].lower() + rest[1:]
        return None


@dataclass(frozen=True)
class TypeDefinition:
    """A declared type: an object, an interface or an enum."""

    name: str
    fields: tuple[FieldDefinition, ...] = ()
    type_parameters: tuple[str, ...] = ()
    enum_values: tuple[str, ...] | None = None
    is_interface: bool = False
    accessors: tuple[AccessorDefinition, ...] = ()

    @property
    def is_enum(self) -> bool:
        return self.enum_values is not None


# -- Type descriptions --


class Kind(enum.StrEnum):
    PRIMITIVE = "primitive"
    ENUM = "enum"
    MAP = "map"
    ARRAY = "array"
    GENERIC = "generic"
    REFERENCE = "reference"


@dataclass(frozen=True)
class TypeDescription:
    """One occurrence of a type in the graph.

    ``generic_bindings`` only holds for this occurrence and the types nested
    under it. The mapping is never mutated once the description is built.
    """

    kind: Kind
    identity: str
    signature: str
    data_type: DataType
    generic_bindings: Mapping[str, TypeExpr] = field(default_factory=dict)
    map_value_type: TypeDescription | None = None
    array_item_type: TypeDescription | None = None
    fields: tuple[FieldDefinition, ...] = ()
    enum_values: tuple[str, ...] = ()
    is_interface: bool = False
    accessors: tuple[AccessorDefinition, ...] = ()

    @property
    def simple_name(self) -> str:
        return simple_name(self.identity)

    @property
    def recursive_suffix(self) -> str:
        """Suffix of the schema name used when this type is forced out of line."""
        return f"Recursive{self.signature}"

    @property
    def is_object(self) -> bool:
        return self.kind in (Kind.REFERENCE, Kind.ENUM, Kind.GENERIC)
