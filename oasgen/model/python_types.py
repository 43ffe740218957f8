"""Describe Python classes (dataclasses, pydantic models, enums, protocols) as catalog definitions.

Descriptions come from class docstrings, pydantic ``Field(description=...)``,
dataclass ``field(metadata={"description": ...})`` and attribute docstrings,
i.e. a string literal right below an enum member or a dataclass or plain class
attribute (what pydantic reads with ``use_attribute_docstrings``).

Fields inherited from a parameterized generic base (``class ItemBox(Box[Item])``)
are described with that base's type arguments.
"""

from __future__ import annotations

import ast
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import logging
import textwrap
import types
import typing
import uuid
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, TypeVar, Union, get_args, get_origin, get_type_hints

from annotated_types import MaxLen, MinLen
from pydantic import BaseModel

from oasgen.builder.substitution import apply_bindings
from oasgen.errors import IntrospectionError
from oasgen.lookup.constraints import FieldConstraints, MappingConstraints
from oasgen.lookup.documentation import MappingDocumentation
from oasgen.model.catalog import TypeCatalog
from oasgen.model.types import (
    AccessorDefinition,
    ArrayType,
    FieldDefinition,
    NamedType,
    ParameterizedType,
    TypeDefinition,
    TypeExpr,
    TypeParameter,
)

logger = logging.getLogger(__name__)

# Python class -> primitive name in the catalog
PYTHON_PRIMITIVES: dict[type, str] = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "double",
    decimal.Decimal: "number",
    bytes: "binary",
    datetime.datetime: "date-time",
    datetime.date: "date",
    datetime.time: "time",
    uuid.UUID: "uuid",
}

FREE_FORM = NamedType("object")

_COLLECTION_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)
_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

# Classes whose members never become accessors
_PROTOCOL_BASES = (object, typing.Protocol, typing.Generic)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass
class Introspection:
    """Everything learned from a set of Python classes."""

    catalog: TypeCatalog = field(default_factory=TypeCatalog)
    documentation: MappingDocumentation = field(default_factory=MappingDocumentation)
    constraints: MappingConstraints = field(default_factory=MappingConstraints)
    roots: list[TypeExpr] = field(default_factory=list)


def introspect(*classes: Any) -> Introspection:
    """Describe ``classes`` (and every type they reach) in one go.

    Each argument may be a class or a parameterized alias such as
    ``Page[User]``; each becomes one root expression.
    """
    introspector = PythonTypeIntrospector()
    for cls in classes:
        introspector.add_root(cls)
    return introspector.result


class PythonTypeIntrospector:
    """Walks Python annotations and registers the classes they reach."""

    def __init__(self, result: Introspection | None = None):
        self.result = result or Introspection()
        self._seen: set[str] = set()

    def add_root(self, annotation: Any) -> TypeExpr:
        expr = self.to_expr(annotation)
        self.result.roots.append(expr)
        return expr

    def to_expr(self, annotation: Any) -> TypeExpr:
        """Turn a Python annotation into a type expression, registering classes on the way."""
        if annotation is Any or annotation is object:
            return FREE_FORM
        if isinstance(annotation, TypeVar):
            return TypeParameter(annotation.__name__)

        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            return self.to_expr(args[0])
        if origin is Union or isinstance(annotation, types.UnionType):
            members = [arg for arg in args if arg is not type(None)]
            if len(members) != 1:
                msg = f"Union types are not supported: {annotation!r}"
                raise IntrospectionError(msg)
            return self.to_expr(members[0])
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return ArrayType(self.to_expr(args[0]))
            msg = f"Only homogeneous tuples (tuple[X, ...]) are supported: {annotation!r}"
            raise IntrospectionError(msg)
        if origin in _COLLECTION_ORIGINS:
            return ParameterizedType("list", (self.to_expr(args[0]) if args else FREE_FORM,))
        if origin in _MAP_ORIGINS:
            if not args:
                return ParameterizedType("dict", (NamedType("string"), FREE_FORM))
            return ParameterizedType("dict", (self.to_expr(args[0]), self.to_expr(args[1])))
        if origin is not None and isinstance(origin, type):
            name = self.register(origin)
            return ParameterizedType(name, tuple(self.to_expr(arg) for arg in args))

        if annotation in (list, set, frozenset, tuple):
            return ParameterizedType("list", (FREE_FORM,))
        if annotation is dict:
            return ParameterizedType("dict", (NamedType("string"), FREE_FORM))
        if annotation in PYTHON_PRIMITIVES:
            return NamedType(PYTHON_PRIMITIVES[annotation])

        if isinstance(annotation, type):
            # Parameterized pydantic models are concrete subclasses of their origin
            metadata = getattr(annotation, "__pydantic_generic_metadata__", None)
            if metadata and metadata.get("origin") is not None:
                name = self.register(metadata["origin"])
                return ParameterizedType(name, tuple(self.to_expr(arg) for arg in metadata["args"]))
            return NamedType(self.register(annotation))

        msg = f"Cannot describe annotation: {annotation!r}"
        raise IntrospectionError(msg)

    def register(self, cls: type) -> str:
        """Add ``cls`` to the catalog (once) and return its qualified name."""
        name = qualified_name(cls)
        if name in self._seen:
            return name
        self._seen.add(name)

        description = _own_docstring(cls)
        if description is not None:
            self.result.documentation.document(name, description=description)

        if issubclass(cls, enum.Enum):
            definition = TypeDefinition(name=name, enum_values=tuple(member.name for member in cls))
            literal_docs = {
                literal: doc for literal, doc in _attribute_docstrings(cls).items() if literal in cls.__members__
            }
            if literal_docs:
                self.result.documentation.document(name, enum_values=literal_docs)
        elif issubclass(cls, BaseModel):
            definition = self._pydantic_definition(cls, name)
        elif getattr(cls, "_is_protocol", False):
            definition = self._protocol_definition(cls, name)
        elif dataclasses.is_dataclass(cls):
            definition = self._dataclass_definition(cls, name)
        else:
            definition = self._annotated_class_definition(cls, name)

        self.result.catalog.add(definition)
        logger.debug("Registered %s with %d fields", name, len(definition.fields))
        return name

    def _pydantic_definition(self, cls: type[BaseModel], name: str) -> TypeDefinition:
        fields = []
        for field_name, info in cls.model_fields.items():
            fields.append(FieldDefinition(field_name, self.to_expr(info.annotation)))
            if info.description is not None:
                self.result.documentation.document(name, fields={field_name: info.description})
            min_length, max_length = _length_bounds(info.metadata)
            self._constrain(
                name, field_name, info.is_required() and not _is_optional(info.annotation), min_length, max_length
            )
        return TypeDefinition(name=name, fields=tuple(fields), type_parameters=_type_parameters(cls))

    def _dataclass_definition(self, cls: type, name: str) -> TypeDefinition:
        hints = get_type_hints(cls, include_extras=True)
        bindings = self._base_bindings(cls)
        attribute_docs = _attribute_docstrings(cls)
        fields = []
        for dc_field in dataclasses.fields(cls):
            hint = hints[dc_field.name]
            fields.append(FieldDefinition(dc_field.name, self._inherited_expr(cls, dc_field.name, hint, bindings)))
            doc = dc_field.metadata.get("description", attribute_docs.get(dc_field.name))
            if doc is not None:
                self.result.documentation.document(name, fields={dc_field.name: doc})
            has_default = (
                dc_field.default is not dataclasses.MISSING or dc_field.default_factory is not dataclasses.MISSING
            )
            min_length, max_length = _length_bounds(_annotated_metadata(hint))
            self._constrain(name, dc_field.name, not has_default and not _is_optional(hint), min_length, max_length)
        return TypeDefinition(name=name, fields=tuple(fields), type_parameters=_type_parameters(cls))

    def _annotated_class_definition(self, cls: type, name: str) -> TypeDefinition:
        bindings = self._base_bindings(cls)
        attribute_docs = _attribute_docstrings(cls)
        fields = []
        for field_name, hint in _instance_annotations(cls).items():
            fields.append(FieldDefinition(field_name, self._inherited_expr(cls, field_name, hint, bindings)))
            if field_name in attribute_docs:
                self.result.documentation.document(name, fields={field_name: attribute_docs[field_name]})
            min_length, max_length = _length_bounds(_annotated_metadata(hint))
            required = not hasattr(cls, field_name) and not _is_optional(hint)
            self._constrain(name, field_name, required, min_length, max_length)
        return TypeDefinition(name=name, fields=tuple(fields), type_parameters=_type_parameters(cls))

    def _protocol_definition(self, cls: type, name: str) -> TypeDefinition:
        bindings = self._base_bindings(cls)
        fields = tuple(
            FieldDefinition(field_name, self._inherited_expr(cls, field_name, hint, bindings))
            for field_name, hint in _instance_annotations(cls).items()
        )
        accessors = []
        for method_name, (owner, function) in _protocol_methods(cls).items():
            parameters = list(inspect.signature(function).parameters.values())[1:]
            return_hint = get_type_hints(function).get("return")
            return_type = None
            if return_hint is not None and return_hint is not type(None):
                return_type = apply_bindings(self.to_expr(return_hint), bindings.get(owner, {}))
            accessors.append(AccessorDefinition(method_name, return_type, len(parameters)))
            doc = _own_docstring(function)
            if doc is not None:
                # Documented under the derived property name, as fields are
                property_name = accessors[-1].property_name
                if property_name is not None:
                    self.result.documentation.document(name, fields={property_name: doc})
        return TypeDefinition(
            name=name,
            fields=fields,
            type_parameters=_type_parameters(cls),
            is_interface=True,
            accessors=tuple(accessors),
        )

    def _base_bindings(self, cls: type) -> dict[type, dict[str, TypeExpr]]:
        """Type arguments of every parameterized generic base of ``cls``, by parameter name.

        ``class ItemBox(Box[Item])`` binds ``T`` of ``Box`` to ``Item``. Deeper
        bases are resolved through the intermediate ones, so in
        ``class Leaf(Mid[Item])`` with ``class Mid(Box[list[U]], Generic[U])``
        ``Box`` gets ``T -> list[Item]``.
        """
        bindings: dict[type, dict[str, TypeExpr]] = {}
        pending: list[tuple[type, dict[str, TypeExpr]]] = [(cls, {})]
        while pending:
            klass, scope = pending.pop()
            # __orig_bases__ is inherited, only the class's own entry counts
            for base in klass.__dict__.get("__orig_bases__", klass.__bases__):
                origin = get_origin(base)
                if origin is None:
                    if isinstance(base, type) and base is not object:
                        pending.append((base, {}))
                    continue
                if origin in (typing.Generic, typing.Protocol) or not isinstance(origin, type) or origin in bindings:
                    continue
                parameters = [parameter.__name__ for parameter in getattr(origin, "__parameters__", ())]
                arguments = [apply_bindings(self.to_expr(argument), scope) for argument in get_args(base)]
                bindings[origin] = dict(zip(parameters, arguments))
                pending.append((origin, bindings[origin]))
        return bindings

    def _inherited_expr(
        self, cls: type, field_name: str, hint: Any, bindings: dict[type, dict[str, TypeExpr]]
    ) -> TypeExpr:
        expr = self.to_expr(hint)
        scope = bindings.get(_declaring_class(cls, field_name))
        return apply_bindings(expr, scope) if scope else expr

    def _constrain(
        self, name: str, field_name: str, required: bool, min_length: int | None, max_length: int | None
    ) -> None:
        constraints = FieldConstraints(required=required, min_length=min_length, max_length=max_length)
        if constraints != FieldConstraints():
            self.result.constraints.set(name, field_name, constraints)


def _type_parameters(cls: type) -> tuple[str, ...]:
    metadata = getattr(cls, "__pydantic_generic_metadata__", None)
    if metadata is not None:
        return tuple(param.__name__ for param in metadata.get("parameters", ()))
    return tuple(param.__name__ for param in getattr(cls, "__parameters__", ()))


def _own_docstring(obj: Any) -> str | None:
    # Classes inherit __doc__ from their bases, only keep what they declare
    doc = obj.__dict__.get("__doc__") if isinstance(obj, type) else obj.__doc__
    if not doc:
        return None
    # dataclasses synthesize "Name(field: type, ...)" when no docstring is written
    if dataclasses.is_dataclass(obj) and doc.startswith(f"{obj.__name__}("):
        return None
    return inspect.cleandoc(doc)


def _is_optional(hint: Any) -> bool:
    if get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    if get_origin(hint) is Union or isinstance(hint, types.UnionType):
        return type(None) in get_args(hint)
    return hint is None or hint is Any


def _annotated_metadata(hint: Any) -> tuple[Any, ...]:
    if get_origin(hint) is Annotated:
        return hint.__metadata__
    return ()


def _length_bounds(metadata: Any) -> tuple[int | None, int | None]:
    min_length = max_length = None
    for item in metadata:
        if isinstance(item, MinLen):
            min_length = item.min_length
        elif isinstance(item, MaxLen):
            max_length = item.max_length
    return min_length, max_length


def _instance_annotations(cls: type) -> dict[str, Any]:
    """Instance attribute annotations of ``cls``, base classes first."""
    hints = get_type_hints(cls, include_extras=True)
    return {
        name: hint
        for name, hint in hints.items()
        if get_origin(hint) is not ClassVar and hint is not ClassVar and not name.startswith("_")
    }


def _declaring_class(cls: type, attribute: str) -> type:
    for klass in cls.__mro__:
        if attribute in inspect.get_annotations(klass):
            return klass
    return cls


def _protocol_methods(cls: type) -> dict[str, tuple[type, Any]]:
    """Public methods of ``cls`` with the class that declares them."""
    methods: dict[str, tuple[type, Any]] = {}
    for klass in reversed(cls.__mro__):
        if klass in _PROTOCOL_BASES:
            continue
        for method_name, member in vars(klass).items():
            if inspect.isfunction(member) and not method_name.startswith("_"):
                methods[method_name] = (klass, member)
    return methods


def _attribute_docstrings(cls: type) -> dict[str, str]:
    """String literals written right below attribute assignments in the body of ``cls``."""
    try:
        tree = ast.parse(textwrap.dedent(inspect.getsource(cls)))
    except (OSError, TypeError, SyntaxError):
        logger.debug("No source available for %s, attribute docstrings skipped", qualified_name(cls))
        return {}
    class_def = next((node for node in tree.body if isinstance(node, ast.ClassDef)), None)
    if class_def is None:
        return {}

    docs: dict[str, str] = {}
    for statement, following in zip(class_def.body, class_def.body[1:]):
        if isinstance(statement, ast.Assign) and len(statement.targets) == 1:
            target = statement.targets[0]
        elif isinstance(statement, ast.AnnAssign):
            target = statement.target
        else:
            continue
        if (
            isinstance(target, ast.Name)
            and isinstance(following, ast.Expr)
            and isinstance(following.value, ast.Constant)
            and isinstance(following.value.value, str)
        ):
            docs[target.id] = inspect.cleandoc(following.value.value)
    return docs
