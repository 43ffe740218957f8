"""Generic parameter substitution for declared field types."""

from __future__ import annotations

from collections.abc import Mapping

from oasgen.model.types import ArrayType, Kind, ParameterizedType, TypeDescription, TypeExpr, TypeParameter


def substitute(field_type: TypeExpr, enclosing: TypeDescription) -> TypeExpr:
    """Rewrite ``field_type`` with the generic bindings of ``enclosing``.

    Non-generic enclosing types return ``field_type`` untouched. Parameter
    names that are not bound here are kept as-is: they belong to an outer
    scope and are substituted when that scope is described. Inputs are never
    mutated, a new expression is returned when anything changes.

    Examples:
        ``value: T`` in ``Box[Foo]`` -> ``Foo``
        ``items: list[T]`` in ``Page[Foo]`` -> ``list[Foo]``
        ``grid: tuple[Box[T], ...]`` in ``Grid[Foo]`` -> ``tuple[Box[Foo], ...]``
    """
    if enclosing.kind is not Kind.GENERIC:
        return field_type
    return apply_bindings(field_type, enclosing.generic_bindings)


def apply_bindings(expr: TypeExpr, bindings: Mapping[str, TypeExpr]) -> TypeExpr:
    """Replace every type parameter of ``expr`` named in ``bindings``."""
    if isinstance(expr, TypeParameter):
        return bindings.get(expr.name, expr)
    if isinstance(expr, ParameterizedType):
        arguments = tuple(apply_bindings(argument, bindings) for argument in expr.arguments)
        if arguments == expr.arguments:
            return expr
        return ParameterizedType(expr.raw, arguments)
    if isinstance(expr, ArrayType):
        component = apply_bindings(expr.component, bindings)
        if component == expr.component:
            return expr
        return ArrayType(component)
    return expr
