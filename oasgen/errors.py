"""Errors raised while describing or walking a type graph."""


class TypeGraphError(ValueError):
    """The type graph handed to the generator is malformed.

    Raised for unknown type names, maps without a value type, arrays without
    an item type and generic instantiations whose arguments do not match the
    declared type parameters.
    """


class IntrospectionError(TypeGraphError):
    """A Python class or annotation cannot be turned into a type description."""
