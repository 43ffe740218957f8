import pytest

from oasgen.builder.recursion import GenerationPass
from oasgen.builder.schema_builder import SchemaBuilder
from oasgen.lookup.constraints import MappingConstraints
from oasgen.lookup.documentation import MappingDocumentation
from oasgen.model.catalog import TypeCatalog
from oasgen.model.types import (
    AccessorDefinition,
    FieldDefinition,
    NamedType,
    ParameterizedType,
    TypeDefinition,
    TypeParameter,
)

REF = "#/components/schemas/"


def _definitions() -> list[TypeDefinition]:
    tree_node = ParameterizedType("app.dto.TreeNode", (TypeParameter("T"),))
    return [
        TypeDefinition(
            "app.dto.User",
            fields=(
                FieldDefinition("id", NamedType("int64")),
                FieldDefinition("name", NamedType("string")),
            ),
        ),
        TypeDefinition(
            "app.dto.Address",
            fields=(
                FieldDefinition("street", NamedType("string")),
                FieldDefinition("owner", NamedType("app.dto.User")),
            ),
        ),
        TypeDefinition("app.dto.Status", enum_values=("ACTIVE", "DISABLED")),
        TypeDefinition("app.dto.Marker"),
        TypeDefinition(
            "app.dto.Box",
            fields=(FieldDefinition("value", TypeParameter("T")),),
            type_parameters=("T",),
        ),
        TypeDefinition(
            "app.dto.Pair",
            fields=(
                FieldDefinition("first", ParameterizedType("app.dto.Box", (NamedType("app.dto.User"),))),
                FieldDefinition("second", ParameterizedType("app.dto.Box", (NamedType("app.dto.Address"),))),
            ),
        ),
        TypeDefinition(
            "app.dto.TreeNode",
            fields=(
                FieldDefinition("value", TypeParameter("T")),
                FieldDefinition("children", ParameterizedType("list", (tree_node,))),
            ),
            type_parameters=("T",),
        ),
        TypeDefinition(
            "app.dto.Parent",
            fields=(FieldDefinition("children", ParameterizedType("list", (NamedType("app.dto.Child"),))),),
        ),
        TypeDefinition(
            "app.dto.Child",
            fields=(FieldDefinition("parent", NamedType("app.dto.Parent")),),
        ),
        TypeDefinition(
            "app.dto.Nest",
            fields=(
                FieldDefinition("value", TypeParameter("T")),
                FieldDefinition(
                    "inner",
                    ParameterizedType("app.dto.Nest", (ParameterizedType("list", (TypeParameter("T"),)),)),
                ),
            ),
            type_parameters=("T",),
        ),
        TypeDefinition("app.legacy.User", fields=(FieldDefinition("login", NamedType("string")),)),
        TypeDefinition(
            "app.dto.Holder",
            fields=(
                FieldDefinition("current", NamedType("app.dto.User")),
                FieldDefinition("legacy", NamedType("app.legacy.User")),
            ),
        ),
        TypeDefinition(
            "app.dto.Named",
            is_interface=True,
            accessors=(
                AccessorDefinition("isActive", NamedType("boolean")),
                AccessorDefinition("getName", NamedType("string")),
                AccessorDefinition("get", NamedType("string")),
                AccessorDefinition("getAge", NamedType("int32"), parameter_count=1),
                AccessorDefinition("compute", NamedType("string")),
            ),
        ),
    ]


@pytest.fixture
def catalog() -> TypeCatalog:
    return TypeCatalog(_definitions())


@pytest.fixture
def documentation() -> MappingDocumentation:
    return MappingDocumentation()


@pytest.fixture
def constraints() -> MappingConstraints:
    return MappingConstraints()


@pytest.fixture
def builder(catalog, documentation, constraints) -> SchemaBuilder:
    return SchemaBuilder(catalog, documentation, constraints, reference_prefix=REF)


@pytest.fixture
def generation_pass() -> GenerationPass:
    return GenerationPass()
