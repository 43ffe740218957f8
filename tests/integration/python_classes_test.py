"""End-to-end generation from Python classes to a components document."""

import enum
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import yaml
from pydantic import BaseModel, Field

from oasgen.builder.generator import DocumentGenerator
from oasgen.export import to_yaml
from oasgen.model.python_types import introspect

REF = "#/components/schemas/"

T = TypeVar("T")


class Authority(enum.Enum):
    """Granted authority."""

    ACCESS_APP = "access_app"
    READ_USER = "read_user"


@dataclass
class Address:
    street: str
    city: str | None = None


class UserDto(BaseModel):
    """A registered user."""

    id: int
    login: str = Field(..., min_length=1, max_length=50, description="Login name")
    authorities: set[Authority] = set()
    addresses: list[Address] = []
    attributes: dict[str, str] = {}


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int


@dataclass
class Category(Generic[T]):
    payload: T
    subcategories: list["Category[T]"] = field(default_factory=list)


@dataclass
class Shipment(Generic[T]):
    cargo: T


@dataclass
class AddressShipment(Shipment[Address]):
    pass


class Severity(enum.Enum):
    """Alert severity."""

    INFO = "info"
    CRITICAL = "critical"
    """Pages the on-call engineer."""


def _generate(*classes):
    result = introspect(*classes)
    generator = DocumentGenerator(result.catalog, result.documentation, result.constraints, reference_prefix=REF)
    return generator.generate(result.roots)


def test_pydantic_model_document():
    schemas = _generate(UserDto)
    assert list(schemas) == ["UserDto", "Authority", "Address"]

    user = schemas["UserDto"].model_dump(mode="json", by_alias=True)
    assert user == {
        "description": "A registered user.",
        "required": ["id", "login"],
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "login": {"description": "Login name", "type": "string", "minLength": 1, "maxLength": 50},
            "authorities": {"type": "array", "items": {"$ref": REF + "Authority"}},
            "addresses": {"type": "array", "items": {"$ref": REF + "Address"}},
            "attributes": {"type": "object", "additionalProperties": {"type": "string"}},
        },
    }
    assert schemas["Authority"].model_dump(by_alias=True) == {
        "description": "Granted authority.",
        "type": "string",
        "enum": ["ACCESS_APP", "READ_USER"],
    }
    assert schemas["Address"].model_dump(by_alias=True) == {
        "required": ["street"],
        "type": "object",
        "properties": {"street": {"type": "string"}, "city": {"type": "string"}},
    }


def test_generic_page_is_inlined_with_bindings():
    schemas = _generate(Page[UserDto])
    assert list(schemas)[:2] == ["Page_UserDto", "UserDto"]
    page = schemas["Page_UserDto"].model_dump(by_alias=True)
    assert page["properties"]["items"] == {"type": "array", "items": {"$ref": REF + "UserDto"}}
    assert page["required"] == ["items", "total"]


def test_recursive_generic_dataclass_is_forced_out():
    schemas = _generate(Category[Address])
    assert list(schemas) == ["Category_Address", "Address", "Category_RecursiveCategory_Address"]

    forced = schemas["Category_RecursiveCategory_Address"].model_dump(by_alias=True)
    assert forced["properties"]["subcategories"]["items"] == {"$ref": REF + "Category_RecursiveCategory_Address"}


def test_yaml_document_round_trips():
    schemas = _generate(UserDto)
    document = yaml.safe_load(to_yaml(schemas))
    assert list(document["components"]["schemas"]) == ["UserDto", "Authority", "Address"]


def test_inherited_generic_field_references_bound_argument():
    schemas = _generate(AddressShipment)
    assert list(schemas) == ["AddressShipment", "Address"]
    shipment = schemas["AddressShipment"].model_dump(by_alias=True)
    assert shipment["properties"]["cargo"] == {"$ref": REF + "Address"}
    assert shipment["required"] == ["cargo"]


def test_enum_member_docstrings_are_listed():
    schemas = _generate(Severity)
    assert schemas["Severity"].description == "Alert severity.\n  * `CRITICAL` - Pages the on-call engineer."
