import json

import pytest
import yaml

from oasgen.export import components, to_json, to_yaml, write
from oasgen.schemas.openapi import Property, Schema


@pytest.fixture
def schemas():
    return {
        "User": Schema(
            type="object",
            properties={
                "id": Property(name="id", type="integer", format="int64"),
                "name": Property(name="name", type="string", is_required=True, description=""),
            },
            required=["name"],
            main_reference=True,
        ),
        "Role": Schema(type="string", enum_values=["ADMIN", "VIEWER"], main_reference=True),
    }


def test_components_section(schemas):
    assert components(schemas) == {
        "components": {
            "schemas": {
                "User": {
                    "required": ["name"],
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "format": "int64"},
                        "name": {"description": "", "type": "string"},
                    },
                },
                "Role": {"type": "string", "enum": ["ADMIN", "VIEWER"]},
            }
        }
    }


def test_json_keeps_schema_order(schemas):
    data = json.loads(to_json(schemas, indent=None))
    assert list(data["components"]["schemas"]) == ["User", "Role"]
    assert data == components(schemas)


def test_yaml_keeps_key_order(schemas):
    text = to_yaml(schemas)
    assert text.index("User:") < text.index("Role:")
    assert text.index("id:") < text.index("name:")
    assert yaml.safe_load(text) == components(schemas)


def test_write_creates_parent_directories(schemas, tmp_path):
    output = write(schemas, tmp_path / "docs" / "schemas.json", "json")
    assert json.loads(output.read_text()) == components(schemas)


def test_write_rejects_unknown_format(schemas, tmp_path):
    with pytest.raises(ValueError, match="Unknown output format"):
        write(schemas, tmp_path / "schemas.txt", "xml")
