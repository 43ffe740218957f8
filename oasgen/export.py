"""Render generated component schemas as plain data, JSON or YAML."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from oasgen.config import settings
from oasgen.schemas.openapi import Schema


def components(schemas: dict[str, Schema]) -> dict[str, Any]:
    """Wrap schemas in the ``components.schemas`` section of an OpenAPI document."""
    return {
        "components": {
            "schemas": {name: schema.model_dump(mode="json", by_alias=True) for name, schema in schemas.items()}
        }
    }


def to_json(schemas: dict[str, Schema], indent: int | None = None) -> str:
    return json.dumps(components(schemas), indent=indent if indent is not None else settings.indent)


def to_yaml(schemas: dict[str, Schema]) -> str:
    return yaml.safe_dump(components(schemas), sort_keys=False, allow_unicode=True)


def write(schemas: dict[str, Schema], output: Path, output_format: str | None = None) -> Path:
    """Write the components section to ``output`` in JSON or YAML."""
    fmt = output_format or settings.output_format
    if fmt == "json":
        text = to_json(schemas)
    elif fmt == "yaml":
        text = to_yaml(schemas)
    else:
        msg = f"Unknown output format: {fmt}"
        raise ValueError(msg)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    return output
