"""Pydantic models for the generated OpenAPI component schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_serializer

# Dumped keys (by alias or by field name) that are dropped when empty.
# Every other key is only dropped when None, so an empty description survives.
_OMIT_WHEN_EMPTY = frozenset(
    {"type", "format", "required", "properties", "enum", "enum_values", "$ref", "reference"}
)


class Schema(BaseModel):
    """One schema node: either a ``$ref`` or an inline definition, never both."""

    description: str | None = None
    required: list[str] = []
    type: str | None = None
    format: str | None = None
    properties: dict[str, Property] | None = None
    enum_values: list[str] | None = Field(None, alias="enum")
    # Map value schema
    additional_properties: Schema | None = Field(None, alias="additionalProperties")
    reference: str | None = Field(None, alias="$ref")
    # Array item schema
    items: Schema | None = None

    # Set while expanding a type for its own components entry; never dumped
    main_reference: bool = Field(False, exclude=True)

    model_config = {"populate_by_name": True}

    @model_serializer(mode="wrap")
    def _drop_unset(self, handler) -> dict[str, Any]:
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if value is not None and not (key in _OMIT_WHEN_EMPTY and not value)
        }


class Property(Schema):
    """A named field of an object schema, with its constraints."""

    name: str = Field(..., min_length=1, exclude=True)
    is_required: bool = Field(False, exclude=True)
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")


Schema.model_rebuild()
Property.model_rebuild()
