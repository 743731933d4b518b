"""
JSON Schema conversion for Gemini

Gemini accepts a restricted schema dialect: it rejects ``$schema`` at any
level and only understands type, description, properties, required and
items. Tool parameters and structured-output schemas both pass through
``to_gemini_schema`` so the two paths produce the same shape.
"""

from __future__ import annotations

import copy
from typing import Any

from .providers.gemini_types import GeminiSchema, SchemaType

_UNSUPPORTED_KEYS = frozenset({"$schema"})

_TYPE_MAP: dict[str, SchemaType] = {
    "object": SchemaType.OBJECT,
    "array": SchemaType.ARRAY,
    "string": SchemaType.STRING,
    "number": SchemaType.NUMBER,
    "integer": SchemaType.INTEGER,
    "boolean": SchemaType.BOOLEAN,
}


def sanitize_schema(schema: Any) -> Any:
    """
    Return a copy of ``schema`` without keys Gemini rejects.

    Object-valued entries are sanitized recursively; arrays and scalars are
    copied unchanged. The result shares no containers with the input.
    """
    if not isinstance(schema, dict):
        return copy.deepcopy(schema)

    return {
        key: sanitize_schema(value) if isinstance(value, dict) else copy.deepcopy(value)
        for key, value in schema.items()
        if key not in _UNSUPPORTED_KEYS
    }


def convert_schema_type(type_name: Any) -> SchemaType | None:
    """Map a JSON Schema type name onto the Gemini enum (case-insensitive)."""
    if not isinstance(type_name, str):
        return None
    return _TYPE_MAP.get(type_name.lower())


def parse_schema(schema: dict[str, Any]) -> GeminiSchema:
    """Parse a sanitized schema node into a GeminiSchema."""
    result = GeminiSchema(type=convert_schema_type(schema.get("type")))

    description = schema.get("description")
    if isinstance(description, str):
        result.description = description

    items = schema.get("items")
    if result.type is SchemaType.ARRAY and isinstance(items, dict):
        result.items = parse_schema(items)

    properties = schema.get("properties")
    if result.type is SchemaType.OBJECT and isinstance(properties, dict):
        result.properties = {
            name: parse_schema(prop)
            for name, prop in properties.items()
            if isinstance(prop, dict)
        }

    return result


def to_gemini_schema(
    schema: dict[str, Any],
    description: str | None = None,
    default_type: SchemaType | None = None,
) -> GeminiSchema:
    """
    Sanitize and parse a root schema.

    Args:
        schema: JSON Schema object supplied by the caller
        description: Overrides any description embedded in the schema
        default_type: Type used when the schema declares none

    Returns:
        The root GeminiSchema, including its ``required`` list
    """
    sanitized = sanitize_schema(schema)
    if default_type is not None and convert_schema_type(sanitized.get("type")) is None:
        sanitized = {**sanitized, "type": default_type.value}

    root = parse_schema(sanitized)
    # Callers may declare properties without an explicit object type
    properties = sanitized.get("properties")
    if root.properties is None and isinstance(properties, dict):
        root.properties = {
            name: parse_schema(prop)
            for name, prop in properties.items()
            if isinstance(prop, dict)
        }

    required = sanitized.get("required")
    if isinstance(required, list):
        root.required = [str(name) for name in required]

    if description:
        root.description = description

    return root
