"""
Tool Parameter Schema Sanitization

Reduces a JSON Schema to the subset the Cloud Code backend accepts.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Keywords the backend rejects, removed at every nesting depth
UNSUPPORTED_SCHEMA_KEYWORDS = frozenset(
    {
        "$schema",
        "$id",
        "$ref",
        "$defs",
        "definitions",
        "default",
        "additionalProperties",
        "anyOf",
        "allOf",
        "oneOf",
        "minLength",
        "maxLength",
        "pattern",
        "format",
        "minimum",
        "maximum",
        "exclusiveMinimum",
        "exclusiveMaximum",
        "minItems",
        "maxItems",
        "uniqueItems",
        "minProperties",
        "maxProperties",
        "patternProperties",
        "unevaluatedProperties",
        "unevaluatedItems",
        "if",
        "then",
        "else",
        "not",
        "contentEncoding",
        "contentMediaType",
    }
)

COMPOSITION_KEYWORDS = ("anyOf", "allOf", "oneOf")


def _sanitize_items(items: Any) -> Any:
    if isinstance(items, list):
        return [sanitize_schema(item) for item in items]
    if isinstance(items, Mapping):
        # Polymorphic item schemas cannot be expressed; accept anything instead.
        if any(keyword in items for keyword in COMPOSITION_KEYWORDS):
            return {}
        return sanitize_schema(items)
    return items


def sanitize_schema(schema: Any) -> Any:
    """
    Strip unsupported keywords from a tool parameter schema

    ``properties`` keeps its keys and sanitizes each property schema,
    ``items`` is sanitized as a single schema or a list of schemas, and every
    other mapping value (including mappings inside lists such as
    ``prefixItems``) is sanitized recursively. Scalars pass through
    untouched, as does non-mapping input.

    Args:
        schema: JSON Schema fragment (usually a dict)

    Returns:
        A new sanitized schema; the input is never modified.
    """
    if not isinstance(schema, Mapping):
        return schema

    sanitized: dict[str, Any] = {}
    for key, value in schema.items():
        if key in UNSUPPORTED_SCHEMA_KEYWORDS:
            continue

        if key == "properties" and isinstance(value, Mapping):
            sanitized[key] = {
                prop_name: sanitize_schema(prop_schema)
                for prop_name, prop_schema in value.items()
            }
        elif key == "items" and isinstance(value, (Mapping, list)):
            sanitized[key] = _sanitize_items(value)
        elif isinstance(value, Mapping):
            sanitized[key] = sanitize_schema(value)
        elif isinstance(value, list):
            sanitized[key] = [sanitize_schema(item) for item in value]
        else:
            sanitized[key] = value

    return sanitized
