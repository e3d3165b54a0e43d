"""Utility functions for the apicompat rule engine."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

JSON_API_CONTENT_TYPE = "application/vnd.api+json"

_OPENAPI_PATH = re.compile(r'/openapi')
_ITEM_OPERATION_PATH = re.compile(r'\{[a-z]*?_?id\}$')
_RELATIONSHIP_PATH = re.compile(r'/relationships/[^/]+$')


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_type_name(value: Any) -> str:
    """Get a friendly type name for a value."""
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, int):
        return "integer"
    elif isinstance(value, float):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, (list, tuple)):
        return "array"
    elif isinstance(value, dict):
        return "object"
    else:
        return type(value).__name__


def values_equal(old: Any, new: Any) -> bool:
    """Check if two values are equal (booleans never equal numbers)."""
    if isinstance(old, bool) != isinstance(new, bool):
        return False

    # Handle numeric comparison (int vs float)
    if is_numeric(old) and is_numeric(new):
        return float(old) == float(new)

    return old == new


def days_between(start: date, end: date) -> int:
    """Whole calendar days from `start` to `end` (negative if `end` is earlier)."""
    return (end - start).days


def is_openapi_path(path: str) -> bool:
    """True for the `/openapi` introspection routes."""
    return bool(_OPENAPI_PATH.search(path or ""))


def is_item_operation(path: str) -> bool:
    """True when the path addresses a single item, e.g. `/things/{thing_id}`."""
    return bool(_ITEM_OPERATION_PATH.search(path or ""))


def is_relationship_path(path: str) -> bool:
    """True for JSON:API relationship routes, e.g. `/orgs/{id}/relationships/owner`."""
    return bool(_RELATIONSHIP_PATH.search(path or ""))


def is_singleton_path(specification: Optional[dict], path: str) -> bool:
    """Whether the path item is marked `x-snyk-resource-singleton`."""
    paths = (specification or {}).get('paths') or {}
    path_item = paths.get(path) or {}
    return bool(path_item.get('x-snyk-resource-singleton'))


def is_batch_post_operation(request_bodies: dict) -> bool:
    """
    A POST whose JSON:API request body carries an array of resource objects.

    Args:
        request_bodies: Request media types keyed by content type
    """
    media = request_bodies.get(JSON_API_CONTENT_TYPE) or {}
    schema = media.get('schema')
    if not schema or schema.get('type') != 'object':
        return False
    data = (schema.get('properties') or {}).get('data') or {}
    return data.get('type') == 'array'


def is_fully_typed_type(schema: dict) -> bool:
    """
    Check that a schema and every composite branch under it declares a type.

    Empty `oneOf`/`allOf`/`anyOf` lists are not allowed.
    """
    pending = [schema]
    while pending:
        node = pending.pop()
        if not isinstance(node, dict):
            return False
        if node.get('type'):
            continue
        for composite in ('oneOf', 'allOf', 'anyOf'):
            if composite in node:
                branches = node[composite] or []
                if not branches:
                    return False
                pending.extend(branches)
                break
        else:
            return False
    return True


def is_fully_typed_array(schema: dict) -> bool:
    return is_fully_typed_type(schema.get('items'))


def find_undeclared_required_property(schema: Optional[dict]) -> Optional[str]:
    """
    Find a name listed in `required` that is not declared in `properties`.

    Nested object properties are searched too.

    Returns:
        Dotted path of the first undeclared required property, or None
    """
    pending: list[tuple[tuple[str, ...], Any]] = [((), schema)]
    while pending:
        path, node = pending.pop()
        if not isinstance(node, dict):
            continue
        properties = node.get('properties')
        for required in node.get('required') or []:
            if properties is not None and required not in properties:
                return ".".join(path + (required,))
        for name, prop in (properties or {}).items():
            if isinstance(prop, dict) and prop.get('type') == 'object':
                pending.append((path + (name,), prop))
    return None


def is_resource_meta_property(trail: tuple[str, ...]) -> bool:
    """
    True for properties nested inside a named entry of a resource's `meta`.

    e.g. `data/meta/build_info/commit`; the contents of meta entries are
    free-form and exempt from key casing rules.
    """
    if not trail or trail[0] != 'data' or 'meta' not in trail[1:]:
        return False
    meta_index = trail.index('meta', 1)
    return len(trail) > meta_index + 2 and bool(
        re.match(r'^[a-z]+(?:_[a-z\d]+)*$', trail[meta_index + 1])
    )


def is_within_attributes(trail: tuple[str, ...]) -> bool:
    """True for properties nested below `data/attributes` (or `data/items/attributes`)."""
    if len(trail) > 2 and trail[0] == 'data' and trail[1] == 'attributes':
        return True
    return (
        len(trail) > 3
        and trail[0] == 'data'
        and trail[1] == 'items'
        and trail[2] == 'attributes'
    )
