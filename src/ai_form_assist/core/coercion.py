"""Value coercion helpers for writing generated values into fields."""

import json
from typing import Any

TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "checked"})


def stringify_value(value: Any) -> str:
    """Render a generated value the way a form field displays it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return serialize_json_value(value)
    return str(value)


def serialize_json_value(value: Any) -> str:
    """Compact JSON text, matching what a browser's JSON.stringify produces."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def parse_boolean_value(value: Any) -> bool:
    """Coerce an arbitrary value to a checkbox state.
    
    Booleans pass through. Anything else is stringified, trimmed and
    lower-cased, and counts as true only for ``true``, ``1``, ``yes``,
    ``on`` or ``checked``.
    """
    if isinstance(value, bool):
        return value
    return stringify_value(value).strip().lower() in TRUTHY_VALUES
