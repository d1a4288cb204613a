"""JSON Schema validation helpers."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

from regionfs.core.errors import SchemaInvalid


def validate_jsonschema(tool_name: str, schema: dict[str, Any], data: Any) -> None:
    """Raise ``SchemaInvalid`` listing every failing field of ``data``."""
    validator = Draft202012Validator(schema)
    errors = sorted(
        validator.iter_errors(data), key=lambda error: _field_name(error.path)
    )
    if not errors:
        return
    details = "; ".join(
        f"{_field_name(error.path)}: {error.message}" for error in errors
    )
    raise SchemaInvalid(f"Invalid arguments for {tool_name}: {details}")


def _field_name(path: Any) -> str:
    parts = [str(part) for part in path]
    return ".".join(parts) if parts else "<root>"
