"""Diagnostic serialization and deserialization.

This module provides functions to serialize diagnostic lists to JSON and
deserialize JSON back to Diagnostic records.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter, ValidationError

from strictimpl.core.models import Diagnostic

_DIAGNOSTICS = TypeAdapter(list[Diagnostic])


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def _format_validation_error(error: ValidationError) -> str:
    details = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"])
        details.append(f"{loc}: {err['msg']}")
    return "; ".join(details)


def serialize(diagnostics: list[Diagnostic]) -> str:
    """Serialize diagnostics to a JSON string.

    Args:
        diagnostics: The diagnostics to serialize.

    Returns:
        JSON array of diagnostic objects.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        return json.dumps(serialize_to_list(diagnostics), indent=2, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(
            message="Failed to serialize diagnostics",
            details=str(e),
        ) from e


def deserialize(json_str: str) -> list[Diagnostic]:
    """Deserialize a JSON string to diagnostics.

    Args:
        json_str: JSON array produced by ``serialize``.

    Returns:
        The deserialized diagnostics.

    Raises:
        SerializationError: If deserialization fails with detailed error info.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    return deserialize_from_list(data)


def serialize_to_list(diagnostics: list[Diagnostic]) -> list[dict[str, Any]]:
    """Serialize diagnostics to a list of dictionaries."""
    return _DIAGNOSTICS.dump_python(list(diagnostics), mode="json")


def deserialize_from_list(data: list[dict[str, Any]]) -> list[Diagnostic]:
    """Deserialize a list of dictionaries to diagnostics.

    Raises:
        SerializationError: If validation fails.
    """
    try:
        return _DIAGNOSTICS.validate_python(data)
    except ValidationError as e:
        raise SerializationError(
            message="Diagnostic validation failed",
            details=_format_validation_error(e),
        ) from e
