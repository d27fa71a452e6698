"""Payload validation: turns pydantic errors into ValidationException details."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cargoflow.exceptions import ValidationException

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def error_details(exc: PydanticValidationError) -> list[dict]:
    """Flatten pydantic errors into ``{"field", "message"}`` dicts."""
    return [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", ())) or "(root)",
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]


def parse_payload(
    schema: type[SchemaT],
    payload: SchemaT | Mapping[str, Any],
    message: str = "Invalid payload",
) -> SchemaT:
    """Validate *payload* against *schema*.

    Already-validated instances pass through untouched. Raises
    :class:`ValidationException` with per-field detail on failure.
    """
    if isinstance(payload, schema):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationException(
            message=message,
            details=[{"field": "(root)", "message": "Payload must be an object"}],
        )
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationException(message=message, details=error_details(exc)) from exc
