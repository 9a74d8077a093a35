"""Schema validation helpers shared by the HTTP layer and the CLI."""

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

M = TypeVar("M", bound=BaseModel)

# FastAPI prefixes error locations with where the value came from.
_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def field_errors(errors: Sequence[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic/FastAPI errors into ``{field, message}`` entries, one per error."""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        details.append(
            {
                "field": ".".join(loc) or "body",
                "message": err.get("msg", "Invalid value"),
            }
        )
    return details


def validate(model: type[M], payload: Any) -> tuple[M | None, list[dict[str, str]]]:
    """Validate ``payload`` against ``model``.

    Returns ``(parsed, [])`` on success and ``(None, errors)`` otherwise; never raises
    for invalid input.
    """
    try:
        return model.model_validate(payload), []
    except PydanticValidationError as exc:
        return None, field_errors(exc.errors())
