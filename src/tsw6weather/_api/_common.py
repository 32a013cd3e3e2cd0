"""Shared helpers for endpoint modules.

It is internal to tsw6weather and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tsw6weather.exceptions import Tsw6ResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], payload: Any, *, endpoint: str) -> ModelT:
    """Validate *payload* as *model*, mapping shape errors to :class:`Tsw6ResponseError`."""
    if not isinstance(payload, dict):
        raise Tsw6ResponseError(
            f"{endpoint} returned {type(payload).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise Tsw6ResponseError(
            f"{endpoint} returned an unexpected payload: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc
