"""Helpers for safe debug logging.

Both remote services authenticate with static keys: the simulation through
the ``DTGCommKey`` header and OpenWeather through the ``appid`` query
parameter.  This module redacts those before request details reach a log.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset({"appid", "apikey", "api_key", "dtgcommkey", "authorization"})

_MAX_DEPTH = 8


def is_sensitive(key: object) -> bool:
    return str(key).lower() in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut.

    Mappings are walked recursively and any key naming a credential has its
    value replaced, whatever its type.  Lists and tuples are walked too;
    scalars pass through unchanged.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, Mapping):
        return {
            str(key): REDACTED
            if is_sensitive(key)
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return value
