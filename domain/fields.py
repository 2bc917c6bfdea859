from __future__ import annotations

from typing import Any, Iterable, Mapping


def project(payload: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """Keep only the allowed keys that are present in the payload."""
    return {key: payload[key] for key in allowed if key in payload}


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
