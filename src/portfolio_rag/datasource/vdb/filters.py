"""Metadata filter matching shared by every vector store."""

from typing import Any


def _norm(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def _as_set(value: Any) -> set:
    if isinstance(value, (list, tuple, set)):
        return {_norm(v) for v in value}
    return {_norm(value)}


def value_matches(expected: Any, actual: Any) -> bool:
    """
    Whether one metadata value satisfies one filter value.

    - scalar filter: equals a scalar value, or is contained in a list value
    - list filter: shares at least one element with the value
    String comparison ignores case.
    """
    if actual is None:
        return False
    if isinstance(expected, (list, tuple, set)):
        return bool(_as_set(expected) & _as_set(actual))
    return _norm(expected) in _as_set(actual)


def metadata_matches(metadata: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    """True when every filter key matches; an empty filter matches everything."""
    if not filter:
        return True
    return all(value_matches(expected, metadata.get(key)) for key, expected in filter.items())
