"""Parsing helpers for object identifiers and response fields."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from metasys_py.errors import MetasysIdentifierError


def try_parse_object_id(value: object) -> UUID | None:
    """Parse *value* as an object identifier.

    Accepted formats::

        UUID(...)                                 -> pass-through
        "a1b2c3d4-0000-0000-0000-000000000001"    -> UUID
        "{a1b2c3d4-0000-0000-0000-000000000001}"  -> UUID
        "a1b2c3d4000000000000000000000001"        -> UUID

    :param value: Candidate identifier.
    :returns: The parsed :class:`~uuid.UUID`, or ``None`` when *value*
        is missing or not an identifier.
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def parse_object_id(value: object) -> UUID:
    """Parse *value* as an object identifier or raise.

    :raises MetasysIdentifierError: If *value* is not an identifier.
    """
    parsed = try_parse_object_id(value)
    if parsed is None:
        raise MetasysIdentifierError(value)
    return parsed


def get_str(payload: dict[str, Any], key: str) -> str | None:
    """Return ``payload[key]`` when it is a string, else ``None``."""
    value = payload.get(key)
    return value if isinstance(value, str) else None


def get_int(payload: dict[str, Any], key: str) -> int | None:
    """Return ``payload[key]`` as an ``int`` when it holds an integer.

    Integral floats and digit strings are accepted; booleans are not.
    """
    value = payload.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
