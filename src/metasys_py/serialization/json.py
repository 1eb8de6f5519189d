"""JSON serializer backed by orjson."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

import orjson

logger = logging.getLogger(__name__)


def json_default(obj: object) -> object:
    """Default handler for serializing Metasys types to JSON.

    Use as the *default* argument to :func:`json.dumps` or
    :func:`orjson.dumps` so that client models serialize automatically.

    Handles:

    * Objects with a ``to_dict()`` method (``Variant``, ``VariantBundle``,
      ``ObjectNode``, ``Credential`` and the other models).
    * ``UUID`` -> canonical string, ``datetime`` -> ISO 8601 string.
    * ``Enum`` members -> their value.
    * ``tuple`` / ``frozenset`` -> list.

    Example::

        import json
        from metasys_py import json_default

        bundles = await client.read_property_multiple(ids, ["presentValue"])
        print(json.dumps(bundles, default=json_default))

    :param obj: The object to convert.
    :returns: A JSON-serializable representation.
    :raises TypeError: If *obj* is not a recognised type.
    """
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (tuple, frozenset)):
        return list(obj)
    msg = f"Cannot serialize {type(obj).__name__}"
    logger.warning("serialize failed: %s", msg)
    raise TypeError(msg)


class JsonSerializer:
    """JSON serializer using orjson for high-performance encoding.

    :param pretty: Indent output with 2 spaces.
    :param sort_keys: Sort dict keys alphabetically.
    """

    def __init__(
        self,
        *,
        pretty: bool = False,
        sort_keys: bool = False,
    ) -> None:
        self._options = orjson.OPT_NON_STR_KEYS | orjson.OPT_PASSTHROUGH_DATACLASS
        if pretty:
            self._options |= orjson.OPT_INDENT_2
        if sort_keys:
            self._options |= orjson.OPT_SORT_KEYS

    def encode(self, data: Any) -> bytes:
        """Encode a value to JSON bytes."""
        return orjson.dumps(data, default=self._default, option=self._options)

    def decode(self, raw: bytes) -> Any:
        """Decode JSON bytes to a Python value.

        :raises ValueError: If *raw* is not valid JSON
            (:class:`orjson.JSONDecodeError` is a ``ValueError``).
        """
        return orjson.loads(raw)

    @property
    def content_type(self) -> str:
        """MIME content type for JSON."""
        return "application/json"

    def _default(self, obj: Any) -> Any:
        """Handle types that orjson cannot serialize natively."""
        return json_default(obj)
