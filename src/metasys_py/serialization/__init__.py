"""JSON encoding for request bodies, responses and exported results.

:class:`~metasys_py.serialization.json.JsonSerializer` is the codec the
application uses on the wire.  :func:`serialize` and :func:`deserialize`
are shortcuts for exporting client results and reading locale files.
"""

from __future__ import annotations

from typing import Any

from metasys_py.serialization.json import JsonSerializer, json_default

__all__ = ["JsonSerializer", "deserialize", "json_default", "serialize"]

_decoder = JsonSerializer()


def serialize(obj: Any, *, pretty: bool = False, sort_keys: bool = False) -> bytes:
    """Encode a client result to JSON bytes.

    Models (``Variant``, ``VariantBundle``, ``ObjectNode`` and the rest)
    are written through their ``to_dict()``, alone or inside lists and dicts::

        bundles = await client.read_property_multiple(ids, ["presentValue"])
        Path("values.json").write_bytes(serialize(bundles, pretty=True))
    """
    return JsonSerializer(pretty=pretty, sort_keys=sort_keys).encode(obj)


def deserialize(raw: bytes) -> dict[str, Any]:
    """Decode a JSON document that must be an object.

    :raises ValueError: If *raw* is not valid JSON.
    :raises TypeError: If the document is not an object.
    """
    result = _decoder.decode(raw)
    if not isinstance(result, dict):
        msg = f"Expected JSON object, got {type(result).__name__}"
        raise TypeError(msg)
    return result
