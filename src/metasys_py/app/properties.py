"""Attribute reads, writes and commands.

Multi-object operations fan out one request per object (or per
object/attribute pair for reads), wait for every request to finish,
and correlate the results by object identifier rather than by
completion order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from metasys_py.app.application import api_path
from metasys_py.errors import MetasysNotFoundError, MetasysPropertyError
from metasys_py.types.objects import Command
from metasys_py.types.values import VariantBundle

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from metasys_py.app.application import MetasysApplication
    from metasys_py.types.values import Variant

logger = logging.getLogger(__name__)


def build_write_body(
    attribute_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
    priority: str | None = None,
) -> dict[str, Any]:
    """Build the body shared by single and multi-object writes.

    :param attribute_values: ``{attribute: value}`` or ``(attribute, value)`` pairs.
    :param priority: ``writePriorityEnumSet`` key, or ``None`` to omit.
    :returns: ``{"item": {attribute: value, ..., "priority": priority}}``.
    """
    pairs = attribute_values.items() if isinstance(attribute_values, Mapping) else attribute_values
    item: dict[str, Any] = dict(pairs)
    if priority is not None:
        item["priority"] = priority
    return {"item": item}


def raise_first_failure(results: Sequence[object], operation: str) -> None:
    """Raise the failure with the lowest index in *results*, if any.

    Later failures are logged and counted in a note on the raised error.
    """
    failures = [(index, r) for index, r in enumerate(results) if isinstance(r, BaseException)]
    if not failures:
        return
    _, first = failures[0]
    for index, other in failures[1:]:
        logger.warning("%s request %d also failed: %s", operation, index, other)
    if len(failures) > 1:
        first.add_note(f"{len(failures) - 1} other {operation} request(s) also failed")
    raise first


class PropertyClient:
    """Read and write object attributes.

    :param app: The :class:`MetasysApplication` to send requests through.
    """

    def __init__(self, app: MetasysApplication) -> None:
        self._app = app

    async def read_property(self, object_id: UUID, attribute: str) -> Variant | None:
        """Read one attribute of one object.

        :param object_id: Identifier of the object.
        :param attribute: Attribute name (``"presentValue"``).
        :returns: The normalized value, or ``None`` if the server answered 404.
        :raises MetasysPropertyError: If the response has no ``item`` object.
        :raises MetasysHttpError: On any other non-success status.

        Example::

            value = await props.read_property(object_id, "presentValue")
            if value is not None:
                print(value.string_value, value.reliability)
        """
        logger.debug("read_property %s %s", object_id, attribute)
        try:
            payload = await self._app.request_json(
                "GET", api_path("objects", object_id, "attributes", attribute)
            )
        except MetasysNotFoundError:
            return None
        item = payload.get("item") if isinstance(payload, dict) else None
        if not isinstance(item, dict):
            raise MetasysPropertyError(payload, f"no item in {attribute} response")
        return self._app.normalizer.normalize(
            item.get(attribute), attribute, object_id, self._app.locale
        )

    async def read_property_multiple(
        self,
        object_ids: Iterable[UUID],
        attributes: Iterable[str],
    ) -> list[VariantBundle]:
        """Read several attributes from several objects concurrently.

        One request is issued per ``(object, attribute)`` pair.  Attributes
        an object does not have (404) are left out; an object none of whose
        attributes resolved is left out entirely, unless *attributes* is
        empty, in which case every object gets an empty bundle.

        Every request runs to completion.  If any failed with anything
        other than 404, the failure of the earliest request (objects in
        the given order, attributes in the given order within an object)
        is raised and no result is returned.

        :param object_ids: Objects to read; duplicates are read once.
        :param attributes: Attribute names to read from every object.
        :returns: One :class:`VariantBundle` per object, in the given order.
        """
        ids = list(dict.fromkeys(object_ids))
        names = list(attributes)
        logger.debug("read_property_multiple %d objects x %d attributes", len(ids), len(names))

        pairs = [(object_id, name) for object_id in ids for name in names]
        results = await asyncio.gather(
            *(self.read_property(object_id, name) for object_id, name in pairs),
            return_exceptions=True,
        )
        raise_first_failure(results, "read_property")

        by_owner: dict[UUID, list[Variant]] = {object_id: [] for object_id in ids}
        for (object_id, _), result in zip(pairs, results, strict=True):
            if result is not None:
                by_owner[object_id].append(result)

        return [
            VariantBundle(owner_id=object_id, variants=tuple(variants))
            for object_id, variants in by_owner.items()
            if variants or not names
        ]

    async def write_property(
        self,
        object_id: UUID,
        attribute: str,
        value: Any,
        priority: str | None = None,
    ) -> None:
        """Write one attribute of one object.

        :param object_id: Identifier of the object.
        :param attribute: Attribute name.
        :param value: New value (any JSON-encodable value).
        :param priority: ``writePriorityEnumSet`` key, e.g.
            ``"writePriorityEnumSet.priorityDefault"``.
        """
        logger.debug("write_property %s %s", object_id, attribute)
        await self._write(object_id, build_write_body([(attribute, value)], priority))

    async def write_property_multiple(
        self,
        object_ids: Iterable[UUID],
        attribute_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
        priority: str | None = None,
    ) -> None:
        """Write the same attribute values to several objects concurrently.

        All writes are attempted.  If any failed, the failure of the
        earliest object in the given order is raised.

        :param object_ids: Objects to write.
        :param attribute_values: ``{attribute: value}`` or pairs.
        :param priority: ``writePriorityEnumSet`` key, or ``None``.
        """
        ids = list(object_ids)
        body = build_write_body(attribute_values, priority)
        logger.debug("write_property_multiple %d objects, %d attributes", len(ids), len(body["item"]))
        results = await asyncio.gather(
            *(self._write(object_id, body) for object_id in ids),
            return_exceptions=True,
        )
        raise_first_failure(results, "write_property")

    async def get_commands(self, object_id: UUID) -> list[Command]:
        """List the commands an object accepts.

        :returns: The commands, with localized titles; empty when the
            server returns anything other than a list.
        """
        logger.debug("get_commands %s", object_id)
        payload = await self._app.request_json("GET", api_path("objects", object_id, "commands"))
        if not isinstance(payload, list):
            return []
        return [
            Command.from_payload(entry, self._app.translator, self._app.locale)
            for entry in payload
            if isinstance(entry, dict)
        ]

    async def send_command(
        self,
        object_id: UUID,
        command: str,
        values: Iterable[Any] | None = None,
    ) -> None:
        """Send a command to an object.

        :param object_id: Identifier of the object.
        :param command: Command identifier (``"adjustCommand"``).
        :param values: Command arguments, sent as a JSON array.
        """
        logger.info("send_command %s to %s", command, object_id)
        await self._app.request_json(
            "PUT",
            api_path("objects", object_id, "commands", command),
            json=list(values) if values is not None else [],
        )

    async def _write(self, object_id: UUID, body: dict[str, Any]) -> None:
        await self._app.request_json("PATCH", api_path("objects", object_id), json=body)
