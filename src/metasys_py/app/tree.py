"""Object tree, network device and device type listing.

List endpoints are paged: each response carries ``items``, a ``total``
and a ``next`` link that is ``null`` on the last page.  Pages are
requested by number, starting at 1.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from metasys_py.app.application import api_path
from metasys_py.errors import MetasysIdentifierError, MetasysObjectTypeError, MetasysParsingError
from metasys_py.types.objects import ObjectNode, ObjectTypeDescriptor
from metasys_py.types.parsing import get_int, get_str, try_parse_object_id

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from uuid import UUID

    from metasys_py.app.application import MetasysApplication

logger = logging.getLogger(__name__)


class TreeClient:
    """Walk the object tree and the network device catalog.

    :param app: The :class:`MetasysApplication` to send requests through.
    """

    def __init__(self, app: MetasysApplication) -> None:
        self._app = app

    async def get_object_identifier(self, item_reference: str) -> UUID:
        """Resolve an item reference to its object identifier.

        :param item_reference: Hierarchical reference
            (``"site:NAE-1/Programming.AV1"``).
        :raises MetasysIdentifierError: If the server's answer is not an identifier.
        """
        logger.debug("get_object_identifier %s", item_reference)
        payload = await self._app.request_json(
            "GET", "objectIdentifiers", params={"fqr": item_reference}
        )
        object_id = try_parse_object_id(payload)
        if object_id is None:
            raise MetasysIdentifierError(payload)
        return object_id

    async def get_objects(self, object_id: UUID, levels: int = 1) -> list[ObjectNode]:
        """List the children of an object, optionally several levels deep.

        With ``levels=1`` only the direct children are returned and none
        of them have their own children fetched (``children_count`` is
        ``-1``).  Each extra level fetches one more generation.  A child
        whose identifier cannot be parsed is still returned, without
        children, and the walk carries on with its siblings.

        :param object_id: Parent object.
        :param levels: Depth to fetch; less than 1 returns ``[]``.
        :raises MetasysParsingError: If a page is missing ``total``,
            ``items`` or ``next``.

        Example::

            tree = await client.get_objects(site_id, levels=2)
            for node in tree:
                print(node.name, node.children_count)
        """
        if levels < 1:
            return []
        logger.debug("get_objects %s levels=%d", object_id, levels)
        nodes: list[ObjectNode] = []
        path = api_path("objects", object_id, "objects")
        async for item in self._iter_pages(path, require_total=True):
            if levels - 1 > 0:
                child_id = try_parse_object_id(item.get("id"))
                if child_id is None:
                    logger.warning("skipping children of %r under %s: bad id", item.get("id"), object_id)
                    nodes.append(ObjectNode.from_payload(item))
                    continue
                children = await self.get_objects(child_id, levels - 1)
                nodes.append(ObjectNode.from_payload(item, children))
            else:
                nodes.append(ObjectNode.from_payload(item))
        return nodes

    async def get_network_devices(self, type_filter: str | None = None) -> list[ObjectNode]:
        """List network devices, optionally of one type.

        :param type_filter: Device type number as a string, e.g. ``"185"``.
        :raises MetasysParsingError: If a page is missing ``items`` or ``next``.
        """
        logger.debug("get_network_devices type=%s", type_filter)
        params = {"type": type_filter} if type_filter is not None else None
        return [
            ObjectNode.from_payload(item)
            async for item in self._iter_pages("networkDevices", params=params)
        ]

    async def get_network_device_types(self) -> list[ObjectTypeDescriptor]:
        """List the network device types the server knows about.

        The server returns links to the type descriptions; each link is
        fetched in turn and its description translated to the client
        locale through the ``objectTypeEnumSet``.  Descriptions with no
        translation are kept as sent.

        :raises MetasysParsingError: If the type list is malformed.
        :raises MetasysObjectTypeError: If a type description is malformed.
        """
        logger.debug("get_network_device_types")
        payload = await self._app.request_json("GET", api_path("networkDevices", "availableTypes"))
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise MetasysParsingError(payload, "type list has no items")

        types: list[ObjectTypeDescriptor] = []
        for item in items:
            type_url = get_str(item, "typeUrl") if isinstance(item, dict) else None
            if type_url is None:
                raise MetasysParsingError(payload, "type entry has no typeUrl")
            types.append(await self._resolve_type(type_url))
        return types

    async def _resolve_type(self, type_url: str) -> ObjectTypeDescriptor:
        payload = await self._app.request_json("GET", type_url)
        if not isinstance(payload, dict):
            raise MetasysObjectTypeError(payload, "type description is not an object")
        description = get_str(payload, "description")
        type_id = get_int(payload, "id")
        if description is None or type_id is None:
            raise MetasysObjectTypeError(payload, "type description has no id or description")

        translator = self._app.translator
        key = translator.reverse_lookup_object_type(description)
        translation = translator.localize(key, self._app.locale)
        if translation != key:
            return ObjectTypeDescriptor(id=type_id, key=key, description=translation)
        return ObjectTypeDescriptor(id=type_id, key=key, description=description)

    async def _iter_pages(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        require_total: bool = False,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield the items of every page of a paged list.

        Pages are fetched one at a time while the previous page had a
        ``next`` link.  When *require_total* is set, a page reporting a
        total of 0 ends the listing without needing ``items``.
        """
        page = 1
        while True:
            query: dict[str, Any] = {"page": page}
            if params:
                query.update(params)
            logger.debug("fetch %s page %d", path, page)
            payload = await self._app.request_json("GET", path, params=query)
            if not isinstance(payload, dict):
                raise MetasysParsingError(payload, f"page {page} of {path} is not an object")

            if require_total:
                total = get_int(payload, "total")
                if total is None:
                    raise MetasysParsingError(payload, f"page {page} of {path} has no total")
                if total == 0:
                    return

            items = payload.get("items")
            if not isinstance(items, list):
                raise MetasysParsingError(payload, f"page {page} of {path} has no items")
            if "next" not in payload:
                raise MetasysParsingError(payload, f"page {page} of {path} has no next link")

            for item in items:
                if isinstance(item, dict):
                    yield item

            if payload["next"] is None:
                return
            page += 1
