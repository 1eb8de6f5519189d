"""Object tree, type catalog and command models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from metasys_py.types.parsing import get_str, try_parse_object_id

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from metasys_py.localization.translator import EnumTranslator

CHILDREN_NOT_FETCHED = -1
"""``children_count`` of a node whose children were never requested."""


@dataclass(frozen=True, slots=True)
class ObjectNode:
    """One object (or network device) in the server's object tree.

    Returned by :meth:`TreeClient.get_objects` and
    :meth:`TreeClient.get_network_devices`.
    """

    id: UUID | None
    """Object identifier, or ``None`` when the server sent an unparsable one."""

    item_reference: str = ""
    """Hierarchical path of the object (``"site:NAE-1/Programming.AV1"``)."""

    name: str = ""
    """Object name."""

    description: str = ""
    """Object description."""

    children: tuple[ObjectNode, ...] | None = None
    """Direct children, or ``None`` when they were not fetched."""

    @property
    def children_count(self) -> int:
        """Number of direct children, or ``-1`` when they were not fetched."""
        if self.children is None:
            return CHILDREN_NOT_FETCHED
        return len(self.children)

    @classmethod
    def from_payload(
        cls,
        item: dict[str, Any],
        children: Sequence[ObjectNode] | None = None,
    ) -> ObjectNode:
        """Build a node from one entry of a paged ``items`` list.

        Missing text fields become empty strings and a missing or
        malformed ``id`` becomes ``None``.
        """
        return cls(
            id=try_parse_object_id(item.get("id")),
            item_reference=get_str(item, "itemReference") or "",
            name=get_str(item, "name") or "",
            description=get_str(item, "description") or "",
            children=tuple(children) if children is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {
            "id": str(self.id) if self.id is not None else None,
            "item_reference": self.item_reference,
            "name": self.name,
            "description": self.description,
            "children": (
                [child.to_dict() for child in self.children] if self.children is not None else None
            ),
            "children_count": self.children_count,
        }

    def __str__(self) -> str:
        return (
            f"Id: {self.id}\n"
            f"ItemReference: {self.item_reference}\n"
            f"Name: {self.name}\n"
            f"Description: {self.description}\n"
            f"Number of Children: {self.children_count}"
        )


@dataclass(frozen=True, slots=True)
class ObjectTypeDescriptor:
    """A network device type available on the server.

    Returned by :meth:`TreeClient.get_network_device_types`.
    """

    id: int
    """Numeric type identifier."""

    key: str
    """``objectTypeEnumSet`` key, or the raw description when none matched."""

    description: str
    """Localized type label, or the server's description when untranslated."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {"id": self.id, "key": self.key, "description": self.description}


@dataclass(frozen=True, slots=True)
class Command:
    """A command an object accepts.

    Returned by :meth:`PropertyClient.get_commands`.
    """

    command_id: str
    """Identifier used in the command URL (``"adjustCommand"``)."""

    title: str
    """Localized command title."""

    title_enum_key: str
    """``commandIdEnumSet`` key resolved from the server's title."""

    items: tuple[Any, ...] = ()
    """Raw argument descriptors as sent by the server."""

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        translator: EnumTranslator,
        locale: str,
    ) -> Command:
        """Build a command from one entry of an object's command list."""
        command_id = get_str(payload, "commandId") or ""
        raw_title = get_str(payload, "title") or command_id
        key = translator.reverse_lookup_command(raw_title)
        items = payload.get("items")
        return cls(
            command_id=command_id,
            title=translator.localize(key, locale),
            title_enum_key=key,
            items=tuple(items) if isinstance(items, list) else (),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {
            "command_id": self.command_id,
            "title": self.title,
            "title_enum_key": self.title_enum_key,
            "items": list(self.items),
        }
