"""Simplified Metasys client combining the application and service layers.

Provides a single :class:`Client` async context manager for common use.
For custom transports, resource providers or direct access to the
session, use :class:`~metasys_py.app.application.MetasysApplication`
with :class:`~metasys_py.app.properties.PropertyClient` and
:class:`~metasys_py.app.tree.TreeClient` directly.

Typical usage::

    from metasys_py import Client

    async with Client("nae.example.com", locale="de-DE") as client:
        await client.login("user", "secret")
        object_id = await client.get_object_identifier("site:NAE-1/AV1")
        value = await client.read_property(object_id, "presentValue")
        await client.write_property(object_id, "presentValue", 72.5)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from metasys_py.app.application import ClientConfig, MetasysApplication
from metasys_py.app.properties import PropertyClient
from metasys_py.app.tree import TreeClient
from metasys_py.types.parsing import parse_object_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from metasys_py.app.session import Credential
    from metasys_py.localization.resources import ResourceProvider
    from metasys_py.transport import HttpTransport
    from metasys_py.types.objects import Command, ObjectNode, ObjectTypeDescriptor
    from metasys_py.types.values import Variant, VariantBundle


class Client:
    """Metasys REST client for common use cases.

    Combines :class:`~metasys_py.app.application.MetasysApplication`,
    :class:`~metasys_py.app.properties.PropertyClient` and
    :class:`~metasys_py.app.tree.TreeClient` into one async context
    manager.  Object identifiers may be given as :class:`~uuid.UUID` or
    as strings; an unparsable string raises
    :class:`~metasys_py.errors.MetasysIdentifierError`.

    Usage::

        async with Client("nae.example.com") as client:
            await client.login("user", "secret")
            tree = await client.get_objects(site_id, levels=2)
    """

    def __init__(
        self,
        hostname: str | None = None,
        *,
        config: ClientConfig | None = None,
        transport: HttpTransport | None = None,
        resources: ResourceProvider | None = None,
        **options: Any,
    ) -> None:
        """Create a Metasys client.

        :param hostname: Server host name (used if *config* is not provided).
        :param config: Full client configuration.  If provided,
            *hostname* and *options* are ignored.
        :param transport: Custom HTTP transport.
        :param resources: Custom locale resources.
        :param options: Other :class:`ClientConfig` fields, e.g.
            ``locale="de-DE"`` or ``verify_ssl=False``.
        """
        if config is None:
            if hostname is None:
                msg = "Either hostname or config is required"
                raise ValueError(msg)
            config = ClientConfig(hostname=hostname, **options)
        self._app = MetasysApplication(config, transport=transport, resources=resources)
        self._properties = PropertyClient(self._app)
        self._tree = TreeClient(self._app)

    @property
    def app(self) -> MetasysApplication:
        """The underlying MetasysApplication."""
        return self._app

    @property
    def locale(self) -> str:
        """Locale used for display strings."""
        return self._app.locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._app.locale = value

    @property
    def access_token(self) -> Credential | None:
        """The current session credential, or ``None`` before login."""
        return self._app.session.credential

    async def __aenter__(self) -> Client:
        """Start the application and return the client."""
        await self._app.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """End the session and stop the application."""
        await self._app.stop()

    # --- Session ---

    async def login(self, username: str, password: str, *, refresh: bool | None = None) -> Credential:
        """Log in and keep the session refreshed.

        See :meth:`~metasys_py.app.session.SessionManager.login` for details.
        """
        return await self._app.session.login(username, password, refresh=refresh)

    async def refresh(self) -> Credential:
        """Refresh the session credential now.

        See :meth:`~metasys_py.app.session.SessionManager.refresh` for details.
        """
        return await self._app.session.refresh()

    # --- Localization ---

    def localize(self, key: str, locale: str | None = None) -> str:
        """Return the display string for an enumeration key.

        Uses the client locale when *locale* is ``None`` or blank.
        See :meth:`~metasys_py.localization.translator.EnumTranslator.localize`.
        """
        if locale is None or not locale.strip():
            locale = self._app.locale
        return self._app.translator.localize(key, locale)

    def get_command_enumeration(self, display: str) -> str:
        """Return the ``commandIdEnumSet`` key for a default-locale command title."""
        return self._app.translator.reverse_lookup_command(display)

    def get_object_type_enumeration(self, display: str) -> str:
        """Return the ``objectTypeEnumSet`` key for a default-locale type name."""
        return self._app.translator.reverse_lookup_object_type(display)

    # --- Attributes ---

    async def read_property(self, object_id: UUID | str, attribute: str) -> Variant | None:
        """Read one attribute.

        See :meth:`~metasys_py.app.properties.PropertyClient.read_property` for details.
        """
        return await self._properties.read_property(parse_object_id(object_id), attribute)

    async def read_property_multiple(
        self,
        object_ids: Iterable[UUID | str],
        attributes: Iterable[str],
    ) -> list[VariantBundle]:
        """Read several attributes from several objects.

        See :meth:`~metasys_py.app.properties.PropertyClient.read_property_multiple`
        for details.
        """
        ids = [parse_object_id(object_id) for object_id in object_ids]
        return await self._properties.read_property_multiple(ids, attributes)

    async def write_property(
        self,
        object_id: UUID | str,
        attribute: str,
        value: Any,
        priority: str | None = None,
    ) -> None:
        """Write one attribute.

        See :meth:`~metasys_py.app.properties.PropertyClient.write_property` for details.
        """
        await self._properties.write_property(
            parse_object_id(object_id), attribute, value, priority
        )

    async def write_property_multiple(
        self,
        object_ids: Iterable[UUID | str],
        attribute_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
        priority: str | None = None,
    ) -> None:
        """Write the same attribute values to several objects.

        See :meth:`~metasys_py.app.properties.PropertyClient.write_property_multiple`
        for details.
        """
        ids = [parse_object_id(object_id) for object_id in object_ids]
        await self._properties.write_property_multiple(ids, attribute_values, priority)

    # --- Commands ---

    async def get_commands(self, object_id: UUID | str) -> list[Command]:
        """List the commands an object accepts."""
        return await self._properties.get_commands(parse_object_id(object_id))

    async def send_command(
        self,
        object_id: UUID | str,
        command: str,
        values: Iterable[Any] | None = None,
    ) -> None:
        """Send a command to an object."""
        await self._properties.send_command(parse_object_id(object_id), command, values)

    # --- Tree ---

    async def get_object_identifier(self, item_reference: str) -> UUID:
        """Resolve an item reference to its object identifier.

        See :meth:`~metasys_py.app.tree.TreeClient.get_object_identifier` for details.
        """
        return await self._tree.get_object_identifier(item_reference)

    async def get_objects(self, object_id: UUID | str, levels: int = 1) -> list[ObjectNode]:
        """List the children of an object.

        See :meth:`~metasys_py.app.tree.TreeClient.get_objects` for details.
        """
        return await self._tree.get_objects(parse_object_id(object_id), levels)

    async def get_network_devices(self, type_filter: str | None = None) -> list[ObjectNode]:
        """List network devices.

        See :meth:`~metasys_py.app.tree.TreeClient.get_network_devices` for details.
        """
        return await self._tree.get_network_devices(type_filter)

    async def get_network_device_types(self) -> list[ObjectTypeDescriptor]:
        """List network device types.

        See :meth:`~metasys_py.app.tree.TreeClient.get_network_device_types` for details.
        """
        return await self._tree.get_network_device_types()
