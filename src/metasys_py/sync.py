"""Blocking wrapper around :class:`~metasys_py.client.Client`.

The async client runs on an event loop owned by a daemon thread, so the
scheduled credential refresh keeps firing between blocking calls.  Each
method submits the matching coroutine to that loop and blocks until it
completes.

Typical usage::

    from metasys_py import SyncClient

    with SyncClient("nae.example.com") as client:
        client.login("user", "secret")
        bundles = client.read_property_multiple(ids, ["presentValue", "units"])
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar

from metasys_py.client import Client

if TYPE_CHECKING:
    from collections.abc import Coroutine, Iterable, Mapping
    from uuid import UUID

    from metasys_py.app.session import Credential
    from metasys_py.types.objects import Command, ObjectNode, ObjectTypeDescriptor
    from metasys_py.types.values import Variant, VariantBundle

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class SyncClient:
    """Blocking Metasys client.

    Accepts the same arguments as :class:`~metasys_py.client.Client`.
    Use as a context manager, or call :meth:`open` and :meth:`close`.
    """

    def __init__(self, hostname: str | None = None, **kwargs: Any) -> None:
        self._client = Client(hostname, **kwargs)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def client(self) -> Client:
        """The wrapped async client."""
        return self._client

    @property
    def locale(self) -> str:
        """Locale used for display strings."""
        return self._client.locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._client.locale = value

    @property
    def access_token(self) -> Credential | None:
        """The current session credential, or ``None`` before login."""
        return self._client.access_token

    def open(self) -> None:
        """Start the background loop and the client."""
        if self._loop is not None:
            return
        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, name="metasys-py", daemon=True)
        thread.start()
        self._loop = loop
        self._thread = thread
        self._run(self._client.__aenter__())

    def close(self) -> None:
        """Stop the client and the background loop."""
        loop = self._loop
        if loop is None:
            return
        try:
            self._run(self._client.__aexit__(None, None, None))
        finally:
            loop.call_soon_threadsafe(loop.stop)
            if self._thread is not None:
                self._thread.join()
            loop.close()
            self._loop = None
            self._thread = None

    def __enter__(self) -> SyncClient:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        if self._loop is None:
            coro.close()
            msg = "SyncClient not open; use 'with SyncClient(...) as c:'"
            raise RuntimeError(msg)
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result()

    def login(self, username: str, password: str, *, refresh: bool | None = None) -> Credential:
        """Log in; see :meth:`Client.login`."""
        return self._run(self._client.login(username, password, refresh=refresh))

    def refresh(self) -> Credential:
        """Refresh the credential now; see :meth:`Client.refresh`."""
        return self._run(self._client.refresh())

    def localize(self, key: str, locale: str | None = None) -> str:
        """Return the display string for an enumeration key."""
        return self._client.localize(key, locale)

    def get_command_enumeration(self, display: str) -> str:
        """Return the ``commandIdEnumSet`` key for a command title."""
        return self._client.get_command_enumeration(display)

    def get_object_type_enumeration(self, display: str) -> str:
        """Return the ``objectTypeEnumSet`` key for a type name."""
        return self._client.get_object_type_enumeration(display)

    def read_property(self, object_id: UUID | str, attribute: str) -> Variant | None:
        """Read one attribute; see :meth:`Client.read_property`."""
        return self._run(self._client.read_property(object_id, attribute))

    def read_property_multiple(
        self,
        object_ids: Iterable[UUID | str],
        attributes: Iterable[str],
    ) -> list[VariantBundle]:
        """Read several attributes; see :meth:`Client.read_property_multiple`."""
        return self._run(self._client.read_property_multiple(list(object_ids), list(attributes)))

    def write_property(
        self,
        object_id: UUID | str,
        attribute: str,
        value: Any,
        priority: str | None = None,
    ) -> None:
        """Write one attribute; see :meth:`Client.write_property`."""
        self._run(self._client.write_property(object_id, attribute, value, priority))

    def write_property_multiple(
        self,
        object_ids: Iterable[UUID | str],
        attribute_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
        priority: str | None = None,
    ) -> None:
        """Write to several objects; see :meth:`Client.write_property_multiple`."""
        self._run(
            self._client.write_property_multiple(list(object_ids), attribute_values, priority)
        )

    def get_commands(self, object_id: UUID | str) -> list[Command]:
        """List an object's commands; see :meth:`Client.get_commands`."""
        return self._run(self._client.get_commands(object_id))

    def send_command(
        self,
        object_id: UUID | str,
        command: str,
        values: Iterable[Any] | None = None,
    ) -> None:
        """Send a command; see :meth:`Client.send_command`."""
        self._run(self._client.send_command(object_id, command, values))

    def get_object_identifier(self, item_reference: str) -> UUID:
        """Resolve an item reference; see :meth:`Client.get_object_identifier`."""
        return self._run(self._client.get_object_identifier(item_reference))

    def get_objects(self, object_id: UUID | str, levels: int = 1) -> list[ObjectNode]:
        """List child objects; see :meth:`Client.get_objects`."""
        return self._run(self._client.get_objects(object_id, levels))

    def get_network_devices(self, type_filter: str | None = None) -> list[ObjectNode]:
        """List network devices; see :meth:`Client.get_network_devices`."""
        return self._run(self._client.get_network_devices(type_filter))

    def get_network_device_types(self) -> list[ObjectTypeDescriptor]:
        """List network device types; see :meth:`Client.get_network_device_types`."""
        return self._run(self._client.get_network_device_types())
