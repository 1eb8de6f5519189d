"""Application layer wiring transport, session and localization."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from metasys_py.app.session import DEFAULT_REFRESH_MARGIN, SessionManager
from metasys_py.errors import MetasysHttpError, MetasysNotFoundError, MetasysParsingError
from metasys_py.localization.formatting import DEFAULT_LOCALE, normalize_locale
from metasys_py.localization.resources import default_resource_provider
from metasys_py.localization.translator import EnumTranslator
from metasys_py.serialization.json import JsonSerializer
from metasys_py.types.values import ValueNormalizer

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metasys_py.localization.resources import ResourceProvider
    from metasys_py.transport import HttpResponse, HttpTransport

logger = logging.getLogger(__name__)


@dataclass
class ClientConfig:
    """Configuration for a Metasys client."""

    hostname: str
    api_version: str = "v2"
    verify_ssl: bool = True
    locale: str = DEFAULT_LOCALE
    default_locale: str = DEFAULT_LOCALE
    auto_refresh: bool = True
    refresh_margin: float = DEFAULT_REFRESH_MARGIN
    request_timeout: float = 30.0  # seconds

    @property
    def base_url(self) -> str:
        """Root URL of the REST API."""
        return f"https://{self.hostname}/api/{self.api_version}"


def api_path(*segments: object) -> str:
    """Join path segments, percent-encoding each one.

    Example::

        api_path("objects", object_id, "attributes", "presentValue")
        # "objects/6f1e.../attributes/presentValue"
    """
    return "/".join(quote(str(segment), safe="") for segment in segments)


class MetasysApplication:
    """Central object connecting the transport, session and translator.

    Sends every request through :meth:`request_json`, which attaches the
    current credential and turns non-success statuses and undecodable
    bodies into typed errors.

    :param config: Client configuration.
    :param transport: HTTP transport; an
        :class:`~metasys_py.transport.http.AiohttpTransport` for
        ``config`` when ``None``.
    :param resources: Locale resources; the bundled set when ``None``.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: HttpTransport | None = None,
        resources: ResourceProvider | None = None,
    ) -> None:
        self._config = config
        if transport is None:
            from metasys_py.transport.http import AiohttpTransport

            transport = AiohttpTransport(
                config.base_url,
                verify_ssl=config.verify_ssl,
                timeout=config.request_timeout,
            )
        self._transport = transport
        self._serializer = JsonSerializer()
        self._translator = EnumTranslator(
            resources if resources is not None else default_resource_provider(),
            default_locale=config.default_locale,
        )
        self._normalizer = ValueNormalizer(self._translator)
        self._session = SessionManager(
            self.request_json,
            auto_refresh=config.auto_refresh,
            refresh_margin=config.refresh_margin,
        )
        self._locale = normalize_locale(config.locale)

    @property
    def config(self) -> ClientConfig:
        """The client configuration."""
        return self._config

    @property
    def transport(self) -> HttpTransport:
        """The HTTP transport."""
        return self._transport

    @property
    def session(self) -> SessionManager:
        """The session credential manager."""
        return self._session

    @property
    def translator(self) -> EnumTranslator:
        """The enumeration translator."""
        return self._translator

    @property
    def normalizer(self) -> ValueNormalizer:
        """The attribute value normalizer."""
        return self._normalizer

    @property
    def locale(self) -> str:
        """Locale used for display strings."""
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._locale = normalize_locale(value)

    async def start(self) -> None:
        """Open the transport."""
        await self._transport.start()

    async def stop(self) -> None:
        """End the session and close the transport."""
        await self._session.close()
        await self._transport.stop()

    async def __aenter__(self) -> MetasysApplication:
        """Start the application as an async context manager."""
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Stop the application when exiting the context."""
        await self.stop()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str | int] | None = None,
        json: Any = None,
        authorized: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        :param method: HTTP method.
        :param path: Path relative to the API root, or an absolute URL.
        :param params: Query parameters.
        :param json: Body to encode as JSON; no body when ``None``.
        :param authorized: Attach the current credential.
        :returns: The decoded body, or ``None`` for an empty body.
        :raises MetasysNotFoundError: On HTTP 404.
        :raises MetasysHttpError: On any other non-2xx status.
        :raises MetasysParsingError: If the body is not valid JSON.
        :raises MetasysTransportError: If the transport failed.
        """
        headers = {"Accept": "application/json"}
        body: bytes | None = None
        if json is not None:
            body = self._serializer.encode(json)
            headers["Content-Type"] = self._serializer.content_type
        if authorized:
            credential = self._session.credential
            if credential is not None:
                headers["Authorization"] = credential.authorization

        response = await self._transport.request(
            method, path, headers=headers, params=params, body=body
        )
        if not response.ok:
            self._raise_for_status(response)
        if not response.body.strip():
            return None
        try:
            return self._serializer.decode(response.body)
        except ValueError:
            text = response.body.decode("utf-8", errors="replace")
            raise MetasysParsingError(text, f"invalid JSON from {response.url}") from None

    def _raise_for_status(self, response: HttpResponse) -> None:
        error_body: Any = None
        if response.body.strip():
            try:
                error_body = self._serializer.decode(response.body)
            except ValueError:
                error_body = response.body.decode("utf-8", errors="replace")
        logger.debug("%s from %s", response.status, response.url)
        if response.status == 404:
            raise MetasysNotFoundError(response.status, response.url, error_body)
        raise MetasysHttpError(response.status, response.url, error_body)
