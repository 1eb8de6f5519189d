"""aiohttp-backed HTTP transport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp

from metasys_py.errors import MetasysTimeoutError, MetasysTransportError
from metasys_py.transport import HttpResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_ABSOLUTE_PREFIXES = ("http://", "https://")


def join_url(base_url: str, url: str) -> str:
    """Join *url* to *base_url* unless it is already absolute."""
    if url.startswith(_ABSOLUTE_PREFIXES):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


class AiohttpTransport:
    """HTTP transport using an :class:`aiohttp.ClientSession`.

    :param base_url: Base URL relative paths are joined to
        (``"https://host/api/v2"``).
    :param verify_ssl: Verify server certificates.  Disabling this is
        not recommended outside of test rigs.
    :param timeout: Total per-request timeout in seconds.
    :param session: Existing session to use.  A session passed in is not
        closed by :meth:`stop`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._ssl = verify_ssl
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        """Base URL relative request paths are joined to."""
        return self._base_url

    async def start(self) -> None:
        """Create the client session if one was not supplied."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True

    async def stop(self) -> None:
        """Close the client session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str | int] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send one request and read the whole response body.

        :raises MetasysTimeoutError: If the request timed out.
        :raises MetasysTransportError: If no response was received.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None
        full_url = join_url(self._base_url, url)
        try:
            async with self._session.request(
                method,
                full_url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                data=body,
                ssl=self._ssl,
                timeout=self._timeout,
            ) as resp:
                payload = await resp.read()
                return HttpResponse(status=resp.status, body=payload, url=full_url)
        except TimeoutError as exc:
            logger.debug("%s %s timed out", method, full_url)
            msg = f"{method} {full_url} timed out"
            raise MetasysTimeoutError(msg) from exc
        except aiohttp.ClientError as exc:
            logger.debug("%s %s failed: %s", method, full_url, exc)
            msg = f"{method} {full_url} failed: {exc}"
            raise MetasysTransportError(msg) from exc
