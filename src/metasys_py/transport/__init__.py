"""HTTP transport abstraction.

Defines the ``HttpTransport`` protocol the application layer sends every
request through, so TLS, connection pooling and timeouts stay with the
transport and tests can script responses without a server.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["HttpResponse", "HttpTransport"]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A completed HTTP exchange."""

    status: int
    """HTTP status code."""

    body: bytes
    """Raw response body."""

    url: str
    """The URL that was requested."""

    @property
    def ok(self) -> bool:
        """Whether the status is 2xx."""
        return 200 <= self.status < 300


@runtime_checkable
class HttpTransport(Protocol):
    """Abstract interface for the HTTP transport.

    Implementations raise :class:`~metasys_py.errors.MetasysTransportError`
    (or its :class:`~metasys_py.errors.MetasysTimeoutError` subclass) when
    no response is received.  Any response, whatever its status, is
    returned as an :class:`HttpResponse`.
    """

    @property
    def base_url(self) -> str:
        """Base URL relative request paths are joined to."""
        ...

    async def start(self) -> None:
        """Open connection resources."""
        ...

    async def stop(self) -> None:
        """Release connection resources."""
        ...

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str | int] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send one request.

        Args:
            method: HTTP method (``"GET"``, ``"PATCH"``, ...).
            url: Absolute URL, or a path relative to :attr:`base_url`.
            headers: Extra request headers.
            params: Query parameters.
            body: Encoded request body.
        """
        ...
