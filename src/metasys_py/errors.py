"""Error types raised by the Metasys REST client."""

from __future__ import annotations

from typing import Any


class MetasysBaseError(Exception):
    """Base exception for Metasys client errors."""


class MetasysTransportError(MetasysBaseError):
    """The HTTP transport failed before a response was received."""


class MetasysTimeoutError(MetasysTransportError):
    """The transport gave up waiting for a response."""


class MetasysHttpError(MetasysBaseError):
    """The server answered with a non-success status.

    Carries the status code, the request URL and the decoded error body
    when the server sent a structured one.
    """

    def __init__(self, status: int, url: str, body: Any = None) -> None:
        """Initialise an HTTP status error.

        Args:
            status: HTTP status code of the response.
            url: The URL that was requested.
            body: Decoded JSON error body, the raw text when the body was
                not JSON, or ``None`` when the response had no body.
        """
        self.status = status
        self.url = url
        self.body = body
        super().__init__(f"HTTP {status} from {url}")


class MetasysNotFoundError(MetasysHttpError):
    """HTTP 404 from the server."""


class MetasysParsingError(MetasysBaseError):
    """A response body was not shaped the way the endpoint promises.

    Raised for undecodable JSON and for bodies missing expected list,
    cursor or total fields.
    """

    def __init__(self, payload: Any, reason: str = "unexpected response") -> None:
        self.payload = payload
        self.reason = reason
        super().__init__(f"{reason}: {payload!r}")


class MetasysPropertyError(MetasysParsingError):
    """A single-attribute response is missing its ``item`` object."""


class MetasysObjectTypeError(MetasysParsingError):
    """A network device type reference resolved to a malformed body."""


class MetasysTokenError(MetasysBaseError):
    """An authentication response did not contain a usable token."""

    def __init__(self, payload: Any, reason: str = "malformed token response") -> None:
        self.payload = payload
        self.reason = reason
        super().__init__(reason)


class MetasysIdentifierError(MetasysBaseError):
    """A value could not be parsed as an object identifier."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid object identifier: {value!r}")
