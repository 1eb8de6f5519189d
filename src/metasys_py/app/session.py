"""Session credential lifecycle.

Provides :class:`SessionManager`, which logs in, holds the current
:class:`Credential`, and keeps the session alive by refreshing the
credential shortly before it expires.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from metasys_py.errors import MetasysBaseError, MetasysTokenError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MARGIN = 60.0
"""Seconds before expiry at which the credential is refreshed."""

MAX_REFRESH_SLEEP = 86400.0
"""Longest single sleep of the refresh task; longer delays are slept in chunks."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Credential:
    """An access token and the moment it expires.

    Replaced as a whole on every login or refresh, never mutated.
    """

    token: str = field(repr=False)
    """Bearer token issued by the server."""

    expires: datetime
    """Expiry time (timezone-aware, UTC)."""

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"Bearer {self.token}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {"token": self.token, "expires": self.expires.isoformat()}


def parse_credential(payload: Any) -> Credential:
    """Build a :class:`Credential` from an authentication response.

    Expects ``{"accessToken": str, "expires": ISO 8601 str}``.  An expiry
    without a timezone is taken to be UTC.

    :raises MetasysTokenError: If the payload is not shaped like that.
    """
    if not isinstance(payload, dict):
        raise MetasysTokenError(payload, "token response is not an object")
    token = payload.get("accessToken")
    if not isinstance(token, str) or not token:
        raise MetasysTokenError(payload, "token response has no accessToken")
    expires_raw = payload.get("expires")
    if not isinstance(expires_raw, str):
        raise MetasysTokenError(payload, "token response has no expires")
    try:
        expires = datetime.fromisoformat(expires_raw.strip())
    except ValueError as exc:
        raise MetasysTokenError(payload, f"unparsable expires {expires_raw!r}") from exc
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=UTC)
    return Credential(token=token, expires=expires.astimezone(UTC))


class SessionManager:
    """Owns the session credential and its refresh schedule.

    After a successful login with auto-refresh enabled, a background task
    sleeps until *refresh_margin* seconds before expiry and then calls
    :meth:`refresh`, which arms the next one.  The credential is swapped
    in one assignment, so concurrent requests see either the old or the
    new credential, never a mix.  A failed login or refresh leaves the
    previous credential in place.

    Usage::

        session = SessionManager(app.request_json)
        await session.login("user", "secret")
        # ...later...
        await session.close()

    :param request: Coroutine function sending one JSON request, called as
        ``request(method, path, json=..., authorized=...)``.
    :param auto_refresh: Arm scheduled refresh after each login.
    :param refresh_margin: Seconds before expiry to refresh.
    :param clock: Returns the current UTC time.
    """

    def __init__(
        self,
        request: Callable[..., Awaitable[Any]],
        *,
        auto_refresh: bool = True,
        refresh_margin: float = DEFAULT_REFRESH_MARGIN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._request = request
        self._auto_refresh = auto_refresh
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._credential: Credential | None = None
        self._task: asyncio.Task[None] | None = None
        self._last_refresh_error: BaseException | None = None

    @property
    def credential(self) -> Credential | None:
        """The current credential, or ``None`` before login."""
        return self._credential

    @property
    def auto_refresh(self) -> bool:
        """Whether scheduled refresh is armed after login."""
        return self._auto_refresh

    @property
    def refresh_scheduled(self) -> bool:
        """Whether a refresh task is pending."""
        return self._task is not None and not self._task.done()

    @property
    def last_refresh_error(self) -> BaseException | None:
        """The error of the last failed scheduled refresh, if any."""
        return self._last_refresh_error

    async def login(self, username: str, password: str, *, refresh: bool | None = None) -> Credential:
        """Log in and store the issued credential.

        :param username: Account name.
        :param password: Account password.
        :param refresh: Override the auto-refresh setting for this session.
        :returns: The new credential.
        :raises MetasysTokenError: If the response carries no usable token.
        :raises MetasysHttpError: If the server rejects the login.
        """
        if refresh is not None:
            self._auto_refresh = refresh
        logger.debug("login as %s", username)
        payload = await self._request(
            "POST",
            "login",
            json={"username": username, "password": password},
            authorized=False,
        )
        credential = self._accept(payload)
        logger.info("Logged in as %s, credential expires %s", username, credential.expires)
        return credential

    async def refresh(self) -> Credential:
        """Request a new credential using the current session.

        :returns: The new credential.
        :raises MetasysTokenError: If the response carries no usable token.
        :raises MetasysHttpError: If the server rejects the refresh.
        """
        logger.debug("refresh credential")
        payload = await self._request("GET", "refreshToken")
        credential = self._accept(payload)
        logger.info("Credential refreshed, expires %s", credential.expires)
        return credential

    def refresh_delay(self) -> float:
        """Seconds until the current credential should be refreshed.

        Never negative; ``0.0`` when there is no credential.
        """
        credential = self._credential
        if credential is None:
            return 0.0
        remaining = (credential.expires - self._clock()).total_seconds()
        return max(remaining - self._refresh_margin, 0.0)

    def schedule_refresh(self) -> None:
        """Arm a one-shot refresh for the current credential.

        Replaces any pending refresh.  Delays longer than
        :data:`MAX_REFRESH_SLEEP` are slept in chunks, so every expiry is
        honoured.

        :raises RuntimeError: If there is no credential to refresh.
        """
        if self._credential is None:
            msg = "Cannot schedule a refresh before login"
            raise RuntimeError(msg)
        self._cancel_pending()
        self._task = asyncio.create_task(self._refresh_when_due())
        logger.info("Credential refresh scheduled in %.1fs", self.refresh_delay())

    async def close(self) -> None:
        """Cancel any pending refresh and forget the credential."""
        task = self._task
        self._task = None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._credential is not None:
            logger.info("Session closed")
        self._credential = None

    def _accept(self, payload: Any) -> Credential:
        credential = parse_credential(payload)
        self._credential = credential
        if self._auto_refresh:
            self.schedule_refresh()
        return credential

    def _cancel_pending(self) -> None:
        task = self._task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
        self._task = None

    async def _refresh_when_due(self) -> None:
        while (delay := self.refresh_delay()) > 0:
            await asyncio.sleep(min(delay, MAX_REFRESH_SLEEP))
        try:
            await self.refresh()
        except MetasysBaseError as exc:
            self._last_refresh_error = exc
            logger.warning("Scheduled credential refresh failed, keeping current credential: %s", exc)
        else:
            self._last_refresh_error = None
