"""Enumeration key localization and reverse lookup."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from metasys_py.localization.formatting import DEFAULT_LOCALE, normalize_locale

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metasys_py.localization.resources import ResourceProvider

logger = logging.getLogger(__name__)

COMMAND_ENUM_SET = "commandIdEnumSet."
OBJECT_TYPE_ENUM_SET = "objectTypeEnumSet."


@dataclass(frozen=True, slots=True)
class _ReverseTables:
    """Display-string to key tables built from the default locale."""

    commands: Mapping[str, str]
    object_types: Mapping[str, str]
    object_types_overflow: Mapping[str, str]


class EnumTranslator:
    """Translate enumeration keys to display strings and back.

    Forward lookups (:meth:`localize`) fall back from the requested
    locale to the default locale and finally to the key itself, so they
    never fail.  Reverse lookups map a default-locale display string back
    to its key using tables built from the default locale's resources the
    first time one is needed.

    Each instance owns its tables, so tests can build a translator over
    their own resource data without touching any other instance.

    :param resources: Where display strings come from.
    :param default_locale: Fallback locale, and the locale the reverse
        tables are built from.
    """

    def __init__(self, resources: ResourceProvider, default_locale: str = DEFAULT_LOCALE) -> None:
        self._resources = resources
        self._default_locale = normalize_locale(default_locale)
        self._tables: _ReverseTables | None = None
        self._build_lock = threading.Lock()

    @property
    def default_locale(self) -> str:
        """The fallback locale."""
        return self._default_locale

    @property
    def resources(self) -> ResourceProvider:
        """The resource provider backing this translator."""
        return self._resources

    def localize(self, key: str, locale: str | None = None) -> str:
        """Return the display string for *key*.

        Tries *locale*, then the default locale, then returns *key*
        unchanged.

        :param key: Enumeration key such as ``"reliabilityEnumSet.reliable"``.
        :param locale: Requested locale; the default locale when ``None``.
            A blank or unusable tag is skipped like an unknown one.
        """
        if locale is not None and locale.strip():
            try:
                display = self._resources.get_string(key, locale)
            except ValueError:
                logger.debug("skipping unusable locale %r for %s", locale, key)
            else:
                if display is not None:
                    return display
        display = self._resources.get_string(key, self._default_locale)
        if display is not None:
            return display
        return key

    def reverse_lookup_command(self, display: str) -> str:
        """Return the ``commandIdEnumSet`` key whose default-locale text is *display*.

        Unknown strings are returned unchanged.
        """
        return self._reverse_tables().commands.get(display, display)

    def reverse_lookup_object_type(self, display: str) -> str:
        """Return the ``objectTypeEnumSet`` key whose default-locale text is *display*.

        Several object types share a display string; the first one seen
        while building the tables wins, and the next one is still reachable
        through the overflow table.  Unknown strings are returned unchanged.
        """
        tables = self._reverse_tables()
        key = tables.object_types.get(display)
        if key is not None:
            return key
        return tables.object_types_overflow.get(display, display)

    def _reverse_tables(self) -> _ReverseTables:
        tables = self._tables
        if tables is not None:
            return tables
        with self._build_lock:
            if self._tables is None:
                self._tables = self._build_tables()
            return self._tables

    def _build_tables(self) -> _ReverseTables:
        commands: dict[str, str] = {}
        object_types: dict[str, str] = {}
        overflow: dict[str, str] = {}
        for key, display in self._resources.iter_resources(self._default_locale):
            if key.startswith(COMMAND_ENUM_SET):
                commands.setdefault(display, key)
            elif key.startswith(OBJECT_TYPE_ENUM_SET):
                if display not in object_types:
                    object_types[display] = key
                else:
                    overflow.setdefault(display, key)
        logger.debug(
            "built reverse tables for %s: %d commands, %d object types (%d overflow)",
            self._default_locale,
            len(commands),
            len(object_types),
            len(overflow),
        )
        return _ReverseTables(commands, object_types, overflow)
