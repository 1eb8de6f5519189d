"""Locale resource providers.

A resource provider maps enumeration keys (``"reliabilityEnumSet.reliable"``)
to display strings for one locale.  How resources are stored is up to the
provider; :class:`~metasys_py.localization.translator.EnumTranslator` only
needs point lookups and a stable walk over one locale's entries.
"""

from __future__ import annotations

import logging
import re
import threading
from importlib import resources as importlib_resources
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from metasys_py.localization.formatting import normalize_locale
from metasys_py.serialization import deserialize

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)

_PACKAGE_DATA = "metasys_py.localization.data"
_LOCALE_FILE_STEM = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*")


@runtime_checkable
class ResourceProvider(Protocol):
    """Interface for locale resource storage."""

    def get_string(self, key: str, locale: str) -> str | None:
        """Return the display string for *key* in *locale*, or ``None``."""
        ...

    def iter_resources(self, locale: str) -> Iterator[tuple[str, str]]:
        """Yield ``(key, display)`` pairs for *locale*.

        The order must be the same every time within one process.
        """
        ...


class MappingResourceProvider:
    """Resource provider backed by in-memory dicts.

    :param tables: Mapping of locale tag to ``{key: display}``.  Locale
        tags are normalised, so ``"en_US"`` and ``"en-US"`` are the same.
    """

    def __init__(self, tables: Mapping[str, Mapping[str, str]]) -> None:
        self._tables: dict[str, dict[str, str]] = {
            normalize_locale(locale): dict(entries) for locale, entries in tables.items()
        }

    @property
    def locales(self) -> list[str]:
        """Locales that have a resource table."""
        return list(self._tables)

    def get_string(self, key: str, locale: str) -> str | None:
        table = self._tables.get(normalize_locale(locale))
        if table is None:
            return None
        return table.get(key)

    def iter_resources(self, locale: str) -> Iterator[tuple[str, str]]:
        table = self._tables.get(normalize_locale(locale), {})
        yield from table.items()


class JsonResourceProvider:
    """Resource provider reading one ``<locale>.json`` file per locale.

    Files are flat JSON objects of ``{key: display}`` and are loaded on
    first use of their locale.  A missing file behaves like an empty
    table.

    :param directory: Directory holding the files.  When ``None``, the
        resource set bundled with the package is used.
    :raises ValueError: From lookups whose locale is not a plain tag, such
        as one containing a path separator.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(directory) if directory is not None else None
        self._tables: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def _read(self, locale: str) -> bytes | None:
        filename = f"{locale}.json"
        if self._directory is not None:
            path = self._directory / filename
            return path.read_bytes() if path.is_file() else None
        resource = importlib_resources.files(_PACKAGE_DATA).joinpath(filename)
        return resource.read_bytes() if resource.is_file() else None

    def _table(self, locale: str) -> dict[str, str]:
        locale = normalize_locale(locale)
        if not _LOCALE_FILE_STEM.fullmatch(locale):
            msg = f"Invalid locale for a resource file: {locale!r}"
            raise ValueError(msg)
        table = self._tables.get(locale)
        if table is not None:
            return table
        with self._lock:
            table = self._tables.get(locale)
            if table is None:
                raw = self._read(locale)
                table = {} if raw is None else {str(k): str(v) for k, v in deserialize(raw).items()}
                logger.debug("loaded %d resources for %s", len(table), locale)
                self._tables[locale] = table
        return table

    def get_string(self, key: str, locale: str) -> str | None:
        return self._table(locale).get(key)

    def iter_resources(self, locale: str) -> Iterator[tuple[str, str]]:
        yield from self._table(locale).items()


def default_resource_provider() -> JsonResourceProvider:
    """Return a provider over the resource set bundled with the package."""
    return JsonResourceProvider()
