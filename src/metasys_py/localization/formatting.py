"""Locale-aware rendering of numbers and booleans."""

from __future__ import annotations

import math
from functools import lru_cache

DEFAULT_LOCALE = "en-US"

_COMMA_DECIMAL_LANGUAGES = frozenset(
    {
        "cs",
        "da",
        "de",
        "es",
        "fi",
        "fr",
        "it",
        "nb",
        "nl",
        "pl",
        "pt",
        "ru",
        "sv",
        "tr",
    }
)
"""Languages whose decimal separator is a comma."""


@lru_cache(maxsize=64)
def normalize_locale(locale: str) -> str:
    """Normalise a locale tag to ``ll-CC`` form.

    ``"en_us"``, ``"EN-us"`` and ``"en-US"`` all become ``"en-US"``.
    A bare language (``"de"``) is returned lower-cased.

    :param locale: Locale tag in any common spelling.
    :returns: The normalised tag.
    :raises ValueError: If *locale* is empty.
    """
    tag = locale.strip().replace("_", "-")
    if not tag:
        msg = "Locale must not be empty"
        raise ValueError(msg)
    language, _, region = tag.partition("-")
    if not region:
        return language.lower()
    return f"{language.lower()}-{region.upper()}"


def decimal_separator(locale: str) -> str:
    """Return the decimal separator used by *locale*."""
    language = normalize_locale(locale).partition("-")[0]
    return "," if language in _COMMA_DECIMAL_LANGUAGES else "."


def format_number(value: float, locale: str) -> str:
    """Render *value* the way the server's UI does for *locale*.

    Integral values print without a fractional part, no digit grouping
    is applied, and the decimal separator follows the locale.

    Example::

        format_number(72.5, "en-US")  # "72.5"
        format_number(72.5, "de-DE")  # "72,5"
        format_number(3.0, "en-US")   # "3"
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if float(value).is_integer():
        return str(int(value))
    text = repr(float(value))
    return text.replace(".", decimal_separator(locale))


def format_boolean(value: bool) -> str:
    """Render a boolean literal (``"True"`` / ``"False"``)."""
    return "True" if value else "False"
