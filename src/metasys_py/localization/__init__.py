"""Localization of server enumerations.

Display strings come from a :class:`ResourceProvider`; the
:class:`EnumTranslator` resolves keys against it with a fixed fallback
chain and builds reverse lookup tables on first use.
"""

from __future__ import annotations

from metasys_py.localization.formatting import (
    DEFAULT_LOCALE,
    format_boolean,
    format_number,
    normalize_locale,
)
from metasys_py.localization.resources import (
    JsonResourceProvider,
    MappingResourceProvider,
    ResourceProvider,
    default_resource_provider,
)
from metasys_py.localization.translator import EnumTranslator

__all__ = [
    "DEFAULT_LOCALE",
    "EnumTranslator",
    "JsonResourceProvider",
    "MappingResourceProvider",
    "ResourceProvider",
    "default_resource_provider",
    "format_boolean",
    "format_number",
    "normalize_locale",
]
