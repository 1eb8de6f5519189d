"""Typed attribute values and the normalizer that builds them.

The server returns attribute values as bare JSON scalars, arrays, or (for
``presentValue``) a composite object carrying the value together with
its reliability and command priority.  :class:`ValueNormalizer` folds all
of these into one :class:`Variant` shape.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from metasys_py.localization.formatting import format_boolean, format_number

if TYPE_CHECKING:
    from uuid import UUID

    from metasys_py.localization.translator import EnumTranslator

logger = logging.getLogger(__name__)

PRESENT_VALUE = "presentValue"
RELIABLE_KEY = "reliabilityEnumSet.reliable"
UNSUPPORTED_KEY = "statusEnumSet.unsupportedObjectType"
ARRAY_KEY = "dataTypeEnumSet.arrayDataType"


class VariantKind(enum.Enum):
    """Classification of a normalized attribute value."""

    NUMERIC = "numeric"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class Variant:
    """One attribute value of one object.

    Every value carries numeric, string and boolean renderings so callers
    can read whichever suits them:

    ============  ==============  ======================  ==========
    kind          numeric         string_value            boolean
    ============  ==============  ======================  ==========
    NUMERIC       the value       locale-formatted value  value != 0
    STRING        0               localized enum key      False
    BOOLEAN       1 or 0          ``True`` / ``False``    the value
    ARRAY         0               localized "Array"       False
    UNSUPPORTED   1               localized "Unsupported" False
    ============  ==============  ======================  ==========
    """

    owner_id: UUID
    """Identifier of the object the value was read from."""

    attribute: str
    """Attribute name (``"presentValue"``)."""

    kind: VariantKind
    """How the raw value was classified."""

    numeric: float
    """Numeric rendering."""

    string_value: str
    """Display rendering, localized where the value is an enumeration."""

    boolean: bool
    """Boolean rendering."""

    reliability_key: str = RELIABLE_KEY
    """``reliabilityEnumSet`` key of the value."""

    reliability: str = ""
    """Localized reliability."""

    string_enum_key: str | None = None
    """Enumeration key behind :attr:`string_value` for STRING, ARRAY and UNSUPPORTED kinds."""

    children: tuple[Variant, ...] | None = None
    """Element values; set for (and only for) ARRAY kind."""

    priority_key: str | None = None
    """``writePriorityEnumSet`` key of the value, when the server reported one."""

    priority: str | None = None
    """Localized priority, when the server reported one."""

    def __post_init__(self) -> None:
        if (self.children is not None) != (self.kind is VariantKind.ARRAY):
            msg = f"children must be set exactly when kind is ARRAY, got kind={self.kind.name}"
            raise ValueError(msg)

    @property
    def is_reliable(self) -> bool:
        """Whether the server reported the value as reliable."""
        return self.reliability_key == RELIABLE_KEY

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {
            "owner_id": str(self.owner_id),
            "attribute": self.attribute,
            "kind": self.kind.value,
            "numeric": self.numeric,
            "string_value": self.string_value,
            "string_enum_key": self.string_enum_key,
            "boolean": self.boolean,
            "children": (
                [child.to_dict() for child in self.children] if self.children is not None else None
            ),
            "reliability_key": self.reliability_key,
            "reliability": self.reliability,
            "priority_key": self.priority_key,
            "priority": self.priority,
        }


@dataclass(frozen=True, slots=True)
class VariantBundle:
    """All values read from one object by a multi-read.

    Returned by :meth:`PropertyClient.read_property_multiple`.
    """

    owner_id: UUID
    """Identifier of the object."""

    variants: tuple[Variant, ...]
    """Values that resolved, in the requested attribute order."""

    def get(self, attribute: str) -> Variant | None:
        """Return the value of *attribute*, or ``None`` when it did not resolve."""
        for variant in self.variants:
            if variant.attribute == attribute:
                return variant
        return None

    def __len__(self) -> int:
        return len(self.variants)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict."""
        return {
            "owner_id": str(self.owner_id),
            "variants": [variant.to_dict() for variant in self.variants],
        }


class ValueNormalizer:
    """Classify raw attribute payloads into :class:`Variant` values.

    Rules, first match wins:

    - ``None`` -> UNSUPPORTED.
    - ``bool`` -> BOOLEAN (checked before numbers, ``bool`` being an ``int``).
    - ``int`` / ``float`` -> NUMERIC.
    - ``str`` -> STRING, the string treated as an enumeration key.
    - ``list`` -> ARRAY, every element normalized on its own.
    - ``dict`` on ``presentValue`` -> the nested ``value`` normalized,
      with ``reliability`` / ``priority`` overriding the defaults.
    - anything else, including a ``dict`` on any other attribute ->
      UNSUPPORTED.

    :param translator: Resolves enumeration keys to display strings.
    """

    def __init__(self, translator: EnumTranslator) -> None:
        self._translator = translator

    def normalize(
        self,
        raw: Any,
        attribute: str,
        owner_id: UUID,
        locale: str | None = None,
    ) -> Variant:
        """Normalize one raw attribute value.

        :param raw: Decoded JSON value of the attribute.
        :param attribute: Name of the attribute the value belongs to.
        :param owner_id: Identifier of the object the value was read from.
        :param locale: Display locale; the translator's default when ``None``
            or blank.
        :returns: An immutable :class:`Variant`.
        """
        if locale is None or not locale.strip():
            locale = self._translator.default_locale
        return self._classify(raw, attribute, owner_id, locale, RELIABLE_KEY, None)

    def _classify(
        self,
        raw: Any,
        attribute: str,
        owner_id: UUID,
        locale: str,
        reliability_key: str,
        priority_key: str | None,
    ) -> Variant:
        localize = self._translator.localize
        common: dict[str, Any] = {
            "owner_id": owner_id,
            "attribute": attribute,
            "reliability_key": reliability_key,
            "reliability": localize(reliability_key, locale),
            "priority_key": priority_key,
            "priority": localize(priority_key, locale) if priority_key is not None else None,
        }

        if raw is None:
            return self._unsupported(common, locale)

        if isinstance(raw, bool):
            return Variant(
                kind=VariantKind.BOOLEAN,
                numeric=1.0 if raw else 0.0,
                string_value=format_boolean(raw),
                boolean=raw,
                **common,
            )

        if isinstance(raw, (int, float)):
            numeric = float(raw)
            return Variant(
                kind=VariantKind.NUMERIC,
                numeric=numeric,
                string_value=format_number(numeric, locale),
                boolean=numeric != 0,
                **common,
            )

        if isinstance(raw, str):
            return Variant(
                kind=VariantKind.STRING,
                numeric=0.0,
                string_value=localize(raw, locale),
                string_enum_key=raw,
                boolean=False,
                **common,
            )

        if isinstance(raw, list):
            children = tuple(
                self._classify(item, attribute, owner_id, locale, RELIABLE_KEY, None)
                for item in raw
            )
            return Variant(
                kind=VariantKind.ARRAY,
                numeric=0.0,
                string_value=localize(ARRAY_KEY, locale),
                string_enum_key=ARRAY_KEY,
                boolean=False,
                children=children,
                **common,
            )

        if isinstance(raw, dict) and attribute == PRESENT_VALUE:
            reliability = raw.get("reliability")
            if reliability is not None:
                reliability_key = str(reliability)
            priority = raw.get("priority")
            if priority is not None:
                priority_key = str(priority)
            return self._classify(
                raw.get("value"), attribute, owner_id, locale, reliability_key, priority_key
            )

        if isinstance(raw, dict):
            logger.debug("composite value on %s of %s is unsupported", attribute, owner_id)
        return self._unsupported(common, locale)

    def _unsupported(self, common: dict[str, Any], locale: str) -> Variant:
        return Variant(
            kind=VariantKind.UNSUPPORTED,
            numeric=1.0,
            string_value=self._translator.localize(UNSUPPORTED_KEY, locale),
            string_enum_key=UNSUPPORTED_KEY,
            boolean=False,
            **common,
        )
