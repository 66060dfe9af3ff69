"""Zone identifiers and their resolution to zone rules.

An identifier is one of:

  - an offset such as "Z", "+02:00" or "-0530"
  - an offset with a prefix of "UTC", "GMT" or "UT" such as "UTC+01:00"
  - a region such as "Europe/Paris", resolved through a registry
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass, field

from tzrules.compat import zone_compat
from tzrules.exceptions import (
    MalformedOffsetError,
    MalformedZoneIdError,
    UnknownZoneIdError,
)
from tzrules.types.instant import Instant
from tzrules.types.utc_offset import UtcOffset

from .registry import ZoneRuleRegistry, default_registry
from .rules import ZoneRuleSet
from .tzinfo import ZoneRulesTzInfo

__all__ = ["ZoneId", "SHORT_IDS"]

_LOGGER = logging.getLogger(__name__)

REGION_ID_REGEX = re.compile(r"[A-Za-z][A-Za-z0-9~/._+-]+")

# Ordered so that "UT" is only matched when not a prefix of "UTC"
_OFFSET_PREFIXES = ("UTC", "GMT", "UT")

SHORT_IDS: dict[str, str] = {
    "ACT": "Australia/Darwin",
    "AET": "Australia/Sydney",
    "AGT": "America/Argentina/Buenos_Aires",
    "ART": "Africa/Cairo",
    "AST": "America/Anchorage",
    "BET": "America/Sao_Paulo",
    "BST": "Asia/Dhaka",
    "CAT": "Africa/Harare",
    "CNT": "America/St_Johns",
    "CST": "America/Chicago",
    "CTT": "Asia/Shanghai",
    "EAT": "Africa/Addis_Ababa",
    "ECT": "Europe/Paris",
    "IET": "America/Indiana/Indianapolis",
    "IST": "Asia/Kolkata",
    "JST": "Asia/Tokyo",
    "MIT": "Pacific/Apia",
    "NET": "Asia/Yerevan",
    "NST": "Pacific/Auckland",
    "PLT": "Asia/Karachi",
    "PNT": "America/Phoenix",
    "PRT": "America/Puerto_Rico",
    "PST": "America/Los_Angeles",
    "SST": "Pacific/Guadalcanal",
    "VST": "Asia/Ho_Chi_Minh",
    "EST": "-05:00",
    "MST": "-07:00",
    "HST": "-10:00",
}
"""Legacy three letter ids, resolved when enabled in the compat layer."""


@dataclass(frozen=True)
class ZoneId:
    """An identifier for a time-zone and the means to find its rules."""

    id: str
    """The normalized identifier."""

    offset: UtcOffset | None = None
    """The fixed offset of an offset based identifier."""

    registry: ZoneRuleRegistry | None = field(default=None, compare=False, repr=False)
    """The registry used to find rules for a region, or the default registry."""

    @classmethod
    def of_offset(cls, offset: UtcOffset, prefix: str = "") -> ZoneId:
        """Return an offset based zone id with an optional prefix."""
        if prefix and offset.total_seconds == 0:
            return cls(prefix, offset)
        return cls(f"{prefix}{offset.id}", offset)

    @classmethod
    def of(cls, text: str, registry: ZoneRuleRegistry | None = None) -> ZoneId:
        """Parse a zone identifier.

        Region ids must be known to the registry unless unknown zones are
        allowed in the compat layer.
        """
        if zone_compat.is_short_zone_ids_enabled() and text in SHORT_IDS:
            text = SHORT_IDS[text]
        if len(text) <= 1 and text != "Z":
            raise MalformedZoneIdError(f"Invalid ID for zone: '{text}'")
        if text == "Z" or text.startswith(("+", "-")):
            return cls.of_offset(UtcOffset.parse(text))
        for prefix in _OFFSET_PREFIXES:
            if text.startswith(prefix):
                return cls._of_prefixed(text, prefix, registry)
        return cls._of_region(text, registry)

    @classmethod
    def _of_prefixed(
        cls, text: str, prefix: str, registry: ZoneRuleRegistry | None
    ) -> ZoneId:
        if text == prefix:
            return cls.of_offset(UtcOffset.UTC, prefix)
        if text[len(prefix)] not in "+-":
            return cls._of_region(text, registry)
        try:
            offset = UtcOffset.parse(text[len(prefix) :])
        except MalformedOffsetError as err:
            raise MalformedZoneIdError(
                f"Invalid ID for offset-based ZoneId: {text}"
            ) from err
        return cls.of_offset(offset, prefix)

    @classmethod
    def _of_region(cls, text: str, registry: ZoneRuleRegistry | None) -> ZoneId:
        if not REGION_ID_REGEX.fullmatch(text):
            raise MalformedZoneIdError(f"Invalid ID for region-based ZoneId: {text}")
        lookup = registry if registry is not None else default_registry()
        if text not in lookup.available_zone_ids():
            if not zone_compat.is_allow_unknown_zones_enabled():
                raise UnknownZoneIdError(text)
            _LOGGER.debug("Allowing unknown zone id: %s", text)
        return cls(text, None, registry)

    @functools.cached_property
    def rules(self) -> ZoneRuleSet:
        """Return the rules of the zone."""
        if self.offset is not None:
            return ZoneRuleSet.fixed(self.offset)
        lookup = self.registry if self.registry is not None else default_registry()
        return lookup.rules_for(self.id)

    def normalized(self) -> ZoneId:
        """Return an offset based id if the zone always uses the same offset."""
        if self.offset is not None:
            return ZoneId.of_offset(self.offset)
        if (rules := self.rules).is_fixed_offset:
            return ZoneId.of_offset(rules.offset_at(Instant.EPOCH))
        return self

    def tzinfo(self) -> ZoneRulesTzInfo:
        """Return a datetime.tzinfo for the zone."""
        return ZoneRulesTzInfo(self.rules, self.id)

    def __str__(self) -> str:
        return self.id
