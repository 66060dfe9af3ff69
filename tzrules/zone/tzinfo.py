"""A datetime.tzinfo implementation backed by zone rules."""

from __future__ import annotations

import datetime

from tzrules.types.instant import Instant
from tzrules.types.utc_offset import UtcOffset

from .rules import ZoneRuleSet

__all__ = ["ZoneRulesTzInfo"]


def _instant(value: datetime.datetime, offset: UtcOffset) -> Instant:
    return Instant.from_datetime(value.replace(tzinfo=offset.as_timezone()))


class ZoneRulesTzInfo(datetime.tzinfo):
    """An implementation of tzinfo using the offsets of a ZoneRuleSet.

    Ambiguous and missing local times are resolved using the fold
    attribute as described in PEP 495. In an overlap fold=0 selects the
    earlier offset and fold=1 the later offset. In a gap fold=0 uses the
    offset before the transition and fold=1 the offset after it.
    """

    def __init__(self, rules: ZoneRuleSet, key: str | None = None) -> None:
        """Initialize ZoneRulesTzInfo."""
        self._rules = rules
        self._key = key

    @property
    def rules(self) -> ZoneRuleSet:
        """Return the zone rules used for offsets."""
        return self._rules

    @property
    def key(self) -> str | None:
        """Return the zone identifier, if known."""
        return self._key

    def _offset(self, dt: datetime.datetime) -> UtcOffset:
        local = dt.replace(tzinfo=None)
        if (transition := self._rules.transition_at(local)) is not None:
            return transition.offset_after if dt.fold else transition.offset_before
        return self._rules.offset_at_local(local)

    def utcoffset(self, dt: datetime.datetime | None) -> datetime.timedelta | None:
        """Return the offset from UTC of the local datetime."""
        if dt is None:
            if self._rules.is_fixed_offset:
                return self._rules.offset_at(Instant.EPOCH).as_timedelta()
            return None
        return self._offset(dt).as_timedelta()

    def dst(self, dt: datetime.datetime | None) -> datetime.timedelta | None:
        """Return the daylight savings adjustment in effect at the local datetime."""
        if dt is None:
            return None
        offset = self._offset(dt)
        instant = _instant(dt.replace(tzinfo=None), offset)
        return offset.as_timedelta() - self._rules.standard_offset_at(instant).as_timedelta()

    def tzname(self, dt: datetime.datetime | None) -> str | None:
        """Return the offset identifier of the local datetime, e.g. '+01:00'."""
        if dt is None:
            if self._rules.is_fixed_offset:
                return self._rules.offset_at(Instant.EPOCH).id
            return self._key
        return self._offset(dt).id

    def fromutc(self, dt: datetime.datetime) -> datetime.datetime:
        """Convert a UTC reading to the local datetime of this zone."""
        if dt.tzinfo is not self:
            raise ValueError("fromutc: dt.tzinfo is not self")
        utc = dt.replace(tzinfo=None)
        offset = self._rules.offset_at(_instant(utc, UtcOffset.UTC))
        local = utc + offset.as_timedelta()
        fold = 0
        if (transition := self._rules.transition_at(local)) is not None:
            if transition.is_overlap and offset == transition.offset_after:
                fold = 1
        return local.replace(tzinfo=self, fold=fold)

    def __repr__(self) -> str:
        if self._key is not None:
            return f"{self.__class__.__name__}(key={self._key!r})"
        return f"{self.__class__.__name__}({self._rules!r})"

    def __str__(self) -> str:
        return self._key if self._key is not None else repr(self)
