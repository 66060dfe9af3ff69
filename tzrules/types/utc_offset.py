"""Library for parsing and representing offsets from UTC."""

from __future__ import annotations

import datetime
import functools
import re
import threading
from dataclasses import dataclass
from typing import Any, ClassVar

from tzrules.exceptions import (
    MalformedOffsetError,
    OffsetOutOfRangeError,
    UnsupportedFieldError,
)
from tzrules.temporal.fields import MAX_OFFSET_SECONDS, ChronoField
from tzrules.temporal.queries import TemporalQuery
from tzrules.temporal.units import ChronoUnit
from tzrules.temporal.value_range import ValueRange

__all__ = ["UtcOffset"]

# Accepts +H, +HH, +HHMM, +HH:MM, +HHMMSS and +HH:MM:SS. The separator
# must be used consistently when seconds are present.
UTC_OFFSET_REGEX = re.compile(
    r"(?P<sign>[+-])"
    r"(?:(?P<hour>[0-9])|(?P<hours>[0-9]{2})"
    r"(?:(?P<sep>:?)(?P<minutes>[0-9]{2})(?:(?P=sep)(?P<seconds>[0-9]{2}))?)?)"
)

_SECONDS_PER_QUARTER_HOUR = 15 * 60

# Shared instances for quarter hour offsets, populated on first use.
_CACHE: dict[int, UtcOffset] = {}
_CACHE_LOCK = threading.Lock()


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class UtcOffset:
    """A fixed offset from UTC in seconds, between -18:00 and +18:00.

    Offsets are ordered in time-line order for the same local date-time:
    an offset further east describes an earlier instant, so it sorts
    first. That is, +02:00 < +01:00 < Z < -05:00.
    """

    total_seconds: int
    """Number of seconds added to UTC to determine local time."""

    UTC: ClassVar[UtcOffset]
    MIN: ClassVar[UtcOffset]
    MAX: ClassVar[UtcOffset]

    def __post_init__(self) -> None:
        """Validate the offset is within range."""
        if abs(self.total_seconds) > MAX_OFFSET_SECONDS:
            raise OffsetOutOfRangeError(
                f"Zone offset not in valid range: -18:00 to +18:00: {self.total_seconds}s"
            )

    @classmethod
    def of_total_seconds(cls, total_seconds: int) -> UtcOffset:
        """Return the offset for the number of seconds, shared for quarter hours."""
        if abs(total_seconds) > MAX_OFFSET_SECONDS:
            raise OffsetOutOfRangeError(
                f"Zone offset not in valid range: -18:00 to +18:00: {total_seconds}s"
            )
        if total_seconds % _SECONDS_PER_QUARTER_HOUR:
            return cls(total_seconds)
        if (cached := _CACHE.get(total_seconds)) is not None:
            return cached
        with _CACHE_LOCK:
            return _CACHE.setdefault(total_seconds, cls(total_seconds))

    @classmethod
    def of_hours_minutes_seconds(
        cls, hours: int, minutes: int = 0, seconds: int = 0
    ) -> UtcOffset:
        """Return the offset for hours, minutes and seconds that share a sign."""
        if not -18 <= hours <= 18:
            raise OffsetOutOfRangeError(f"Zone offset hours not in valid range: {hours}")
        if not -59 <= minutes <= 59 or not -59 <= seconds <= 59:
            raise OffsetOutOfRangeError(
                f"Zone offset minutes and seconds not in valid range: {minutes}, {seconds}"
            )
        values = (hours, minutes, seconds)
        if any(v > 0 for v in values) and any(v < 0 for v in values):
            raise OffsetOutOfRangeError(
                "Zone offset hours, minutes and seconds must have the same sign"
            )
        return cls.of_total_seconds(hours * 3600 + minutes * 60 + seconds)

    @classmethod
    def parse(cls, text: str) -> UtcOffset:
        """Parse an offset such as Z, +1, -05, +0530, +05:30 or +05:30:45."""
        if text == "Z":
            return cls.UTC
        if not (match := UTC_OFFSET_REGEX.fullmatch(text)):
            raise MalformedOffsetError(f"Invalid ID for UtcOffset, invalid format: {text}")
        sign = -1 if match.group("sign") == "-" else 1
        hours = int(match.group("hour") or match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        seconds = int(match.group("seconds") or 0)
        try:
            return cls.of_hours_minutes_seconds(
                sign * hours, sign * minutes, sign * seconds
            )
        except OffsetOutOfRangeError as err:
            raise MalformedOffsetError(
                f"Invalid ID for UtcOffset, value out of range: {text}"
            ) from err

    @classmethod
    def from_timedelta(cls, value: datetime.timedelta) -> UtcOffset:
        """Return the offset for a whole number of seconds timedelta."""
        if value.microseconds:
            raise MalformedOffsetError(f"Zone offset must be whole seconds: {value}")
        return cls.of_total_seconds(int(value.total_seconds()))

    @property
    def id(self) -> str:
        """Return the normalized id e.g. Z, +01:00 or -05:30:45."""
        if not self.total_seconds:
            return "Z"
        sign = "-" if self.total_seconds < 0 else "+"
        remaining = abs(self.total_seconds)
        hours, remaining = divmod(remaining, 3600)
        minutes, seconds = divmod(remaining, 60)
        result = f"{sign}{hours:02}:{minutes:02}"
        if seconds:
            result += f":{seconds:02}"
        return result

    def as_timedelta(self) -> datetime.timedelta:
        """Return the offset as a timedelta."""
        return datetime.timedelta(seconds=self.total_seconds)

    def as_timezone(self) -> datetime.timezone:
        """Return the offset as a fixed python timezone."""
        if not self.total_seconds:
            return datetime.timezone.utc
        return datetime.timezone(self.as_timedelta())

    def is_supported(self, field: ChronoField | ChronoUnit) -> bool:
        """Return True if the field is supported, only offset seconds."""
        return field is ChronoField.OFFSET_SECONDS

    def range(self, field: ChronoField) -> ValueRange:
        """Return the range of valid values for a supported field."""
        if not self.is_supported(field):
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        return field.range()

    def get(self, field: ChronoField) -> int:
        """Return the value of a supported field."""
        if not self.is_supported(field):
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        return self.total_seconds

    def query(self, query: Any) -> Any:
        """Return the offset for the offset and zone queries."""
        if not isinstance(query, TemporalQuery):
            return query(self)
        if query in (TemporalQuery.OFFSET, TemporalQuery.ZONE):
            return self
        return None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return other.total_seconds < self.total_seconds

    def __str__(self) -> str:
        return self.id


UtcOffset.UTC = UtcOffset.of_total_seconds(0)
UtcOffset.MIN = UtcOffset.of_total_seconds(-MAX_OFFSET_SECONDS)
UtcOffset.MAX = UtcOffset.of_total_seconds(MAX_OFFSET_SECONDS)
