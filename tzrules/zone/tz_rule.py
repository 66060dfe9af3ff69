"""Library for parsing POSIX TZ rule strings found in TZif footers.

TZ supports these two formats

No DST: std offset
  - std: Name of the timezone
  - offset: Time added to local time to get UTC
  Example: EST+5

DST: std offset dst [offset],start[/time],end[/time]
  - dst: Name of the Daylight savings time timezone
  - offset: Defaults to 1 hour ahead of STD offset if not specified
  - start & end: Time period when DST is in effect. The start/end have
    the following formats:
      Jn: A julian day between 1 and 365 (Feb 29th never counted)
      Mm.w.d:
          m: Month between 1 and 12
          d: Between 0 (Sunday) and 6 (Saturday)
          w: Between 1 and 5. Week 1 is first week d occurs, 5 is the last
      The time field is in hh:mm:ss. The hour can be 167 to -167.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from tzrules.temporal.fields import DayOfWeek

__all__ = [
    "PosixOccurrence",
    "MonthWeekDay",
    "JulianDay",
    "PosixRule",
    "parse_tz_rule",
]

_ZERO = datetime.timedelta(seconds=0)
_HOUR = datetime.timedelta(hours=1)
_DEFAULT_TIME_DELTA = datetime.timedelta(hours=2)

# Any non leap year, used to map a julian day to a month and day
_NON_LEAP_YEAR_START = datetime.date(2001, 1, 1)

DaySelector = tuple[int, int, Optional[DayOfWeek]]
"""A month, day of month indicator and optional day of week."""


def _parse_time(values: dict[str, Any]) -> datetime.timedelta | None:
    """Convert a [+/-]hh[:mm[:ss]] parse tree dict to a timedelta."""
    if (hour := values["hour"]) is None:
        return None
    sign = -1 if hour.startswith("-") else 1
    hour = hour.lstrip("+-")
    minutes = values.get("minutes") or "0"
    seconds = values.get("seconds") or "0"
    return datetime.timedelta(
        seconds=sign * (int(hour) * 3600 + int(minutes) * 60 + int(seconds))
    )


@dataclass(frozen=True)
class JulianDay:
    """A fixed day of the year in a rule, Feb 29th is never counted."""

    day_of_year: int
    """A day of the year between 1 and 365."""

    time: datetime.timedelta
    """Local time of day when the rule goes into effect, default of 02:00:00."""

    def day_selector(self) -> DaySelector:
        """Return the fixed month and day of month for this day."""
        if not 1 <= self.day_of_year <= 365:
            raise ValueError(f"Julian day must be between 1 and 365: {self.day_of_year}")
        date = _NON_LEAP_YEAR_START + datetime.timedelta(days=self.day_of_year - 1)
        return (date.month, date.day, None)


@dataclass(frozen=True)
class MonthWeekDay:
    """The nth weekday of a month referenced in a rule."""

    month: int
    """A month between 1 and 12."""

    week_of_month: int
    """A week number of the month (1 to 5) based on the first occurrence of day_of_week."""

    day_of_week: int
    """A day of the week between 0 (Sunday) and 6 (Saturday)."""

    time: datetime.timedelta
    """Local time of day when the rule goes into effect, default of 02:00:00."""

    def day_selector(self) -> DaySelector:
        """Return the month, day of month indicator and weekday for this date.

        Week 5 means the last matching weekday of the month, otherwise the
        first matching weekday on or after the first day of the week.
        """
        if not 1 <= self.week_of_month <= 5 or not 0 <= self.day_of_week <= 6:
            raise ValueError(f"Invalid week or day in rule date: {self}")
        day_of_week = DayOfWeek(self.day_of_week or 7)
        if self.week_of_month == 5:
            return (self.month, -1, day_of_week)
        return (self.month, 1 + 7 * (self.week_of_month - 1), day_of_week)


@dataclass
class PosixOccurrence:
    """A named offset in a TZ rule."""

    name: str
    """The name of the timezone occurrence e.g. EST."""

    offset: datetime.timedelta
    """UTC offset for this timezone occurrence (not time added to local time)."""


@dataclass
class PosixRule:
    """A rule for evaluating future timezone transitions."""

    std: PosixOccurrence
    """The occurrence for standard time."""

    dst: Optional[PosixOccurrence] = None
    """The occurrence for daylight savings time."""

    dst_start: Union[MonthWeekDay, JulianDay, None] = None
    """Describes when dst goes into effect."""

    dst_end: Union[MonthWeekDay, JulianDay, None] = None
    """Describes when dst ends (std starts)."""


# Regexp for parsing the TZ string
_OFFSET_RE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<name>(\<[+\-]?[0-9]+\>|[a-zA-Z]+))"  # name
    r"((?P<hour>[+-]?[0-9]+)(?::(?P<minutes>[0-9]{1,2})(?::(?P<seconds>[0-9]{1,2}))?)?)?"  # offset
)
_START_END_RE_PATTERN = re.compile(
    # days in either julian (J prefix) or month.week.day (M prefix) format
    r",(J(?P<day_of_year>[0-9]+)|M(?P<month>[0-9]{1,2})\.(?P<week_of_month>[0-9])\.(?P<day_of_week>[0-9]))"
    # time
    r"(\/(?P<hour>[+-]?[0-9]+)(?::(?P<minutes>[0-9]{1,2})(?::(?P<seconds>[0-9]{1,2}))?)?)?"
)


def _occurrence_from_match(
    match: re.Match[str], default: datetime.timedelta | None = None
) -> PosixOccurrence:
    """Create an occurrence from a regex match, negating the POSIX offset."""
    posix_offset = _parse_time(match.groupdict())
    if posix_offset is None:
        if default is None:
            raise ValueError(f"Missing offset for TZ occurrence: {match.group(0)}")
        return PosixOccurrence(name=match.group("name"), offset=default)
    return PosixOccurrence(name=match.group("name"), offset=_ZERO - posix_offset)


def _date_from_match(match: re.Match[str]) -> Union[MonthWeekDay, JulianDay]:
    """Create a rule date from a regex match."""
    time = _parse_time(match.groupdict())
    if time is None:
        time = _DEFAULT_TIME_DELTA
    if match["day_of_year"] is not None:
        return JulianDay(day_of_year=int(match.group("day_of_year")), time=time)
    return MonthWeekDay(
        month=int(match.group("month")),
        week_of_month=int(match.group("week_of_month")),
        day_of_week=int(match.group("day_of_week")),
        time=time,
    )


def parse_tz_rule(tz_str: str) -> PosixRule:
    """Parse the TZ string into a PosixRule object."""
    buffer = tz_str
    if (std_match := _OFFSET_RE_PATTERN.match(buffer)) is None:
        raise ValueError(f"Unable to parse TZ string: {tz_str}")
    buffer = buffer[std_match.end() :]
    if (dst_match := _OFFSET_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[dst_match.end() :]
    if (start_match := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[start_match.end() :]
    if (end_match := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[end_match.end() :]
    if (start_match is None) != (end_match is None):
        raise ValueError(
            f"Unable to parse TZ string, should have both or neither start and end dates: {tz_str}"
        )
    if buffer:
        raise ValueError(f"Unable to parse TZ string, unexpected trailing data: {tz_str}")
    std = _occurrence_from_match(std_match)
    return PosixRule(
        std=std,
        # If the dst offset is omitted, it defaults to one hour ahead of standard time.
        dst=_occurrence_from_match(dst_match, std.offset + _HOUR) if dst_match else None,
        dst_start=_date_from_match(start_match) if start_match else None,
        dst_end=_date_from_match(end_match) if end_match else None,
    )
