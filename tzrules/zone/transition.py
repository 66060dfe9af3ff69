"""Transitions between offsets and the annual rules that generate them."""

from __future__ import annotations

import calendar
import datetime
import enum
import functools
from dataclasses import dataclass

from dateutil import rrule
from dateutil.relativedelta import relativedelta

from tzrules.exceptions import InstantOutOfRangeError, InvalidRuleYearError
from tzrules.temporal.fields import MAX_YEAR, MIN_YEAR, DayOfWeek
from tzrules.types.instant import EPOCH, Instant
from tzrules.types.utc_offset import UtcOffset

__all__ = [
    "Transition",
    "TimeDefinition",
    "RecurringTransitionRule",
]


def _local_reading(epoch_second: int, offset: UtcOffset) -> datetime.datetime:
    """Return the local reading of an epoch second at an offset."""
    try:
        return EPOCH + datetime.timedelta(seconds=epoch_second + offset.total_seconds)
    except OverflowError as err:
        raise InstantOutOfRangeError(
            f"Transition local time exceeds supported range: {epoch_second}"
        ) from err


def _epoch_second(local: datetime.datetime) -> int:
    delta = local - EPOCH
    return delta.days * 86400 + delta.seconds


@dataclass(frozen=True)
class Transition:
    """A discontinuity in the local time-line caused by an offset change.

    A gap is where clocks jump forward and some local readings never
    occur. An overlap is where clocks move back and some local readings
    occur twice. Offsets before and after are never equal.
    """

    at_epoch_second: int
    """The instant of the transition in seconds from the epoch."""

    offset_before: UtcOffset
    """The offset in effect immediately before the transition."""

    offset_after: UtcOffset
    """The offset in effect from the transition onward."""

    def __post_init__(self) -> None:
        """Validate the transition changes the offset and is representable."""
        if self.offset_before == self.offset_after:
            raise ValueError(
                f"Offsets must not be equal for a transition: {self.offset_before}"
            )
        # Evaluate both readings to verify they are on the time-line
        self.local_date_time_before  # pylint: disable=pointless-statement
        self.local_date_time_after  # pylint: disable=pointless-statement

    @property
    def instant(self) -> Instant:
        """Return the instant of the transition."""
        return Instant(self.at_epoch_second)

    @functools.cached_property
    def local_date_time_before(self) -> datetime.datetime:
        """Return the local reading at the transition using the offset before."""
        return _local_reading(self.at_epoch_second, self.offset_before)

    @functools.cached_property
    def local_date_time_after(self) -> datetime.datetime:
        """Return the local reading at the transition using the offset after."""
        return _local_reading(self.at_epoch_second, self.offset_after)

    @property
    def is_gap(self) -> bool:
        """Return True if clocks move forward, skipping local readings."""
        return self.offset_after.total_seconds > self.offset_before.total_seconds

    @property
    def is_overlap(self) -> bool:
        """Return True if clocks move back, repeating local readings."""
        return self.offset_after.total_seconds < self.offset_before.total_seconds

    @property
    def duration_seconds(self) -> int:
        """Return the length of the gap or overlap in seconds."""
        return abs(self.offset_after.total_seconds - self.offset_before.total_seconds)

    @property
    def duration(self) -> datetime.timedelta:
        """Return the length of the gap or overlap."""
        return datetime.timedelta(seconds=self.duration_seconds)

    @property
    def valid_offsets(self) -> tuple[UtcOffset, ...]:
        """Return the valid offsets for local readings within the transition."""
        if self.is_gap:
            return ()
        return (self.offset_before, self.offset_after)

    def is_valid_offset(self, offset: UtcOffset) -> bool:
        """Return True if the offset is valid during the transition."""
        return offset in self.valid_offsets

    def __str__(self) -> str:
        kind = "Gap" if self.is_gap else "Overlap"
        return (
            f"Transition[{kind} at {self.local_date_time_before.isoformat()}"
            f"{self.offset_before} to {self.offset_after}]"
        )


class TimeDefinition(str, enum.Enum):
    """How the local time of a transition rule should be interpreted."""

    UTC = "utc"
    """The time is a UTC reading."""

    STANDARD = "standard"
    """The time is a reading in the standard offset."""

    WALL = "wall"
    """The time is a wall clock reading in the offset before the transition."""

    def to_epoch_second(
        self,
        local: datetime.datetime,
        standard_offset: UtcOffset,
        wall_offset: UtcOffset,
    ) -> int:
        """Return the epoch second of a reading given in this definition."""
        epoch_second = _epoch_second(local)
        if self is TimeDefinition.STANDARD:
            return epoch_second - standard_offset.total_seconds
        if self is TimeDefinition.WALL:
            return epoch_second - wall_offset.total_seconds
        return epoch_second


@dataclass(frozen=True)
class RecurringTransitionRule:
    """An annual rule that produces one transition for each year.

    The day is selected by a day of month indicator with an optional day
    of week. A positive indicator selects that day of the month, and with
    a day of week selects the first matching weekday on or after it. A
    negative indicator counts back from the end of the month (-1 is the
    last day), and with a day of week selects the last matching weekday
    on or before it. For example the last Sunday of March is month 3,
    indicator -1, day of week Sunday.
    """

    month: int
    """The month of the transition, 1 to 12."""

    day_of_month_indicator: int
    """The day of month, or a negative day counting from the end of the month."""

    day_of_week: DayOfWeek | None
    """The day of week to adjust to, or None for a fixed day of month."""

    time_of_day: datetime.timedelta
    """Time since midnight of the selected day, which may exceed a day."""

    time_definition: TimeDefinition
    """How to interpret the time of day."""

    standard_offset: UtcOffset
    """The standard offset in force at the transition."""

    offset_before: UtcOffset
    """The offset before the transition."""

    offset_after: UtcOffset
    """The offset after the transition."""

    def __post_init__(self) -> None:
        """Validate the rule selects a day and changes the offset."""
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12: {self.month}")
        if not -28 <= self.day_of_month_indicator <= 31 or not self.day_of_month_indicator:
            raise ValueError(
                "Day of month indicator must be between -28 and 31 inclusive "
                f"excluding zero: {self.day_of_month_indicator}"
            )
        if self.offset_before == self.offset_after:
            raise ValueError(f"Offsets must not be equal for a rule: {self.offset_before}")

    @property
    def is_gap(self) -> bool:
        """Return True if the rule moves clocks forward."""
        return self.offset_after.total_seconds > self.offset_before.total_seconds

    def transition_date(self, year: int) -> datetime.date:
        """Return the date selected by the rule in the year."""
        if self.day_of_month_indicator < 0:
            days_in_month = calendar.monthrange(year, self.month)[1]
            date = datetime.date(
                year, self.month, days_in_month + 1 + self.day_of_month_indicator
            )
            if self.day_of_week is not None:
                date += relativedelta(weekday=self._weekday(-1))
            return date
        # Days past the end of a short month are clamped to the last day
        date = datetime.date(year, self.month, 1) + relativedelta(
            day=self.day_of_month_indicator
        )
        if self.day_of_week is not None:
            date += relativedelta(weekday=self._weekday(+1))
        return date

    def create_transition(self, year: int) -> Transition:
        """Return the transition produced by this rule for the year."""
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidRuleYearError(f"Year outside of supported range: {year}")
        try:
            local = (
                datetime.datetime.combine(self.transition_date(year), datetime.time())
                + self.time_of_day
            )
            return Transition(
                self.time_definition.to_epoch_second(
                    local, self.standard_offset, self.offset_before
                ),
                self.offset_before,
                self.offset_after,
            )
        except (OverflowError, ValueError) as err:
            raise InvalidRuleYearError(
                f"Unable to create transition for year {year}: {err}"
            ) from err

    def _weekday(self, n: int) -> rrule.weekday:
        """Return the dateutil weekday for the day of week with an occurrence."""
        assert self.day_of_week is not None
        return rrule.weekdays[self.day_of_week - 1](n)

    def __str__(self) -> str:
        kind = "Gap" if self.is_gap else "Overlap"
        month = calendar.month_name[self.month].upper()
        if self.day_of_week is None:
            day = f"{month} {self.day_of_month_indicator}"
        elif self.day_of_month_indicator == -1:
            day = f"{self.day_of_week.name} on or before last day of {month}"
        elif self.day_of_month_indicator < 0:
            day = (
                f"{self.day_of_week.name} on or before last day minus "
                f"{-self.day_of_month_indicator - 1} of {month}"
            )
        else:
            day = f"{self.day_of_week.name} on or after {month} {self.day_of_month_indicator}"
        return (
            f"TransitionRule[{kind} {self.offset_before} to {self.offset_after}, "
            f"{day} at {self.time_of_day} {self.time_definition.name}, "
            f"standard offset {self.standard_offset}]"
        )
