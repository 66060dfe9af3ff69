"""The standard set of date-time fields.

Fields are a closed catalogue. Each field knows its base unit, the unit
it is bounded by, and its outer range of values. The value types answer
for the fields they support, so a field dispatches to the value rather
than inspecting it.
"""

from __future__ import annotations

import datetime
import enum
from typing import TYPE_CHECKING, TypeVar

from .units import ChronoUnit
from .value_range import ValueRange

if TYPE_CHECKING:
    from .protocol import Temporal, TemporalAccessor

__all__ = [
    "ChronoField",
    "DayOfWeek",
    "MIN_YEAR",
    "MAX_YEAR",
    "MIN_EPOCH_DAY",
    "MAX_EPOCH_DAY",
    "MIN_EPOCH_SECOND",
    "MAX_EPOCH_SECOND",
    "MAX_OFFSET_SECONDS",
]

T = TypeVar("T", bound="Temporal")

MIN_YEAR = datetime.MINYEAR
MAX_YEAR = datetime.MAXYEAR

_EPOCH_ORDINAL = datetime.date(1970, 1, 1).toordinal()
MIN_EPOCH_DAY = datetime.date.min.toordinal() - _EPOCH_ORDINAL
MAX_EPOCH_DAY = datetime.date.max.toordinal() - _EPOCH_ORDINAL
MIN_EPOCH_SECOND = MIN_EPOCH_DAY * 86400
MAX_EPOCH_SECOND = MAX_EPOCH_DAY * 86400 + 86399

MAX_OFFSET_SECONDS = 18 * 3600


class DayOfWeek(enum.IntEnum):
    """A day of the week numbered from 1 (Monday) to 7 (Sunday)."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def plus(self, days: int) -> DayOfWeek:
        """Return the day of week that is the specified number of days later."""
        return DayOfWeek((self.value - 1 + days) % 7 + 1)

    @classmethod
    def from_date(cls, value: datetime.date) -> DayOfWeek:
        """Return the day of week of a date."""
        return cls(value.isoweekday())


class ChronoField(enum.Enum):
    """A standard set of fields that provide access to date and time values."""

    NANO_OF_SECOND = (
        "NanoOfSecond",
        ChronoUnit.NANOS,
        ChronoUnit.SECONDS,
        ValueRange.of(0, 999_999_999),
    )
    NANO_OF_DAY = (
        "NanoOfDay",
        ChronoUnit.NANOS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 86400 * 1_000_000_000 - 1),
    )
    MICRO_OF_SECOND = (
        "MicroOfSecond",
        ChronoUnit.MICROS,
        ChronoUnit.SECONDS,
        ValueRange.of(0, 999_999),
    )
    MICRO_OF_DAY = (
        "MicroOfDay",
        ChronoUnit.MICROS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 86400 * 1_000_000 - 1),
    )
    MILLI_OF_SECOND = (
        "MilliOfSecond",
        ChronoUnit.MILLIS,
        ChronoUnit.SECONDS,
        ValueRange.of(0, 999),
    )
    MILLI_OF_DAY = (
        "MilliOfDay",
        ChronoUnit.MILLIS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 86400 * 1000 - 1),
    )
    SECOND_OF_MINUTE = (
        "SecondOfMinute",
        ChronoUnit.SECONDS,
        ChronoUnit.MINUTES,
        ValueRange.of(0, 59),
    )
    SECOND_OF_DAY = (
        "SecondOfDay",
        ChronoUnit.SECONDS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 86400 - 1),
    )
    MINUTE_OF_HOUR = (
        "MinuteOfHour",
        ChronoUnit.MINUTES,
        ChronoUnit.HOURS,
        ValueRange.of(0, 59),
    )
    MINUTE_OF_DAY = (
        "MinuteOfDay",
        ChronoUnit.MINUTES,
        ChronoUnit.DAYS,
        ValueRange.of(0, 24 * 60 - 1),
    )
    HOUR_OF_AMPM = (
        "HourOfAmPm",
        ChronoUnit.HOURS,
        ChronoUnit.HALF_DAYS,
        ValueRange.of(0, 11),
    )
    CLOCK_HOUR_OF_AMPM = (
        "ClockHourOfAmPm",
        ChronoUnit.HOURS,
        ChronoUnit.HALF_DAYS,
        ValueRange.of(1, 12),
    )
    HOUR_OF_DAY = (
        "HourOfDay",
        ChronoUnit.HOURS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 23),
    )
    CLOCK_HOUR_OF_DAY = (
        "ClockHourOfDay",
        ChronoUnit.HOURS,
        ChronoUnit.DAYS,
        ValueRange.of(1, 24),
    )
    AMPM_OF_DAY = (
        "AmPmOfDay",
        ChronoUnit.HALF_DAYS,
        ChronoUnit.DAYS,
        ValueRange.of(0, 1),
    )
    DAY_OF_WEEK = (
        "DayOfWeek",
        ChronoUnit.DAYS,
        ChronoUnit.WEEKS,
        ValueRange.of(1, 7),
    )
    DAY_OF_MONTH = (
        "DayOfMonth",
        ChronoUnit.DAYS,
        ChronoUnit.MONTHS,
        ValueRange.of(1, 31, smallest_maximum=28),
    )
    DAY_OF_YEAR = (
        "DayOfYear",
        ChronoUnit.DAYS,
        ChronoUnit.YEARS,
        ValueRange.of(1, 366, smallest_maximum=365),
    )
    EPOCH_DAY = (
        "EpochDay",
        ChronoUnit.DAYS,
        ChronoUnit.FOREVER,
        ValueRange.of(MIN_EPOCH_DAY, MAX_EPOCH_DAY),
    )
    ALIGNED_WEEK_OF_MONTH = (
        "AlignedWeekOfMonth",
        ChronoUnit.WEEKS,
        ChronoUnit.MONTHS,
        ValueRange.of(1, 5, smallest_maximum=4),
    )
    ALIGNED_WEEK_OF_YEAR = (
        "AlignedWeekOfYear",
        ChronoUnit.WEEKS,
        ChronoUnit.YEARS,
        ValueRange.of(1, 53),
    )
    MONTH_OF_YEAR = (
        "MonthOfYear",
        ChronoUnit.MONTHS,
        ChronoUnit.YEARS,
        ValueRange.of(1, 12),
    )
    PROLEPTIC_MONTH = (
        "ProlepticMonth",
        ChronoUnit.MONTHS,
        ChronoUnit.FOREVER,
        ValueRange.of(MIN_YEAR * 12, MAX_YEAR * 12 + 11),
    )
    YEAR_OF_ERA = (
        "YearOfEra",
        ChronoUnit.YEARS,
        ChronoUnit.ERAS,
        ValueRange.of(MIN_YEAR, MAX_YEAR),
    )
    YEAR = (
        "Year",
        ChronoUnit.YEARS,
        ChronoUnit.FOREVER,
        ValueRange.of(MIN_YEAR, MAX_YEAR),
    )
    ERA = (
        "Era",
        ChronoUnit.ERAS,
        ChronoUnit.FOREVER,
        ValueRange.of(0, 1),
    )
    INSTANT_SECONDS = (
        "InstantSeconds",
        ChronoUnit.SECONDS,
        ChronoUnit.FOREVER,
        ValueRange.of(MIN_EPOCH_SECOND, MAX_EPOCH_SECOND),
    )
    OFFSET_SECONDS = (
        "OffsetSeconds",
        ChronoUnit.SECONDS,
        ChronoUnit.FOREVER,
        ValueRange.of(-MAX_OFFSET_SECONDS, MAX_OFFSET_SECONDS),
    )

    def __init__(
        self,
        display_name: str,
        base_unit: ChronoUnit,
        range_unit: ChronoUnit,
        value_range: ValueRange,
    ):
        self._display_name = display_name
        self._base_unit = base_unit
        self._range_unit = range_unit
        self._range = value_range

    @property
    def display_name(self) -> str:
        """Return the name of the field e.g. DayOfMonth."""
        return self._display_name

    @property
    def base_unit(self) -> ChronoUnit:
        """Return the unit that the field is measured in."""
        return self._base_unit

    @property
    def range_unit(self) -> ChronoUnit:
        """Return the unit that the field is bound by."""
        return self._range_unit

    @property
    def is_date_based(self) -> bool:
        """Return True if the field represents a component of a date."""
        return self in _DATE_FIELDS

    @property
    def is_time_based(self) -> bool:
        """Return True if the field represents a component of a time."""
        return self in _TIME_FIELDS

    def range(self) -> ValueRange:
        """Return the outer range of valid values for the field.

        The valid values for a specific value may be narrower, see
        `range_refined_by`.
        """
        return self._range

    def range_refined_by(self, temporal: TemporalAccessor) -> ValueRange:
        """Return the range of valid values given the context of the temporal."""
        return temporal.range(self)

    def is_supported_by(self, temporal: TemporalAccessor) -> bool:
        """Return True if the temporal has a value for this field."""
        return temporal.is_supported(self)

    def get_from(self, temporal: TemporalAccessor) -> int:
        """Return the value of this field from the temporal."""
        return temporal.get(self)

    def adjust_into(self, temporal: T, value: int) -> T:
        """Return a copy of the temporal with this field set to the value."""
        return temporal.with_field(self, value)

    def check_valid_value(self, value: int) -> int:
        """Return the value if valid for the outer range of this field."""
        return self._range.check_valid_value(value, self)

    def __str__(self) -> str:
        return self._display_name


_TIME_FIELDS = frozenset(
    {
        ChronoField.NANO_OF_SECOND,
        ChronoField.NANO_OF_DAY,
        ChronoField.MICRO_OF_SECOND,
        ChronoField.MICRO_OF_DAY,
        ChronoField.MILLI_OF_SECOND,
        ChronoField.MILLI_OF_DAY,
        ChronoField.SECOND_OF_MINUTE,
        ChronoField.SECOND_OF_DAY,
        ChronoField.MINUTE_OF_HOUR,
        ChronoField.MINUTE_OF_DAY,
        ChronoField.HOUR_OF_AMPM,
        ChronoField.CLOCK_HOUR_OF_AMPM,
        ChronoField.HOUR_OF_DAY,
        ChronoField.CLOCK_HOUR_OF_DAY,
        ChronoField.AMPM_OF_DAY,
    }
)

_DATE_FIELDS = frozenset(
    {
        ChronoField.DAY_OF_WEEK,
        ChronoField.DAY_OF_MONTH,
        ChronoField.DAY_OF_YEAR,
        ChronoField.EPOCH_DAY,
        ChronoField.ALIGNED_WEEK_OF_MONTH,
        ChronoField.ALIGNED_WEEK_OF_YEAR,
        ChronoField.MONTH_OF_YEAR,
        ChronoField.PROLEPTIC_MONTH,
        ChronoField.YEAR_OF_ERA,
        ChronoField.YEAR,
        ChronoField.ERA,
    }
)
