"""A date-time without an offset, wrapping a naive python datetime.

The value type answers the date and time fields from explicit tables of
getter and setter functions, one entry per supported field.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Self

from dateutil.relativedelta import relativedelta

from tzrules.exceptions import (
    ArithmeticOverflowError,
    InvalidFieldValueError,
    UnsupportedFieldError,
)
from tzrules.temporal.fields import MAX_YEAR, ChronoField
from tzrules.temporal.protocol import TemporalAdjuster
from tzrules.temporal.queries import TemporalQuery
from tzrules.temporal.units import NANOS_PER_SECOND, ChronoUnit
from tzrules.temporal.value_range import ValueRange

from .instant import EPOCH, div_toward_zero
from .utc_offset import UtcOffset

__all__ = ["LocalDateTime"]

_EPOCH_ORDINAL = EPOCH.toordinal()
_ONE_DAY = datetime.timedelta(days=1)


def _second_of_day(value: datetime.datetime) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def _day_of_year(value: datetime.datetime) -> int:
    return value.timetuple().tm_yday


def _proleptic_month(value: datetime.date) -> int:
    return value.year * 12 + value.month - 1


def _with_nano_of_day(value: datetime.datetime, nanos: int) -> datetime.datetime:
    """Replace the time of day, truncated to microsecond precision."""
    return datetime.datetime.combine(value.date(), datetime.time()) + datetime.timedelta(
        microseconds=nanos // 1000
    )


def _with_era(value: datetime.datetime, era: int) -> datetime.datetime:
    if era != 1:
        raise ArithmeticOverflowError(f"Era not supported by python dates: {era}")
    return value


def _with_day_of_year(value: datetime.datetime, day_of_year: int) -> datetime.datetime:
    return value.replace(month=1, day=1) + datetime.timedelta(days=day_of_year - 1)


_GETTERS: dict[ChronoField, Callable[[datetime.datetime], int]] = {
    ChronoField.NANO_OF_SECOND: lambda dt: dt.microsecond * 1000,
    ChronoField.NANO_OF_DAY: lambda dt: _second_of_day(dt) * NANOS_PER_SECOND
    + dt.microsecond * 1000,
    ChronoField.MICRO_OF_SECOND: lambda dt: dt.microsecond,
    ChronoField.MICRO_OF_DAY: lambda dt: _second_of_day(dt) * 1_000_000 + dt.microsecond,
    ChronoField.MILLI_OF_SECOND: lambda dt: dt.microsecond // 1000,
    ChronoField.MILLI_OF_DAY: lambda dt: _second_of_day(dt) * 1000 + dt.microsecond // 1000,
    ChronoField.SECOND_OF_MINUTE: lambda dt: dt.second,
    ChronoField.SECOND_OF_DAY: _second_of_day,
    ChronoField.MINUTE_OF_HOUR: lambda dt: dt.minute,
    ChronoField.MINUTE_OF_DAY: lambda dt: dt.hour * 60 + dt.minute,
    ChronoField.HOUR_OF_AMPM: lambda dt: dt.hour % 12,
    ChronoField.CLOCK_HOUR_OF_AMPM: lambda dt: dt.hour % 12 or 12,
    ChronoField.HOUR_OF_DAY: lambda dt: dt.hour,
    ChronoField.CLOCK_HOUR_OF_DAY: lambda dt: dt.hour or 24,
    ChronoField.AMPM_OF_DAY: lambda dt: dt.hour // 12,
    ChronoField.DAY_OF_WEEK: lambda dt: dt.isoweekday(),
    ChronoField.DAY_OF_MONTH: lambda dt: dt.day,
    ChronoField.DAY_OF_YEAR: _day_of_year,
    ChronoField.EPOCH_DAY: lambda dt: dt.toordinal() - _EPOCH_ORDINAL,
    ChronoField.ALIGNED_WEEK_OF_MONTH: lambda dt: (dt.day - 1) // 7 + 1,
    ChronoField.ALIGNED_WEEK_OF_YEAR: lambda dt: (_day_of_year(dt) - 1) // 7 + 1,
    ChronoField.MONTH_OF_YEAR: lambda dt: dt.month,
    ChronoField.PROLEPTIC_MONTH: _proleptic_month,
    ChronoField.YEAR_OF_ERA: lambda dt: dt.year,
    ChronoField.YEAR: lambda dt: dt.year,
    ChronoField.ERA: lambda dt: 1,
}

_SETTERS: dict[ChronoField, Callable[[datetime.datetime, int], datetime.datetime]] = {
    ChronoField.NANO_OF_SECOND: lambda dt, v: dt.replace(microsecond=v // 1000),
    ChronoField.NANO_OF_DAY: _with_nano_of_day,
    ChronoField.MICRO_OF_SECOND: lambda dt, v: dt.replace(microsecond=v),
    ChronoField.MICRO_OF_DAY: lambda dt, v: _with_nano_of_day(dt, v * 1000),
    ChronoField.MILLI_OF_SECOND: lambda dt, v: dt.replace(microsecond=v * 1000),
    ChronoField.MILLI_OF_DAY: lambda dt, v: _with_nano_of_day(dt, v * 1_000_000),
    ChronoField.SECOND_OF_MINUTE: lambda dt, v: dt.replace(second=v),
    ChronoField.SECOND_OF_DAY: lambda dt, v: dt
    + datetime.timedelta(seconds=v - _second_of_day(dt)),
    ChronoField.MINUTE_OF_HOUR: lambda dt, v: dt.replace(minute=v),
    ChronoField.MINUTE_OF_DAY: lambda dt, v: dt.replace(hour=v // 60, minute=v % 60),
    ChronoField.HOUR_OF_AMPM: lambda dt, v: dt.replace(hour=dt.hour // 12 * 12 + v),
    ChronoField.CLOCK_HOUR_OF_AMPM: lambda dt, v: dt.replace(
        hour=dt.hour // 12 * 12 + v % 12
    ),
    ChronoField.HOUR_OF_DAY: lambda dt, v: dt.replace(hour=v),
    ChronoField.CLOCK_HOUR_OF_DAY: lambda dt, v: dt.replace(hour=v % 24),
    ChronoField.AMPM_OF_DAY: lambda dt, v: dt.replace(hour=dt.hour % 12 + v * 12),
    ChronoField.DAY_OF_WEEK: lambda dt, v: dt
    + datetime.timedelta(days=v - dt.isoweekday()),
    ChronoField.DAY_OF_MONTH: lambda dt, v: dt.replace(day=v),
    ChronoField.DAY_OF_YEAR: _with_day_of_year,
    ChronoField.EPOCH_DAY: lambda dt, v: datetime.datetime.combine(
        datetime.date.fromordinal(v + _EPOCH_ORDINAL), dt.time()
    ),
    ChronoField.ALIGNED_WEEK_OF_MONTH: lambda dt, v: dt
    + datetime.timedelta(weeks=v - ((dt.day - 1) // 7 + 1)),
    ChronoField.ALIGNED_WEEK_OF_YEAR: lambda dt, v: dt
    + datetime.timedelta(weeks=v - ((_day_of_year(dt) - 1) // 7 + 1)),
    ChronoField.MONTH_OF_YEAR: lambda dt, v: dt + relativedelta(month=v),
    ChronoField.PROLEPTIC_MONTH: lambda dt, v: dt
    + relativedelta(months=v - _proleptic_month(dt)),
    ChronoField.YEAR_OF_ERA: lambda dt, v: dt + relativedelta(year=v),
    ChronoField.YEAR: lambda dt, v: dt + relativedelta(year=v),
    ChronoField.ERA: _with_era,
}

# Fields whose valid values depend on the month or year of the value
_REFINED_FIELDS = frozenset(
    {
        ChronoField.DAY_OF_MONTH,
        ChronoField.DAY_OF_YEAR,
        ChronoField.ALIGNED_WEEK_OF_MONTH,
        ChronoField.YEAR_OF_ERA,
    }
)

_TIME_UNIT_DELTAS: dict[ChronoUnit, Callable[[int], datetime.timedelta]] = {
    ChronoUnit.NANOS: lambda n: datetime.timedelta(microseconds=div_toward_zero(n, 1000)),
    ChronoUnit.MICROS: lambda n: datetime.timedelta(microseconds=n),
    ChronoUnit.MILLIS: lambda n: datetime.timedelta(milliseconds=n),
    ChronoUnit.SECONDS: lambda n: datetime.timedelta(seconds=n),
    ChronoUnit.MINUTES: lambda n: datetime.timedelta(minutes=n),
    ChronoUnit.HOURS: lambda n: datetime.timedelta(hours=n),
    ChronoUnit.HALF_DAYS: lambda n: datetime.timedelta(hours=12 * n),
    ChronoUnit.DAYS: lambda n: datetime.timedelta(days=n),
    ChronoUnit.WEEKS: lambda n: datetime.timedelta(weeks=n),
}

_MONTHS_PER_UNIT: dict[ChronoUnit, int] = {
    ChronoUnit.MONTHS: 1,
    ChronoUnit.YEARS: 12,
    ChronoUnit.DECADES: 120,
    ChronoUnit.CENTURIES: 1200,
    ChronoUnit.MILLENNIA: 12000,
}


def _months_until(start: datetime.date, end: datetime.date) -> int:
    """Return whole months between two dates, truncated toward zero."""
    packed_start = _proleptic_month(start) * 32 + start.day
    packed_end = _proleptic_month(end) * 32 + end.day
    return div_toward_zero(packed_end - packed_start, 32)


@dataclass(frozen=True, order=True)
class LocalDateTime:
    """A date-time without an offset such as 2018-03-25T02:30.

    The value has microsecond precision, the precision of a python
    datetime. Nanosecond field values are truncated to microseconds.
    """

    value: datetime.datetime
    """The naive datetime holding the local reading."""

    def __post_init__(self) -> None:
        """Verify the datetime is a local reading."""
        if self.value.tzinfo is not None:
            raise ValueError(f"Expected a naive datetime: {self.value}")

    @classmethod
    def of(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
    ) -> LocalDateTime:
        """Create a local date-time from its components."""
        try:
            return cls(datetime.datetime(year, month, day, hour, minute, second, microsecond))
        except ValueError as err:
            raise InvalidFieldValueError(str(err)) from err

    @classmethod
    def of_epoch_second(
        cls, epoch_second: int, nano: int, offset: UtcOffset
    ) -> LocalDateTime:
        """Return the local reading of an instant at an offset."""
        try:
            return cls(
                EPOCH
                + datetime.timedelta(
                    seconds=epoch_second + offset.total_seconds,
                    microseconds=nano // 1000,
                )
            )
        except OverflowError as err:
            raise ArithmeticOverflowError(
                f"Local date-time exceeds supported range: {epoch_second}"
            ) from err

    def to_epoch_second(self, offset: UtcOffset) -> int:
        """Return the epoch second of this local reading at the offset."""
        delta = self.value - EPOCH
        return delta.days * 86400 + delta.seconds - offset.total_seconds

    @property
    def date(self) -> datetime.date:
        """Return the local date."""
        return self.value.date()

    @property
    def time(self) -> datetime.time:
        """Return the local time of day."""
        return self.value.time()

    def is_supported(self, field: ChronoField | ChronoUnit) -> bool:
        """Return True for date and time fields, and all units but forever."""
        if isinstance(field, ChronoUnit):
            return field is not ChronoUnit.FOREVER
        return field in _GETTERS

    def range(self, field: ChronoField) -> ValueRange:
        """Return the range of valid values for the field at this date."""
        if not self.is_supported(field):
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        if field not in _REFINED_FIELDS:
            return field.range()
        year, month = self.value.year, self.value.month
        if field is ChronoField.DAY_OF_MONTH:
            return ValueRange.of(1, calendar.monthrange(year, month)[1])
        if field is ChronoField.DAY_OF_YEAR:
            return ValueRange.of(1, 366 if calendar.isleap(year) else 365)
        if field is ChronoField.ALIGNED_WEEK_OF_MONTH:
            return ValueRange.of(
                1, 4 if month == 2 and not calendar.isleap(year) else 5
            )
        return ValueRange.of(1, MAX_YEAR)

    def get(self, field: ChronoField) -> int:
        """Return the value of the field."""
        if (getter := _GETTERS.get(field)) is None:
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        return getter(self.value)

    def with_field(self, field: ChronoField, value: int) -> LocalDateTime:
        """Return a copy with the field set to the value."""
        if (setter := _SETTERS.get(field)) is None:
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        field.check_valid_value(value)
        if field in _REFINED_FIELDS:
            self.range(field).check_valid_value(value, field)
        try:
            return LocalDateTime(setter(self.value, value))
        except (OverflowError, ValueError) as err:
            raise ArithmeticOverflowError(
                f"Unable to set {field} to {value} for {self}"
            ) from err

    def adjust(self, adjuster: TemporalAdjuster) -> Self:
        """Return a copy adjusted by the adjuster."""
        return adjuster(self)

    def plus(self, amount: int, unit: ChronoUnit) -> LocalDateTime:
        """Return a copy with the amount of the unit added.

        Month based units keep the day of month, clamping to the last
        valid day of the resulting month.
        """
        if unit is ChronoUnit.ERAS:
            return self.with_field(ChronoField.ERA, self.get(ChronoField.ERA) + amount)
        try:
            if (delta := _TIME_UNIT_DELTAS.get(unit)) is not None:
                return LocalDateTime(self.value + delta(amount))
            if (months := _MONTHS_PER_UNIT.get(unit)) is not None:
                return LocalDateTime(self.value + relativedelta(months=amount * months))
        except (OverflowError, ValueError) as err:
            raise ArithmeticOverflowError(
                f"Unable to add {amount} {unit} to {self}"
            ) from err
        raise UnsupportedFieldError(f"Unsupported unit: {unit}")

    def minus(self, amount: int, unit: ChronoUnit) -> LocalDateTime:
        """Return a copy with the amount of the unit subtracted."""
        return self.plus(-amount, unit)

    def until(self, end: LocalDateTime, unit: ChronoUnit) -> int:
        """Return the number of whole units until the end, truncated toward zero."""
        if not self.is_supported(unit):
            raise UnsupportedFieldError(f"Unsupported unit: {unit}")
        if unit.is_time_based:
            delta = end.value - self.value
            nanos = (delta.days * 86400 + delta.seconds) * NANOS_PER_SECOND + (
                delta.microseconds * 1000
            )
            return div_toward_zero(nanos, unit.nanos)
        start_date = self.value.date()
        end_date = end.value.date()
        if end_date > start_date and end.value.time() < self.value.time():
            end_date -= _ONE_DAY
        elif end_date < start_date and end.value.time() > self.value.time():
            end_date += _ONE_DAY
        if unit is ChronoUnit.DAYS:
            return (end_date - start_date).days
        if unit is ChronoUnit.WEEKS:
            return div_toward_zero((end_date - start_date).days, 7)
        if unit is ChronoUnit.ERAS:
            return 0
        return div_toward_zero(_months_until(start_date, end_date), _MONTHS_PER_UNIT[unit])

    def query(self, query: Any) -> Any:
        """Answer the local date, local time and precision queries."""
        if not isinstance(query, TemporalQuery):
            return query(self)
        if query is TemporalQuery.LOCAL_DATE:
            return self.value.date()
        if query is TemporalQuery.LOCAL_TIME:
            return self.value.time()
        if query is TemporalQuery.PRECISION:
            return ChronoUnit.MICROS
        return None

    def __str__(self) -> str:
        return self.value.isoformat()
