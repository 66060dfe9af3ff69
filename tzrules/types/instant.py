"""An instantaneous point on the UTC time-line."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, ClassVar, Self

from tzrules.exceptions import InstantOutOfRangeError, UnsupportedFieldError
from tzrules.temporal.fields import MAX_EPOCH_SECOND, MIN_EPOCH_SECOND, ChronoField
from tzrules.temporal.protocol import TemporalAdjuster
from tzrules.temporal.queries import TemporalQuery
from tzrules.temporal.units import NANOS_PER_SECOND, ChronoUnit
from tzrules.temporal.value_range import ValueRange

__all__ = ["Instant", "EPOCH", "div_toward_zero"]

EPOCH = datetime.datetime(1970, 1, 1)
"""The epoch as a naive date-time, used to convert to and from local readings."""

_SUPPORTED_FIELDS = frozenset(
    {
        ChronoField.NANO_OF_SECOND,
        ChronoField.MICRO_OF_SECOND,
        ChronoField.MILLI_OF_SECOND,
        ChronoField.INSTANT_SECONDS,
    }
)


def div_toward_zero(dividend: int, divisor: int) -> int:
    """Integer division that truncates toward zero rather than flooring."""
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor > 0) else -quotient


@dataclass(frozen=True, order=True)
class Instant:
    """A point on the time-line as seconds and nanoseconds from the epoch.

    The range of an instant is bounded by the range of python dates, from
    0001-01-01T00:00:00Z to 9999-12-31T23:59:59.999999999Z.
    """

    epoch_second: int
    """Seconds from 1970-01-01T00:00:00Z, negative for earlier instants."""

    nano: int = 0
    """Nanoseconds within the second, from 0 to 999,999,999."""

    EPOCH: ClassVar[Instant]
    MIN: ClassVar[Instant]
    MAX: ClassVar[Instant]

    def __post_init__(self) -> None:
        """Validate the instant is on the representable time-line."""
        if not 0 <= self.nano < NANOS_PER_SECOND:
            raise ValueError(f"Nano of second out of range: {self.nano}")
        if not MIN_EPOCH_SECOND <= self.epoch_second <= MAX_EPOCH_SECOND:
            raise InstantOutOfRangeError(
                f"Instant exceeds minimum or maximum instant: {self.epoch_second}"
            )

    @classmethod
    def of_epoch_second(cls, epoch_second: int, nano_adjustment: int = 0) -> Instant:
        """Return an instant, normalizing any nanosecond adjustment."""
        extra, nano = divmod(nano_adjustment, NANOS_PER_SECOND)
        return cls(epoch_second + extra, nano)

    @classmethod
    def of_epoch_milli(cls, epoch_milli: int) -> Instant:
        """Return an instant from milliseconds since the epoch."""
        seconds, millis = divmod(epoch_milli, 1000)
        return cls(seconds, millis * 1_000_000)

    @classmethod
    def from_datetime(cls, value: datetime.datetime) -> Instant:
        """Return the instant of a timezone aware datetime."""
        if value.utcoffset() is None:
            raise ValueError(f"Expected a timezone aware datetime: {value}")
        local = value.replace(tzinfo=None) - value.utcoffset()  # type: ignore[operator]
        delta = local - EPOCH
        return cls(
            delta.days * 86400 + delta.seconds, delta.microseconds * 1000
        )

    def to_datetime(self) -> datetime.datetime:
        """Return a UTC datetime, truncated to microsecond precision."""
        return (
            EPOCH
            + datetime.timedelta(seconds=self.epoch_second, microseconds=self.nano // 1000)
        ).replace(tzinfo=datetime.timezone.utc)

    def to_epoch_milli(self) -> int:
        """Return the milliseconds since the epoch, floored."""
        return self.epoch_second * 1000 + self.nano // 1_000_000

    def is_supported(self, field: ChronoField | ChronoUnit) -> bool:
        """Return True for sub-second and instant fields, and units up to days."""
        if isinstance(field, ChronoUnit):
            return field.is_time_based or field is ChronoUnit.DAYS
        return field in _SUPPORTED_FIELDS

    def range(self, field: ChronoField) -> ValueRange:
        """Return the range of valid values for the field."""
        if not self.is_supported(field):
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        return field.range()

    def get(self, field: ChronoField) -> int:
        """Return the value of the field."""
        if field is ChronoField.NANO_OF_SECOND:
            return self.nano
        if field is ChronoField.MICRO_OF_SECOND:
            return self.nano // 1000
        if field is ChronoField.MILLI_OF_SECOND:
            return self.nano // 1_000_000
        if field is ChronoField.INSTANT_SECONDS:
            return self.epoch_second
        raise UnsupportedFieldError(f"Unsupported field: {field}")

    def with_field(self, field: ChronoField, value: int) -> Instant:
        """Return a copy with the field set to the value."""
        if not self.is_supported(field):
            raise UnsupportedFieldError(f"Unsupported field: {field}")
        field.check_valid_value(value)
        if field is ChronoField.MILLI_OF_SECOND:
            return Instant(self.epoch_second, value * 1_000_000)
        if field is ChronoField.MICRO_OF_SECOND:
            return Instant(self.epoch_second, value * 1000)
        if field is ChronoField.NANO_OF_SECOND:
            return Instant(self.epoch_second, value)
        return Instant(value, self.nano)

    def adjust(self, adjuster: TemporalAdjuster) -> Self:
        """Return a copy adjusted by the adjuster."""
        return adjuster(self)

    def plus(self, amount: int, unit: ChronoUnit) -> Instant:
        """Return a copy with the amount of the unit added."""
        if not self.is_supported(unit):
            raise UnsupportedFieldError(f"Unsupported unit: {unit}")
        return Instant.of_epoch_second(self.epoch_second, self.nano + amount * unit.nanos)

    def minus(self, amount: int, unit: ChronoUnit) -> Instant:
        """Return a copy with the amount of the unit subtracted."""
        return self.plus(-amount, unit)

    def until(self, end: Instant, unit: ChronoUnit) -> int:
        """Return the number of whole units between this and the end instant."""
        if not self.is_supported(unit):
            raise UnsupportedFieldError(f"Unsupported unit: {unit}")
        nanos = (end.epoch_second - self.epoch_second) * NANOS_PER_SECOND + (
            end.nano - self.nano
        )
        return div_toward_zero(nanos, unit.nanos)

    def query(self, query: Any) -> Any:
        """Return the precision for the precision query, otherwise no answer."""
        if not isinstance(query, TemporalQuery):
            return query(self)
        if query is TemporalQuery.PRECISION:
            return ChronoUnit.NANOS
        return None

    def __str__(self) -> str:
        value = (EPOCH + datetime.timedelta(seconds=self.epoch_second)).isoformat()
        if self.nano:
            value += f".{self.nano:09}".rstrip("0")
        return f"{value}Z"


Instant.EPOCH = Instant(0)
Instant.MIN = Instant(MIN_EPOCH_SECOND)
Instant.MAX = Instant(MAX_EPOCH_SECOND, NANOS_PER_SECOND - 1)
