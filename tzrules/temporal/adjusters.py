"""Common adjusters for date-time values.

Adjusters are plain functions from a temporal to an adjusted temporal of
the same type, built only from the generic field and unit operations so
they work with any value type that supports day based fields.
"""

from __future__ import annotations

from typing import Any

from .fields import ChronoField, DayOfWeek
from .protocol import TemporalAdjuster
from .units import ChronoUnit

__all__ = [
    "first_day_of_month",
    "last_day_of_month",
    "first_day_of_next_month",
    "first_day_of_year",
    "last_day_of_year",
    "first_day_of_next_year",
    "first_in_month",
    "last_in_month",
    "day_of_week_in_month",
    "next_weekday",
    "next_or_same",
    "previous_weekday",
    "previous_or_same",
]


def first_day_of_month() -> TemporalAdjuster:
    """Return an adjuster for the first day of the current month."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(ChronoField.DAY_OF_MONTH, 1)

    return adjust


def last_day_of_month() -> TemporalAdjuster:
    """Return an adjuster for the last day of the current month."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(
            ChronoField.DAY_OF_MONTH,
            temporal.range(ChronoField.DAY_OF_MONTH).maximum,
        )

    return adjust


def first_day_of_next_month() -> TemporalAdjuster:
    """Return an adjuster for the first day of the next month."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(ChronoField.DAY_OF_MONTH, 1).plus(
            1, ChronoUnit.MONTHS
        )

    return adjust


def first_day_of_year() -> TemporalAdjuster:
    """Return an adjuster for the first day of the current year."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(ChronoField.DAY_OF_YEAR, 1)

    return adjust


def last_day_of_year() -> TemporalAdjuster:
    """Return an adjuster for the last day of the current year."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(
            ChronoField.DAY_OF_YEAR,
            temporal.range(ChronoField.DAY_OF_YEAR).maximum,
        )

    return adjust


def first_day_of_next_year() -> TemporalAdjuster:
    """Return an adjuster for the first day of the next year."""

    def adjust(temporal: Any) -> Any:
        return temporal.with_field(ChronoField.DAY_OF_YEAR, 1).plus(
            1, ChronoUnit.YEARS
        )

    return adjust


def first_in_month(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the first matching weekday of the month."""
    return day_of_week_in_month(1, day_of_week)


def last_in_month(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the last matching weekday of the month."""
    return day_of_week_in_month(-1, day_of_week)


def day_of_week_in_month(ordinal: int, day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the ordinal weekday of the month.

    A positive ordinal counts from the start of the month (1 is the first
    matching weekday) and a negative ordinal counts from the end of the
    month (-1 is the last matching weekday). An ordinal of zero selects
    the last matching weekday of the previous month. Large ordinals may
    move the result into a following month.
    """
    dow_value = int(day_of_week)

    def adjust(temporal: Any) -> Any:
        if ordinal >= 0:
            start = temporal.with_field(ChronoField.DAY_OF_MONTH, 1)
            current = start.get(ChronoField.DAY_OF_WEEK)
            days = (dow_value - current + 7) % 7
            days += (ordinal - 1) * 7
            return start.plus(days, ChronoUnit.DAYS)
        end = temporal.with_field(
            ChronoField.DAY_OF_MONTH,
            temporal.range(ChronoField.DAY_OF_MONTH).maximum,
        )
        current = end.get(ChronoField.DAY_OF_WEEK)
        days = dow_value - current
        if days > 0:
            days -= 7
        days -= (-ordinal - 1) * 7
        return end.plus(days, ChronoUnit.DAYS)

    return adjust


def next_weekday(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the next matching weekday, strictly after."""
    dow_value = int(day_of_week)

    def adjust(temporal: Any) -> Any:
        diff = temporal.get(ChronoField.DAY_OF_WEEK) - dow_value
        return temporal.plus(7 - diff if diff >= 0 else -diff, ChronoUnit.DAYS)

    return adjust


def next_or_same(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the next matching weekday, or the same day."""
    dow_value = int(day_of_week)

    def adjust(temporal: Any) -> Any:
        current = temporal.get(ChronoField.DAY_OF_WEEK)
        if current == dow_value:
            return temporal
        diff = current - dow_value
        return temporal.plus(7 - diff if diff >= 0 else -diff, ChronoUnit.DAYS)

    return adjust


def previous_weekday(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the previous matching weekday, strictly before."""
    dow_value = int(day_of_week)

    def adjust(temporal: Any) -> Any:
        diff = dow_value - temporal.get(ChronoField.DAY_OF_WEEK)
        return temporal.minus(7 - diff if diff >= 0 else -diff, ChronoUnit.DAYS)

    return adjust


def previous_or_same(day_of_week: DayOfWeek) -> TemporalAdjuster:
    """Return an adjuster for the previous matching weekday, or the same day."""
    dow_value = int(day_of_week)

    def adjust(temporal: Any) -> Any:
        current = temporal.get(ChronoField.DAY_OF_WEEK)
        if current == dow_value:
            return temporal
        diff = dow_value - current
        return temporal.minus(7 - diff if diff >= 0 else -diff, ChronoUnit.DAYS)

    return adjust
