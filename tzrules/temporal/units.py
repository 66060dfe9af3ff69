"""The standard set of date period units."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .protocol import Temporal

__all__ = ["ChronoUnit"]

NANOS_PER_SECOND = 1_000_000_000
_SECONDS_PER_YEAR = 31556952  # 365.2425 days

T = TypeVar("T", bound="Temporal")


class ChronoUnit(enum.Enum):
    """A closed set of units of time used to add, subtract and measure values.

    Each unit has an (estimated for date based units) duration in
    nanoseconds used to order the units and to compare them.
    """

    NANOS = ("Nanos", 1)
    MICROS = ("Micros", 1_000)
    MILLIS = ("Millis", 1_000_000)
    SECONDS = ("Seconds", NANOS_PER_SECOND)
    MINUTES = ("Minutes", 60 * NANOS_PER_SECOND)
    HOURS = ("Hours", 3600 * NANOS_PER_SECOND)
    HALF_DAYS = ("HalfDays", 43200 * NANOS_PER_SECOND)
    DAYS = ("Days", 86400 * NANOS_PER_SECOND)
    WEEKS = ("Weeks", 7 * 86400 * NANOS_PER_SECOND)
    MONTHS = ("Months", _SECONDS_PER_YEAR // 12 * NANOS_PER_SECOND)
    YEARS = ("Years", _SECONDS_PER_YEAR * NANOS_PER_SECOND)
    DECADES = ("Decades", 10 * _SECONDS_PER_YEAR * NANOS_PER_SECOND)
    CENTURIES = ("Centuries", 100 * _SECONDS_PER_YEAR * NANOS_PER_SECOND)
    MILLENNIA = ("Millennia", 1000 * _SECONDS_PER_YEAR * NANOS_PER_SECOND)
    ERAS = ("Eras", 1_000_000_000 * _SECONDS_PER_YEAR * NANOS_PER_SECOND)
    FOREVER = ("Forever", (2**63 - 1) * NANOS_PER_SECOND + 999_999_999)

    def __init__(self, display_name: str, nanos: int):
        self._display_name = display_name
        self._nanos = nanos

    @property
    def display_name(self) -> str:
        """Return the name of the unit e.g. Days."""
        return self._display_name

    @property
    def nanos(self) -> int:
        """Return the (estimated) duration of the unit in nanoseconds."""
        return self._nanos

    @property
    def is_duration_estimated(self) -> bool:
        """Return True for units of a day or longer, which vary in length."""
        return self._nanos >= ChronoUnit.DAYS.nanos

    @property
    def is_date_based(self) -> bool:
        """Return True if the unit is used by dates (days through eras)."""
        return self.is_duration_estimated and self is not ChronoUnit.FOREVER

    @property
    def is_time_based(self) -> bool:
        """Return True if the unit is used by times (nanos through half days)."""
        return self._nanos < ChronoUnit.DAYS.nanos

    def is_supported_by(self, temporal: Temporal) -> bool:
        """Return True if this unit can be added to the temporal."""
        return temporal.is_supported(self)

    def add_to(self, temporal: T, amount: int) -> T:
        """Return a copy of the temporal with the amount of this unit added."""
        return temporal.plus(amount, self)

    def between(self, start: T, end: T) -> int:
        """Return the number of whole units from start to end.

        The count is truncated toward zero, so the result is negative
        when end is before start.
        """
        return start.until(end, self)

    def __str__(self) -> str:
        return self._display_name
