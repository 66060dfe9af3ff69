"""The contract shared by every date-time value type.

Generic algorithms (adjusters, queries, unit measurement) are written
against these protocols rather than against a specific value type, so
the value types never need to know about each other.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, Self, TypeVar, runtime_checkable

from .fields import ChronoField
from .queries import TemporalQuery
from .units import ChronoUnit
from .value_range import ValueRange

__all__ = [
    "TemporalAccessor",
    "Temporal",
    "TemporalAdjuster",
]

R = TypeVar("R")


@runtime_checkable
class TemporalAccessor(Protocol):
    """Read-only access to the fields of a date-time value."""

    def is_supported(self, field: ChronoField | ChronoUnit) -> bool:
        """Return True if the field (or unit) applies to this value."""

    def range(self, field: ChronoField) -> ValueRange:
        """Return the range of valid values for the field in this context."""

    def get(self, field: ChronoField) -> int:
        """Return the value of the field.

        Raises UnsupportedFieldError when the field does not apply.
        """

    def query(self, query: TemporalQuery | Callable[[Any], R]) -> Any:
        """Return information extracted from this value, or None for no answer."""


@runtime_checkable
class Temporal(TemporalAccessor, Protocol):
    """An immutable date-time value that can be adjusted and measured.

    All operations return a new value and leave the receiver unchanged.
    """

    def with_field(self, field: ChronoField, value: int) -> Self:
        """Return a copy with the field set to the value."""

    def adjust(self, adjuster: TemporalAdjuster) -> Self:
        """Return a copy adjusted by the adjuster."""

    def plus(self, amount: int, unit: ChronoUnit) -> Self:
        """Return a copy with the amount of the unit added."""

    def minus(self, amount: int, unit: ChronoUnit) -> Self:
        """Return a copy with the amount of the unit subtracted."""

    def until(self, end: Self, unit: ChronoUnit) -> int:
        """Return the number of whole units until the end value."""


TemporalAdjuster = Callable[[Any], Any]
"""A function mapping a temporal to an adjusted temporal of the same type."""
