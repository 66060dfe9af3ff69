"""The range of valid values for a date-time field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tzrules.exceptions import InvalidFieldValueError

if TYPE_CHECKING:
    from .fields import ChronoField

__all__ = ["ValueRange"]


@dataclass(frozen=True)
class ValueRange:
    """The range of valid values for a field.

    Some fields have a range that varies, for example day-of-month is
    between 1 and 28 at minimum and between 1 and 31 at maximum. The
    `largest_minimum` and `smallest_maximum` describe the variable portion
    of the outer range.
    """

    minimum: int
    """The smallest minimum value of the range."""

    largest_minimum: int
    """The largest possible minimum value of the range."""

    smallest_maximum: int
    """The smallest possible maximum value of the range."""

    maximum: int
    """The largest maximum value of the range."""

    def __post_init__(self) -> None:
        """Validate the range bounds are consistent."""
        if self.minimum > self.largest_minimum:
            raise ValueError("Smallest minimum value must be less than largest minimum value")
        if self.smallest_maximum > self.maximum:
            raise ValueError("Smallest maximum value must be less than largest maximum value")
        if self.largest_minimum > self.maximum:
            raise ValueError("Minimum value must be less than maximum value")

    @classmethod
    def of(
        cls,
        minimum: int,
        maximum: int,
        smallest_maximum: int | None = None,
        largest_minimum: int | None = None,
    ) -> ValueRange:
        """Create a range, optionally with a variable maximum or minimum."""
        return cls(
            minimum,
            minimum if largest_minimum is None else largest_minimum,
            maximum if smallest_maximum is None else smallest_maximum,
            maximum,
        )

    @property
    def is_fixed(self) -> bool:
        """Return True if the minimum and maximum never vary."""
        return (
            self.minimum == self.largest_minimum
            and self.smallest_maximum == self.maximum
        )

    def is_valid_value(self, value: int) -> bool:
        """Return True if the value is within the outer range."""
        return self.minimum <= value <= self.maximum

    def check_valid_value(self, value: int, field: ChronoField | None = None) -> int:
        """Return the value or raise InvalidFieldValueError if out of range."""
        if not self.is_valid_value(value):
            name = f"for {field.display_name} " if field is not None else ""
            raise InvalidFieldValueError(
                f"Invalid value {name}(valid values {self}): {value}"
            )
        return value

    def __str__(self) -> str:
        """Return the range as a string e.g. 1 - 28/31."""
        parts = [str(self.minimum)]
        if self.minimum != self.largest_minimum:
            parts.append(f"/{self.largest_minimum}")
        parts.append(f" - {self.smallest_maximum}")
        if self.smallest_maximum != self.maximum:
            parts.append(f"/{self.maximum}")
        return "".join(parts)
