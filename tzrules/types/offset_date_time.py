"""A local date-time paired with the offset it was observed at."""

from __future__ import annotations

import datetime
import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from tzrules.temporal.fields import ChronoField
from tzrules.temporal.protocol import TemporalAdjuster
from tzrules.temporal.queries import TemporalQuery
from tzrules.temporal.units import ChronoUnit
from tzrules.temporal.value_range import ValueRange

from .instant import Instant
from .local_date_time import LocalDateTime
from .utc_offset import UtcOffset

if TYPE_CHECKING:
    from tzrules.zone.rules import ZoneRuleSet

__all__ = ["OffsetDateTime"]

_OFFSET_FIELDS = frozenset({ChronoField.INSTANT_SECONDS, ChronoField.OFFSET_SECONDS})


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class OffsetDateTime:
    """A date-time with an offset from UTC such as 2018-03-25T03:30+02:00."""

    local: LocalDateTime
    """The local reading."""

    offset: UtcOffset
    """The offset the local reading was observed at."""

    @classmethod
    def of(cls, local: LocalDateTime, offset: UtcOffset) -> OffsetDateTime:
        """Create an offset date-time from a local reading and an offset."""
        return cls(local, offset)

    @classmethod
    def of_instant(cls, instant: Instant, rules: ZoneRuleSet) -> OffsetDateTime:
        """Return the reading of the instant using the offset of the zone rules."""
        offset = rules.offset_at(instant)
        return cls(
            LocalDateTime.of_epoch_second(instant.epoch_second, instant.nano, offset),
            offset,
        )

    @classmethod
    def of_local(
        cls,
        local: LocalDateTime,
        rules: ZoneRuleSet,
        preferred_offset: UtcOffset | None = None,
    ) -> OffsetDateTime:
        """Resolve a local reading to an offset date-time using the zone rules.

        A local reading in a gap is moved later by the length of the gap
        and uses the offset after the transition. A local reading in an
        overlap uses the preferred offset when it is valid, otherwise the
        earlier offset.
        """
        offsets = rules.offsets_at(local)
        if len(offsets) == 1:
            return cls(local, offsets[0])
        if not offsets:
            transition = rules.transition_at(local)
            assert transition is not None
            return cls(
                local.plus(transition.duration_seconds, ChronoUnit.SECONDS),
                transition.offset_after,
            )
        if preferred_offset is not None and preferred_offset in offsets:
            return cls(local, preferred_offset)
        return cls(local, offsets[0])

    def with_earlier_offset_at_overlap(self, rules: ZoneRuleSet) -> OffsetDateTime:
        """Return a copy using the earlier of the two offsets in an overlap."""
        transition = rules.transition_at(self.local)
        if transition is not None and transition.is_overlap:
            return OffsetDateTime(self.local, transition.offset_before)
        return self

    def with_later_offset_at_overlap(self, rules: ZoneRuleSet) -> OffsetDateTime:
        """Return a copy using the later of the two offsets in an overlap."""
        transition = rules.transition_at(self.local)
        if transition is not None and transition.is_overlap:
            return OffsetDateTime(self.local, transition.offset_after)
        return self

    def with_offset_same_instant(self, offset: UtcOffset) -> OffsetDateTime:
        """Return the same instant observed at a different offset."""
        if offset == self.offset:
            return self
        return OffsetDateTime(
            self.local.plus(
                offset.total_seconds - self.offset.total_seconds, ChronoUnit.SECONDS
            ),
            offset,
        )

    def to_epoch_second(self) -> int:
        """Return the number of seconds from the epoch."""
        return self.local.to_epoch_second(self.offset)

    def to_instant(self) -> Instant:
        """Return the instant on the time-line."""
        return Instant(self.to_epoch_second(), self.local.value.microsecond * 1000)

    def to_datetime(self) -> datetime.datetime:
        """Return a timezone aware python datetime with a fixed offset."""
        return self.local.value.replace(tzinfo=self.offset.as_timezone())

    def is_supported(self, field: ChronoField | ChronoUnit) -> bool:
        """Return True for local fields, instant seconds and offset seconds."""
        return field in _OFFSET_FIELDS or self.local.is_supported(field)

    def range(self, field: ChronoField) -> ValueRange:
        """Return the range of valid values for the field."""
        if field in _OFFSET_FIELDS:
            return field.range()
        return self.local.range(field)

    def get(self, field: ChronoField) -> int:
        """Return the value of the field."""
        if field is ChronoField.INSTANT_SECONDS:
            return self.to_epoch_second()
        if field is ChronoField.OFFSET_SECONDS:
            return self.offset.total_seconds
        return self.local.get(field)

    def with_field(self, field: ChronoField, value: int) -> OffsetDateTime:
        """Return a copy with the field set to the value.

        Setting instant seconds keeps the offset, setting offset seconds
        keeps the local reading.
        """
        if field is ChronoField.INSTANT_SECONDS:
            field.check_valid_value(value)
            nano = self.local.value.microsecond * 1000
            return OffsetDateTime(
                LocalDateTime.of_epoch_second(value, nano, self.offset), self.offset
            )
        if field is ChronoField.OFFSET_SECONDS:
            return OffsetDateTime(self.local, UtcOffset.of_total_seconds(value))
        return OffsetDateTime(self.local.with_field(field, value), self.offset)

    def adjust(self, adjuster: TemporalAdjuster) -> Self:
        """Return a copy adjusted by the adjuster."""
        return adjuster(self)

    def plus(self, amount: int, unit: ChronoUnit) -> OffsetDateTime:
        """Return a copy with the amount added to the local reading."""
        return OffsetDateTime(self.local.plus(amount, unit), self.offset)

    def minus(self, amount: int, unit: ChronoUnit) -> OffsetDateTime:
        """Return a copy with the amount subtracted from the local reading."""
        return self.plus(-amount, unit)

    def until(self, end: OffsetDateTime, unit: ChronoUnit) -> int:
        """Return the whole units until end, after moving end to this offset."""
        return self.local.until(end.with_offset_same_instant(self.offset).local, unit)

    def query(self, query: Any) -> Any:
        """Answer the offset and zone queries, and the local queries."""
        if not isinstance(query, TemporalQuery):
            return query(self)
        if query in (TemporalQuery.OFFSET, TemporalQuery.ZONE):
            return self.offset
        return self.local.query(query)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, OffsetDateTime):
            return NotImplemented
        return (self.to_epoch_second(), self.local) < (
            other.to_epoch_second(),
            other.local,
        )

    def __str__(self) -> str:
        return f"{self.local}{self.offset}"
