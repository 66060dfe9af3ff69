"""The offset resolution engine for a single time-zone.

A ZoneRuleSet holds the historical transitions of a zone sorted by
instant, and up to a few recurring rules that describe transitions after
the point where the history ends. Queries binary search the historical
arrays and synthesize the transitions for a year from the rules on demand.

Two lookup arrays are derived at construction:

  - the instants of the transitions, paired with the wall offset in
    effect after each one (wall offsets has one extra leading entry for
    the offset before the first transition).
  - two local readings per transition, the lower and upper edge of the
    gap or overlap. A reading at an even index starts a gap or overlap
    and a reading at an odd index ends it.

The recurring rules only produce transitions strictly after the rules
start, which defaults to the last historical transition. The offset in
effect when the rules start is the last historical wall offset.
"""

from __future__ import annotations

import bisect
import datetime
import logging
from collections.abc import Iterator, Sequence
from typing import Union

from tzrules.exceptions import ZoneRulesError
from tzrules.temporal.fields import MAX_YEAR, MIN_YEAR
from tzrules.types.instant import EPOCH, Instant
from tzrules.types.local_date_time import LocalDateTime
from tzrules.types.utc_offset import UtcOffset

from .transition import RecurringTransitionRule, Transition

__all__ = ["ZoneRuleSet"]

_LOGGER = logging.getLogger(__name__)

# Synthesized transitions are memoized up to this year
LAST_CACHED_YEAR = 2100

_EPOCH_ORDINAL = EPOCH.toordinal()
_MAX_ORDINAL = datetime.date.max.toordinal()

_OffsetInfo = Union[UtcOffset, Transition]
_Local = Union[datetime.datetime, LocalDateTime]


def _year_of(epoch_second: int, offset: UtcOffset) -> int:
    """Return the local year of the epoch second at an offset, clamped to range."""
    ordinal = (epoch_second + offset.total_seconds) // 86400 + _EPOCH_ORDINAL
    return datetime.date.fromordinal(min(max(ordinal, 1), _MAX_ORDINAL)).year


def _naive(local: _Local) -> datetime.datetime:
    """Return the naive datetime of a local reading."""
    if isinstance(local, LocalDateTime):
        return local.value
    return local


def _offset_info(local: datetime.datetime, transition: Transition) -> _OffsetInfo:
    """Return the offset for a local reading near a transition, or the transition."""
    if transition.is_gap:
        if local < transition.local_date_time_before:
            return transition.offset_before
        if local < transition.local_date_time_after:
            return transition
        return transition.offset_after
    if local >= transition.local_date_time_before:
        return transition.offset_after
    if local < transition.local_date_time_after:
        return transition.offset_before
    return transition


class ZoneRuleSet:
    """The immutable rules describing how the offset of a zone varies.

    Instances are built once and shared. The per-year cache of
    synthesized transitions is the only state written after
    construction, and it only ever stores equivalent values.
    """

    def __init__(
        self,
        base_standard_offset: UtcOffset,
        base_wall_offset: UtcOffset,
        standard_transitions: Sequence[Transition] = (),
        transitions: Sequence[Transition] = (),
        rules: Sequence[RecurringTransitionRule] = (),
        rules_from: int | None = None,
    ) -> None:
        """Initialize ZoneRuleSet.

        The transitions must be strictly ascending by instant. The
        standard transitions describe changes to the standard offset and
        must also be strictly ascending.

        The recurring rules apply to instants after the `rules_from` epoch
        second, which defaults to the last transition. Without transitions
        or a start the rules apply to all time.
        """
        self._verify_ascending("standard transitions", standard_transitions)
        self._verify_ascending("transitions", transitions)
        if rules_from is None and transitions:
            rules_from = transitions[-1].at_epoch_second
        if (
            rules_from is not None
            and transitions
            and rules_from < transitions[-1].at_epoch_second
        ):
            raise ZoneRulesError(
                f"Zone rules must start at or after the last transition: {rules_from}"
            )
        self._rules_from: int | None = rules_from

        self._standard_transitions: tuple[int, ...] = tuple(
            t.at_epoch_second for t in standard_transitions
        )
        self._standard_offsets: tuple[UtcOffset, ...] = (base_standard_offset,) + tuple(
            t.offset_after for t in standard_transitions
        )

        self._transitions: tuple[Transition, ...] = tuple(transitions)
        self._instant_transitions: tuple[int, ...] = tuple(
            t.at_epoch_second for t in transitions
        )
        self._wall_offsets: tuple[UtcOffset, ...] = (base_wall_offset,) + tuple(
            t.offset_after for t in transitions
        )
        local_transitions: list[datetime.datetime] = []
        for transition in transitions:
            if transition.is_gap:
                local_transitions.append(transition.local_date_time_before)
                local_transitions.append(transition.local_date_time_after)
            else:
                local_transitions.append(transition.local_date_time_after)
                local_transitions.append(transition.local_date_time_before)
        self._local_transitions: tuple[datetime.datetime, ...] = tuple(local_transitions)

        self._rules: tuple[RecurringTransitionRule, ...] = tuple(rules)
        self._year_cache: dict[int, tuple[Transition, ...]] = {}

    @staticmethod
    def _verify_ascending(name: str, transitions: Sequence[Transition]) -> None:
        for previous, current in zip(transitions, transitions[1:]):
            if current.at_epoch_second <= previous.at_epoch_second:
                raise ZoneRulesError(
                    f"Zone {name} must be strictly ascending: {previous} then {current}"
                )

    @classmethod
    def fixed(cls, offset: UtcOffset) -> ZoneRuleSet:
        """Return rules for a zone that always uses the same offset."""
        return cls(offset, offset)

    @property
    def is_fixed_offset(self) -> bool:
        """Return True if the zone never changes offset."""
        return not self._transitions and not self._rules

    @property
    def rules_from(self) -> int | None:
        """Return the epoch second after which the recurring rules apply."""
        return self._rules_from

    def transitions(self, until_year: int | None = None) -> Iterator[Transition]:
        """Return the transitions of the zone in ascending order.

        Without an end year only the historical transitions are returned.
        With an end year the transitions generated by the recurring rules
        after the rules start follow, up to and including the end year. A
        zone that has rules for all time generates transitions from 1970.
        """
        yield from self._transitions
        if until_year is None or not self._rules:
            return
        if self._rules_from is not None:
            year = _year_of(self._rules_from, self._wall_offsets[-1])
        else:
            year = EPOCH.year
        for current_year in range(year, min(until_year, MAX_YEAR) + 1):
            for transition in self._transitions_for_year(current_year):
                if self._applies(transition):
                    yield transition

    def transition_rules(self) -> tuple[RecurringTransitionRule, ...]:
        """Return the recurring rules used after the last historical transition."""
        return self._rules

    def _applies(self, transition: Transition) -> bool:
        """Return True if a synthesized transition is after the rules start."""
        return self._rules_from is None or transition.at_epoch_second > self._rules_from

    def _beyond_history(self, epoch_second: int) -> bool:
        """Return True if the instant should be answered from the recurring rules."""
        return bool(self._rules) and (
            self._rules_from is None or epoch_second > self._rules_from
        )

    def _transitions_for_year(self, year: int) -> tuple[Transition, ...]:
        """Return the transitions synthesized from the rules for the year."""
        if (cached := self._year_cache.get(year)) is not None:
            return cached
        result = tuple(
            sorted(
                (rule.create_transition(year) for rule in self._rules),
                key=lambda t: t.at_epoch_second,
            )
        )
        if year <= LAST_CACHED_YEAR:
            result = self._year_cache.setdefault(year, result)
        else:
            _LOGGER.debug("Transitions for year %d are not cached", year)
        return result

    def _rule_transitions(self, first_year: int, last_year: int) -> list[Transition]:
        """Return the synthesized transitions that apply over a range of years."""
        return [
            transition
            for year in range(max(first_year, MIN_YEAR), min(last_year, MAX_YEAR) + 1)
            for transition in self._transitions_for_year(year)
            if self._applies(transition)
        ]

    def _rules_start_offset(self, transitions: list[Transition]) -> UtcOffset:
        """Return the offset in effect before the first synthesized transition."""
        if self._rules_from is None and transitions:
            return transitions[0].offset_before
        return self._wall_offsets[-1]

    def offset_at(self, instant: Instant) -> UtcOffset:
        """Return the offset in effect at the instant."""
        if self.is_fixed_offset:
            return self._wall_offsets[0]
        epoch_second = instant.epoch_second
        if self._beyond_history(epoch_second):
            year = _year_of(epoch_second, self._wall_offsets[-1])
            year_transitions = self._rule_transitions(year - 1, year + 1)
            offset = self._rules_start_offset(year_transitions)
            for transition in year_transitions:
                if epoch_second < transition.at_epoch_second:
                    break
                offset = transition.offset_after
            return offset
        index = bisect.bisect_right(self._instant_transitions, epoch_second)
        return self._wall_offsets[index]

    def _offset_info(self, local: datetime.datetime) -> _OffsetInfo:
        """Return the offset for the local reading, or the transition it falls in."""
        if self.is_fixed_offset:
            return self._wall_offsets[0]
        if self._rules and (
            not self._local_transitions or local > self._local_transitions[-1]
        ):
            year_transitions = self._rule_transitions(local.year - 1, local.year + 1)
            info: _OffsetInfo = self._rules_start_offset(year_transitions)
            for transition in year_transitions:
                if (
                    local < transition.local_date_time_before
                    and local < transition.local_date_time_after
                ):
                    break
                info = _offset_info(local, transition)
                if isinstance(info, Transition):
                    break
            return info
        index = bisect.bisect_right(self._local_transitions, local) - 1
        if index < 0:
            return self._wall_offsets[0]
        if index % 2 == 0:
            return self._transitions[index // 2]
        return self._wall_offsets[index // 2 + 1]

    def offsets_at(self, local: _Local) -> list[UtcOffset]:
        """Return the valid offsets for a local date-time.

        The result is empty for a reading in a gap, has the offsets before
        and after for a reading in an overlap, and otherwise has a single
        offset.
        """
        info = self._offset_info(_naive(local))
        if isinstance(info, Transition):
            return list(info.valid_offsets)
        return [info]

    def offset_at_local(self, local: _Local) -> UtcOffset:
        """Return the offset for a local date-time.

        A reading in a gap uses the offset after the transition. A reading
        in an overlap uses the offset before the transition.
        """
        info = self._offset_info(_naive(local))
        if isinstance(info, Transition):
            return info.offset_after if info.is_gap else info.offset_before
        return info

    def transition_at(self, local: _Local) -> Transition | None:
        """Return the transition for a local reading in a gap or overlap."""
        info = self._offset_info(_naive(local))
        return info if isinstance(info, Transition) else None

    def is_valid_offset(self, local: _Local, offset: UtcOffset) -> bool:
        """Return True if the offset is valid for the local date-time."""
        return offset in self.offsets_at(local)


    def standard_offset_at(self, instant: Instant) -> UtcOffset:
        """Return the standard offset in effect at the instant."""
        index = bisect.bisect_right(self._standard_transitions, instant.epoch_second)
        return self._standard_offsets[index]

    def daylight_savings_at(self, instant: Instant) -> datetime.timedelta:
        """Return the amount of daylight savings in effect at the instant."""
        return datetime.timedelta(
            seconds=self.offset_at(instant).total_seconds
            - self.standard_offset_at(instant).total_seconds
        )

    def is_daylight_savings_at(self, instant: Instant) -> bool:
        """Return True if the offset differs from the standard offset at the instant."""
        return self.standard_offset_at(instant) != self.offset_at(instant)


    def next_transition(self, instant: Instant) -> Transition | None:
        """Return the first transition strictly after the instant, if any."""
        if self.is_fixed_offset:
            return None
        epoch_second = instant.epoch_second
        if self._instant_transitions and epoch_second < self._instant_transitions[-1]:
            index = bisect.bisect_right(self._instant_transitions, epoch_second)
            return self._transitions[index]
        if not self._rules:
            return None
        start = epoch_second
        if self._rules_from is not None:
            start = max(start, self._rules_from)
        year = _year_of(start, self._wall_offsets[-1])
        for transition in self._rule_transitions(year - 1, year + 1):
            if epoch_second < transition.at_epoch_second:
                return transition
        return None

    def previous_transition(self, instant: Instant) -> Transition | None:
        """Return the last transition strictly before the instant, if any."""
        if self.is_fixed_offset:
            return None
        epoch_second = instant.epoch_second
        if instant.nano > 0:
            epoch_second += 1
        if self._beyond_history(epoch_second):
            year = _year_of(epoch_second, self._wall_offsets[-1])
            for transition in reversed(self._rule_transitions(year - 2, year + 1)):
                if transition.at_epoch_second < epoch_second:
                    return transition
        index = bisect.bisect_left(self._instant_transitions, epoch_second)
        if index <= 0:
            return None
        return self._transitions[index - 1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZoneRuleSet):
            return NotImplemented
        return (
            self._standard_transitions == other._standard_transitions
            and self._standard_offsets == other._standard_offsets
            and self._transitions == other._transitions
            and self._wall_offsets[0] == other._wall_offsets[0]
            and self._rules == other._rules
            and self._rules_from == other._rules_from
        )

    def __hash__(self) -> int:
        return hash((self._standard_offsets, self._transitions, self._rules))

    def __repr__(self) -> str:
        if self.is_fixed_offset:
            return f"ZoneRuleSet[fixed={self._wall_offsets[0]}]"
        return (
            f"ZoneRuleSet[transitions={len(self._transitions)}, "
            f"rules={len(self._rules)}, current={self._wall_offsets[-1]}]"
        )
