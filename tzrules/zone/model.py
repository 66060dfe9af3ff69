"""Data model for TZif zone data."""

from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Optional

from .tz_rule import PosixRule


@dataclass(frozen=True)
class LocalTimeType:
    """A local time type record referenced by transitions."""

    utoff: int
    """Number of seconds added to UTC to determine local time."""

    dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""

    designation: str
    """The time zone designation e.g. CET."""


@dataclass(frozen=True)
class TransitionRecord:
    """A transition time and the local time type that starts at it."""

    transition_time: int
    """A transition time at which the rules for computing local time may change."""

    local_time_type: LocalTimeType
    """The local time type in effect from the transition time."""

    isstd: bool = False
    """Determines if the transition time is standard time (else, wall clock time)."""

    isut: bool = False
    """Determines if the transition time is UTC time, else is a local time."""


LeapSecond = namedtuple("LeapSecond", ["occurrence", "correction"])
"""A correction that needs to be applied to UTC in order to determine TAI.

The occurrence is the time at which the leap-second correction occurs.
The correction is the value of LEAPCORR on or after the occurrence (1 or -1).
"""


@dataclass
class TzifData:
    """The results of parsing the TZif file."""

    transitions: list[TransitionRecord]
    """Local time changes, ascending by transition time."""

    local_time_types: list[LocalTimeType]
    """All local time types, the first is used before the first transition."""

    leap_seconds: list[LeapSecond] = field(default_factory=list)

    rule: Optional[PosixRule] = None
    """A rule for computing local time changes after the last transition."""

    @property
    def initial_type(self) -> LocalTimeType | None:
        """Return the local time type in effect before the first transition."""
        return self.local_time_types[0] if self.local_time_types else None
