"""Tests for the TZif reader and conversion to zone rules."""

import calendar
import datetime
import struct

import pytest

from tzrules.types import Instant, UtcOffset
from tzrules.zone.providers import rules_from_tzif
from tzrules.zone.tzif import read_tzif

V1_HEADER = b"".join(
    [
        b"\x54\x5a\x69\x66",  # magic
        b"\x00",  # version
        b"\x00\x00\x00\x00",  # pad
        b"\x00\x00\x00\x00",
        b"\x00\x00\x00\x00",
        b"\x00\x00\x00",
        b"\x00\x00\x00\x01"  # isutccnt
        b"\x00\x00\x00\x01"  # isstdcnt
        b"\x00\x00\x00\x1b"  # isleapcnt
        b"\x00\x00\x00\x00"  # timecnt
        b"\x00\x00\x00\x01"  # typecnt
        b"\x00\x00\x00\x04",  # charcnt
    ]
)

CET = UtcOffset.parse("+01:00")
CEST = UtcOffset.parse("+02:00")


def header(version: bytes, timecnt: int, typecnt: int, charcnt: int) -> bytes:
    """Return a TZif header without leap seconds or indicators."""
    return struct.pack(">4sc15x6l", b"TZif", version, 0, 0, 0, timecnt, typecnt, charcnt)


def build_tzif(
    transitions: list[tuple[int, int]],
    types: list[tuple[int, bool, int]],
    designations: bytes,
    footer: str,
) -> bytes:
    """Build TZif version 2 content with an empty version 1 data block."""
    count = len(transitions)
    return b"".join(
        [
            header(b"2", 0, 0, 0),
            header(b"2", count, len(types), len(designations)),
            struct.pack(f">{count}q", *[t for (t, _) in transitions]),
            struct.pack(f">{count}B", *[i for (_, i) in transitions]),
            b"".join(struct.pack(">l?B", *local_type) for local_type in types),
            designations,
            f"\n{footer}\n".encode(),
        ]
    )


def epoch_second(*args: int) -> int:
    """Return the epoch second of a UTC date-time."""
    return calendar.timegm((*args, 0, 0, 0, 0)[:6])


@pytest.mark.parametrize(
    "header_bytes,match",
    [
        (
            b"\x00" + V1_HEADER[1:],
            "did not contain magic",
        ),
        (
            V1_HEADER[0:23] + b"\x07" + V1_HEADER[24:],
            "UTC/local indicators in datablock mismatched",
        ),
        (
            V1_HEADER[0:27] + b"\x07" + V1_HEADER[28:],
            "standard/wall indicators in datablock mismatched",
        ),
        (
            V1_HEADER[0:23]
            + b"\x00"
            + V1_HEADER[24:27]
            + b"\x00"
            + V1_HEADER[28:39]
            + b"\x00"
            + V1_HEADER[40:],
            "Local time records in block is zero",
        ),
        (
            V1_HEADER[0:43] + b"\x00",
            "octets is zero",
        ),
        (
            V1_HEADER[0:30],
            "truncated",
        ),
    ],
)
def test_invalid_header(header_bytes: bytes, match: str) -> None:
    """Tests a TZif header with invalid counts."""
    with pytest.raises(ValueError, match=match):
        read_tzif(header_bytes)


def test_version_one() -> None:
    """Test reading a version 1 file with 32-bit transition times."""
    content = b"".join(
        [
            header(b"\x00", 1, 2, 8),
            struct.pack(">l", 1000),
            struct.pack(">B", 1),
            struct.pack(">l?B", 0, False, 0),
            struct.pack(">l?B", 3600, False, 4),
            b"UTC\x00CET\x00",
        ]
    )
    data = read_tzif(content)
    assert len(data.transitions) == 1
    assert data.transitions[0].transition_time == 1000
    assert data.transitions[0].local_time_type.designation == "CET"
    assert data.initial_type is not None
    assert data.initial_type.designation == "UTC"
    assert data.rule is None

    rules = rules_from_tzif(data)
    assert rules.offset_at(Instant(999)) == UtcOffset.UTC
    assert rules.offset_at(Instant(1000)) == CET
    assert not rules.transition_rules()


def test_missing_footer() -> None:
    """Test a version 2 file must end with a footer."""
    content = build_tzif([], [(0, False, 0)], b"UTC\x00", "UTC0")
    with pytest.raises(ValueError, match="TZ footer"):
        read_tzif(content[:-1])


def test_transition_out_of_bounds() -> None:
    """Test a transition must refer to a local time type."""
    content = build_tzif([(1000, 3)], [(0, False, 0)], b"UTC\x00", "UTC0")
    with pytest.raises(ValueError, match="out of bounds"):
        read_tzif(content)


def test_rules_from_tzif() -> None:
    """Test converting transitions and the footer rule to zone rules."""
    content = build_tzif(
        [
            (-(2**59), 0),  # Before the supported range of instants
            (epoch_second(1900, 1, 1), 1),
            (epoch_second(1940, 1, 1), 3),  # Same offset, different name
            (epoch_second(2016, 3, 27, 1), 2),
            (epoch_second(2016, 10, 30, 1), 1),
        ],
        [
            (561, False, 0),
            (3600, False, 4),
            (7200, True, 8),
            (3600, False, 13),
        ],
        b"LMT\x00CET\x00CEST\x00MET\x00",
        "CET-1CEST,M3.5.0,M10.5.0/3",
    )
    data = read_tzif(content)
    assert len(data.transitions) == 5
    assert data.rule is not None
    assert data.rule.std.name == "CET"

    rules = rules_from_tzif(data)
    transitions = list(rules.transitions())
    assert [t.at_epoch_second for t in transitions] == [
        epoch_second(1900, 1, 1),
        epoch_second(2016, 3, 27, 1),
        epoch_second(2016, 10, 30, 1),
    ]
    assert rules.offset_at(Instant.MIN) == UtcOffset.of_total_seconds(561)
    assert rules.offset_at(Instant(epoch_second(1950, 1, 1))) == CET
    assert rules.offset_at(Instant(epoch_second(2016, 7, 1))) == CEST
    assert rules.standard_offset_at(Instant(epoch_second(2016, 7, 1))) == CET

    # Answered from the footer rule
    assert rules.offset_at(Instant(epoch_second(2018, 3, 25, 1))) == CEST
    assert rules.offsets_at(datetime.datetime(2018, 3, 25, 2, 30)) == []
    assert rules.offsets_at(datetime.datetime(2018, 10, 28, 2, 30)) == [CEST, CET]
    assert rules.offset_at_local(datetime.datetime(2018, 10, 28, 2, 30)) == CEST
    assert [str(rule) for rule in rules.transition_rules()] == [
        "TransitionRule[Gap +01:00 to +02:00, SUNDAY on or before last day of "
        "MARCH at 2:00:00 WALL, standard offset +01:00]",
        "TransitionRule[Overlap +02:00 to +01:00, SUNDAY on or before last day of "
        "OCTOBER at 3:00:00 WALL, standard offset +01:00]",
    ]


def test_southern_hemisphere_rules() -> None:
    """Test the footer rules are ordered within the year."""
    content = build_tzif(
        [],
        [(-10800, False, 0)],
        b"-03\x00",
        "<-03>3<-02>,M10.1.0,M3.3.0",
    )
    rules = rules_from_tzif(read_tzif(content))
    first, second = rules.transition_rules()
    assert first.month == 3
    assert first.offset_after == UtcOffset.parse("-03:00")
    assert second.month == 10
    assert second.offset_after == UtcOffset.parse("-02:00")
    assert rules.offset_at(Instant(epoch_second(2020, 1, 15))) == UtcOffset.parse(
        "-02:00"
    )
    assert rules.offset_at(Instant(epoch_second(2020, 6, 15))) == UtcOffset.parse(
        "-03:00"
    )


def test_fixed_offset_footer() -> None:
    """Test a zone described only by its footer."""
    content = build_tzif([], [(0, False, 0)], b"UTC\x00", "<+05>-5")
    rules = rules_from_tzif(read_tzif(content))
    assert rules.is_fixed_offset
    assert rules.offset_at(Instant(0)) == UtcOffset.parse("+05:00")


def test_footer_applies_after_last_record() -> None:
    """Test a last record that keeps the wall offset still delays the footer rule."""
    content = build_tzif(
        [
            (epoch_second(1995, 3, 26, 1), 1),
            (epoch_second(1995, 9, 24, 1), 0),
            (epoch_second(1996, 3, 31, 1), 2),  # Same offset, different name
        ],
        [
            (3600, False, 0),
            (7200, True, 4),
            (3600, True, 9),
        ],
        b"CET\x00CEST\x00WEST\x00",
        "WET0WEST,M3.5.0/1,M10.5.0",
    )
    rules = rules_from_tzif(read_tzif(content))
    assert [t.at_epoch_second for t in rules.transitions()] == [
        epoch_second(1995, 3, 26, 1),
        epoch_second(1995, 9, 24, 1),
    ]
    assert rules.rules_from == epoch_second(1996, 3, 31, 1)
    assert rules.offset_at(Instant(epoch_second(1996, 1, 1))) == CET
    assert rules.offsets_at(datetime.datetime(1996, 1, 1)) == [CET]
    assert rules.offset_at(Instant(epoch_second(1996, 7, 1))) == CET
    assert rules.offset_at(Instant(epoch_second(1996, 11, 1))) == UtcOffset.UTC
    assert rules.offset_at(Instant(epoch_second(1997, 7, 1))) == CET

    transition = rules.next_transition(Instant(epoch_second(1996, 1, 1)))
    assert transition is not None
    assert transition.at_epoch_second == epoch_second(1996, 10, 27, 1)
    assert transition.offset_before == CET
    assert transition.offset_after == UtcOffset.UTC


def test_footer_rules_start_with_only_dropped_records() -> None:
    """Test a zone whose only record keeps its offset uses the footer afterwards."""
    content = build_tzif(
        [(epoch_second(2005, 2, 12), 1)],
        [(0, False, 0), (0, False, 4)],
        b"-00\x00+00\x00",
        "<+00>0<+02>-2,M3.5.0/1,M10.5.0/3",
    )
    rules = rules_from_tzif(read_tzif(content))
    assert list(rules.transitions()) == []
    assert rules.transition_rules()
    assert rules.offset_at(Instant(epoch_second(1950, 1, 1))) == UtcOffset.UTC
    assert rules.offset_at(Instant(epoch_second(1950, 7, 1))) == UtcOffset.UTC
    assert rules.offsets_at(datetime.datetime(1950, 7, 1)) == [UtcOffset.UTC]
    assert rules.offset_at(Instant(epoch_second(2005, 7, 1))) == CEST
    assert rules.offset_at(Instant(epoch_second(2006, 1, 1))) == UtcOffset.UTC
    assert rules.previous_transition(Instant(epoch_second(2005, 1, 1))) is None
