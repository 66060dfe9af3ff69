"""Tests for UtcOffset values."""

import datetime

import pytest

from tzrules.exceptions import MalformedOffsetError, OffsetOutOfRangeError
from tzrules.temporal import ChronoField
from tzrules.types import UtcOffset


@pytest.mark.parametrize(
    ("text", "expected_seconds", "expected_id"),
    [
        ("Z", 0, "Z"),
        ("+0", 0, "Z"),
        ("-00:00", 0, "Z"),
        ("+1", 3600, "+01:00"),
        ("-5", -18000, "-05:00"),
        ("+01", 3600, "+01:00"),
        ("+0530", 19800, "+05:30"),
        ("+05:30", 19800, "+05:30"),
        ("-0930", -34200, "-09:30"),
        ("+053045", 19845, "+05:30:45"),
        ("-05:30:45", -19845, "-05:30:45"),
        ("+18:00", 64800, "+18:00"),
        ("-18:00", -64800, "-18:00"),
    ],
)
def test_parse(text: str, expected_seconds: int, expected_id: str) -> None:
    """Test parsing valid offset text."""
    offset = UtcOffset.parse(text)
    assert offset.total_seconds == expected_seconds
    assert offset.id == expected_id
    assert str(offset) == expected_id


@pytest.mark.parametrize(
    "text",
    [
        "",
        "+",
        "01:00",
        "+1:00",
        "+001",
        "+01:0",
        "+01:00:0",
        "+0100:00",
        "+01:0000",
        "+01:60",
        "+18:00:01",
        "+19",
        "z",
        "UTC",
        "+\u0660\u0665:\u0663\u0660",
        "+\uff10\uff11",
    ],
)
def test_parse_invalid(text: str) -> None:
    """Test offset text with an unrecognized shape or out of range."""
    with pytest.raises(MalformedOffsetError):
        UtcOffset.parse(text)


@pytest.mark.parametrize("seconds", [-64800, -3600, -1, 0, 1, 19845, 64800])
def test_total_seconds(seconds: int) -> None:
    """Test offsets round trip their total seconds."""
    assert UtcOffset.of_total_seconds(seconds).total_seconds == seconds


@pytest.mark.parametrize("seconds", [-64801, 64801, 100000])
def test_out_of_range(seconds: int) -> None:
    """Test offsets outside of 18 hours."""
    with pytest.raises(OffsetOutOfRangeError):
        UtcOffset.of_total_seconds(seconds)
    with pytest.raises(OffsetOutOfRangeError):
        UtcOffset(seconds)


def test_quarter_hours_are_shared() -> None:
    """Test quarter hour offsets are canonical shared instances."""
    assert UtcOffset.of_total_seconds(3600) is UtcOffset.parse("+01:00")
    assert UtcOffset.of_total_seconds(0) is UtcOffset.UTC
    assert UtcOffset.of_total_seconds(-64800) is UtcOffset.MIN
    # Equal values are interchangeable even when not shared
    assert UtcOffset.of_total_seconds(19845) == UtcOffset.parse("+05:30:45")
    assert hash(UtcOffset(3600)) == hash(UtcOffset.of_total_seconds(3600))


def test_hours_minutes_seconds() -> None:
    """Test building an offset from components that share a sign."""
    assert UtcOffset.of_hours_minutes_seconds(-5, -30).id == "-05:30"
    assert UtcOffset.of_hours_minutes_seconds(5, 30, 15).total_seconds == 19815
    with pytest.raises(OffsetOutOfRangeError, match="same sign"):
        UtcOffset.of_hours_minutes_seconds(5, -30)
    with pytest.raises(OffsetOutOfRangeError):
        UtcOffset.of_hours_minutes_seconds(19)


def test_ordering() -> None:
    """Test offsets order in time-line order for the same local reading."""
    plus_two = UtcOffset.parse("+02:00")
    plus_one = UtcOffset.parse("+01:00")
    minus_five = UtcOffset.parse("-05:00")
    assert plus_two < plus_one
    assert plus_one < UtcOffset.UTC
    assert UtcOffset.UTC < minus_five
    assert minus_five > plus_two
    assert plus_one <= plus_one
    assert sorted([minus_five, UtcOffset.UTC, plus_one, plus_two]) == [
        plus_two,
        plus_one,
        UtcOffset.UTC,
        minus_five,
    ]
    assert UtcOffset.MAX < UtcOffset.MIN


def test_conversions() -> None:
    """Test conversions to and from python values."""
    offset = UtcOffset.parse("-04:00")
    assert offset.as_timedelta() == datetime.timedelta(hours=-4)
    assert offset.as_timezone() == datetime.timezone(datetime.timedelta(hours=-4))
    assert UtcOffset.UTC.as_timezone() is datetime.timezone.utc
    assert UtcOffset.from_timedelta(datetime.timedelta(hours=-4)) is offset
    with pytest.raises(MalformedOffsetError):
        UtcOffset.from_timedelta(datetime.timedelta(seconds=1.5))


def test_field_access() -> None:
    """Test the offset seconds field."""
    offset = UtcOffset.parse("+01:30")
    assert offset.is_supported(ChronoField.OFFSET_SECONDS)
    assert offset.get(ChronoField.OFFSET_SECONDS) == 5400
    assert offset.range(ChronoField.OFFSET_SECONDS).maximum == 64800
