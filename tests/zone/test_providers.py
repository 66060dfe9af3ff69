"""Tests for zone rules read from the IANA time zone database."""

import calendar
import datetime
import zoneinfo
from collections.abc import Generator

import pytest

from tzrules.exceptions import UnknownZoneIdError, ZoneDataError
from tzrules.types import Instant, UtcOffset
from tzrules.zone import TzdataProvider, ZoneRuleSet, providers

CET = UtcOffset.parse("+01:00")
CEST = UtcOffset.parse("+02:00")
EST = UtcOffset.parse("-05:00")
EDT = UtcOffset.parse("-04:00")


def instant(*args: int) -> Instant:
    """Return the instant of a UTC date-time."""
    return Instant(calendar.timegm((*args, 0, 0, 0, 0)[:6]))


@pytest.fixture(name="provider")
def mock_provider() -> TzdataProvider:
    """Fixture for the tzdata provider."""
    return TzdataProvider()


def test_zone_ids(provider: TzdataProvider) -> None:
    """Test the zone ids available from tzdata."""
    zone_ids = provider.provide_zone_ids()
    assert "Europe/Paris" in zone_ids
    assert "America/New_York" in zone_ids
    assert "localtime" not in zone_ids


def test_paris(provider: TzdataProvider) -> None:
    """Test offsets of a zone with daylight savings."""
    rules = provider.provide_rules("Europe/Paris")
    assert rules.offset_at(instant(2018, 3, 25, 0, 59, 59)) == CET
    assert rules.offset_at(instant(2018, 3, 25, 1)) == CEST
    assert rules.offset_at(instant(2018, 10, 28, 0, 59, 59)) == CEST
    assert rules.offset_at(instant(2018, 10, 28, 1)) == CET

    assert rules.offsets_at(datetime.datetime(2018, 3, 25, 2, 30)) == []
    assert rules.offsets_at(datetime.datetime(2018, 10, 28, 2, 30)) == [CEST, CET]
    assert rules.offsets_at(datetime.datetime(2018, 7, 1, 12)) == [CEST]

    assert rules.standard_offset_at(instant(2018, 7, 1)) == CET
    assert rules.daylight_savings_at(instant(2018, 7, 1)) == datetime.timedelta(
        hours=1
    )
    assert not rules.is_daylight_savings_at(instant(2018, 1, 1))


def test_paris_future(provider: TzdataProvider) -> None:
    """Test offsets far in the future come from the recurring rules."""
    rules = provider.provide_rules("Europe/Paris")
    assert rules.transition_rules()
    assert rules.offset_at(instant(2050, 7, 1)) == CEST
    assert rules.offset_at(instant(2050, 12, 1)) == CET

    transition = rules.next_transition(instant(2050, 1, 1))
    assert transition is not None
    assert transition.is_gap
    assert transition.instant == instant(2050, 3, 27, 1)

    previous = rules.previous_transition(transition.instant)
    assert previous is not None
    assert previous.is_overlap
    assert previous.instant == instant(2049, 10, 31, 1)


def test_new_york(provider: TzdataProvider) -> None:
    """Test offsets of a zone west of UTC."""
    rules = provider.provide_rules("America/New_York")
    assert rules.offset_at(instant(2018, 3, 11, 6, 59, 59)) == EST
    assert rules.offset_at(instant(2018, 3, 11, 7)) == EDT
    assert rules.offsets_at(datetime.datetime(2018, 3, 11, 2, 30)) == []
    assert rules.offsets_at(datetime.datetime(2018, 11, 4, 1, 30)) == [EDT, EST]
    assert rules.offset_at_local(datetime.datetime(2018, 11, 4, 1, 30)) == EDT


def test_no_future_transitions(provider: TzdataProvider) -> None:
    """Test a zone that no longer changes offset."""
    rules = provider.provide_rules("Asia/Kolkata")
    assert not rules.is_fixed_offset
    assert not rules.transition_rules()
    assert rules.offset_at(instant(2030, 1, 1)) == UtcOffset.parse("+05:30")
    assert rules.next_transition(instant(2030, 1, 1)) is None
    assert rules.previous_transition(instant(2030, 1, 1)) is not None


def test_utc(provider: TzdataProvider) -> None:
    """Test a zone with a fixed offset."""
    rules = provider.provide_rules("UTC")
    assert rules.is_fixed_offset
    assert rules.offset_at(Instant.MAX) == UtcOffset.UTC
    assert rules.next_transition(Instant.EPOCH) is None


def test_unknown_zone(provider: TzdataProvider) -> None:
    """Test a zone that is not in the database."""
    with pytest.raises(UnknownZoneIdError, match="Mars/Olympus_Mons"):
        provider.provide_rules("Mars/Olympus_Mons")


def test_invalid_zone_data(
    provider: TzdataProvider, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test zone data that can't be converted to rules."""

    def fail(data: object) -> None:
        raise ValueError("Zone data has no local time types")

    monkeypatch.setattr(providers, "rules_from_tzif", fail)
    with pytest.raises(
        ZoneDataError, match="Unable to build zone rules: Europe/Paris"
    ) as exc_info:
        provider.provide_rules("Europe/Paris")
    assert exc_info.value.detailed_error == "Zone data has no local time types"


UTC_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
COMPARE_START = calendar.timegm((1950, 1, 1, 0, 0, 0))
COMPARE_END = calendar.timegm((2040, 1, 1, 0, 0, 0))
COMPARE_STEP = 61 * 86400 + 13 * 3600 + 17 * 60


@pytest.fixture(name="tzdata_zoneinfo")
def mock_tzdata_zoneinfo() -> Generator[None, None, None]:
    """Fixture that makes zoneinfo read the same tzdata package as the provider."""
    zoneinfo.reset_tzpath(to=[])
    try:
        yield
    finally:
        zoneinfo.reset_tzpath()


def zoneinfo_offset(zone: zoneinfo.ZoneInfo, epoch_second: int) -> int:
    """Return the offset seconds zoneinfo uses at an epoch second."""
    value = (UTC_EPOCH + datetime.timedelta(seconds=epoch_second)).astimezone(zone)
    offset = value.utcoffset()
    assert offset is not None
    return int(offset.total_seconds())


def zoneinfo_valid_offsets(
    zone: zoneinfo.ZoneInfo, local: datetime.datetime
) -> list[int]:
    """Return the offset seconds of each fold that round trips the local reading."""
    result: list[int] = []
    for fold in (0, 1):
        value = local.replace(tzinfo=zone, fold=fold)
        if value.astimezone(datetime.timezone.utc).astimezone(zone).replace(
            tzinfo=None
        ) != local:
            continue
        offset = value.utcoffset()
        assert offset is not None
        if (seconds := int(offset.total_seconds())) not in result:
            result.append(seconds)
    return result


def compare_zone(zone_id: str, rules: ZoneRuleSet) -> list[str]:
    """Return the differences between the rules and zoneinfo for a zone."""
    zone = zoneinfo.ZoneInfo.no_cache(zone_id)
    mismatches: list[str] = []

    instants = list(range(COMPARE_START, COMPARE_END, COMPARE_STEP))
    locals_ = [
        (UTC_EPOCH + datetime.timedelta(seconds=epoch_second))
        .astimezone(zone)
        .replace(tzinfo=None)
        for epoch_second in instants
    ]
    transitions = [
        t
        for t in rules.transitions(until_year=2040)
        if COMPARE_START < t.at_epoch_second < COMPARE_END
    ]
    for transition in transitions:
        instants.extend([transition.at_epoch_second - 1, transition.at_epoch_second])
    for previous, current, following in zip(
        [None, *transitions], transitions, [*transitions[1:], None]
    ):
        # Skip windows that run into a neighboring transition
        if previous is not None and (
            current.at_epoch_second - previous.at_epoch_second < 2 * 86400
        ):
            continue
        if following is not None and (
            following.at_epoch_second - current.at_epoch_second < 2 * 86400
        ):
            continue
        start = min(current.local_date_time_before, current.local_date_time_after)
        locals_.append(start + datetime.timedelta(seconds=current.duration_seconds) / 2)

    for epoch_second in instants:
        expected = zoneinfo_offset(zone, epoch_second)
        actual = rules.offset_at(Instant(epoch_second)).total_seconds
        if actual != expected:
            mismatches.append(f"{zone_id} at {epoch_second}: {actual} != {expected}")
    for local in locals_:
        expected_offsets = zoneinfo_valid_offsets(zone, local)
        actual_offsets = [offset.total_seconds for offset in rules.offsets_at(local)]
        if actual_offsets != expected_offsets:
            mismatches.append(
                f"{zone_id} at {local}: {actual_offsets} != {expected_offsets}"
            )
    return mismatches


@pytest.mark.usefixtures("tzdata_zoneinfo")
def test_compare_with_zoneinfo(provider: TzdataProvider) -> None:
    """Test offsets agree with zoneinfo for every zone in the tzdata package."""
    zone_ids = zoneinfo.available_timezones() & provider.provide_zone_ids()
    assert "Europe/London" in zone_ids
    mismatches: list[str] = []
    for zone_id in sorted(zone_ids):
        mismatches.extend(compare_zone(zone_id, provider.provide_rules(zone_id)))
    assert mismatches == []


@pytest.mark.parametrize(
    ("zone_id", "value", "expected"),
    [
        ("Europe/London", datetime.datetime(1995, 10, 25, 12), "Z"),
        ("Europe/Lisbon", datetime.datetime(1996, 1, 1), "+01:00"),
        ("America/Nuuk", datetime.datetime(2023, 4, 1), "-02:00"),
        ("America/Grand_Turk", datetime.datetime(2016, 1, 1), "-04:00"),
        ("Antarctica/Troll", datetime.datetime(1950, 1, 1), "Z"),
        ("Pacific/Norfolk", datetime.datetime(2015, 10, 15), "+11:00"),
    ],
)
def test_rules_after_last_record(
    provider: TzdataProvider, zone_id: str, value: datetime.datetime, expected: str
) -> None:
    """Test zones whose last record keeps the offset or falls before a rule date."""
    rules = provider.provide_rules(zone_id)
    epoch_second = calendar.timegm(value.timetuple())
    assert rules.offset_at(Instant(epoch_second)) == UtcOffset.parse(expected)
    local = value + UtcOffset.parse(expected).as_timedelta()
    assert rules.offsets_at(local) == [UtcOffset.parse(expected)]
