"""Tests for the tzinfo adapter of zone rules."""

import datetime

import pytest

from tzrules.types import UtcOffset
from tzrules.zone import ZoneRuleSet, ZoneRulesTzInfo

ONE_HOUR = datetime.timedelta(hours=1)
TWO_HOURS = datetime.timedelta(hours=2)


@pytest.fixture(name="tzinfo")
def mock_tzinfo(paris: ZoneRuleSet) -> ZoneRulesTzInfo:
    """Fixture for a tzinfo of central europe."""
    return ZoneRulesTzInfo(paris, "Test/Paris")


@pytest.mark.parametrize(
    "local,fold,expected_offset,expected_dst",
    [
        (datetime.datetime(2018, 1, 15, 12), 0, ONE_HOUR, datetime.timedelta(0)),
        (datetime.datetime(2018, 7, 15, 12), 0, TWO_HOURS, ONE_HOUR),
        (datetime.datetime(2018, 7, 15, 12), 1, TWO_HOURS, ONE_HOUR),
        # Gap
        (datetime.datetime(2018, 3, 25, 2, 30), 0, ONE_HOUR, datetime.timedelta(0)),
        (datetime.datetime(2018, 3, 25, 2, 30), 1, TWO_HOURS, ONE_HOUR),
        # Overlap
        (datetime.datetime(2018, 10, 28, 2, 30), 0, TWO_HOURS, ONE_HOUR),
        (datetime.datetime(2018, 10, 28, 2, 30), 1, ONE_HOUR, datetime.timedelta(0)),
    ],
)
def test_utcoffset(
    tzinfo: ZoneRulesTzInfo,
    local: datetime.datetime,
    fold: int,
    expected_offset: datetime.timedelta,
    expected_dst: datetime.timedelta,
) -> None:
    """Test the offset of local times including gaps and overlaps."""
    value = local.replace(tzinfo=tzinfo, fold=fold)
    assert value.utcoffset() == expected_offset
    assert value.dst() == expected_dst


def test_tzname(tzinfo: ZoneRulesTzInfo) -> None:
    """Test the name of the zone is the offset in effect."""
    assert datetime.datetime(2018, 1, 15, tzinfo=tzinfo).tzname() == "+01:00"
    assert datetime.datetime(2018, 7, 15, tzinfo=tzinfo).tzname() == "+02:00"
    assert tzinfo.tzname(None) == "Test/Paris"
    assert tzinfo.utcoffset(None) is None
    assert tzinfo.dst(None) is None


@pytest.mark.parametrize(
    "utc,expected,expected_fold",
    [
        (datetime.datetime(2018, 3, 25, 0, 59), datetime.datetime(2018, 3, 25, 1, 59), 0),
        (datetime.datetime(2018, 3, 25, 1, 0), datetime.datetime(2018, 3, 25, 3, 0), 0),
        (
            datetime.datetime(2018, 10, 28, 0, 30),
            datetime.datetime(2018, 10, 28, 2, 30),
            0,
        ),
        (
            datetime.datetime(2018, 10, 28, 1, 30),
            datetime.datetime(2018, 10, 28, 2, 30),
            1,
        ),
        (
            datetime.datetime(2018, 10, 28, 2, 30),
            datetime.datetime(2018, 10, 28, 3, 30),
            0,
        ),
    ],
)
def test_astimezone(
    tzinfo: ZoneRulesTzInfo,
    utc: datetime.datetime,
    expected: datetime.datetime,
    expected_fold: int,
) -> None:
    """Test converting from UTC sets the fold in an overlap."""
    value = utc.replace(tzinfo=datetime.timezone.utc).astimezone(tzinfo)
    assert value.replace(tzinfo=None) == expected
    assert value.fold == expected_fold

    # Converting back gives the same instant
    assert value.astimezone(datetime.timezone.utc).replace(tzinfo=None) == utc


def test_fromutc_other_tzinfo(tzinfo: ZoneRulesTzInfo) -> None:
    """Test fromutc requires a datetime in the zone."""
    with pytest.raises(ValueError, match="is not self"):
        tzinfo.fromutc(datetime.datetime(2018, 1, 1, tzinfo=datetime.timezone.utc))


def test_fixed_offset() -> None:
    """Test a tzinfo of a zone with a fixed offset."""
    tzinfo = ZoneRulesTzInfo(ZoneRuleSet.fixed(UtcOffset.parse("-03:30")))
    assert tzinfo.utcoffset(None) == datetime.timedelta(hours=-3, minutes=-30)
    assert tzinfo.tzname(None) == "-03:30"
    assert tzinfo.key is None
    assert repr(tzinfo).startswith("ZoneRulesTzInfo(")
    value = datetime.datetime(2018, 1, 1, 12, tzinfo=tzinfo)
    assert value.astimezone(datetime.timezone.utc) == datetime.datetime(
        2018, 1, 1, 15, 30, tzinfo=datetime.timezone.utc
    )


def test_repr(tzinfo: ZoneRulesTzInfo) -> None:
    """Test the representation of a tzinfo with a key."""
    assert repr(tzinfo) == "ZoneRulesTzInfo(key='Test/Paris')"
    assert str(tzinfo) == "Test/Paris"
