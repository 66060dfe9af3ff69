"""Test fixtures."""

import calendar
import datetime

import pytest

from tzrules.temporal.fields import DayOfWeek
from tzrules.types import UtcOffset
from tzrules.zone import (
    RecurringTransitionRule,
    TimeDefinition,
    Transition,
    ZoneRuleSet,
)

CET = UtcOffset.of_hours_minutes_seconds(1)
CEST = UtcOffset.of_hours_minutes_seconds(2)


def epoch_second(year: int, month: int, day: int, hour: int = 0) -> int:
    """Return the epoch second of a UTC date-time."""
    return calendar.timegm((year, month, day, hour, 0, 0))


def paris_rules() -> list[RecurringTransitionRule]:
    """Rules for central europe, last Sunday of March and October at 01:00 UTC."""
    return [
        RecurringTransitionRule(
            month=3,
            day_of_month_indicator=-1,
            day_of_week=DayOfWeek.SUNDAY,
            time_of_day=datetime.timedelta(hours=1),
            time_definition=TimeDefinition.UTC,
            standard_offset=CET,
            offset_before=CET,
            offset_after=CEST,
        ),
        RecurringTransitionRule(
            month=10,
            day_of_month_indicator=-1,
            day_of_week=DayOfWeek.SUNDAY,
            time_of_day=datetime.timedelta(hours=1),
            time_definition=TimeDefinition.UTC,
            standard_offset=CET,
            offset_before=CEST,
            offset_after=CET,
        ),
    ]


def paris_history() -> list[Transition]:
    """Historical central europe transitions from 2016 through 2018."""
    return [
        Transition(epoch_second(2016, 3, 27, 1), CET, CEST),
        Transition(epoch_second(2016, 10, 30, 1), CEST, CET),
        Transition(epoch_second(2017, 3, 26, 1), CET, CEST),
        Transition(epoch_second(2017, 10, 29, 1), CEST, CET),
        Transition(epoch_second(2018, 3, 25, 1), CET, CEST),
        Transition(epoch_second(2018, 10, 28, 1), CEST, CET),
    ]


@pytest.fixture(
    name="paris",
    params=["history", "rules_only", "short_history"],
)
def mock_paris(request: pytest.FixtureRequest) -> ZoneRuleSet:
    """Fixture of central europe zone rules built a few different ways.

    The 2018 transitions come from the history, from the rules alone, or
    from the rules after a history that ends in 2016.
    """
    if request.param == "history":
        return ZoneRuleSet(CET, CET, (), paris_history(), paris_rules())
    if request.param == "short_history":
        return ZoneRuleSet(CET, CET, (), paris_history()[:2], paris_rules())
    return ZoneRuleSet(CET, CET, (), (), paris_rules())
