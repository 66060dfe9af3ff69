"""Providers that supply zone rules to the registry.

The tzdata provider follows the same approach as zoneinfo for loading
zone data. It first checks the tzdata python package, then falls back to
the files in the system TZPATH.
"""

from __future__ import annotations

import abc
import logging
import os
import zoneinfo
from functools import cache
from importlib import resources
from typing import Union

from tzrules.exceptions import UnknownZoneIdError, ZoneDataError
from tzrules.temporal.fields import MAX_EPOCH_SECOND, MAX_OFFSET_SECONDS, MIN_EPOCH_SECOND
from tzrules.types.utc_offset import UtcOffset

from .model import TzifData
from .rules import ZoneRuleSet
from .transition import RecurringTransitionRule, TimeDefinition, Transition
from .tz_rule import JulianDay, MonthWeekDay, PosixRule
from .tzif import read_tzif

__all__ = [
    "ZoneRulesProvider",
    "TzdataProvider",
    "rules_from_tzif",
]

_LOGGER = logging.getLogger(__name__)

# Transitions must have local readings on both sides that are representable
_MIN_TRANSITION_SECOND = MIN_EPOCH_SECOND + MAX_OFFSET_SECONDS
_MAX_TRANSITION_SECOND = MAX_EPOCH_SECOND - MAX_OFFSET_SECONDS

# A typical year, used to order the recurring rules within a year
_REFERENCE_YEAR = 2001


class ZoneRulesProvider(abc.ABC):
    """A source of zone rules for a set of zone identifiers."""

    @abc.abstractmethod
    def provide_zone_ids(self) -> set[str]:
        """Return the zone identifiers this provider can supply rules for."""

    @abc.abstractmethod
    def provide_rules(self, zone_id: str) -> ZoneRuleSet:
        """Build and return the rules for a zone identifier.

        Raises UnknownZoneIdError if the provider doesn't supply the zone and
        ZoneDataError if the zone data can't be read.
        """


def _recurring_rule(
    rule_date: Union[MonthWeekDay, JulianDay],
    standard_offset: UtcOffset,
    offset_before: UtcOffset,
    offset_after: UtcOffset,
) -> RecurringTransitionRule:
    """Create a recurring rule from a POSIX rule date, given as wall clock time."""
    (month, day_of_month_indicator, day_of_week) = rule_date.day_selector()
    return RecurringTransitionRule(
        month=month,
        day_of_month_indicator=day_of_month_indicator,
        day_of_week=day_of_week,
        time_of_day=rule_date.time,
        time_definition=TimeDefinition.WALL,
        standard_offset=standard_offset,
        offset_before=offset_before,
        offset_after=offset_after,
    )


def _recurring_rules(rule: PosixRule) -> list[RecurringTransitionRule]:
    """Return the recurring rules for a POSIX rule, ordered within the year."""
    if not rule.dst or not rule.dst_start or not rule.dst_end:
        return []
    std = UtcOffset.from_timedelta(rule.std.offset)
    dst = UtcOffset.from_timedelta(rule.dst.offset)
    if std == dst:
        return []
    rules = [
        _recurring_rule(rule.dst_start, std, std, dst),
        _recurring_rule(rule.dst_end, std, dst, std),
    ]
    return sorted(
        rules, key=lambda r: r.create_transition(_REFERENCE_YEAR).at_epoch_second
    )


def rules_from_tzif(data: TzifData) -> ZoneRuleSet:
    """Build zone rules from parsed TZif data.

    TZif data only records the wall offset and a daylight savings flag,
    so the standard offset of a daylight savings period is taken to be
    the most recent standard offset. Transitions that don't change the
    wall offset are dropped.
    """
    if (initial := data.initial_type) is None:
        raise ValueError("Zone data has no local time types")
    wall = UtcOffset.of_total_seconds(initial.utoff)
    standard = (
        UtcOffset.of_total_seconds(initial.utoff - 3600) if initial.dst else wall
    )
    base_wall, base_standard = wall, standard
    transitions: list[Transition] = []
    standard_transitions: list[Transition] = []
    # The footer only applies after the last record, kept or not
    rules_from: int | None = None
    for record in data.transitions:
        new_wall = UtcOffset.of_total_seconds(record.local_time_type.utoff)
        new_standard = standard if record.local_time_type.dst else new_wall
        at = record.transition_time
        if at > _MAX_TRANSITION_SECOND:
            _LOGGER.debug("Skipping transition after supported range: %s", at)
            break
        rules_from = at
        if at < _MIN_TRANSITION_SECOND:
            _LOGGER.debug("Using offsets of transition before supported range: %s", at)
            base_wall, base_standard = new_wall, new_standard
        else:
            if new_wall != wall:
                transitions.append(Transition(at, wall, new_wall))
            if new_standard != standard:
                standard_transitions.append(Transition(at, standard, new_standard))
        wall, standard = new_wall, new_standard

    recurring: list[RecurringTransitionRule] = []
    if data.rule is not None:
        recurring = _recurring_rules(data.rule)
        if not transitions and not recurring:
            # A zone described only by its footer, e.g. a fixed offset
            base_wall = base_standard = UtcOffset.from_timedelta(data.rule.std.offset)
    return ZoneRuleSet(
        base_standard,
        base_wall,
        standard_transitions,
        transitions,
        recurring,
        rules_from=rules_from,
    )


@cache
def _read_system_timezones() -> set[str]:
    """Read and cache the set of system and tzdata timezones."""
    return zoneinfo.available_timezones()


@cache
def _find_tzfile(key: str) -> str | None:
    """Retrieve the path to a TZif file from a key."""
    for search_path in zoneinfo.TZPATH:
        filepath = os.path.join(search_path, key)
        if os.path.isfile(filepath):
            return filepath
    return None


@cache
def _read_tzdata_timezones() -> set[str]:
    """Returns the set of valid timezones from tzdata only."""
    try:
        with resources.files("tzdata").joinpath("zones").open(
            "r", encoding="utf-8"
        ) as zones_file:
            return {line.strip() for line in zones_file.readlines()}
    except ModuleNotFoundError:
        return set()


def _iana_key_to_resource(key: str) -> tuple[str, str]:
    """Returns the package and resource file for the specified timezone."""
    if "/" not in key:
        return "tzdata.zoneinfo", key
    package_loc, resource = key.rsplit("/", 1)
    package = "tzdata.zoneinfo." + package_loc.replace("/", ".")
    return package, resource


class TzdataProvider(ZoneRulesProvider):
    """Provides rules from the IANA time zone database in TZif format."""

    def provide_zone_ids(self) -> set[str]:
        """Return the zone identifiers from the tzdata package and system."""
        return {
            key
            for key in _read_system_timezones() | _read_tzdata_timezones()
            if not key.startswith("System") and key != "localtime"
        }

    def provide_rules(self, zone_id: str) -> ZoneRuleSet:
        """Read the TZif data for the zone and build its rules."""
        _LOGGER.debug("Reading zone rules: %s", zone_id)
        data = self._read(zone_id)
        try:
            return rules_from_tzif(data)
        except ValueError as err:
            raise ZoneDataError(
                f"Unable to build zone rules: {zone_id}", detailed_error=str(err)
            ) from err

    def _read(self, key: str) -> TzifData:
        if key not in self.provide_zone_ids():
            raise UnknownZoneIdError(key)

        # Prefer tzdata package
        (package, resource) = _iana_key_to_resource(key)
        try:
            with resources.files(package).joinpath(resource).open("rb") as tzdata_file:
                return read_tzif(tzdata_file.read())
        except ModuleNotFoundError:
            # Not installed, or the zone is only available on the system
            pass
        except FileNotFoundError:
            pass
        except ValueError as err:
            raise ZoneDataError(
                f"Unable to load tzdata module: {key}", detailed_error=str(err)
            ) from err

        # Fallback to zoneinfo file on local disk
        if (tzfile := _find_tzfile(key)) is not None:
            with open(tzfile, "rb") as tzfile_file:
                try:
                    return read_tzif(tzfile_file.read())
                except ValueError as err:
                    raise ZoneDataError(
                        f"Unable to load tzdata file: {key}", detailed_error=str(err)
                    ) from err

        raise ZoneDataError(f"Unable to find zone data for {key}")
