"""Zone rules described as data and validated with pydantic.

A zone definition is a small document that lists the offsets,
transitions and recurring rules of a zone, for example:

    {
        "zone_id": "Test/Paris",
        "standard_offset": "+01:00",
        "rules": [
            {
                "month": 3,
                "day_of_month_indicator": -1,
                "day_of_week": "sunday",
                "time_of_day": "01:00:00",
                "time_definition": "utc",
                "standard_offset": "+01:00",
                "offset_before": "+01:00",
                "offset_after": "+02:00"
            },
            ...
        ]
    }
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from tzrules.exceptions import (
    ArithmeticOverflowError,
    UnknownZoneIdError,
    ZoneDataError,
    ZoneRulesError,
)
from tzrules.temporal.fields import DayOfWeek
from tzrules.types.instant import Instant
from tzrules.types.utc_offset import UtcOffset

from .providers import ZoneRulesProvider
from .rules import ZoneRuleSet
from .transition import RecurringTransitionRule, TimeDefinition, Transition

__all__ = [
    "TransitionModel",
    "RuleModel",
    "ZoneDefinition",
    "DefinitionProvider",
]

_LOGGER = logging.getLogger(__name__)


def parse_offset(value: Any) -> Any:
    """Parse an offset from text or a number of seconds."""
    if isinstance(value, str):
        return UtcOffset.parse(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return UtcOffset.of_total_seconds(value)
    return value


def _error_message(name: str, err: ValidationError) -> str:
    message = [f"Failed to validate {name}"]
    for error in err.errors():
        if msg := error.get("msg"):
            message.append(msg)
    return ": ".join(message)


class TransitionModel(BaseModel):
    """A single historical transition."""

    at: datetime.datetime
    """The instant of the transition, a naive value is treated as UTC."""

    offset_before: UtcOffset
    offset_after: UtcOffset

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    _parse_offsets = field_validator("offset_before", "offset_after", mode="before")(
        parse_offset
    )

    @model_validator(mode="after")
    def verify_offsets_differ(self) -> TransitionModel:
        """Validate that the transition changes the offset."""
        if self.offset_before == self.offset_after:
            raise ValueError(
                f"Transition offsets must not be equal: {self.offset_before}"
            )
        return self

    @property
    def instant(self) -> Instant:
        """Return the instant of the transition."""
        at = self.at
        if at.tzinfo is None:
            at = at.replace(tzinfo=datetime.timezone.utc)
        return Instant.from_datetime(at)

    def to_transition(self) -> Transition:
        """Return the transition described by the model."""
        return Transition(
            self.instant.epoch_second,
            self.offset_before,
            self.offset_after,
        )


class RuleModel(BaseModel):
    """An annual rule, see RecurringTransitionRule."""

    month: int = Field(ge=1, le=12)
    day_of_month_indicator: int = Field(ge=-28, le=31)
    day_of_week: Optional[DayOfWeek] = None
    time_of_day: datetime.timedelta
    time_definition: TimeDefinition = TimeDefinition.WALL
    standard_offset: UtcOffset
    offset_before: UtcOffset
    offset_after: UtcOffset

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    _parse_offsets = field_validator(
        "standard_offset", "offset_before", "offset_after", mode="before"
    )(parse_offset)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def parse_day_of_week(cls, value: Any) -> Any:
        """Accept a day of week by name, e.g. "sunday"."""
        if isinstance(value, str):
            try:
                return DayOfWeek[value.upper()]
            except KeyError as err:
                raise ValueError(f"Unknown day of week: {value}") from err
        return value

    @field_validator("day_of_month_indicator")
    @classmethod
    def verify_indicator(cls, value: int) -> int:
        """Validate the day of month indicator is not zero."""
        if value == 0:
            raise ValueError("Day of month indicator must not be zero")
        return value

    @model_validator(mode="after")
    def verify_offsets_differ(self) -> RuleModel:
        """Validate that the rule changes the offset."""
        if self.offset_before == self.offset_after:
            raise ValueError(f"Rule offsets must not be equal: {self.offset_before}")
        return self

    def to_rule(self) -> RecurringTransitionRule:
        """Return the recurring rule described by the model."""
        return RecurringTransitionRule(
            month=self.month,
            day_of_month_indicator=self.day_of_month_indicator,
            day_of_week=self.day_of_week,
            time_of_day=self.time_of_day,
            time_definition=self.time_definition,
            standard_offset=self.standard_offset,
            offset_before=self.offset_before,
            offset_after=self.offset_after,
        )


class ZoneDefinition(BaseModel):
    """The offsets, transitions and rules of a single zone."""

    zone_id: str = Field(min_length=2)

    standard_offset: UtcOffset
    """The standard offset before the first standard transition."""

    offset: Optional[UtcOffset] = None
    """The wall offset before the first transition, defaults to the standard offset."""

    standard_transitions: list[TransitionModel] = Field(default_factory=list)
    transitions: list[TransitionModel] = Field(default_factory=list)
    rules: list[RuleModel] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    _parse_offsets = field_validator("standard_offset", "offset", mode="before")(
        parse_offset
    )

    @model_validator(mode="after")
    def verify_ascending(self) -> ZoneDefinition:
        """Validate the transitions are in ascending order."""
        for name, values in (
            ("standard_transitions", self.standard_transitions),
            ("transitions", self.transitions),
        ):
            for previous, current in zip(values, values[1:]):
                if current.instant <= previous.instant:
                    raise ValueError(f"{name} must be strictly ascending: {current.at}")
        return self

    def to_rules(self) -> ZoneRuleSet:
        """Build the zone rules described by the definition."""
        return ZoneRuleSet(
            self.standard_offset,
            self.offset if self.offset is not None else self.standard_offset,
            [t.to_transition() for t in self.standard_transitions],
            [t.to_transition() for t in self.transitions],
            [r.to_rule() for r in self.rules],
        )


_DEFINITIONS_ADAPTER = TypeAdapter(list[ZoneDefinition])


class DefinitionProvider(ZoneRulesProvider):
    """Provides rules from zone definitions supplied as data."""

    def __init__(self, definitions: Iterable[ZoneDefinition]) -> None:
        """Initialize DefinitionProvider."""
        self._definitions: dict[str, ZoneDefinition] = {}
        for definition in definitions:
            if definition.zone_id in self._definitions:
                raise ZoneDataError(f"Duplicate zone definition: {definition.zone_id}")
            self._definitions[definition.zone_id] = definition

    @classmethod
    def from_dicts(cls, values: list[dict[str, Any]]) -> DefinitionProvider:
        """Create a provider from zone definitions as python objects."""
        try:
            definitions = _DEFINITIONS_ADAPTER.validate_python(values)
        except ValidationError as err:
            _LOGGER.debug("Failed to validate zone definitions %s", err)
            raise ZoneDataError(
                _error_message("zone definitions", err), detailed_error=str(err)
            ) from err
        return cls(definitions)

    @classmethod
    def from_json(cls, content: str | bytes) -> DefinitionProvider:
        """Create a provider from zone definitions as a JSON array."""
        try:
            definitions = _DEFINITIONS_ADAPTER.validate_json(content)
        except ValidationError as err:
            _LOGGER.debug("Failed to validate zone definitions %s", err)
            raise ZoneDataError(
                _error_message("zone definitions", err), detailed_error=str(err)
            ) from err
        return cls(definitions)

    def provide_zone_ids(self) -> set[str]:
        """Return the identifiers of the defined zones."""
        return set(self._definitions)

    def provide_rules(self, zone_id: str) -> ZoneRuleSet:
        """Build the rules for a defined zone."""
        if (definition := self._definitions.get(zone_id)) is None:
            raise UnknownZoneIdError(zone_id)
        try:
            return definition.to_rules()
        except (ValueError, ArithmeticOverflowError, ZoneRulesError) as err:
            raise ZoneDataError(
                f"Unable to build zone rules: {zone_id}", detailed_error=str(err)
            ) from err
