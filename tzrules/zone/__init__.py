"""Time-zone rules, their providers and the registry that shares them."""

from .definitions import DefinitionProvider, ZoneDefinition
from .providers import TzdataProvider, ZoneRulesProvider
from .registry import (
    ZoneRuleRegistry,
    available_zone_ids,
    default_registry,
    register_provider,
    rules_for,
)
from .rules import ZoneRuleSet
from .transition import RecurringTransitionRule, TimeDefinition, Transition
from .tzinfo import ZoneRulesTzInfo
from .zone_id import ZoneId

__all__ = [
    "DefinitionProvider",
    "RecurringTransitionRule",
    "TimeDefinition",
    "Transition",
    "TzdataProvider",
    "ZoneDefinition",
    "ZoneId",
    "ZoneRuleRegistry",
    "ZoneRuleSet",
    "ZoneRulesProvider",
    "ZoneRulesTzInfo",
    "available_zone_ids",
    "default_registry",
    "register_provider",
    "rules_for",
]
