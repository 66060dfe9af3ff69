"""The process wide cache of zone rules.

Rules are built on first lookup by the provider that supplies the zone
identifier and then shared by every caller. Entries are never removed
or replaced once published.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from tzrules.exceptions import UnknownZoneIdError, ZoneRulesError

from .providers import TzdataProvider, ZoneRulesProvider
from .rules import ZoneRuleSet

__all__ = [
    "ZoneRuleRegistry",
    "default_registry",
    "rules_for",
    "available_zone_ids",
    "register_provider",
]

_LOGGER = logging.getLogger(__name__)


class ZoneRuleRegistry:
    """A mapping of zone identifiers to their shared zone rules."""

    def __init__(self, providers: Iterable[ZoneRulesProvider] = ()) -> None:
        """Initialize ZoneRuleRegistry with the providers to consult."""
        self._lock = threading.Lock()
        self._providers: dict[str, ZoneRulesProvider] = {}
        self._rules: dict[str, ZoneRuleSet] = {}
        for provider in providers:
            self.register_provider(provider)

    def register_provider(self, provider: ZoneRulesProvider) -> None:
        """Add a provider of zone rules.

        A provider may not supply a zone identifier that another
        registered provider already supplies.
        """
        zone_ids = provider.provide_zone_ids()
        with self._lock:
            if duplicates := zone_ids & self._providers.keys():
                raise ZoneRulesError(
                    f"Unable to register zone as one already registered with that ID: "
                    f"{', '.join(sorted(duplicates))}"
                )
            for zone_id in zone_ids:
                self._providers[zone_id] = provider
        _LOGGER.debug(
            "Registered provider %s with %d zones", type(provider).__name__, len(zone_ids)
        )

    def available_zone_ids(self) -> frozenset[str]:
        """Return the zone identifiers that can be resolved."""
        with self._lock:
            return frozenset(self._providers)

    def rules_for(self, zone_id: str) -> ZoneRuleSet:
        """Return the shared rules for the zone identifier.

        The rules are built by the provider on first lookup. A provider
        failure propagates to the caller and nothing is cached, so a
        later lookup of the same zone tries again.
        """
        with self._lock:
            if (rules := self._rules.get(zone_id)) is not None:
                return rules
            provider = self._providers.get(zone_id)
        if provider is None:
            raise UnknownZoneIdError(zone_id)
        # Built outside the lock; racing lookups build equivalent rules and
        # the first one published wins.
        rules = provider.provide_rules(zone_id)
        with self._lock:
            published = self._rules.setdefault(zone_id, rules)
        if published is rules:
            _LOGGER.debug("Published zone rules for %s: %s", zone_id, rules)
        return published

    def preload(self, zone_ids: Iterable[str] | None = None) -> None:
        """Build and publish the rules for the zones, or all available zones."""
        for zone_id in (
            zone_ids if zone_ids is not None else sorted(self.available_zone_ids())
        ):
            self.rules_for(zone_id)


_DEFAULT_REGISTRY = ZoneRuleRegistry([TzdataProvider()])


def default_registry() -> ZoneRuleRegistry:
    """Return the process wide registry backed by the IANA time zone database."""
    return _DEFAULT_REGISTRY


def rules_for(zone_id: str) -> ZoneRuleSet:
    """Return the rules for a zone from the default registry."""
    return _DEFAULT_REGISTRY.rules_for(zone_id)


def available_zone_ids() -> frozenset[str]:
    """Return the zone identifiers of the default registry."""
    return _DEFAULT_REGISTRY.available_zone_ids()


def register_provider(provider: ZoneRulesProvider) -> None:
    """Add a provider to the default registry."""
    _DEFAULT_REGISTRY.register_provider(provider)
