"""Compatibility layer for resolving legacy and unknown zone identifiers."""

from collections.abc import Generator
import contextlib
import contextvars


_short_zone_ids = contextvars.ContextVar("short_zone_ids", default=False)
_unknown_zones = contextvars.ContextVar("unknown_zones", default=False)


@contextlib.contextmanager
def enable_short_zone_ids() -> Generator[None]:
    """Context manager to resolve three letter legacy zone ids such as PST."""
    token = _short_zone_ids.set(True)
    try:
        yield
    finally:
        _short_zone_ids.reset(token)


def is_short_zone_ids_enabled() -> bool:
    """Check if three letter legacy zone ids are resolved."""
    return _short_zone_ids.get()


@contextlib.contextmanager
def enable_allow_unknown_zones() -> Generator[None]:
    """Context manager to allow zone ids that no provider recognizes.

    The rules of such a zone are looked up when first used, so errors
    are deferred until then.
    """
    token = _unknown_zones.set(True)
    try:
        yield
    finally:
        _unknown_zones.reset(token)


def is_allow_unknown_zones_enabled() -> bool:
    """Check if zone ids that no provider recognizes are allowed."""
    return _unknown_zones.get()
