"""Compatibility layer for zone identifiers seen in the wild.

This module provides context scoped switches that relax how zone
identifiers are resolved.
"""

from .zone_compat import enable_allow_unknown_zones, enable_short_zone_ids

__all__ = [
    "enable_allow_unknown_zones",
    "enable_short_zone_ids",
]
