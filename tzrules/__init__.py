"""A library for date-time values and the rules of time-zones.

The `tzrules.zone` package resolves offsets from UTC for a zone using
the IANA time zone database, and the `tzrules.types` package has the
value types that participate in the `tzrules.temporal` protocol.
"""

__all__ = [
    "compat",
    "exceptions",
    "temporal",
    "types",
    "zone",
]
