"""Built-in queries for extracting information from date-time values."""

from __future__ import annotations

import enum
from typing import Any

__all__ = ["TemporalQuery"]


class TemporalQuery(enum.Enum):
    """A closed set of queries that each value type answers for itself.

    A value type answers None when it has no answer for a query, for
    example a local date-time has no offset.
    """

    ZONE_ID = "zone_id"
    """The zone identifier, strictly only for values that carry a region."""

    ZONE = "zone"
    """The zone identifier, falling back to the offset."""

    OFFSET = "offset"
    """The UtcOffset of the value."""

    PRECISION = "precision"
    """The smallest ChronoUnit supported by the value."""

    LOCAL_DATE = "local_date"
    """The local `datetime.date` of the value."""

    LOCAL_TIME = "local_time"
    """The local `datetime.time` of the value."""

    def __call__(self, temporal: Any) -> Any:
        """Run the query against the temporal."""
        return temporal.query(self)
