"""Date-time value types that participate in the temporal protocol."""

from .instant import Instant
from .local_date_time import LocalDateTime
from .offset_date_time import OffsetDateTime
from .utc_offset import UtcOffset

__all__ = [
    "Instant",
    "LocalDateTime",
    "OffsetDateTime",
    "UtcOffset",
]
