"""Fields, units and the protocol shared by date-time value types."""

from . import adjusters
from .fields import ChronoField, DayOfWeek
from .protocol import Temporal, TemporalAccessor, TemporalAdjuster
from .queries import TemporalQuery
from .units import ChronoUnit
from .value_range import ValueRange

__all__ = [
    "adjusters",
    "ChronoField",
    "ChronoUnit",
    "DayOfWeek",
    "Temporal",
    "TemporalAccessor",
    "TemporalAdjuster",
    "TemporalQuery",
    "ValueRange",
]
