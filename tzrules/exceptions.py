"""Exceptions for tzrules library."""


class DateTimeError(Exception):
    """Base exception for all tzrules errors."""


class MalformedOffsetError(DateTimeError, ValueError):
    """Exception raised when offset text does not have a recognized shape."""


class OffsetOutOfRangeError(DateTimeError, ValueError):
    """Exception raised when an offset is outside of +/-18 hours."""


class UnsupportedFieldError(DateTimeError):
    """Exception raised when a field or unit is not applicable to a value.

    A value type only supports the fields and units that make sense for
    it, for example an Instant has no month and a local date-time has no
    offset.
    """


class InvalidFieldValueError(DateTimeError, ValueError):
    """Exception raised when a value is outside the valid range of a field."""


class ArithmeticOverflowError(DateTimeError, OverflowError):
    """Exception raised when arithmetic leaves the supported range of a value."""


class InstantOutOfRangeError(ArithmeticOverflowError):
    """Exception raised when an instant is outside the representable time-line."""


class InvalidRuleYearError(DateTimeError, ValueError):
    """Exception raised when a transition rule is evaluated for an unsupported year."""


class MalformedZoneIdError(DateTimeError, ValueError):
    """Exception raised when a zone identifier has an invalid format."""


class ZoneRulesError(DateTimeError):
    """Exception raised when zone rules can't be built or loaded."""


class UnknownZoneIdError(ZoneRulesError):
    """Exception raised when no provider recognizes a zone identifier."""

    def __init__(self, zone_id: str) -> None:
        """Initialize UnknownZoneIdError."""
        super().__init__(f"Unknown time-zone ID: {zone_id}")
        self.zone_id = zone_id


class ZoneDataError(ZoneRulesError):
    """Exception raised when zone data can't be read or validated.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the underlying validation errors.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the ZoneDataError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error
