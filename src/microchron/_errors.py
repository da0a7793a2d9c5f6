"""Exception hierarchy for microsecond-precision date/time handling."""


class MicrochronError(Exception):
    """Base exception for microchron errors.

    Provides dual messaging: a short user-facing message and internal
    details (offending input, underlying cause) for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class MalformedSpecError(MicrochronError):
    """Raised when a duration specification does not match the grammar."""


class CalendarParseError(MicrochronError):
    """Raised when the calendar engine cannot parse a date/time string."""


class InvalidTimezoneError(MicrochronError):
    """Raised when a timezone name or object cannot be resolved."""


# Sanitized user-facing error message constants
ERR_MSG_MALFORMED_SPEC = "unknown or bad duration format"
ERR_MSG_UNPARSEABLE_TIME = "unable to parse date/time string"
ERR_MSG_UNPARSEABLE_RELATIVE = "unable to parse relative date/time string"
ERR_MSG_FORMAT_MISMATCH = "date/time string does not match format"
ERR_MSG_INVALID_TIMEZONE = "unknown or bad timezone"
ERR_MSG_NEGATIVE_DURATION = "duration has no spec representation"
