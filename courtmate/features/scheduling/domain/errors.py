"""
Scheduling errors.

ValidationError marks a single malformed availability slot and is meant to be
skipped by callers. InvalidParameterError is a caller contract violation and
should surface immediately.
"""


class SchedulingError(Exception):
    """Base class for scheduling engine errors."""


class ValidationError(SchedulingError):
    """Malformed availability slot (bad day of week, start >= end, unparsable time)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidParameterError(SchedulingError):
    """Nonsensical call parameters (non-positive duration, inverted date range)."""

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter
