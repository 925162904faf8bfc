"""
Domain-specific exception hierarchy for the meeting calendar.
"""


class MeetingCalendarError(Exception):
    """Base class for all application-level errors."""


class InvalidInterval(MeetingCalendarError, ValueError):
    """Raised when an interval would have zero or negative duration."""


class InvalidWindow(MeetingCalendarError, ValueError):
    """Raised when a query window is empty or ends in the past."""


class SearchCancelled(MeetingCalendarError):
    """Raised when a search is cancelled or runs past its deadline."""


class ConfigurationError(MeetingCalendarError, ValueError):
    """Raised when configuration content cannot be turned into calendars."""
