"""
Domain layer - Pure business logic without external dependencies.
"""

from .calendar import PersonalCalendar
from .exceptions import (
    ConfigurationError,
    InvalidInterval,
    InvalidWindow,
    MeetingCalendarError,
    SearchCancelled,
)
from .intervals import clip, complement, union
from .models import ALL_SLOTS, ANY_DURATION, MeetingQuery, TimeRange, WorkingHours
from .slot_calculator import SlotCalculator

__all__ = [
    "ALL_SLOTS",
    "ANY_DURATION",
    "ConfigurationError",
    "InvalidInterval",
    "InvalidWindow",
    "MeetingCalendarError",
    "MeetingQuery",
    "PersonalCalendar",
    "SearchCancelled",
    "SlotCalculator",
    "TimeRange",
    "WorkingHours",
    "clip",
    "complement",
    "union",
]
