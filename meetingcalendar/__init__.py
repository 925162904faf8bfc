"""
meetingcalendar - find common free time for meetings across personal calendars.
"""

__version__ = "0.1.0"
