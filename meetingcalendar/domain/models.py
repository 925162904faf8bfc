"""
Domain models for time ranges, working hours and meeting queries.
"""

import sys
from dataclasses import dataclass
from datetime import time, timedelta
from typing import List

from pendulum import DateTime

from .exceptions import InvalidInterval, InvalidWindow

ALL_SLOTS = sys.maxsize
ANY_DURATION = timedelta(0)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable, half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInterval(f"Start time {self.start} must be before end time {self.end}")

    def duration(self) -> timedelta:
        """Return the duration as a plain timedelta."""
        return timedelta(seconds=(self.end - self.start).total_seconds())

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration().total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def format_display(self) -> str:
        """
        Format the range for display.
        Format: Weekday, DD.MM.YYYY | HH:mm – HH:mm (N min.)
        """
        weekday = self.start.format("dddd", locale="en")
        date_str = self.start.format("DD.MM.YYYY")
        if self.start.date() == self.end.date():
            end_str = self.end.format("HH:mm")
        else:
            end_str = self.end.format("DD.MM.YYYY HH:mm")

        return f"{weekday}, {date_str} | {self.start.format('HH:mm')} – {end_str} ({self.duration_minutes()} min.)"

    def __str__(self) -> str:
        if self.start.date() == self.end.date():
            return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('DD.MM.YYYY HH:mm')}"


@dataclass(frozen=True)
class WorkingHours:
    """
    Daily recurring working hours.

    A shift whose ``end_time`` is earlier than its ``start_time`` runs past
    midnight and ends on the following day. Equal start and end times mean a
    round-the-clock shift: the person is never off-shift.
    """
    start_time: time
    end_time: time

    @property
    def spans_midnight(self) -> bool:
        """True when a shift started on one day ends on the next one."""
        return self.start_time >= self.end_time

    def get_working_hours_for_day(self, date: DateTime) -> TimeRange | None:
        """
        Get the working hours range for the shift starting on a specific day.

        Returns None when a DST gap pushes the start to or past the end, as
        happens for a 02:30 - 03:00 shift on a spring-forward day.
        """
        start = date.set(
            hour=self.start_time.hour,
            minute=self.start_time.minute,
            second=self.start_time.second,
            microsecond=self.start_time.microsecond
        )
        end_day = date.add(days=1) if self.spans_midnight else date
        end = end_day.set(
            hour=self.end_time.hour,
            minute=self.end_time.minute,
            second=self.end_time.second,
            microsecond=self.end_time.microsecond
        )

        if start >= end:
            return None

        return TimeRange(start=start, end=end)

    def expand(self, window: TimeRange) -> List[TimeRange]:
        """
        Generate one working block per calendar day the window touches.

        Shifts crossing midnight also start one day early so that the tail of
        the previous night's shift is covered. The number of blocks is bounded
        by the day span of the window.
        """
        blocks: List[TimeRange] = []

        current = window.start.start_of("day")
        if self.spans_midnight:
            current = current.subtract(days=1)

        while current < window.end:
            block = self.get_working_hours_for_day(current)
            if block is not None:
                blocks.append(block)
            current = current.add(days=1)

        return blocks

    def __str__(self) -> str:
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class MeetingQuery:
    """
    What to search for: a window, a minimum slot length and a result cap.

    ``max_results`` of zero or less yields no slots at all.
    """
    window: TimeRange
    min_duration: timedelta = ANY_DURATION
    max_results: int = ALL_SLOTS

    def __post_init__(self):
        if self.min_duration < ANY_DURATION:
            raise ValueError(f"Minimum duration must not be negative, got {self.min_duration}")

    @classmethod
    def between(
        cls,
        start: DateTime,
        end: DateTime,
        *,
        min_duration: timedelta = ANY_DURATION,
        max_results: int = ALL_SLOTS
    ) -> "MeetingQuery":
        """
        Build a query for the window ``[start, end)``.

        Raises:
            InvalidWindow: If the window does not open before it closes
        """
        if start >= end:
            raise InvalidWindow(f"Search window must open before it closes (from: {start}, to: {end})")

        return cls(
            window=TimeRange(start=start, end=end),
            min_duration=min_duration,
            max_results=max_results
        )

    def ends_before(self, instant: DateTime) -> bool:
        """Check if the whole window lies strictly before the given instant."""
        return self.window.end < instant
