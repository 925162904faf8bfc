"""
Personal calendars: one person's working hours plus their bookings.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .exceptions import InvalidInterval
from .intervals import clip, complement, union, union_all
from .models import TimeRange, WorkingHours


@dataclass(frozen=True)
class PersonalCalendar:
    """
    Immutable calendar of a single person.

    Bookings may overlap, touch each other or span several days.
    """
    name: str
    working_hours: WorkingHours
    booked: Tuple[TimeRange, ...] = field(default_factory=tuple)

    def __post_init__(self):
        booked = tuple(self.booked)
        for booking in booked:
            if not isinstance(booking, TimeRange):
                raise InvalidInterval(f"Booking of {self.name!r} is not a time range: {booking!r}")
        object.__setattr__(self, "booked", booked)

    @classmethod
    def create(
        cls,
        name: str,
        working_hours: WorkingHours,
        booked: Iterable[TimeRange] = ()
    ) -> "PersonalCalendar":
        """Build a calendar from any iterable of bookings."""
        return cls(name=name, working_hours=working_hours, booked=tuple(booked))

    def working_within(self, window: TimeRange) -> List[TimeRange]:
        """Merged working blocks that can intersect the window."""
        return union(self.working_hours.expand(window))

    def off_hours_within(self, window: TimeRange) -> List[TimeRange]:
        """Parts of the window in which this person is off-shift."""
        return complement(self.working_within(window), window)

    def booked_within(self, window: TimeRange) -> List[TimeRange]:
        """Bookings clipped to the window; bookings outside it are dropped."""
        clipped = (clip(booking, window) for booking in self.booked)
        return [booking for booking in clipped if booking is not None]

    def busy_within(self, window: TimeRange) -> List[TimeRange]:
        """
        All time inside the window in which this person cannot meet.

        Being off-shift and being booked count the same: both make the person
        unavailable. Bookings outside working hours therefore add nothing.
        """
        return union_all(
            self.off_hours_within(window),
            self.booked_within(window)
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.working_hours}, {len(self.booked)} booking(s))"
