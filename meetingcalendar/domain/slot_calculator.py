"""
Core business logic for finding common free time.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Callable, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from .calendar import PersonalCalendar
from .exceptions import InvalidWindow, SearchCancelled
from .intervals import complement, union_all
from .models import MeetingQuery, TimeRange

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

Clock = Callable[[], DateTime]


class SlotCalculator:
    """
    Calculates free meeting slots shared by everybody in a set of calendars.

    Algorithm:
    1. For each calendar, derive the busy time inside the search window
       (off-shift or booked), in parallel
    2. Union all busy sets - one busy person makes the time unavailable
    3. Complement the union against the window to get free blocks
    4. Filter by minimum duration
    5. Return the first N blocks in chronological order
    """

    def __init__(
        self,
        clock: Clock = pendulum.now,
        max_workers: Optional[int] = None
    ):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._clock = clock
        self.max_workers = max_workers

    def find_time_for_meeting(
        self,
        query: MeetingQuery,
        calendars: Sequence[PersonalCalendar],
        *,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[DateTime] = None
    ) -> List[TimeRange]:
        """
        Find free slots that every person can attend.

        Args:
            query: Search window, minimum duration and result cap
            calendars: Personal calendars of all participants
            cancel_event: Optional event; once set, the search is abandoned
            deadline: Optional instant after which the search is abandoned

        Returns:
            Free time ranges in ascending order

        Raises:
            InvalidWindow: If the search window ends in the past
            SearchCancelled: If cancelled or the deadline passed
        """
        now = self._now_like(query.window.end)
        if query.ends_before(now):
            raise InvalidWindow(
                f"Cannot search for meeting in the past "
                f"(from: {query.window.start}, to: {query.window.end})"
            )

        if query.max_results <= 0:
            return []

        busy_sets = self._busy_per_calendar(
            calendars=list(calendars),
            window=query.window,
            cancel_event=cancel_event,
            deadline=deadline
        )

        global_busy = reduce(union_all, busy_sets, [])
        free = complement(global_busy, query.window)

        logger.debug(
            "%d calendar(s) yield %d busy and %d free block(s)",
            len(busy_sets), len(global_busy), len(free)
        )

        valid_slots = [
            slot for slot in free
            if slot.duration() >= query.min_duration
        ]

        return valid_slots[:query.max_results]

    def _busy_per_calendar(
        self,
        calendars: List[PersonalCalendar],
        window: TimeRange,
        cancel_event: Optional[threading.Event],
        deadline: Optional[DateTime]
    ) -> List[List[TimeRange]]:
        """
        Derive each calendar's busy time, fanning out over a thread pool.

        Any exception, including cancellation, aborts the whole map step.
        """
        def derive(calendar: PersonalCalendar) -> List[TimeRange]:
            self._raise_if_cancelled(cancel_event, deadline)
            return calendar.busy_within(window)

        workers = self._worker_count(len(calendars))
        logger.debug("Deriving busy time for %d calendar(s) with %d worker(s)", len(calendars), workers)

        if workers <= 1:
            return [derive(calendar) for calendar in calendars]

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="busy-time")
        try:
            return list(executor.map(derive, calendars))
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _now_like(self, reference: DateTime) -> DateTime:
        """
        Read the clock so the result compares with ``reference``.

        Naive references get the local wall-clock time without zone.
        """
        now = self._clock()
        if reference.tzinfo is None and now.tzinfo is not None:
            return now.replace(tzinfo=None)
        return now

    def _worker_count(self, calendar_count: int) -> int:
        limit = self.max_workers or DEFAULT_MAX_WORKERS
        return max(1, min(limit, calendar_count))

    def _raise_if_cancelled(
        self,
        cancel_event: Optional[threading.Event],
        deadline: Optional[DateTime]
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Meeting search cancelled")
            raise SearchCancelled("Meeting search was cancelled")

        if deadline is not None and self._now_like(deadline) >= deadline:
            logger.info("Meeting search passed its deadline %s", deadline)
            raise SearchCancelled(f"Meeting search exceeded its deadline {deadline}")
