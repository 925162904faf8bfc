"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import time, timedelta

from meetingcalendar.domain.exceptions import InvalidInterval, InvalidWindow
from meetingcalendar.domain.models import ALL_SLOTS, MeetingQuery, TimeRange, WorkingHours

TZ = "Europe/Berlin"


def _t(value: str):
    return pendulum.parse(value, tz=TZ)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = _t("2024-11-25 09:00")
        end = _t("2024-11-25 17:00")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours
        assert tr.duration() == timedelta(hours=8)

    def test_invalid_time_range_raises_error(self):
        """Test that an end before the start is rejected."""
        with pytest.raises(InvalidInterval, match="Start time .* must be before end time"):
            TimeRange(start=_t("2024-11-25 17:00"), end=_t("2024-11-25 09:00"))

    def test_zero_length_time_range_raises_error(self):
        """Test that empty ranges are rejected as well."""
        instant = _t("2024-11-25 09:00")

        with pytest.raises(ValueError):
            TimeRange(start=instant, end=instant)

    def test_equality_is_by_value(self):
        """Two ranges with the same endpoints are equal and hash alike."""
        tr1 = TimeRange(start=_t("2024-11-25 09:00"), end=_t("2024-11-25 10:00"))
        tr2 = TimeRange(start=_t("2024-11-25 09:00"), end=_t("2024-11-25 10:00"))

        assert tr1 == tr2
        assert len({tr1, tr2}) == 1

    def test_overlaps(self):
        """Half-open ranges that only touch do not overlap."""
        tr1 = TimeRange(start=_t("2024-11-25 09:00"), end=_t("2024-11-25 12:00"))
        tr2 = TimeRange(start=_t("2024-11-25 11:00"), end=_t("2024-11-25 14:00"))
        tr3 = TimeRange(start=_t("2024-11-25 12:00"), end=_t("2024-11-25 17:00"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_string_formats(self):
        """Single-day ranges omit the end date, multi-day ranges show it."""
        same_day = TimeRange(start=_t("2024-11-25 09:00"), end=_t("2024-11-25 10:30"))
        two_days = TimeRange(start=_t("2024-11-25 22:00"), end=_t("2024-11-26 06:00"))

        assert str(same_day) == "25.11.2024 09:00 - 10:30"
        assert str(two_days) == "25.11.2024 22:00 - 26.11.2024 06:00"
        assert same_day.format_display() == "Monday, 25.11.2024 | 09:00 – 10:30 (90 min.)"


class TestWorkingHours:
    """Tests for WorkingHours model."""

    def test_get_working_hours_for_day(self):
        """Test getting working hours for a specific day."""
        working_hours = WorkingHours(start_time=time(9, 30), end_time=time(17, 0))

        work_range = working_hours.get_working_hours_for_day(_t("2024-11-25"))

        assert work_range == TimeRange(start=_t("2024-11-25 09:30"), end=_t("2024-11-25 17:00"))
        assert not working_hours.spans_midnight

    def test_get_working_hours_across_midnight(self):
        """A shift ending before it starts finishes on the next day."""
        working_hours = WorkingHours(start_time=time(22, 0), end_time=time(6, 0))

        work_range = working_hours.get_working_hours_for_day(_t("2024-11-25"))

        assert working_hours.spans_midnight
        assert work_range == TimeRange(start=_t("2024-11-25 22:00"), end=_t("2024-11-26 06:00"))

    def test_equal_bounds_mean_round_the_clock(self):
        """Equal start and end times produce a 24 hour shift."""
        working_hours = WorkingHours(start_time=time(8, 0), end_time=time(8, 0))

        work_range = working_hours.get_working_hours_for_day(_t("2024-11-25"))

        assert work_range == TimeRange(start=_t("2024-11-25 08:00"), end=_t("2024-11-26 08:00"))

    def test_expand_covers_every_touched_day(self):
        """Partial days at both ends of the window get a block."""
        working_hours = WorkingHours(start_time=time(9, 0), end_time=time(17, 0))
        window = TimeRange(start=_t("2024-11-25 15:00"), end=_t("2024-11-27 10:00"))

        blocks = working_hours.expand(window)

        assert [block.start.day for block in blocks] == [25, 26, 27]

    def test_expand_includes_previous_night_for_overnight_shift(self):
        """Overnight shifts start one day before the window."""
        working_hours = WorkingHours(start_time=time(22, 0), end_time=time(6, 0))
        window = TimeRange(start=_t("2024-11-25 03:00"), end=_t("2024-11-25 12:00"))

        blocks = working_hours.expand(window)

        assert blocks == [
            TimeRange(start=_t("2024-11-24 22:00"), end=_t("2024-11-25 06:00")),
            TimeRange(start=_t("2024-11-25 22:00"), end=_t("2024-11-26 06:00")),
        ]

    def test_expand_is_bounded_by_window_days(self):
        """A one week window yields one block per day, no more."""
        working_hours = WorkingHours(start_time=time(9, 0), end_time=time(17, 0))
        window = TimeRange(start=_t("2024-11-25 00:00"), end=_t("2024-12-02 00:00"))

        assert len(working_hours.expand(window)) == 7

    def test_shift_inside_skipped_dst_hour_is_dropped(self):
        """On a spring-forward day a 02:30 - 03:00 shift does not exist."""
        working_hours = WorkingHours(start_time=time(2, 30), end_time=time(3, 0))
        window = TimeRange(start=_t("2024-03-31 00:00"), end=_t("2024-04-01 00:00"))

        assert working_hours.get_working_hours_for_day(_t("2024-03-31")) is None
        assert working_hours.expand(window) == []

    def test_dst_day_does_not_break_neighbouring_days(self):
        """Days around the DST switch still get their blocks."""
        working_hours = WorkingHours(start_time=time(2, 30), end_time=time(3, 0))
        window = TimeRange(start=_t("2024-03-30 00:00"), end=_t("2024-04-02 00:00"))

        blocks = working_hours.expand(window)

        assert [block.start.day for block in blocks] == [30, 1]

    def test_str(self):
        """Working hours print as HH:MM - HH:MM."""
        assert str(WorkingHours(start_time=time(9, 0), end_time=time(17, 30))) == "09:00 - 17:30"


class TestMeetingQuery:
    """Tests for MeetingQuery model."""

    def test_defaults_find_everything(self):
        """By default any duration and all slots are requested."""
        query = MeetingQuery.between(_t("2024-11-25 09:00"), _t("2024-11-25 17:00"))

        assert query.min_duration == timedelta(0)
        assert query.max_results == ALL_SLOTS

    def test_between_rejects_empty_window(self):
        """A window that does not open before it closes is invalid."""
        with pytest.raises(InvalidWindow):
            MeetingQuery.between(_t("2024-11-25 17:00"), _t("2024-11-25 17:00"))

    def test_negative_duration_is_rejected(self):
        """Minimum duration must not be negative."""
        with pytest.raises(ValueError, match="must not be negative"):
            MeetingQuery.between(
                _t("2024-11-25 09:00"),
                _t("2024-11-25 17:00"),
                min_duration=timedelta(minutes=-5)
            )

    def test_ends_before(self):
        """Only windows ending strictly before the instant are in the past."""
        query = MeetingQuery.between(_t("2024-11-25 09:00"), _t("2024-11-25 17:00"))

        assert query.ends_before(_t("2024-11-25 17:01"))
        assert not query.ends_before(_t("2024-11-25 17:00"))
