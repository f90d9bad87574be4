"""Tests for half-open reservation windows."""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from app.services.time_window import TimeWindow, overlaps

from conftest import make_window


class TestTimeWindow:
    """Test TimeWindow construction and overlap rules."""

    def test_start_must_precede_end(self):
        """An empty or inverted window is rejected."""
        start = datetime(2026, 5, 1, 11, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            TimeWindow(start, start)
        with pytest.raises(ValueError):
            TimeWindow(start, start - timedelta(minutes=1))

    def test_touching_windows_do_not_overlap(self):
        """Back-to-back reservations may share a table."""
        first = make_window(time(11, 0))
        second = make_window(time(12, 0))

        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_partial_overlap(self):
        """Windows sharing any instant overlap in both directions."""
        first = make_window(time(11, 0))
        second = TimeWindow.from_start(
            first.start + timedelta(minutes=30),
            timedelta(hours=1),
        )

        assert overlaps(first, second)
        assert overlaps(second, first)

    def test_containment_overlaps(self):
        """A window inside another one overlaps it."""
        outer = make_window(time(11, 0), hours=3)
        inner = make_window(time(12, 0))

        assert outer.overlaps(inner)
        assert inner.overlaps(outer)

    def test_slot_key(self):
        """Slot date and naive time come from the window start."""
        window = make_window(time(19, 30))

        assert window.slot_date == date(2026, 5, 1)
        assert window.slot_time == time(19, 30)
        assert window.slot_time.tzinfo is None

    def test_dates_within_one_day(self):
        """A window ending at midnight touches only its own day."""
        window = make_window(time(23, 0))

        assert window.dates() == [date(2026, 5, 1)]

    def test_dates_across_midnight(self):
        """A window crossing midnight touches both days."""
        window = make_window(time(23, 30))

        assert window.dates() == [date(2026, 5, 1), date(2026, 5, 2)]
