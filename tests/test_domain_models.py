"""
Tests for domain models and time-string helpers.
"""

from datetime import time

import pendulum
import pytest

from clinicslots.domain.exceptions import InvalidRangeError, MalformedScheduleError
from clinicslots.domain.models import (
    BreakWindow,
    Clinic,
    DateRange,
    Dentist,
    TimeRange,
    TimeSlot,
    combine_date_and_time_of_day,
    from_millis,
    parse_interval,
    parse_time_of_day,
    to_millis,
)

TZ = "Europe/Stockholm"
HOUR_MS = 3_600_000


def at(text: str):
    return pendulum.parse(text, tz=TZ)


class TestTimeParsing:
    """Tests for the HH:MM helpers."""

    def test_parse_time_of_day(self):
        assert parse_time_of_day("09:30") == time(9, 30)
        assert parse_time_of_day(" 7:05 ") == time(7, 5)

    @pytest.mark.parametrize("value", ["0930", "25:00", "12:61", "ab:cd", "12:30:00"])
    def test_parse_time_of_day_rejects_garbage(self, value):
        with pytest.raises(MalformedScheduleError, match="Invalid time of day"):
            parse_time_of_day(value)

    def test_parse_interval(self):
        assert parse_interval("09:00-17:00") == (time(9, 0), time(17, 0))

    @pytest.mark.parametrize("value", ["09:00", "09:00-12:00-17:00", None])
    def test_parse_interval_rejects_garbage(self, value):
        with pytest.raises(MalformedScheduleError, match="Invalid interval"):
            parse_interval(value)

    def test_combine_does_not_mutate_input(self):
        """Combining returns a new instant on the same calendar day."""
        day = at("2024-11-25 20:15:42")

        combined = combine_date_and_time_of_day(day, time(9, 0))

        assert combined == at("2024-11-25 09:00")
        assert day == at("2024-11-25 20:15:42")

    def test_millis_round_trip_keeps_zone(self):
        instant = at("2024-11-25 09:00")

        value = to_millis(instant)
        restored = from_millis(value, TZ)

        assert restored == instant
        assert restored.hour == 9
        assert value % 1000 == 0


class TestBreakWindow:
    """Tests for the break touching rule."""

    def setup_method(self):
        self.lunch = BreakWindow.parse("12:00-12:30")

    def test_anchored_to_slot_day(self):
        start, end = self.lunch.anchored_to(at("2024-11-27 08:00"))

        assert start == at("2024-11-27 12:00")
        assert end == at("2024-11-27 12:30")

    def test_slot_ending_at_break_start_touches(self):
        assert self.lunch.touches(at("2024-11-25 11:30"), at("2024-11-25 12:00"))

    def test_slot_starting_at_break_start_touches(self):
        assert self.lunch.touches(at("2024-11-25 12:00"), at("2024-11-25 12:30"))

    def test_slot_starting_at_break_end_is_free(self):
        assert not self.lunch.touches(at("2024-11-25 12:30"), at("2024-11-25 13:00"))

    def test_slot_well_before_break_is_free(self):
        assert not self.lunch.touches(at("2024-11-25 11:00"), at("2024-11-25 11:30"))

    def test_break_inside_slot_touches(self):
        short = BreakWindow.parse("12:10-12:20")
        assert short.touches(at("2024-11-25 12:00"), at("2024-11-25 12:30"))


class TestRecords:
    """Tests for clinic and dentist records."""

    def test_clinic_from_record_accepts_mongo_id(self):
        clinic = Clinic.from_record(
            {"_id": 5, "name": "Your Dentist", "openinghours": {"monday": "09:00-17:00"}}
        )

        assert clinic.id == "5"
        assert clinic.hours_for("monday") == (time(9, 0), time(17, 0))

    def test_clinic_missing_weekday(self):
        clinic = Clinic(id="c1", openinghours={"monday": "09:00-17:00"})

        with pytest.raises(MalformedScheduleError, match="No opening hours for 'tuesday'"):
            clinic.hours_for("tuesday")

    def test_dentist_from_camel_case_record(self):
        dentist = Dentist.from_record(
            {"id": "d1", "clinic": "c1", "lunchBreak": "12:00-12:30", "fikaBreak": "15:00-15:15"}
        )

        assert dentist.lunch_break == "12:00-12:30"
        assert [b.start for b in dentist.breaks()] == [time(12, 0), time(15, 0)]


class TestDateRange:
    """Tests for range validation."""

    def test_valid_range(self):
        DateRange(start=0, end=24 * HOUR_MS + 1).validate()

    @pytest.mark.parametrize(
        "start,end",
        [
            (10, 10),
            (48 * HOUR_MS, 0),
            (0, 24 * HOUR_MS),
            (0, 5 * HOUR_MS),
        ],
    )
    def test_invalid_ranges(self, start, end):
        with pytest.raises(InvalidRangeError, match="Invalid date range"):
            DateRange(start=start, end=end).validate()


class TestTimeSlot:
    """Tests for the output value object."""

    def test_to_dict(self):
        slot = TimeSlot(dentist="d1", clinic="c1", start=1, end=2)
        assert slot.to_dict() == {"dentist": "d1", "clinic": "c1", "start": 1, "end": 2}

    def test_format_display(self):
        slot = TimeSlot(
            dentist="d1",
            clinic="c1",
            start=to_millis(at("2024-11-25 09:00")),
            end=to_millis(at("2024-11-25 09:30")),
        )

        assert slot.format_display(TZ) == "Monday, 25.11.2024 | 09:00 - 09:30"

    def test_time_range_rejects_reversed(self):
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=at("2024-11-25 17:00"), end=at("2024-11-25 09:00"))
