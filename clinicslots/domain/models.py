"""
Domain models for clinic opening hours, dentist breaks and time slots.
"""

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, Dict, List, Tuple

import pendulum
from pendulum import DateTime, Duration

from .exceptions import InvalidRangeError, MalformedScheduleError


SLOT_WIDTH: Duration = pendulum.duration(minutes=30)
DAY_LENGTH: Duration = pendulum.duration(hours=24)

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
WEEKEND = (5, 6)  # Saturday, Sunday

LOCAL_TIMEZONE = "local"


class DayStepping(str, Enum):
    """How the range walker advances from one day to the next."""

    FIXED = "fixed"  # exact 24h steps from the range start
    CALENDAR = "calendar"  # one step per local calendar date


class CloseAnchor(str, Enum):
    """Which date the clinic's closing time-of-day is applied to."""

    DAY = "day"  # the day being walked
    NOW = "now"  # the current date


def resolve_timezone(name: str):
    """Return a pendulum timezone, ``"local"`` meaning the host zone."""
    if name == LOCAL_TIMEZONE:
        return pendulum.local_timezone()
    return pendulum.timezone(name)


def from_millis(value: int, timezone: str = LOCAL_TIMEZONE) -> DateTime:
    """Convert epoch milliseconds to a DateTime in the given zone."""
    return pendulum.from_timestamp(value / 1000, tz=resolve_timezone(timezone))


def to_millis(value: DateTime) -> int:
    """Convert a DateTime to epoch milliseconds."""
    return int(value.timestamp() * 1000)


def parse_time_of_day(value: str) -> time:
    """
    Parse an ``HH:MM`` string into a time of day.

    Raises:
        MalformedScheduleError: If the string is not a valid ``HH:MM`` value
    """
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise MalformedScheduleError(f"Invalid time of day: '{value}'")

    try:
        return time(hour=int(parts[0]), minute=int(parts[1]))
    except ValueError as exc:
        raise MalformedScheduleError(f"Invalid time of day: '{value}'") from exc


def parse_interval(value: str) -> Tuple[time, time]:
    """Parse an ``HH:MM-HH:MM`` string into a (start, end) pair."""
    if not isinstance(value, str):
        raise MalformedScheduleError(f"Invalid interval: {value!r}")

    parts = value.split("-")
    if len(parts) != 2:
        raise MalformedScheduleError(f"Invalid interval: '{value}'")

    return parse_time_of_day(parts[0]), parse_time_of_day(parts[1])


def combine_date_and_time_of_day(date: DateTime, time_of_day: time) -> DateTime:
    """
    Return a new DateTime on ``date``'s calendar day at ``time_of_day``.

    Seconds and microseconds are zeroed; ``date`` itself is left untouched.
    """
    return date.set(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=0,
        microsecond=0
    )


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class DateRange:
    """Caller-supplied search range in epoch milliseconds."""
    start: int
    end: int

    def validate(self, day_length: Duration = DAY_LENGTH) -> None:
        """
        Reject reversed ranges and ranges not longer than one day.

        Raises:
            InvalidRangeError: If the range is not usable
        """
        day_ms = int(day_length.total_seconds() * 1000)
        if self.start >= self.end or self.end - self.start <= day_ms:
            raise InvalidRangeError()


@dataclass(frozen=True)
class BreakWindow:
    """A recurring daily break, stored as time of day only."""
    start: time
    end: time

    @classmethod
    def parse(cls, value: str) -> "BreakWindow":
        start, end = parse_interval(value)
        return cls(start=start, end=end)

    def anchored_to(self, day: DateTime) -> Tuple[DateTime, DateTime]:
        """Place the break on the calendar day of ``day``."""
        return (
            combine_date_and_time_of_day(day, self.start),
            combine_date_and_time_of_day(day, self.end),
        )

    def touches(self, slot_start: DateTime, slot_end: DateTime) -> bool:
        """
        Check whether a slot touches this break on the slot's own day.

        A slot ending exactly when the break starts counts as touching,
        a slot starting exactly when the break ends does not.
        """
        break_start, break_end = self.anchored_to(slot_start)
        return slot_start < break_end and slot_end >= break_start


@dataclass(frozen=True)
class Clinic:
    """A clinic and its weekly opening hours."""
    id: str
    openinghours: Dict[str, str]
    name: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Clinic":
        """Build a clinic from a stored record (``id`` or ``_id`` key)."""
        return cls(
            id=str(record.get("id", record.get("_id"))),
            openinghours=dict(record["openinghours"]),
            name=record.get("name", ""),
        )

    def hours_for(self, weekday: str) -> Tuple[time, time]:
        """
        Get the (open, close) times of day for a lowercase weekday name.

        Raises:
            MalformedScheduleError: If the weekday has no entry or it is invalid
        """
        try:
            entry = self.openinghours[weekday]
        except KeyError:
            raise MalformedScheduleError(
                f"No opening hours for '{weekday}' at clinic {self.id}"
            ) from None
        return parse_interval(entry)


@dataclass(frozen=True)
class Dentist:
    """A dentist working at a clinic, with two daily breaks."""
    id: str
    clinic: str
    lunch_break: str
    fika_break: str
    name: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Dentist":
        """Build a dentist from a stored record, accepting camelCase keys."""
        return cls(
            id=str(record.get("id", record.get("_id"))),
            clinic=str(record["clinic"]),
            lunch_break=record.get("lunch_break", record.get("lunchBreak")),
            fika_break=record.get("fika_break", record.get("fikaBreak")),
            name=record.get("name", ""),
        )

    def breaks(self) -> List[BreakWindow]:
        """Parsed break windows, lunch first."""
        return [BreakWindow.parse(self.lunch_break), BreakWindow.parse(self.fika_break)]


@dataclass(frozen=True)
class TimeSlot:
    """
    Represents one bookable appointment slot for a dentist.
    """
    dentist: str
    clinic: str
    start: int
    end: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dentist": self.dentist,
            "clinic": self.clinic,
            "start": self.start,
            "end": self.end,
        }

    def format_display(self, timezone: str = LOCAL_TIMEZONE) -> str:
        """
        Format the slot for display.
        Format: Weekday, DD.MM.YYYY | HH:MM - HH:MM
        """
        start = from_millis(self.start, timezone)
        end = from_millis(self.end, timezone)

        weekday = WEEKDAY_NAMES[start.weekday()].capitalize()
        date_str = start.format("DD.MM.YYYY")
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')}"

        return f"{weekday}, {date_str} | {time_str}"
