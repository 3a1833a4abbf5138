"""
Day-by-day driver over a caller's date range.

For every open weekday the clinic's opening window is resolved and the
slot generator is run once per dentist, in the order the dentists were given.
"""

import logging
from typing import Callable, Iterator, List, Optional, Sequence

import pendulum
from pendulum import DateTime, Duration

from .models import (
    DAY_LENGTH,
    LOCAL_TIMEZONE,
    WEEKDAY_NAMES,
    WEEKEND,
    Clinic,
    CloseAnchor,
    DateRange,
    DayStepping,
    Dentist,
    TimeRange,
    TimeSlot,
    combine_date_and_time_of_day,
    from_millis,
    resolve_timezone,
)
from .slot_generator import SlotGenerator

logger = logging.getLogger(__name__)


class RangeWalker:
    """
    Walks a date range one day at a time and collects slots.

    ``day_stepping`` chooses between exact 24h steps from the range start
    (the time of day of ``start`` is kept) and one step per calendar date.
    ``close_anchor`` chooses whether the closing time is applied to the
    walked day or to the current date returned by ``clock``.
    """

    def __init__(
        self,
        slot_generator: Optional[SlotGenerator] = None,
        *,
        timezone: str = LOCAL_TIMEZONE,
        day_length: Duration = DAY_LENGTH,
        exclude_weekdays: Sequence[int] = WEEKEND,
        day_stepping: DayStepping = DayStepping.FIXED,
        close_anchor: CloseAnchor = CloseAnchor.DAY,
        clock: Optional[Callable[[], DateTime]] = None,
    ):
        self.slot_generator = slot_generator or SlotGenerator()
        self.timezone = timezone
        self.day_length = day_length
        self.exclude_weekdays = list(exclude_weekdays)
        self.day_stepping = DayStepping(day_stepping)
        self.close_anchor = CloseAnchor(close_anchor)
        self._clock = clock or self._now

    def _now(self) -> DateTime:
        return pendulum.now(resolve_timezone(self.timezone))

    def validate_range(self, date_range: DateRange) -> None:
        """Raise ``InvalidRangeError`` for reversed or too short ranges."""
        date_range.validate(self.day_length)

    def walk(
        self,
        clinic: Clinic,
        dentists: Sequence[Dentist],
        date_range: DateRange
    ) -> List[TimeSlot]:
        """
        Collect slots for all dentists over the range, day-major.

        Raises:
            InvalidRangeError: If the range is reversed or too short
            MalformedScheduleError: If hours or breaks of a visited day are invalid
        """
        self.validate_range(date_range)

        slots: List[TimeSlot] = []

        for day in self.iter_days(date_range):
            if day.weekday() in self.exclude_weekdays:
                continue

            window = self.opening_window(clinic, day)
            if window is None:
                logger.debug("Clinic %s closed on %s", clinic.id, day.to_date_string())
                continue
            logger.debug("Clinic %s open %s", clinic.id, window)

            for dentist in dentists:
                slots.extend(
                    self.slot_generator.generate(
                        open_at=window.start,
                        close_at=window.end,
                        dentist=dentist,
                        clinic_id=clinic.id,
                    )
                )

        return slots

    def iter_days(self, date_range: DateRange) -> Iterator[DateTime]:
        """Yield one DateTime per walked day, start and end inclusive."""
        if self.day_stepping is DayStepping.CALENDAR:
            current = from_millis(date_range.start, self.timezone).start_of("day")
            last = from_millis(date_range.end, self.timezone)
            while current <= last:
                yield current
                current = current.add(days=1)
            return

        step = int(self.day_length.total_seconds() * 1000)
        for instant in range(date_range.start, date_range.end + 1, step):
            yield from_millis(instant, self.timezone)

    def opening_window(self, clinic: Clinic, day: DateTime) -> Optional[TimeRange]:
        """
        Resolve the clinic's open and close instants for ``day``.

        Returns None when the close time is not after the open time.
        """
        open_time, close_time = clinic.hours_for(WEEKDAY_NAMES[day.weekday()])

        close_day = day if self.close_anchor is CloseAnchor.DAY else self._clock()
        open_at = combine_date_and_time_of_day(day, open_time)
        close_at = combine_date_and_time_of_day(close_day, close_time)

        if close_at <= open_at:
            return None
        return TimeRange(start=open_at, end=close_at)
