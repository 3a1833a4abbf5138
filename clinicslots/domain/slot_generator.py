"""
Per-day, per-dentist slot generation.

Pure domain logic: no repository access, no I/O.
"""

from typing import List

from pendulum import DateTime, Duration

from .models import SLOT_WIDTH, Dentist, TimeSlot, to_millis


class SlotGenerator:
    """
    Splits one day's opening window into fixed-width slots for a dentist.

    Algorithm:
    1. Parse the dentist's lunch and fika breaks
    2. Walk buckets of ``slot_width`` from the opening instant
    3. Stop before a bucket would end after the closing instant
    4. Drop buckets touching a break (lunch checked first, then fika)
    """

    def __init__(self, slot_width: Duration = SLOT_WIDTH):
        if slot_width.total_seconds() <= 0:
            raise ValueError("slot_width must be positive")
        self.slot_width = slot_width

    def generate(
        self,
        open_at: DateTime,
        close_at: DateTime,
        dentist: Dentist,
        clinic_id: str
    ) -> List[TimeSlot]:
        """
        Generate the break-free slots of ``dentist`` between open and close.

        Args:
            open_at: Opening instant of the day, first slot starts here
            close_at: Closing instant of the day, no slot ends after it
            dentist: Dentist whose breaks are excluded
            clinic_id: Clinic identifier copied onto every slot

        Returns:
            Slots in increasing start order

        Raises:
            MalformedScheduleError: If a break string cannot be parsed
        """
        breaks = dentist.breaks()
        slots: List[TimeSlot] = []

        current = open_at
        while current + self.slot_width <= close_at:
            slot_end = current + self.slot_width

            if not any(b.touches(current, slot_end) for b in breaks):
                slots.append(
                    TimeSlot(
                        dentist=dentist.id,
                        clinic=clinic_id,
                        start=to_millis(current),
                        end=to_millis(slot_end),
                    )
                )

            current = slot_end

        return slots
