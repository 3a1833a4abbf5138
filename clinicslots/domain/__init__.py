"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    ClinicNotFoundError,
    InternalFailureError,
    InvalidRangeError,
    MalformedScheduleError,
    RepositoryError,
    TimeslotError,
)
from .models import BreakWindow, Clinic, CloseAnchor, DateRange, DayStepping, Dentist, TimeSlot
from .range_walker import RangeWalker
from .slot_generator import SlotGenerator

__all__ = [
    "BreakWindow",
    "Clinic",
    "ClinicNotFoundError",
    "CloseAnchor",
    "DateRange",
    "DayStepping",
    "Dentist",
    "InternalFailureError",
    "InvalidRangeError",
    "MalformedScheduleError",
    "RangeWalker",
    "RepositoryError",
    "SlotGenerator",
    "TimeSlot",
    "TimeslotError",
]
