"""
Application service for computing a clinic's bookable slots.

The service resolves the clinic and its dentists through repository
adapters and delegates the day-by-day slot computation to the domain-level
``RangeWalker``. Repositories are described by simple protocols so the JSON
file store, the HTTP store or a test stub can be plugged in.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from ..domain.exceptions import (
    ClinicNotFoundError,
    InternalFailureError,
    TimeslotError,
)
from ..domain.models import Clinic, DateRange, Dentist, TimeSlot
from ..domain.range_walker import RangeWalker

logger = logging.getLogger(__name__)


class ClinicRepository(Protocol):
    """Protocol describing the clinic lookup needed by the service."""

    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        """Return the clinic, or None when it does not exist."""


class DentistRepository(Protocol):
    """Protocol describing the dentist lookup needed by the service."""

    async def find_by_clinic(self, clinic_id: str) -> Sequence[Dentist]:
        """Return the dentists working at a clinic."""


class TimeslotService:
    """
    Orchestrates record lookups and slot generation.

    ``get_time_slots`` raises ``TimeslotError`` subclasses; ``handle`` is the
    boundary variant returning plain data or an error envelope.
    """

    def __init__(
        self,
        clinic_repository: ClinicRepository,
        dentist_repository: DentistRepository,
        range_walker: Optional[RangeWalker] = None,
    ) -> None:
        self._clinics = clinic_repository
        self._dentists = dentist_repository
        self._range_walker = range_walker or RangeWalker()

    async def get_time_slots(
        self,
        clinic_id: str,
        start: int,
        end: int,
    ) -> List[TimeSlot]:
        """
        Compute every dentist's slots at a clinic between two instants.

        Args:
            clinic_id: Clinic identifier
            start: Range start in epoch milliseconds
            end: Range end in epoch milliseconds

        Returns:
            Slots ordered by day, then by dentist lookup order

        Raises:
            ClinicNotFoundError: If the clinic does not exist
            InvalidRangeError: If the range is reversed or not longer than a day
            InternalFailureError: For any other fault
        """
        try:
            clinic = await self._clinics.find_by_id(clinic_id)
            if clinic is None:
                raise ClinicNotFoundError()

            date_range = DateRange(start=int(start), end=int(end))
            self._range_walker.validate_range(date_range)

            dentists = list(await self._dentists.find_by_clinic(clinic.id))
            logger.debug(
                "Generating slots for clinic %s with %d dentist(s) from %d to %d",
                clinic.id,
                len(dentists),
                date_range.start,
                date_range.end,
            )

            slots = self._range_walker.walk(clinic, dentists, date_range)
        except TimeslotError:
            raise
        except Exception as exc:
            raise InternalFailureError(str(exc)) from exc

        logger.info("Generated %d slot(s) for clinic %s", len(slots), clinic_id)
        return slots

    async def handle(
        self,
        clinic_id: str,
        start: int,
        end: int,
    ) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Boundary call: slot dicts on success, ``{"error": {...}}`` otherwise.
        """
        try:
            slots = await self.get_time_slots(clinic_id, start, end)
        except TimeslotError as exc:
            if exc.code >= 500:
                logger.warning("Slot generation failed for clinic %s: %s", clinic_id, exc, exc_info=True)
            else:
                logger.info("Rejected slot request for clinic %s: %s", clinic_id, exc)
            return exc.to_envelope()

        return [slot.to_dict() for slot in slots]
