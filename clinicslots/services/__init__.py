"""
Service layer helpers that orchestrate repositories and domain logic.
"""

from .timeslot_service import ClinicRepository, DentistRepository, TimeslotService

__all__ = ["ClinicRepository", "DentistRepository", "TimeslotService"]
