"""
Clinic and dentist repository backed by a JSON document.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import RepositoryError
from ..domain.models import Clinic, Dentist

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "sample_clinic_data.json"


class JsonClinicRepository:
    """
    Serves clinic and dentist records from a JSON file.

    The document holds two lists::

        {
            "clinics": [{"id": "1", "name": "...", "openinghours": {"monday": "09:00-17:00"}}],
            "dentists": [{"id": "7", "clinic": "1", "lunchBreak": "12:00-12:30", "fikaBreak": "15:00-15:15"}]
        }

    Implements both ``ClinicRepository`` and ``DentistRepository``.
    """

    def __init__(self, data_file: Optional[Path] = None, data: Optional[Dict[str, Any]] = None):
        """
        Initialize the repository.

        Args:
            data_file: JSON file to load; the bundled sample data by default
            data: Already parsed document, used instead of reading a file
        """
        self.data_file = data_file or DEFAULT_DATA_FILE
        if data is None:
            data = self._load_data()
        self._clinics, self._dentists = self._parse(data)

    def _load_data(self) -> Dict[str, Any]:
        """Load records from the JSON file."""
        if not self.data_file.exists():
            logger.warning("Clinic data file %s not found, starting empty", self.data_file)
            return {}

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise RepositoryError(f"Could not read clinic data from {self.data_file}: {exc}") from exc

    @staticmethod
    def _parse(data: Dict[str, Any]):
        try:
            clinics = {}
            for record in data.get("clinics", []):
                clinic = Clinic.from_record(record)
                clinics[clinic.id] = clinic
            dentists = [Dentist.from_record(record) for record in data.get("dentists", [])]
        except (KeyError, TypeError, AttributeError) as exc:
            raise RepositoryError(f"Invalid clinic data: missing or malformed field {exc}") from exc
        return clinics, dentists

    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        return self._clinics.get(str(clinic_id))

    async def find_by_clinic(self, clinic_id: str) -> List[Dentist]:
        return [d for d in self._dentists if d.clinic == str(clinic_id)]

    def list_clinics(self) -> List[Clinic]:
        """All clinics in file order."""
        return list(self._clinics.values())

    def count_dentists(self, clinic_id: str) -> int:
        return sum(1 for d in self._dentists if d.clinic == clinic_id)
