"""
Clinic and dentist repository backed by a REST records API.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import RepositoryError
from ..domain.models import Clinic, Dentist

logger = logging.getLogger(__name__)


class HttpClinicRepository:
    """
    Fetches clinic and dentist records over HTTP.

    Endpoints:
        GET {base_url}/clinics/{id}          -> clinic record, 404 if absent
        GET {base_url}/dentists?clinic={id}  -> list of dentist records

    ``requests`` is blocking, so each call runs in a worker thread.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the HTTP repository.

        Args:
            base_url: Root URL of the records API
            timeout: Per-request timeout in seconds
            session: Optional pre-configured session (auth headers, retries)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Optional[Any]:
        """GET a JSON document, returning None on 404."""
        url = f"{self.base_url}{path}"

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise RepositoryError(f"Failed to fetch {url}: {e}") from e
        except ValueError as e:
            raise RepositoryError(f"Invalid JSON from {url}: {e}") from e

    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        record = await asyncio.to_thread(self._get, f"/clinics/{clinic_id}")
        if record is None:
            return None

        try:
            return Clinic.from_record(record)
        except (KeyError, TypeError, AttributeError) as exc:
            raise RepositoryError(f"Invalid clinic record for {clinic_id}: {exc}") from exc

    async def find_by_clinic(self, clinic_id: str) -> List[Dentist]:
        records = await asyncio.to_thread(self._get, "/dentists", {"clinic": clinic_id})
        if records is None:
            logger.warning("Dentist lookup for clinic %s returned 404, assuming none", clinic_id)
            return []

        try:
            return [Dentist.from_record(record) for record in records]
        except (KeyError, TypeError, AttributeError) as exc:
            raise RepositoryError(f"Invalid dentist record for clinic {clinic_id}: {exc}") from exc
