"""
Adapters layer - Clinic and dentist record stores.
"""

from .file_repository import JsonClinicRepository
from .http_repository import HttpClinicRepository

__all__ = ["JsonClinicRepository", "HttpClinicRepository"]
