"""
clinicslots - bookable appointment slots for dentist clinics.
"""

__version__ = "0.1.0"
