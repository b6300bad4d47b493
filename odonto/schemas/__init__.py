"""
Schemas package - Data Transfer Objects.

This package contains the DTOs services hand back to controllers
following SOLID principles.
"""

from .dtos import ActionResult, DentistFormData, VolunteerListResult

__all__ = [
    "ActionResult",
    "DentistFormData",
    "VolunteerListResult",
]
