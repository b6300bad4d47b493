"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities with business logic
- availability.py: The fixed weekly availability template
- permissions.py: Roles, operations and the authorization policy
- interfaces.py: Repository contracts

Following SOLID principles:
- Single Responsibility: Each module has one purpose
- Open/Closed: Extensible without modification
- Dependency Inversion: Interfaces define contracts
"""

from .entities import (
    ApplicationStatus,
    AvailabilitySlot,
    DashboardCounts,
    Dentist,
    Role,
    User,
    VolunteerApplication,
    WorkSchedule,
)
from .interfaces import (
    IDashboardReader,
    IDentistReader,
    IDentistRepository,
    IDentistWriter,
    IUserReader,
    IVolunteerApplicationReader,
    IVolunteerApplicationRepository,
    IVolunteerApplicationWriter,
    IWorkScheduleReader,
)

__all__ = [
    # Domain entities
    "ApplicationStatus",
    "AvailabilitySlot",
    "DashboardCounts",
    "Dentist",
    "Role",
    "User",
    "VolunteerApplication",
    "WorkSchedule",
    # Repository interfaces
    "IDashboardReader",
    "IDentistRepository",
    "IUserReader",
    "IVolunteerApplicationRepository",
    "IWorkScheduleReader",
    # Segregated interfaces
    "IDentistReader",
    "IDentistWriter",
    "IVolunteerApplicationReader",
    "IVolunteerApplicationWriter",
]
