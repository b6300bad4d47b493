"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    """Role claim carried by an authenticated session."""

    ADMIN = "admin"
    DENTIST = "dentist"
    GUARDIAN = "guardian"

    @classmethod
    def from_claim(cls, value) -> Optional["Role"]:
        """Parse a stored role value; unknown or empty values give None."""
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for role in cls:
            if role.value == raw:
                return role
        return None


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class User:
    """Domain entity representing a login account."""

    id: Optional[int] = None
    email: str = ""
    name: str = ""
    role: Role = Role.GUARDIAN
    is_active: bool = True
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        if not self.name:
            raise ValueError("Name is required")
        if not self.email or "@" not in self.email:
            raise ValueError("Invalid email format")


@dataclass
class WorkSchedule:
    """A named work schedule a dentist can be attached to."""

    id: Optional[int] = None
    name: str = ""
    description: Optional[str] = None


@dataclass
class AvailabilitySlot:
    """One persisted weekly availability window of a dentist."""

    weekday: str = ""
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    id: Optional[int] = None
    dentist_id: Optional[int] = None


@dataclass
class Dentist:
    """Domain entity for a dentist and its weekly availability.

    Field-level rules are checked by DentistValidator so that every error can
    be reported back on the form at once.
    """

    name: str = ""
    tax_id: str = ""
    license_number: str = ""
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    schedule_id: Optional[int] = None
    id: Optional[int] = None
    schedule: Optional[WorkSchedule] = None
    availability: List[AvailabilitySlot] = field(default_factory=list)


@dataclass
class VolunteerApplication:
    """Domain entity for a dentist's application to volunteer."""

    id: Optional[int] = None
    applicant_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    license_number: Optional[str] = None
    message: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    reviewer_note: Optional[str] = None
    seen: bool = False

    @property
    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING


@dataclass
class DashboardCounts:
    """Aggregate counters shown on the admin dashboard."""

    guardians: int = 0
    children: int = 0
    dentists: int = 0
    appointments: int = 0
    volunteer_applications: int = 0
    unseen_applications: int = 0
