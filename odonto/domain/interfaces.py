"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import (
    ApplicationStatus,
    DashboardCounts,
    Dentist,
    User,
    VolunteerApplication,
    WorkSchedule,
)


class IUserReader(ABC):
    """Interface for user read operations - Interface Segregation Principle."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    def get_password_hash(self, email: str) -> Optional[str]:
        """Get the stored password hash for an email, if any."""
        pass


class IDentistReader(ABC):
    """Interface for dentist read operations."""

    @abstractmethod
    def get_by_id(self, dentist_id: int) -> Optional[Dentist]:
        """Get a dentist with schedule and availability loaded."""
        pass

    @abstractmethod
    def list_all(self) -> List[Dentist]:
        """Get all dentists with schedule and availability loaded."""
        pass

    @abstractmethod
    def tax_id_in_use(self, tax_id: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether another dentist already uses this tax id."""
        pass

    @abstractmethod
    def license_in_use(
        self, license_number: str, exclude_id: Optional[int] = None
    ) -> bool:
        """Check whether another dentist already uses this license number."""
        pass


class IDentistWriter(ABC):
    """Interface for dentist write operations."""

    @abstractmethod
    def create(self, dentist: Dentist) -> Dentist:
        """Insert a dentist and its availability in one transaction."""
        pass

    @abstractmethod
    def update(self, dentist: Dentist) -> Optional[Dentist]:
        """Update fields and replace availability in one transaction.

        Returns None when the dentist does not exist.
        """
        pass

    @abstractmethod
    def delete(self, dentist_id: int) -> bool:
        """Delete a dentist; False when it did not exist."""
        pass


class IDentistRepository(IDentistReader, IDentistWriter):
    """Complete dentist repository interface."""

    pass


class IWorkScheduleReader(ABC):
    """Work schedules are read-only for the dentist manager."""

    @abstractmethod
    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        pass

    @abstractmethod
    def list_all(self) -> List[WorkSchedule]:
        pass


class IVolunteerApplicationReader(ABC):
    """Interface for volunteer application read operations."""

    @abstractmethod
    def get_by_id(self, application_id: int) -> Optional[VolunteerApplication]:
        pass

    @abstractmethod
    def list(
        self, status: Optional[ApplicationStatus] = None, unseen_only: bool = False
    ) -> List[VolunteerApplication]:
        """List applications, newest submission first."""
        pass

    @abstractmethod
    def count_pending(self) -> int:
        pass

    @abstractmethod
    def count_unseen(self) -> int:
        pass


class IVolunteerApplicationWriter(ABC):
    """Interface for volunteer application write operations."""

    @abstractmethod
    def create(self, application: VolunteerApplication) -> VolunteerApplication:
        pass

    @abstractmethod
    def mark_seen(self, application_id: int) -> bool:
        """Set the seen flag; True if the row changed."""
        pass

    @abstractmethod
    def decide(
        self,
        application_id: int,
        status: ApplicationStatus,
        note: Optional[str],
        responded_at: datetime,
    ) -> bool:
        """Apply a decision only if the application is still pending."""
        pass

    @abstractmethod
    def delete(self, application_id: int) -> bool:
        pass


class IVolunteerApplicationRepository(
    IVolunteerApplicationReader, IVolunteerApplicationWriter
):
    """Complete volunteer application repository interface."""

    pass


class IDashboardReader(ABC):
    @abstractmethod
    def counts(self) -> DashboardCounts:
        """Aggregate counters for the dashboard."""
        pass
