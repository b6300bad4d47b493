"""
Data Transfer Objects (DTOs) returned by services to controllers.

Following SOLID principles:
- Single Responsibility: Each DTO carries one specific data contract
- Open/Closed: DTOs can be extended without modification
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from odonto.domain.availability import AvailabilityOption
from odonto.domain.entities import VolunteerApplication, WorkSchedule


@dataclass
class ActionResult:
    """Outcome of a state-changing use case.

    `message` is what the user sees (flash or JSON message) and `category`
    is the flash category. `status_code` is used by JSON actions.
    """

    success: bool
    message: str
    category: str = "success"
    status_code: int = 200

    @classmethod
    def ok(cls, message: str) -> "ActionResult":
        return cls(success=True, message=message, category="success")

    @classmethod
    def fail(cls, message: str, status_code: int = 400) -> "ActionResult":
        return cls(
            success=False, message=message, category="error", status_code=status_code
        )


@dataclass
class VolunteerListResult:
    """Applications matching a filter plus the counters shown beside the list."""

    applications: List[VolunteerApplication]
    filter: str
    pending_count: int
    unseen_count: int


@dataclass
class DentistFormData:
    """Everything the dentist create/edit form needs to render."""

    schedules: List[WorkSchedule]
    availability: List[AvailabilityOption]
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
