"""
Volunteer application review workflow.

Status moves once, from pending to approved or rejected; the `seen` flag
only ever goes from False to True. Both changes are applied with
conditional updates in the repository, so a decision on an application that
is no longer pending is refused instead of overwriting the earlier one.
"""

import logging
from typing import Callable, Optional

from odonto.core.config import now_in_app_tz
from odonto.core.exceptions import InvalidTransitionError, NotFoundError, PersistenceError
from odonto.domain.entities import ApplicationStatus, VolunteerApplication
from odonto.domain.interfaces import IVolunteerApplicationRepository
from odonto.schemas.dtos import ActionResult, VolunteerListResult

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Application not found."

# filter name -> (status, unseen_only)
FILTERS = {
    "all": (None, False),
    "pending": (ApplicationStatus.PENDING, False),
    "approved": (ApplicationStatus.APPROVED, False),
    "rejected": (ApplicationStatus.REJECTED, False),
    "unseen": (None, True),
}

_DECISIONS = {
    ApplicationStatus.APPROVED: ("approving", "Application approved successfully."),
    ApplicationStatus.REJECTED: ("rejecting", "Application rejected successfully."),
}


def normalize_filter(value: Optional[str]) -> str:
    """Return a known filter name; anything unrecognised means "all"."""
    name = (value or "").strip().lower()
    return name if name in FILTERS else "all"


class VolunteerService:
    """Application service for reviewing volunteer applications."""

    def __init__(
        self,
        repo: IVolunteerApplicationRepository,
        clock: Callable = now_in_app_tz,
    ) -> None:
        self.repo = repo
        self.clock = clock

    def list_applications(self, filter_name: Optional[str] = None) -> VolunteerListResult:
        name = normalize_filter(filter_name)
        status, unseen_only = FILTERS[name]
        return VolunteerListResult(
            applications=self.repo.list(status=status, unseen_only=unseen_only),
            filter=name,
            pending_count=self.repo.count_pending(),
            unseen_count=self.repo.count_unseen(),
        )

    def view_detail(self, application_id: int) -> VolunteerApplication:
        """Return the application, marking it seen on first view.

        Raises:
            NotFoundError: if the application does not exist
            PersistenceError: if the read or the seen flag write fails
        """
        application = self.repo.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application", application_id)

        if not application.seen:
            self.repo.mark_seen(application_id)
            application.seen = True
            logger.info(
                "Volunteer application marked as seen",
                extra={"context": {"application_id": application_id}},
            )
        return application

    def approve(self, application_id: int, note: Optional[str] = None) -> ActionResult:
        return self._decide(application_id, ApplicationStatus.APPROVED, note)

    def reject(self, application_id: int, note: Optional[str] = None) -> ActionResult:
        return self._decide(application_id, ApplicationStatus.REJECTED, note)

    def _decide(
        self, application_id: int, status: ApplicationStatus, note: Optional[str]
    ) -> ActionResult:
        verb, success_message = _DECISIONS[status]
        note = (note or "").strip() or None

        try:
            application = self.repo.get_by_id(application_id)
            if application is None:
                return ActionResult.fail(NOT_FOUND_MESSAGE, status_code=404)
            if not application.is_pending:
                return self._already_decided(application)

            applied = self.repo.decide(application_id, status, note, self.clock())
            if not applied:
                # Another reviewer decided between our read and our update
                current = self.repo.get_by_id(application_id)
                if current is None:
                    return ActionResult.fail(NOT_FOUND_MESSAGE, status_code=404)
                return self._already_decided(current)
        except PersistenceError as e:
            logger.error(
                "Volunteer decision failed",
                extra={
                    "context": {
                        "application_id": application_id,
                        "status": status.value,
                        "error": e.message,
                    }
                },
            )
            return ActionResult.fail(
                f"Error {verb} application: {e.message}", status_code=500
            )

        logger.info(
            "Volunteer application decided",
            extra={"context": {"application_id": application_id, "status": status.value}},
        )
        return ActionResult.ok(success_message)

    def _already_decided(self, application: VolunteerApplication) -> ActionResult:
        error = InvalidTransitionError(application.status.value)
        return ActionResult.fail(error.message, status_code=409)

    def delete(self, application_id: int) -> ActionResult:
        try:
            deleted = self.repo.delete(application_id)
        except PersistenceError as e:
            return ActionResult.fail(
                f"Error deleting application: {e.message}", status_code=500
            )
        if not deleted:
            return ActionResult.fail(NOT_FOUND_MESSAGE, status_code=404)

        logger.info(
            "Volunteer application deleted",
            extra={"context": {"application_id": application_id}},
        )
        return ActionResult.ok("Application deleted successfully.")
