"""Aggregate counters for the admin dashboard."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from odonto.core.exceptions import PersistenceError
from odonto.db.base import (
    Appointment,
    Child,
    Dentist,
    Guardian,
    VolunteerApplication,
)
from odonto.domain.entities import DashboardCounts
from odonto.domain.interfaces import IDashboardReader

logger = logging.getLogger(__name__)


class DashboardRepository(IDashboardReader):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def _count(self, model, *criteria) -> int:
        query = self.db.query(func.count(model.id))
        if criteria:
            query = query.filter(*criteria)
        return query.scalar() or 0

    def counts(self) -> DashboardCounts:
        try:
            return DashboardCounts(
                guardians=self._count(Guardian),
                children=self._count(Child),
                dentists=self._count(Dentist),
                appointments=self._count(Appointment),
                volunteer_applications=self._count(VolunteerApplication),
                unseen_applications=self._count(
                    VolunteerApplication, VolunteerApplication.seen.is_(False)
                ),
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Dashboard counts failed", extra={"context": {"error": str(e)}}
            )
            raise PersistenceError(str(e)) from e
