import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from odonto.core.exceptions import PersistenceError
from odonto.db.base import WorkSchedule as DbSchedule
from odonto.domain.entities import WorkSchedule as DomainSchedule
from odonto.domain.interfaces import IWorkScheduleReader

logger = logging.getLogger(__name__)


class WorkScheduleRepository(IWorkScheduleReader):
    """Read-only access to work schedules (created by `manage.py seed-schedules`)."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, schedule_id: int) -> Optional[DomainSchedule]:
        try:
            db_schedule = self.db.query(DbSchedule).filter_by(id=schedule_id).first()
        except SQLAlchemyError as e:
            raise self._read_failed(e) from e
        return self._to_domain(db_schedule) if db_schedule else None

    def list_all(self) -> List[DomainSchedule]:
        try:
            db_schedules = self.db.query(DbSchedule).order_by(DbSchedule.name).all()
        except SQLAlchemyError as e:
            raise self._read_failed(e) from e
        return [self._to_domain(s) for s in db_schedules]

    def _read_failed(self, error: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error("Work schedule read failed", extra={"context": {"error": str(error)}})
        return PersistenceError(f"Error loading work schedules: {error}")

    def _to_domain(self, db_schedule: DbSchedule) -> DomainSchedule:
        return DomainSchedule(
            id=db_schedule.id,
            name=db_schedule.name,
            description=db_schedule.description,
        )
