"""Volunteer application repository.

Decisions are written with a conditional UPDATE guarded by
``status = 'pending'``; the affected row count tells the caller whether
the decision won. Every database failure, read or write, leaves this class
as a PersistenceError carrying the driver message.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError

from odonto.core.exceptions import PersistenceError
from odonto.db.base import VolunteerApplication as DbApplication
from odonto.domain.entities import ApplicationStatus
from odonto.domain.entities import VolunteerApplication as DomainApplication
from odonto.domain.interfaces import IVolunteerApplicationRepository

logger = logging.getLogger(__name__)


class VolunteerApplicationRepository(IVolunteerApplicationRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, application_id: int) -> Optional[DomainApplication]:
        try:
            db_app = self._find(application_id)
        except SQLAlchemyError as e:
            raise self._read_failed("get_by_id", e) from e
        return self._to_domain(db_app) if db_app else None

    def list(
        self, status: Optional[ApplicationStatus] = None, unseen_only: bool = False
    ) -> List[DomainApplication]:
        query = self.db.query(DbApplication)
        if status is not None:
            query = query.filter(DbApplication.status == status.value)
        if unseen_only:
            query = query.filter(DbApplication.seen.is_(False))
        try:
            db_apps = query.order_by(
                DbApplication.submitted_at.desc(), DbApplication.id.desc()
            ).all()
        except SQLAlchemyError as e:
            raise self._read_failed("list", e) from e
        return [self._to_domain(a) for a in db_apps]

    def count_pending(self) -> int:
        return self._count(DbApplication.status == ApplicationStatus.PENDING.value)

    def count_unseen(self) -> int:
        return self._count(DbApplication.seen.is_(False))

    def create(self, application: DomainApplication) -> DomainApplication:
        db_app = DbApplication(
            applicant_name=application.applicant_name,
            email=application.email,
            phone=application.phone,
            license_number=application.license_number,
            message=application.message,
            status=application.status.value,
            reviewer_note=application.reviewer_note,
            responded_at=application.responded_at,
            seen=application.seen,
        )
        if application.submitted_at is not None:
            db_app.submitted_at = application.submitted_at
        try:
            self.db.add(db_app)
            self.db.commit()
            self.db.refresh(db_app)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e
        return self._to_domain(db_app)

    def mark_seen(self, application_id: int) -> bool:
        result = self._execute_and_commit(
            update(DbApplication)
            .where(DbApplication.id == application_id)
            .where(DbApplication.seen.is_(False))
            .values(seen=True)
        )
        return result.rowcount == 1

    def decide(
        self,
        application_id: int,
        status: ApplicationStatus,
        note: Optional[str],
        responded_at: datetime,
    ) -> bool:
        result = self._execute_and_commit(
            update(DbApplication)
            .where(DbApplication.id == application_id)
            .where(DbApplication.status == ApplicationStatus.PENDING.value)
            .values(
                status=status.value,
                responded_at=responded_at,
                reviewer_note=note,
                seen=True,
            )
        )
        won = result.rowcount == 1
        if not won:
            logger.info(
                "Decision not applied; application is no longer pending",
                extra={"context": {"application_id": application_id}},
            )
        return won

    def delete(self, application_id: int) -> bool:
        try:
            db_app = self._find(application_id)
            if not db_app:
                return False
            self.db.delete(db_app)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to delete volunteer application",
                extra={"context": {"application_id": application_id, "error": str(e)}},
            )
            raise PersistenceError(str(e)) from e
        return True

    def _find(self, application_id: int) -> Optional[DbApplication]:
        return self.db.query(DbApplication).filter_by(id=application_id).first()

    def _count(self, *criteria) -> int:
        try:
            return (
                self.db.query(func.count(DbApplication.id)).filter(*criteria).scalar()
                or 0
            )
        except SQLAlchemyError as e:
            raise self._read_failed("count", e) from e

    def _execute_and_commit(self, statement):
        try:
            result = self.db.execute(statement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Volunteer application update failed",
                extra={"context": {"error": str(e)}},
            )
            raise PersistenceError(str(e)) from e
        return result

    def _read_failed(self, operation: str, error: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(
            "Volunteer application read failed",
            extra={"context": {"operation": operation, "error": str(error)}},
        )
        return PersistenceError(str(error))

    def _to_domain(self, db_app: DbApplication) -> DomainApplication:
        return DomainApplication(
            id=db_app.id,
            applicant_name=db_app.applicant_name,
            email=db_app.email,
            phone=db_app.phone,
            license_number=db_app.license_number,
            message=db_app.message,
            status=ApplicationStatus(db_app.status),
            submitted_at=db_app.submitted_at,
            responded_at=db_app.responded_at,
            reviewer_note=db_app.reviewer_note,
            seen=bool(db_app.seen),
        )
