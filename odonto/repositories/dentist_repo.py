"""Dentist repository implementation following SOLID principles.

A dentist and its weekly availability are always written together: the
scalar row and every AvailabilitySlot row share one commit, and an edit
replaces the whole slot set inside that same transaction.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from odonto.core.exceptions import PersistenceError
from odonto.db.base import AvailabilitySlot as DbSlot
from odonto.db.base import Dentist as DbDentist
from odonto.domain.entities import AvailabilitySlot as DomainSlot
from odonto.domain.entities import Dentist as DomainDentist
from odonto.domain.entities import WorkSchedule as DomainSchedule
from odonto.domain.interfaces import IDentistRepository

logger = logging.getLogger(__name__)

SCALAR_FIELDS = (
    "name",
    "tax_id",
    "license_number",
    "address",
    "email",
    "phone",
    "schedule_id",
)


class DentistRepository(IDentistRepository):
    """Repository for Dentist persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _query(self):
        return self.db.query(DbDentist).options(
            selectinload(DbDentist.schedule), selectinload(DbDentist.availability)
        )

    def get_by_id(self, dentist_id: int) -> Optional[DomainDentist]:
        try:
            db_dentist = self._query().filter_by(id=dentist_id).first()
        except SQLAlchemyError as e:
            raise self._read_failed("get_by_id", e) from e
        return self._to_domain(db_dentist) if db_dentist else None

    def list_all(self) -> List[DomainDentist]:
        try:
            db_dentists = self._query().order_by(DbDentist.name, DbDentist.id).all()
        except SQLAlchemyError as e:
            raise self._read_failed("list_all", e) from e
        return [self._to_domain(d) for d in db_dentists]

    def tax_id_in_use(self, tax_id: str, exclude_id: Optional[int] = None) -> bool:
        return self._in_use(DbDentist.tax_id == tax_id, exclude_id)

    def license_in_use(
        self, license_number: str, exclude_id: Optional[int] = None
    ) -> bool:
        return self._in_use(DbDentist.license_number == license_number, exclude_id)

    def _in_use(self, criterion, exclude_id: Optional[int]) -> bool:
        query = self.db.query(DbDentist.id).filter(criterion)
        if exclude_id is not None:
            query = query.filter(DbDentist.id != exclude_id)
        try:
            return query.first() is not None
        except SQLAlchemyError as e:
            raise self._read_failed("uniqueness_check", e) from e

    def create(self, dentist: DomainDentist) -> DomainDentist:
        db_dentist = DbDentist()
        self._copy_fields(dentist, db_dentist)
        db_dentist.availability = self._build_slots(dentist.availability)
        try:
            self.db.add(db_dentist)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to create dentist",
                extra={"context": {"tax_id": dentist.tax_id, "error": str(e)}},
            )
            raise PersistenceError(f"Error saving dentist: {e}") from e

        dentist_id = db_dentist.id
        self.db.expire(db_dentist)
        return self.get_by_id(dentist_id)

    def update(self, dentist: DomainDentist) -> Optional[DomainDentist]:
        if not dentist.id:
            raise ValueError("Dentist ID is required for update")

        try:
            db_dentist = self.db.query(DbDentist).filter_by(id=dentist.id).first()
            if not db_dentist:
                return None
            self._copy_fields(dentist, db_dentist)
            # delete-orphan cascade removes the previous slot rows
            db_dentist.availability = self._build_slots(dentist.availability)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to update dentist",
                extra={"context": {"dentist_id": dentist.id, "error": str(e)}},
            )
            raise PersistenceError(f"Error updating dentist: {e}") from e

        self.db.expire(db_dentist)
        return self.get_by_id(dentist.id)

    def delete(self, dentist_id: int) -> bool:
        try:
            db_dentist = self.db.query(DbDentist).filter_by(id=dentist_id).first()
            if not db_dentist:
                return False
            self.db.delete(db_dentist)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Error deleting dentist: {e}") from e
        return True

    def _read_failed(self, operation: str, error: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(
            "Dentist read failed",
            extra={"context": {"operation": operation, "error": str(error)}},
        )
        return PersistenceError(f"Error loading dentists: {error}")

    def _copy_fields(self, dentist: DomainDentist, db_dentist: DbDentist) -> None:
        for name in SCALAR_FIELDS:
            setattr(db_dentist, name, getattr(dentist, name))

    def _build_slots(self, slots: List[DomainSlot]) -> List[DbSlot]:
        return [
            DbSlot(weekday=s.weekday, start_time=s.start_time, end_time=s.end_time)
            for s in slots or []
        ]

    def _to_domain(self, db_dentist: DbDentist) -> DomainDentist:
        schedule = None
        if db_dentist.schedule is not None:
            schedule = DomainSchedule(
                id=db_dentist.schedule.id,
                name=db_dentist.schedule.name,
                description=db_dentist.schedule.description,
            )
        return DomainDentist(
            id=db_dentist.id,
            name=db_dentist.name,
            tax_id=db_dentist.tax_id,
            license_number=db_dentist.license_number,
            address=db_dentist.address,
            email=db_dentist.email,
            phone=db_dentist.phone,
            schedule_id=db_dentist.schedule_id,
            schedule=schedule,
            availability=[
                DomainSlot(
                    id=s.id,
                    dentist_id=s.dentist_id,
                    weekday=s.weekday,
                    start_time=s.start_time,
                    end_time=s.end_time,
                )
                for s in db_dentist.availability
            ],
        )
