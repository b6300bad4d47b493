"""
Dentist directory service.

Business Rules:
- name, tax ID and license number are required
- tax ID and license number are unique among dentists
- a work schedule, when chosen, must exist
- availability is a subset of the fixed weekly template; the edit form
  always shows the whole template with the dentist's slots checked
"""

import logging
from typing import Any, Dict, List, Optional

from odonto.core.exceptions import NotFoundError, ValidationFailedError
from odonto.core.validation import validate_dentist
from odonto.domain.availability import (
    default_availability,
    merge_existing_selections,
    select_by_keys,
)
from odonto.domain.entities import Dentist
from odonto.domain.interfaces import IDentistRepository, IWorkScheduleReader
from odonto.schemas.dtos import DentistFormData

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "tax_id", "license_number", "address", "email", "phone")


class DentistService:
    """Application service for dentist-related use-cases."""

    def __init__(
        self, dentist_repo: IDentistRepository, schedule_repo: IWorkScheduleReader
    ) -> None:
        self.dentist_repo = dentist_repo
        self.schedule_repo = schedule_repo

    def list_dentists(self) -> List[Dentist]:
        return self.dentist_repo.list_all()

    def get_dentist(self, dentist_id: int) -> Dentist:
        dentist = self.dentist_repo.get_by_id(dentist_id)
        if dentist is None:
            raise NotFoundError("Dentist", dentist_id)
        return dentist

    # ------------------------------------------------------------------
    # Form data
    # ------------------------------------------------------------------
    def blank_form(self) -> DentistFormData:
        return DentistFormData(
            schedules=self.schedule_repo.list_all(),
            availability=default_availability(),
        )

    def form_for(self, dentist: Dentist) -> DentistFormData:
        """Form pre-filled from a stored dentist."""
        values: Dict[str, Any] = {name: getattr(dentist, name) or "" for name in FORM_FIELDS}
        values["schedule_id"] = dentist.schedule_id
        return DentistFormData(
            schedules=self.schedule_repo.list_all(),
            availability=merge_existing_selections(dentist.availability),
            values=values,
        )

    def form_for_resubmission(
        self, data: Dict[str, Any], errors: Optional[List[str]] = None
    ) -> DentistFormData:
        """Form showing exactly what the user submitted, plus the errors."""
        values: Dict[str, Any] = {name: data.get(name) or "" for name in FORM_FIELDS}
        values["schedule_id"] = _as_int(data.get("schedule_id"))
        return DentistFormData(
            schedules=self.schedule_repo.list_all(),
            availability=select_by_keys(data.get("slots") or []),
            values=values,
            errors=list(errors or []),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_dentist(self, data: Dict[str, Any]) -> Dentist:
        """Validate and insert a dentist together with its availability.

        Raises:
            ValidationFailedError: with every problem found in `data`
            PersistenceError: if the database write fails
        """
        dentist = self._build(data)
        created = self.dentist_repo.create(dentist)
        logger.info(
            "Dentist created",
            extra={
                "context": {
                    "dentist_id": created.id,
                    "slots": len(created.availability),
                }
            },
        )
        return created

    def update_dentist(self, dentist_id: int, data: Dict[str, Any]) -> Dentist:
        """Validate and update a dentist, replacing its whole availability.

        Raises:
            NotFoundError: if the dentist does not exist
            ValidationFailedError: with every problem found in `data`
            PersistenceError: if the database write fails
        """
        self.get_dentist(dentist_id)
        dentist = self._build(data, dentist_id=dentist_id)
        updated = self.dentist_repo.update(dentist)
        if updated is None:
            raise NotFoundError("Dentist", dentist_id)
        logger.info(
            "Dentist updated",
            extra={
                "context": {
                    "dentist_id": dentist_id,
                    "slots": len(updated.availability),
                }
            },
        )
        return updated

    def delete_dentist(self, dentist_id: int) -> bool:
        """Delete a dentist and its slots; absent ids are ignored."""
        deleted = self.dentist_repo.delete(dentist_id)
        if deleted:
            logger.info(
                "Dentist deleted", extra={"context": {"dentist_id": dentist_id}}
            )
        return deleted

    def _build(self, data: Dict[str, Any], dentist_id: Optional[int] = None) -> Dentist:
        result = validate_dentist(data)
        errors = list(result.errors)
        cleaned = result.cleaned_data

        tax_id = cleaned.get("tax_id")
        if tax_id and self.dentist_repo.tax_id_in_use(tax_id, exclude_id=dentist_id):
            errors.append("tax_id: a dentist with this tax ID already exists")

        license_number = cleaned.get("license_number")
        if license_number and self.dentist_repo.license_in_use(
            license_number, exclude_id=dentist_id
        ):
            errors.append(
                "license_number: a dentist with this license number already exists"
            )

        schedule_id = cleaned.get("schedule_id")
        if schedule_id is not None and self.schedule_repo.get_by_id(schedule_id) is None:
            errors.append("schedule_id: work schedule not found")

        if errors:
            raise ValidationFailedError(errors)

        return Dentist(
            id=dentist_id,
            name=cleaned["name"],
            tax_id=tax_id,
            license_number=license_number,
            address=cleaned.get("address"),
            email=cleaned.get("email"),
            phone=cleaned.get("phone"),
            schedule_id=schedule_id,
            availability=cleaned.get("availability", []),
        )


def _as_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
