"""Unit tests for DentistService with mocked repositories."""

from datetime import time
from unittest.mock import Mock

import pytest

from odonto.core.exceptions import NotFoundError, ValidationFailedError
from odonto.domain.entities import AvailabilitySlot, Dentist, WorkSchedule
from odonto.domain.interfaces import IDentistRepository, IWorkScheduleReader
from odonto.services.dentist_service import DentistService


@pytest.fixture
def dentist_repo() -> Mock:
    repo = Mock(spec=IDentistRepository)
    repo.tax_id_in_use.return_value = False
    repo.license_in_use.return_value = False
    repo.create.side_effect = lambda d: Dentist(**{**d.__dict__, "id": 10})
    repo.update.side_effect = lambda d: d
    return repo


@pytest.fixture
def schedule_repo() -> Mock:
    repo = Mock(spec=IWorkScheduleReader)
    morning = WorkSchedule(id=1, name="Morning")
    repo.list_all.return_value = [morning]
    repo.get_by_id.side_effect = lambda i: morning if i == 1 else None
    return repo


@pytest.fixture
def service(dentist_repo, schedule_repo):
    return DentistService(dentist_repo, schedule_repo)


def _form(**overrides):
    data = {
        "name": "Dr. Paulo Lima",
        "tax_id": "111",
        "license_number": "CRO-1",
        "address": "",
        "email": "paulo@example.com",
        "phone": "",
        "schedule_id": "1",
        "slots": ["monday-0800-1200", "wednesday-1400-1800"],
    }
    data.update(overrides)
    return data


@pytest.mark.services
class TestCreateDentist:
    def test_create_passes_slots_to_repository(self, service, dentist_repo):
        created = service.create_dentist(_form())

        saved = dentist_repo.create.call_args[0][0]
        assert saved.schedule_id == 1
        assert [(s.weekday, s.start_time) for s in saved.availability] == [
            ("Monday", time(8)),
            ("Wednesday", time(14)),
        ]
        assert created.id == 10

    def test_duplicate_tax_id_and_license(self, service, dentist_repo):
        dentist_repo.tax_id_in_use.return_value = True
        dentist_repo.license_in_use.return_value = True

        with pytest.raises(ValidationFailedError) as exc:
            service.create_dentist(_form())

        assert len(exc.value.errors) == 2
        dentist_repo.tax_id_in_use.assert_called_once_with("111", exclude_id=None)
        dentist_repo.create.assert_not_called()

    def test_unknown_schedule(self, service, dentist_repo):
        with pytest.raises(ValidationFailedError) as exc:
            service.create_dentist(_form(schedule_id="42"))

        assert exc.value.errors == ["schedule_id: work schedule not found"]
        dentist_repo.create.assert_not_called()

    def test_missing_required_fields(self, service, dentist_repo):
        with pytest.raises(ValidationFailedError) as exc:
            service.create_dentist(_form(name="", license_number=""))

        assert "name: is required" in exc.value.errors
        assert "license_number: is required" in exc.value.errors
        dentist_repo.license_in_use.assert_not_called()


@pytest.mark.services
class TestUpdateDentist:
    def test_missing_dentist(self, service, dentist_repo):
        dentist_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.update_dentist(3, _form())
        dentist_repo.update.assert_not_called()

    def test_uniqueness_excludes_self(self, service, dentist_repo):
        dentist_repo.get_by_id.return_value = Dentist(id=3, name="Old")

        updated = service.update_dentist(3, _form(slots=[]))

        dentist_repo.tax_id_in_use.assert_called_once_with("111", exclude_id=3)
        dentist_repo.license_in_use.assert_called_once_with("CRO-1", exclude_id=3)
        assert updated.id == 3
        assert updated.availability == []


@pytest.mark.services
class TestForms:
    def test_form_for_existing_dentist_checks_its_slots(self, service):
        dentist = Dentist(
            id=1,
            name="Dr. Ana",
            tax_id="1",
            license_number="L1",
            schedule_id=1,
            availability=[
                AvailabilitySlot(weekday="Monday", start_time=time(8), end_time=time(12)),
                AvailabilitySlot(weekday="Monday", start_time=time(8), end_time=time(12)),
            ],
        )

        form = service.form_for(dentist)

        assert len(form.availability) == 12
        assert [o.key for o in form.availability if o.selected] == ["monday-0800-1200"]
        assert form.values["name"] == "Dr. Ana"
        assert form.values["schedule_id"] == 1
        assert len(form.schedules) == 1

    def test_resubmission_keeps_prior_selection(self, service):
        form = service.form_for_resubmission(
            _form(schedule_id="1", slots=["friday-1400-1800"]), ["name: is required"]
        )

        assert [o.key for o in form.availability if o.selected] == ["friday-1400-1800"]
        assert form.values["schedule_id"] == 1
        assert form.errors == ["name: is required"]

    def test_blank_form_has_nothing_selected(self, service):
        form = service.blank_form()

        assert len(form.availability) == 12
        assert not any(o.selected for o in form.availability)


@pytest.mark.services
def test_delete_missing_dentist_is_silent(service, dentist_repo):
    dentist_repo.delete.return_value = False

    assert service.delete_dentist(99) is False
