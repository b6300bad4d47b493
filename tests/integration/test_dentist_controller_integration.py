"""
Integration tests for the dentist directory pages.
"""

import re
from datetime import time

import pytest
from sqlalchemy import text

from odonto.db.base import AvailabilitySlot, Dentist, WorkSchedule

CHECKED = re.compile(r'value="([a-z]+-\d{4}-\d{4})" checked')


def _form(**overrides):
    data = {
        "name": "Dr. Helena Rocha",
        "tax_id": "123.456.789-00",
        "license_number": "CRO-SP 5555",
        "address": "Av. Brasil, 100",
        "email": "helena@example.com",
        "phone": "11 98888-7777",
        "schedule_id": "",
        "slots": ["monday-0800-1200", "wednesday-1400-1800"],
    }
    data.update(overrides)
    return data


def _flashes(client):
    with client.session_transaction() as sess:
        return [message for _category, message in sess.get("_flashes", [])]


@pytest.fixture
def dentist(db_session):
    record = Dentist(
        name="Dr. Marcos",
        tax_id="999",
        license_number="CRO-9",
        availability=[
            AvailabilitySlot(weekday="Tuesday", start_time=time(8), end_time=time(12))
        ],
    )
    db_session.add(record)
    db_session.commit()
    return record


@pytest.mark.controllers
class TestAccess:
    @pytest.mark.parametrize(
        "path", ["/dentists/", "/dentists/create", "/dentists/1/edit", "/dentists/1"]
    )
    def test_non_admin_is_redirected(self, guardian_client, path):
        response = guardian_client.get(path)

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/index")
        assert "Access denied. Only administrators can manage dentists." in _flashes(
            guardian_client
        )

    def test_anonymous_is_sent_to_login(self, client):
        response = client.get("/dentists/")

        assert response.status_code == 302
        assert "/dentists/" not in response.headers["Location"].split("?")[0]


@pytest.mark.controllers
class TestCreateAndEdit:
    def test_create_then_edit_shows_exactly_the_chosen_slots(
        self, admin_client, db_session
    ):
        response = admin_client.post("/dentists/create", data=_form())

        assert response.status_code == 302
        created = db_session.query(Dentist).filter_by(tax_id="123.456.789-00").one()

        edit_page = admin_client.get(f"/dentists/{created.id}/edit")

        html = edit_page.get_data(as_text=True)
        assert edit_page.status_code == 200
        assert html.count('name="slots"') == 12
        assert CHECKED.findall(html) == ["monday-0800-1200", "wednesday-1400-1800"]

    def test_create_with_schedule(self, admin_client, db_session):
        schedule = WorkSchedule(name="Morning")
        db_session.add(schedule)
        db_session.commit()

        admin_client.post("/dentists/create", data=_form(schedule_id=str(schedule.id)))

        db_session.expire_all()
        assert db_session.query(Dentist).one().schedule_id == schedule.id

    def test_invalid_create_rerenders_with_input(self, admin_client, db_session):
        response = admin_client.post(
            "/dentists/create", data=_form(name="", slots=["friday-0800-1200"])
        )

        html = response.get_data(as_text=True)
        assert response.status_code == 400
        assert "name: is required" in html
        assert 'value="CRO-SP 5555"' in html
        assert CHECKED.findall(html) == ["friday-0800-1200"]
        assert db_session.query(Dentist).count() == 0

    def test_duplicate_license_is_rejected(self, admin_client, dentist, db_session):
        response = admin_client.post(
            "/dentists/create", data=_form(license_number=dentist.license_number)
        )

        assert response.status_code == 400
        assert "a dentist with this license number already exists" in response.get_data(
            as_text=True
        )
        db_session.expire_all()
        assert db_session.query(Dentist).count() == 1

    def test_edit_replaces_availability(self, admin_client, dentist, db_session):
        response = admin_client.post(
            f"/dentists/{dentist.id}/edit",
            data=_form(
                tax_id=dentist.tax_id,
                license_number=dentist.license_number,
                slots=["saturday-1400-1800"],
            ),
        )

        assert response.status_code == 302
        db_session.expire_all()
        slots = db_session.query(AvailabilitySlot).filter_by(dentist_id=dentist.id).all()
        assert [(s.weekday, s.start_time) for s in slots] == [("Saturday", time(14))]
        assert db_session.get(Dentist, dentist.id).name == "Dr. Helena Rocha"

    def test_invalid_edit_keeps_prior_selection(self, admin_client, dentist, db_session):
        response = admin_client.post(
            f"/dentists/{dentist.id}/edit",
            data=_form(email="broken", slots=["thursday-0800-1200"]),
        )

        html = response.get_data(as_text=True)
        assert response.status_code == 400
        assert "email: is not a valid e-mail address" in html
        assert CHECKED.findall(html) == ["thursday-0800-1200"]
        db_session.expire_all()
        slots = db_session.query(AvailabilitySlot).filter_by(dentist_id=dentist.id).all()
        assert [s.weekday for s in slots] == ["Tuesday"]

    def test_edit_missing_dentist_is_404(self, admin_client):
        assert admin_client.get("/dentists/999/edit").status_code == 404
        assert admin_client.post("/dentists/999/edit", data=_form()).status_code == 404


@pytest.mark.controllers
class TestDeleteAndDetails:
    def test_delete_confirmation_and_removal(self, admin_client, dentist, db_session):
        confirm = admin_client.get(f"/dentists/{dentist.id}/delete")
        assert confirm.status_code == 200
        assert "Dr. Marcos" in confirm.get_data(as_text=True)

        response = admin_client.post(f"/dentists/{dentist.id}/delete")

        assert response.status_code == 302
        db_session.expire_all()
        assert db_session.query(Dentist).count() == 0
        assert db_session.query(AvailabilitySlot).count() == 0

    def test_delete_missing(self, admin_client):
        assert admin_client.get("/dentists/999/delete").status_code == 404

        response = admin_client.post("/dentists/999/delete")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dentists/")
        assert _flashes(admin_client) == []

    def test_details(self, admin_client, dentist):
        response = admin_client.get(f"/dentists/{dentist.id}")

        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "Tuesday 08:00 - 12:00" in html

    def test_details_missing_is_404(self, admin_client):
        assert admin_client.get("/dentists/999").status_code == 404

    def test_index_lists_dentists(self, admin_client, dentist):
        html = admin_client.get("/dentists/").get_data(as_text=True)

        assert "Dr. Marcos" in html
        assert "CRO-9" in html


@pytest.fixture
def broken_dentists_table(db_session):
    db_session.execute(text("DROP TABLE dentists"))
    db_session.commit()


@pytest.mark.controllers
@pytest.mark.usefixtures("broken_dentists_table")
class TestDatabaseFailures:
    def test_index_redirects_to_landing_with_error(self, admin_client):
        response = admin_client.get("/dentists/")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/index")
        [message] = _flashes(admin_client)
        assert message.startswith("Error loading dentists: ")

    @pytest.mark.parametrize("path", ["/dentists/1", "/dentists/1/edit", "/dentists/1/delete"])
    def test_read_pages_redirect_to_list(self, admin_client, path):
        response = admin_client.get(path)

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dentists/")
        [message] = _flashes(admin_client)
        assert message.startswith("Error loading dentists: ")

    def test_create_rerenders_form_with_error(self, admin_client):
        response = admin_client.post("/dentists/create", data=_form())

        assert response.status_code == 500
        html = response.get_data(as_text=True)
        assert "Error loading dentists: " in html
        assert 'value="Dr. Helena Rocha"' in html

    def test_delete_flashes_error(self, admin_client):
        response = admin_client.post("/dentists/1/delete")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dentists/")
        [message] = _flashes(admin_client)
        assert message.startswith("Error deleting dentist: ")
