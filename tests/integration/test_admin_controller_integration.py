"""
Integration tests for the admin dashboard and the volunteer review pages.
"""

from datetime import datetime

import pytest
from sqlalchemy import text

from odonto.db.base import Dentist, VolunteerApplication


def _stored(db_session, application_id):
    db_session.expire_all()
    return db_session.get(VolunteerApplication, application_id)


def _flashes(client):
    with client.session_transaction() as sess:
        return [message for _category, message in sess.get("_flashes", [])]


def _drop_applications_table(db_session):
    db_session.execute(text("DROP TABLE volunteer_applications"))
    db_session.commit()


@pytest.mark.controllers
class TestDashboard:
    def test_requires_login(self, client):
        response = client.get("/admin/dashboard")

        assert response.status_code == 302
        assert response.headers["Location"].startswith("/")

    def test_any_role_sees_counts(self, guardian_client, db_session, application_factory):
        db_session.add(Dentist(name="Dr. Ana", tax_id="1", license_number="L1"))
        db_session.commit()
        application_factory("Unseen One")

        response = guardian_client.get("/admin/dashboard")

        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert '<dd id="count-dentists">1</dd>' in html
        assert '<dd id="count-unseen-applications">1</dd>' in html


@pytest.mark.controllers
class TestVolunteerList:
    def test_non_admin_is_redirected_to_landing(self, guardian_client):
        response = guardian_client.get("/admin/volunteer-applications")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/index")
        assert (
            "Access denied. Only administrators can manage volunteer applications."
            in _flashes(guardian_client)
        )

    def test_unseen_filter_shows_newest_first(self, admin_client, application_factory):
        application_factory("Carla Old", submitted_at=datetime(2024, 1, 5))
        application_factory("Bruno Seen", seen=True, submitted_at=datetime(2024, 2, 5))
        application_factory("Diana New", submitted_at=datetime(2024, 3, 5))

        response = admin_client.get("/admin/volunteer-applications?filtro=unseen")

        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert "Bruno Seen" not in html
        assert html.index("Diana New") < html.index("Carla Old")
        assert '<span id="unseen-count">2</span>' in html
        assert '<span id="pending-count">3</span>' in html

    def test_unknown_filter_lists_everything(self, admin_client, application_factory):
        application_factory("Carla", status="approved", seen=True)
        application_factory("Bruno")

        html = admin_client.get(
            "/admin/volunteer-applications?filtro=nonsense"
        ).get_data(as_text=True)

        assert "Carla" in html and "Bruno" in html


@pytest.mark.controllers
class TestVolunteerDetail:
    def test_detail_marks_seen_without_changing_status(
        self, admin_client, db_session, application_factory
    ):
        application = application_factory(status="rejected", seen=False)

        response = admin_client.get(f"/admin/volunteer-applications/{application.id}")

        assert response.status_code == 200
        stored = _stored(db_session, application.id)
        assert stored.seen is True
        assert stored.status == "rejected"

    def test_missing_application_redirects_to_list(self, admin_client):
        response = admin_client.get("/admin/volunteer-applications/999")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/admin/volunteer-applications")
        assert "Application not found." in _flashes(admin_client)


@pytest.mark.controllers
class TestVolunteerDecisions:
    def test_approve(self, admin_client, db_session, application_factory):
        application = application_factory()

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/approve",
            data={"note": "Welcome"},
        )

        assert response.status_code == 200
        assert response.get_json() == {
            "success": True,
            "message": "Application approved successfully.",
        }
        stored = _stored(db_session, application.id)
        assert stored.status == "approved"
        assert stored.reviewer_note == "Welcome"
        assert stored.seen is True
        assert stored.responded_at is not None

    def test_second_decision_is_refused(
        self, admin_client, db_session, application_factory
    ):
        application = application_factory()
        admin_client.post(f"/admin/volunteer-applications/{application.id}/reject")

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/approve",
            data={"note": "changed my mind"},
        )

        assert response.status_code == 409
        assert response.get_json() == {
            "success": False,
            "message": "Application has already been rejected.",
        }
        stored = _stored(db_session, application.id)
        assert stored.status == "rejected"
        assert stored.reviewer_note is None

    def test_non_admin_gets_access_denied_json(
        self, guardian_client, db_session, application_factory
    ):
        application = application_factory()

        response = guardian_client.post(
            f"/admin/volunteer-applications/{application.id}/approve"
        )

        assert response.status_code == 403
        assert response.get_json() == {"success": False, "message": "Access denied"}
        assert _stored(db_session, application.id).status == "pending"

    def test_missing_application(self, admin_client):
        response = admin_client.post("/admin/volunteer-applications/999/reject")

        assert response.status_code == 404
        assert response.get_json()["message"] == "Application not found."


@pytest.mark.controllers
class TestVolunteerDelete:
    def test_delete_existing(self, admin_client, db_session, application_factory):
        application = application_factory()

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/delete"
        )

        assert response.status_code == 302
        assert "Application deleted successfully." in _flashes(admin_client)
        assert _stored(db_session, application.id) is None

    def test_delete_missing_flashes_not_found(
        self, admin_client, db_session, application_factory
    ):
        application_factory()

        response = admin_client.post("/admin/volunteer-applications/999/delete")

        assert response.status_code == 302
        assert "Application not found." in _flashes(admin_client)
        db_session.expire_all()
        assert db_session.query(VolunteerApplication).count() == 1


@pytest.mark.controllers
class TestDatabaseFailures:
    """A broken table must end in a user-facing error, never a raw exception."""

    def test_approve_reports_failure_json(
        self, admin_client, db_session, application_factory
    ):
        application = application_factory()
        _drop_applications_table(db_session)

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/approve"
        )

        assert response.status_code == 500
        payload = response.get_json()
        assert payload["success"] is False
        assert payload["message"].startswith("Error approving application: ")

    def test_reject_reports_failure_json(
        self, admin_client, db_session, application_factory
    ):
        application = application_factory()
        _drop_applications_table(db_session)

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/reject"
        )

        assert response.status_code == 500
        assert response.get_json()["message"].startswith(
            "Error rejecting application: "
        )

    def test_delete_flashes_error(self, admin_client, db_session, application_factory):
        application = application_factory()
        _drop_applications_table(db_session)

        response = admin_client.post(
            f"/admin/volunteer-applications/{application.id}/delete"
        )

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/admin/volunteer-applications")
        [message] = _flashes(admin_client)
        assert message.startswith("Error deleting application: ")

    def test_detail_redirects_to_list_with_error(
        self, admin_client, db_session, application_factory
    ):
        application = application_factory()
        _drop_applications_table(db_session)

        response = admin_client.get(f"/admin/volunteer-applications/{application.id}")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/admin/volunteer-applications")
        [message] = _flashes(admin_client)
        assert message.startswith("Error loading application: ")

    def test_list_redirects_to_landing_with_error(self, admin_client, db_session):
        _drop_applications_table(db_session)

        response = admin_client.get("/admin/volunteer-applications")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/index")
        [message] = _flashes(admin_client)
        assert message.startswith("Error loading applications: ")

    def test_dashboard_redirects_to_landing_with_error(self, admin_client, db_session):
        _drop_applications_table(db_session)

        response = admin_client.get("/admin/dashboard")

        assert response.status_code == 302
        assert response.headers["Location"].endswith("/index")
        [message] = _flashes(admin_client)
        assert message.startswith("Error loading dashboard: ")
