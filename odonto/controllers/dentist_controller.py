"""
Dentist controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on DentistService for validation and persistence
- Answers 404 for unknown dentist ids, except on the delete step where an
  already-missing dentist is simply ignored
- Turns database failures into an error flash: a failed save re-renders the
  form with status 500, a failed read redirects to the dentist list (or to
  the landing page when the list itself cannot be loaded)
"""

import logging

from flask import (
    Blueprint,
    abort,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import login_required

from odonto.core.auth_decorators import LANDING_ENDPOINT, require_operation
from odonto.core.exceptions import NotFoundError, PersistenceError, ValidationFailedError
from odonto.core.limiter_config import limiter
from odonto.db.session import SessionLocal
from odonto.domain.permissions import Operation
from odonto.repositories.dentist_repo import DentistRepository
from odonto.repositories.work_schedule_repo import WorkScheduleRepository
from odonto.services.dentist_service import FORM_FIELDS, DentistService

logger = logging.getLogger(__name__)

dentist_bp = Blueprint("dentists", __name__, url_prefix="/dentists")

DENTISTS_DENIED = "Access denied. Only administrators can manage dentists."


def _service(db) -> DentistService:
    return DentistService(DentistRepository(db), WorkScheduleRepository(db))


def _submitted_data() -> dict:
    data = {name: request.form.get(name, "") for name in FORM_FIELDS}
    data["schedule_id"] = request.form.get("schedule_id", "")
    data["slots"] = request.form.getlist("slots")
    return data


def _render_form(form, dentist=None, status_code: int = 200):
    return (
        render_template("dentists/form.html", form=form, dentist=dentist),
        status_code,
    )


def _load_failed(error: PersistenceError, endpoint: str = "dentists.index"):
    flash(error.message, "error")
    return redirect(url_for(endpoint))


@dentist_bp.route("/", methods=["GET"])
@login_required
@require_operation(Operation.MANAGE_DENTISTS, DENTISTS_DENIED)
def index():
    db = SessionLocal()
    try:
        dentists = _service(db).list_dentists()
        return render_template("dentists/index.html", dentists=dentists)
    except PersistenceError as e:
        return _load_failed(e, LANDING_ENDPOINT)
    finally:
        db.close()


@dentist_bp.route("/create", methods=["GET", "POST"])
@limiter.limit("30 per minute", methods=["POST"])
@login_required
@require_operation(Operation.MANAGE_DENTISTS, DENTISTS_DENIED)
def create():
    db = SessionLocal()
    try:
        service = _service(db)
        if request.method == "GET":
            return _render_form(service.blank_form())

        data = _submitted_data()
        try:
            dentist = service.create_dentist(data)
        except ValidationFailedError as e:
            return _render_form(service.form_for_resubmission(data, e.errors), None, 400)
        except PersistenceError as e:
            return _render_form(
                service.form_for_resubmission(data, [e.message]), None, 500
            )

        flash(f"Dentist {dentist.name} created successfully.", "success")
        return redirect(url_for("dentists.index"))
    except PersistenceError as e:
        return _load_failed(e)
    finally:
        db.close()


@dentist_bp.route("/<int:dentist_id>/edit", methods=["GET", "POST"])
@limiter.limit("30 per minute", methods=["POST"])
@login_required
@require_operation(Operation.MANAGE_DENTISTS, DENTISTS_DENIED)
def edit(dentist_id: int):
    db = SessionLocal()
    try:
        service = _service(db)
        try:
            dentist = service.get_dentist(dentist_id)
        except NotFoundError:
            abort(404)

        if request.method == "GET":
            return _render_form(service.form_for(dentist), dentist)

        data = _submitted_data()
        try:
            updated = service.update_dentist(dentist_id, data)
        except NotFoundError:
            abort(404)
        except ValidationFailedError as e:
            return _render_form(
                service.form_for_resubmission(data, e.errors), dentist, 400
            )
        except PersistenceError as e:
            return _render_form(
                service.form_for_resubmission(data, [e.message]), dentist, 500
            )

        flash(f"Dentist {updated.name} updated successfully.", "success")
        return redirect(url_for("dentists.index"))
    except PersistenceError as e:
        return _load_failed(e)
    finally:
        db.close()


@dentist_bp.route("/<int:dentist_id>/delete", methods=["GET", "POST"])
@limiter.limit("30 per minute", methods=["POST"])
@login_required
@require_operation(Operation.MANAGE_DENTISTS, DENTISTS_DENIED)
def delete(dentist_id: int):
    """GET shows the confirmation page; POST deletes."""
    db = SessionLocal()
    try:
        service = _service(db)
        if request.method == "GET":
            try:
                dentist = service.get_dentist(dentist_id)
            except NotFoundError:
                abort(404)
            return render_template("dentists/delete.html", dentist=dentist)

        if service.delete_dentist(dentist_id):
            flash("Dentist deleted successfully.", "success")
        return redirect(url_for("dentists.index"))
    except PersistenceError as e:
        return _load_failed(e)
    finally:
        db.close()


@dentist_bp.route("/<int:dentist_id>", methods=["GET"])
@login_required
@require_operation(Operation.MANAGE_DENTISTS, DENTISTS_DENIED)
def details(dentist_id: int):
    db = SessionLocal()
    try:
        try:
            dentist = _service(db).get_dentist(dentist_id)
        except NotFoundError:
            abort(404)
        return render_template("dentists/details.html", dentist=dentist)
    except PersistenceError as e:
        return _load_failed(e)
    finally:
        db.close()
