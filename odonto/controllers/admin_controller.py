"""
Admin controller - dashboard and volunteer application review.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Delegates business rules to DashboardService and VolunteerService
- Checks the caller's role before touching any data
"""

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import login_required

from odonto.core.api_utils import api_response
from odonto.core.auth_decorators import (
    LANDING_ENDPOINT,
    require_operation,
    require_operation_json,
)
from odonto.core.exceptions import NotFoundError, PersistenceError
from odonto.core.limiter_config import limiter
from odonto.core.logging_config import timed
from odonto.db.session import SessionLocal
from odonto.domain.permissions import Operation
from odonto.repositories.dashboard_repo import DashboardRepository
from odonto.repositories.volunteer_repo import VolunteerApplicationRepository
from odonto.services.dashboard_service import DashboardService
from odonto.services.volunteer_service import NOT_FOUND_MESSAGE, VolunteerService

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

VOLUNTEERS_DENIED = (
    "Access denied. Only administrators can manage volunteer applications."
)


def _volunteer_service(db) -> VolunteerService:
    return VolunteerService(VolunteerApplicationRepository(db))


@admin_bp.route("/dashboard", methods=["GET"])
@login_required
@require_operation(Operation.VIEW_DASHBOARD)
def dashboard():
    db = SessionLocal()
    try:
        try:
            with timed("dashboard_counts"):
                counts = DashboardService(DashboardRepository(db)).get_counts()
        except PersistenceError as e:
            flash(f"Error loading dashboard: {e.message}", "error")
            return redirect(url_for(LANDING_ENDPOINT))
        return render_template("admin/dashboard.html", counts=counts)
    finally:
        db.close()


@admin_bp.route("/volunteer-applications", methods=["GET"])
@login_required
@require_operation(Operation.REVIEW_VOLUNTEERS, VOLUNTEERS_DENIED)
def volunteer_applications():
    """List applications; `filtro` is one of all, pending, approved, rejected, unseen."""
    db = SessionLocal()
    try:
        try:
            result = _volunteer_service(db).list_applications(
                request.args.get("filtro")
            )
        except PersistenceError as e:
            flash(f"Error loading applications: {e.message}", "error")
            return redirect(url_for(LANDING_ENDPOINT))
        return render_template("admin/volunteer_applications.html", result=result)
    finally:
        db.close()


@admin_bp.route("/volunteer-applications/<int:application_id>", methods=["GET"])
@login_required
@require_operation(Operation.REVIEW_VOLUNTEERS, VOLUNTEERS_DENIED)
def volunteer_application_detail(application_id: int):
    db = SessionLocal()
    try:
        application = _volunteer_service(db).view_detail(application_id)
        return render_template(
            "admin/volunteer_application_detail.html", application=application
        )
    except NotFoundError:
        flash(NOT_FOUND_MESSAGE, "error")
        return redirect(url_for("admin.volunteer_applications"))
    except PersistenceError as e:
        flash(f"Error loading application: {e.message}", "error")
        return redirect(url_for("admin.volunteer_applications"))
    finally:
        db.close()


@admin_bp.route(
    "/volunteer-applications/<int:application_id>/approve", methods=["POST"]
)
@limiter.limit("30 per minute")
@login_required
@require_operation_json(Operation.REVIEW_VOLUNTEERS)
def approve_volunteer_application(application_id: int):
    db = SessionLocal()
    try:
        result = _volunteer_service(db).approve(
            application_id, request.form.get("note")
        )
        return api_response(
            result.success, result.message, status_code=result.status_code
        )
    finally:
        db.close()


@admin_bp.route(
    "/volunteer-applications/<int:application_id>/reject", methods=["POST"]
)
@limiter.limit("30 per minute")
@login_required
@require_operation_json(Operation.REVIEW_VOLUNTEERS)
def reject_volunteer_application(application_id: int):
    db = SessionLocal()
    try:
        result = _volunteer_service(db).reject(
            application_id, request.form.get("note")
        )
        return api_response(
            result.success, result.message, status_code=result.status_code
        )
    finally:
        db.close()


@admin_bp.route(
    "/volunteer-applications/<int:application_id>/delete", methods=["POST"]
)
@limiter.limit("30 per minute")
@login_required
@require_operation(Operation.REVIEW_VOLUNTEERS, VOLUNTEERS_DENIED)
def delete_volunteer_application(application_id: int):
    db = SessionLocal()
    try:
        result = _volunteer_service(db).delete(application_id)
        flash(result.message, result.category)
        return redirect(url_for("admin.volunteer_applications"))
    finally:
        db.close()
