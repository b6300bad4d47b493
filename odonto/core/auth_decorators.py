"""
Authorization helpers for this application.

Authentication is a Flask-Login session (local email/password login). The
role stored on the logged-in user is the claim every protected action
checks before doing anything else.

DECORATOR GUIDE:
- @login_required: pages that only need a logged-in user (landing page, dashboard)
- @require_operation(operation, message): HTML actions; a refused caller is
  redirected to the landing page with `message` flashed as an error
- @require_operation_json(operation): AJAX actions; a refused caller receives
  {"success": false, "message": "Access denied"} and nothing is changed

Examples:
    @dentist_bp.route("/")
    @login_required
    @require_operation(
        Operation.MANAGE_DENTISTS,
        "Access denied. Only administrators can manage dentists.",
    )
    def index():
        ...

    @admin_bp.route("/volunteer-applications/<int:application_id>/approve", methods=["POST"])
    @login_required
    @require_operation_json(Operation.REVIEW_VOLUNTEERS)
    def approve(application_id):
        ...
"""

import logging
from functools import wraps

from flask import flash, g, redirect, request, url_for
from flask_login import current_user

from odonto.core.api_utils import access_denied_response
from odonto.domain.permissions import Operation, SessionContext, authorize

logger = logging.getLogger(__name__)

LANDING_ENDPOINT = "index"


def get_session_context() -> SessionContext:
    """Return the caller's SessionContext, cached on `g` for the request."""
    context = g.get("session_context")
    if context is None:
        context = SessionContext.from_user(current_user)
        g.session_context = context
    return context


def _log_denied(context: SessionContext, operation: Operation) -> None:
    logger.warning(
        "Access denied",
        extra={
            "context": {
                "user_id": context.user_id,
                "role": context.role.value if context.role else None,
                "operation": operation.value,
                "path": request.path,
            }
        },
    )


def require_operation(operation: Operation, denied_message: str = "Access denied."):
    """Guard an HTML action: redirect to the landing page when not allowed."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            context = get_session_context()
            if not authorize(context.role, operation):
                _log_denied(context, operation)
                flash(denied_message, "error")
                return redirect(url_for(LANDING_ENDPOINT))
            return f(*args, **kwargs)

        return decorated_function

    return decorator


def require_operation_json(operation: Operation):
    """Guard a JSON action: return the access-denied payload when not allowed."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            context = get_session_context()
            if not authorize(context.role, operation):
                _log_denied(context, operation)
                return access_denied_response()
            return f(*args, **kwargs)

        return decorated_function

    return decorator
