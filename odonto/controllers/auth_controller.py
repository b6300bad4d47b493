import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import login_required, login_user, logout_user

from odonto.core.limiter_config import limiter
from odonto.db.session import SessionLocal
from odonto.repositories.user_repo import UserRepository
from odonto.services.user_service import UserService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute;20 per hour")
def local_login():
    """Local email/password login.

    Expected form fields: email, password (and the CSRF token).
    On failure the login page is rendered again with HTTP 401.
    """
    email = request.form.get("email", "")
    password = request.form.get("password", "")

    db = SessionLocal()
    try:
        repo = UserRepository(db)
        service = UserService(repo)

        user = service.authenticate_local(email, password)
        db_user = repo.get_db_by_id(user.id) if user else None
        if db_user is None:
            flash("Invalid email or password.", "error")
            return render_template("login.html", email=email), 401

        login_user(db_user)
        logger.info(
            "User logged in",
            extra={"context": {"user_id": db_user.id, "role": db_user.role}},
        )
        return redirect(url_for("index"))
    finally:
        db.close()


@auth_bp.route("/logout", methods=["GET"])
@login_required
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for("login_page"))
