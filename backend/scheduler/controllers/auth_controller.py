"""
Auth controller - backend login/logout with Flask-Login sessions.

Admins, providers and secretaries sign in with their username and password;
customers have no login.
"""

import logging
from typing import Optional

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy.orm import Session

from scheduler.core.config import DB_SLUG_ADMIN, DB_SLUG_PROVIDER, DB_SLUG_SECRETARY
from scheduler.core.limiter_config import limiter
from scheduler.db.base import User
from scheduler.db.session import SessionLocal
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.auth_service import AuthService
from scheduler.utils.setting_helper import setting

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

STAFF_ROLES = (DB_SLUG_ADMIN, DB_SLUG_PROVIDER, DB_SLUG_SECRETARY)


def _get_auth_service(db: Session) -> AuthService:
    """Dependency injection factory for AuthService."""
    return AuthService(UserRepository(db, DB_SLUG_ADMIN))


def _safe_destination(url: Optional[str]) -> Optional[str]:
    """Only same-site relative paths are followed after login."""
    if url and url.startswith("/") and not url.startswith("//"):
        return url
    return None


@auth_bp.route("/login", methods=["GET"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("backend.index"))

    destination = _safe_destination(request.args.get("next"))
    if destination:
        setting({"dest_url": destination})
    return render_template("login.html")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute;20 per hour")
def login_submit():
    username = request.form.get("username", "").strip()
    password = request.form.get("password", "")

    with SessionLocal() as db:
        user_data = _get_auth_service(db).authenticate(username, password)
        user = None
        if user_data is not None and user_data["role"] in STAFF_ROLES:
            user = db.get(User, user_data["user_id"])

    if user is None:
        flash("Invalid username or password.", category="error")
        return render_template("login.html", username=username), 401

    login_user(user)
    logger.info(
        "Backend login",
        extra={"context": {"user_id": user.id, "role": user_data["role"]}},
    )

    destination = _safe_destination(setting("dest_url"))
    setting({"dest_url": None})
    return redirect(destination or url_for("backend.index"))


@auth_bp.route("/logout", methods=["GET", "POST"])
@login_required
def logout():
    logger.info("Backend logout", extra={"context": {"user_id": current_user.id}})
    logout_user()
    flash("You have been logged out.", category="info")
    return redirect(url_for("auth.login"))
