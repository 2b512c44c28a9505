"""
Admins API - /api/v1/admins
"""

from flask import Blueprint
from sqlalchemy.orm import Session

from scheduler.controllers.api_v1.helpers import (
    api_destroy,
    api_index,
    api_show,
    api_store,
    api_update,
)
from scheduler.core.auth_decorators import api_auth_required
from scheduler.core.config import DB_SLUG_ADMIN
from scheduler.db.session import SessionLocal
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.admin_service import AdminService

admins_bp = Blueprint("api_admins", __name__, url_prefix="/api/v1/admins")


def _get_admin_service(db: Session) -> AdminService:
    """Dependency injection factory for AdminService."""
    return AdminService(UserRepository(db, DB_SLUG_ADMIN))


@admins_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_admin_service(db))


@admins_bp.route("/<int:admin_id>", methods=["GET"])
@api_auth_required
def show(admin_id: int):
    with SessionLocal() as db:
        return api_show(_get_admin_service(db), admin_id)


@admins_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_admin_service(db))


@admins_bp.route("/<int:admin_id>", methods=["PUT"])
@api_auth_required
def update(admin_id: int):
    with SessionLocal() as db:
        return api_update(_get_admin_service(db), admin_id)


@admins_bp.route("/<int:admin_id>", methods=["DELETE"])
@api_auth_required
def destroy(admin_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_admin_service(db), admin_id)
