"""
Secretaries API - /api/v1/secretaries
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
from scheduler.core.config import DB_SLUG_PROVIDER, DB_SLUG_SECRETARY
from scheduler.db.session import SessionLocal
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.secretary_service import SecretaryService

secretaries_bp = Blueprint(
    "api_secretaries", __name__, url_prefix="/api/v1/secretaries"
)


def _get_secretary_service(db: Session) -> SecretaryService:
    """Dependency injection factory for SecretaryService."""
    return SecretaryService(
        UserRepository(db, DB_SLUG_SECRETARY), UserRepository(db, DB_SLUG_PROVIDER)
    )


@secretaries_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_secretary_service(db))


@secretaries_bp.route("/<int:secretary_id>", methods=["GET"])
@api_auth_required
def show(secretary_id: int):
    with SessionLocal() as db:
        return api_show(_get_secretary_service(db), secretary_id)


@secretaries_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_secretary_service(db))


@secretaries_bp.route("/<int:secretary_id>", methods=["PUT"])
@api_auth_required
def update(secretary_id: int):
    with SessionLocal() as db:
        return api_update(_get_secretary_service(db), secretary_id)


@secretaries_bp.route("/<int:secretary_id>", methods=["DELETE"])
@api_auth_required
def destroy(secretary_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_secretary_service(db), secretary_id)
