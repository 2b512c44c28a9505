"""
Unavailabilities API - /api/v1/unavailabilities

Unavailabilities are appointment rows flagged as blocked provider time;
they never reference a customer or a service.
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
from scheduler.core.config import DB_SLUG_CUSTOMER, DB_SLUG_PROVIDER
from scheduler.db.session import SessionLocal
from scheduler.repositories.appointment_repo import AppointmentRepository
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.appointment_service import AppointmentService

unavailabilities_bp = Blueprint(
    "api_unavailabilities", __name__, url_prefix="/api/v1/unavailabilities"
)


def _get_unavailability_service(db: Session) -> AppointmentService:
    """Dependency injection factory for the unavailability flavour of AppointmentService."""
    return AppointmentService(
        AppointmentRepository(db, is_unavailability=True),
        UserRepository(db, DB_SLUG_PROVIDER),
        UserRepository(db, DB_SLUG_CUSTOMER),
        ServiceRepository(db),
    )


@unavailabilities_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_unavailability_service(db))


@unavailabilities_bp.route("/<int:unavailability_id>", methods=["GET"])
@api_auth_required
def show(unavailability_id: int):
    with SessionLocal() as db:
        return api_show(_get_unavailability_service(db), unavailability_id)


@unavailabilities_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_unavailability_service(db))


@unavailabilities_bp.route("/<int:unavailability_id>", methods=["PUT"])
@api_auth_required
def update(unavailability_id: int):
    with SessionLocal() as db:
        return api_update(_get_unavailability_service(db), unavailability_id)


@unavailabilities_bp.route("/<int:unavailability_id>", methods=["DELETE"])
@api_auth_required
def destroy(unavailability_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_unavailability_service(db), unavailability_id)
