"""
Appointments API - /api/v1/appointments

Besides the usual filters, the collection accepts ``providerId``,
``customerId`` and ``serviceId`` query parameters to narrow the result.
"""

from flask import Blueprint, request
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

appointments_bp = Blueprint(
    "api_appointments", __name__, url_prefix="/api/v1/appointments"
)

FILTER_PARAMS = {
    "providerId": "id_users_provider",
    "customerId": "id_users_customer",
    "serviceId": "id_services",
}


def _get_appointment_service(db: Session) -> AppointmentService:
    """Dependency injection factory for AppointmentService."""
    return AppointmentService(
        AppointmentRepository(db),
        UserRepository(db, DB_SLUG_PROVIDER),
        UserRepository(db, DB_SLUG_CUSTOMER),
        ServiceRepository(db),
    )


def _request_filters() -> dict:
    where = {}
    for param, column in FILTER_PARAMS.items():
        value = request.args.get(param, type=int)
        if value is not None:
            where[column] = value
    return where


@appointments_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_appointment_service(db), where=_request_filters())


@appointments_bp.route("/<int:appointment_id>", methods=["GET"])
@api_auth_required
def show(appointment_id: int):
    with SessionLocal() as db:
        return api_show(_get_appointment_service(db), appointment_id)


@appointments_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_appointment_service(db))


@appointments_bp.route("/<int:appointment_id>", methods=["PUT"])
@api_auth_required
def update(appointment_id: int):
    with SessionLocal() as db:
        return api_update(_get_appointment_service(db), appointment_id)


@appointments_bp.route("/<int:appointment_id>", methods=["DELETE"])
@api_auth_required
def destroy(appointment_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_appointment_service(db), appointment_id)
