"""
Customers API - /api/v1/customers
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
from scheduler.core.config import DB_SLUG_CUSTOMER
from scheduler.db.session import SessionLocal
from scheduler.repositories.appointment_repo import AppointmentRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.customer_service import CustomerService

customers_bp = Blueprint("api_customers", __name__, url_prefix="/api/v1/customers")


def _get_customer_service(db: Session) -> CustomerService:
    """Dependency injection factory for CustomerService."""
    return CustomerService(
        UserRepository(db, DB_SLUG_CUSTOMER), AppointmentRepository(db)
    )


@customers_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_customer_service(db))


@customers_bp.route("/<int:customer_id>", methods=["GET"])
@api_auth_required
def show(customer_id: int):
    with SessionLocal() as db:
        return api_show(_get_customer_service(db), customer_id)


@customers_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_customer_service(db))


@customers_bp.route("/<int:customer_id>", methods=["PUT"])
@api_auth_required
def update(customer_id: int):
    with SessionLocal() as db:
        return api_update(_get_customer_service(db), customer_id)


@customers_bp.route("/<int:customer_id>", methods=["DELETE"])
@api_auth_required
def destroy(customer_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_customer_service(db), customer_id)
