"""
Services API - /api/v1/services
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
from scheduler.core.config import DB_SLUG_PROVIDER
from scheduler.db.session import SessionLocal
from scheduler.repositories.category_repo import ServiceCategoryRepository
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.service_catalog_service import ServiceCatalogService

services_bp = Blueprint("api_services", __name__, url_prefix="/api/v1/services")


def _get_service_catalog_service(db: Session) -> ServiceCatalogService:
    """Dependency injection factory for ServiceCatalogService."""
    return ServiceCatalogService(
        ServiceRepository(db),
        ServiceCategoryRepository(db),
        UserRepository(db, DB_SLUG_PROVIDER),
    )


@services_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_service_catalog_service(db))


@services_bp.route("/<int:service_id>", methods=["GET"])
@api_auth_required
def show(service_id: int):
    with SessionLocal() as db:
        return api_show(_get_service_catalog_service(db), service_id)


@services_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_service_catalog_service(db))


@services_bp.route("/<int:service_id>", methods=["PUT"])
@api_auth_required
def update(service_id: int):
    with SessionLocal() as db:
        return api_update(_get_service_catalog_service(db), service_id)


@services_bp.route("/<int:service_id>", methods=["DELETE"])
@api_auth_required
def destroy(service_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_service_catalog_service(db), service_id)
