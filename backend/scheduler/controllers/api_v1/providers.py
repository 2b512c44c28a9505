"""
Providers API - /api/v1/providers

Providers carry login settings (username, password, working plan) and the
``services`` they offer, given as a list of service ids.
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
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.provider_service import ProviderService

providers_bp = Blueprint("api_providers", __name__, url_prefix="/api/v1/providers")


def _get_provider_service(db: Session) -> ProviderService:
    """Dependency injection factory for ProviderService."""
    return ProviderService(UserRepository(db, DB_SLUG_PROVIDER), ServiceRepository(db))


@providers_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_provider_service(db))


@providers_bp.route("/<int:provider_id>", methods=["GET"])
@api_auth_required
def show(provider_id: int):
    with SessionLocal() as db:
        return api_show(_get_provider_service(db), provider_id)


@providers_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_provider_service(db))


@providers_bp.route("/<int:provider_id>", methods=["PUT"])
@api_auth_required
def update(provider_id: int):
    with SessionLocal() as db:
        return api_update(_get_provider_service(db), provider_id)


@providers_bp.route("/<int:provider_id>", methods=["DELETE"])
@api_auth_required
def destroy(provider_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_provider_service(db), provider_id)
