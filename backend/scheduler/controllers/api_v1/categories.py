"""
Service categories API - /api/v1/categories
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
from scheduler.db.session import SessionLocal
from scheduler.repositories.category_repo import ServiceCategoryRepository
from scheduler.services.category_service import CategoryService

categories_bp = Blueprint("api_categories", __name__, url_prefix="/api/v1/categories")


def _get_category_service(db: Session) -> CategoryService:
    """Dependency injection factory for CategoryService."""
    return CategoryService(ServiceCategoryRepository(db))


@categories_bp.route("", methods=["GET"])
@api_auth_required
def index():
    with SessionLocal() as db:
        return api_index(_get_category_service(db))


@categories_bp.route("/<int:category_id>", methods=["GET"])
@api_auth_required
def show(category_id: int):
    with SessionLocal() as db:
        return api_show(_get_category_service(db), category_id)


@categories_bp.route("", methods=["POST"])
@api_auth_required
def store():
    with SessionLocal() as db:
        return api_store(_get_category_service(db))


@categories_bp.route("/<int:category_id>", methods=["PUT"])
@api_auth_required
def update(category_id: int):
    with SessionLocal() as db:
        return api_update(_get_category_service(db), category_id)


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
@api_auth_required
def destroy(category_id: int):
    with SessionLocal() as db:
        return api_destroy(_get_category_service(db), category_id)
