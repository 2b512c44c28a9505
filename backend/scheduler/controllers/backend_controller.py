"""
Backend controller - staff pages rendered with Jinja templates.

Every list page accepts ``q`` (keyword search) and ``page`` (1-based) query
parameters and shows DEFAULT_PAGE_LENGTH records per page.
"""

import logging
import math
from typing import Any, Dict, List, Sequence, Tuple

from flask import Blueprint, render_template, request
from flask_login import current_user
from sqlalchemy.orm import Session

from scheduler.core import config
from scheduler.core.auth_decorators import role_required
from scheduler.core.config import (
    DB_SLUG_ADMIN,
    DB_SLUG_CUSTOMER,
    DB_SLUG_PROVIDER,
    DB_SLUG_SECRETARY,
)
from scheduler.db.session import SessionLocal
from scheduler.repositories.appointment_repo import AppointmentRepository
from scheduler.repositories.category_repo import ServiceCategoryRepository
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.category_service import CategoryService
from scheduler.services.customer_service import CustomerService
from scheduler.services.entity_service import EntityService
from scheduler.services.provider_service import ProviderService
from scheduler.services.secretary_service import SecretaryService
from scheduler.services.service_catalog_service import ServiceCatalogService

logger = logging.getLogger(__name__)

backend_bp = Blueprint("backend", __name__, url_prefix="/backend")

STAFF_ROLES = (DB_SLUG_ADMIN, DB_SLUG_PROVIDER, DB_SLUG_SECRETARY)

USER_COLUMNS = (("Name", "name"), ("Email", "email"), ("Phone", "phone_number"))


def _get_provider_service(db: Session) -> ProviderService:
    return ProviderService(UserRepository(db, DB_SLUG_PROVIDER), ServiceRepository(db))


def _get_secretary_service(db: Session) -> SecretaryService:
    return SecretaryService(
        UserRepository(db, DB_SLUG_SECRETARY), UserRepository(db, DB_SLUG_PROVIDER)
    )


def _get_customer_service(db: Session) -> CustomerService:
    return CustomerService(
        UserRepository(db, DB_SLUG_CUSTOMER), AppointmentRepository(db)
    )


def _get_service_catalog_service(db: Session) -> ServiceCatalogService:
    return ServiceCatalogService(
        ServiceRepository(db),
        ServiceCategoryRepository(db),
        UserRepository(db, DB_SLUG_PROVIDER),
    )


def _get_category_service(db: Session) -> CategoryService:
    return CategoryService(ServiceCategoryRepository(db))


def _page_arg() -> int:
    page = request.args.get("page", 1, type=int)
    return page if page and page > 0 else 1


def _list_page(
    title: str,
    endpoint: str,
    service: EntityService,
    columns: Sequence[Tuple[str, str]],
    show_contact: bool = False,
):
    """Search and page ``service`` records and render the shared list template."""
    keyword = request.args.get("q", "").strip() or None
    page = _page_arg()
    length = config.DEFAULT_PAGE_LENGTH
    offset = (page - 1) * length

    if keyword:
        records: List[Dict[str, Any]] = service.search(keyword, length, offset)
    else:
        records = service.get(None, length, offset)
    total = service.count(keyword)

    logger.debug(
        "Backend list rendered",
        extra={
            "context": {
                "page_name": endpoint,
                "keyword": keyword,
                "page": page,
                "total": total,
            }
        },
    )

    return render_template(
        "backend/list.html",
        title=title,
        endpoint=endpoint,
        records=records,
        columns=columns,
        show_contact=show_contact,
        keyword=keyword or "",
        page=page,
        total=total,
        total_pages=max(1, math.ceil(total / length)),
    )


@backend_bp.route("", methods=["GET"])
@role_required(*STAFF_ROLES)
def index():
    with SessionLocal() as db:
        counts = {}
        if current_user.role_slug == DB_SLUG_ADMIN:
            counts["Providers"] = _get_provider_service(db).count()
            counts["Secretaries"] = _get_secretary_service(db).count()
            counts["Services"] = _get_service_catalog_service(db).count()
            counts["Categories"] = _get_category_service(db).count()
        counts["Customers"] = _get_customer_service(db).count()
        counts["Appointments"] = AppointmentRepository(db).count()

    return render_template("backend/index.html", user=current_user, counts=counts)


@backend_bp.route("/providers", methods=["GET"])
@role_required(DB_SLUG_ADMIN)
def providers():
    with SessionLocal() as db:
        return _list_page(
            "Providers",
            "backend.providers",
            _get_provider_service(db),
            USER_COLUMNS,
            show_contact=True,
        )


@backend_bp.route("/secretaries", methods=["GET"])
@role_required(DB_SLUG_ADMIN)
def secretaries():
    with SessionLocal() as db:
        return _list_page(
            "Secretaries",
            "backend.secretaries",
            _get_secretary_service(db),
            USER_COLUMNS,
            show_contact=True,
        )


@backend_bp.route("/customers", methods=["GET"])
@role_required(*STAFF_ROLES)
def customers():
    with SessionLocal() as db:
        return _list_page(
            "Customers",
            "backend.customers",
            _get_customer_service(db),
            USER_COLUMNS,
            show_contact=True,
        )


@backend_bp.route("/services", methods=["GET"])
@role_required(DB_SLUG_ADMIN)
def services():
    with SessionLocal() as db:
        return _list_page(
            "Services",
            "backend.services",
            _get_service_catalog_service(db),
            (
                ("Name", "name"),
                ("Duration (min)", "duration"),
                ("Price", "price"),
                ("Currency", "currency"),
                ("Type", "availabilities_type"),
            ),
        )


@backend_bp.route("/categories", methods=["GET"])
@role_required(DB_SLUG_ADMIN)
def categories():
    with SessionLocal() as db:
        return _list_page(
            "Categories",
            "backend.categories",
            _get_category_service(db),
            (("Name", "name"), ("Description", "description")),
        )
