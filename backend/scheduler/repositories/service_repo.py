"""Service repository: persistence of bookable services."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from scheduler.db.base import Appointment as DbAppointment
from scheduler.db.base import Service as DbService
from scheduler.db.base import services_providers
from scheduler.domain.entities import Service as DomainService
from scheduler.domain.interfaces import IRecordRepository
from scheduler.repositories.query_utils import (
    apply_order_by,
    apply_paging,
    apply_search,
    apply_where,
)

SEARCH_COLUMNS = ("name", "description", "location", "currency")

_WRITABLE_FIELDS = (
    "name",
    "duration",
    "price",
    "currency",
    "description",
    "location",
    "color",
    "availabilities_type",
    "attendants_number",
    "is_private",
    "id_service_categories",
)


def to_domain(db_service: DbService) -> DomainService:
    """Convert DB model to domain entity."""
    return DomainService(
        id=db_service.id,
        name=db_service.name,
        duration=db_service.duration,
        price=db_service.price,
        currency=db_service.currency,
        description=db_service.description,
        location=db_service.location,
        color=db_service.color,
        availabilities_type=db_service.availabilities_type,
        attendants_number=db_service.attendants_number,
        is_private=db_service.is_private,
        id_service_categories=db_service.id_service_categories,
    )


class ServiceRepository(IRecordRepository):
    """Repository for Service persistence operations."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def exists(self, record_id: int) -> bool:
        return self.db.get(DbService, record_id) is not None

    def find(self, record_id: int) -> Optional[DomainService]:
        db_service = self.db.get(DbService, record_id)
        return to_domain(db_service) if db_service else None

    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainService]:
        stmt = apply_where(select(DbService), DbService, where)
        stmt = apply_paging(apply_order_by(stmt, DbService, order_by), limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainService]:
        stmt = apply_search(select(DbService), DbService, SEARCH_COLUMNS, keyword)
        stmt = apply_paging(apply_order_by(stmt, DbService, order_by), limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def count(self, keyword: Optional[str] = None) -> int:
        stmt = select(func.count(DbService.id))
        if keyword:
            stmt = apply_search(stmt, DbService, SEARCH_COLUMNS, keyword)
        return self.db.execute(stmt).scalar_one()

    def insert(self, service: DomainService) -> int:
        db_service = DbService(
            **{name: getattr(service, name) for name in _WRITABLE_FIELDS}
        )
        self.db.add(db_service)
        self.db.commit()
        self.db.refresh(db_service)
        return db_service.id

    def update(self, service: DomainService) -> int:
        if not service.id:
            raise ValueError("Service ID is required for update")

        db_service = self.db.get(DbService, service.id)
        if db_service is None:
            raise ValueError(f"Service with ID {service.id} not found")

        for name in _WRITABLE_FIELDS:
            setattr(db_service, name, getattr(service, name))
        self.db.commit()
        return db_service.id

    def delete(self, record_id: int) -> bool:
        db_service = self.db.get(DbService, record_id)
        if db_service is None:
            return False

        self.db.execute(
            delete(services_providers).where(
                services_providers.c.id_services == record_id
            )
        )
        self.db.execute(
            delete(DbAppointment).where(DbAppointment.id_services == record_id)
        )
        self.db.delete(db_service)
        self.db.commit()
        return True

    def get_provider_ids(self, service_id: int) -> List[int]:
        stmt = (
            select(services_providers.c.id_users)
            .where(services_providers.c.id_services == service_id)
            .order_by(services_providers.c.id_users)
        )
        return list(self.db.execute(stmt).scalars().all())
