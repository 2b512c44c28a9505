"""Service category repository."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from scheduler.db.base import Service as DbService
from scheduler.db.base import ServiceCategory as DbServiceCategory
from scheduler.domain.entities import ServiceCategory as DomainServiceCategory
from scheduler.domain.interfaces import IRecordRepository
from scheduler.repositories.query_utils import (
    apply_order_by,
    apply_paging,
    apply_search,
    apply_where,
)

SEARCH_COLUMNS = ("name", "description")


def to_domain(db_category: DbServiceCategory) -> DomainServiceCategory:
    return DomainServiceCategory(
        id=db_category.id,
        name=db_category.name,
        description=db_category.description,
    )


class ServiceCategoryRepository(IRecordRepository):
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def exists(self, record_id: int) -> bool:
        return self.db.get(DbServiceCategory, record_id) is not None

    def find(self, record_id: int) -> Optional[DomainServiceCategory]:
        db_category = self.db.get(DbServiceCategory, record_id)
        return to_domain(db_category) if db_category else None

    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainServiceCategory]:
        stmt = apply_where(select(DbServiceCategory), DbServiceCategory, where)
        stmt = apply_order_by(stmt, DbServiceCategory, order_by)
        stmt = apply_paging(stmt, limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainServiceCategory]:
        stmt = apply_search(
            select(DbServiceCategory), DbServiceCategory, SEARCH_COLUMNS, keyword
        )
        stmt = apply_order_by(stmt, DbServiceCategory, order_by)
        stmt = apply_paging(stmt, limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def count(self, keyword: Optional[str] = None) -> int:
        stmt = select(func.count(DbServiceCategory.id))
        if keyword:
            stmt = apply_search(stmt, DbServiceCategory, SEARCH_COLUMNS, keyword)
        return self.db.execute(stmt).scalar_one()

    def insert(self, category: DomainServiceCategory) -> int:
        db_category = DbServiceCategory(
            name=category.name, description=category.description
        )
        self.db.add(db_category)
        self.db.commit()
        self.db.refresh(db_category)
        return db_category.id

    def update(self, category: DomainServiceCategory) -> int:
        db_category = self.db.get(DbServiceCategory, category.id)
        if db_category is None:
            raise ValueError(f"Service category with ID {category.id} not found")

        db_category.name = category.name
        db_category.description = category.description
        self.db.commit()
        return db_category.id

    def delete(self, record_id: int) -> bool:
        """Delete a category; its services become uncategorized."""
        db_category = self.db.get(DbServiceCategory, record_id)
        if db_category is None:
            return False

        self.db.execute(
            update(DbService)
            .where(DbService.id_service_categories == record_id)
            .values(id_service_categories=None)
        )
        self.db.delete(db_category)
        self.db.commit()
        return True
