"""Appointment repository: appointments and provider unavailabilities.

Both live in the ``appointments`` table; each repository instance only sees
one of the two kinds.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from scheduler.db.base import Appointment as DbAppointment
from scheduler.domain.entities import Appointment as DomainAppointment
from scheduler.domain.interfaces import IRecordRepository
from scheduler.repositories.query_utils import (
    apply_order_by,
    apply_paging,
    apply_search,
    apply_where,
)

SEARCH_COLUMNS = ("notes", "location", "status")

_WRITABLE_FIELDS = (
    "book_datetime",
    "start_datetime",
    "end_datetime",
    "location",
    "notes",
    "hash",
    "color",
    "status",
    "id_users_provider",
    "id_users_customer",
    "id_services",
)

DEFAULT_ORDER = (("start_datetime", "asc"), ("id", "asc"))


def to_domain(db_appointment: DbAppointment) -> DomainAppointment:
    return DomainAppointment(
        id=db_appointment.id,
        is_unavailability=db_appointment.is_unavailability,
        **{name: getattr(db_appointment, name) for name in _WRITABLE_FIELDS},
    )


class AppointmentRepository(IRecordRepository):
    def __init__(self, db_session: Session, is_unavailability: bool = False) -> None:
        self.db = db_session
        self.is_unavailability = is_unavailability

    def _select(self, *columns):
        stmt = select(*columns) if columns else select(DbAppointment)
        return stmt.where(DbAppointment.is_unavailability == self.is_unavailability)

    def _get_row(self, record_id: int) -> Optional[DbAppointment]:
        return self.db.execute(
            self._select().where(DbAppointment.id == record_id)
        ).scalar_one_or_none()

    def exists(self, record_id: int) -> bool:
        return self._get_row(record_id) is not None

    def find(self, record_id: int) -> Optional[DomainAppointment]:
        db_appointment = self._get_row(record_id)
        return to_domain(db_appointment) if db_appointment else None

    def find_by_hash(self, appointment_hash: str) -> Optional[DomainAppointment]:
        db_appointment = self.db.execute(
            self._select().where(DbAppointment.hash == appointment_hash)
        ).scalar_one_or_none()
        return to_domain(db_appointment) if db_appointment else None

    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainAppointment]:
        stmt = apply_where(self._select(), DbAppointment, where)
        stmt = apply_order_by(stmt, DbAppointment, order_by, DEFAULT_ORDER)
        stmt = apply_paging(stmt, limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[DomainAppointment]:
        stmt = apply_search(self._select(), DbAppointment, SEARCH_COLUMNS, keyword)
        stmt = apply_order_by(stmt, DbAppointment, order_by, DEFAULT_ORDER)
        stmt = apply_paging(stmt, limit, offset)
        return [to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def count(self, keyword: Optional[str] = None) -> int:
        stmt = self._select(func.count(DbAppointment.id))
        if keyword:
            stmt = apply_search(stmt, DbAppointment, SEARCH_COLUMNS, keyword)
        return self.db.execute(stmt).scalar_one()

    def insert(self, appointment: DomainAppointment) -> int:
        db_appointment = DbAppointment(
            is_unavailability=self.is_unavailability,
            **{name: getattr(appointment, name) for name in _WRITABLE_FIELDS},
        )
        self.db.add(db_appointment)
        self.db.commit()
        self.db.refresh(db_appointment)
        return db_appointment.id

    def update(self, appointment: DomainAppointment) -> int:
        db_appointment = self._get_row(appointment.id)
        if db_appointment is None:
            raise ValueError(f"Appointment with ID {appointment.id} not found")

        for name in _WRITABLE_FIELDS:
            setattr(db_appointment, name, getattr(appointment, name))
        self.db.commit()
        return db_appointment.id

    def delete(self, record_id: int) -> bool:
        db_appointment = self._get_row(record_id)
        if db_appointment is None:
            return False
        self.db.delete(db_appointment)
        self.db.commit()
        return True
