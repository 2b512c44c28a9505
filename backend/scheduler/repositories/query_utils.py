"""Statement helpers shared by the repositories (filters, search, sort, paging)."""

from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from sqlalchemy import Select, asc, desc, or_

from scheduler.core.validation import ValidationError


def _column(model, name: str, purpose: str):
    columns = model.__table__.columns
    if name not in columns:
        raise ValidationError(f"Invalid {purpose} field provided: {name}", name)
    return getattr(model, name)


def apply_where(stmt: Select, model, where: Optional[Dict[str, Any]]) -> Select:
    """Add equality filters; keys must be columns of ``model``."""
    for name, value in (where or {}).items():
        stmt = stmt.where(_column(model, name, "filter") == value)
    return stmt


def _escape_like(keyword: str) -> str:
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(stmt: Select, model, columns: Iterable[str], keyword: str) -> Select:
    """Match rows where any of ``columns`` contains ``keyword`` literally."""
    pattern = f"%{_escape_like(keyword.strip())}%"
    return stmt.where(
        or_(
            *(
                getattr(model, name).ilike(pattern, escape="\\")
                for name in columns
            )
        )
    )


def apply_order_by(
    stmt: Select,
    model,
    order_by: Optional[Sequence[Tuple[str, str]]],
    default: Sequence[Tuple[str, str]] = (("id", "asc"),),
) -> Select:
    """Sort by ``(column, direction)`` pairs; unknown columns raise ValidationError."""
    for name, direction in order_by or default:
        column = _column(model, name, "sort")
        stmt = stmt.order_by(desc(column) if direction.lower() == "desc" else asc(column))
    return stmt


def apply_paging(stmt: Select, limit: Optional[int], offset: Optional[int]) -> Select:
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)
    return stmt
