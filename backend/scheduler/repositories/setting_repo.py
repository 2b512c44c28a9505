"""Setting repository: system-wide key/value pairs."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from scheduler.db.base import Setting as DbSetting
from scheduler.domain.entities import Setting as DomainSetting
from scheduler.domain.interfaces import ISettingRepository


def to_domain(db_setting: DbSetting) -> DomainSetting:
    return DomainSetting(id=db_setting.id, name=db_setting.name, value=db_setting.value)


class SettingRepository(ISettingRepository):
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get(self) -> List[DomainSetting]:
        rows = self.db.execute(select(DbSetting).order_by(DbSetting.name)).scalars()
        return [to_domain(row) for row in rows.all()]

    def find(self, name: str) -> Optional[DomainSetting]:
        db_setting = self.db.execute(
            select(DbSetting).where(DbSetting.name == name)
        ).scalar_one_or_none()
        return to_domain(db_setting) if db_setting else None

    def save(self, name: str, value: Optional[str]) -> DomainSetting:
        """Insert or update the setting called ``name``."""
        db_setting = self.db.execute(
            select(DbSetting).where(DbSetting.name == name)
        ).scalar_one_or_none()
        if db_setting is None:
            db_setting = DbSetting(name=name, value=value)
            self.db.add(db_setting)
        else:
            db_setting.value = value
        self.db.commit()
        self.db.refresh(db_setting)
        return to_domain(db_setting)
