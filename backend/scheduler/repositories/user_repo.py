from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.orm import Session

from scheduler.core.config import (
    DB_SLUG_ADMIN,
    DB_SLUG_CUSTOMER,
    DB_SLUG_PROVIDER,
    DB_SLUG_SECRETARY,
)
from scheduler.core.validation import ValidationError
from scheduler.db.base import Appointment as DbAppointment
from scheduler.db.base import Role
from scheduler.db.base import User as DbUser
from scheduler.db.base import UserSettings as DbUserSettings
from scheduler.db.base import secretaries_providers, services_providers
from scheduler.domain.entities import (
    Admin,
    Customer,
    Provider,
    Secretary,
    User,
    UserSettings,
)
from scheduler.domain.interfaces import IUserRepository
from scheduler.repositories.query_utils import (
    apply_order_by,
    apply_paging,
    apply_search,
    apply_where,
)

ENTITY_CLASSES = {
    DB_SLUG_ADMIN: Admin,
    DB_SLUG_PROVIDER: Provider,
    DB_SLUG_SECRETARY: Secretary,
    DB_SLUG_CUSTOMER: Customer,
}

USER_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "mobile_number",
    "phone_number",
    "address",
    "city",
    "state",
    "zip_code",
    "notes",
    "timezone",
    "language",
)

SEARCH_COLUMNS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "mobile_number",
    "address",
    "city",
    "state",
    "zip_code",
    "notes",
)

# Password is written separately and never read back
SETTING_FIELDS = (
    "username",
    "notifications",
    "google_sync",
    "calendar_view",
    "working_plan",
)

# relation name -> (association table, owner column, target column)
RELATIONS = {
    "services": (
        services_providers,
        services_providers.c.id_users,
        services_providers.c.id_services,
    ),
    "providers": (
        secretaries_providers,
        secretaries_providers.c.id_users_secretary,
        secretaries_providers.c.id_users_provider,
    ),
}

ROLE_RELATIONS = {
    DB_SLUG_PROVIDER: ("services",),
    DB_SLUG_SECRETARY: ("providers",),
}


class UserRepository(IUserRepository):
    """Repository for users of a single role.

    Every query is restricted to the role given at construction time, so the
    same class serves admins, providers, secretaries and customers. Username
    checks and credential lookups are global because usernames are unique
    across all roles.
    """

    def __init__(self, db_session: Session, role_slug: str) -> None:
        if role_slug not in ENTITY_CLASSES:
            raise ValueError(f"Unknown role slug: {role_slug}")
        self.db = db_session
        self.role_slug = role_slug
        self._role_id: Optional[int] = None

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def get_role_id(self) -> int:
        """Return the id of this repository's role.

        Raises:
            RuntimeError: if the role row has not been seeded
        """
        if self._role_id is None:
            role_id = self.db.execute(
                select(Role.id).where(Role.slug == self.role_slug)
            ).scalar_one_or_none()
            if role_id is None:
                raise RuntimeError(
                    f"The role was not found in the database: {self.role_slug}"
                )
            self._role_id = role_id
        return self._role_id

    def _select(self, *columns):
        stmt = select(*columns) if columns else select(DbUser)
        return stmt.where(DbUser.id_roles == self.get_role_id())

    def _get_row(self, user_id: int) -> Optional[DbUser]:
        return self.db.execute(
            self._select().where(DbUser.id == user_id)
        ).scalar_one_or_none()

    def _relation(self, relation: str):
        if relation not in RELATIONS:
            raise ValidationError(f"Unsupported relation: {relation}", relation)
        return RELATIONS[relation]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def exists(self, record_id: int) -> bool:
        stmt = self._select(func.count(DbUser.id)).where(DbUser.id == record_id)
        return self.db.execute(stmt).scalar_one() > 0

    def find(self, record_id: int) -> Optional[User]:
        db_user = self._get_row(record_id)
        return self._to_domain(db_user) if db_user else None

    def get(
        self,
        where: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[User]:
        stmt = apply_where(self._select(), DbUser, where)
        stmt = apply_paging(apply_order_by(stmt, DbUser, order_by), limit, offset)
        return [self._to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def search(
        self,
        keyword: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[Sequence[Tuple[str, str]]] = None,
    ) -> List[User]:
        stmt = apply_search(self._select(), DbUser, SEARCH_COLUMNS, keyword)
        stmt = apply_paging(apply_order_by(stmt, DbUser, order_by), limit, offset)
        return [self._to_domain(row) for row in self.db.execute(stmt).scalars().all()]

    def count(self, keyword: Optional[str] = None) -> int:
        stmt = self._select(func.count(DbUser.id))
        if keyword:
            stmt = apply_search(stmt, DbUser, SEARCH_COLUMNS, keyword)
        return self.db.execute(stmt).scalar_one()

    def email_in_use(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Whether another user of this role already has ``email``."""
        stmt = self._select(func.count(DbUser.id)).where(DbUser.email == email)
        if exclude_id:
            stmt = stmt.where(DbUser.id != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    def username_in_use(self, username: str, exclude_id: Optional[int] = None) -> bool:
        """Whether any other user (of any role) already has ``username``."""
        stmt = select(func.count(DbUserSettings.id_users)).where(
            DbUserSettings.username == username
        )
        if exclude_id:
            stmt = stmt.where(DbUserSettings.id_users != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    def get_password_hash(self, user_id: int) -> Optional[str]:
        return self.db.execute(
            select(DbUserSettings.password).where(DbUserSettings.id_users == user_id)
        ).scalar_one_or_none()

    def find_credentials(self, username: str) -> Optional[Dict[str, Any]]:
        """Look up login data by username regardless of role.

        Returns:
            Dict with ``user_id``, ``username``, ``password_hash`` and ``role``
        """
        row = self.db.execute(
            select(DbUserSettings.id_users, DbUserSettings.password, Role.slug)
            .join(DbUser, DbUser.id == DbUserSettings.id_users)
            .join(Role, Role.id == DbUser.id_roles)
            .where(DbUserSettings.username == username)
        ).first()
        if row is None:
            return None
        return {
            "user_id": row[0],
            "username": username,
            "password_hash": row[1],
            "role": row[2],
        }

    def get_setting(self, user_id: int, name: str) -> Any:
        if name not in SETTING_FIELDS:
            raise ValidationError(f"Invalid user setting name: {name}", name)
        return self.db.execute(
            select(getattr(DbUserSettings, name)).where(
                DbUserSettings.id_users == user_id
            )
        ).scalar_one_or_none()

    def get_related_ids(self, user_id: int, relation: str) -> List[int]:
        table, owner, target = self._relation(relation)
        stmt = select(target).where(owner == user_id).order_by(target)
        return list(self.db.execute(stmt).scalars().all())

    def get_related_records(self, user_id: int, relation: str) -> List[Any]:
        """Return the domain records behind ``get_related_ids``."""
        ids = self.get_related_ids(user_id, relation)
        if relation == "services":
            from scheduler.repositories.service_repo import ServiceRepository

            related_repo = ServiceRepository(self.db)
        else:
            related_repo = UserRepository(self.db, DB_SLUG_PROVIDER)

        records = [related_repo.find(related_id) for related_id in ids]
        return [record for record in records if record is not None]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, user: User) -> int:
        db_user = DbUser(id_roles=self.get_role_id())
        self._write_user(db_user, user)
        self.db.add(db_user)
        self.db.flush()

        settings = getattr(user, "settings", None)
        if settings is not None:
            self._write_settings(db_user, settings)
        self._write_relations(db_user.id, user)

        self.db.commit()
        return db_user.id

    def update(self, user: User) -> int:
        if not user.id:
            raise ValueError("User ID is required for update")

        db_user = self._get_row(user.id)
        if db_user is None:
            raise ValueError(f"User with ID {user.id} not found")

        self._write_user(db_user, user)
        settings = getattr(user, "settings", None)
        if settings is not None:
            self._write_settings(db_user, settings)
        self._write_relations(db_user.id, user)

        self.db.commit()
        return db_user.id

    def delete(self, record_id: int) -> bool:
        """Delete a user with its settings, relations and appointments."""
        db_user = self._get_row(record_id)
        if db_user is None:
            return False

        for table, owner, _target in RELATIONS.values():
            self.db.execute(delete(table).where(owner == record_id))
        # Only the secretary connections point back at users
        self.db.execute(
            delete(secretaries_providers).where(
                secretaries_providers.c.id_users_provider == record_id
            )
        )
        self.db.execute(
            delete(DbAppointment).where(
                or_(
                    DbAppointment.id_users_provider == record_id,
                    DbAppointment.id_users_customer == record_id,
                )
            )
        )
        self.db.delete(db_user)
        self.db.commit()
        return True

    def save_settings(self, user_id: int, settings: UserSettings) -> None:
        db_user = self._get_row(user_id)
        if db_user is None:
            raise ValueError(f"User with ID {user_id} not found")
        self._write_settings(db_user, settings)
        self.db.commit()

    def set_setting(self, user_id: int, name: str, value: Any) -> None:
        if name not in SETTING_FIELDS:
            raise ValidationError(f"Invalid user setting name: {name}", name)
        db_user = self._get_row(user_id)
        if db_user is None:
            raise ValueError(f"User with ID {user_id} not found")
        if db_user.settings is None:
            db_user.settings = DbUserSettings()
        setattr(db_user.settings, name, value)
        self.db.commit()

    def save_related_ids(
        self, user_id: int, relation: str, ids: Sequence[int], commit: bool = True
    ) -> None:
        """Replace the ids connected to ``user_id`` (delete then insert)."""
        table, owner, target = self._relation(relation)
        self.db.execute(delete(table).where(owner == user_id))
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            self.db.execute(
                insert(table),
                [{owner.name: user_id, target.name: related} for related in unique_ids],
            )
        if commit:
            self.db.commit()

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _write_user(self, db_user: DbUser, user: User) -> None:
        for name in USER_FIELDS:
            setattr(db_user, name, getattr(user, name))
        db_user.timezone = user.timezone or "UTC"
        db_user.language = user.language or "english"

    def _write_settings(self, db_user: DbUser, settings: UserSettings) -> None:
        if db_user.settings is None:
            db_user.settings = DbUserSettings()
        db_settings = db_user.settings
        db_settings.username = settings.username
        db_settings.notifications = bool(settings.notifications)
        db_settings.google_sync = bool(settings.google_sync)
        db_settings.calendar_view = settings.calendar_view or "default"
        db_settings.working_plan = settings.working_plan
        # settings.password already holds the hash; None keeps the stored one
        if settings.password:
            db_settings.password = settings.password

    def _write_relations(self, user_id: int, user: User) -> None:
        for relation in ROLE_RELATIONS.get(self.role_slug, ()):
            self.save_related_ids(
                user_id, relation, getattr(user, relation) or [], commit=False
            )

    def _to_domain(self, db_user: DbUser) -> User:
        """Convert DB model to the domain entity of this role."""
        entity_class = ENTITY_CLASSES[self.role_slug]
        entity = entity_class(
            id=db_user.id,
            id_roles=db_user.id_roles,
            **{name: getattr(db_user, name) for name in USER_FIELDS},
        )

        if hasattr(entity, "settings"):
            db_settings = db_user.settings
            if db_settings is not None:
                entity.settings = UserSettings(
                    username=db_settings.username,
                    notifications=db_settings.notifications,
                    google_sync=db_settings.google_sync,
                    calendar_view=db_settings.calendar_view,
                    working_plan=db_settings.working_plan,
                )

        for relation in ROLE_RELATIONS.get(self.role_slug, ()):
            setattr(entity, relation, self.get_related_ids(db_user.id, relation))

        return entity
