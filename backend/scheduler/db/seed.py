"""
Database seeding and initialization functions.

Every function is idempotent: rows that already exist are left untouched, so
they are safe to call on every application start.
"""

import json
import logging
from typing import Optional

from sqlalchemy import select

from scheduler.core.config import (
    DB_SLUG_ADMIN,
    DB_SLUG_CUSTOMER,
    DB_SLUG_PROVIDER,
    DB_SLUG_SECRETARY,
)
from scheduler.core.security import hash_password
from scheduler.db.base import Role, Setting, User, UserSettings
from scheduler.db.session import SessionLocal

logger = logging.getLogger(__name__)

# Permission bit flags: view=1, add=2, edit=4, delete=8
ALL_PERMISSIONS = 15

DEFAULT_ROLES = [
    {
        "name": "Administrator",
        "slug": DB_SLUG_ADMIN,
        "is_admin": True,
        "appointments": ALL_PERMISSIONS,
        "customers": ALL_PERMISSIONS,
        "services": ALL_PERMISSIONS,
        "users": ALL_PERMISSIONS,
        "system_settings": ALL_PERMISSIONS,
        "user_settings": ALL_PERMISSIONS,
    },
    {
        "name": "Provider",
        "slug": DB_SLUG_PROVIDER,
        "is_admin": False,
        "appointments": ALL_PERMISSIONS,
        "customers": ALL_PERMISSIONS,
        "user_settings": ALL_PERMISSIONS,
    },
    {
        "name": "Customer",
        "slug": DB_SLUG_CUSTOMER,
        "is_admin": False,
    },
    {
        "name": "Secretary",
        "slug": DB_SLUG_SECRETARY,
        "is_admin": False,
        "appointments": ALL_PERMISSIONS,
        "customers": ALL_PERMISSIONS,
        "user_settings": ALL_PERMISSIONS,
    },
]

DEFAULT_WORKING_PLAN = {
    day: {"start": "09:00", "end": "18:00", "breaks": [{"start": "14:30", "end": "15:00"}]}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}
DEFAULT_WORKING_PLAN.update({"saturday": None, "sunday": None})

DEFAULT_SETTINGS = {
    "company_name": "Scheduler",
    "company_email": "info@example.org",
    "company_link": "https://example.org",
    "company_working_plan": json.dumps(DEFAULT_WORKING_PLAN),
    "book_advance_timeout": "30",
    "date_format": "DMY",
    "time_format": "regular",
    "require_captcha": "0",
    "customer_notifications": "1",
    "display_cookie_notice": "0",
    "api_token": "",
}


def ensure_roles() -> None:
    """Create the admin, provider, customer and secretary roles when missing."""
    with SessionLocal() as db:
        existing = set(db.execute(select(Role.slug)).scalars().all())
        created = []
        for role_data in DEFAULT_ROLES:
            if role_data["slug"] in existing:
                continue
            db.add(Role(**role_data))
            created.append(role_data["slug"])

        if created:
            db.commit()
            logger.info("Roles created", extra={"context": {"roles": created}})
        else:
            logger.debug("Roles already present")


def ensure_default_settings() -> None:
    """Insert the default system settings that are not stored yet."""
    with SessionLocal() as db:
        existing = set(db.execute(select(Setting.name)).scalars().all())
        missing = [name for name in DEFAULT_SETTINGS if name not in existing]
        for name in missing:
            db.add(Setting(name=name, value=DEFAULT_SETTINGS[name]))

        if missing:
            db.commit()
            logger.info(
                "Default settings created", extra={"context": {"settings": missing}}
            )


def ensure_admin_user(
    username: str,
    password: str,
    email: str,
    first_name: str = "Admin",
    last_name: str = "User",
) -> Optional[int]:
    """Ensure an admin user with ``username`` exists.

    Returns:
        The id of the new admin, or None when the username was already taken.
    """
    ensure_roles()

    with SessionLocal() as db:
        taken = db.execute(
            select(UserSettings.id_users).where(UserSettings.username == username)
        ).scalar_one_or_none()
        if taken is not None:
            logger.debug(
                "Admin user already exists",
                extra={"context": {"username": username, "user_id": taken}},
            )
            return None

        role_id = db.execute(
            select(Role.id).where(Role.slug == DB_SLUG_ADMIN)
        ).scalar_one()
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number="",
            id_roles=role_id,
        )
        user.settings = UserSettings(
            username=username,
            password=hash_password(password),
            notifications=True,
            calendar_view="default",
        )
        db.add(user)
        db.commit()
        logger.info(
            "Admin user created",
            extra={"context": {"user_id": user.id, "username": username}},
        )
        return user.id
