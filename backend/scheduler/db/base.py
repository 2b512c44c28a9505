from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base

# ------------------- ASSOCIATIONS -------------------
# Rows are maintained explicitly by the repositories (delete then insert).

services_providers = Table(
    "services_providers",
    Base.metadata,
    Column(
        "id_users",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "id_services",
        Integer,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

secretaries_providers = Table(
    "secretaries_providers",
    Base.metadata,
    Column(
        "id_users_secretary",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "id_users_provider",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Role(Base):
    """User role with its permission flags."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    appointments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    customers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    services: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    system_settings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_settings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# Explicitly implement Flask-Login interface without inheriting UserMixin
class User(Base):
    """Admins, providers, secretaries and customers, told apart by role."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(512), nullable=True, index=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timezone: Mapped[str] = mapped_column(String(256), nullable=False, default="UTC")
    language: Mapped[str] = mapped_column(String(256), nullable=False, default="english")
    id_roles: Mapped[int] = mapped_column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Joined so Flask-Login users stay usable after their session closes
    role: Mapped[Role] = relationship(lazy="joined")
    settings: Mapped[Optional["UserSettings"]] = relationship(
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="joined",
    )

    @property
    def role_slug(self) -> Optional[str]:
        return self.role.slug if self.role is not None else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    # Flask-Login required methods/properties
    def get_id(self):
        """Return user identifier for Flask-Login"""
        return str(self.id)

    @property
    def is_active(self) -> bool:
        return True

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False


class UserSettings(Base):
    """Login and calendar preferences of staff users."""

    __tablename__ = "user_settings"

    id_users: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    username: Mapped[Optional[str]] = mapped_column(
        String(256), unique=True, nullable=True
    )
    # bcrypt hash, salt included
    password: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    google_sync: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    calendar_view: Mapped[str] = mapped_column(
        String(32), nullable=False, default="default"
    )
    working_plan: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(back_populates="settings")


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Service(Base):
    """A bookable service offered by one or more providers."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(256), nullable=False, default="#7cbae8")
    availabilities_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="flexible"
    )
    attendants_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    id_service_categories: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("service_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


class Appointment(Base):
    """Booked appointment or provider unavailability."""

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    book_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    start_datetime: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, index=True
    )
    end_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hash: Mapped[Optional[str]] = mapped_column(String(512), nullable=True, index=True)
    color: Mapped[str] = mapped_column(String(256), nullable=False, default="#7cbae8")
    status: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    is_unavailability: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    id_users_provider: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    id_users_customer: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    id_services: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=True
    )


class Setting(Base):
    """System-wide key/value setting."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
