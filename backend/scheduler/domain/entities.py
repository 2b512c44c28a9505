"""
Domain entities - Pure business data, no framework dependencies.

Entities carry the internal (snake_case) field names used by the services.
Rule checks live in the services; the API field names live in
``scheduler.schemas.api_resources``.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class UserSettings:
    """Login and calendar preferences of a staff user.

    ``password`` is write-only: it holds the plain password on its way in and
    is never populated when reading.
    """

    username: Optional[str] = None
    password: Optional[str] = None
    notifications: bool = True
    google_sync: bool = False
    calendar_view: str = "default"
    working_plan: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserSettings":
        return cls(**_known_fields(cls, data or {}))


@dataclass
class User:
    """Common data of every kind of user."""

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None
    timezone: str = "UTC"
    language: str = "english"
    id_roles: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        values = _known_fields(cls, data)
        if "settings" in values:
            values["settings"] = UserSettings.from_dict(values["settings"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if isinstance(data.get("settings"), dict):
            data["settings"].pop("password", None)
        return data


@dataclass
class Customer(User):
    pass


@dataclass
class Admin(User):
    settings: UserSettings = field(default_factory=UserSettings)


@dataclass
class Provider(User):
    settings: UserSettings = field(default_factory=UserSettings)
    services: List[int] = field(default_factory=list)


@dataclass
class Secretary(User):
    settings: UserSettings = field(default_factory=UserSettings)
    providers: List[int] = field(default_factory=list)


@dataclass
class ServiceCategory:
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceCategory":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Service:
    """A bookable service."""

    id: Optional[int] = None
    name: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    color: str = "#7cbae8"
    availabilities_type: str = "flexible"
    attendants_number: int = 1
    is_private: bool = False
    id_service_categories: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Appointment:
    """Appointment or, with ``is_unavailability``, a blocked provider period."""

    id: Optional[int] = None
    book_datetime: Optional[datetime] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    hash: Optional[str] = None
    color: str = "#7cbae8"
    status: str = ""
    is_unavailability: bool = False
    id_users_provider: Optional[int] = None
    id_users_customer: Optional[int] = None
    id_services: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Setting:
    name: str
    value: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}
