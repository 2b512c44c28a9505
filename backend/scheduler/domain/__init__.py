"""
Domain package - framework-free records of the scheduler.

This package contains:
- entities.py: dataclasses for users, services, appointments and settings
- interfaces.py: repository contracts used by the services
"""

from .entities import (
    Admin,
    Appointment,
    Customer,
    Provider,
    Secretary,
    Service,
    ServiceCategory,
    Setting,
    User,
    UserSettings,
)
from .interfaces import (
    IRecordReader,
    IRecordRepository,
    IRecordWriter,
    ISettingRepository,
    IUserRepository,
)

__all__ = [
    # Entities
    "Admin",
    "Appointment",
    "Customer",
    "Provider",
    "Secretary",
    "Service",
    "ServiceCategory",
    "Setting",
    "User",
    "UserSettings",
    # Interfaces
    "IRecordReader",
    "IRecordWriter",
    "IRecordRepository",
    "IUserRepository",
    "ISettingRepository",
]
