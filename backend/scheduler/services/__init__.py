# Services package initialization
# Business rules of every scheduler entity

from . import (
    admin_service,
    appointment_service,
    auth_service,
    category_service,
    customer_service,
    entity_service,
    provider_service,
    secretary_service,
    service_catalog_service,
    settings_service,
    user_service,
)

__all__ = [
    "admin_service",
    "appointment_service",
    "auth_service",
    "category_service",
    "customer_service",
    "entity_service",
    "provider_service",
    "secretary_service",
    "service_catalog_service",
    "settings_service",
    "user_service",
]
