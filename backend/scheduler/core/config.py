"""
Centralized configuration module for application-wide settings.

Every setting is resolved from the environment by a ``get_*`` function and
cached in a module-level constant at import time. The ``log_*`` helpers are
called from ``create_app()`` so the active configuration is visible in the
startup logs.
"""

import logging
import os
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# ===========================
# Domain constants
# ===========================

DB_SLUG_ADMIN = "admin"
DB_SLUG_PROVIDER = "provider"
DB_SLUG_SECRETARY = "secretary"
DB_SLUG_CUSTOMER = "customer"

ROLE_SLUGS = (DB_SLUG_ADMIN, DB_SLUG_PROVIDER, DB_SLUG_SECRETARY, DB_SLUG_CUSTOMER)

CALENDAR_VIEW_DEFAULT = "default"
CALENDAR_VIEW_TABLE = "table"
CALENDAR_VIEWS = (CALENDAR_VIEW_DEFAULT, CALENDAR_VIEW_TABLE)

AVAILABILITIES_TYPE_FLEXIBLE = "flexible"
AVAILABILITIES_TYPE_FIXED = "fixed"
AVAILABILITIES_TYPES = (AVAILABILITIES_TYPE_FLEXIBLE, AVAILABILITIES_TYPE_FIXED)

EVENT_MINIMUM_DURATION = 5  # minutes

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            f"Invalid integer '{raw}' in {name}; using default {default}",
            extra={"context": {"env_var": name, "value": raw}},
        )
        return default


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Europe/Athens', 'UTC')
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


APP_TZ = get_app_timezone()


def log_timezone_config():
    """Log the active timezone configuration."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "UTC"),
            }
        },
    )


# ===========================
# API Configuration
# ===========================


def get_api_token() -> str | None:
    """
    Get the static API bearer token.

    Returns:
        str | None: Token if configured, None otherwise

    Environment Variables:
        API_TOKEN: Shared secret accepted in ``Authorization: Bearer <token>``.
            When unset, only JWT and Basic credentials are accepted (plus the
            ``api_token`` row of the settings table, if any).
    """
    token = os.getenv("API_TOKEN", "").strip()
    return token or None


def get_default_page_length() -> int:
    """Page size used by collection endpoints when ``length`` is omitted."""
    return max(1, _env_int("DEFAULT_PAGE_LENGTH", 20))


def get_max_page_length() -> int:
    """Upper bound for the ``length`` query parameter."""
    return max(get_default_page_length(), _env_int("MAX_PAGE_LENGTH", 100))


API_TOKEN = get_api_token()
DEFAULT_PAGE_LENGTH = get_default_page_length()
MAX_PAGE_LENGTH = get_max_page_length()


def log_api_config():
    """Log the active API configuration (without exposing the token)."""
    logger.info(
        "API configuration initialized",
        extra={
            "context": {
                "static_token_set": API_TOKEN is not None,
                "default_page_length": DEFAULT_PAGE_LENGTH,
                "max_page_length": MAX_PAGE_LENGTH,
            }
        },
    )


# ===========================
# Validation Configuration
# ===========================


def get_min_password_length() -> int:
    """
    Minimum length accepted for user passwords.

    Environment Variables:
        MIN_PASSWORD_LENGTH: Default 7
    """
    return max(1, _env_int("MIN_PASSWORD_LENGTH", 7))


def get_require_phone_number() -> bool:
    """
    Whether customers must provide a phone number.

    Environment Variables:
        REQUIRE_PHONE_NUMBER: Default 'false'
            Truthy values: "true", "1", "yes" (case-insensitive)
    """
    return _env_flag("REQUIRE_PHONE_NUMBER", "false")


MIN_PASSWORD_LENGTH = get_min_password_length()
REQUIRE_PHONE_NUMBER = get_require_phone_number()


def log_validation_config():
    """Log the active validation configuration."""
    logger.info(
        "Validation configuration initialized",
        extra={
            "context": {
                "min_password_length": MIN_PASSWORD_LENGTH,
                "require_phone_number": REQUIRE_PHONE_NUMBER,
            }
        },
    )


# ===========================
# Health Check Configuration
# ===========================


def get_health_check_token() -> str | None:
    """
    Get the health check token from environment variable.

    Environment Variables:
        HEALTH_CHECK_TOKEN: Token required for the detailed health endpoint.
            Default: None (detailed health checks disabled if not set)
    """
    return os.getenv("HEALTH_CHECK_TOKEN", None)


HEALTH_CHECK_TOKEN = get_health_check_token()
