"""
API resource encoding.

Records travel through the services with internal snake_case field names.
The REST API exposes camelCase names instead; this module maps between the
two in both directions:

    encode("providers", {"first_name": "Jane", "phone_number": "555"})
    -> {"firstName": "Jane", "phone": "555"}

Decoding merges the payload onto an optional base record so that fields the
client leaves out keep their stored values on update. Unknown payload keys
are ignored.
"""

import copy
import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from scheduler.core.validation import ValidationError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

DATETIME_FIELDS = ("book_datetime", "start_datetime", "end_datetime")

USER_FIELDS = {
    "id": "id",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "mobile_number": "mobile",
    "phone_number": "phone",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip_code": "zip",
    "notes": "notes",
    "timezone": "timezone",
    "language": "language",
}

SETTINGS_FIELDS = {
    "username": "username",
    "password": "password",
    "notifications": "notifications",
    "google_sync": "googleSync",
    "calendar_view": "calendarView",
    "working_plan": "workingPlan",
}

SERVICE_FIELDS = {
    "id": "id",
    "name": "name",
    "duration": "duration",
    "price": "price",
    "currency": "currency",
    "description": "description",
    "location": "location",
    "color": "color",
    "availabilities_type": "availabilitiesType",
    "attendants_number": "attendantsNumber",
    "is_private": "isPrivate",
    "id_service_categories": "categoryId",
}

CATEGORY_FIELDS = {
    "id": "id",
    "name": "name",
    "description": "description",
}

APPOINTMENT_FIELDS = {
    "id": "id",
    "book_datetime": "book",
    "start_datetime": "start",
    "end_datetime": "end",
    "hash": "hash",
    "location": "location",
    "notes": "notes",
    "color": "color",
    "status": "status",
    "id_users_customer": "customerId",
    "id_users_provider": "providerId",
    "id_services": "serviceId",
}

UNAVAILABILITY_FIELDS = {
    "id": "id",
    "book_datetime": "book",
    "start_datetime": "start",
    "end_datetime": "end",
    "location": "location",
    "notes": "notes",
    "id_users_provider": "providerId",
}

SETTING_FIELDS = {
    "name": "name",
    "value": "value",
}

RESOURCES: Dict[str, Dict[str, str]] = {
    "admins": USER_FIELDS,
    "providers": {**USER_FIELDS, "services": "services"},
    "secretaries": {**USER_FIELDS, "providers": "providers"},
    "customers": USER_FIELDS,
    "services": SERVICE_FIELDS,
    "categories": CATEGORY_FIELDS,
    "appointments": APPOINTMENT_FIELDS,
    "unavailabilities": UNAVAILABILITY_FIELDS,
    "settings": SETTING_FIELDS,
}

# Resources whose records carry a nested ``settings`` object
WITH_SETTINGS = ("admins", "providers", "secretaries")


def _mapping(resource: str) -> Dict[str, str]:
    try:
        return RESOURCES[resource]
    except KeyError:
        raise ValueError(f"Unknown API resource: {resource}")


def _encode_value(name: str, value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, Decimal):
        return float(value)
    if name == "working_plan" and isinstance(value, str) and value:
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD HH:MM:SS`` (or ISO 8601) into a naive datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.strptime(str(value), DATETIME_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            f"Invalid date-time value provided for {field_name}: {value}", field_name
        )
    return parsed.replace(tzinfo=None)


def _decode_value(name: str, value: Any) -> Any:
    if name in DATETIME_FIELDS:
        return parse_datetime(value, name)
    if name == "working_plan" and value is not None and not isinstance(value, str):
        return json.dumps(value)
    return value


def encode(resource: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """Map an internal record to its API representation.

    Passwords are never encoded.
    """
    encoded: Dict[str, Any] = {}
    for internal, api in _mapping(resource).items():
        if internal in record:
            encoded[api] = _encode_value(internal, record[internal])

    settings = record.get("settings")
    if resource in WITH_SETTINGS and isinstance(settings, dict):
        encoded["settings"] = {
            api: _encode_value(internal, settings[internal])
            for internal, api in SETTINGS_FIELDS.items()
            if internal in settings and internal != "password"
        }

    return encoded


def decode(
    resource: str, payload: Dict[str, Any], base: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Map an API payload to an internal record, merged onto ``base``."""
    decoded = copy.deepcopy(base) if base else {}
    for internal, api in _mapping(resource).items():
        if api in payload:
            decoded[internal] = _decode_value(internal, payload[api])

    payload_settings = payload.get("settings")
    if resource in WITH_SETTINGS and isinstance(payload_settings, dict):
        settings = dict(decoded.get("settings") or {})
        for internal, api in SETTINGS_FIELDS.items():
            if api in payload_settings:
                settings[internal] = _decode_value(internal, payload_settings[api])
        decoded["settings"] = settings

    return decoded


def decode_field(resource: str, api_name: str) -> str:
    """Internal name of an API field (unknown names are returned unchanged)."""
    for internal, api in _mapping(resource).items():
        if api == api_name:
            return internal
    return api_name


def decode_sort(
    resource: str, sort: Sequence[Tuple[str, str]]
) -> List[Tuple[str, str]]:
    return [(decode_field(resource, name), direction) for name, direction in sort]


def only(record: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Keep only the listed keys of ``record``."""
    wanted = set(fields)
    return {key: value for key, value in record.items() if key in wanted}
