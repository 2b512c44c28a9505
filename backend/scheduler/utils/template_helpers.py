"""Template helper functions for consistent UI rendering.

This module provides Jinja2 template functions for:
- Full name formatting with fallbacks
- Map, mail and phone icon links for user records

Records may be dicts (service records) or objects (ORM rows, entities).
"""

import logging
from typing import Any, Optional
from urllib.parse import quote_plus

from markupsafe import Markup

logger = logging.getLogger(__name__)

MAPS_PLACE_URL = "https://google.com/maps/place/"


def _field(record: Any, name: str) -> Optional[str]:
    if record is None:
        return None
    if isinstance(record, dict):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def full_name(record: Any, fallback: str = "-") -> str:
    """Join first and last name.

    Examples:
        full_name({"first_name": "Jane", "last_name": "Doe"})  # "Jane Doe"
        full_name(None)                                        # "-"
    """
    parts = [_field(record, "first_name"), _field(record, "last_name")]
    name = " ".join(part for part in parts if part)
    return name or fallback


def render_map_icon(record: Any) -> Markup:
    """Google Maps link built from address, city, state and zip code.

    Returns an empty string when the record has none of them.
    """
    parts = [
        _field(record, name) for name in ("address", "city", "state", "zip_code")
    ]
    parts = [part for part in parts if part]
    if not parts:
        return Markup("")
    url = MAPS_PLACE_URL + quote_plus(",".join(parts), safe=",")

    return Markup(
        '<a href="{url}" target="_blank" rel="noopener" class="icon-link" '
        'title="{title}"><span class="icon icon-map"></span></a>'
    ).format(url=url, title=", ".join(parts))


def render_mail_icon(email: Optional[str]) -> Markup:
    """``mailto:`` link for an e-mail address (empty when missing)."""
    if not email or not str(email).strip():
        return Markup("")
    email = str(email).strip()
    return Markup(
        '<a href="mailto:{email}" class="icon-link" title="{email}">'
        '<span class="icon icon-mail"></span></a>'
    ).format(email=email)


def render_phone_icon(phone: Optional[str]) -> Markup:
    """``tel:`` link for a phone number (empty when missing)."""
    if not phone or not str(phone).strip():
        return Markup("")
    phone = str(phone).strip()
    return Markup(
        '<a href="tel:{phone}" class="icon-link" title="{phone}">'
        '<span class="icon icon-phone"></span></a>'
    ).format(phone=phone)
