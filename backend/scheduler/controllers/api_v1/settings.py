"""
Settings API - /api/v1/settings

Settings are name/value pairs; ``PUT /<name>`` takes ``{"value": ...}`` and
creates the setting when it does not exist yet.
"""

import logging

from flask import Blueprint
from sqlalchemy.orm import Session

from scheduler.core.api_utils import get_json_body, json_exception, json_response
from scheduler.core.auth_decorators import api_auth_required
from scheduler.core.validation import ValidationError
from scheduler.db.session import SessionLocal
from scheduler.repositories.setting_repo import SettingRepository
from scheduler.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

settings_bp = Blueprint("api_settings", __name__, url_prefix="/api/v1/settings")


def _get_settings_service(db: Session) -> SettingsService:
    """Dependency injection factory for SettingsService."""
    return SettingsService(SettingRepository(db))


@settings_bp.route("", methods=["GET"])
@api_auth_required
def index():
    try:
        with SessionLocal() as db:
            return json_response(_get_settings_service(db).get())
    except Exception as e:
        return json_exception(e)


@settings_bp.route("/<string:name>", methods=["GET"])
@api_auth_required
def show(name: str):
    try:
        with SessionLocal() as db:
            return json_response(_get_settings_service(db).find(name))
    except Exception as e:
        return json_exception(e)


@settings_bp.route("/<string:name>", methods=["PUT"])
@api_auth_required
def update(name: str):
    try:
        payload = get_json_body()
        if "value" not in payload:
            raise ValidationError("The setting value must be provided.", "value")
        with SessionLocal() as db:
            return json_response(_get_settings_service(db).save(name, payload["value"]))
    except Exception as e:
        return json_exception(e)
