"""
Token API - POST /api/v1/token

Exchanges admin credentials (JSON ``{"username", "password"}``) for a JWT
usable as ``Authorization: Bearer <token>`` on the other endpoints.
"""

import logging

from flask import Blueprint
from sqlalchemy.orm import Session

from scheduler.core.api_utils import get_json_body, json_exception, json_response
from scheduler.core.config import DB_SLUG_ADMIN
from scheduler.core.exceptions import AuthenticationError
from scheduler.core.limiter_config import limiter
from scheduler.core.validation import BaseValidator, ValidationError
from scheduler.db.session import SessionLocal
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.auth_service import AuthService

logger = logging.getLogger(__name__)

token_bp = Blueprint("api_token", __name__, url_prefix="/api/v1/token")


def _get_auth_service(db: Session) -> AuthService:
    """Dependency injection factory for AuthService."""
    return AuthService(UserRepository(db, DB_SLUG_ADMIN))


@token_bp.route("", methods=["POST"])
@limiter.limit("5 per minute;20 per hour")
def issue():
    try:
        payload = get_json_body()
        missing = [
            name
            for name in ("username", "password")
            if BaseValidator.is_empty(payload.get(name))
        ]
        if missing:
            raise ValidationError(
                f"Not all required fields are provided: {', '.join(missing)}."
            )

        with SessionLocal() as db:
            service = _get_auth_service(db)
            user_data = service.authenticate(payload["username"], payload["password"])
            if user_data is None or user_data["role"] != DB_SLUG_ADMIN:
                raise AuthenticationError("Invalid credentials")
            token = service.issue_token(user_data)

        logger.info(
            "API token issued", extra={"context": {"user_id": user_data["user_id"]}}
        )
        return json_response({"token": token, "tokenType": "Bearer"})
    except Exception as e:
        return json_exception(e)
