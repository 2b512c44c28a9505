"""
Authentication helpers for this application.

DUAL AUTHENTICATION STRATEGY:

1. **Staff users (Browser/Backend UI):**
   - Authentication: Flask-Login session (local username/password)
   - Decorator: @role_required(...)
   - Use for: backend pages rendered with Jinja templates

2. **API clients (integrations, scripts):**
   - Authentication: ``Authorization: Bearer <token>`` where the token is the
     configured API_TOKEN, the ``api_token`` setting or a JWT issued by
     ``POST /api/v1/token``; or HTTP Basic with admin credentials
   - Decorator: @api_auth_required
   - Use for: every /api/v1 endpoint

Examples:
    @providers_bp.route("", methods=["GET"])
    @api_auth_required
    def index():
        pass

    @backend_bp.route("/providers")
    @role_required(DB_SLUG_ADMIN, DB_SLUG_SECRETARY)
    def providers():
        pass
"""

import hmac
import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import abort, current_app, g, request
from flask_login import current_user

from scheduler.core.api_utils import json_exception
from scheduler.core.config import DB_SLUG_ADMIN
from scheduler.core.exceptions import AuthenticationError
from scheduler.core.security import get_user_from_token

logger = logging.getLogger(__name__)


def _tokens_match(token: str, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def _stored_api_token() -> Optional[str]:
    from scheduler.db.session import SessionLocal
    from scheduler.repositories.setting_repo import SettingRepository

    with SessionLocal() as db:
        setting = SettingRepository(db).find("api_token")
        return setting.value if setting is not None else None


def _authenticate_bearer(token: str) -> Dict[str, Any]:
    if _tokens_match(token, current_app.config.get("API_TOKEN")):
        return {"user_id": None, "username": "api-token", "role": DB_SLUG_ADMIN}

    if _tokens_match(token, _stored_api_token()):
        return {"user_id": None, "username": "api-token", "role": DB_SLUG_ADMIN}

    user_data = get_user_from_token(token)
    if user_data is None:
        raise AuthenticationError("Invalid or expired token")
    if user_data.get("role") != DB_SLUG_ADMIN:
        raise AuthenticationError("The API is only available to admin users")
    return user_data


def _authenticate_basic(username: str, password: str) -> Dict[str, Any]:
    from scheduler.db.session import SessionLocal
    from scheduler.repositories.user_repo import UserRepository
    from scheduler.services.auth_service import AuthService

    with SessionLocal() as db:
        user_data = AuthService(UserRepository(db, DB_SLUG_ADMIN)).authenticate(
            username, password
        )

    if user_data is None or user_data.get("role") != DB_SLUG_ADMIN:
        raise AuthenticationError("Invalid credentials")
    return user_data


def authenticate_api_request() -> Dict[str, Any]:
    """Resolve the API caller from the Authorization header.

    Raises:
        AuthenticationError: when the header is missing or the credentials
            are not accepted
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return _authenticate_bearer(auth_header[len("Bearer ") :].strip())

    auth = request.authorization
    if auth is not None and auth.type == "basic":
        return _authenticate_basic(auth.username or "", auth.password or "")

    raise AuthenticationError("Missing or invalid Authorization header")


def api_auth_required(f):
    """Decorator to require API authentication (Bearer token or Basic admin).

    Sets ``g.current_user`` to a dict with ``user_id``, ``username`` and
    ``role``; answers 401 JSON otherwise.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            g.current_user = authenticate_api_request()
        except AuthenticationError as e:
            logger.warning(
                "API authentication failed",
                extra={
                    "context": {
                        "path": request.path,
                        "remote_addr": request.remote_addr,
                        "reason": str(e),
                    }
                },
            )
            return json_exception(e)
        return f(*args, **kwargs)

    return decorated_function


def role_required(*roles: str):
    """Decorator for backend pages: Flask-Login session with one of ``roles``.

    Returns:
        - the login manager's unauthorized response if not logged in
        - 403 if logged in with a role outside ``roles``
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user or not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()

            if roles and getattr(current_user, "role_slug", None) not in roles:
                abort(403)

            return f(*args, **kwargs)

        return decorated_function

    return decorator
