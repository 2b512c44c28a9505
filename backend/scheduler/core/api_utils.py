"""
Common API utilities for consistent request parsing and response formatting
across all controllers.
"""

import logging
from functools import wraps
from typing import Any, Dict, List, Optional, Tuple

from flask import abort, current_app, jsonify, request

from scheduler.core import config
from scheduler.core.exceptions import AuthenticationError, RecordNotFoundError
from scheduler.core.validation import ValidationError

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOWED_HEADERS = "Authorization, Content-Type, X-Requested-With"


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for status-style endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def json_response(data: Any = None, status_code: int = 200) -> tuple:
    """Return ``data`` as a JSON body (an empty body for 204)."""
    if status_code == 204:
        return "", 204
    return jsonify(data), status_code


def json_exception(exc: Exception) -> tuple:
    """Translate a service exception into a JSON error response.

    RecordNotFoundError -> 404, ValidationError -> 400,
    AuthenticationError -> 401, anything else -> 500.
    """
    if isinstance(exc, RecordNotFoundError):
        status_code = 404
        message = str(exc)
    elif isinstance(exc, ValidationError):
        status_code = 400
        message = exc.message
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        message = str(exc) or "Authentication required"
    else:
        status_code = 500
        logger.error(
            "Unexpected API error",
            extra={"context": {"path": request.path, "error": str(exc)}},
            exc_info=exc,
        )
        message = str(exc) if current_app.debug else "Internal server error"

    if status_code < 500:
        logger.info(
            f"API request rejected: {message}",
            extra={"context": {"path": request.path, "status_code": status_code}},
        )

    response = jsonify({"success": False, "message": message})
    if status_code == 401:
        response.headers["WWW-Authenticate"] = 'Basic realm="Scheduler API"'
    return response, status_code


def add_cors_headers(response):
    """Attach the CORS headers every API response carries."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOWED_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOWED_HEADERS
    return response


# ===========================
# Collection query parameters
# ===========================


def _split_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def get_search_keyword() -> Optional[str]:
    """Keyword of the ``q`` parameter (None when absent or blank)."""
    keyword = request.args.get("q", "").strip()
    return keyword or None


def get_pagination() -> Tuple[int, int]:
    """Resolve ``page``/``length`` into a ``(limit, offset)`` pair.

    ``page`` is 1-based; ``length`` is clamped to MAX_PAGE_LENGTH.
    """
    try:
        page = int(request.args.get("page", 1))
    except (TypeError, ValueError):
        raise ValidationError("The page parameter must be an integer.", "page")

    try:
        length = int(request.args.get("length", config.DEFAULT_PAGE_LENGTH))
    except (TypeError, ValueError):
        raise ValidationError("The length parameter must be an integer.", "length")

    if page < 1:
        raise ValidationError("The page parameter must be at least 1.", "page")
    if length < 1:
        raise ValidationError("The length parameter must be at least 1.", "length")

    length = min(length, config.MAX_PAGE_LENGTH)
    return length, (page - 1) * length


def get_sort() -> List[Tuple[str, str]]:
    """Parse ``sort=-name,+id`` into ``[("name", "desc"), ("id", "asc")]``."""
    order_by = []
    for item in _split_list(request.args.get("sort")):
        direction = "asc"
        if item[0] in "-+":
            direction = "desc" if item[0] == "-" else "asc"
            item = item[1:].strip()
        if item:
            order_by.append((item, direction))
    return order_by


def get_fields() -> List[str]:
    return _split_list(request.args.get("fields"))


def get_with() -> List[str]:
    return _split_list(request.args.get("with"))


def get_json_body() -> Dict[str, Any]:
    """Return the JSON object of the request body."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("The request body must be a JSON object.")
    return payload


def verify_health_token() -> bool:
    """
    Verify the health check token from request headers.

    Returns:
        bool: True if token is valid, False otherwise
    """
    token = request.headers.get("X-Health-Token")
    expected = current_app.config.get("HEALTH_CHECK_TOKEN")
    if not expected:
        return False
    return bool(token and token == expected)


def health_endpoint_decorator(f):
    """Decorator for detailed health endpoints guarded by the health token."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        if verify_health_token():
            return f(*args, **kwargs)
        abort(401)

    return wrapper
