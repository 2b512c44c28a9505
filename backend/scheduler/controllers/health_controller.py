"""
Health controller - health check endpoints for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text

from scheduler.core.api_utils import health_endpoint_decorator
from scheduler.core.limiter_config import limiter
from scheduler.db.session import get_engine

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


def check_database_connection() -> bool:
    """Run ``SELECT 1`` against the configured database."""
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(
            "Database connection check failed",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        return False


@health_bp.route("", methods=["GET"])
@limiter.exempt
def health_check():
    """
    Liveness and readiness check.

    Returns:
        200 {"status": "healthy", "database": "connected"}
        503 {"status": "unhealthy", "database": "disconnected"}

    Note:
        - No authentication required (monitoring endpoint)
    """
    db_status = check_database_connection()
    return jsonify(
        {
            "status": "healthy" if db_status else "unhealthy",
            "database": "connected" if db_status else "disconnected",
        }
    ), (200 if db_status else 503)


@health_bp.route("/pool", methods=["GET"])
@limiter.exempt
@health_endpoint_decorator
def pool_status():
    """Connection pool status; requires HEALTH_CHECK_TOKEN when one is configured."""
    engine = get_engine()
    return jsonify(
        {
            "status": "healthy",
            "dialect": engine.dialect.name,
            "pool_class": type(engine.pool).__name__,
            "pool_status": engine.pool.status(),
        }
    ), 200
