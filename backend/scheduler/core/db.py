"""Slow query alerts for the scheduler database engine."""

import logging
import os
import time
from typing import Any, Dict, Optional

from flask import g, has_request_context
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger("sql.alerts")

_SENSITIVE_KEYS = ("password", "token", "secret", "email", "hash")


def _get_threshold_ms() -> int:
    try:
        return int(os.getenv("ALERT_QUERY_MS_THRESHOLD", "100"))
    except (TypeError, ValueError):
        return 100


def _alerts_enabled() -> bool:
    return os.getenv("ALERT_SLOW_QUERY_ENABLED", "true").lower() == "true"


def _truncate(value: Any, limit: int = 500) -> str:
    text = str(value)
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def mask_params(params: Any) -> Any:
    """Hide values of parameters whose name looks sensitive."""
    if isinstance(params, dict):
        masked: Dict[str, Any] = {}
        for key, value in params.items():
            if any(marker in str(key).lower() for marker in _SENSITIVE_KEYS):
                masked[key] = "***"
            else:
                masked[key] = mask_params(value)
        return masked
    if isinstance(params, (list, tuple)):
        return [mask_params(item) for item in params]
    if isinstance(params, bytes):
        return "<binary>"
    return _truncate(params, 200)


def _request_context() -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    if has_request_context():
        for key in ("request_id", "route", "user_id"):
            value = getattr(g, key, None)
            if value is not None:
                context[key] = value
    return context


def register_query_timing(
    engine: Engine, db_info: Optional[Dict[str, Any]] = None
) -> None:
    """Register slow query alert listeners for the provided engine."""

    if getattr(engine, "_slow_query_alerts_registered", False):
        return

    resolved_db_info = dict(db_info or {})
    if not resolved_db_info:
        resolved_db_info = {
            "db_host": engine.url.host,
            "db_name": engine.url.database,
        }

    @event.listens_for(engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):
        context._slow_query_start_time = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):
        if not _alerts_enabled():
            return
        start = getattr(context, "_slow_query_start_time", None)
        if start is None:
            return
        duration_ms = (time.perf_counter() - start) * 1000.0
        if duration_ms < _get_threshold_ms():
            return

        compiled_params = getattr(context, "compiled_parameters", None)
        raw_params = parameters
        if compiled_params:
            raw_params = compiled_params if executemany else compiled_params[0]

        logger.warning(
            "Slow query detected",
            extra={
                "context": {
                    "alert_type": "slow_query",
                    "duration_ms": round(duration_ms, 2),
                    "statement": _truncate(statement or ""),
                    "params": mask_params(raw_params),
                    **resolved_db_info,
                    **_request_context(),
                }
            },
        )

    setattr(engine, "_slow_query_alerts_registered", True)
