"""
Request handling shared by the /api/v1 CRUD controllers.

Each function receives an entity service already bound to a database
session and returns a Flask response tuple. Errors raised by the services
are answered through ``json_exception``.
"""

import logging
from typing import Any, Dict, List, Optional

from scheduler.core.api_utils import (
    get_fields,
    get_json_body,
    get_pagination,
    get_search_keyword,
    get_sort,
    get_with,
    json_exception,
    json_response,
)

logger = logging.getLogger(__name__)


def present(
    service, record: Dict[str, Any], fields: List[str], with_: List[str]
) -> Dict[str, Any]:
    """Encode a record, attach the requested relations and keep ``fields``."""
    encoded = service.api_encode(record)
    if with_:
        service.attach(encoded, with_)
    if fields:
        encoded = service.only(encoded, fields + with_)
    return encoded


def api_index(service, where: Optional[Dict[str, Any]] = None):
    """GET collection: ``q``, ``page``, ``length``, ``sort``, ``fields``, ``with``.

    ``where`` filters the plain listing; a keyword search ignores it.
    """
    try:
        keyword = get_search_keyword()
        limit, offset = get_pagination()
        order_by = service.api_decode_sort(get_sort()) or None
        fields, with_ = get_fields(), get_with()
        service.check_relations(with_)

        if keyword:
            records = service.search(keyword, limit, offset, order_by)
        else:
            records = service.get(where or None, limit, offset, order_by)

        return json_response([present(service, r, fields, with_) for r in records])
    except Exception as e:
        return json_exception(e)


def api_show(service, record_id: int):
    try:
        record = service.find(record_id)
        return json_response(present(service, record, get_fields(), get_with()))
    except Exception as e:
        return json_exception(e)


def api_store(service):
    """POST collection: decode the body, ignore any id, save, answer 201."""
    try:
        record = service.api_decode(get_json_body())
        record.pop("id", None)
        record_id = service.save(record)
        return json_response(service.api_encode(service.find(record_id)), 201)
    except Exception as e:
        return json_exception(e)


def api_update(service, record_id: int):
    """PUT record: decode the body onto the stored record and save it."""
    try:
        base = service.find(record_id)
        record = service.api_decode(get_json_body(), base)
        record["id"] = record_id
        service.save(record)
        return json_response(service.api_encode(service.find(record_id)))
    except Exception as e:
        return json_exception(e)


def api_destroy(service, record_id: int):
    try:
        service.delete(record_id)
        return json_response(status_code=204)
    except Exception as e:
        return json_exception(e)
