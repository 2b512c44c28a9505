"""
Custom exceptions for the application.

Services raise these; the API layer maps them to HTTP status codes in
``scheduler.core.api_utils.json_exception``.
"""


class RecordNotFoundError(Exception):
    """Raised when a requested record does not exist (HTTP 404)."""

    def __init__(self, resource: str, record_id):
        super().__init__(
            f"The provided {resource} ID was not found in the database: {record_id}"
        )
        self.resource = resource
        self.record_id = record_id


class AuthenticationError(Exception):
    """Raised when request credentials are missing or invalid (HTTP 401)."""

    pass
