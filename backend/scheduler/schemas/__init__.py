"""
Schemas package - API resource encoding.

``api_resources`` maps internal snake_case records to the camelCase JSON
documents of the REST API and back.
"""

from . import api_resources

__all__ = ["api_resources"]
