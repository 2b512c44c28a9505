from typing import Any, Dict

from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import ServiceCategory
from scheduler.services.entity_service import EntityService


class CategoryService(EntityService):
    """Service categories. Deleting one leaves its services uncategorized."""

    resource = "service category"
    api_resource = "categories"

    def validate(self, data: Dict[str, Any]) -> ServiceCategory:
        category = ServiceCategory.from_dict(data)
        self._ensure_exists(category.id)

        result = ValidationResult()
        BaseValidator.validate_string_fields(category, ("name", "description"), result)
        BaseValidator.validate_required_fields(category, ("name",), result)
        result.raise_if_invalid()
        return category
