from decimal import Decimal
from typing import Any, Dict

from scheduler.core import config
from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import Service
from scheduler.repositories.category_repo import ServiceCategoryRepository
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.schemas import api_resources
from scheduler.services.entity_service import EntityService

DEFAULT_SERVICE_DURATION = 30  # minutes


class ServiceCatalogService(EntityService):
    """Bookable services offered by the providers.

    Business Rules:
    - name is required
    - duration (minutes, default 30) is at least EVENT_MINIMUM_DURATION
    - price, when given, is not negative
    - availabilities type is flexible or fixed
    - attendants number is at least 1, and only fixed services may take more
      than one attendant
    - the category, when given, must exist
    """

    resource = "service"
    api_resource = "services"
    relations = ("category", "providers")

    def __init__(
        self,
        repo: ServiceRepository,
        category_repo: ServiceCategoryRepository,
        provider_repo: UserRepository,
    ) -> None:
        super().__init__(repo)
        self.category_repo = category_repo
        self.provider_repo = provider_repo

    def validate(self, data: Dict[str, Any]) -> Service:
        service = Service.from_dict(data)
        self._ensure_exists(service.id)

        result = ValidationResult()
        BaseValidator.validate_string_fields(
            service,
            ("name", "currency", "description", "location", "color", "availabilities_type"),
            result,
        )
        result.raise_if_invalid()

        BaseValidator.validate_required_fields(service, ("name",), result)

        if BaseValidator.is_empty(service.duration):
            service.duration = DEFAULT_SERVICE_DURATION
        else:
            service.duration = BaseValidator.validate_integer(
                service.duration,
                "duration",
                result,
                min_value=config.EVENT_MINIMUM_DURATION,
            )

        service.price = BaseValidator.validate_decimal(
            service.price, "price", result, min_value=Decimal("0")
        )

        service.availabilities_type = (
            service.availabilities_type or config.AVAILABILITIES_TYPE_FLEXIBLE
        )
        BaseValidator.validate_allowed(
            service.availabilities_type,
            "availabilities type",
            result,
            config.AVAILABILITIES_TYPES,
        )

        if BaseValidator.is_empty(service.attendants_number):
            service.attendants_number = 1
        else:
            service.attendants_number = BaseValidator.validate_integer(
                service.attendants_number, "attendants number", result, min_value=1
            )

        if (
            service.attendants_number
            and service.attendants_number > 1
            and service.availabilities_type == config.AVAILABILITIES_TYPE_FLEXIBLE
        ):
            result.add_error(
                "Services with flexible availabilities type cannot have more than one attendant.",
                "attendants_number",
            )

        if not BaseValidator.is_empty(service.id_service_categories):
            category_id = BaseValidator.validate_integer(
                service.id_service_categories, "category", result
            )
            if category_id is not None and not self.category_repo.exists(category_id):
                result.add_error(
                    f"The provided service category ID does not exist in the database: {category_id}",
                    "id_service_categories",
                )
            service.id_service_categories = category_id
        else:
            service.id_service_categories = None

        service.is_private = bool(service.is_private)
        service.color = service.color or "#7cbae8"

        result.raise_if_invalid()
        return service

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        if name == "category":
            category_id = record.get("categoryId")
            category = self.category_repo.find(category_id) if category_id else None
            record["category"] = (
                api_resources.encode("categories", category.to_dict())
                if category
                else None
            )
            return

        providers = [
            self.provider_repo.find(provider_id)
            for provider_id in self.repo.get_provider_ids(record["id"])
        ]
        record["providers"] = [
            api_resources.encode("providers", provider.to_dict())
            for provider in providers
            if provider is not None
        ]
