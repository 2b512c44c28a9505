from typing import Any, Dict

from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import Provider
from scheduler.domain.interfaces import IRecordRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.schemas import api_resources
from scheduler.services.user_service import UserService


class ProviderService(UserService):
    """Providers: staff members that perform services.

    On top of the user rules, ``services`` must list ids of existing services.
    """

    resource = "provider"
    api_resource = "providers"
    entity_class = Provider
    relations = ("services",)

    def __init__(self, repo: UserRepository, service_repo: IRecordRepository) -> None:
        super().__init__(repo)
        self.service_repo = service_repo

    def _validate_relations(self, provider: Provider, result: ValidationResult) -> None:
        ids = BaseValidator.validate_id_list(provider.services, "services", result)
        if ids is None:
            return

        missing = [service_id for service_id in ids if not self.service_repo.exists(service_id)]
        if missing:
            result.add_error(
                "The provided service IDs do not exist in the database: "
                f"{', '.join(str(service_id) for service_id in missing)}",
                "services",
            )
            return

        provider.services = ids

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        services = self.repo.get_related_records(record["id"], "services")
        record["services"] = [
            api_resources.encode("services", service.to_dict()) for service in services
        ]
