from typing import Any, Dict

from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import Secretary
from scheduler.repositories.user_repo import UserRepository
from scheduler.schemas import api_resources
from scheduler.services.user_service import UserService


class SecretaryService(UserService):
    """Secretaries: staff members managing the calendars of some providers.

    On top of the user rules, ``providers`` must be a non-empty list of
    provider ids. Saving rewrites the secretary/provider connections.
    """

    resource = "secretary"
    api_resource = "secretaries"
    entity_class = Secretary
    relations = ("providers",)

    def __init__(self, repo: UserRepository, provider_repo: UserRepository) -> None:
        super().__init__(repo)
        self.provider_repo = provider_repo

    def _validate_relations(
        self, secretary: Secretary, result: ValidationResult
    ) -> None:
        ids = BaseValidator.validate_id_list(secretary.providers, "providers", result)
        if ids is None:
            return

        if not ids:
            result.add_error(
                "The secretary must be connected to at least one provider.",
                "providers",
            )
            return

        missing = [pid for pid in ids if not self.provider_repo.exists(pid)]
        if missing:
            result.add_error(
                "The provided provider IDs do not exist in the database: "
                f"{', '.join(str(pid) for pid in missing)}",
                "providers",
            )
            return

        secretary.providers = ids

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        providers = self.repo.get_related_records(record["id"], "providers")
        record["providers"] = [
            api_resources.encode("providers", provider.to_dict())
            for provider in providers
        ]
