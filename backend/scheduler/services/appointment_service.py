import logging
from datetime import datetime
from typing import Any, Dict, Optional

from scheduler.core.config import APP_TZ
from scheduler.core.exceptions import RecordNotFoundError
from scheduler.core.security import generate_hash
from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import Appointment
from scheduler.repositories.appointment_repo import AppointmentRepository
from scheduler.repositories.service_repo import ServiceRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.schemas import api_resources
from scheduler.services.entity_service import EntityService

logger = logging.getLogger(__name__)


class AppointmentService(EntityService):
    """Appointments and, when built over an unavailability repository,
    provider unavailabilities (blocked periods without customer or service).

    Business Rules:
    - start and end are required and start must come before end
    - the provider must exist
    - appointments also need an existing customer and service
    - the booking time defaults to now and every record gets a random hash
    """

    relations = ("provider", "customer", "service")

    def __init__(
        self,
        repo: AppointmentRepository,
        provider_repo: UserRepository,
        customer_repo: UserRepository,
        service_repo: ServiceRepository,
    ) -> None:
        super().__init__(repo)
        self.provider_repo = provider_repo
        self.customer_repo = customer_repo
        self.service_repo = service_repo

        self.is_unavailability = repo.is_unavailability
        if self.is_unavailability:
            self.resource = "unavailability"
            self.api_resource = "unavailabilities"
            self.relations = ("provider",)
        else:
            self.resource = "appointment"
            self.api_resource = "appointments"

    def validate(self, data: Dict[str, Any]) -> Appointment:
        appointment = Appointment.from_dict(data)
        appointment.is_unavailability = self.is_unavailability
        self._ensure_exists(appointment.id)

        for name in api_resources.DATETIME_FIELDS:
            setattr(
                appointment,
                name,
                api_resources.parse_datetime(getattr(appointment, name), name),
            )

        required = ["start_datetime", "end_datetime", "id_users_provider"]
        if not self.is_unavailability:
            required += ["id_users_customer", "id_services"]

        result = ValidationResult()
        BaseValidator.validate_string_fields(
            appointment, ("location", "notes", "color", "status", "hash"), result
        )
        result.raise_if_invalid()

        BaseValidator.validate_required_fields(appointment, required, result)

        if (
            appointment.start_datetime
            and appointment.end_datetime
            and appointment.start_datetime >= appointment.end_datetime
        ):
            result.add_error(
                f"The {self.resource} start date-time must be before its end date-time.",
                "end_datetime",
            )

        appointment.id_users_provider = self._check_reference(
            appointment.id_users_provider, "provider", self.provider_repo, result
        )
        if not self.is_unavailability:
            appointment.id_users_customer = self._check_reference(
                appointment.id_users_customer, "customer", self.customer_repo, result
            )
            appointment.id_services = self._check_reference(
                appointment.id_services, "service", self.service_repo, result
            )
        else:
            appointment.id_users_customer = None
            appointment.id_services = None

        result.raise_if_invalid()
        return appointment

    def _check_reference(
        self, record_id: Any, name: str, repo: Any, result: ValidationResult
    ) -> Optional[int]:
        if BaseValidator.is_empty(record_id):
            return None
        value = BaseValidator.validate_integer(record_id, name, result)
        if value is not None and not repo.exists(value):
            result.add_error(
                f"The provided {name} ID does not exist in the database: {value}", name
            )
        return value

    def _prepare(self, appointment: Appointment) -> None:
        if appointment.book_datetime is None:
            appointment.book_datetime = datetime.now(APP_TZ).replace(
                tzinfo=None, microsecond=0
            )
        if not appointment.hash:
            appointment.hash = generate_hash()

    def find_by_hash(self, appointment_hash: str) -> Dict[str, Any]:
        appointment = self.repo.find_by_hash(appointment_hash)
        if appointment is None:
            raise RecordNotFoundError(self.resource, appointment_hash)
        return appointment.to_dict()

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        if name == "provider":
            repo, key, resource = self.provider_repo, "providerId", "providers"
        elif name == "customer":
            repo, key, resource = self.customer_repo, "customerId", "customers"
        else:
            repo, key, resource = self.service_repo, "serviceId", "services"

        related_id = record.get(key)
        related = repo.find(related_id) if related_id else None
        record[name] = api_resources.encode(resource, related.to_dict()) if related else None
