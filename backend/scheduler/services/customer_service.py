from typing import Any, Dict, Optional

from scheduler.core import config
from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import Customer
from scheduler.domain.interfaces import IRecordRepository
from scheduler.repositories.user_repo import UserRepository
from scheduler.schemas import api_resources
from scheduler.services.entity_service import EntityService
from scheduler.services.user_service import STRING_USER_FIELDS


class CustomerService(EntityService):
    """Customers: people booking appointments (no login, no settings).

    Business Rules:
    - first name, last name and email are required, and so is the phone
      number when REQUIRE_PHONE_NUMBER is enabled
    - the email must be valid and unique among customers
    """

    resource = "customer"
    api_resource = "customers"
    relations = ("appointments",)

    def __init__(
        self,
        repo: UserRepository,
        appointment_repo: Optional[IRecordRepository] = None,
    ) -> None:
        super().__init__(repo)
        self.appointment_repo = appointment_repo

    def validate(self, data: Dict[str, Any]) -> Customer:
        customer = Customer.from_dict(data)
        self._ensure_exists(customer.id)

        result = ValidationResult()
        BaseValidator.validate_string_fields(customer, STRING_USER_FIELDS, result)
        result.raise_if_invalid()

        required = ["first_name", "last_name", "email"]
        if config.REQUIRE_PHONE_NUMBER:
            required.append("phone_number")

        BaseValidator.validate_required_fields(customer, required, result)
        BaseValidator.validate_email(customer.email, "email", result)

        if customer.email and self.repo.email_in_use(customer.email, customer.id):
            result.add_error(
                "The provided email address is already in use, please use a different one.",
                "email",
            )

        result.raise_if_invalid()
        return customer

    def _attach(self, record: Dict[str, Any], name: str) -> None:
        appointments = []
        if self.appointment_repo is not None:
            appointments = self.appointment_repo.get(
                where={"id_users_customer": record["id"]}
            )
        record["appointments"] = [
            api_resources.encode("appointments", appointment.to_dict())
            for appointment in appointments
        ]
