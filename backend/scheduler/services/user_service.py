import logging
from typing import Any, Dict

from scheduler.core import config
from scheduler.core.exceptions import RecordNotFoundError
from scheduler.core.security import hash_password
from scheduler.core.validation import BaseValidator, ValidationResult
from scheduler.domain.entities import User
from scheduler.repositories.user_repo import UserRepository
from scheduler.services.entity_service import EntityService

logger = logging.getLogger(__name__)

REQUIRED_USER_FIELDS = ("first_name", "last_name", "email", "phone_number")

STRING_USER_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "mobile_number",
    "phone_number",
    "address",
    "city",
    "state",
    "zip_code",
    "notes",
    "timezone",
    "language",
)

STRING_SETTING_FIELDS = ("username", "password", "calendar_view")


class UserService(EntityService):
    """Application service for staff users (admins, providers, secretaries).

    Business Rules:
    - first name, last name, email and phone number are required
    - the email must be valid and unique among users of the same role
    - usernames are unique across every role
    - passwords need MIN_PASSWORD_LENGTH characters and are mandatory for
      new users; they are stored as bcrypt hashes
    - the calendar view is one of CALENDAR_VIEWS
    """

    entity_class = User

    def __init__(self, repo: UserRepository) -> None:
        super().__init__(repo)

    def validate(self, data: Dict[str, Any]) -> User:
        user = self.entity_class.from_dict(data)
        self._ensure_exists(user.id)

        result = ValidationResult()
        BaseValidator.validate_string_fields(user, STRING_USER_FIELDS, result)
        BaseValidator.validate_string_fields(
            user.settings, STRING_SETTING_FIELDS, result
        )
        # The remaining rules and lookups assume string values
        result.raise_if_invalid()

        BaseValidator.validate_required_fields(user, REQUIRED_USER_FIELDS, result)
        self._validate_relations(user, result)
        BaseValidator.validate_email(user.email, "email", result)

        settings = user.settings
        if settings.username and self.repo.username_in_use(settings.username, user.id):
            result.add_error(
                "The provided username is already in use, please use a different one.",
                "username",
            )

        if settings.password and len(settings.password) < config.MIN_PASSWORD_LENGTH:
            result.add_error(
                "The user password must be at least "
                f"{config.MIN_PASSWORD_LENGTH} characters long.",
                "password",
            )

        if not user.id and not settings.password:
            result.add_error(
                "The user password cannot be empty when inserting a new record.",
                "password",
            )

        BaseValidator.validate_allowed(
            settings.calendar_view, "calendar view", result, config.CALENDAR_VIEWS
        )

        if user.email and self.repo.email_in_use(user.email, user.id):
            result.add_error(
                "The provided email address is already in use, please use a different one.",
                "email",
            )

        result.raise_if_invalid()
        return user

    def _validate_relations(self, user: User, result: ValidationResult) -> None:
        """Role-specific relation checks."""

    def _prepare(self, user: User) -> None:
        # Updates without a password keep the stored hash
        if user.settings.password:
            user.settings.password = hash_password(user.settings.password)

    def get_setting(self, user_id: int, name: str) -> Any:
        if not self.repo.exists(user_id):
            raise RecordNotFoundError(self.resource, user_id)
        return self.repo.get_setting(user_id, name)

    def set_setting(self, user_id: int, name: str, value: Any) -> None:
        if not self.repo.exists(user_id):
            raise RecordNotFoundError(self.resource, user_id)
        self.repo.set_setting(user_id, name, value)
        logger.info(
            "User setting saved",
            extra={"context": {"user_id": user_id, "setting": name}},
        )
