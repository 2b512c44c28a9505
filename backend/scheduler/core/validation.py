"""
Common validation utilities for the scheduler services.

Entity services collect problems into a ``ValidationResult`` and call
``raise_if_invalid()`` once all rules ran, so API clients get every problem
of a payload in a single 400 response.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class ValidationError(Exception):
    """Raised when an entity payload breaks a validation rule (HTTP 400)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.fields: List[str] = []
        self.is_valid: bool = True

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        self.errors.append(message)
        if field:
            self.fields.append(field)
        self.is_valid = False
        logger.debug(
            f"Validation error: {message}",
            extra={"context": {"field": field}},
        )

    def raise_if_invalid(self) -> None:
        """Raise a single ``ValidationError`` carrying every collected message."""
        if self.is_valid:
            return
        field = self.fields[0] if len(self.fields) == 1 else None
        raise ValidationError(" ".join(self.errors), field)


class BaseValidator:
    """Base validator with common validation methods."""

    @staticmethod
    def is_empty(value: Any) -> bool:
        return value is None or (isinstance(value, str) and value.strip() == "")

    @staticmethod
    def validate_required_fields(
        entity: Any, field_names: Sequence[str], result: ValidationResult
    ) -> bool:
        """Validate that every named attribute of ``entity`` is present."""
        missing = [
            name
            for name in field_names
            if BaseValidator.is_empty(getattr(entity, name, None))
        ]
        if missing:
            result.add_error(
                f"Not all required fields are provided: {', '.join(missing)}.",
                missing[0] if len(missing) == 1 else None,
            )
            return False
        return True

    @staticmethod
    def validate_string_fields(
        entity: Any, field_names: Sequence[str], result: ValidationResult
    ) -> bool:
        """Validate that every named attribute of ``entity`` is a string or None."""
        valid = True
        for name in field_names:
            value = getattr(entity, name, None)
            if value is not None and not isinstance(value, str):
                result.add_error(f"The {name} value must be a string.", name)
                valid = False
        return valid

    @staticmethod
    def validate_email(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[str]:
        """Validate an e-mail address format."""
        if BaseValidator.is_empty(value):
            return None
        email = str(value).strip()
        if not EMAIL_PATTERN.match(email):
            result.add_error(f"Invalid email address provided: {email}", field_name)
            return None
        return email

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if BaseValidator.is_empty(value):
            return None

        if isinstance(value, bool):
            result.add_error(f"The {field_name} value must be an integer.", field_name)
            return None

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            result.add_error(f"The {field_name} value must be an integer.", field_name)
            return None

        if min_value is not None and int_value < min_value:
            result.add_error(
                f"The {field_name} value must be at least {min_value}.", field_name
            )
            return None

        if max_value is not None and int_value > max_value:
            result.add_error(
                f"The {field_name} value must be at most {max_value}.", field_name
            )
            return None

        return int_value

    @staticmethod
    def validate_decimal(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[Decimal] = None,
    ) -> Optional[Decimal]:
        """Validate and convert decimal field."""
        if BaseValidator.is_empty(value):
            return None

        try:
            decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            result.add_error(f"The {field_name} value must be numeric.", field_name)
            return None

        if not decimal_value.is_finite():
            result.add_error(f"The {field_name} value must be numeric.", field_name)
            return None

        if min_value is not None and decimal_value < min_value:
            result.add_error(
                f"The {field_name} value must be at least {min_value}.", field_name
            )
            return None

        return decimal_value

    @staticmethod
    def validate_allowed(
        value: Any,
        field_name: str,
        result: ValidationResult,
        allowed_values: Iterable[str],
    ) -> Optional[str]:
        """Validate that a string value belongs to a closed set."""
        if BaseValidator.is_empty(value):
            return None
        allowed = list(allowed_values)
        if value not in allowed:
            result.add_error(
                f"The provided {field_name} is invalid: {value} "
                f"(expected one of: {', '.join(allowed)}).",
                field_name,
            )
            return None
        return value

    @staticmethod
    def validate_id_list(
        values: Any, field_name: str, result: ValidationResult
    ) -> Optional[List[int]]:
        """Validate a list of numeric record ids and return them as ints."""
        if not isinstance(values, (list, tuple)):
            result.add_error(f"The provided {field_name} are invalid.", field_name)
            return None

        ids: List[int] = []
        for item in values:
            if isinstance(item, bool) or not str(item).strip().isdigit():
                result.add_error(f"The provided {field_name} are invalid.", field_name)
                return None
            ids.append(int(item))
        return ids
