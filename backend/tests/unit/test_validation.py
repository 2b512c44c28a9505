"""
Unit tests for the shared validation toolbox.
"""

from decimal import Decimal

import pytest

from scheduler.core.validation import BaseValidator, ValidationError, ValidationResult
from scheduler.domain.entities import Customer


@pytest.mark.unit
class TestValidationResult:
    def test_valid_result_does_not_raise(self):
        ValidationResult().raise_if_invalid()

    def test_messages_are_joined_into_one_error(self):
        result = ValidationResult()
        result.add_error("First problem.", "first_name")
        result.add_error("Second problem.", "email")

        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()

        assert exc_info.value.message == "First problem. Second problem."
        assert exc_info.value.field is None

    def test_single_error_keeps_its_field(self):
        result = ValidationResult()
        result.add_error("Bad email.", "email")

        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()

        assert exc_info.value.field == "email"


@pytest.mark.unit
class TestBaseValidator:
    def test_required_fields_lists_missing_names(self):
        result = ValidationResult()
        customer = Customer(first_name="Jane", last_name="  ")

        assert not BaseValidator.validate_required_fields(
            customer, ("first_name", "last_name", "email"), result
        )
        assert result.errors == [
            "Not all required fields are provided: last_name, email."
        ]

    def test_required_fields_present(self):
        result = ValidationResult()
        customer = Customer(first_name="Jane", last_name="Doe", email="j@d.io")

        assert BaseValidator.validate_required_fields(
            customer, ("first_name", "last_name", "email"), result
        )
        assert result.is_valid

    @pytest.mark.parametrize(
        "email,valid",
        [
            ("jane.doe@example.org", True),
            ("jane+tag@mail.example.co", True),
            ("jane.doe@", False),
            ("not-an-email", False),
        ],
    )
    def test_validate_email(self, email, valid):
        result = ValidationResult()
        BaseValidator.validate_email(email, "email", result)
        assert result.is_valid is valid

    def test_empty_email_is_left_to_required_check(self):
        result = ValidationResult()
        assert BaseValidator.validate_email("", "email", result) is None
        assert result.is_valid

    def test_validate_integer_converts_strings(self):
        result = ValidationResult()
        assert BaseValidator.validate_integer("30", "duration", result) == 30
        assert result.is_valid

    def test_validate_integer_rejects_booleans(self):
        result = ValidationResult()
        assert BaseValidator.validate_integer(True, "duration", result) is None
        assert result.errors == ["The duration value must be an integer."]

    def test_validate_integer_bounds(self):
        result = ValidationResult()
        BaseValidator.validate_integer(3, "duration", result, min_value=5)
        BaseValidator.validate_integer(11, "count", result, max_value=10)
        assert result.errors == [
            "The duration value must be at least 5.",
            "The count value must be at most 10.",
        ]

    def test_validate_decimal(self):
        result = ValidationResult()
        assert BaseValidator.validate_decimal("10.50", "price", result) == Decimal(
            "10.50"
        )
        assert BaseValidator.validate_decimal("abc", "price", result) is None
        assert BaseValidator.validate_decimal("-1", "price", result, Decimal("0")) is None
        assert len(result.errors) == 2

    def test_validate_decimal_rejects_nan(self):
        result = ValidationResult()
        assert BaseValidator.validate_decimal("NaN", "price", result) is None
        assert not result.is_valid

    def test_validate_allowed(self):
        result = ValidationResult()
        assert BaseValidator.validate_allowed("table", "view", result, ("default", "table"))
        assert BaseValidator.validate_allowed("week", "view", result, ("default", "table")) is None
        assert "expected one of: default, table" in result.errors[0]

    def test_validate_id_list(self):
        result = ValidationResult()
        assert BaseValidator.validate_id_list([1, "2"], "services", result) == [1, 2]
        assert BaseValidator.validate_id_list("1,2", "services", result) is None
        assert BaseValidator.validate_id_list([1, "x"], "services", result) is None
        assert result.errors == [
            "The provided services are invalid.",
            "The provided services are invalid.",
        ]

    def test_validate_string_fields(self):
        result = ValidationResult()
        customer = Customer(first_name="Jane", last_name=None, email=["j@d.io"])

        assert not BaseValidator.validate_string_fields(
            customer, ("first_name", "last_name", "email"), result
        )
        assert result.errors == ["The email value must be a string."]
        assert result.fields == ["email"]
