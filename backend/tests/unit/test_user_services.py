"""
Unit tests for the user services (admins, providers, secretaries, customers).

Repositories are mocked; only the business rules are exercised.
"""

from unittest.mock import Mock

import pytest

from scheduler.core import config
from scheduler.core.exceptions import RecordNotFoundError
from scheduler.core.security import verify_password
from scheduler.core.validation import ValidationError
from scheduler.domain.entities import Admin, Customer, Provider, UserSettings
from scheduler.services.admin_service import AdminService
from scheduler.services.customer_service import CustomerService
from scheduler.services.provider_service import ProviderService
from scheduler.services.secretary_service import SecretaryService


def _user_repo() -> Mock:
    repo = Mock()
    repo.exists.return_value = True
    repo.username_in_use.return_value = False
    repo.email_in_use.return_value = False
    repo.insert.return_value = 7
    repo.update.side_effect = lambda user: user.id
    return repo


def _staff_payload(**overrides):
    payload = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.org",
        "phone_number": "555-0100",
        "settings": {"username": "jane", "password": "long-enough-1"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def mock_repo() -> Mock:
    return _user_repo()


@pytest.fixture
def admin_service(mock_repo) -> AdminService:
    return AdminService(mock_repo)


@pytest.mark.unit
@pytest.mark.services
class TestAdminService:
    def test_insert_hashes_password(self, admin_service, mock_repo):
        record_id = admin_service.save(_staff_payload())

        assert record_id == 7
        inserted = mock_repo.insert.call_args[0][0]
        assert isinstance(inserted, Admin)
        assert inserted.settings.password != "long-enough-1"
        assert verify_password("long-enough-1", inserted.settings.password)
        mock_repo.update.assert_not_called()

    def test_update_without_password_keeps_stored_hash(self, admin_service, mock_repo):
        payload = _staff_payload(id=3, settings={"username": "jane"})

        assert admin_service.save(payload) == 3

        updated = mock_repo.update.call_args[0][0]
        assert updated.settings.password is None
        mock_repo.insert.assert_not_called()

    def test_update_of_unknown_record(self, admin_service, mock_repo):
        mock_repo.exists.return_value = False

        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(_staff_payload(id=99))

        assert exc_info.value.message == (
            "The provided admin ID does not exist in the database: 99"
        )

    def test_new_user_needs_password(self, admin_service):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(_staff_payload(settings={"username": "jane"}))

        assert "The user password cannot be empty when inserting a new record." in str(
            exc_info.value
        )

    def test_password_minimum_length(self, admin_service):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(
                _staff_payload(settings={"username": "jane", "password": "123"})
            )

        assert (
            f"The user password must be at least {config.MIN_PASSWORD_LENGTH} "
            "characters long." in exc_info.value.message
        )

    def test_username_must_be_unique(self, admin_service, mock_repo):
        mock_repo.username_in_use.return_value = True

        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(_staff_payload())

        assert exc_info.value.message == (
            "The provided username is already in use, please use a different one."
        )
        mock_repo.username_in_use.assert_called_once_with("jane", None)

    def test_email_must_be_unique(self, admin_service, mock_repo):
        mock_repo.email_in_use.return_value = True

        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(_staff_payload())

        assert exc_info.value.field == "email"

    def test_errors_are_aggregated(self, admin_service):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(
                {
                    "first_name": "Jane",
                    "email": "not-an-email",
                    "settings": {"username": "jane", "password": "long-enough-1"},
                }
            )

        message = exc_info.value.message
        assert "Not all required fields are provided: last_name, phone_number." in message
        assert "Invalid email address provided: not-an-email" in message

    def test_numeric_password_is_rejected(self, admin_service, mock_repo):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(
                _staff_payload(settings={"username": "jane", "password": 12345678})
            )

        assert exc_info.value.message == "The password value must be a string."
        assert exc_info.value.field == "password"
        mock_repo.insert.assert_not_called()

    def test_non_string_email_skips_lookups(self, admin_service, mock_repo):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.save(_staff_payload(email=["a@example.org"]))

        assert exc_info.value.field == "email"
        mock_repo.email_in_use.assert_not_called()
        mock_repo.username_in_use.assert_not_called()

    def test_invalid_calendar_view(self, admin_service):
        with pytest.raises(ValidationError):
            admin_service.save(
                _staff_payload(
                    settings={
                        "username": "jane",
                        "password": "long-enough-1",
                        "calendar_view": "month",
                    }
                )
            )

    def test_find_unknown_record(self, admin_service, mock_repo):
        mock_repo.find.return_value = None

        with pytest.raises(RecordNotFoundError) as exc_info:
            admin_service.find(42)

        assert str(exc_info.value) == (
            "The provided admin ID was not found in the database: 42"
        )

    def test_find_returns_record_without_password(self, admin_service, mock_repo):
        mock_repo.find.return_value = Admin(
            id=1,
            first_name="Jane",
            settings=UserSettings(username="jane", password="hash"),
        )

        record = admin_service.find(1)

        assert record["first_name"] == "Jane"
        assert "password" not in record["settings"]

    def test_value(self, admin_service, mock_repo):
        mock_repo.find.return_value = Admin(id=1, first_name="Jane")

        assert admin_service.value(1, "first_name") == "Jane"
        with pytest.raises(ValidationError):
            admin_service.value(1, "shoe_size")

    def test_delete_unknown_record(self, admin_service, mock_repo):
        mock_repo.delete.return_value = False

        with pytest.raises(RecordNotFoundError):
            admin_service.delete(5)

    def test_admins_have_no_relations(self, admin_service):
        with pytest.raises(ValidationError) as exc_info:
            admin_service.attach({"id": 1}, ["services"])

        assert exc_info.value.message == (
            "The requested admin relation is not supported: services"
        )

    def test_check_relations(self, admin_service):
        admin_service.check_relations([])

        with pytest.raises(ValidationError) as exc_info:
            admin_service.check_relations(["appointments"])

        assert exc_info.value.field == "appointments"

    def test_get_setting_of_unknown_user(self, admin_service, mock_repo):
        mock_repo.exists.return_value = False

        with pytest.raises(RecordNotFoundError):
            admin_service.get_setting(3, "calendar_view")


@pytest.mark.unit
@pytest.mark.services
class TestProviderService:
    @pytest.fixture
    def service_repo(self) -> Mock:
        repo = Mock()
        repo.exists.side_effect = lambda service_id: service_id in (1, 2)
        return repo

    @pytest.fixture
    def provider_service(self, mock_repo, service_repo) -> ProviderService:
        return ProviderService(mock_repo, service_repo)

    def test_services_are_saved_as_ids(self, provider_service, mock_repo):
        provider_service.save(_staff_payload(services=["1", 2]))

        inserted = mock_repo.insert.call_args[0][0]
        assert isinstance(inserted, Provider)
        assert inserted.services == [1, 2]

    def test_unknown_services(self, provider_service):
        with pytest.raises(ValidationError) as exc_info:
            provider_service.save(_staff_payload(services=[1, 8, 9]))

        assert exc_info.value.message == (
            "The provided service IDs do not exist in the database: 8, 9"
        )

    def test_attach_services(self, provider_service, mock_repo):
        from scheduler.domain.entities import Service

        mock_repo.get_related_records.return_value = [Service(id=1, name="Haircut")]

        record = provider_service.attach({"id": 4, "services": [1]}, ["services"])

        assert record["services"][0]["name"] == "Haircut"
        mock_repo.get_related_records.assert_called_once_with(4, "services")


@pytest.mark.unit
@pytest.mark.services
class TestSecretaryService:
    @pytest.fixture
    def provider_repo(self) -> Mock:
        repo = Mock()
        repo.exists.side_effect = lambda provider_id: provider_id == 2
        return repo

    @pytest.fixture
    def secretary_service(self, mock_repo, provider_repo) -> SecretaryService:
        return SecretaryService(mock_repo, provider_repo)

    def test_needs_a_provider(self, secretary_service):
        with pytest.raises(ValidationError) as exc_info:
            secretary_service.save(_staff_payload(providers=[]))

        assert exc_info.value.message == (
            "The secretary must be connected to at least one provider."
        )

    def test_unknown_provider(self, secretary_service):
        with pytest.raises(ValidationError) as exc_info:
            secretary_service.save(_staff_payload(providers=[2, 5]))

        assert "5" in exc_info.value.message

    def test_valid_secretary(self, secretary_service, mock_repo):
        assert secretary_service.save(_staff_payload(providers=[2])) == 7
        assert mock_repo.insert.call_args[0][0].providers == [2]


@pytest.mark.unit
@pytest.mark.services
class TestCustomerService:
    @pytest.fixture
    def customer_service(self, mock_repo) -> CustomerService:
        return CustomerService(mock_repo, Mock())

    def test_customer_without_login_data(self, customer_service, mock_repo):
        record_id = customer_service.save(
            {"first_name": "John", "last_name": "Roe", "email": "john@example.org"}
        )

        assert record_id == 7
        assert isinstance(mock_repo.insert.call_args[0][0], Customer)

    def test_phone_number_when_required(self, customer_service, monkeypatch):
        monkeypatch.setattr(config, "REQUIRE_PHONE_NUMBER", True)

        with pytest.raises(ValidationError) as exc_info:
            customer_service.save(
                {"first_name": "John", "last_name": "Roe", "email": "john@example.org"}
            )

        assert exc_info.value.message == (
            "Not all required fields are provided: phone_number."
        )

    def test_non_string_name_is_rejected(self, customer_service, mock_repo):
        with pytest.raises(ValidationError) as exc_info:
            customer_service.save(
                {"first_name": 42, "last_name": "Roe", "email": "john@example.org"}
            )

        assert exc_info.value.message == "The first_name value must be a string."
        mock_repo.email_in_use.assert_not_called()

    def test_attach_appointments(self, customer_service):
        from scheduler.domain.entities import Appointment

        customer_service.appointment_repo.get.return_value = [
            Appointment(id=3, id_users_customer=1, id_users_provider=2, id_services=4)
        ]

        record = customer_service.attach({"id": 1}, ["appointments"])

        assert record["appointments"] == [
            {
                "id": 3,
                "book": None,
                "start": None,
                "end": None,
                "hash": None,
                "location": None,
                "notes": None,
                "color": "#7cbae8",
                "status": "",
                "customerId": 1,
                "providerId": 2,
                "serviceId": 4,
            }
        ]
        customer_service.appointment_repo.get.assert_called_once_with(
            where={"id_users_customer": 1}
        )
