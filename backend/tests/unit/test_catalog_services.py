"""
Unit tests for the service catalog and category services.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from scheduler.core.validation import ValidationError
from scheduler.domain.entities import Provider, Service, ServiceCategory
from scheduler.services.category_service import CategoryService
from scheduler.services.service_catalog_service import (
    DEFAULT_SERVICE_DURATION,
    ServiceCatalogService,
)


@pytest.fixture
def repos():
    service_repo = Mock()
    service_repo.exists.return_value = True
    service_repo.insert.return_value = 11
    category_repo = Mock()
    category_repo.exists.side_effect = lambda category_id: category_id == 1
    provider_repo = Mock()
    return service_repo, category_repo, provider_repo


@pytest.fixture
def catalog(repos) -> ServiceCatalogService:
    return ServiceCatalogService(*repos)


@pytest.mark.unit
@pytest.mark.services
class TestServiceCatalogService:
    def test_defaults_are_applied(self, catalog, repos):
        service_repo = repos[0]

        assert catalog.save({"name": "Haircut"}) == 11

        service = service_repo.insert.call_args[0][0]
        assert service.duration == DEFAULT_SERVICE_DURATION
        assert service.attendants_number == 1
        assert service.availabilities_type == "flexible"
        assert service.id_service_categories is None
        assert service.is_private is False

    def test_values_are_converted(self, catalog, repos):
        catalog.save(
            {
                "name": "Group class",
                "duration": "60",
                "price": "25.50",
                "availabilities_type": "fixed",
                "attendants_number": "8",
                "id_service_categories": "1",
            }
        )

        service = repos[0].insert.call_args[0][0]
        assert service.duration == 60
        assert service.price == Decimal("25.50")
        assert service.attendants_number == 8
        assert service.id_service_categories == 1

    def test_name_is_required(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.save({"duration": 30})
        assert exc_info.value.message == "Not all required fields are provided: name."

    def test_minimum_duration(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.save({"name": "Quick", "duration": 4})
        assert exc_info.value.message == "The duration value must be at least 5."

    def test_negative_price(self, catalog):
        with pytest.raises(ValidationError):
            catalog.save({"name": "Haircut", "price": -1})

    def test_unknown_availabilities_type(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.save({"name": "Haircut", "availabilities_type": "weekly"})
        assert exc_info.value.field == "availabilities type"

    def test_flexible_service_single_attendant(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.save({"name": "Haircut", "attendants_number": 2})
        assert exc_info.value.message == (
            "Services with flexible availabilities type cannot have more than one attendant."
        )

    def test_unknown_category(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.save({"name": "Haircut", "id_service_categories": 5})
        assert exc_info.value.message == (
            "The provided service category ID does not exist in the database: 5"
        )

    def test_attach_category_and_providers(self, catalog, repos):
        service_repo, category_repo, provider_repo = repos
        category_repo.find.return_value = ServiceCategory(id=1, name="Hair")
        service_repo.get_provider_ids.return_value = [2]
        provider_repo.find.return_value = Provider(id=2, first_name="Ann")

        record = catalog.api_encode(Service(id=3, name="Cut", id_service_categories=1).to_dict())
        catalog.attach(record, ["category", "providers"])

        assert record["category"] == {"id": 1, "name": "Hair", "description": None}
        assert record["providers"][0]["firstName"] == "Ann"
        service_repo.get_provider_ids.assert_called_once_with(3)

    def test_attach_missing_category(self, catalog):
        record = catalog.attach({"id": 3, "categoryId": None}, ["category"])
        assert record["category"] is None


@pytest.mark.unit
@pytest.mark.services
class TestCategoryService:
    def test_name_is_required(self):
        service = CategoryService(Mock())
        with pytest.raises(ValidationError):
            service.save({"description": "No name"})

    def test_insert(self):
        repo = Mock()
        repo.insert.return_value = 2
        service = CategoryService(repo)

        assert service.save({"name": "Hair", "description": "Cuts"}) == 2
        assert repo.insert.call_args[0][0] == ServiceCategory(
            name="Hair", description="Cuts"
        )

    def test_categories_have_no_relations(self):
        with pytest.raises(ValidationError):
            CategoryService(Mock()).attach({"id": 1}, ["services"])
