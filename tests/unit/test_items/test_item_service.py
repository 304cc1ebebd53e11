#!/usr/bin/env python3
"""Tests for generic item storage."""

import pytest

from fintracker.core.errors import NotFoundError, ValidationError
from fintracker.items.models import validate_item
from fintracker.items.service import ItemService

USER = "user-1"


@pytest.fixture
def service(config):
    return ItemService(config)


class TestValidation:
    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"title": "Laptop"}, []),
            ({"title": "   "}, ["Title is required"]),
            ({"title": "x" * 101}, ["Title must be less than 100 characters"]),
            ({"title": "ok", "description": "d" * 501}, ["Description must be less than 500 characters"]),
            ({"title": "ok", "amount": -1}, ["Amount must be a positive number"]),
            ({"title": "ok", "amount": "12"}, ["Amount must be a positive number"]),
        ],
        ids=["valid", "blank_title", "long_title", "long_description", "negative_amount", "string_amount"],
    )
    def test_validate_item(self, data, expected):
        assert validate_item(data) == expected

    def test_partial_update_does_not_require_title(self):
        assert validate_item({"amount": 5}, partial=True) == []


class TestItemService:
    def test_initialize_creates_empty_document(self, service):
        service.initialize(USER)

        assert service.store.path_for(USER).name == f"{USER}_data.json"
        assert service.read_all(USER) == []
        document = service.store.read_all(USER)
        assert document["createdAt"] and document["updatedAt"]

    def test_create_read_update_delete(self, service):
        item = service.create(USER, "  Laptop ", amount=1200.0, category="Electronics")
        assert item.title == "Laptop"
        assert service.read(USER, item.id).category == "Electronics"

        updated = service.update(USER, item.id, title="Work laptop", description="Company issued")
        assert updated.title == "Work laptop"
        assert updated.amount == 1200.0
        assert updated.created_at == item.created_at

        assert service.delete(USER, item.id) is True
        assert service.read(USER, item.id) is None

    def test_invalid_create_reports_every_problem(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.create(USER, "", amount=-5)
        assert exc_info.value.errors == ["Title is required", "Amount must be a positive number"]

    def test_missing_item(self, service):
        with pytest.raises(NotFoundError, match="Item not found"):
            service.update(USER, "nope", title="x")
        with pytest.raises(NotFoundError, match="Item not found"):
            service.delete(USER, "nope")

    def test_delete_all_and_storage_info(self, service):
        service.create(USER, "One")
        service.create(USER, "Two")

        info = service.storage_info(USER)
        assert info.items_count == 2
        assert info.file_size > 0
        assert info.to_dict()["filePath"].endswith(f"{USER}_data.json")

        service.delete_all(USER)
        assert service.storage_info(USER).items_count == 0
