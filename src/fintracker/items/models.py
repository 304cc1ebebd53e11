#!/usr/bin/env python3
"""
Item Models

A free-form user item (title, optional description, amount and category)
and the validation rules applied before it is stored.
"""

from dataclasses import dataclass
from typing import Any

from ..core.models import JsonRecord

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


@dataclass
class Item(JsonRecord):
    id: str
    title: str
    created_at: str
    updated_at: str
    description: str | None = None
    amount: float | None = None
    category: str | None = None


@dataclass
class StorageInfo:
    """File metadata for a user's item document."""

    file_size: int
    items_count: int
    file_path: str
    last_modified: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileSize": self.file_size,
            "itemsCount": self.items_count,
            "filePath": self.file_path,
            "lastModified": self.last_modified,
        }


def validate_item(data: dict[str, Any], partial: bool = False) -> list[str]:
    """
    Check item input; returns a list of problems (empty when valid).

    Args:
        data: Attribute values (``title``, ``description``, ``amount``, ...)
        partial: True for updates, where an absent title is not an error
    """
    errors = []

    title = data.get("title")
    if title is None and partial:
        pass
    elif not isinstance(title, str) or not title.strip():
        errors.append("Title is required")
    elif len(title.strip()) > MAX_TITLE_LENGTH:
        errors.append(f"Title must be less than {MAX_TITLE_LENGTH} characters")

    description = data.get("description")
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"Description must be less than {MAX_DESCRIPTION_LENGTH} characters")

    amount = data.get("amount")
    if amount is not None:
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount < 0:
            errors.append("Amount must be a positive number")

    return errors
