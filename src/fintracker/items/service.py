#!/usr/bin/env python3
"""
Item Service

Create, read, update and delete for a user's generic items.
"""

import logging
from typing import Any

from ..core.config import Config
from ..core.dates import now_iso
from ..core.errors import NotFoundError, ValidationError
from ..core.models import generate_id
from .datastore import ItemStore
from .models import Item, StorageInfo, validate_item

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "amount", "category")


class ItemService:
    def __init__(self, config: Config, store: ItemStore | None = None):
        self.config = config
        self.store = store or ItemStore(config)

    def initialize(self, user_id: str) -> None:
        """Create the empty item document if the user has none yet."""
        self.store.read_all(user_id)

    def create(self, user_id: str, title: str, **fields: Any) -> Item:
        data = self._check({"title": title, **fields})
        timestamp = now_iso()
        item = Item(
            id=generate_id(),
            title=data["title"].strip(),
            created_at=timestamp,
            updated_at=timestamp,
            description=data.get("description"),
            amount=data.get("amount"),
            category=data.get("category"),
        )
        with self.store.transaction(user_id) as document:
            document.setdefault("items", []).append(item.to_dict())
        logger.info(f"Created item {item.id} for user {user_id}")
        return item

    def read_all(self, user_id: str) -> list[Item]:
        return [Item.from_dict(raw) for raw in self.store.read_records(user_id)]

    def read(self, user_id: str, item_id: str) -> Item | None:
        """Find one item; None if there is no such id."""
        for item in self.read_all(user_id):
            if item.id == item_id:
                return item
        return None

    def update(self, user_id: str, item_id: str, **fields: Any) -> Item:
        data = self._check(fields, partial=True)
        with self.store.transaction(user_id) as document:
            items = document.setdefault("items", [])
            for index, raw in enumerate(items):
                if raw.get("id") == item_id:
                    item = Item.from_dict(raw)
                    for name, value in data.items():
                        setattr(item, name, value.strip() if name == "title" else value)
                    item.updated_at = now_iso()
                    items[index] = item.to_dict()
                    break
            else:
                raise NotFoundError("Item not found")
        logger.info(f"Updated item {item_id} for user {user_id}")
        return item

    def delete(self, user_id: str, item_id: str) -> bool:
        with self.store.transaction(user_id) as document:
            items = document.get("items") or []
            remaining = [raw for raw in items if raw.get("id") != item_id]
            if len(remaining) == len(items):
                raise NotFoundError("Item not found")
            document["items"] = remaining
        logger.info(f"Deleted item {item_id} for user {user_id}")
        return True

    def delete_all(self, user_id: str) -> bool:
        self.store.reset(user_id)
        logger.info(f"Cleared all items for user {user_id}")
        return True

    def storage_info(self, user_id: str) -> StorageInfo:
        items = self.store.read_records(user_id)
        path = self.store.path_for(user_id)
        last_modified = self.store.last_modified(user_id)
        return StorageInfo(
            file_size=self.store.size_bytes(user_id) or 0,
            items_count=len(items),
            file_path=str(path),
            last_modified=last_modified.timestamp() if last_modified else None,
        )

    def _check(self, fields: dict[str, Any], partial: bool = False) -> dict[str, Any]:
        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown item field(s): {', '.join(unknown)}")
        errors = validate_item(fields, partial=partial)
        if errors:
            raise ValidationError("; ".join(errors), errors)
        return fields
