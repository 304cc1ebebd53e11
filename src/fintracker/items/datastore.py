#!/usr/bin/env python3
"""
Item DataStore

Per-user item list at ``user_data/{user_id}_data.json``:
``{"items": [...], "createdAt": ..., "updatedAt": ...}``.
"""

from pathlib import Path

from ..core.datastore import CollectionStore, Document
from ..core.dates import now_iso


class ItemStore(CollectionStore):
    """DataStore for a user's generic items."""

    store_name = "items"
    collection_key = "items"

    def path_for(self, scope: str) -> Path:
        return self.config.storage.user_data_dir / f"{scope}_data.json"

    def skeleton(self, scope: str) -> Document:
        timestamp = now_iso()
        return {"items": [], "createdAt": timestamp, "updatedAt": timestamp}

    def prepare(self, scope: str, document: Document) -> Document:
        document["updatedAt"] = now_iso()
        document.setdefault("createdAt", document["updatedAt"])
        return document
