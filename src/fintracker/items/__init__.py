"""
Items Package

A per-user list of free-form items, created empty when a user registers.
"""

from .datastore import ItemStore
from .models import Item, StorageInfo, validate_item
from .service import ItemService

__all__ = ["Item", "ItemService", "ItemStore", "StorageInfo", "validate_item"]
