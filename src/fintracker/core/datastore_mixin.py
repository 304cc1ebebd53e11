#!/usr/bin/env python3
"""
DataStore Mixin - Common functionality for all DataStore implementations.

Provides shared implementation of the metadata methods every per-user
document store exposes (existence, age, size), all derived from the file
returned by ``path_for(scope)``.
"""

from abc import abstractmethod
from datetime import datetime
from pathlib import Path


class DataStoreMixin:
    """
    Mixin providing common DataStore functionality.

    Provides:
    - File existence, modification time and size for a scope
    - age_days derived from last_modified

    Subclasses must implement:
    - path_for(scope) -> Path
    - item_count(scope) -> int | None
    - summary_text(scope) -> str
    """

    @abstractmethod
    def path_for(self, scope: str) -> Path:
        """Path of the JSON document for a scope (usually a user id)."""
        ...

    @abstractmethod
    def item_count(self, scope: str) -> int | None:
        """Get count of items/records in stored data."""
        ...

    @abstractmethod
    def summary_text(self, scope: str) -> str:
        """Get human-readable summary of current data state."""
        ...

    def exists(self, scope: str) -> bool:
        """Check if the document for a scope exists."""
        return self.path_for(scope).exists()

    def last_modified(self, scope: str) -> datetime | None:
        """Get timestamp of the document, or None if it doesn't exist."""
        path = self.path_for(scope)
        if not path.exists():
            return None
        return datetime.fromtimestamp(path.stat().st_mtime)

    def size_bytes(self, scope: str) -> int | None:
        """Get document size in bytes, or None if it doesn't exist."""
        path = self.path_for(scope)
        if not path.exists():
            return None
        return path.stat().st_size

    def age_days(self, scope: str) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified(scope)
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days
