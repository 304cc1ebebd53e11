#!/usr/bin/env python3
"""
DocumentStore - whole-document JSON persistence for per-user data.

Every domain (assets, items, expenses, savings, dividends, users) keeps one
JSON document per scope. Higher layers never patch a file in place: they read
the whole document, change it in memory, and write the whole document back.

Read-modify-write sequences run inside ``transaction()``, which holds a
re-entrant lock keyed by (data directory, store name, scope) for the whole
sequence, so two concurrent edits to the same document cannot lose one
another's changes.
"""

import json
import logging
import threading
from abc import abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

from .config import Config
from .datastore_mixin import DataStoreMixin
from .errors import StorageError
from .json_utils import read_json, write_json

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class DataStore(Protocol):
    """
    Protocol for per-scope document persistence and metadata queries.

    A scope is normally a user id; the user registry uses a fixed scope.
    """

    def read_all(self, scope: str) -> Document:
        """
        Load the document, creating it from the empty skeleton if missing.

        Raises:
            StorageError: If the file can't be read or isn't valid JSON
        """
        ...

    def write_all(self, scope: str, document: Document) -> None:
        """
        Replace the whole document.

        Raises:
            StorageError: If the file can't be written
        """
        ...

    def exists(self, scope: str) -> bool:
        ...

    def item_count(self, scope: str) -> int | None:
        ...

    def summary_text(self, scope: str) -> str:
        ...


class LockRegistry:
    """Hands out one re-entrant lock per key, creating locks on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, ...], threading.RLock] = {}

    def lock_for(self, *key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock


_locks = LockRegistry()


class DocumentStore(DataStoreMixin):
    """
    Base class for a JSON document kept per scope.

    Subclasses define where the document lives, what an empty one looks
    like, and optionally ``prepare()`` to bring derived fields up to date
    right before every write.
    """

    store_name: str = "document"

    def __init__(self, config: Config):
        self.config = config

    @abstractmethod
    def path_for(self, scope: str) -> Path:
        ...

    @abstractmethod
    def skeleton(self, scope: str) -> Document:
        """Empty document written the first time a scope is accessed."""
        ...

    def prepare(self, scope: str, document: Document) -> Document:
        """Hook run before every write; returns the document to persist."""
        return document

    def lock(self, scope: str) -> threading.RLock:
        return _locks.lock_for(str(self.config.storage.data_dir), self.store_name, scope)

    def read_all(self, scope: str) -> Document:
        path = self.path_for(scope)
        with self.lock(scope):
            if not path.exists():
                logger.debug(f"Initializing {self.store_name} document at {path}")
                self._write(path, self.skeleton(scope))
            try:
                document = read_json(path)
            except json.JSONDecodeError as e:
                raise StorageError(f"Corrupt {self.store_name} file {path}: {e}") from e
            except OSError as e:
                raise StorageError(f"Failed to read {self.store_name} file {path}: {e}") from e

        if not isinstance(document, dict):
            raise StorageError(
                f"Invalid {self.store_name} file {path}: expected object, got {type(document).__name__}"
            )
        return document

    def write_all(self, scope: str, document: Document) -> None:
        with self.lock(scope):
            self._write(self.path_for(scope), self.prepare(scope, document))

    def _write(self, path: Path, document: Document) -> None:
        try:
            write_json(path, document)
        except OSError as e:
            raise StorageError(f"Failed to write {self.store_name} file {path}: {e}") from e

    @contextmanager
    def transaction(self, scope: str) -> Iterator[Document]:
        """
        Read the document, yield it for in-place mutation, then write it.

        The write is skipped if the block raises, leaving the file untouched.
        """
        with self.lock(scope):
            document = self.read_all(scope)
            yield document
            self.write_all(scope, document)

    def delete(self, scope: str) -> bool:
        """Remove the document for a scope; False if there was none."""
        path = self.path_for(scope)
        with self.lock(scope):
            if not path.exists():
                return False
            try:
                path.unlink()
            except OSError as e:
                raise StorageError(f"Failed to delete {self.store_name} file {path}: {e}") from e
        logger.info(f"Deleted {self.store_name} document for {scope}")
        return True

    def snapshot(self, scope: str) -> Document | None:
        """The document exactly as stored, or None if there is no file yet."""
        path = self.path_for(scope)
        with self.lock(scope):
            if not path.exists():
                return None
            try:
                return read_json(path)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Failed to read {self.store_name} file {path}: {e}") from e

    def restore(self, scope: str, snapshot: Document | None) -> None:
        """Put back a ``snapshot()`` as-is, without running ``prepare()``."""
        with self.lock(scope):
            if snapshot is None:
                self.delete(scope)
            else:
                self._write(self.path_for(scope), snapshot)

    def reset(self, scope: str) -> Document:
        """Overwrite the document with a fresh skeleton."""
        document = self.skeleton(scope)
        self.write_all(scope, document)
        return document


class CollectionStore(DocumentStore):
    """
    A document holding a single flat list under one top-level key,
    e.g. ``{"expenses": [...]}``.
    """

    collection_key: str = "items"

    def skeleton(self, scope: str) -> Document:
        return {self.collection_key: []}

    def read_records(self, scope: str) -> list[dict[str, Any]]:
        return list(self.read_all(scope).get(self.collection_key) or [])

    def item_count(self, scope: str) -> int | None:
        if not self.exists(scope):
            return None
        try:
            return len(self.read_records(scope))
        except StorageError:
            return 0

    def summary_text(self, scope: str) -> str:
        count = self.item_count(scope)
        if count is None:
            return f"No {self.store_name} found"
        return f"{self.store_name.capitalize()}: {count} records"
