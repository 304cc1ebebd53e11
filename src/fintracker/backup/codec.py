#!/usr/bin/env python3
"""
Backup Codec

Bundles a user's assets, expenses and savings into one versioned JSON
envelope and restores it again:

    {
      "version": "1.0.0",
      "exportDate": "...",
      "userId": "...",
      "username": "...",
      "assets": {...},
      "expenses": [...],
      "savings": [...],
      "userSettings": {"biometricEnabled": false, ...}
    }

Dividends are not part of the envelope. Import checks the whole envelope,
every record included, before it writes anything.
"""

import json
import logging
from contextlib import ExitStack
from dataclasses import MISSING
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..assets.datastore import AssetStore
from ..assets.models import COLLECTIONS, AssetData
from ..auth.registry import UserRegistry
from ..core.config import Config
from ..core.dates import FinancialDate, now_iso
from ..core.errors import StorageError, ValidationError, VersionMismatchError
from ..core.json_utils import write_json
from ..ledger.models import EXPENSES, SAVINGS, LedgerKind
from ..ledger.service import ExpenseService, SavingService

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"
HEADER_KEYS = ("version", "exportDate", "userId", "username")
SECTION_KEYS = ("assets", "expenses", "savings")
INVALID_FILE_MESSAGE = "Invalid JSON file or file format"

NUMERIC_TYPES = (float, int, float | None, int | None)
# Derived or signed values that may legitimately be negative
SIGNED_FIELDS = {"returns"}


class BackupCodec:
    """
    Args:
        config: Application configuration
        registry: User registry (for user settings and admin checks)
    """

    version = EXPORT_VERSION

    def __init__(self, config: Config, registry: UserRegistry | None = None):
        self.config = config
        self.registry = registry or UserRegistry(config)
        self.assets = AssetStore(config)
        self.expenses = ExpenseService(config)
        self.savings = SavingService(config)

    # Export

    def export(self, user_id: str, username: str) -> dict[str, Any]:
        """Build the envelope; absent files export as empty sections."""
        if self.assets.exists(user_id):
            assets = self.assets.read_all(user_id)
        else:
            assets = AssetData.empty(now_iso()).to_dict()

        user = self.registry.find_by_id(user_id)
        settings: dict[str, Any] = {"biometricEnabled": bool(user and user.biometric_enabled)}
        if user and user.email:
            settings["email"] = user.email
        if user and user.preferences:
            settings["preferences"] = user.preferences

        envelope = {
            "version": self.version,
            "exportDate": now_iso(),
            "userId": user_id,
            "username": username,
            "assets": assets,
            "expenses": self._ledger_records(self.expenses.store, user_id),
            "savings": self._ledger_records(self.savings.store, user_id),
            "userSettings": settings,
        }
        logger.info(f"Exported data for user {user_id}")
        return envelope

    def write_export_file(self, envelope: dict[str, Any]) -> Path:
        """
        Write an envelope to the exports directory.

        Returns:
            Path like ``exports/financetracker_backup_alice_2024-06-10T12-00-00-000Z.json``
        """
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        timestamp = timestamp.replace("+00:00", "Z").replace(":", "-").replace(".", "-")
        path = self.config.storage.export_dir / f"financetracker_backup_{envelope['username']}_{timestamp}.json"
        try:
            write_json(path, envelope)
        except OSError as e:
            logger.error(f"Failed to write backup file {path}: {e}")
            raise StorageError(f"Failed to export data: {e}") from e
        logger.info(f"Wrote backup file {path}")
        return path

    # Import

    def validate(self, raw: str | bytes | dict[str, Any]) -> dict[str, Any]:
        """
        Parse an envelope and check its header keys and data sections.

        Raises:
            ValidationError: "Invalid JSON file or file format" for anything else
        """
        if isinstance(raw, dict):
            envelope = raw
        else:
            try:
                envelope = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ValidationError(INVALID_FILE_MESSAGE) from e

        if not isinstance(envelope, dict):
            raise ValidationError(INVALID_FILE_MESSAGE)
        if any(not envelope.get(key) for key in HEADER_KEYS):
            raise ValidationError(INVALID_FILE_MESSAGE)
        if any(envelope.get(key) is None for key in SECTION_KEYS):
            raise ValidationError(INVALID_FILE_MESSAGE)
        return envelope

    def import_(self, user_id: str, envelope: dict[str, Any]) -> bool:
        """
        Replace the user's assets, expenses and savings with the envelope's.
        Either every document is replaced or, if a write fails, all of them
        are put back as they were.

        The yearly expense and savings rollups are reset to zero for the
        current financial year.

        Raises:
            VersionMismatchError: Envelope version differs from this codec's
            ValidationError: Some record is malformed; ``errors`` lists each one
            StorageError: A write failed; the previous documents were restored
        """
        if envelope.get("version") != self.version:
            raise VersionMismatchError(self.version, envelope.get("version"))

        errors = self.check_records(envelope)
        if errors:
            logger.error(f"Rejected import for user {user_id}: {len(errors)} invalid records")
            raise ValidationError(f"Import contains {len(errors)} invalid record(s)", errors)

        stores = [
            self.assets,
            self.expenses.store,
            self.savings.store,
            self.expenses.yearly_store,
            self.savings.yearly_store,
        ]
        with ExitStack() as locks:
            for store in stores:
                locks.enter_context(store.lock(user_id))
            snapshots = [(store, store.snapshot(user_id)) for store in stores]
            try:
                self.assets.write_all(user_id, envelope["assets"])
                self.expenses.store.write_all(user_id, {EXPENSES.name: envelope["expenses"]})
                self.savings.store.write_all(user_id, {SAVINGS.name: envelope["savings"]})
                self.expenses.reset_yearly(user_id)
                self.savings.reset_yearly(user_id)
            except StorageError:
                logger.error(f"Import failed for user {user_id}, restoring previous data")
                for store, snapshot in snapshots:
                    store.restore(user_id, snapshot)
                raise

        logger.info(f"Imported data for user {user_id} from export of {envelope.get('username')}")
        return True

    def check_records(self, envelope: dict[str, Any]) -> list[str]:
        """Structural problems with the envelope's records (empty when sound)."""
        errors: list[str] = []

        assets = envelope.get("assets")
        if not isinstance(assets, dict):
            return ["assets: must be an object"]
        for key, collection in COLLECTIONS.items():
            records = assets.get(key, [])
            if not isinstance(records, list):
                errors.append(f"assets.{key}: must be a list")
                continue
            for index, record in enumerate(records):
                errors.extend(_check_record(f"assets.{key}[{index}]", record, collection.record_type))

        for kind in (EXPENSES, SAVINGS):
            records = envelope.get(kind.name)
            if not isinstance(records, list):
                errors.append(f"{kind.name}: must be a list")
                continue
            for index, record in enumerate(records):
                errors.extend(_check_ledger_entry(f"{kind.name}[{index}]", record, kind))

        return errors

    # Info

    def get_export_info(self, user_id: str) -> dict[str, Any]:
        """
        Size, last modification and record count of the exportable files.

        Administrators have no exportable data and report 0 records.
        """
        user = self.registry.find_by_id(user_id)
        if user is not None and user.is_admin:
            return {"itemsCount": 0}

        stores = [self.assets, self.expenses.store, self.savings.store]
        total_size = sum(store.size_bytes(user_id) or 0 for store in stores)
        modified = [m for m in (store.last_modified(user_id) for store in stores) if m is not None]

        items_count = 0
        if self.assets.exists(user_id):
            items_count += self.assets.load(user_id).record_count
        items_count += len(self._ledger_records(self.expenses.store, user_id))
        items_count += len(self._ledger_records(self.savings.store, user_id))

        info: dict[str, Any] = {"fileSize": total_size, "itemsCount": items_count}
        if modified:
            info["lastExport"] = max(modified).isoformat(timespec="seconds")
        return info

    def has_user_data(self, user_id: str) -> bool:
        return self.get_export_info(user_id)["itemsCount"] > 0

    def _ledger_records(self, store, user_id: str) -> list[dict[str, Any]]:
        if not store.exists(user_id):
            return []
        return store.read_records(user_id)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_record(where: str, record: Any, record_type: type) -> list[str]:
    if not isinstance(record, dict):
        return [f"{where}: must be an object"]

    errors = []
    if not isinstance(record.get("id"), str) or not record["id"]:
        errors.append(f"{where}: missing id")

    for f in record_type._record_fields():
        key = record_type._key_for(f.name)
        required = f.default is MISSING and f.default_factory is MISSING
        if key not in record or record[key] is None:
            if required and key != "id":
                errors.append(f"{where}: missing {key}")
            continue
        if f.type in NUMERIC_TYPES:
            value = record[key]
            if not _is_number(value):
                errors.append(f"{where}: {key} must be a number")
            elif value < 0 and f.name not in SIGNED_FIELDS:
                errors.append(f"{where}: {key} must not be negative")
    return errors


def _check_ledger_entry(where: str, record: Any, kind: LedgerKind) -> list[str]:
    errors = _check_record(where, record, kind.record_type)
    if errors or not isinstance(record, dict):
        return errors
    if record["amount"] <= 0:
        errors.append(f"{where}: amount must be positive")
    for key in ("category", "date", kind.record_type._key_for(kind.text_field)):
        if not record.get(key):
            errors.append(f"{where}: {key} is required")
    if record.get("date"):
        try:
            FinancialDate.from_string(str(record["date"]))
        except ValueError:
            errors.append(f"{where}: date must be YYYY-MM-DD")
    return errors
