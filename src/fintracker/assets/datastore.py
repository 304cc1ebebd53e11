#!/usr/bin/env python3
"""
Asset DataStore

One asset document per user at ``user_data/{user_id}_assets.json``. Every
write recomputes derived fields and the summary first, so the file on disk
always satisfies the summary invariant.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ..core.config import Config
from ..core.datastore import Document, DocumentStore
from ..core.dates import FinancialDate, now_iso
from .calculator import recalculate
from .models import AssetData

logger = logging.getLogger(__name__)


class AssetStore(DocumentStore):
    """
    DataStore for per-user asset documents.

    Args:
        config: Application configuration
        clock: Supplies "today" for maturity status and bond growth
    """

    store_name = "assets"

    def __init__(self, config: Config, clock: Callable[[], FinancialDate] = FinancialDate.today):
        super().__init__(config)
        self.clock = clock

    def path_for(self, scope: str) -> Path:
        return self.config.storage.user_data_dir / f"{scope}_assets.json"

    def skeleton(self, scope: str) -> Document:
        return AssetData.empty(now_iso()).to_dict()

    def prepare(self, scope: str, document: Document) -> Document:
        asset_data = recalculate(AssetData.from_dict(document), self.clock())
        asset_data.last_updated = now_iso()
        return asset_data.to_dict()

    def load(self, user_id: str) -> AssetData:
        """Read and parse the user's asset document."""
        return AssetData.from_dict(self.read_all(user_id))

    def item_count(self, scope: str) -> int | None:
        if not self.exists(scope):
            return None
        return self.load(scope).record_count

    def summary_text(self, scope: str) -> str:
        if not self.exists(scope):
            return "No asset data found"
        asset_data = self.load(scope)
        return f"Assets: {asset_data.record_count} records, total {asset_data.summary.total_assets:,.2f}"
