#!/usr/bin/env python3
"""
Ledger DataStores

Flat entry lists live at ``{name}_{user_id}.json`` in the data directory,
e.g. ``expenses_42.json`` holding ``{"expenses": [...]}``. The yearly rollup
for each list lives beside it at ``{yearly_prefix}_{user_id}.json``.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ..core.config import Config
from ..core.datastore import CollectionStore, Document, DocumentStore
from ..core.dates import FinancialDate, now_iso
from .models import LedgerKind, YearlyAggregate

logger = logging.getLogger(__name__)


class LedgerStore(CollectionStore):
    """DataStore for one user's expenses, savings or dividends."""

    def __init__(self, config: Config, kind: LedgerKind):
        super().__init__(config)
        self.kind = kind
        self.store_name = kind.name
        self.collection_key = kind.name

    def path_for(self, scope: str) -> Path:
        return self.config.storage.data_dir / f"{self.kind.name}_{scope}.json"


class YearlyAggregateStore(DocumentStore):
    """
    DataStore for the cached financial-year rollup of a ledger.

    A missing file is created as an all-zero rollup for the financial year
    containing today.
    """

    def __init__(
        self,
        config: Config,
        kind: LedgerKind,
        clock: Callable[[], FinancialDate] = FinancialDate.today,
    ):
        super().__init__(config)
        self.kind = kind
        self.clock = clock
        self.store_name = kind.yearly_prefix

    def path_for(self, scope: str) -> Path:
        return self.config.storage.data_dir / f"{self.kind.yearly_prefix}_{scope}.json"

    def skeleton(self, scope: str) -> Document:
        return YearlyAggregate.empty(self.kind, self.clock().financial_year(), now_iso()).to_dict()

    def load(self, user_id: str) -> YearlyAggregate:
        return YearlyAggregate.from_dict(self.kind, self.read_all(user_id))

    def save(self, user_id: str, aggregate: YearlyAggregate) -> None:
        self.write_all(user_id, aggregate.to_dict())

    def item_count(self, scope: str) -> int | None:
        if not self.exists(scope):
            return None
        return len(self.load(scope).category_totals)

    def summary_text(self, scope: str) -> str:
        if not self.exists(scope):
            return f"No {self.kind.name} rollup found"
        aggregate = self.load(scope)
        return f"{self.kind.label} total for {aggregate.year}: {aggregate.total:,.2f}"
