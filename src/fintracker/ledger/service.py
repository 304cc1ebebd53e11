#!/usr/bin/env python3
"""
Ledger Services

Create, update, delete and query expenses, savings and dividends. Each
mutation is one transaction on the entry list, followed by a refresh of the
current financial year's rollup.
"""

import logging
from collections.abc import Callable
from typing import Any

from ..core.config import Config
from ..core.currency import safe_parse_float, sum_currency
from ..core.dates import FinancialDate, now_iso
from ..core.errors import NotFoundError, ValidationError
from ..core.models import generate_id
from .aggregate import yearly_totals
from .datastore import LedgerStore, YearlyAggregateStore
from .models import DIVIDENDS, EXPENSES, SAVINGS, LedgerKind, YearlyAggregate

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Please fill in all required fields"


def _optional_amount(value: Any) -> float | None:
    if value in (None, ""):
        return None
    return safe_parse_float(value) or None


class LedgerService:
    """
    Shared behavior of the three ledgers; subclasses only pick the kind and
    the parsers for their optional numeric fields.
    """

    kind: LedgerKind = EXPENSES
    optional_numbers: tuple[str, ...] = ()

    def __init__(self, config: Config, clock: Callable[[], FinancialDate] = FinancialDate.today):
        self.config = config
        self.clock = clock
        self.store = LedgerStore(config, self.kind)
        self.yearly_store = YearlyAggregateStore(config, self.kind, clock)

    def list_entries(
        self,
        user_id: str,
        category: str | None = None,
        month: str | None = None,
        search: str | None = None,
    ) -> list:
        """
        Entries newest first, optionally filtered.

        Args:
            category: Exact category key
            month: ``YYYY-MM`` bucket
            search: Case-insensitive match on the text field, category or notes
        """
        entries = [self.kind.record_type.from_dict(raw) for raw in self.store.read_records(user_id)]
        if category:
            entries = [e for e in entries if e.category == category]
        if month:
            entries = [e for e in entries if (e.date or "")[:7] == month]
        if search:
            needle = search.lower()
            entries = [
                e
                for e in entries
                if needle in (getattr(e, self.kind.text_field) or "").lower()
                or needle in (e.category or "").lower()
                or needle in (e.notes or "").lower()
            ]
        return sorted(entries, key=lambda e: e.date or "", reverse=True)

    def get(self, user_id: str, entry_id: str):
        for raw in self.store.read_records(user_id):
            if raw.get("id") == entry_id:
                return self.kind.record_type.from_dict(raw)
        raise NotFoundError(f"{self.kind.label} not found")

    def create(self, user_id: str, **fields: Any):
        values = self._coerce(fields)
        self._validate(values)
        values["id"] = generate_id()
        values["created_at"] = now_iso()
        entry = self.kind.record_type(**values)

        with self.store.transaction(user_id) as document:
            document.setdefault(self.kind.name, []).append(entry.to_dict())

        logger.info(f"Created {self.kind.label.lower()} {entry.id} for user {user_id}")
        self.refresh_yearly(user_id)
        return entry

    def update(self, user_id: str, entry_id: str, **fields: Any):
        patch = self._coerce(fields)
        patch.pop("id", None)
        patch.pop("created_at", None)

        with self.store.transaction(user_id) as document:
            entries = document.setdefault(self.kind.name, [])
            for index, raw in enumerate(entries):
                if raw.get("id") != entry_id:
                    continue
                entry = self.kind.record_type.from_dict(raw)
                for name, value in patch.items():
                    setattr(entry, name, value)
                self._validate({name: getattr(entry, name) for name in self._required_fields()})
                entries[index] = entry.to_dict()
                break
            else:
                logger.error(f"{self.kind.label} {entry_id} not found for user {user_id}")
                raise NotFoundError(f"{self.kind.label} not found")

        logger.info(f"Updated {self.kind.label.lower()} {entry_id} for user {user_id}")
        self.refresh_yearly(user_id)
        return entry

    def delete(self, user_id: str, entry_id: str) -> bool:
        with self.store.transaction(user_id) as document:
            entries = document.get(self.kind.name) or []
            remaining = [raw for raw in entries if raw.get("id") != entry_id]
            if len(remaining) == len(entries):
                logger.error(f"{self.kind.label} {entry_id} not found for user {user_id}")
                raise NotFoundError(f"{self.kind.label} not found")
            document[self.kind.name] = remaining

        logger.info(f"Deleted {self.kind.label.lower()} {entry_id} for user {user_id}")
        self.refresh_yearly(user_id)
        return True

    def total(self, user_id: str, category: str | None = None) -> float:
        """Sum of all entries, or of one category."""
        return sum_currency(e.amount for e in self.list_entries(user_id, category=category))

    def yearly_summary(self, user_id: str, financial_year: str | None = None) -> YearlyAggregate:
        """
        Compute the rollup for a financial year without persisting it.

        Defaults to the financial year containing today.
        """
        financial_year = financial_year or self.clock().financial_year()
        timestamp = now_iso()
        return yearly_totals(self.store.read_records(user_id), self.kind, financial_year, timestamp, timestamp)

    def refresh_yearly(self, user_id: str) -> YearlyAggregate:
        """Recompute the current financial year's rollup and store it."""
        with self.yearly_store.lock(user_id):
            cached = self.yearly_store.load(user_id)
            aggregate = yearly_totals(
                self.store.read_records(user_id),
                self.kind,
                self.clock().financial_year(),
                cached.created_at or now_iso(),
                now_iso(),
            )
            self.yearly_store.save(user_id, aggregate)
        return aggregate

    def reset_yearly(self, user_id: str) -> YearlyAggregate:
        """Replace the stored rollup with an all-zero one for the current year."""
        aggregate = YearlyAggregate.empty(self.kind, self.clock().financial_year(), now_iso())
        self.yearly_store.save(user_id, aggregate)
        return aggregate

    # Internals

    def _required_fields(self) -> tuple[str, ...]:
        return ("amount", self.kind.text_field, "category", "date")

    def _coerce(self, fields: dict[str, Any]) -> dict[str, Any]:
        known = {f.name for f in self.kind.record_type._record_fields()} - {"id", "created_at"}
        unknown = sorted(set(fields) - known)
        if unknown:
            raise ValidationError(f"Unknown {self.kind.label.lower()} field(s): {', '.join(unknown)}")

        values = {}
        for name, value in fields.items():
            if name == "amount":
                # Keep the sign so a negative amount fails validation
                negative = str(value).strip().startswith("-")
                value = safe_parse_float(value)
                if negative:
                    value = -value
            elif name in self.optional_numbers:
                value = _optional_amount(value)
            elif isinstance(value, str):
                value = value.strip() or None
            values[name] = value
        return values

    def _validate(self, values: dict[str, Any]) -> None:
        if any(not values.get(name) for name in self._required_fields()):
            raise ValidationError(REQUIRED_MESSAGE)
        if values["amount"] <= 0:
            raise ValidationError("Please enter a valid amount")
        try:
            FinancialDate.from_string(values["date"])
        except ValueError:
            raise ValidationError("Date must be in YYYY-MM-DD format") from None


class ExpenseService(LedgerService):
    kind = EXPENSES


class SavingService(LedgerService):
    kind = SAVINGS
    optional_numbers = ("expected_return",)


class DividendService(LedgerService):
    kind = DIVIDENDS
    optional_numbers = ("quantity", "dividend_per_share")
