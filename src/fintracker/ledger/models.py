#!/usr/bin/env python3
"""
Ledger Data Models

Flat per-user lists of expenses, savings and dividends, and the cached
financial-year rollup kept next to each list.
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.models import JsonRecord


@dataclass
class Expense(JsonRecord):
    id: str
    amount: float
    description: str
    category: str
    date: str
    created_at: str
    notes: str | None = None


@dataclass
class Saving(JsonRecord):
    id: str
    amount: float
    description: str
    category: str
    date: str
    created_at: str
    notes: str | None = None
    expected_return: float | None = None
    maturity_date: str | None = None


@dataclass
class Dividend(JsonRecord):
    id: str
    amount: float
    company: str
    category: str
    date: str
    created_at: str
    stock_symbol: str | None = None
    quantity: float | None = None
    dividend_per_share: float | None = None
    notes: str | None = None


@dataclass(frozen=True)
class LedgerKind:
    """
    Everything that differs between the three ledgers.

    Attributes:
        name: Collection key and file prefix, e.g. ``expenses``
        record_type: Dataclass for one entry
        label: Singular display name used in messages
        text_field: Required free-text attribute (description or company)
        yearly_prefix: File prefix of the yearly rollup
        total_key: Key of the grand total in the yearly rollup
        company_totals: Whether the rollup also groups by company
    """

    name: str
    record_type: type
    label: str
    text_field: str
    yearly_prefix: str
    total_key: str
    company_totals: bool = False


EXPENSES = LedgerKind(
    name="expenses",
    record_type=Expense,
    label="Expense",
    text_field="description",
    yearly_prefix="yearly_expenses",
    total_key="totalExpenses",
)

SAVINGS = LedgerKind(
    name="savings",
    record_type=Saving,
    label="Saving",
    text_field="description",
    yearly_prefix="yearly_financial",
    total_key="totalValue",
)

DIVIDENDS = LedgerKind(
    name="dividends",
    record_type=Dividend,
    label="Dividend",
    text_field="company",
    yearly_prefix="yearly_dividends",
    total_key="totalIncome",
    company_totals=True,
)


@dataclass
class YearlyAggregate:
    """Totals for one financial year (``year`` in ``YYYY-YYYY`` form)."""

    kind: LedgerKind
    year: str
    total: float = 0.0
    category_totals: dict[str, float] = field(default_factory=dict)
    monthly_totals: dict[str, float] = field(default_factory=dict)
    company_totals: dict[str, float] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def empty(cls, kind: LedgerKind, year: str, timestamp: str) -> "YearlyAggregate":
        return cls(kind=kind, year=year, created_at=timestamp, updated_at=timestamp)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "year": self.year,
            self.kind.total_key: self.total,
            "categoryTotals": dict(self.category_totals),
            "monthlyTotals": dict(self.monthly_totals),
        }
        if self.kind.company_totals:
            result["companyTotals"] = dict(self.company_totals)
        result["createdAt"] = self.created_at
        result["updatedAt"] = self.updated_at
        return result

    @classmethod
    def from_dict(cls, kind: LedgerKind, data: dict[str, Any]) -> "YearlyAggregate":
        return cls(
            kind=kind,
            year=data.get("year", ""),
            total=data.get(kind.total_key) or 0.0,
            category_totals=data.get("categoryTotals") or {},
            monthly_totals=data.get("monthlyTotals") or {},
            company_totals=data.get("companyTotals") or {},
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )
