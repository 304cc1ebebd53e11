"""
Ledger Package

Expenses, savings and dividends: flat per-user entry lists with a cached
rollup for the current April-March financial year.
"""

from .aggregate import yearly_totals
from .datastore import LedgerStore, YearlyAggregateStore
from .models import DIVIDENDS, EXPENSES, SAVINGS, Dividend, Expense, LedgerKind, Saving, YearlyAggregate
from .service import DividendService, ExpenseService, LedgerService, SavingService

__all__ = [
    "DIVIDENDS",
    "EXPENSES",
    "SAVINGS",
    "Dividend",
    "DividendService",
    "Expense",
    "ExpenseService",
    "LedgerKind",
    "LedgerService",
    "LedgerStore",
    "Saving",
    "SavingService",
    "YearlyAggregate",
    "YearlyAggregateStore",
    "yearly_totals",
]
