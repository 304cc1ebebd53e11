"""
Assets Package

Per-user asset portfolio: ten record collections, their derived values and
the summary that totals them.

Key Components:
- AssetData and the record dataclasses (models)
- recalculate / compute_summary: derived-field aggregation (calculator)
- AssetStore: the per-user asset document (datastore)
- AssetService: create/update/delete operations (service)
"""

from .calculator import calculate_fy_interest, compute_summary, recalculate
from .datastore import AssetStore
from .models import (
    COLLECTIONS,
    AssetData,
    AssetSummary,
    BankAccount,
    DepositStatus,
    EquityETF,
    FixedDeposit,
    FloatingRateBond,
    GoldETF,
    MutualFund,
    NationalPensionScheme,
    PublicProvidentFund,
    RecurringDeposit,
    Stock,
)
from .service import AssetService

__all__ = [
    "COLLECTIONS",
    "AssetData",
    "AssetService",
    "AssetStore",
    "AssetSummary",
    "BankAccount",
    "DepositStatus",
    "EquityETF",
    "FixedDeposit",
    "FloatingRateBond",
    "GoldETF",
    "MutualFund",
    "NationalPensionScheme",
    "PublicProvidentFund",
    "RecurringDeposit",
    "Stock",
    "calculate_fy_interest",
    "compute_summary",
    "recalculate",
]
