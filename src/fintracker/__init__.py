"""
Finance Tracker - Personal Asset and Ledger Management

A local, file-backed tracker for a household's bank accounts, deposits,
funds, provident and pension accounts, expenses, savings and dividends.

Key Features:
- Per-user JSON documents with derived fields kept consistent on every write
- Portfolio summary across ten asset categories
- Password, PIN and biometric login with a self-provisioning administrator
- Financial-year expense, savings and dividend rollups
- Versioned backup export and import

Domain Packages:
- core: Configuration, errors, document storage, dates and rounding helpers
- assets: Asset records, derived-value calculator and CRUD service
- items: Generic per-user item list
- ledger: Expenses, savings, dividends and their yearly aggregates
- auth: Users, credential hashing and login resolution
- backup: Export/import envelope codec
- cli: Command-line interface

Example Usage:
    from fintracker.auth import AuthService
    from fintracker.assets import AssetService
    from fintracker.core.config import get_config
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Developers"

from .core.config import Environment, get_config
from .core.currency import calculate_returns, format_inr, round_currency, safe_parse_float
from .core.errors import (
    AuthenticationError,
    FinanceTrackerError,
    NotFoundError,
    StorageError,
    ValidationError,
    VersionMismatchError,
)

__all__ = [
    # Errors
    "AuthenticationError",
    # Configuration
    "Environment",
    "FinanceTrackerError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    "VersionMismatchError",
    # Currency helpers
    "calculate_returns",
    "format_inr",
    "get_config",
    "round_currency",
    "safe_parse_float",
]
