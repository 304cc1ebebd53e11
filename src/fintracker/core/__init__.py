"""
Core Utilities Package

Shared infrastructure used by every finance tracker domain.

This package provides:
- Configuration management for environment-specific settings
- The error hierarchy raised by stores and services
- Whole-document JSON stores with per-document locking and atomic writes
- Currency rounding and financial-year date helpers
"""

from .config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    is_development,
    is_production,
    is_test,
    reload_config,
)
from .currency import (
    calculate_returns,
    format_inr,
    multiply_currency,
    round_currency,
    round_units,
    safe_parse_float,
    safe_parse_int,
    sum_currency,
)
from .datastore import CollectionStore, DataStore, DocumentStore
from .dates import FinancialDate, now_iso, suggested_financial_years
from .errors import (
    AuthenticationError,
    ErrorKind,
    FinanceTrackerError,
    NotFoundError,
    StorageError,
    ValidationError,
    VersionMismatchError,
)
from .models import JsonRecord, generate_id

__all__ = [
    "AuthenticationError",
    "CollectionStore",
    # Configuration
    "Config",
    "DataStore",
    "DocumentStore",
    "Environment",
    # Errors
    "ErrorKind",
    "FinanceTrackerError",
    "FinancialDate",
    "JsonRecord",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    "VersionMismatchError",
    # Currency utilities
    "calculate_returns",
    "format_inr",
    "generate_id",
    "get_config",
    "get_data_dir",
    "is_development",
    "is_production",
    "is_test",
    "multiply_currency",
    "now_iso",
    "reload_config",
    "round_currency",
    "round_units",
    "safe_parse_float",
    "safe_parse_int",
    "suggested_financial_years",
    "sum_currency",
]
