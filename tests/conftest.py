"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path

import pytest

from fintracker.core.config import Config
from fintracker.core.dates import FinancialDate

ADMIN_PASSWORD = "seed-secret"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def config(temp_dir) -> Config:
    """Configuration rooted at a fresh temporary directory."""
    return Config.for_directory(temp_dir, admin_password=ADMIN_PASSWORD)


@pytest.fixture
def today() -> FinancialDate:
    """A fixed reference date so derived values are reproducible."""
    return FinancialDate.from_string("2024-06-15")


@pytest.fixture
def sample_bank_account() -> dict:
    return {"bank_name": "State Bank", "balance": 25000.50, "account_type": "Savings"}


@pytest.fixture
def sample_expense() -> dict:
    return {
        "description": "Groceries",
        "amount": 1250.75,
        "category": "Food",
        "date": "2024-05-10",
    }


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't touch a real data directory
    monkeypatch.setenv("FINTRACKER_ENV", "test")
    monkeypatch.setenv("FINTRACKER_DATA_DIR", str(tmp_path / "fintracker_data"))
    monkeypatch.setenv("FINTRACKER_ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # Force the global configuration to be rebuilt from the variables above
    monkeypatch.setattr("fintracker.core.config._config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "auth: Tests for authentication and user management")
    config.addinivalue_line("markers", "slow: Tests that take significant time to run")
