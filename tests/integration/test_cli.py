#!/usr/bin/env python3
"""
Integration tests for the command-line interface.

Every command runs against the temporary data directory configured by the
autouse environment fixture.
"""

import json

import pytest
from click.testing import CliRunner

from fintracker.assets.service import AssetService
from fintracker.auth.service import AuthService
from fintracker.cli.main import main
from fintracker.core.config import get_config
from fintracker.core.dates import FinancialDate


@pytest.mark.integration
class TestCLIMain:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_help_lists_subcommands(self):
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Finance Tracker" in result.output
        for command in ["user", "assets", "backup", "version", "config"]:
            assert command in result.output

    def test_version(self):
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "Finance Tracker v1.0.0" in result.output
        assert "Author: Finance Tracker Developers" in result.output

    def test_config_redacts_seed_password(self):
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "***REDACTED***" in result.output
        assert "seed-secret" not in result.output

    def test_verbose_shows_environment(self):
        result = self.runner.invoke(main, ["--verbose", "config"])
        assert "Environment: test" in result.output
        assert "Data directory:" in result.output


@pytest.mark.integration
class TestUserCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def register(self, username="alice", password="wonderland", *extra):
        return self.runner.invoke(
            main, ["user", "register", "-u", username, "--password", password, *extra]
        )

    def test_register_and_login(self):
        result = self.register("alice", "wonderland", "--email", "alice@example.com", "--pin", "1234")
        assert result.exit_code == 0, result.output
        assert "Registered alice" in result.output

        result = self.runner.invoke(main, ["user", "login", "-u", "alice", "--password", "wonderland"])
        assert result.exit_code == 0
        assert "Logged in as alice" in result.output

        result = self.runner.invoke(main, ["user", "login", "-u", "alice", "--password", "", "--pin", "1234"])
        assert result.exit_code == 0

    def test_failed_login_exits_nonzero(self):
        self.register()
        result = self.runner.invoke(main, ["user", "login", "-u", "alice", "--password", "nope"])

        assert result.exit_code != 0
        assert "Authentication failed: invalid password" in result.output

    def test_duplicate_registration_reports_error(self):
        self.register()
        result = self.register()

        assert result.exit_code != 0
        assert "Username already exists" in result.output

    def test_list_requires_admin(self):
        self.register()

        result = self.runner.invoke(main, ["user", "list", "-u", "alice", "--password", "wonderland"])
        assert result.exit_code != 0
        assert "Administrator privileges required" in result.output

        result = self.runner.invoke(main, ["user", "list", "-u", "admin", "--password", "seed-secret"])
        assert result.exit_code == 0
        assert "Users (2):" in result.output
        assert "alice" in result.output


@pytest.mark.integration
class TestAssetAndBackupCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def login_args(self, username="alice", password="wonderland"):
        return ["-u", username, "--password", password]

    def register_alice(self):
        result = self.runner.invoke(main, ["user", "register", "-u", "alice", "--password", "wonderland"])
        assert result.exit_code == 0, result.output
        return AuthService(get_config()).registry.find_by_username("alice")

    def test_summary_and_list(self):
        alice = self.register_alice()
        assets = AssetService(get_config())
        assets.create_bank_account(alice.id, bank_name="State Bank", balance=25000)
        assets.create_fixed_deposit(
            alice.id, bank_name="SBI", amount=100000, interest_rate=7, start_date=FinancialDate.today().to_iso_string(), tenure=12
        )

        result = self.runner.invoke(main, ["assets", "summary", *self.login_args()])
        assert result.exit_code == 0, result.output
        assert "Asset Summary for alice" in result.output
        assert "₹25,000.00" in result.output
        assert "₹125,000.00" in result.output

        result = self.runner.invoke(main, ["assets", "list", "bankAccounts", *self.login_args()])
        assert result.exit_code == 0
        assert "Bank account records (1):" in result.output
        assert "State Bank" in result.output

        result = self.runner.invoke(main, ["assets", "list", "stocks", *self.login_args()])
        assert "No stock records." in result.output

    def test_backup_export_then_import(self):
        alice = self.register_alice()
        AssetService(get_config()).create_bank_account(alice.id, bank_name="State Bank", balance=500)

        result = self.runner.invoke(main, ["backup", "export", *self.login_args()])
        assert result.exit_code == 0, result.output
        exported = list(get_config().storage.export_dir.glob("financetracker_backup_alice_*.json"))
        assert len(exported) == 1

        self.runner.invoke(main, ["user", "register", "-u", "bob", "--password", "builder"])
        result = self.runner.invoke(
            main, ["backup", "import", str(exported[0]), "--yes", *self.login_args("bob", "builder")]
        )
        assert result.exit_code == 0, result.output

        bob = AuthService(get_config()).registry.find_by_username("bob")
        assert AssetService(get_config()).get_asset_data(bob.id).summary.cash == 500.0

    def test_import_rejects_wrong_version(self, tmp_path):
        self.register_alice()
        backup_file = tmp_path / "old.json"
        backup_file.write_text(
            json.dumps(
                {
                    "version": "0.9.0",
                    "exportDate": "2024-01-01T00:00:00.000Z",
                    "userId": "1",
                    "username": "alice",
                    "assets": {},
                    "expenses": [],
                    "savings": [],
                }
            )
        )

        result = self.runner.invoke(main, ["backup", "import", str(backup_file), "--yes", *self.login_args()])
        assert result.exit_code != 0
        assert "Invalid export file version. Expected 1.0.0, got 0.9.0" in result.output

