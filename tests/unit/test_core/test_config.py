#!/usr/bin/env python3
"""Tests for configuration loading."""

from pathlib import Path

import pytest

from fintracker.core.config import Config, Environment, get_config, reload_config


class TestConfigLoading:
    """Test configuration loading and structure."""

    def test_config_loads_from_environment(self, tmp_path):
        config = get_config()

        assert config.environment == Environment.TEST
        assert config.data_dir == tmp_path / "fintracker_data"
        assert config.storage.user_data_dir == config.data_dir / "user_data"
        assert config.storage.users_file == config.data_dir / "users.json"
        assert config.admin.seed_password == "seed-secret"

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_generated_seed_outside_production(self, monkeypatch):
        monkeypatch.delenv("FINTRACKER_ADMIN_PASSWORD")
        config = reload_config()

        assert config.admin.seed_generated is True
        assert config.admin.seed_password

    def test_production_requires_admin_password(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FINTRACKER_ENV", "production")
        monkeypatch.setenv("FINTRACKER_DATA_DIR", str(tmp_path / "prod"))
        monkeypatch.delenv("FINTRACKER_ADMIN_PASSWORD")

        with pytest.raises(ValueError, match="FINTRACKER_ADMIN_PASSWORD"):
            reload_config()

    def test_to_dict_redacts_seed_password(self, temp_dir):
        config = Config.for_directory(temp_dir, admin_password="hunter2")

        redacted = config.to_dict()
        assert redacted["admin"]["seed_password"] == "***REDACTED***"
        assert redacted["environment"] == "test"
        assert redacted["storage"]["data_dir"] == str(Path(temp_dir))

        assert config.to_dict(include_sensitive=True)["admin"]["seed_password"] == "hunter2"

    def test_validate_reports_bad_log_level(self, temp_dir):
        config = Config.for_directory(temp_dir, admin_password="x")
        config.log_level = "LOUD"
        assert "Invalid log level: LOUD" in config.validate()
