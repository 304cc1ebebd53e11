#!/usr/bin/env python3
"""
Configuration Management for Finance Tracker

Handles environment-based configuration with secure defaults and validation.
Every on-disk path used by the stores is derived from a single base data
directory held here, so tests can point the whole application at a temporary
directory by building their own Config.
"""

import logging
import os
import secrets
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class StorageConfig:
    """Locations of the per-user JSON documents."""

    data_dir: Path
    user_data_dir: Path
    export_dir: Path
    users_file: Path

    @classmethod
    def for_base_dir(cls, data_dir: Path) -> "StorageConfig":
        """Derive every storage path from one base directory."""
        return cls(
            data_dir=data_dir,
            user_data_dir=data_dir / "user_data",
            export_dir=data_dir / "exports",
            users_file=data_dir / "users.json",
        )


@dataclass
class AdminConfig:
    """Bootstrap administrator credentials."""

    username: str = "admin"
    seed_password: str | None = None
    seed_generated: bool = False


@dataclass
class Config:
    """
    Main configuration class for the finance tracker.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment
    storage: StorageConfig
    admin: AdminConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @property
    def data_dir(self) -> Path:
        return self.storage.data_dir

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("FINTRACKER_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_fintracker"
            base_dir = Path(os.getenv("FINTRACKER_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("FINTRACKER_DATA_DIR", "./data")).expanduser().resolve()

        storage = StorageConfig.for_base_dir(base_dir)
        for directory in [storage.data_dir, storage.user_data_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        admin = AdminConfig(
            username=os.getenv("FINTRACKER_ADMIN_USERNAME", "admin"),
            seed_password=os.getenv("FINTRACKER_ADMIN_PASSWORD") or None,
        )
        if admin.seed_password is None and env != Environment.PRODUCTION:
            # Without a configured seed the admin account is still reachable
            # once per process, using a random secret announced in the log.
            admin.seed_password = secrets.token_urlsafe(12)
            admin.seed_generated = True

        return cls(
            environment=env,
            storage=storage,
            admin=admin,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def for_directory(
        cls,
        data_dir: Path,
        admin_password: str | None = None,
        environment: Environment = Environment.TEST,
    ) -> "Config":
        """Build a configuration rooted at an explicit directory."""
        return cls(
            environment=environment,
            storage=StorageConfig.for_base_dir(Path(data_dir)),
            admin=AdminConfig(seed_password=admin_password),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.storage.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.storage.data_dir}")

        if self.environment == Environment.PRODUCTION and not self.admin.seed_password:
            errors.append("FINTRACKER_ADMIN_PASSWORD is required in production")

        if not self.admin.username:
            errors.append("Admin username must not be empty")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid log level: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.admin.seed_generated:
            logger.warning(
                "No FINTRACKER_ADMIN_PASSWORD configured; bootstrap password for '%s' is %s",
                self.admin.username,
                self.admin.seed_password,
            )

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "admin.seed_password",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if isinstance(field_value, Enum):
                result[field_name] = field_value.value
            elif hasattr(field_value, "__dict__"):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if not include_sensitive and full_field_name in self.get_sensitive_fields():
                        nested_dict[nested_name] = "***REDACTED***"
                    elif isinstance(nested_value, Path):
                        nested_dict[nested_name] = str(nested_value)
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    """Get the data directory path."""
    return get_config().data_dir


def is_development() -> bool:
    """Check if running in development environment."""
    return get_config().environment == Environment.DEVELOPMENT


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST


def is_production() -> bool:
    """Check if running in production environment."""
    return get_config().environment == Environment.PRODUCTION
