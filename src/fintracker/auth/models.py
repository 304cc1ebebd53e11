#!/usr/bin/env python3
"""
Authentication Data Models

User accounts as stored in ``users.json`` plus the request shapes accepted by
registration and login.
"""

import re
from dataclasses import dataclass
from typing import Any

from ..core.models import JsonRecord

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PIN_PATTERN = re.compile(r"^\d{4}$")

HASH_FIELDS = ("passwordHash", "pinHash")


@dataclass
class User(JsonRecord):
    id: str
    username: str
    password_hash: str
    created_at: str
    biometric_enabled: bool = False
    is_admin: bool = False
    email: str | None = None
    pin_hash: str | None = None
    last_login: str | None = None
    preferences: dict[str, Any] | None = None

    def public_dict(self) -> dict[str, Any]:
        """User fields safe to display or export: no credential hashes."""
        return {k: v for k, v in self.to_dict().items() if k not in HASH_FIELDS}


@dataclass
class LoginRequest:
    """
    Credentials offered at login. The first applicable of biometric, PIN and
    password is the one that is checked.
    """

    username: str | None = None
    email: str | None = None
    password: str | None = None
    pin: str | None = None
    use_biometric: bool = False

    def __repr__(self) -> str:
        return (
            f"LoginRequest(username={self.username!r}, email={self.email!r}, "
            f"password={'***' if self.password else None}, pin={'***' if self.pin else None}, "
            f"use_biometric={self.use_biometric})"
        )


@dataclass
class Registration:
    username: str
    password: str
    email: str | None = None
    pin: str | None = None
    biometric_enabled: bool = False

    def validate(self) -> list[str]:
        """Return a list of problems with the registration (empty when valid)."""
        errors = []
        if not self.username or not self.username.strip():
            errors.append("Username is required")
        if not self.password:
            errors.append("Password is required")
        if self.email and not is_valid_email(self.email):
            errors.append("Invalid email format")
        if self.pin and not is_valid_pin(self.pin):
            errors.append("PIN must be exactly 4 digits")
        return errors


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_pin(pin: str) -> bool:
    return bool(PIN_PATTERN.match(pin))
