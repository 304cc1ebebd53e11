#!/usr/bin/env python3
"""
Authentication Service

Registration, login and account self-service, plus the administrator
operations for managing other accounts.

Administrator operations take the acting user's id first and raise
AuthenticationError unless that user is an administrator.
"""

import logging
from pathlib import Path
from typing import Any

from ..assets.datastore import AssetStore
from ..core.config import Config
from ..core.dates import now_iso
from ..core.errors import AuthenticationError, NotFoundError, ValidationError
from ..core.models import generate_id
from ..items.service import ItemService
from ..ledger.datastore import LedgerStore, YearlyAggregateStore
from ..ledger.models import DIVIDENDS, EXPENSES, SAVINGS
from .biometric import BiometricAuthenticator, UnsupportedBiometric
from .models import LoginRequest, Registration, User, is_valid_email, is_valid_pin
from .registry import UserRegistry
from .resolver import AuthResolver, AuthResult
from .vault import CredentialVault

logger = logging.getLogger(__name__)


class AuthService:
    """
    Args:
        config: Application configuration
        biometric: Device biometric hook (default: unsupported, always denies)
    """

    def __init__(self, config: Config, biometric: BiometricAuthenticator | None = None):
        self.config = config
        self.vault = CredentialVault()
        self.biometric = biometric or UnsupportedBiometric()
        self.registry = UserRegistry(config, self.vault)
        self.resolver = AuthResolver(self.registry, config.admin, self.vault, self.biometric)
        self.items = ItemService(config)

    # Registration and login

    def register(self, registration: Registration) -> User:
        """
        Create an account and its empty item list.

        Raises:
            ValidationError: Missing/invalid fields, or username/email already taken
        """
        errors = registration.validate()
        if errors:
            raise ValidationError("; ".join(errors), errors)

        username = registration.username.strip()
        email = registration.email.strip() if registration.email else None

        with self.registry.lock():
            if self.registry.find_by_username(username) is not None:
                raise ValidationError("Username already exists")
            if email and self.registry.find_by_email(email) is not None:
                raise ValidationError("Email already exists")

            user = User(
                id=generate_id(),
                username=username,
                email=email,
                password_hash=self.vault.hash(registration.password),
                pin_hash=self.vault.hash(registration.pin) if registration.pin else None,
                biometric_enabled=registration.biometric_enabled,
                created_at=now_iso(),
            )
            self.registry.add(user)

        self.items.initialize(user.id)
        logger.info(f"Registered user '{username}' ({user.id})")
        return user

    def authenticate(self, request: LoginRequest) -> AuthResult:
        """Resolve a login request, reporting which method decided and why it failed."""
        return self.resolver.resolve(request)

    def login(self, request: LoginRequest) -> User | None:
        """The authenticated user, or None if the credentials were not accepted."""
        return self.authenticate(request).user

    # Self-service

    def get_user_by_id(self, user_id: str) -> User | None:
        return self.registry.find_by_id(user_id)

    def enable_biometric(self, user_id: str, enabled: bool) -> User:
        with self.registry.lock():
            user = self._require_user(user_id)
            user.biometric_enabled = enabled
            self.registry.save(user)
        logger.info(f"Biometric login {'enabled' if enabled else 'disabled'} for '{user.username}'")
        return user

    def change_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        if not new_password:
            raise ValidationError("Password is required")
        with self.registry.lock():
            user = self._require_user(user_id)
            if not self.vault.verify(current_password, user.password_hash):
                logger.warning(f"Password change rejected for '{user.username}': current password incorrect")
                raise AuthenticationError("Current password is incorrect")
            user.password_hash = self.vault.hash(new_password)
            self.registry.save(user)
        logger.info(f"Password changed for '{user.username}'")
        return True

    def change_pin(self, user_id: str, new_pin: str) -> bool:
        if not is_valid_pin(new_pin or ""):
            raise ValidationError("PIN must be exactly 4 digits")
        with self.registry.lock():
            user = self._require_user(user_id)
            user.pin_hash = self.vault.hash(new_pin)
            self.registry.save(user)
        logger.info(f"PIN changed for '{user.username}'")
        return True

    def update_email(self, user_id: str, email: str) -> User:
        email = (email or "").strip()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        with self.registry.lock():
            user = self._require_user(user_id)
            other = self.registry.find_by_email(email)
            if other is not None and other.id != user_id:
                raise ValidationError("Email already exists")
            user.email = email
            self.registry.save(user)
        logger.info(f"Email updated for '{user.username}'")
        return user

    def is_biometric_supported(self) -> bool:
        return self.biometric.is_supported()

    def get_user_data_path(self, user_id: str) -> Path:
        return self.items.store.path_for(user_id)

    # Administrator operations

    def get_all_users(self, admin_id: str) -> list[User]:
        self._require_admin(admin_id)
        return self.registry.all_users()

    def create_user(
        self,
        admin_id: str,
        username: str,
        password: str,
        email: str | None = None,
        is_admin: bool = False,
        biometric_enabled: bool = False,
    ) -> User:
        self._require_admin(admin_id)
        user = self.register(
            Registration(
                username=username,
                password=password,
                email=email,
                biometric_enabled=biometric_enabled,
            )
        )
        if is_admin:
            with self.registry.lock():
                user.is_admin = True
                self.registry.save(user)
        logger.info(f"Administrator {admin_id} created user '{user.username}'")
        return user

    def update_user(self, admin_id: str, user_id: str, **changes: Any) -> User:
        """
        Edit another account.

        Accepted changes: ``username``, ``email``, ``is_admin``,
        ``biometric_enabled`` and ``new_password`` (resets the password).
        """
        admin = self._require_admin(admin_id)
        allowed = {"username", "email", "is_admin", "biometric_enabled", "new_password"}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValidationError(f"Unknown user field(s): {', '.join(unknown)}")

        with self.registry.lock():
            user = self._require_user(user_id)

            username = changes.get("username")
            if username is not None:
                username = username.strip()
                if not username:
                    raise ValidationError("Username is required")
                other = self.registry.find_by_username(username)
                if other is not None and other.id != user.id:
                    raise ValidationError("Username already exists")
                user.username = username

            email = changes.get("email")
            if email is not None:
                email = email.strip() or None
                if email:
                    if not is_valid_email(email):
                        raise ValidationError("Invalid email format")
                    other = self.registry.find_by_email(email)
                    if other is not None and other.id != user.id:
                        raise ValidationError("Email already exists")
                user.email = email

            if "is_admin" in changes:
                if not changes["is_admin"] and user.is_admin and self.registry.admin_count() <= 1:
                    raise ValidationError("Cannot remove the last administrator")
                if not changes["is_admin"] and user.id == admin.id:
                    raise ValidationError("Cannot remove your own administrator rights")
                user.is_admin = bool(changes["is_admin"])

            if "biometric_enabled" in changes:
                user.biometric_enabled = bool(changes["biometric_enabled"])

            if changes.get("new_password"):
                user.password_hash = self.vault.hash(changes["new_password"])

            self.registry.save(user)

        logger.info(f"Administrator '{admin.username}' updated user '{user.username}'")
        return user

    def delete_user(self, admin_id: str, user_id: str) -> bool:
        """
        Remove an account and every data file belonging to it.

        Raises:
            ValidationError: Deleting yourself or the last administrator
        """
        admin = self._require_admin(admin_id)
        if user_id == admin.id:
            raise ValidationError("Cannot delete your own account")

        with self.registry.lock():
            user = self._require_user(user_id)
            if user.is_admin and self.registry.admin_count() <= 1:
                raise ValidationError("Cannot delete the last administrator")
            self.registry.remove(user_id)

        removed = self._delete_user_files(user_id)
        logger.info(f"Administrator '{admin.username}' deleted user '{user.username}' and {removed} data files")
        return True

    def export_user_data_as_admin(self, admin_id: str, user_id: str) -> Path:
        """Write a backup file for another user; returns its path."""
        from ..backup.codec import BackupCodec

        self._require_admin(admin_id)
        user = self._require_user(user_id)
        codec = BackupCodec(self.config, self.registry)
        return codec.write_export_file(codec.export(user.id, user.username))

    def import_user_data_as_admin(self, admin_id: str, user_id: str, raw: str | dict[str, Any]) -> bool:
        from ..backup.codec import BackupCodec

        self._require_admin(admin_id)
        self._require_user(user_id)
        codec = BackupCodec(self.config, self.registry)
        envelope = codec.validate(raw)
        return codec.import_(user_id, envelope)

    # Internals

    def _require_user(self, user_id: str) -> User:
        user = self.registry.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _require_admin(self, admin_id: str) -> User:
        admin = self.registry.find_by_id(admin_id)
        if admin is None or not admin.is_admin:
            logger.warning(f"Administrator operation refused for {admin_id}")
            raise AuthenticationError("Administrator privileges required")
        return admin

    def _delete_user_files(self, user_id: str) -> int:
        stores = [AssetStore(self.config), self.items.store]
        for kind in (EXPENSES, SAVINGS, DIVIDENDS):
            stores.append(LedgerStore(self.config, kind))
            stores.append(YearlyAggregateStore(self.config, kind))
        return sum(1 for store in stores if store.delete(user_id))
