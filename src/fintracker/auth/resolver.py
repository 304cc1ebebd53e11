#!/usr/bin/env python3
"""
Login Resolution

Decides who a login request is, in one fixed order:

1. Locate the account by username, then by email.
2. If there is no such account but the request names the configured
   administrator with the configured seed password, provision the
   administrator and accept.
3. Otherwise check exactly one credential, the first that applies of:
   biometric (requested and enabled), PIN (supplied and set), password
   (supplied). A failed check is final; nothing falls through to the next.
4. On success record ``lastLogin``.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..core.config import AdminConfig
from ..core.dates import now_iso
from .biometric import BiometricAuthenticator, UnsupportedBiometric
from .models import LoginRequest, User
from .registry import UserRegistry
from .vault import CredentialVault

logger = logging.getLogger(__name__)


class AuthMethod(Enum):
    BIOMETRIC = "biometric"
    PIN = "pin"
    PASSWORD = "password"
    BOOTSTRAP = "bootstrap"


class AuthFailure(Enum):
    USER_NOT_FOUND = "user not found"
    BIOMETRIC_DENIED = "biometric authentication failed"
    INVALID_PIN = "invalid PIN"
    INVALID_PASSWORD = "invalid password"
    NO_METHOD = "no authentication method provided"


@dataclass
class AuthResult:
    """Outcome of one login attempt."""

    user: User | None = None
    method: AuthMethod | None = None
    failure: AuthFailure | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.failure is None


class AuthResolver:
    def __init__(
        self,
        registry: UserRegistry,
        admin: AdminConfig,
        vault: CredentialVault | None = None,
        biometric: BiometricAuthenticator | None = None,
    ):
        self.registry = registry
        self.admin = admin
        self.vault = vault or registry.vault
        self.biometric = biometric or UnsupportedBiometric()

    def resolve(self, request: LoginRequest) -> AuthResult:
        with self.registry.lock():
            user = self._locate(request)

            if user is None:
                if self._is_bootstrap(request):
                    admin = self.registry.ensure_admin()
                    return self._succeed(admin, AuthMethod.BOOTSTRAP)
                logger.warning(f"Login failed: no account for {request.username or request.email!r}")
                return AuthResult(failure=AuthFailure.USER_NOT_FOUND)

            method, failure = self._check(user, request)
            if failure is not None:
                logger.warning(f"Login failed for '{user.username}' via {method.value if method else 'none'}: {failure.value}")
                return AuthResult(method=method, failure=failure)
            return self._succeed(user, method)

    def _locate(self, request: LoginRequest) -> User | None:
        user = None
        if request.username:
            user = self.registry.find_by_username(request.username)
        if user is None and request.email:
            user = self.registry.find_by_email(request.email)
        return user

    def _is_bootstrap(self, request: LoginRequest) -> bool:
        return bool(
            self.admin.seed_password
            and request.username == self.admin.username
            and request.password is not None
            and request.password == self.admin.seed_password
        )

    def _check(self, user: User, request: LoginRequest) -> tuple[AuthMethod | None, AuthFailure | None]:
        if request.use_biometric and user.biometric_enabled:
            if self.biometric.authenticate():
                return AuthMethod.BIOMETRIC, None
            return AuthMethod.BIOMETRIC, AuthFailure.BIOMETRIC_DENIED

        if request.pin and user.pin_hash:
            if self.vault.verify(request.pin, user.pin_hash):
                return AuthMethod.PIN, None
            return AuthMethod.PIN, AuthFailure.INVALID_PIN

        if request.password:
            if self.vault.verify(request.password, user.password_hash):
                return AuthMethod.PASSWORD, None
            return AuthMethod.PASSWORD, AuthFailure.INVALID_PASSWORD

        return None, AuthFailure.NO_METHOD

    def _succeed(self, user: User, method: AuthMethod) -> AuthResult:
        user.last_login = now_iso()
        self.registry.save(user)
        logger.info(f"User '{user.username}' logged in via {method.value}")
        return AuthResult(user=user, method=method)
