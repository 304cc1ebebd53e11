#!/usr/bin/env python3
"""Tests for registration, login resolution and account management."""

import json
import threading

import pytest

from fintracker.assets.service import AssetService
from fintracker.auth.models import LoginRequest, Registration
from fintracker.auth.resolver import AuthFailure, AuthMethod
from fintracker.auth.service import AuthService
from fintracker.auth.vault import CredentialVault
from fintracker.core.config import Config
from fintracker.core.errors import AuthenticationError, NotFoundError, ValidationError
from fintracker.ledger.service import ExpenseService

pytestmark = pytest.mark.auth


class AlwaysApprove:
    def is_supported(self):
        return True

    def authenticate(self, prompt="ok"):
        return True


class AlwaysDeny(AlwaysApprove):
    def authenticate(self, prompt="ok"):
        return False


@pytest.fixture
def auth(config):
    return AuthService(config)


@pytest.fixture
def alice(auth):
    return auth.register(Registration(username="alice", password="wonderland", email="alice@example.com", pin="1234"))


def admin_login(auth):
    return auth.login(LoginRequest(username="admin", password="seed-secret"))


class TestVault:
    def test_hash_is_sha256_hex(self):
        vault = CredentialVault()
        digest = vault.hash("secret")

        assert len(digest) == 64
        assert digest == vault.hash("secret")
        assert vault.verify("secret", digest)
        assert not vault.verify("Secret", digest)
        assert not vault.verify("secret", None)


class TestRegistration:
    def test_register_stores_only_hashes(self, auth, alice, config):
        stored = json.loads(config.storage.users_file.read_text())["users"]
        record = next(u for u in stored if u["username"] == "alice")

        assert record["passwordHash"] == CredentialVault().hash("wonderland")
        assert record["pinHash"] == CredentialVault().hash("1234")
        assert "wonderland" not in json.dumps(stored)
        assert "passwordHash" not in alice.public_dict()

    def test_register_creates_item_document(self, auth, alice):
        assert auth.get_user_data_path(alice.id).exists()

    @pytest.mark.parametrize(
        "registration,message",
        [
            (Registration(username="", password="x"), "Username is required"),
            (Registration(username="bob", password=""), "Password is required"),
            (Registration(username="bob", password="x", email="not-an-email"), "Invalid email format"),
            (Registration(username="bob", password="x", pin="12a4"), "PIN must be exactly 4 digits"),
        ],
        ids=["no_username", "no_password", "bad_email", "bad_pin"],
    )
    def test_invalid_registration(self, auth, registration, message):
        with pytest.raises(ValidationError, match=message):
            auth.register(registration)

    def test_duplicate_username_and_email(self, auth, alice):
        with pytest.raises(ValidationError, match="Username already exists"):
            auth.register(Registration(username="alice", password="x"))
        with pytest.raises(ValidationError, match="Email already exists"):
            auth.register(Registration(username="alice2", password="x", email="ALICE@example.com"))


class TestLoginResolution:
    def test_password_login_records_last_login(self, auth, alice):
        result = auth.authenticate(LoginRequest(username="alice", password="wonderland"))

        assert result.ok
        assert result.method == AuthMethod.PASSWORD
        assert auth.get_user_by_id(alice.id).last_login is not None

    def test_login_by_email(self, auth, alice):
        assert auth.login(LoginRequest(email="Alice@Example.com", password="wonderland")).id == alice.id

    def test_wrong_pin_fails_even_with_correct_password(self, auth, alice):
        result = auth.authenticate(LoginRequest(username="alice", pin="9999", password="wonderland"))

        assert not result.ok
        assert result.method == AuthMethod.PIN
        assert result.failure == AuthFailure.INVALID_PIN
        assert auth.get_user_by_id(alice.id).last_login is None

    def test_correct_pin(self, auth, alice):
        assert auth.authenticate(LoginRequest(username="alice", pin="1234")).method == AuthMethod.PIN

    def test_pin_ignored_when_user_has_none(self, auth):
        auth.register(Registration(username="bob", password="builder"))
        result = auth.authenticate(LoginRequest(username="bob", pin="0000", password="builder"))
        assert result.method == AuthMethod.PASSWORD and result.ok

    def test_wrong_password(self, auth, alice):
        result = auth.authenticate(LoginRequest(username="alice", password="nope"))
        assert result.failure == AuthFailure.INVALID_PASSWORD
        assert auth.login(LoginRequest(username="alice", password="nope")) is None

    def test_unknown_user_and_no_credentials(self, auth, alice):
        assert auth.authenticate(LoginRequest(username="carol", password="x")).failure == AuthFailure.USER_NOT_FOUND
        assert auth.authenticate(LoginRequest(username="alice")).failure == AuthFailure.NO_METHOD

    def test_biometric_decides_when_enabled(self, config, alice):
        AuthService(config).enable_biometric(alice.id, True)

        approved = AuthService(config, biometric=AlwaysApprove())
        result = approved.authenticate(LoginRequest(username="alice", use_biometric=True, password="wrong"))
        assert result.ok and result.method == AuthMethod.BIOMETRIC

        denied = AuthService(config, biometric=AlwaysDeny())
        result = denied.authenticate(LoginRequest(username="alice", use_biometric=True, password="wonderland"))
        assert result.failure == AuthFailure.BIOMETRIC_DENIED

    def test_biometric_unsupported_by_default(self, auth):
        assert auth.is_biometric_supported() is False


class TestAdminBootstrap:
    def test_seeded_admin_can_log_in(self, auth):
        admin = admin_login(auth)
        assert admin is not None and admin.is_admin

    def test_bootstrap_creates_exactly_one_admin(self, temp_dir):
        config = Config.for_directory(temp_dir, admin_password="seed-secret")
        # An existing registry without the administrator
        config.storage.users_file.parent.mkdir(parents=True, exist_ok=True)
        config.storage.users_file.write_text(json.dumps({"users": []}))

        results = []

        def login():
            results.append(AuthService(config).authenticate(LoginRequest(username="admin", password="seed-secret")))

        threads = [threading.Thread(target=login) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r.ok for r in results)
        users = json.loads(config.storage.users_file.read_text())["users"]
        assert [u["username"] for u in users] == ["admin"]
        assert users[0]["isAdmin"] is True

    def test_wrong_seed_password_is_rejected(self, temp_dir):
        config = Config.for_directory(temp_dir, admin_password="seed-secret")
        config.storage.users_file.parent.mkdir(parents=True, exist_ok=True)
        config.storage.users_file.write_text(json.dumps({"users": []}))

        result = AuthService(config).authenticate(LoginRequest(username="admin", password="guess"))
        assert result.failure == AuthFailure.USER_NOT_FOUND

    def test_no_admin_without_seed(self, temp_dir):
        auth = AuthService(Config.for_directory(temp_dir))
        assert auth.registry.all_users() == []


class TestSelfService:
    def test_change_password(self, auth, alice):
        with pytest.raises(AuthenticationError, match="Current password is incorrect"):
            auth.change_password(alice.id, "wrong", "new-secret")

        assert auth.change_password(alice.id, "wonderland", "new-secret")
        assert auth.login(LoginRequest(username="alice", password="new-secret")) is not None
        assert auth.login(LoginRequest(username="alice", password="wonderland")) is None

    def test_change_pin(self, auth, alice):
        with pytest.raises(ValidationError):
            auth.change_pin(alice.id, "12345")
        auth.change_pin(alice.id, "4321")
        assert auth.authenticate(LoginRequest(username="alice", pin="4321")).ok

    def test_update_email(self, auth, alice):
        auth.register(Registration(username="bob", password="x", email="bob@example.com"))

        with pytest.raises(ValidationError, match="Email already exists"):
            auth.update_email(alice.id, "bob@example.com")
        assert auth.update_email(alice.id, "alice@new.example").email == "alice@new.example"

    def test_unknown_user(self, auth):
        with pytest.raises(NotFoundError, match="User not found"):
            auth.enable_biometric("missing", True)


class TestAdministration:
    def test_non_admin_is_refused(self, auth, alice):
        with pytest.raises(AuthenticationError, match="Administrator privileges required"):
            auth.get_all_users(alice.id)

    def test_list_create_update(self, auth, alice):
        admin = admin_login(auth)

        bob = auth.create_user(admin.id, "bob", "builder", email="bob@example.com", is_admin=True)
        assert auth.get_user_by_id(bob.id).is_admin

        usernames = sorted(u.username for u in auth.get_all_users(admin.id))
        assert usernames == ["admin", "alice", "bob"]

        updated = auth.update_user(admin.id, alice.id, username="alice.w", new_password="reset")
        assert updated.username == "alice.w"
        assert auth.login(LoginRequest(username="alice.w", password="reset")) is not None

        with pytest.raises(ValidationError, match="Unknown user field"):
            auth.update_user(admin.id, alice.id, role="root")

    def test_rename_to_own_padded_username(self, auth, alice):
        admin = admin_login(auth)

        updated = auth.update_user(admin.id, alice.id, username=" alice ")
        assert updated.username == "alice"

        auth.create_user(admin.id, "bob", "builder")
        with pytest.raises(ValidationError, match="Username already exists"):
            auth.update_user(admin.id, alice.id, username=" bob ")

    def test_last_admin_is_protected(self, auth, alice):
        admin = admin_login(auth)

        with pytest.raises(ValidationError, match="last administrator"):
            auth.update_user(admin.id, admin.id, is_admin=False)
        with pytest.raises(ValidationError, match="Cannot delete your own account"):
            auth.delete_user(admin.id, admin.id)

    def test_delete_user_removes_data(self, auth, alice, config):
        admin = admin_login(auth)
        AssetService(config).create_bank_account(alice.id, bank_name="SBI", balance=10)
        ExpenseService(config).create(alice.id, description="Tea", amount=20, category="Food", date="2024-05-01")

        assert auth.delete_user(admin.id, alice.id) is True
        assert auth.get_user_by_id(alice.id) is None
        assert not AssetService(config).store.exists(alice.id)
        assert not ExpenseService(config).store.exists(alice.id)
        assert not auth.get_user_data_path(alice.id).exists()
