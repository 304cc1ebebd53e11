#!/usr/bin/env python3
"""
User Registry

All accounts live in one ``users.json`` document: ``{"users": [...]}``.
The configured administrator is created the first time the registry is
read, using the configured seed password.
"""

import logging
from pathlib import Path

from ..core.config import Config
from ..core.datastore import CollectionStore, Document
from ..core.dates import now_iso
from ..core.models import generate_id
from .models import User
from .vault import CredentialVault

logger = logging.getLogger(__name__)

REGISTRY_SCOPE = "registry"


class UserRegistry(CollectionStore):
    """DataStore for user accounts."""

    store_name = "users"
    collection_key = "users"

    def __init__(self, config: Config, vault: CredentialVault | None = None):
        super().__init__(config)
        self.vault = vault or CredentialVault()

    def path_for(self, scope: str = REGISTRY_SCOPE) -> Path:
        return self.config.storage.users_file

    def skeleton(self, scope: str = REGISTRY_SCOPE) -> Document:
        users = []
        if self.config.admin.seed_password:
            users.append(self._new_admin().to_dict())
            logger.info(f"Provisioned administrator account '{self.config.admin.username}'")
        return {"users": users}

    def lock(self, scope: str = REGISTRY_SCOPE):
        return super().lock(REGISTRY_SCOPE)

    # Queries

    def all_users(self) -> list[User]:
        return [User.from_dict(raw) for raw in self.read_records(REGISTRY_SCOPE)]

    def find_by_id(self, user_id: str) -> User | None:
        return next((u for u in self.all_users() if u.id == user_id), None)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self.all_users() if u.username == username), None)

    def find_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        return next((u for u in self.all_users() if u.email and u.email.lower() == wanted), None)

    def admin_count(self) -> int:
        return sum(1 for u in self.all_users() if u.is_admin)

    # Mutations

    def add(self, user: User) -> User:
        with self.transaction(REGISTRY_SCOPE) as document:
            document.setdefault("users", []).append(user.to_dict())
        return user

    def save(self, user: User) -> User:
        """Replace the stored record with the same id."""
        with self.transaction(REGISTRY_SCOPE) as document:
            users = document.setdefault("users", [])
            for index, raw in enumerate(users):
                if raw.get("id") == user.id:
                    users[index] = user.to_dict()
                    break
            else:
                users.append(user.to_dict())
        return user

    def remove(self, user_id: str) -> bool:
        with self.transaction(REGISTRY_SCOPE) as document:
            users = document.get("users") or []
            remaining = [raw for raw in users if raw.get("id") != user_id]
            document["users"] = remaining
        return len(remaining) != len(users)

    def ensure_admin(self) -> User:
        """
        Return the configured administrator, creating it if it is missing.

        Safe to call repeatedly; at most one record is ever created.
        """
        with self.lock():
            admin = self.find_by_username(self.config.admin.username)
            if admin is not None:
                return admin
            admin = self._new_admin()
            self.add(admin)
        logger.info(f"Provisioned administrator account '{admin.username}'")
        return admin

    def _new_admin(self) -> User:
        return User(
            id=generate_id(),
            username=self.config.admin.username,
            password_hash=self.vault.hash(self.config.admin.seed_password or ""),
            created_at=now_iso(),
            is_admin=True,
        )
