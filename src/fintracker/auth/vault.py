#!/usr/bin/env python3
"""
Credential Vault

One-way hashing for passwords and PINs. Only hex SHA-256 digests are ever
stored; verification recomputes the digest and compares in constant time.
"""

import hashlib
import hmac


class CredentialVault:
    """Hashes and verifies secrets."""

    algorithm = "sha256"

    def hash(self, secret: str) -> str:
        """
        Digest a secret.

        Returns:
            64 lowercase hex characters; the same secret always gives the same digest
        """
        return hashlib.new(self.algorithm, secret.encode("utf-8")).hexdigest()

    def verify(self, secret: str, digest: str | None) -> bool:
        if not digest:
            return False
        return hmac.compare_digest(self.hash(secret), digest)
