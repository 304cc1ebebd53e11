"""
Authentication Package

User accounts, credential hashing and login resolution.

Key Components:
- User, LoginRequest, Registration: data models
- CredentialVault: SHA-256 hashing of passwords and PINs
- UserRegistry: the users.json document, with administrator provisioning
- AuthResolver: which credential decides a login, in a fixed order
- AuthService: registration, self-service and administrator operations
"""

from .biometric import BiometricAuthenticator, UnsupportedBiometric
from .models import LoginRequest, Registration, User
from .registry import UserRegistry
from .resolver import AuthFailure, AuthMethod, AuthResolver, AuthResult
from .service import AuthService
from .vault import CredentialVault

__all__ = [
    "AuthFailure",
    "AuthMethod",
    "AuthResolver",
    "AuthResult",
    "AuthService",
    "BiometricAuthenticator",
    "CredentialVault",
    "LoginRequest",
    "Registration",
    "UnsupportedBiometric",
    "User",
    "UserRegistry",
]
