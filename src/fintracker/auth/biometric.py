#!/usr/bin/env python3
"""
Biometric authentication hook.

Biometric checks happen on the device, outside this package. Callers that
have a sensor supply an implementation of ``BiometricAuthenticator``; without
one, biometric login is reported as unsupported and always denied.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Authenticate to access Finance Tracker"


class BiometricAuthenticator(Protocol):
    def is_supported(self) -> bool:
        """Whether a sensor is present and has enrolled biometrics."""
        ...

    def authenticate(self, prompt: str = DEFAULT_PROMPT) -> bool:
        """Ask the user for a biometric assertion; True if it succeeded."""
        ...


class UnsupportedBiometric:
    """Authenticator for hosts with no biometric hardware."""

    def is_supported(self) -> bool:
        return False

    def authenticate(self, prompt: str = DEFAULT_PROMPT) -> bool:
        logger.warning("Biometric authentication requested but not supported on this host")
        return False
