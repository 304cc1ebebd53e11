#!/usr/bin/env python3
"""
Error Types for Finance Tracker

A small closed set of error kinds so callers (CLI, tests, other services)
can react to failures programmatically instead of matching message text.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a failure."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    IO = "io"
    AUTH = "auth"
    VERSION_MISMATCH = "version_mismatch"


class FinanceTrackerError(Exception):
    """Base class for every error raised by the finance tracker."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class NotFoundError(FinanceTrackerError):
    """A record id or user does not exist."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(FinanceTrackerError):
    """Input failed validation; ``errors`` lists every problem found."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class StorageError(FinanceTrackerError):
    """A document could not be read, parsed or written."""

    kind = ErrorKind.IO


class AuthenticationError(FinanceTrackerError):
    """The caller is not who they claim to be, or lacks the privilege."""

    kind = ErrorKind.AUTH


class VersionMismatchError(FinanceTrackerError):
    """A backup envelope was produced by an incompatible codec version."""

    kind = ErrorKind.VERSION_MISMATCH

    def __init__(self, expected: str, actual: str | None):
        super().__init__(f"Invalid export file version. Expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
