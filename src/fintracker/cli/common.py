#!/usr/bin/env python3
"""Helpers shared by the CLI command modules."""

import functools
from collections.abc import Callable
from typing import Any

import click

from ..auth.models import LoginRequest, User
from ..auth.service import AuthService
from ..core.config import Config
from ..core.errors import FinanceTrackerError


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report finance tracker errors as click errors instead of tracebacks."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except FinanceTrackerError as e:
            raise click.ClickException(e.message) from e

    return wrapper


def credential_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --username/--password/--pin options for commands that act as a user."""
    func = click.option("--pin", default=None, help="4-digit PIN (used instead of the password if set)")(func)
    func = click.option("--password", prompt=True, hide_input=True, default="", help="Account password")(func)
    func = click.option("--username", "-u", required=True, help="Account username")(func)
    return func


def authenticate(config: Config, username: str, password: str, pin: str | None) -> User:
    """Log in or abort the command."""
    result = AuthService(config).authenticate(
        LoginRequest(username=username, password=password or None, pin=pin)
    )
    if not result.ok:
        raise click.ClickException(f"Authentication failed: {result.failure.value}")
    return result.user
