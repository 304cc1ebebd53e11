#!/usr/bin/env python3
"""
User CLI - account registration and login.
"""

import click

from ..auth.models import Registration
from ..auth.service import AuthService
from .common import authenticate, credential_options, handle_errors


@click.group()
def user() -> None:
    """User account commands."""
    pass


@user.command()
@click.option("--username", "-u", required=True, help="New account username")
@click.option("--email", default=None, help="Optional email address")
@click.option("--pin", default=None, help="Optional 4-digit PIN")
@click.password_option(help="Account password")
@click.pass_context
@handle_errors
def register(ctx: click.Context, username: str, email: str | None, pin: str | None, password: str) -> None:
    """
    Create a new account.

    Example:
      fintracker user register -u alice --email alice@example.com
    """
    service = AuthService(ctx.obj["config"])
    new_user = service.register(Registration(username=username, password=password, email=email, pin=pin))
    click.echo(f"✓ Registered {new_user.username} (id {new_user.id})")


@user.command()
@credential_options
@click.pass_context
@handle_errors
def login(ctx: click.Context, username: str, password: str, pin: str | None) -> None:
    """Check credentials and record the login."""
    account = authenticate(ctx.obj["config"], username, password, pin)
    click.echo(f"✓ Logged in as {account.username}")
    if account.is_admin:
        click.echo("  Role: administrator")


@user.command(name="list")
@credential_options
@click.pass_context
@handle_errors
def list_users(ctx: click.Context, username: str, password: str, pin: str | None) -> None:
    """List all accounts (administrators only)."""
    config = ctx.obj["config"]
    admin = authenticate(config, username, password, pin)
    users = AuthService(config).get_all_users(admin.id)

    click.echo(f"Users ({len(users)}):")
    click.echo("=" * 60)
    for account in users:
        role = "admin" if account.is_admin else "user"
        email = account.email or "-"
        last_login = (account.last_login or "never").split("T")[0]
        click.echo(f"  {account.username:<20} {role:<6} {email:<28} last login {last_login}")
