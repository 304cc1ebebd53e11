#!/usr/bin/env python3
"""
Backup CLI - export and import of a user's data.
"""

from pathlib import Path

import click

from ..backup.codec import BackupCodec
from .common import authenticate, credential_options, handle_errors


@click.group()
def backup() -> None:
    """Backup and restore commands."""
    pass


@backup.command(name="export")
@credential_options
@click.pass_context
@handle_errors
def export_data(ctx: click.Context, username: str, password: str, pin: str | None) -> None:
    """
    Write a backup file of your assets, expenses and savings.

    Example:
      fintracker backup export -u alice
    """
    config = ctx.obj["config"]
    account = authenticate(config, username, password, pin)
    codec = BackupCodec(config)
    path = codec.write_export_file(codec.export(account.id, account.username))
    click.echo(f"✓ Exported to {path}")


@backup.command(name="import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@credential_options
@click.option("--yes", is_flag=True, help="Replace existing data without asking")
@click.pass_context
@handle_errors
def import_data(
    ctx: click.Context, backup_file: Path, username: str, password: str, pin: str | None, yes: bool
) -> None:
    """Replace your assets, expenses and savings with a backup file's contents."""
    config = ctx.obj["config"]
    account = authenticate(config, username, password, pin)
    codec = BackupCodec(config)
    envelope = codec.validate(backup_file.read_text(encoding="utf-8"))

    if not yes:
        click.confirm(
            f"Replace all data for {account.username} with the backup of {envelope['username']} "
            f"from {envelope['exportDate']}?",
            abort=True,
        )

    codec.import_(account.id, envelope)
    click.echo(f"✓ Imported backup from {backup_file.name}")
