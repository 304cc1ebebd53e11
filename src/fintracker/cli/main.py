#!/usr/bin/env python3
"""
Main CLI Entry Point for Finance Tracker

Provides unified command-line interface for the finance tracker services.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from .assets import assets
from .backup import backup
from .user import user


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Finance Tracker - Personal Asset and Ledger Management

    Track bank accounts, deposits, funds, provident and pension accounts,
    expenses, savings and dividends in local JSON files.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["FINTRACKER_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = reload_config() if (config_env or debug) else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("fintracker").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from fintracker import __author__, __version__

    click.echo(f"Finance Tracker v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.option("--show-secrets", is_flag=True, help="Include the admin seed password")
@click.pass_context
def config(ctx: click.Context, show_secrets: bool) -> None:
    """Show current configuration."""
    settings = ctx.obj["config"].to_dict(include_sensitive=show_secrets)

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {settings['environment']}")
    click.echo(f"  Data Directory: {settings['storage']['data_dir']}")
    click.echo(f"  User Data Directory: {settings['storage']['user_data_dir']}")
    click.echo(f"  Export Directory: {settings['storage']['export_dir']}")
    click.echo(f"  Users File: {settings['storage']['users_file']}")
    click.echo(f"  Admin Username: {settings['admin']['username']}")
    click.echo(f"  Admin Seed Password: {settings['admin']['seed_password']}")
    click.echo(f"  Debug Mode: {settings['debug']}")
    click.echo(f"  Log Level: {settings['log_level']}")


main.add_command(user)
main.add_command(assets)
main.add_command(backup)


if __name__ == "__main__":
    main()
