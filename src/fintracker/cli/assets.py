#!/usr/bin/env python3
"""
Assets CLI - portfolio summary and listings.
"""

import click

from ..assets.models import COLLECTIONS
from ..assets.service import AssetService
from ..core.currency import format_inr
from .common import authenticate, credential_options, handle_errors

SUMMARY_ROWS = [
    ("Cash", "cash"),
    ("Fixed Deposits", "fixed_deposits"),
    ("Recurring Deposits", "recurring_deposits"),
    ("Mutual Funds", "mutual_funds"),
    ("Gold ETFs", "gold_etfs"),
    ("Stocks", "stocks"),
    ("Equity ETFs", "equity_etfs"),
    ("PPF", "ppf"),
    ("Floating Rate Bonds", "frb"),
    ("NPS", "nps"),
]

NAME_FIELDS = ("bank_name", "fund_name", "etf_name", "company_name", "bond_name", "account_number", "pran_number")
VALUE_FIELDS = ("current_value", "current_balance", "total_amount", "amount", "balance")


@click.group()
def assets() -> None:
    """Asset portfolio commands."""
    pass


@assets.command()
@credential_options
@click.pass_context
@handle_errors
def summary(ctx: click.Context, username: str, password: str, pin: str | None) -> None:
    """
    Show totals per asset category.

    Example:
      fintracker assets summary -u alice
    """
    config = ctx.obj["config"]
    account = authenticate(config, username, password, pin)
    totals = AssetService(config).get_asset_data(account.id).summary

    click.echo(f"Asset Summary for {account.username}")
    click.echo("=" * 44)
    for label, name in SUMMARY_ROWS:
        click.echo(f"  {label:<22} {format_inr(getattr(totals, name)):>18}")
    click.echo("-" * 44)
    click.echo(f"  {'Total':<22} {format_inr(totals.total_assets):>18}")


@assets.command(name="list")
@click.argument("category", type=click.Choice(sorted(COLLECTIONS)))
@credential_options
@click.pass_context
@handle_errors
def list_assets(ctx: click.Context, category: str, username: str, password: str, pin: str | None) -> None:
    """List the records of one asset category."""
    config = ctx.obj["config"]
    account = authenticate(config, username, password, pin)
    records = AssetService(config).list_records(account.id, category)

    label = COLLECTIONS[category].label
    if not records:
        click.echo(f"No {label.lower()} records.")
        return

    click.echo(f"{label} records ({len(records)}):")
    for record in records:
        name = next((getattr(record, f) for f in NAME_FIELDS if getattr(record, f, None)), record.id)
        value = next((getattr(record, f) for f in VALUE_FIELDS if hasattr(record, f)), 0)
        click.echo(f"  {record.id}  {name:<30} {format_inr(value):>16}")
