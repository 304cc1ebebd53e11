#!/usr/bin/env python3
"""
Financial-year rollups of ledger entries.

Entries are loaded into a DataFrame, filtered to one April-March financial
year and grouped by category, by calendar month and (for dividends) by
company.
"""

import logging
from typing import Any

import pandas as pd

from ..core.currency import round_currency
from .models import LedgerKind, YearlyAggregate

logger = logging.getLogger(__name__)


def fy_start_year(financial_year: str) -> int:
    """
    First calendar year of a financial year label.

    Accepts both ``2024-2025`` and ``2024-25``.
    """
    try:
        return int(financial_year.split("-", 1)[0])
    except ValueError as e:
        raise ValueError(f"Invalid financial year: {financial_year!r}") from e


def _totals(series: pd.Series) -> dict[str, float]:
    return {str(key): round_currency(float(value)) for key, value in series.items()}


def entries_frame(records: list[dict[str, Any]], kind: LedgerKind) -> pd.DataFrame:
    """
    Normalize raw entries into a frame with ``amount``, ``date``, ``category``
    (and ``company`` for dividends) columns. Entries with an unreadable date
    are dropped.
    """
    columns = ["amount", "date", "category"] + (["company"] if kind.company_totals else [])
    df = pd.DataFrame(records).reindex(columns=columns)
    if df.empty:
        return df

    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["date"] = pd.to_datetime(df["date"].astype(str).str.slice(0, 10), format="%Y-%m-%d", errors="coerce")

    invalid = df["date"].isna().sum()
    if invalid:
        logger.warning(f"Skipping {invalid} {kind.name} entries with invalid dates")
    return df.dropna(subset=["date"])


def yearly_totals(
    records: list[dict[str, Any]],
    kind: LedgerKind,
    financial_year: str,
    created_at: str,
    updated_at: str,
) -> YearlyAggregate:
    """
    Aggregate the entries falling in ``financial_year``.

    Args:
        records: Raw ledger entries as stored
        kind: Which ledger the entries belong to
        financial_year: Label of the year, e.g. ``2024-2025``
        created_at: Creation timestamp to carry over from the cached rollup
        updated_at: Timestamp for this computation
    """
    start = fy_start_year(financial_year)
    aggregate = YearlyAggregate(
        kind=kind,
        year=f"{start}-{start + 1}",
        created_at=created_at,
        updated_at=updated_at,
    )

    df = entries_frame(records, kind)
    if df.empty:
        return aggregate

    entry_fy = df["date"].dt.year.where(df["date"].dt.month >= 4, df["date"].dt.year - 1)
    df = df[entry_fy == start]
    if df.empty:
        return aggregate

    aggregate.total = round_currency(float(df["amount"].sum()))
    aggregate.category_totals = _totals(df.groupby("category")["amount"].sum())
    aggregate.monthly_totals = _totals(df.groupby(df["date"].dt.strftime("%Y-%m"))["amount"].sum().sort_index())
    if kind.company_totals:
        aggregate.company_totals = _totals(df.groupby("company")["amount"].sum())
    return aggregate
