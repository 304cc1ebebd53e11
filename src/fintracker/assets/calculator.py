#!/usr/bin/env python3
"""
Derived Asset Values

Pure functions that bring every computed field of an AssetData document up to
date: maturity dates and status, current values, percentage returns, provident
fund balances and the portfolio summary. Nothing here touches the filesystem.

Every function takes ``today`` explicitly so results are reproducible; running
``recalculate`` twice on the same input with the same ``today`` yields the same
document.
"""

import logging
from collections.abc import Callable
from typing import Any

from ..core.currency import (
    calculate_returns,
    multiply_currency,
    round_currency,
    sum_currency,
)
from ..core.dates import FinancialDate
from .models import (
    AssetData,
    AssetSummary,
    DepositStatus,
    EquityETF,
    FixedDeposit,
    FloatingRateBond,
    GoldETF,
    MutualFund,
    NationalPensionScheme,
    PublicProvidentFund,
    RecurringDeposit,
    Stock,
)

logger = logging.getLogger(__name__)

DEFAULT_PPF_RATE = 7.1
PPF_TERM_YEARS = 15
DEFAULT_DEPOSIT_TENURE = 12

Contributions = dict[str, dict[str, float]]


def _parse_date(value: str | None, record_id: str) -> FinancialDate | None:
    if not value:
        return None
    try:
        return FinancialDate.from_string(value)
    except ValueError:
        logger.warning(f"Record {record_id} has unparseable date {value!r}; derived dates left unchanged")
        return None


def maturity_date(start_date: str, tenure_months: int) -> str:
    """
    Start date plus tenure in calendar months, clamped to month end.

    Example:
        maturity_date("2024-01-31", 1) -> "2024-02-29"
    """
    return FinancialDate.from_string(start_date).add_months(int(tenure_months)).to_iso_string()


def ppf_maturity_date(start_date: str) -> str:
    """PPF accounts mature fifteen years after opening."""
    return FinancialDate.from_string(start_date).add_years(PPF_TERM_YEARS).to_iso_string()


# Per-record derivations


def derive_fixed_deposit(fd: FixedDeposit, today: FinancialDate) -> FixedDeposit:
    start = _parse_date(fd.start_date, fd.id)
    if start is not None:
        matures = start.add_months(int(fd.tenure or 0))
        fd.maturity_date = matures.to_iso_string()
        fd.status = (DepositStatus.MATURED if today > matures else DepositStatus.ACTIVE).value
    return fd


def derive_recurring_deposit(rd: RecurringDeposit, today: FinancialDate) -> RecurringDeposit:
    rd.total_amount = multiply_currency(rd.monthly_amount, rd.tenure)
    start = _parse_date(rd.start_date, rd.id)
    if start is not None:
        rd.maturity_date = start.add_months(int(rd.tenure or 0)).to_iso_string()
    return rd


def derive_mutual_fund(mf: MutualFund, today: FinancialDate) -> MutualFund:
    mf.current_value = multiply_currency(mf.units, mf.nav)
    mf.returns = calculate_returns(mf.current_value, mf.invested_amount)
    return mf


def derive_gold_etf(etf: GoldETF, today: FinancialDate) -> GoldETF:
    etf.current_value = multiply_currency(etf.units, etf.current_price)
    etf.returns = calculate_returns(etf.current_value, etf.invested_amount)
    return etf


def derive_stock(stock: Stock, today: FinancialDate) -> Stock:
    stock.invested_amount = multiply_currency(stock.quantity, stock.average_price)
    stock.current_value = multiply_currency(stock.quantity, stock.current_price)
    stock.returns = calculate_returns(stock.current_value, stock.invested_amount)
    return stock


def derive_equity_etf(etf: EquityETF, today: FinancialDate) -> EquityETF:
    etf.current_value = multiply_currency(etf.units, etf.current_nav)
    etf.returns = calculate_returns(etf.current_value, etf.invested_amount)
    return etf


def derive_ppf(ppf: PublicProvidentFund, today: FinancialDate) -> PublicProvidentFund:
    contributions = ppf.annual_contributions or {}
    ppf.total_deposits = sum_currency(fy.get("amount") or 0 for fy in contributions.values())
    ppf.current_balance = sum_currency(
        (fy.get("amount") or 0) + (fy.get("interest") or 0) for fy in contributions.values()
    )
    return ppf


def derive_frb(bond: FloatingRateBond, today: FinancialDate) -> FloatingRateBond:
    """
    Compound the investment annually from purchase date to today, or to
    maturity if that comes first.

    Without a purchase date the bond is valued at maturity instead:
    compounded over the years left until ``maturity_date`` (2 places,
    never below 0).
    """
    rate = (bond.interest_rate or 0) / 100
    purchased = _parse_date(bond.purchase_date, bond.id)
    matures = _parse_date(bond.maturity_date, bond.id)

    if purchased is None:
        years = 0.0
        if matures is not None:
            years = round(max(0.0, today.years_until(matures)), 2)
        bond.current_value = round_currency((bond.investment_amount or 0) * (1 + rate) ** years)
        return bond

    until = today
    if matures is not None and matures < today:
        until = matures

    years = max(0.0, purchased.years_until(until))
    bond.current_value = round_currency((bond.investment_amount or 0) * (1 + rate) ** years)
    return bond


def derive_nps(nps: NationalPensionScheme, today: FinancialDate) -> NationalPensionScheme:
    nps.returns = calculate_returns(nps.current_value, nps.total_contribution)
    return nps


def _identity(record: Any, today: FinancialDate) -> Any:
    return record


DERIVERS: dict[str, Callable[[Any, FinancialDate], Any]] = {
    "bankAccounts": _identity,
    "fixedDeposits": derive_fixed_deposit,
    "recurringDeposits": derive_recurring_deposit,
    "mutualFunds": derive_mutual_fund,
    "goldETFs": derive_gold_etf,
    "stocks": derive_stock,
    "equityETFs": derive_equity_etf,
    "ppfAccounts": derive_ppf,
    "frbBonds": derive_frb,
    "npsAccounts": derive_nps,
}


# Provident fund interest


def calculate_fy_interest(contributions: Contributions, interest_rate: float) -> Contributions:
    """
    Fill in interest for each financial year, oldest first.

    A year that already carries a positive interest keeps it. Otherwise the
    year's interest is a full year on the opening balance plus half a year on
    that year's contribution:

        interest = opening * r + contribution * r * 0.5

    Args:
        contributions: ``{"2023-24": {"amount": ..., "interest": ...}, ...}``
        interest_rate: Annual rate in percent

    Returns:
        New contributions mapping with the same keys
    """
    rate = (interest_rate or 0) / 100
    result: Contributions = {}
    opening = 0.0

    for fy in sorted(contributions):
        amount = round_currency(contributions[fy].get("amount") or 0)
        recorded = contributions[fy].get("interest") or 0

        if recorded > 0:
            interest = round_currency(recorded)
        else:
            interest = round_currency(opening * rate + amount * rate * 0.5)

        result[fy] = {"amount": amount, "interest": interest}
        opening += amount + interest

    return result


def ppf_annual_breakdown(ppf: PublicProvidentFund) -> list[dict[str, Any]]:
    """Opening balance, contribution, interest and closing balance per year."""
    breakdown = []
    opening = 0.0
    contributions = ppf.annual_contributions or {}
    for fy in sorted(contributions):
        amount = contributions[fy].get("amount") or 0
        interest = contributions[fy].get("interest") or 0
        closing = round_currency(opening + amount + interest)
        breakdown.append(
            {
                "year": fy,
                "openingBalance": round_currency(opening),
                "contribution": round_currency(amount),
                "interest": round_currency(interest),
                "closingBalance": closing,
            }
        )
        opening = closing
    return breakdown


def ppf_details(ppf: PublicProvidentFund, today: FinancialDate) -> dict[str, Any]:
    """
    Summary view of one PPF account.

    ``projectedMaturityValue`` compounds total deposits for the full fifteen
    year term; ``remainingYears`` counts fractional years to maturity, never
    negative.
    """
    contributions = ppf.annual_contributions or {}
    rate = (ppf.interest_rate or 0) / 100

    remaining = 0.0
    matures = _parse_date(ppf.maturity_date, ppf.id)
    if matures is not None:
        remaining = max(0.0, round(today.years_until(matures), 2))

    return {
        "account": ppf.to_dict(),
        "totalInterest": sum_currency(fy.get("interest") or 0 for fy in contributions.values()),
        "projectedMaturityValue": round_currency((ppf.total_deposits or 0) * (1 + rate) ** PPF_TERM_YEARS),
        "remainingYears": remaining,
        "annualBreakdown": ppf_annual_breakdown(ppf),
    }


def ppf_contribution_summary(ppf: PublicProvidentFund) -> dict[str, Any]:
    contributions = ppf.annual_contributions or {}
    years = sorted(contributions)
    total = sum_currency(contributions[fy].get("amount") or 0 for fy in years)

    yearly = []
    for fy in years:
        amount = contributions[fy].get("amount") or 0
        interest = contributions[fy].get("interest") or 0
        yearly.append(
            {
                "financialYear": fy,
                "amount": round_currency(amount),
                "interest": round_currency(interest),
                "totalForYear": round_currency(amount + interest),
                "percentageOfTotal": round_currency(amount / total * 100) if total > 0 else 0.0,
            }
        )

    return {
        "financialYears": years,
        "totalContributed": total,
        "averageContribution": round_currency(total / len(years)) if years else 0.0,
        "yearlyBreakdown": yearly,
    }


# Whole-document aggregation


def compute_summary(asset_data: AssetData) -> AssetSummary:
    """
    Category subtotals and their total.

    Fixed deposits only count while Active; ``other_assets`` is always 0.
    """
    summary = AssetSummary(
        cash=sum_currency(a.balance for a in asset_data.bank_accounts),
        fixed_deposits=sum_currency(
            fd.amount for fd in asset_data.fixed_deposits if fd.status == DepositStatus.ACTIVE.value
        ),
        recurring_deposits=sum_currency(rd.total_amount for rd in asset_data.recurring_deposits),
        mutual_funds=sum_currency(mf.current_value for mf in asset_data.mutual_funds),
        gold_etfs=sum_currency(etf.current_value for etf in asset_data.gold_etfs),
        stocks=sum_currency(s.current_value for s in asset_data.stocks),
        equity_etfs=sum_currency(etf.current_value for etf in asset_data.equity_etfs),
        ppf=sum_currency(p.current_balance for p in asset_data.ppf_accounts),
        frb=sum_currency(b.current_value for b in asset_data.frb_bonds),
        nps=sum_currency(n.current_value for n in asset_data.nps_accounts),
        other_assets=0.0,
    )
    summary.total_assets = summary.category_total()
    return summary


def recalculate(asset_data: AssetData, today: FinancialDate | None = None) -> AssetData:
    """
    Recompute every derived field in place and return the document.

    Args:
        asset_data: Document to update
        today: Reference date for maturity status and bond growth (default: today)
    """
    today = today or FinancialDate.today()
    for key, derive in DERIVERS.items():
        for record in asset_data.records(key):
            derive(record, today)
    asset_data.summary = compute_summary(asset_data)
    return asset_data


def recalculate_document(document: dict[str, Any], today: FinancialDate | None = None) -> dict[str, Any]:
    """Recompute a raw JSON document, returning a new dict."""
    return recalculate(AssetData.from_dict(document), today).to_dict()

