#!/usr/bin/env python3
"""
Asset Data Models

One AssetData document per user: a derived summary plus ten independent
record collections. Attribute names are snake_case; the stored JSON keys are
the camelCase forms (see ``JsonRecord``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.models import JsonRecord


class DepositStatus(str, Enum):
    """Fixed deposit lifecycle state."""

    ACTIVE = "Active"
    MATURED = "Matured"


ACCOUNT_TYPES = ("Savings", "Current", "Salary")
INVESTMENT_TYPES = ("Equity", "Debt", "Hybrid", "ELSS")
EXCHANGES = ("NSE", "BSE")


@dataclass
class BankAccount(JsonRecord):
    id: str
    bank_name: str
    balance: float
    account_type: str = "Savings"
    account_name: str | None = None
    account_number: str | None = None
    currency: str | None = None
    interest_rate: float | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class FixedDeposit(JsonRecord):
    id: str
    bank_name: str
    amount: float
    interest_rate: float
    start_date: str
    tenure: int  # months
    maturity_date: str = ""
    status: str = DepositStatus.ACTIVE.value
    deposit_number: str | None = None
    description: str | None = None


@dataclass
class RecurringDeposit(JsonRecord):
    id: str
    bank_name: str
    monthly_amount: float
    interest_rate: float
    start_date: str
    tenure: int  # months
    total_amount: float = 0.0
    maturity_date: str = ""
    completed_months: int = 0
    account_number: str | None = None
    description: str | None = None


@dataclass
class MutualFund(JsonRecord):
    id: str
    fund_name: str
    invested_amount: float
    units: float
    nav: float
    current_value: float = 0.0
    returns: float = 0.0
    fund_house: str | None = None
    folio_number: str | None = None
    investment_type: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class GoldETF(JsonRecord):
    id: str
    etf_name: str
    units: float
    current_price: float
    invested_amount: float
    current_value: float = 0.0
    returns: float = 0.0
    symbol: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class Stock(JsonRecord):
    id: str
    company_name: str
    quantity: int
    average_price: float
    current_price: float
    invested_amount: float = 0.0
    current_value: float = 0.0
    returns: float = 0.0
    symbol: str | None = None
    exchange: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class EquityETF(JsonRecord):
    id: str
    etf_name: str
    units: float
    current_nav: float
    invested_amount: float
    current_value: float = 0.0
    returns: float = 0.0
    symbol: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class PublicProvidentFund(JsonRecord):
    id: str
    account_number: str
    financial_year: str
    interest_rate: float
    start_date: str
    maturity_date: str
    annual_contributions: dict[str, dict[str, float]] = field(default_factory=dict)
    total_deposits: float = 0.0
    current_balance: float = 0.0
    last_updated: str | None = None


@dataclass
class FloatingRateBond(JsonRecord):
    id: str
    bond_name: str
    investment_amount: float
    interest_rate: float
    maturity_date: str
    current_value: float = 0.0
    purchase_date: str | None = None
    certificate_number: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class NationalPensionScheme(JsonRecord):
    id: str
    pran_number: str
    total_contribution: float
    current_value: float
    returns: float = 0.0
    last_contribution_date: str | None = None
    notes: str | None = None
    last_updated: str | None = None


@dataclass
class AssetSummary(JsonRecord):
    total_assets: float = 0.0
    cash: float = 0.0
    fixed_deposits: float = 0.0
    recurring_deposits: float = 0.0
    mutual_funds: float = 0.0
    gold_etfs: float = 0.0
    stocks: float = 0.0
    equity_etfs: float = 0.0
    ppf: float = 0.0
    frb: float = 0.0
    nps: float = 0.0
    other_assets: float = 0.0

    _json_keys = {"gold_etfs": "goldETFs", "equity_etfs": "equityETFs"}

    def category_total(self) -> float:
        """Sum of every category subtotal (what total_assets must equal)."""
        from ..core.currency import sum_currency

        return sum_currency(
            [
                self.cash,
                self.fixed_deposits,
                self.recurring_deposits,
                self.mutual_funds,
                self.gold_etfs,
                self.stocks,
                self.equity_etfs,
                self.ppf,
                self.frb,
                self.nps,
            ]
        )


@dataclass(frozen=True)
class Collection:
    """Describes one record collection inside the asset document."""

    key: str
    record_type: type
    label: str


COLLECTIONS: dict[str, Collection] = {
    c.key: c
    for c in [
        Collection("bankAccounts", BankAccount, "Bank account"),
        Collection("fixedDeposits", FixedDeposit, "Fixed deposit"),
        Collection("recurringDeposits", RecurringDeposit, "Recurring deposit"),
        Collection("mutualFunds", MutualFund, "Mutual fund"),
        Collection("goldETFs", GoldETF, "Gold ETF"),
        Collection("stocks", Stock, "Stock"),
        Collection("equityETFs", EquityETF, "Equity ETF"),
        Collection("ppfAccounts", PublicProvidentFund, "PPF account"),
        Collection("frbBonds", FloatingRateBond, "Floating rate bond"),
        Collection("npsAccounts", NationalPensionScheme, "NPS account"),
    ]
}


@dataclass
class AssetData:
    """
    A user's complete asset document.

    Collections are kept as typed record lists; ``from_dict`` / ``to_dict``
    convert to and from the stored JSON.
    """

    summary: AssetSummary = field(default_factory=AssetSummary)
    bank_accounts: list[BankAccount] = field(default_factory=list)
    fixed_deposits: list[FixedDeposit] = field(default_factory=list)
    recurring_deposits: list[RecurringDeposit] = field(default_factory=list)
    mutual_funds: list[MutualFund] = field(default_factory=list)
    gold_etfs: list[GoldETF] = field(default_factory=list)
    stocks: list[Stock] = field(default_factory=list)
    equity_etfs: list[EquityETF] = field(default_factory=list)
    ppf_accounts: list[PublicProvidentFund] = field(default_factory=list)
    frb_bonds: list[FloatingRateBond] = field(default_factory=list)
    nps_accounts: list[NationalPensionScheme] = field(default_factory=list)
    last_updated: str = ""

    _attr_for_key = {
        "bankAccounts": "bank_accounts",
        "fixedDeposits": "fixed_deposits",
        "recurringDeposits": "recurring_deposits",
        "mutualFunds": "mutual_funds",
        "goldETFs": "gold_etfs",
        "stocks": "stocks",
        "equityETFs": "equity_etfs",
        "ppfAccounts": "ppf_accounts",
        "frbBonds": "frb_bonds",
        "npsAccounts": "nps_accounts",
    }

    def records(self, collection_key: str) -> list:
        return getattr(self, self._attr_for_key[collection_key])

    def set_records(self, collection_key: str, records: list) -> None:
        setattr(self, self._attr_for_key[collection_key], records)

    @property
    def record_count(self) -> int:
        return sum(len(self.records(key)) for key in COLLECTIONS)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"summary": self.summary.to_dict()}
        for key in COLLECTIONS:
            result[key] = [record.to_dict() for record in self.records(key)]
        result["lastUpdated"] = self.last_updated
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AssetData":
        asset_data = cls(
            summary=AssetSummary.from_dict(data.get("summary") or {}),
            last_updated=data.get("lastUpdated", ""),
        )
        for key, collection in COLLECTIONS.items():
            raw_records = data.get(key) or []
            asset_data.set_records(key, [collection.record_type.from_dict(r) for r in raw_records])
        return asset_data

    @classmethod
    def empty(cls, timestamp: str) -> "AssetData":
        return cls(last_updated=timestamp)
