#!/usr/bin/env python3
"""
Asset Service

Create, update and delete operations for the ten asset collections of a
user's asset document, plus the provident fund contribution helpers.

Every mutation is a single read-modify-write inside
``AssetStore.transaction``; derived fields and the summary are recomputed by
the store right before the document is written back.

Fields are passed as keyword arguments using the record's attribute names:

    service.create_fixed_deposit(user_id, bank_name="SBI", amount=50000,
                                 interest_rate=6.8, start_date="2024-01-31",
                                 tenure=12)
    service.update_fixed_deposit(user_id, fd_id, amount=60000)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..core.config import Config
from ..core.currency import safe_parse_float, safe_parse_int, safe_parse_units
from ..core.dates import FinancialDate, now_iso, suggested_financial_years
from ..core.errors import NotFoundError, ValidationError
from ..core.models import generate_id
from .calculator import (
    DEFAULT_DEPOSIT_TENURE,
    DEFAULT_PPF_RATE,
    calculate_fy_interest,
    ppf_contribution_summary,
    ppf_details,
    ppf_maturity_date,
    recalculate,
)
from .datastore import AssetStore
from .models import COLLECTIONS, AssetData, PublicProvidentFund

logger = logging.getLogger(__name__)

Parser = Callable[[Any], Any]


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return safe_parse_float(value)


@dataclass(frozen=True)
class FieldRules:
    """How user input for one collection is coerced and defaulted."""

    parsers: dict[str, Parser] = field(default_factory=dict)
    defaults: dict[str, Callable[[dict[str, Any]], Any]] = field(default_factory=dict)
    stamps_last_updated: bool = True


def _today_iso(_: dict[str, Any]) -> str:
    return FinancialDate.today().to_iso_string()


FIELD_RULES: dict[str, FieldRules] = {
    "bankAccounts": FieldRules(
        parsers={"balance": safe_parse_float, "interest_rate": _optional_float},
        defaults={"bank_name": lambda _: "Bank", "account_type": lambda _: "Savings"},
    ),
    "fixedDeposits": FieldRules(
        parsers={
            "amount": safe_parse_float,
            "interest_rate": safe_parse_float,
            "tenure": lambda v: safe_parse_int(v, DEFAULT_DEPOSIT_TENURE),
        },
        defaults={
            "bank_name": lambda _: "Bank",
            "start_date": _today_iso,
            "tenure": lambda _: DEFAULT_DEPOSIT_TENURE,
        },
        stamps_last_updated=False,
    ),
    "recurringDeposits": FieldRules(
        parsers={
            "monthly_amount": safe_parse_float,
            "interest_rate": safe_parse_float,
            "tenure": lambda v: safe_parse_int(v, DEFAULT_DEPOSIT_TENURE),
            "completed_months": safe_parse_int,
        },
        defaults={
            "bank_name": lambda _: "Bank",
            "start_date": _today_iso,
            "tenure": lambda _: DEFAULT_DEPOSIT_TENURE,
        },
        stamps_last_updated=False,
    ),
    "mutualFunds": FieldRules(
        parsers={"invested_amount": safe_parse_float, "units": safe_parse_units, "nav": safe_parse_units},
        defaults={"fund_name": lambda _: "Mutual Fund"},
    ),
    "goldETFs": FieldRules(
        parsers={
            "units": safe_parse_units,
            "current_price": safe_parse_float,
            "invested_amount": safe_parse_float,
        },
        defaults={"etf_name": lambda _: "Gold ETF"},
    ),
    "stocks": FieldRules(
        parsers={
            "quantity": safe_parse_int,
            "average_price": safe_parse_float,
            "current_price": safe_parse_float,
        },
        defaults={"company_name": lambda _: "Stock"},
    ),
    "equityETFs": FieldRules(
        parsers={
            "units": safe_parse_units,
            "current_nav": safe_parse_units,
            "invested_amount": safe_parse_float,
        },
        defaults={"etf_name": lambda _: "Equity ETF"},
    ),
    "ppfAccounts": FieldRules(
        parsers={"interest_rate": lambda v: safe_parse_float(v, DEFAULT_PPF_RATE)},
        defaults={
            "interest_rate": lambda _: DEFAULT_PPF_RATE,
            "start_date": _today_iso,
            "maturity_date": lambda values: ppf_maturity_date(values["start_date"]),
            "financial_year": lambda _: FinancialDate.today().financial_year_short(),
        },
    ),
    "frbBonds": FieldRules(
        parsers={"investment_amount": safe_parse_float, "interest_rate": safe_parse_float},
        defaults={
            "bond_name": lambda _: "Floating Rate Bond",
            "maturity_date": lambda _: FinancialDate.today().add_years(5).to_iso_string(),
        },
    ),
    "npsAccounts": FieldRules(
        parsers={"total_contribution": safe_parse_float, "current_value": _optional_float},
        defaults={"current_value": lambda values: values.get("total_contribution", 0.0)},
    ),
}

DATE_FIELDS = ("start_date", "maturity_date", "purchase_date", "last_contribution_date")


class AssetService:
    """
    CRUD over a user's asset document.

    Args:
        config: Application configuration
        store: Asset store to use (default: one built from config)
    """

    def __init__(self, config: Config, store: AssetStore | None = None):
        self.config = config
        self.store = store or AssetStore(config)

    # Generic operations

    def get_asset_data(self, user_id: str) -> AssetData:
        """
        Load the user's assets with derived fields brought up to date.

        Maturity status and bond values depend on today's date, so the
        returned document may differ from the file until the next write.
        """
        return recalculate(self.store.load(user_id), self.store.clock())

    def list_records(self, user_id: str, collection_key: str) -> list:
        self._collection(collection_key)
        return self.get_asset_data(user_id).records(collection_key)

    def get_record(self, user_id: str, collection_key: str, record_id: str):
        collection = self._collection(collection_key)
        for record in self.get_asset_data(user_id).records(collection_key):
            if record.id == record_id:
                return record
        raise NotFoundError(f"{collection.label} not found")

    def create_record(self, user_id: str, collection_key: str, **fields: Any):
        """Append a new record to a collection and return it with derived fields."""
        collection = self._collection(collection_key)
        values = self._coerce(collection_key, fields)
        rules = FIELD_RULES[collection_key]
        for name, default in rules.defaults.items():
            if values.get(name) in (None, ""):
                values[name] = default(values)
        if rules.stamps_last_updated:
            values["last_updated"] = now_iso()
        values["id"] = generate_id()

        if collection_key == "ppfAccounts":
            values = self._prepare_ppf(values)

        record = collection.record_type.from_dict(
            {collection.record_type._key_for(name): value for name, value in values.items()}
        )

        with self.store.transaction(user_id) as document:
            document.setdefault(collection_key, []).append(record.to_dict())

        logger.info(f"Created {collection.label.lower()} {record.id} for user {user_id}")
        return self.get_record(user_id, collection_key, record.id)

    def update_record(self, user_id: str, collection_key: str, record_id: str, **fields: Any):
        """
        Merge a partial patch into an existing record.

        Raises:
            NotFoundError: If no record in the collection has ``record_id``
        """
        collection = self._collection(collection_key)
        patch = self._coerce(collection_key, fields)
        patch.pop("id", None)
        if FIELD_RULES[collection_key].stamps_last_updated:
            patch["last_updated"] = now_iso()

        with self.store.transaction(user_id) as document:
            raw_records = document.setdefault(collection_key, [])
            for index, raw in enumerate(raw_records):
                if raw.get("id") != record_id:
                    continue
                record = collection.record_type.from_dict(raw)
                for name, value in patch.items():
                    setattr(record, name, value)
                if collection_key == "ppfAccounts":
                    record = self._recompute_ppf_interest(record, patch)
                raw_records[index] = record.to_dict()
                break
            else:
                logger.error(f"{collection.label} {record_id} not found for user {user_id}")
                raise NotFoundError(f"{collection.label} not found")

        logger.info(f"Updated {collection.label.lower()} {record_id} for user {user_id}")
        return self.get_record(user_id, collection_key, record_id)

    def delete_record(self, user_id: str, collection_key: str, record_id: str) -> bool:
        """
        Remove a record by id.

        Raises:
            NotFoundError: If nothing was removed
        """
        collection = self._collection(collection_key)
        with self.store.transaction(user_id) as document:
            raw_records = document.get(collection_key) or []
            remaining = [raw for raw in raw_records if raw.get("id") != record_id]
            if len(remaining) == len(raw_records):
                logger.error(f"{collection.label} {record_id} not found for user {user_id}")
                raise NotFoundError(f"{collection.label} not found")
            document[collection_key] = remaining

        logger.info(f"Deleted {collection.label.lower()} {record_id} for user {user_id}")
        return True

    # Bank accounts

    def create_bank_account(self, user_id: str, **fields):
        return self.create_record(user_id, "bankAccounts", **fields)

    def update_bank_account(self, user_id: str, account_id: str, **fields):
        return self.update_record(user_id, "bankAccounts", account_id, **fields)

    def delete_bank_account(self, user_id: str, account_id: str) -> bool:
        return self.delete_record(user_id, "bankAccounts", account_id)

    # Fixed deposits

    def create_fixed_deposit(self, user_id: str, **fields):
        return self.create_record(user_id, "fixedDeposits", **fields)

    def update_fixed_deposit(self, user_id: str, fd_id: str, **fields):
        return self.update_record(user_id, "fixedDeposits", fd_id, **fields)

    def delete_fixed_deposit(self, user_id: str, fd_id: str) -> bool:
        return self.delete_record(user_id, "fixedDeposits", fd_id)

    # Recurring deposits

    def create_recurring_deposit(self, user_id: str, **fields):
        return self.create_record(user_id, "recurringDeposits", **fields)

    def update_recurring_deposit(self, user_id: str, rd_id: str, **fields):
        return self.update_record(user_id, "recurringDeposits", rd_id, **fields)

    def delete_recurring_deposit(self, user_id: str, rd_id: str) -> bool:
        return self.delete_record(user_id, "recurringDeposits", rd_id)

    # Mutual funds

    def create_mutual_fund(self, user_id: str, **fields):
        return self.create_record(user_id, "mutualFunds", **fields)

    def update_mutual_fund(self, user_id: str, fund_id: str, **fields):
        return self.update_record(user_id, "mutualFunds", fund_id, **fields)

    def delete_mutual_fund(self, user_id: str, fund_id: str) -> bool:
        return self.delete_record(user_id, "mutualFunds", fund_id)

    # Gold ETFs

    def create_gold_etf(self, user_id: str, **fields):
        return self.create_record(user_id, "goldETFs", **fields)

    def update_gold_etf(self, user_id: str, etf_id: str, **fields):
        return self.update_record(user_id, "goldETFs", etf_id, **fields)

    def delete_gold_etf(self, user_id: str, etf_id: str) -> bool:
        return self.delete_record(user_id, "goldETFs", etf_id)

    # Stocks

    def create_stock(self, user_id: str, **fields):
        return self.create_record(user_id, "stocks", **fields)

    def update_stock(self, user_id: str, stock_id: str, **fields):
        return self.update_record(user_id, "stocks", stock_id, **fields)

    def delete_stock(self, user_id: str, stock_id: str) -> bool:
        return self.delete_record(user_id, "stocks", stock_id)

    # Equity ETFs

    def create_equity_etf(self, user_id: str, **fields):
        return self.create_record(user_id, "equityETFs", **fields)

    def update_equity_etf(self, user_id: str, etf_id: str, **fields):
        return self.update_record(user_id, "equityETFs", etf_id, **fields)

    def delete_equity_etf(self, user_id: str, etf_id: str) -> bool:
        return self.delete_record(user_id, "equityETFs", etf_id)

    # Floating rate bonds

    def create_frb(self, user_id: str, **fields):
        return self.create_record(user_id, "frbBonds", **fields)

    def update_frb(self, user_id: str, frb_id: str, **fields):
        return self.update_record(user_id, "frbBonds", frb_id, **fields)

    def delete_frb(self, user_id: str, frb_id: str) -> bool:
        return self.delete_record(user_id, "frbBonds", frb_id)

    # National Pension Scheme

    def create_nps(self, user_id: str, **fields):
        return self.create_record(user_id, "npsAccounts", **fields)

    def update_nps(self, user_id: str, nps_id: str, **fields):
        return self.update_record(user_id, "npsAccounts", nps_id, **fields)

    def delete_nps(self, user_id: str, nps_id: str) -> bool:
        return self.delete_record(user_id, "npsAccounts", nps_id)

    # Public Provident Fund

    def create_ppf(self, user_id: str, total_deposits: Any = None, **fields) -> PublicProvidentFund:
        """
        Open a PPF account.

        ``annual_contributions`` may be given directly; otherwise a single
        ``total_deposits`` amount is recorded against ``financial_year``.
        """
        if not fields.get("annual_contributions") and total_deposits not in (None, ""):
            financial_year = fields.get("financial_year") or FinancialDate.today().financial_year_short()
            fields["financial_year"] = financial_year
            fields["annual_contributions"] = {
                financial_year: {"amount": safe_parse_float(total_deposits), "interest": 0.0}
            }
        return self.create_record(user_id, "ppfAccounts", **fields)

    def update_ppf(self, user_id: str, ppf_id: str, **fields) -> PublicProvidentFund:
        return self.update_record(user_id, "ppfAccounts", ppf_id, **fields)

    def delete_ppf(self, user_id: str, ppf_id: str) -> bool:
        return self.delete_record(user_id, "ppfAccounts", ppf_id)

    def add_ppf_annual_contribution(
        self, user_id: str, ppf_id: str, financial_year: str, amount: Any
    ) -> PublicProvidentFund:
        """Set the contribution for one financial year, keeping any recorded interest."""
        with self.store.lock(user_id):
            contributions = self._ppf_contributions(user_id, ppf_id)
            existing = contributions.get(financial_year, {})
            contributions[financial_year] = {
                "amount": safe_parse_float(amount),
                "interest": existing.get("interest") or 0.0,
            }
            return self.update_ppf(
                user_id, ppf_id, annual_contributions=contributions, financial_year=financial_year
            )

    def update_ppf_interest_for_fy(
        self, user_id: str, ppf_id: str, financial_year: str, interest: Any
    ) -> PublicProvidentFund:
        """Record the interest actually credited for one financial year."""
        with self.store.lock(user_id):
            contributions = self._ppf_contributions(user_id, ppf_id)
            existing = contributions.get(financial_year, {})
            contributions[financial_year] = {
                "amount": existing.get("amount") or 0.0,
                "interest": safe_parse_float(interest),
            }
            return self.update_ppf(user_id, ppf_id, annual_contributions=contributions)

    def update_ppf_multiple_fy(
        self, user_id: str, ppf_id: str, contributions: list[dict[str, Any]]
    ) -> PublicProvidentFund:
        """
        Set contributions for several financial years at once.

        Args:
            contributions: ``[{"financialYear": "2023-24", "amount": 150000}, ...]``
        """
        with self.store.lock(user_id):
            current = self._ppf_contributions(user_id, ppf_id)
            for entry in contributions:
                financial_year = entry.get("financialYear") or entry.get("financial_year")
                if not financial_year:
                    raise ValidationError("Each contribution needs a financial year")
                current[financial_year] = {
                    "amount": safe_parse_float(entry.get("amount")),
                    "interest": current.get(financial_year, {}).get("interest") or 0.0,
                }
            return self.update_ppf(user_id, ppf_id, annual_contributions=current)

    def get_ppf_details(self, user_id: str, ppf_id: str) -> dict[str, Any]:
        ppf = self.get_record(user_id, "ppfAccounts", ppf_id)
        return ppf_details(ppf, self.store.clock())

    def get_ppf_contribution_summary(self, user_id: str, ppf_id: str) -> dict[str, Any]:
        ppf = self.get_record(user_id, "ppfAccounts", ppf_id)
        return ppf_contribution_summary(ppf)

    def get_suggested_financial_years(self, start_date: str) -> list[str]:
        return suggested_financial_years(FinancialDate.from_string(start_date), self.store.clock())

    # Internals

    def _collection(self, collection_key: str):
        try:
            return COLLECTIONS[collection_key]
        except KeyError:
            raise ValidationError(f"Unknown asset collection: {collection_key}") from None

    def _coerce(self, collection_key: str, fields: dict[str, Any]) -> dict[str, Any]:
        record_type = COLLECTIONS[collection_key].record_type
        known = {f.name for f in record_type._record_fields()}
        unknown = sorted(set(fields) - known)
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for {COLLECTIONS[collection_key].label}: {', '.join(unknown)}"
            )

        parsers = FIELD_RULES[collection_key].parsers
        values: dict[str, Any] = {}
        errors: list[str] = []
        for name, value in fields.items():
            if name in parsers:
                value = parsers[name](value)
                if value is not None and value < 0:
                    errors.append(f"{name} must not be negative")
                    continue
            elif name in DATE_FIELDS and value:
                try:
                    value = FinancialDate.from_string(str(value)).to_iso_string()
                except ValueError:
                    errors.append(f"{name} must be a date in YYYY-MM-DD format")
                    continue
            values[name] = value

        if errors:
            raise ValidationError("; ".join(errors), errors)
        return values

    def _prepare_ppf(self, values: dict[str, Any]) -> dict[str, Any]:
        contributions = values.get("annual_contributions") or {}
        values["annual_contributions"] = calculate_fy_interest(contributions, values["interest_rate"])
        return values

    def _recompute_ppf_interest(self, ppf: PublicProvidentFund, patch: dict[str, Any]) -> PublicProvidentFund:
        ppf.annual_contributions = calculate_fy_interest(ppf.annual_contributions or {}, ppf.interest_rate)
        return ppf

    def _ppf_contributions(self, user_id: str, ppf_id: str) -> dict[str, dict[str, float]]:
        ppf = self.get_record(user_id, "ppfAccounts", ppf_id)
        return {fy: dict(values) for fy, values in (ppf.annual_contributions or {}).items()}
