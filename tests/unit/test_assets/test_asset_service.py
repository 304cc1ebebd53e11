#!/usr/bin/env python3
"""Tests for asset CRUD and provident fund helpers."""

import json
import threading

import pytest

from fintracker.assets.datastore import AssetStore
from fintracker.assets.service import AssetService
from fintracker.core.errors import NotFoundError, ValidationError

USER = "user-1"


@pytest.fixture
def service(config, today):
    return AssetService(config, AssetStore(config, clock=lambda: today))


def stored_document(service, user_id=USER):
    return json.loads(service.store.path_for(user_id).read_text())


class TestAssetDocument:
    def test_first_access_creates_empty_document(self, service):
        asset_data = service.get_asset_data(USER)

        assert asset_data.record_count == 0
        assert service.store.path_for(USER).name == f"{USER}_assets.json"
        assert stored_document(service)["summary"]["totalAssets"] == 0.0

    def test_written_summary_matches_records(self, service):
        service.create_bank_account(USER, bank_name="SBI", balance="₹10,000.50")
        service.create_recurring_deposit(
            USER, bank_name="HDFC", monthly_amount=1000, interest_rate=6.5, start_date="2024-01-01", tenure=12
        )
        service.create_stock(USER, company_name="TCS", quantity="5", average_price=3000, current_price=3500)

        summary = stored_document(service)["summary"]
        assert summary["cash"] == 10000.5
        assert summary["recurringDeposits"] == 12000.0
        assert summary["stocks"] == 17500.0
        assert summary["totalAssets"] == 39500.5


class TestCrud:
    def test_create_fixed_deposit_derives_maturity(self, service):
        deposit = service.create_fixed_deposit(
            USER, bank_name="SBI", amount="50000", interest_rate=6.8, start_date="2024-01-31", tenure=1
        )

        assert deposit.id
        assert deposit.maturity_date == "2024-02-29"
        assert deposit.status == "Matured"

    def test_create_recurring_deposit(self, service):
        rd = service.create_recurring_deposit(
            USER, bank_name="HDFC", monthly_amount=1000, interest_rate=6.5, start_date="2024-01-01", tenure=12
        )
        assert rd.total_amount == 12000.0
        assert rd.maturity_date == "2025-01-01"

    def test_defaults_fill_blank_fields(self, service):
        account = service.create_bank_account(USER, bank_name="", balance="")

        assert account.bank_name == "Bank"
        assert account.account_type == "Savings"
        assert account.balance == 0.0
        assert account.last_updated

    def test_update_merges_patch_and_recomputes(self, service):
        fund = service.create_mutual_fund(USER, fund_name="Index", invested_amount=1000, units=10, nav=100)
        updated = service.update_mutual_fund(USER, fund.id, nav="120")

        assert updated.fund_name == "Index"
        assert updated.current_value == 1200.0
        assert updated.returns == 20.0
        assert service.get_asset_data(USER).summary.mutual_funds == 1200.0

    def test_update_unknown_id_raises(self, service):
        with pytest.raises(NotFoundError, match="Fixed deposit not found"):
            service.update_fixed_deposit(USER, "missing", amount=1)

    def test_delete(self, service):
        etf = service.create_gold_etf(USER, etf_name="GOLDBEES", units=10, current_price=60, invested_amount=500)

        assert service.delete_gold_etf(USER, etf.id) is True
        assert service.list_records(USER, "goldETFs") == []
        with pytest.raises(NotFoundError, match="Gold ETF not found"):
            service.delete_gold_etf(USER, etf.id)

    def test_unknown_field_rejected(self, service):
        with pytest.raises(ValidationError, match="Unknown field"):
            service.create_bank_account(USER, bank_name="SBI", balance=1, colour="blue")

    def test_bad_date_rejected_without_writing(self, service):
        with pytest.raises(ValidationError, match="start_date"):
            service.create_fixed_deposit(USER, amount=100, interest_rate=7, start_date="31-01-2024")
        assert service.get_asset_data(USER).record_count == 0

    def test_signed_amounts_stored_without_sign(self, service):
        account = service.create_bank_account(USER, bank_name="SBI", balance="-500")
        assert account.balance == 500.0

    def test_fractional_quantity_keeps_whole_shares(self, service):
        stock = service.create_stock(USER, company_name="TCS", quantity="10.5", average_price=100, current_price=110)
        assert stock.quantity == 10
        assert stock.current_value == 1100.0

    def test_negative_count_rejected_without_writing(self, service):
        with pytest.raises(ValidationError, match="quantity must not be negative"):
            service.create_stock(USER, company_name="TCS", quantity="-3", average_price=100, current_price=110)
        assert service.get_asset_data(USER).record_count == 0

    def test_unknown_collection_rejected(self, service):
        with pytest.raises(ValidationError, match="Unknown asset collection"):
            service.list_records(USER, "crypto")

    def test_users_are_isolated(self, service):
        service.create_bank_account(USER, bank_name="SBI", balance=100)
        assert service.get_asset_data("user-2").record_count == 0

    def test_concurrent_creates_keep_every_record(self, service):
        barrier = threading.Barrier(4)

        def create(n):
            barrier.wait()
            service.create_bank_account(USER, bank_name=f"Bank {n}", balance=100)

        threads = [threading.Thread(target=create, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        asset_data = service.get_asset_data(USER)
        assert len(asset_data.bank_accounts) == 4
        assert asset_data.summary.cash == 400.0


class TestProvidentFund:
    def test_create_with_total_deposits(self, service):
        ppf = service.create_ppf(
            USER, account_number="PPF1", start_date="2024-04-01", financial_year="2024-25", total_deposits=150000
        )

        assert ppf.maturity_date == "2039-04-01"
        assert ppf.interest_rate == 7.1
        assert ppf.annual_contributions == {"2024-25": {"amount": 150000.0, "interest": 5325.0}}
        assert ppf.total_deposits == 150000.0
        assert ppf.current_balance == 155325.0

    def test_add_contribution_and_record_interest(self, service):
        ppf = service.create_ppf(
            USER, account_number="PPF1", start_date="2024-04-01", financial_year="2024-25", total_deposits=100000
        )

        ppf = service.add_ppf_annual_contribution(USER, ppf.id, "2025-26", "50000")
        assert ppf.financial_year == "2025-26"
        assert ppf.total_deposits == 150000.0
        assert ppf.annual_contributions["2025-26"]["interest"] > 0

        ppf = service.update_ppf_interest_for_fy(USER, ppf.id, "2024-25", 4000)
        assert ppf.annual_contributions["2024-25"] == {"amount": 100000.0, "interest": 4000.0}

    def test_update_multiple_years(self, service):
        ppf = service.create_ppf(USER, account_number="PPF1", start_date="2022-04-01")
        ppf = service.update_ppf_multiple_fy(
            USER,
            ppf.id,
            [{"financialYear": "2022-23", "amount": 1000}, {"financialYear": "2023-24", "amount": 2000}],
        )

        assert sorted(ppf.annual_contributions) == ["2022-23", "2023-24"]
        assert ppf.total_deposits == 3000.0

        with pytest.raises(ValidationError, match="financial year"):
            service.update_ppf_multiple_fy(USER, ppf.id, [{"amount": 5}])

    def test_details_and_suggested_years(self, service):
        ppf = service.create_ppf(
            USER, account_number="PPF1", start_date="2022-06-15", financial_year="2022-23", total_deposits=1000
        )

        details = service.get_ppf_details(USER, ppf.id)
        assert details["remainingYears"] == 13.0
        assert service.get_ppf_contribution_summary(USER, ppf.id)["totalContributed"] == 1000.0
        assert service.get_suggested_financial_years("2022-06-15") == ["2022-23", "2023-24", "2024-25", "2025-26"]
