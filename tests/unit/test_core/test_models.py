#!/usr/bin/env python3
"""Tests for JsonRecord mapping and id generation."""

import re
from dataclasses import dataclass

from fintracker.core.models import JsonRecord, generate_id, to_camel


@dataclass
class Sample(JsonRecord):
    id: str
    bank_name: str
    balance: float
    notes: str | None = None


class TestJsonRecord:
    def test_to_dict_uses_camel_case_and_omits_none(self):
        record = Sample(id="1", bank_name="SBI", balance=10.5)
        assert record.to_dict() == {"id": "1", "bankName": "SBI", "balance": 10.5}

    def test_from_dict_fills_missing_required_with_zero_values(self):
        record = Sample.from_dict({"id": "1"})
        assert record.bank_name == ""
        assert record.balance == 0.0
        assert record.notes is None

    def test_unknown_keys_survive_a_round_trip(self):
        raw = {"id": "1", "bankName": "SBI", "balance": 1.0, "ifscCode": "SBIN0001"}
        assert Sample.from_dict(raw).to_dict()["ifscCode"] == "SBIN0001"

    def test_json_keys(self):
        assert Sample.json_keys() == ["id", "bankName", "balance", "notes"]

    def test_to_camel(self):
        assert to_camel("current_nav") == "currentNav"
        assert to_camel("id") == "id"


class TestGenerateId:
    def test_format(self):
        assert re.fullmatch(r"\d{13}[0-9a-z]{9}", generate_id())

    def test_ids_are_unique(self):
        assert len({generate_id() for _ in range(500)}) == 500
