"""Tests for serialization utilities and the JSON file sink."""

import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from loan_ledger.models import LoanStatus, Transaction, TransactionType
from loan_ledger.sinks import JsonFileSink, parse_amount, serialize_value, to_dict


@dataclass
class _SampleData:
    name: str
    amount: Decimal
    created_at: datetime


def _entry() -> Transaction:
    return Transaction(
        transaction_id="tx-001",
        loan_id="loan-001",
        borrower_id="borrower-001",
        payment_date=date(2024, 2, 1),
        transaction_type=TransactionType.REPAYMENT,
        amount_paid=Decimal("250000.00"),
        remaining_balance=Decimal("775000.00"),
        payment_term=1,
        method="Bank Transfer",
        note="First Installment",
        created_at=datetime(2024, 2, 1, 10, 0),
    )


class TestToDict:
    """Tests for to_dict."""

    def test_dataclass(self) -> None:
        obj = _SampleData(name="test", amount=Decimal("100.50"), created_at=datetime(2024, 1, 1))

        result = to_dict(obj)

        assert result == {
            "name": "test",
            "amount": "100.50",
            "created_at": "2024-01-01T00:00:00",
        }

    def test_ledger_entry(self) -> None:
        result = to_dict(_entry())

        assert result["transaction_type"] == "REPAYMENT"
        assert result["amount_paid"] == "250000.00"
        assert result["remaining_balance"] == "775000.00"
        assert result["payment_date"] == "2024-02-01"

    def test_dict_passthrough(self) -> None:
        assert to_dict({"key": "value"}) == {"key": "value"}

    def test_other_type(self) -> None:
        assert to_dict(42) == {"value": "42"}


class TestSerializeValue:
    """Tests for serialize_value."""

    def test_decimal_keeps_scale(self) -> None:
        assert serialize_value(Decimal("1025000.00")) == "1025000.00"

    def test_enum(self) -> None:
        assert serialize_value(LoanStatus.COMPLETED) == "COMPLETED"

    def test_date(self) -> None:
        assert serialize_value(date(2024, 6, 15)) == "2024-06-15"

    def test_nested(self) -> None:
        data = {"amounts": [Decimal("10.00"), Decimal("20.00")], "info": {"at": date(2024, 1, 1)}}

        assert serialize_value(data) == {
            "amounts": ["10.00", "20.00"],
            "info": {"at": "2024-01-01"},
        }

    def test_passthrough(self) -> None:
        assert serialize_value("hello") == "hello"
        assert serialize_value(42) == 42
        assert serialize_value(None) is None


class TestParseAmount:
    """Tests for parse_amount."""

    def test_string(self) -> None:
        assert parse_amount("250000.50") == Decimal("250000.50")

    def test_int(self) -> None:
        assert parse_amount(500) == Decimal("500")

    def test_decimal(self) -> None:
        assert parse_amount(Decimal("0.10")) == Decimal("0.10")

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError):
            parse_amount(0.1)


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_creates_output_dir(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "out"

        JsonFileSink(target)

        assert target.is_dir()

    def test_write_batch(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)

        path = sink.write_batch("transactions", [_entry()])

        assert path == tmp_path / "transactions.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["transaction_id"] == "tx-001"
        assert data[0]["amount_paid"] == "250000.00"

    def test_pretty_output(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path, pretty=True)

        path = sink.write_batch("summary", [{"loans": 3}])

        assert "\n  " in path.read_text(encoding="utf-8")

    def test_close_returns_counts(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("transactions", [_entry(), _entry()])
        sink.write_batch("summary", [{"loans": 3}])

        assert sink.close() == {"transactions": 2, "summary": 1}
