"""Tests for simple-interest balance arithmetic."""

from decimal import Decimal

import pytest

from loan_ledger.exceptions import LedgerValidationError
from loan_ledger.ledger.balance import (
    apply_amount,
    compute_balance,
    compute_interest,
    fallback_balance,
    quantize_money,
)
from loan_ledger.models import TransactionType


class TestComputeBalance:
    """Tests for compute_balance."""

    def test_one_year_at_ten_percent(self) -> None:
        assert compute_balance(Decimal("1000000"), Decimal("10"), 12) == Decimal("1100000.00")

    def test_two_years_at_ten_percent(self) -> None:
        assert compute_balance(Decimal("1000000"), Decimal("10"), 24) == Decimal("1200000.00")

    def test_partial_year(self) -> None:
        # 1,000,000 * 5% * 6/12
        assert compute_balance(Decimal("1000000"), Decimal("5"), 6) == Decimal("1025000.00")

    def test_cents_and_fractional_rate(self) -> None:
        # 1234.56 * 12.5% * 1.5 years = 231.48
        assert compute_balance(Decimal("1234.56"), Decimal("12.5"), 18) == Decimal("1466.04")

    @pytest.mark.parametrize(
        "principal,rate,term",
        [
            (Decimal("1000"), Decimal("12"), 12),
            (Decimal("250000"), Decimal("15"), 18),
            (Decimal("1150000"), Decimal("100"), 24),
            (Decimal("99.99"), Decimal("20"), 6),
        ],
    )
    def test_matches_simple_interest_formula(
        self, principal: Decimal, rate: Decimal, term: int
    ) -> None:
        expected = quantize_money(principal + principal * (rate / 100) * (Decimal(term) / 12))
        assert compute_balance(principal, rate, term) == expected

    @pytest.mark.parametrize(
        "principal,term",
        [(Decimal("1"), 1), (Decimal("1000000"), 12), (Decimal("12345.67"), 360)],
    )
    def test_zero_rate_is_identity(self, principal: Decimal, term: int) -> None:
        assert compute_balance(principal, Decimal("0"), term) == principal

    def test_deterministic(self) -> None:
        first = compute_balance(Decimal("777777.77"), Decimal("7.25"), 30)
        second = compute_balance(Decimal("777777.77"), Decimal("7.25"), 30)
        assert first == second
        assert isinstance(first, Decimal)

    def test_result_has_two_decimal_places(self) -> None:
        result = compute_balance(Decimal("1000"), Decimal("7"), 7)
        assert result.as_tuple().exponent == -2

    def test_negative_principal_rejected(self) -> None:
        with pytest.raises(LedgerValidationError):
            compute_balance(Decimal("-1"), Decimal("10"), 12)

    def test_negative_rate_rejected(self) -> None:
        with pytest.raises(LedgerValidationError):
            compute_balance(Decimal("1000"), Decimal("-1"), 12)

    @pytest.mark.parametrize("term", [0, -12])
    def test_non_positive_term_rejected(self, term: int) -> None:
        with pytest.raises(LedgerValidationError):
            compute_balance(Decimal("1000"), Decimal("10"), term)


class TestComputeInterest:
    """Tests for compute_interest."""

    def test_interest_only(self) -> None:
        assert compute_interest(Decimal("1000000"), Decimal("10"), 24) == Decimal("200000")

    def test_zero_rate(self) -> None:
        assert compute_interest(Decimal("5000"), Decimal("0"), 12) == 0


class TestFallbackBalance:
    """Tests for the zero-interest fallback."""

    def test_equals_principal(self) -> None:
        assert fallback_balance(Decimal("1000000")) == Decimal("1000000.00")


class TestApplyAmount:
    """Tests for apply_amount."""

    def test_repayment_reduces(self) -> None:
        result = apply_amount(Decimal("1000.00"), TransactionType.REPAYMENT, Decimal("300"))
        assert result == Decimal("700.00")

    def test_repayment_clamps_at_zero(self) -> None:
        result = apply_amount(Decimal("100.00"), TransactionType.REPAYMENT, Decimal("150"))
        assert result == Decimal("0.00")

    def test_unspecified_type_reduces(self) -> None:
        assert apply_amount(Decimal("100.00"), None, Decimal("40")) == Decimal("60.00")

    def test_other_reduces(self) -> None:
        result = apply_amount(Decimal("100.00"), TransactionType.OTHER, Decimal("40"))
        assert result == Decimal("60.00")

    def test_penalty_adds(self) -> None:
        result = apply_amount(Decimal("100.00"), TransactionType.PENALTY, Decimal("25.50"))
        assert result == Decimal("125.50")

    def test_late_fee_adds(self) -> None:
        result = apply_amount(Decimal("0.00"), TransactionType.LATE_FEE, Decimal("10"))
        assert result == Decimal("10.00")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amount_rejected(self, amount: Decimal) -> None:
        with pytest.raises(LedgerValidationError):
            apply_amount(Decimal("100.00"), TransactionType.REPAYMENT, amount)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(LedgerValidationError):
            apply_amount(Decimal("100.00"), "REFUND", Decimal("5"))


class TestQuantizeMoney:
    """Tests for quantize_money."""

    def test_rounds_half_up(self) -> None:
        assert quantize_money(Decimal("1.005")) == Decimal("1.01")

    def test_pads_to_cents(self) -> None:
        assert str(quantize_money(Decimal("5"))) == "5.00"
