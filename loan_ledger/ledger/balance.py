"""Simple-interest balance arithmetic.

All amounts are ``Decimal`` quantized to cents, matching the
``NUMERIC(15, 2)`` columns the balances are stored in.
"""

from decimal import ROUND_HALF_UP, Decimal

from loan_ledger.exceptions import LedgerValidationError
from loan_ledger.models.enums import TransactionType

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal(100)
MONTHS_PER_YEAR = Decimal(12)

# Types that reduce what the borrower owes. ``None`` is an unspecified type.
REDUCING_TYPES = frozenset({TransactionType.REPAYMENT, TransactionType.OTHER, None})
# Types that add to what the borrower owes.
ACCRUING_TYPES = frozenset({TransactionType.LATE_FEE, TransactionType.PENALTY})


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_interest(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
) -> Decimal:
    """Return simple interest over the full term, unrounded.

    Parameters
    ----------
    principal : Decimal
        Amount borrowed, non-negative.
    annual_rate_percent : Decimal
        Annual rate as a percentage (``10`` for 10%).
    term_months : int
        Loan term, strictly positive.
    """
    principal = Decimal(principal)
    rate = Decimal(annual_rate_percent)
    if principal < 0:
        raise LedgerValidationError(f"Principal must not be negative, got {principal}")
    if rate < 0:
        raise LedgerValidationError(f"Rate must not be negative, got {rate}")
    if term_months <= 0:
        raise LedgerValidationError(f"Term must be positive, got {term_months} months")

    # Divide last so cent-valued inputs stay exact.
    return principal * rate * Decimal(term_months) / (HUNDRED * MONTHS_PER_YEAR)


def compute_balance(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
) -> Decimal:
    """Return ``principal + interest`` for a simple-interest loan."""
    interest = compute_interest(principal, annual_rate_percent, term_months)
    return quantize_money(Decimal(principal) + interest)


def fallback_balance(principal: Decimal) -> Decimal:
    """Zero-interest balance used when no rate is available."""
    return quantize_money(principal)


def apply_amount(
    current_balance: Decimal,
    transaction_type: TransactionType | None,
    amount: Decimal,
) -> Decimal:
    """Return the balance after posting ``amount`` of ``transaction_type``.

    Reducing postings clamp at zero; fees and penalties add to the balance.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise LedgerValidationError(f"Transaction amount must be positive, got {amount}")

    if transaction_type in REDUCING_TYPES:
        return quantize_money(max(ZERO, Decimal(current_balance) - amount))
    if transaction_type in ACCRUING_TYPES:
        return quantize_money(Decimal(current_balance) + amount)
    raise LedgerValidationError(f"Unknown transaction type: {transaction_type!r}")
