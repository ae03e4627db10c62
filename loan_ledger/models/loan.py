"""Loan model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import LoanStatus, LoanType


@dataclass
class Loan:
    """Loan contract entity."""

    loan_id: str
    borrower_id: str
    interest_rate_id: str | None
    principal_amount: Decimal
    loan_type: LoanType
    start_date: date
    end_date: date
    term_months: int
    interest_rate_snapshot: Decimal | None  # Frozen percent, not a live reference
    current_balance: Decimal  # Outstanding amount, never negative
    status: LoanStatus = LoanStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None
