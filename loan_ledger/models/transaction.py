"""Ledger transaction model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import TransactionType


@dataclass
class Transaction:
    """Append-only ledger entry against a single loan."""

    transaction_id: str
    loan_id: str
    borrower_id: str  # Denormalized from the loan at posting time
    payment_date: date
    transaction_type: TransactionType
    amount_paid: Decimal
    remaining_balance: Decimal  # Loan balance right after this posting
    payment_term: int  # Installment ordinal
    method: str | None = None
    note: str | None = None
    created_at: datetime | None = None
