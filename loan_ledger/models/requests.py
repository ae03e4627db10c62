"""Input payloads accepted by the ledger engine.

Payloads are assumed pre-validated by the caller (uuid shapes, positive
amounts, enum membership); the engine still guards the invariants it
computes with.
"""

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any

from loan_ledger.models.enums import LoanStatus, LoanType, TransactionType


class _Unset:
    """Marker for a patch field the caller did not send."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class LoanCreate:
    """Loan application as recorded by a loan officer."""

    borrower_id: str
    principal_amount: Decimal
    loan_type: LoanType
    start_date: date
    end_date: date
    term_months: int
    interest_rate_id: str | None = None
    interest_rate_snapshot: Decimal | None = None
    current_balance: Decimal | None = None
    status: LoanStatus | None = None


@dataclass
class LoanPatch:
    """Partial loan update; only fields set to something other than UNSET apply."""

    interest_rate_id: str | None = UNSET
    principal_amount: Decimal = UNSET
    term_months: int = UNSET
    current_balance: Decimal = UNSET
    status: LoanStatus = UNSET
    loan_type: LoanType = UNSET
    start_date: date = UNSET
    end_date: date = UNSET
    interest_rate_snapshot: Decimal | None = UNSET

    def touches(self, name: str) -> bool:
        """Whether the caller supplied ``name`` in this patch."""
        return getattr(self, name) is not UNSET

    def changes(self) -> dict[str, Any]:
        """Return the supplied fields as a dict."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass
class TransactionCreate:
    """A posting against a loan."""

    loan_id: str
    amount_paid: Decimal
    payment_date: date
    payment_term: int
    transaction_type: TransactionType | None = None  # None posts as a repayment
    method: str | None = None
    note: str | None = None
