"""Balance arithmetic, rate snapshots, loan lifecycle and the ledger engine."""

from loan_ledger.ledger.balance import (
    apply_amount,
    compute_balance,
    compute_interest,
    fallback_balance,
    quantize_money,
)
from loan_ledger.ledger.engine import LoanLedgerEngine
from loan_ledger.ledger.lifecycle import TERMINAL_STATUSES, LoanLifecycle
from loan_ledger.ledger.rates import RateSnapshot, RateSnapshotProvider

__all__ = [
    "LoanLedgerEngine",
    "LoanLifecycle",
    "RateSnapshot",
    "RateSnapshotProvider",
    "TERMINAL_STATUSES",
    "apply_amount",
    "compute_balance",
    "compute_interest",
    "fallback_balance",
    "quantize_money",
]
