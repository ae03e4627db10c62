"""Loan status rules.

::

    PENDING --admin--> ACTIVE --repaid to zero--> COMPLETED
       |                  |
       +--admin--> REJECTED / DEFAULTED

Only the move to COMPLETED is automatic; it is driven by postings that
bring the balance to exactly zero. Every other move is an administrative
override with no effect on the balance.
"""

import logging
from decimal import Decimal

from loan_ledger.models import Loan, LoanStatus, TransactionType

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({LoanStatus.COMPLETED, LoanStatus.DEFAULTED, LoanStatus.REJECTED})

# Terminal states decided by an administrator rather than by the ledger.
ADMIN_TERMINAL_STATUSES = frozenset({LoanStatus.DEFAULTED, LoanStatus.REJECTED})

# Posting types that can complete a loan. ``None`` is an unspecified type.
COMPLETING_TYPES = frozenset({TransactionType.REPAYMENT, None})


class LoanLifecycle:
    """Decide status transitions for a loan.

    Parameters
    ----------
    guard_terminal : bool
        When true, a DEFAULTED or REJECTED loan keeps its status even if a
        repayment brings its balance to zero. Off by default.
    """

    def __init__(self, guard_terminal: bool = False) -> None:
        self.guard_terminal = guard_terminal

    def status_after_posting(
        self,
        status: LoanStatus,
        transaction_type: TransactionType | None,
        new_balance: Decimal,
    ) -> LoanStatus:
        if new_balance != 0 or transaction_type not in COMPLETING_TYPES:
            return status
        if self.guard_terminal and status in ADMIN_TERMINAL_STATUSES:
            logger.warning("Loan in %s status repaid to zero, status kept", status.value)
            return status
        return LoanStatus.COMPLETED

    def override(self, loan: Loan, status: LoanStatus) -> Loan:
        """Apply an administrative status change in place."""
        if loan.status != status:
            logger.info(
                "Loan %s status %s -> %s", loan.loan_id, loan.status.value, LoanStatus(status).value
            )
        loan.status = LoanStatus(status)
        return loan

    @staticmethod
    def is_terminal(status: LoanStatus) -> bool:
        return status in TERMINAL_STATUSES
