"""Portfolio-level figures over loans and the ledger."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_ledger.ledger.balance import REDUCING_TYPES, quantize_money
from loan_ledger.models import LoanStatus, TransactionType
from loan_ledger.store.gateway import PersistenceGateway


@dataclass
class PortfolioSummary:
    """Totals across every loan in the store.

    ``total_repaid`` is the sum of amounts received on reducing postings. An
    over-repayment counts in full even though the loan balance only dropped
    to zero, so it can exceed the principal and interest actually retired.
    """

    loans_by_status: dict[str, int] = field(default_factory=dict)
    total_principal: Decimal = Decimal("0.00")
    outstanding_balance: Decimal = Decimal("0.00")
    total_repaid: Decimal = Decimal("0.00")
    total_charges: Decimal = Decimal("0.00")  # Late fees and penalties
    transaction_count: int = 0


class PortfolioReport:
    """Build a ``PortfolioSummary`` from a gateway."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    def summary(self) -> PortfolioSummary:
        result = PortfolioSummary(loans_by_status={s.value: 0 for s in LoanStatus})

        for loan in self.gateway.list_loans():
            result.loans_by_status[LoanStatus(loan.status).value] += 1
            result.total_principal += loan.principal_amount
            result.outstanding_balance += loan.current_balance

        for entry in self.gateway.list_transactions():
            result.transaction_count += 1
            if entry.transaction_type in REDUCING_TYPES:
                result.total_repaid += entry.amount_paid
            elif entry.transaction_type in (TransactionType.LATE_FEE, TransactionType.PENALTY):
                result.total_charges += entry.amount_paid

        result.total_principal = quantize_money(result.total_principal)
        result.outstanding_balance = quantize_money(result.outstanding_balance)
        result.total_repaid = quantize_money(result.total_repaid)
        result.total_charges = quantize_money(result.total_charges)
        return result
