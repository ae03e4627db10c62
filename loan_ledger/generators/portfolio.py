"""Seed a gateway with a demo loan portfolio."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.config import PolicyConfig
from loan_ledger.generators.borrower import BorrowerGenerator
from loan_ledger.ledger.engine import LoanLedgerEngine
from loan_ledger.models import (
    Borrower,
    InterestRate,
    Loan,
    LoanCreate,
    LoanStatus,
    LoanType,
    Transaction,
    TransactionCreate,
    TransactionType,
)
from loan_ledger.services import BorrowerRegistry, InterestRateRegistry
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

# (percent, active)
RATE_TABLE: list[tuple[Decimal, bool]] = [
    (Decimal("5"), True),
    (Decimal("10"), True),
    (Decimal("12"), True),
    (Decimal("15"), True),
    (Decimal("20"), False),
]
TERMS = [6, 12, 18, 24]
BASE_PRINCIPAL = Decimal("1000000")
PRINCIPAL_STEP = Decimal("150000")
INSTALLMENT = Decimal("250000")


@dataclass
class SeededPortfolio:
    """Records created by a ``PortfolioSeeder`` run."""

    rates: list[InterestRate] = field(default_factory=list)
    borrowers: list[Borrower] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)


class PortfolioSeeder:
    """Populate a gateway with rates, borrowers, loans and repayments.

    Every loan and posting goes through ``LoanLedgerEngine`` so seeded
    balances obey the same rules as live ones. One loan per borrower;
    every fifth loan stays PENDING, the rest are ACTIVE. The first ACTIVE
    loan receives two monthly installments.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        num_borrowers: int = 10,
        seed: int | None = None,
        policy: PolicyConfig | None = None,
    ) -> None:
        self.gateway = gateway
        self.num_borrowers = num_borrowers
        self.engine = LoanLedgerEngine(gateway, policy)
        self.borrowers = BorrowerRegistry(gateway)
        self.rates = InterestRateRegistry(gateway)
        self._borrower_gen = BorrowerGenerator(seed=seed)

    def run(self) -> SeededPortfolio:
        result = SeededPortfolio()

        for percent, active in RATE_TABLE:
            result.rates.append(self.rates.create(percent, is_active=active))
        active_rates = [r for r in result.rates if r.is_active]
        logger.info("Seeded %d interest rates", len(result.rates))

        for _ in range(self.num_borrowers):
            result.borrowers.append(self.borrowers.register(**self._borrower_gen.generate()))
        logger.info("Seeded %d borrowers", len(result.borrowers))

        loan_types = list(LoanType)
        for i, borrower in enumerate(result.borrowers):
            month = (i % 12) + 1
            loan = self.engine.create_loan(
                LoanCreate(
                    borrower_id=borrower.borrower_id,
                    interest_rate_id=active_rates[i % len(active_rates)].rate_id,
                    principal_amount=BASE_PRINCIPAL + i * PRINCIPAL_STEP,
                    loan_type=loan_types[i % len(loan_types)],
                    start_date=date(2024, month, 1),
                    end_date=date(2025, month, 1),
                    term_months=TERMS[i % len(TERMS)],
                    status=LoanStatus.PENDING if i % 5 == 0 else LoanStatus.ACTIVE,
                )
            )
            result.loans.append(loan)
        logger.info("Seeded %d loans", len(result.loans))

        repaid = next((l for l in result.loans if l.status == LoanStatus.ACTIVE), None)
        if repaid is not None:
            for term, (paid_on, method, note) in enumerate(
                [
                    (date(2024, 2, 1), "Bank Transfer", "First Installment"),
                    (date(2024, 3, 1), "Cash", "Second Installment"),
                ],
                start=1,
            ):
                result.transactions.append(
                    self.engine.apply_transaction(
                        TransactionCreate(
                            loan_id=repaid.loan_id,
                            amount_paid=INSTALLMENT,
                            payment_date=paid_on,
                            payment_term=term,
                            transaction_type=TransactionType.REPAYMENT,
                            method=method,
                            note=note,
                        )
                    )
                )
            logger.info("Seeded %d transactions", len(result.transactions))

        return result
