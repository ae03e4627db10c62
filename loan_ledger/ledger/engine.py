"""Loan ledger engine: loan creation, edits and transaction posting.

Every public write runs inside ``gateway.run_in_transaction``; reads of a
loan that is about to be rewritten take a row lock so two postings against
the same loan are applied one after the other.
"""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal

from loan_ledger.config import PolicyConfig
from loan_ledger.exceptions import LedgerValidationError, LoanNotFoundError
from loan_ledger.ledger.balance import (
    apply_amount,
    compute_balance,
    fallback_balance,
    quantize_money,
)
from loan_ledger.ledger.lifecycle import LoanLifecycle
from loan_ledger.ledger.rates import RateSnapshotProvider
from loan_ledger.models import (
    Loan,
    LoanCreate,
    LoanPatch,
    LoanStatus,
    Transaction,
    TransactionCreate,
    TransactionType,
)
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

# Patch fields that change the interest-bearing balance.
RECALCULATING_FIELDS = ("interest_rate_id", "principal_amount", "term_months")


def _new_id() -> str:
    return str(uuid.uuid4())


class LoanLedgerEngine:
    """Keep loan balances, rate snapshots and the ledger consistent.

    Parameters
    ----------
    gateway : PersistenceGateway
        Storage the engine reads and writes through.
    policy : PolicyConfig | None
        Rate-resolution and terminal-status policies. Defaults keep the
        permissive behaviour: unknown rates fall back to zero interest and
        any loan repaid to zero is completed.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        policy: PolicyConfig | None = None,
    ) -> None:
        self.gateway = gateway
        self.policy = policy or PolicyConfig()
        self.lifecycle = LoanLifecycle(guard_terminal=self.policy.guard_terminal_status)

    def _rates(self, gateway: PersistenceGateway) -> RateSnapshotProvider:
        return RateSnapshotProvider(gateway, strict=self.policy.strict_rate_resolution)

    def create_loan(self, request: LoanCreate) -> Loan:
        """Record a new loan with its opening balance.

        When the rate resolves, its percent is snapshotted onto the loan and
        the balance is principal plus simple interest over the term, even if
        the caller sent a balance. Otherwise the caller's balance is kept, or
        the principal is used when none was sent.
        """
        _require_positive_principal(request.principal_amount)
        _require_positive_term(request.term_months)

        def _create(tx: PersistenceGateway) -> Loan:
            snapshot = request.interest_rate_snapshot
            balance = request.current_balance

            rate = self._rates(tx).resolve(request.interest_rate_id)
            if rate is not None:
                snapshot = rate.percent
                balance = compute_balance(request.principal_amount, rate.percent, request.term_months)

            if balance is None:
                balance = fallback_balance(request.principal_amount)

            loan = Loan(
                loan_id=_new_id(),
                borrower_id=request.borrower_id,
                interest_rate_id=request.interest_rate_id,
                principal_amount=quantize_money(request.principal_amount),
                loan_type=request.loan_type,
                start_date=request.start_date,
                end_date=request.end_date,
                term_months=request.term_months,
                interest_rate_snapshot=snapshot,
                current_balance=_require_non_negative_balance(balance),
                status=request.status or LoanStatus.PENDING,
            )
            return tx.save_loan(loan)

        loan = self.gateway.run_in_transaction(_create)
        logger.info(
            "Created loan %s for borrower %s, balance %s",
            loan.loan_id,
            loan.borrower_id,
            loan.current_balance,
            extra={"extra": {"loan_id": loan.loan_id, "borrower_id": loan.borrower_id}},
        )
        return loan

    def update_loan(self, loan_id: str, patch: LoanPatch) -> Loan:
        """Apply an administrative edit, recomputing the balance if needed.

        Touching the rate, principal or term recomputes the balance from the
        merged terms unless the patch sets ``current_balance`` itself, which
        always wins. A rate id that does not resolve leaves the existing
        snapshot in place.

        Raises
        ------
        LoanNotFoundError
            If ``loan_id`` does not exist.
        """
        if patch.touches("principal_amount"):
            _require_positive_principal(patch.principal_amount)
        if patch.touches("term_months"):
            _require_positive_term(patch.term_months)

        def _update(tx: PersistenceGateway) -> Loan:
            existing = tx.find_loan_by_id(loan_id, for_update=True)
            if existing is None:
                raise LoanNotFoundError(f"Loan {loan_id} not found")

            changes = patch.changes()
            status = changes.pop("status", None)
            should_recalculate = any(patch.touches(name) for name in RECALCULATING_FIELDS)

            if patch.interest_rate_id:
                rate = self._rates(tx).resolve(patch.interest_rate_id)
                if rate is not None:
                    changes["interest_rate_snapshot"] = rate.percent

            if patch.touches("current_balance"):
                changes["current_balance"] = _require_non_negative_balance(patch.current_balance)
            elif should_recalculate:
                balance = self._recalculated_balance(existing, changes)
                if balance is not None:
                    changes["current_balance"] = balance

            if "principal_amount" in changes and changes["principal_amount"] is not None:
                changes["principal_amount"] = quantize_money(changes["principal_amount"])

            updated = replace(existing, **changes)
            if status is not None:
                self.lifecycle.override(updated, status)
            return tx.save_loan(updated)

        loan = self.gateway.run_in_transaction(_update)
        logger.info(
            "Updated loan %s, balance %s",
            loan.loan_id,
            loan.current_balance,
            extra={"extra": {"loan_id": loan.loan_id}},
        )
        return loan

    def _recalculated_balance(self, existing: Loan, changes: dict) -> Decimal | None:
        principal = changes.get("principal_amount", existing.principal_amount)
        term_months = changes.get("term_months", existing.term_months)
        if principal is None or term_months is None:
            return None

        rate_percent = changes.get("interest_rate_snapshot")
        if rate_percent is None:
            rate_percent = existing.interest_rate_snapshot

        if rate_percent is None:
            return fallback_balance(principal)
        return compute_balance(principal, rate_percent, term_months)

    def apply_transaction(self, request: TransactionCreate) -> Transaction:
        """Post a repayment, fee or penalty and return the ledger entry.

        The loan balance update and the ledger insert commit together. A
        reducing posting that takes the balance to zero completes the loan.

        Raises
        ------
        LoanNotFoundError
            If the loan does not exist; nothing is written.
        """
        if request.payment_term < 1:
            raise LedgerValidationError(
                f"Payment term must be at least 1, got {request.payment_term}"
            )
        amount = quantize_money(request.amount_paid)
        if amount <= 0:
            raise LedgerValidationError(
                f"Transaction amount must be at least one cent, got {request.amount_paid}"
            )

        def _post(tx: PersistenceGateway) -> Transaction:
            loan = tx.find_loan_by_id(request.loan_id, for_update=True)
            if loan is None:
                raise LoanNotFoundError(f"Loan {request.loan_id} not found")

            transaction_type = request.transaction_type
            new_balance = apply_amount(loan.current_balance, transaction_type, amount)

            loan.current_balance = new_balance
            loan.status = self.lifecycle.status_after_posting(
                loan.status, transaction_type, new_balance
            )
            tx.save_loan(loan)

            entry = Transaction(
                transaction_id=_new_id(),
                loan_id=loan.loan_id,
                borrower_id=loan.borrower_id,
                payment_date=request.payment_date,
                transaction_type=transaction_type or TransactionType.REPAYMENT,
                amount_paid=amount,
                remaining_balance=new_balance,
                payment_term=request.payment_term,
                method=request.method,
                note=request.note,
            )
            return tx.insert_transaction(entry)

        entry = self.gateway.run_in_transaction(_post)
        logger.info(
            "Posted %s of %s on loan %s, remaining %s",
            entry.transaction_type.value,
            entry.amount_paid,
            entry.loan_id,
            entry.remaining_balance,
            extra={"extra": {"loan_id": entry.loan_id, "transaction_id": entry.transaction_id}},
        )
        return entry

    def update_status(self, loan_id: str, status: LoanStatus) -> Loan:
        """Administrative status change; the balance is untouched."""

        def _set_status(tx: PersistenceGateway) -> Loan:
            loan = tx.find_loan_by_id(loan_id, for_update=True)
            if loan is None:
                raise LoanNotFoundError(f"Loan {loan_id} not found")
            return tx.save_loan(self.lifecycle.override(loan, status))

        return self.gateway.run_in_transaction(_set_status)

    def get_loan(self, loan_id: str) -> Loan:
        loan = self.gateway.find_loan_by_id(loan_id)
        if loan is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return loan

    def loans_for_borrower(self, borrower_id: str) -> list[Loan]:
        return self.gateway.list_loans(borrower_id=borrower_id)

    def transactions_for_loan(self, loan_id: str) -> list[Transaction]:
        """Ledger entries of a loan in posting order."""
        self.get_loan(loan_id)
        return self.gateway.list_transactions(loan_id=loan_id)


def _require_positive_principal(principal: Decimal) -> None:
    if principal is None or Decimal(principal) <= 0:
        raise LedgerValidationError(f"Principal must be positive, got {principal}")


def _require_positive_term(term_months: int) -> None:
    if term_months is None or term_months <= 0:
        raise LedgerValidationError(f"Term must be positive, got {term_months} months")


def _require_non_negative_balance(balance: Decimal) -> Decimal:
    if balance is None or Decimal(balance) < 0:
        raise LedgerValidationError(f"Balance must not be negative, got {balance}")
    return quantize_money(balance)
