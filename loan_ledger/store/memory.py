"""In-memory ledger store with referential integrity and row locking."""

import copy
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, TypeVar

from loan_ledger.exceptions import InvalidEntityStateError, ReferentialIntegrityError
from loan_ledger.models import Borrower, InterestRate, Loan, Transaction
from loan_ledger.store.gateway import PersistenceGateway

T = TypeVar("T")


@dataclass
class _TransactionState:
    """Undo log and row locks owned by one running transaction."""

    undo: list[Callable[[], None]] = field(default_factory=list)
    held_locks: dict[str, threading.Lock] = field(default_factory=dict)


@dataclass
class InMemoryLedgerStore(PersistenceGateway):
    """Dict-backed gateway used for tests, demos and seeding.

    Records are copied on the way in and out, so callers never share state
    with the store. Writes made inside ``run_in_transaction`` are undone if
    the callback raises. Locked loan reads block other transactions that
    try to lock the same loan until the holder finishes.
    """

    # Primary entities
    borrowers: dict[str, Borrower] = field(default_factory=dict)
    interest_rates: dict[str, InterestRate] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)
    transactions: dict[str, Transaction] = field(default_factory=dict)

    # Relationship indexes
    _borrower_loans: dict[str, list[str]] = field(default_factory=dict)
    _loan_transactions: dict[str, list[str]] = field(default_factory=dict)

    _mutex: Any = field(default_factory=threading.RLock, repr=False)
    _row_locks: dict[str, threading.Lock] = field(default_factory=dict, repr=False)
    _local: threading.local = field(default_factory=threading.local, repr=False)

    # Transactions
    def run_in_transaction(self, fn: Callable[[PersistenceGateway], T]) -> T:
        if self._current() is not None:
            # Nested call joins the outer transaction
            return fn(self)

        state = _TransactionState()
        self._local.tx = state
        try:
            result = fn(self)
        except BaseException:
            with self._mutex:
                for undo in reversed(state.undo):
                    undo()
            raise
        finally:
            self._local.tx = None
            for lock in state.held_locks.values():
                lock.release()
        return result

    def _current(self) -> _TransactionState | None:
        return getattr(self._local, "tx", None)

    def _record_undo(self, undo: Callable[[], None]) -> None:
        state = self._current()
        if state is not None:
            state.undo.append(undo)

    def _lock_row(self, loan_id: str) -> None:
        state = self._current()
        if state is None:
            raise InvalidEntityStateError("Locking reads require an open transaction")
        if loan_id in state.held_locks:
            return
        with self._mutex:
            if loan_id not in self.loans:
                # No row, nothing to lock
                return
            lock = self._row_locks.setdefault(loan_id, threading.Lock())
        lock.acquire()
        state.held_locks[loan_id] = lock

    # Loans
    def find_loan_by_id(self, loan_id: str, for_update: bool = False) -> Loan | None:
        if for_update:
            self._lock_row(loan_id)
        with self._mutex:
            loan = self.loans.get(loan_id)
            return copy.deepcopy(loan) if loan is not None else None

    def save_loan(self, loan: Loan) -> Loan:
        """Insert or update a loan."""
        if loan.borrower_id not in self.borrowers:
            raise ReferentialIntegrityError(f"Borrower {loan.borrower_id} not found")

        now = datetime.now()
        stored = copy.deepcopy(loan)
        with self._mutex:
            previous = self.loans.get(loan.loan_id)
            if previous is None:
                stored.created_at = stored.created_at or now
            else:
                stored.created_at = previous.created_at
            stored.updated_at = now

            self.loans[stored.loan_id] = stored
            if previous is None:
                self._borrower_loans.setdefault(stored.borrower_id, []).append(stored.loan_id)
                self._loan_transactions.setdefault(stored.loan_id, [])
            elif previous.borrower_id != stored.borrower_id:
                self._borrower_loans[previous.borrower_id].remove(stored.loan_id)
                self._borrower_loans.setdefault(stored.borrower_id, []).append(stored.loan_id)

        self._record_undo(lambda: self._restore_loan(stored, previous))
        return copy.deepcopy(stored)

    def _restore_loan(self, stored: Loan, previous: Loan | None) -> None:
        if previous is None:
            del self.loans[stored.loan_id]
            self._borrower_loans[stored.borrower_id].remove(stored.loan_id)
            self._loan_transactions.pop(stored.loan_id, None)
            return

        self.loans[previous.loan_id] = previous
        if previous.borrower_id != stored.borrower_id:
            self._borrower_loans[stored.borrower_id].remove(stored.loan_id)
            self._borrower_loans.setdefault(previous.borrower_id, []).append(previous.loan_id)

    def list_loans(self, borrower_id: str | None = None) -> list[Loan]:
        with self._mutex:
            if borrower_id is None:
                loan_ids = list(self.loans)
            else:
                loan_ids = list(self._borrower_loans.get(borrower_id, []))
            return [copy.deepcopy(self.loans[lid]) for lid in reversed(loan_ids)]

    # Interest rates
    def find_rate_by_id(self, rate_id: str) -> InterestRate | None:
        with self._mutex:
            rate = self.interest_rates.get(rate_id)
            return copy.deepcopy(rate) if rate is not None else None

    def save_rate(self, rate: InterestRate) -> InterestRate:
        now = datetime.now()
        stored = copy.deepcopy(rate)
        with self._mutex:
            previous = self.interest_rates.get(rate.rate_id)
            stored.created_at = previous.created_at if previous else (stored.created_at or now)
            stored.updated_at = now
            self.interest_rates[stored.rate_id] = stored
        self._record_undo(lambda: self._restore(self.interest_rates, stored.rate_id, previous))
        return copy.deepcopy(stored)

    def list_rates(self, active_only: bool = False) -> list[InterestRate]:
        with self._mutex:
            rates = [r for r in self.interest_rates.values() if r.is_active or not active_only]
            return [copy.deepcopy(r) for r in sorted(rates, key=lambda r: r.rate_percent)]

    # Borrowers
    def find_borrower_by_id(self, borrower_id: str) -> Borrower | None:
        with self._mutex:
            borrower = self.borrowers.get(borrower_id)
            return copy.deepcopy(borrower) if borrower is not None else None

    def save_borrower(self, borrower: Borrower) -> Borrower:
        now = datetime.now()
        stored = copy.deepcopy(borrower)
        with self._mutex:
            previous = self.borrowers.get(borrower.borrower_id)
            stored.created_at = previous.created_at if previous else (stored.created_at or now)
            stored.updated_at = now
            self.borrowers[stored.borrower_id] = stored
            self._borrower_loans.setdefault(stored.borrower_id, [])
        self._record_undo(lambda: self._restore(self.borrowers, stored.borrower_id, previous))
        return copy.deepcopy(stored)

    def search_borrowers(self, name: str) -> list[Borrower]:
        needle = name.lower()
        with self._mutex:
            return [
                copy.deepcopy(b)
                for b in self.borrowers.values()
                if needle in b.full_name.lower()
            ]

    # Ledger
    def insert_transaction(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry to its loan."""
        stored = copy.deepcopy(transaction)
        with self._mutex:
            if stored.loan_id not in self.loans:
                raise ReferentialIntegrityError(f"Loan {stored.loan_id} not found")
            if stored.transaction_id in self.transactions:
                raise InvalidEntityStateError(
                    f"Transaction {stored.transaction_id} already recorded"
                )
            if stored.created_at is None:
                stored.created_at = datetime.now()
            self.transactions[stored.transaction_id] = stored
            self._loan_transactions.setdefault(stored.loan_id, []).append(stored.transaction_id)

        self._record_undo(lambda: self._remove_transaction(stored))
        return copy.deepcopy(stored)

    def _remove_transaction(self, stored: Transaction) -> None:
        del self.transactions[stored.transaction_id]
        entries = self._loan_transactions.get(stored.loan_id)
        if entries is not None:
            entries.remove(stored.transaction_id)

    def list_transactions(self, loan_id: str | None = None) -> list[Transaction]:
        with self._mutex:
            if loan_id is None:
                ids = list(self.transactions)
            else:
                ids = list(self._loan_transactions.get(loan_id, []))
            return [copy.deepcopy(self.transactions[tid]) for tid in ids]

    @staticmethod
    def _restore(table: dict, key: str, previous: object | None) -> None:
        if previous is None:
            table.pop(key, None)
        else:
            table[key] = previous

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        with self._mutex:
            return {
                "borrowers": len(self.borrowers),
                "interest_rates": len(self.interest_rates),
                "loans": len(self.loans),
                "transactions": len(self.transactions),
            }
