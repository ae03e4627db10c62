"""Persistence interface the ledger engine is written against."""

from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from loan_ledger.models import Borrower, InterestRate, Loan, Transaction

T = TypeVar("T")


class PersistenceGateway(ABC):
    """Durable storage for borrowers, rates, loans and ledger entries.

    ``run_in_transaction(fn)`` calls ``fn`` with a gateway bound to a single
    storage transaction. Everything ``fn`` writes through that gateway
    commits together or not at all; a ``for_update`` loan read holds a row
    lock until the transaction ends.
    """

    @abstractmethod
    def run_in_transaction(self, fn: Callable[["PersistenceGateway"], T]) -> T:
        """Run ``fn`` atomically and return its result."""

    # Loans
    @abstractmethod
    def find_loan_by_id(self, loan_id: str, for_update: bool = False) -> Loan | None:
        """Return the loan, optionally locking its row for the transaction."""

    @abstractmethod
    def save_loan(self, loan: Loan) -> Loan:
        """Insert or update a loan and return the stored copy."""

    @abstractmethod
    def list_loans(self, borrower_id: str | None = None) -> list[Loan]:
        """Return loans, newest first, optionally for one borrower."""

    # Interest rates
    @abstractmethod
    def find_rate_by_id(self, rate_id: str) -> InterestRate | None:
        """Return the interest rate or ``None``."""

    @abstractmethod
    def save_rate(self, rate: InterestRate) -> InterestRate:
        """Insert or update an interest rate."""

    @abstractmethod
    def list_rates(self, active_only: bool = False) -> list[InterestRate]:
        """Return interest rates ordered by percent."""

    # Borrowers
    @abstractmethod
    def find_borrower_by_id(self, borrower_id: str) -> Borrower | None:
        """Return the borrower or ``None``."""

    @abstractmethod
    def save_borrower(self, borrower: Borrower) -> Borrower:
        """Insert or update a borrower."""

    @abstractmethod
    def search_borrowers(self, name: str) -> list[Borrower]:
        """Case-insensitive substring match on full name."""

    # Ledger
    @abstractmethod
    def insert_transaction(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry."""

    @abstractmethod
    def list_transactions(self, loan_id: str | None = None) -> list[Transaction]:
        """Return ledger entries in posting order, optionally for one loan."""
