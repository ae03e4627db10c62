"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.ledger import LoanLedgerEngine
from loan_ledger.models import Borrower, InterestRate, LoanCreate, LoanType
from loan_ledger.store import InMemoryLedgerStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def store() -> InMemoryLedgerStore:
    """Fresh in-memory store for each test."""
    return InMemoryLedgerStore()


@pytest.fixture
def engine(store: InMemoryLedgerStore) -> LoanLedgerEngine:
    """Engine with the default permissive policy."""
    return LoanLedgerEngine(store)


@pytest.fixture
def borrower(store: InMemoryLedgerStore) -> Borrower:
    """Sample borrower saved in the store."""
    return store.save_borrower(
        Borrower(
            borrower_id="borrower-001",
            full_name="John Doe",
            phone="09123456789",
            email="john.doe@example.com",
            address="No. 123, Main Street, Yangon",
            national_id="12/YAKANA(N)123456",
        )
    )


@pytest.fixture
def rate_10(store: InMemoryLedgerStore) -> InterestRate:
    """Active 10% annual rate."""
    return store.save_rate(InterestRate(rate_id="rate-010", rate_percent=Decimal("10")))


@pytest.fixture
def loan_request(borrower: Borrower, rate_10: InterestRate) -> LoanCreate:
    """1,000,000 over 12 months at the 10% rate."""
    return LoanCreate(
        borrower_id=borrower.borrower_id,
        interest_rate_id=rate_10.rate_id,
        principal_amount=Decimal("1000000"),
        loan_type=LoanType.PERSONAL,
        start_date=date(2024, 1, 1),
        end_date=date(2025, 1, 1),
        term_months=12,
    )
