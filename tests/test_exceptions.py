"""Tests for custom exception hierarchy."""

import pytest

from loan_ledger.exceptions import (
    BorrowerNotFoundError,
    ConfigurationError,
    EntityNotFoundError,
    InterestRateNotFoundError,
    InvalidEntityStateError,
    LedgerValidationError,
    LoanLedgerError,
    LoanNotFoundError,
    PersistenceError,
    RateUnavailableError,
    ReferentialIntegrityError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_base_is_exception(self) -> None:
        assert isinstance(LoanLedgerError("test"), Exception)

    @pytest.mark.parametrize(
        "exc_type",
        [
            LoanNotFoundError,
            BorrowerNotFoundError,
            InterestRateNotFoundError,
            ReferentialIntegrityError,
        ],
    )
    def test_lookup_failures_are_entity_not_found(self, exc_type: type) -> None:
        err = exc_type("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, LoanLedgerError)

    @pytest.mark.parametrize(
        "exc_type",
        [
            RateUnavailableError,
            InvalidEntityStateError,
            LedgerValidationError,
            PersistenceError,
            ConfigurationError,
        ],
    )
    def test_other_errors_are_ledger_errors(self, exc_type: type) -> None:
        err = exc_type("test")
        assert isinstance(err, LoanLedgerError)
        assert not isinstance(err, EntityNotFoundError)

    def test_exception_message(self) -> None:
        err = LoanNotFoundError("Loan loan-001 not found")
        assert str(err) == "Loan loan-001 not found"
