"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class EntityNotFoundError(LoanLedgerError):
    """Raised when a referenced entity does not exist."""


class LoanNotFoundError(EntityNotFoundError):
    """Raised when a loan id does not resolve."""


class BorrowerNotFoundError(EntityNotFoundError):
    """Raised when a borrower id does not resolve."""


class InterestRateNotFoundError(EntityNotFoundError):
    """Raised when an interest rate id does not resolve on a direct lookup."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class RateUnavailableError(LoanLedgerError):
    """Raised when a rate cannot be resolved and the strict policy is on."""


class InvalidEntityStateError(LoanLedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class LedgerValidationError(LoanLedgerError):
    """Raised when an input violates a ledger invariant."""


class PersistenceError(LoanLedgerError):
    """Raised when the storage layer fails or aborts a transaction."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""
