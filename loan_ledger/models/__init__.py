"""Lending domain models."""

from loan_ledger.models.borrower import Borrower
from loan_ledger.models.enums import LoanStatus, LoanType, TransactionType
from loan_ledger.models.interest_rate import InterestRate
from loan_ledger.models.loan import Loan
from loan_ledger.models.requests import UNSET, LoanCreate, LoanPatch, TransactionCreate
from loan_ledger.models.transaction import Transaction

__all__ = [
    "Borrower",
    "InterestRate",
    "Loan",
    "LoanCreate",
    "LoanPatch",
    "LoanStatus",
    "LoanType",
    "Transaction",
    "TransactionCreate",
    "TransactionType",
    "UNSET",
]
