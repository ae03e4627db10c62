"""Loan back-office ledger: borrowers, rates, loans and their transactions."""

__version__ = "0.1.0"
