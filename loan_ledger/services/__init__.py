"""Registries and reports that sit beside the ledger engine."""

from loan_ledger.services.borrowers import BorrowerRegistry
from loan_ledger.services.interest_rates import InterestRateRegistry
from loan_ledger.services.portfolio import PortfolioReport, PortfolioSummary

__all__ = ["BorrowerRegistry", "InterestRateRegistry", "PortfolioReport", "PortfolioSummary"]
