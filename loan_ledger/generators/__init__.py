"""Demo data generators."""

from loan_ledger.generators.borrower import BorrowerGenerator
from loan_ledger.generators.portfolio import PortfolioSeeder, SeededPortfolio

__all__ = ["BorrowerGenerator", "PortfolioSeeder", "SeededPortfolio"]
