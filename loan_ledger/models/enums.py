"""Enumeration types for lending entities."""

from enum import Enum


class LoanType(str, Enum):
    PERSONAL = "PERSONAL"
    HOME = "HOME"
    AUTO = "AUTO"
    BUSINESS = "BUSINESS"
    EDUCATION = "EDUCATION"
    OTHER = "OTHER"


class LoanStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DEFAULTED = "DEFAULTED"
    REJECTED = "REJECTED"


class TransactionType(str, Enum):
    REPAYMENT = "REPAYMENT"
    LATE_FEE = "LATE_FEE"
    PENALTY = "PENALTY"
    OTHER = "OTHER"
