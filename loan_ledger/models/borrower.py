"""Borrower model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Borrower:
    """Person owing money on one or more loans."""

    borrower_id: str
    full_name: str
    phone: str
    email: str
    address: str
    national_id: str  # NRC / national identity number
    created_at: datetime | None = None
    updated_at: datetime | None = None
