"""Interest rate model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class InterestRate:
    """Configurable annual rate that loans snapshot when attached."""

    rate_id: str
    rate_percent: Decimal  # 0-100, annual
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
