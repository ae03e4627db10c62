"""Interest rate configuration."""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal

from loan_ledger.exceptions import InterestRateNotFoundError, LedgerValidationError
from loan_ledger.models import InterestRate
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

MIN_PERCENT = Decimal(0)
MAX_PERCENT = Decimal(100)


def _validate_percent(rate_percent: Decimal) -> Decimal:
    percent = Decimal(rate_percent)
    if not MIN_PERCENT <= percent <= MAX_PERCENT:
        raise LedgerValidationError(f"Rate percent must be within 0-100, got {percent}")
    return percent


class InterestRateRegistry:
    """Maintain the rate table loans snapshot from.

    Editing a rate never touches loans that already hold a snapshot of it.
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    def create(self, rate_percent: Decimal, is_active: bool = True) -> InterestRate:
        rate = InterestRate(
            rate_id=str(uuid.uuid4()),
            rate_percent=_validate_percent(rate_percent),
            is_active=is_active,
        )
        saved = self.gateway.save_rate(rate)
        logger.info("Created interest rate %s at %s%%", saved.rate_id, saved.rate_percent)
        return saved

    def update(
        self,
        rate_id: str,
        rate_percent: Decimal | None = None,
        is_active: bool | None = None,
    ) -> InterestRate:
        rate = self.get(rate_id)
        if rate_percent is not None:
            rate = replace(rate, rate_percent=_validate_percent(rate_percent))
        if is_active is not None:
            rate = replace(rate, is_active=is_active)
        return self.gateway.save_rate(rate)

    def get(self, rate_id: str) -> InterestRate:
        rate = self.gateway.find_rate_by_id(rate_id)
        if rate is None:
            raise InterestRateNotFoundError(f"Interest rate {rate_id} not found")
        return rate

    def list_active(self) -> list[InterestRate]:
        return self.gateway.list_rates(active_only=True)

    def list_all(self) -> list[InterestRate]:
        return self.gateway.list_rates()
