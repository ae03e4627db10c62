"""Resolve interest rate ids to the percentage in effect right now."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from loan_ledger.exceptions import RateUnavailableError
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateSnapshot:
    """Point-in-time view of an interest rate."""

    rate_id: str
    percent: Decimal
    is_active: bool


class RateSnapshotProvider:
    """Read-through lookup of interest rates.

    Every call hits the gateway so edits to a rate are seen by the next
    loan that attaches it. An unknown id resolves to ``None`` unless
    ``strict`` is set, in which case ``RateUnavailableError`` is raised.
    """

    def __init__(self, gateway: PersistenceGateway, strict: bool = False) -> None:
        self.gateway = gateway
        self.strict = strict

    def resolve(self, rate_id: str | None) -> RateSnapshot | None:
        if not rate_id:
            return None

        rate = self.gateway.find_rate_by_id(rate_id)
        if rate is None:
            if self.strict:
                raise RateUnavailableError(f"Interest rate {rate_id} not found")
            logger.warning("Interest rate %s not found, treating as unavailable", rate_id)
            return None

        return RateSnapshot(
            rate_id=rate.rate_id,
            percent=Decimal(rate.rate_percent),
            is_active=rate.is_active,
        )
