"""Tests for rate snapshot resolution."""

from decimal import Decimal

import pytest

from loan_ledger.exceptions import RateUnavailableError
from loan_ledger.ledger.rates import RateSnapshot, RateSnapshotProvider
from loan_ledger.models import InterestRate
from loan_ledger.store import InMemoryLedgerStore


class TestRateSnapshotProvider:
    """Tests for RateSnapshotProvider.resolve."""

    def test_resolves_known_rate(self, store: InMemoryLedgerStore, rate_10: InterestRate) -> None:
        snapshot = RateSnapshotProvider(store).resolve(rate_10.rate_id)

        assert snapshot == RateSnapshot(rate_id="rate-010", percent=Decimal("10"), is_active=True)

    def test_unknown_rate_is_unavailable(self, store: InMemoryLedgerStore) -> None:
        assert RateSnapshotProvider(store).resolve("missing") is None

    def test_missing_id_is_unavailable(self, store: InMemoryLedgerStore) -> None:
        assert RateSnapshotProvider(store).resolve(None) is None

    def test_strict_raises_for_unknown_rate(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(RateUnavailableError, match="missing"):
            RateSnapshotProvider(store, strict=True).resolve("missing")

    def test_reads_current_value(self, store: InMemoryLedgerStore, rate_10: InterestRate) -> None:
        provider = RateSnapshotProvider(store)
        provider.resolve(rate_10.rate_id)

        store.save_rate(InterestRate(rate_id=rate_10.rate_id, rate_percent=Decimal("12"), is_active=False))
        snapshot = provider.resolve(rate_10.rate_id)

        assert snapshot.percent == Decimal("12")
        assert snapshot.is_active is False
