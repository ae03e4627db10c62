"""Persistence gateways for the ledger engine."""

from loan_ledger.store.gateway import PersistenceGateway
from loan_ledger.store.memory import InMemoryLedgerStore
from loan_ledger.store.postgres import PostgresLedgerStore

__all__ = ["InMemoryLedgerStore", "PersistenceGateway", "PostgresLedgerStore"]
