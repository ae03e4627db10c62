"""Borrower registration and lookup."""

import logging
import uuid
from dataclasses import replace
from typing import Any

from loan_ledger.exceptions import BorrowerNotFoundError, LedgerValidationError
from loan_ledger.models import Borrower, Loan
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"full_name", "phone", "email", "address", "national_id"})


class BorrowerRegistry:
    """Create, edit and search borrowers."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    def register(
        self,
        full_name: str,
        phone: str,
        email: str,
        address: str,
        national_id: str,
    ) -> Borrower:
        borrower = Borrower(
            borrower_id=str(uuid.uuid4()),
            full_name=full_name,
            phone=phone,
            email=email,
            address=address,
            national_id=national_id,
        )
        saved = self.gateway.save_borrower(borrower)
        logger.info("Registered borrower %s", saved.borrower_id)
        return saved

    def update(self, borrower_id: str, **changes: Any) -> Borrower:
        """Edit identity fields of a borrower.

        Raises
        ------
        BorrowerNotFoundError
            If ``borrower_id`` does not exist.
        LedgerValidationError
            If a field outside the editable set is passed.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise LedgerValidationError(f"Cannot edit borrower fields: {sorted(unknown)}")
        return self.gateway.save_borrower(replace(self.get(borrower_id), **changes))

    def get(self, borrower_id: str) -> Borrower:
        borrower = self.gateway.find_borrower_by_id(borrower_id)
        if borrower is None:
            raise BorrowerNotFoundError(f"Borrower {borrower_id} not found")
        return borrower

    def search_by_name(self, name: str) -> list[Borrower]:
        return self.gateway.search_borrowers(name)

    def loans_for(self, borrower_id: str) -> list[Loan]:
        self.get(borrower_id)
        return self.gateway.list_loans(borrower_id=borrower_id)
