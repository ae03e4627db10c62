"""PostgreSQL ledger store built on psycopg 3."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, TypeVar

import psycopg
from psycopg.rows import dict_row

from loan_ledger.exceptions import (
    InvalidEntityStateError,
    PersistenceError,
    ReferentialIntegrityError,
)
from loan_ledger.models import (
    Borrower,
    InterestRate,
    Loan,
    LoanStatus,
    LoanType,
    Transaction,
    TransactionType,
)
from loan_ledger.store.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

# interest_rate_id carries no foreign key: a loan may reference a rate
# that has since been removed and still keeps its snapshot.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS borrowers (
    borrower_id  TEXT PRIMARY KEY,
    full_name    TEXT NOT NULL,
    phone        TEXT NOT NULL,
    email        TEXT NOT NULL,
    address      TEXT NOT NULL,
    national_id  TEXT NOT NULL,
    created_at   TIMESTAMP NOT NULL DEFAULT now(),
    updated_at   TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS interest_rates (
    rate_id      TEXT PRIMARY KEY,
    rate_percent NUMERIC(5, 2) NOT NULL CHECK (rate_percent BETWEEN 0 AND 100),
    is_active    BOOLEAN NOT NULL DEFAULT TRUE,
    created_at   TIMESTAMP NOT NULL DEFAULT now(),
    updated_at   TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS loans (
    loan_id                TEXT PRIMARY KEY,
    borrower_id            TEXT NOT NULL REFERENCES borrowers (borrower_id),
    interest_rate_id       TEXT,
    principal_amount       NUMERIC(15, 2) NOT NULL CHECK (principal_amount > 0),
    loan_type              TEXT NOT NULL,
    start_date             DATE NOT NULL,
    end_date               DATE NOT NULL,
    term_months            INTEGER NOT NULL CHECK (term_months > 0),
    interest_rate_snapshot NUMERIC(5, 2),
    current_balance        NUMERIC(15, 2) NOT NULL CHECK (current_balance >= 0),
    status                 TEXT NOT NULL DEFAULT 'PENDING',
    created_at             TIMESTAMP NOT NULL DEFAULT now(),
    updated_at             TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS transactions (
    transaction_id    TEXT PRIMARY KEY,
    loan_id           TEXT NOT NULL REFERENCES loans (loan_id),
    borrower_id       TEXT REFERENCES borrowers (borrower_id),
    payment_date      DATE NOT NULL,
    transaction_type  TEXT NOT NULL DEFAULT 'REPAYMENT',
    amount_paid       NUMERIC(15, 2) NOT NULL CHECK (amount_paid > 0),
    remaining_balance NUMERIC(15, 2) NOT NULL,
    payment_term      INTEGER NOT NULL,
    method            TEXT,
    note              TEXT,
    created_at        TIMESTAMP NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_loans_borrower ON loans (borrower_id);
CREATE INDEX IF NOT EXISTS idx_transactions_loan ON transactions (loan_id);
"""

_LOAN_COLUMNS = (
    "loan_id, borrower_id, interest_rate_id, principal_amount, loan_type, start_date, "
    "end_date, term_months, interest_rate_snapshot, current_balance, status, "
    "created_at, updated_at"
)
_TRANSACTION_COLUMNS = (
    "transaction_id, loan_id, borrower_id, payment_date, transaction_type, amount_paid, "
    "remaining_balance, payment_term, method, note, created_at"
)


class PostgresLedgerStore(PersistenceGateway):
    """Gateway over a single psycopg connection.

    The connection runs in autocommit mode; ``run_in_transaction`` opens an
    explicit ``BEGIN``/``COMMIT`` block and locked loan reads use
    ``SELECT ... FOR UPDATE``. A connection is not shared between threads,
    so concurrent callers each open their own store.

    Parameters
    ----------
    conninfo : str | None
        libpq connection string, e.g. ``PostgresConfig.connection_string``.
    connection : psycopg.Connection | None
        Pre-opened connection to use instead of ``conninfo``.
    """

    def __init__(
        self,
        conninfo: str | None = None,
        connection: psycopg.Connection | None = None,
    ) -> None:
        if connection is None:
            if conninfo is None:
                raise ValueError("Either conninfo or connection is required")
            try:
                connection = psycopg.connect(conninfo, autocommit=True, row_factory=dict_row)
            except psycopg.Error as exc:
                raise PersistenceError(f"Could not connect to PostgreSQL: {exc}") from exc
        self.conn = connection
        # Depth of open run_in_transaction blocks
        self._tx_depth = 0

    def create_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self.conn.transaction():
            self._execute(SCHEMA_SQL)
        logger.info("Ledger schema ensured")

    def close(self) -> None:
        self.conn.close()

    def run_in_transaction(self, fn: Callable[[PersistenceGateway], T]) -> T:
        self._tx_depth += 1
        try:
            with self.conn.transaction():
                return fn(self)
        except psycopg.Error as exc:
            raise PersistenceError(f"Transaction aborted: {exc}") from exc
        finally:
            self._tx_depth -= 1

    def _execute(self, query: str, params: tuple | dict | None = None) -> psycopg.Cursor:
        try:
            return self.conn.execute(query, params)
        except psycopg.errors.ForeignKeyViolation as exc:
            raise ReferentialIntegrityError(str(exc)) from exc
        except psycopg.Error as exc:
            raise PersistenceError(str(exc)) from exc

    def _fetch_one(self, query: str, params: tuple) -> dict[str, Any] | None:
        return self._execute(query, params).fetchone()

    def _fetch_all(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        return self._execute(query, params).fetchall()

    # Loans
    def find_loan_by_id(self, loan_id: str, for_update: bool = False) -> Loan | None:
        query = f"SELECT {_LOAN_COLUMNS} FROM loans WHERE loan_id = %s"
        if for_update:
            # Autocommit would release the lock as soon as the SELECT ends
            if not self._tx_depth:
                raise InvalidEntityStateError("Locking reads require an open transaction")
            query += " FOR UPDATE"
        row = self._fetch_one(query, (loan_id,))
        return _loan_from_row(row) if row else None

    def save_loan(self, loan: Loan) -> Loan:
        row = self._fetch_one(
            f"""
            INSERT INTO loans ({_LOAN_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, now()), now())
            ON CONFLICT (loan_id) DO UPDATE SET
                borrower_id = EXCLUDED.borrower_id,
                interest_rate_id = EXCLUDED.interest_rate_id,
                principal_amount = EXCLUDED.principal_amount,
                loan_type = EXCLUDED.loan_type,
                start_date = EXCLUDED.start_date,
                end_date = EXCLUDED.end_date,
                term_months = EXCLUDED.term_months,
                interest_rate_snapshot = EXCLUDED.interest_rate_snapshot,
                current_balance = EXCLUDED.current_balance,
                status = EXCLUDED.status,
                updated_at = now()
            RETURNING {_LOAN_COLUMNS}
            """,
            (
                loan.loan_id,
                loan.borrower_id,
                loan.interest_rate_id,
                loan.principal_amount,
                LoanType(loan.loan_type).value,
                loan.start_date,
                loan.end_date,
                loan.term_months,
                loan.interest_rate_snapshot,
                loan.current_balance,
                LoanStatus(loan.status).value,
                loan.created_at,
            ),
        )
        return _loan_from_row(row)

    def list_loans(self, borrower_id: str | None = None) -> list[Loan]:
        if borrower_id is None:
            rows = self._fetch_all(f"SELECT {_LOAN_COLUMNS} FROM loans ORDER BY created_at DESC")
        else:
            rows = self._fetch_all(
                f"SELECT {_LOAN_COLUMNS} FROM loans WHERE borrower_id = %s ORDER BY created_at DESC",
                (borrower_id,),
            )
        return [_loan_from_row(r) for r in rows]

    # Interest rates
    def find_rate_by_id(self, rate_id: str) -> InterestRate | None:
        row = self._fetch_one("SELECT * FROM interest_rates WHERE rate_id = %s", (rate_id,))
        return InterestRate(**row) if row else None

    def save_rate(self, rate: InterestRate) -> InterestRate:
        row = self._fetch_one(
            """
            INSERT INTO interest_rates (rate_id, rate_percent, is_active, created_at, updated_at)
            VALUES (%s, %s, %s, COALESCE(%s, now()), now())
            ON CONFLICT (rate_id) DO UPDATE SET
                rate_percent = EXCLUDED.rate_percent,
                is_active = EXCLUDED.is_active,
                updated_at = now()
            RETURNING *
            """,
            (rate.rate_id, rate.rate_percent, rate.is_active, rate.created_at),
        )
        return InterestRate(**row)

    def list_rates(self, active_only: bool = False) -> list[InterestRate]:
        query = "SELECT * FROM interest_rates"
        if active_only:
            query += " WHERE is_active"
        rows = self._fetch_all(query + " ORDER BY rate_percent")
        return [InterestRate(**r) for r in rows]

    # Borrowers
    def find_borrower_by_id(self, borrower_id: str) -> Borrower | None:
        row = self._fetch_one("SELECT * FROM borrowers WHERE borrower_id = %s", (borrower_id,))
        return Borrower(**row) if row else None

    def save_borrower(self, borrower: Borrower) -> Borrower:
        row = self._fetch_one(
            """
            INSERT INTO borrowers (
                borrower_id, full_name, phone, email, address, national_id, created_at, updated_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, now()), now())
            ON CONFLICT (borrower_id) DO UPDATE SET
                full_name = EXCLUDED.full_name,
                phone = EXCLUDED.phone,
                email = EXCLUDED.email,
                address = EXCLUDED.address,
                national_id = EXCLUDED.national_id,
                updated_at = now()
            RETURNING *
            """,
            (
                borrower.borrower_id,
                borrower.full_name,
                borrower.phone,
                borrower.email,
                borrower.address,
                borrower.national_id,
                borrower.created_at,
            ),
        )
        return Borrower(**row)

    def search_borrowers(self, name: str) -> list[Borrower]:
        rows = self._fetch_all(
            "SELECT * FROM borrowers WHERE full_name ILIKE %s ORDER BY full_name",
            (f"%{name}%",),
        )
        return [Borrower(**r) for r in rows]

    # Ledger
    def insert_transaction(self, transaction: Transaction) -> Transaction:
        row = self._fetch_one(
            f"""
            INSERT INTO transactions ({_TRANSACTION_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, now()))
            RETURNING {_TRANSACTION_COLUMNS}
            """,
            (
                transaction.transaction_id,
                transaction.loan_id,
                transaction.borrower_id,
                transaction.payment_date,
                TransactionType(transaction.transaction_type).value,
                transaction.amount_paid,
                transaction.remaining_balance,
                transaction.payment_term,
                transaction.method,
                transaction.note,
                transaction.created_at,
            ),
        )
        return _transaction_from_row(row)

    def list_transactions(self, loan_id: str | None = None) -> list[Transaction]:
        if loan_id is None:
            rows = self._fetch_all(
                f"SELECT {_TRANSACTION_COLUMNS} FROM transactions ORDER BY created_at"
            )
        else:
            rows = self._fetch_all(
                f"SELECT {_TRANSACTION_COLUMNS} FROM transactions "
                "WHERE loan_id = %s ORDER BY created_at",
                (loan_id,),
            )
        return [_transaction_from_row(r) for r in rows]


def _loan_from_row(row: dict[str, Any]) -> Loan:
    snapshot = row["interest_rate_snapshot"]
    return Loan(
        loan_id=row["loan_id"],
        borrower_id=row["borrower_id"],
        interest_rate_id=row["interest_rate_id"],
        principal_amount=Decimal(row["principal_amount"]),
        loan_type=LoanType(row["loan_type"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        term_months=row["term_months"],
        interest_rate_snapshot=Decimal(snapshot) if snapshot is not None else None,
        current_balance=Decimal(row["current_balance"]),
        status=LoanStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _transaction_from_row(row: dict[str, Any]) -> Transaction:
    return Transaction(
        transaction_id=row["transaction_id"],
        loan_id=row["loan_id"],
        borrower_id=row["borrower_id"],
        payment_date=row["payment_date"],
        transaction_type=TransactionType(row["transaction_type"]),
        amount_paid=Decimal(row["amount_paid"]),
        remaining_balance=Decimal(row["remaining_balance"]),
        payment_term=row["payment_term"],
        method=row["method"],
        note=row["note"],
        created_at=row["created_at"],
    )
