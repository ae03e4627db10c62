#!/usr/bin/env python3
"""Seed a ledger store with demo borrowers, rates, loans and repayments.

By default the data is generated in memory and exported as JSON; with
``--postgres`` it is written to the database configured by ``POSTGRES_*``.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import LoanLedgerError
from loan_ledger.generators import PortfolioSeeder
from loan_ledger.logging import setup_logging
from loan_ledger.services import PortfolioReport
from loan_ledger.sinks import JsonFileSink, to_dict
from loan_ledger.store import InMemoryLedgerStore, PostgresLedgerStore

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the loan ledger with demo data")
    parser.add_argument(
        "--borrowers",
        type=int,
        default=33,
        help="Number of borrowers to generate, one loan each (default: 33)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED env var)",
    )
    parser.add_argument(
        "--postgres",
        action="store_true",
        help="Write to PostgreSQL instead of an in-memory store",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the JSON export (default: OUTPUT_DIR env var)",
    )
    args = parser.parse_args()

    config = LedgerConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    if args.postgres:
        try:
            store = PostgresLedgerStore(config.postgres.connection_string)
            store.create_schema()
        except LoanLedgerError:
            logger.exception("Could not prepare the PostgreSQL store")
            return 1
    else:
        store = InMemoryLedgerStore()

    seed = args.seed if args.seed is not None else config.seed
    try:
        PortfolioSeeder(store, args.borrowers, seed=seed, policy=config.policy).run()
    except LoanLedgerError:
        logger.exception("Seeding failed")
        return 1
    finally:
        if args.postgres:
            store.close()

    if not args.postgres:
        sink = JsonFileSink(args.output_dir or config.output.json_output_dir, config.output.pretty_json)
        sink.write_batch("interest_rates", store.list_rates())
        sink.write_batch("borrowers", list(store.borrowers.values()))
        sink.write_batch("loans", store.list_loans())
        sink.write_batch("transactions", store.list_transactions())
        sink.write_batch("portfolio_summary", [to_dict(PortfolioReport(store).summary())])
        sink.close()

    logger.info("Seeding completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
