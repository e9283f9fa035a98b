# dashboard_api/flows.py
import logging
from typing import Any, Dict, List, Optional

from prefect import flow, get_run_logger, task

from . import seeding
from .config import settings
from .database import init_db, make_engine
from .filters import MatchAll
from .repository import SqlTransactionStore

logger = logging.getLogger(__name__)

@task
def fetch_seed_payload(source: str) -> Any:
    return seeding.fetch_source_payload(source, timeout=settings.SEED_REQUEST_TIMEOUT_SECONDS)

@task
def prepare_seed_records(payload: Any) -> List[Dict[str, Any]]:
    return seeding.build_seed_records(payload)

@task
def count_stored_transactions(database_url: str) -> int:
    engine = make_engine(database_url)
    try:
        init_db(engine)
        return SqlTransactionStore(engine).count(MatchAll())
    finally:
        engine.dispose()

@task
def load_seed_records(records: List[Dict[str, Any]], database_url: str) -> int:
    """
    Appends the prepared records to the 'transactions' table.

    Returns:
        int: Number of rows inserted
    """
    engine = make_engine(database_url)
    try:
        init_db(engine)
        inserted = SqlTransactionStore(engine).insert_many(records)
        logger.info("Inserted %d transactions", inserted)
        return inserted
    finally:
        engine.dispose()

@flow(name="Transaction Seed Pipeline")
def run_seed_pipeline(
    source: Optional[str] = None,
    database_url: Optional[str] = None,
    skip_if_populated: bool = True,
) -> int:
    """
    Seeds the transactions table from the product source.

    Unlike GET /seed-data, this skips seeding when the table already has rows
    unless `skip_if_populated` is turned off.
    """
    run_logger = get_run_logger()
    source = source or settings.SEED_SOURCE_URL
    database_url = database_url or settings.get_database_url()

    if skip_if_populated:
        existing = count_stored_transactions(database_url)
        if existing:
            run_logger.info("Table already holds %d transactions, skipping seed", existing)
            return 0

    payload = fetch_seed_payload(source)
    records = prepare_seed_records(payload)
    inserted = load_seed_records(records, database_url)
    run_logger.info("Seeded %d transactions from %s", inserted, source)
    return inserted
