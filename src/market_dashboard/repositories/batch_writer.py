from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.db import db

logger = setup_logger(name="BatchWriter")


def insert_in_batches(model, mappings, batch_size=StoreConfig.batch_write_limit):
    """
    Insert mappings in chunks, one commit per chunk.

    A failed chunk is rolled back on its own; chunks already committed stay.

    Returns:
        tuple: (rows written, list of error messages per failed chunk)
    """
    written = 0
    failures = []
    for start in range(0, len(mappings), batch_size):
        chunk = mappings[start:start + batch_size]
        try:
            db.session.bulk_insert_mappings(model, chunk)
            db.session.commit()
            written += len(chunk)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Batch insert into {model.__tablename__} failed at offset {start}: {e}")
            failures.append(f"Rows {start + 1}-{start + len(chunk)}: {e}")
    logger.info(f"Inserted {written}/{len(mappings)} rows into {model.__tablename__}")
    return written, failures
